# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Prometheus metrics for the template mailer.

Metrics exposed (all prefixed with ``tm_``):
    - ``tm_sent_total``: Counter of successfully dispatched emails.
    - ``tm_errors_total``: Counter of failed sends, labelled by error code.
"""

from prometheus_client import CollectorRegistry, Counter, generate_latest


class MailerMetrics:
    """Prometheus metrics collector for the dispatcher.

    Attributes:
        registry: The Prometheus CollectorRegistry holding all metrics.
        sent: Counter tracking successfully sent emails.
        errors: Counter tracking failed sends by reason.
    """

    def __init__(self, registry: CollectorRegistry | None = None):
        self.registry = registry or CollectorRegistry()
        self.sent = Counter(
            "tm_sent_total",
            "Total sent emails",
            registry=self.registry,
        )
        self.errors = Counter(
            "tm_errors_total",
            "Total failed sends",
            ["reason"],
            registry=self.registry,
        )

    def inc_sent(self) -> None:
        self.sent.inc()

    def inc_error(self, reason: str | None) -> None:
        self.errors.labels(reason=reason or "unknown").inc()

    def generate_latest(self) -> bytes:
        """Return the metrics in Prometheus text exposition format."""
        return generate_latest(self.registry)
