"""Command-line interface for template-mailer.

This module provides a CLI to send a template-rendered email using SMTP
settings from a config file or the environment, to preview a template, and
to check the SMTP configuration.

Usage:
    template-mailer send --to user@example.com --subject "Hello" \\
        --data name=Ana --attach ./report.pdf
    template-mailer render --template welcome.html --data name=Ana
    template-mailer check-config

Example:
    $ export SMTP_HOST=smtp.example.com SMTP_PORT=587
    $ export SMTP_USER=mailer@example.com SMTP_PASS=secret
    $ template-mailer send --to someone@example.com --subject "Test" \\
        --data message="Sent from the command line"
"""

from __future__ import annotations

import asyncio
import functools
import sys
from pathlib import Path
from typing import Any, Optional

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from template_mailer.config_loader import MailerSettings, load_settings
from template_mailer.dispatcher import EmailDispatcher
from template_mailer.errors import MailerError
from template_mailer.logger import configure_logging
from template_mailer.models import TransportConfig
from template_mailer.templates import DEFAULT_TEMPLATE_PATH, TemplateRenderer, read_template
from template_mailer.transport import SmtpTransport

console = Console()
err_console = Console(stderr=True)


def run_async(coro):
    """Run an async coroutine synchronously."""
    return asyncio.run(coro)


def print_error(message: str) -> None:
    """Print an error message to stderr."""
    err_console.print(f"[red]Error:[/red] {escape(message)}")


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[green]✓[/green] {message}")


def parse_data(pairs: tuple[str, ...]) -> dict[str, Any]:
    """Turn ``KEY=VALUE`` options into a template data mapping."""
    data: dict[str, Any] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key.strip():
            raise click.BadParameter(f"expected KEY=VALUE, got '{pair}'", param_hint="--data")
        data[key.strip()] = value
    return data


def load_settings_or_exit(config_path: Optional[str]) -> MailerSettings:
    """Load settings, exiting with an error message when a value cannot be parsed."""
    try:
        return load_settings(config_path)
    except ValueError as exc:
        print_error(f"Invalid settings: {exc}")
        sys.exit(1)


def build_dispatcher(settings: MailerSettings) -> EmailDispatcher:
    """Create a dispatcher configured from the loaded settings."""
    dispatcher = EmailDispatcher(
        default_template_path=settings.default_template,
        transport_factory=functools.partial(SmtpTransport, timeout=settings.smtp_timeout),
    )
    dispatcher.configure(settings.transport_config())
    return dispatcher


@click.group()
@click.version_option(package_name="template-mailer")
def main() -> None:
    """template-mailer: send template-rendered emails over SMTP."""


@main.command("send")
@click.option("--to", "to", envvar="EMAIL_TO", help="Recipient(s), comma-separated.")
@click.option("--subject", envvar="EMAIL_SUBJECT", help="Email subject.")
@click.option("--template", "template", type=click.Path(dir_okay=False), default=None,
              help="Template file (default: configured or built-in template).")
@click.option("--data", "data", multiple=True, help="Template value as KEY=VALUE (repeatable).")
@click.option("--attach", "attach", multiple=True, type=click.Path(exists=True, dir_okay=False),
              help="File to attach (repeatable).")
@click.option("--config", "config_path", type=click.Path(dir_okay=False), default=None,
              help="Path to config.ini.")
def send_command(
    to: Optional[str],
    subject: Optional[str],
    template: Optional[str],
    data: tuple[str, ...],
    attach: tuple[str, ...],
    config_path: Optional[str],
) -> None:
    """Send one email rendered from a template."""
    settings = load_settings_or_exit(config_path)
    configure_logging(settings.log_level)

    missing = settings.missing_smtp_fields()
    if missing:
        print_error(f"Missing SMTP settings: {', '.join(missing)}")
        sys.exit(1)
    if not to or not subject:
        print_error("Both --to and --subject are required (or EMAIL_TO / EMAIL_SUBJECT)")
        sys.exit(1)

    template_data = parse_data(data)
    email = {
        "to": to,
        "subject": subject,
        # Replaced by the rendered template.
        "html": f"<p>{subject}</p>",
        "data": {"subject": subject, **template_data},
        "attachments": [{"filename": Path(path).name, "path": str(Path(path).resolve())} for path in attach],
    }

    console.print(f"Sending to [bold]{to}[/bold] via {settings.smtp_host}:{settings.smtp_port}")
    try:
        dispatcher = build_dispatcher(settings)
        run_async(dispatcher.send(email, template))
    except MailerError as exc:
        print_error(str(exc))
        sys.exit(1)
    print_success(f"Email sent to {to}")


@main.command("render")
@click.option("--template", "template", type=click.Path(dir_okay=False), default=None,
              help="Template file (default: built-in template).")
@click.option("--data", "data", multiple=True, help="Template value as KEY=VALUE (repeatable).")
def render_command(template: Optional[str], data: tuple[str, ...]) -> None:
    """Print a rendered template without sending anything."""
    path = template or str(DEFAULT_TEMPLATE_PATH)
    try:
        text = run_async(read_template(path))
        rendered = TemplateRenderer().render(text, parse_data(data))
    except MailerError as exc:
        print_error(str(exc))
        sys.exit(1)
    click.echo(rendered)


@main.command("check-config")
@click.option("--config", "config_path", type=click.Path(dir_okay=False), default=None,
              help="Path to config.ini.")
def check_config_command(config_path: Optional[str]) -> None:
    """Show the resolved SMTP settings and whether they are valid."""
    settings = load_settings_or_exit(config_path)
    config = TransportConfig.create(settings.transport_config())

    table = Table(title="SMTP settings")
    table.add_column("Setting", style="cyan")
    table.add_column("Value")
    table.add_row("host", settings.smtp_host or "-")
    table.add_row("port", str(settings.smtp_port))
    table.add_row("user", settings.smtp_user or "-")
    table.add_row("password", "****" if settings.smtp_password else "-")
    table.add_row("secure", "yes" if config.secure else "no")
    table.add_row("template", settings.default_template or str(DEFAULT_TEMPLATE_PATH))
    console.print(table)

    if not config.is_valid():
        print_error("SMTP configuration is invalid")
        sys.exit(1)
    print_success("SMTP configuration is valid")


if __name__ == "__main__":
    main()
