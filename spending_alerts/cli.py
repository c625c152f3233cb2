#!/usr/bin/env python3
"""
Spending Alerts CLI - run the unusual spending check from the command line.

Usage:
    spending-alerts check [CUSTOMER_ID]      - Check one customer and email them if needed
    spending-alerts version                  - Show version

Options:
    --config PATH                            - Configuration file (default: config.yaml)
    --log-level LEVEL                        - Override the configured log level
    --json                                   - Output in JSON format for scripting
"""
import asyncio
import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import aiohttp
import click
from rich import box
from rich.console import Console
from rich.panel import Panel

from . import __version__
from .application import Application
from .config import DEFAULT_CONFIG_PATH, load_config
from .errors import AdapterError, ConfigError, SpendingAlertsError

console = Console()
error_console = Console(stderr=True)

LOG_DIR = Path("/var/log/spending-alerts")

# Failures reported as a clean error message and exit code 1
RUN_ERRORS = (SpendingAlertsError, aiohttp.ClientError, asyncio.TimeoutError, OSError)


def setup_logging(level: str = "INFO"):
    """Configure logging for the CLI."""
    log_level = getattr(logging, level.upper(), logging.INFO)

    formatter = logging.Formatter(
        '%(asctime)s | %(name)-25s | %(levelname)-8s | %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    handlers = []

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    console_handler.setLevel(log_level)
    handlers.append(console_handler)

    # File handler (optional)
    if LOG_DIR.exists():
        file_handler = logging.FileHandler(LOG_DIR / "spending-alerts.log")
        file_handler.setFormatter(formatter)
        file_handler.setLevel(log_level)
        handlers.append(file_handler)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    # Replace handlers from a previous call instead of stacking them
    for handler in list(root_logger.handlers):
        if getattr(handler, "_spending_alerts", False):
            root_logger.removeHandler(handler)
    for handler in handlers:
        handler._spending_alerts = True
        root_logger.addHandler(handler)

    # Reduce noise from libraries
    logging.getLogger("aiohttp").setLevel(logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.WARNING)


def output_json(data: Dict[str, Any]) -> None:
    """Output data as JSON."""
    click.echo(json.dumps(data, indent=2, default=str))


# =============================================================================
# CLI GROUP
# =============================================================================

@click.group()
@click.option('--config', 'config_path', default=DEFAULT_CONFIG_PATH, show_default=True,
              type=click.Path(dir_okay=False), help='Path to the YAML configuration file')
@click.option('--log-level', default=None, help='Override the configured log level')
@click.option('--json', 'json_output', is_flag=True, help='Output in JSON format')
@click.pass_context
def cli(ctx: click.Context, config_path: str, log_level: Optional[str], json_output: bool) -> None:
    """Spending Alerts - notify customers about unusually high card spending."""
    ctx.ensure_object(dict)
    ctx.obj['config_path'] = config_path
    ctx.obj['log_level'] = log_level
    ctx.obj['json'] = json_output


# =============================================================================
# CHECK COMMAND
# =============================================================================

@cli.command()
@click.argument('customer_id', required=False)
@click.pass_context
def check(ctx: click.Context, customer_id: Optional[str]) -> None:
    """Compare this month's spending with last month's and notify the customer."""
    json_output = ctx.obj.get('json', False)

    try:
        config = load_config(ctx.obj['config_path'])
        setup_logging(ctx.obj.get('log_level') or config.log_level)

        customer_id = customer_id or config.customer_id
        if not customer_id:
            raise ConfigError("No customer id given on the command line or in the config file")

        application = Application.create(config)
        message = asyncio.run(application.trigger_unusual_spending_email(customer_id))

    except RUN_ERRORS as e:
        logging.getLogger("SpendingAlerts.CLI").error(f"Check failed: {e}")
        if json_output:
            error_info = e.to_dict() if isinstance(e, AdapterError) else {"error": str(e)}
            output_json({"customer_id": customer_id, **error_info})
        else:
            error_console.print(f"[bold red]ERROR:[/bold red] {e}")
        ctx.exit(1)

    result = {
        "customer_id": customer_id,
        "notified": message is not None,
        "subject": message.subject if message else None,
    }

    if json_output:
        output_json(result)
        return

    if message:
        content = f"[bold]Customer:[/bold] {customer_id}\n[bold]Subject:[/bold] {message.subject}"
        style = "yellow"
    else:
        content = f"[bold]Customer:[/bold] {customer_id}\n[dim]No unusual spending detected.[/dim]"
        style = "green"

    console.print(Panel(
        content,
        title="[bold blue]Spending Check[/bold blue]",
        border_style=style,
        box=box.ROUNDED,
    ))


# =============================================================================
# VERSION COMMAND
# =============================================================================

@cli.command()
@click.pass_context
def version(ctx: click.Context) -> None:
    """Show Spending Alerts version."""
    version_info = {
        "name": "Spending Alerts",
        "version": __version__,
    }

    if ctx.obj.get('json', False):
        output_json(version_info)
        return

    console.print(f"[bold]{version_info['name']}[/bold] {version_info['version']}")


def main():
    """Main entry point for the Spending Alerts CLI."""
    cli(obj={})


if __name__ == '__main__':
    main()
