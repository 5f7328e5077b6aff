import logging
import os
import sys
from typing import Any

import structlog
from rich.console import Console

# Central console for rich output
console = Console()


class RichConsoleRenderer:
    """
    A structlog renderer that prints events through rich.Console.
    Events are rendered as key=value pairs, styled by log level or by an
    optional '_style' key in the event dict.
    """

    def __init__(self, console: Console | None = None):
        self._console = console or Console(stderr=True)
        self._level_styles = {
            'debug': 'dim',
            'info': 'green',
            'warning': 'yellow',
            'error': 'bold red',
            'critical': 'bold magenta',
        }

    def __call__(self, logger, name, event_dict):
        custom_style = event_dict.pop('_style', None)

        event = event_dict.pop('event', '')
        log_level = event_dict.pop('level', 'info')
        logger_name = event_dict.pop('logger', 'root')
        timestamp = event_dict.pop('timestamp', '')
        exception = event_dict.pop('exception', None)
        exc_info = event_dict.pop('exc_info', None)

        parts = []
        if timestamp:
            parts.append(f"[dim]{timestamp}[/dim]")
        if logger_name:
            parts.append(f"[bold]{logger_name}[/bold]")

        level_style = self._level_styles.get(log_level, 'white')
        parts.append(f"[{level_style}]{log_level:<8}[/{level_style}]")
        parts.append(event)

        for key, value in event_dict.items():
            parts.append(f"[cyan]{key}[/cyan]=[green]{value!r}[/green]")

        final_msg = ' '.join(parts)
        if exception:
            final_msg += f"\n[red]{exception}[/red]"
        elif exc_info:
            final_msg += f"\n[red]{exc_info}[/red]"

        self._console.print(final_msg, style=custom_style, highlight=False)

        # Already printed; keep the stdlib logger from emitting a blank line
        raise structlog.DropEvent


def drop_style_processor(logger, method_name, event_dict):
    """Remove the internal '_style' key so it never leaks into JSON logs."""
    event_dict.pop('_style', None)
    return event_dict


def setup_logging(level: str = 'INFO') -> None:
    """
    Configure structured logging for the application.
    ENV=production switches to JSON lines; otherwise events go to a rich console.
    """
    logging.basicConfig(format='%(message)s', stream=sys.stderr, level=level)

    shared_processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt='iso'),
        structlog.processors.UnicodeDecoder(),
    ]

    if os.getenv('ENV') == 'production':
        processors = shared_processors + [
            drop_style_processor,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors = shared_processors + [
            structlog.processors.format_exc_info,
            RichConsoleRenderer(),
        ]

    structlog.configure(
        processors=processors,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
