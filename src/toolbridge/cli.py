"""toolbridge CLI entrypoint."""

from __future__ import annotations

import logging

import click

from toolbridge import __version__


@click.group()
@click.version_option(version=__version__, prog_name="toolbridge")
@click.option("--verbose", "-v", is_flag=True, help="Log transport activity to stderr.")
@click.option("--telemetry", is_flag=True, help="Export tracing spans to the console.")
@click.option(
    "--otlp-endpoint",
    envvar="TOOLBRIDGE_OTLP_ENDPOINT",
    help="With --telemetry, also export spans to this OTLP/gRPC endpoint.",
)
def main(verbose: bool, telemetry: bool, otlp_endpoint: str | None) -> None:
    """toolbridge — talk to MCP tool servers over stdio."""
    if verbose:
        from rich.logging import RichHandler

        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(show_path=False)],
        )
    if telemetry:
        from toolbridge.utils.telemetry import configure_telemetry

        try:
            configure_telemetry(otlp_endpoint=otlp_endpoint)
        except ImportError as exc:
            raise click.ClickException(str(exc)) from exc


# Register subcommands
from toolbridge.cli_commands import register_commands  # noqa: E402

register_commands(main)

if __name__ == "__main__":
    main()
