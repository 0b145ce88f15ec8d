"""
tickflake CLI

Command-line interface for minting and inspecting identifiers.

Usage:
    tickflake generate --epoch 2025-01-01T00:00:00Z --machine-id 7 --count 5
    tickflake decode 123456789012345 --epoch 2025-01-01T00:00:00Z
    tickflake machine-id
"""

import json
from typing import NoReturn, Optional

import typer
from typing_extensions import Annotated

from tickflake import layout
from tickflake.generator import IdentifierGenerator
from tickflake.kernel.errors import TickflakeError
from tickflake.kernel.logging import configure_logging
from tickflake.machine import default_machine_id
from tickflake.settings import DEFAULT_EPOCH, GeneratorConfig, parse_epoch

# Logs go to stderr so stdout carries only command output
configure_logging(json_output=False, log_level="INFO")

app = typer.Typer(
    name="tickflake",
    help="tickflake - time-ordered 63-bit identifiers",
    add_completion=False,
)


def fail(message: str) -> NoReturn:
    typer.echo(f"Error: {message}", err=True)
    raise typer.Exit(1)


@app.callback()
def main(
    log_level: Annotated[
        str,
        typer.Option("--log-level", help="Logging level (DEBUG, INFO, WARNING, ERROR)"),
    ] = "INFO",
    json_logs: Annotated[
        bool,
        typer.Option("--json-logs", help="Output logs in JSON format"),
    ] = False,
) -> None:
    """Generate and decode tickflake identifiers"""
    configure_logging(json_output=json_logs, log_level=log_level)


@app.command()
def generate(
    epoch: Annotated[
        Optional[str],
        typer.Option("--epoch", help="Epoch as ISO-8601 (default: 2014-09-01T00:00:00Z)"),
    ] = None,
    machine_id: Annotated[
        Optional[int],
        typer.Option("--machine-id", help="Machine id 0-65535 (default: from private IPv4)"),
    ] = None,
    count: Annotated[
        int,
        typer.Option("--count", min=1, help="Number of identifiers to generate"),
    ] = 1,
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Print decomposed identifiers as JSON"),
    ] = False,
) -> None:
    """Generate identifiers"""
    try:
        config = GeneratorConfig.of(epoch=epoch, machine_id=machine_id)
        generator = IdentifierGenerator.create(config)
        ids = [generator.next_id() for _ in range(count)]
    except TickflakeError as exc:
        fail(str(exc))

    if json_output:
        decoded = [generator.decompose(value).model_dump(mode="json") for value in ids]
        typer.echo(json.dumps(decoded, indent=2))
        return

    for value in ids:
        typer.echo(str(value))


@app.command()
def decode(
    value: Annotated[int, typer.Argument(help="Identifier to decode")],
    epoch: Annotated[
        Optional[str],
        typer.Option("--epoch", help="Epoch of the generator that produced the id"),
    ] = None,
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Print as JSON"),
    ] = False,
) -> None:
    """Split an identifier into its fields"""
    try:
        resolved_epoch = parse_epoch(epoch) if epoch else DEFAULT_EPOCH
        decoded = layout.decompose(value, resolved_epoch)
    except TickflakeError as exc:
        fail(str(exc))

    if json_output:
        typer.echo(json.dumps(decoded.model_dump(mode="json"), indent=2))
        return

    typer.echo(f"Id:            {decoded.id}")
    typer.echo(f"Elapsed ticks: {decoded.elapsed_ticks}")
    typer.echo(f"Sequence:      {decoded.sequence}")
    typer.echo(f"Machine id:    {decoded.machine_id}")
    typer.echo(f"Timestamp:     {decoded.timestamp.isoformat()}")


@app.command("machine-id")
def machine_id_command() -> None:
    """Show the default machine id derived from this host's private IPv4 address"""
    try:
        typer.echo(str(default_machine_id()))
    except TickflakeError as exc:
        fail(str(exc))


if __name__ == "__main__":
    app()
