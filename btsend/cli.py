"""Typer CLI entrypoint."""

from __future__ import annotations

import logging
from pathlib import Path

import typer

from btsend.core.errors import BtsendError
from btsend.core.model import TERMINATOR, SendResult
from btsend.core.service import DEFAULT_CHANNEL, DEFAULT_TIMEOUT_S, SerialCommandService

app = typer.Typer(help="Validate, summarize, and send serial commands to Bluetooth devices")


def _build_service() -> SerialCommandService:
    service = SerialCommandService()
    for warning in getattr(service, "runtime_warnings", ()):
        typer.echo(f"Warning: {warning}", err=True)
    return service


def _parse_vars(values: list[str] | None) -> dict[str, str]:
    variables: dict[str, str] = {}
    for item in values or []:
        name, sep, value = item.partition("=")
        if not sep or not name:
            raise typer.BadParameter(f"Expected NAME=VALUE, got '{item}'", param_hint="--var")
        variables[name.lstrip("%")] = value
    return variables


def _echo_result(result: SendResult) -> None:
    typer.echo(f"Sent {result.summary.rstrip(TERMINATOR)} payload={result.payload_hex}")
    if result.response_hex:
        typer.echo(f"response={result.response_hex}")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@app.command("check")
def check(
    address: str,
    command: str | None = typer.Argument(None),
) -> None:
    """Validate an address/command pair and print the first problem, if any."""
    try:
        service = _build_service()
        issue = service.check(address, command)
        if issue is not None:
            typer.echo(f"Error: {issue.message}", err=True)
            raise typer.Exit(code=1)
        record = service.build_record(address, command)
        typer.echo(f"OK: {service.describe(record).rstrip(TERMINATOR)}")
    except BtsendError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


@app.command("summary")
def summary(address: str, command: str) -> None:
    """Print the bounded one-line summary of a record."""
    try:
        service = _build_service()
        record = service.build_record(address, command)
        typer.echo(service.describe(record).rstrip(TERMINATOR))
    except BtsendError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


@app.command("encode")
def encode_command(address: str, command: str) -> None:
    """Print the wire payload of a record as hex."""
    try:
        service = _build_service()
        record = service.build_record(address, command)
        typer.echo(service.payload(record).hex())
    except BtsendError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


@app.command("send")
def send(
    address: str,
    command: str,
    var: list[str] | None = typer.Option(None, "--var", help="Placeholder value as NAME=VALUE"),
    channel: int = typer.Option(DEFAULT_CHANNEL, "--channel", help="RFCOMM channel"),
    timeout: float = typer.Option(DEFAULT_TIMEOUT_S, "--timeout", help="Socket timeout in seconds"),
) -> None:
    """Send COMMAND followed by CR to the device at ADDRESS."""
    variables = _parse_vars(var)
    try:
        service = _build_service()
        record = service.build_record(address, command)
        result = service.fire(record, variables=variables, channel=channel, timeout_s=timeout)
        _echo_result(result)
    except BtsendError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


@app.command("tasks")
def list_tasks(
    file: Path | None = typer.Option(None, "--file", help="Task file (defaults to XDG config)"),
) -> None:
    """List tasks defined in the task file."""
    try:
        service = _build_service()
        loaded = service.load_tasks(file)
        if not loaded.tasks:
            typer.echo(f"No tasks defined in {loaded.source}")
            return

        for name, task in sorted(loaded.tasks.items()):
            typer.echo(f"{name}: {service.describe(task.record).rstrip(TERMINATOR)}")
    except BtsendError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


@app.command("run")
def run_task(
    name: str,
    file: Path | None = typer.Option(None, "--file", help="Task file (defaults to XDG config)"),
    var: list[str] | None = typer.Option(None, "--var", help="Placeholder value as NAME=VALUE"),
    channel: int = typer.Option(DEFAULT_CHANNEL, "--channel", help="RFCOMM channel"),
    timeout: float = typer.Option(DEFAULT_TIMEOUT_S, "--timeout", help="Socket timeout in seconds"),
) -> None:
    """Send the command stored under task NAME."""
    variables = _parse_vars(var)
    try:
        service = _build_service()
        task = service.task(name, file)
        result = service.fire(task.record, variables=variables, channel=channel, timeout_s=timeout)
        _echo_result(result)
    except BtsendError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


def run() -> None:
    app()


if __name__ == "__main__":
    run()
