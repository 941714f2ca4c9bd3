"""Typer CLI entrypoint."""

from __future__ import annotations

from pathlib import Path

import typer

from hpglctl.core.errors import HpglctlError
from hpglctl.core.job_loader import load_job
from hpglctl.core.service import PlotterService

app = typer.Typer(help="Encode HP-GL jobs and send them to HP 7470A-style plotters")


def _build_service() -> PlotterService:
    service = PlotterService()
    for warning in service.load_warnings:
        typer.echo(f"Warning: {warning}", err=True)
    return service


@app.command("profiles")
def list_profiles() -> None:
    """List available plotter profiles and their serial settings."""
    try:
        service = _build_service()
        profiles = service.list_profiles()
        if not profiles:
            typer.echo("No profiles loaded")
            raise typer.Exit(code=1)

        for profile in profiles:
            serial = profile.serial
            typer.echo(f"{profile.id}: {profile.name}")
            typer.echo(
                f"  serial: {serial.baudrate} baud, {serial.bytesize} data bits, "
                f"parity {serial.parity}, {serial.stopbits} stop bits, "
                f"flow control {serial.flow_control}"
            )
    except HpglctlError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


@app.command("encode")
def encode_job(
    job: Path = typer.Argument(..., help="YAML job file"),
    profile: str | None = typer.Option(None, "--profile", help="Profile ID"),
    no_setup: bool = typer.Option(False, "--no-setup", help="Skip device-control setup frames"),
    output: Path | None = typer.Option(None, "--output", "-o", help="Write bytes to this file"),
    as_hex: bool = typer.Option(False, "--hex", help="Print the stream as hex text"),
) -> None:
    """Encode a job file to the plotter byte stream."""
    try:
        service = _build_service()
        program = load_job(job)
        data = service.render(program, profile_id=profile, include_setup=not no_setup)
    except HpglctlError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None

    if as_hex:
        data = (data.hex() + "\n").encode("ascii")
    if output is not None:
        output.write_bytes(data)
        typer.echo(f"Wrote {len(data)} bytes to {output}", err=True)
        return
    typer.echo(data, nl=False)


@app.command("plot")
def plot_job(
    job: Path = typer.Argument(..., help="YAML job file"),
    port: str = typer.Option(..., "--port", help="Serial port, e.g. /dev/ttyUSB0"),
    profile: str | None = typer.Option(None, "--profile", help="Profile ID"),
    no_setup: bool = typer.Option(False, "--no-setup", help="Skip device-control setup frames"),
) -> None:
    """Send a job file to a plotter over a serial port."""
    try:
        service = _build_service()
        program = load_job(job)
        result = service.send_program(program, port, profile_id=profile, include_setup=not no_setup)
        typer.echo(
            f"Sent {result.frames_sent} frames ({result.bytes_sent} bytes) to {result.port} "
            f"via {result.profile.id}"
        )
    except HpglctlError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


def run() -> None:
    app()


if __name__ == "__main__":
    run()
