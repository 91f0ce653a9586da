from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import typer

from cli.client import ApiClient
from cli.config import CLIConfig, load_config
from cli.render import render_dosage, render_evaluation, render_plan, render_weekly_report


@dataclass
class CLIState:
    config: CLIConfig
    client: ApiClient


app = typer.Typer(
    help="Utilities for interacting with the pool balance service.",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def _get_state(ctx: typer.Context) -> CLIState:
    state = ctx.obj
    if not isinstance(state, CLIState):
        raise typer.Exit(code=1)
    return state


@app.callback()
def main(
    ctx: typer.Context,
    base_url: Optional[str] = typer.Option(
        None,
        "--base-url",
        "-b",
        help="Service base URL (defaults to API_BASE_URL env or http://localhost:8000).",
    ),
    timeout: Optional[float] = typer.Option(
        None,
        "--timeout",
        help="Seconds to wait for each request.",
    ),
) -> None:
    """Entry point for the CLI."""
    config = load_config(base_url=base_url, timeout=timeout)
    client = ApiClient(config)
    ctx.obj = CLIState(config=config, client=client)
    ctx.call_on_close(client.close)


@app.command("lsi")
def lsi_command(
    ctx: typer.Context,
    ph: Optional[float] = typer.Option(None, "--ph", min=0, help="pH reading."),
    temperature: Optional[float] = typer.Option(
        None, "--temperature", "-t", help="Water temperature in degrees Fahrenheit."
    ),
    calcium: Optional[float] = typer.Option(None, "--calcium", "-c", min=0, help="Calcium hardness (ppm)."),
    alkalinity: Optional[float] = typer.Option(None, "--alkalinity", "-a", min=0, help="Total alkalinity (ppm)."),
) -> None:
    """Compute the saturation index and recommended dosage for a reading."""
    state = _get_state(ctx)
    payload = state.client.evaluate(
        {
            "ph": ph,
            "temperature_f": temperature,
            "calcium_hardness": calcium,
            "alkalinity": alkalinity,
        }
    )
    render_evaluation(payload)


@app.command("dose")
def dose_command(
    ctx: typer.Context,
    alkalinity: Optional[float] = typer.Option(None, "--alkalinity", "-a", min=0, help="Total alkalinity (ppm)."),
    calcium: Optional[float] = typer.Option(None, "--calcium", "-c", min=0, help="Calcium hardness (ppm)."),
) -> None:
    """Recommend bicarbonate and calcium chloride cups."""
    state = _get_state(ctx)
    payload = state.client.evaluate({"calcium_hardness": calcium, "alkalinity": alkalinity})
    render_dosage(payload.get("dosage") or {})


@app.command("plan")
def plan_command(
    ctx: typer.Context,
    pool_id: str = typer.Argument(..., help="Pool identifier."),
) -> None:
    """Show the treatment plan from a pool's last known weekly read."""
    state = _get_state(ctx)
    render_plan(state.client.treatment_plan(pool_id))


@app.command("report")
def report_command(
    ctx: typer.Context,
    limit: Optional[int] = typer.Option(None, "--limit", "-n", min=1, help="Number of reads to list."),
) -> None:
    """List the most recent weekly reads with their water balance."""
    state = _get_state(ctx)
    render_weekly_report(state.client.weekly_report(limit))
