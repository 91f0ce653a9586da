from __future__ import annotations

from typing import Any, Dict, Iterable, Optional

import typer

_BALANCE_COLORS = {
    "corrosive": typer.colors.RED,
    "scale_forming": typer.colors.YELLOW,
    "balanced": typer.colors.GREEN,
}


def echo_heading(text: str) -> None:
    typer.secho(text, bold=True)


def echo_key_values(pairs: Iterable[tuple[str, Any]]) -> None:
    for key, value in pairs:
        typer.echo(f"{key}: {value}")


def _format_index(value: Optional[float]) -> str:
    return "indeterminate" if value is None else f"{value:.2f}"


def echo_balance(balance: Optional[str]) -> None:
    if balance is None:
        typer.echo("balance: -")
        return
    typer.secho(f"balance: {balance}", fg=_BALANCE_COLORS.get(balance))


def render_evaluation(payload: Dict[str, Any]) -> None:
    saturation = payload.get("saturation") or {}
    dosage = payload.get("dosage") or {}

    echo_heading("Water Balance")
    typer.echo(f"saturation_index: {_format_index(saturation.get('saturation_index'))}")
    echo_balance(saturation.get("balance"))

    typer.echo()
    render_dosage(dosage)


def render_dosage(dosage: Dict[str, Any]) -> None:
    echo_heading("Treatment")
    bicarb = dosage.get("bicarb_cups") or 0
    calcium = dosage.get("calcium_cups") or 0
    if not bicarb and not calcium:
        typer.echo("No treatment needed.")
        return
    if bicarb:
        typer.echo(f"Add {bicarb:.2f} cups of sodium bicarbonate")
    if calcium:
        typer.echo(f"Add {calcium:.2f} cups of calcium chloride")


def render_plan(payload: Dict[str, Any]) -> None:
    echo_heading("Treatment Plan")
    echo_key_values(
        [
            ("pool_id", payload.get("pool_id")),
            ("read_date", payload.get("read_date")),
            ("alkalinity", payload.get("alkalinity")),
            ("calcium_hardness", payload.get("calcium_hardness")),
            ("saturation_index", _format_index(payload.get("saturation_index"))),
        ]
    )
    echo_balance(payload.get("balance"))
    typer.echo()
    render_dosage(payload)


def render_weekly_report(payload: Dict[str, Any]) -> None:
    echo_heading("Weekly Reads")
    reads = payload.get("reads") or []
    if not reads:
        typer.echo("No weekly reads recorded.")
        return
    for read in reads:
        typer.echo(
            f"  - {read.get('read_date')} pool={read.get('pool_id')} "
            f"alk={read.get('alkalinity')} ca={read.get('calcium_hardness')} "
            f"tds={read.get('tds')} lsi={_format_index(read.get('saturation_index'))} "
            f"balance={read.get('balance') or '-'}"
        )
