from __future__ import annotations

from typing import Optional
from pathlib import Path
from datetime import datetime
import json
import os

import typer
from rich.console import Console
from rich.table import Table
import httpx


app = typer.Typer()
console = Console()
trace_console = Console(stderr=True)


def _clock(iso: str) -> str:
    try:
        return datetime.fromisoformat(iso).strftime("%a %b %d, %I:%M %p")
    except ValueError:
        return iso


def _minutes(seconds: Optional[int]) -> str:
    if seconds is None:
        return "-"
    return f"{round(seconds / 60)} min"


def render_plan(plan: dict) -> None:
    game = plan.get("game", {})
    title = f"{game.get('away_team', '?')} @ {game.get('home_team', '?')}, {game.get('venue', '')}"
    table = Table(title=title, show_header=False)
    table.add_column("What", style="bold")
    table.add_column("When")
    table.add_row("Wake up", _clock(plan["wake_up_time"]))
    table.add_row("Leave", _clock(plan["departure_time"]))
    table.add_row("Arrive", _clock(plan["arrival_time"]))
    table.add_row("Puck drop", _clock(plan["game_time"]))

    drive = _minutes(plan.get("travel_duration_seconds"))
    low, high = plan.get("travel_duration_low_seconds"), plan.get("travel_duration_high_seconds")
    if low is not None and high is not None:
        drive += f" (range {_minutes(low)} to {_minutes(high)})"
    table.add_row("Drive", drive)
    table.add_row("Distance", f"{plan.get('distance_meters', 0) * 0.000621371:.1f} mi")
    console.print(table)

    if plan.get("disclaimer"):
        console.print(plan["disclaimer"], style="yellow")
    if plan.get("maps_url"):
        console.print(f"Directions: {plan['maps_url']}", style="cyan")


@app.command()
def cli(
    home_address: str = typer.Option(..., "--home", help="Home address to leave from."),
    venue: str = typer.Argument(..., help="Venue name, e.g. 'Anaheim Ice'."),
    date: str = typer.Argument(..., help="Game date (YYYY-MM-DD)."),
    time: str = typer.Argument(..., help="Game time, 24-hour local (HH:MM)."),
    venue_address: Optional[str] = typer.Option(
        None, "--venue-address", help="Venue street address (skips venue lookup)."
    ),
    timezone: Optional[str] = typer.Option(None, "--tz", help="Timezone, e.g. PT or America/Denver."),
    prep_minutes: int = typer.Option(30, "--prep", min=0, help="Minutes needed between waking and leaving."),
    buffer_minutes: int = typer.Option(60, "--buffer", min=0, help="Minutes to be at the rink before the game."),
    home_team: str = typer.Option("Home", "--home-team"),
    away_team: str = typer.Option("Away", "--away-team"),
    output_file: Optional[Path] = typer.Option(
        None, "--output", "-o", help="Save the raw plan JSON to file."
    ),
) -> None:
    base_url = os.getenv("TRAVEL_TOOLS_URL", "http://localhost:3001")
    url = f"{base_url.rstrip('/')}/travel/plan"
    payload = {
        "game": {
            "home_team": home_team,
            "away_team": away_team,
            "date": date,
            "time": time,
            "timezone": timezone,
            "venue": venue,
        },
        "preferences": {
            "home_address": home_address,
            "prep_time_minutes": prep_minutes,
            "arrival_buffer_minutes": buffer_minutes,
        },
        "venue_address": venue_address,
        "timezone": timezone,
    }
    headers = {
        "X-API-KEY": os.getenv("TRAVEL_API_KEY", ""),
        "Content-Type": "application/json",
        "Accept": "application/json",
    }

    with console.status("Checking traffic..."):
        try:
            resp = httpx.post(url, json=payload, headers=headers, timeout=60)
        except httpx.HTTPError as e:
            trace_console.print(f"Request failed: {e}", style="bold red")
            raise typer.Exit(code=1)

    if resp.status_code == 503:
        trace_console.print(
            "Sorry, live travel times are unavailable right now. "
            "Please plan the route manually in your maps app.",
            style="bold red",
        )
        raise typer.Exit(code=1)
    if resp.status_code != 200:
        try:
            detail = resp.json().get("detail", resp.text)
        except ValueError:
            detail = resp.text
        trace_console.print(f"Error ({resp.status_code}): {detail}", style="bold red")
        raise typer.Exit(code=1)

    plan = resp.json()
    render_plan(plan)

    if output_file:
        try:
            output_file.parent.mkdir(parents=True, exist_ok=True)
            output_file.write_text(json.dumps(plan, indent=2), encoding="utf-8")
            console.print(f"\nSaved plan to {output_file}", style="green")
        except OSError as e:
            trace_console.print(f"Failed to write file: {e}", style="bold red")


if __name__ == "__main__":
    app()
