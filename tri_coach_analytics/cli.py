"""Command-line interface for the triathlon coaching analytics."""

import json
import logging
from dataclasses import asdict
from enum import Enum

import click
from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich import box

from .config import config
from .dates import format_date, format_minutes, to_date, today
from .history import HistoryError, HistorySource
from .analysis import (
    FatigueLevel,
    FormStatus,
    InvalidArgumentError,
    PeriodizationPhase,
    TrendDirection,
    aggregate_weekly_load,
    analyze_trend,
    assess_race_readiness,
    assess_recovery,
    build_plan,
    classify_form,
)

console = Console()
logger = logging.getLogger(__name__)

PHASE_COLORS = {
    PeriodizationPhase.BASE: "green",
    PeriodizationPhase.BUILD: "yellow",
    PeriodizationPhase.PEAK: "magenta",
    PeriodizationPhase.TAPER: "blue",
    PeriodizationPhase.RECOVERY: "cyan",
}

FORM_COLORS = {
    FormStatus.RACE_READY: "bold green",
    FormStatus.FRESH: "green",
    FormStatus.OPTIMAL: "blue",
    FormStatus.TIRED: "yellow",
    FormStatus.OVERTRAINED: "red",
}

FATIGUE_COLORS = {
    FatigueLevel.LOW: "green",
    FatigueLevel.MODERATE: "yellow",
    FatigueLevel.HIGH: "orange3",
    FatigueLevel.VERY_HIGH: "red",
}

TREND_ARROWS = {
    TrendDirection.IMPROVING: "[green]↑ improving[/green]",
    TrendDirection.STABLE: "[blue]→ stable[/blue]",
    TrendDirection.DECLINING: "[red]↓ declining[/red]",
}


def _json_default(value):
    if isinstance(value, Enum):
        return value.value
    return str(value)


def _to_json(value) -> str:
    return json.dumps(asdict(value), default=_json_default, indent=2)


def _parse_date(ctx, param, value):
    if value is None:
        return None
    try:
        return to_date(value)
    except ValueError as e:
        raise click.BadParameter(str(e))


def _load_fitness(path):
    try:
        return HistorySource(fitness_path=path).load_fitness()
    except HistoryError as e:
        console.print(f"[red]❌ {e}[/red]")
        raise SystemExit(1)


@click.group()
@click.option("--log-level", default=None, help="Logging level (defaults to LOG_LEVEL)")
def cli(log_level):
    """Triathlon periodization and training-load analytics."""
    logging.basicConfig(
        level=(log_level or config.LOG_LEVEL).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@cli.command()
@click.option("--weeks", type=int, default=None, help="Total plan length in weeks (4-52)")
@click.option("--json", "as_json", is_flag=True, help="Print the plan as JSON")
def plan(weeks, as_json):
    """Generate a periodized plan with weekly volume targets."""
    weeks = weeks if weeks is not None else config.DEFAULT_PLAN_WEEKS

    try:
        periodization_plan = build_plan(weeks)
    except InvalidArgumentError as e:
        console.print(f"[red]❌ {e}[/red]")
        raise SystemExit(1)

    if as_json:
        click.echo(_to_json(periodization_plan))
        return

    console.print(Panel.fit(f"📅 {weeks}-Week Periodization Plan", style="bold blue"))

    phase_table = Table(title="Phases", box=box.ROUNDED)
    phase_table.add_column("Phase", style="bold")
    phase_table.add_column("Weeks", justify="right")
    phase_table.add_column("Focus")
    phase_table.add_column("Low/Mod/High %", justify="center")

    for phase in periodization_plan.phases:
        color = PHASE_COLORS[phase.phase]
        low, moderate, high = phase.intensity_distribution
        phase_table.add_row(
            f"[{color}]{phase.phase.value.upper()}[/{color}]",
            str(phase.weeks),
            phase.focus.value.replace("_", " "),
            f"{low}/{moderate}/{high}",
        )
    console.print(phase_table)

    volume_table = Table(title="Weekly Volume", box=box.SIMPLE)
    volume_table.add_column("Week", justify="right")
    volume_table.add_column("Phase")
    volume_table.add_column("Volume", justify="right")
    volume_table.add_column("")

    for volume in periodization_plan.weekly_volumes:
        color = PHASE_COLORS[volume.phase]
        bar = "█" * int(round(volume.volume_multiplier * 20))
        volume_table.add_row(
            str(volume.week),
            f"[{color}]{volume.phase.value}[/{color}]",
            f"{volume.volume_multiplier:.2f}",
            f"[{color}]{bar}[/{color}]",
        )
    console.print(volume_table)


@cli.command()
@click.option("--activities", "activities_path", type=click.Path(), default=None, help="Activity history CSV/JSON")
@click.option("--start", callback=_parse_date, default=None, help="First date (YYYY-MM-DD)")
@click.option("--end", callback=_parse_date, default=None, help="Last date (YYYY-MM-DD)")
def loads(activities_path, start, end):
    """Show weekly training load totals."""
    try:
        activities = HistorySource(activities_path=activities_path).load_activities(start, end)
    except HistoryError as e:
        console.print(f"[red]❌ {e}[/red]")
        raise SystemExit(1)

    summaries = aggregate_weekly_load(activities)
    if not summaries:
        console.print("[yellow]⚠️  No activities in range[/yellow]")
        return

    table = Table(title="Weekly Training Load", box=box.ROUNDED)
    table.add_column("Week of")
    table.add_column("Activities", justify="right")
    table.add_column("TSS", justify="right", style="magenta")
    table.add_column("TSS/activity", justify="right")
    table.add_column("Duration", justify="right", style="green")

    for summary in summaries:
        table.add_row(
            format_date(summary.week_start),
            str(summary.activity_count),
            f"{summary.total_tss:.0f}",
            f"{summary.average_tss_per_activity:.1f}",
            format_minutes(summary.total_duration),
        )
    console.print(table)


@cli.command()
@click.option("--fitness", "fitness_path", type=click.Path(), default=None, help="Fitness history CSV/JSON")
@click.option("--window", type=click.IntRange(min=2), default=None, help="Number of most recent points to analyze (at least 2)")
def trend(fitness_path, window):
    """Show form trend over the most recent points."""
    points = _load_fitness(fitness_path)
    window = window if window is not None else config.TREND_WINDOW

    form_trend = analyze_trend(points[-window:])
    if form_trend is None:
        console.print("[yellow]⚠️  Not enough data for a trend (need at least 2 points)[/yellow]")
        return

    form = classify_form(form_trend.current_tsb)
    color = FORM_COLORS[form]
    text = f"""
[bold]Direction:[/bold] {TREND_ARROWS[form_trend.direction]}
[bold]Current TSB:[/bold] {form_trend.current_tsb:.1f} ([{color}]{form.value}[/{color}])
[bold]Average TSB:[/bold] {form_trend.average_tsb:.1f}
[bold]Δ Fitness (CTL):[/bold] {form_trend.ctl_change:+.1f}
[bold]Δ Fatigue (ATL):[/bold] {form_trend.atl_change:+.1f}
[bold]Δ Form (TSB):[/bold] {form_trend.tsb_change:+.1f}
"""
    console.print(Panel(text.strip(), title=f"📈 Form Trend (last {window} points)", border_style="blue"))


@cli.command()
@click.option("--fitness", "fitness_path", type=click.Path(), default=None, help="Fitness history CSV/JSON")
def recovery(fitness_path):
    """Assess fatigue and recovery needs."""
    points = _load_fitness(fitness_path)

    assessment = assess_recovery(points)
    if assessment is None:
        console.print("[yellow]⚠️  Not enough data for a recovery assessment (need 7 daily points)[/yellow]")
        return

    color = FATIGUE_COLORS[assessment.fatigue_level]
    text = f"""
[bold]Fatigue:[/bold] [{color}]{assessment.fatigue_level.value.replace('_', ' ').upper()}[/{color}]
[bold]Suggested recovery days:[/bold] {assessment.suggested_recovery_days}
[bold]Ramp rate (CTL/week):[/bold] {assessment.ramp_rate:+.1f}
"""
    if assessment.is_overreaching:
        text += "\n[red]⚠️  Overreaching: fitness is ramping faster than 7 CTL/week[/red]"
    console.print(Panel(text.strip(), title="🔋 Recovery", border_style=color))


@cli.command()
@click.option("--fitness", "fitness_path", type=click.Path(), default=None, help="Fitness history CSV/JSON")
@click.option("--race-date", callback=_parse_date, default=None, help="Race date (defaults to next TARGET_RACE_DATES)")
@click.option("--today", "on", callback=_parse_date, default=None, help="Reference date (YYYY-MM-DD)")
def readiness(fitness_path, race_date, on):
    """Project race-day form and readiness."""
    on = on or today()
    race_date = race_date or config.get_next_race_date(on)
    if race_date is None:
        console.print("[red]❌ No race date given and no upcoming TARGET_RACE_DATES configured[/red]")
        raise SystemExit(1)

    points = _load_fitness(fitness_path)
    result = assess_race_readiness(points, race_date, today=on)
    if result is None:
        console.print("[yellow]⚠️  No readiness projection: need 7 daily points and a future race date[/yellow]")
        return

    color = FORM_COLORS[result.current_form]
    text = f"""
[bold]Race:[/bold] {format_date(race_date)} ({result.days_until_race} days)
[bold]Current form:[/bold] [{color}]{result.current_form.value}[/{color}]
[bold]Projected race-day TSB:[/bold] {result.projected_tsb:.1f} ({classify_form(result.projected_tsb).value})
[bold]Confidence:[/bold] {result.confidence.value}

{result.recommendation}
"""
    console.print(Panel(text.strip(), title="🏁 Race Readiness", border_style=color))


@cli.command()
def status():
    """Show configuration and available history."""
    console.print(Panel.fit("ℹ️  Status", style="bold blue"))

    for label, path in (("Activities", config.activities_path()), ("Fitness", config.fitness_path())):
        if path.exists():
            console.print(f"[green]✅ {label}: {path}[/green]")
        else:
            console.print(f"[yellow]⚠️  {label}: {path} (not found)[/yellow]")

    race_dates = config.get_race_dates()
    if race_dates:
        console.print("\n[bold]Target races:[/bold]")
        for race_date in race_dates:
            console.print(f"  • {format_date(race_date)}")
    else:
        console.print("\n[yellow]⚠️  No TARGET_RACE_DATES configured[/yellow]")

    console.print(f"\nDefault plan length: {config.DEFAULT_PLAN_WEEKS} weeks")
    console.print(f"Trend window: {config.TREND_WINDOW} points")


if __name__ == "__main__":
    cli()
