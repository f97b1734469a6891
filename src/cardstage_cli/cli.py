from __future__ import annotations

import json
import logging
import math
from typing import List, Optional, Tuple

import typer

from cardstage_cli.config import CardstageConfig, load_config, save_config
from cardstage_cli.dataset import DatasetError, Person, load_people
from cardstage_cli.helptext import HELP_TEXT
from cardstage_cli.logging_config import setup_logging
from cardstage_cli.parsing import format_pose_line, parse_scheme_list
from cardstage_core.errors import MissingTargetError, UnknownLayoutError, capacity_warning
from cardstage_core.frames import ManualClock, run_until_idle
from cardstage_core.layouts import LAYOUT_NAMES, generate_layout, layout_capacity, normalize_scheme
from cardstage_core.stage import Stage

app = typer.Typer(no_args_is_help=True)
config_app = typer.Typer(no_args_is_help=True)
app.add_typer(config_app, name="config")

log = logging.getLogger(__name__)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug output to stderr."),
    log_file: Optional[str] = typer.Option(None, "--log-file", help="Also append log output to this file."),
) -> None:
    """Compute 3D card layouts and animate cards between them."""
    setup_logging(logging.DEBUG if verbose else logging.WARNING, log_file)


def _require_scheme(scheme: str) -> str:
    try:
        return normalize_scheme(scheme)
    except UnknownLayoutError as e:
        raise typer.BadParameter(str(e)) from e


def _resolve_cards(count: Optional[int], csv_source: Optional[str]) -> Tuple[int, Optional[List[Person]]]:
    if (count is None) == (csv_source is None):
        typer.echo("Specify exactly one of --count or --csv.", err=True)
        raise typer.Exit(code=2)

    if count is not None:
        if count < 0:
            raise typer.BadParameter("--count must be >= 0")
        return count, None

    try:
        people = load_people(csv_source or "")
    except DatasetError as e:
        typer.echo(f"Could not load people: {e}", err=True)
        raise typer.Exit(code=1)
    return len(people), people


def _warn_capacity(scheme: str, count: int) -> None:
    warning = capacity_warning(scheme, count, layout_capacity(scheme))
    if warning is not None:
        typer.echo(f"warning: {warning}", err=True)


def _max_residual(stage: Stage, scheme: str) -> float:
    """Largest distance between a card and its target (cards without a target ignored)."""
    worst = 0.0
    for card, target in zip(stage.cards, stage.targets(scheme)):
        worst = max(worst, (card.position - target.position).length())
    return worst


@app.command()
def help() -> None:
    """Show the extended help / usage guide."""
    typer.echo(HELP_TEXT.strip())


@app.command()
def schemes() -> None:
    """List layouts with their capacity and configured transition duration."""
    cfg = load_config()
    for name in LAYOUT_NAMES:
        cap = layout_capacity(name)
        cap_s = str(cap) if cap is not None else "unbounded"
        typer.echo(f"{name:9} capacity={cap_s:9} duration={cfg.durations_ms[name]:.0f}ms")


@app.command()
def layout(
    scheme: str = typer.Argument(..., help=f"One of: {', '.join(LAYOUT_NAMES)}."),
    count: Optional[int] = typer.Option(None, "--count", "-n", help="Number of cards."),
    csv_source: Optional[str] = typer.Option(None, "--csv", help="CSV path or http(s) URL; one card per named row."),
    json_out: bool = typer.Option(False, "--json", help="Print one JSON object per target."),
    limit: int = typer.Option(0, "--limit", help="Max targets to print (0 = all)."),
) -> None:
    """Print the target poses of a layout.

    Cards beyond a layout's capacity get no target; they are reported on
    stderr and simply keep their pose when animating.
    """
    name = _require_scheme(scheme)
    n, _people = _resolve_cards(count, csv_source)
    _warn_capacity(name, n)

    targets = generate_layout(name, n)
    shown = targets[:limit] if limit > 0 else targets

    if json_out:
        # Machine-friendly: print exactly the targets, nothing else.
        for i, p in enumerate(shown):
            typer.echo(json.dumps({"index": i, **p.to_dict()}, separators=(",", ":")))
        return

    typer.echo(f"layout: {name} cards={n} targets={len(targets)}")
    for i, p in enumerate(shown):
        typer.echo(format_pose_line(i, p))


@app.command()
def pose(
    scheme: str = typer.Argument(..., help=f"One of: {', '.join(LAYOUT_NAMES)}."),
    index: int = typer.Argument(..., help="Card index (0-based)."),
    count: Optional[int] = typer.Option(None, "--count", "-n", help="Number of cards."),
    csv_source: Optional[str] = typer.Option(None, "--csv", help="CSV path or http(s) URL."),
) -> None:
    """Show the target pose of a single card."""
    name = _require_scheme(scheme)
    n, people = _resolve_cards(count, csv_source)
    stage = Stage(n)

    try:
        target = stage.target_pose(name, index)
    except MissingTargetError as e:
        typer.echo(f"{e}; the card stays put.", err=True)
        raise typer.Exit(code=1)

    if people is not None and index < len(people):
        typer.echo(f"card: {people[index].name}")
    typer.echo(format_pose_line(index, target))


@app.command()
def animate(
    layouts: List[str] = typer.Argument(..., help="Layouts to switch through, in order."),
    count: Optional[int] = typer.Option(None, "--count", "-n", help="Number of cards."),
    csv_source: Optional[str] = typer.Option(None, "--csv", help="CSV path or http(s) URL."),
    frame_ms: Optional[float] = typer.Option(None, "--frame-ms", help="Frame interval (default from config)."),
    duration: Optional[float] = typer.Option(None, "--duration", help="Override every transition duration (ms)."),
    interrupt_at: Optional[float] = typer.Option(
        None,
        "--interrupt-at",
        help="Switch to the next layout once this fraction (0..1) of a transition has elapsed.",
    ),
    seed: Optional[int] = typer.Option(None, "--seed", help="Seed for the scattered start poses."),
) -> None:
    """Run layout switches headlessly on a simulated frame clock.

    Prints, per switch: how many cards moved, frames ticked, simulated time,
    and the largest remaining distance to the targets.
    """
    try:
        names = parse_scheme_list(layouts)
    except ValueError as e:
        raise typer.BadParameter(str(e)) from e
    if interrupt_at is not None and not (0.0 < interrupt_at < 1.0):
        raise typer.BadParameter("--interrupt-at must be between 0 and 1 (exclusive)")
    if duration is not None and not (math.isfinite(duration) and duration >= 0):
        raise typer.BadParameter("--duration must be a finite number >= 0")

    n, _people = _resolve_cards(count, csv_source)
    cfg = load_config()
    fm = float(frame_ms) if frame_ms is not None else cfg.frame_ms
    if not (math.isfinite(fm) and fm > 0):
        raise typer.BadParameter("--frame-ms must be a finite number > 0")

    clock = ManualClock()
    stage = Stage(
        n,
        clock=clock,
        durations=cfg.durations_ms,
        seed=seed if seed is not None else cfg.seed,
        scatter_extent=cfg.scatter_extent,
    )

    for pos, name in enumerate(names):
        _warn_capacity(name, n)
        moving = stage.switch(name, duration=duration)
        ms = stage.duration_for(name) if duration is None else duration
        last = pos == len(names) - 1

        if interrupt_at is not None and not last:
            stop_at = clock() + ms * interrupt_at
            frames = 0
            while stage.is_animating() and clock() + fm <= stop_at:
                clock.advance(fm)
                stage.tick()
                frames += 1
            status = "interrupted"
        else:
            frames = run_until_idle(stage.engine, clock, frame_ms=fm)
            status = "settled"

        typer.echo(
            f"{name}: moved={moving} stay_put={n - moving} frames={frames} "
            f"t={clock():.0f}ms {status} max_residual={_max_residual(stage, name):.3g} "
            f"active={stage.engine.active_count()}"
        )


@app.command()
def view(
    count: Optional[int] = typer.Option(None, "--count", "-n", help="Number of cards."),
    csv_source: Optional[str] = typer.Option(None, "--csv", help="CSV path or http(s) URL."),
) -> None:
    """Open the 3D visualizer (tkinter + matplotlib) with one button per layout."""
    n, people = _resolve_cards(count, csv_source)
    cfg = load_config()

    try:
        from cardstage_cli.visualizer.app import run_app
    except ImportError as e:
        typer.echo(f"The visualizer needs tkinter and matplotlib: {e}", err=True)
        raise typer.Exit(code=1)

    raise typer.Exit(code=run_app(count=n, cfg=cfg, people=people))


@config_app.command("show")
def config_show() -> None:
    """Print the effective config as JSON."""
    cfg = load_config()
    typer.echo(json.dumps(cfg.to_dict(), indent=2, sort_keys=True))


@config_app.command("duration")
def config_duration(
    scheme: str = typer.Argument(..., help=f"One of: {', '.join(LAYOUT_NAMES)}."),
    ms: float = typer.Argument(..., help="Transition duration in milliseconds."),
) -> None:
    """Set the default transition duration of a layout."""
    name = _require_scheme(scheme)
    if not (math.isfinite(ms) and ms >= 0):
        raise typer.BadParameter("duration must be a finite number >= 0")
    cfg = load_config()
    cfg.durations_ms[name] = float(ms)
    save_config(cfg)
    typer.echo(f"{name}: duration={ms:.0f}ms")


@config_app.command("reset")
def config_reset() -> None:
    """Restore the default config."""
    save_config(CardstageConfig.default())
    typer.echo("config reset.")


if __name__ == "__main__":
    app()
