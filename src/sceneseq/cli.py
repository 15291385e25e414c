"""CLI entry point for the scene sequencer."""

import logging
import random
import typer
from pathlib import Path
from typing import List, Optional

from . import __version__
from .config import config
from .models import Settings
from .timing import format_hms, parse_duration_ms, parse_sources

app = typer.Typer(
    name="scene-sequencer",
    help="Timed source sequencing for OBS scenes",
    no_args_is_help=True
)


def setup_logging(verbose: bool = False) -> None:
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s",
    )


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"scene-sequencer version {__version__}")
        raise typer.Exit()


def _settings_option() -> Path:
    return typer.Option(
        config.settings_path,
        "--settings",
        "-s",
        help="Path to sequencer settings YAML file",
        file_okay=True,
        dir_okay=False
    )


def _load_settings(path: Path, must_exist: bool = True) -> Settings:
    """Load settings or exit with an error message."""
    if must_exist and not path.exists():
        typer.echo(f"❌ No settings found at {path}")
        typer.echo("   Run 'scene-sequencer init' to create them")
        raise typer.Exit(1)
    try:
        return Settings.from_yaml(path)
    except Exception as e:
        typer.echo(f"❌ Error loading settings: {e}")
        raise typer.Exit(1)


def _save_settings(settings: Settings, path: Path) -> None:
    try:
        settings.to_yaml(path)
    except Exception as e:
        typer.echo(f"❌ Error saving settings: {e}")
        raise typer.Exit(1)


def _normalized(settings: Settings) -> Settings:
    for scene in settings.scenes.values():
        scene.normalize()
    return settings


@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit"
    )
) -> None:
    """Scene Sequencer - Cycle scene sources in and out of view on a timer."""
    pass


@app.command()
def parse(
    texts: List[str] = typer.Argument(
        ...,
        help="Duration texts, e.g. '90s', '1h2m', '00:00:06.000'"
    )
) -> None:
    """Show how duration texts are interpreted."""
    for text in texts:
        ms = parse_duration_ms(text)
        typer.echo(f"{text!r:>20} → {ms} ms  ({format_hms(ms)})")


@app.command()
def init(
    scenes: Optional[List[str]] = typer.Argument(
        None,
        help="Scene names (read from OBS if omitted)"
    ),
    settings_path: Path = _settings_option(),
) -> None:
    """Create or extend a settings file with default values per scene."""
    settings = _load_settings(settings_path, must_exist=False)

    names = list(scenes or [])
    if not names:
        from .services.obs import ObsSceneGraph

        try:
            config.validate_obs_required()
            graph = ObsSceneGraph()
        except Exception as e:
            typer.echo(f"❌ Could not read scenes from OBS: {e}")
            raise typer.Exit(1)
        try:
            names = graph.list_scenes()
        finally:
            graph.close()

    added = [name for name in names if name not in settings.scenes]
    settings.ensure_scenes(names)
    _save_settings(_normalized(settings), settings_path)

    typer.echo(f"✅ Settings saved: {settings_path}")
    typer.echo(f"   Scenes: {len(settings.scenes)} ({len(added)} added)")
    for name in added:
        typer.echo(f"   + {name}")


@app.command()
def status(
    settings_path: Path = _settings_option(),
) -> None:
    """Show sequencer settings."""
    settings = _load_settings(settings_path)

    typer.echo(f"📁 Settings: {settings_path}")
    typer.echo(f"   Active scene only: {'yes' if settings.only_active_scene else 'no'}")
    typer.echo(f"   Scenes: {len(settings.scenes)}")

    for name, scene in settings.scenes.items():
        status_icon = "✅" if scene.enabled else "⏸️ "
        entries = parse_sources(scene.sources_txt)
        typer.echo(f"\n{status_icon} {name}")
        typer.echo(
            f"   gap {format_hms(parse_duration_ms(scene.gap_hms))}"
            f" · cooldown {format_hms(parse_duration_ms(scene.cool_hms))}"
            f" · tick {format_hms(parse_duration_ms(scene.tick_hms))}"
            f" · chance {scene.chance_pct}%"
        )
        if not entries:
            typer.echo("   (no sources)")
        for i, entry in enumerate(entries, start=1):
            typer.echo(f"   {i}. {entry.name}  {format_hms(entry.duration_ms)}")


@app.command()
def add(
    scene: str = typer.Argument(..., help="Scene name"),
    source: str = typer.Argument(..., help="Source name inside the scene"),
    duration: Optional[str] = typer.Option(
        None,
        "--duration",
        "-d",
        help="How long the source stays visible (defaults to the scene's add duration)"
    ),
    settings_path: Path = _settings_option(),
) -> None:
    """Append a source to a scene's sequence."""
    settings = _load_settings(settings_path, must_exist=False)
    scene_settings = settings.scene(scene)

    if not scene_settings.add_source(source, duration or ""):
        typer.echo(f"❌ Not added: source name is empty or duration is zero")
        raise typer.Exit(1)

    _save_settings(settings, settings_path)
    typer.echo(f"✅ Added {source} ({scene_settings.add_hms}) to {scene}")


@app.command()
def clear(
    scene: str = typer.Argument(..., help="Scene name"),
    settings_path: Path = _settings_option(),
) -> None:
    """Remove every source from a scene's sequence."""
    settings = _load_settings(settings_path)
    if scene not in settings.scenes:
        typer.echo(f"❌ Unknown scene: {scene}")
        raise typer.Exit(1)

    settings.scenes[scene].clear_sources()
    _save_settings(settings, settings_path)
    typer.echo(f"✅ Cleared sources of {scene}")


@app.command()
def normalize(
    settings_path: Path = _settings_option(),
) -> None:
    """Rewrite every stored duration in HH:MM:SS.mmm form."""
    settings = _normalized(_load_settings(settings_path))
    _save_settings(settings, settings_path)
    typer.echo(f"✅ Normalized {len(settings.scenes)} scene(s) in {settings_path}")


@app.command()
def simulate(
    settings_path: Path = _settings_option(),
    seconds: float = typer.Option(
        60.0,
        "--seconds",
        "-t",
        help="Simulated run time in seconds",
        min=0.0
    ),
    trigger: bool = typer.Option(
        False,
        "--trigger",
        help="Send a manual start at t=0"
    ),
    active: Optional[str] = typer.Option(
        None,
        "--active",
        "-a",
        help="Active scene (defaults to the first enabled scene)"
    ),
    seed: Optional[int] = typer.Option(
        None,
        "--seed",
        help="Random seed for chance-gated starts"
    ),
    heartbeat: int = typer.Option(
        config.heartbeat_ms,
        "--heartbeat",
        help="Tick period in milliseconds",
        min=1
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose logging"
    ),
) -> None:
    """Dry-run the sequencer against an in-memory scene graph."""
    from .engine import ManualClock, Scheduler
    from .services import InMemorySceneGraph

    setup_logging(verbose)
    settings = _load_settings(settings_path)

    graph = InMemorySceneGraph(
        {name: [e.name for e in parse_sources(s.sources_txt)] for name, s in settings.scenes.items()}
    )
    if active is None:
        active = next((name for name, s in settings.scenes.items() if s.enabled), "")
    graph.active_scene = active

    clock = ManualClock()
    scheduler = Scheduler(graph, clock=clock, rng=random.Random(seed).randint)
    scheduler.load(settings)
    scheduler.refresh_active_scene()
    graph.changes.clear()

    typer.echo(f"🎬 Simulating {seconds:g}s (tick {heartbeat} ms, active scene: {active or '-'})")

    if trigger:
        started = scheduler.trigger()
        typer.echo(f"   Manual start: {', '.join(started) if started else 'nothing started'}")

    end_ms = int(seconds * 1000)
    seen = 0
    while True:
        scheduler.tick()
        for change in graph.changes[seen:]:
            icon = "▶" if change.visible else "■"
            typer.echo(f"   {format_hms(clock.now)}  {change.scene}  {icon} {change.source}")
        seen = len(graph.changes)
        if clock.now + heartbeat > end_ms:
            break
        clock.advance(heartbeat)

    typer.echo(f"\n📊 Summary:")
    typer.echo(f"   Visibility changes: {len(graph.changes)}")
    for name, cfg in scheduler.scenes.items():
        if cfg.enabled:
            typer.echo(f"   {name}: {cfg.phase.value}")


@app.command()
def run(
    settings_path: Path = _settings_option(),
    heartbeat: int = typer.Option(
        config.heartbeat_ms,
        "--heartbeat",
        help="Tick period in milliseconds",
        min=1
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose logging"
    ),
) -> None:
    """Connect to OBS and run the sequencer.

    Commands on stdin: empty line or 'start' starts sequences, 'preview SCENE'
    previews one scene, 'reload' re-reads the settings file, 'quit' exits.
    """
    from .engine import Heartbeat, Scheduler, TriggerFrontEnd
    from .services.obs import ObsSceneGraph

    setup_logging(verbose)

    try:
        config.validate_obs_required()
    except ValueError as e:
        typer.echo(f"❌ Configuration error: {e}")
        raise typer.Exit(1)

    settings = _normalized(_load_settings(settings_path))
    _save_settings(settings, settings_path)

    try:
        graph = ObsSceneGraph()
        typer.echo(f"🔌 Connected to OBS ({graph.address})")
    except Exception as e:
        typer.echo(f"❌ Failed to connect to OBS: {e}")
        raise typer.Exit(1)

    scheduler = Scheduler(graph)
    scheduler.load(settings)
    scheduler.refresh_active_scene()

    triggers = TriggerFrontEnd()
    try:
        graph.watch_scene_changes(triggers.scene_changed)
    except Exception as e:
        typer.echo(f"⚠️  Scene change events unavailable: {e}")

    enabled = [name for name, cfg in scheduler.scenes.items() if cfg.enabled]
    typer.echo(f"   Enabled scenes: {', '.join(enabled) if enabled else 'none'}")
    typer.echo("   Enter = start · preview SCENE · reload · quit")

    try:
        with Heartbeat(scheduler, triggers, period_ms=heartbeat):
            while True:
                try:
                    line = input()
                except EOFError:
                    break
                cmd, _, arg = line.strip().partition(" ")
                if cmd in ("", "start"):
                    triggers.request_start()
                elif cmd == "preview":
                    triggers.request_preview(arg.strip())
                elif cmd == "reload":
                    try:
                        fresh = _normalized(Settings.from_yaml(settings_path))
                        fresh.to_yaml(settings_path)
                    except Exception as e:
                        typer.echo(f"❌ Reload failed, keeping current settings: {e}")
                        continue
                    triggers.request_reload(fresh)
                    typer.echo("↻ Reloaded settings")
                elif cmd in ("quit", "exit", "q"):
                    break
                else:
                    typer.echo(f"⚠️  Unknown command: {cmd}")
    except KeyboardInterrupt:
        typer.echo("\nStopping…")
    finally:
        graph.close()


if __name__ == "__main__":
    app()
