from __future__ import annotations

import json
from dataclasses import asdict
from pathlib import Path
from typing import List, Optional

import cv2
import typer
from PIL import Image
from pydantic import ValidationError

from autoframe.camera import ViewportMotion
from autoframe.compositor import Compositor, FrameContext
from autoframe.config import AppConfig
from autoframe.effects import calculate_mouse_effects
from autoframe.log import configure_logging
from autoframe.scheduler import calculate_zoom_schedule, detect_hovers, to_output_time
from autoframe.schemas import SessionConfig, load_session
from autoframe.timeline import prepare_motions, sample_viewports, viewport_at

app = typer.Typer(help="Compute automatic pan/zoom camera schedules for screen recordings.")


def _load_config(path: Path, verbose: bool = False) -> AppConfig:
    configure_logging(verbose)
    try:
        session = load_session(path)
    except json.JSONDecodeError as exc:
        raise typer.BadParameter(f"{path} is not valid JSON: {exc}") from exc
    except ValidationError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1) from exc
    return AppConfig(session=session, verbose=verbose)


def _schedule(config: AppConfig) -> List[ViewportMotion]:
    session = config.session
    return calculate_zoom_schedule(
        session.events,
        config.view_mapper,
        config.windows,
        session.timeline_offset_ms,
        session.zoom,
    )


def _echo_json(payload: object, out: Optional[Path] = None) -> None:
    text = json.dumps(payload, indent=2)
    if out is None:
        typer.echo(text)
        return
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(text + "\n", encoding="utf-8")


@app.command()
def schedule(
    input: Path = typer.Option(..., "--input", exists=True),
    out: Optional[Path] = typer.Option(None, "--out"),
    max_zoom: Optional[float] = typer.Option(None, "--max-zoom"),
    verbose: bool = typer.Option(False, "--verbose"),
) -> None:
    config = _load_config(input, verbose)
    if max_zoom:
        data = config.session.model_dump()
        data["zoom"]["max_zoom"] = max_zoom
        try:
            config = AppConfig(session=SessionConfig.model_validate(data), verbose=verbose)
        except ValidationError as exc:
            raise typer.BadParameter(str(exc)) from exc
    motions = _schedule(config)
    _echo_json([asdict(motion) for motion in motions], out)
    if out is not None:
        typer.echo(f"Wrote {len(motions)} motion(s) to {out}")


@app.command()
def hovers(
    input: Path = typer.Option(..., "--input", exists=True),
    verbose: bool = typer.Option(False, "--verbose"),
) -> None:
    config = _load_config(input, verbose)
    session = config.session
    events = to_output_time(session.events, config.windows, session.timeline_offset_ms)
    found = detect_hovers(events, config.view_mapper, session.zoom)
    _echo_json([hover.model_dump() for hover in found])


@app.command()
def sample(
    input: Path = typer.Option(..., "--input", exists=True),
    time: Optional[List[int]] = typer.Option(None, "--time", help="Output time in ms; repeatable."),
    fps: Optional[int] = typer.Option(None, "--fps"),
    verbose: bool = typer.Option(False, "--verbose"),
) -> None:
    config = _load_config(input, verbose)
    session = config.session
    motions = _schedule(config)
    if time:
        timed = prepare_motions(motions, config.windows, session.timeline_offset_ms)
        for t in time:
            rect = viewport_at(timed, t, session.output_size, session.zoom.ease)
            typer.echo(json.dumps({"time_ms": t, "rect": asdict(rect)}))
        return
    samples = sample_viewports(
        motions,
        session.output_size,
        config.windows,
        session.timeline_offset_ms,
        fps or session.fps,
        session.zoom.ease,
    )
    for item in samples:
        typer.echo(json.dumps(asdict(item)))


@app.command()
def effects(input: Path = typer.Option(..., "--input", exists=True)) -> None:
    config = _load_config(input)
    _echo_json([asdict(effect) for effect in calculate_mouse_effects(config.session.events)])


@app.command()
def preview(
    input: Path = typer.Option(..., "--input", exists=True),
    frame: Path = typer.Option(..., "--frame", exists=True, help="Still image of the source recording."),
    frame_time: int = typer.Option(0, "--time"),
    out: Path = typer.Option(..., "--out"),
    font_path: Optional[str] = typer.Option(None, "--font"),
) -> None:
    config = _load_config(input)
    session = config.session
    timed = prepare_motions(_schedule(config), config.windows, session.timeline_offset_ms)
    viewport = viewport_at(timed, frame_time, session.output_size, session.zoom.ease)
    compositor = Compositor(config, Image.open(frame), font_path=font_path)
    image = compositor.render_frame(FrameContext(time_ms=frame_time, viewport=viewport))
    Path(out).parent.mkdir(parents=True, exist_ok=True)
    cv2.imwrite(str(out), image)
    typer.echo(f"Wrote preview to {out}")


@app.command()
def validate(input: Path = typer.Option(..., "--input", exists=True)) -> None:
    config = _load_config(input)
    typer.echo(
        f"Valid session: {len(config.session.events)} event(s), "
        f"{len(config.windows)} window(s), {config.output_duration_ms} ms of output"
    )
