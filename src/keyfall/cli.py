from pathlib import Path
from typing import Annotated

import typer

from keyfall.chart import ChartError
from keyfall.config import BASE_SPEED, FPS_CAP
from keyfall.logging_setup import setup_logging

app = typer.Typer(no_args_is_help=True)


@app.command()
def play(
    chart: Annotated[Path, typer.Argument(help="chart json")],
    speed: Annotated[float, typer.Option(help="scroll speed multiplier")] = BASE_SPEED,
    fps: Annotated[int, typer.Option(help="frame rate cap")] = FPS_CAP,
    fullscreen: Annotated[bool, typer.Option()] = False,
    quiet: Annotated[bool, typer.Option()] = False,
    debug: Annotated[bool, typer.Option()] = False,
):
    setup_logging(quiet=quiet, debug=debug)
    from keyfall import runtime

    try:
        score = runtime.main(chart, speed=speed, fps_cap=fps, fullscreen=fullscreen)
    except FileNotFoundError as e:
        typer.echo(f"file not found: {e}", err=True)
        raise typer.Exit(1)
    except ChartError as e:
        typer.echo(f"bad chart: {e}", err=True)
        raise typer.Exit(1)
    typer.echo(f"score: {score}")


@app.command()
def update_bpm(
    song_dir: Annotated[Path, typer.Option()] = Path("songs"),
    audio: Annotated[str, typer.Option()] = "song.wav",
    quiet: Annotated[bool, typer.Option()] = False,
):
    setup_logging(quiet=quiet)
    from keyfall.tools import bpm

    try:
        found = bpm.main(song_dir, audio)
    except FileNotFoundError as e:
        typer.echo(f"file not found: {e}", err=True)
        raise typer.Exit(1)
    if found is None:
        raise typer.Exit(1)
    typer.echo(f"bpm: {found}")


if __name__ == "__main__":
    app()
