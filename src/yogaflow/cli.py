"""CLI entry point using Typer."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Annotated

import typer

if TYPE_CHECKING:
    from yogaflow.models import Sequence

app = typer.Typer(
    name="yogaflow",
    help="Generate, edit and store yoga pose sequences.",
    no_args_is_help=False,
)


def _print_sequence(sequence: Sequence) -> None:
    minutes, seconds = divmod(sequence.total_duration_seconds, 60)
    typer.echo(f"{sequence.title}  [{sequence.id}]")
    typer.echo(
        f"{sequence.duration_minutes} min {sequence.difficulty} {sequence.style}, "
        f"focus: {sequence.focus} ({sequence.pose_count} poses, {minutes}m{seconds:02d}s held)"
    )
    for phase in sequence.phases:
        typer.echo(f"\n  {phase.name}")
        for pose in phase.poses:
            side = f" ({pose.side})" if pose.side else ""
            typer.echo(f"    {pose.position:>4}  {pose.name}{side}  {pose.duration_seconds}s")


@app.command()
def serve(
    host: Annotated[str | None, typer.Option("--host", help="Bind address")] = None,
    port: Annotated[int | None, typer.Option("--port", "-p", help="Port number")] = None,
    reload: Annotated[bool, typer.Option("--reload", help="Reload on code changes")] = False,
) -> None:
    """Run the HTTP API."""
    import uvicorn

    from yogaflow.config import load_config

    config = load_config()
    host = host or config.server.host
    port = port or config.server.port
    typer.echo(f"Serving yogaflow API at http://{host}:{port}")
    if reload:
        uvicorn.run("yogaflow.api.app:create_app", factory=True, host=host, port=port, reload=True)
        return

    from yogaflow.api import create_app

    uvicorn.run(create_app(config), host=host, port=port)


@app.command()
def generate(
    duration: Annotated[int, typer.Option("--duration", "-d", help="Minutes (1-90)")] = 30,
    difficulty: Annotated[
        str, typer.Option("--difficulty", help="beginner, intermediate or advanced")
    ] = "beginner",
    style: Annotated[
        str, typer.Option("--style", "-s", help="vinyasa, hatha, yin, power or restorative")
    ] = "hatha",
    focus: Annotated[
        str, typer.Option("--focus", "-f", help="e.g. 'full body', core, balance")
    ] = "full body",
    notes: Annotated[str | None, typer.Option("--notes", "-n", help="Additional notes")] = None,
    no_ai: Annotated[bool, typer.Option("--no-ai", help="Use rule-based selection only")] = False,
    backend: Annotated[
        str | None,
        typer.Option("--backend", "-b", help="Backend: openai or mock"),
    ] = None,
    catalog: Annotated[
        Path | None,
        typer.Option("--catalog", "-c", help="Pose file to use instead of the database"),
    ] = None,
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Write the sequence as JSON to this file"),
    ] = None,
    save: Annotated[bool, typer.Option("--save/--no-save", help="Persist the sequence")] = True,
) -> None:
    """Generate a sequence from the command line."""
    import asyncio

    from pydantic import ValidationError

    from yogaflow.backend import create_backend
    from yogaflow.config import load_config
    from yogaflow.errors import YogaFlowError
    from yogaflow.models import GenerationParams
    from yogaflow.pipeline import generate_sequence
    from yogaflow.store import MemoryStore, create_store, load_pose_file

    try:
        params = GenerationParams(
            duration=duration,
            difficulty=difficulty.lower(),
            style=style.lower(),
            focus=focus.lower(),
            additional_notes=notes,
        )
    except ValidationError as e:
        typer.echo(f"Error: invalid parameters\n{e}", err=True)
        raise typer.Exit(1) from None

    config = load_config()
    if backend:
        config.llm.provider = backend  # type: ignore[assignment]

    if catalog is not None:
        try:
            store = MemoryStore(load_pose_file(catalog))
        except (FileNotFoundError, ValueError) as e:
            typer.echo(f"Error: {e}", err=True)
            raise typer.Exit(1) from None
    else:
        store = create_store(config.database)

    text_backend = None if no_ai else create_backend(config.llm)

    async def _run() -> Sequence:
        if text_backend is not None:
            await text_backend.connect()
        try:
            return await generate_sequence(
                params, store, text_backend, config, use_ai=not no_ai, persist=save,
            )
        finally:
            if text_backend is not None:
                await text_backend.disconnect()

    try:
        sequence = asyncio.run(_run())
    except YogaFlowError as e:
        typer.echo(f"Error: {e}", err=True)
        raw = getattr(e, "raw_text", "")
        if raw:
            typer.echo(f"Model output:\n{raw}", err=True)
        raise typer.Exit(1) from None

    _print_sequence(sequence)
    if output is not None:
        output.write_text(sequence.model_dump_json(indent=2), encoding="utf-8")
        typer.echo(f"\nWrote {output}")


@app.command()
def check() -> None:
    """Check the database and text backend and report status."""
    import asyncio

    from yogaflow.backend import create_backend
    from yogaflow.config import load_config
    from yogaflow.errors import PersistenceError
    from yogaflow.store import create_store

    config = load_config()
    ok = True

    try:
        store = create_store(config.database)
        count = len(store.list_poses())
        typer.echo(f"Database: {config.database.url} ({count} poses)")
        if count == 0:
            typer.echo("  No poses yet; run 'yogaflow import-poses' to load the starter catalog")
    except PersistenceError as e:
        typer.echo(f"Database: unavailable ({e})")
        ok = False

    async def _run() -> bool:
        text_backend = create_backend(config.llm)
        await text_backend.connect()
        try:
            if await text_backend.is_available():
                models = await text_backend.get_models()
                typer.echo(f"LLM ({config.llm.provider}): connected, model {', '.join(models)}")
                return True
            typer.echo(f"LLM ({config.llm.provider}): unavailable (check OPENAI_API_KEY)")
            typer.echo("  Generation will fall back to rule-based selection")
            return False
        finally:
            await text_backend.disconnect()

    ok = asyncio.run(_run()) and ok
    typer.echo(f"Status: {'ready' if ok else 'degraded'}")
    if not ok:
        raise typer.Exit(1)


@app.command("import-poses")
def import_poses(
    path: Annotated[
        Path | None,
        typer.Argument(help="JSON or CSV pose file (default: bundled starter catalog)"),
    ] = None,
) -> None:
    """Import poses into the catalog."""
    from yogaflow.config import load_config
    from yogaflow.errors import PersistenceError
    from yogaflow.store import STARTER_CATALOG, create_store, load_pose_file

    source = path or STARTER_CATALOG
    try:
        poses = load_pose_file(source)
    except (FileNotFoundError, ValueError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from None

    config = load_config()
    try:
        count = create_store(config.database).add_poses(poses)
    except PersistenceError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from None
    typer.echo(f"Imported {count} poses from {source}")


@app.command()
def export(
    sequence_id: Annotated[str, typer.Argument(help="Sequence id")],
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Output file (default: <id>.json)"),
    ] = None,
) -> None:
    """Export a stored sequence as JSON."""
    from yogaflow.config import load_config
    from yogaflow.errors import YogaFlowError
    from yogaflow.store import create_store

    config = load_config()
    try:
        sequence = create_store(config.database).get_sequence(sequence_id)
    except YogaFlowError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from None

    target = output or Path(f"{sequence_id}.json")
    target.write_text(sequence.model_dump_json(indent=2), encoding="utf-8")
    typer.echo(f"Exported '{sequence.title}' to {target}")


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    version: Annotated[
        bool, typer.Option("--version", "-v", help="Show version")
    ] = False,
    log_level: Annotated[
        str, typer.Option("--log-level", "-l", help="Logging level")
    ] = "WARNING",
) -> None:
    """yogaflow - generate, edit and store yoga pose sequences."""
    if version:
        from yogaflow import __version__

        typer.echo(f"yogaflow {__version__}")
        raise typer.Exit()
    logging.basicConfig(
        level=log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
