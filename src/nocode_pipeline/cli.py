"""
Command-line interface for the No-Code Pipeline Builder.

This module provides the main CLI entry points using Click.

Commands:
- phases: List the custom step entry points
- transforms: List registered transforms
- plan: Schedule every phase and show the resulting operations
- run: Schedule every phase and execute the operations

Example:
    $ nocode-pipeline --help
    $ nocode-pipeline plan -i steps.toml -m groups.toml
    $ nocode-pipeline run -i steps.toml -m groups.toml -o output
"""

from __future__ import annotations

from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from nocode_pipeline import __version__
from nocode_pipeline.config import get_settings
from nocode_pipeline.errors import PipelineBuilderError
from nocode_pipeline.frames.manifest import load_manifest
from nocode_pipeline.instructions.loader import load_instruction_tree
from nocode_pipeline.models.frames import FrameGroup
from nocode_pipeline.models.phases import Phase
from nocode_pipeline.scheduling.operation import OperationStatus
from nocode_pipeline.scheduling.scheduler import CUSTOM_OPERATIONS_CATEGORY, PipelineRun
from nocode_pipeline.transforms.registry import (
    discover_transforms,
    get_transform_info,
    load_builtin_transforms,
)
from nocode_pipeline.utils.logging import get_logger, setup_logging

console = Console()


@click.group()
@click.version_option(version=__version__, prog_name="nocode-pipeline")
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, path_type=Path),
    help="Configuration file path",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose output",
)
@click.pass_context
def main(ctx: click.Context, config: Path | None, verbose: bool) -> None:
    """No-Code Pipeline Builder CLI.

    Schedule and run user-defined custom steps against frame groups.
    """
    ctx.ensure_object(dict)

    settings = get_settings(config)
    ctx.obj["settings"] = settings
    ctx.obj["verbose"] = verbose

    try:
        setup_logging(settings.logging, verbose=verbose)
    except ValueError as e:
        raise click.ClickException(str(e)) from e

    load_builtin_transforms()
    if settings.plugins_dir:
        discover_transforms(settings.plugins_dir)


@main.command("phases")
def phases() -> None:
    """List the custom step entry points."""
    table = Table(title="Custom Step Phases")
    table.add_column("#", justify="right")
    table.add_column("Step name", style="cyan")
    table.add_column("Operates on")

    for phase in Phase:
        table.add_row(
            str(phase.value),
            phase.step_name,
            "master files" if phase.is_master_step else "frames",
        )

    console.print(table)


@main.command("transforms")
def transforms() -> None:
    """List registered transforms."""
    table = Table(title="Registered Transforms")
    table.add_column("Name", style="cyan")
    table.add_column("Class", style="green")
    table.add_column("Description")

    for info in get_transform_info():
        table.add_row(info["name"], info["class"], info["description"])

    console.print(table)


def _pipeline_options(func):
    func = click.option(
        "--output-dir",
        "-o",
        type=click.Path(path_type=Path),
        help="Output directory (overrides config)",
    )(func)
    func = click.option(
        "--manifest",
        "-m",
        type=click.Path(path_type=Path),
        help="Frame group manifest (overrides config)",
    )(func)
    func = click.option(
        "--instructions",
        "-i",
        type=click.Path(path_type=Path),
        help="Instruction tree file (overrides config)",
    )(func)
    return func


def _build_run(
    ctx: click.Context,
    instructions: Path | None,
    manifest: Path | None,
    output_dir: Path | None,
) -> tuple[PipelineRun, list[FrameGroup]]:
    """Load inputs and schedule every phase in timeline order."""
    settings = ctx.obj["settings"]
    logger = get_logger(__name__)

    instructions = instructions or settings.instructions_path
    manifest = manifest or settings.manifest_path
    output_dir = output_dir or settings.output_dir

    if manifest is None:
        raise click.UsageError("No manifest given (use --manifest or pipeline.manifest_path)")

    try:
        groups = load_manifest(manifest)
        root = load_instruction_tree(instructions) if instructions else None
    except PipelineBuilderError as e:
        console.print(f"[red]Error:[/red] {e}")
        ctx.exit(1)

    if root is None:
        logger.warning("no_instruction_tree", hint="custom steps will be skipped")

    run = PipelineRun(root, output_dir=output_dir)
    for phase in Phase:
        run.schedule(phase, groups)

    return run, groups


@main.command("plan")
@_pipeline_options
@click.pass_context
def plan(
    ctx: click.Context,
    instructions: Path | None,
    manifest: Path | None,
    output_dir: Path | None,
) -> None:
    """Show the operations a run would execute, without running them."""
    run, groups = _build_run(ctx, instructions, manifest, output_dir)

    table = Table(title="Scheduled Custom Operations")
    table.add_column("#", justify="right")
    table.add_column("Operation", style="cyan")
    table.add_column("Group")
    table.add_column("Frames", justify="right")
    table.add_column("Space (MB)", justify="right")

    for i, op in enumerate(run.queue, start=1):
        table.add_row(
            str(i),
            op.name,
            op.group.name,
            "masters" if op.is_master_step else str(len(op.group.items)),
            f"{op.required_space() / 1e6:.2f}",
        )

    console.print(table)

    estimate = run.context.space.get(CUSTOM_OPERATIONS_CATEGORY)
    total = estimate.size if estimate else 0.0
    console.print(f"{len(run.queue)} operations for {len(groups)} groups")
    console.print(f"Estimated disk space: [bold]{total / 1e6:.2f} MB[/bold]")


@main.command("run")
@_pipeline_options
@click.pass_context
def run_cmd(
    ctx: click.Context,
    instructions: Path | None,
    manifest: Path | None,
    output_dir: Path | None,
) -> None:
    """Schedule every phase and execute the custom operations."""
    run, _ = _build_run(ctx, instructions, manifest, output_dir)

    if not len(run.queue):
        console.print("[yellow]No custom operations scheduled[/yellow]")
        return

    with console.status(f"Running {len(run.queue)} operations..."):
        result = run.execute()

    table = Table(title="Custom Operation Results")
    table.add_column("Operation", style="cyan")
    table.add_column("Group")
    table.add_column("Status")
    table.add_column("Message")

    for op in result.operations:
        style = "red" if op.status is OperationStatus.FAILED else ("yellow" if op.has_warnings else "green")
        table.add_row(op.name, op.group.name, f"[{style}]{op.status.value}[/{style}]", op.status_message)

    console.print(table)
    console.print(
        f"[green]{result.frames_processed}[/green] frames processed, "
        f"[red]{result.frames_failed}[/red] failed, "
        f"{result.failure_count} operations failed "
        f"({result.elapsed_seconds:.1f}s)"
    )

    if result.failure_count:
        ctx.exit(1)


if __name__ == "__main__":
    main()
