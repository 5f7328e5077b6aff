from dataclasses import replace
from pathlib import Path

import structlog
import typer
from rich.progress import BarColumn
from rich.progress import MofNCompleteColumn
from rich.progress import Progress
from rich.progress import SpinnerColumn
from rich.progress import TaskProgressColumn
from rich.progress import TextColumn
from rich.progress import TimeElapsedColumn
from rich.table import Table

from osslicenses.core.container import get_container
from osslicenses.core.decorators import handle_errors
from osslicenses.core.logging import console
from osslicenses.core.validation import validate_dependencies_file
from osslicenses.models.dependency import load_dependencies

logger = structlog.get_logger('generate')
app = typer.Typer()


@app.callback(invoke_without_command=True)
@handle_errors
def main(
    dependencies: Path = typer.Option(
        ..., '--dependencies', '-d', help='JSON dependency list from the resolution step',
    ),
    output_dir: Path | None = typer.Option(
        None, '--output-dir', '-o', help='Directory for the license blob and metadata',
    ),
    repository: list[Path] | None = typer.Option(
        None, '--repository', '-r', help='Local Maven/Gradle repository to search for POMs (repeatable)',
    ),
):
    """
    Aggregate license text for a resolved dependency list.
    """
    container = get_container()
    config = container.config
    paths = replace(config.paths, output_dir=output_dir) if output_dir else config.paths

    validate_dependencies_file(dependencies)
    deps = load_dependencies(dependencies)
    if not deps:
        logger.warning('Empty dependency list', path=str(dependencies))

    service = container.create_aggregation_service(repository or None)

    with Progress(SpinnerColumn(), TextColumn('[progress.description]{task.description}'), BarColumn(), TaskProgressColumn(), MofNCompleteColumn(), TextColumn('•'), TimeElapsedColumn(), console=console) as progress:
        task = progress.add_task('Collecting licenses...', total=len(deps))
        state = service.run(
            deps, paths, progress_callback=lambda _: progress.advance(task),
        )

    stats = state.stats
    table = Table(title='License Summary')
    table.add_column('Metric', style='cyan')
    table.add_column('Value', style='magenta')

    table.add_row('Dependencies', str(stats.total))
    table.add_row('Licenses (POM)', str(stats.pom_licenses))
    table.add_row('Licenses (bundled)', str(stats.bundled_licenses))
    table.add_row('Licenses written', str(stats.licenses_written))
    table.add_row('Duplicates skipped', str(stats.duplicates))
    table.add_row('No license found', str(stats.skipped))
    table.add_row('Failed', str(stats.failed))
    table.add_row('Blob size', f"{state.blob.start:,} bytes")
    table.add_row('Total Duration', f"{stats.elapsed_time:.2f}s")
    console.print(table)

    console.print(f"[green]Licenses:[/] {paths.licenses_path}")
    console.print(f"[green]Metadata:[/] {paths.metadata_path}")
