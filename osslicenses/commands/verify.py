from dataclasses import replace
from pathlib import Path

import typer

from osslicenses.core.container import get_container
from osslicenses.core.decorators import handle_errors
from osslicenses.core.logging import console

app = typer.Typer()


@app.callback(invoke_without_command=True)
@handle_errors
def main(
    output_dir: Path | None = typer.Option(
        None, '--output-dir', '-o', help='Directory holding the generated files',
    ),
):
    """
    Check that the metadata index slices cleanly into the license blob.
    """
    container = get_container()
    config = container.config
    paths = replace(config.paths, output_dir=output_dir) if output_dir else config.paths

    result = container.get_verify_service().verify(
        paths.licenses_path, paths.metadata_path,
    )

    if not result.ok:
        for problem in result.problems:
            console.print(f"[bold red]✗[/] {problem}")
        raise typer.Exit(1)

    console.print(
        f"[green]✓[/] {result.entries} licenses, {result.blob_size:,} bytes",
    )
