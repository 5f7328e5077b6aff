import dotenv
import typer

from osslicenses.__version__ import __version__
from osslicenses.commands import generate
from osslicenses.commands import verify
from osslicenses.core.logging import setup_logging

app = typer.Typer(
    help='osslicenses: bundle third-party license text for a resolved dependency list.',
    no_args_is_help=True,
    pretty_exceptions_show_locals=False,
)

app.add_typer(generate.app, name='generate')
app.add_typer(verify.app, name='verify')


def version_callback(value: bool):
    if value:
        typer.echo(f"osslicenses {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    debug: bool = typer.Option(False, '--debug', help='Enable debug logging'),
    version: bool = typer.Option(
        False, '--version', callback=version_callback, is_eager=True,
        help='Show the version and exit',
    ),
):
    """
    osslicenses CLI - third-party license aggregation.
    """
    dotenv.load_dotenv()
    level = 'DEBUG' if debug else 'INFO'
    setup_logging(level=level)


if __name__ == '__main__':
    app()
