"""
Lantern CLI - main entry point.
"""
import logging
from typing import Optional

import click

from lantern import __version__
from lantern.config import ViewConfig, load_config
from lantern.exceptions import LanternError

from .logs import logs
from .show import show
from .stats import stats
from .stream import stream

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"


@click.group()
@click.option("--config", "config_path", type=click.Path(exists=True, dir_okay=False),
              help="YAML file with view settings")
@click.option("-v", "--verbose", is_flag=True, help="Debug logging")
@click.version_option(__version__, prog_name="lantern")
@click.pass_context
def cli(ctx: click.Context, config_path: Optional[str], verbose: bool):
    """Lantern - review captured traffic and the findings on it."""
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING, format=LOG_FORMAT)

    config = ViewConfig()
    if config_path:
        try:
            config = load_config(config_path)
        except LanternError as e:
            raise click.ClickException(str(e))

    ctx.ensure_object(dict)
    ctx.obj["config"] = config


cli.add_command(logs)
cli.add_command(show)
cli.add_command(stream)
cli.add_command(stats)

if __name__ == "__main__":
    cli()
