# ABOUTME: CLI package for Folio, built on Click.
# ABOUTME: Defines the root command group, logging setup, and registers subcommands.

import logging

import click

from folio.cli.commands import add_cmd, categories_cmd, info_cmd, ls_cmd, rate_cmd, sync_cmd


@click.group()
@click.version_option(package_name="folio")
@click.option(
    "-v", "--verbose",
    is_flag=True,
    default=False,
    help="Log progress (INFO) in addition to warnings.",
)
def cli(verbose: bool) -> None:
    """Folio - sync a directory of image works into a catalog."""
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


cli.add_command(sync_cmd.sync)
cli.add_command(ls_cmd.ls)
cli.add_command(info_cmd.info)
cli.add_command(categories_cmd.categories)
cli.add_command(add_cmd.add)
cli.add_command(rate_cmd.rate)
