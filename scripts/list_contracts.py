#!/usr/bin/python3

from itertools import groupby
from pathlib import Path
from typing import List

import click
from ape.cli import ConnectedProviderCommand

from deployment.constants import DEFAULT_CONFIG_FILEPATH
from deployment.registry import RegistryEntry, read_registry
from deployment.utils import _load_yaml, get_artifact_filepath, get_chain_name


def _format_chain_name(chain_id: int) -> str:
    """Format the chain name to capitalize each word and join with slashes."""
    try:
        chain_name = get_chain_name(chain_id)
    except ValueError:
        return f"Chain {chain_id}"
    return "/".join(word.capitalize() for word in chain_name.split())


def _display_registry_entries(entries: List[RegistryEntry]) -> None:
    """Display registry entries grouped by chain ID."""
    for chain_id, chain_entries in groupby(entries, key=lambda e: e.chain_id):
        click.secho(f"\n{_format_chain_name(chain_id)}", fg="yellow")
        for index, entry in enumerate(chain_entries, start=1):
            click.secho(f"    {index}. {entry.name} {entry.address}", fg="cyan")
            if entry.args:
                click.secho(f"       args: {', '.join(map(str, entry.args))}", fg="white")


@click.command(cls=ConnectedProviderCommand, name="list-contracts")
@click.option(
    "--config",
    "-c",
    "config_filepath",
    help="Deployment config whose registry should be listed.",
    type=click.Path(dir_okay=False, exists=True, path_type=Path),
    default=DEFAULT_CONFIG_FILEPATH,
)
def cli(config_filepath):
    """List all contracts recorded in a deployment registry."""
    registry_filepath = get_artifact_filepath(_load_yaml(config_filepath))
    if not registry_filepath.exists():
        raise click.ClickException(f"No registry found at {registry_filepath}")
    entries = sorted(read_registry(registry_filepath), key=lambda e: (e.chain_id, e.name))
    _display_registry_entries(entries)


if __name__ == "__main__":
    cli()
