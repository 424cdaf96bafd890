#!/usr/bin/python3

import click
from ape import accounts
from ape.cli import ConnectedProviderCommand, network_option

from deployment.deployer import Deployer
from deployment.options import (
    autosign_option,
    config_option,
    deploy_dir_option,
    reset_option,
    tags_option,
    verify_option,
)
from deployment.tasks import load_tasks


@click.command(cls=ConnectedProviderCommand)
@network_option(required=True)
@tags_option
@config_option
@deploy_dir_option
@click.option(
    "--account",
    "-a",
    "account_alias",
    help="Alias of the account to deploy from; overrides the 'deployer' named account.",
    required=False,
)
@autosign_option
@verify_option
@reset_option
def cli(network, tags, config_filepath, deploy_dir, account_alias, auto, verify, reset):
    """
    Run deployment tasks, optionally only those carrying the given tags.

    ape run deploy --network ethereum:sepolia:infura --tags Merchant
    """
    # --tags may be repeated and each value may be comma separated
    selected_tags = [tag for group in tags for tag in group]

    registry = load_tasks(deploy_dir)
    click.echo(f"Loaded {len(registry)} deployment task(s) from {deploy_dir}.")

    account = accounts.load(account_alias) if account_alias else None
    deployer = Deployer.from_yaml(
        filepath=config_filepath,
        verify=verify,
        account=account,
        autosign=auto,
        reuse=False if reset else None,
    )
    registry.run(deployer, tags=selected_tags)
    deployer.finalize()


if __name__ == "__main__":
    cli()
