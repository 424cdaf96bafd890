from pathlib import Path

import click
from ape import networks
from ape.cli import ConnectedProviderCommand, network_option

from deployment.constants import DEFAULT_CONFIG_FILEPATH
from deployment.registry import contracts_from_registry
from deployment.utils import (
    _load_yaml,
    check_etherscan_plugin,
    get_artifact_filepath,
    verify_contracts,
)


@click.command(cls=ConnectedProviderCommand)
@network_option(required=True)
@click.option(
    "--contract-name",
    "-n",
    "contract_names",
    help="Contract to verify; defaults to every contract in the registry for this chain.",
    type=click.STRING,
    multiple=True,
)
@click.option(
    "--config",
    "-c",
    "config_filepath",
    help="Deployment config; used for obtaining the contract registry.",
    type=click.Path(dir_okay=False, exists=True, path_type=Path),
    default=DEFAULT_CONFIG_FILEPATH,
)
def cli(network, contract_names, config_filepath):
    """Verify deployed contracts."""
    check_etherscan_plugin()
    registry_filepath = get_artifact_filepath(_load_yaml(config_filepath))
    chain_id = networks.active_provider.chain_id
    contracts = contracts_from_registry(registry_filepath, chain_id=chain_id)

    contract_names = contract_names or list(contracts)
    contract_instances = []
    for contract_name in contract_names:
        try:
            contract_instances.append(contracts[contract_name])
        except KeyError:
            raise ValueError(
                f"Contract '{contract_name}' not found in registry, '{registry_filepath}', "
                f"for chain {chain_id}"
            )

    verify_contracts(contract_instances)


if __name__ == "__main__":
    cli()
