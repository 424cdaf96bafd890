from ape import networks

from deployment.constants import LOCAL_BLOCKCHAIN_ENVIRONMENTS


def is_local_network() -> bool:
    """Returns True if the connected network is a local development network."""
    return networks.provider.network.name in LOCAL_BLOCKCHAIN_ENVIRONMENTS


def get_network_name() -> str:
    return networks.provider.network.name


def get_chain_id() -> int:
    return networks.provider.network.chain_id
