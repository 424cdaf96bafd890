import json
from collections import defaultdict
from pathlib import Path
from typing import Any, Dict, List, NamedTuple, Optional, Sequence

from ape.contracts import ContractInstance
from eth_typing import ABI, ChecksumAddress
from eth_utils import to_checksum_address

from deployment.constants import STANDARD_REGISTRY_JSON_FORMAT
from deployment.utils import _load_json, get_contract_container

ChainId = int
ContractName = str


class RegistryEntry(NamedTuple):
    """Represents a single deployment record in a contract registry."""

    chain_id: ChainId
    name: ContractName
    address: ChecksumAddress
    abi: ABI
    tx_hash: str
    block_number: int
    deployer: str
    args: List[Any]
    bytecode_hash: str


def serialize_args(args: Sequence[Any]) -> List[Any]:
    """Converts constructor arguments into their JSON registry representation."""
    serialized = list()
    for arg in args:
        if isinstance(arg, (list, tuple)):
            serialized.append(serialize_args(arg))
        elif isinstance(arg, (bytes, bytearray)):
            serialized.append("0x" + bytes(arg).hex())
        elif hasattr(arg, "address"):
            # contract instances and accounts are recorded by address
            serialized.append(str(arg.address))
        else:
            serialized.append(arg)
    return serialized


def _get_abi(contract_instance: ContractInstance) -> ABI:
    """Returns the ABI of a contract instance."""
    contract_abi = list()
    for entry in contract_instance.contract_type.abi:
        contract_abi.append(entry.model_dump(mode="json"))
    return contract_abi


def _get_entry(
    contract_instance: ContractInstance, args: Sequence[Any], bytecode_hash: str
) -> RegistryEntry:
    receipt = contract_instance.receipt
    entry = RegistryEntry(
        name=contract_instance.contract_type.name,
        address=to_checksum_address(contract_instance.address),
        abi=_get_abi(contract_instance),
        chain_id=receipt.chain_id,
        tx_hash=str(receipt.txn_hash),
        block_number=receipt.block_number,
        deployer=receipt.transaction.sender,
        args=serialize_args(args),
        bytecode_hash=bytecode_hash,
    )
    return entry


def read_registry(filepath: Path) -> List[RegistryEntry]:
    data = _load_json(filepath)
    registry_entries = list()
    for chain_id, entries in data.items():
        for contract_name, artifacts in entries.items():
            registry_entry = RegistryEntry(
                chain_id=int(chain_id),
                name=contract_name,
                address=artifacts["address"],
                abi=artifacts["abi"],
                tx_hash=artifacts["tx_hash"],
                block_number=artifacts["block_number"],
                deployer=artifacts["deployer"],
                args=artifacts.get("args", []),
                bytecode_hash=artifacts.get("bytecode_hash", ""),
            )
            registry_entries.append(registry_entry)
    return registry_entries


def write_registry(entries: List[RegistryEntry], filepath: Path, silent: bool = False) -> Path:
    """
    Writes registry entries to a file. Entries for chains already present in
    the file replace existing entries with the same contract name.
    """
    if not entries:
        if not silent:
            print("No entries provided.")
        return filepath

    # common order keeps registry diffs readable
    entries = sorted(entries, key=lambda entry: (str(entry.chain_id), entry.name))

    data = defaultdict(dict)
    for entry in entries:
        entry_abi = list(entry.abi)
        entry_abi.sort(key=lambda d: (d["type"], d.get("name", "")))

        data[str(entry.chain_id)][entry.name] = {
            "address": entry.address,
            "abi": entry_abi,
            "tx_hash": entry.tx_hash,
            "block_number": int(entry.block_number),
            "deployer": entry.deployer,
            "args": list(entry.args),
            "bytecode_hash": entry.bytecode_hash,
        }

    filepath.parent.mkdir(parents=True, exist_ok=True)

    if filepath.exists():
        if not silent:
            print(f"Updating existing registry at {filepath}.")
        existing_data = _load_json(filepath)
        for chain_id, chain_entries in data.items():
            existing_data.setdefault(chain_id, {}).update(chain_entries)
        data = existing_data
    elif not silent:
        print(f"Creating new registry at {filepath}.")

    data = {
        chain_id: dict(sorted(data[chain_id].items()))
        for chain_id in sorted(data, key=int)
    }
    with open(filepath, "w") as file:
        json.dump(data, file, **STANDARD_REGISTRY_JSON_FORMAT)

    return filepath


def find_entry(filepath: Path, chain_id: ChainId, name: ContractName) -> Optional[RegistryEntry]:
    """Returns the registry entry for a contract on a chain, if any."""
    if not filepath.exists():
        return None
    for entry in read_registry(filepath=filepath):
        if entry.chain_id == chain_id and entry.name == name:
            return entry
    return None


def registry_from_ape_deployments(
    deployments: List[ContractInstance],
    output_filepath: Path,
    args: Optional[Dict[ContractName, Sequence[Any]]] = None,
    bytecode_hashes: Optional[Dict[ContractName, str]] = None,
) -> Path:
    """Creates or updates a contract registry from ape deployments."""
    args = args or dict()
    bytecode_hashes = bytecode_hashes or dict()
    entries = list()
    for contract_instance in deployments:
        contract_name = contract_instance.contract_type.name
        entry = _get_entry(
            contract_instance=contract_instance,
            args=args.get(contract_name, []),
            bytecode_hash=bytecode_hashes.get(contract_name, ""),
        )
        entries.append(entry)
    output_filepath = write_registry(entries=entries, filepath=output_filepath)
    print(f"(i) Registry written to {output_filepath}!")
    return output_filepath


def contracts_from_registry(filepath: Path, chain_id: ChainId) -> Dict[str, ContractInstance]:
    """Returns a dictionary of contract instances from a contract registry."""
    registry_entries = read_registry(filepath=filepath)
    deployments = dict()
    for registry_entry in registry_entries:
        if registry_entry.chain_id != chain_id:
            continue
        contract_type = registry_entry.name
        contract_container = get_contract_container(contract_type)
        contract_instance = contract_container.at(registry_entry.address)
        deployments[contract_type] = contract_instance
    return deployments
