import typing
from collections import OrderedDict
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from ape.api import AccountAPI
from ape.cli.choices import select_account
from ape.contracts.base import ContractContainer, ContractInstance
from ape_accounts.accounts import KeyfileAccount
from eth_abi import is_encodable

from deployment.accounts import NamedAccounts
from deployment.confirm import _confirm_resolution, _continue
from deployment.constants import DEPLOYER
from deployment.networks import get_chain_id, get_network_name, is_local_network
from deployment.registry import find_entry, registry_from_ape_deployments, serialize_args
from deployment.utils import (
    _load_yaml,
    bytecode_hash,
    check_plugins,
    get_contract_container,
    validate_config,
    verify_contracts,
)


def _constructor_arg_names(abi_inputs: List[Any], count: int) -> List[str]:
    names = [getattr(abi_input, "name", None) for abi_input in abi_inputs]
    names += [None] * (count - len(names))
    return [name or f"arg{position}" for position, name in enumerate(names[:count])]


def _abi_value(value: Any) -> Any:
    """Replaces accounts and contracts with their addresses, leaving other values as-is."""
    if isinstance(value, (list, tuple)):
        return [_abi_value(v) for v in value]
    if hasattr(value, "address"):
        return str(value.address)
    return value


def _validate_constructor_args(
    contract_name: str, abi_inputs: List[Any], args: Sequence[Any]
) -> None:
    """Validates positional constructor arguments against the constructor ABI."""
    if len(args) != len(abi_inputs):
        raise Deployer.InvalidArguments(
            f"Constructor arguments length mismatch - "
            f"{contract_name} ABI requires {len(abi_inputs)}, Got {len(args)}."
        )

    # plain ABI encoding; ENS names are rejected as addresses
    for position, (abi_input, value) in enumerate(zip(abi_inputs, map(_abi_value, args))):
        if not is_encodable(abi_input.type, value):
            raise Deployer.InvalidArguments(
                f"{contract_name} constructor argument at position {position} has a value "
                f"'{value}' whose type does not match expected ABI type '{abi_input.type}'"
            )


class Transactor:
    """
    Represents an ape account used to sign deployment transactions.
    """

    def __init__(self, account: typing.Optional[AccountAPI] = None, autosign: bool = False):
        if account is None:
            self._account = select_account()
        else:
            self._account = account
        if autosign:
            print("WARNING: Autosign is enabled. Transactions will be signed automatically.")
            if isinstance(self._account, KeyfileAccount):
                self._account.set_autosign(autosign)
        self._autosign = autosign

    def get_account(self) -> AccountAPI:
        """Returns the transactor account."""
        return self._account


class Deployer(Transactor):
    """
    The environment handed to deployment tasks: named accounts,
    a deploy primitive that records and optionally logs each deployment,
    and publication of the results to the registry.
    """

    class InvalidArguments(Exception):
        """Raised when constructor arguments do not match the constructor ABI"""

    def __init__(
        self,
        config: typing.Dict,
        path: Path,
        verify: bool,
        account: typing.Optional[AccountAPI] = None,
        autosign: bool = False,
        reuse: typing.Optional[bool] = None,
    ):
        check_plugins(verify=verify)
        self.path = path
        self.config = config
        self.registry_filepath = validate_config(config=self.config)
        self.accounts = NamedAccounts.from_config(self.config)
        self.network_name = get_network_name()
        self.chain_id = get_chain_id()

        self._account_override = account is not None
        if account is None:
            try:
                account = self.accounts.get(DEPLOYER, self.network_name)
            except NamedAccounts.Unresolvable:
                print(f"(i) No '{DEPLOYER}' named account for {self.network_name}.")
        super().__init__(account, autosign)

        self.verify = verify
        # local chains do not outlive a run, so their registry entries are never reused
        self.reuse = (not is_local_network()) if reuse is None else reuse

        self.deployments: List[ContractInstance] = list()
        self._deployment_args: Dict[str, List[Any]] = dict()
        self._bytecode_hashes: Dict[str, str] = dict()
        self._instances: Dict[str, ContractInstance] = dict()

        self._print_deployment_info()

        if not self._autosign:
            # Confirms the start of the deployment.
            _continue()

    @classmethod
    def from_yaml(cls, filepath: Path, *args, **kwargs) -> "Deployer":
        config = _load_yaml(filepath)
        return cls(config=config, path=filepath, *args, **kwargs)

    def named_accounts(self) -> Dict[str, AccountAPI]:
        """
        Returns the named accounts for the connected network.
        An explicitly selected account always acts as the deployer.
        """
        named = self.accounts.resolve(self.network_name)
        if self._account_override or DEPLOYER not in named:
            named[DEPLOYER] = self.get_account()
        return named

    def _deployed_in_run(
        self, contract_name: str, args: Sequence[Any], code_hash: str
    ) -> Optional[ContractInstance]:
        """Returns an identical deployment made earlier in this run, if any."""
        instance = self._instances.get(contract_name)
        if instance is None:
            return None
        previous_args = serialize_args(self._deployment_args[contract_name])
        if previous_args != serialize_args(args):
            return None
        if self._bytecode_hashes[contract_name] != code_hash:
            return None
        return instance

    def _reusable(self, contract_name: str, args: Sequence[Any], code_hash: str):
        if not self.reuse:
            return None
        entry = find_entry(self.registry_filepath, chain_id=self.chain_id, name=contract_name)
        if entry is None:
            return None
        if entry.args != serialize_args(args) or entry.bytecode_hash != code_hash:
            return None
        return entry

    def deploy(
        self,
        contract_name: str,
        sender: Optional[AccountAPI] = None,
        args: Sequence[Any] = (),
        log: bool = False,
    ) -> ContractInstance:
        """
        Deploys a contract by name with positional constructor arguments,
        unless an identical deployment was already made in this run
        or is recorded in the registry for this chain.
        """
        sender = sender or self.get_account()
        args = list(args)
        container = get_contract_container(contract_name)
        abi_inputs = container.constructor.abi.inputs
        _validate_constructor_args(contract_name, abi_inputs, args)

        code_hash = bytecode_hash(container)
        deployed = self._deployed_in_run(contract_name, args, code_hash)
        if deployed is not None:
            if log:
                print(f'reusing "{contract_name}" at {deployed.address}')
            return deployed

        existing = self._reusable(contract_name, args, code_hash)
        if existing is not None:
            if log:
                print(f'reusing "{contract_name}" at {existing.address}')
            return container.at(existing.address)

        if not self._autosign:
            resolved_params = OrderedDict(
                zip(_constructor_arg_names(abi_inputs, len(args)), serialize_args(args))
            )
            _confirm_resolution(resolved_params, contract_name)

        instance = self._deploy_contract(container, sender, args)
        if log:
            receipt = instance.receipt
            print(
                f'deploying "{contract_name}" (tx: {receipt.txn_hash})...: '
                f"deployed at {instance.address} with {receipt.gas_used} gas"
            )

        self.deployments.append(instance)
        self._deployment_args[contract_name] = args
        self._bytecode_hashes[contract_name] = code_hash
        self._instances[contract_name] = instance
        return instance

    @staticmethod
    def _deploy_contract(
        container: ContractContainer, sender: AccountAPI, args: Sequence[Any]
    ) -> ContractInstance:
        return sender.deploy(container, *args)

    def finalize(self) -> Optional[Path]:
        """
        Publishes new deployments to the registry and optionally to block explorers.
        """
        if not self.deployments:
            print("(i) No new deployments to record.")
            return None

        registry_filepath = registry_from_ape_deployments(
            deployments=self.deployments,
            output_filepath=self.registry_filepath,
            args=self._deployment_args,
            bytecode_hashes=self._bytecode_hashes,
        )
        if self.verify:
            verify_contracts(contracts=self.deployments)
        return registry_filepath

    def _print_deployment_info(self):
        print(
            f"Account: {self.get_account().address}",
            f"Config: {self.path}",
            f"Registry: {self.registry_filepath}",
            f"Verify: {self.verify}",
            f"Reuse: {self.reuse}",
            f"Network: {self.network_name}",
            f"Chain ID: {self.chain_id}",
            sep="\n",
        )
