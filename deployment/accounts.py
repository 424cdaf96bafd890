import typing
from typing import Any, Dict, Union

from ape import accounts
from ape.api import AccountAPI

from deployment.constants import DEFAULT_NETWORK_KEY

AccountSpec = Union[int, str]


def _load_account(spec: AccountSpec) -> AccountAPI:
    """Loads a test account by index or a local account by alias."""
    if isinstance(spec, int):
        return accounts.test_accounts[spec]
    return accounts.load(spec)


class NamedAccounts:
    """
    Maps account names used by deployment tasks (e.g. 'deployer')
    to ape accounts, optionally per network.

    Config format:

        named_accounts:
          deployer:
            local: 0             # test account index
            mainnet: my-alias    # ape account alias
          treasury: 1            # same account on every network
    """

    class Invalid(Exception):
        """Raised when the named accounts config is malformed"""

    class Unresolvable(Exception):
        """Raised when a named account has no entry for the requested network"""

    def __init__(
        self,
        specs: typing.Dict[str, typing.Dict[str, AccountSpec]],
        loader: typing.Optional[typing.Callable[[AccountSpec], AccountAPI]] = None,
    ):
        self.specs = specs
        self._loader = loader or _load_account
        self._cache: Dict[str, Dict[str, AccountAPI]] = dict()

    @classmethod
    def from_config(cls, config: typing.Dict, **kwargs) -> "NamedAccounts":
        raw_specs = config.get("named_accounts") or dict()
        if not isinstance(raw_specs, dict):
            raise cls.Invalid("named_accounts must be a mapping.")

        specs = dict()
        for name, value in raw_specs.items():
            if isinstance(value, dict):
                network_specs = dict(value)
            else:
                network_specs = {DEFAULT_NETWORK_KEY: value}
            for network_name, spec in network_specs.items():
                cls._validate_spec(name, network_name, spec)
            specs[name] = network_specs

        return cls(specs=specs, **kwargs)

    @classmethod
    def _validate_spec(cls, name: str, network_name: str, spec: Any) -> None:
        # bool is an int subclass; 'true' in YAML is never an account
        if isinstance(spec, bool) or not isinstance(spec, (int, str)):
            raise cls.Invalid(
                f"Named account '{name}' for '{network_name}' must be an "
                f"account index or alias, got {spec!r}."
            )
        if isinstance(spec, int) and spec < 0:
            raise cls.Invalid(f"Named account '{name}' has a negative index {spec}.")
        if isinstance(spec, str) and not spec.strip():
            raise cls.Invalid(f"Named account '{name}' has an empty alias.")

    @property
    def names(self) -> typing.List[str]:
        return list(self.specs)

    def spec_for(self, name: str, network_name: str) -> AccountSpec:
        """Returns the account index or alias configured for a name on a network."""
        try:
            network_specs = self.specs[name]
        except KeyError:
            raise self.Unresolvable(f"No named account '{name}' is configured.")

        if network_name in network_specs:
            return network_specs[network_name]
        if DEFAULT_NETWORK_KEY in network_specs:
            return network_specs[DEFAULT_NETWORK_KEY]
        raise self.Unresolvable(
            f"Named account '{name}' has no entry for network '{network_name}' "
            f"and no '{DEFAULT_NETWORK_KEY}'."
        )

    def get(self, name: str, network_name: str) -> AccountAPI:
        """Returns a single named account for a network."""
        network_cache = self._cache.setdefault(network_name, dict())
        if name not in network_cache:
            network_cache[name] = self._loader(self.spec_for(name, network_name))
        return network_cache[name]

    def resolve(self, network_name: str) -> Dict[str, AccountAPI]:
        """
        Returns the named accounts configured for a network.
        Names without an entry for the network (and no default) are omitted.
        """
        resolved = dict()
        for name in self.specs:
            try:
                resolved[name] = self.get(name, network_name)
            except self.Unresolvable:
                continue
        return resolved
