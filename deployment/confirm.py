from collections import OrderedDict

from ape.utils import ZERO_ADDRESS


def _confirm(prompt: str) -> None:
    """Exits when the user answers 'n'."""
    answer = input(f"{prompt} Y/N? ")
    if answer.lower().strip() == "n":
        print("Aborting deployment!")
        exit(-1)


def _continue() -> None:
    _confirm("Continue")


def _confirm_deployment(contract_name: str) -> None:
    _confirm(f"Deploy {contract_name}")


def _confirm_resolution(resolved_params: OrderedDict, contract_name: str) -> None:
    """Asks the user to confirm the constructor arguments for a single contract."""
    if not resolved_params:
        print(f"\n(i) No constructor arguments for {contract_name}")
        _confirm_deployment(contract_name)
        return

    print(f"\nConstructor arguments for {contract_name}")
    for name, resolved_value in resolved_params.items():
        print(f"\t{name}={resolved_value}")
    _confirm_deployment(contract_name)

    if any(value == ZERO_ADDRESS for value in resolved_params.values()):
        _confirm("Zero Address detected for a constructor argument; Continue?")
