from pathlib import Path
from types import SimpleNamespace

import pytest

import deployment.deployer

# Common constants
CHAIN_ID = 11155111
NETWORK_NAME = "sepolia"
PROJECT_DEPLOY_DIR = Path(__file__).parent.parent / "deploy"
BYTECODE = "0x6080604052348015600f57600080fd5b50"

MERCHANT_INPUTS = [("address", "_token"), ("address", "_treasury")]


# Fakes standing in for ape contract containers, instances and accounts
class FakeAbiEntry:
    def __init__(self, type_, name=None, inputs=None):
        self.type = type_
        self.name = name
        self.inputs = inputs or []

    def model_dump(self, mode=None):
        data = {"type": self.type, "inputs": [vars(i) for i in self.inputs]}
        if self.name:
            data["name"] = self.name
        return data


class FakeContainer:
    def __init__(self, name, inputs=MERCHANT_INPUTS, bytecode=BYTECODE):
        abi_inputs = [SimpleNamespace(type=t, name=n) for t, n in inputs]
        constructor_abi = FakeAbiEntry("constructor", inputs=abi_inputs)
        self.contract_type = SimpleNamespace(
            name=name,
            abi=[constructor_abi, FakeAbiEntry("function", name="pay")],
            deployment_bytecode=SimpleNamespace(bytecode=bytecode),
        )
        self.constructor = SimpleNamespace(abi=constructor_abi)

    def at(self, address):
        return FakeInstance(container=self, address=address, receipt=None)


class FakeInstance:
    def __init__(self, container, address, receipt):
        self.contract_type = container.contract_type
        self.address = address
        self.receipt = receipt


class FakeAccount:
    def __init__(self, index):
        self.address = "0x" + f"{0xACC0 + index:040x}"
        self.deploy_calls = list()
        self._nonce = 0

    def deploy(self, container, *args):
        self.deploy_calls.append((container.contract_type.name, args))
        self._nonce += 1
        receipt = SimpleNamespace(
            txn_hash="0x" + f"{self._nonce:064x}",
            gas_used=123_456,
            chain_id=CHAIN_ID,
            block_number=100 + self._nonce,
            transaction=SimpleNamespace(sender=self.address),
        )
        address = "0x" + f"{0xC0DE0000 + len(self.deploy_calls):040x}"
        return FakeInstance(container=container, address=address, receipt=receipt)


# Fixtures
@pytest.fixture
def deployer_account():
    return FakeAccount(0)


@pytest.fixture
def other_account():
    return FakeAccount(1)


@pytest.fixture
def containers(monkeypatch):
    registry = {"Merchant": FakeContainer("Merchant")}

    def get_contract_container(name):
        try:
            return registry[name]
        except KeyError:
            raise ValueError(f"No contract found with name '{name}'.")

    monkeypatch.setattr(deployment.deployer, "get_contract_container", get_contract_container)
    return registry


@pytest.fixture
def network(monkeypatch):
    monkeypatch.setattr(deployment.deployer, "get_network_name", lambda: NETWORK_NAME)
    monkeypatch.setattr(deployment.deployer, "get_chain_id", lambda: CHAIN_ID)
    monkeypatch.setattr(deployment.deployer, "is_local_network", lambda: False)
    return SimpleNamespace(name=NETWORK_NAME, chain_id=CHAIN_ID)


@pytest.fixture
def config(tmp_path):
    return {
        "deployment": {"name": "merchant-test"},
        "artifacts": {"dir": str(tmp_path / "artifacts"), "filename": "merchant.json"},
        "named_accounts": {"deployer": {"local": 0, NETWORK_NAME: 1}},
    }


@pytest.fixture
def registry_filepath(tmp_path):
    return tmp_path / "artifacts" / "merchant.json"
