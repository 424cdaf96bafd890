import pytest

from deployment.tasks import load_tasks
from tests.conftest import PROJECT_DEPLOY_DIR

MERCHANT_ADDRESSES = [
    "0x1DB6990CFAD265EFE4A0BB986488C04CC49FEE53",
    "0xA3A3F5684FA066D9E5520FD5E592D87C322A58C2",
]


class RecordingEnv:
    """Stands in for a Deployer and records deploy requests."""

    def __init__(self, network_name, deployer):
        self.network_name = network_name
        self.deployer = deployer
        self.requests = list()

    def named_accounts(self):
        return {"deployer": self.deployer}

    def deploy(self, contract_name, sender=None, args=(), log=False):
        self.requests.append(dict(contract_name=contract_name, sender=sender, args=args, log=log))
        return f"{contract_name}@{self.network_name}"


@pytest.fixture
def registry():
    return load_tasks(PROJECT_DEPLOY_DIR)


def test_merchant_task_declares_single_tag(registry):
    merchant = registry.get("deploy_merchant")
    assert merchant.tags == ("Merchant",)
    assert merchant.dependencies == ()
    assert [t.name for t in registry.select(["Merchant"])] == ["deploy_merchant"]


def test_merchant_task_deploys_with_fixed_arguments(registry, deployer_account):
    env = RecordingEnv("sepolia", deployer_account)
    results = registry.run(env, tags=["Merchant"])

    assert results == {"deploy_merchant": "Merchant@sepolia"}
    assert len(env.requests) == 1
    request = env.requests[0]
    assert request["contract_name"] == "Merchant"
    assert request["sender"] is deployer_account
    assert list(request["args"]) == MERCHANT_ADDRESSES
    assert request["log"] is True


@pytest.mark.parametrize("network_name", ["local", "sepolia", "mainnet", "polygon"])
def test_merchant_arguments_do_not_depend_on_network(registry, deployer_account, network_name):
    env = RecordingEnv(network_name, deployer_account)
    registry.get("deploy_merchant").run(env)
    assert list(env.requests[0]["args"]) == MERCHANT_ADDRESSES
    assert env.requests[0]["log"] is True
