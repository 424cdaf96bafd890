import json

from deployment.registry import (
    RegistryEntry,
    find_entry,
    read_registry,
    serialize_args,
    write_registry,
)

ABI = [
    {"type": "function", "name": "pay", "inputs": []},
    {"type": "constructor", "inputs": []},
]


def make_entry(chain_id, name, address="0x" + "11" * 20, args=None):
    return RegistryEntry(
        chain_id=chain_id,
        name=name,
        address=address,
        abi=list(ABI),
        tx_hash="0x" + "ab" * 32,
        block_number=42,
        deployer="0x" + "22" * 20,
        args=args or [],
        bytecode_hash="0x" + "cd" * 32,
    )


def test_write_and_read_registry(tmp_path):
    filepath = tmp_path / "artifacts" / "registry.json"
    entries = [
        make_entry(137, "Merchant"),
        make_entry(1, "Token"),
        make_entry(1, "Merchant", args=["0xA", "0xB"]),
    ]
    assert write_registry(entries, filepath) == filepath

    data = json.loads(filepath.read_text())
    assert list(data) == ["1", "137"]
    assert list(data["1"]) == ["Merchant", "Token"]
    assert data["1"]["Merchant"]["args"] == ["0xA", "0xB"]
    # abi entries are sorted by type then name
    assert [e["type"] for e in data["1"]["Merchant"]["abi"]] == ["constructor", "function"]

    read_back = read_registry(filepath)
    merchant = next(e for e in read_back if e.chain_id == 1 and e.name == "Merchant")
    assert merchant.args == ["0xA", "0xB"]
    assert merchant.bytecode_hash == "0x" + "cd" * 32
    assert len(read_back) == 3


def test_write_merges_into_existing_registry(tmp_path):
    filepath = tmp_path / "registry.json"
    write_registry([make_entry(1, "Merchant"), make_entry(5, "Token")], filepath)

    new_address = "0x" + "33" * 20
    write_registry([make_entry(1, "Merchant", address=new_address)], filepath)

    entries = {(e.chain_id, e.name): e for e in read_registry(filepath)}
    assert set(entries) == {(1, "Merchant"), (5, "Token")}
    assert entries[(1, "Merchant")].address == new_address


def test_write_without_entries(tmp_path, capsys):
    filepath = tmp_path / "registry.json"
    assert write_registry([], filepath) == filepath
    assert not filepath.exists()
    assert "No entries provided." in capsys.readouterr().out


def test_find_entry(tmp_path):
    filepath = tmp_path / "registry.json"
    assert find_entry(filepath, chain_id=1, name="Merchant") is None

    write_registry([make_entry(1, "Merchant"), make_entry(5, "Merchant")], filepath)
    assert find_entry(filepath, chain_id=5, name="Merchant").chain_id == 5
    assert find_entry(filepath, chain_id=1, name="Token") is None


def test_read_registry_without_deployment_metadata(tmp_path):
    filepath = tmp_path / "registry.json"
    legacy = {
        "1": {
            "Merchant": {
                "address": "0x" + "11" * 20,
                "abi": [],
                "tx_hash": "0x" + "ab" * 32,
                "block_number": 1,
                "deployer": "0x" + "22" * 20,
            }
        }
    }
    filepath.write_text(json.dumps(legacy))
    (entry,) = read_registry(filepath)
    assert entry.args == []
    assert entry.bytecode_hash == ""


class HasAddress:
    address = "0x" + "44" * 20


def test_serialize_args():
    args = ["0x1DB6990CFAD265EFE4A0BB986488C04CC49FEE53", 7, b"\x01\x02", [HasAddress(), True]]
    assert serialize_args(args) == [
        "0x1DB6990CFAD265EFE4A0BB986488C04CC49FEE53",
        7,
        "0x0102",
        ["0x" + "44" * 20, True],
    ]
