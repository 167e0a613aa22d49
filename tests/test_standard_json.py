from pathlib import Path

import pytest

from solbuild import (
    ArtifactFormatError,
    InputError,
    build_standard_json_inputs,
    list_directory,
    standard_json_input,
)

BASE_CONFIG = {
    "language": "Solidity",
    "sources": {"Placeholder.sol": {"content": ""}},
    "settings": {
        "optimizer": {"enabled": True, "runs": 200},
        "outputSelection": {"*": {"*": ["abi", "evm.deployedBytecode.object", "metadata"]}},
    },
}


def test_standard_json_input() -> None:
    config = standard_json_input(BASE_CONFIG, "Token.sol", "contract Token {}")
    assert config["sources"] == {"Token.sol": {"content": "contract Token {}"}}
    assert config["language"] == "Solidity"
    assert config["settings"] == BASE_CONFIG["settings"]

    # The base config is not shared with the result
    assert config["settings"] is not BASE_CONFIG["settings"]
    assert BASE_CONFIG["sources"] == {"Placeholder.sol": {"content": ""}}


def test_standard_json_input_invalid_config() -> None:
    with pytest.raises(ArtifactFormatError, match="base config must be a JSON object"):
        standard_json_input([], "Token.sol", "")


def test_build_standard_json_inputs(tmp_path: Path) -> None:
    token = tmp_path / "Token.sol"
    token.write_text("contract Token {}\n")
    vault = tmp_path / "Vault.v2.sol"
    vault.write_text("contract Vault {}\n")

    inputs = build_standard_json_inputs(BASE_CONFIG, [token, vault])
    assert list(inputs) == ["Token.json", "Vault.json"]
    assert inputs["Token.json"]["sources"] == {"Token.sol": {"content": "contract Token {}\n"}}
    assert inputs["Vault.json"]["sources"] == {"Vault.v2.sol": {"content": "contract Vault {}\n"}}


def test_build_standard_json_inputs_skips_hidden_files(tmp_path: Path) -> None:
    (tmp_path / "Token.sol").write_text("contract Token {}\n")
    (tmp_path / ".gitkeep").write_text("")
    (tmp_path / ".DS_Store").write_bytes(b"\x00\x00\x00\x01Bud1\xff\xfe")

    inputs = build_standard_json_inputs(BASE_CONFIG, list_directory(tmp_path))
    assert list(inputs) == ["Token.json"]


def test_build_standard_json_inputs_binary_source(tmp_path: Path) -> None:
    source = tmp_path / "Token.sol"
    source.write_bytes(b"contract \xff {}")
    with pytest.raises(InputError, match="is not a UTF-8 text file"):
        build_standard_json_inputs(BASE_CONFIG, [source])
