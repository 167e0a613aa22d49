import json
from copy import deepcopy
from pathlib import Path
from typing import Any

import pytest

TOKEN_ABI: list[dict[str, Any]] = [
    {
        "type": "constructor",
        "stateMutability": "nonpayable",
        "inputs": [{"name": "supply", "type": "uint256", "internalType": "uint256"}],
    },
    {
        "type": "function",
        "name": "transfer",
        "stateMutability": "nonpayable",
        "inputs": [
            {"name": "to", "type": "address", "internalType": "address"},
            {"name": "amount", "type": "uint256", "internalType": "uint256"},
        ],
        "outputs": [{"name": "", "type": "bool", "internalType": "bool"}],
    },
    {
        "type": "function",
        "name": "MAX_SUPPLY",
        "stateMutability": "view",
        "inputs": [],
        "outputs": [{"name": "", "type": "uint256", "internalType": "uint256"}],
    },
    {
        "type": "event",
        "name": "Transfer",
        "anonymous": False,
        "inputs": [
            {"name": "from", "type": "address", "indexed": True, "internalType": "address"},
            {"name": "to", "type": "address", "indexed": True, "internalType": "address"},
            {"name": "value", "type": "uint256", "indexed": False, "internalType": "uint256"},
        ],
    },
]

TOKEN_DEVDOC: dict[str, Any] = {
    "kind": "dev",
    "version": 1,
    "title": "A token",
    "methods": {
        "constructor": {"params": {"supply": "The initial supply."}},
        "transfer(address,uint256)": {
            "details": "Moves tokens from the caller.",
            "returns": {"_0": "Whether the transfer succeeded."},
        },
    },
    "stateVariables": {"MAX_SUPPLY": {"details": "The supply cap."}},
}

ITOKEN_ABI: list[dict[str, Any]] = [
    {
        "type": "function",
        "name": "transfer",
        "stateMutability": "nonpayable",
        "inputs": [
            {"name": "to", "type": "address", "internalType": "address"},
            {"name": "amount", "type": "uint256", "internalType": "uint256"},
        ],
        "outputs": [{"name": "", "type": "bool", "internalType": "bool"}],
    },
    {
        "type": "function",
        "name": "balanceOf",
        "stateMutability": "view",
        "inputs": [{"name": "account", "type": "address", "internalType": "address"}],
        "outputs": [{"name": "", "type": "uint256", "internalType": "uint256"}],
    },
    {
        "type": "event",
        "name": "Transfer",
        "anonymous": False,
        "inputs": [
            {"name": "from", "type": "address", "indexed": True, "internalType": "address"},
            {"name": "to", "type": "address", "indexed": True, "internalType": "address"},
            {"name": "value", "type": "uint256", "indexed": False, "internalType": "uint256"},
        ],
    },
]

ITOKEN_DEVDOC: dict[str, Any] = {
    "kind": "dev",
    "version": 1,
    "methods": {
        "transfer(address,uint256)": {
            "details": "Transfers tokens.",
            "params": {"to": "The recipient.", "amount": "The amount to transfer."},
        },
        "balanceOf(address)": {
            "details": "Returns the balance.",
            "params": {"account": "The account to query."},
            "returns": {"_0": "The balance."},
        },
    },
    "events": {
        "Transfer(address,address,uint256)": {
            "details": "Emitted on every transfer.",
            "params": {"from": "The sender.", "to": "The recipient.", "value": "The amount."},
        },
    },
}

TOKEN_BYTECODE = "6080604052348015600f57600080fd5b50"


def make_metadata(source_path: str, abi: list[dict[str, Any]], devdoc: dict[str, Any]) -> str:
    return json.dumps(
        {
            "compiler": {"version": "0.8.24+commit.e11b9ed9"},
            "language": "Solidity",
            "output": {"abi": abi, "devdoc": devdoc},
            "sources": {source_path: {"keccak256": "0x" + "ab" * 32}},
            "version": 1,
        },
        separators=(",", ":"),
    )


def make_artifact(
    source_path: str,
    abi: list[dict[str, Any]],
    devdoc: dict[str, Any],
    bytecode: str = TOKEN_BYTECODE,
) -> dict[str, Any]:
    return {
        "abi": abi,
        "devdoc": devdoc,
        "metadata": make_metadata(source_path, abi, devdoc),
        "evm": {"deployedBytecode": {"object": bytecode}},
    }


@pytest.fixture
def compiler_output() -> dict[str, Any]:
    return {
        "contracts": {
            "src/Token.sol": {"Token": make_artifact("src/Token.sol", TOKEN_ABI, TOKEN_DEVDOC)},
            "src/interfaces/IToken.sol": {
                "IToken": make_artifact("src/interfaces/IToken.sol", ITOKEN_ABI, ITOKEN_DEVDOC, "")
            },
            "src/Vault.sol": {
                "Vault": make_artifact(
                    "src/Vault.sol",
                    [{"type": "function", "name": "deposit", "inputs": [], "outputs": []}],
                    {},
                    "73" + "00" * 20 + "6080",
                )
            },
            "src/test/Token.t.sol": {
                "TokenTest": make_artifact("src/test/Token.t.sol", [], {}, "6080")
            },
            "lib/forge-std/src/Test.sol": {
                "Test": make_artifact("lib/forge-std/src/Test.sol", [], {}, "6080")
            },
        }
    }


@pytest.fixture
def compiler_output_file(tmp_path: Path, compiler_output: dict[str, Any]) -> Path:
    path = tmp_path / "combined.json"
    path.write_text(json.dumps(compiler_output))
    return path


@pytest.fixture
def token_abi() -> list[dict[str, Any]]:
    return deepcopy(TOKEN_ABI)


@pytest.fixture
def token_devdoc() -> dict[str, Any]:
    return deepcopy(TOKEN_DEVDOC)


@pytest.fixture
def itoken_abi() -> list[dict[str, Any]]:
    return deepcopy(ITOKEN_ABI)


@pytest.fixture
def itoken_devdoc() -> dict[str, Any]:
    return deepcopy(ITOKEN_DEVDOC)
