from typing import Any

import pytest

from solbuild import AbiUnit, ArtifactFormatError, Parameter, UnitType, abi_from_json, abi_to_json


def test_unit_from_json(token_abi: list[dict[str, Any]]) -> None:
    unit = AbiUnit.from_json(token_abi[1])
    assert unit.type == UnitType.FUNCTION
    assert unit.name == "transfer"
    assert unit.state_mutability == "nonpayable"
    assert unit.inputs == (
        Parameter(name="to", type="address", extra={"internalType": "address"}),
        Parameter(name="amount", type="uint256", extra={"internalType": "uint256"}),
    )
    assert unit.outputs == (Parameter(name="", type="bool", extra={"internalType": "bool"}),)
    assert unit.description is None
    assert not unit.is_state_variable


def test_unit_optional_fields() -> None:
    unit = AbiUnit.from_json({"type": "fallback", "stateMutability": "payable"})
    assert unit.name is None
    assert unit.inputs is None
    assert unit.outputs is None
    assert unit.to_json() == {"type": "fallback", "stateMutability": "payable"}


def test_unit_keeps_unknown_keys(token_abi: list[dict[str, Any]]) -> None:
    unit = AbiUnit.from_json(token_abi[3])
    assert unit.extra == {"anonymous": False}
    assert unit.inputs is not None
    assert unit.inputs[0].extra == {"indexed": True, "internalType": "address"}
    assert unit.to_json()["anonymous"] is False


def test_unit_json_key_order() -> None:
    unit = AbiUnit.from_json(
        {
            "description": "Does things.",
            "outputs": [],
            "anonymous": False,
            "inputs": [],
            "isStateVariable": True,
            "stateMutability": "view",
            "name": "foo",
            "type": "function",
        }
    )
    assert list(unit.to_json()) == [
        "type",
        "name",
        "stateMutability",
        "isStateVariable",
        "inputs",
        "outputs",
        "anonymous",
        "description",
    ]


def test_abi_round_trip(
    token_abi: list[dict[str, Any]], itoken_abi: list[dict[str, Any]]
) -> None:
    for json_abi in (token_abi, itoken_abi):
        abi = abi_from_json(json_abi)
        assert abi_from_json(abi_to_json(abi)) == abi


def test_parameter_with_description() -> None:
    param = Parameter(name="x", type="uint256", extra={"internalType": "uint256"})
    described = param.with_description("the value")
    assert described.description == "the value"
    assert described.extra == param.extra
    assert param.description is None
    assert described.to_json() == {
        "name": "x",
        "type": "uint256",
        "internalType": "uint256",
        "description": "the value",
    }


def test_unnamed_parameter() -> None:
    assert Parameter.from_json({"type": "uint256"}).name == ""


def test_unit_without_type() -> None:
    unit = AbiUnit.from_json({"name": "foo", "inputs": []})
    assert unit.type == UnitType.FUNCTION
    assert unit.to_json() == {"type": "function", "name": "foo", "inputs": []}


def test_invalid_entries() -> None:
    with pytest.raises(ArtifactFormatError, match="Unknown ABI entry type: method"):
        AbiUnit.from_json({"type": "method", "name": "foo"})

    with pytest.raises(ArtifactFormatError, match="An ABI entry must be a JSON object, got list"):
        AbiUnit.from_json([])

    with pytest.raises(ArtifactFormatError, match="`name` of an ABI entry of type `function`"):
        AbiUnit.from_json({"type": "function", "name": 1})

    with pytest.raises(ArtifactFormatError, match="`inputs` of an ABI entry .* must be a list"):
        AbiUnit.from_json({"type": "function", "name": "foo", "inputs": {}})

    with pytest.raises(ArtifactFormatError, match="An ABI parameter must have a string `type`"):
        AbiUnit.from_json({"type": "function", "name": "foo", "inputs": [{"name": "x"}]})

    with pytest.raises(ArtifactFormatError, match="`isStateVariable` .* must be a boolean"):
        AbiUnit.from_json({"type": "function", "name": "foo", "isStateVariable": "yes"})

    with pytest.raises(ArtifactFormatError, match="The ABI must be a list"):
        abi_from_json({"type": "function"})
