from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum

JSON = None | bool | int | float | str | Sequence["JSON"] | Mapping[str, "JSON"]
"""Values serializable to JSON."""


class ArtifactFormatError(ValueError):
    """Raised when a compiler-generated JSON document does not have the expected shape."""


class UnitType(Enum):
    """Possible values of the ``type`` field of an ABI entry."""

    CONSTRUCTOR = "constructor"
    FUNCTION = "function"
    EVENT = "event"
    FALLBACK = "fallback"
    RECEIVE = "receive"
    ERROR = "error"


def _expect_mapping(value: JSON, what: str) -> Mapping[str, JSON]:
    if not isinstance(value, Mapping):
        raise ArtifactFormatError(f"{what} must be a JSON object, got {type(value).__name__}")
    return value


def _expect_optional_str(entry: Mapping[str, JSON], key: str, what: str) -> None | str:
    value = entry.get(key)
    if value is not None and not isinstance(value, str):
        raise ArtifactFormatError(f"`{key}` of {what} must be a string")
    return value


@dataclass(frozen=True)
class Parameter:
    """
    An input or an output of an ABI entry.
    An empty ``name`` means the parameter is positional.
    """

    name: str
    """Parameter name, possibly empty."""

    type: str
    """Canonical Solidity type of the parameter."""

    description: None | str = None
    """Documentation attached to the parameter."""

    extra: Mapping[str, JSON] = field(default_factory=dict)
    """Other keys of the JSON entry (``internalType``, ``indexed``, ``components``)."""

    @classmethod
    def from_json(cls, entry: JSON) -> "Parameter":
        """Creates this object from a JSON ABI parameter entry."""
        entry_typed = _expect_mapping(entry, "An ABI parameter")

        tp = entry_typed.get("type")
        if not isinstance(tp, str):
            raise ArtifactFormatError("An ABI parameter must have a string `type`")

        name = _expect_optional_str(entry_typed, "name", "an ABI parameter") or ""
        description = _expect_optional_str(entry_typed, "description", "an ABI parameter")
        extra = {
            key: value
            for key, value in entry_typed.items()
            if key not in ("name", "type", "description")
        }
        return cls(name=name, type=tp, description=description, extra=extra)

    def with_description(self, description: str) -> "Parameter":
        """Returns a copy of this parameter with the given description."""
        return Parameter(name=self.name, type=self.type, description=description, extra=self.extra)

    def to_json(self) -> dict[str, JSON]:
        """Returns this object's JSON ABI."""
        entry: dict[str, JSON] = {"name": self.name, "type": self.type}
        entry.update(self.extra)
        if self.description is not None:
            entry["description"] = self.description
        return entry


def _parameters_from_json(entries: JSON, what: str) -> tuple[Parameter, ...]:
    if not isinstance(entries, list):
        raise ArtifactFormatError(f"{what} must be a list")
    return tuple(Parameter.from_json(entry) for entry in entries)


@dataclass(frozen=True)
class AbiUnit:
    """
    One entry of a contract's ABI, possibly enriched with documentation.

    ``description`` and ``is_state_variable`` (``isStateVariable`` in JSON) are not part of
    the standard ABI; they are added when the entry is merged with the developer documentation.
    """

    type: UnitType
    """The kind of this entry."""

    name: None | str = None
    """Entry name; absent for constructors, fallback and receive functions."""

    state_mutability: None | str = None
    """Solidity state mutability (``pure``, ``view``, ``nonpayable``, ``payable``)."""

    inputs: None | tuple[Parameter, ...] = None
    """Input parameters, or event/error fields."""

    outputs: None | tuple[Parameter, ...] = None
    """Function outputs."""

    description: None | str = None
    """Documentation attached to the entry."""

    is_state_variable: bool = False
    """Whether this entry is a getter synthesized for a public state variable."""

    extra: Mapping[str, JSON] = field(default_factory=dict)
    """Other keys of the JSON entry (e.g. ``anonymous`` for events)."""

    @classmethod
    def from_json(cls, entry: JSON) -> "AbiUnit":
        """Creates this object from a JSON ABI entry."""
        entry_typed = _expect_mapping(entry, "An ABI entry")

        # An entry without a `type` is a function
        try:
            unit_type = UnitType(entry_typed.get("type", UnitType.FUNCTION.value))
        except ValueError as exc:
            raise ArtifactFormatError(f"Unknown ABI entry type: {entry_typed.get('type')}") from exc

        what = f"an ABI entry of type `{unit_type.value}`"
        name = _expect_optional_str(entry_typed, "name", what)
        state_mutability = _expect_optional_str(entry_typed, "stateMutability", what)
        description = _expect_optional_str(entry_typed, "description", what)

        inputs = None
        if "inputs" in entry_typed:
            inputs = _parameters_from_json(entry_typed["inputs"], f"`inputs` of {what}")

        outputs = None
        if "outputs" in entry_typed:
            outputs = _parameters_from_json(entry_typed["outputs"], f"`outputs` of {what}")

        is_state_variable = entry_typed.get("isStateVariable", False)
        if not isinstance(is_state_variable, bool):
            raise ArtifactFormatError(f"`isStateVariable` of {what} must be a boolean")

        extra = {key: value for key, value in entry_typed.items() if key not in _KNOWN_UNIT_KEYS}

        return cls(
            type=unit_type,
            name=name,
            state_mutability=state_mutability,
            inputs=inputs,
            outputs=outputs,
            description=description,
            is_state_variable=is_state_variable,
            extra=extra,
        )

    def to_json(self) -> dict[str, JSON]:
        """Returns this object's JSON ABI."""
        entry: dict[str, JSON] = {"type": self.type.value}
        if self.name is not None:
            entry["name"] = self.name
        if self.state_mutability is not None:
            entry["stateMutability"] = self.state_mutability
        if self.is_state_variable:
            entry["isStateVariable"] = True
        if self.inputs is not None:
            entry["inputs"] = [param.to_json() for param in self.inputs]
        if self.outputs is not None:
            entry["outputs"] = [param.to_json() for param in self.outputs]
        entry.update(self.extra)
        if self.description is not None:
            entry["description"] = self.description
        return entry


_KNOWN_UNIT_KEYS = frozenset(
    [
        "type",
        "name",
        "stateMutability",
        "inputs",
        "outputs",
        "description",
        "isStateVariable",
    ]
)


def abi_from_json(json_abi: JSON) -> tuple[AbiUnit, ...]:
    """Creates a sequence of ABI units from a JSON ABI (e.g. generated by a Solidity compiler)."""
    if not isinstance(json_abi, list):
        raise ArtifactFormatError("The ABI must be a list")
    return tuple(AbiUnit.from_json(entry) for entry in json_abi)


def abi_to_json(abi: Sequence[AbiUnit]) -> list[JSON]:
    """Returns the JSON representation of a sequence of ABI units."""
    return [unit.to_json() for unit in abi]

