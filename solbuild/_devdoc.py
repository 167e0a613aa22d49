from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

from ._abi import JSON, AbiUnit, ArtifactFormatError, UnitType


def _str_mapping_from_json(value: JSON, what: str) -> dict[str, str]:
    if not isinstance(value, Mapping) or not all(isinstance(item, str) for item in value.values()):
        raise ArtifactFormatError(f"{what} must be a mapping of names to strings")
    return dict(value)


@dataclass(frozen=True)
class DevdocUnit:
    """Developer documentation attached to one ABI entry or state variable."""

    details: None | str = None
    """Documentation of the entry itself."""

    params: Mapping[str, str] = field(default_factory=dict)
    """Parameter descriptions keyed by the parameter name."""

    returns: Mapping[str, str] = field(default_factory=dict)
    """
    Output descriptions keyed by the output name,
    or by ``_<index>`` for an unnamed output.
    """

    extra: Mapping[str, JSON] = field(default_factory=dict)
    """Other keys of the JSON entry (``custom:...`` tags, ``return`` of state variables)."""

    @classmethod
    def from_json(cls, entry: JSON) -> "DevdocUnit":
        if not isinstance(entry, Mapping):
            raise ArtifactFormatError("A devdoc entry must be a JSON object")

        details = entry.get("details")
        if details is not None and not isinstance(details, str):
            raise ArtifactFormatError("`details` of a devdoc entry must be a string")

        params = _str_mapping_from_json(entry.get("params", {}), "`params` of a devdoc entry")
        returns = _str_mapping_from_json(entry.get("returns", {}), "`returns` of a devdoc entry")
        extra = {
            key: value
            for key, value in entry.items()
            if key not in ("details", "params", "returns")
        }
        return cls(details=details, params=params, returns=returns, extra=extra)

    def to_json(self) -> dict[str, JSON]:
        entry: dict[str, JSON] = {}
        if self.details is not None:
            entry["details"] = self.details
        if self.params:
            entry["params"] = dict(self.params)
        if self.returns:
            entry["returns"] = dict(self.returns)
        entry.update(self.extra)
        return entry


def _units_from_json(devdoc: Mapping[str, JSON], key: str) -> None | dict[str, DevdocUnit]:
    if key not in devdoc:
        return None
    section = devdoc[key]
    if not isinstance(section, Mapping):
        raise ArtifactFormatError(f"`{key}` of the devdoc must be a JSON object")
    return {signature: DevdocUnit.from_json(entry) for signature, entry in section.items()}


def _find_by_bare_name(
    section: None | Mapping[str, DevdocUnit], name: None | str
) -> None | DevdocUnit:
    # Overloads are not told apart: the first signature with a matching name wins.
    for signature, unit in (section or {}).items():
        if signature.split("(")[0] == name:
            return unit
    return None


@dataclass(frozen=True)
class Devdoc:
    """
    Developer documentation of a contract, as generated by the Solidity compiler.

    A section is ``None`` if the JSON document does not have it,
    so that an empty section survives the round trip.
    """

    methods: None | Mapping[str, DevdocUnit] = None
    """
    Function documentation keyed by the function signature
    (e.g. ``transfer(address,uint256)``); the constructor is keyed as ``constructor``.
    """

    events: None | Mapping[str, DevdocUnit] = None
    """Event documentation keyed by the event signature."""

    state_variables: None | Mapping[str, DevdocUnit] = None
    """Public state variable documentation keyed by the variable name."""

    extra: Mapping[str, JSON] = field(default_factory=dict)
    """Other keys (``title``, ``author``, ``kind``, ``version`` etc)."""

    @classmethod
    def from_json(cls, devdoc: JSON) -> "Devdoc":
        """Creates this object from a ``devdoc`` compiler output."""
        if not isinstance(devdoc, Mapping):
            raise ArtifactFormatError("The devdoc must be a JSON object")

        return cls(
            methods=_units_from_json(devdoc, "methods"),
            events=_units_from_json(devdoc, "events"),
            state_variables=_units_from_json(devdoc, "stateVariables"),
            extra={
                key: value
                for key, value in devdoc.items()
                if key not in ("methods", "events", "stateVariables")
            },
        )

    @property
    def title(self) -> None | str:
        """The contract title, if documented."""
        title = self.extra.get("title")
        return title if isinstance(title, str) else None

    def find_unit(self, abi_unit: AbiUnit) -> None | DevdocUnit:
        """
        Returns the documentation for the given ABI entry.

        Events are looked up in ``events``, everything else in ``methods``,
        matching the entry name against the part of the signature before the first ``(``.
        """
        if abi_unit.type == UnitType.CONSTRUCTOR:
            return (self.methods or {}).get("constructor")
        section = self.events if abi_unit.type == UnitType.EVENT else self.methods
        return _find_by_bare_name(section, abi_unit.name)

    def find_state_variable(self, abi_unit: AbiUnit) -> None | DevdocUnit:
        """Returns the state variable documentation for the given ABI entry, if there is any."""
        if abi_unit.type in (UnitType.CONSTRUCTOR, UnitType.EVENT) or abi_unit.name is None:
            return None
        return (self.state_variables or {}).get(abi_unit.name)

    def to_json(self) -> dict[str, JSON]:
        devdoc: dict[str, JSON] = dict(self.extra)
        sections = (
            ("methods", self.methods),
            ("events", self.events),
            ("stateVariables", self.state_variables),
        )
        for key, section in sections:
            if section is not None:
                devdoc[key] = {signature: unit.to_json() for signature, unit in section.items()}
        return devdoc


def deep_merge(base: Mapping[str, JSON], update: Mapping[str, JSON]) -> dict[str, JSON]:
    """
    Recursively merges two JSON objects into a new one.
    Nested objects are merged key by key; any other value from ``update`` replaces
    the one in ``base``.
    """
    merged = dict(base)
    for key, value in update.items():
        current = merged.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = value
    return merged


def combine_devdocs(devdocs: Iterable[Mapping[str, JSON]]) -> Devdoc:
    """
    Combines the ``events`` and ``methods`` sections of several raw devdocs into one devdoc.
    Entries under the same signature are deep-merged, with later devdocs taking precedence.
    """
    events: dict[str, JSON] = {}
    methods: dict[str, JSON] = {}
    for devdoc in devdocs:
        for combined, section_name in ((events, "events"), (methods, "methods")):
            section = devdoc.get(section_name, {})
            if not isinstance(section, Mapping):
                raise ArtifactFormatError(f"`{section_name}` of the devdoc must be a JSON object")
            for signature, entry in section.items():
                if not isinstance(entry, Mapping):
                    raise ArtifactFormatError(f"Devdoc entry `{signature}` must be a JSON object")
                existing = combined.get(signature, {})
                # Both are JSON objects here
                combined[signature] = deep_merge(existing, entry)  # type: ignore[arg-type]

    return Devdoc.from_json({"events": events, "methods": methods})
