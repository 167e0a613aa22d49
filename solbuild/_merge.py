from collections.abc import Iterable, Mapping, Sequence

from ._abi import JSON, AbiUnit, Parameter, UnitType, abi_to_json
from ._artifact import ContractArtifact, ContractGroup
from ._devdoc import Devdoc, DevdocUnit, combine_devdocs


def dedup_by_name(abi: Iterable[AbiUnit]) -> list[AbiUnit]:
    """
    Keeps only the first unit for every distinct ``name``, preserving the order.

    .. note::

        Overloads share a name and thus collapse into one unit.
        Unnamed units (constructor, fallback, receive) compare equal to each other too.
    """
    seen: set[None | str] = set()
    result = []
    for unit in abi:
        if unit.name in seen:
            continue
        seen.add(unit.name)
        result.append(unit)
    return result


def _describe_parameters(
    parameters: None | Sequence[Parameter], descriptions: dict[str, str], *, outputs: bool
) -> None | tuple[Parameter, ...]:
    if parameters is None:
        return None

    result = []
    for index, param in enumerate(parameters):
        # Unnamed outputs are documented as `_0`, `_1` etc.
        key = f"_{index}" if outputs and param.name == "" else param.name
        if param.description or not descriptions.get(key):
            result.append(param)
        else:
            result.append(param.with_description(descriptions[key]))
    return tuple(result)


def enrich_unit(
    abi_unit: AbiUnit,
    devdoc_unit: None | DevdocUnit = None,
    state_variable: None | DevdocUnit = None,
) -> AbiUnit:
    """
    Returns a new ABI unit with the documentation from ``devdoc_unit`` attached.

    Parameters and outputs that already have a description keep it.
    The unit description is replaced by the devdoc ``details``, if there are any.
    If ``state_variable`` documentation is given, the unit is marked as a state variable.
    """
    devdoc_unit = devdoc_unit or DevdocUnit()

    description = None
    has_state_variable_details = state_variable is not None and bool(state_variable.details)
    if abi_unit.description or devdoc_unit.details or has_state_variable_details:
        description = (
            devdoc_unit.details if devdoc_unit.details is not None else abi_unit.description
        )

    return AbiUnit(
        type=abi_unit.type,
        name=abi_unit.name,
        state_mutability=abi_unit.state_mutability,
        inputs=_describe_parameters(abi_unit.inputs, dict(devdoc_unit.params), outputs=False),
        outputs=_describe_parameters(abi_unit.outputs, dict(devdoc_unit.returns), outputs=True),
        description=description,
        is_state_variable=abi_unit.is_state_variable or state_variable is not None,
        extra=abi_unit.extra,
    )


def enrich_from_devdoc(abi_unit: AbiUnit, devdoc: None | Devdoc) -> AbiUnit:
    """Enriches the unit with its documentation (if any) found in ``devdoc``."""
    if devdoc is None:
        return enrich_unit(abi_unit)
    return enrich_unit(abi_unit, devdoc.find_unit(abi_unit), devdoc.find_state_variable(abi_unit))


def merge_abi(
    contract: None | ContractArtifact, interface: None | ContractArtifact
) -> ContractArtifact:
    """
    Merges the ABIs of a contract and its interface into one documented ABI.

    The contract's units take precedence over the interface's units with the same name.
    The interface documentation is applied first, then the contract's on top of it,
    so a unit description written in the contract replaces the one from the interface.

    The result is based on the contract artifact if its ABI is not empty,
    and on the interface artifact otherwise; its metadata is updated with the new ABI.
    """
    contract = contract or ContractArtifact()
    interface = interface or ContractArtifact()

    enriched = [
        enrich_from_devdoc(enrich_from_devdoc(unit, interface.devdoc), contract.devdoc)
        for unit in dedup_by_name([*contract.abi, *interface.abi])
    ]

    source = contract if contract.abi else interface
    return source.with_abi(enriched)


def merge_group(group: ContractGroup) -> ContractArtifact:
    """Merges the contract and the interface of the group."""
    return merge_abi(group.contract, group.interface)


def _sort_key(unit: AbiUnit) -> tuple[int, int, int, str, str]:
    name = unit.name or ""

    if unit.type == UnitType.CONSTRUCTOR:
        return (0, 0, 0, name.upper(), name)
    if unit.type == UnitType.EVENT:
        return (1, 0, 0, name.upper(), name)

    # All-caps names are constants, they go first. Unnamed units (fallback, receive) are not.
    caps_tier = 0 if name and name.upper() == name else 1
    state_variable_tier = 0 if unit.is_state_variable else 1
    return (2, caps_tier, state_variable_tier, name.upper(), name)


def sort_abi(abi: Iterable[AbiUnit]) -> list[AbiUnit]:
    """
    Sorts the units in the canonical order: the constructor, events, everything else.
    Among the latter, constants (all-caps names) go first, then state variables,
    then the rest; ties are broken by the case-insensitive name.
    """
    return sorted(abi, key=_sort_key)


def document_abi(abi: Iterable[AbiUnit], devdoc: Devdoc) -> list[AbiUnit]:
    """
    Attaches the documentation from ``devdoc`` to every unit, drops the fallback function
    and returns the units in the canonical order.
    """
    documented = [
        enrich_unit(unit, devdoc.find_unit(unit))
        for unit in abi
        if unit.type != UnitType.FALLBACK
    ]
    return sort_abi(documented)


def documented_interface(
    main: ContractArtifact, main_devdoc: Devdoc, devdocs: Iterable[Mapping[str, JSON]]
) -> dict[str, JSON]:
    """
    Returns the ``{abi, title}`` document for the main contract,
    with the documentation combined from ``devdocs`` attached to its ABI.
    """
    abi = document_abi(main.abi, combine_devdocs(devdocs))
    document: dict[str, JSON] = {"abi": abi_to_json(abi)}
    if main_devdoc.title is not None:
        document["title"] = main_devdoc.title
    return document
