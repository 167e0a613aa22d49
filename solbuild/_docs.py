from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path

from jinja2 import (
    BaseLoader,
    Environment,
    FileSystemLoader,
    PackageLoader,
    StrictUndefined,
    TemplateNotFound,
)

from ._abi import JSON, AbiUnit, UnitType, abi_from_json
from ._io import InputError

CONTRACT_TEMPLATE = "contract.md.j2"
"""The name of the template file, both in the package and in a custom template directory."""


@dataclass(frozen=True)
class ContractDoc:
    """The documented ABI of a contract split into sections, as passed to the template."""

    contract_name: str
    description: None | str
    constructor: None | AbiUnit
    functions: Sequence[AbiUnit]
    events: Sequence[AbiUnit]
    errors: Sequence[AbiUnit]

    @classmethod
    def from_abi(
        cls, contract_name: str, abi: Sequence[AbiUnit], description: None | str = None
    ) -> "ContractDoc":
        constructors = [unit for unit in abi if unit.type == UnitType.CONSTRUCTOR]
        return cls(
            contract_name=contract_name,
            description=description,
            constructor=constructors[0] if constructors else None,
            functions=[unit for unit in abi if unit.type == UnitType.FUNCTION],
            events=[unit for unit in abi if unit.type == UnitType.EVENT],
            errors=[unit for unit in abi if unit.type == UnitType.ERROR],
        )


class DocRenderer:
    """
    Renders contract documentation into Markdown.

    Uses the template bundled with the package,
    or ``contract.md.j2`` from ``templates_dir`` if it is given.
    """

    def __init__(self, templates_dir: None | str | Path = None):
        loader: BaseLoader
        if templates_dir is None:
            loader = PackageLoader("solbuild", "templates")
        else:
            loader = FileSystemLoader(Path(templates_dir))

        self._environment = Environment(
            loader=loader,
            autoescape=False,  # noqa: S701
            undefined=StrictUndefined,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )
        try:
            self._template = self._environment.get_template(CONTRACT_TEMPLATE)
        except TemplateNotFound as exc:
            raise InputError(
                f"Template `{CONTRACT_TEMPLATE}` not found in `{templates_dir}`"
            ) from exc

    def render(self, doc: ContractDoc) -> str:
        return self._template.render(
            contract_name=doc.contract_name,
            description=doc.description,
            constructor=doc.constructor,
            functions=doc.functions,
            events=doc.events,
            errors=doc.errors,
        )


def contract_doc_from_json(contract_name: str, document: JSON) -> None | ContractDoc:
    """
    Creates the documentation sections from a ``{abi, title}`` JSON document.
    Returns ``None`` if the document does not contain an ABI.
    """
    if not isinstance(document, Mapping) or not isinstance(document.get("abi"), list):
        return None

    title = document.get("title")
    description = title if isinstance(title, str) else None
    return ContractDoc.from_abi(contract_name, abi_from_json(document["abi"]), description)
