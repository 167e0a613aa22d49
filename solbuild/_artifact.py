import json
import logging
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field

from ._abi import JSON, AbiUnit, ArtifactFormatError, abi_from_json, abi_to_json
from ._devdoc import Devdoc

logger = logging.getLogger(__name__)

DEFAULT_IGNORE_PATHS = ("/test/", "/external-interfaces/", "lib/", "module/")
"""Source path fragments excluded from processing by default."""

# The interface of contract `Foo` is expected to be called `IFoo`.
INTERFACE_PREFIX = "I"


@dataclass(frozen=True)
class ContractArtifact:
    """A compiler output unit for one contract."""

    abi: tuple[AbiUnit, ...] = ()
    """The contract ABI."""

    devdoc: None | Devdoc = None
    """Developer documentation; ``None`` if the artifact has no ``devdoc`` field."""

    metadata: None | str | Mapping[str, JSON] = None
    """
    Compiler metadata: a JSON-encoded string as produced by ``solc``,
    or an already decoded object as produced by some toolchains.
    """

    extra: Mapping[str, JSON] = field(default_factory=dict)
    """Other fields of the artifact (bytecode, ``evm``, ``userdoc`` etc)."""

    @classmethod
    def from_json(cls, artifact: JSON) -> "ContractArtifact":
        """Creates this object from a per-contract compiler output."""
        if not isinstance(artifact, Mapping):
            raise ArtifactFormatError("A contract artifact must be a JSON object")

        metadata = artifact.get("metadata")
        if metadata is not None and not isinstance(metadata, (str, Mapping)):
            raise ArtifactFormatError(
                "`metadata` of a contract artifact must be a string or an object"
            )

        return cls(
            abi=abi_from_json(artifact.get("abi", [])),
            devdoc=Devdoc.from_json(artifact["devdoc"]) if "devdoc" in artifact else None,
            metadata=metadata,
            extra={
                key: value
                for key, value in artifact.items()
                if key not in ("abi", "devdoc", "metadata")
            },
        )

    def to_json(self) -> dict[str, JSON]:
        artifact: dict[str, JSON] = {"abi": abi_to_json(self.abi)}
        artifact.update(self.extra)
        if self.devdoc is not None:
            artifact["devdoc"] = self.devdoc.to_json()
        if self.metadata is not None:
            artifact["metadata"] = self.metadata
        return artifact

    def decoded_metadata(self) -> None | dict[str, JSON]:
        """
        Returns the metadata as a JSON object.
        Raises :py:class:`ArtifactFormatError` if the metadata string is not valid JSON.
        """
        if self.metadata is None:
            return None
        if isinstance(self.metadata, Mapping):
            return dict(self.metadata)
        try:
            decoded = json.loads(self.metadata)
        except json.JSONDecodeError as exc:
            raise ArtifactFormatError(f"Cannot parse the contract metadata: {exc}") from exc
        if not isinstance(decoded, dict):
            raise ArtifactFormatError("The contract metadata must be a JSON object")
        return decoded

    def with_abi(self, abi: Iterable[AbiUnit]) -> "ContractArtifact":
        """
        Returns a copy of this artifact with the ABI replaced,
        and the ``output.abi`` field of the metadata (if any) updated to match it.
        """
        abi = tuple(abi)
        metadata = self.decoded_metadata()
        new_metadata: None | str | Mapping[str, JSON]
        if metadata is None:
            new_metadata = None
        else:
            output = metadata.get("output", {})
            if not isinstance(output, Mapping):
                raise ArtifactFormatError("`output` of the contract metadata must be a JSON object")
            metadata["output"] = {**output, "abi": abi_to_json(abi)}
            if isinstance(self.metadata, str):
                new_metadata = json.dumps(metadata, separators=(",", ":"), ensure_ascii=False)
            else:
                new_metadata = metadata

        return ContractArtifact(
            abi=abi, devdoc=self.devdoc, metadata=new_metadata, extra=self.extra
        )


@dataclass(frozen=True)
class ContractGroup:
    """A contract paired with its interface. Either side may be missing."""

    contract: None | ContractArtifact = None
    interface: None | ContractArtifact = None


@dataclass(frozen=True)
class PathFilter:
    """Selects the sources and contracts a build step works on."""

    ignore_paths: tuple[str, ...] = DEFAULT_IGNORE_PATHS
    """Sources whose path contains any of these strings are skipped."""

    names: None | frozenset[str] = None
    """If given, only contracts with these names are processed."""

    def is_ignored(self, source_path: str) -> bool:
        return any(fragment in source_path for fragment in self.ignore_paths)

    def allows(self, name: str) -> bool:
        return self.names is None or name in self.names


def iter_contracts(
    contracts: JSON, path_filter: PathFilter
) -> Iterator[tuple[str, str, Mapping[str, JSON]]]:
    """
    Yields ``(source_path, contract_name, raw_artifact)`` for every contract
    of the ``contracts`` section of a Standard-JSON compiler output,
    skipping ignored source paths. Sources are visited in sorted order.
    """
    if not isinstance(contracts, Mapping):
        raise ArtifactFormatError("`contracts` of the compiler output must be a JSON object")

    for source_path in sorted(contracts):
        if path_filter.is_ignored(source_path):
            logger.debug("Ignoring %s", source_path)
            continue

        source_contracts = contracts[source_path]
        if not isinstance(source_contracts, Mapping):
            raise ArtifactFormatError(f"Contracts of `{source_path}` must be a JSON object")

        for contract_name, artifact in source_contracts.items():
            if not isinstance(artifact, Mapping):
                raise ArtifactFormatError(
                    f"Artifact of `{contract_name}` in `{source_path}` must be a JSON object"
                )
            yield source_path, contract_name, artifact


def group_contracts(contracts: JSON, path_filter: PathFilter) -> dict[str, ContractGroup]:
    """
    Pairs every contract of a Standard-JSON compiler output with its interface.

    A contract whose name starts with ``I`` is treated as the interface of the contract
    named like it without the prefix. The result is keyed by the contract name
    and only contains the names allowed by ``path_filter``.
    """
    groups: dict[str, ContractGroup] = {}
    for _source_path, name, raw_artifact in iter_contracts(contracts, path_filter):
        is_interface = name.startswith(INTERFACE_PREFIX)
        group_name = name.removeprefix(INTERFACE_PREFIX) if is_interface else name
        if not path_filter.allows(group_name):
            continue

        artifact = ContractArtifact.from_json(raw_artifact)
        group = groups.get(group_name, ContractGroup())
        if is_interface:
            groups[group_name] = ContractGroup(contract=group.contract, interface=artifact)
        else:
            groups[group_name] = ContractGroup(contract=artifact, interface=group.interface)

    return groups


def raw_metadata_devdoc(artifact: JSON, what: str) -> dict[str, JSON]:
    """
    Returns the ``output.devdoc`` section of the ``rawMetadata`` string
    of a foundry-layout artifact.
    """
    raw_metadata = artifact.get("rawMetadata") if isinstance(artifact, Mapping) else None
    if not isinstance(raw_metadata, str):
        raise ArtifactFormatError(f"{what} has no `rawMetadata` string")

    metadata = ContractArtifact(metadata=raw_metadata).decoded_metadata()
    output = metadata.get("output") if metadata is not None else None
    devdoc = output.get("devdoc", {}) if isinstance(output, Mapping) else None
    if not isinstance(devdoc, Mapping):
        raise ArtifactFormatError(f"The metadata of {what} has no `output.devdoc` object")
    return dict(devdoc)
