import hashlib
import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass

from eth_utils import remove_0x_prefix

from ._abi import JSON, ArtifactFormatError
from ._artifact import ContractArtifact, PathFilter, iter_contracts

logger = logging.getLogger(__name__)

# Deployed library code starts with `PUSH20 <address>`,
# where the address is only known at deployment time.
PUSH20_OPCODE = "73"
ADDRESS_OFFSET = 2
ADDRESS_LENGTH = 40

# Swarm (bzzr0) metadata trailer: `a1 65 "bzzr0" 58 20 <32 byte hash> 00 29`.
SWARM_TRAILER_LENGTH = 86
SWARM_TRAILER_PREFIX = "a165627a7a72305820"
SWARM_TRAILER_SUFFIX = "0029"
SWARM_HASH_LENGTH = 64

# Library link placeholder: `__$` + 34 characters of the library name hash + `$__`.
LIBRARY_PLACEHOLDER = re.compile(r"__\$.{34}\$__")


def _splice_out(code: str, index: int, length: int) -> str:
    return code[:index] + code[index + length :]


def strip_address(code: str) -> str:
    """Removes the deployer address embedded after a leading ``PUSH20``, if there is one."""
    if code.startswith(PUSH20_OPCODE):
        return _splice_out(code, ADDRESS_OFFSET, ADDRESS_LENGTH)
    return code


def strip_metadata_hash(code: str) -> str:
    """
    Removes the hash from the trailing swarm metadata, if the code has one.

    .. note::

        Only the 64 hash characters are removed, the trailer framing
        (``a165627a7a72305820`` and ``0029``) stays in place.
        Tools that cut 64 characters starting at the beginning of the trailer
        leave a different string behind, so the bytecode hashes computed from the result
        can only be compared with hashes computed by this function.
    """
    trailer = code[-SWARM_TRAILER_LENGTH:]
    if (
        len(trailer) == SWARM_TRAILER_LENGTH
        and trailer.startswith(SWARM_TRAILER_PREFIX)
        and trailer.endswith(SWARM_TRAILER_SUFFIX)
    ):
        hash_offset = len(code) - SWARM_TRAILER_LENGTH + len(SWARM_TRAILER_PREFIX)
        return _splice_out(code, hash_offset, SWARM_HASH_LENGTH)
    return code


def normalize_deployed_bytecode(code: str) -> str:
    """
    Removes the parts of the deployed bytecode that depend on the environment
    rather than on the source: the embedded deployer address and the metadata hash.
    """
    return strip_metadata_hash(strip_address(remove_0x_prefix(code)))


def strip_lib_refs(code: str) -> str:
    """Removes all the library link placeholders (``__$...$__``)."""
    return LIBRARY_PLACEHOLDER.sub("", code)


def hash_bytecode(code: str) -> str:
    """Returns the 0x-prefixed SHA-256 digest of the hex-encoded bytecode text."""
    return "0x" + hashlib.sha256(code.encode("utf-8")).hexdigest()


@dataclass(frozen=True)
class ContractMetadata:
    """Size and content hashes of a compiled contract."""

    contract_name: str
    """The contract name."""

    contract_size: int
    """The deployed bytecode size in bytes."""

    source_hash: str
    """Keccak-256 hash of the contract source, as reported by the compiler."""

    bytecode_hash_with_lib_refs: str
    """Hash of the normalized deployed bytecode."""

    bytecode_hash_without_lib_refs: str
    """Hash of the normalized deployed bytecode with library placeholders removed."""

    raw_bytecode: None | str = None
    """The deployed bytecode as given by the compiler; only reported on request."""

    def to_json(self) -> dict[str, JSON]:
        record: dict[str, JSON] = {
            "contractName": self.contract_name,
            "contractSize": self.contract_size,
            "sourceHash": self.source_hash,
            "bytecodeHashWithLibRefs": self.bytecode_hash_with_lib_refs,
            "bytecodeHashWithoutLibRefs": self.bytecode_hash_without_lib_refs,
        }
        if self.raw_bytecode is not None:
            record["rawBytecode"] = self.raw_bytecode
        return record


def _deployed_bytecode(raw_artifact: Mapping[str, JSON], contract_name: str) -> str:
    evm = raw_artifact.get("evm")
    deployed = evm.get("deployedBytecode") if isinstance(evm, Mapping) else None
    code = deployed.get("object") if isinstance(deployed, Mapping) else None
    if not isinstance(code, str):
        raise ArtifactFormatError(f"`{contract_name}` has no `evm.deployedBytecode.object`")
    return code


def _source_hash(artifact: ContractArtifact, source_path: str, contract_name: str) -> str:
    metadata = artifact.decoded_metadata()
    if metadata is None:
        raise ArtifactFormatError(f"`{contract_name}` has no metadata")

    sources = metadata.get("sources")
    if not isinstance(sources, Mapping):
        raise ArtifactFormatError(f"The metadata of `{contract_name}` has no `sources`")

    source = sources.get(source_path)
    source_hash = source.get("keccak256") if isinstance(source, Mapping) else None
    if not isinstance(source_hash, str):
        raise ArtifactFormatError(
            f"The metadata of `{contract_name}` has no `keccak256` hash for `{source_path}`"
        )
    return source_hash


def contract_metadata(
    source_path: str,
    contract_name: str,
    raw_artifact: Mapping[str, JSON],
    *,
    include_raw_bytecode: bool = False,
) -> ContractMetadata:
    """Computes the size and the hashes of a contract from its compiler output."""
    artifact = ContractArtifact.from_json(raw_artifact)
    raw_bytecode = _deployed_bytecode(raw_artifact, contract_name)
    normalized = normalize_deployed_bytecode(raw_bytecode)

    return ContractMetadata(
        contract_name=contract_name,
        contract_size=len(remove_0x_prefix(raw_bytecode)) // 2,
        source_hash=_source_hash(artifact, source_path, contract_name),
        bytecode_hash_with_lib_refs=hash_bytecode(normalized),
        bytecode_hash_without_lib_refs=hash_bytecode(strip_lib_refs(normalized)),
        raw_bytecode=raw_bytecode if include_raw_bytecode else None,
    )


def build_metadata(
    contracts: JSON, path_filter: PathFilter, *, include_raw_bytecode: bool = False
) -> list[ContractMetadata]:
    """
    Computes the metadata for every contract of the ``contracts`` section
    of a Standard-JSON compiler output, sorted by the contract name.
    """
    records = []
    for source_path, contract_name, raw_artifact in iter_contracts(contracts, path_filter):
        if not path_filter.allows(contract_name):
            continue
        logger.debug("Hashing %s from %s", contract_name, source_path)
        records.append(
            contract_metadata(
                source_path,
                contract_name,
                raw_artifact,
                include_raw_bytecode=include_raw_bytecode,
            )
        )
    return sorted(records, key=lambda record: record.contract_name)
