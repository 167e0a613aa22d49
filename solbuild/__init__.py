"""Build utilities for Solidity compiler artifacts."""

from ._abi import (
    JSON,
    AbiUnit,
    ArtifactFormatError,
    Parameter,
    UnitType,
    abi_from_json,
    abi_to_json,
)
from ._artifact import (
    DEFAULT_IGNORE_PATHS,
    ContractArtifact,
    ContractGroup,
    PathFilter,
    group_contracts,
    iter_contracts,
    raw_metadata_devdoc,
)
from ._bytecode import (
    ContractMetadata,
    build_metadata,
    contract_metadata,
    hash_bytecode,
    normalize_deployed_bytecode,
    strip_lib_refs,
)
from ._devdoc import Devdoc, DevdocUnit, combine_devdocs, deep_merge
from ._docs import ContractDoc, DocRenderer, contract_doc_from_json
from ._io import InputError, format_json, list_directory, read_json
from ._merge import (
    dedup_by_name,
    document_abi,
    documented_interface,
    enrich_from_devdoc,
    enrich_unit,
    merge_abi,
    merge_group,
    sort_abi,
)
from ._standard_json import build_standard_json_inputs, standard_json_input

__all__ = [
    "DEFAULT_IGNORE_PATHS",
    "JSON",
    "AbiUnit",
    "ArtifactFormatError",
    "ContractArtifact",
    "ContractDoc",
    "ContractGroup",
    "ContractMetadata",
    "Devdoc",
    "DevdocUnit",
    "DocRenderer",
    "InputError",
    "Parameter",
    "PathFilter",
    "UnitType",
    "abi_from_json",
    "abi_to_json",
    "build_metadata",
    "build_standard_json_inputs",
    "combine_devdocs",
    "contract_doc_from_json",
    "contract_metadata",
    "deep_merge",
    "dedup_by_name",
    "document_abi",
    "documented_interface",
    "enrich_from_devdoc",
    "enrich_unit",
    "format_json",
    "group_contracts",
    "hash_bytecode",
    "iter_contracts",
    "list_directory",
    "merge_abi",
    "merge_group",
    "normalize_deployed_bytecode",
    "raw_metadata_devdoc",
    "read_json",
    "sort_abi",
    "standard_json_input",
    "strip_lib_refs",
]
