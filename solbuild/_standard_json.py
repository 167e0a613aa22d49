import logging
from collections.abc import Mapping
from copy import deepcopy
from pathlib import Path

from ._abi import JSON, ArtifactFormatError
from ._io import read_text

logger = logging.getLogger(__name__)


def standard_json_input(base_config: JSON, file_name: str, source: str) -> dict[str, JSON]:
    """
    Returns a copy of the Standard-JSON compiler input ``base_config``
    with ``sources`` consisting of the single given source file.
    """
    if not isinstance(base_config, Mapping):
        raise ArtifactFormatError("The Standard-JSON base config must be a JSON object")

    config = dict(deepcopy(base_config))
    config["sources"] = {file_name: {"content": source}}
    return config


def output_name(source_path: Path) -> str:
    """``Token.sol`` is written to ``Token.json``, ``Token.t.sol`` too."""
    return source_path.name.split(".")[0] + ".json"


def build_standard_json_inputs(
    base_config: JSON, source_paths: list[Path]
) -> dict[str, dict[str, JSON]]:
    """
    Creates a Standard-JSON input for every source file,
    keyed by the name of the output file.
    """
    inputs = {}
    for source_path in source_paths:
        logger.debug("Creating Standard-JSON input for %s", source_path)
        source = read_text(source_path)
        inputs[output_name(source_path)] = standard_json_input(
            base_config, source_path.name, source
        )
    return inputs
