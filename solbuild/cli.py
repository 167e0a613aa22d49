"""
Command-line entry point.

Every subcommand reads compiler-generated JSON, transforms it and writes the results to disk:

  solbuild build-artifacts --in out/combined.json --out artifacts
  solbuild build-docs --in artifacts --out docs
  solbuild build-metadata --in out/combined.json --out metadata.json
  solbuild build-standard-json --in contracts --out standard-json --config config.json
  solbuild merge-abi --name Pool --in out --out abis --filter Pool,PoolStorage
"""

import logging
from collections.abc import Callable, Iterable, Mapping
from functools import wraps
from pathlib import Path
from typing import Any, List, Optional, TypeVar, cast

import typer

from ._abi import JSON, ArtifactFormatError
from ._artifact import (
    DEFAULT_IGNORE_PATHS,
    ContractArtifact,
    PathFilter,
    group_contracts,
    raw_metadata_devdoc,
)
from ._bytecode import build_metadata
from ._devdoc import Devdoc
from ._docs import DocRenderer, contract_doc_from_json
from ._io import (
    InputError,
    empty_directory,
    ensure_directory,
    list_directory,
    read_json,
    write_json,
    write_text,
)
from ._merge import documented_interface, merge_group
from ._standard_json import build_standard_json_inputs

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="solbuild",
    help="Build utilities for Solidity compiler artifacts.",
    no_args_is_help=True,
    add_completion=False,
)

_F = TypeVar("_F", bound=Callable[..., None])


def _reports_errors(func: _F) -> _F:
    """Turns input and data errors into a logged message and a non-zero exit status."""

    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> None:
        try:
            func(*args, **kwargs)
        except (InputError, ArtifactFormatError) as exc:
            logger.error("%s", exc)  # noqa: TRY400
            raise typer.Exit(code=1) from exc

    return cast("_F", wrapper)


def _split_names(values: None | Iterable[str]) -> None | list[str]:
    """Accepts both ``--filter A --filter B`` and ``--filter A,B``."""
    if not values:
        return None
    return [name for value in values for name in value.split(",") if name]


def _path_filter(names: None | list[str], ignore_paths: None | list[str]) -> PathFilter:
    return PathFilter(
        ignore_paths=tuple(ignore_paths) if ignore_paths else DEFAULT_IGNORE_PATHS,
        names=frozenset(names) if names is not None else None,
    )


def _compiler_output_contracts(path: Path) -> JSON:
    compiler_output = read_json(path)
    if not isinstance(compiler_output, Mapping) or "contracts" not in compiler_output:
        raise ArtifactFormatError(f"`{path}` has no `contracts` section")
    return compiler_output["contracts"]


@app.callback()
def main(
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Log debug messages.",
        envvar="SOLBUILD_VERBOSE",
    ),
) -> None:
    """Build utilities for Solidity compiler artifacts."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )


@app.command("build-artifacts")
@_reports_errors
def build_artifacts_command(
    in_: Path = typer.Option(..., "--in", help="Compiler output file."),
    out: Path = typer.Option(..., "--out", help="Artifacts output directory."),
    filter_: Optional[List[str]] = typer.Option(
        None, "--filter", help="Only build artifacts for these contracts."
    ),
    ignore_path: Optional[List[str]] = typer.Option(
        None, "--ignorePath", "--ignore-path", help="Skip sources whose path contains this."
    ),
) -> None:
    """Merge every contract with its interface into a documented artifact."""
    contracts = _compiler_output_contracts(in_)
    groups = group_contracts(contracts, _path_filter(_split_names(filter_), ignore_path))

    ensure_directory(out)
    for name, group in groups.items():
        write_json(out / f"{name}.json", merge_group(group).to_json())


@app.command("build-docs")
@_reports_errors
def build_docs_command(
    in_: Path = typer.Option(..., "--in", help="Artifacts input directory."),
    out: Path = typer.Option(..., "--out", help="Docs output directory."),
    templates: Optional[Path] = typer.Option(
        None, "--templates", help="Directory with a custom `contract.md.j2` template."
    ),
) -> None:
    """Render a Markdown document for every artifact with an ABI."""
    renderer = DocRenderer(templates)
    paths = list_directory(in_)

    empty_directory(out)
    for path in paths:
        if path.suffix != ".json":
            continue

        try:
            doc = contract_doc_from_json(path.stem, read_json(path))
        except ArtifactFormatError as exc:
            logger.warning("Skipping %s: %s", path, exc)
            continue
        if doc is None:
            logger.warning("Skipping %s: no `abi` list in it", path)
            continue

        write_text(out / f"{path.stem}.md", renderer.render(doc))


@app.command("build-metadata")
@_reports_errors
def build_metadata_command(
    in_: Path = typer.Option(..., "--in", help="Compiler output file."),
    out: Path = typer.Option(..., "--out", help="Metadata output file."),
    filter_: Optional[List[str]] = typer.Option(
        None, "--filter", help="Only report these contracts."
    ),
    ignore_path: Optional[List[str]] = typer.Option(
        None, "--ignorePath", "--ignore-path", help="Skip sources whose path contains this."
    ),
    raw: bool = typer.Option(
        False, "--raw", "-r", help="Include the raw deployed bytecode in the output."
    ),
) -> None:
    """Compute sizes and bytecode hashes of the compiled contracts."""
    contracts = _compiler_output_contracts(in_)
    records = build_metadata(
        contracts,
        _path_filter(_split_names(filter_), ignore_path),
        include_raw_bytecode=raw,
    )

    ensure_directory(out.parent)
    write_json(out, [record.to_json() for record in records])


@app.command("build-standard-json")
@_reports_errors
def build_standard_json_command(
    in_: Path = typer.Option(..., "--in", help="Contract sources directory."),
    out: Path = typer.Option(..., "--out", help="Standard-JSON input output directory."),
    config: Path = typer.Option(..., "--config", help="Base Standard-JSON input config."),
) -> None:
    """Create a Standard-JSON compiler input for every source file."""
    base_config = read_json(config)
    inputs = build_standard_json_inputs(base_config, list_directory(in_))

    ensure_directory(out)
    for file_name, standard_json in inputs.items():
        write_json(out / file_name, standard_json)


def _foundry_artifact_path(in_: Path, name: str) -> Path:
    return in_ / f"{name}.sol" / f"{name}.json"


@app.command("merge-abi")
@_reports_errors
def merge_abi_command(
    name: str = typer.Option(
        ..., "--name", help="The main contract (the one inheriting all the others)."
    ),
    in_: Path = typer.Option(..., "--in", help="Foundry output directory."),
    out: Path = typer.Option(..., "--out", help="Output directory."),
    filter_: Optional[List[str]] = typer.Option(
        None, "--filter", help="Contracts to take the documentation from."
    ),
    out_name: Optional[str] = typer.Option(
        None, "--outName", "--out-name", help="Output file name (without `.json`)."
    ),
) -> None:
    """Attach the documentation of several contracts to the ABI of the main one."""
    devdocs = []
    for documented_name in _split_names(filter_) or []:
        artifact = read_json(_foundry_artifact_path(in_, documented_name))
        devdocs.append(raw_metadata_devdoc(artifact, f"`{documented_name}`"))

    main_artifact = read_json(_foundry_artifact_path(in_, name))
    main_devdoc = Devdoc.from_json(raw_metadata_devdoc(main_artifact, f"`{name}`"))
    main = ContractArtifact.from_json(main_artifact)
    document = documented_interface(main, main_devdoc, devdocs)

    ensure_directory(out)
    write_json(out / f"{out_name or name}.json", document)
