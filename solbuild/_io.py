import json
import logging
import shutil
from pathlib import Path

from ._abi import JSON

logger = logging.getLogger(__name__)


class InputError(Exception):
    """Raised when an input file or directory is missing or cannot be parsed."""


def read_text(path: str | Path) -> str:
    """Reads a UTF-8 text file, reporting any failure as :py:class:`InputError`."""
    path = Path(path)
    try:
        return path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise InputError(f"Input file `{path}` does not exist") from exc
    except IsADirectoryError as exc:
        raise InputError(f"Expected `{path}` to be a file, found a directory") from exc
    except UnicodeDecodeError as exc:
        raise InputError(f"`{path}` is not a UTF-8 text file: {exc}") from exc
    except OSError as exc:
        raise InputError(f"Cannot read `{path}`: {exc}") from exc


def read_json(path: str | Path) -> JSON:
    """Reads and parses a JSON file."""
    text = read_text(path)
    try:
        return json.loads(text)  # type: ignore[no-any-return]
    except json.JSONDecodeError as exc:
        raise InputError(f"Cannot parse `{path}` as JSON: {exc}") from exc


def format_json(value: JSON) -> str:
    """Serializes the value with a 4-space indentation and a trailing newline."""
    return json.dumps(value, indent=4, ensure_ascii=False) + "\n"


def write_json(path: str | Path, value: JSON) -> None:
    path = Path(path)
    path.write_text(format_json(value), encoding="utf-8")
    logger.info("Wrote %s", path)


def write_text(path: str | Path, text: str) -> None:
    path = Path(path)
    path.write_text(text, encoding="utf-8")
    logger.info("Wrote %s", path)


def list_directory(path: str | Path) -> list[Path]:
    """Returns the regular non-hidden files in the directory, sorted by name."""
    path = Path(path)
    if not path.is_dir():
        raise InputError(f"Input directory `{path}` does not exist")

    files = []
    for entry in sorted(path.iterdir()):
        if not entry.is_file():
            continue
        if entry.name.startswith("."):
            logger.debug("Skipping hidden file %s", entry)
            continue
        files.append(entry)
    return files


def ensure_directory(path: str | Path) -> Path:
    """Creates the directory (with parents) if it does not exist yet."""
    path = Path(path)
    path.mkdir(parents=True, exist_ok=True)
    return path


def empty_directory(path: str | Path) -> Path:
    """Makes sure the directory exists and has nothing in it."""
    path = ensure_directory(path)
    for entry in path.iterdir():
        if entry.is_dir() and not entry.is_symlink():
            shutil.rmtree(entry)
        else:
            entry.unlink()
    return path
