"""JSON artifact reading and all-or-nothing artifact writing."""

import contextlib
import json
import logging
import os
import tempfile
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from anime_series.exceptions import ArtifactWriteError, MissingArtifactError

logger = logging.getLogger(__name__)


def load_json(path: Path, description: str = "Required artifact") -> Any:
    """Load a JSON document from disk.

    Args:
        path: Document location.
        description: Name used in the error when the file is absent.

    Returns:
        Parsed document.

    Raises:
        MissingArtifactError: If the file does not exist.
        OSError: If the file cannot be read.
        json.JSONDecodeError: If the file content is not valid JSON.
    """
    if not path.is_file():
        raise MissingArtifactError(path, description)
    with path.open(encoding="utf-8") as f:
        return json.load(f)


def write_documents(documents: Mapping[Path, Any]) -> list[Path]:
    """Persist several JSON documents so that either all or none are replaced.

    Every document is serialized to a temporary sibling first; targets are only
    swapped in once all temporaries were written.

    Args:
        documents: Destination path -> JSON-serializable document.

    Returns:
        Written paths in input order.

    Raises:
        ArtifactWriteError: If any document cannot be written.
    """
    staged: list[tuple[str, Path]] = []
    current = Path(".")
    try:
        for path, document in documents.items():
            current = path
            path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w",
                dir=path.parent,
                prefix=f".{path.name}.",
                suffix=".tmp",
                delete=False,
                encoding="utf-8",
            ) as tf:
                staged.append((tf.name, path))
                json.dump(document, tf, indent=2, ensure_ascii=False)
                tf.write("\n")
        for temp_name, path in staged:
            current = path
            os.replace(temp_name, path)
            logger.info("Wrote %s", path)
    except (OSError, TypeError, ValueError) as e:
        for temp_name, _ in staged:
            with contextlib.suppress(OSError):
                os.remove(temp_name)
        raise ArtifactWriteError(current, str(e)) from e
    return [path for _, path in staged]


def count_records(path: Path) -> int | None:
    """Best-effort record count of a JSON artifact for status reports."""
    try:
        with path.open(encoding="utf-8") as f:
            document = json.load(f)
    except (OSError, json.JSONDecodeError):
        return None
    if isinstance(document, list):
        return len(document)
    if isinstance(document, dict):
        if isinstance(document.get("series"), list):
            return len(document["series"])
        return sum(len(v) for v in document.values() if isinstance(v, list))
    return None
