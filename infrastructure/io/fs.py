"""Filesystem utility functions."""

import json
from pathlib import Path
from typing import Any


def ensure_exists(path: Path, what: str) -> None:
    """
    Check that a path exists, raise FileNotFoundError if not.

    Args:
        path: Path to check
        what: Description of what this path represents (for error message)

    Raises:
        FileNotFoundError: If path does not exist
    """
    if not path.exists():
        raise FileNotFoundError(f"Missing {what} at: {path}")


def write_json(path: Path, payload: Any) -> Path:
    """
    Write a JSON document with UTF-8 encoding, creating parent directories.

    Args:
        path: Destination file
        payload: JSON-serialisable object

    Returns:
        The path written
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        json.dump(payload, f, ensure_ascii=False, indent=2)
    return path
