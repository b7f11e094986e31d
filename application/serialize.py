"""Artifact serialization utilities."""

import logging
import re
from pathlib import Path

import pandas as pd

from application.constants import BAND_FILENAME_TEMPLATE, SWEEP_FILENAME_TEMPLATE
from domain.schemas import ClassifierCollection
from infrastructure.io import write_json

logger = logging.getLogger(__name__)

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9_.-]+")


def safe_filename_part(name: str) -> str:
    """Classifier name reduced to characters safe in a file name."""
    return _UNSAFE_CHARS.sub("_", name).strip("_") or "classifier"


def save_sweep_tables(collection: ClassifierCollection, out_dir: Path) -> list[Path]:
    """Write one sweep-table CSV per classifier."""
    out_dir.mkdir(parents=True, exist_ok=True)
    paths: list[Path] = []
    for name, curve in collection.items():
        path = out_dir / SWEEP_FILENAME_TEMPLATE.format(name=safe_filename_part(name))
        curve.table.to_csv(path, index=False)
        paths.append(path)
    logger.info("Saved %d sweep table(s) to %s", len(paths), out_dir)
    return paths


def save_confidence_bands(bands: dict[str, pd.DataFrame], out_dir: Path) -> list[Path]:
    """Write one confidence-band CSV per classifier."""
    out_dir.mkdir(parents=True, exist_ok=True)
    paths: list[Path] = []
    for name, band in bands.items():
        path = out_dir / BAND_FILENAME_TEMPLATE.format(name=safe_filename_part(name))
        band.to_csv(path, index=False)
        paths.append(path)
    logger.info("Saved %d confidence band(s) to %s", len(paths), out_dir)
    return paths


def save_json_artifact(payload: dict, path: Path, what: str) -> Path:
    """Write a JSON artifact and log where it went."""
    write_json(path, payload)
    logger.info("Saved %s to %s", what, path)
    return path
