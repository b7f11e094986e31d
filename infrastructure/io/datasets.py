"""Loading of scored reference sets."""

import logging
from collections.abc import Callable
from pathlib import Path

import pandas as pd

logger = logging.getLogger(__name__)

# Score files from variant-effect predictors often mark missing scores with "." or "NA"
MISSING_SCORE_TOKENS = [".", "NA", "NaN", ""]

_READERS: dict[str, Callable[[Path], pd.DataFrame]] = {
    ".xlsx": lambda p: pd.read_excel(p, na_values=MISSING_SCORE_TOKENS),
    ".xls": lambda p: pd.read_excel(p, na_values=MISSING_SCORE_TOKENS),
    ".csv": lambda p: pd.read_csv(p, na_values=MISSING_SCORE_TOKENS),
    ".tsv": lambda p: pd.read_csv(p, sep="\t", na_values=MISSING_SCORE_TOKENS),
    ".txt": lambda p: pd.read_csv(p, sep="\t", na_values=MISSING_SCORE_TOKENS),
}


def read_table(path: Path) -> pd.DataFrame:
    """
    Read a scored reference set (one truth column, one score column per classifier).

    The reader is chosen by file extension: Excel (.xlsx, .xls), CSV (.csv) or
    tab-separated (.tsv, .txt). Missing-score markers are read as NaN.

    Raises:
        FileNotFoundError: If file does not exist
        ValueError: If the format is not supported or the table has no rows
    """
    if not path.exists():
        raise FileNotFoundError(f"Data file not found: {path}")

    reader = _READERS.get(path.suffix.lower())
    if reader is None:
        raise ValueError(f"Unsupported file format: {path.suffix}. Supported formats: {', '.join(_READERS)}")

    df = reader(path)
    if df.empty:
        raise ValueError(f"Data file has no rows: {path}")

    logger.debug("Read %s: columns=%s", path, list(df.columns))
    return df
