"""Configuration loading from YAML files."""

from pathlib import Path
from typing import Any

import yaml

from infrastructure.config.models import CurveConfig, DataColumnsConfig, RunConfig, StatsConfig
from infrastructure.constants import DATA_DIR, OUTPUT_ROOT

REQUIRED_KEYS = ("data_file", "truth_col", "score_cols")


def _load_yaml(path: Path) -> dict[str, Any]:
    """Load YAML file and return as dict."""
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f)

    if not isinstance(data, dict):
        raise ValueError(f"Expected YAML dict in {path}, got {type(data)}")

    return data


def _as_list(value: Any) -> list[Any] | None:
    if value is None:
        return None
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


def load_run_config(analysis_path: Path) -> RunConfig:
    """
    Load analysis.yaml and construct a fully-resolved RunConfig.

    Layout:
      data_file / data_dir      -> data_file_path (data_file is relative to data_dir)
      truth_col, score_cols,
      names, high               -> columns
      curve: {...}              -> CurveConfig
      stats: {...}              -> StatsConfig
      compute_* switches, output_root

    Raises:
        FileNotFoundError: If the YAML file does not exist
        ValueError: If required keys are missing or values are invalid
    """
    cfg_data = _load_yaml(analysis_path)

    missing = [key for key in REQUIRED_KEYS if not cfg_data.get(key)]
    if missing:
        raise ValueError(f"analysis.yaml missing required key(s): {', '.join(missing)}")

    data_dir = Path(cfg_data.get("data_dir", str(DATA_DIR)))
    data_file_path = data_dir / str(cfg_data["data_file"])

    names = _as_list(cfg_data.get("names"))
    high = cfg_data.get("high", True)
    columns = DataColumnsConfig(
        truth_col=str(cfg_data["truth_col"]).strip(),
        score_cols=[str(c).strip() for c in _as_list(cfg_data["score_cols"]) or []],
        names=[str(n).strip() for n in names] if names else None,
        high=high if isinstance(high, bool) else _as_list(high),
    )

    curve = CurveConfig(**(cfg_data.get("curve") or {}))
    stats = StatsConfig(**(cfg_data.get("stats") or {}))

    cfg = RunConfig(
        data_file_path=data_file_path,
        columns=columns,
        curve=curve,
        stats=stats,
        compute_confidence_bands=bool(cfg_data.get("compute_confidence_bands", True)),
        compute_significance=bool(cfg_data.get("compute_significance", True)),
        compute_pvrandom=bool(cfg_data.get("compute_pvrandom", False)),
        compute_sampled_auprc=bool(cfg_data.get("compute_sampled_auprc", False)),
        output_root=Path(cfg_data.get("output_root", str(OUTPUT_ROOT))),
    )

    return cfg
