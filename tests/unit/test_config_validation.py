from pathlib import Path

import pytest
from pydantic import ValidationError

from domain.evaluation import SamplingMethod
from infrastructure.config import load_run_config
from infrastructure.config.models import DataColumnsConfig, RunConfig, StatsConfig


def _columns(**overrides) -> DataColumnsConfig:
    values = {"truth_col": "truth", "score_cols": ["a", "b"]}
    values.update(overrides)
    return DataColumnsConfig(**values)


def test_names_and_orientation_default_from_score_columns() -> None:
    cfg = RunConfig(data_file_path=Path("data/scores.csv"), columns=_columns())

    assert cfg.columns.resolved_names == ["a", "b"]
    assert cfg.columns.resolved_high == [True, True]
    assert cfg.stats.sampling is SamplingMethod.ACCURATE
    assert cfg.curve.monotonized is True


def test_names_length_must_match_score_columns() -> None:
    with pytest.raises(ValidationError):
        RunConfig(data_file_path=Path("x.csv"), columns=_columns(names=["only"]))


def test_orientation_length_must_match_score_columns() -> None:
    with pytest.raises(ValidationError):
        RunConfig(data_file_path=Path("x.csv"), columns=_columns(high=[True, False, True]))


def test_names_must_be_unique() -> None:
    with pytest.raises(ValidationError):
        RunConfig(data_file_path=Path("x.csv"), columns=_columns(names=["same", "same"]))


def test_truth_column_cannot_be_scored() -> None:
    with pytest.raises(ValidationError):
        RunConfig(data_file_path=Path("x.csv"), columns=_columns(score_cols=["truth", "b"]))


def test_stats_ci_probs_must_be_ordered() -> None:
    with pytest.raises(ValidationError):
        StatsConfig(ci_probs=(0.975, 0.025))
    with pytest.raises(ValidationError):
        StatsConfig(signif_res=0.5)


def test_load_run_config(tmp_path: Path) -> None:
    config_path = tmp_path / "analysis.yaml"
    config_path.write_text(
        "\n".join(
            [
                f"data_dir: {tmp_path}",
                "data_file: scores.csv",
                "truth_col: label",
                "score_cols: [s1, s2]",
                "names: [first, second]",
                "high: [true, false]",
                "curve:",
                "  balanced: true",
                "stats:",
                "  seed: 7",
                "  sampling: quick_dirty",
                "  ci_probs: [0.05, 0.95]",
                "compute_pvrandom: true",
                f"output_root: {tmp_path / 'out'}",
            ]
        ),
        encoding="utf-8",
    )

    cfg = load_run_config(config_path)

    assert cfg.data_file_path == tmp_path / "scores.csv"
    assert cfg.columns.resolved_names == ["first", "second"]
    assert cfg.columns.resolved_high == [True, False]
    assert cfg.curve.balanced is True
    assert cfg.stats.seed == 7
    assert cfg.stats.sampling is SamplingMethod.QUICK_DIRTY
    assert cfg.stats.ci_probs == (0.05, 0.95)
    assert cfg.compute_pvrandom is True
    assert cfg.compute_significance is True
    assert cfg.output_root == tmp_path / "out"


def test_single_score_column_as_scalar(tmp_path: Path) -> None:
    config_path = tmp_path / "analysis.yaml"
    config_path.write_text("data_file: s.csv\ntruth_col: y\nscore_cols: score\n", encoding="utf-8")

    cfg = load_run_config(config_path)

    assert cfg.columns.score_cols == ["score"]
    assert cfg.data_file_path == Path("dataset") / "s.csv"


def test_load_run_config_errors(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_run_config(tmp_path / "missing.yaml")

    not_a_mapping = tmp_path / "list.yaml"
    not_a_mapping.write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_run_config(not_a_mapping)

    incomplete = tmp_path / "incomplete.yaml"
    incomplete.write_text("data_file: s.csv\ntruth_col: y\n", encoding="utf-8")
    with pytest.raises(ValueError, match="score_cols"):
        load_run_config(incomplete)
