import numpy as np
import pandas as pd
import pytest

from domain.evaluation import (
    build_sweep_table,
    infer_prc_ci,
    prc_confidence_band,
    sample_prc_paths,
    sample_rates,
    sample_rates_qd,
)
from domain.schemas import ClassifierCollection, PathEnsemble


def test_path_shapes(collection: ClassifierCollection, rng: np.random.Generator) -> None:
    table = collection["good"].table

    paths = sample_prc_paths(table, 100, rng, monotonized=False)

    assert paths.precision.shape == (100, len(table) - 1)
    assert paths.recall.shape == (100, len(table) - 1)
    assert ((paths.precision >= 0) & (paths.precision <= 1)).all()
    assert ((paths.recall >= 0) & (paths.recall <= 1)).all()


@pytest.mark.parametrize("sampler", [sample_rates, sample_rates_qd])
def test_monotonized_paths_have_prc_shape(
    collection: ClassifierCollection, rng: np.random.Generator, sampler
) -> None:
    paths = sample_prc_paths(collection["good"].table, 50, rng, monotonized=True, sampler=sampler)

    assert (np.diff(paths.precision, axis=1) >= 0).all()
    assert (np.diff(paths.recall, axis=1) <= 0).all()


def test_quick_dirty_monotonized_paths_with_tied_scores(rng: np.random.Generator) -> None:
    # precision falls from 95/160 to 5/30 between the two tied blocks
    truth = [True] * 90 + [False] * 40 + [True] * 5 + [False] * 25 + [False] * 10
    scores = [0.5] * 130 + [0.9] * 30 + [0.1] * 10
    table = build_sweep_table(truth, scores)

    paths = sample_prc_paths(table, 200, rng, monotonized=True, sampler=sample_rates_qd)

    assert paths.n_draws == 200
    assert (np.diff(paths.precision, axis=1) >= 0).all()
    assert (np.diff(paths.recall, axis=1) <= 0).all()


def test_quick_dirty_sampler_paths(collection: ClassifierCollection, rng: np.random.Generator) -> None:
    table = collection["random"].table

    paths = sample_prc_paths(table, 40, rng, monotonized=False, sampler=sample_rates_qd)

    assert paths.n_draws == 40
    assert paths.n_rows == len(table) - 1


def test_non_positive_sample_count(collection: ClassifierCollection, rng: np.random.Generator) -> None:
    with pytest.raises(ValueError):
        sample_prc_paths(collection["good"].table, 0, rng)


def test_infer_prc_ci_bins_and_empty_bins() -> None:
    paths = PathEnsemble(
        precision=np.array([[0.2, 0.9], [0.4, 0.7], [0.6, np.nan]]),
        recall=np.array([[0.0, 1.0], [0.0, 1.0], [0.0, 1.0]]),
    )

    band = infer_prc_ci(paths, n_bins=4, probs=(0.0, 1.0))

    assert list(band.columns) == ["recall", "0.0", "1.0"]
    assert band["recall"].tolist() == [0.125, 0.375, 0.625, 0.875]
    assert band.loc[0, "0.0"] == pytest.approx(0.2)
    assert band.loc[0, "1.0"] == pytest.approx(0.6)
    assert band.loc[[1, 2], "0.0"].isna().all()
    assert band.loc[3, "0.0"] == pytest.approx(0.7)
    assert band.loc[3, "1.0"] == pytest.approx(0.9)


def test_infer_prc_ci_without_points() -> None:
    paths = PathEnsemble(precision=np.full((2, 3), np.nan), recall=np.full((2, 3), np.nan))

    band = infer_prc_ci(paths, n_bins=5)

    assert band.shape == (5, 3)
    assert band.isna().all().all()


def test_confidence_band(collection: ClassifierCollection, rng: np.random.Generator) -> None:
    band = prc_confidence_band(collection["good"].table, rng, n_samples=200, n_bins=10, balanced=True)

    assert isinstance(band, pd.DataFrame)
    assert len(band) == 10
    filled = band.dropna()
    assert not filled.empty
    assert (filled["0.025"] <= filled["0.975"]).all()
    assert ((filled["0.025"] >= 0) & (filled["0.975"] <= 1)).all()
