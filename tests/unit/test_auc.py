import math

import numpy as np
import pandas as pd
import pytest
from sklearn.metrics import roc_auc_score

from domain.evaluation import auroc, build_collection, calc_auc


def test_constant_curve() -> None:
    assert calc_auc([0.0, 0.25, 1.0], [0.4, 0.4, 0.4]) == pytest.approx(0.4)


def test_direction_does_not_change_area() -> None:
    xs = [0.0, 0.3, 0.6, 1.0]
    ys = [1.0, 0.8, 0.5, 0.2]

    assert calc_auc(xs, ys) == pytest.approx(calc_auc(xs[::-1], ys[::-1]))


def test_missing_points_drop_their_segments() -> None:
    assert calc_auc([0.0, 0.5, 1.0], [1.0, math.nan, 1.0]) == 0.0
    assert calc_auc([0.0, 0.5, 1.0, 1.5], [1.0, 1.0, math.nan, 1.0]) == pytest.approx(0.5)


def test_degenerate_inputs() -> None:
    assert calc_auc([], []) == 0.0
    assert calc_auc([0.3], [0.7]) == 0.0
    with pytest.raises(ValueError):
        calc_auc([0.0, 1.0], [1.0])


def test_perfect_classifier_auroc() -> None:
    collection = build_collection([True, True, False, False], {"perfect": [1.0, 1.0, 0.0, 0.0]})

    assert auroc(collection)["perfect"] == pytest.approx(1.0)


def test_auroc_matches_sklearn() -> None:
    gen = np.random.default_rng(11)
    truth = gen.uniform(size=300) < 0.4
    # rounding forces tied scores
    scores = pd.DataFrame(
        {
            "a": np.round(truth + gen.normal(0, 1.0, truth.size), 1),
            "b": np.round(gen.normal(0, 1.0, truth.size), 1),
        }
    )

    collection = build_collection(truth, scores)
    ours = auroc(collection)

    for name in scores.columns:
        assert ours[name] == pytest.approx(roc_auc_score(truth, scores[name]))
