import numpy as np
import pytest

from domain.evaluation import prc_ci


def test_interval_contains_observed_rate() -> None:
    ci = prc_ci([30, 5], [40, 10])

    assert list(ci.columns) == [0.025, 0.975]
    assert ci.iloc[0, 0] < 0.75 < ci.iloc[0, 1]
    assert ci.iloc[1, 0] < 0.5 < ci.iloc[1, 1]


def test_more_trials_narrow_the_interval() -> None:
    ci = prc_ci([5, 50, 500], [10, 100, 1000])
    width = (ci[0.975] - ci[0.025]).to_numpy()

    assert width[0] > width[1] > width[2]


def test_median_of_balanced_counts() -> None:
    ci = prc_ci([50], [100], probs=[0.5])

    assert ci.iloc[0, 0] == pytest.approx(0.5, abs=0.01)


def test_quantiles_are_monotone_in_p() -> None:
    ci = prc_ci([7], [20], probs=[0.1, 0.3, 0.5, 0.7, 0.9])

    assert (np.diff(ci.iloc[0].to_numpy()) >= 0).all()


def test_no_trials_give_nan_and_nonpositive_p_gives_zero() -> None:
    ci = prc_ci([0, 3], [0, 6], probs=[0.0, 0.5])

    assert ci.iloc[0].isna().all()
    assert ci.iloc[1, 0] == 0.0


def test_mismatched_inputs() -> None:
    with pytest.raises(ValueError):
        prc_ci([1, 2], [3])
    with pytest.raises(ValueError):
        prc_ci([1], [3], res=0.0)


def test_full_probability_range_brackets_observed_rate() -> None:
    i = np.array([3, 17, 1])
    n = np.array([10, 20, 50])

    ci = prc_ci(i, n, probs=(0.0, 1.0))

    assert (ci[0.0].to_numpy() <= i / n).all()
    assert (ci[1.0].to_numpy() >= i / n).all()
