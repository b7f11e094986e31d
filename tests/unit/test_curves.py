import numpy as np
import pytest

from domain.evaluation import balance_precision, build_sweep_table, class_prior, configure_precision, monotonize


def test_monotonize_running_max() -> None:
    assert monotonize([0.5, 0.4, 0.7, 0.6, 0.9]).tolist() == [0.5, 0.5, 0.7, 0.7, 0.9]


def test_monotonize_is_idempotent() -> None:
    xs = np.random.default_rng(1).uniform(size=50)
    once = monotonize(xs)

    assert np.array_equal(monotonize(once), once)
    assert (np.diff(once) >= 0).all()


def test_monotonize_missing_values() -> None:
    out = monotonize([np.nan, 0.3, np.nan, 0.2])

    assert np.isnan(out[0])
    assert out[1:].tolist() == [0.3, 0.3, 0.3]


def test_monotonize_empty() -> None:
    assert monotonize([]).size == 0


def test_balance_precision_fixed_points() -> None:
    out = balance_precision([0.0, 0.2, 1.0], prior=0.2)

    assert out[0] == 0.0
    assert out[1] == pytest.approx(0.5)
    assert out[2] == 1.0


def test_balance_precision_identity_at_half_prior() -> None:
    p = np.linspace(0, 1, 11)

    assert np.allclose(balance_precision(p, prior=0.5), p)


def test_class_prior_and_configure_precision() -> None:
    table = build_sweep_table([True, False, False, False], [0.2, 0.9, 0.1, 0.3])

    assert class_prior(table) == pytest.approx(0.25)
    raw = configure_precision(table, monotonized=False)
    mono = configure_precision(table, monotonized=True)
    assert (np.diff(mono) >= 0).all()
    assert (mono >= raw).all()
