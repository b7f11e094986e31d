"""
Random draws of binomial rate parameters (precision or recall) from their likelihood.

Two policies:
- accurate: Beta(i, n-i) draws when unconstrained; otherwise one rejection-sampling loop
  per requested sample, each against its own [min_q, max_q] window.
- quick-and-dirty: the same edge rule and per-sample windows, but each pending sample
  draws a batch of candidates per round, sized from the acceptance rate so far.

Every sampler takes an explicit numpy Generator; none touches global random state.
"""

import logging
import math
from collections.abc import Callable
from enum import Enum

import numpy as np
from scipy.stats import binom

from domain.errors import SamplingNonTerminationError

logger = logging.getLogger(__name__)

# A constrained draw returns the window edge directly when the likelihood there has
# dropped below this fraction of its peak and the peak lies outside the window.
SHORTCUT_DENSITY = 0.05
MAX_ROUNDS = 100_000
MAX_BATCH = 1_000_000
MAX_CANDIDATES = 50_000_000

RateSampler = Callable[..., np.ndarray]


class SamplingMethod(str, Enum):
    """Rate sampling policies."""

    ACCURATE = "accurate"
    QUICK_DIRTY = "quick_dirty"


def _check_counts(i: int, n: int) -> None:
    if n < 0 or i < 0 or i > n:
        raise ValueError(f"Expected 0 <= i <= n, got i={i}, n={n}")


def _mode(i: int, n: int) -> float:
    # n == 0: the likelihood is flat, any rate is a mode
    return i / n if n > 0 else 0.5


def _is_unconstrained(q) -> bool:
    return q is None or bool(np.all(np.isnan(np.asarray(q, dtype=float))))


def _bounds(q, size: int, default: float) -> np.ndarray:
    """Broadcast a scalar / per-sample constraint to `size` values; missing values mean unconstrained."""
    if q is None:
        return np.full(size, default)
    arr = np.broadcast_to(np.asarray(q, dtype=float), (size,)).copy()
    arr[np.isnan(arr)] = default
    return arr


def _beta_draws(i: int, n: int, size: int, rng: np.random.Generator) -> np.ndarray:
    if n == 0:
        return rng.uniform(0.0, 1.0, size)
    # Beta(0, b) and Beta(a, 0) collapse onto the boundary
    if i == 0:
        return np.zeros(size)
    if i == n:
        return np.ones(size)
    return rng.beta(i, n - i, size)


def _resolve_edges(
    i: int,
    n: int,
    lower: np.ndarray,
    upper: np.ndarray,
    shortcut_density: float,
) -> tuple[np.ndarray, float]:
    """
    Fill the slots whose draw is decided without sampling; the rest stay NaN.

    A degenerate window returns its single point. A window lying above (below) the mode
    whose near edge has likelihood below shortcut_density * peak returns that edge.

    Returns:
        Tuple of (partially filled output, likelihood peak used as the rejection envelope)
    """
    if np.any(lower > upper):
        raise ValueError("min_q must not exceed max_q")

    mode = _mode(i, n)
    peak = binom.pmf(i, n, mode)
    out = np.full(lower.shape, np.nan)

    fixed = lower == upper
    out[fixed] = lower[fixed]

    short_low = np.isnan(out) & (lower > mode) & (binom.pmf(i, n, lower) < shortcut_density * peak)
    out[short_low] = lower[short_low]
    short_high = np.isnan(out) & (upper < mode) & (binom.pmf(i, n, upper) < shortcut_density * peak)
    out[short_high] = upper[short_high]
    return out, peak


def _rejection_sample_many(
    i: int,
    n: int,
    lower: np.ndarray,
    upper: np.ndarray,
    rng: np.random.Generator,
    max_rounds: int,
    shortcut_density: float,
) -> np.ndarray:
    """One independent rejection-sampling loop per (lower[k], upper[k]) window, run in lockstep."""
    out, peak = _resolve_edges(i, n, lower, upper, shortcut_density)

    pending = np.flatnonzero(np.isnan(out))
    rounds = 0
    while pending.size:
        if rounds >= max_rounds:
            raise SamplingNonTerminationError(
                f"Rejection sampling for i={i}, n={n} left {pending.size} sample(s) "
                f"unaccepted after {max_rounds} rounds"
            )
        x = rng.uniform(lower[pending], upper[pending])
        u = rng.uniform(0.0, peak, size=pending.size)
        accept = u <= binom.pmf(i, n, x)
        out[pending[accept]] = x[accept]
        pending = pending[~accept]
        rounds += 1

    return out


def rejection_sample(
    i: int,
    n: int,
    rng: np.random.Generator,
    min_q: float = 0.0,
    max_q: float = 1.0,
    max_rounds: int = MAX_ROUNDS,
    shortcut_density: float = SHORTCUT_DENSITY,
) -> float:
    """
    Draw one rate in [min_q, max_q] with density proportional to Binomial(n, rate) at i.

    Returns min_q (max_q) directly when the window lies entirely above (below) the
    maximum-likelihood rate i/n and the likelihood at that edge is negligible.

    Raises:
        SamplingNonTerminationError: If no candidate is accepted within max_rounds
    """
    _check_counts(i, n)
    out = _rejection_sample_many(
        i,
        n,
        np.array([min_q], dtype=float),
        np.array([max_q], dtype=float),
        rng,
        max_rounds,
        shortcut_density,
    )
    return float(out[0])


def sample_rates(
    i: int,
    n: int,
    size: int,
    rng: np.random.Generator,
    min_q=None,
    max_q=None,
    max_rounds: int = MAX_ROUNDS,
) -> np.ndarray:
    """
    Accurate, order-preserving rate sampler.

    Without constraints, draws `size` values from Beta(i, n-i). With constraints, sample k
    is drawn by rejection sampling inside [min_q[k], max_q[k]], so sample k of one call can
    be chained to sample k of the previous call.

    Args:
        i: successes
        n: trials
        size: number of samples
        rng: random generator
        min_q: optional lower bound(s), scalar or one per sample
        max_q: optional upper bound(s), scalar or one per sample
        max_rounds: cap on rejection rounds

    Returns:
        Array of `size` sampled rates
    """
    _check_counts(i, n)
    if size < 0:
        raise ValueError(f"size must be non-negative, got {size}")

    if _is_unconstrained(min_q) and _is_unconstrained(max_q):
        return _beta_draws(i, n, size, rng)

    return _rejection_sample_many(
        i,
        n,
        _bounds(min_q, size, 0.0),
        _bounds(max_q, size, 1.0),
        rng,
        max_rounds,
        SHORTCUT_DENSITY,
    )


def sample_rates_qd(
    i: int,
    n: int,
    size: int,
    rng: np.random.Generator,
    min_q=None,
    max_q=None,
    max_rounds: int = MAX_ROUNDS,
    max_candidates: int = MAX_CANDIDATES,
) -> np.ndarray:
    """
    Quick-and-dirty rate sampler: vectorised batch rejection sampling.

    Windows decided by the edge rule of the accurate sampler are filled first. Every other
    slot k draws a batch of candidates uniformly in [min_q[k], max_q[k]], each accepted
    with probability Binomial(n, x)(i) / peak, and keeps its first accepted candidate.
    The first round draws one candidate per slot; later rounds draw, for each slot still
    empty, twice the number of candidates the acceptance rate so far says one hit takes.
    Sample k is always drawn under window k, so draws chain across calls like the
    accurate sampler's.

    Returns:
        Exactly `size` sampled rates

    Raises:
        SamplingNonTerminationError: If slots are still empty after max_rounds rounds or
            after max_candidates candidates in total
    """
    _check_counts(i, n)
    if size < 0:
        raise ValueError(f"size must be non-negative, got {size}")

    lower = _bounds(min_q, size, 0.0)
    upper = _bounds(max_q, size, 1.0)
    out, peak = _resolve_edges(i, n, lower, upper, SHORTCUT_DENSITY)

    pending = np.flatnonzero(np.isnan(out))
    per_slot = 1
    n_drawn = 0
    n_accepted = 0
    rounds = 0
    while pending.size:
        if rounds >= max_rounds or n_drawn >= max_candidates:
            raise SamplingNonTerminationError(
                f"Quick sampling for i={i}, n={n} left {pending.size}/{size} sample(s) empty "
                f"after {rounds} rounds and {n_drawn} candidates"
            )
        shape = (pending.size, per_slot)
        x = rng.uniform(lower[pending, None], upper[pending, None], size=shape)
        u = rng.uniform(0.0, peak, size=shape)
        accept = u <= binom.pmf(i, n, x)

        hit = accept.any(axis=1)
        first = accept.argmax(axis=1)
        out[pending[hit]] = x[hit, first[hit]]
        pending = pending[~hit]

        n_drawn += x.size
        n_accepted += int(accept.sum())
        rounds += 1

        if pending.size:
            rate = max(n_accepted, 1) / n_drawn
            per_slot = max(1, min(2 * math.ceil(1 / rate), MAX_BATCH // pending.size))
            logger.debug(
                "Quick sampling i=%d n=%d: %d short, next batch %d per slot",
                i,
                n,
                pending.size,
                per_slot,
            )

    return out


def get_rate_sampler(method: SamplingMethod | str) -> RateSampler:
    """Resolve a sampling policy to its sampler function."""
    method = SamplingMethod(method)
    if method is SamplingMethod.QUICK_DIRTY:
        return sample_rates_qd
    return sample_rates
