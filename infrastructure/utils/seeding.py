"""Random generator construction for reproducibility."""

import numpy as np


def make_rng(seed: int | None) -> np.random.Generator:
    """
    Build the random generator passed explicitly to every sampling operation.

    Args:
        seed: Random seed value (None for fresh OS entropy)

    Returns:
        numpy Generator (PCG64)
    """
    return np.random.default_rng(seed)
