"""Shared pytest fixtures."""

import os

# Keep opik @track decorators from trying to reach a tracing backend.
os.environ["OPIK_TRACK_DISABLE"] = "true"

import numpy as np
import pandas as pd
import pytest

from domain.evaluation import build_collection
from domain.schemas import ClassifierCollection


@pytest.fixture
def rng() -> np.random.Generator:
    return np.random.default_rng(12345)


@pytest.fixture
def scored_frame() -> pd.DataFrame:
    """80 labelled samples scored by an informative and an uninformative classifier."""
    gen = np.random.default_rng(0)
    truth = np.zeros(80, dtype=bool)
    truth[:30] = True
    return pd.DataFrame(
        {
            "truth": truth,
            "good": np.round(truth * 1.0 + gen.normal(0.0, 0.6, truth.size), 2),
            "random": np.round(gen.uniform(0.0, 1.0, truth.size), 2),
        }
    )


@pytest.fixture
def collection(scored_frame: pd.DataFrame) -> ClassifierCollection:
    return build_collection(scored_frame["truth"], scored_frame[["good", "random"]])
