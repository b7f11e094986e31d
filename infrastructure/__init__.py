"""
Infrastructure layer: External dependencies and I/O boundaries.

Contains adapters for:
- Configuration loading (YAML)
- Dataset reading and artifact writing
- Observability (logging)
- Random generator construction

This is the only layer that performs I/O operations.
"""

# Most commonly used - exposed at top level for convenience
from infrastructure.config import (
    CurveConfig,
    RunConfig,
    StatsConfig,
    load_run_config,
)
from infrastructure.utils import make_rng

__all__ = [
    # Configuration (most commonly used)
    "load_run_config",
    "RunConfig",
    "CurveConfig",
    "StatsConfig",
    # Randomness
    "make_rng",
]
