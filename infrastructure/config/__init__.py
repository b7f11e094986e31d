"""
Configuration management: models, loading, and validation.

Handles:
- RunConfig: Main analysis configuration
- Column mapping, curve and statistics settings
- Loading from YAML

The loader module performs file I/O; models are pure Pydantic classes.
"""

from infrastructure.config.loader import load_run_config
from infrastructure.config.models import (
    # Curve settings
    CurveConfig,
    # Column mapping
    DataColumnsConfig,
    # Main config
    RunConfig,
    # Stats config
    StatsConfig,
)

__all__ = [
    # Main config (most commonly used)
    "RunConfig",
    "load_run_config",
    # Sections
    "DataColumnsConfig",
    "CurveConfig",
    "StatsConfig",
]
