"""
Domain layer: curve statistics with minimal external dependencies.

Contains:
- schemas: Pydantic models for classifier curves, path ensembles and results
- errors: shape / type / sampling failure types
- evaluation: sweep tables, samplers, confidence bands, significance
"""

from domain.errors import SamplingNonTerminationError, ShapeMismatchError, TypeMismatchError
from domain.schemas import (
    ClassifierCollection,
    ClassifierCurve,
    PathEnsemble,
    SignificanceResult,
    ThresholdRange,
)

__all__ = [
    "ClassifierCurve",
    "ClassifierCollection",
    "PathEnsemble",
    "ThresholdRange",
    "SignificanceResult",
    "ShapeMismatchError",
    "TypeMismatchError",
    "SamplingNonTerminationError",
]
