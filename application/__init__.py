"""
Application layer: Use cases and workflow orchestration.

This layer coordinates between domain logic and infrastructure,
implementing the analysis workflows run by the CLI.
"""

from application.analysis import (
    build_collection_from_table,
    compute_confidence_bands,
    compute_curve_metrics,
    compute_significance,
    log_analysis_summary,
)
from application.serialize import save_confidence_bands, save_json_artifact, save_sweep_tables

__all__ = [
    # Main workflows
    "build_collection_from_table",
    "compute_curve_metrics",
    "compute_confidence_bands",
    "compute_significance",
    "log_analysis_summary",
    # Artifacts
    "save_sweep_tables",
    "save_confidence_bands",
    "save_json_artifact",
]
