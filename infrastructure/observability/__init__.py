"""
Observability: structured logging and context management.

Provides:
- Contextual logging with run tag and classifier name
- Rotating run log alongside console output
- Third-party library log level control
"""

from infrastructure.observability.logging import (
    classifier_context,
    clear_classifier_context,
    configure_logging,
    get_log_context,
    make_run_tag,
    set_log_context,
)

__all__ = [
    "configure_logging",
    "set_log_context",
    "get_log_context",
    "classifier_context",
    "clear_classifier_context",
    "make_run_tag",
]
