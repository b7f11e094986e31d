"""
Logging setup with contextvars-based metadata injection.

Every record carries the short run tag (r=) and the classifier currently being
sampled or compared (c=). Console output stays at INFO; the per-row sampler
progress logged at DEBUG only reaches the rotating run log.
"""

import contextvars
import hashlib
import logging
from collections.abc import Iterator
from contextlib import contextmanager
from logging.handlers import RotatingFileHandler
from pathlib import Path

cv_run_tag = contextvars.ContextVar("run_tag", default="-")
cv_run_id_full = contextvars.ContextVar("run_id_full", default="-")
cv_classifier = contextvars.ContextVar("classifier", default="-")

CONSOLE_FORMAT = "%(asctime)s [%(levelname)s] r=%(run)s c=%(clf)s | %(message)s"
FILE_FORMAT = "%(asctime)s [%(levelname)s] %(name)s | r=%(run)s c=%(clf)s | %(message)s"

# Third-party loggers raised to WARNING; opik talks to its backend over httpx
QUIET_LOGGERS = ("httpx", "httpcore", "urllib3")


def make_run_tag(run_id_full: str, length: int = 8) -> str:
    """Short BLAKE2s tag of the full run id, printed on every line instead of the id itself."""
    h = hashlib.blake2s(run_id_full.encode("utf-8"), digest_size=8).hexdigest()
    return h[:length]


class ContextInjectFilter(logging.Filter):
    """Copy the run tag and current classifier onto each record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.run = cv_run_tag.get() or "-"
        record.clf = cv_classifier.get() or "-"
        return True


def set_log_context(
    *,
    run_id_full: str | None = None,
    classifier: str | None = None,
) -> None:
    """Update logging context (thread-safe via contextvars)."""
    if run_id_full is not None:
        cv_run_id_full.set(str(run_id_full))
        cv_run_tag.set(make_run_tag(str(run_id_full)))

    if classifier is not None:
        cv_classifier.set(str(classifier))


def get_log_context() -> dict[str, str]:
    """Current run / classifier context, e.g. for trace metadata or JSON artifacts."""
    return {
        "run_tag": str(cv_run_tag.get() or "-"),
        "run_id_full": str(cv_run_id_full.get() or "-"),
        "classifier": str(cv_classifier.get() or "-"),
    }


def clear_classifier_context() -> None:
    """Reset classifier context to default (keep run info)."""
    cv_classifier.set("-")


@contextmanager
def classifier_context(name: str) -> Iterator[None]:
    """Tag every record logged inside the block with classifier `name`."""
    token = cv_classifier.set(str(name))
    try:
        yield
    finally:
        cv_classifier.reset(token)


def _handler(handler: logging.Handler, level: int, fmt: str, datefmt: str) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt, datefmt=datefmt))
    handler.addFilter(ContextInjectFilter())
    return handler


def configure_logging(
    *,
    log_file: Path | None = None,
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
    max_bytes: int = 10_000_000,  # 10MB
    backup_count: int = 5,
) -> None:
    """
    Configure root logging: console handler plus an optional rotating run log.

    Calling it again replaces the previous handlers.

    Args:
        log_file: Path to log file (console only when None)
        console_level: Minimum level for console output (default: INFO)
        file_level: Minimum level for file output (default: DEBUG)
        max_bytes: Max log file size before rotation
        backup_count: Number of backup files to keep
    """
    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(logging.DEBUG)  # handlers enforce levels

    root.addHandler(_handler(logging.StreamHandler(), console_level, CONSOLE_FORMAT, "%H:%M:%S"))

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        fh = RotatingFileHandler(log_file, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8")
        root.addHandler(_handler(fh, file_level, FILE_FORMAT, "%Y-%m-%d %H:%M:%S"))

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    logging.getLogger("opik").setLevel(logging.INFO)

    logging.getLogger(__name__).info(
        "Logging configured (console_level=%s, file=%s)",
        logging.getLevelName(console_level),
        str(log_file) if log_file is not None else "None",
    )
