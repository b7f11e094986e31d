import logging
from pathlib import Path

from infrastructure.observability import (
    classifier_context,
    clear_classifier_context,
    configure_logging,
    get_log_context,
    make_run_tag,
    set_log_context,
)


def test_run_tag_is_stable_and_short() -> None:
    assert make_run_tag("20260101_000000_example") == make_run_tag("20260101_000000_example")
    assert len(make_run_tag("20260101_000000_example")) == 8
    assert make_run_tag("a") != make_run_tag("b")


def test_log_context_round_trip() -> None:
    set_log_context(run_id_full="run-1", classifier="REVEL")
    ctx = get_log_context()

    assert ctx["run_id_full"] == "run-1"
    assert ctx["run_tag"] == make_run_tag("run-1")
    assert ctx["classifier"] == "REVEL"

    clear_classifier_context()
    assert get_log_context()["classifier"] == "-"
    assert get_log_context()["run_id_full"] == "run-1"


def test_file_log_carries_context(tmp_path: Path) -> None:
    log_file = tmp_path / "run.log"
    configure_logging(log_file=log_file, console_level=logging.WARNING)
    set_log_context(run_id_full="run-2", classifier="CADD")

    logging.getLogger("tests.context").info("hello")
    for handler in logging.getLogger().handlers:
        handler.flush()

    text = log_file.read_text(encoding="utf-8")
    assert f"r={make_run_tag('run-2')} c=CADD" in text
    assert "hello" in text

    clear_classifier_context()
    logging.getLogger().handlers.clear()


def test_classifier_context_restores_previous_value() -> None:
    set_log_context(classifier="outer")

    with classifier_context("inner"):
        assert get_log_context()["classifier"] == "inner"

    assert get_log_context()["classifier"] == "outer"
    clear_classifier_context()
