import logging

from repolens.logging_config import get_logger, setup_logging
from repolens.models import ParsedFile, ProjectStructure
from repolens.observers import LoggingObserver


def test_events_become_log_records(caplog):
    observer = LoggingObserver()
    with caplog.at_level(logging.DEBUG, logger="repolens"):
        observer.files_listed("acme/app", 12)
        observer.fetch_failed("src/a.py", RuntimeError("timeout"))
        observer.parse_degraded("src/b.py", ValueError("bad"))
        observer.file_parsed(ParsedFile(path="src/c.py", language="python", lines=3, complexity=1))
        observer.analysis_completed("acme/app", ProjectStructure(total_files=1, total_lines=3))

    events = [getattr(record, "event", None) for record in caplog.records]
    assert events == ["files_listed", "fetch_failed", "parse_degraded", "file_parsed", "analysis_completed"]

    fetch = caplog.records[1]
    assert fetch.levelno == logging.WARNING
    assert fetch.path == "src/a.py"
    assert fetch.error == "timeout"
    assert "src/a.py" in fetch.getMessage()


def test_setup_logging_levels(tmp_path):
    log_file = tmp_path / "repolens.log"
    logger = setup_logging(verbose=True, log_file=str(log_file))
    assert logger.level == logging.DEBUG
    assert len(logger.handlers) == 2

    logger = setup_logging(quiet=True)
    assert logger.level == logging.ERROR
    assert len(logger.handlers) == 1

    logger = setup_logging()
    assert logger.level == logging.WARNING


def test_get_logger_names():
    assert get_logger().name == "repolens"
    assert get_logger("aggregator").name == "repolens.aggregator"
    assert get_logger("repolens.sources").name == "repolens.sources"
