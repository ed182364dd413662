"""Logger setup tests."""

from loguru import logger

from app.core.logger import setup_logger


def test_file_sink_receives_tagged_messages(tmp_path):
    log_file = tmp_path / "logs" / "gitpainter.log"
    setup_logger(level="DEBUG", log_file=str(log_file))
    try:
        logger.debug("[DEPLOY] working directory ready")
    finally:
        # removing the sinks flushes and closes the file
        logger.remove()
        setup_logger(level="INFO")

    text = log_file.read_text(encoding="utf-8")
    assert f"file={log_file}" in text
    assert "[DEPLOY] working directory ready" in text


def test_repeated_setup_replaces_sinks(tmp_path):
    first = tmp_path / "first.log"
    second = tmp_path / "second.log"
    setup_logger(log_file=str(first))
    setup_logger(log_file=str(second))
    try:
        logger.info("[JOBS] only in the second file")
    finally:
        logger.remove()
        setup_logger(level="INFO")

    assert "only in the second file" not in first.read_text(encoding="utf-8")
    assert "only in the second file" in second.read_text(encoding="utf-8")
