"""tests for logger initialization."""

import io
import logging
from logging.handlers import RotatingFileHandler

import pytest

from lineeditor.ui import ColorizingStreamHandler, PlainFormatter, init_logger
from lineeditor.ui.utils import ANSI


@pytest.fixture
def logger_name(request):
    name = f"lineeditor-test.{request.node.name}"
    yield name
    logger = logging.getLogger(name)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


class TestInitLogger:

    def test_idempotent(self, logger_name):
        init_logger(logger_name, stream=io.StringIO())
        logger = init_logger(logger_name, stream=io.StringIO())
        assert sum(isinstance(h, ColorizingStreamHandler) for h in logger.handlers) == 1
        assert logger.propagate is False

    def test_level_by_name(self, logger_name):
        assert init_logger(logger_name, level="debug", stream=io.StringIO()).level == logging.DEBUG

    def test_plain_output_off_terminal(self, logger_name):
        stream = io.StringIO()
        logger = init_logger(logger_name, level=logging.INFO, stream=stream)
        logger.warning("%s", ANSI["red"] + "boom" + ANSI["reset"])
        assert stream.getvalue() == "[WARNING] boom\n"

    def test_below_level_dropped(self, logger_name):
        stream = io.StringIO()
        logger = init_logger(logger_name, level=logging.WARNING, stream=stream)
        logger.info("quiet")
        assert stream.getvalue() == ""

    def test_log_file(self, logger_name, tmp_path):
        path = tmp_path / "editor.log"
        logger = init_logger(logger_name, level=logging.DEBUG, logfile=str(path), stream=io.StringIO())
        assert any(isinstance(h, RotatingFileHandler) for h in logger.handlers)
        logger.debug(ANSI["green"] + "saved" + ANSI["reset"])
        for handler in logger.handlers:
            handler.flush()
        text = path.read_text(encoding="utf-8")
        assert "[DEBUG]" in text
        assert "saved" in text
        assert "\x1b[" not in text


class TestPlainFormatter:

    def test_strips_ansi(self):
        record = logging.LogRecord("x", logging.INFO, __file__, 1, ANSI["bold"] + "hi", None, None)
        assert PlainFormatter("%(message)s").format(record) == "hi"
