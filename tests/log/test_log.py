from os.path import join

from spaify.config import LogConfig
from spaify.log import get_logger, setup


def test_file_handler(tmp_path):
    output = join(tmp_path, "test.log")
    cfg = LogConfig(level="DEBUG", output=output)
    setup(cfg, force=True)

    logger = get_logger("spaify")
    logger.debug("debug message")

    assert len(logger.handlers) == 1
    handler = logger.handlers[0]
    assert handler.level == 10
    assert handler.stream.name == output

    logger.removeHandler(handler)
    handler.close()


def test_log_level(capsys):
    cfg = LogConfig(level="WARNING", output=None)
    setup(cfg, force=True)

    logger = get_logger("spaify.test_default_setup")
    logger.debug("debug message")
    logger.info("info message")
    logger.warning("warning message")
    logger.error("error message")

    stderr = capsys.readouterr().err
    assert "debug message" not in stderr
    assert "info message" not in stderr
    assert "warning message" in stderr
    assert "error message" in stderr


def test_setup_is_idempotent():
    setup(LogConfig(level="INFO", output=None), force=True)
    setup(LogConfig(level="DEBUG", output=None))

    logger = get_logger("spaify")
    assert len(logger.handlers) == 1
    assert logger.level == 20
