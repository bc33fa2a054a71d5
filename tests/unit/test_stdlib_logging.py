import logging

from strata.core.stdlib_logging import LOGGER_NAME, configure_logging


def test_stream_handler_by_default():
    logger = configure_logging("info")
    assert logger.level == logging.INFO
    assert logger.propagate is False
    assert [type(h) for h in logger.handlers] == [logging.StreamHandler]


def test_json_mode_is_silent():
    logger = configure_logging("DEBUG", json_mode=True)
    assert [type(h) for h in logger.handlers] == [logging.NullHandler]


def test_file_handler_and_reconfigure(tmp_path):
    log_file = tmp_path / "logs" / "strata.log"
    logger = configure_logging("DEBUG", log_file=log_file)
    logging.getLogger(f"{LOGGER_NAME}.core.composition.engine").debug("composed %d", 3)
    for handler in logger.handlers:
        handler.flush()
    assert "composed 3" in log_file.read_text(encoding="utf-8")

    configure_logging("WARNING")
    assert len(logger.handlers) == 1
    assert logger.level == logging.WARNING


def test_unknown_level_falls_back_to_warning():
    assert configure_logging("chatty").level == logging.WARNING
