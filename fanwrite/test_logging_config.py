import json

from loguru import logger

from fanwrite.logging_config import setup_logging


def test_json_lines(capsys) -> None:
    setup_logging(level="INFO", json_format=True)
    try:
        logger.bind(request="abc").info("wrote {} objects", 3)
        logger.debug("hidden")
    finally:
        setup_logging()
    lines = capsys.readouterr().err.strip().splitlines()
    assert len(lines) == 1
    record = json.loads(lines[0])
    assert record["message"] == "wrote 3 objects"
    assert record["level"] == "INFO"
    assert record["request"] == "abc"
