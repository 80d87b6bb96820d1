import logging

from logging_config import ContextualFormatter


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="services.readings",
        level=logging.WARNING,
        pathname=__file__,
        lineno=1,
        msg="Alerts for %s",
        args=("M1",),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_formatter_appends_known_context() -> None:
    formatter = ContextualFormatter(fmt="%(levelname)s %(message)s")

    line = formatter.format(_record(device_id="M1", alert_count=2, unrelated="x"))

    assert line == "WARNING Alerts for M1 | device_id=M1 alert_count=2"


def test_formatter_without_context_leaves_message_untouched() -> None:
    formatter = ContextualFormatter(fmt="%(message)s")

    assert formatter.format(_record(reading_id=None)) == "Alerts for M1"
