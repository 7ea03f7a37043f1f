from __future__ import annotations

import logging

from logging_config import ContextualFormatter


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord("services.resolver", logging.INFO, __file__, 1, "Resolved", None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_formatter_appends_known_extras_in_order() -> None:
    formatter = ContextualFormatter(fmt="%(message)s")

    rendered = formatter.format(_record(source="gps", client_id="clientA", device_id=None, other="x"))

    assert rendered == "Resolved | client_id=clientA source=gps"


def test_formatter_leaves_plain_records_untouched() -> None:
    formatter = ContextualFormatter(fmt="%(levelname)s %(message)s", extra_keys=["reason"])

    assert formatter.format(_record(client_id="clientA")) == "INFO Resolved"
