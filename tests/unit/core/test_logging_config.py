from __future__ import annotations

import json
import logging

from boardinghouse.core.logging_config import JsonFormatter


def test_json_formatter_includes_extra_fields():
    record = logging.LogRecord("boardinghouse.test", logging.INFO, __file__, 1, "contract.checked_in", None, None)
    record.event = "contract.checked_in"
    record.contract_id = 7

    payload = json.loads(JsonFormatter().format(record))

    assert payload["message"] == "contract.checked_in"
    assert payload["event"] == "contract.checked_in"
    assert payload["contract_id"] == 7
    assert payload["level"] == "INFO"
