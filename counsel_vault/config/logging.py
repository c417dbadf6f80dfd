# counsel_vault/config/logging.py

import json
import logging
from datetime import datetime, timezone

from counsel_vault.core.context import actor_id_ctx, correlation_id_ctx

# extra= keys copied into the JSON line. Anything else passed as extra is dropped,
# so content or key material cannot reach the log by accident.
_EXTRA_FIELDS = (
    "record_id",
    "subject_id",
    "owner_id",
    "actor_id",
    "action",
    "operation",
    "reason",
    "entity_type",
    "entity_id",
    "error",
    "count",
    "path",
    "method",
    "status_code",
)


class JsonFormatter(logging.Formatter):
    def format(self, record):
        log_record = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "message": record.getMessage(),
            "logger": record.name,
            "correlation_id": correlation_id_ctx.get(),
            "actor_id": actor_id_ctx.get(),
        }
        for field in _EXTRA_FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                log_record[field] = value
        return json.dumps(log_record, default=str)


def configure_logging(log_level: str):
    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    # Repeated calls (app factory, CLI) must not duplicate lines.
    if any(isinstance(h.formatter, JsonFormatter) for h in root_logger.handlers):
        return

    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter())
    root_logger.addHandler(handler)
