import json
import logging
from datetime import datetime, timezone

LOGGER_NAME = "billscan"


class JSONFormatter(logging.Formatter):
    def format(self, record):
        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if hasattr(record, "extra_data"):
            log_entry.update(record.extra_data)
        if record.exc_info and record.exc_info[0]:
            log_entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_entry, default=str)


def setup_logging(level: str = "INFO"):
    service_logger = logging.getLogger(LOGGER_NAME)
    service_logger.setLevel(level)

    # Repeated app construction (tests) must not stack handlers
    if not any(isinstance(h.formatter, JSONFormatter) for h in service_logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(JSONFormatter())
        service_logger.addHandler(handler)

    # Quiet noisy loggers
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("google_genai").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)

    return service_logger
