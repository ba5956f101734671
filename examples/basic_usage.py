"""Ship application logs to the example collector.

Start the collector first:
    uvicorn examples.collector_app:app --port 8000

Then run:
    python examples/basic_usage.py
"""

import logging
import logging.config

from logship import Level, SendResult, get_log_context, set_log_context
from logship.adapters.logging import HttpLogHandler

COLLECTOR_URL = "http://127.0.0.1:8000/logs"


def report(result: SendResult) -> None:
    print("delivered" if result.ok else f"delivery failed: {result.error}")


logging.config.dictConfig(
    {
        "version": 1,
        "handlers": {
            "console": {"class": "logging.StreamHandler"},
            "remote": {
                "()": HttpLogHandler,
                "label": "example-app",
                "url": COLLECTOR_URL,
                "headers": {"X-Api-Key": "dev"},
                "context_provider": get_log_context,
            },
        },
        "root": {"level": "DEBUG", "handlers": ["console", "remote"]},
    }
)

HttpLogHandler.default_config.threshold = Level.WARNING
HttpLogHandler.default_config.send_observer = report

logger = logging.getLogger("example")

set_log_context(request_id="req-42")
logger.info("Only printed locally")
logger.warning("Disk almost full", extra={"free_mb": 120, "mounts": ["/", "/var"]})
try:
    1 / 0
except ZeroDivisionError:
    logger.exception("Calculation failed")

logging.shutdown()
