"""Logging setup for the client.

Modules log with ``extra=`` context (URLs, ids, status codes); the formatter
renders those fields after the message.
"""

import logging

CLIENT_LOGGER = "barbershop_client"

_RECORD_ATTRIBUTES = set(vars(logging.makeLogRecord({}))) | {"message", "asctime"}


class ContextFormatter(logging.Formatter):
    """Formatter that appends ``extra`` fields as sorted ``key=value`` pairs."""

    def format(self, record: logging.LogRecord) -> str:
        text = super().format(record)
        context = {
            key: value
            for key, value in vars(record).items()
            if key not in _RECORD_ATTRIBUTES
        }
        if not context:
            return text
        pairs = " ".join(f"{key}={value}" for key, value in sorted(context.items()))
        return f"{text} [{pairs}]"


def configure_logging(level: str = "INFO") -> None:
    """Attach one stream handler to the client logger; later calls only set level."""
    logger = logging.getLogger(CLIENT_LOGGER)
    logger.setLevel(level.upper())
    if logger.handlers:
        return
    handler = logging.StreamHandler()
    handler.setFormatter(ContextFormatter("%(levelname)s: %(name)s: %(message)s"))
    logger.addHandler(handler)
    logger.propagate = False
