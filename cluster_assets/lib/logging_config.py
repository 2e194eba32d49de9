"""JSON logging configuration for the cluster assets pipeline."""

import logging

from pythonjsonlogger import jsonlogger

# Asset context passed through ``extra=``; see AssetsError.log_context()
CONTEXT_FIELDS = frozenset({"role", "path", "operation"})


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """JSON formatter for asset generation logs.

    Emits timestamp, level, message, exc_info, funcName and lineno, plus the
    role, path and operation of the asset being handled when the call site
    supplies them. Everything else logging attaches to a record is dropped.
    """

    def add_fields(self, log_record, record, message_dict):
        """Override to keep the base fields and any asset context.

        Args:
            log_record: Dict to be logged as JSON
            record: LogRecord object from logging framework
            message_dict: Dict containing message and args
        """
        super().add_fields(log_record, record, message_dict)

        if "levelname" in log_record:
            log_record["level"] = log_record.pop("levelname")

        allowed_fields = {
            "timestamp",
            "level",
            "message",
            "exc_info",
            "funcName",
            "lineno",
        } | CONTEXT_FIELDS

        for key in [key for key in log_record if key not in allowed_fields]:
            log_record.pop(key)


def _setup_logger() -> logging.Logger:
    """Initialize and configure the singleton pipeline logger.

    Returns:
        Logger named cluster_assets writing JSON lines to stderr
    """
    logger = logging.getLogger("cluster_assets")

    # Module reloads must not stack handlers
    if logger.handlers:
        return logger

    handler = logging.StreamHandler()
    handler.setFormatter(
        CustomJsonFormatter(
            fmt="%(timestamp)s %(levelname)s %(funcName)s %(lineno)d %(message)s",
            timestamp=True,
        )
    )

    logger.setLevel(logging.INFO)
    logger.addHandler(handler)
    logger.propagate = False

    return logger


LOGGER = _setup_logger()
