import logging
import sys

# Third-party loggers that are chatty at INFO.
NOISY_LOGGERS = ("uvicorn.access", "httpx", "httpcore", "botocore", "boto3", "pdfminer")


def setup_logging(level: int | str | None = None) -> None:
    """Configure root logger for the service."""
    if level is None:
        try:
            from entrevisto.config import settings
            level = getattr(logging, settings.log_level.upper(), logging.INFO)
        except Exception:
            level = logging.INFO
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s"))
    root = logging.getLogger()
    root.setLevel(level)
    if root.handlers:
        root.handlers.clear()
    root.addHandler(handler)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
