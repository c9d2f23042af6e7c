import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from cinelog.config.environment import LOG_DIR, LOG_LEVEL

MAX_BYTES = 5 * 1024 * 1024
BACKUP_COUNT = 1

_configured = False


def setup_logging(log_dir: str = LOG_DIR, level: str = LOG_LEVEL):
    global _configured
    if _configured:
        return

    logs_dir = Path(log_dir)
    logs_dir.mkdir(parents=True, exist_ok=True)

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    info_handler = RotatingFileHandler(
        logs_dir / "info.log",
        maxBytes=MAX_BYTES,
        backupCount=BACKUP_COUNT
    )
    info_handler.setLevel(logging.INFO)
    info_handler.setFormatter(formatter)

    error_handler = RotatingFileHandler(
        logs_dir / "error.log",
        maxBytes=MAX_BYTES,
        backupCount=BACKUP_COUNT
    )
    error_handler.setLevel(logging.ERROR)
    error_handler.setFormatter(formatter)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(getattr(logging, level, logging.INFO))
    console_handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level, logging.INFO))

    root_logger.addHandler(info_handler)
    root_logger.addHandler(error_handler)
    root_logger.addHandler(console_handler)

    # requests logs every connection at INFO
    logging.getLogger('urllib3').setLevel(logging.WARNING)

    _configured = True
    logging.info("Logging system initialized")
