import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

FORMAT = '%(asctime)s | %(levelname)s | %(message)s'

def setup_logging(log_path: str = None, verbose: bool = False):
    level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger()
    logger.setLevel(level)

    # Console (stderr, stdout stays free for the job's own output)
    ch = logging.StreamHandler()
    ch.setLevel(level)
    ch.setFormatter(logging.Formatter(FORMAT))

    logger.handlers.clear()
    logger.addHandler(ch)

    if log_path:
        # File (rotate 5MB x 3 backups)
        Path(log_path).parent.mkdir(parents=True, exist_ok=True)
        fh = RotatingFileHandler(log_path, maxBytes=5_000_000, backupCount=3)
        fh.setLevel(level)
        fh.setFormatter(logging.Formatter(FORMAT))
        logger.addHandler(fh)

    # urllib3 logs full request lines at DEBUG; keep it quiet
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    return logger
