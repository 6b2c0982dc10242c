import logging
import os

from mallaplan.core.config import settings

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_configured = False


def setup_logging(level: str | None = None, log_dir: str | None = None) -> None:
    """Configure the ``mallaplan`` logger tree once per process.

    Records go to the console and, when a log directory is configured, to
    ``combined.log`` plus an ``errors.log`` that only keeps ERROR and above.
    """
    global _configured
    if _configured:
        return

    level = (level or settings.log_level).upper()
    log_dir = settings.log_dir if log_dir is None else log_dir
    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    root = logging.getLogger("mallaplan")
    root.setLevel(level)

    console = logging.StreamHandler()
    console.setFormatter(formatter)
    root.addHandler(console)

    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
        combined = logging.FileHandler(os.path.join(log_dir, "combined.log"), encoding="utf-8")
        combined.setFormatter(formatter)
        root.addHandler(combined)

        errors = logging.FileHandler(os.path.join(log_dir, "errors.log"), encoding="utf-8")
        errors.setLevel(logging.ERROR)
        errors.setFormatter(formatter)
        root.addHandler(errors)

    _configured = True
