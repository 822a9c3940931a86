import logging
import sys
from pathlib import Path
from typing import Optional


class _ConsoleNoiseFilter(logging.Filter):
    """Keep taskcards logs; only warnings and up from third-party libraries."""

    def filter(self, record: logging.LogRecord) -> bool:
        if record.name.startswith("taskcards"):
            return True
        return record.levelno >= logging.WARNING


def setup_logging(level: str = "INFO", log_file: Optional[str] = None) -> None:
    """Configure root logging once, before the app starts serving.

    Console output goes to stderr; when ``log_file`` is set everything at
    DEBUG and above is also written there.
    """
    root = logging.getLogger()
    root.setLevel(logging.DEBUG)

    # Uvicorn reloads re-import the app; avoid stacking handlers.
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    ch = logging.StreamHandler(sys.stderr)
    ch.setLevel(getattr(logging, level.upper(), logging.INFO))
    ch.setFormatter(fmt)
    ch.addFilter(_ConsoleNoiseFilter())
    root.addHandler(ch)

    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(str(path), encoding="utf-8")
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(fmt)
        root.addHandler(fh)

    logging.captureWarnings(True)
