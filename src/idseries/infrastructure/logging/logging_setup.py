from __future__ import annotations

import logging
import logging.handlers
from pathlib import Path
from typing import Any, Optional

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(cfg: Optional[Any] = None, *, level: Optional[str] = None) -> logging.Logger:
    """
    Configure the `idseries` logger from a LoggingConfig-like object.

    - console handler always
    - rotating file handler when cfg.file is set
    Calling it again replaces the handlers it installed before.
    """
    lvl = (level or getattr(cfg, "level", None) or "INFO").upper()
    fmt = getattr(cfg, "format", None) or DEFAULT_FORMAT
    formatter = logging.Formatter(fmt)

    root = logging.getLogger("idseries")
    root.setLevel(lvl)
    for handler in list(root.handlers):
        if getattr(handler, "_idseries_handler", False):
            root.removeHandler(handler)
            handler.close()

    console = logging.StreamHandler()
    console.setFormatter(formatter)
    console._idseries_handler = True  # type: ignore[attr-defined]
    root.addHandler(console)

    log_file = getattr(cfg, "file", None)
    if log_file:
        path = Path(log_file).expanduser()
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            path,
            maxBytes=int(getattr(cfg, "max_size", 10485760)),
            backupCount=int(getattr(cfg, "backup_count", 5)),
            encoding="utf-8",
        )
        file_handler.setFormatter(formatter)
        file_handler._idseries_handler = True  # type: ignore[attr-defined]
        root.addHandler(file_handler)

    return root
