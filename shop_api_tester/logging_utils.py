from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

_configured = False


def configure_logging(level: str | int = logging.INFO) -> None:
    """Attach a single stream handler to the root logger.

    Safe to call more than once; later calls only adjust the level.
    """
    global _configured

    root = logging.getLogger()
    root.setLevel(level)
    if _configured:
        return

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)

    # urllib3 logs every connection at DEBUG
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    _configured = True
