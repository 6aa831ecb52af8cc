import logging
import os
from typing import Optional


def get_rng_logger(name: Optional[str] = None) -> logging.Logger:
    root = logging.getLogger("gamerng")
    if not root.hasHandlers():
        handler = logging.StreamHandler()
        formatter = logging.Formatter('[%(asctime)s][%(levelname)s][%(name)s] %(message)s')
        handler.setFormatter(formatter)
        root.addHandler(handler)
    level_name = os.getenv("GAMERNG_LOG_LEVEL", "WARNING").upper()
    level = getattr(logging, level_name, logging.WARNING)
    root.setLevel(level)
    if name:
        return root.getChild(name)
    return root
