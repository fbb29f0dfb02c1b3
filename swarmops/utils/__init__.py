# swarmops/utils/__init__.py
"""
swarmops.utils: Workflow utilities.
Includes:
    Colour-coded Logging (hue_logger.py),
    Reproducible Engine Construction (seeder.py).
"""

# Hoist from hue_logger (Logging)
from .hue_logger import HueLogger, hue, logger

# Hoist from seeder (Reproducibility)
from .seeder import make_engine, make_sampler


__all__ = [
    # 1. Logging
    "HueLogger", "hue", "logger",
    # 2. Reproducibility
    "make_engine", "make_sampler",
]
