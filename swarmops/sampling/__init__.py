# swarmops/sampling/__init__.py
"""
swarmops.sampling: Initial population designs.
Includes:
    Design of Experiments (doe.py).
"""

# Hoist from doe (Design of Experiments)
from .doe import (
    uniform_design, soa_design, lhs_design, QuasiRandomDesign,
    DESIGNS, make_design,
)


__all__ = [
    # Design of Experiments
    "uniform_design", "soa_design", "lhs_design", "QuasiRandomDesign",
    "DESIGNS", "make_design",
]
