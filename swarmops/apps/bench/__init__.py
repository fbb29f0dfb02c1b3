# swarmops/apps/bench/__init__.py
"""
swarmops.apps.bench: Repeated optimization runs on benchmark problems.
Includes:
    Argument Parsing (args.py),
    Runner (bench.py).
"""

from .args import get_args
from .bench import run_benchmark, main


__all__ = ["get_args", "run_benchmark", "main"]
