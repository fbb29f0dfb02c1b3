# swarmops/core/__init__.py
"""
swarmops.core: Contracts shared by every optimizer.
Includes:
    Problem Contract and Decorators (problem.py),
    Run Conditions (run_condition.py),
    Results and Solutions (result.py),
    Fitness Traces (trace.py),
    Vector Tools for Bounded Search Spaces (tools.py).
"""

# Hoist from result (Results and Solutions)
from .result import Result, Solution

# Hoist from problem (Problem Contract)
from .problem import Problem, FunctionProblem, ProblemWrapper, LogSolutions, FitnessPrint

# Hoist from run_condition (Run Conditions)
from .run_condition import (
    RunCondition, RunConditionIterations, RunConditionFitness,
    RunConditionStagnation, RunConditionDeadline,
)

# Hoist from trace (Fitness Traces)
from .trace import FitnessTrace, FitnessTraceList, FitnessTraceMean, FitnessTraceLogger

# Hoist from tools (Vector Tools)
from .tools import bound, clamp, denormalize, sample_bounded, init_uniform, init_range


__all__ = [
    # 1. Results
    "Result", "Solution",
    # 2. Problems
    "Problem", "FunctionProblem", "ProblemWrapper", "LogSolutions", "FitnessPrint",
    # 3. Run Conditions
    "RunCondition", "RunConditionIterations", "RunConditionFitness",
    "RunConditionStagnation", "RunConditionDeadline",
    # 4. Fitness Traces
    "FitnessTrace", "FitnessTraceList", "FitnessTraceMean", "FitnessTraceLogger",
    # 5. Tools
    "bound", "clamp", "denormalize", "sample_bounded", "init_uniform", "init_range",
]
