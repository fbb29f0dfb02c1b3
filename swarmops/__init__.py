# swarmops/__init__.py
"""
SwarmOps: Black-box Optimization with Swarms and Evolution.

SwarmOps is a library of stochastic metaheuristics for minimizing a fitness
function over a bounded real search space. Every optimizer shares one
contract: a fixed-length vector of control parameters goes in, the best
solution found within the run condition's budget comes out.

All randomness flows from explicitly passed, bit-exact pseudo-random engines,
so any run can be reproduced from its engine name and seed.

Key Features:
- Particle Swarm Family: PSO, local-best PSO, SPSO 2007, PSO with mean, variable-size PSO, MOL
- Differential Evolution Family: steady-state DE and a suite of crossover and dither variants
- Local Search: LUS, pattern search, random search, grid mesh, gradient descent
- Bit-exact Engines: RanQD, Ran2, MWC256, CMWC4096, XorShift, KISS, MT19937 and composites
- Benchmarks: classic test functions with displaced optima
- SciPy-style Interface: ``swarmops.minimize`` returns a ``scipy.optimize.OptimizeResult``

System Architecture:
```
swarmops/
├── prng/          # Engines, composite engines, derived distributions
├── core/          # Problem contract, run conditions, results, traces, tools
├── optimizers/    # Generic population driver and the optimizer families
├── problems/      # Benchmark problems
├── sampling/      # Initial population designs
├── utils/         # Logging and engine construction
└── apps/          # Command line benchmark runner
```
"""

# utils first: the engines log through its logger
from . import utils
from . import prng, core, sampling, optimizers, problems

from .api import minimize

__version__ = "1.0.0"
__author__ = "Shengning Wang (王晟宁)"
__email__ = "snwang2023@163.com"
__description__ = "Black-box Optimization with Swarms and Evolution"
__license__ = "MIT"
