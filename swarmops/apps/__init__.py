# swarmops/apps/__init__.py
"""
swarmops.apps: Command line applications.
Includes:
    Benchmark Runner (bench/).
"""
