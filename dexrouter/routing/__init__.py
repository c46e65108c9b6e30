"""Swap path execution.

Module structure:
- path_router.py: PathRouter, hop-by-hop execution against pools
- types.py: HopExecution and PathExecution dataclasses
"""

from dexrouter.routing.path_router import PathRouter
from dexrouter.routing.types import HopExecution, PathExecution

__all__ = ["HopExecution", "PathExecution", "PathRouter"]
