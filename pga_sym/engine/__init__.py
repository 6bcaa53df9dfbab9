"""
Evaluation engine: generic entities, compiled programs and compute().
"""

from .entity import (
    Entity,
    Scalar,
)

from .compute import (
    Program,
    Engine,
    CacheInfo,
    build_program,
    compile_program,
    compute,
    evaluate,
    get_engine,
)

__all__ = [
    "Entity",
    "Scalar",
    "Program",
    "Engine",
    "CacheInfo",
    "build_program",
    "compile_program",
    "compute",
    "evaluate",
    "get_engine",
]
