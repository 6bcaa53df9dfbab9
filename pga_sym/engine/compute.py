"""
Evaluation engine.

compute(fn, *entities) turns a pure function over entity bindings into a
numeric result in two stages:

1. Compile (structure only): bind every entity at a disjoint id range, call
   fn on the resulting expression leaves, reduce the tree to one canonical
   multivector and flatten its terms into a Program.
2. Evaluate (values only): for every term, multiply the storage slots its
   ids refer to by the term's coefficient and accumulate into the output
   slot of its blade.

Compiled programs depend only on fn and on the entities' signatures, so they
are cached and reused across calls with different values or batch shapes.

Example:
    >>> from pga_sym.pga import Point, Rotor
    >>> rotated = compute(lambda r, p: r * p * ~r, Rotor(math.pi / 2, 0, 0, 1), Point(1, 0, 0))
"""

from __future__ import annotations
import logging
import threading
from collections import OrderedDict, namedtuple
from typing import Any, Callable, Dict, Hashable, List, Optional, Sequence, Tuple

import torch

from ..algebra.expression import Expr, reduce
from ..algebra.symbolic import Multivector
from ..core.base import BaseEntity, default_dtype
from ..core.exceptions import AlgebraMismatchError, ExpressionError
from ..core.types import Blade
from ..utils.config import Config, get_default_config
from .entity import Entity

logger = logging.getLogger(__name__)


CacheInfo = namedtuple("CacheInfo", ["hits", "misses", "maxsize", "currsize"])

# (entity signature, base id) for every bound entity, in argument order
Layout = Tuple[Tuple[Tuple, int], ...]


class Program:
    """
    A reduced expression flattened into multiply-accumulate steps.

    Attributes:
        multivector: Canonical reduced multivector
        blades: Output blades, ascending
        steps: (output slot, coefficient, ids) per surviving term
        layout: (signature, base id) of every entity the program reads
    """

    def __init__(self, multivector: Multivector, layout: Layout):
        self.multivector = multivector
        self.algebra = multivector.algebra
        self.blades: Tuple[Blade, ...] = multivector.blades()
        self.layout = tuple(layout)

        slots = {blade: i for i, blade in enumerate(self.blades)}
        self.steps: Tuple[Tuple[int, float, Tuple[int, ...]], ...] = tuple(
            (slots[blade], float(value), ids)
            for blade, value, ids in multivector.entries()
        )

    @property
    def term_count(self) -> int:
        """Number of multiply-accumulate steps per evaluation."""
        return len(self.steps)

    def evaluate(self, *entities: BaseEntity) -> Entity:
        """
        Run the program on concrete entities.

        The entities must match the layout the program was compiled for.
        Batch dimensions broadcast; the output follows the promoted dtype and
        the device of the inputs.

        Returns:
            Entity on self.blades with storage (*batch, len(self.blades))
        """
        if len(entities) != len(self.layout):
            raise ExpressionError(
                f"Program expects {len(self.layout)} entities, got {len(entities)}"
            )
        columns: Dict[int, torch.Tensor] = {}
        for entity, (signature, base_id) in zip(entities, self.layout):
            if entity.algebra != self.algebra:
                raise AlgebraMismatchError(
                    f"Program compiled for {self.algebra} got an entity of {entity.algebra}"
                )
            if entity.signature != signature:
                raise ExpressionError(
                    f"Entity {type(entity).__name__} does not match the compiled structure"
                )
            for i in range(entity.ind_count):
                columns[base_id + i] = entity.data[..., i]

        if entities:
            batch_shape = torch.broadcast_shapes(*(e.batch_shape for e in entities))
            dtype = entities[0].dtype
            for e in entities[1:]:
                dtype = torch.promote_types(dtype, e.dtype)
            if not dtype.is_floating_point:
                dtype = default_dtype()
            device = entities[0].device
        else:
            batch_shape = torch.Size()
            dtype = default_dtype()
            device = None

        acc: List[Optional[torch.Tensor]] = [None] * len(self.blades)
        for slot, coefficient, ids in self.steps:
            if ids:
                value = columns[ids[0]]
                for i in ids[1:]:
                    value = value * columns[i]
                if coefficient != 1.0:
                    value = value * coefficient
            else:
                value = torch.full(batch_shape, coefficient, dtype=dtype, device=device)
            acc[slot] = value if acc[slot] is None else acc[slot] + value

        if acc:
            data = torch.stack(
                [a.to(dtype).expand(batch_shape) for a in acc], dim=-1
            )
        else:
            data = torch.zeros(*batch_shape, 0, dtype=dtype, device=device)
        return Entity(self.algebra, self.blades, data)

    def __repr__(self) -> str:
        names = ", ".join(self.algebra.blade_name(b) for b in self.blades)
        return f"Program(blades=[{names}], terms={self.term_count})"


def _fn_name(fn: Callable) -> str:
    return getattr(fn, "__qualname__", repr(fn))


def _as_expr(result: Any, algebra) -> Expr:
    if isinstance(result, Expr):
        return result
    if isinstance(result, Multivector):
        return Expr.constant(result)
    if algebra is None:
        raise ExpressionError(
            "Cannot infer the algebra of a constant result computed from no entities"
        )
    return Expr.scalar(algebra, result)


def build_program(
    fn: Callable[..., Any],
    entities: Sequence[BaseEntity],
    validate: bool = True,
) -> Program:
    """
    Compile fn over the given entities without caching.

    Entities are bound at contiguous, disjoint id ranges in argument order.

    Raises:
        AlgebraMismatchError: If the entities live in different algebras
        ExpressionError: If fn returns an expression over foreign bindings
    """
    algebra = entities[0].algebra if entities else None
    leaves = []
    layout = []
    base_id = 0
    for entity in entities:
        if entity.algebra != algebra:
            raise AlgebraMismatchError(
                f"Cannot compute over entities of {algebra} and {entity.algebra}"
            )
        leaves.append(Expr.bind(entity, base_id))
        layout.append((entity.signature, base_id))
        base_id += entity.ind_count

    expr = _as_expr(fn(*leaves), algebra)

    own = {(id(leaf.entity), leaf.base_id) for leaf in leaves}
    for leaf in expr.leaves():
        if (id(leaf.entity), leaf.base_id) not in own:
            raise ExpressionError(
                f"{_fn_name(fn)} returned an expression bound to an entity it was not given"
            )

    program = Program(reduce(expr, validate=validate), layout)
    logger.debug(
        f"Compiled {_fn_name(fn)}: {program.term_count} terms over "
        f"{len(program.blades)} blades"
    )
    return program


def evaluate(expr: Expr, validate: bool = True) -> Entity:
    """
    Evaluate an expression tree built directly from Expr.bind leaves.

    The caller picks the base ids; distinct entities must not overlap.
    """
    entities = []
    layout = []
    seen = set()
    for leaf in expr.leaves():
        key = (id(leaf.entity), leaf.base_id)
        if key in seen:
            continue
        seen.add(key)
        entities.append(leaf.entity)
        layout.append((leaf.entity.signature, leaf.base_id))
    program = Program(reduce(expr, validate=validate), layout)
    return program.evaluate(*entities)


class Engine:
    """
    Compiles and evaluates computations, caching compiled programs.

    The cache is an LRU keyed by the function object and the signatures of
    the entities, bounded by config.cache_size (0 disables caching). It is
    shared between threads under a lock; compilation itself runs unlocked.

    Args:
        config: Configuration; the process default when None
    """

    def __init__(self, config: Optional[Config] = None):
        self._config = config
        self._cache: "OrderedDict[Hashable, Program]" = OrderedDict()
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0

    @property
    def config(self) -> Config:
        return self._config if self._config is not None else get_default_config()

    def compile(self, fn: Callable[..., Any], *entities: BaseEntity) -> Program:
        config = self.config
        key = (fn, tuple(e.signature for e in entities))
        try:
            hash(key)
        except TypeError:
            logger.debug(f"{_fn_name(fn)} is not hashable, compiling without cache")
            return build_program(fn, entities, validate=config.validate_bindings)

        with self._lock:
            program = self._cache.get(key)
            if program is not None:
                self._cache.move_to_end(key)
                self._hits += 1
                logger.debug(f"Program cache hit for {_fn_name(fn)}")
                return program
            self._misses += 1

        program = build_program(fn, entities, validate=config.validate_bindings)

        if config.cache_size > 0:
            with self._lock:
                self._cache[key] = program
                self._cache.move_to_end(key)
                while len(self._cache) > config.cache_size:
                    self._cache.popitem(last=False)
        return program

    def compute(self, fn: Callable[..., Any], *entities: BaseEntity) -> Entity:
        return self.compile(fn, *entities).evaluate(*entities)

    def cache_info(self) -> CacheInfo:
        with self._lock:
            return CacheInfo(self._hits, self._misses, self.config.cache_size, len(self._cache))

    def clear_cache(self) -> None:
        with self._lock:
            self._cache.clear()
            self._hits = 0
            self._misses = 0


_default_engine = Engine()


def get_engine() -> Engine:
    """Engine used by the module-level compute()."""
    return _default_engine


def compile_program(fn: Callable[..., Any], *entities: BaseEntity) -> Program:
    return _default_engine.compile(fn, *entities)


def compute(fn: Callable[..., Any], *entities: BaseEntity) -> Entity:
    """
    Evaluate fn over the entities' bindings.

    Args:
        fn: Pure function taking one Expr per entity and returning an Expr
            (or a number, lifted to a scalar)
        *entities: Entities supplying numeric storage

    Returns:
        Generic Entity on the blades of the reduced result
    """
    return _default_engine.compute(fn, *entities)
