"""
Generic entities.

An Entity is the algebra-agnostic representation of any computation result:
an explicit list of blades plus one storage slot per blade. Every
specialised entity converts to and from it.
"""

from __future__ import annotations
from typing import Iterable, Optional, Union

import torch

from ..algebra.metric import Algebra
from ..algebra.symbolic import Multivector, canonicalize
from ..core.base import BaseEntity, default_dtype, stack_values
from ..core.exceptions import MultivectorShapeError
from ..core.types import Blade, BladeList, Value


class Entity(BaseEntity):
    """
    Values attached to an explicit, duplicate-free list of blades.

    Storage slot i holds the coefficient of elements[i]. The binding gives
    slot i the id base_id + i, as a width-1 monomial on elements[i].

    Args:
        algebra: Algebra the blades belong to
        elements: Ordered blades
        data: Tensor of shape (..., len(elements))
    """

    def __init__(
        self,
        algebra: Algebra,
        elements: Iterable[Blade],
        data: Union[torch.Tensor, list, tuple],
    ):
        elements = tuple(elements)
        for blade in elements:
            algebra.check_blade(blade)
        if len(set(elements)) != len(elements):
            raise MultivectorShapeError(f"Duplicate blades in {elements}")
        self.algebra = algebra
        self.elements = elements
        super().__init__(data)

    @property
    def expected_size(self) -> int:
        return len(self.elements)

    @property
    def is_blade_mapped(self) -> bool:
        return True

    def bind(self, base_id: int) -> Multivector:
        return canonicalize(Multivector.from_entries(
            self.algebra,
            [(blade, 1, (base_id + i,)) for i, blade in enumerate(self.elements)],
        ))

    def to_entity(self) -> "Entity":
        return self

    @classmethod
    def from_entity(cls, entity: BaseEntity) -> "Entity":
        if type(entity) is Entity:
            return entity
        entity = entity.to_entity()
        return Entity(entity.algebra, entity.elements, entity.data)

    @classmethod
    def zeros(
        cls,
        algebra: Algebra,
        elements: BladeList,
        batch_shape: tuple = (),
        dtype: Optional[torch.dtype] = None,
    ) -> "Entity":
        dtype = dtype or default_dtype()
        return Entity(algebra, elements, torch.zeros(*batch_shape, len(elements), dtype=dtype))

    def __repr__(self) -> str:
        names = ", ".join(self.algebra.blade_name(b) for b in self.elements)
        return f"Entity([{names}], shape={tuple(self.batch_shape)})"


class Scalar(Entity):
    """A grade-0 value."""

    def __init__(self, algebra: Algebra, value: Value):
        super().__init__(algebra, (0,), stack_values(value))

    @classmethod
    def from_entity(cls, entity: BaseEntity) -> "Scalar":
        obj = cls.__new__(cls)
        Entity.__init__(obj, entity.algebra, (0,), entity.select(0))
        return obj

    @property
    def value(self) -> torch.Tensor:
        return self.data[..., 0]

    def __float__(self) -> float:
        return float(self.value)
