"""
Abstract base class for entities.

An entity is a caller-owned value (scalar, point, plane, line, rotor, motor,
...) that takes part in symbolic computations. Every entity:
    - Declares the ordered, duplicate-free blades its binding populates
    - Holds numeric storage, a tensor of shape (..., size)
    - Produces its indeterminate expression ("binding") for a base id
    - Converts to and from the generic blade-list entity

Class Hierarchy:
    BaseEntity (abstract)
    ├── Entity (generic blade list)
    │   ├── Scalar
    │   ├── Motor
    │   └── DualNumber
    ├── Rotor, Translator
    └── Plane, Point, Vector, Line
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Tuple, Type, TypeVar, Union

import torch

from .exceptions import MultivectorShapeError
from .types import Blade, BladeList, Value

if TYPE_CHECKING:
    from ..algebra.metric import Algebra
    from ..algebra.symbolic import Multivector
    from ..engine.entity import Entity


E = TypeVar("E", bound="BaseEntity")


def default_dtype() -> torch.dtype:
    from ..utils.config import get_default_dtype
    return get_default_dtype()


def stack_values(*values: Value) -> torch.Tensor:
    """
    Stack slot values into storage of shape (..., len(values)).

    Python numbers become tensors of the configured default dtype; tensors
    are broadcast against each other and promoted to a common dtype.
    """
    tensors = [v for v in values if isinstance(v, torch.Tensor)]
    if tensors:
        dtype = tensors[0].dtype
        for t in tensors[1:]:
            dtype = torch.promote_types(dtype, t.dtype)
        if not dtype.is_floating_point:
            dtype = default_dtype()
        device = tensors[0].device
    else:
        dtype = default_dtype()
        device = None

    converted = [torch.as_tensor(v, dtype=dtype, device=device) for v in values]
    converted = torch.broadcast_tensors(*converted)
    return torch.stack(converted, dim=-1)


class BaseEntity(ABC):
    """
    Abstract base class for all entities.

    Subclasses must define:
        - algebra: The Algebra the entity lives in
        - elements: Blades the binding populates, in binding order
        - SIZE: Number of storage slots (generic entities derive it)
        - bind(): Return the indeterminate expression for a base id
        - from_entity(): Build the entity from a generic Entity

    Integer or boolean storage is converted to the configured float dtype.
    The engine only ever reads `data`; mutating it is the caller's business.
    """

    algebra: "Algebra"
    elements: BladeList = ()
    SIZE: int = 0

    def __init__(self, data: Union[torch.Tensor, list, tuple]):
        if not isinstance(data, torch.Tensor):
            data = torch.as_tensor(data, dtype=default_dtype())
        elif not data.dtype.is_floating_point:
            data = data.to(default_dtype())
        if data.dim() == 0 or data.shape[-1] != self.expected_size:
            raise MultivectorShapeError(
                f"{type(self).__name__} expects storage of shape (..., {self.expected_size}), "
                f"got {tuple(data.shape)}"
            )
        self.data = data

    @classmethod
    def from_data(cls: Type[E], data: torch.Tensor) -> E:
        """Wrap existing storage of shape (..., SIZE) without copying."""
        obj = cls.__new__(cls)
        BaseEntity.__init__(obj, data)
        return obj

    @property
    def expected_size(self) -> int:
        return self.SIZE

    # === Storage ===

    @property
    def size(self) -> int:
        return self.data.shape[-1]

    @property
    def ind_count(self) -> int:
        """Number of indeterminate ids the binding consumes."""
        return self.size

    @property
    def batch_shape(self) -> torch.Size:
        return self.data.shape[:-1]

    @property
    def dtype(self) -> torch.dtype:
        return self.data.dtype

    @property
    def device(self) -> torch.device:
        return self.data.device

    @property
    def signature(self) -> Tuple["Algebra", type, BladeList, int]:
        """Structural key: entities with equal signatures bind identically."""
        return self.algebra, type(self), tuple(self.elements), self.ind_count

    def clone(self: E) -> E:
        return self._with_data(self.data.clone())

    def to(self: E, device: torch.device) -> E:
        return self._with_data(self.data.to(device))

    def _with_data(self: E, data: torch.Tensor) -> E:
        obj = type(self).__new__(type(self))
        obj.__dict__.update(self.__dict__)
        obj.data = data
        return obj

    def __getitem__(self, index: int) -> torch.Tensor:
        return self.data[..., index]

    def __len__(self) -> int:
        return self.size

    # === Binding ===

    @abstractmethod
    def bind(self, base_id: int) -> "Multivector":
        """
        Indeterminate expression of this entity.

        Ids base_id .. base_id + ind_count - 1 refer to the storage slots in
        order. The returned multivector is canonical.
        """
        pass

    # === Blade access ===

    @property
    def is_blade_mapped(self) -> bool:
        """True when storage slot i holds the coefficient of elements[i]."""
        return False

    def to_entity(self) -> "Entity":
        """Export to the generic blade-list entity by evaluating the binding."""
        from ..engine.compute import compute
        return compute(_identity, self)

    @classmethod
    @abstractmethod
    def from_entity(cls: Type[E], entity: "BaseEntity") -> E:
        """Build this entity type from the blade values of another entity."""
        pass

    def select(self, *blades: Blade) -> torch.Tensor:
        """
        Values at the requested blades, shape (..., len(blades)).

        Blades the entity does not populate read as zero.
        """
        if not self.is_blade_mapped:
            return self.to_entity().select(*blades)
        for blade in blades:
            self.algebra.check_blade(blade)
        zeros = self.data.new_zeros(self.batch_shape)
        columns = []
        for blade in blades:
            if blade in self.elements:
                columns.append(self.data[..., self.elements.index(blade)])
            else:
                columns.append(zeros)
        if not columns:
            return self.data.new_zeros(*self.batch_shape, 0)
        return torch.stack(columns, dim=-1)

    def component(self, blade: Blade) -> torch.Tensor:
        """Value at one blade, shape (...)."""
        return self.select(blade)[..., 0]

    def __repr__(self) -> str:
        return f"{type(self).__name__}(shape={tuple(self.batch_shape)}, data={self.data.tolist()})"


def _identity(x):
    return x
