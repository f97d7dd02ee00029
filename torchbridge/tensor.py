# Copyright (c) 2025 Soumyadip Sarkar.
# All rights reserved.
#
# This source code is licensed under the Apache-style license found in the
# LICENSE file in the root directory of this source tree.

"""
Tensor wrapper that forwards to a tensor owned by a foreign runtime.
"""

from __future__ import annotations

from numbers import Integral
from typing import Any, Dict, Optional, Tuple, Union

import numpy as np

from .bridge import DEFAULT_BRIDGE, ForeignBridge, resolve_bridge
from .dtypes import ElementType, get_default_element_type, resolve_element_type
from .errors import ForeignHandleInvalid
from .materialize import materialize


def _to_foreign(value: Any) -> Any:
    """Unwrap ``Tensor`` arguments before they cross the bridge."""
    if isinstance(value, Tensor):
        return value._handle
    return value


def _to_foreign_key(key: Any) -> Any:
    if isinstance(key, tuple):
        return tuple(_to_foreign(part) for part in key)
    return _to_foreign(key)


class Tensor:
    """
    A borrowed handle to a tensor living in an external numerical library.
    Every attribute and method is forwarded through a :class:`ForeignBridge`;
    the only data that ever crosses back is copied by :meth:`get_data`.
    """

    __hash__ = object.__hash__

    @classmethod
    def _wrap_foreign(cls, handle: Any, bridge: ForeignBridge) -> "Tensor":
        """Wrap a result returned by the foreign runtime with the same bridge."""

        instance = cls.__new__(cls)
        instance._handle = handle
        instance._bridge = bridge
        return instance

    def __init__(self, handle: Any, bridge: Optional[ForeignBridge] = None):
        """
        Wrap a foreign tensor.

        Args:
            handle: The foreign tensor object, or another ``Tensor`` whose
                handle should be shared.
            bridge: Bridge to the foreign runtime. Defaults to the bridge
                registered for the handle's type.

        Examples:
            >>> t = Tensor(torch.arange(4, dtype=torch.int32))
            >>> t.get_data()
            array([0, 1, 2, 3], dtype=int32)
        """
        if isinstance(handle, Tensor):
            if bridge is None:
                bridge = handle._bridge
            handle = handle._handle
        if handle is None:
            raise ForeignHandleInvalid("cannot wrap a null tensor handle")
        self._handle = handle
        self._bridge = bridge if bridge is not None else resolve_bridge(handle)

    @property
    def handle(self) -> Any:
        """The wrapped foreign object."""
        return self._handle

    @property
    def bridge(self) -> ForeignBridge:
        return self._bridge

    def _get(self, name: str) -> Any:
        return self._bridge.get_attr(self._handle, name)

    def _invoke(self, method: str, *args: Any, **kwargs: Any) -> Any:
        return self._bridge.invoke(self._handle, method, *args, **kwargs)

    # Core properties
    @property
    def dtype(self) -> Any:
        """Element type as reported by the foreign library."""
        return self._get("dtype")

    @property
    def element_type(self) -> ElementType:
        """Native element type matching the foreign dtype."""
        try:
            dtype = self._get("dtype")
        except AttributeError:
            dtype = None
        if dtype is None:
            return get_default_element_type()
        return resolve_element_type(dtype)

    @property
    def requires_grad(self) -> bool:
        """Check if gradients need to be computed for this tensor."""
        return bool(self._get("requires_grad"))

    @property
    def is_cuda(self) -> bool:
        """Check if the tensor is stored on the GPU."""
        return bool(self._get("is_cuda"))

    @property
    def device(self) -> Any:
        return self._get("device")

    @property
    def grad(self) -> Optional["Tensor"]:
        """Accumulated gradient, or ``None`` before the first backward pass."""
        foreign_grad = self._get("grad")
        if foreign_grad is None:
            return None
        return Tensor._wrap_foreign(foreign_grad, self._bridge)

    @property
    def shape(self) -> Tuple[int, ...]:
        """Get tensor shape as tuple."""
        return tuple(int(dim) for dim in self._invoke("size"))

    @property
    def T(self) -> "Tensor":
        """Transpose."""
        return self.t()

    def t(self) -> "Tensor":
        return Tensor._wrap_foreign(self._invoke("t"), self._bridge)

    def item(self) -> Union[float, int, bool]:
        """Return the value of a one-element tensor as a Python scalar."""
        return self._invoke("item")

    # Data conversion methods
    def get_data(self, element_type: Any = None) -> np.ndarray:
        """Copy the tensor's storage into a new NumPy array.

        ``element_type`` defaults to the type matching the foreign dtype.
        """
        if element_type is None:
            element_type = self.element_type
        return materialize(self._handle, element_type, bridge=self._bridge)

    def as_tensor(self, element_type: Any) -> "TypedTensor":
        """View this tensor as a :class:`TypedTensor` of ``element_type``."""
        return TypedTensor(self._handle, element_type, bridge=self._bridge)

    def clamp(
        self,
        min: Optional[float] = None,
        max: Optional[float] = None,
        out: Optional["Tensor"] = None,
    ) -> "Tensor":
        """
        Clamp all elements into the range ``[min, max]``.

        Args:
            min: Lower bound of the range to be clamped to.
            max: Upper bound of the range to be clamped to.
            out: Output tensor.
        """
        kwargs: Dict[str, Any] = {}
        if min is not None:
            kwargs["min"] = min
        if max is not None:
            kwargs["max"] = max
        if out is not None:
            kwargs["out"] = _to_foreign(out)
        return Tensor._wrap_foreign(self._invoke("clamp", **kwargs), self._bridge)

    # String representations
    def __repr__(self) -> str:
        return f"Tensor({self._handle!r})"

    # Indexing and slicing
    def __getitem__(self, key) -> "Tensor":
        """Index with integers, slices, or a selection tensor."""
        result = self._bridge.get_item(self._handle, _to_foreign_key(key))
        return Tensor._wrap_foreign(result, self._bridge)

    def __setitem__(self, key, value):
        self._bridge.set_item(self._handle, _to_foreign_key(key), _to_foreign(value))


class TypedTensor(Tensor):
    """A :class:`Tensor` bound to one native element type."""

    def __init__(
        self,
        handle: Any,
        element_type: Any,
        bridge: Optional[ForeignBridge] = None,
    ):
        super().__init__(handle, bridge)
        self._element_type = resolve_element_type(element_type)

    @classmethod
    def from_data(
        cls,
        data: Any,
        element_type: Any,
        bridge: Optional[ForeignBridge] = None,
    ) -> "TypedTensor":
        """
        Create a foreign tensor holding a copy of native ``data``.

        Args:
            data: Nested sequence or NumPy array of any rank.
            element_type: Element type of the new tensor.
            bridge: Bridge that builds the foreign tensor. Defaults to
                :data:`DEFAULT_BRIDGE`.

        Examples:
            >>> t = TypedTensor.from_data([[1, 2], [3, 4]], "int32")
            >>> t.shape
            (2, 2)
        """
        resolved = resolve_element_type(element_type)
        array = np.ascontiguousarray(data, dtype=resolved.numpy_dtype)
        creator = bridge if bridge is not None else DEFAULT_BRIDGE
        handle = creator.create_tensor(array)
        return cls(handle, resolved, bridge=bridge)

    @property
    def element_type(self) -> ElementType:
        return self._element_type

    def get_data(self, element_type: Any = None) -> np.ndarray:
        if element_type is None:
            element_type = self._element_type
        return super().get_data(element_type)

    def _as_scalar(self, value: Any) -> np.generic:
        if hasattr(value, "item"):
            value = value.item()
        return self._element_type.numpy_dtype.type(value)

    def item(self) -> np.generic:
        """Return the value of a one-element tensor as a scalar of the bound type."""
        return self._as_scalar(self._invoke("item"))

    def __getitem__(self, key):
        if isinstance(key, Integral):
            return self._as_scalar(self._bridge.get_item(self._handle, int(key)))
        return super().__getitem__(key)

    def __setitem__(self, key, value):
        if isinstance(key, Integral) and not isinstance(value, Tensor):
            value = self._as_scalar(value).item()
        super().__setitem__(key, value)

    def t(self) -> "TypedTensor":
        return TypedTensor(self._invoke("t"), self._element_type, bridge=self._bridge)

    def __repr__(self) -> str:
        return f"TypedTensor[{self._element_type}]({self._handle!r})"


__all__ = ["Tensor", "TypedTensor"]
