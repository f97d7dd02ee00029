# Copyright (c) 2025 Soumyadip Sarkar.
# All rights reserved.
#
# This source code is licensed under the Apache-style license found in the
# LICENSE file in the root directory of this source tree.

"""
Element types that foreign tensor storage can be materialized into.
"""

from __future__ import annotations

import ctypes
import enum
from threading import RLock
from typing import Any, Dict, Optional, Tuple

import numpy as np

from .errors import UnsupportedElementType


class ElementType(enum.Enum):
    """Closed set of element types with a native array representation."""

    U8 = ("uint8", ctypes.c_uint8)
    I16 = ("int16", ctypes.c_int16)
    I32 = ("int32", ctypes.c_int32)
    I64 = ("int64", ctypes.c_int64)
    F32 = ("float32", ctypes.c_float)
    F64 = ("float64", ctypes.c_double)

    @property
    def type_name(self) -> str:
        """Canonical NumPy name of the element type."""
        return self.value[0]

    @property
    def ctype(self) -> type:
        return self.value[1]

    @property
    def numpy_dtype(self) -> np.dtype:
        """NumPy dtype in native byte order."""
        return np.dtype(self.type_name)

    @property
    def itemsize(self) -> int:
        """Width of one element in bytes."""
        return ctypes.sizeof(self.ctype)

    def __str__(self) -> str:
        return self.type_name


# Names used by the foreign library next to the canonical NumPy names.
_NAME_TO_ELEMENT_TYPE: Dict[str, ElementType] = {
    "uint8": ElementType.U8,
    "byte": ElementType.U8,
    "int16": ElementType.I16,
    "short": ElementType.I16,
    "int32": ElementType.I32,
    "int": ElementType.I32,
    "int64": ElementType.I64,
    "long": ElementType.I64,
    "float32": ElementType.F32,
    "float": ElementType.F32,
    "float64": ElementType.F64,
    "double": ElementType.F64,
}

_NUMPY_KIND_TO_ELEMENT_TYPE: Dict[Tuple[str, int], ElementType] = {
    (member.numpy_dtype.kind, member.numpy_dtype.itemsize): member
    for member in ElementType
}


def _from_name(name: str) -> Optional[ElementType]:
    key = name.strip().lower()
    found = _NAME_TO_ELEMENT_TYPE.get(key)
    if found is None and "." in key:
        # Qualified foreign names such as ``torch.int32``.
        found = _NAME_TO_ELEMENT_TYPE.get(key.rsplit(".", 1)[1])
    return found


def _from_numpy(requested: Any) -> Optional[ElementType]:
    try:
        dtype = np.dtype(requested)
    except (TypeError, ValueError):
        return None
    if not dtype.isnative:
        return None
    return _NUMPY_KIND_TO_ELEMENT_TYPE.get((dtype.kind, dtype.itemsize))


def resolve_element_type(requested: Any) -> ElementType:
    """Map a caller supplied element type selection onto :class:`ElementType`.

    Args:
        requested: An ``ElementType``, a type name (``"int32"``, ``"long"``,
            ``"torch.float64"``), a NumPy dtype or scalar type, a ``ctypes``
            scalar type, or a foreign dtype object whose string form is a
            qualified type name.

    Raises:
        UnsupportedElementType: ``requested`` does not name one of the six
            supported element types.
    """

    if isinstance(requested, ElementType):
        return requested
    if requested is None:
        raise UnsupportedElementType(requested)

    if isinstance(requested, str):
        found = _from_name(requested)
        if found is None:
            found = _from_numpy(requested)
    else:
        found = _from_numpy(requested)
        if found is None:
            found = _from_name(str(requested))

    if found is None:
        raise UnsupportedElementType(requested)
    return found


# Global default element type management

_DEFAULT_LOCK = RLock()
_default_element_type = ElementType.F32


def set_default_element_type(element_type: Any) -> None:
    """Set the element type used for tensors that report no dtype."""

    global _default_element_type

    resolved = resolve_element_type(element_type)
    with _DEFAULT_LOCK:
        _default_element_type = resolved


def get_default_element_type() -> ElementType:
    """Get the current default element type."""

    with _DEFAULT_LOCK:
        return _default_element_type


__all__ = [
    "ElementType",
    "resolve_element_type",
    "set_default_element_type",
    "get_default_element_type",
]
