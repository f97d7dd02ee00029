# Copyright (c) 2025 Soumyadip Sarkar.
# All rights reserved.
#
# This source code is licensed under the Apache-style license found in the
# LICENSE file in the root directory of this source tree.

from __future__ import annotations

import logging

from . import bridge, dtypes
from .bridge import (
    DEFAULT_BRIDGE,
    ByteStorage,
    ForeignBridge,
    ObjectBridge,
    register_bridge,
    resolve_bridge,
    unregister_bridge,
)
from .dtypes import (
    ElementType,
    get_default_element_type,
    resolve_element_type,
    set_default_element_type,
)
from .errors import ForeignHandleInvalid, TorchBridgeError, UnsupportedElementType
from .materialize import materialize
from .tensor import Tensor, TypedTensor

try:
    from ._version import __version__, __version_tuple__
except ImportError:  # pragma: no cover - fallback for editable installs
    __version__ = "0.1.0"
    __version_tuple__ = (0, 1, 0)

logging.getLogger(__name__).addHandler(logging.NullHandler())

# Element type shorthands.
uint8 = ElementType.U8
int16 = ElementType.I16
int32 = ElementType.I32
int64 = ElementType.I64
float32 = ElementType.F32
float64 = ElementType.F64

__all__ = [
    "Tensor",
    "TypedTensor",
    "materialize",
    "bridge",
    "dtypes",
    "ElementType",
    "resolve_element_type",
    "set_default_element_type",
    "get_default_element_type",
    "ForeignBridge",
    "ObjectBridge",
    "ByteStorage",
    "DEFAULT_BRIDGE",
    "register_bridge",
    "unregister_bridge",
    "resolve_bridge",
    "TorchBridgeError",
    "UnsupportedElementType",
    "ForeignHandleInvalid",
    "uint8",
    "int16",
    "int32",
    "int64",
    "float32",
    "float64",
]
