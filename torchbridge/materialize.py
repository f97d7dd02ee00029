# Copyright (c) 2025 Soumyadip Sarkar.
# All rights reserved.
#
# This source code is licensed under the Apache-style license found in the
# LICENSE file in the root directory of this source tree.

"""
Copy the storage behind a foreign tensor into a natively owned NumPy array.
"""

from __future__ import annotations

import ctypes
import logging
import operator
from typing import Any, Optional

import numpy as np

from .bridge import ForeignBridge, resolve_bridge
from .dtypes import ElementType, resolve_element_type
from .errors import ForeignHandleInvalid

logger = logging.getLogger(__name__)


def _element_count(bridge: ForeignBridge, storage: Any) -> int:
    raw = bridge.storage_element_count(storage)
    try:
        count = operator.index(raw)
    except TypeError:
        raise ForeignHandleInvalid(
            f"storage reported a non-integer element count {raw!r}"
        ) from None
    if count < 0:
        raise ForeignHandleInvalid(f"storage reported {count} elements")
    return count


def _copy_from_address(address: int, count: int, element_type: ElementType) -> np.ndarray:
    """Copy ``count`` elements starting at ``address`` byte for byte."""

    array = np.empty(count, dtype=element_type.numpy_dtype)
    ctypes.memmove(array.ctypes.data, address, count * element_type.itemsize)
    return array


def materialize(
    handle: Any, element_type: Any, bridge: Optional[ForeignBridge] = None
) -> np.ndarray:
    """
    Copy the storage of a foreign tensor into a new one-dimensional array.

    The requested element type must match the layout of the foreign storage;
    the bytes are copied as-is without conversion or bounds checks. The
    returned array owns its memory, so writes to it never reach the foreign
    tensor and later writes to the foreign tensor are not observed.

    Args:
        handle: Foreign tensor, borrowed for the duration of the call.
        element_type: Anything accepted by :func:`resolve_element_type`.
        bridge: Bridge to the foreign runtime. Defaults to the bridge
            registered for ``type(handle)``.

    Returns:
        A contiguous array with one entry per storage element.

    Raises:
        UnsupportedElementType: ``element_type`` is not supported.
        ForeignHandleInvalid: The handle or its storage cannot be read.

    Examples:
        >>> data = materialize(torch.tensor([10, 20, 30], dtype=torch.int32), "int32")
        >>> data.tolist()
        [10, 20, 30]
    """

    resolved = resolve_element_type(element_type)
    if handle is None:
        raise ForeignHandleInvalid("cannot materialize a null tensor handle")
    if bridge is None:
        bridge = resolve_bridge(handle)

    storage = bridge.get_storage(handle)
    count = _element_count(bridge, storage)
    if count == 0:
        # Empty storage may carry a null or dangling address.
        return np.empty(0, dtype=resolved.numpy_dtype)

    address = bridge.storage_base_address(storage)
    if not address:
        raise ForeignHandleInvalid(
            f"storage with {count} elements reported a null base address"
        )

    logger.debug("materializing %d x %s from 0x%x", count, resolved, address)
    return _copy_from_address(int(address), count, resolved)


__all__ = ["materialize"]
