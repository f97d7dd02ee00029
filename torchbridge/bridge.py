# Copyright (c) 2025 Soumyadip Sarkar.
# All rights reserved.
#
# This source code is licensed under the Apache-style license found in the
# LICENSE file in the root directory of this source tree.

from __future__ import annotations

import importlib
import logging
from threading import RLock
from typing import Any, Callable, Dict, NamedTuple, Optional, Protocol, runtime_checkable

from .errors import ForeignHandleInvalid

logger = logging.getLogger(__name__)


@runtime_checkable
class ForeignBridge(Protocol):
    """Operations torchbridge needs from the runtime that owns a tensor."""

    def get_storage(self, tensor_handle: Any) -> Any: ...

    def storage_element_count(self, storage_handle: Any) -> int: ...

    def storage_base_address(self, storage_handle: Any) -> int: ...

    def create_tensor(self, array: Any) -> Any: ...

    def get_attr(self, handle: Any, name: str) -> Any: ...

    def get_item(self, handle: Any, key: Any) -> Any: ...

    def set_item(self, handle: Any, key: Any, value: Any) -> None: ...

    def invoke(self, handle: Any, method: str, *args: Any, **kwargs: Any) -> Any: ...


class ByteStorage(NamedTuple):
    """Byte-addressed storage paired with the element width of its tensor."""

    storage: Any
    element_size: int


def _default_tensor_factory() -> Callable[[Any], Any]:
    try:
        torch = importlib.import_module("torch")
    except ModuleNotFoundError as exc:
        raise ModuleNotFoundError(
            "PyTorch is required to create foreign tensors with the default "
            "bridge; install the 'torch' extra or pass a factory to ObjectBridge."
        ) from exc
    return torch.tensor


class ObjectBridge:
    """Bridge for in-process objects shaped like PyTorch tensors.

    Tensors exposing ``untyped_storage()`` and ``element_size()`` are read as
    byte storage (``nbytes()`` / ``data_ptr()``). Otherwise the tensor exposes
    ``storage()``, and the storage exposes ``size()`` (an element count) and
    ``data_ptr()`` (the address of the first element).

    Args:
        factory: Callable turning a NumPy array into a foreign tensor. Defaults
            to ``torch.tensor``, imported on first use.
    """

    def __init__(self, factory: Optional[Callable[[Any], Any]] = None):
        self._factory = factory

    def _open_storage(self, tensor_handle: Any, accessor_name: str) -> Any:
        try:
            storage = self.invoke(tensor_handle, accessor_name)
        except AttributeError as exc:
            raise ForeignHandleInvalid(
                f"storage of {type(tensor_handle).__name__} is unavailable: {exc}"
            ) from exc
        if storage is None:
            raise ForeignHandleInvalid(
                f"{type(tensor_handle).__name__} reported no storage"
            )
        return storage

    def get_storage(self, tensor_handle: Any) -> Any:
        if hasattr(tensor_handle, "untyped_storage"):
            storage = self._open_storage(tensor_handle, "untyped_storage")
            element_size = self.invoke(tensor_handle, "element_size")
            return ByteStorage(storage, int(element_size))
        if not hasattr(tensor_handle, "storage"):
            raise ForeignHandleInvalid(
                f"{type(tensor_handle).__name__} does not expose storage()"
            )
        return self._open_storage(tensor_handle, "storage")

    def storage_element_count(self, storage_handle: Any) -> int:
        if isinstance(storage_handle, ByteStorage):
            if storage_handle.element_size <= 0:
                raise ForeignHandleInvalid(
                    f"tensor reported element size {storage_handle.element_size}"
                )
            nbytes = self.invoke(storage_handle.storage, "nbytes")
            return int(nbytes) // storage_handle.element_size
        return self.invoke(storage_handle, "size")

    def storage_base_address(self, storage_handle: Any) -> int:
        if isinstance(storage_handle, ByteStorage):
            storage_handle = storage_handle.storage
        return self.invoke(storage_handle, "data_ptr")

    def create_tensor(self, array: Any) -> Any:
        """Build a foreign tensor holding a copy of ``array``."""
        factory = self._factory
        if factory is None:
            factory = _default_tensor_factory()
        return factory(array)

    def get_attr(self, handle: Any, name: str) -> Any:
        return getattr(handle, name)

    def get_item(self, handle: Any, key: Any) -> Any:
        return handle[key]

    def set_item(self, handle: Any, key: Any, value: Any) -> None:
        handle[key] = value

    def invoke(self, handle: Any, method: str, *args: Any, **kwargs: Any) -> Any:
        try:
            bound = getattr(handle, method)
        except AttributeError as exc:
            raise ForeignHandleInvalid(
                f"{type(handle).__name__} has no method {method}()"
            ) from exc
        if not callable(bound):
            raise ForeignHandleInvalid(
                f"{type(handle).__name__}.{method} is not callable"
            )
        return bound(*args, **kwargs)


DEFAULT_BRIDGE = ObjectBridge()

# Bridges registered per foreign handle type, plus the per-type resolution cache.
_BRIDGES: Dict[type, ForeignBridge] = {}
_RESOLVED: Dict[type, ForeignBridge] = {}
_BRIDGE_LOCK = RLock()


def register_bridge(handle_type: type, bridge: ForeignBridge) -> None:
    """Use ``bridge`` for handles of ``handle_type`` and its subclasses."""

    if not isinstance(bridge, ForeignBridge):
        raise TypeError(
            f"{type(bridge).__name__} does not implement the ForeignBridge interface"
        )
    with _BRIDGE_LOCK:
        _BRIDGES[handle_type] = bridge
        _RESOLVED.clear()
    logger.debug("registered %s for %s", type(bridge).__name__, handle_type.__qualname__)


def unregister_bridge(handle_type: type) -> Optional[ForeignBridge]:
    """Remove the bridge registered for ``handle_type`` and return it."""

    with _BRIDGE_LOCK:
        removed = _BRIDGES.pop(handle_type, None)
        _RESOLVED.clear()
    if removed is not None:
        logger.debug("unregistered bridge for %s", handle_type.__qualname__)
    return removed


def resolve_bridge(handle: Any) -> ForeignBridge:
    """Return the bridge responsible for ``handle``.

    The most specific registration along the handle type's MRO wins;
    unregistered types use :data:`DEFAULT_BRIDGE`.
    """

    handle_type = type(handle)
    with _BRIDGE_LOCK:
        cached = _RESOLVED.get(handle_type)
        if cached is not None:
            return cached

        bridge: ForeignBridge = DEFAULT_BRIDGE
        for klass in handle_type.__mro__:
            registered = _BRIDGES.get(klass)
            if registered is not None:
                bridge = registered
                break
        _RESOLVED[handle_type] = bridge
        return bridge


__all__ = [
    "ForeignBridge",
    "ObjectBridge",
    "ByteStorage",
    "DEFAULT_BRIDGE",
    "register_bridge",
    "unregister_bridge",
    "resolve_bridge",
]
