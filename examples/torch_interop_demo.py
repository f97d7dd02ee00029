# Copyright (c) 2025 Soumyadip Sarkar.
# All rights reserved.
#
# This source code is licensed under the Apache-style license found in the
# LICENSE file in the root directory of this source tree.

"""
Torch Interop Demo for torchbridge

This script shows how to:
1. Wrap a PyTorch tensor and forward calls to it
2. Copy its storage into NumPy arrays of a chosen element type
3. Teach torchbridge about a foreign object with a different surface
"""

import sys

import numpy as np

import torchbridge as tb

try:
    import torch
except ImportError:
    print("PyTorch is not installed; skipping demo.")
    sys.exit(0)


def demo_wrapping():
    """Forward attribute access and method calls to a torch tensor."""
    print("=" * 60)
    print("WRAPPING A FOREIGN TENSOR")
    print("=" * 60)

    tensor = tb.Tensor(torch.linspace(-2.0, 2.0, 6).reshape(2, 3))
    print(f"shape={tensor.shape} dtype={tensor.dtype} device={tensor.device}")
    print(f"element type: {tensor.element_type}")

    clamped = tensor.clamp(min=-1.0, max=1.0)
    print(f"clamped data: {clamped.get_data()}")
    print(f"transposed shape: {tensor.T.shape}")


def demo_materialize():
    """Copy storage out under every supported element type."""
    print("=" * 60)
    print("MATERIALIZING STORAGE")
    print("=" * 60)

    for element_type in tb.ElementType:
        source = torch.arange(4).to(getattr(torch, element_type.type_name))
        data = tb.materialize(source, element_type)
        print(f"{element_type!s:>8}: {data}")

    empty = tb.materialize(torch.tensor([], dtype=torch.float64), tb.float64)
    print(f"empty storage -> {empty!r}")

    try:
        tb.materialize(torch.zeros(2, dtype=torch.complex64), np.complex64)
    except tb.UnsupportedElementType as exc:
        print(f"rejected: {exc}")


class RawBuffer:
    """A foreign buffer exposing an address and a length instead of storage()."""

    def __init__(self, array):
        self.array = array
        self.address = array.ctypes.data
        self.length = array.size


class RawBufferBridge(tb.ObjectBridge):
    def get_storage(self, tensor_handle):
        return tensor_handle

    def storage_element_count(self, storage_handle):
        return storage_handle.length

    def storage_base_address(self, storage_handle):
        return storage_handle.address


def demo_custom_bridge():
    """Register a bridge for a non-tensor foreign object."""
    print("=" * 60)
    print("CUSTOM BRIDGE")
    print("=" * 60)

    tb.register_bridge(RawBuffer, RawBufferBridge())
    raw = RawBuffer(np.array([3, 1, 4, 1, 5], dtype=np.int16))
    print(f"copied: {tb.materialize(raw, 'short')}")


def main():
    demo_wrapping()
    demo_materialize()
    demo_custom_bridge()
    return 0


if __name__ == "__main__":
    exit(main())
