# Copyright (c) 2025 Soumyadip Sarkar.
# All rights reserved.
#
# This source code is licensed under the Apache-style license found in the
# LICENSE file in the root directory of this source tree.

import warnings

import numpy as np
import pytest

import torchbridge as tb

torch = pytest.importorskip("torch")


@pytest.mark.parametrize(
    "torch_dtype, element_type",
    [
        ("uint8", tb.uint8),
        ("int16", tb.int16),
        ("int32", tb.int32),
        ("int64", tb.int64),
        ("float32", tb.float32),
        ("float64", tb.float64),
    ],
)
def test_materialize_torch_tensor(torch_dtype, element_type):
    source = torch.arange(5, dtype=getattr(torch, torch_dtype))

    data = tb.materialize(source, element_type)

    assert data.dtype == element_type.numpy_dtype
    np.testing.assert_array_equal(data, np.arange(5))


def test_empty_torch_tensor():
    data = tb.materialize(torch.tensor([], dtype=torch.float64), "float64")

    assert data.size == 0


def test_copy_is_independent_of_torch_tensor():
    source = torch.tensor([10, 20, 30], dtype=torch.int32)

    data = tb.Tensor(source).get_data()
    data[0] = -1

    assert source.tolist() == [10, 20, 30]


def test_wrapper_forwards_to_torch():
    source = torch.tensor([[-2.0, 0.5], [3.0, 1.0]], requires_grad=True)
    tensor = tb.Tensor(source)

    assert tensor.shape == (2, 2)
    assert tensor.requires_grad is True
    assert tensor.is_cuda is False
    assert tensor.grad is None
    assert tensor.element_type is tb.float32

    clamped = tb.Tensor(source.detach()).clamp(min=0.0, max=1.0)
    np.testing.assert_allclose(clamped.get_data(), [0.0, 0.5, 1.0, 1.0])
    assert tensor.T.shape == (2, 2)
    assert tensor[1, 0].item() == pytest.approx(3.0)


def test_materialize_does_not_warn():
    source = torch.arange(6, dtype=torch.float32).reshape(2, 3).t()

    with warnings.catch_warnings():
        warnings.simplefilter("error")
        data = tb.materialize(source, tb.float32)

    np.testing.assert_array_equal(data, np.arange(6, dtype=np.float32))


@pytest.mark.parametrize(
    "data", [[1, 2, 3], [[1, 2], [3, 4]], [[[1], [2]], [[3], [4]]]]
)
def test_from_data_creates_torch_tensor(data):
    typed = tb.TypedTensor.from_data(data, tb.int16)

    assert isinstance(typed.handle, torch.Tensor)
    assert typed.handle.dtype == torch.int16
    assert typed.shape == np.shape(data)
    assert typed.get_data().tolist() == np.ravel(data).tolist()
