# Copyright (c) 2025 Soumyadip Sarkar.
# All rights reserved.
#
# This source code is licensed under the Apache-style license found in the
# LICENSE file in the root directory of this source tree.

import ctypes

import numpy as np
import pytest

import torchbridge as tb
from torchbridge.dtypes import ElementType, resolve_element_type


def test_element_type_set_is_closed():
    assert [member.type_name for member in ElementType] == [
        "uint8",
        "int16",
        "int32",
        "int64",
        "float32",
        "float64",
    ]


@pytest.mark.parametrize(
    "member, itemsize",
    [
        (ElementType.U8, 1),
        (ElementType.I16, 2),
        (ElementType.I32, 4),
        (ElementType.I64, 8),
        (ElementType.F32, 4),
        (ElementType.F64, 8),
    ],
)
def test_itemsize_matches_numpy_and_ctypes(member, itemsize):
    assert member.itemsize == itemsize
    assert member.numpy_dtype.itemsize == itemsize
    assert member.numpy_dtype.isnative


@pytest.mark.parametrize(
    "spec, expected",
    [
        ("uint8", ElementType.U8),
        ("byte", ElementType.U8),
        ("short", ElementType.I16),
        ("int", ElementType.I32),
        ("long", ElementType.I64),
        ("float", ElementType.F32),
        ("double", ElementType.F64),
        ("torch.int64", ElementType.I64),
        ("torch.float32", ElementType.F32),
        (" Float64 ", ElementType.F64),
        ("i2", ElementType.I16),
        ("<f8" if np.little_endian else ">f8", ElementType.F64),
    ],
)
def test_resolve_from_names(spec, expected):
    assert resolve_element_type(spec) is expected


@pytest.mark.parametrize(
    "spec, expected",
    [
        (np.uint8, ElementType.U8),
        (np.int16, ElementType.I16),
        (np.dtype(np.int32), ElementType.I32),
        (np.int64, ElementType.I64),
        (np.float32, ElementType.F32),
        (np.dtype("float64"), ElementType.F64),
        (ctypes.c_uint8, ElementType.U8),
        (ctypes.c_int16, ElementType.I16),
        (ctypes.c_int32, ElementType.I32),
        (ctypes.c_int64, ElementType.I64),
        (ctypes.c_float, ElementType.F32),
        (ctypes.c_double, ElementType.F64),
    ],
)
def test_resolve_from_numpy_and_ctypes(spec, expected):
    assert resolve_element_type(spec) is expected


def test_resolve_from_foreign_dtype_object():
    class ForeignDtype:
        def __str__(self):
            return "somelib.int16"

    assert resolve_element_type(ForeignDtype()) is ElementType.I16


def test_resolve_is_identity_for_members():
    for member in ElementType:
        assert resolve_element_type(member) is member


@pytest.mark.parametrize(
    "spec", ["int128", "complex64", "bool", np.bool_, np.float16, ctypes.c_bool, object()]
)
def test_resolve_rejects_unsupported(spec):
    with pytest.raises(tb.UnsupportedElementType):
        resolve_element_type(spec)


def test_str_uses_type_name():
    assert str(tb.int32) == "int32"


def test_default_element_type_round_trip():
    assert tb.get_default_element_type() is ElementType.F32

    tb.set_default_element_type("double")

    assert tb.get_default_element_type() is ElementType.F64


def test_default_element_type_rejects_unsupported():
    with pytest.raises(tb.UnsupportedElementType):
        tb.set_default_element_type("complex128")
    assert tb.get_default_element_type() is ElementType.F32
