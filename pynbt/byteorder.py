# Copyright (c) 2019 Iotic Labs Ltd. All rights reserved.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     https://github.com/Iotic-Labs/py-ubjson/blob/master/LICENSE
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.


"""Conversion of fixed-width numbers between host representation and the big-endian wire format"""

from array import array
from struct import Struct
from sys import byteorder

from .markers import Type

__STRUCTS = {Type.BYTE: Struct('>b'),
             Type.SHORT: Struct('>h'),
             Type.INT: Struct('>i'),
             Type.LONG: Struct('>q'),
             Type.FLOAT: Struct('>f'),
             Type.DOUBLE: Struct('>d')}

PACK = {type_: struct.pack for type_, struct in __STRUCTS.items()}
UNPACK = {type_: struct.unpack for type_, struct in __STRUCTS.items()}
SIZE = {type_: struct.size for type_, struct in __STRUCTS.items()}

# Name/string lengths and array/list counts
PACK_UINT16 = Struct('>H').pack
UNPACK_UINT16 = Struct('>H').unpack
PACK_INT32 = Struct('>i').pack
UNPACK_INT32 = Struct('>i').unpack

RANGES = {Type.BYTE: (-(2 ** 7), 2 ** 7 - 1),
          Type.SHORT: (-(2 ** 15), 2 ** 15 - 1),
          Type.INT: (-(2 ** 31), 2 ** 31 - 1),
          Type.LONG: (-(2 ** 63), 2 ** 63 - 1)}

__SWAP = byteorder == 'little'


def __typecode(size):
    for code in 'bhilq':
        if array(code).itemsize == size:
            return code
    raise ImportError('No signed array type of %d bytes on this platform' % size)  # pragma: no cover


TYPECODES = {Type.BYTE_ARRAY: 'b',
             Type.INT_ARRAY: __typecode(4),
             Type.LONG_ARRAY: __typecode(8)}
ITEM_SIZE = {Type.BYTE_ARRAY: 1, Type.INT_ARRAY: 4, Type.LONG_ARRAY: 8}


def new_array(type_, values=()):
    """Returns a host-order array for the given array kind. Raises OverflowError if any value does not fit."""
    if isinstance(values, (bytes, bytearray)) and type_ == Type.BYTE_ARRAY:
        arr = array('b')
        arr.frombytes(values)
        return arr
    return array(TYPECODES[type_], values)


def pack_array(type_, arr):
    """Returns the wire (big-endian) form of the given host-order array, without the count prefix."""
    if __SWAP and ITEM_SIZE[type_] > 1:
        arr = array(arr.typecode, arr)
        arr.byteswap()
    return arr.tobytes()


def unpack_array(type_, raw):
    """Returns a host-order array from wire bytes. len(raw) must be a multiple of the element size."""
    arr = array(TYPECODES[type_])
    arr.frombytes(raw)
    if __SWAP and ITEM_SIZE[type_] > 1:
        arr.byteswap()
    return arr


def round_float32(value):
    """Returns value as it will be read back from a FLOAT field. Raises OverflowError if out of float32 range."""
    return UNPACK[Type.FLOAT](PACK[Type.FLOAT](value))[0]
