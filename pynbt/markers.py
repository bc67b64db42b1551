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


"""NBT tag definitions"""

from enum import IntEnum

# Terminates a compound, never a value kind
TAG_END = 0


class Type(IntEnum):
    """Wire kinds, valued by their tag byte"""

    BYTE = 1
    SHORT = 2
    INT = 3
    LONG = 4
    FLOAT = 5
    DOUBLE = 6
    BYTE_ARRAY = 7
    STRING = 8
    LIST = 9
    COMPOUND = 10
    INT_ARRAY = 11
    LONG_ARRAY = 12


TYPES_INT = frozenset((Type.BYTE, Type.SHORT, Type.INT, Type.LONG))
TYPES_FLOAT = frozenset((Type.FLOAT, Type.DOUBLE))
TYPES_ARRAY = frozenset((Type.BYTE_ARRAY, Type.INT_ARRAY, Type.LONG_ARRAY))

# Longest encoded string (and name) representable by the 2-byte length prefix
MAX_STRING_LENGTH = 0xFFFF

# Maximum number of nested compounds/lists, kept below what the interpreter's default recursion limit allows
DEFAULT_MAX_DEPTH = 256
