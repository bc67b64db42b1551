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


"""NBT document model

A document is a tree of Compound and List containers holding Value leaves. Each Value has exactly one active kind
(see markers.Type) with a payload of the matching Python type:

    +-------------------------------------+----------------------------------+
    | Type                                | Payload                          |
    +=====================================+==================================+
    | BYTE, SHORT, INT, LONG              | int (range-checked)              |
    +-------------------------------------+----------------------------------+
    | FLOAT, DOUBLE                       | float (FLOAT rounded to float32) |
    +-------------------------------------+----------------------------------+
    | BYTE_ARRAY, INT_ARRAY, LONG_ARRAY   | array.array of signed integers   |
    +-------------------------------------+----------------------------------+
    | STRING                              | str                              |
    +-------------------------------------+----------------------------------+
    | LIST                                | List                             |
    +-------------------------------------+----------------------------------+
    | COMPOUND                            | Compound                         |
    +-------------------------------------+----------------------------------+

Containers own their children: copies are deep, and a container must not (directly or indirectly) contain itself.
"""

from collections.abc import Mapping, MutableMapping, Sequence
from math import isnan

from .byteorder import RANGES, new_array, round_float32
from .errors import TypeMismatch, IndexOutOfBounds
from .markers import Type, TYPES_ARRAY, TYPES_FLOAT


def _check_int(type_, payload):
    if isinstance(payload, bool) or not isinstance(payload, int):
        raise TypeMismatch('%s requires an int, got %s' % (type_.name, type(payload).__name__))
    low, high = RANGES[type_]
    if not low <= payload <= high:
        raise ValueError('%d out of range for %s' % (payload, type_.name))
    return payload


def _check_float(type_, payload):
    if isinstance(payload, bool) or not isinstance(payload, (int, float)):
        raise TypeMismatch('%s requires a float, got %s' % (type_.name, type(payload).__name__))
    try:
        return round_float32(payload) if type_ == Type.FLOAT else float(payload)
    except OverflowError as ex:
        raise ValueError('%r out of range for %s' % (payload, type_.name)) from ex


def _check_array(type_, payload):
    if isinstance(payload, str) or (isinstance(payload, (bytes, bytearray)) and type_ != Type.BYTE_ARRAY):
        raise TypeMismatch('%s requires a sequence of int, got %s' % (type_.name, type(payload).__name__))
    if isinstance(payload, (bytes, bytearray)):
        return new_array(type_, payload)
    try:
        payload = list(payload)
    except TypeError as ex:
        raise TypeMismatch('%s requires a sequence of int, got %s' % (type_.name, type(payload).__name__)) from ex
    if any(isinstance(item, bool) for item in payload):
        raise TypeMismatch('%s requires a sequence of int, got bool element' % type_.name)
    try:
        return new_array(type_, payload)
    except OverflowError as ex:
        raise ValueError('Element out of range for %s' % type_.name) from ex
    except TypeError as ex:
        raise TypeMismatch('%s requires a sequence of int' % type_.name) from ex


def _check_instance(cls):
    def check(type_, payload):
        if not isinstance(payload, cls):
            raise TypeMismatch('%s requires a %s, got %s' % (type_.name, cls.__name__, type(payload).__name__))
        return payload
    return check


def _copy_payload(type_, payload):
    if type_ in TYPES_ARRAY:
        return payload[:]
    if type_ in (Type.LIST, Type.COMPOUND):
        return payload.copy()
    # scalars & str are immutable
    return payload


class Value:
    """A single NBT value: one active kind and its payload.

    Create with Value(type_, payload) or the of_<kind>() constructors. Reading the payload via a get_<kind>() accessor
    raises TypeMismatch unless <kind> is the active kind. set() and assign() change kind and payload together.
    """

    __slots__ = ('_type', '_payload')

    def __init__(self, type_, payload):
        self._type = None
        self._payload = None
        self.set(type_, payload)

    @classmethod
    def _unchecked(cls, type_, payload):
        # payload must already be valid for type_ (used by the decoder)
        new = cls.__new__(cls)
        new._type, new._payload = type_, payload
        return new

    @classmethod
    def of_byte(cls, value):
        return cls(Type.BYTE, value)

    @classmethod
    def of_short(cls, value):
        return cls(Type.SHORT, value)

    @classmethod
    def of_int(cls, value):
        return cls(Type.INT, value)

    @classmethod
    def of_long(cls, value):
        return cls(Type.LONG, value)

    @classmethod
    def of_float(cls, value):
        return cls(Type.FLOAT, value)

    @classmethod
    def of_double(cls, value):
        return cls(Type.DOUBLE, value)

    @classmethod
    def of_byte_array(cls, value):
        return cls(Type.BYTE_ARRAY, value)

    @classmethod
    def of_string(cls, value):
        return cls(Type.STRING, value)

    @classmethod
    def of_list(cls, value):
        return cls(Type.LIST, value)

    @classmethod
    def of_compound(cls, value):
        return cls(Type.COMPOUND, value)

    @classmethod
    def of_int_array(cls, value):
        return cls(Type.INT_ARRAY, value)

    @classmethod
    def of_long_array(cls, value):
        return cls(Type.LONG_ARRAY, value)

    @property
    def type(self):
        """The active kind (markers.Type)"""
        return self._type

    @property
    def payload(self):
        """The payload of whichever kind is active"""
        return self._payload

    def set(self, type_, payload):
        """Makes type_ the active kind, holding payload

        Args:
            type_ (Type): New kind (or its tag number)
            payload: Python object for the kind, see module documentation. Arrays are copied into a new
                     array.array, List & Compound instances are taken over as-is.

        Raises:
            ValueError: If type_ is not a value kind or a numeric payload is out of range for it.
            TypeMismatch: If payload is not of a Python type accepted for type_.

        On failure the previous kind and payload remain.
        """
        type_ = Type(type_)
        payload = _CHECKS[type_](type_, payload)
        self._type, self._payload = type_, payload
        return self

    def assign(self, other):
        """Replaces kind and payload with a deep copy of those of other (a Value)."""
        if not isinstance(other, Value):
            raise TypeError('Can only assign from a Value, got %s' % type(other).__name__)
        if other is not self:
            self._type, self._payload = other._type, _copy_payload(other._type, other._payload)
        return self

    def __expect(self, type_):
        if self._type != type_:
            raise TypeMismatch('Value is %s, not %s' % (self._type.name, type_.name))
        return self._payload

    def get_byte(self):
        return self.__expect(Type.BYTE)

    def get_short(self):
        return self.__expect(Type.SHORT)

    def get_int(self):
        return self.__expect(Type.INT)

    def get_long(self):
        return self.__expect(Type.LONG)

    def get_float(self):
        return self.__expect(Type.FLOAT)

    def get_double(self):
        return self.__expect(Type.DOUBLE)

    def get_byte_array(self):
        return self.__expect(Type.BYTE_ARRAY)

    def get_string(self):
        return self.__expect(Type.STRING)

    def get_list(self):
        return self.__expect(Type.LIST)

    def get_compound(self):
        return self.__expect(Type.COMPOUND)

    def get_int_array(self):
        return self.__expect(Type.INT_ARRAY)

    def get_long_array(self):
        return self.__expect(Type.LONG_ARRAY)

    def copy(self):
        """Returns a deep copy"""
        return Value._unchecked(self._type, _copy_payload(self._type, self._payload))

    __copy__ = copy

    def __deepcopy__(self, memo):
        return self.copy()

    def __eq__(self, other):
        if not isinstance(other, Value):
            return NotImplemented
        if self._type != other._type:
            return False
        if self._type in TYPES_FLOAT and isnan(self._payload):
            # any NaN equals any other
            return isnan(other._payload)
        return self._payload == other._payload

    def __repr__(self):
        return 'Value(Type.%s, %r)' % (self._type.name, self._payload)


class Compound(MutableMapping):
    """Mapping of str keys to Value instances, iterated in insertion order.

    Assigning to an existing key replaces its value but keeps its position.
    """

    __slots__ = ('_entries',)

    def __init__(self, entries=()):
        self._entries = {}
        for key, value in (entries.items() if isinstance(entries, Mapping) else entries):
            self.insert(key, value)

    def insert(self, key, value):
        """Adds value under key, replacing any existing value for key."""
        if not isinstance(key, str):
            raise TypeError('Compound keys can only be strings')
        if not isinstance(value, Value):
            raise TypeError('Compound values must be Value instances, got %s' % type(value).__name__)
        self._entries[key] = value

    def get(self, key, default=None):
        return self._entries.get(key, default)

    def remove(self, key):
        """Deletes the entry for key. Returns whether there was one."""
        return self._entries.pop(key, None) is not None

    def has_key(self, key):
        return key in self._entries

    def size(self):
        return len(self._entries)

    def copy(self):
        """Returns a deep copy"""
        new = Compound()
        new._entries = {key: value.copy() for key, value in self._entries.items()}
        return new

    __copy__ = copy

    def __deepcopy__(self, memo):
        return self.copy()

    def __getitem__(self, key):
        return self._entries[key]

    def __setitem__(self, key, value):
        self.insert(key, value)

    def __delitem__(self, key):
        del self._entries[key]

    def __contains__(self, key):
        return key in self._entries

    def __iter__(self):
        return iter(self._entries)

    def __len__(self):
        return len(self._entries)

    def __repr__(self):
        return 'Compound(%r)' % self._entries


class List(Sequence):
    """Ordered sequence of Value instances which all have the same kind.

    The element kind is fixed by List(type_). A List created without a kind is untyped: it takes on the kind of the
    first value pushed to it. Adding a value of any other kind raises TypeMismatch.
    """

    __slots__ = ('_type', '_values')

    def __init__(self, type_=None, values=()):
        self._type = None if type_ is None else Type(type_)
        self._values = []
        for value in values:
            self.push_back(value)

    @property
    def type(self):
        """Element kind, None if untyped"""
        return self._type

    def get_type(self):
        return self._type

    def size(self):
        return len(self._values)

    def __check(self, value):
        if not isinstance(value, Value):
            raise TypeError('List elements must be Value instances, got %s' % type(value).__name__)
        if self._type is not None and value.type != self._type:
            raise TypeMismatch('Cannot add %s to list of %s' % (value.type.name, self._type.name))

    def __position(self, index):
        if isinstance(index, bool) or not isinstance(index, int):
            raise TypeError('List indices must be integers, not %s' % type(index).__name__)
        size = len(self._values)
        position = index + size if index < 0 else index
        if not 0 <= position < size:
            raise IndexOutOfBounds('List index %d out of range (size %d)' % (index, size))
        return position

    def push_back(self, value):
        """Appends value (a Value) to the end of the list."""
        self.__check(value)
        if self._type is None:
            self._type = value.type
        self._values.append(value)

    def emplace_back(self, payload):
        """Appends a new Value of the list's kind holding payload."""
        if self._type is None:
            raise TypeMismatch('Kind of untyped list unknown, use push_back()')
        self._values.append(Value(self._type, payload))

    def get(self, index):
        return self._values[self.__position(index)]

    def set(self, index, value):
        """Replaces the element at index with value (a Value of the list's kind)."""
        position = self.__position(index)
        self.__check(value)
        self._values[position] = value

    def copy(self):
        """Returns a deep copy"""
        new = List(self._type)
        new._values = [value.copy() for value in self._values]
        return new

    __copy__ = copy

    def __deepcopy__(self, memo):
        return self.copy()

    def __getitem__(self, index):
        return self.get(index)

    def __setitem__(self, index, value):
        self.set(index, value)

    def __iter__(self):
        return iter(self._values)

    def __len__(self):
        return len(self._values)

    def __eq__(self, other):
        if not isinstance(other, List):
            return NotImplemented
        return self._type == other._type and self._values == other._values

    def __repr__(self):
        return 'List(%s, %r)' % (self._type and 'Type.' + self._type.name, self._values)


_CHECKS = {Type.BYTE: _check_int,
           Type.SHORT: _check_int,
           Type.INT: _check_int,
           Type.LONG: _check_int,
           Type.FLOAT: _check_float,
           Type.DOUBLE: _check_float,
           Type.BYTE_ARRAY: _check_array,
           Type.STRING: _check_instance(str),
           Type.LIST: _check_instance(List),
           Type.COMPOUND: _check_instance(Compound),
           Type.INT_ARRAY: _check_array,
           Type.LONG_ARRAY: _check_array}
