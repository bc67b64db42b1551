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


"""NBT encoder

Encoding and size estimation share one routine which emits through a sink: _ByteSink passes bytes on to a write
function whereas _SizeSink only adds up their length.
"""

import logging

from . import mutf8
from .byteorder import PACK, SIZE, PACK_UINT16, PACK_INT32, ITEM_SIZE, pack_array
from .errors import EncoderException, StringTooLong, DepthExceeded
from .markers import TAG_END, Type, TYPES_INT, TYPES_FLOAT, TYPES_ARRAY, MAX_STRING_LENGTH, DEFAULT_MAX_DEPTH
from .value import Value, Compound, List

_TAGS = {tag: bytes((tag,)) for tag in range(TAG_END, max(Type) + 1)}
_TYPES_NUMBER = TYPES_INT | TYPES_FLOAT

_logger = logging.getLogger(__name__)


def _check_text_length(length):
    if length > MAX_STRING_LENGTH:
        raise StringTooLong('String encodes to %d bytes, maximum is %d' % (length, MAX_STRING_LENGTH))


class _ByteSink:

    __slots__ = ('write',)

    def __init__(self, fp_write):
        self.write = fp_write

    def tag(self, tag):
        self.write(_TAGS[tag])

    def number(self, type_, value):
        self.write(PACK[type_](value))

    def count(self, value):
        self.write(PACK_INT32(value))

    def text(self, text):
        encoded = mutf8.encode(text)
        _check_text_length(len(encoded))
        self.write(PACK_UINT16(len(encoded)))
        self.write(encoded)

    def array(self, type_, arr):
        self.write(PACK_INT32(len(arr)))
        self.write(pack_array(type_, arr))


class _SizeSink:

    __slots__ = ('size',)

    def __init__(self):
        self.size = 0

    def tag(self, tag):
        self.size += 1

    def number(self, type_, value):
        self.size += SIZE[type_]

    def count(self, value):
        self.size += 4

    def text(self, text):
        length = mutf8.encoded_length(text)
        _check_text_length(length)
        self.size += 2 + length

    def array(self, type_, arr):
        self.size += 4 + len(arr) * ITEM_SIZE[type_]


def __descend(depth):
    if depth <= 0:
        raise DepthExceeded('Maximum nesting depth exceeded')
    return depth - 1


def __encode_payload(sink, value, seen_containers, sort_keys, depth):
    type_ = value.type
    if type_ in _TYPES_NUMBER:
        sink.number(type_, value.payload)

    elif type_ == Type.STRING:
        sink.text(value.payload)

    elif type_ in TYPES_ARRAY:
        sink.array(type_, value.payload)

    elif type_ == Type.LIST:
        __encode_list(sink, value.payload, seen_containers, sort_keys, __descend(depth))

    else:
        __encode_compound(sink, value.payload, seen_containers, sort_keys, __descend(depth))


def __encode_list(sink, container, seen_containers, sort_keys, depth):
    # circular reference check
    container_id = id(container)
    if container_id in seen_containers:
        raise ValueError('Circular reference detected')
    seen_containers[container_id] = container

    # element kinds are not checked again here, List.push_back() has done so
    sink.tag(TAG_END if container.type is None else container.type)
    sink.count(len(container))
    for value in container:
        __encode_payload(sink, value, seen_containers, sort_keys, depth)

    del seen_containers[container_id]


def __encode_compound(sink, compound, seen_containers, sort_keys, depth):
    # circular reference check
    container_id = id(compound)
    if container_id in seen_containers:
        raise ValueError('Circular reference detected')
    seen_containers[container_id] = compound

    for key, value in sorted(compound.items()) if sort_keys else compound.items():
        sink.tag(value.type)
        sink.text(key)
        __encode_payload(sink, value, seen_containers, sort_keys, depth)
    sink.tag(TAG_END)

    del seen_containers[container_id]


def __encode_document(sink, compound, name, root_tag, sort_keys, max_depth):
    if not isinstance(compound, Compound):
        raise EncoderException('Can only write a Compound, got %s' % type(compound).__name__)
    if not isinstance(name, str):
        raise EncoderException('Document name must be a string')

    if root_tag:
        # the anonymous root compound's end tag also ends the document
        sink.tag(Type.COMPOUND)
        sink.text('')
        max_depth = __descend(max_depth)

    # the named entry followed by a single end tag
    __encode_compound(sink, Compound({name: Value.of_compound(compound)}), {}, sort_keys, max_depth)


def estimate_size(obj, name='', root_tag=False, max_depth=DEFAULT_MAX_DEPTH):
    """Returns the exact number of bytes obj encodes to, without encoding it

    Args:
        obj: A Compound, in which case the size of write_to_buffer(obj, name, root_tag) is returned. For a Value or
             List the size of its payload only (i.e. as it appears after a tag & name) is returned.
        name (str): Document name, see write()
        root_tag (bool): See write()
        max_depth (int): See write()

    Raises:
        StringTooLong: If a string or name in obj is too long to be encoded.
        DepthExceeded: If compounds/lists in obj are nested deeper than max_depth.
        ValueError: If obj contains itself.
    """
    sink = _SizeSink()
    if isinstance(obj, Compound):
        __encode_document(sink, obj, name, root_tag, False, max_depth)
    elif isinstance(obj, Value):
        __encode_payload(sink, obj, {}, False, max_depth)
    elif isinstance(obj, List):
        __encode_list(sink, obj, {}, False, __descend(max_depth))
    else:
        raise EncoderException('Cannot estimate size of item of type %s' % type(obj))
    return sink.size


def write(fp, compound, name='', root_tag=False, sort_keys=False, max_depth=DEFAULT_MAX_DEPTH):
    """Writes the given compound as an NBT document to the provided file-like object

    Args:
        fp: write([size])-able object
        compound (Compound): Document contents
        name (str): Name of the document's (top-level) compound entry
        root_tag (bool): Wrap the document in an anonymous ("") compound, as some producers do. Documents written this
                         way should be read with load(root_tag=True).
        sort_keys (bool): Write compound entries sorted by key instead of in insertion order
        max_depth (int): Maximum nesting of compounds and lists, counted the same way as by load(). compound itself
                         is the first level (the second with root_tag).

    Raises:
        StringTooLong: If a string or name in the document encodes to more than 65535 bytes.
        DepthExceeded: If compounds/lists are nested deeper than max_depth.
        EncoderException: If compound is not a Compound or name is not a str.
        ValueError: If a container (directly or indirectly) contains itself.

    Output consists of a compound tag, the name, the entries of compound (each a tag, name and payload) terminated by
    an end tag, followed by a final end tag. With root_tag the output is instead prefixed by a compound tag and an
    empty name, the final end tag then closing that anonymous compound.
    """
    if not callable(fp.write):
        raise TypeError('fp.write not callable')
    _logger.debug('Writing document %r', name)
    __encode_document(_ByteSink(fp.write), compound, name, root_tag, sort_keys, max_depth)


def write_to_buffer(compound, name='', root_tag=False, sort_keys=False, max_depth=DEFAULT_MAX_DEPTH):
    """Returns the given compound as an NBT document in a bytes instance. See write() for available arguments."""
    buffer = bytearray(estimate_size(compound, name, root_tag, max_depth))
    offset = 0

    def fp_write(data):
        nonlocal offset
        end = offset + len(data)
        buffer[offset:end] = data
        offset = end

    __encode_document(_ByteSink(fp_write), compound, name, root_tag, sort_keys, max_depth)
    _logger.debug('Encoded document %r (%d bytes)', name, offset)
    return bytes(buffer)
