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


"""NBT decoder"""

import logging
from io import BytesIO

from . import mutf8
from .byteorder import UNPACK, SIZE, UNPACK_UINT16, UNPACK_INT32, ITEM_SIZE, unpack_array
from .errors import DecoderException, BoundsError, UnknownTag, NestingTooDeep
from .markers import TAG_END, Type, DEFAULT_MAX_DEPTH
from .value import Value, Compound, List


# Large reads are split so that a bogus length does not cause a large allocation up front
__READ_CHUNK = 2 ** 16

__TYPES_BY_TAG = {type_.value: type_ for type_ in Type}

_logger = logging.getLogger(__name__)


def __read(fp_read, length, what):
    if length <= __READ_CHUNK:
        raw = fp_read(length)
    else:
        parts = []
        remaining = length
        while remaining:
            part = fp_read(min(remaining, __READ_CHUNK))
            if not part:
                break
            parts.append(part)
            remaining -= len(part)
        raw = b''.join(parts)
    if len(raw) < length:
        raise BoundsError('Insufficient input for %s (%d of %d bytes)' % (what, len(raw), length))
    return raw


def __tag_to_type(tag, what):
    type_ = __TYPES_BY_TAG.get(tag)
    if type_ is None:
        raise UnknownTag('Invalid %s tag %d' % (what, tag))
    return type_


def __descend(depth):
    if depth <= 0:
        raise NestingTooDeep('Maximum nesting depth exceeded')
    return depth - 1


def __decode_text(fp_read, what):
    length = UNPACK_UINT16(__read(fp_read, 2, what + ' length'))[0]
    return mutf8.decode(__read(fp_read, length, what))


# pylint: disable=unused-argument
def __decode_number(fp_read, type_, depth):
    return UNPACK[type_](__read(fp_read, SIZE[type_], type_.name))[0]


def __decode_array(fp_read, type_, depth):
    count = UNPACK_INT32(__read(fp_read, 4, type_.name + ' length'))[0]
    if count < 0:
        raise DecoderException('Negative %s length' % type_.name)
    return unpack_array(type_, __read(fp_read, count * ITEM_SIZE[type_], type_.name))


def __decode_string(fp_read, type_, depth):
    return __decode_text(fp_read, 'string')


def __decode_list(fp_read, type_, depth):
    depth = __descend(depth)
    tag = __read(fp_read, 1, 'list element tag')[0]
    count = UNPACK_INT32(__read(fp_read, 4, 'list length'))[0]

    # end tag is what other writers use for an empty list of unknown kind
    if tag == TAG_END:
        if count > 0:
            raise UnknownTag('Invalid list element tag %d' % tag)
        return List()

    element_type = __tag_to_type(tag, 'list element')
    decode = __METHOD_MAP[element_type]
    container = List(element_type)
    for _ in range(count):
        container.push_back(Value._unchecked(element_type, decode(fp_read, element_type, depth)))
    return container


def __decode_entry(fp_read, tag, compound, depth):
    type_ = __tag_to_type(tag, 'entry')
    name = __decode_text(fp_read, 'name')
    compound.insert(name, Value._unchecked(type_, __METHOD_MAP[type_](fp_read, type_, depth)))


def __decode_compound(fp_read, type_, depth):
    depth = __descend(depth)
    compound = Compound()
    while True:
        tag = __read(fp_read, 1, 'compound entry tag')[0]
        if tag == TAG_END:
            return compound
        __decode_entry(fp_read, tag, compound, depth)


__METHOD_MAP = {Type.BYTE: __decode_number,
                Type.SHORT: __decode_number,
                Type.INT: __decode_number,
                Type.LONG: __decode_number,
                Type.FLOAT: __decode_number,
                Type.DOUBLE: __decode_number,
                Type.BYTE_ARRAY: __decode_array,
                Type.STRING: __decode_string,
                Type.LIST: __decode_list,
                Type.COMPOUND: __decode_compound,
                Type.INT_ARRAY: __decode_array,
                Type.LONG_ARRAY: __decode_array}


def __decode_document(fp_read, max_depth):
    # top-level run ends with the input or an end tag
    document = Compound()
    while True:
        marker = fp_read(1)
        if not marker or marker[0] == TAG_END:
            return document
        __decode_entry(fp_read, marker[0], document, max_depth)


def __position(fp):
    try:
        return fp.tell()
    except (AttributeError, OSError, ValueError):
        return None


def load(fp, root_tag=False, max_depth=DEFAULT_MAX_DEPTH):
    """Decodes and returns an NBT document from the given file-like object

    Args:
        fp: read([size])-able object. Reading stops after the end tag of the top-level entries (or at the end of
            the input).
        root_tag (bool): If set and the document consists of a single anonymous ("") compound entry, that compound's
                         contents are returned instead (i.e. an implicit root tag is unwrapped).
        max_depth (int): Maximum nesting of compounds and lists.

    Returns:
        Compound holding the top-level entries, e.g. {"Level": <compound>} for a document written with name "Level".

    Raises:
        BoundsError: If the input ends within an entry.
        UnknownTag: If an invalid tag is encountered.
        MalformedText: If a name or string is not valid modified UTF-8.
        NestingTooDeep: If max_depth is exceeded.
        DecoderException: For any other decoding failure (base class of the above).

    NBT types are mapped as follows (see value module):

        +----------------------------------+-------------------------------+
        | NBT                              | Value payload                 |
        +==================================+===============================+
        | byte, short, int, long           | int                           |
        +----------------------------------+-------------------------------+
        | float, double                    | float                         |
        +----------------------------------+-------------------------------+
        | byte/int/long array              | array.array                   |
        +----------------------------------+-------------------------------+
        | string                           | str                           |
        +----------------------------------+-------------------------------+
        | list                             | List                          |
        +----------------------------------+-------------------------------+
        | compound                         | Compound                      |
        +----------------------------------+-------------------------------+
    """
    if not callable(fp.read):
        raise TypeError('fp.read not callable')
    fp_read = fp.read

    try:
        document = __decode_document(fp_read, max_depth)
    except DecoderException as ex:
        raise ex.with_position(__position(fp)) from ex

    if root_tag and len(document) == 1:
        root = document.get('')
        if root is not None and root.type == Type.COMPOUND:
            _logger.debug('Unwrapping anonymous root compound')
            document = root.get_compound()

    _logger.debug('Decoded document with %d top-level entries', len(document))
    return document


def loadb(chars, root_tag=False, max_depth=DEFAULT_MAX_DEPTH):
    """Decodes and returns an NBT document from the given bytes-like object. See load() for available arguments."""
    with BytesIO(chars) as fp:
        return load(fp, root_tag=root_tag, max_depth=max_depth)


def parse(source, root_tag=False, max_depth=DEFAULT_MAX_DEPTH):
    """Decodes an NBT document from either a bytes-like object or a file-like object. See load() for details."""
    if isinstance(source, (bytes, bytearray, memoryview)):
        return loadb(source, root_tag=root_tag, max_depth=max_depth)
    return load(source, root_tag=root_tag, max_depth=max_depth)
