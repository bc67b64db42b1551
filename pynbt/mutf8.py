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


"""Modified UTF-8 text codec

Text is handled as UTF-16 code units, each written with 1, 2 or 3 bytes:

    0x0001 - 0x007F  ->  0xxxxxxx
    0x0000, 0x0080 - 0x07FF  ->  110xxxxx 10xxxxxx
    0x0800 - 0xFFFF  ->  1110xxxx 10xxxxxx 10xxxxxx

There are no 4-byte sequences: code points above U+FFFF are written as a surrogate pair of 3-byte sequences.
"""

from struct import Struct

from .errors import MalformedText


def __is_plain_ascii(text):
    # NUL is the only ASCII character not written as a single byte
    return text.isascii() and '\x00' not in text


def __to_units(text):
    raw = text.encode('utf-16-be', 'surrogatepass')
    return Struct('>%dH' % (len(raw) // 2)).unpack(raw)


def __from_units(units):
    # joins surrogate pairs, lone surrogates are kept as-is
    return Struct('>%dH' % len(units)).pack(*units).decode('utf-16-be', 'surrogatepass')


def encoded_length(text):
    """Returns the number of bytes encode() produces for text, without encoding it."""
    if __is_plain_ascii(text):
        return len(text)
    length = 0
    for unit in __to_units(text):
        if 0x0001 <= unit <= 0x007F:
            length += 1
        elif unit > 0x07FF:
            length += 3
        else:
            length += 2
    return length


def encode(text):
    """Returns the modified UTF-8 encoding of the given str (no length prefix)."""
    if __is_plain_ascii(text):
        return text.encode('ascii')
    out = bytearray()
    for unit in __to_units(text):
        if 0x0001 <= unit <= 0x007F:
            out.append(unit)
        elif unit > 0x07FF:
            out.append(0xE0 | (unit >> 12))
            out.append(0x80 | ((unit >> 6) & 0x3F))
            out.append(0x80 | (unit & 0x3F))
        else:
            out.append(0xC0 | (unit >> 6))
            out.append(0x80 | (unit & 0x3F))
    return bytes(out)


def decode(raw):
    """Decodes exactly the given bytes (no length prefix) into a str

    Raises:
        MalformedText: If a byte sequence is invalid or a character is cut off by the end of raw. The exception's
                       offset attribute is the index of the offending byte within raw.
    """
    if raw.isascii():
        return raw.decode('ascii')

    length = len(raw)
    units = []
    count = 0
    while count < length:
        lead = raw[count]
        high = lead >> 4
        if high < 8:
            units.append(lead)
            count += 1
        elif high in (12, 13):
            if count + 2 > length:
                raise MalformedText('malformed input: partial character at end', offset=count)
            char2 = raw[count + 1]
            if (char2 & 0xC0) != 0x80:
                raise MalformedText('malformed input around byte %d' % (count + 1), offset=count + 1)
            units.append(((lead & 0x1F) << 6) | (char2 & 0x3F))
            count += 2
        elif high == 14:
            if count + 3 > length:
                raise MalformedText('malformed input: partial character at end', offset=count)
            char2 = raw[count + 1]
            char3 = raw[count + 2]
            if (char2 & 0xC0) != 0x80:
                raise MalformedText('malformed input around byte %d' % (count + 1), offset=count + 1)
            if (char3 & 0xC0) != 0x80:
                raise MalformedText('malformed input around byte %d' % (count + 2), offset=count + 2)
            units.append(((lead & 0x0F) << 12) | ((char2 & 0x3F) << 6) | (char3 & 0x3F))
            count += 3
        else:
            raise MalformedText('malformed input around byte %d' % count, offset=count)

    return __from_units(units)
