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


"""Exceptions raised by the NBT value model, decoder and encoder"""


class DecoderException(ValueError):
    """Raised when decoding of an NBT stream fails."""

    def __init__(self, message, position=None):
        if position is not None:
            super().__init__('%s (at byte %d)' % (message, position), position)
        else:
            super().__init__(str(message), None)
        self.message = str(message)

    @property
    def position(self):
        """Position in stream where decoding failed. Can be None in case where the file-like object does not support
        tell().
        """
        return self.args[1]  # pylint: disable=unsubscriptable-object

    def with_position(self, position):
        """Returns a copy of this exception (same class) reporting the given stream position."""
        return type(self)(self.message, position=position)


class BoundsError(DecoderException):
    """Raised when a read would go past the end of the available input."""


class UnknownTag(DecoderException):
    """Raised when a tag byte outside 1..12 appears where a value tag is expected."""


class NestingTooDeep(DecoderException):
    """Raised when compounds/lists are nested deeper than the configured limit."""


class MalformedText(DecoderException):
    """Raised for an invalid modified UTF-8 sequence. offset is relative to the start of the text bytes."""

    def __init__(self, message, offset=None, position=None):
        super().__init__(message, position=position)
        self.offset = offset

    def with_position(self, position):
        return type(self)(self.message, offset=self.offset, position=position)


class EncoderException(TypeError):
    """Raised when encoding of a document fails."""


class StringTooLong(EncoderException):
    """Raised when a string or name encodes to more than 65535 bytes."""


class DepthExceeded(EncoderException):
    """Raised when compounds/lists to be written are nested deeper than the configured limit."""


class TypeMismatch(TypeError):
    """Raised when a value is accessed as, or added to a list of, a different kind."""


class IndexOutOfBounds(IndexError):
    """Raised when a list index is out of range."""
