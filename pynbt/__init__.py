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


"""NBT (Named Binary Tag) implementation

Example usage:

# To build a document
level = Compound()
level['byteTest'] = Value.of_byte(127)
level['stringTest'] = Value.of_string('HELLO WORLD')

# To encode
encoded = pynbt.write_to_buffer(level, 'Level')

# To decode
decoded = pynbt.parse(encoded)
assert decoded['Level'].get_compound() == level

To use a file-like object as output, use write() instead. parse() also accepts a file-like object.
"""

from .markers import Type, DEFAULT_MAX_DEPTH
from .value import Value, Compound, List
from .encoder import write, write_to_buffer, estimate_size
from .decoder import parse, load, loadb
from .errors import (DecoderException, BoundsError, UnknownTag, MalformedText, NestingTooDeep, EncoderException,
                     StringTooLong, DepthExceeded, TypeMismatch, IndexOutOfBounds)

__version__ = '0.1.0'

__all__ = ('Type', 'Value', 'Compound', 'List', 'write', 'write_to_buffer', 'estimate_size', 'parse', 'load', 'loadb',
           'DEFAULT_MAX_DEPTH', 'DecoderException', 'BoundsError', 'UnknownTag', 'MalformedText', 'NestingTooDeep',
           'EncoderException', 'StringTooLong', 'DepthExceeded', 'TypeMismatch', 'IndexOutOfBounds')
