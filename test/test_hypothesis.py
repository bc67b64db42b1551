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


"""Property-based round-trip and robustness tests of the decoder and encoder"""

from io import BytesIO
from unittest import TestCase

from hypothesis import given, settings, HealthCheck, strategies as st

from pynbt import (Type, Value, Compound, List, parse, load, write_to_buffer, estimate_size, DecoderException,
                   DEFAULT_MAX_DEPTH)

names = st.text(max_size=10)

byte_values = st.integers(min_value=-2**7, max_value=2**7 - 1)
short_values = st.integers(min_value=-2**15, max_value=2**15 - 1)
int_values = st.integers(min_value=-2**31, max_value=2**31 - 1)
long_values = st.integers(min_value=-2**63, max_value=2**63 - 1)

scalars = st.one_of(
    byte_values.map(Value.of_byte),
    short_values.map(Value.of_short),
    int_values.map(Value.of_int),
    long_values.map(Value.of_long),
    st.floats(width=32).map(Value.of_float),
    st.floats().map(Value.of_double),
    st.binary(max_size=20).map(Value.of_byte_array),
    st.text(max_size=20).map(Value.of_string),
    st.lists(int_values, max_size=10).map(Value.of_int_array),
    st.lists(long_values, max_size=10).map(Value.of_long_array)
)


def homogeneous_list(values):
    # keeps only those of the first value's kind
    if not values:
        return Value.of_list(List(Type.BYTE))
    kind = values[0].type
    return Value.of_list(List(kind, [value for value in values if value.type == kind]))


def containers(children):
    return st.one_of(
        st.dictionaries(names, children, max_size=5).map(lambda entries: Value.of_compound(Compound(entries))),
        st.lists(children, max_size=5).map(homogeneous_list)
    )


values = st.recursive(scalars, containers, max_leaves=25)
compounds = st.dictionaries(names, values, max_size=8).map(Compound)


class TestRoundTrip(TestCase):

    @settings(max_examples=200, deadline=None, suppress_health_check=[HealthCheck.too_slow])
    @given(compounds, names)
    def test_round_trip(self, compound, name):
        encoded = write_to_buffer(compound, name)
        self.assertEqual(len(encoded), estimate_size(compound, name))
        self.assertEqual(parse(encoded), Compound({name: Value.of_compound(compound)}))

    @settings(max_examples=100, deadline=None, suppress_health_check=[HealthCheck.too_slow])
    @given(compounds, names)
    def test_round_trip_root_tag(self, compound, name):
        encoded = write_to_buffer(compound, name, root_tag=True)
        self.assertEqual(len(encoded), estimate_size(compound, name, root_tag=True))
        self.assertEqual(parse(BytesIO(encoded), root_tag=True), Compound({name: Value.of_compound(compound)}))

    @settings(max_examples=100, deadline=None, suppress_health_check=[HealthCheck.too_slow])
    @given(values)
    def test_payload_size(self, value):
        encoded = write_to_buffer(Compound({'v': value}))
        # compound tag, empty name, entry tag, name "v", payload, two end tags
        self.assertEqual(len(encoded), 3 + 4 + estimate_size(value) + 2)

    @settings(max_examples=100, deadline=None, suppress_health_check=[HealthCheck.too_slow])
    @given(compounds)
    def test_sort_keys(self, compound):
        encoded = write_to_buffer(compound, sort_keys=True)
        self.assertEqual(len(encoded), estimate_size(compound))
        decoded = parse(encoded)['']
        self.assertEqual(decoded.get_compound(), compound)
        self.assertEqual(list(decoded.get_compound()), sorted(compound))


class TestDecoderRobustness(TestCase):

    @settings(max_examples=500, deadline=None)
    @given(st.binary(max_size=256))
    def test_arbitrary_input(self, raw):
        try:
            result = parse(raw)
        except DecoderException:
            pass
        else:
            self.assertIsInstance(result, Compound)

    @settings(max_examples=300, deadline=None)
    @given(st.binary(max_size=64), st.integers(min_value=1, max_value=DEFAULT_MAX_DEPTH))
    def test_arbitrary_compound_payload(self, raw, max_depth):
        # bytes following a valid compound entry header
        try:
            load(BytesIO(b'\x0a\x00\x00' + raw), max_depth=max_depth)
        except DecoderException as ex:
            self.assertIsNotNone(ex.position)
