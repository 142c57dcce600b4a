"""Unit tests for text codecs."""

from enum import Enum

import numpy as np
import pytest

from notifyval import (
    ConfigurationError,
    FloatCodec,
    NumpyCodec,
    ParseError,
    TextCodec,
    codec_for,
    register_codec,
)
from notifyval.codec import BoolCodec, EnumCodec, IntCodec, StrCodec


class Colors(Enum):
    Red = 0
    Blue = 1
    White = 2


@pytest.mark.unit
def test_codec_for_builtin_types():
    """Built-in types resolve to their codecs"""
    assert isinstance(codec_for(int), IntCodec)
    assert isinstance(codec_for(float), FloatCodec)
    assert isinstance(codec_for(bool), BoolCodec)
    assert isinstance(codec_for(str), StrCodec)


@pytest.mark.unit
def test_codec_for_enum_and_numpy_types():
    """Enums and numpy types get dedicated codecs"""
    assert isinstance(codec_for(Colors), EnumCodec)
    assert isinstance(codec_for(np.float32), NumpyCodec)
    assert isinstance(codec_for("uint32"), NumpyCodec)


@pytest.mark.unit
def test_codec_for_passes_codec_instances_through():
    codec = FloatCodec("g")
    assert codec_for(codec) is codec


@pytest.mark.unit
@pytest.mark.edge_case
def test_codec_for_unknown_type_raises():
    """Types without a codec are a configuration error"""
    with pytest.raises(ConfigurationError):
        codec_for(object)


@pytest.mark.unit
def test_int_codec_parses_signed_decimal_and_strips_whitespace():
    codec = IntCodec()
    assert codec.parse(" -56 ") == -56
    assert codec.format(42) == "42"


@pytest.mark.unit
@pytest.mark.edge_case
def test_int_codec_rejects_fractional_text():
    with pytest.raises(ParseError) as exc_info:
        IntCodec().parse("4.5")
    assert exc_info.value.text == "4.5"


@pytest.mark.unit
def test_float_codec_stream_style_format():
    """The 'g' format prints six significant digits, like a C++ stream"""
    codec = FloatCodec("g")
    assert codec.format(1.0) == "1"
    assert codec.format(6.555) == "6.555"
    assert FloatCodec().format(1.0) == "1.0"


@pytest.mark.unit
def test_bool_codec_accepts_words_and_digits():
    codec = BoolCodec()
    assert codec.parse("true") is True
    assert codec.parse("0") is False
    with pytest.raises(ParseError):
        codec.parse("maybe")


@pytest.mark.unit
def test_enum_codec_formats_by_name_and_parses_name_or_value():
    codec = EnumCodec(Colors)
    assert codec.format(Colors.Blue) == "Blue"
    assert codec.parse("White") is Colors.White
    assert codec.parse("1") is Colors.Blue
    assert codec.default is Colors.Red
    with pytest.raises(ParseError):
        codec.parse("Purple")


@pytest.mark.unit
def test_numpy_float_codec_round_trips_text():
    codec = NumpyCodec("float32")
    value = codec.parse("0.33")
    assert isinstance(value, np.float32)
    assert codec.format(value) == "0.33"


@pytest.mark.unit
@pytest.mark.edge_case
def test_numpy_integer_codec_checks_range_on_assignment():
    codec = NumpyCodec("uint16")
    assert codec.coerce(65535) == 65535
    with pytest.raises(OverflowError):
        codec.coerce(-1)


@pytest.mark.unit
def test_register_codec_enables_custom_types():
    """A registered codec is used for its type"""

    class Point:
        def __init__(self, x=0, y=0):
            self.x, self.y = x, y

    class PointCodec(TextCodec):
        python_type = Point

        def format(self, value):
            return f"{value.x};{value.y}"

        def parse(self, text):
            try:
                x, y = (int(part) for part in text.split(";"))
            except ValueError as e:
                raise ParseError(text, Point, str(e)) from e
            return Point(x, y)

    register_codec(Point, PointCodec())

    codec = codec_for(Point)
    assert codec.format(codec.parse("1;2")) == "1;2"
    assert codec.default.x == 0
