import pytest

from cipherforge.cipher.errors import ConfigurationError
from cipherforge.encoding import Encoding, from_bytes, guess_encoding, to_bytes


@pytest.mark.parametrize(
    "name,expected",
    [("utf8", Encoding.UTF8), ("UTF-8", Encoding.UTF8), ("Hex", Encoding.HEX),
     ("base64", Encoding.BASE64), ("bytes", Encoding.BYTES), ("auto", Encoding.AUTO)],
)
def test_parse_encoding_names(name, expected):
    assert Encoding.parse(name) is expected


def test_unknown_encoding_rejected():
    with pytest.raises(ConfigurationError):
        Encoding.parse("base32")


def test_utf8():
    assert to_bytes("héllo", "utf8") == "héllo".encode("utf-8")
    assert from_bytes("héllo".encode("utf-8"), Encoding.UTF8) == "héllo"


def test_hex_is_case_and_whitespace_tolerant():
    assert to_bytes("DEADbeef", "hex") == b"\xde\xad\xbe\xef"
    assert to_bytes("de ad\nbe ef", Encoding.HEX) == b"\xde\xad\xbe\xef"
    assert from_bytes(b"\xde\xad", "hex") == "dead"


@pytest.mark.parametrize("bad", ["abc", "zz", "0x12"])
def test_bad_hex_rejected(bad):
    with pytest.raises(ConfigurationError):
        to_bytes(bad, "hex")


def test_base64():
    assert to_bytes("aGVsbG8=", "base64") == b"hello"
    assert from_bytes(b"hello", "base64") == "aGVsbG8="


def test_bad_base64_rejected():
    with pytest.raises(ConfigurationError):
        to_bytes("not base64!!", "base64")


def test_bytes_pass_through():
    assert to_bytes(b"\x00\x01", "utf8") == b"\x00\x01"
    assert to_bytes(bytearray(b"\x02"), "hex") == b"\x02"
    assert to_bytes(memoryview(b"\x03"), "bytes") == b"\x03"
    assert from_bytes(b"\x00\x01", "bytes") == b"\x00\x01"


def test_bytes_encoding_rejects_text():
    with pytest.raises(ConfigurationError):
        to_bytes("some text", "bytes")


def test_non_text_value_rejected():
    with pytest.raises(ConfigurationError):
        to_bytes(1234, "utf8")


def test_guess_encoding():
    assert guess_encoding("9f589f5cf6122c32") is Encoding.HEX
    assert guess_encoding("9F58 9F5C") is Encoding.HEX
    assert guess_encoding("n1ifXPYSLDK2v+wvKujDWg==") is Encoding.BASE64
    assert guess_encoding("abc") is Encoding.BASE64
    assert to_bytes("00ff", "auto") == b"\x00\xff"
    assert to_bytes("AP8=", "auto") == b"\x00\xff"


def test_auto_not_valid_for_output():
    with pytest.raises(ConfigurationError):
        from_bytes(b"x", "auto")


def test_invalid_utf8_output_is_replaced():
    assert from_bytes(b"ok\xff", "utf8") == "ok�"
