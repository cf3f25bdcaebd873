import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

import pytest

from ip6text.core.tokenizer import classify_fragment, tokenize_classify
from ip6text.core.tokens import (
    ALL_ZEROS,
    COLON,
    DOUBLE_COLON,
    IPv4Addr,
    SixteenBits,
    tokens_to_text,
)


@pytest.mark.parametrize("fragment, expected", [
    (":", COLON),
    ("::", DOUBLE_COLON),
    ("abcd", SixteenBits("abcd")),
    ("ABCD", SixteenBits("abcd")),
    ("0db8", SixteenBits("db8")),
    ("0", ALL_ZEROS),
    ("0000", ALL_ZEROS),
    ("192.0.2.1", IPv4Addr("192.0.2.1")),
    ("010.001.000.255", IPv4Addr("10.1.0.255")),
])
def test_classify_fragment(fragment, expected):
    assert classify_fragment(fragment) == expected


@pytest.mark.parametrize("fragment", [
    ":::",
    "12345",
    "g",
    "",
    "1.2.3",
    "1.2.3.256",
    "1.2.3.4.5",
    "1234.1.1.1",
    " 1",
])
def test_classify_fragment_rejects(fragment):
    assert classify_fragment(fragment) is None


def test_tokenize_double_colon_in_the_middle():
    assert tokenize_classify("2001:DB8::0001") == [
        SixteenBits("2001"), COLON, SixteenBits("db8"), DOUBLE_COLON, SixteenBits("1"),
    ]


def test_tokenize_double_colon_at_the_edges():
    assert tokenize_classify("::") == [DOUBLE_COLON]
    assert tokenize_classify("::1") == [DOUBLE_COLON, SixteenBits("1")]
    assert tokenize_classify("fe80::") == [SixteenBits("fe80"), DOUBLE_COLON]


def test_tokenize_single_colons_at_the_edges():
    assert tokenize_classify(":1") == [COLON, SixteenBits("1")]
    assert tokenize_classify("::ffff:") == [DOUBLE_COLON, SixteenBits("ffff"), COLON]


def test_tokenize_embedded_ipv4():
    assert tokenize_classify("::ffff:192.0.2.1") == [
        DOUBLE_COLON, SixteenBits("ffff"), COLON, IPv4Addr("192.0.2.1"),
    ]


def test_tokenize_zero_groups():
    assert tokenize_classify("0:0000") == [ALL_ZEROS, COLON, ALL_ZEROS]


@pytest.mark.parametrize("text", [
    ":::1",
    "1:::2",
    "12345::",
    "g::1",
    "::1%eth0",
    "[::1]",
    "::1.2.3",
])
def test_tokenize_rejects_whole_text(text):
    assert tokenize_classify(text) is None


def test_tokenize_empty_text():
    assert tokenize_classify("") == []


def test_tokens_render_back():
    tokens = tokenize_classify("2001:0DB8:0:0::1.2.3.4")
    assert tokens_to_text(tokens) == "2001:db8:0:0::1.2.3.4"
