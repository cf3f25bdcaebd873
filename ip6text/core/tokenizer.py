import re

from ip6text.core.logger import get_logger
from ip6text.core.tokens import (
    ALL_ZEROS,
    COLON,
    DOUBLE_COLON,
    IPv4Addr,
    SixteenBits,
)

logger = get_logger(__name__)

# runs of separators and runs of anything else, in order
FRAGMENT_PATTERN = re.compile(r":+|[^:]+")
SIXTEEN_BITS_PATTERN = re.compile(r"[0-9a-fA-F]{1,4}")
IPV4_PATTERN = re.compile(r"([0-9]{1,3})\.([0-9]{1,3})\.([0-9]{1,3})\.([0-9]{1,3})")


def sixteen_bits(text):
    """
    Hex group -> token, normalized the way RFC 5952 wants it written:
    - "Leading zeros MUST be suppressed" (4.1)
    - "Hexadecimal digits MUST be in lowercase" (4.3)
    A group whose value is zero becomes AllZeros.
    """
    if not SIXTEEN_BITS_PATTERN.fullmatch(text):
        return None
    stripped = text.lstrip("0").lower()
    if not stripped:
        return ALL_ZEROS
    return SixteenBits(stripped)


def ipv4_addr(text):
    match = IPV4_PATTERN.fullmatch(text)
    if not match:
        return None
    octets = [int(octet) for octet in match.groups()]
    if any(octet > 255 for octet in octets):
        return None
    return IPv4Addr(".".join(str(octet) for octet in octets))


def classify_fragment(text):
    """Returns the token for one fragment of an address, or None."""
    if text == ":":
        return COLON
    if text == "::":
        return DOUBLE_COLON

    # the two patterns are disjoint, but both are tried before giving up
    token = sixteen_bits(text)
    if token is None:
        token = ipv4_addr(text)
    return token


def split_fragments(text):
    return FRAGMENT_PATTERN.findall(text)


def tokenize_classify(text):
    """
    Split an address on ':' and classify every fragment.

    A single ':' gives Colon, '::' gives DoubleColon (also at either end of the
    text), and any longer colon run or unknown fragment fails the whole text.
    Returns the list of tokens or None, never a partial result.
    """
    tokens = []
    for fragment in split_fragments(text):
        token = classify_fragment(fragment)
        if token is None:
            logger.debug(f"rejected {text!r}: cannot classify fragment {fragment!r}")
            return None
        tokens.append(token)
    return tokens
