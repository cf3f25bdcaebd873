from dataclasses import dataclass


class TokenInvariantError(AssertionError):
    """Raised when a token sequence breaks an invariant the pipeline relies on.

    Malformed user input never ends up here: that is rejected with ``None``.
    This is a programming error, e.g. canonicalizing an unvalidated sequence.
    """


@dataclass(frozen=True)
class SixteenBits:
    # lowercase, no leading zeros, never "0" (see AllZeros)
    text: str


@dataclass(frozen=True)
class Colon:
    pass


@dataclass(frozen=True)
class DoubleColon:
    pass


@dataclass(frozen=True)
class AllZeros:
    pass


@dataclass(frozen=True)
class IPv4Addr:
    # dotted quad, each octet in plain decimal
    text: str


COLON = Colon()
DOUBLE_COLON = DoubleColon()
ALL_ZEROS = AllZeros()

IPv6AddrToken = (SixteenBits, Colon, DoubleColon, AllZeros, IPv4Addr)

# tokens that stand for (at least) one group, as opposed to separators
GROUP_TOKENS = (SixteenBits, AllZeros, IPv4Addr)


def token_to_text(token):
    if isinstance(token, SixteenBits):
        return token.text
    if isinstance(token, Colon):
        return ":"
    if isinstance(token, DoubleColon):
        return "::"
    # "A single 16-bit 0000 field MUST be represented as 0" (RFC 5952, 4.1)
    if isinstance(token, AllZeros):
        return "0"
    if isinstance(token, IPv4Addr):
        return token.text
    raise TokenInvariantError(f"not an IPv6 address token: {token!r}")


def tokens_to_text(tokens):
    """Render a token sequence back to text, without any checking."""
    return "".join(token_to_text(token) for token in tokens)
