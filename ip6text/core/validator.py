from ip6text.core.logger import get_logger
from ip6text.core.tokens import (
    AllZeros,
    DoubleColon,
    GROUP_TOKENS,
    IPv4Addr,
    SixteenBits,
)

logger = get_logger(__name__)

GROUPS_PER_ADDRESS = 8
# an embedded IPv4 address fills the last two groups
IPV4_GROUPS = 2


def group_count(tokens):
    count = 0
    for token in tokens:
        if isinstance(token, IPv4Addr):
            count += IPV4_GROUPS
        elif isinstance(token, GROUP_TOKENS):
            count += 1
    return count


def has_adjacent_duplicates(tokens):
    return any(a == b for a, b in zip(tokens, tokens[1:]))


def is_valid(tokens):
    """Returns True if a token sequence is a syntactically valid IPv6 address (RFC 4291 2.2)."""
    if not tokens:
        return False

    # "::" and "::1" style addresses
    if tokens == [DoubleColon()]:
        return True
    if len(tokens) == 2 and isinstance(tokens[0], DoubleColon) and isinstance(tokens[1], SixteenBits):
        return True

    if has_adjacent_duplicates(tokens):
        return _reject(tokens, "identical adjacent tokens")

    if not isinstance(tokens[0], (SixteenBits, AllZeros, DoubleColon)):
        return _reject(tokens, "bad first token")

    double_colons = sum(1 for token in tokens if isinstance(token, DoubleColon))
    if double_colons > 1:
        return _reject(tokens, "more than one '::'")

    ipv4_addrs = [i for i, token in enumerate(tokens) if isinstance(token, IPv4Addr)]
    if len(ipv4_addrs) > 1:
        return _reject(tokens, "more than one embedded IPv4 address")
    if ipv4_addrs and ipv4_addrs[0] != len(tokens) - 1:
        return _reject(tokens, "embedded IPv4 address is not last")
    if not ipv4_addrs and not isinstance(tokens[-1], (SixteenBits, AllZeros, DoubleColon)):
        return _reject(tokens, "bad last token")

    groups = group_count(tokens)
    if double_colons == 0 and groups != GROUPS_PER_ADDRESS:
        return _reject(tokens, f"{groups} groups without '::'")
    if double_colons == 1 and groups >= GROUPS_PER_ADDRESS:
        return _reject(tokens, f"{groups} groups with '::'")
    return True


def _reject(tokens, reason):
    logger.debug(f"invalid token sequence ({reason}): {tokens}")
    return False
