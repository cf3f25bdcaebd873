"""
Canonical text representation of IPv6 addresses (RFC 5952).

Every entry point runs the same pipeline over a freshly tokenized address:

    tokenize -> validate -> expand '::' -> rewrite embedded IPv4 -> compress -> render

and differs only in its PipelineConfig. Nothing is shared between calls, so
all functions here are safe to call from several threads at once.
"""
from dataclasses import dataclass

from ip6text.core.logger import get_logger
from ip6text.core.tokenizer import sixteen_bits, tokenize_classify
from ip6text.core.tokens import (
    ALL_ZEROS,
    COLON,
    DOUBLE_COLON,
    AllZeros,
    Colon,
    DoubleColon,
    GROUP_TOKENS,
    IPv4Addr,
    SixteenBits,
    TokenInvariantError,
    tokens_to_text,
)
from ip6text.core.validator import GROUPS_PER_ADDRESS, group_count, is_valid

logger = get_logger(__name__)


@dataclass(frozen=True)
class PipelineConfig:
    force_ipv4_rewrite: bool = False
    compress: bool = True
    pad_groups: bool = False

    def __post_init__(self):
        if self.pad_groups and (self.compress or not self.force_ipv4_rewrite):
            raise ValueError("padded groups need the expanded, pure form")


CANONICAL = PipelineConfig()
PURE = PipelineConfig(force_ipv4_rewrite=True)
EXPANDED_PURE = PipelineConfig(force_ipv4_rewrite=True, compress=False)
EXPANDED_PADDED = PipelineConfig(force_ipv4_rewrite=True, compress=False, pad_groups=True)


def intersperse_colons(groups):
    tokens = []
    for group in groups:
        if tokens:
            tokens.append(COLON)
        tokens.append(group)
    return tokens


def expand(tokens):
    """Replace the '::' of a valid token sequence with the all-zero groups it stands for."""
    if DOUBLE_COLON not in tokens:
        return list(tokens)

    index = tokens.index(DOUBLE_COLON)
    prefix = tokens[:index]
    suffix = tokens[index + 1:]

    # an IPv4Addr token fills two groups but is a single token
    has_ipv4 = any(isinstance(token, IPv4Addr) for token in tokens)
    target = GROUPS_PER_ADDRESS - 1 if has_ipv4 else GROUPS_PER_ADDRESS
    present = sum(1 for token in tokens if isinstance(token, GROUP_TOKENS))
    missing = target - present
    if missing < 1:
        raise TokenInvariantError(f"'::' stands for {missing} groups in {tokens}")

    expanded = []
    if prefix:
        expanded += prefix + [COLON]
    expanded += intersperse_colons([ALL_ZEROS] * missing)
    if suffix:
        expanded += [COLON] + suffix
    return expanded


def ipv4_to_tokens(token):
    """
    Rewrite an embedded IPv4 address as two 16-bit groups.

    >>> ipv4_to_tokens(IPv4Addr("127.0.0.1"))
    [SixteenBits(text='7f00'), Colon(), SixteenBits(text='1')]
    """
    if not isinstance(token, IPv4Addr):
        raise TokenInvariantError(f"not an embedded IPv4 address: {token!r}")
    o1, o2, o3, o4 = (int(octet) for octet in token.text.split("."))
    return [
        sixteen_bits(f"{o1:x}{o2:02x}"),
        COLON,
        sixteen_bits(f"{o3:x}{o4:02x}"),
    ]


def _exact(*pattern):
    return lambda prefix: prefix == list(pattern)


def _suffix(*pattern):
    return lambda prefix: prefix[-len(pattern):] == list(pattern)


# RFC 5952 section 5: these prefixes keep the dotted quad visible
TRANSITION_PREFIXES = [
    ("IPv4-compatible", _exact(DOUBLE_COLON)),
    ("IPv4-mapped", _exact(DOUBLE_COLON, SixteenBits("ffff"), COLON)),
    ("IPv4-translated", _exact(DOUBLE_COLON, SixteenBits("ffff"), COLON, ALL_ZEROS, COLON)),
    ("IPv4-translatable", _exact(SixteenBits("64"), COLON, SixteenBits("ff9b"), DOUBLE_COLON)),
    ("ISATAP", _suffix(SixteenBits("200"), COLON, SixteenBits("5efe"), COLON)),
    ("ISATAP", _suffix(ALL_ZEROS, COLON, SixteenBits("5efe"), COLON)),
    ("ISATAP", _suffix(DOUBLE_COLON, SixteenBits("5efe"), COLON)),
]


def transition_prefix(prefix):
    """Name of the IPv4 transition family the tokens before a dotted quad belong to, or None."""
    for name, matches in TRANSITION_PREFIXES:
        if matches(prefix):
            return name
    return None


def keeps_ipv4(tokens):
    """True if the embedded IPv4 address of an unexpanded sequence must stay dotted."""
    if not tokens or not isinstance(tokens[-1], IPv4Addr):
        return False
    return transition_prefix(tokens[:-1]) is not None


def longest_zero_run(groups):
    """(start, length) of the leftmost longest run of AllZeros groups."""
    best_start, best_length = 0, 0
    i = 0
    while i < len(groups):
        if isinstance(groups[i], AllZeros):
            j = i
            while j < len(groups) and isinstance(groups[j], AllZeros):
                j += 1
            if j - i > best_length:
                best_start, best_length = i, j - i
            i = j
        else:
            i += 1
    return best_start, best_length


def compress(tokens):
    """Replace the longest run of zero groups of an expanded sequence with '::'."""
    if DOUBLE_COLON in tokens:
        raise TokenInvariantError(f"compressing a sequence that still has '::': {tokens}")

    groups = [token for token in tokens if not isinstance(token, Colon)]
    start, length = longest_zero_run(groups)

    # "The symbol '::' MUST NOT be used to shorten just one 16-bit 0 field" (RFC 5952 4.2.2)
    if length < 2:
        return list(tokens)

    return (
        intersperse_colons(groups[:start])
        + [DOUBLE_COLON]
        + intersperse_colons(groups[start + length:])
    )


def pad_groups(tokens):
    padded = []
    for token in tokens:
        if isinstance(token, AllZeros):
            padded.append(SixteenBits("0000"))
        elif isinstance(token, SixteenBits):
            padded.append(SixteenBits(token.text.zfill(4)))
        else:
            padded.append(token)
    return padded


def _check_expanded(tokens):
    if any(isinstance(token, DoubleColon) for token in tokens) or group_count(tokens) != GROUPS_PER_ADDRESS:
        raise TokenInvariantError(f"not a fully expanded address: {tokens}")


def run_pipeline(text, config=CANONICAL):
    """Token sequence of ``text`` transformed according to ``config``, or None if invalid."""
    tokens = tokenize_classify(text)
    if tokens is None:
        return None
    if not is_valid(tokens):
        logger.debug(f"rejected {text!r}: not a valid IPv6 address")
        return None

    result = expand(tokens)
    _check_expanded(result)

    if isinstance(result[-1], IPv4Addr):
        if config.force_ipv4_rewrite or not keeps_ipv4(tokens):
            result = result[:-1] + ipv4_to_tokens(result[-1])

    if config.compress:
        result = compress(result)
    if config.pad_groups:
        result = pad_groups(result)
    return result


def canonical_tokens(text):
    return run_pipeline(text, CANONICAL)


def pure_tokens(text):
    return run_pipeline(text, PURE)


def _render(text, config):
    tokens = run_pipeline(text, config)
    if tokens is None:
        return None
    return tokens_to_text(tokens)


def is_ipv6_address(text):
    tokens = tokenize_classify(text)
    return tokens is not None and is_valid(tokens)


def parse_and_canonicalize(text):
    """
    Returns the RFC 5952 text representation of an IPv6 address, or None.

    >>> parse_and_canonicalize("D045::00Da:0fA9:0:0:230.34.110.80")
    'd045:0:da:fa9::e622:6e50'
    """
    return _render(text, CANONICAL)


def parse_and_canonicalize_pure(text):
    """Like parse_and_canonicalize, but an embedded IPv4 address is always rewritten in hex."""
    return _render(text, PURE)


def parse_and_expand_pure(text):
    """Pure form with all eight groups spelled out, no '::'."""
    return _render(text, EXPANDED_PURE)


def parse_and_expand_padded(text):
    """Expanded pure form with every group written as four hex digits."""
    return _render(text, EXPANDED_PADDED)
