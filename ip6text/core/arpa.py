from ip6text.core.canonicalizer import parse_and_expand_padded

ARPA_SUFFIX = "ip6.arpa."


def reverse_pointer(text):
    """
    Reverse DNS name of an IPv6 address (RFC 3596 2.5), or None.

    >>> reverse_pointer("2001:db8::1")[:16]
    '1.0.0.0.0.0.0.0.'
    """
    padded = parse_and_expand_padded(text)
    if padded is None:
        return None
    nibbles = padded.replace(":", "")
    return ".".join(reversed(nibbles)) + "." + ARPA_SUFFIX
