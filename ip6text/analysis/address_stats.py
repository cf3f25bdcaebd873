from ip6text.core.canonicalizer import canonical_tokens
from ip6text.core.tokens import IPv4Addr


class AddressStatistics:

    def __init__(self):
        self.stats = {
            'total': 0,
            'valid': 0,
            'invalid': 0,
            'embedded_ipv4': 0,
            'changed': 0,
            'addresses': {},
        }

    def update(self, raw, canonical=None):
        self.stats['total'] += 1

        if canonical is None:
            self.stats['invalid'] += 1
            return

        self.stats['valid'] += 1
        if canonical != raw:
            self.stats['changed'] += 1

        tokens = canonical_tokens(canonical)
        if tokens and isinstance(tokens[-1], IPv4Addr):
            self.stats['embedded_ipv4'] += 1

        self.stats['addresses'][canonical] = (
            self.stats['addresses'].get(canonical, 0) + 1
        )

    def get_summary(self):
        return self.stats

    def get_top_addresses(self, limit=10):
        ranked = sorted(self.stats['addresses'].items(), key=lambda item: item[1], reverse=True)
        return ranked[:limit]
