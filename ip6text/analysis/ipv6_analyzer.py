from ip6text.core.canonicalizer import parse_and_canonicalize


class IPv6Analyzer:

    def __init__(self):
        # raw address text -> canonical text, for addresses seen so far
        self.address_cache = {}

    def analyze(self, packet):
        if not packet.haslayer('IPv6'):
            return None

        ipv6 = packet['IPv6']
        src_ip = ipv6.src
        dst_ip = ipv6.dst
        next_header = ipv6.nh
        hop_limit = ipv6.hlim
        flow_label = ipv6.fl
        traffic_class = ipv6.tc
        payload_length = ipv6.plen

        return {
            "version": 6,
            "src_ip": self.compress_address(src_ip),
            "dst_ip": self.compress_address(dst_ip),
            "next_header": next_header,
            "hop_limit": hop_limit,
            "flow_label": flow_label,
            "traffic_class": traffic_class,
            "payload_length": payload_length,
        }

    def compress_address(self, addr):
        if addr in self.address_cache:
            return self.address_cache[addr]

        canonical = parse_and_canonicalize(addr)
        # keep whatever scapy gave us if it is not an address we accept
        if canonical is None:
            canonical = addr

        self.address_cache[addr] = canonical
        return canonical
