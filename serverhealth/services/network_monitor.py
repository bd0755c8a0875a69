from typing import List

from serverhealth.models.health import NetworkInterfaceStat
from serverhealth.services.procfs import proc_file, read_text, to_int

_HEADER_LINES = 2
_LOOPBACK = "lo"

# Column positions after the interface name
_RX_BYTES, _RX_PACKETS, _TX_BYTES, _TX_PACKETS = 0, 1, 8, 9


def _column(counters: List[str], index: int) -> int:
    if index >= len(counters):
        return 0
    return to_int(counters[index])


def parse_net_dev(text: str) -> List[NetworkInterfaceStat]:
    """
    Parse /proc/net/dev into per-interface counters.

    Example data line:
      "  eth0: 1234 56 0 0 0 0 0 0 7890 12 0 0 0 0 0 0"

    Short or garbled lines produce a record with zeroed counters rather than
    being dropped.
    """
    interfaces: List[NetworkInterfaceStat] = []
    for line in text.splitlines()[_HEADER_LINES:]:
        name, sep, rest = line.partition(":")
        name = name.strip()
        if not sep:
            # no colon: name is the first token, counters follow
            tokens = line.split()
            if not tokens:
                continue
            name, counters = tokens[0], tokens[1:]
        else:
            counters = rest.split()
        if not name or name == _LOOPBACK:
            continue

        interfaces.append(
            NetworkInterfaceStat(
                name=name,
                rx_bytes=_column(counters, _RX_BYTES),
                tx_bytes=_column(counters, _TX_BYTES),
                rx_packets=_column(counters, _RX_PACKETS),
                tx_packets=_column(counters, _TX_PACKETS),
            )
        )
    return interfaces


def get_network_interfaces() -> List[NetworkInterfaceStat]:
    return parse_net_dev(read_text(proc_file("net", "dev")))
