from typing import List

import structlog

from dnsmasqd.constants import LEASE_EXPIRY_MAX
from dnsmasqd.util import split_lines
from .lease import DnsmasqLease

log = structlog.get_logger()

LEASE_FIELD_COUNT = 5
LEASE_EXPIRY_MAX_DIGITS = len(str(LEASE_EXPIRY_MAX))


def _parse_expiry(raw: str) -> int:
    # Plain ASCII digits only: int() would also accept "+5", " 5" or "1_000".
    # The length cap keeps int() clear of the interpreter's digit limit.
    is_number = raw.isascii() and raw.isdigit() and len(raw) <= LEASE_EXPIRY_MAX_DIGITS
    value = int(raw) if is_number else -1

    if not 0 <= value <= LEASE_EXPIRY_MAX:
        # Keep the rest of the lease, the timestamp just becomes unknown
        log.debug("lease_expiry_unparsable", raw=raw)
        return 0
    return value


def parse_dhcp_leases(content: str) -> List[DnsmasqLease]:
    """
    Parse the contents of a dnsmasq lease file.

    Each lease is one line of five space separated fields:
        <expiry> <mac> <ip> <hostname> <client-id>

    Lines that don't have exactly five fields (the DHCPv6 "duid" line, a line
    cut short by a concurrent rewrite...) are dropped instead of failing the
    whole read. Order follows the file and nothing is deduplicated.
    """

    leases: List[DnsmasqLease] = []
    for line_no, line in enumerate(split_lines(content), start=1):
        if line == "":
            continue

        parts = line.split(" ")
        if len(parts) != LEASE_FIELD_COUNT:
            log.debug("lease_line_skipped", line_no=line_no, fields=len(parts))
            continue

        leases.append(DnsmasqLease(
            expire_timestamp=_parse_expiry(parts[0]),
            mac_address=parts[1],
            ip_address=parts[2],
            hostname=parts[3],
            client_id=parts[4],
        ))

    return leases
