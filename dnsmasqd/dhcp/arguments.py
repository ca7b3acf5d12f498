from typing import List

import structlog

from dnsmasqd.constants import (
    DNSMASQ_FIXED_ARGS,
    TRUST_ANCHOR_ARG_PREFIX,
    TRUST_ANCHOR_FILE_PATH,
    DHCP_RANGE_FIRST_HOST,
    DHCP_RANGE_LAST_HOST,
    DHCP_LEASE_DURATION,
)
from dnsmasqd.errors import ConfigError, FileReadError
from dnsmasqd.util import FileReaderFn, read_file, split_lines

log = structlog.get_logger()

# <domain> IN DS <key-tag> <algorithm> <digest-type> <digest>
DS_RECORD_FIELD_COUNT = 6


def trust_anchor_arg(ds_record: str) -> str:
    """
    ". IN DS 20326 8 2 E06D..." -> "--trust-anchor=.,20326,8,2,E06D..."
    """
    anchor = ds_record.replace(" IN DS ", ",", 1)
    return TRUST_ANCHOR_ARG_PREFIX + ",".join(anchor.split())


def _looks_like_ds_record(line: str) -> bool:
    fields = line.split()
    return len(fields) == DS_RECORD_FIELD_COUNT and fields[1:3] == ["IN", "DS"]


def collect_trust_anchor_args(
    file_reader: FileReaderFn = read_file,
    path: str = TRUST_ANCHOR_FILE_PATH,
) -> List[str]:
    try:
        content = file_reader(path)
    except FileReadError as e:
        # DNSSEC bootstrap is best effort
        log.debug("trust_anchor_file_unreadable", path=path, reason=e.reason)
        return []

    args = []
    for line in split_lines(content):
        if not line.strip():
            continue
        if not _looks_like_ds_record(line):
            log.warning("trust_anchor_line_malformed", path=path, line=line)
        args.append(trust_anchor_arg(line))
    return args


def dhcp_range_arg(bridge_addr: str) -> str:
    # a.b.c.d -> --dhcp-range=a.b.c.50,a.b.c.250,12h
    octets = bridge_addr.split(".")
    if len(octets) < 3:
        raise ConfigError(f"bridge address {bridge_addr!r} has fewer than three octets")

    prefix = ".".join(octets[:3])
    return (
        f"--dhcp-range={prefix}.{DHCP_RANGE_FIRST_HOST},"
        f"{prefix}.{DHCP_RANGE_LAST_HOST},{DHCP_LEASE_DURATION}"
    )


def collect_internal_args(
    bridge_addr: str,
    file_reader: FileReaderFn = read_file,
    trust_anchor_path: str = TRUST_ANCHOR_FILE_PATH,
) -> List[str]:
    """
    Build the arguments dnsmasq always gets, in order: fixed flags, one
    --trust-anchor per DS record found on the system, then the DHCP range
    for the bridge network. Caller supplied extra args go after these.

    Nothing is cached; the trust anchor file and bridge address are read
    again on every call.
    """
    args = list(DNSMASQ_FIXED_ARGS)
    args.extend(collect_trust_anchor_args(file_reader, trust_anchor_path))
    args.append(dhcp_range_arg(bridge_addr))
    return args
