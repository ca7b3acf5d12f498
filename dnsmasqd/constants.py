DNSMASQ_BINARY = "dnsmasq"

DNSMASQ_FIXED_ARGS = (
    "--keep-in-foreground",
    "--conf-dir=/etc/dnsmasq.d,.dpkg-dist,.dpkg-old,.dpkg-new",
    "--local-service", # Only answer hosts on directly attached subnets
)

TRUST_ANCHOR_FILE_PATH = "/usr/share/dns/root.ds"
TRUST_ANCHOR_ARG_PREFIX = "--trust-anchor="

DHCP_LEASE_FILE_PATH = "/var/lib/misc/dnsmasq.leases"
DHCP_LEASE_FILE_ARG_PREFIX = "--dhcp-leasefile="
DHCP_RANGE_FIRST_HOST = 50
DHCP_RANGE_LAST_HOST = 250
DHCP_LEASE_DURATION = "12h"

# dnsmasq writes "*" when the client sent no hostname / client-id
LEASE_FIELD_UNSET = "*"
LEASE_EXPIRY_MAX = 2**64 - 1

LEASE_WATCH_DEBOUNCE_SECONDS = 1.0

# Environment overrides for the config file
ENV_BRIDGE_ADDR = "DNSMASQD_BRIDGE_ADDR"
ENV_DNSMASQ_ARGS = "DNSMASQD_ARGS"
ENV_CONFIG_PATH = "DNSMASQD_CONFIG"
