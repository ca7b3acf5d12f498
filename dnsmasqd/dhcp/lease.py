from dataclasses import dataclass

from dnsmasqd.constants import LEASE_FIELD_UNSET

@dataclass
class DnsmasqLease:
    expire_timestamp: int # epoch seconds, 0 for infinite leases
    mac_address: str
    ip_address: str
    hostname: str
    client_id: str # Might be a MAC or * if not sent

    @property
    def has_hostname(self) -> bool:
        return self.hostname != LEASE_FIELD_UNSET

    @property
    def has_client_id(self) -> bool:
        return self.client_id != LEASE_FIELD_UNSET
