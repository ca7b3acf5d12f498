"""Pydantic models for request/response validation."""
from pydantic import BaseModel


class ConfigUpdate(BaseModel):
    bridge_addr: str | None = None
    dnsmasq_args: list[str] | None = None


class ProcessStatus(BaseModel):
    running: bool
    pid: int | None = None


class LeaseOut(BaseModel):
    expire_timestamp: int
    mac_address: str
    ip_address: str
    hostname: str
    client_id: str
