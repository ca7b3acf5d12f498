import logging
import os
import shlex

import structlog
import yaml
from pydantic import BaseModel, ValidationError, field_validator

from dnsmasqd.constants import (
    DHCP_LEASE_FILE_PATH,
    TRUST_ANCHOR_FILE_PATH,
    ENV_BRIDGE_ADDR,
    ENV_DNSMASQ_ARGS,
)
from dnsmasqd.errors import ConfigError


def configure_logging(level: str = "info") -> None:
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(level.upper())
        ),
        logger_factory=structlog.PrintLoggerFactory(),
    )


class DnsmasqConfig(BaseModel):
    """Settings the supervisor reads on every start."""

    bridge_addr: str
    dnsmasq_args: list[str] = []
    trust_anchor_file: str = TRUST_ANCHOR_FILE_PATH
    default_lease_file: str = DHCP_LEASE_FILE_PATH

    @field_validator("bridge_addr")
    @classmethod
    def _bridge_addr_has_prefix(cls, v: str) -> str:
        # The DHCP range is built from the first three octets
        if len(v.split(".")) < 3:
            raise ValueError("bridge_addr needs at least three dot separated octets")
        return v


def load_config(path: str | None = None) -> DnsmasqConfig:
    """
    Load settings from the "dnsmasq" section of a YAML file, then apply
    environment overrides (DNSMASQD_BRIDGE_ADDR, DNSMASQD_ARGS).
    """
    raw: dict = {}
    if path:
        try:
            with open(path, "r") as f:
                doc = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"failed to load config {path}: {e}") from e
        if not isinstance(doc, dict):
            raise ConfigError(f"config {path} must be a mapping")
        raw = dict(doc.get("dnsmasq") or {})

    bridge_addr = os.getenv(ENV_BRIDGE_ADDR)
    if bridge_addr:
        raw["bridge_addr"] = bridge_addr
    extra_args = os.getenv(ENV_DNSMASQ_ARGS)
    if extra_args is not None:
        raw["dnsmasq_args"] = shlex.split(extra_args)

    try:
        return DnsmasqConfig.model_validate(raw)
    except ValidationError as e:
        raise ConfigError(str(e)) from e
