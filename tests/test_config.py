import pytest

from dnsmasqd.config import DnsmasqConfig, load_config
from dnsmasqd.constants import DHCP_LEASE_FILE_PATH, ENV_BRIDGE_ADDR, ENV_DNSMASQ_ARGS
from dnsmasqd.errors import ConfigError


@pytest.fixture(autouse=True)
def _clear_env(monkeypatch):
    monkeypatch.delenv(ENV_BRIDGE_ADDR, raising=False)
    monkeypatch.delenv(ENV_DNSMASQ_ARGS, raising=False)


def test_defaults():
    config = DnsmasqConfig(bridge_addr="10.1.2.1")

    assert config.dnsmasq_args == []
    assert config.default_lease_file == DHCP_LEASE_FILE_PATH


def test_short_bridge_addr_rejected():
    with pytest.raises(ValueError):
        DnsmasqConfig(bridge_addr="10.1")


def test_load_from_yaml(tmp_path):
    path = tmp_path / "dnsmasqd.yaml"
    path.write_text(
        "dnsmasq:\n"
        "  bridge_addr: 172.20.0.1\n"
        "  dnsmasq_args:\n"
        "    - --interface=br0\n"
        "    - --dhcp-leasefile=/tmp/leases\n"
    )

    config = load_config(str(path))

    assert config.bridge_addr == "172.20.0.1"
    assert config.dnsmasq_args == ["--interface=br0", "--dhcp-leasefile=/tmp/leases"]


def test_env_overrides_yaml(tmp_path, monkeypatch):
    path = tmp_path / "dnsmasqd.yaml"
    path.write_text("dnsmasq:\n  bridge_addr: 172.20.0.1\n  dnsmasq_args: [--log-dhcp]\n")
    monkeypatch.setenv(ENV_BRIDGE_ADDR, "10.9.8.1")
    monkeypatch.setenv(ENV_DNSMASQ_ARGS, "--interface=br1 '--dhcp-option=option:domain-name,lan'")

    config = load_config(str(path))

    assert config.bridge_addr == "10.9.8.1"
    assert config.dnsmasq_args == ["--interface=br1", "--dhcp-option=option:domain-name,lan"]


def test_env_only(monkeypatch):
    monkeypatch.setenv(ENV_BRIDGE_ADDR, "10.9.8.1")

    assert load_config().bridge_addr == "10.9.8.1"


def test_missing_bridge_addr():
    with pytest.raises(ConfigError):
        load_config()


def test_invalid_bridge_addr_from_env(monkeypatch):
    monkeypatch.setenv(ENV_BRIDGE_ADDR, "10")

    with pytest.raises(ConfigError):
        load_config()


def test_missing_file(tmp_path):
    with pytest.raises(ConfigError):
        load_config(str(tmp_path / "missing.yaml"))


def test_non_mapping_file(tmp_path):
    path = tmp_path / "dnsmasqd.yaml"
    path.write_text("- just\n- a list\n")

    with pytest.raises(ConfigError):
        load_config(str(path))
