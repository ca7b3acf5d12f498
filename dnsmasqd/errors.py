"""Errors raised by the dnsmasq supervisor and its collaborators."""


class DnsmasqError(Exception):
    pass


class LaunchError(DnsmasqError):
    """The dnsmasq process could not be created."""


class TerminationError(DnsmasqError):
    """The kill signal could not be delivered to the running dnsmasq."""


class FileReadError(DnsmasqError):
    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"failed to read {path}: {reason}")
        self.path = path
        self.reason = reason

    @property
    def not_found(self) -> bool:
        return isinstance(self.__cause__, FileNotFoundError)


class ConfigError(DnsmasqError):
    pass
