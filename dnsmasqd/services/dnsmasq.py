import subprocess

import structlog

from dnsmasqd.config import DnsmasqConfig
from dnsmasqd.constants import DNSMASQ_BINARY, DHCP_LEASE_FILE_ARG_PREFIX
from dnsmasqd.dhcp.arguments import collect_internal_args
from dnsmasqd.dhcp.lease import DnsmasqLease
from dnsmasqd.dhcp.utils import parse_dhcp_leases
from dnsmasqd.errors import LaunchError, TerminationError
from dnsmasqd.util import FileReaderFn, LauncherFn, read_file, exec_pipe_cmd

log = structlog.get_logger()


class DnsmasqSupervisor:
    """
    Owns the one dnsmasq process of this host.

    start/stop are idempotent and restart is just stop + start. Nothing here
    locks, so concurrent callers have to serialize lifecycle calls themselves.
    """

    def __init__(
        self,
        config: DnsmasqConfig,
        file_reader: FileReaderFn = read_file,
        launcher: LauncherFn = exec_pipe_cmd,
    ) -> None:
        self.config = config
        self.file_reader = file_reader
        self.launcher = launcher
        self._proc: subprocess.Popen | None = None

    @property
    def running(self) -> bool:
        return self._is_running()

    @property
    def pid(self) -> int | None:
        if not self._is_running():
            return None
        return self._proc.pid

    def _is_running(self) -> bool:
        # Advisory only: dnsmasq can exit right after we look
        return self._proc is not None and self._proc.poll() is None

    def build_args(self) -> list[str]:
        args = collect_internal_args(
            self.config.bridge_addr,
            file_reader=self.file_reader,
            trust_anchor_path=self.config.trust_anchor_file,
        )
        args.extend(self.config.dnsmasq_args)
        return args

    def start(self) -> None:
        if self._is_running():
            log.debug("dnsmasq_already_running", pid=self._proc.pid)
            return

        args = self.build_args()
        try:
            proc = self.launcher([DNSMASQ_BINARY, *args])
        except (OSError, subprocess.SubprocessError) as e:
            log.error("dnsmasq_launch_failed", error=str(e))
            raise LaunchError(f"failed to launch {DNSMASQ_BINARY}: {e}") from e

        self._proc = proc
        log.info("dnsmasq_started", pid=proc.pid, argc=len(args))

    def stop(self) -> None:
        if not self._is_running():
            log.debug("dnsmasq_not_running")
            return

        pid = self._proc.pid
        try:
            self._proc.kill()
        except OSError as e:
            log.error("dnsmasq_kill_failed", pid=pid, error=str(e))
            raise TerminationError(f"failed to kill {DNSMASQ_BINARY} (pid={pid}): {e}") from e

        # Exit is not awaited, we only drop our handle
        self._proc = None
        log.info("dnsmasq_stopped", pid=pid)

    def restart(self) -> None:
        self.stop()
        self.start()

    def lease_file_path(self) -> str:
        path = self.config.default_lease_file
        for arg in self.config.dnsmasq_args:
            if arg.startswith(DHCP_LEASE_FILE_ARG_PREFIX):
                path = arg.partition("=")[2]
        return path

    def read_leases(self) -> list[DnsmasqLease]:
        """
        Read and parse the lease file dnsmasq is writing to. Errors from the
        file reader are raised as is.
        """
        content = self.file_reader(self.lease_file_path())
        return parse_dhcp_leases(content)
