import os
import threading
from typing import Callable

import structlog
from watchdog.events import FileSystemEventHandler, FileSystemEvent
from watchdog.observers import Observer

from dnsmasqd.constants import LEASE_WATCH_DEBOUNCE_SECONDS
from dnsmasqd.dhcp.lease import DnsmasqLease
from dnsmasqd.errors import FileReadError

log = structlog.get_logger()


def _normalize(path) -> str:
    if isinstance(path, bytes):
        path = os.fsdecode(path)
    return os.path.abspath(path)


class LeaseObserver(FileSystemEventHandler):
    """
    Calls on_change once dnsmasq has stopped touching the lease file for
    debounce_seconds. dnsmasq rewrites the whole file on every lease change.
    """

    def __init__(
        self,
        on_change: Callable,
        lease_file_path: str,
        debounce_seconds: float = LEASE_WATCH_DEBOUNCE_SECONDS,
    ) -> None:
        self.on_change = on_change
        self.lease_file_path = _normalize(lease_file_path)
        self.debounce_seconds = debounce_seconds
        self._timer = None

    def _trigger(self):
        if self._timer:
            self._timer.cancel()
        self._timer = threading.Timer(self.debounce_seconds, self.on_change)
        self._timer.daemon = True
        self._timer.start()

    def on_created(self, event: FileSystemEvent) -> None:
        if _normalize(event.src_path) == self.lease_file_path:
            self._trigger()

    def on_modified(self, event: FileSystemEvent) -> None:
        if _normalize(event.src_path) == self.lease_file_path:
            self._trigger()

    def on_moved(self, event: FileSystemEvent) -> None:
        if _normalize(event.dest_path) == self.lease_file_path:
            self._trigger()


def watch_lease_file(lease_file_path: str, on_change: Callable) -> Observer | None:
    lease_dir = os.path.dirname(_normalize(lease_file_path))
    if not os.path.isdir(lease_dir):
        log.warning("lease_dir_missing", path=lease_dir)
        return None

    observer = Observer()
    observer.schedule(LeaseObserver(on_change, lease_file_path), path=lease_dir, recursive=False)
    observer.start()
    log.info("lease_watcher_started", path=lease_file_path)
    return observer


class LeaseWatcher:
    """
    Keeps the latest parsed leases of a supervisor in memory and logs which
    MACs came and went each time dnsmasq rewrites the lease file.
    """

    def __init__(self, supervisor) -> None:
        self.supervisor = supervisor
        self.leases: list[DnsmasqLease] = []
        self.watched_path: str | None = None
        self._observer = None

    def refresh(self) -> list[DnsmasqLease]:
        try:
            leases = self.supervisor.read_leases()
        except FileReadError as e:
            log.warning("lease_read_failed", path=e.path, reason=e.reason)
            return self.leases

        previous = {lease.mac_address: lease for lease in self.leases}
        current = {lease.mac_address: lease for lease in leases}
        for mac in current.keys() - previous.keys():
            log.info("lease_added", mac=mac, ip=current[mac].ip_address, hostname=current[mac].hostname)
        for mac in previous.keys() - current.keys():
            log.info("lease_removed", mac=mac, ip=previous[mac].ip_address)

        self.leases = leases
        return leases

    def ensure_watching(self) -> None:
        """(Re)schedule the observer if the configured lease file moved."""
        path = self.supervisor.lease_file_path()
        if path == self.watched_path:
            return

        self.stop()
        self.leases = []
        self._observer = watch_lease_file(path, self.refresh)
        self.watched_path = path
        self.refresh()

    def stop(self) -> None:
        if self._observer is not None:
            self._observer.stop()
            self._observer.join()
            self._observer = None
        self.watched_path = None
