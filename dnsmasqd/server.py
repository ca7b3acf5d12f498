import threading
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI

from dnsmasqd.config import DnsmasqConfig
from dnsmasqd.routes.dnsmasq import router as dnsmasq_router
from dnsmasqd.services.dnsmasq import DnsmasqSupervisor
from dnsmasqd.services.lease_watcher import LeaseWatcher

log = structlog.get_logger()


def create_app(
    config: DnsmasqConfig,
    supervisor: DnsmasqSupervisor | None = None,
    watch_leases: bool = True,
) -> FastAPI:
    supervisor = supervisor or DnsmasqSupervisor(config)
    lifecycle_lock = threading.Lock()
    lease_watcher = LeaseWatcher(supervisor) if watch_leases else None

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        with lifecycle_lock:
            supervisor.start()
            if lease_watcher is not None:
                lease_watcher.ensure_watching()
        yield

        with lifecycle_lock:
            if lease_watcher is not None:
                lease_watcher.stop()
            supervisor.stop()

    app = FastAPI(title="dnsmasqd", lifespan=lifespan)
    app.state.supervisor = supervisor
    app.state.lifecycle_lock = lifecycle_lock
    app.state.lease_watcher = lease_watcher
    app.include_router(dnsmasq_router)

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    return app
