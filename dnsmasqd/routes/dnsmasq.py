"""dnsmasq lifecycle, config and lease routes."""
from dataclasses import asdict

from fastapi import APIRouter, HTTPException, Request
from pydantic import ValidationError

from dnsmasqd.config import DnsmasqConfig
from dnsmasqd.errors import ConfigError, FileReadError, LaunchError, TerminationError
from dnsmasqd.models import ConfigUpdate, LeaseOut, ProcessStatus
from dnsmasqd.services.dnsmasq import DnsmasqSupervisor


router = APIRouter(prefix="/api/dnsmasq", tags=["dnsmasq"])


def _supervisor(request: Request) -> DnsmasqSupervisor:
    return request.app.state.supervisor


def _status(supervisor: DnsmasqSupervisor) -> dict:
    status = ProcessStatus(running=supervisor.running, pid=supervisor.pid)
    return {"data": status.model_dump()}


def _lease_rows(leases) -> dict:
    rows = [LeaseOut(**asdict(lease)).model_dump() for lease in leases]
    return {"data": rows, "count": len(rows)}


@router.get("/status")
def get_status(request: Request):
    """Whether dnsmasq is running and its pid."""
    return _status(_supervisor(request))


@router.post("/start")
def start(request: Request):
    supervisor = _supervisor(request)
    with request.app.state.lifecycle_lock:
        try:
            supervisor.start()
        except ConfigError as e:
            raise HTTPException(status_code=422, detail=str(e))
        except LaunchError as e:
            raise HTTPException(status_code=500, detail=str(e))
    return _status(supervisor)


@router.post("/stop")
def stop(request: Request):
    supervisor = _supervisor(request)
    with request.app.state.lifecycle_lock:
        try:
            supervisor.stop()
        except TerminationError as e:
            raise HTTPException(status_code=500, detail=str(e))
    return _status(supervisor)


@router.post("/restart")
def restart(request: Request):
    """Stop then start; picks up config and trust anchor changes."""
    supervisor = _supervisor(request)
    with request.app.state.lifecycle_lock:
        try:
            supervisor.restart()
        except ConfigError as e:
            raise HTTPException(status_code=422, detail=str(e))
        except (LaunchError, TerminationError) as e:
            raise HTTPException(status_code=500, detail=str(e))
    return _status(supervisor)


@router.get("/args")
def get_args(request: Request):
    """Arguments the next start would launch dnsmasq with."""
    try:
        args = _supervisor(request).build_args()
    except ConfigError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return {"data": args, "count": len(args)}


@router.get("/leases")
def list_leases(request: Request):
    """Current contents of the dnsmasq lease file."""
    try:
        leases = _supervisor(request).read_leases()
    except FileReadError as e:
        raise HTTPException(status_code=404 if e.not_found else 500, detail=str(e))
    return _lease_rows(leases)


@router.get("/leases/watched")
def list_watched_leases(request: Request):
    """Leases as of the last lease file change the watcher picked up."""
    watcher = request.app.state.lease_watcher
    if watcher is None or watcher.watched_path is None:
        raise HTTPException(status_code=404, detail="lease file is not being watched")
    body = _lease_rows(watcher.leases)
    body["path"] = watcher.watched_path
    return body


@router.put("/config")
def update_config(request: Request, body: ConfigUpdate):
    """Partially update the config. Applied on the next start or restart."""
    supervisor = _supervisor(request)
    updates = body.model_dump(exclude_none=True)
    with request.app.state.lifecycle_lock:
        try:
            config = DnsmasqConfig.model_validate({**supervisor.config.model_dump(), **updates})
        except ValidationError as e:
            raise HTTPException(status_code=422, detail=str(e))
        supervisor.config = config

        # Follow a changed --dhcp-leasefile=
        watcher = request.app.state.lease_watcher
        if watcher is not None and watcher.watched_path is not None:
            watcher.ensure_watching()
    return {"data": config.model_dump()}
