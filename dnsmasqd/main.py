#!/usr/bin/env python3
import argparse
import os

import structlog
import uvicorn

from dnsmasqd.config import configure_logging, load_config
from dnsmasqd.constants import ENV_CONFIG_PATH
from dnsmasqd.errors import ConfigError
from dnsmasqd.server import create_app

API_HOST = os.getenv("DNSMASQD_API_HOST", "127.0.0.1")
API_PORT = int(os.getenv("DNSMASQD_API_PORT", 8053))
LOG_LEVELS = ["critical", "error", "warning", "info", "debug"]

log = structlog.get_logger()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="dnsmasq supervisor")
    parser.add_argument("--config", default=os.getenv(ENV_CONFIG_PATH), help="YAML config file")
    parser.add_argument("--host", default=API_HOST, help="API listen address")
    parser.add_argument("--port", type=int, default=API_PORT, help="API listen port")
    parser.add_argument("--log-level", default="info", choices=LOG_LEVELS)
    parser.add_argument("--no-watch", action="store_true", help="Don't watch the lease file for changes")
    return parser


def main():
    args = build_parser().parse_args()

    configure_logging(args.log_level)

    try:
        config = load_config(args.config)
    except ConfigError as e:
        log.error("config_invalid", error=str(e))
        raise SystemExit(2)

    log.info("dnsmasqd_starting", bridge_addr=config.bridge_addr, extra_args=len(config.dnsmasq_args))
    app = create_app(config, watch_leases=not args.no_watch)
    uvicorn.run(app, host=args.host, port=args.port, log_level=args.log_level)


if __name__ == "__main__":
    main()
