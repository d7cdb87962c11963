"""Entry point for ``futurehealth-server`` and ``python -m futurehealth.core.server.main``."""

from __future__ import annotations

import logging
from ipaddress import ip_address

from futurehealth.core.config.settings import Settings, get_settings
from futurehealth.core.server.app import create_app

logger = logging.getLogger(__name__)


def _is_loopback_host(host: str) -> bool:
    if host == "localhost":
        return True
    try:
        return ip_address(host).is_loopback
    except ValueError:
        return False


def _check_bind(settings: Settings) -> None:
    """Refuse to expose profile data beyond this machine unless explicitly allowed."""
    if _is_loopback_host(settings.fh_host):
        return
    if not settings.fh_allow_insecure_bind:
        raise RuntimeError(
            f"FH_HOST={settings.fh_host!r} is reachable from other machines and the "
            "projection tools accept personal health profiles without authentication. "
            "Bind to 127.0.0.1, or set FH_ALLOW_INSECURE_BIND=true behind your own auth proxy."
        )
    logger.warning("Serving health profiles on non-loopback host %s without authentication", settings.fh_host)


def run() -> None:
    """Serve the projection tools over streamable HTTP."""
    settings = get_settings()
    logging.basicConfig(
        level=getattr(logging, settings.fh_log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    _check_bind(settings)

    mcp = create_app()
    logger.info(
        "See Your Future Health listening on http://%s:%d (llm_provider=%s)",
        settings.fh_host,
        settings.fh_port,
        settings.llm_provider,
    )
    mcp.run(transport="streamable-http", host=settings.fh_host, port=settings.fh_port)


if __name__ == "__main__":
    run()
