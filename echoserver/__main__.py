"""Process entry point: `python -m echoserver` or the `echo-server` script."""
from __future__ import annotations

import asyncio

from .errors import FatalShutdownError
from .logging_conf import get_logger, setup_logging
from .main import create_app
from .service.lifecycle import ShutdownCoordinator
from .service.listener import UvicornListener
from .settings import HOST, PORT, get_settings

logger = get_logger("echoserver")


def main() -> None:
    setup_logging()
    try:
        settings = get_settings()
    except ValueError as e:
        logger.critical("fatal", extra={"event": "fatal", "call": "settings", "error": str(e)})
        raise SystemExit(1) from None
    listener = UvicornListener(
        create_app(),
        host=HOST,
        port=PORT,
        grace_s=settings.shutdown_grace_s,
    )
    logger.info(
        "start http listening",
        extra={"event": "listening", "addr": f"{HOST}:{PORT}", "grace_s": settings.shutdown_grace_s},
    )
    try:
        asyncio.run(ShutdownCoordinator(listener).run())
    except FatalShutdownError as e:
        logger.critical("fatal", extra={"event": "fatal", "call": e.call, "error_code": e.code})
        raise SystemExit(1) from None


if __name__ == "__main__":
    main()
