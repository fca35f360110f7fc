"""Run the notification engine as a long-lived host process."""

import signal
import threading

from dotenv import load_dotenv

from notifier.configuration import get_settings
from notifier.logging import configure_logging, get_module_logger
from notifier.notifications.factory import build_engine

logger = get_module_logger()


def main() -> None:
    """Start the engine and block until SIGINT or SIGTERM."""
    load_dotenv()
    settings = get_settings()
    configure_logging(log_level=settings.LOG_LEVEL, is_production=settings.is_production)

    logger.info(
        "application_startup",
        environment=settings.ENVIRONMENT,
        api_url=settings.backend.API_URL,
        store_backend=settings.store.backend,
    )

    engine = build_engine(settings)
    engine.initialize()

    stop = threading.Event()

    def _shutdown(signum, _frame):
        logger.info("shutdown_signal_received", signal=signal.Signals(signum).name)
        stop.set()

    signal.signal(signal.SIGINT, _shutdown)
    signal.signal(signal.SIGTERM, _shutdown)

    try:
        stop.wait()
    finally:
        engine.teardown()
        logger.info("application_shutdown")


if __name__ == "__main__":
    main()
