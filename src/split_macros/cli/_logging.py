import logging
import sys

_THIRD_PARTY_LOGGERS = ("redis", "urllib3")

# Rebuilds can run on worker threads; the thread name ties waiter and leader lines together.
_FORMAT = "%(asctime)s %(levelname)-8s [%(threadName)s] %(name)s: %(message)s"


def configure_logging(*, verbose: bool = False) -> None:
    """Route split-macros logging to stderr, quieting client libraries unless verbose."""
    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(logging.DEBUG if verbose else logging.INFO)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(_FORMAT, datefmt="%H:%M:%S"))
    root.addHandler(handler)

    for name in _THIRD_PARTY_LOGGERS:
        logging.getLogger(name).setLevel(logging.NOTSET if verbose else logging.WARNING)
