"""Logging setup for the REPL entry point.

The library modules only create loggers (logging.getLogger(__name__)); they
never configure handlers. setup_logging is called once by cellisp.repl.main.
"""

import logging

HANDLER_NAME = "cellisp"


def setup_logging(level: str = "WARNING") -> None:
    """Configure root logging with a single human-readable stream handler.

    Calling it again only changes the level; the handler is installed once.
    """
    if not any(h.get_name() == HANDLER_NAME for h in logging.root.handlers):
        handler = logging.StreamHandler()
        handler.set_name(HANDLER_NAME)
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s: %(message)s",
        ))
        logging.root.addHandler(handler)
    logging.root.setLevel(getattr(logging, level.upper(), logging.WARNING))
