"""Diagnostic logging for devsetup.

Progress output for the user goes through core.console. This log is for
troubleshooting: quiet by default, everything with --verbose.
"""

import logging


def setup_logging(verbose: bool = False) -> logging.Logger:
    formatter = logging.Formatter(
        "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )

    handler = logging.StreamHandler()
    handler.setFormatter(formatter)

    root = logging.getLogger("devsetup")
    root.setLevel(logging.DEBUG if verbose else logging.WARNING)
    root.handlers.clear()
    root.addHandler(handler)
    root.propagate = False

    return root
