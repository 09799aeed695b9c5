"""Bounded polling for a dependent service to become ready."""

import logging
import subprocess
import sys
import time
from pathlib import Path
from typing import Callable

from core.console import colorize
from core.process import resolve_executable

log = logging.getLogger("devsetup.readiness")

Probe = Callable[[], bool]

DEFAULT_RETRIES = 30
DEFAULT_INTERVAL = 1.0


def command_probe(args: list[str], cwd: Path) -> Probe:
    """Build a probe that is ready when the command exits 0.

    Output is captured, not shown. A command that cannot run at all counts
    as not ready.
    """

    def probe() -> bool:
        try:
            result = subprocess.run(
                [resolve_executable(args[0]), *args[1:]],
                cwd=cwd,
                capture_output=True,
            )
        except (OSError, subprocess.SubprocessError) as e:
            log.debug("Readiness probe failed to run: %s", e)
            return False
        return result.returncode == 0

    return probe


def wait_ready(
    probe: Probe,
    max_retries: int = DEFAULT_RETRIES,
    interval: float = DEFAULT_INTERVAL,
    sleep: Callable[[float], None] = time.sleep,
) -> bool:
    """Call probe up to max_retries times, interval seconds apart.

    Returns True on the first successful attempt, False once the budget is
    spent. Never raises for a failing probe.
    """
    for attempt in range(1, max_retries + 1):
        try:
            ready = probe()
        except Exception as e:  # probe errors count as "not ready"
            log.debug("Readiness probe raised: %s", e)
            ready = False

        if ready:
            log.debug("Ready after %d attempt(s)", attempt)
            return True

        sys.stdout.write(f"  {colorize('⏳', 'yellow')} Waiting... ({attempt}/{max_retries})\r")
        sys.stdout.flush()
        if attempt < max_retries:
            sleep(interval)

    print()
    return False
