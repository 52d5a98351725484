"""Short timing probe for patterns flagged as backtracking-prone.

``re`` offers no way to interrupt a running match, so the test runs in a
single-worker process pool that is torn down when it exceeds its timeout.
"""

import logging
import multiprocessing
import time
from typing import Optional

from glyphscope_ast import Flags, compile_pattern, pattern_matches

from .models import ProbeSettings

logger = logging.getLogger(__name__)

# Long run of a repeated character ending in a non-matching one
ADVERSARIAL_INPUT = "a" * 28 + "X"


def _timed_test(pattern: str, flag_string: str, text: str) -> float:
    """Worker: compile and run one test, returning elapsed milliseconds."""
    flags = Flags.from_string(flag_string)
    compiled = compile_pattern(pattern, flags.without_global())
    started = time.perf_counter()
    pattern_matches(compiled, text, sticky=flags.sticky)
    return (time.perf_counter() - started) * 1000.0


def run_timing_probe(pattern: str, flags: Flags, settings: Optional[ProbeSettings] = None) -> Optional[str]:
    """Time a single non-matching test; return a note when it looks slow.

    Returns None when the probe is disabled, fast, or fails for any reason.
    """
    settings = settings or ProbeSettings()
    if not settings.enabled:
        return None

    pool = None
    try:
        pool = multiprocessing.Pool(processes=1)
        pending = pool.apply_async(_timed_test, (pattern, flags.to_string(), ADVERSARIAL_INPUT))
        elapsed = pending.get(timeout=settings.timeout_ms / 1000.0)
    except multiprocessing.TimeoutError:
        logger.debug("Timing probe exceeded %dms for %r", settings.timeout_ms, pattern)
        return f"Slow probe: more than {settings.timeout_ms}ms on a short non-match test."
    except Exception as e:
        logger.debug("Timing probe failed for %r: %s", pattern, e)
        return None
    finally:
        if pool is not None:
            pool.terminate()
            pool.join()

    logger.debug("Timing probe took %.2fms for %r", elapsed, pattern)
    return slow_note(elapsed, settings.threshold_ms)


def slow_note(elapsed_ms: float, threshold_ms: float) -> Optional[str]:
    """Note for a completed probe whose time strictly exceeds ``threshold_ms``."""
    if elapsed_ms > threshold_ms:
        return f"Slow probe: {round(elapsed_ms)}ms on a short non-match test."
    return None
