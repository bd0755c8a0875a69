import logging
import shutil
import subprocess
import threading
import time
from typing import Callable, Optional, Tuple

import httpx

from serverhealth.models.health import BandwidthResult
from serverhealth.timestamps import utc_timestamp

logger = logging.getLogger(__name__)

SPEEDTEST_CLI = "speedtest-cli"

# 5 MB payload served by Cloudflare's public speed test
DEFAULT_DOWNLOAD_URL = "https://speed.cloudflare.com/__down?bytes=5000000"
DOWNLOAD_TIMEOUT_SECONDS = 20.0

DEFAULT_REFRESH_INTERVAL_SECONDS = 3600


def _leading_float(text: str) -> float:
    tokens = text.split()
    if not tokens:
        return 0.0
    try:
        return float(tokens[0])
    except ValueError:
        return 0.0


def parse_speedtest_simple(text: str) -> Tuple[float, float]:
    """
    Parse `speedtest-cli --simple` output into (download, upload) Mbit/s.

      Ping: 12.3 ms
      Download: 93.40 Mbit/s
      Upload: 38.12 Mbit/s
    """
    download = upload = 0.0
    for line in text.splitlines():
        line = line.strip()
        if line.startswith("Download:"):
            download = _leading_float(line[len("Download:"):])
        elif line.startswith("Upload:"):
            upload = _leading_float(line[len("Upload:"):])
    return download, upload


def _run_speedtest_cli() -> Optional[Tuple[float, float]]:
    """Run speedtest-cli if it is installed; None if it is missing or fails."""
    if shutil.which(SPEEDTEST_CLI) is None:
        return None

    try:
        result = subprocess.run(
            [SPEEDTEST_CLI, "--simple"],
            check=False,
            capture_output=True,
            text=True,
            errors="replace",
        )
    except OSError as exc:
        logger.warning("Could not start %s: %s", SPEEDTEST_CLI, exc)
        return None

    if result.returncode != 0:
        logger.warning(
            "%s failed with return code %s", SPEEDTEST_CLI, result.returncode
        )
        return None

    return parse_speedtest_simple(result.stdout)


def _download_probe(
    url: str = DEFAULT_DOWNLOAD_URL,
    timeout: float = DOWNLOAD_TIMEOUT_SECONDS,
    clock: Callable[[], float] = time.monotonic,
) -> Optional[float]:
    """
    Download a fixed-size payload and return the observed rate in Mbit/s.

    ``timeout`` bounds the whole transfer, not just each read: once it is
    exceeded the download is cut short and the rate is computed from the
    bytes received so far. Returns None on any HTTP/network error.
    """
    received = 0
    try:
        with httpx.Client(timeout=timeout, follow_redirects=True) as client:
            started = clock()
            with client.stream("GET", url) as response:
                response.raise_for_status()
                for chunk in response.iter_bytes():
                    received += len(chunk)
                    if clock() - started >= timeout:
                        logger.info("Download speed test hit the %ss deadline", timeout)
                        break
            elapsed = clock() - started
    except httpx.HTTPError as exc:
        logger.warning("Download speed test against %s failed: %s", url, exc)
        return None

    if elapsed <= 0 or received == 0:
        return None
    return received * 8 / elapsed / 1e6


def run_bandwidth_probe(download_url: Optional[str] = None) -> Optional[BandwidthResult]:
    """
    Measure internet throughput.

    speedtest-cli is preferred; without it (or if it reports nothing) a timed
    download gives at least the download rate. Returns None when neither
    produced a positive value.
    """
    download = upload = 0.0

    measured = _run_speedtest_cli()
    if measured is not None:
        download, upload = measured

    if download <= 0 and upload <= 0:
        fallback = _download_probe(download_url or DEFAULT_DOWNLOAD_URL)
        if fallback is not None:
            download, upload = fallback, 0.0

    if download <= 0 and upload <= 0:
        return None

    return BandwidthResult(
        available=True,
        download_mbps=download,
        upload_mbps=upload,
        last_checked=utc_timestamp(),
    )


class BandwidthCache:
    """
    Single slot holding the latest BandwidthResult.

    The lock only guards the swap/copy of the slot, never a probe, so
    readers wait at most for one assignment.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._result = BandwidthResult()

    def get(self) -> BandwidthResult:
        with self._lock:
            return self._result.model_copy()

    def update(self, result: BandwidthResult) -> None:
        with self._lock:
            self._result = result


def refresh_bandwidth_cache(
    cache: BandwidthCache,
    download_url: Optional[str] = None,
) -> bool:
    """Probe once and store the result. Failed probes leave the cache alone."""
    result = run_bandwidth_probe(download_url)
    if result is None:
        logger.info("Speed test produced no result; keeping previous value")
        return False

    cache.update(result)
    logger.info(
        "Speed test: %.2f Mbit/s down, %.2f Mbit/s up",
        result.download_mbps,
        result.upload_mbps,
    )
    return True


class BandwidthRefresher(threading.Thread):
    """
    Background thread: probe immediately, then once per interval, forever.

    stop() is only needed for a clean shutdown (tests, lifespan exit).
    """

    def __init__(
        self,
        cache: BandwidthCache,
        interval_seconds: float = DEFAULT_REFRESH_INTERVAL_SECONDS,
        download_url: Optional[str] = None,
    ) -> None:
        super().__init__(name="bandwidth-refresher", daemon=True)
        self.cache = cache
        self.interval_seconds = interval_seconds
        self.download_url = download_url
        self._stop_event = threading.Event()

    def run(self) -> None:
        while not self._stop_event.is_set():
            try:
                refresh_bandwidth_cache(self.cache, self.download_url)
            except Exception:
                logger.exception("Unexpected error during speed test")
            self._stop_event.wait(self.interval_seconds)

    def stop(self) -> None:
        self._stop_event.set()


bandwidth_cache = BandwidthCache()
