import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from serverhealth.config import get_settings
from serverhealth.services import speedtest_monitor

from .api import dashboard, health

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    """Run the internet speed test in the background for the app's lifetime."""
    settings = get_settings()
    refresher = None
    if settings.speedtest_enabled:
        refresher = speedtest_monitor.BandwidthRefresher(
            speedtest_monitor.bandwidth_cache,
            interval_seconds=settings.speedtest_interval_seconds,
            download_url=settings.speedtest_url,
        )
        refresher.start()
        logger.info(
            "Speed test refresher started (every %ss)",
            settings.speedtest_interval_seconds,
        )
    yield
    if refresher is not None:
        refresher.stop()


app = FastAPI(title="Server Health Dashboard", lifespan=lifespan)

# Dashboard may be served from any origin during development
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(dashboard.router, tags=["dashboard"])
app.include_router(health.router, prefix="/api/health", tags=["health"])


def _log_level() -> int:
    """LOG_LEVEL as a logging level; unknown names fall back to INFO."""
    level = logging.getLevelName(os.getenv("LOG_LEVEL", "INFO").strip().upper())
    if isinstance(level, int):
        return level
    return logging.INFO


def run() -> None:
    import uvicorn

    logging.basicConfig(
        level=_log_level(),
        format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
    )
    settings = get_settings()
    logger.info("Server Health Dashboard listening on http://0.0.0.0:%s", settings.port)
    uvicorn.run(app, host="0.0.0.0", port=settings.port)


if __name__ == "__main__":
    run()
