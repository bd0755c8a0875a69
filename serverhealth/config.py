from typing import Optional
from pydantic import BaseModel, Field
import os
from functools import lru_cache


def _int_from_env(
    name: str,
    default: int,
    minimum: Optional[int] = None,
    maximum: Optional[int] = None,
) -> int:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        return default
    if minimum is not None and value < minimum:
        return default
    if maximum is not None and value > maximum:
        return default
    return value


class Settings(BaseModel):
    # Pseudo-filesystem roots; overridable so a container can read the host's /proc and /sys
    proc_path: str = Field(
        default="/proc",
        description="Root of the proc pseudo-filesystem, e.g. /host/proc",
    )
    sys_path: str = Field(
        default="/sys",
        description="Root of the sysfs pseudo-filesystem, e.g. /host/sys",
    )

    # Dashboard + HTTP listener
    web_root: str = Field(
        default="/usr/share/serverhealth",
        description="Directory containing the dashboard index.html",
    )
    port: int = Field(
        default=9090,
        ge=1,
        le=65535,
        description="TCP port the HTTP server listens on",
    )

    # Internet speed test
    speedtest_enabled: bool = Field(
        default=True,
        description="Run the background internet speed test",
    )
    speedtest_interval_seconds: int = Field(
        default=3600,
        ge=1,
        description="Pause between two background speed tests",
    )
    speedtest_url: Optional[str] = Field(
        default=None,
        description="Override for the fallback download test endpoint",
    )

    @classmethod
    def from_env(cls) -> "Settings":
        raw_enabled = os.getenv("SPEEDTEST_ENABLED", "true").strip().lower()

        return cls(
            proc_path=os.getenv("PROC_PATH") or "/proc",
            sys_path=os.getenv("SYS_PATH") or "/sys",
            web_root=os.getenv("WEB_ROOT") or "/usr/share/serverhealth",
            port=_int_from_env("PORT", 9090, minimum=1, maximum=65535),
            speedtest_enabled=raw_enabled not in ("0", "false", "no", "off"),
            speedtest_interval_seconds=_int_from_env(
                "SPEEDTEST_INTERVAL_SECONDS", 3600, minimum=1
            ),
            speedtest_url=os.getenv("SPEEDTEST_URL") or None,
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings.from_env()
