import logging
import os

from serverhealth.config import get_settings

logger = logging.getLogger(__name__)


def read_text(path: str) -> str:
    """
    Return the whole content of a pseudo-file, or an empty string.

    Kernel files come and go (hot-plugged devices, containers without a
    mounted /sys, ...), so a missing or unreadable file is not an error for
    the callers: they treat empty content as "no data".
    """
    try:
        with open(path, "r", encoding="utf-8") as handle:
            return handle.read()
    except (OSError, UnicodeDecodeError) as exc:
        logger.debug("Could not read %s: %s", path, exc)
        return ""


def proc_file(*parts: str) -> str:
    """Path below the configured proc root, e.g. proc_file("net", "dev")."""
    return os.path.join(get_settings().proc_path, *parts)


def sys_file(*parts: str) -> str:
    """Path below the configured sysfs root."""
    return os.path.join(get_settings().sys_path, *parts)


def to_int(token: str) -> int:
    try:
        return int(token)
    except ValueError:
        return 0
