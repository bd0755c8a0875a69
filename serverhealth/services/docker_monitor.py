import logging
import subprocess
from typing import List

from serverhealth.models.health import ContainerHealth, ContainerStatus

logger = logging.getLogger(__name__)

# Tab-separated output keeps us clear of parsing docker's JSON
DOCKER_PS_FORMAT = "{{.ID}}\t{{.Image}}\t{{.Names}}\t{{.Status}}\t{{.State}}"

_HEALTH_TOKENS = {
    "healthy": ContainerHealth.HEALTHY,
    "unhealthy": ContainerHealth.UNHEALTHY,
}


def extract_health(status: str) -> ContainerHealth:
    """
    Derive the health state from the free-text docker status.

      "Up 2 hours (healthy)"            -> healthy
      "Up 3 minutes (unhealthy)"        -> unhealthy
      "Up 5 minutes (health: starting)" -> starting
      "Up 2 hours"                      -> none (no health check)
      "Exited (0) 3 seconds ago"        -> none
    """
    left = status.find("(")
    if left == -1:
        return ContainerHealth.NONE

    right = status.find(")", left)
    inner = status[left + 1:] if right == -1 else status[left + 1:right]

    if inner in _HEALTH_TOKENS:
        return _HEALTH_TOKENS[inner]
    if inner.startswith("health:"):
        return ContainerHealth.STARTING
    return ContainerHealth.NONE


def parse_docker_ps(stdout: str) -> List[ContainerStatus]:
    """Turn `docker ps --format DOCKER_PS_FORMAT` output into records."""
    containers: List[ContainerStatus] = []
    for line in stdout.splitlines():
        fields = line.rstrip("\r").split("\t")
        # missing trailing columns are treated as empty
        fields += [""] * (5 - len(fields))
        container_id, image, names, status, state = fields[:5]
        if not container_id:
            continue
        containers.append(
            ContainerStatus(
                id=container_id,
                image=image,
                names=names,
                status=status,
                state=state,
                health=extract_health(status),
            )
        )
    return containers


def get_containers() -> List[ContainerStatus]:
    """
    List running containers via the docker CLI.

    A missing docker binary or a failing daemon yields an empty list; the
    rest of the snapshot must not depend on docker being present.
    """
    try:
        result = subprocess.run(
            ["docker", "ps", "--format", DOCKER_PS_FORMAT],
            check=False,  # Rückgabecode wird selbst ausgewertet
            capture_output=True,
            text=True,
            errors="replace",
        )
    except OSError as exc:
        logger.debug("docker binary not available: %s", exc)
        return []

    if result.returncode != 0:
        logger.warning(
            "docker ps failed with return code %s: %s",
            result.returncode,
            result.stderr.strip(),
        )
        return []

    return parse_docker_ps(result.stdout)
