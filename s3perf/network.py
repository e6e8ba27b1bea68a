"""Connectivity checks run before any side effect of a benchmark run."""

import time
from typing import Optional

import httpx

from s3perf.commands import run_command
from s3perf.errors import NetworkUnreachable, TransportError
from s3perf.models import RunConfig
from s3perf.retry import RetryExhausted, retry_with_backoff

PROBE_TIMEOUT = 5.0
PROBE_ATTEMPTS = 3


def ping(host: str) -> None:
    """Send a single ping to ``host``.

    Raises:
        NetworkUnreachable: If the host does not answer.
    """
    try:
        run_command(["ping", "-q", "-c", "1", "-W", "1", host], step="ping")
    except TransportError as e:
        raise NetworkUnreachable(
            f"This computer has no working internet connection ({host} did "
            "not answer a ping). Please check your network settings."
        ) from e


def _head(url: str, timeout: float) -> int:
    response = httpx.head(url, timeout=timeout, follow_redirects=True)
    # Any answer below 500 proves the endpoint is reachable; storage
    # endpoints typically answer anonymous requests with 403.
    if response.status_code >= 500:
        response.raise_for_status()
    return response.status_code


def probe_endpoint(
    url: str,
    timeout: float = PROBE_TIMEOUT,
    max_attempts: int = PROBE_ATTEMPTS,
    sleep=time.sleep,
) -> int:
    """Check that an HTTP endpoint answers, retrying transient failures.

    Returns:
        The HTTP status code of the answer.

    Raises:
        NetworkUnreachable: If the endpoint cannot be reached.
    """
    try:
        return retry_with_backoff(
            _head,
            max_attempts=max_attempts,
            args=(url, timeout),
            sleep=sleep,
        )
    except RetryExhausted as e:
        raise NetworkUnreachable(
            f"The endpoint {url} is not reachable after {e.attempts} attempts: "
            f"{e.last_error}"
        ) from e
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        raise NetworkUnreachable(f"The endpoint {url} is not reachable: {e}") from e


def check_connectivity(config: RunConfig, sleep=time.sleep) -> Optional[int]:
    """Run the configured connectivity checks.

    Pings ``config.ping_host`` unless it is empty, then probes
    ``config.probe_url`` when one is configured.

    Returns:
        The probe's HTTP status code, or None when no probe URL is set.
    """
    if config.ping_host:
        ping(config.ping_host)

    if config.probe_url:
        return probe_endpoint(config.probe_url, sleep=sleep)
    return None
