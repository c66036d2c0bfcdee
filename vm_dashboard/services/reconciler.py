import math
from typing import Mapping, Optional

from vm_dashboard.models.metrics import DnsStatus, ViewState

BYTES_PER_MEBIBYTE = 1048576

# Shown instead of "no data" so the network gauge stays visible.
NETWORK_PLACEHOLDER = 0.0001


def is_online(liveness: Optional[float]) -> bool:
    """A host is online only if its up series exists and equals exactly 1."""
    return liveness is not None and liveness == 1.0


def network_mib_per_second(raw: Optional[float]) -> float:
    # Missing, zero and non-finite throughput all fall back to the placeholder.
    if raw is None or raw == 0 or not math.isfinite(raw):
        return NETWORK_PLACEHOLDER
    return raw / BYTES_PER_MEBIBYTE


def dns_status(raw: Optional[float]) -> DnsStatus:
    return "active" if raw == 1.0 else "inactive"


def reconcile(
    host: str,
    liveness: Optional[float],
    samples: Optional[Mapping[str, Optional[float]]] = None,
) -> ViewState:
    """
    Reduce the raw samples of one poll cycle into a ViewState.

    This is a pure function: the same inputs always produce an equal
    ViewState. ``samples`` maps the metric names of
    ``vm_dashboard.services.queries.METRIC_NAMES`` to the first value of each
    query result (None for an empty result). It is ignored when the host is
    offline.
    """
    if not is_online(liveness):
        return ViewState.offline(host)

    samples = samples or {}
    return ViewState(
        host=host,
        online=True,
        cpu=samples.get("cpu"),
        ram=samples.get("ram"),
        storage=samples.get("storage"),
        network=network_mib_per_second(samples.get("network")),
        dns=dns_status(samples.get("dns")),
    )
