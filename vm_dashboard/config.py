from typing import List
from pydantic import BaseModel, Field
import os
from functools import lru_cache

from vm_dashboard.models.metrics import HostTarget

DEFAULT_PROMETHEUS_URL = "http://10.0.0.25:9090/api/v1/query"

DEFAULT_HOSTS = [
    HostTarget(address="10.0.0.27", label="SRVWADDS02"),
    HostTarget(address="10.0.0.48", label="SRVWADDS03"),
    HostTarget(address="10.0.0.55", label="SRVWADDS01"),
]


def _parse_hosts(raw: str) -> List[HostTarget]:
    """
    Parse DASHBOARD_HOSTS, e.g. "10.0.0.27=SRVWADDS02, 10.0.0.48=SRVWADDS03".

    An entry without "=label" uses the address as its label.
    """
    hosts: List[HostTarget] = []
    for item in raw.split(","):
        item = item.strip()
        if not item:
            continue
        address, _, label = item.partition("=")
        address = address.strip()
        hosts.append(HostTarget(address=address, label=label.strip() or address))
    return hosts


class Settings(BaseModel):
    # Prometheus query API
    prometheus_url: str = Field(
        default=DEFAULT_PROMETHEUS_URL,
        description="Instant query endpoint, e.g. http://prometheus:9090/api/v1/query",
    )
    request_timeout_seconds: float = Field(
        default=10.0,
        gt=0,
        description="Timeout for a single query request",
    )

    # Polling
    poll_interval_seconds: float = Field(
        default=5.0,
        gt=0,
        description="Seconds between two poll cycles",
    )

    # Monitored hosts (windows_exporter)
    exporter_port: int = Field(
        default=9182,
        ge=1,
        le=65535,
        description="Port of the windows_exporter instance on every host",
    )
    hosts: List[HostTarget] = Field(
        default_factory=lambda: list(DEFAULT_HOSTS),
        min_length=1,
        description="Selectable hosts; the first one is selected at startup",
    )

    log_level: str = Field(
        default="INFO",
        description="Log level for the dashboard loggers",
    )

    @classmethod
    def from_env(cls) -> "Settings":
        hosts = _parse_hosts(os.getenv("DASHBOARD_HOSTS", "")) or list(DEFAULT_HOSTS)

        return cls(
            prometheus_url=os.getenv("PROMETHEUS_URL", DEFAULT_PROMETHEUS_URL),
            request_timeout_seconds=float(os.getenv("REQUEST_TIMEOUT_SECONDS", "10.0")),
            poll_interval_seconds=float(os.getenv("POLL_INTERVAL_SECONDS", "5.0")),
            exporter_port=int(os.getenv("EXPORTER_PORT", "9182")),
            hosts=hosts,
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings.from_env()
