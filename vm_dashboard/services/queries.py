"""PromQL expressions for the windows_exporter metrics shown on the dashboard."""
from typing import Dict

METRIC_NAMES = ("cpu", "ram", "storage", "network", "dns")

_LIVENESS_TEMPLATE = 'up{{instance="{instance}"}}'

_METRIC_TEMPLATES: Dict[str, str] = {
    "cpu": (
        '100 - (avg by(instance) (rate(windows_cpu_time_total{{mode="idle", '
        'instance="{instance}"}}[5m]))) * 100'
    ),
    "ram": (
        '100 * (1 - (windows_memory_available_bytes{{instance="{instance}"}} '
        '/ windows_cs_physical_memory_bytes{{instance="{instance}"}}))'
    ),
    "storage": (
        '100 * (1 - (windows_logical_disk_free_bytes{{instance="{instance}", volume="C:"}} '
        '/ windows_logical_disk_size_bytes{{instance="{instance}", volume="C:"}}))'
    ),
    "network": (
        'rate(windows_net_bytes_received_total{{instance="{instance}"}}[5m]) '
        '+ rate(windows_net_bytes_sent_total{{instance="{instance}"}}[5m])'
    ),
    "dns": 'windows_service_state{{instance="{instance}", name="DNS", state="running"}}',
}


def instance_label(host: str, port: int = 9182) -> str:
    return f"{host}:{port}"


def liveness_query(host: str, port: int = 9182) -> str:
    return _LIVENESS_TEMPLATE.format(instance=instance_label(host, port))


def metric_queries(host: str, port: int = 9182) -> Dict[str, str]:
    """
    Build the five metric expressions for a host.

    The keys follow METRIC_NAMES so callers can rely on a stable order.
    """
    instance = instance_label(host, port)
    return {name: _METRIC_TEMPLATES[name].format(instance=instance) for name in METRIC_NAMES}
