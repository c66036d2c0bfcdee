import math
from typing import List, NamedTuple, Optional, Union

from vm_dashboard.models.dashboard import DashboardView, HostButton, MetricCard
from vm_dashboard.models.metrics import HostTarget, ViewState

TITLE = "System Monitoring"
OFFLINE_BANNER = "The VM is offline"
NO_DATA = "No data available"


class CardLayout(NamedTuple):
    field: str
    label: str
    icon: str
    color: str
    unit: str = "%"
    decimals: int = 2
    gauge: bool = True


CARD_LAYOUTS = (
    CardLayout("cpu", "CPU", "memory", "#ff3e3e"),
    CardLayout("ram", "RAM", "storage", "#3e85ff"),
    CardLayout("storage", "Storage", "sd-storage", "#ff9800"),
    CardLayout("network", "Network", "wifi", "#00e5ff", unit="MiB/s", decimals=4),
    CardLayout("dns", "DNS", "dns", "#4caf50", unit="", decimals=0, gauge=False),
)


def format_value(value: Union[float, str], unit: str, decimals: int) -> str:
    text = f"{value:.{decimals}f}" if isinstance(value, float) else value
    return f"{text} {unit}".rstrip()


def gauge_fill(value: float) -> float:
    # Percentages map onto 0..1; anything above 100 fills the gauge.
    return max(0.0, min(value / 100, 1.0))


def build_card(layout: CardLayout, value: Optional[Union[float, str]]) -> MetricCard:
    if value is None:
        return MetricCard(label=layout.label, icon=layout.icon, color=layout.color, placeholder=NO_DATA)

    gauge: Optional[float] = None
    # NaN or Inf from Prometheus is still shown as text, just without a gauge.
    if layout.gauge and isinstance(value, float) and math.isfinite(value):
        gauge = gauge_fill(value)

    return MetricCard(
        label=layout.label,
        icon=layout.icon,
        color=layout.color,
        value=format_value(value, layout.unit, layout.decimals),
        gauge=gauge,
    )


def host_buttons(hosts: List[HostTarget], selected: str) -> List[HostButton]:
    return [
        HostButton(address=host.address, label=host.label, active=host.address == selected)
        for host in hosts
    ]


def build_dashboard(state: ViewState, hosts: List[HostTarget], selected: str) -> DashboardView:
    """
    Turn the current ViewState into the dashboard view model.

    The host buttons mark ``selected`` as active. Cards without a sample
    carry the "no data" placeholder instead of a value and a gauge.
    """
    return DashboardView(
        title=TITLE,
        hosts=host_buttons(hosts, selected),
        offline_banner=None if state.online else OFFLINE_BANNER,
        cards=[build_card(layout, getattr(state, layout.field)) for layout in CARD_LAYOUTS],
    )
