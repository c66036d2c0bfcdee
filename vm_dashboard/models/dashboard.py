from typing import List, Optional

from pydantic import BaseModel, Field


class HostButton(BaseModel):
    """A selectable host in the dashboard header."""

    address: str = Field(..., description="Host address, e.g. 10.0.0.27")
    label: str = Field(..., description="Button text, e.g. SRVWADDS02")
    active: bool = Field(..., description="True for the currently selected host")


class HostSelection(BaseModel):
    """Request body for switching the monitored host."""

    address: str = Field(..., description="Address of the host to monitor, e.g. 10.0.0.48")


class MetricCard(BaseModel):
    """One metric tile: label, icon, formatted value and optional gauge."""

    label: str = Field(..., description="Metric name shown on the card")
    icon: str = Field(..., description="Material icon name")
    color: str = Field(..., description="Accent colour as hex string")
    value: Optional[str] = Field(
        None,
        description="Formatted value including unit, None if no data is available",
    )
    placeholder: Optional[str] = Field(
        None,
        description="Text shown instead of the value when no data is available",
    )
    gauge: Optional[float] = Field(
        None,
        ge=0.0,
        le=1.0,
        description="Gauge fill between 0 and 1; None for textual metrics",
    )


class DashboardView(BaseModel):
    """Everything a renderer needs to draw the dashboard screen."""

    title: str
    hosts: List[HostButton]
    offline_banner: Optional[str] = Field(
        None,
        description="Banner text, only set while the selected host is offline",
    )
    cards: List[MetricCard]
