from fastapi import APIRouter

from vm_dashboard.models.dashboard import DashboardView
from vm_dashboard.models.metrics import ViewState
from vm_dashboard.services import metrics_poller, presenter

router = APIRouter()


@router.get("/state", response_model=ViewState, summary="Current view state")
async def view_state() -> ViewState:
    """Return the ViewState written by the most recent poll cycle."""
    return metrics_poller.get_poller().state


@router.get("/dashboard", response_model=DashboardView, summary="Dashboard view model")
async def dashboard() -> DashboardView:
    """
    Return the rendered dashboard: host buttons, offline banner and one card
    per metric with formatted value and gauge.
    """
    poller = metrics_poller.get_poller()
    return presenter.build_dashboard(
        poller.state,
        poller.hosts,
        poller.selected_host.address,
    )
