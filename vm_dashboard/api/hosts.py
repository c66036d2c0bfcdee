from typing import List

from fastapi import APIRouter, HTTPException

from vm_dashboard.models.dashboard import HostButton, HostSelection
from vm_dashboard.services import metrics_poller, presenter

router = APIRouter()


@router.get("", response_model=List[HostButton], summary="Selectable hosts")
async def list_hosts() -> List[HostButton]:
    """Return all configured hosts; the monitored one is marked active."""
    poller = metrics_poller.get_poller()
    return presenter.host_buttons(poller.hosts, poller.selected_host.address)


@router.put("/selected", response_model=HostButton, summary="Select monitored host")
async def select_host(selection: HostSelection) -> HostButton:
    """
    Switch the dashboard to another host.

    The poll timer for the previous host is cancelled and a fresh cycle for
    the new host starts immediately. Unknown addresses give HTTP 404.
    """
    poller = metrics_poller.get_poller()
    try:
        host = await poller.select_host(selection.address)
    except metrics_poller.UnknownHostError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return HostButton(address=host.address, label=host.label, active=True)
