import time

import httpx
from fastapi.testclient import TestClient

from vm_dashboard.config import Settings, get_settings
from vm_dashboard.main import app
from vm_dashboard.models.metrics import HostTarget, ViewState
from vm_dashboard.services import metrics_poller
from vm_dashboard.services.metrics_poller import MetricsPoller

client = TestClient(app)

HOSTS = [
    HostTarget(address="10.0.0.27", label="SRVWADDS02"),
    HostTarget(address="10.0.0.48", label="SRVWADDS03"),
    HostTarget(address="10.0.0.55", label="SRVWADDS01"),
]


class DummyPoller:
    hosts = HOSTS
    selected_host = HOSTS[0]

    def __init__(self, state: ViewState):
        self.state = state
        self.selected = []

    async def select_host(self, address: str) -> HostTarget:
        for host in HOSTS:
            if host.address == address:
                self.selected.append(address)
                return host
        raise metrics_poller.UnknownHostError(f"unknown host {address!r}")


def test_health_endpoint():
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_state_endpoint_returns_current_view_state(monkeypatch):
    state = ViewState(
        host="10.0.0.27",
        online=True,
        cpu=23.5,
        ram=None,
        storage=None,
        network=0.0001,
        dns="inactive",
    )
    monkeypatch.setattr(metrics_poller, "get_poller", lambda: DummyPoller(state))

    response = client.get("/metrics/state")
    assert response.status_code == 200
    assert response.json() == {
        "host": "10.0.0.27",
        "online": True,
        "cpu": 23.5,
        "ram": None,
        "storage": None,
        "network": 0.0001,
        "dns": "inactive",
    }


def test_dashboard_endpoint_structure(monkeypatch):
    state = ViewState(
        host="10.0.0.27",
        online=True,
        cpu=23.5,
        ram=61.25,
        storage=None,
        network=1.5,
        dns="active",
    )
    monkeypatch.setattr(metrics_poller, "get_poller", lambda: DummyPoller(state))

    response = client.get("/metrics/dashboard")
    assert response.status_code == 200

    data = response.json()
    assert data["title"] == "System Monitoring"
    assert data["offline_banner"] is None
    assert [h["active"] for h in data["hosts"]] == [True, False, False]

    cards = {card["label"]: card for card in data["cards"]}
    assert list(cards) == ["CPU", "RAM", "Storage", "Network", "DNS"]
    assert cards["CPU"]["value"] == "23.50 %"
    assert cards["Storage"]["value"] is None
    assert cards["Storage"]["placeholder"] == "No data available"
    assert cards["Network"]["value"] == "1.5000 MiB/s"
    assert cards["DNS"]["value"] == "active"
    assert cards["DNS"]["gauge"] is None


def test_dashboard_endpoint_offline_banner(monkeypatch):
    monkeypatch.setattr(
        metrics_poller,
        "get_poller",
        lambda: DummyPoller(ViewState.offline("10.0.0.27")),
    )

    data = client.get("/metrics/dashboard").json()

    assert data["offline_banner"] == "The VM is offline"
    assert all(card["value"] is None for card in data["cards"])


def test_list_hosts_marks_selected(monkeypatch):
    monkeypatch.setattr(
        metrics_poller,
        "get_poller",
        lambda: DummyPoller(ViewState.initial("10.0.0.27")),
    )

    response = client.get("/hosts")
    assert response.status_code == 200
    assert response.json() == [
        {"address": "10.0.0.27", "label": "SRVWADDS02", "active": True},
        {"address": "10.0.0.48", "label": "SRVWADDS03", "active": False},
        {"address": "10.0.0.55", "label": "SRVWADDS01", "active": False},
    ]


def test_select_host_endpoint(monkeypatch):
    poller = DummyPoller(ViewState.initial("10.0.0.27"))
    monkeypatch.setattr(metrics_poller, "get_poller", lambda: poller)

    response = client.put("/hosts/selected", json={"address": "10.0.0.55"})

    assert response.status_code == 200
    assert response.json() == {"address": "10.0.0.55", "label": "SRVWADDS01", "active": True}
    assert poller.selected == ["10.0.0.55"]


def test_select_unknown_host_maps_to_404(monkeypatch):
    """
    Eine unbekannte Adresse soll einen HTTP 404 liefern und die Fehlermeldung
    im JSON-Body (detail) transportieren.
    """
    monkeypatch.setattr(
        metrics_poller,
        "get_poller",
        lambda: DummyPoller(ViewState.initial("10.0.0.27")),
    )

    response = client.put("/hosts/selected", json={"address": "192.168.1.1"})

    assert response.status_code == 404
    assert "unknown host" in response.json()["detail"]


def test_select_host_switches_real_poller(monkeypatch):
    poller = MetricsPoller(Settings(hosts=HOSTS))
    monkeypatch.setattr(metrics_poller, "get_poller", lambda: poller)

    response = client.put("/hosts/selected", json={"address": "10.0.0.48"})
    assert response.status_code == 200

    hosts = client.get("/hosts").json()
    assert [h["address"] for h in hosts if h["active"]] == ["10.0.0.48"]
    assert client.get("/metrics/state").json()["host"] == "10.0.0.48"


def test_lifespan_starts_and_stops_poller(monkeypatch):
    def handler(request: httpx.Request) -> httpx.Response:
        payload = {"data": {"result": [{"value": [169000, "1"]}]}}
        return httpx.Response(200, json=payload)

    http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    poller = MetricsPoller(
        Settings(prometheus_url="http://prometheus.test/api/v1/query", poll_interval_seconds=0.05),
        client=http_client,
    )
    monkeypatch.setattr(metrics_poller, "get_poller", lambda: poller)

    log_levels = []
    monkeypatch.setattr("vm_dashboard.main.setup_logging", log_levels.append)

    with TestClient(app) as lifespan_client:
        assert poller.running is True
        # Logging is configured on startup, also when uvicorn loads the app directly
        assert log_levels == [get_settings().log_level]

        deadline = time.monotonic() + 2.0
        state = lifespan_client.get("/metrics/state").json()
        while state["cpu"] is None and time.monotonic() < deadline:
            time.sleep(0.02)
            state = lifespan_client.get("/metrics/state").json()

        assert state["online"] is True
        assert state["cpu"] == 1.0
        assert state["dns"] == "active"

    assert poller.running is False
