import threading
from unittest.mock import MagicMock

import pytest
import requests

from dashboard.poller import POLL_INTERVAL, FetchError, MetricsPoller, fetch_snapshot
from dashboard.state import DashboardState


def test_fixed_interval():
    assert POLL_INTERVAL == 10
    poller = MetricsPoller(DashboardState(), fetch=lambda: {})
    assert poller.interval == 10


class TestFetchSnapshot:

    def test_ok(self):
        session = MagicMock()
        session.get.return_value.status_code = 200
        session.get.return_value.json.return_value = {"metrics": []}

        assert fetch_snapshot("http://api:8000/", session=session) == {"metrics": []}
        session.get.assert_called_once_with("http://api:8000/api/metrics", timeout=5)

    def test_non_2xx(self):
        session = MagicMock()
        session.get.return_value.status_code = 502

        with pytest.raises(FetchError, match="HTTP 502"):
            fetch_snapshot("http://api:8000", session=session)

    def test_transport_error(self):
        session = MagicMock()
        session.get.side_effect = requests.ConnectionError("connection refused")

        with pytest.raises(FetchError, match="connection refused"):
            fetch_snapshot("http://api:8000", session=session)

    def test_invalid_json(self):
        session = MagicMock()
        session.get.return_value.status_code = 200
        session.get.return_value.json.side_effect = ValueError("no json")

        with pytest.raises(FetchError):
            fetch_snapshot("http://api:8000", session=session)


class TestMetricsPoller:

    def test_poll_merges_snapshot(self, payload_factory):
        state = DashboardState()
        poller = MetricsPoller(state, fetch=lambda: payload_factory(cpu=5.0))

        assert poller.poll_once() is True
        assert poller.poll_once() is True

        assert state.metric("cpu")["history"] == [5.0] * 28
        assert state.health_badge == "Healthy"

    def test_failure_keeps_last_known_good(self, payload_factory):
        state = DashboardState()
        responses = [payload_factory(cpu=5.0), FetchError("HTTP 500")]

        def fetch():
            item = responses.pop(0)
            if isinstance(item, Exception):
                raise item
            return item

        poller = MetricsPoller(state, fetch=fetch)
        poller.poll_once()
        poller.poll_once()

        assert state.error == "HTTP 500"
        assert state.metric("cpu")["history"] == [5.0] * 28

    def test_no_mutation_after_stop(self, payload_factory):
        state = DashboardState()
        fetch = MagicMock(return_value=payload_factory())
        poller = MetricsPoller(state, fetch=fetch)

        poller.stop()

        assert poller.poll_once() is False
        assert state.metrics == []
        assert state.loading is True
        fetch.assert_not_called()

    def test_response_resolved_after_teardown_is_dropped(self, payload_factory):
        state = DashboardState()
        state.apply_snapshot(payload_factory(cpu=1.0))
        before = list(state.metric("cpu")["history"])
        updates = []
        poller = None

        def slow_fetch():
            # o dono do loop encerra enquanto a requisição está em voo
            poller.stop()
            return payload_factory(cpu=99.0)

        poller = MetricsPoller(state, fetch=slow_fetch, on_update=updates.append)

        assert poller.poll_once() is False
        assert state.metric("cpu")["history"] == before
        assert updates == []

    def test_error_resolved_after_teardown_is_dropped(self):
        state = DashboardState()
        poller = None

        def failing_fetch():
            poller.stop()
            raise FetchError("HTTP 500")

        poller = MetricsPoller(state, fetch=failing_fetch)

        assert poller.poll_once() is False
        assert state.error == ""

    def test_on_update_called(self, payload_factory):
        updates = []
        state = DashboardState()
        MetricsPoller(state, fetch=lambda: payload_factory(), on_update=updates.append).poll_once()
        assert updates == [state]

    def test_run_until_stopped(self, payload_factory):
        state = DashboardState()
        first_poll = threading.Event()

        def on_update(_):
            first_poll.set()

        poller = MetricsPoller(state, fetch=lambda: payload_factory(), interval=0.01, on_update=on_update)
        poller.start()
        assert first_poll.wait(2)
        poller.stop(timeout=2)

        assert not poller.alive
        assert not poller._thread.is_alive()
        assert state.metric("cpu") is not None

    def test_malformed_payload_keeps_loop_and_history(self, payload_factory):
        state = DashboardState()
        responses = [
            payload_factory(cpu=5.0),
            None,
            [],
            {"metrics": [{"label": "sem chave", "unit": "%", "value": 1.0}]},
            payload_factory(cpu=7.0),
        ]
        updates = []
        poller = MetricsPoller(state, fetch=lambda: responses.pop(0), on_update=updates.append)

        assert poller.poll_once() is True
        for _ in range(3):
            assert poller.poll_once() is True
            assert state.error.startswith("Snapshot inválido")
            assert state.health_badge == "Error"
            assert state.metric("cpu")["history"] == [5.0] * 28

        assert poller.poll_once() is True
        assert state.error == ""
        assert state.metric("cpu")["history"] == [5.0] * 27 + [7.0]
        assert len(updates) == 5

    def test_run_survives_null_payload(self, payload_factory):
        state = DashboardState()
        responses = [None, payload_factory(cpu=3.0)]
        recovered = threading.Event()

        def fetch():
            return responses.pop(0) if responses else payload_factory(cpu=3.0)

        def on_update(current):
            if current.metric("cpu") is not None:
                recovered.set()

        poller = MetricsPoller(state, fetch=fetch, interval=0.01, on_update=on_update)
        poller.start()
        assert recovered.wait(2)
        poller.stop(timeout=2)

        assert state.error == ""
        assert not poller._thread.is_alive()

    def test_update_view_rerenders(self, payload_factory):
        state = DashboardState()
        updates = []
        poller = MetricsPoller(state, fetch=lambda: payload_factory(), on_update=updates.append)

        assert poller.update_view(lambda s: s.toggle_theme()) == "light"
        assert updates == [state]

    def test_update_view_after_stop_is_noop(self):
        state = DashboardState()
        updates = []
        poller = MetricsPoller(state, fetch=lambda: {}, on_update=updates.append)
        poller.stop()

        assert poller.update_view(lambda s: s.toggle_theme()) is None
        assert state.theme == "dark"
        assert updates == []
