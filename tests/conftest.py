import os

import django
import pytest

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "monitor.settings")
os.environ["DATASTORE_MONITOR_AUTOSTART"] = "0"
os.environ.setdefault("DATASTORE_URL", "sqlite:///:memory:")

django.setup()

from django.test.utils import setup_test_environment  # noqa: E402

setup_test_environment()


class FakeProbe:
    """Contadores fixos no lugar do psutil."""

    def __init__(self, load=0.5, cores=4, total=8000, free=2000, used=300, allocated=1200, uptime=3600):
        self.load = load
        self.cores = cores
        self.total = total
        self.free = free
        self.used = used
        self.allocated = allocated
        self.uptime = uptime

    def load_average(self):
        return self.load

    def core_count(self):
        return self.cores

    def memory(self):
        return self.total, self.free

    def heap(self):
        return self.used, self.allocated

    def uptime_seconds(self):
        return self.uptime


@pytest.fixture
def probe():
    return FakeProbe()


def make_payload(cpu=12.5, memory=40.0, timestamp="2026-01-01T00:00:00+00:00"):
    return {
        "metrics": [
            {"key": "cpu", "label": "CPU Utilization", "unit": "%", "value": cpu},
            {"key": "memory", "label": "Memory Usage", "unit": "%", "value": memory},
        ],
        "services": [{"name": "Backend API", "status": "operational", "latency": 20}],
        "alerts": [],
        "clusters": [{"name": "local-cluster", "nodes": 1, "pods": 3, "utilization": cpu}],
        "regions": [{"name": "local", "traffic": cpu}],
        "timestamp": timestamp,
    }


@pytest.fixture
def payload_factory():
    return make_payload
