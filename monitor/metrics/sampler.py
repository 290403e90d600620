"""
Sampler: monta o snapshot de métricas a cada requisição.

Não guarda estado entre chamadas. O estado do banco chega por um
acessor somente leitura injetado no construtor.
"""
import logging
from datetime import datetime, timezone

from . import datastore
from .probe import HostProbe

logger = logging.getLogger(__name__)

OPERATIONAL = 'operational'
DEGRADED = 'degraded'
DOWN = 'down'

API_SERVICE_NAME = 'Backend API'
DEFAULT_API_LATENCY = 20
DEFAULT_DATASTORE_LATENCY = {OPERATIONAL: 35, DEGRADED: 180, DOWN: 180}


def to_pct(value, digits=1):
    return round(value, digits)


def cpu_load_percent(load, cores):
    cores = cores or 1
    return min(100.0, to_pct((load or 0) / cores * 100))


def memory_percent(total, free):
    if not total:
        return 0.0
    return to_pct((total - free) / total * 100)


def heap_percent(used, allocated):
    """Fração residente (RSS) da memória virtual (VMS) do processo, em %."""
    if not allocated:
        return 0.0
    return to_pct(used / allocated * 100)


def uptime_minutes(seconds):
    return to_pct(seconds / 60, 1)


def datastore_status(state):
    """connected -> operational, connecting -> degraded, o resto -> down."""
    if state == datastore.CONNECTED:
        return OPERATIONAL
    if state == datastore.CONNECTING:
        return DEGRADED
    return DOWN


def build_alerts(datastore_name, status):
    if status != DOWN:
        return []
    return [
        {
            "severity": "critical",
            "title": f"{datastore_name} down",
            "detail": "Database connection is not healthy",
        }
    ]


class Sampler:

    def __init__(self, status_accessor, probe=None, datastore_name='Database',
                 api_latency=DEFAULT_API_LATENCY, datastore_latency=None, clock=None):
        self.status_accessor = status_accessor
        self.probe = probe or HostProbe()
        self.datastore_name = datastore_name
        self.api_latency = api_latency
        self.datastore_latency = dict(DEFAULT_DATASTORE_LATENCY)
        if datastore_latency:
            self.datastore_latency.update(datastore_latency)
        self.clock = clock or (lambda: datetime.now(timezone.utc))

    def sample_metrics(self):
        load = self.probe.load_average()
        cores = self.probe.core_count()
        total, free = self.probe.memory()
        used, allocated = self.probe.heap()

        cpu = cpu_load_percent(load, cores)
        # mesmo cálculo da CPU; mantido por compatibilidade
        load_per_core = cpu_load_percent(load, cores)

        return [
            {"key": "cpu", "label": "CPU Utilization", "unit": "%", "value": cpu},
            {"key": "memory", "label": "Memory Usage", "unit": "%", "value": memory_percent(total, free)},
            {"key": "heap", "label": "Process RSS / VMS", "unit": "%", "value": heap_percent(used, allocated)},
            {"key": "load", "label": "1m Load / Core", "unit": "%", "value": load_per_core},
            {"key": "uptime", "label": "Uptime", "unit": "min", "value": uptime_minutes(self.probe.uptime_seconds())},
        ]

    def services(self, status):
        return [
            {"name": API_SERVICE_NAME, "status": OPERATIONAL, "latency": self.api_latency},
            {
                "name": self.datastore_name,
                "status": status,
                "latency": self.datastore_latency.get(status, self.datastore_latency[DOWN]),
            },
        ]

    def snapshot(self):
        metrics = self.sample_metrics()
        cpu = metrics[0]["value"]

        status = datastore_status(self.status_accessor())
        if status != OPERATIONAL:
            logger.debug("[SAMPLER] %s está %s", self.datastore_name, status)

        return {
            "metrics": metrics,
            "services": self.services(status),
            "alerts": build_alerts(self.datastore_name, status),
            "clusters": [{"name": "local-cluster", "nodes": 1, "pods": 3, "utilization": cpu}],
            "regions": [{"name": "local", "traffic": cpu}],
            "timestamp": self.clock().isoformat(),
        }


def default_sampler():
    """Sampler ligado ao monitor de banco do processo e aos settings."""
    from django.conf import settings

    monitor = datastore.get_monitor()
    return Sampler(
        status_accessor=lambda: monitor.state,
        datastore_name=getattr(settings, 'DATASTORE_NAME', 'Database'),
        api_latency=getattr(settings, 'MONITOR_API_LATENCY', DEFAULT_API_LATENCY),
        datastore_latency=getattr(settings, 'MONITOR_DATASTORE_LATENCY', None),
    )
