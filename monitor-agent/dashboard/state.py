"""Estado do dashboard: dados (snapshot + histórico) e apresentação (aba, métrica, tema)."""
from datetime import datetime, timezone

from .history import merge_history

TABS = {
    "overview": "System Overview",
    "metrics": "Performance Metrics",
    "services": "Service Status",
    "alerts": "Alerts & Notifications",
    "infrastructure": "Infrastructure",
}

THEMES = ("dark", "light")

DEFAULT_ERROR = "Unable to fetch metrics"

# números de vitrine, não são medidos
DEFAULT_SYSTEM_STATS = (
    {"label": "Requests/sec", "value": "842", "trend": "+12%"},
    {"label": "Active Users", "value": "1.2k", "trend": "+5%"},
    {"label": "Response Time", "value": "145ms", "trend": "-8%"},
    {"label": "Success Rate", "value": "99.8%", "trend": "+0.2%"},
)


class InvalidSnapshot(ValueError):
    pass


class DashboardState:

    def __init__(self, active_tab="overview", theme="dark", system_stats=DEFAULT_SYSTEM_STATS):
        if active_tab not in TABS:
            raise ValueError(f"Aba desconhecida: {active_tab}")
        if theme not in THEMES:
            raise ValueError(f"Tema desconhecido: {theme}")
        self.metrics = []
        self.services = []
        self.alerts = []
        self.clusters = []
        self.regions = []
        self.updated_at = None
        self.loading = True
        self.error = ""
        self.active_tab = active_tab
        self.selected_metric = None
        self.theme = theme
        self.system_stats = [dict(s) for s in system_stats]

    # --- dados ---

    def apply_snapshot(self, payload):
        """
        Aplica um snapshot inteiro ou nada: payload malformado levanta
        InvalidSnapshot sem tocar no estado atual.
        """
        if not isinstance(payload, dict):
            raise InvalidSnapshot(f"Snapshot inválido: {type(payload).__name__}")
        try:
            metrics = merge_history(payload.get("metrics") or [], self.metrics)
            sections = {
                name: list(payload.get(name) or [])
                for name in ("services", "alerts", "clusters", "regions")
            }
        except (AttributeError, KeyError, TypeError) as e:
            raise InvalidSnapshot(f"Snapshot inválido: {e!r}") from e

        self.metrics = metrics
        self.services = sections["services"]
        self.alerts = sections["alerts"]
        self.clusters = sections["clusters"]
        self.regions = sections["regions"]
        self.updated_at = payload.get("timestamp") or datetime.now(timezone.utc).isoformat()
        self.error = ""
        self.loading = False

    def apply_error(self, message):
        """Falha de transporte: só mostra o erro, o histórico continua."""
        self.error = message or DEFAULT_ERROR
        self.loading = False

    # --- apresentação ---

    def select_tab(self, tab):
        if tab not in TABS:
            raise ValueError(f"Aba desconhecida: {tab}")
        self.active_tab = tab

    @property
    def title(self):
        return TABS[self.active_tab]

    def toggle_metric(self, key):
        self.selected_metric = None if key == self.selected_metric else key
        return self.selected_metric

    def toggle_theme(self):
        self.theme = "light" if self.theme == "dark" else "dark"
        return self.theme

    @property
    def health_badge(self):
        if self.loading:
            return "Loading..."
        if self.error:
            return "Error"
        return "Healthy"

    def metric(self, key):
        for m in self.metrics:
            if m["key"] == key:
                return m
        return None
