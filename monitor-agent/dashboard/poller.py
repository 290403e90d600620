"""
Loop de polling do endpoint de métricas.

Um tick a cada POLL_INTERVAL segundos, sem backoff: se o fetch falhar o
próximo tick é a única nova tentativa. Depois de `stop()` nenhuma
resposta (mesmo uma que já estava em voo) altera o estado.
"""
import logging
import threading

import requests

from .state import DEFAULT_ERROR, InvalidSnapshot

logger = logging.getLogger(__name__)

POLL_INTERVAL = 10
REQUEST_TIMEOUT = 5
METRICS_PATH = "/api/metrics"


class FetchError(Exception):
    pass


def fetch_snapshot(api_base, session=None, timeout=REQUEST_TIMEOUT):
    url = f"{api_base.rstrip('/')}{METRICS_PATH}"
    http = session or requests
    try:
        resp = http.get(url, timeout=timeout)
    except requests.RequestException as e:
        raise FetchError(str(e) or DEFAULT_ERROR) from e
    if not 200 <= resp.status_code < 300:
        raise FetchError(f"HTTP {resp.status_code}")
    try:
        return resp.json()
    except ValueError as e:
        raise FetchError(f"Resposta inválida: {e}") from e


class MetricsPoller:

    def __init__(self, state, fetch, interval=POLL_INTERVAL, on_update=None):
        self.state = state
        self.fetch = fetch
        self.interval = interval
        self.on_update = on_update
        self._alive = True
        self._lock = threading.Lock()
        self._stop = threading.Event()
        self._thread = None

    @property
    def alive(self):
        return self._alive

    def poll_once(self):
        """Um ciclo de fetch + merge. Retorna False se o resultado foi descartado."""
        if not self._alive:
            return False
        try:
            payload = self.fetch()
        except FetchError as e:
            with self._lock:
                if not self._alive:
                    logger.debug("[POLL] Erro descartado após encerramento: %s", e)
                    return False
                logger.warning("[POLL] Falha ao buscar métricas: %s", e)
                self.state.apply_error(str(e))
        else:
            with self._lock:
                if not self._alive:
                    logger.debug("[POLL] Resposta descartada após encerramento")
                    return False
                try:
                    self.state.apply_snapshot(payload)
                except InvalidSnapshot as e:
                    logger.warning("[POLL] %s", e)
                    self.state.apply_error(str(e))
                else:
                    logger.debug("[POLL] %d métricas atualizadas", len(self.state.metrics))

        if self.on_update is not None and self._alive:
            self.on_update(self.state)
        return True

    def update_view(self, action):
        """
        Aplica `action(state)` sob o mesmo lock do merge e re-renderiza.
        Usado para mudanças de apresentação (aba, métrica, tema).
        """
        with self._lock:
            if not self._alive:
                return None
            result = action(self.state)
        if self.on_update is not None and self._alive:
            self.on_update(self.state)
        return result

    def run(self):
        """Roda no thread atual até `stop()`."""
        while self._alive:
            self.poll_once()
            if self._stop.wait(self.interval):
                break

    def start(self):
        self._thread = threading.Thread(target=self.run, name="metrics-poller", daemon=True)
        self._thread.start()
        return self._thread

    def stop(self, timeout=None):
        with self._lock:
            self._alive = False
        self._stop.set()
        if self._thread is not None and self._thread is not threading.current_thread():
            self._thread.join(timeout)
