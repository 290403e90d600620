"""
Monitor de conectividade do banco.

O DatastoreMonitor é o dono do ciclo de vida da conexão: abre a conexão
numa thread própria, reverifica em intervalo fixo e guarda o último estado.
Quem lê (o Sampler) só consulta `monitor.state`, nunca abre conexão.
"""
import logging
import threading

from django.conf import settings
from django.db import Error as DatabaseError, connections

logger = logging.getLogger(__name__)

DISCONNECTED = 'disconnected'
CONNECTED = 'connected'
CONNECTING = 'connecting'
DISCONNECTING = 'disconnecting'

STATES = (DISCONNECTED, CONNECTED, CONNECTING, DISCONNECTING)


class DatastoreMonitor:

    def __init__(self, alias='default', interval=15.0):
        self.alias = alias
        self.interval = interval
        self._state = DISCONNECTED
        self._stop = threading.Event()
        self._thread = None

    @property
    def state(self):
        return self._state

    @property
    def running(self):
        return self._thread is not None and self._thread.is_alive()

    def start(self):
        if self.running:
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, name='datastore-monitor', daemon=True)
        self._thread.start()
        logger.info("[DATASTORE] Monitor iniciado (alias=%s, intervalo=%ss)", self.alias, self.interval)

    def stop(self, timeout=5):
        self._stop.set()
        if self._thread is not None:
            self._state = DISCONNECTING
            self._thread.join(timeout)
            self._thread = None
        self._state = DISCONNECTED
        logger.info("[DATASTORE] Monitor parado")

    def check(self):
        """Uma verificação: tenta (re)conectar e roda SELECT 1."""
        conn = connections[self.alias]
        if self._state != CONNECTED:
            self._state = CONNECTING
        try:
            conn.ensure_connection()
            with conn.cursor() as cursor:
                cursor.execute('SELECT 1')
        except (DatabaseError, OSError) as e:
            if self._state != DISCONNECTED:
                logger.warning("[DATASTORE] Falha na conexão: %s", e)
            self._state = DISCONNECTED
            try:
                conn.close()
            except (DatabaseError, OSError) as close_error:
                logger.debug("[DATASTORE] Erro ao fechar conexão: %s", close_error)
        else:
            if self._state != CONNECTED:
                logger.info("[DATASTORE] Conectado")
            self._state = CONNECTED
        return self._state

    def _run(self):
        try:
            while not self._stop.is_set():
                self.check()
                self._stop.wait(self.interval)
        finally:
            # conexões do Django são por thread
            connections.close_all()


_monitor = None
_monitor_lock = threading.Lock()


def get_monitor():
    """Instância única do processo, configurada pelos settings."""
    global _monitor
    with _monitor_lock:
        if _monitor is None:
            _monitor = DatastoreMonitor(
                alias=getattr(settings, 'DATASTORE_ALIAS', 'default'),
                interval=getattr(settings, 'DATASTORE_CHECK_INTERVAL', 15.0),
            )
        return _monitor
