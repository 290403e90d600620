"""
Leitura dos contadores do SO e do processo via psutil.

Cada leitura falha "para baixo": se o sensor não estiver disponível,
devolve um valor padrão em vez de levantar exceção.
"""
import logging
import time

import psutil

logger = logging.getLogger(__name__)


class HostProbe:
    """Fonte dos contadores brutos usados pelo Sampler."""

    def __init__(self, process=None):
        self._process = process

    @property
    def process(self):
        if self._process is None:
            self._process = psutil.Process()
        return self._process

    def load_average(self):
        """Load average de 1 minuto."""
        try:
            return psutil.getloadavg()[0] or 0.0
        except (OSError, AttributeError) as e:
            logger.debug("[PROBE] loadavg indisponível: %s", e)
            return 0.0

    def core_count(self):
        """Núcleos lógicos; 1 quando não for possível detectar."""
        try:
            return psutil.cpu_count(logical=True) or 1
        except (OSError, NotImplementedError) as e:
            logger.debug("[PROBE] cpu_count indisponível: %s", e)
            return 1

    def memory(self):
        """Retorna (total, livre) em bytes."""
        try:
            vm = psutil.virtual_memory()
        except (OSError, psutil.Error) as e:
            logger.debug("[PROBE] virtual_memory indisponível: %s", e)
            return 0, 0
        return vm.total, vm.free

    def heap(self):
        """Retorna (usado, alocado) em bytes para o processo atual."""
        try:
            info = self.process.memory_info()
        except psutil.Error as e:
            logger.debug("[PROBE] memory_info indisponível: %s", e)
            return 0, 0
        return info.rss, info.vms

    def uptime_seconds(self):
        """Uptime do host em segundos."""
        try:
            return max(0.0, time.time() - psutil.boot_time())
        except (OSError, psutil.Error) as e:
            logger.debug("[PROBE] boot_time indisponível: %s", e)
            return 0.0
