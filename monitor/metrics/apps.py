import os
import sys

from django.apps import AppConfig
from django.conf import settings


class MetricsConfig(AppConfig):
    name = 'metrics'
    verbose_name = 'Métricas'

    def ready(self):
        if not getattr(settings, 'DATASTORE_MONITOR_AUTOSTART', True):
            return
        # runserver com autoreload: só o processo filho atende requisições
        reloading = 'runserver' in sys.argv and '--noreload' not in sys.argv
        if reloading and os.environ.get('RUN_MAIN') != 'true':
            return

        from .datastore import get_monitor

        get_monitor().start()
