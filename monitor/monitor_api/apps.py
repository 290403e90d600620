from django.apps import AppConfig


class MonitorApiConfig(AppConfig):
    name = 'monitor_api'
    verbose_name = 'API de Monitoramento'
