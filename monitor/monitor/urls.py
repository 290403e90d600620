from django.urls import include, path

from metrics.views import SnapshotView
from monitor_api import views as api_views

urlpatterns = [
    path('health', api_views.health, name='health'),
    path('metrics-snapshot', SnapshotView.as_view(), name='root-metrics-snapshot'),
    path('api/data', api_views.data, name='data'),
    path('api/metrics/report', api_views.generate_report, name='metrics-report'),
    path('api/', include('metrics.urls')),
]
