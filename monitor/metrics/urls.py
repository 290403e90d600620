from django.urls import path

from . import views

urlpatterns = [
    path('metrics', views.SnapshotView.as_view(), name='metrics'),
    path('metrics-snapshot', views.SnapshotView.as_view(), name='metrics-snapshot'),
]
