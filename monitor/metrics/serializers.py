from rest_framework import serializers

UNITS = ('%', 'min', 'ms')
SERVICE_STATUSES = ('operational', 'degraded', 'down')


class MetricSerializer(serializers.Serializer):
    key = serializers.CharField()
    label = serializers.CharField()
    unit = serializers.ChoiceField(choices=UNITS)
    value = serializers.FloatField()


class ServiceSerializer(serializers.Serializer):
    name = serializers.CharField()
    status = serializers.ChoiceField(choices=SERVICE_STATUSES)
    latency = serializers.IntegerField()


class AlertSerializer(serializers.Serializer):
    severity = serializers.CharField()
    title = serializers.CharField()
    detail = serializers.CharField()


class ClusterSerializer(serializers.Serializer):
    name = serializers.CharField()
    nodes = serializers.IntegerField()
    pods = serializers.IntegerField()
    utilization = serializers.FloatField()


class RegionSerializer(serializers.Serializer):
    name = serializers.CharField()
    traffic = serializers.FloatField()


class SnapshotSerializer(serializers.Serializer):
    metrics = MetricSerializer(many=True)
    services = ServiceSerializer(many=True)
    alerts = AlertSerializer(many=True)
    clusters = ClusterSerializer(many=True)
    regions = RegionSerializer(many=True)
    timestamp = serializers.CharField()
