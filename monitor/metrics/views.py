import logging

from rest_framework.response import Response
from rest_framework.views import APIView

from .sampler import default_sampler
from .serializers import SnapshotSerializer

logger = logging.getLogger(__name__)


class SnapshotView(APIView):
    """
    Snapshot das métricas do host.

    Sempre responde 200: banco fora do ar aparece como status "down"
    e alerta, nunca como erro HTTP.
    """
    sampler_factory = staticmethod(default_sampler)

    def get(self, request):
        snapshot = self.sampler_factory().snapshot()
        logger.debug(
            "[SNAPSHOT] cpu=%s alertas=%d",
            snapshot["metrics"][0]["value"],
            len(snapshot["alerts"]),
        )
        return Response(SnapshotSerializer(snapshot).data)
