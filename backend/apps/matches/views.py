"""Views for the matches app."""
from django.conf import settings
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import extend_schema
from rest_framework import generics, permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView

from .authentication import IngestTokenAuthentication, IsIngestClient
from .exceptions import SettlementRejected
from .models import Match
from .serializers import MatchDetailSerializer, MatchReportSerializer
from .services.settlement import MatchSettlement


class MatchIngestView(APIView):
    """
    Match ingestion endpoint for the Discord bot.

    Validates the report shape, then hands it to settlement. Replaying a
    report (same Idempotency-Key, or identical content) returns the
    original result without settling again.
    """

    authentication_classes = [IngestTokenAuthentication]
    permission_classes = [IsIngestClient]

    @extend_schema(
        summary="Report a finished match",
        description="Settles a 4-player match: scoring, placements, Elo and violations.",
        tags=['matches'],
        request=MatchReportSerializer,
    )
    def post(self, request):
        """Settle a reported match."""
        serializer = MatchReportSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        header_key = request.headers.get('Idempotency-Key')
        max_length = Match._meta.get_field('idempotency_key').max_length
        if header_key and len(header_key) > max_length:
            raise SettlementRejected('invalid idempotency key', max_length=max_length)

        report = serializer.to_report(idempotency_key=header_key)
        outcome = MatchSettlement().settle(report)

        return Response(
            outcome.as_response(),
            status=status.HTTP_200_OK if outcome.duplicate else status.HTTP_201_CREATED
        )


class MatchDetailView(generics.RetrieveAPIView):
    """View a stored match with rounds and results."""

    serializer_class = MatchDetailSerializer
    permission_classes = [permissions.AllowAny]
    queryset = Match.objects.prefetch_related(
        'rounds__category', 'results__player', 'violations'
    )


class IngestStatusView(APIView):
    """Report whether an ingest token is configured, without revealing it."""

    permission_classes = [permissions.AllowAny]

    @extend_schema(
        summary="Ingest configuration status",
        tags=['matches'],
        responses={200: OpenApiTypes.OBJECT},
    )
    def get(self, request):
        token = settings.INGEST_TOKEN or ''
        return Response({
            'ok': True,
            'has_bot_ingest_token': len(token) > 0,
            'bot_ingest_token_length': len(token),
        })
