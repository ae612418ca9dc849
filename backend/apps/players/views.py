"""Views for the players app."""
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import extend_schema
from rest_framework import generics, permissions
from rest_framework.response import Response
from rest_framework.views import APIView

from .models import Player
from .serializers import (
    LeaderboardEntrySerializer,
    PlayerProfileSerializer,
    PlayerSerializer,
)
from .services.leaderboard import mini_tables, ranked_players, recent_placements


class LeaderboardView(generics.ListAPIView):
    """Ranked leaderboard with each player's last stored placements."""

    serializer_class = LeaderboardEntrySerializer
    permission_classes = [permissions.AllowAny]
    pagination_class = None

    def get_queryset(self):
        return ranked_players()

    def list(self, request, *args, **kwargs):
        players = list(self.get_queryset())
        context = self.get_serializer_context()
        context['recent_placements'] = recent_placements(p.discord_id for p in players)
        serializer = self.get_serializer_class()(players, many=True, context=context)
        return Response(serializer.data)


class MiniTablesView(APIView):
    """Top lists for games played, imposter wins and crew wins."""

    permission_classes = [permissions.AllowAny]

    @extend_schema(
        summary="Mini leaderboards",
        tags=['players'],
        responses={200: OpenApiTypes.OBJECT},
    )
    def get(self, request):
        tables = mini_tables()
        return Response({
            name: PlayerSerializer(players, many=True).data
            for name, players in tables.items()
        })


class PlayerDetailView(generics.RetrieveAPIView):
    """View a player's public profile."""

    queryset = Player.objects.all()
    serializer_class = PlayerProfileSerializer
    permission_classes = [permissions.AllowAny]
    lookup_field = 'discord_id'
