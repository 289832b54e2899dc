import logging

from rest_framework import generics, status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.permissions import IsAdminOrStaff, IsAdminRole, ReadOnlyOrAdminRole
from .models import Table
from .serializers import TableSerializer, TableUpdateSerializer

logger = logging.getLogger(__name__)


class TableListCreateView(generics.ListCreateAPIView):

    queryset = (
        Table.objects
        .all()
        .select_related("current_token")
        .order_by("table_number")
    )
    serializer_class = TableSerializer
    permission_classes = [ReadOnlyOrAdminRole]

    def list(self, request, *args, **kwargs):
        serializer = self.get_serializer(self.get_queryset(), many=True)
        return Response({"tables": serializer.data})

    def perform_create(self, serializer):
        table = serializer.save(status="free")
        logger.info(
            "Table %s (capacity %s) created by %s",
            table.table_number,
            table.capacity,
            self.request.user.username,
        )


class TableDetailView(APIView):

    ADMIN_FIELDS = ("capacity", "is_joinable")

    def get_permissions(self):
        if self.request.method == "GET":
            return [AllowAny()]
        if self.request.method == "DELETE":
            return [IsAdminRole()]
        return [IsAdminOrStaff()]

    def _get_table(self, pk):
        try:
            return Table.objects.select_related("current_token").get(pk=pk)
        except Table.DoesNotExist:
            return None

    def get(self, request, pk):
        table = self._get_table(pk)
        if not table:
            return Response({"error": "Table not found"}, status=404)

        return Response({"table": TableSerializer(table).data})

    def patch(self, request, pk):
        table = self._get_table(pk)
        if not table:
            return Response({"error": "Table not found"}, status=404)

        touches_admin_fields = any(field in request.data for field in self.ADMIN_FIELDS)
        if touches_admin_fields and not request.user.is_admin_role:
            return Response(
                {"error": "Admin access required to modify table properties"},
                status=403
            )

        serializer = TableUpdateSerializer(table, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()

        logger.info("Table %s updated by %s: %s", table.table_number, request.user.username, serializer.validated_data)

        return Response({"success": True, "table": TableSerializer(table).data})

    def delete(self, request, pk):
        table = self._get_table(pk)
        if not table:
            return Response({"error": "Table not found"}, status=404)

        if table.status in Table.HELD_STATUSES:
            return Response(
                {"error": "Cannot delete occupied table"},
                status=400
            )

        table.delete()
        logger.info("Table %s deleted by %s", table.table_number, request.user.username)

        return Response({"success": True}, status=status.HTTP_200_OK)
