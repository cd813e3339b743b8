from rest_framework import views as drf_views
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from drf_yasg.utils import swagger_auto_schema

from accounts.roles import Role, resolve_role
from . import serializers as my_serializers
from .services import DASHBOARDS

SERIALIZERS = {
    Role.CLIENT: my_serializers.ClientDashboardSerializer,
    Role.CONTRACTOR: my_serializers.ContractorDashboardSerializer,
    Role.ADMIN: my_serializers.AdminDashboardSerializer,
    Role.INCOMPLETE: my_serializers.IncompleteDashboardSerializer,
}


class DashboardAPIView(drf_views.APIView):
    """
    One dashboard per role: clients get their projects, contractors their
    bids and contracts, admins the platform stats. Users without a role are
    asked to finish their profile.
    """
    permission_classes = [IsAuthenticated]

    @swagger_auto_schema(operation_summary="Role-specific dashboard for the current user")
    def get(self, request):
        role = resolve_role(request.user)
        data = DASHBOARDS[role](request.user)
        serializer = SERIALIZERS[role](data, context={'request': request})

        return Response({'role': role.value, **serializer.data})
