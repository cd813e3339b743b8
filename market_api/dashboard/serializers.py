from rest_framework import serializers

from platform_admin.serializers import SystemStatsSerializer
from user_projects.serializers import BidSerializer, ContractSerializer, ProjectListSerializer


class ClientDashboardSerializer(serializers.Serializer):
    projects = ProjectListSerializer(many=True)
    status_counts = serializers.DictField(child=serializers.IntegerField())


class ContractorDashboardSerializer(serializers.Serializer):
    bids = BidSerializer(many=True)
    open_projects = ProjectListSerializer(many=True)
    contracts = ContractSerializer(many=True)


class AdminDashboardSerializer(serializers.Serializer):
    stats = SystemStatsSerializer()


class IncompleteDashboardSerializer(serializers.Serializer):
    detail = serializers.CharField()
