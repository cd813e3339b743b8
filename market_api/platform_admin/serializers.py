from decimal import Decimal

from rest_framework import serializers

from .models import PlatformFeeSettings, PlatformEarning


class PlatformFeeSettingsSerializer(serializers.ModelSerializer):
    """
    Fee percentages applied to milestone payouts. Each value must lie in [0, 100].
    """
    client_fee_percentage = serializers.DecimalField(max_digits=5, decimal_places=2, min_value=Decimal('0'), max_value=Decimal('100'))
    contractor_fee_percentage = serializers.DecimalField(max_digits=5, decimal_places=2, min_value=Decimal('0'), max_value=Decimal('100'))

    class Meta:
        model = PlatformFeeSettings
        fields = ['client_fee_percentage', 'contractor_fee_percentage', 'updated_at']
        read_only_fields = ['updated_at']

    def update(self, instance, validated_data):
        instance.updated_by = self.context['request'].user
        return super().update(instance, validated_data)


class PlatformEarningSerializer(serializers.ModelSerializer):
    project_title = serializers.CharField(source='project.title', read_only=True)

    class Meta:
        model = PlatformEarning
        fields = [
            'id', 'project', 'project_title', 'milestone', 'client', 'contractor', 'milestone_amount',
            'client_fee_amount', 'contractor_fee_amount', 'total_platform_earning', 'created_at'
        ]
        read_only_fields = fields


class SystemStatsSerializer(serializers.Serializer):
    total_users = serializers.IntegerField()
    total_projects = serializers.IntegerField()
    total_contracts = serializers.IntegerField()
    total_disputes = serializers.IntegerField()
    open_disputes = serializers.IntegerField()
    total_earnings = serializers.DecimalField(max_digits=14, decimal_places=2)


class MonthlyStatsSerializer(serializers.Serializer):
    name = serializers.CharField()
    month = serializers.CharField()
    projects = serializers.IntegerField()
    disputes = serializers.IntegerField()
