from rest_framework import serializers
from django.utils import timezone

from accounts.serializers import UserSummarySerializer
from market_api.exceptions import WorkflowError
from user_projects.models import Contract
from .models import Dispute


class DisputeContractSerializer(serializers.ModelSerializer):
    """
    Contract summary embedded in dispute payloads and in the disputable-contracts list.
    """
    project_id = serializers.IntegerField(source='project.id', read_only=True)
    project_title = serializers.CharField(source='project.title', read_only=True)
    client = UserSummarySerializer(source='project.client', read_only=True)
    contractor = UserSummarySerializer(read_only=True)

    class Meta:
        model = Contract
        fields = ['id', 'project_id', 'project_title', 'client', 'contractor', 'total_amount', 'status', 'start_date', 'end_date']
        read_only_fields = fields


class DisputeCreateSerializer(serializers.ModelSerializer):
    """
    Serializer for raising a dispute on an ongoing contract.

    Fields:
        - contract (required): id of a contract the caller is party to
        - reason (required, at least 10 characters)
    """
    contract = serializers.PrimaryKeyRelatedField(queryset=Contract.objects.select_related('project'))
    reason = serializers.CharField(min_length=10)

    class Meta:
        model = Dispute
        fields = ['id', 'contract', 'reason', 'status', 'created_at']
        read_only_fields = ['id', 'status', 'created_at']

    def validate_contract(self, contract):
        user = self.context['request'].user
        if not contract.is_party(user):
            raise serializers.ValidationError("You are not a party to this contract.")
        if contract.status != Contract.ONGOING:
            raise serializers.ValidationError("Disputes can only be raised on ongoing contracts.")
        return contract

    def create(self, validated_data):
        return Dispute.objects.create(raised_by=self.context['request'].user, **validated_data)


class DisputeDetailSerializer(serializers.ModelSerializer):
    """
    Serializer for reading a dispute with its contract, parties and resolution.
    `can_resolve` is true only while the dispute is open.
    """
    contract = DisputeContractSerializer(read_only=True)
    raised_by = UserSummarySerializer(read_only=True)
    resolved_by = UserSummarySerializer(read_only=True)
    can_resolve = serializers.BooleanField(read_only=True)

    class Meta:
        model = Dispute
        fields = ['id', 'contract', 'raised_by', 'reason', 'status', 'resolution_notes', 'resolved_by', 'resolved_at', 'can_resolve', 'created_at', 'updated_at']
        read_only_fields = fields


class ResolveDisputeSerializer(serializers.ModelSerializer):
    """
    Serializer for admins closing out a dispute.
    """
    status = serializers.ChoiceField(choices=Dispute.FINAL_STATUSES)
    resolution_notes = serializers.CharField(required=False, allow_blank=True)

    class Meta:
        model = Dispute
        fields = ['status', 'resolution_notes']

    def update(self, instance, validated_data):
        if instance.status != Dispute.OPEN:
            raise WorkflowError(f"Cannot update a dispute with status '{instance.status}'.")

        instance.status = validated_data['status']
        instance.resolution_notes = validated_data.get('resolution_notes', instance.resolution_notes)
        instance.resolved_by = self.context['request'].user
        instance.resolved_at = timezone.now()
        instance.save()

        return instance


class UpdateDisputeSerializer(serializers.ModelSerializer):
    """
    Serializer for the dispute owner to reword the reason while it is open.
    """
    reason = serializers.CharField(min_length=10)

    class Meta:
        model = Dispute
        fields = ['reason']

    def validate(self, attrs):
        if self.instance.status != Dispute.OPEN:
            raise WorkflowError("Cannot edit a dispute that is no longer open.")
        return attrs
