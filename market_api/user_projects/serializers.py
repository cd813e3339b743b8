from decimal import Decimal

from rest_framework import serializers
from django.contrib.auth import get_user_model
from django.db.models import Sum
from django.utils import timezone

from accounts.roles import Role, resolve_role
from accounts.serializers import UserSummarySerializer
from categories.models import Category
from categories.serializers import CategorySerializer
from market_api.exceptions import WorkflowError
from . import services
from .models import Project, Milestone, Bid, Contract, Review


User = get_user_model()


def _positive(value, message):
    if value is None or value <= 0:
        raise serializers.ValidationError(message)
    return value


class MilestoneInputSerializer(serializers.Serializer):
    """
    One milestone entry of a new project, or of a bid's modified milestone plan.
    """
    description = serializers.CharField(min_length=5)
    amount = serializers.DecimalField(max_digits=12, decimal_places=2)
    due_date = serializers.DateField(required=False, allow_null=True)

    def validate_amount(self, value):
        return _positive(value, "Milestone amount must be greater than zero.")


class ModifiedMilestoneSerializer(MilestoneInputSerializer):
    order_index = serializers.IntegerField(min_value=0, required=False)


class MilestoneSerializer(serializers.ModelSerializer):
    """
    Serializer outlining milestone progress and payment status.

    Fields (all read-only): id, description, amount, due_date, order_index, status,
    submitted_at, approved_at, rejected_reason, is_paid.
    """
    class Meta:
        model = Milestone
        fields = ['id', 'description', 'amount', 'due_date', 'order_index', 'status', 'submitted_at', 'approved_at', 'rejected_reason', 'is_paid']
        read_only_fields = fields


class RejectMilestoneSerializer(serializers.Serializer):
    """
    Serializer for clients rejecting submitted milestones with a mandatory reason.
    """
    rejected_reason = serializers.CharField()


class ProjectSummarySerializer(serializers.ModelSerializer):
    """
    Serializer providing compact project information for nested responses.
    """
    class Meta:
        model = Project
        fields = ['id', 'title', 'location', 'budget', 'deadline', 'status', 'created_at']
        read_only_fields = fields


class ProjectFieldsMixin:
    """
    Field rules shared by project creation and update.
    """
    def validate_budget(self, value):
        return _positive(value, "Budget must be greater than zero.")

    def validate_deadline(self, value):
        if value <= timezone.localdate():
            raise serializers.ValidationError("Deadline must be in the future.")
        return value


class CreateProjectSerializer(ProjectFieldsMixin, serializers.ModelSerializer):
    """
    Serializer for clients posting a new project together with its milestones.

    Fields:
        - title (>= 5 chars), description (>= 20 chars), location (>= 3 chars)
        - budget (> 0), deadline (future date), category (id)
        - milestones: non-empty list of {description, amount, due_date}
    The project and all milestones are written in one transaction.
    """
    title = serializers.CharField(min_length=5, max_length=255)
    description = serializers.CharField(min_length=20)
    location = serializers.CharField(min_length=3, max_length=255)
    category = serializers.PrimaryKeyRelatedField(queryset=Category.objects.all())
    milestones = MilestoneInputSerializer(many=True, allow_empty=False)

    class Meta:
        model = Project
        fields = ['id', 'title', 'description', 'location', 'budget', 'deadline', 'category', 'milestones', 'status']
        read_only_fields = ['id', 'status']

    def validate(self, attrs):
        total = sum((m['amount'] for m in attrs['milestones']), Decimal('0'))
        if total > attrs['budget']:
            raise serializers.ValidationError({'milestones': [f"Milestone amounts ({total}) exceed the project budget ({attrs['budget']})."]})
        return attrs

    def create(self, validated_data):
        milestones = validated_data.pop('milestones')
        return services.create_project(self.context['request'].user, milestones, **validated_data)

    def to_representation(self, instance):
        return ProjectDetailSerializer(instance, context=self.context).data


class UpdateProjectSerializer(ProjectFieldsMixin, serializers.ModelSerializer):
    """
    Serializer for the owning client editing a project while it is still open.
    """
    title = serializers.CharField(min_length=5, max_length=255, required=False)
    description = serializers.CharField(min_length=20, required=False)
    location = serializers.CharField(min_length=3, max_length=255, required=False)
    category = serializers.PrimaryKeyRelatedField(queryset=Category.objects.all(), required=False)

    class Meta:
        model = Project
        fields = ['title', 'description', 'location', 'budget', 'deadline', 'category']

    def validate(self, attrs):
        if self.instance.status != Project.OPEN:
            raise WorkflowError("Only open projects can be edited.")

        budget = attrs.get('budget', self.instance.budget)
        total = self.instance.milestones.aggregate(total=Sum('amount'))['total'] or Decimal('0')
        if total > budget:
            raise serializers.ValidationError({'budget': [f"Budget ({budget}) is below the milestone amounts ({total})."]})
        return attrs

    def to_representation(self, instance):
        return ProjectDetailSerializer(instance, context=self.context).data


class ProjectStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Project.STATUS_CHOICES)


class ProjectListSerializer(serializers.ModelSerializer):
    """
    Serializer for project lists (own projects, browse, dashboards).
    `bid_count` is present when the queryset annotates it.
    """
    category = serializers.StringRelatedField()
    client = UserSummarySerializer(read_only=True)
    bid_count = serializers.SerializerMethodField()

    class Meta:
        model = Project
        fields = ['id', 'title', 'description', 'location', 'budget', 'deadline', 'status', 'category', 'client', 'bid_count', 'created_at']
        read_only_fields = fields

    def get_bid_count(self, obj):
        return getattr(obj, 'bid_count', None)


class BidSerializer(serializers.ModelSerializer):
    """
    Serializer for reading bids, with the bidding contractor and project summary.
    """
    contractor = UserSummarySerializer(read_only=True)
    project = ProjectSummarySerializer(read_only=True)

    class Meta:
        model = Bid
        fields = ['id', 'project', 'contractor', 'proposal_text', 'proposed_budget', 'proposed_timeline', 'modified_milestones', 'status', 'created_at', 'updated_at']
        read_only_fields = fields


class ProjectDetailSerializer(serializers.ModelSerializer):
    """
    Serializer for a single project as seen by the requesting user.

    Milestones come in `order_index` order and bids newest first. The owning
    client and admins see every bid, a contractor only their own.
    `viewer_has_bid` and `can_bid` describe the requesting user's position.
    """
    category = CategorySerializer(read_only=True)
    client = UserSummarySerializer(read_only=True)
    milestones = MilestoneSerializer(many=True, read_only=True)
    bids = serializers.SerializerMethodField()
    contract_id = serializers.SerializerMethodField()
    viewer_has_bid = serializers.SerializerMethodField()
    can_bid = serializers.SerializerMethodField()

    class Meta:
        model = Project
        fields = [
            'id', 'title', 'description', 'location', 'budget', 'deadline', 'status', 'category', 'client',
            'milestones', 'bids', 'contract_id', 'viewer_has_bid', 'can_bid', 'created_at', 'updated_at', 'completed_at'
        ]
        read_only_fields = fields

    def _viewer(self):
        request = self.context.get('request')
        return request.user if request else None

    def _viewer_bid(self, obj):
        viewer = self._viewer()
        if viewer is None or not viewer.is_authenticated:
            return None
        return next((bid for bid in obj.bids.all() if bid.contractor_id == viewer.id), None)

    def get_bids(self, obj):
        viewer = self._viewer()
        role = resolve_role(viewer)
        if role == Role.ADMIN or (viewer is not None and obj.client_id == viewer.id):
            bids = obj.bids.all()
        else:
            bid = self._viewer_bid(obj)
            bids = [bid] if bid else []
        return BidSerializer(bids, many=True).data

    def get_contract_id(self, obj):
        contract = getattr(obj, 'contract', None)
        return contract.id if contract else None

    def get_viewer_has_bid(self, obj):
        return self._viewer_bid(obj) is not None

    def get_can_bid(self, obj):
        return (
            resolve_role(self._viewer()) == Role.CONTRACTOR
            and obj.status == Project.OPEN
            and self._viewer_bid(obj) is None
        )


class CreateBidSerializer(serializers.ModelSerializer):
    """
    Serializer for contractors bidding on an open project.

    Fields:
        - proposal_text (>= 20 chars), proposed_budget (> 0) (required)
        - proposed_timeline, modified_milestones (optional)
    One bid per contractor per project.
    """
    proposal_text = serializers.CharField(min_length=20)
    proposed_timeline = serializers.DateField(required=False, allow_null=True)
    modified_milestones = serializers.ListField(child=serializers.DictField(), required=False, allow_null=True, allow_empty=False)

    class Meta:
        model = Bid
        fields = ['id', 'proposal_text', 'proposed_budget', 'proposed_timeline', 'modified_milestones', 'status', 'created_at']
        read_only_fields = ['id', 'status', 'created_at']

    def validate_proposed_budget(self, value):
        return _positive(value, "Proposed budget must be greater than zero.")

    def validate_modified_milestones(self, value):
        if value is None:
            return None
        plan = ModifiedMilestoneSerializer(data=value, many=True)
        plan.is_valid(raise_exception=True)
        # stored as JSON: decimals and dates in their string form
        return [
            {**entry, 'order_index': entry.get('order_index', index)}
            for index, entry in enumerate(plan.data)
        ]

    def validate(self, attrs):
        project = self.context['project']
        contractor = self.context['request'].user

        if project.status != Project.OPEN:
            raise WorkflowError("Bids can only be submitted on open projects.")
        if Bid.objects.filter(project=project, contractor=contractor).exists():
            raise WorkflowError("You have already submitted a bid for this project.")

        return attrs

    def create(self, validated_data):
        return Bid.objects.create(
            project=self.context['project'],
            contractor=self.context['request'].user,
            status=Bid.PENDING,
            **validated_data
        )

    def to_representation(self, instance):
        return BidSerializer(instance, context=self.context).data


class ContractSerializer(serializers.ModelSerializer):
    """
    Serializer for contracts, with both parties and the project summary.
    """
    project = ProjectSummarySerializer(read_only=True)
    client = UserSummarySerializer(source='project.client', read_only=True)
    contractor = UserSummarySerializer(read_only=True)

    class Meta:
        model = Contract
        fields = ['id', 'project', 'client', 'contractor', 'bid', 'start_date', 'end_date', 'total_amount', 'status', 'created_at', 'updated_at']
        read_only_fields = fields


class ContractDetailSerializer(ContractSerializer):
    milestones = MilestoneSerializer(source='project.milestones', many=True, read_only=True)

    class Meta(ContractSerializer.Meta):
        fields = ContractSerializer.Meta.fields + ['milestones']
        read_only_fields = fields


class CreateReviewSerializer(serializers.ModelSerializer):
    """
    Serializer for one party of a completed project reviewing the other.

    Validates project completion and duplicate submissions.
    """
    rating = serializers.IntegerField(min_value=1, max_value=5)

    class Meta:
        model = Review
        fields = ['id', 'rating', 'comment', 'created_at']
        read_only_fields = ['id', 'created_at']

    def validate(self, attrs):
        user = self.context['request'].user
        project = self.context['project']

        if project.status != Project.COMPLETED:
            raise WorkflowError("Reviews can only be submitted for completed projects.")

        contract = getattr(project, 'contract', None)
        if contract is None or not contract.is_party(user):
            raise serializers.ValidationError("Only the client and contractor of this project can review it.")

        if Review.objects.filter(project=project, reviewer=user).exists():
            raise WorkflowError("You have already reviewed this project.")

        attrs['reviewee'] = contract.contractor if user.id == project.client_id else project.client
        return attrs

    def create(self, validated_data):
        validated_data['reviewer'] = self.context['request'].user
        validated_data['project'] = self.context['project']

        return super().create(validated_data)


class ReviewSerializer(serializers.ModelSerializer):
    """
    Serializer rendering submitted reviews with reviewer summary.
    """
    reviewer = UserSummarySerializer(read_only=True)
    project = serializers.StringRelatedField()

    class Meta:
        model = Review
        fields = ['id', 'project', 'reviewer', 'reviewee', 'rating', 'comment', 'created_at']
        read_only_fields = fields
