from rest_framework import views as drf_views, generics, status
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from rest_framework.filters import OrderingFilter
from django.shortcuts import get_object_or_404
from django.db.models import Avg, Count, Q
from django_filters.rest_framework import DjangoFilterBackend
from drf_yasg.utils import swagger_auto_schema

from accounts.permissions import IsClient, IsContractor, IsPlatformAdmin
from accounts.roles import Role, resolve_role
from . import serializers as my_serializers
from . import services
from .filters import ProjectFilter
from .models import Project, Milestone, Bid, Contract, Review
from .permissions import IsProjectOwner, IsProjectOwnerOrAdmin, IsContractPartyOrAdmin


def _project_detail_queryset():
    return Project.objects.select_related('category', 'client').prefetch_related('milestones', 'bids__contractor')


class ListCreateProjectClientAPIView(generics.ListCreateAPIView):
    """
    GET: The authenticated client's projects, newest first, with bid counts.
    POST: Create a project with its milestones.
    """
    permission_classes = [IsAuthenticated, IsClient]
    filterset_fields = ['status', 'category']

    def get_serializer_class(self):
        if self.request.method == 'POST':
            return my_serializers.CreateProjectSerializer
        return my_serializers.ProjectListSerializer

    def get_queryset(self):
        return (
            Project.objects.filter(client=self.request.user)
            .select_related('category', 'client')
            .annotate(bid_count=Count('bids'))
            .order_by('-created_at')
        )

    @swagger_auto_schema(
        operation_summary="Create a project with milestones (Client only)",
        request_body=my_serializers.CreateProjectSerializer,
        responses={201: my_serializers.ProjectDetailSerializer(), 400: "Validation error"}
    )
    def post(self, request, *args, **kwargs):
        return super().post(request, *args, **kwargs)

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        self.perform_create(serializer)

        return Response({
            'detail': "Project created successfully.",
            'project': serializer.data
        }, status=status.HTTP_201_CREATED)


class BrowseProjectsAPIView(generics.ListAPIView):
    """
    Open projects for contractors, newest first.
    Filter with `category`, `location`, `search`, `min_budget`, `max_budget`.
    """
    serializer_class = my_serializers.ProjectListSerializer
    permission_classes = [IsAuthenticated, IsContractor]
    filter_backends = [DjangoFilterBackend]
    filterset_class = ProjectFilter

    def get_queryset(self):
        return (
            Project.objects.filter(status=Project.OPEN)
            .select_related('category', 'client')
            .annotate(bid_count=Count('bids'))
            .order_by('-created_at')
        )


class ListProjectAdminAPIView(generics.ListAPIView):
    serializer_class = my_serializers.ProjectListSerializer
    permission_classes = [IsAuthenticated, IsPlatformAdmin]
    filter_backends = [DjangoFilterBackend, OrderingFilter]
    filterset_class = ProjectFilter
    ordering_fields = ['created_at', 'budget', 'deadline']
    ordering = ['-created_at']

    def get_queryset(self):
        return Project.objects.select_related('category', 'client').annotate(bid_count=Count('bids'))


class RetrieveUpdateProjectAPIView(generics.RetrieveUpdateAPIView):
    """
    GET: Project with category, client, ordered milestones, visible bids and
    the `viewer_has_bid` / `can_bid` flags.
    PATCH/PUT: The owning client edits the project while it is open.
    """
    permission_classes = [IsAuthenticated]
    lookup_field = 'id'

    def get_queryset(self):
        return _project_detail_queryset()

    def get_serializer_class(self):
        if self.request.method in ('PUT', 'PATCH'):
            return my_serializers.UpdateProjectSerializer
        return my_serializers.ProjectDetailSerializer

    def get_permissions(self):
        if self.request.method in ('PUT', 'PATCH'):
            return [IsAuthenticated(), IsClient(), IsProjectOwner()]
        return super().get_permissions()

    @swagger_auto_schema(operation_summary="Retrieve a project")
    def get(self, request, *args, **kwargs):
        return super().get(request, *args, **kwargs)

    @swagger_auto_schema(operation_summary="Update an open project (owner only)")
    def patch(self, request, *args, **kwargs):
        return super().patch(request, *args, **kwargs)

    @swagger_auto_schema(operation_summary="Replace an open project's fields (owner only)")
    def put(self, request, *args, **kwargs):
        return super().put(request, *args, **kwargs)


class ProjectStatusAPIView(drf_views.APIView):
    """
    Moves a project along open -> closed, active -> completed, completed -> closed.
    """
    permission_classes = [IsAuthenticated, IsProjectOwnerOrAdmin]

    @swagger_auto_schema(
        operation_summary="Change a project's status (owner or admin)",
        request_body=my_serializers.ProjectStatusSerializer,
        responses={200: my_serializers.ProjectDetailSerializer(), 400: "Illegal transition"}
    )
    def post(self, request, id):
        project = get_object_or_404(Project, id=id)
        self.check_object_permissions(request, project)

        serializer = my_serializers.ProjectStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        services.change_project_status(project, serializer.validated_data['status'])

        project = _project_detail_queryset().get(pk=project.pk)
        return Response(my_serializers.ProjectDetailSerializer(project, context={'request': request}).data)


class ListCreateProjectBidsAPIView(generics.ListCreateAPIView):
    """
    GET: Bids on a project, newest first. Owning client and admins only.
    POST: A contractor bids on an open project.
    """
    permission_classes = [IsAuthenticated]

    def get_project(self):
        return get_object_or_404(Project, id=self.kwargs['project_id'])

    def get_permissions(self):
        if self.request.method == 'POST':
            return [IsAuthenticated(), IsContractor()]
        return [IsAuthenticated(), IsProjectOwnerOrAdmin()]

    def get_serializer_class(self):
        if self.request.method == 'POST':
            return my_serializers.CreateBidSerializer
        return my_serializers.BidSerializer

    def get_serializer_context(self):
        context = super().get_serializer_context()
        if self.request.method == 'POST':
            context['project'] = self.get_project()
        return context

    def get_queryset(self):
        project = self.get_project()
        self.check_object_permissions(self.request, project)
        return project.bids.select_related('contractor', 'project').order_by('-created_at')

    @swagger_auto_schema(
        operation_summary="Submit a bid on an open project (Contractor only)",
        request_body=my_serializers.CreateBidSerializer,
        responses={201: my_serializers.BidSerializer(), 400: "Validation error"}
    )
    def post(self, request, *args, **kwargs):
        return super().post(request, *args, **kwargs)

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        self.perform_create(serializer)

        return Response({
            'detail': "Bid submitted successfully.",
            'bid': serializer.data
        }, status=status.HTTP_201_CREATED)


class ListBidContractorAPIView(generics.ListAPIView):
    serializer_class = my_serializers.BidSerializer
    permission_classes = [IsAuthenticated, IsContractor]
    filterset_fields = ['status']

    def get_queryset(self):
        return Bid.objects.filter(contractor=self.request.user).select_related('project', 'contractor').order_by('-created_at')


class BidDecisionMixin:
    permission_classes = [IsAuthenticated, IsClient]

    def get_bid(self, request, id):
        return get_object_or_404(Bid.objects.select_related('project', 'contractor'), id=id, project__client=request.user)


class AcceptBidAPIView(BidDecisionMixin, drf_views.APIView):
    @swagger_auto_schema(
        operation_summary="Accept a bid and open a contract (owning client)",
        responses={200: my_serializers.ContractSerializer(), 400: "Bid or project not in an acceptable state"}
    )
    def post(self, request, id):
        bid = self.get_bid(request, id)
        contract = services.accept_bid(bid)

        return Response({
            'detail': "Bid accepted.",
            'contract': my_serializers.ContractSerializer(contract).data
        }, status=status.HTTP_200_OK)


class RejectBidAPIView(BidDecisionMixin, drf_views.APIView):
    @swagger_auto_schema(
        operation_summary="Reject a pending bid (owning client)",
        responses={200: my_serializers.BidSerializer(), 400: "Bid is not pending"}
    )
    def post(self, request, id):
        bid = services.reject_bid(self.get_bid(request, id))

        return Response({
            'detail': "Bid rejected.",
            'bid': my_serializers.BidSerializer(bid).data
        }, status=status.HTTP_200_OK)


class MilestoneActionMixin:
    def get_milestone(self, id):
        return get_object_or_404(Milestone.objects.select_related('project', 'project__client'), id=id)


class SubmitMilestoneAPIView(MilestoneActionMixin, drf_views.APIView):
    permission_classes = [IsAuthenticated, IsContractor]

    @swagger_auto_schema(
        operation_summary="Submit a milestone for review (contracted contractor)",
        responses={200: my_serializers.MilestoneSerializer(), 400: "Milestone cannot be submitted"}
    )
    def post(self, request, id):
        milestone = services.submit_milestone(self.get_milestone(id), request.user)
        return Response(my_serializers.MilestoneSerializer(milestone).data)


class ApproveMilestoneAPIView(MilestoneActionMixin, drf_views.APIView):
    permission_classes = [IsAuthenticated, IsClient, IsProjectOwner]

    @swagger_auto_schema(
        operation_summary="Approve and pay a submitted milestone (owning client)",
        responses={200: my_serializers.MilestoneSerializer(), 400: "Milestone is not submitted"}
    )
    def post(self, request, id):
        milestone = self.get_milestone(id)
        self.check_object_permissions(request, milestone.project)

        milestone = services.approve_milestone(milestone)
        return Response(my_serializers.MilestoneSerializer(milestone).data)


class RejectMilestoneAPIView(MilestoneActionMixin, drf_views.APIView):
    permission_classes = [IsAuthenticated, IsClient, IsProjectOwner]

    @swagger_auto_schema(
        operation_summary="Reject a submitted milestone with a reason (owning client)",
        request_body=my_serializers.RejectMilestoneSerializer,
        responses={200: my_serializers.MilestoneSerializer(), 400: "Milestone is not submitted"}
    )
    def post(self, request, id):
        milestone = self.get_milestone(id)
        self.check_object_permissions(request, milestone.project)

        serializer = my_serializers.RejectMilestoneSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        milestone = services.reject_milestone(milestone, serializer.validated_data['rejected_reason'])
        return Response(my_serializers.MilestoneSerializer(milestone).data)


class ListContractAPIView(generics.ListAPIView):
    """
    Contracts of the caller as client or contractor; admins see all.
    Filter with `?status=ongoing|completed|terminated`.
    """
    serializer_class = my_serializers.ContractSerializer
    permission_classes = [IsAuthenticated]
    filterset_fields = ['status']

    def get_queryset(self):
        user = self.request.user
        queryset = Contract.objects.select_related('project', 'project__client', 'contractor').order_by('-created_at')
        if resolve_role(user) == Role.ADMIN:
            return queryset
        return queryset.filter(Q(project__client=user) | Q(contractor=user))


class RetrieveContractAPIView(generics.RetrieveAPIView):
    serializer_class = my_serializers.ContractDetailSerializer
    permission_classes = [IsAuthenticated, IsContractPartyOrAdmin]
    queryset = Contract.objects.select_related('project', 'project__client', 'contractor').prefetch_related('project__milestones')
    lookup_field = 'id'


class CreateReviewAPIView(generics.CreateAPIView):
    serializer_class = my_serializers.CreateReviewSerializer
    permission_classes = [IsAuthenticated]

    def get_serializer_context(self):
        context = super().get_serializer_context()
        context['project'] = get_object_or_404(Project.objects.select_related('client'), id=self.kwargs['project_id'])
        return context


class ListUserReviewsAPIView(drf_views.APIView):
    permission_classes = [IsAuthenticated]

    @swagger_auto_schema(operation_summary="Reviews received by a user, with the average rating")
    def get(self, request, user_id):
        reviews = Review.objects.filter(reviewee_id=user_id).select_related('reviewer', 'project')
        average = reviews.aggregate(average=Avg('rating'))['average']

        return Response({
            'average_rating': round(average, 2) if average is not None else None,
            'count': len(reviews),
            'reviews': my_serializers.ReviewSerializer(reviews, many=True).data,
        })
