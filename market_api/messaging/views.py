from rest_framework import generics, views as drf_views
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from django.contrib.auth import get_user_model
from django.shortcuts import get_object_or_404
from drf_yasg import openapi
from drf_yasg.utils import swagger_auto_schema

from accounts.serializers import UserSummarySerializer
from . import serializers as my_serializers
from . import services

User = get_user_model()


class ContactListAPIView(drf_views.APIView):
    permission_classes = [IsAuthenticated]

    @swagger_auto_schema(
        operation_summary="Conversations of the current user with unread counts",
        responses={200: my_serializers.ContactSerializer(many=True)}
    )
    def get(self, request):
        contacts = services.list_contacts(request.user)
        return Response(my_serializers.ContactSerializer(contacts, many=True).data)


class ThreadAPIView(generics.ListAPIView):
    """
    Messages between the current user and `user_id`, oldest first.
    """
    serializer_class = my_serializers.MessageSerializer
    permission_classes = [IsAuthenticated]

    def get_queryset(self):
        other = get_object_or_404(User, pk=self.kwargs['user_id'])
        return services.thread(self.request.user, other.pk)


class MarkThreadReadAPIView(drf_views.APIView):
    permission_classes = [IsAuthenticated]

    @swagger_auto_schema(
        operation_summary="Mark every message from a user as read",
        responses={200: openapi.Response("Number of messages updated")}
    )
    def post(self, request, user_id):
        other = get_object_or_404(User, pk=user_id)
        updated = services.mark_thread_read(request.user, other.pk)
        return Response({'updated': updated})


class SendMessageAPIView(generics.CreateAPIView):
    serializer_class = my_serializers.SendMessageSerializer
    permission_classes = [IsAuthenticated]
    parser_classes = [MultiPartParser, FormParser, JSONParser]

    @swagger_auto_schema(
        operation_summary="Send a message with optional attachment",
        responses={201: my_serializers.MessageSerializer(), 400: "Validation error"}
    )
    def post(self, request, *args, **kwargs):
        return super().post(request, *args, **kwargs)


class SearchUsersAPIView(drf_views.APIView):
    permission_classes = [IsAuthenticated]

    @swagger_auto_schema(
        operation_summary="Find users to message by name, company or email",
        manual_parameters=[openapi.Parameter('q', openapi.IN_QUERY, type=openapi.TYPE_STRING, required=True)],
        responses={200: UserSummarySerializer(many=True)}
    )
    def get(self, request):
        users = services.search_users(request.user, request.query_params.get('q'))
        return Response(UserSummarySerializer(users, many=True).data)
