from rest_framework import generics, status, views as drf_views
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from drf_yasg.utils import swagger_auto_schema

from accounts.permissions import IsContractor
from . import serializers as my_serializers
from .models import Category, Skill


class ListCategoryAPIView(generics.ListAPIView):
    """
    Lists service categories ordered by name.
    """
    serializer_class = my_serializers.CategorySerializer
    permission_classes = [IsAuthenticated]
    queryset = Category.objects.all()
    pagination_class = None


class ListSkillAPIView(generics.ListAPIView):
    """
    Lists skills, optionally narrowed with `?category=<id>`.
    """
    serializer_class = my_serializers.SkillSerializer
    permission_classes = [IsAuthenticated]
    filterset_fields = ['category']
    pagination_class = None

    def get_queryset(self):
        return Skill.objects.select_related('category')


class ContractorSkillAPIView(drf_views.APIView):
    permission_classes = [IsAuthenticated, IsContractor]

    @swagger_auto_schema(
        operation_summary="List the current contractor's skills",
        responses={200: my_serializers.SkillSerializer(many=True)}
    )
    def get(self, request):
        skills = Skill.objects.filter(contractors__contractor=request.user).select_related('category')
        return Response(my_serializers.SkillSerializer(skills, many=True).data)

    @swagger_auto_schema(
        operation_summary="Replace the current contractor's skills",
        request_body=my_serializers.ContractorSkillSetSerializer,
        responses={200: my_serializers.SkillSerializer(many=True), 400: "Unknown skill"}
    )
    def put(self, request):
        serializer = my_serializers.ContractorSkillSetSerializer(data=request.data, context={'request': request})
        serializer.is_valid(raise_exception=True)
        skills = serializer.save().select_related('category')

        return Response(my_serializers.SkillSerializer(skills, many=True).data, status=status.HTTP_200_OK)
