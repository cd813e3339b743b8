from rest_framework import serializers
from django.db import transaction

from .models import Category, Skill, ContractorSkill


class CategorySerializer(serializers.ModelSerializer):
    class Meta:
        model = Category
        fields = ['id', 'name', 'description', 'icon']


class SkillSerializer(serializers.ModelSerializer):
    category = serializers.StringRelatedField()
    category_id = serializers.IntegerField(read_only=True)

    class Meta:
        model = Skill
        fields = ['id', 'name', 'category', 'category_id']


class ContractorSkillSetSerializer(serializers.Serializer):
    """
    Replaces the authenticated contractor's skill set.

    Fields:
        - skill_ids (required, may be empty to clear the set)
    """
    skill_ids = serializers.ListField(child=serializers.IntegerField(), allow_empty=True)

    def validate_skill_ids(self, value):
        ids = set(value)
        found = Skill.objects.filter(id__in=ids).count()
        if found != len(ids):
            raise serializers.ValidationError("One or more skills do not exist.")
        return sorted(ids)

    def save(self, **kwargs):
        contractor = self.context['request'].user
        skill_ids = self.validated_data['skill_ids']

        with transaction.atomic():
            ContractorSkill.objects.filter(contractor=contractor).delete()
            ContractorSkill.objects.bulk_create(
                ContractorSkill(contractor=contractor, skill_id=skill_id) for skill_id in skill_ids
            )

        return Skill.objects.filter(contractors__contractor=contractor)
