from django.contrib import admin

from .models import Category, Skill, ContractorSkill


@admin.register(Category)
class CategoryAdmin(admin.ModelAdmin):
    list_display = ('id', 'name', 'icon', 'created_at')
    search_fields = ('name',)


@admin.register(Skill)
class SkillAdmin(admin.ModelAdmin):
    list_display = ('id', 'name', 'category')
    list_filter = ('category',)
    search_fields = ('name',)


@admin.register(ContractorSkill)
class ContractorSkillAdmin(admin.ModelAdmin):
    list_display = ('id', 'contractor', 'skill', 'created_at')
    search_fields = ('contractor__email', 'skill__name')
