from django.db import models
from django.contrib.auth import get_user_model

User = get_user_model()


class Category(models.Model):
    name = models.CharField(max_length=100, unique=True)
    description = models.TextField(blank=True)
    icon = models.CharField(max_length=100, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['name']
        verbose_name_plural = 'categories'

    def __str__(self):
        return self.name


class Skill(models.Model):
    name = models.CharField(max_length=100)
    category = models.ForeignKey(Category, on_delete=models.CASCADE, related_name='skills')

    class Meta:
        ordering = ['name']
        unique_together = ['name', 'category']

    def __str__(self):
        return self.name


class ContractorSkill(models.Model):
    contractor = models.ForeignKey(User, on_delete=models.CASCADE, related_name='contractor_skills')
    skill = models.ForeignKey(Skill, on_delete=models.CASCADE, related_name='contractors')
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        unique_together = ['contractor', 'skill']

    def __str__(self):
        return f"{self.contractor} - {self.skill}"
