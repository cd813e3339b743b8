from django.contrib import admin

from .models import Dispute


@admin.register(Dispute)
class DisputeAdmin(admin.ModelAdmin):
    list_display = ('id', 'contract', 'raised_by', 'status', 'resolved_by', 'created_at')
    list_filter = ('status',)
    search_fields = ('reason', 'raised_by__email', 'contract__project__title')
