from django.contrib import admin

from .models import CustomUser


@admin.register(CustomUser)
class CustomUserAdmin(admin.ModelAdmin):
    ordering = ('-created_at',)
    list_display = ('email', 'first_name', 'last_name', 'user_type', 'verified', 'is_active')
    list_filter = ('user_type', 'verified', 'is_active', 'is_staff')
    search_fields = ('email', 'first_name', 'last_name', 'company_name')
    exclude = ('password',)
    readonly_fields = ('last_login', 'created_at', 'updated_at')
