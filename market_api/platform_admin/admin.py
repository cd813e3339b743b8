from django.contrib import admin

from .models import PlatformFeeSettings, PlatformEarning


@admin.register(PlatformFeeSettings)
class PlatformFeeSettingsAdmin(admin.ModelAdmin):
    list_display = ('id', 'client_fee_percentage', 'contractor_fee_percentage', 'updated_by', 'updated_at')

    def has_add_permission(self, request):
        return not PlatformFeeSettings.objects.exists()


@admin.register(PlatformEarning)
class PlatformEarningAdmin(admin.ModelAdmin):
    list_display = ('id', 'project', 'milestone', 'client_fee_amount', 'contractor_fee_amount', 'total_platform_earning', 'created_at')
