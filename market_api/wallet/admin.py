from django.contrib import admin

from .models import WalletTransaction, WithdrawalRequest


@admin.register(WalletTransaction)
class WalletTransactionAdmin(admin.ModelAdmin):
    list_display = ('id', 'user', 'amount', 'type', 'status', 'reference', 'created_at')
    list_filter = ('type', 'status')
    search_fields = ('user__email', 'reference')


@admin.register(WithdrawalRequest)
class WithdrawalRequestAdmin(admin.ModelAdmin):
    list_display = ('id', 'contractor', 'amount', 'status', 'reviewed_by', 'created_at')
    list_filter = ('status',)
    search_fields = ('contractor__email',)
