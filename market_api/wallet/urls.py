from django.urls import path

from . import views as my_views

urlpatterns = [
    path('balance/', my_views.BalanceAPIView.as_view(), name='wallet-balance'),
    path('transactions/', my_views.ListTransactionAPIView.as_view(), name='wallet-transactions'),
    path('recharge/', my_views.RechargeAPIView.as_view(), name='wallet-recharge'),
    path('withdrawals/', my_views.ListCreateWithdrawalAPIView.as_view(), name='wallet-withdrawals'),
    path('admin/deposits/', my_views.AdminListDepositAPIView.as_view(), name='wallet-admin-deposits'),
    path('admin/deposits/<int:id>/', my_views.AdminReviewDepositAPIView.as_view(), name='wallet-admin-deposit-review'),
    path('admin/withdrawals/', my_views.AdminListWithdrawalAPIView.as_view(), name='wallet-admin-withdrawals'),
    path('admin/withdrawals/<int:id>/', my_views.AdminReviewWithdrawalAPIView.as_view(), name='wallet-admin-withdrawal-review'),
]
