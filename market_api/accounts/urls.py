from rest_framework_simplejwt.views import TokenRefreshView
from django.urls import path


from . import views as my_views


urlpatterns = [
    path('token/', my_views.MarketTokenObtainPairView.as_view(), name='token-obtain-pair'),
    path('token/refresh/', TokenRefreshView.as_view(), name='token-refresh'),
    path('token/blacklist/', my_views.LogoutAPIView.as_view(), name='logout'),
    path('register/', my_views.RegistrationAPIView.as_view(), name='register'),
    path('users/me/', my_views.UserProfileRetrieveUpdateAPIView.as_view(), name='profile-retrieve-update'),
    path('users/me/avatar/', my_views.AvatarUploadAPIView.as_view(), name='profile-avatar'),
    path('users/me/deactivate/', my_views.UserDeleteAPIView.as_view(), name='deactivate-account'),
    path('users/change-password/', my_views.ChangePasswordAPIView.as_view(), name='change-password'),
    path('users/reset-password/', my_views.PasswordResetRequestAPIView.as_view(), name='password-reset-request'),
    path('users/reset-password/confirm/', my_views.PasswordResetConfirmAPIView.as_view(), name='password-reset-confirm'),
    path('users/<int:id>/', my_views.PublicProfileAPIView.as_view(), name='public-profile'),
    path('admin/users/', my_views.UserListAPIView.as_view(), name='list-user'),
    path('admin/users/<int:id>/verify/', my_views.VerifyUserAPIView.as_view(), name='verify-user'),
    path('reactivate/request/', my_views.ReactivationRequestAPIView.as_view(), name='account-reactivate-request'),
    path('reactivate/confirm/', my_views.AccountReactivationConfirmAPIView.as_view(), name='account-reactivate-confirm'),
]
