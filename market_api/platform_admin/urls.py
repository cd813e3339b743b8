from django.urls import path

from . import views as my_views

urlpatterns = [
    path('fees/', my_views.FeeSettingsAPIView.as_view(), name='platform-fees'),
    path('stats/', my_views.SystemStatsAPIView.as_view(), name='platform-stats'),
    path('stats/monthly/', my_views.MonthlyStatsAPIView.as_view(), name='platform-stats-monthly'),
    path('earnings/', my_views.ListPlatformEarningAPIView.as_view(), name='platform-earnings'),
]
