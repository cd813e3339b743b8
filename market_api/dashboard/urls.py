from django.urls import path

from . import views as my_views

urlpatterns = [
    path('', my_views.DashboardAPIView.as_view(), name='dashboard'),
]
