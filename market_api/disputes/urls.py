from django.urls import path

from . import views

urlpatterns = [
    path('', views.ListCreateDisputeAPIView.as_view(), name='disputes-list-create'),
    path('contracts/', views.DisputableContractsAPIView.as_view(), name='disputes-contracts'),
    path('<int:id>/', views.RetrieveUpdateDisputeAPIView.as_view(), name='disputes-detail'),
    path('<int:id>/resolve/', views.ResolveDisputeAPIView.as_view(), name='disputes-resolve'),
]
