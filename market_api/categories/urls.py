from django.urls import path

from . import views as my_views

urlpatterns = [
    path('', my_views.ListCategoryAPIView.as_view(), name='list-categories'),
    path('skills/', my_views.ListSkillAPIView.as_view(), name='list-skills'),
    path('skills/me/', my_views.ContractorSkillAPIView.as_view(), name='contractor-skills'),
]
