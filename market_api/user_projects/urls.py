from django.urls import path

from . import views as my_views

urlpatterns = [
    # Projects
    path('projects/', my_views.ListCreateProjectClientAPIView.as_view(), name='projects-list-create'),
    path('projects/browse/', my_views.BrowseProjectsAPIView.as_view(), name='projects-browse'),
    path('projects/all/', my_views.ListProjectAdminAPIView.as_view(), name='projects-list-admin'),
    path('projects/<int:id>/', my_views.RetrieveUpdateProjectAPIView.as_view(), name='projects-detail'),
    path('projects/<int:id>/status/', my_views.ProjectStatusAPIView.as_view(), name='projects-status'),

    # Bids
    path('projects/<int:project_id>/bids/', my_views.ListCreateProjectBidsAPIView.as_view(), name='project-bids'),
    path('bids/me/', my_views.ListBidContractorAPIView.as_view(), name='bids-mine'),
    path('bids/<int:id>/accept/', my_views.AcceptBidAPIView.as_view(), name='bids-accept'),
    path('bids/<int:id>/reject/', my_views.RejectBidAPIView.as_view(), name='bids-reject'),

    # Milestones
    path('milestones/<int:id>/submit/', my_views.SubmitMilestoneAPIView.as_view(), name='milestones-submit'),
    path('milestones/<int:id>/approve/', my_views.ApproveMilestoneAPIView.as_view(), name='milestones-approve'),
    path('milestones/<int:id>/reject/', my_views.RejectMilestoneAPIView.as_view(), name='milestones-reject'),

    # Contracts
    path('contracts/', my_views.ListContractAPIView.as_view(), name='contracts-list'),
    path('contracts/<int:id>/', my_views.RetrieveContractAPIView.as_view(), name='contracts-detail'),

    # Reviews
    path('projects/<int:project_id>/reviews/', my_views.CreateReviewAPIView.as_view(), name='project-reviews-create'),
    path('users/<int:user_id>/reviews/', my_views.ListUserReviewsAPIView.as_view(), name='user-reviews'),
]
