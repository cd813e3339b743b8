from django.urls import path

from . import views as my_views

urlpatterns = [
    path('', my_views.SendMessageAPIView.as_view(), name='messages-send'),
    path('contacts/', my_views.ContactListAPIView.as_view(), name='messages-contacts'),
    path('users/search/', my_views.SearchUsersAPIView.as_view(), name='messages-user-search'),
    path('threads/<int:user_id>/', my_views.ThreadAPIView.as_view(), name='messages-thread'),
    path('threads/<int:user_id>/read/', my_views.MarkThreadReadAPIView.as_view(), name='messages-thread-read'),
]
