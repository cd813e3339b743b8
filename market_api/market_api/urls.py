from django.contrib import admin
from django.conf import settings
from django.conf.urls.static import static
from django.http import JsonResponse
from django.urls import path, include
from rest_framework import permissions
from drf_yasg.views import get_schema_view
from drf_yasg import openapi

schema_view = get_schema_view(
    openapi.Info(
        title="Factory Market API",
        default_version='v1',
        description="API documentation for the industrial services marketplace",
    ),
    public=True,
    permission_classes=(permissions.AllowAny,),
)


def json_not_found(request, exception=None):
    return JsonResponse({'detail': "Not found."}, status=404)


handler404 = json_not_found

urlpatterns = [
    path('admin/', admin.site.urls),
    path('account/', include('accounts.urls')),
    path('categories/', include('categories.urls')),
    path('', include('user_projects.urls')),
    path('disputes/', include('disputes.urls')),
    path('messages/', include('messaging.urls')),
    path('wallet/', include('wallet.urls')),
    path('platform/', include('platform_admin.urls')),
    path('dashboard/', include('dashboard.urls')),

    # swagger/openapi routes
    path('swagger', schema_view.with_ui('swagger', cache_timeout=0), name='schema-swagger-ui'),
    path('redoc/', schema_view.with_ui('redoc', cache_timeout=0), name='schema-redoc'),
    path('openapi.json/', schema_view.without_ui(cache_timeout=0), name='schema-json'),
]

if settings.DEBUG:
    urlpatterns += static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT)
