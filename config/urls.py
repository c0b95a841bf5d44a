"""URL configuration for the Fintrack API.

The `urlpatterns` list routes URLs to views. It includes the Django admin,
each app's API routes, the OpenAPI schema and the Prometheus exporter.
"""
from django.contrib import admin  # type: ignore
from django.urls import path, include  # type: ignore
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView

# API versioning. v1 is our initial version; future versions can be added here.

urlpatterns = [
    path('admin/', admin.site.urls),
    # Application URLs
    path('api/v1/auth/', include('apps.users.urls')),
    path('api/v1/payments/', include('apps.payments.urls')),
    path('api/v1/subscriptions/', include('apps.subscriptions.urls')),
    # API schema and docs
    path('api/schema/', SpectacularAPIView.as_view(), name='schema'),
    path('api/docs/', SpectacularSwaggerView.as_view(url_name='schema'), name='swagger-ui'),
    # Prometheus /metrics
    path('', include('django_prometheus.urls')),
]
