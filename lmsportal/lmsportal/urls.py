"""
URL configuration for lmsportal project.

- /api/trainer/  course authoring, enrollments and login
- /api/trainee/  learner-facing quiz, progress, certificate and notification endpoints
- /api/health/   monitoring probes
"""
from django.contrib import admin
from django.urls import path, include
from django.conf import settings
from django.conf.urls.static import static
from trainer.health_check import health_check, readiness_check

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/trainer/', include('trainer.urls')),
    path('api/trainee/', include('trainee.urls')),
    path('api/health/', health_check, name='health-check'),
    path('api/health/ready/', readiness_check, name='readiness-check'),
]

# Serve media files in development
if settings.DEBUG:
    urlpatterns += static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT)
