"""
URL Configuration for Trainee API
Handles all trainee-facing endpoints for the LMS
"""
from django.urls import path

from trainee.services.quiz import start_quiz, submit_quiz
from trainee.services.progress_views import complete_lesson, course_progress
from trainee.services.certificate_views import (
    my_certificates,
    download_certificate,
    verify_certificate,
)
from trainee.services.notification_views import (
    list_notifications,
    mark_notification_read,
    mark_all_notifications_read,
    notification_preferences,
)

app_name = 'trainee'

urlpatterns = [
    # Quizzes
    path('quizzes/<uuid:quiz_id>/start/', start_quiz, name='quiz-start'),
    path('quizzes/<uuid:quiz_id>/submit/', submit_quiz, name='quiz-submit'),

    # Progress
    path('lessons/<uuid:lesson_id>/complete/', complete_lesson, name='lesson-complete'),
    path('courses/<uuid:course_id>/progress/', course_progress, name='course-progress'),

    # Certificates
    path('certificates/', my_certificates, name='certificates'),
    path('certificates/verify/<str:number>/', verify_certificate, name='certificate-verify'),
    path('certificates/<uuid:certificate_id>/download/', download_certificate, name='certificate-download'),

    # Notifications
    path('notifications/', list_notifications, name='notifications'),
    path('notifications/read-all/', mark_all_notifications_read, name='notifications-read-all'),
    path('notifications/preferences/', notification_preferences, name='notification-preferences'),
    path('notifications/<uuid:notification_id>/read/', mark_notification_read, name='notification-read'),
]
