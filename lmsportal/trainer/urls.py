"""
Trainer app URL configuration - authoring routes and login
"""
from django.urls import path, include
from rest_framework.routers import DefaultRouter

from .views import (
    CourseViewSet, ModuleViewSet, LessonViewSet, QuizViewSet,
    QuestionViewSet, EnrollmentViewSet, login
)

# DRF router for standard REST endpoints
router = DefaultRouter()
router.register(r'courses', CourseViewSet, basename='course')
router.register(r'modules', ModuleViewSet, basename='module')
router.register(r'lessons', LessonViewSet, basename='lesson')
router.register(r'quizzes', QuizViewSet, basename='quiz')
router.register(r'questions', QuestionViewSet, basename='question')
router.register(r'enrollments', EnrollmentViewSet, basename='enrollment')

urlpatterns = [
    path('auth/login/', login, name='login'),
    path('', include(router.urls)),
]
