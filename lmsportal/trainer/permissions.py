"""
Trainer module permissions - Role-based access control for authoring operations
"""
from rest_framework import permissions

from .auth_backend import profile_for_user


def can_manage_course(profile, course):
    """Admins manage every course, trainers only the ones they created"""
    if profile is None:
        return False
    if profile.primary_role == 'admin':
        return True
    return profile.primary_role == 'trainer' and course.created_by_id == profile.id


class IsTrainerOrAdmin(permissions.BasePermission):
    """Only trainers and admins"""
    def has_permission(self, request, view):
        profile = profile_for_user(request.user)
        return profile is not None and profile.primary_role in ['trainer', 'admin']


class CanManageCourse(IsTrainerOrAdmin):
    """
    Trainer can only change courses they created, and the modules, lessons,
    quizzes, questions and enrollments that belong to them.
    Admin can manage any course.
    """
    def has_object_permission(self, request, view, obj):
        if request.method in permissions.SAFE_METHODS:
            return True
        course = view.owning_course(obj) if hasattr(view, 'owning_course') else obj
        return can_manage_course(profile_for_user(request.user), course)
