"""
Trainer app views - login and course authoring ViewSets
"""
import logging

from django.contrib.auth import authenticate
from django.db import transaction
from django.utils import timezone
from django.views.decorators.csrf import csrf_exempt
from rest_framework import viewsets, status
from rest_framework.authtoken.models import Token
from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import PermissionDenied
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from .auth_backend import profile_for_user
from .models import Course, Module, Lesson, Quiz, Question
from .permissions import CanManageCourse, can_manage_course
from .serializers import (
    ProfileSerializer, CourseSerializer, ModuleSerializer, LessonSerializer,
    QuizSerializer, QuestionSerializer, EnrollmentSerializer
)
from trainee.models import Enrollment
from trainee.services.audit import AuditService
from trainee.services.notifications import NotificationService

logger = logging.getLogger(__name__)

COURSE_AUDIT_FIELDS = ('title', 'description', 'status', 'pass_mark')


# ============ Authentication Endpoints ============

@csrf_exempt
@api_view(['POST'])
@permission_classes([AllowAny])
def login(request):
    """Login with email and password - returns token and user profile"""
    email = request.data.get('email') or request.data.get('username')
    password = request.data.get('password')

    if not email or not password:
        return Response({'error': 'email and password are required'}, status=status.HTTP_400_BAD_REQUEST)

    django_user = authenticate(request, username=email, password=password)
    profile = profile_for_user(django_user)
    if profile is None:
        logger.warning(f"[LOGIN] Failed login for {email}")
        return Response({'error': 'Invalid email or password'}, status=status.HTTP_400_BAD_REQUEST)

    token, _ = Token.objects.get_or_create(user=django_user)

    profile.last_login = timezone.now()
    profile.save(update_fields=['last_login'])
    AuditService.log(profile, 'login', 'user', profile.id, request=request)

    logger.info(f"[LOGIN] {profile.email} logged in")
    return Response({'token': token.key, 'user': ProfileSerializer(profile).data})


# ============ Authoring ViewSets ============

class AuthoringViewSet(viewsets.ModelViewSet):
    """
    Writes are limited to the course owner or an admin.
    course_path is the attribute chain from an object to its course.
    """
    permission_classes = [CanManageCourse]
    course_path = 'course'

    @property
    def profile(self):
        return profile_for_user(self.request.user)

    def owning_course(self, obj):
        for attr in self.course_path.split('.'):
            obj = getattr(obj, attr)
        return obj

    def check_target_course(self, serializer):
        """Reject creating or moving an object into a course the caller may not manage"""
        parent_field, _, rest = self.course_path.partition('.')
        target = serializer.validated_data.get(parent_field)
        if target is None:
            return
        for attr in filter(None, rest.split('.')):
            target = getattr(target, attr)
        if not can_manage_course(self.profile, target):
            logger.warning(f"[AUTHORING] {self.profile.email} denied write on course {target.id}")
            raise PermissionDenied('You can only change courses you created')

    def perform_create(self, serializer):
        self.check_target_course(serializer)
        serializer.save()

    def perform_update(self, serializer):
        self.check_target_course(serializer)
        serializer.save()


class CourseViewSet(AuthoringViewSet):
    queryset = Course.objects.select_related('created_by')
    serializer_class = CourseSerializer

    def owning_course(self, obj):
        return obj

    @staticmethod
    def _audit_snapshot(course):
        return {field: getattr(course, field) for field in COURSE_AUDIT_FIELDS}

    def perform_create(self, serializer):
        course = serializer.save(created_by=self.profile)
        AuditService.log(
            self.profile, 'course_create', 'course', course.id,
            request=self.request, details={'title': course.title},
        )
        logger.info(f"[COURSE] Created {course.title} by {self.profile.email}")

    def perform_update(self, serializer):
        before = self._audit_snapshot(serializer.instance)
        course = serializer.save()
        changes = AuditService.changed_fields(before, self._audit_snapshot(course))
        if changes:
            AuditService.log(
                self.profile, 'course_update', 'course', course.id,
                request=self.request, details={'changes': changes},
            )

    def perform_destroy(self, instance):
        AuditService.log(
            self.profile, 'course_delete', 'course', instance.id,
            request=self.request, details={'title': instance.title},
        )
        logger.info(f"[COURSE] Deleted {instance.title} by {self.profile.email}")
        instance.delete()


class ModuleViewSet(AuthoringViewSet):
    serializer_class = ModuleSerializer

    def get_queryset(self):
        qs = Module.objects.select_related('course')
        course_id = self.request.query_params.get('course')
        if course_id:
            qs = qs.filter(course_id=course_id)
        return qs


class LessonViewSet(AuthoringViewSet):
    serializer_class = LessonSerializer
    course_path = 'module.course'

    def get_queryset(self):
        qs = Lesson.objects.select_related('module__course')
        module_id = self.request.query_params.get('module')
        if module_id:
            qs = qs.filter(module_id=module_id)
        return qs


class QuizViewSet(AuthoringViewSet):
    serializer_class = QuizSerializer

    def get_queryset(self):
        qs = Quiz.objects.select_related('course').prefetch_related('questions__options')
        course_id = self.request.query_params.get('course')
        if course_id:
            qs = qs.filter(course_id=course_id)
        return qs


class QuestionViewSet(AuthoringViewSet):
    serializer_class = QuestionSerializer
    course_path = 'quiz.course'

    def get_queryset(self):
        qs = Question.objects.select_related('quiz__course').prefetch_related('options')
        quiz_id = self.request.query_params.get('quiz')
        if quiz_id:
            qs = qs.filter(quiz_id=quiz_id)
        return qs


class EnrollmentViewSet(AuthoringViewSet):
    serializer_class = EnrollmentSerializer

    def get_queryset(self):
        qs = Enrollment.objects.select_related('course', 'user')
        course_id = self.request.query_params.get('course')
        if course_id:
            qs = qs.filter(course_id=course_id)
        return qs

    def perform_create(self, serializer):
        self.check_target_course(serializer)
        with transaction.atomic():
            enrollment = serializer.save(assigned_by=self.profile)
            AuditService.log(
                self.profile, 'enrollment_create', 'enrollment', enrollment.id,
                request=self.request,
                details={'courseId': str(enrollment.course_id), 'userId': str(enrollment.user_id)},
            )

        logger.info(f"[ENROLLMENT] {enrollment.user.email} assigned to {enrollment.course.title}")
        try:
            NotificationService.notify_assignment_created(
                enrollment.user, enrollment.course.title, due_at=enrollment.due_at
            )
        except Exception as e:
            logger.error(f"[ENROLLMENT] Error sending assignment notification: {str(e)}")
