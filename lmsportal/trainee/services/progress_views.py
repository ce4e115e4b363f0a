"""
Progress tracking endpoints for trainee
Lesson completion feeds the course completion check of quiz submissions
"""
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework import status
from django.db import transaction
from django.utils import timezone
import logging

from trainer.models import Lesson
from trainee.models import Enrollment, Progress
from trainee.services.auth import get_request_profile, unauthorized_response

logger = logging.getLogger(__name__)


@api_view(['POST'])
@permission_classes([AllowAny])
@transaction.atomic
def complete_lesson(request, lesson_id):
    """
    POST /api/trainee/lessons/{lesson_id}/complete/
    Mark a lesson completed for the learner; an assigned enrollment becomes started
    """
    user = get_request_profile(request)
    if user is None:
        return unauthorized_response()

    try:
        lesson = Lesson.objects.select_related('module__course').get(id=lesson_id)
    except Lesson.DoesNotExist:
        return Response({'error': 'Lesson not found'}, status=status.HTTP_404_NOT_FOUND)

    course = lesson.module.course
    enrollment = Enrollment.objects.filter(user=user, course=course).first()
    if enrollment is None:
        return Response({'error': 'Not enrolled in this course'}, status=status.HTTP_403_FORBIDDEN)

    now = timezone.now()
    Progress.objects.update_or_create(
        user=user,
        lesson=lesson,
        defaults={
            'status': Progress.COMPLETED,
            'last_viewed_at': now,
        }
    )

    if enrollment.status == Enrollment.ASSIGNED:
        enrollment.status = Enrollment.STARTED
        enrollment.started_at = now
        enrollment.save(update_fields=['status', 'started_at'])

    logger.info(f"[PROGRESS] {user.email} completed lesson {lesson.title} in {course.title}")
    return Response({'ok': True}, status=status.HTTP_200_OK)


@api_view(['GET'])
@permission_classes([AllowAny])
def course_progress(request, course_id):
    """
    GET /api/trainee/courses/{course_id}/progress/
    Lesson completion summary for the learner
    """
    user = get_request_profile(request)
    if user is None:
        return unauthorized_response()

    enrollment = Enrollment.objects.select_related('course').filter(user=user, course_id=course_id).first()
    if enrollment is None:
        return Response({'error': 'Not enrolled in this course'}, status=status.HTTP_403_FORBIDDEN)

    lessons = list(enrollment.course.all_lessons().values_list('id', flat=True))
    completed = Progress.objects.filter(
        user=user, lesson_id__in=lessons, status=Progress.COMPLETED
    ).values_list('lesson_id', flat=True)
    completed_ids = {str(lesson_id) for lesson_id in completed}

    return Response({
        'courseId': str(enrollment.course_id),
        'status': enrollment.status,
        'totalLessons': len(lessons),
        'completedLessons': len(completed_ids),
        'completedLessonIds': sorted(completed_ids),
        'certificateId': str(enrollment.certificate_id) if enrollment.certificate_id else None,
    }, status=status.HTTP_200_OK)
