"""
Quiz Endpoints - start and submit quiz attempts
Uses Quiz/Question/QuestionOption from trainer and QuizAttempt/QuizAttemptAnswer tables
"""

import logging
import traceback

from django.conf import settings
from django.db.models import Max
from django.utils import timezone
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from trainer.models import Quiz
from trainee.exceptions import QuizStartError, QuizSubmissionError
from trainee.models import Enrollment, QuizAttempt
from trainee.serializers.quiz import QuizSubmitSerializer, delivered_questions
from trainee.services.auth import get_request_profile, unauthorized_response
from trainee.services.quiz_submission import QuizSubmissionService

logger = logging.getLogger(__name__)


def start_quiz_attempt_for(user, quiz_id):
    """
    Create the next attempt of a quiz for an enrolled learner.
    Raises QuizStartError with the HTTP status to report.
    """
    try:
        quiz = Quiz.objects.select_related('course').get(id=quiz_id)
    except Quiz.DoesNotExist:
        raise QuizStartError('Quiz not found', status.HTTP_404_NOT_FOUND)

    enrolled = Enrollment.objects.filter(
        user=user,
        course=quiz.course,
        status__in=Enrollment.OPEN_STATUSES,
    ).exists()
    if not enrolled:
        raise QuizStartError('Not enrolled in this course', status.HTTP_403_FORBIDDEN)

    last_attempt_no = QuizAttempt.objects.filter(quiz=quiz, user=user).aggregate(
        last=Max('attempt_no')
    )['last'] or 0
    attempt_no = last_attempt_no + 1

    if attempt_no > quiz.attempts_allowed:
        raise QuizStartError('Maximum attempts reached', status.HTTP_400_BAD_REQUEST)

    attempt = QuizAttempt.objects.create(
        quiz=quiz,
        user=user,
        attempt_no=attempt_no,
        score=0,
        passed=False,
        started_at=timezone.now(),
    )
    logger.info(f"[START_QUIZ] Created attempt {attempt.id} ({attempt_no}/{quiz.attempts_allowed}) for {user.email}")
    return quiz, attempt


@api_view(['POST'])
@permission_classes([AllowAny])
def start_quiz(request, quiz_id):
    """
    POST /api/trainee/quizzes/{quiz_id}/start/
    Start a new attempt; questions are returned without their correct options
    """
    user = get_request_profile(request)
    if user is None:
        return unauthorized_response()

    try:
        quiz, attempt = start_quiz_attempt_for(user, quiz_id)
    except QuizStartError as e:
        return Response({'error': str(e)}, status=e.status_code)
    except Exception as e:
        logger.exception(f"[START_QUIZ] Error: {str(e)}")
        return Response({'error': 'Internal server error'}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    return Response({
        'attempt': {
            'id': str(attempt.id),
            'quizId': str(quiz.id),
            'attemptNo': attempt.attempt_no,
            'startedAt': attempt.started_at.isoformat(),
            'timeLimitSec': quiz.time_limit_sec,
        },
        'questions': delivered_questions(quiz),
    }, status=status.HTTP_200_OK)


@api_view(['POST'])
@permission_classes([AllowAny])
def submit_quiz(request, quiz_id):
    """
    POST /api/trainee/quizzes/{quiz_id}/submit/
    Body: {
        "attemptId": "...",
        "answers": [{"questionId": "...", "optionIds": ["..."], "responseText": "..."}]
    }
    """
    user = get_request_profile(request)
    if user is None:
        return unauthorized_response()

    logger.info(f"[SUBMIT_QUIZ] Quiz {quiz_id} submission from {user.email}")

    serializer = QuizSubmitSerializer(data=request.data)
    if not serializer.is_valid():
        logger.error(f"[SUBMIT_QUIZ] Validation error: {serializer.errors}")
        return Response(
            {'error': 'Invalid data', 'details': serializer.errors},
            status=status.HTTP_400_BAD_REQUEST
        )

    data = serializer.validated_data
    try:
        result = QuizSubmissionService().submit(
            data['attemptId'],
            user,
            quiz_id,
            data.get('answers', []),
            request=request,
        )
    except QuizSubmissionError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
    except Exception as e:
        logger.exception(f"[SUBMIT_QUIZ] Submit quiz error: {str(e)}")
        return Response(
            {
                'error': str(e) or 'Internal server error',
                'details': traceback.format_exc() if settings.DEBUG else None,
            },
            status=status.HTTP_500_INTERNAL_SERVER_ERROR
        )

    return Response(result.to_response(), status=status.HTTP_200_OK)
