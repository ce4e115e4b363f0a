"""
Quiz Submission Service
Scores a learner's quiz attempt, records per-question answers and, when the attempt
passes and every lesson of the course is complete, completes the enrollment, issues
a certificate and notifies the learner.

All database writes of a submission happen in one transaction. Notifications are
dispatched after it commits and their failures never fail the submission.
"""

import logging
from dataclasses import dataclass, field

from django.core.exceptions import ValidationError
from django.db import transaction
from django.utils import timezone

from trainer.models import Question
from trainee.exceptions import (
    AttemptNotFound, AttemptOwnerMismatch, AttemptQuizMismatch, AttemptAlreadySubmitted
)
from trainee.models import Enrollment, Progress, QuizAttempt, QuizAttemptAnswer
from trainee.services.audit import AuditService
from trainee.services.certificates import CertificateService
from trainee.services.notifications import NotificationService
from trainee.services.scoring import round_half_up

logger = logging.getLogger(__name__)


def grade_question(question, answer):
    """
    Decide whether an answer to a question is correct.

    question: Question with prefetched options
    answer: submitted answer dict ({questionId, optionIds, responseText}) or None
    """
    if answer is None:
        return False

    option_ids = [str(option_id) for option_id in (answer.get('optionIds') or [])]

    if question.type in (Question.SINGLE_CHOICE, Question.TRUE_FALSE):
        correct = next((opt for opt in question.options.all() if opt.is_correct), None)
        selected = option_ids[0] if option_ids else None
        return selected is not None and correct is not None and selected == str(correct.id)

    if question.type == Question.MULTI_CHOICE:
        correct_ids = sorted(str(opt.id) for opt in question.options.all() if opt.is_correct)
        return len(correct_ids) > 0 and correct_ids == sorted(option_ids)

    # short_answer is not auto-graded
    return False


def course_fully_completed(user, course):
    """
    True when the course has at least one lesson and the learner has a completed
    Progress row for every one of them.
    """
    lesson_ids = set(course.all_lessons().values_list('id', flat=True))
    if not lesson_ids:
        return False

    completed_ids = set(
        Progress.objects.filter(
            user=user,
            lesson_id__in=lesson_ids,
            status=Progress.COMPLETED,
        ).values_list('lesson_id', flat=True)
    )
    return lesson_ids <= completed_ids


@dataclass
class SubmissionResult:
    attempt: QuizAttempt
    score: int
    max_score: int
    percentage: float
    passed: bool
    results: list = field(default_factory=list)
    certificate: object = None

    @property
    def rounded_percentage(self):
        return round_half_up(self.percentage)

    def to_response(self):
        return {
            'attempt': {
                'id': str(self.attempt.id),
                'score': self.score,
                'maxScore': self.max_score,
                'percentage': self.rounded_percentage,
                'passed': self.passed,
                'submittedAt': self.attempt.submitted_at.isoformat() if self.attempt.submitted_at else None,
            },
            'results': self.results,
        }


class QuizSubmissionService:
    """Grades a quiz attempt and runs the course completion cascade"""

    def __init__(self, certificates=None, notifications=None, audit=None):
        self.certificates = certificates or CertificateService
        self.notifications = notifications or NotificationService
        self.audit = audit or AuditService

    def load_attempt(self, attempt_id, user, quiz_id):
        """Fetch the attempt and check it may be submitted by this learner for this quiz"""
        try:
            attempt = QuizAttempt.objects.select_related('quiz', 'quiz__course').get(id=attempt_id)
        except (QuizAttempt.DoesNotExist, ValidationError, ValueError):
            logger.error(f"[SUBMIT_QUIZ] Attempt not found: {attempt_id}")
            raise AttemptNotFound()

        if str(attempt.user_id) != str(user.id):
            logger.error(f"[SUBMIT_QUIZ] User mismatch: {attempt.user_id} vs {user.id}")
            raise AttemptOwnerMismatch()

        if str(attempt.quiz_id) != str(quiz_id):
            logger.error(f"[SUBMIT_QUIZ] Quiz mismatch: {attempt.quiz_id} vs {quiz_id}")
            raise AttemptQuizMismatch()

        if attempt.is_submitted:
            raise AttemptAlreadySubmitted()

        return attempt

    def score(self, quiz, answers):
        """
        Grade every question of the quiz.

        Returns (score, max_score, graded) where graded holds
        (question, answer, is_correct) for each question.
        """
        questions = Question.objects.filter(quiz=quiz).prefetch_related('options').order_by('order')

        total_score = 0
        max_score = 0
        graded = []
        for question in questions:
            max_score += question.points
            answer = next((a for a in answers if str(a.get('questionId')) == str(question.id)), None)
            is_correct = grade_question(question, answer)
            if is_correct:
                total_score += question.points
            graded.append((question, answer, is_correct))

        return total_score, max_score, graded

    def submit(self, attempt_id, user, quiz_id, answers=None, request=None):
        """
        Submit a quiz attempt.

        Raises QuizSubmissionError subclasses for rejected submissions; nothing is
        written in that case.
        """
        answers = answers or []
        attempt = self.load_attempt(attempt_id, user, quiz_id)
        quiz = attempt.quiz
        course = quiz.course

        total_score, max_score, graded = self.score(quiz, answers)
        percentage = (total_score / max_score) * 100 if max_score > 0 else 0
        passed = percentage >= quiz.pass_mark

        submitted_at = timezone.now()
        certificate = None

        with transaction.atomic():
            claimed = QuizAttempt.objects.filter(id=attempt.id, submitted_at__isnull=True).update(
                score=total_score,
                submitted_at=submitted_at,
                passed=passed,
            )
            if claimed == 0:
                raise AttemptAlreadySubmitted()

            attempt.score = total_score
            attempt.submitted_at = submitted_at
            attempt.passed = passed

            QuizAttemptAnswer.objects.bulk_create([
                self._answer_row(attempt, question, answer, is_correct)
                for question, answer, is_correct in graded
            ])

            if passed:
                certificate = self._complete_course(user, course, total_score, max_score, request)

        logger.info(
            f"[SUBMIT_QUIZ] Attempt {attempt.id}: {total_score}/{max_score} "
            f"({percentage:.1f}%), pass mark {quiz.pass_mark}, passed={passed}"
        )

        if certificate is not None:
            self._send_completion_notifications(user, course, total_score, max_score, certificate)

        results = [
            {
                'questionId': str(question.id),
                'isCorrect': is_correct,
                'explanationHtml': question.explanation_html,
            }
            for question, answer, is_correct in graded
        ]

        return SubmissionResult(
            attempt=attempt,
            score=total_score,
            max_score=max_score,
            percentage=percentage,
            passed=passed,
            results=results,
            certificate=certificate,
        )

    @staticmethod
    def _answer_row(attempt, question, answer, is_correct):
        option_ids = [str(option_id) for option_id in ((answer or {}).get('optionIds') or [])]
        first_option = None
        if option_ids:
            first_option = next((opt for opt in question.options.all() if str(opt.id) == option_ids[0]), None)

        return QuizAttemptAnswer(
            attempt=attempt,
            question=question,
            option=first_option,
            selected_option_ids=option_ids,
            response_text=(answer or {}).get('responseText'),
            is_correct=is_correct,
        )

    def _complete_course(self, user, course, score, max_score, request):
        """
        Completion cascade for a passed attempt. Returns the issued certificate,
        or None when there is no open enrollment or lessons remain.
        """
        enrollment = Enrollment.objects.select_for_update().filter(
            user=user,
            course=course,
            status__in=Enrollment.OPEN_STATUSES,
        ).first()
        if enrollment is None:
            logger.info(f"[SUBMIT_QUIZ] No open enrollment for {user.email} in {course.title}, skipping completion")
            return None

        if not course_fully_completed(user, course):
            logger.info(f"[SUBMIT_QUIZ] Course {course.title} has unfinished lessons for {user.email}")
            return None

        certificate = self.certificates.generate(user, course, score, max_score)

        self.audit.log(
            user,
            'certificate_generate',
            'certificate',
            certificate.id,
            request=request,
            details={
                'certificateNumber': certificate.number,
                'courseId': str(course.id),
                'courseTitle': course.title,
                'score': score,
                'maxScore': max_score,
            },
        )

        enrollment.status = Enrollment.COMPLETED
        enrollment.completed_at = timezone.now()
        enrollment.certificate = certificate
        enrollment.save(update_fields=['status', 'completed_at', 'certificate'])

        logger.info(f"[SUBMIT_QUIZ] Enrollment {enrollment.id} completed with certificate {certificate.number}")
        return certificate

    def _send_completion_notifications(self, user, course, score, max_score, certificate):
        try:
            self.notifications.notify_course_completed(user, course.title, score, max_score)
            self.notifications.notify_certificate_issued(user, course.title, certificate.number)
        except Exception as e:
            logger.error(f"[SUBMIT_QUIZ] Error sending completion notifications: {str(e)}")
