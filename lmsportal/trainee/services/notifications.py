"""
Notification Service - in-app notifications with optional e-mail copies.

Every notification is stored in the notifications table. E-mail is sent only when
LMS_EMAIL_NOTIFICATIONS is enabled and the learner has not opted out of the email channel.
"""
import logging
import smtplib

from django.conf import settings
from django.core.mail import EmailMultiAlternatives
from django.utils import timezone
from django.utils.html import escape, strip_tags

from trainee.models import Notification, NotificationPreference
from trainee.services.scoring import score_percentage

logger = logging.getLogger(__name__)


def _app_url(path):
    return f"{settings.LMS_BASE_URL}{path}"


def build_email_html(subject, body_html, action_url=None, action_text=None):
    """Minimal branded HTML wrapper used for all notification e-mails"""
    color = settings.LMS_BRAND_COLOR
    company = escape(settings.LMS_COMPANY_NAME)
    button = ''
    if action_url:
        button = (
            f'<p style="margin:24px 0"><a href="{escape(action_url)}" '
            f'style="background:{color};color:#fff;padding:10px 18px;border-radius:4px;text-decoration:none">'
            f'{escape(action_text or "Open")}</a></p>'
        )
    return (
        '<html><body style="font-family:Arial,sans-serif;color:#1f2937">'
        f'<h2 style="color:{color}">{escape(subject)}</h2>'
        f'{body_html}{button}'
        f'<p style="color:#6b7280;font-size:12px">{company}</p>'
        '</body></html>'
    )


class NotificationService:
    """Creates notifications and delivers their e-mail copies"""

    @staticmethod
    def is_email_configured():
        return bool(getattr(settings, 'LMS_EMAIL_NOTIFICATIONS', False))

    @staticmethod
    def is_opted_in(user, channel='email'):
        """Default to opted in if no preference exists"""
        preference = NotificationPreference.objects.filter(user=user, channel=channel).first()
        return preference is None or preference.opt_in

    @staticmethod
    def send_email(to, subject, html):
        """Send one HTML e-mail; returns True when the backend accepted it"""
        message = EmailMultiAlternatives(
            subject=subject,
            body=strip_tags(html),
            from_email=settings.DEFAULT_FROM_EMAIL,
            to=[to],
        )
        message.attach_alternative(html, 'text/html')
        try:
            return message.send() > 0
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"[NOTIFY] Failed to send e-mail to {to}: {str(e)}")
            return False

    @classmethod
    def create_notification(cls, user, notification_type, channel, body, subject=None, meta=None, send_at=None):
        """
        Store a notification; e-mail channel notifications are also mailed to the
        user when e-mail is configured and the user is opted in.
        """
        notification = Notification.objects.create(
            user=user,
            notification_type=notification_type,
            channel=channel,
            subject=subject,
            body=body,
            meta=meta or {},
            send_at=send_at,
            status='queued',
        )

        if channel == 'email' and cls.is_email_configured() and user.email and cls.is_opted_in(user):
            meta = meta or {}
            html = build_email_html(
                subject or 'Notification',
                escape(body).replace('\n', '<br>'),
                meta.get('actionUrl'),
                meta.get('actionText'),
            )
            sent = cls.send_email(user.email, subject or 'Notification', html)
            notification.status = 'sent' if sent else 'failed'
            notification.save(update_fields=['status'])

        return notification

    @classmethod
    def _email_copy(cls, user, subject, body_html, action_url, action_text):
        if not cls.is_email_configured() or not user.email or not cls.is_opted_in(user):
            return False
        html = build_email_html(subject, body_html, action_url, action_text)
        return cls.send_email(user.email, subject, html)

    @classmethod
    def notify_assignment_created(cls, user, course_title, due_at=None, course_url=None):
        """Create in-app notification for a new course assignment"""
        subject = f"New Course Assignment: {course_title}"
        body = f'You have been assigned to complete "{course_title}".'
        if due_at:
            body += f" This assignment is due on {due_at.date().isoformat()}."

        notification = cls.create_notification(
            user, 'assignment', 'in_app', body, subject=subject,
            meta={'courseTitle': course_title, 'dueAt': due_at.isoformat() if due_at else None, 'courseUrl': course_url},
        )

        due_html = f"<p>This assignment is due on <strong>{due_at.date().isoformat()}</strong>.</p>" if due_at else ''
        cls._email_copy(
            user, subject,
            f"<p>You have been assigned to complete the course <strong>{escape(course_title)}</strong>.</p>"
            f"{due_html}<p>Please log in to your learning dashboard to access the course.</p>",
            course_url or _app_url('/learn/dashboard'),
            'View Course',
        )
        return notification

    @classmethod
    def notify_course_completed(cls, user, course_title, score=None, max_score=None, certificate_url=None):
        """Create completion notification"""
        subject = f"Course Completed: {course_title}"
        has_score = score is not None and max_score is not None
        if has_score:
            body = (
                f'Congratulations! You have successfully completed "{course_title}" '
                f"with a score of {score}/{max_score} ({score_percentage(score, max_score)}%)."
            )
        else:
            body = f'Congratulations! You have successfully completed "{course_title}".'

        notification = cls.create_notification(
            user, 'completion', 'in_app', body, subject=subject,
            meta={'courseTitle': course_title, 'score': score, 'maxScore': max_score, 'certificateUrl': certificate_url},
        )

        score_html = (
            f"<p>You scored <strong>{score}/{max_score}</strong> ({score_percentage(score, max_score)}%).</p>"
            if has_score else ''
        )
        certificate_html = '<p>Your certificate is now available for download.</p>' if certificate_url else ''
        cls._email_copy(
            user, subject,
            f"<p>Congratulations! You have successfully completed the course <strong>{escape(course_title)}</strong>.</p>"
            f"{score_html}{certificate_html}",
            certificate_url or _app_url('/learn/certificates'),
            'Download Certificate' if certificate_url else 'View Certificates',
        )
        return notification

    @classmethod
    def notify_certificate_issued(cls, user, course_title, certificate_number, certificate_url=None):
        """Create certificate notification"""
        subject = f"Certificate Issued: {course_title}"
        body = (
            f'Congratulations! You have earned a certificate for completing "{course_title}". '
            f"Certificate number: {certificate_number}. You can download it from your certificates page."
        )

        notification = cls.create_notification(
            user, 'certificate', 'in_app', body, subject=subject,
            meta={'courseTitle': course_title, 'certificateNumber': certificate_number, 'certificateUrl': certificate_url},
        )

        cls._email_copy(
            user, subject,
            f"<p>Congratulations! You have earned a certificate for completing <strong>{escape(course_title)}</strong>.</p>"
            f"<p>Certificate number: <strong>{escape(certificate_number)}</strong></p>"
            "<p>You can download your certificate from your certificates page.</p>",
            certificate_url or _app_url('/learn/certificates'),
            'Download Certificate',
        )
        return notification

    @staticmethod
    def mark_all_read(user):
        return Notification.objects.filter(user=user, channel='in_app', read_at__isnull=True).update(
            read_at=timezone.now()
        )
