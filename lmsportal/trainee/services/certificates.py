"""
Certificate Service
Issues completion certificates: unique number, PDF rendered with reportlab, verification QR code
"""

import os
import time
import secrets
import logging
from datetime import timedelta

from django.conf import settings
from django.utils import timezone
from reportlab.graphics import renderPDF
from reportlab.graphics.barcode.qr import QrCodeWidget
from reportlab.graphics.shapes import Drawing
from reportlab.lib.colors import HexColor, black
from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas

from trainee.models import Certificate
from trainee.services.scoring import score_percentage

logger = logging.getLogger(__name__)

DEFAULT_BRAND_COLOR = '#ea580c'


def generate_certificate_number():
    """CERT-<epoch ms>-<8 upper hex chars>"""
    return f"CERT-{int(time.time() * 1000)}-{secrets.token_hex(4).upper()}"


def verification_url(number):
    return f"{settings.LMS_BASE_URL}/certificates/verify/{number}"


def _brand_color():
    try:
        return HexColor(settings.LMS_BRAND_COLOR)
    except (ValueError, TypeError):
        logger.warning(f"[CERTIFICATE] Invalid LMS_BRAND_COLOR {settings.LMS_BRAND_COLOR!r}, using default")
        return HexColor(DEFAULT_BRAND_COLOR)


class CertificatePDFRenderer:
    """Render a letter-size certificate of completion"""

    def __init__(self):
        self.page_width, self.page_height = letter
        self.color = _brand_color()

    def render(self, output_path, learner_name, course_title, score, max_score, number, issued_at):
        os.makedirs(os.path.dirname(output_path), exist_ok=True)

        pdf_canvas = canvas.Canvas(output_path, pagesize=letter)
        width, height = self.page_width, self.page_height
        center = width / 2
        percentage = score_percentage(score, max_score)

        # Border
        pdf_canvas.setStrokeColor(self.color)
        pdf_canvas.setLineWidth(3)
        pdf_canvas.rect(50, 50, width - 100, height - 100)

        pdf_canvas.setFillColor(self.color)
        pdf_canvas.setFont("Helvetica-Bold", 32)
        pdf_canvas.drawCentredString(center, height - 140, "Certificate of Completion")

        pdf_canvas.setFillColor(black)
        pdf_canvas.setFont("Helvetica", 18)
        pdf_canvas.drawCentredString(center, height - 200, "This is to certify that")

        pdf_canvas.setFillColor(self.color)
        pdf_canvas.setFont("Helvetica-Bold", 28)
        pdf_canvas.drawCentredString(center, height - 250, learner_name)
        self._underline(pdf_canvas, center, height - 256, learner_name, "Helvetica-Bold", 28)

        pdf_canvas.setFillColor(black)
        pdf_canvas.setFont("Helvetica", 18)
        pdf_canvas.drawCentredString(center, height - 310, "has successfully completed the course")

        pdf_canvas.setFillColor(self.color)
        pdf_canvas.setFont("Helvetica-Bold", 24)
        pdf_canvas.drawCentredString(center, height - 360, course_title)
        self._underline(pdf_canvas, center, height - 366, course_title, "Helvetica-Bold", 24)

        pdf_canvas.setFillColor(black)
        pdf_canvas.setFont("Helvetica", 14)
        pdf_canvas.drawCentredString(center, height - 430, f"Score: {score}/{max_score} ({percentage}%)")
        pdf_canvas.setFont("Helvetica", 12)
        pdf_canvas.drawCentredString(center, height - 460, f"Certificate Number: {number}")
        pdf_canvas.setFont("Helvetica", 10)
        pdf_canvas.drawCentredString(center, height - 520, f"Issued on: {issued_at.date().isoformat()}")

        pdf_canvas.setFillColor(self.color)
        pdf_canvas.drawCentredString(center, height - 540, settings.LMS_COMPANY_NAME)

        self._draw_qr_code(pdf_canvas, verification_url(number), width - 150, 60, 100)
        pdf_canvas.setFillColor(black)
        pdf_canvas.setFont("Helvetica", 8)
        pdf_canvas.drawCentredString(width - 100, 165, "Verify at:")

        pdf_canvas.showPage()
        pdf_canvas.save()
        return output_path

    def _underline(self, pdf_canvas, center, y, text, font, size):
        text_width = pdf_canvas.stringWidth(text, font, size)
        pdf_canvas.setStrokeColor(self.color)
        pdf_canvas.setLineWidth(1)
        pdf_canvas.line(center - text_width / 2, y, center + text_width / 2, y)

    @staticmethod
    def _draw_qr_code(pdf_canvas, value, x, y, size):
        widget = QrCodeWidget(value, barLevel='M')
        left, bottom, right, top = widget.getBounds()
        drawing = Drawing(size, size, transform=[size / (right - left), 0, 0, size / (top - bottom), 0, 0])
        drawing.add(widget)
        renderPDF.draw(drawing, pdf_canvas, x, y)


class CertificateService:
    """Issue and look up certificates"""

    @staticmethod
    def generate(user, course, score, max_score, expiry_days=None):
        """
        Create a certificate for a completed course.

        Args:
            user: learner Profile
            course: completed Course
            score, max_score: quiz result printed on the certificate
            expiry_days: optional validity period

        Returns:
            Saved Certificate with number and pdf_url
        """
        issued_at = timezone.now()
        number = generate_certificate_number()

        certificate = Certificate(
            number=number,
            user=user,
            course=course,
            score=score,
            max_score=max_score,
            issued_at=issued_at,
            expiry_at=issued_at + timedelta(days=expiry_days) if expiry_days else None,
        )

        file_path = os.path.join(str(settings.CERTIFICATES_ROOT), f"{number}.pdf")
        CertificatePDFRenderer().render(
            file_path,
            learner_name=user.full_name or user.email,
            course_title=course.title,
            score=score,
            max_score=max_score,
            number=number,
            issued_at=issued_at,
        )

        certificate.file_path = file_path
        certificate.pdf_url = f"/api/trainee/certificates/{certificate.id}/download/"
        certificate.save()

        logger.info(f"[CERTIFICATE] Issued {number} to {user.email} for course {course.title}")
        return certificate

    @staticmethod
    def verify(number):
        """
        Verification payload for a certificate number, or None if unknown
        """
        certificate = Certificate.objects.select_related('user', 'course').filter(number=number).first()
        if certificate is None:
            return None

        return {
            'valid': certificate.status == 'active',
            'status': certificate.status,
            'isExpired': certificate.is_expired,
            'isRevoked': certificate.is_revoked,
            'certificate': {
                'id': str(certificate.id),
                'number': certificate.number,
                'issuedAt': certificate.issued_at.isoformat(),
                'expiryAt': certificate.expiry_at.isoformat() if certificate.expiry_at else None,
                'revokedAt': certificate.revoked_at.isoformat() if certificate.revoked_at else None,
                'score': certificate.score,
                'maxScore': certificate.max_score,
                'user': {
                    'id': str(certificate.user.id),
                    'name': certificate.user.full_name,
                    'email': certificate.user.email,
                },
                'course': {
                    'id': str(certificate.course.id),
                    'title': certificate.course.title,
                    'description': certificate.course.description,
                },
            },
        }
