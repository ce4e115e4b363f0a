"""
Certificate Endpoints - learner listing, PDF download and public verification
"""
import logging
import os

from django.http import FileResponse
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from trainee.models import Certificate
from trainee.serializers.certificates import CertificateSerializer
from trainee.services.auth import get_request_profile, unauthorized_response
from trainee.services.certificates import CertificateService

logger = logging.getLogger(__name__)


@api_view(['GET'])
@permission_classes([AllowAny])
def my_certificates(request):
    """
    GET /api/trainee/certificates/
    Certificates issued to the learner, newest first
    """
    user = get_request_profile(request)
    if user is None:
        return unauthorized_response()

    certificates = Certificate.objects.filter(user=user).select_related('course')
    return Response({
        'certificates': CertificateSerializer(certificates, many=True).data,
    }, status=status.HTTP_200_OK)


@api_view(['GET'])
@permission_classes([AllowAny])
def download_certificate(request, certificate_id):
    """
    GET /api/trainee/certificates/{certificate_id}/download/
    PDF of one of the learner's certificates
    """
    user = get_request_profile(request)
    if user is None:
        return unauthorized_response()

    certificate = Certificate.objects.filter(id=certificate_id, user=user).first()
    if certificate is None:
        return Response({'error': 'Certificate not found'}, status=status.HTTP_404_NOT_FOUND)

    if not certificate.file_path or not os.path.exists(certificate.file_path):
        logger.error(f"[CERTIFICATE] PDF missing for {certificate.number}: {certificate.file_path}")
        return Response({'error': 'Certificate file not found'}, status=status.HTTP_404_NOT_FOUND)

    return FileResponse(
        open(certificate.file_path, 'rb'),
        content_type='application/pdf',
        as_attachment=True,
        filename=f"{certificate.number}.pdf",
    )


@api_view(['GET'])
@permission_classes([AllowAny])
def verify_certificate(request, number):
    """
    GET /api/trainee/certificates/verify/{number}/
    Public verification of a certificate number
    """
    payload = CertificateService.verify(number)
    if payload is None:
        return Response(
            {'valid': False, 'error': 'Certificate not found'},
            status=status.HTTP_404_NOT_FOUND
        )
    return Response(payload, status=status.HTTP_200_OK)
