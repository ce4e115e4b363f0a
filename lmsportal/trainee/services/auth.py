"""
Request authentication helpers for trainee endpoints.
Learners authenticate with a DRF token issued by /api/trainer/auth/login/.
"""
from rest_framework import status
from rest_framework.response import Response

from trainer.auth_backend import profile_for_user


def get_request_profile(request):
    """Profile of the authenticated caller, or None"""
    return profile_for_user(getattr(request, 'user', None))


def unauthorized_response():
    return Response({'error': 'Unauthorized'}, status=status.HTTP_401_UNAUTHORIZED)


def client_ip(request):
    """Client address, honoring the first X-Forwarded-For hop"""
    forwarded = request.META.get('HTTP_X_FORWARDED_FOR')
    if forwarded:
        return forwarded.split(',')[0].strip()
    return request.META.get('HTTP_X_REAL_IP') or request.META.get('REMOTE_ADDR')
