"""
Notification inbox endpoints for trainee
"""
import logging

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from trainee.models import Notification, NotificationPreference
from trainee.serializers.notifications import NotificationSerializer, NotificationPreferencesSerializer
from trainee.services.auth import get_request_profile, unauthorized_response
from trainee.services.notifications import NotificationService

logger = logging.getLogger(__name__)


@api_view(['GET'])
@permission_classes([AllowAny])
def list_notifications(request):
    """
    GET /api/trainee/notifications/?limit=50
    In-app notifications, newest first
    """
    user = get_request_profile(request)
    if user is None:
        return unauthorized_response()

    try:
        limit = int(request.query_params.get('limit', 50))
    except (ValueError, TypeError):
        limit = 50

    inbox = Notification.objects.filter(user=user, channel='in_app')
    return Response({
        'notifications': NotificationSerializer(inbox.order_by('-created_at')[:limit], many=True).data,
        'unreadCount': inbox.filter(read_at__isnull=True).count(),
    }, status=status.HTTP_200_OK)


@api_view(['POST'])
@permission_classes([AllowAny])
def mark_notification_read(request, notification_id):
    """
    POST /api/trainee/notifications/{notification_id}/read/
    """
    user = get_request_profile(request)
    if user is None:
        return unauthorized_response()

    notification = Notification.objects.filter(notification_id=notification_id, user=user).first()
    if notification is None:
        return Response({'error': 'Notification not found'}, status=status.HTTP_404_NOT_FOUND)

    notification.mark_as_read()
    return Response({'ok': True}, status=status.HTTP_200_OK)


@api_view(['POST'])
@permission_classes([AllowAny])
def mark_all_notifications_read(request):
    """
    POST /api/trainee/notifications/read-all/
    """
    user = get_request_profile(request)
    if user is None:
        return unauthorized_response()

    updated = NotificationService.mark_all_read(user)
    return Response({'ok': True, 'updated': updated}, status=status.HTTP_200_OK)


@api_view(['GET', 'PUT'])
@permission_classes([AllowAny])
def notification_preferences(request):
    """
    GET /api/trainee/notifications/preferences/
    PUT /api/trainee/notifications/preferences/  {"preferences": {"email": false}}
    Channels without a stored preference are reported as opted in
    """
    user = get_request_profile(request)
    if user is None:
        return unauthorized_response()

    if request.method == 'PUT':
        serializer = NotificationPreferencesSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(
                {'error': 'Invalid data', 'details': serializer.errors},
                status=status.HTTP_400_BAD_REQUEST
            )
        for channel, opt_in in serializer.validated_data['preferences'].items():
            NotificationPreference.objects.update_or_create(
                user=user, channel=channel, defaults={'opt_in': opt_in}
            )
        logger.info(f"[NOTIFY] Preferences updated for {user.email}")

    stored = dict(NotificationPreference.objects.filter(user=user).values_list('channel', 'opt_in'))
    preferences = {
        channel: stored.get(channel, True)
        for channel, _ in Notification.CHANNEL_CHOICES
    }
    return Response({'preferences': preferences}, status=status.HTTP_200_OK)
