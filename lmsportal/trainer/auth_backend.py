"""
Custom authentication backend for Profile model
"""
from django.contrib.auth.backends import BaseBackend
from django.contrib.auth.hashers import check_password
from django.contrib.auth.models import User as DjangoUser
from django.core.exceptions import ValidationError
from trainer.models import Profile


def get_or_create_auth_user(profile):
    """Django auth user mirroring a profile; its username carries the profile id"""
    django_user, created = DjangoUser.objects.get_or_create(
        username=profile.auth_username,
        defaults={
            'email': profile.email,
            'first_name': profile.first_name,
            'last_name': profile.last_name,
        }
    )
    django_user._profile = profile
    return django_user


def profile_for_user(user):
    """
    Resolve the Profile behind an authenticated Django user.
    Returns None for anonymous users or users without a profile.
    """
    if user is None or not user.is_authenticated:
        return None

    cached = getattr(user, '_profile', None)
    if cached is not None:
        return cached

    username = getattr(user, 'username', '') or ''
    if not username.startswith('user_'):
        return None

    try:
        profile = Profile.objects.get(id=username.replace('user_', '', 1))
    except (Profile.DoesNotExist, ValueError, ValidationError):
        return None

    user._profile = profile
    return profile


class ProfileBackend(BaseBackend):
    """
    Authenticate using Profile model from trainer app
    """

    def authenticate(self, request, username=None, password=None, **kwargs):
        """
        Authenticate user by email and password
        """
        email = kwargs.get('email', username)
        if not email or password is None:
            return None

        try:
            profile = Profile.objects.get(email__iexact=str(email).strip())
        except Profile.DoesNotExist:
            return None

        if profile.status != 'active':
            return None

        if check_password(password, profile.password):
            return get_or_create_auth_user(profile)

        return None

    def get_user(self, user_id):
        """
        Get user by ID
        """
        try:
            user = DjangoUser.objects.get(pk=user_id)
        except DjangoUser.DoesNotExist:
            return None
        profile_for_user(user)
        return user
