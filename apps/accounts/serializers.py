from rest_framework import serializers
from django.contrib.auth.password_validation import validate_password
from django.utils import timezone
from .models import User


class UserSerializer(serializers.ModelSerializer):
    """Basic user serializer for profile display."""

    createdAt = serializers.DateTimeField(source='created_at', read_only=True)
    lastLogin = serializers.DateTimeField(source='last_login', read_only=True)

    class Meta:
        model = User
        fields = [
            'id',
            'email',
            'name',
            'phone',
            'avatar',
            'role',
            'createdAt',
            'lastLogin',
        ]
        read_only_fields = ['id', 'email', 'role']


class CurrentUserSerializer(UserSerializer):
    """Profile of the signed-in user including the active plan."""

    currentPlan = serializers.SerializerMethodField()
    planExpiresAt = serializers.SerializerMethodField()

    class Meta(UserSerializer.Meta):
        fields = UserSerializer.Meta.fields + ['currentPlan', 'planExpiresAt']

    def _active_license(self, obj):
        if not hasattr(self, '_license_cache'):
            self._license_cache = {}
        if obj.pk not in self._license_cache:
            from apps.licenses.models import LicenseStatus
            self._license_cache[obj.pk] = (
                obj.licenses
                .filter(status=LicenseStatus.ACTIVE, end_date__gt=timezone.now())
                .select_related('package')
                .order_by('-end_date')
                .first()
            )
        return self._license_cache[obj.pk]

    def get_currentPlan(self, obj):
        license = self._active_license(obj)
        return license.package.name if license else None

    def get_planExpiresAt(self, obj):
        license = self._active_license(obj)
        return license.end_date.isoformat() if license else None


class UserRegistrationSerializer(serializers.Serializer):
    """Serializer for user registration."""

    email = serializers.EmailField(required=True)
    password = serializers.CharField(
        write_only=True,
        required=True,
        validators=[validate_password],
        style={'input_type': 'password'}
    )
    name = serializers.CharField(required=True, max_length=100)
    phone = serializers.CharField(required=False, allow_blank=True, max_length=20, default='')


class UserLoginSerializer(serializers.Serializer):
    """Serializer for user login."""

    email = serializers.EmailField(required=True)
    password = serializers.CharField(
        required=True,
        write_only=True,
        style={'input_type': 'password'}
    )
    deviceId = serializers.CharField(required=False, allow_blank=True, max_length=100, default='')


class TokenRefreshSerializer(serializers.Serializer):
    """Refresh token may come from the body or the httpOnly cookie."""

    refresh = serializers.CharField(required=False, allow_blank=True)
