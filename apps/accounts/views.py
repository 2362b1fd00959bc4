from django.conf import settings
from rest_framework import status, serializers
from rest_framework.decorators import api_view, permission_classes, authentication_classes
from rest_framework.exceptions import AuthenticationFailed, PermissionDenied, ValidationError
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema
from .serializers import (
    UserRegistrationSerializer,
    UserLoginSerializer,
    UserSerializer,
    CurrentUserSerializer,
    TokenRefreshSerializer,
)
from .authentication import (
    SessionInvalidError,
    SessionCheckUnavailableError,
    CredentialsOnlyAuthentication,
)
from .services import (
    register_user,
    sign_in,
    invalidate_session,
    touch_session,
    get_session,
    refresh_access_token,
    SessionLookupError,
    UserRegistrationError,
    InvalidCredentialsError,
    InactiveAccountError,
    InvalidTokenError,
)


# Response serializers for API documentation
class LoginResponseSerializer(serializers.Serializer):
    access_token = serializers.CharField()
    refresh_token = serializers.CharField()
    user = UserSerializer()


class RegisterResponseSerializer(serializers.Serializer):
    message = serializers.CharField()
    user = UserSerializer()


class MessageResponseSerializer(serializers.Serializer):
    message = serializers.CharField()


class SessionStatusResponseSerializer(serializers.Serializer):
    valid = serializers.BooleanField()
    lastActive = serializers.DateTimeField(allow_null=True)


class AccessTokenResponseSerializer(serializers.Serializer):
    access_token = serializers.CharField()


def _client_ip(request):
    forwarded = request.META.get('HTTP_X_FORWARDED_FOR')
    if forwarded:
        return forwarded.split(',')[0].strip()
    return request.META.get('REMOTE_ADDR') or None


def _set_refresh_cookie(response, refresh_token):
    response.set_cookie(
        settings.REFRESH_COOKIE_NAME,
        refresh_token,
        max_age=int(settings.SIMPLE_JWT['REFRESH_TOKEN_LIFETIME'].total_seconds()),
        httponly=True,
        secure=settings.REFRESH_COOKIE_SECURE,
        samesite='Lax',
    )


@extend_schema(
    request=UserRegistrationSerializer,
    responses={201: RegisterResponseSerializer},
    description="Register a new customer account.",
    tags=['auth'],
)
@api_view(['POST'])
@authentication_classes([])
@permission_classes([AllowAny])
def register(request):
    """Register a new user account."""
    serializer = UserRegistrationSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        user = register_user(**serializer.validated_data)
    except UserRegistrationError as e:
        raise ValidationError({'email': [str(e)]})

    return Response({
        'message': 'Registration successful. Please sign in.',
        'user': UserSerializer(user).data,
    }, status=status.HTTP_201_CREATED)


@extend_schema(
    request=UserLoginSerializer,
    responses={200: LoginResponseSerializer},
    description=(
        "Authenticate with email and password. Starts a new session and "
        "invalidates any session previously active for the account."
    ),
    tags=['auth'],
)
@api_view(['POST'])
@authentication_classes([CredentialsOnlyAuthentication])
@permission_classes([AllowAny])
def login(request):
    """Login with email and password."""
    serializer = UserLoginSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data

    try:
        result = sign_in(
            email=data['email'],
            password=data['password'],
            device_id=data.get('deviceId', ''),
            user_agent=request.META.get('HTTP_USER_AGENT', ''),
            ip_address=_client_ip(request),
        )
    except InvalidCredentialsError as e:
        raise AuthenticationFailed(str(e), code='invalid_credentials')
    except InactiveAccountError as e:
        raise PermissionDenied(str(e), code='account_inactive')

    response = Response({
        'access_token': result.access_token,
        'refresh_token': result.refresh_token,
        'user': CurrentUserSerializer(result.user).data,
    })
    _set_refresh_cookie(response, result.refresh_token)
    return response


@extend_schema(
    request=None,
    responses={200: MessageResponseSerializer},
    description="End the current session.",
    tags=['auth'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated])
def logout(request):
    """Drop the registered session and the refresh cookie."""
    invalidate_session(user_id=request.user.pk)

    response = Response({'message': 'Logout successful'})
    response.delete_cookie(settings.REFRESH_COOKIE_NAME)
    return response


@extend_schema(
    methods=['GET'],
    responses={200: CurrentUserSerializer},
    description="Get the current user's profile and active plan.",
    tags=['auth'],
)
@extend_schema(
    methods=['PATCH'],
    request=UserSerializer,
    responses={200: CurrentUserSerializer},
    description="Update the current user's name, phone or avatar.",
    tags=['auth'],
)
@api_view(['GET', 'PATCH'])
@permission_classes([IsAuthenticated])
def me(request):
    """Current authenticated user profile."""
    if request.method == 'PATCH':
        serializer = UserSerializer(request.user, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()

    return Response(CurrentUserSerializer(request.user).data)


@extend_schema(
    responses={200: SessionStatusResponseSerializer},
    description=(
        "Lightweight check polled by clients. Returns 401 SESSION_INVALID once "
        "the account has signed in elsewhere."
    ),
    tags=['auth'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def session_status(request):
    """Report that the caller's session is still the active one."""
    session_id = request.auth.get(settings.SESSION_ID_CLAIM)
    touch_session(user_id=request.user.pk, session_id=session_id)
    session = get_session(user_id=request.user.pk)

    return Response({
        'valid': True,
        'lastActive': session.last_active if session else None,
    })


@extend_schema(
    request=TokenRefreshSerializer,
    responses={200: AccessTokenResponseSerializer},
    description="Exchange the refresh token (body or cookie) for a new access token.",
    tags=['auth'],
)
@api_view(['POST'])
@authentication_classes([CredentialsOnlyAuthentication])
@permission_classes([AllowAny])
def token_refresh(request):
    """Issue a new access token for the still-active session."""
    serializer = TokenRefreshSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    refresh_token = (
        serializer.validated_data.get('refresh')
        or request.COOKIES.get(settings.REFRESH_COOKIE_NAME)
    )
    if not refresh_token:
        raise AuthenticationFailed('Refresh token is required.', code='not_authenticated')

    try:
        access = refresh_access_token(refresh_token=refresh_token)
    except InvalidTokenError as e:
        raise SessionInvalidError(str(e))
    except SessionLookupError:
        raise SessionCheckUnavailableError()

    return Response({'access_token': access})
