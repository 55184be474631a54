from rest_framework import status, serializers
from rest_framework.decorators import api_view, permission_classes, parser_classes
from rest_framework.parsers import MultiPartParser, FormParser
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework_simplejwt.tokens import RefreshToken
from drf_spectacular.utils import extend_schema
from .serializers import (
    UserSerializer,
    UserLoginSerializer,
    ProfileSerializer,
    ImageUploadSerializer,
)
from .services import (
    sign_in_or_register,
    get_or_provision_profile,
    upsert_profile,
    update_avatar,
    InvalidCredentialsError,
    InactiveAccountError,
    UserRegistrationError,
    InvalidImageError,
)
from apps.collection.services.summary_cache import clear_summary


# Response serializers for API documentation
class TokensResponseSerializer(serializers.Serializer):
    refresh = serializers.CharField()
    access = serializers.CharField()


class AuthResponseSerializer(serializers.Serializer):
    message = serializers.CharField()
    created = serializers.BooleanField()
    user = UserSerializer()
    tokens = TokensResponseSerializer()


class MessageResponseSerializer(serializers.Serializer):
    message = serializers.CharField()


class ErrorResponseSerializer(serializers.Serializer):
    error = serializers.CharField()


@extend_schema(
    request=UserLoginSerializer,
    responses={
        200: AuthResponseSerializer,
        201: AuthResponseSerializer,
        400: ErrorResponseSerializer,
        401: ErrorResponseSerializer,
        403: ErrorResponseSerializer,
    },
    description="Sign in with email and password. Unknown emails are registered on the spot.",
    tags=['auth'],
)
@api_view(['POST'])
@permission_classes([AllowAny])
def login(request):
    """Sign in, or create the account on first use."""
    serializer = UserLoginSerializer(data=request.data)

    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    try:
        user, created = sign_in_or_register(**serializer.validated_data)
    except InvalidCredentialsError as e:
        return Response({'error': str(e)}, status=status.HTTP_401_UNAUTHORIZED)
    except InactiveAccountError as e:
        return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
    except UserRegistrationError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    # First authenticated session provisions the profile
    get_or_provision_profile(user=user)

    refresh = RefreshToken.for_user(user)

    return Response({
        'message': 'Registration successful' if created else 'Login successful',
        'created': created,
        'user': UserSerializer(user).data,
        'tokens': {
            'refresh': str(refresh),
            'access': str(refresh.access_token),
        }
    }, status=status.HTTP_201_CREATED if created else status.HTTP_200_OK)


@extend_schema(
    request=None,
    responses={200: MessageResponseSerializer},
    description="Sign out and drop the cached collection summary.",
    tags=['auth'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated])
def logout(request):
    """Sign out."""
    clear_summary(request.user)

    return Response({
        'message': 'Logout successful'
    })


@extend_schema(
    responses={200: UserSerializer},
    description="Get the current session's user.",
    tags=['auth'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def get_current_user(request):
    """Get current authenticated user."""
    return Response(UserSerializer(request.user).data)


@extend_schema(
    methods=['GET'],
    responses={200: ProfileSerializer},
    description="Get the current user's profile, provisioning a default one if missing.",
    tags=['auth'],
)
@extend_schema(
    methods=['PUT', 'PATCH'],
    request=ProfileSerializer,
    responses={200: ProfileSerializer, 400: ErrorResponseSerializer},
    description="Create or update the current user's profile.",
    tags=['auth'],
)
@api_view(['GET', 'PUT', 'PATCH'])
@permission_classes([IsAuthenticated])
def profile(request):
    """Fetch or upsert the current user's profile."""
    current = get_or_provision_profile(user=request.user)

    if request.method == 'GET':
        return Response(ProfileSerializer(current).data)

    serializer = ProfileSerializer(
        current,
        data=request.data,
        partial=request.method == 'PATCH'
    )
    serializer.is_valid(raise_exception=True)

    saved = upsert_profile(user=request.user, **serializer.validated_data)
    return Response(ProfileSerializer(saved).data)


@extend_schema(
    request={'multipart/form-data': ImageUploadSerializer},
    responses={200: ProfileSerializer, 400: ErrorResponseSerializer},
    description="Upload a new avatar image; it is stored inline as a data URL.",
    tags=['auth'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated])
@parser_classes([MultiPartParser, FormParser])
def upload_avatar(request):
    """Replace the avatar with an uploaded image."""
    serializer = ImageUploadSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        saved = update_avatar(user=request.user, uploaded_file=serializer.validated_data['image'])
    except InvalidImageError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    return Response(ProfileSerializer(saved).data)
