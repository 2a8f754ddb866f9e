from rest_framework import status, serializers
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.pagination import PageNumberPagination
from rest_framework.response import Response
from rest_framework_simplejwt.tokens import RefreshToken
from drf_spectacular.utils import extend_schema, OpenApiParameter
from apps.catalog.models import ProductCategory
from .serializers import (
    UserRegistrationSerializer,
    UserLoginSerializer,
    UserSerializer,
    SupplierDirectorySerializer,
)
from .services import (
    register_user,
    authenticate_user,
    list_suppliers,
    UserRegistrationError,
    InvalidCredentialsError,
    InactiveAccountError,
    AccountRoleError,
)


# Response serializers for API documentation
class TokensResponseSerializer(serializers.Serializer):
    refresh = serializers.CharField()
    access = serializers.CharField()


class AuthResponseSerializer(serializers.Serializer):
    message = serializers.CharField()
    user = UserSerializer()
    tokens = TokensResponseSerializer()


class ErrorResponseSerializer(serializers.Serializer):
    error = serializers.CharField()


def _tokens_for(user):
    refresh = RefreshToken.for_user(user)
    return {
        'refresh': str(refresh),
        'access': str(refresh.access_token),
    }


@extend_schema(
    request=UserRegistrationSerializer,
    responses={
        201: AuthResponseSerializer,
        400: ErrorResponseSerializer,
    },
    description="Register a vendor or supplier account and receive JWT tokens.",
    tags=['auth'],
)
@api_view(['POST'])
@permission_classes([AllowAny])
def register(request):
    """Register a new user account."""
    serializer = UserRegistrationSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    data = serializer.validated_data.copy()
    data.pop('password_confirm', None)

    try:
        user = register_user(**data)
    except UserRegistrationError as e:
        return Response(
            {'error': str(e)},
            status=status.HTTP_400_BAD_REQUEST
        )

    return Response({
        'message': 'Registration successful. Please verify your phone number.',
        'user': UserSerializer(user).data,
        'tokens': _tokens_for(user),
    }, status=status.HTTP_201_CREATED)


@extend_schema(
    request=UserLoginSerializer,
    responses={
        200: AuthResponseSerializer,
        400: ErrorResponseSerializer,
        401: ErrorResponseSerializer,
        403: ErrorResponseSerializer,
    },
    description="Log in as a vendor or supplier and receive JWT tokens. "
                "An optional user_type must match the account's role.",
    tags=['auth'],
)
@api_view(['POST'])
@permission_classes([AllowAny])
def login(request):
    """Login with email and password."""
    serializer = UserLoginSerializer(data=request.data)

    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    try:
        user = authenticate_user(
            email=serializer.validated_data['email'],
            password=serializer.validated_data['password'],
            user_type=serializer.validated_data.get('user_type'),
        )
    except InvalidCredentialsError:
        return Response({
            'error': 'Invalid credentials'
        }, status=status.HTTP_401_UNAUTHORIZED)
    except InactiveAccountError:
        return Response({
            'error': 'Account is deactivated'
        }, status=status.HTTP_403_FORBIDDEN)
    except AccountRoleError as e:
        return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)

    return Response({
        'message': 'Login successful',
        'user': UserSerializer(user).data,
        'tokens': _tokens_for(user),
    })


@extend_schema(
    responses={200: UserSerializer},
    description="Get the current authenticated user's profile.",
    tags=['auth'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def get_current_user(request):
    """Get current authenticated user profile."""
    return Response(UserSerializer(request.user).data)


@extend_schema(
    request=UserSerializer,
    responses={
        200: UserSerializer,
        400: ErrorResponseSerializer,
    },
    description="Update the current user's business profile.",
    tags=['auth'],
)
@api_view(['PATCH'])
@permission_classes([IsAuthenticated])
def update_profile(request):
    """Update user profile."""
    serializer = UserSerializer(request.user, data=request.data, partial=True)

    if serializer.is_valid():
        serializer.save()
        return Response(serializer.data)

    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


class SupplierPagination(PageNumberPagination):
    """Custom pagination for the supplier directory."""
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100


class SupplierFilterSerializer(serializers.Serializer):
    search = serializers.CharField(required=False, allow_blank=True)
    city = serializers.CharField(required=False, allow_blank=True)
    category = serializers.ChoiceField(choices=ProductCategory.choices, required=False)


@extend_schema(
    parameters=[
        OpenApiParameter('search', str, description='Business name, contact, address or product name'),
        OpenApiParameter('city', str, description='Supplier city'),
        OpenApiParameter('category', str, enum=ProductCategory.values),
    ],
    responses={200: SupplierDirectorySerializer(many=True)},
    description="Browse active suppliers with their products and specialties.",
    tags=['auth'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def suppliers(request):
    """Searchable supplier directory."""
    filters = SupplierFilterSerializer(data=request.query_params)
    filters.is_valid(raise_exception=True)

    queryset = list_suppliers(
        search=filters.validated_data.get('search') or None,
        city=filters.validated_data.get('city') or None,
        category=filters.validated_data.get('category'),
    )

    paginator = SupplierPagination()
    page = paginator.paginate_queryset(queryset, request)
    serializer = SupplierDirectorySerializer(page, many=True)
    return paginator.get_paginated_response(serializer.data)
