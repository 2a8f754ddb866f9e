from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination
from drf_spectacular.utils import extend_schema

from apps.accounts.permissions import IsVendor
from .serializers import (
    OrderSerializer,
    OrderCreateSerializer,
    OrderStatusUpdateSerializer,
    OrderFilterSerializer,
)
from .services import (
    place_order,
    update_order_status,
    get_orders_for_user,
    get_order_for_user,
    OrderNotFoundError,
    InvalidOrderError,
    ProductUnavailableError,
    InsufficientStockError,
    InvalidStatusTransitionError,
    InsufficientPermissionsError,
)


class OrderPagination(PageNumberPagination):
    """Custom pagination for orders."""
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100


class OrderViewSet(viewsets.GenericViewSet):
    """
    Orders between vendors and suppliers.

    list: Orders the user placed or received
    create: Place an order (vendors only)
    retrieve: Order details
    update_status: Move an order along its lifecycle
    """

    serializer_class = OrderSerializer
    permission_classes = [IsAuthenticated]
    pagination_class = OrderPagination

    def get_queryset(self):
        filter_serializer = OrderFilterSerializer(data=self.request.query_params)
        filter_serializer.is_valid(raise_exception=True)
        return get_orders_for_user(
            user=self.request.user,
            status=filter_serializer.validated_data.get('status'),
        )

    def get_permissions(self):
        if self.action == 'create':
            return [IsAuthenticated(), IsVendor()]
        return [IsAuthenticated()]

    def list(self, request):
        page = self.paginate_queryset(self.get_queryset())
        serializer = OrderSerializer(page, many=True)
        return self.get_paginated_response(serializer.data)

    def retrieve(self, request, pk=None):
        try:
            order = get_order_for_user(order_id=pk, user=request.user)
        except OrderNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        return Response(OrderSerializer(order).data)

    @extend_schema(request=OrderCreateSerializer, responses={201: OrderSerializer})
    def create(self, request):
        serializer = OrderCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            order = place_order(vendor=request.user, **serializer.validated_data)
        except ProductUnavailableError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except (InvalidOrderError, InsufficientStockError) as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(OrderSerializer(order).data, status=status.HTTP_201_CREATED)

    @extend_schema(request=OrderStatusUpdateSerializer, responses={200: OrderSerializer})
    @action(detail=True, methods=['post'])
    def update_status(self, request, pk=None):
        """Change order status (supplier; vendor may cancel while pending)."""
        serializer = OrderStatusUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            order = update_order_status(
                order_id=pk,
                user=request.user,
                new_status=serializer.validated_data['status'],
            )
        except OrderNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except InsufficientPermissionsError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
        except InvalidStatusTransitionError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(OrderSerializer(order).data)
