from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated, IsAuthenticatedOrReadOnly
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination
from drf_spectacular.utils import extend_schema

from apps.accounts.permissions import IsVendor, IsSupplier
from .serializers import (
    GroupOrderSerializer,
    GroupOrderCreateSerializer,
    GroupOrderFilterSerializer,
    ParticipationSerializer,
    ParticipantEntrySerializer,
    ParticipantSettlementSerializer,
)
from .services import (
    create_group_order,
    join_group_order,
    update_participation,
    leave_group_order,
    cancel_group_order,
    get_group_order,
    list_group_orders,
    list_participants,
    get_settlement,
    # Exceptions
    GroupOrdersServiceError,
    InvalidParametersError,
    GroupOrderNotFoundError,
    ParticipantNotFoundError,
    GroupOrderClosedError,
    CapacityExceededError,
    AlreadyParticipatingError,
    UnauthorizedError,
    ContentionError,
)

# Most specific first: GroupOrderExpiredError is a GroupOrderClosedError
ERROR_STATUS = (
    (InvalidParametersError, status.HTTP_400_BAD_REQUEST),
    (GroupOrderNotFoundError, status.HTTP_404_NOT_FOUND),
    (ParticipantNotFoundError, status.HTTP_404_NOT_FOUND),
    (UnauthorizedError, status.HTTP_403_FORBIDDEN),
    (GroupOrderClosedError, status.HTTP_409_CONFLICT),
    (CapacityExceededError, status.HTTP_409_CONFLICT),
    (AlreadyParticipatingError, status.HTTP_409_CONFLICT),
    (ContentionError, status.HTTP_503_SERVICE_UNAVAILABLE),
)

RETRY_AFTER_SECONDS = '1'


def service_error_response(error: GroupOrdersServiceError) -> Response:
    """Translate a group order service error into an HTTP response."""
    for error_class, http_status in ERROR_STATUS:
        if isinstance(error, error_class):
            break
    else:
        http_status = status.HTTP_400_BAD_REQUEST

    response = Response({'error': str(error), 'code': type(error).__name__}, status=http_status)
    if isinstance(error, ContentionError):
        response['Retry-After'] = RETRY_AFTER_SECONDS
    return response


class GroupOrderPagination(PageNumberPagination):
    """Custom pagination for group orders."""
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100


class GroupOrderViewSet(viewsets.GenericViewSet):
    """
    Group orders: vendors pool quantities to unlock supplier discounts.

    All business logic is handled by services.
    Views are thin HTTP handlers only.

    list: Group orders (filter by state, product, supplier)
    create: Open a group order (suppliers only)
    retrieve: Group order details
    join / update_quantity / leave: Vendor participation
    cancel: Cancel an open group order (owning supplier only)
    participants: Active participants
    settlement: Per-participant prices after fulfilment
    """

    serializer_class = GroupOrderSerializer
    permission_classes = [IsAuthenticatedOrReadOnly]
    pagination_class = GroupOrderPagination

    def get_queryset(self):
        filter_serializer = GroupOrderFilterSerializer(data=self.request.query_params)
        filter_serializer.is_valid(raise_exception=True)
        filters = filter_serializer.validated_data
        return list_group_orders(
            state=filters.get('state'),
            product_id=filters.get('product'),
            supplier_id=filters.get('supplier'),
        )

    def get_permissions(self):
        if self.action in ['create', 'cancel']:
            return [IsAuthenticated(), IsSupplier()]
        if self.action in ['join', 'update_quantity', 'leave']:
            return [IsAuthenticated(), IsVendor()]
        if self.action == 'settlement':
            return [IsAuthenticated()]
        return [IsAuthenticatedOrReadOnly()]

    def list(self, request):
        page = self.paginate_queryset(self.get_queryset())
        serializer = GroupOrderSerializer(page, many=True)
        return self.get_paginated_response(serializer.data)

    def retrieve(self, request, pk=None):
        try:
            group_order = get_group_order(group_order_id=pk)
        except GroupOrdersServiceError as e:
            return service_error_response(e)
        return Response(GroupOrderSerializer(group_order).data)

    @extend_schema(request=GroupOrderCreateSerializer, responses={201: GroupOrderSerializer})
    def create(self, request):
        serializer = GroupOrderCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            group_order = create_group_order(
                supplier=request.user,
                product_id=data['product'],
                target_quantity=data['target_quantity'],
                min_participants=data['min_participants'],
                max_participants=data['max_participants'],
                discount_tiers=data['discount_tiers'],
                expires_at=data['expires_at'],
            )
        except GroupOrdersServiceError as e:
            return service_error_response(e)

        return Response(GroupOrderSerializer(group_order).data, status=status.HTTP_201_CREATED)

    @extend_schema(request=ParticipationSerializer, responses={201: ParticipantEntrySerializer})
    @action(detail=True, methods=['post'])
    def join(self, request, pk=None):
        """Commit a quantity to the group order."""
        serializer = ParticipationSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            entry = join_group_order(
                group_order_id=pk,
                vendor=request.user,
                quantity=serializer.validated_data['quantity'],
            )
        except GroupOrdersServiceError as e:
            return service_error_response(e)

        return Response(ParticipantEntrySerializer(entry).data, status=status.HTTP_201_CREATED)

    @extend_schema(request=ParticipationSerializer, responses={200: ParticipantEntrySerializer})
    @action(detail=True, methods=['post'])
    def update_quantity(self, request, pk=None):
        """Replace the quantity of the caller's entry."""
        serializer = ParticipationSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            entry = update_participation(
                group_order_id=pk,
                vendor=request.user,
                quantity=serializer.validated_data['quantity'],
            )
        except GroupOrdersServiceError as e:
            return service_error_response(e)

        return Response(ParticipantEntrySerializer(entry).data)

    @extend_schema(request=None, responses={204: None})
    @action(detail=True, methods=['post'])
    def leave(self, request, pk=None):
        """Withdraw from the group order."""
        try:
            leave_group_order(group_order_id=pk, vendor=request.user)
        except GroupOrdersServiceError as e:
            return service_error_response(e)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(request=None, responses={200: GroupOrderSerializer})
    @action(detail=True, methods=['post'])
    def cancel(self, request, pk=None):
        """Cancel the group order and withdraw all participants."""
        try:
            group_order = cancel_group_order(group_order_id=pk, supplier=request.user)
        except GroupOrdersServiceError as e:
            return service_error_response(e)
        return Response(GroupOrderSerializer(group_order).data)

    @extend_schema(responses={200: ParticipantEntrySerializer(many=True)})
    @action(detail=True, methods=['get'])
    def participants(self, request, pk=None):
        """Active participants of the group order."""
        try:
            entries = list_participants(group_order_id=pk)
        except GroupOrdersServiceError as e:
            return service_error_response(e)
        return Response(ParticipantEntrySerializer(entries, many=True).data)

    @extend_schema(responses={200: ParticipantSettlementSerializer(many=True)})
    @action(detail=True, methods=['get'])
    def settlement(self, request, pk=None):
        """Settled prices; empty until the group order is fulfilled."""
        try:
            settlements = get_settlement(group_order_id=pk)
        except GroupOrdersServiceError as e:
            return service_error_response(e)
        return Response(ParticipantSettlementSerializer(settlements, many=True).data)
