from rest_framework import viewsets, status, mixins
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination
from drf_spectacular.utils import extend_schema

from apps.accounts.permissions import IsCustomer
from apps.accounts.services import get_customer_for_user
from apps.accounts.views import ErrorResponseSerializer
from apps.common.exceptions import DomainError
from apps.common.responses import error_response

from .serializers import (
    OrderSerializer,
    OrderListSerializer,
    OrderCreateSerializer,
    OrderTransitionSerializer,
    OrderStatusHistorySerializer,
)
from .services import (
    place_order,
    transition_order,
    get_orders_for_user,
    get_order_history,
)


class OrderPagination(PageNumberPagination):
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100


class OrderViewSet(mixins.ListModelMixin, mixins.RetrieveModelMixin, viewsets.GenericViewSet):
    """
    Orders, scoped to the requesting user's role.

    list: Orders visible to the user
    retrieve: One order with its financial snapshot
    create: Place an order (customers only)
    transition: Change the order status
    history: Status audit trail
    """

    serializer_class = OrderSerializer
    permission_classes = [IsAuthenticated]
    pagination_class = OrderPagination

    def get_queryset(self):
        queryset = get_orders_for_user(self.request.user).prefetch_related('items')
        status_filter = self.request.query_params.get('status')
        if status_filter:
            queryset = queryset.filter(status=status_filter)
        return queryset

    def get_serializer_class(self):
        if self.action == 'list':
            return OrderListSerializer
        return OrderSerializer

    def get_permissions(self):
        if self.action == 'create':
            return [IsAuthenticated(), IsCustomer()]
        return super().get_permissions()

    @extend_schema(
        request=OrderCreateSerializer,
        responses={201: OrderSerializer, 400: ErrorResponseSerializer},
        description="Place an order. Points are capped by the platform commission on the order.",
        tags=['orders'],
    )
    def create(self, request):
        serializer = OrderCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            order = place_order(
                customer=get_customer_for_user(request.user),
                shop_id=data['shop_id'],
                items=[dict(item) for item in data['items']],
                delivery_address=data['delivery_address'],
                points_to_use=data['points_to_use'],
                is_free_delivery=data['is_free_delivery'],
                notes=data['notes'],
            )
        except DomainError as e:
            return error_response(e)

        return Response(OrderSerializer(order).data, status=status.HTTP_201_CREATED)

    @extend_schema(
        request=OrderTransitionSerializer,
        responses={200: OrderSerializer, 400: ErrorResponseSerializer},
        description="Move the order to a new status.",
        tags=['orders'],
    )
    @action(detail=True, methods=['post'])
    def transition(self, request, pk=None):
        # Scope check: the user must be able to see the order
        order = self.get_object()

        serializer = OrderTransitionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            order = transition_order(
                order_id=order.pk,
                target_status=serializer.validated_data['target_status'],
                user=request.user,
                notes=serializer.validated_data['notes'],
            )
        except DomainError as e:
            return error_response(e)

        return Response(OrderSerializer(order).data)

    @extend_schema(
        responses={200: OrderStatusHistorySerializer(many=True)},
        description="Status changes of the order, oldest first.",
        tags=['orders'],
    )
    @action(detail=True, methods=['get'])
    def history(self, request, pk=None):
        try:
            entries = get_order_history(user=request.user, order_id=pk)
        except DomainError as e:
            return error_response(e)

        return Response(OrderStatusHistorySerializer(entries, many=True).data)
