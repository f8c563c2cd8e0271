from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema

from apps.accounts.permissions import IsAdminRole
from apps.accounts.views import ErrorResponseSerializer
from apps.common.exceptions import DomainError
from apps.common.responses import error_response

from .models import WeeklyPeriod, ShopSettlement, RiderSettlement
from .serializers import (
    WeeklyPeriodSerializer,
    PeriodDetailSerializer,
    PeriodCloseResponseSerializer,
    ShopSettlementSerializer,
    RiderSettlementSerializer,
    MarkSettledSerializer,
)
from .services import (
    close_period,
    regenerate_settlements,
    mark_shop_settlement_settled,
    mark_rider_settlement_settled,
)


class WeeklyPeriodViewSet(viewsets.ReadOnlyModelViewSet):
    """
    Admin view of weekly periods.

    list: All periods, newest first
    retrieve: One period with its settlements
    close: Close the active period and generate settlements
    regenerate: Create the settlements a closed period is missing
    """

    queryset = WeeklyPeriod.objects.select_related('closed_by').prefetch_related(
        'shop_settlements__shop',
        'rider_settlements__rider',
    )
    permission_classes = [IsAuthenticated, IsAdminRole]

    def get_serializer_class(self):
        if self.action == 'retrieve':
            return PeriodDetailSerializer
        return WeeklyPeriodSerializer

    @extend_schema(
        request=None,
        responses={200: PeriodCloseResponseSerializer, 409: ErrorResponseSerializer},
        description="Close the active period, create shop and rider settlements and open the next period.",
        tags=['settlements'],
    )
    @action(detail=False, methods=['post'])
    def close(self, request):
        try:
            result = close_period(closed_by=request.user)
        except DomainError as e:
            return error_response(e)

        return Response({
            'period': WeeklyPeriodSerializer(result.period).data,
            'next_period': WeeklyPeriodSerializer(result.next_period).data,
            'admin_summary': result.admin_summary,
            'shop_settlements': ShopSettlementSerializer(result.shop_settlements, many=True).data,
            'rider_settlements': RiderSettlementSerializer(result.rider_settlements, many=True).data,
            'warnings': result.warnings,
            'failures': result.failures,
        })

    @extend_schema(
        request=None,
        responses={200: PeriodCloseResponseSerializer, 409: ErrorResponseSerializer},
        description="Create the shop and rider settlements missing from a closed period.",
        tags=['settlements'],
    )
    @action(detail=True, methods=['post'])
    def regenerate(self, request, pk=None):
        try:
            result = regenerate_settlements(period_id=pk)
        except DomainError as e:
            return error_response(e)

        return Response({
            'period': WeeklyPeriodSerializer(result.period).data,
            'next_period': None,
            'admin_summary': result.admin_summary,
            'shop_settlements': ShopSettlementSerializer(result.shop_settlements, many=True).data,
            'rider_settlements': RiderSettlementSerializer(result.rider_settlements, many=True).data,
            'warnings': result.warnings,
            'failures': result.failures,
        })


class ShopSettlementViewSet(viewsets.ReadOnlyModelViewSet):
    queryset = ShopSettlement.objects.select_related('shop', 'period')
    serializer_class = ShopSettlementSerializer
    permission_classes = [IsAuthenticated, IsAdminRole]

    def get_queryset(self):
        queryset = super().get_queryset()
        period_id = self.request.query_params.get('period')
        if period_id:
            queryset = queryset.filter(period_id=period_id)
        return queryset

    @extend_schema(
        request=MarkSettledSerializer,
        responses={200: ShopSettlementSerializer, 409: ErrorResponseSerializer},
        description="Confirm the payout of a shop settlement.",
        tags=['settlements'],
    )
    @action(detail=True, methods=['post'])
    def mark_settled(self, request, pk=None):
        serializer = MarkSettledSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            settlement = mark_shop_settlement_settled(
                settlement_id=pk,
                notes=serializer.validated_data['notes'],
            )
        except DomainError as e:
            return error_response(e)

        return Response(ShopSettlementSerializer(settlement).data)


class RiderSettlementViewSet(viewsets.ReadOnlyModelViewSet):
    queryset = RiderSettlement.objects.select_related('rider', 'period')
    serializer_class = RiderSettlementSerializer
    permission_classes = [IsAuthenticated, IsAdminRole]

    def get_queryset(self):
        queryset = super().get_queryset()
        period_id = self.request.query_params.get('period')
        if period_id:
            queryset = queryset.filter(period_id=period_id)
        return queryset

    @extend_schema(
        request=MarkSettledSerializer,
        responses={200: RiderSettlementSerializer, 409: ErrorResponseSerializer},
        description="Confirm the payout of a rider settlement.",
        tags=['settlements'],
    )
    @action(detail=True, methods=['post'])
    def mark_settled(self, request, pk=None):
        serializer = MarkSettledSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            settlement = mark_rider_settlement_settled(
                settlement_id=pk,
                notes=serializer.validated_data['notes'],
            )
        except DomainError as e:
            return error_response(e)

        return Response(RiderSettlementSerializer(settlement).data)
