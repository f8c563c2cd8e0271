from django.conf import settings
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination
from drf_spectacular.utils import extend_schema

from apps.accounts.models import Customer
from apps.accounts.permissions import IsCustomer, IsAdminRole
from apps.accounts.services import get_customer_for_user
from apps.accounts.views import ErrorResponseSerializer
from apps.common.exceptions import DomainError, NotFoundError
from apps.common.responses import error_response

from .serializers import (
    PointsTransactionSerializer,
    PointsBalanceSerializer,
    PointsAdjustmentSerializer,
)
from .services import (
    adjust_points,
    get_points_balance,
    get_points_history,
    points_to_money,
)


class PointsHistoryPagination(PageNumberPagination):
    page_size = 50
    page_size_query_param = 'page_size'
    max_page_size = 200


@extend_schema(
    responses={200: PointsBalanceSerializer},
    description="Current points balance of the customer.",
    tags=['points'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated, IsCustomer])
def points_balance(request):
    """Get the current customer's points balance."""
    try:
        customer = get_customer_for_user(request.user)
    except DomainError as e:
        return error_response(e)

    total = get_points_balance(customer=customer)
    serializer = PointsBalanceSerializer({
        'total_points': total,
        'point_value': settings.POINT_VALUE,
        'monetary_value': points_to_money(total),
    })
    return Response(serializer.data)


@extend_schema(
    responses={200: PointsTransactionSerializer(many=True)},
    description="Points ledger of the customer, newest first.",
    tags=['points'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated, IsCustomer])
def points_history(request):
    """Get the current customer's points transactions."""
    try:
        customer = get_customer_for_user(request.user)
    except DomainError as e:
        return error_response(e)

    paginator = PointsHistoryPagination()
    page = paginator.paginate_queryset(get_points_history(customer=customer), request)
    serializer = PointsTransactionSerializer(page, many=True)
    return paginator.get_paginated_response(serializer.data)


@extend_schema(
    request=PointsAdjustmentSerializer,
    responses={201: PointsTransactionSerializer, 400: ErrorResponseSerializer},
    description="Manually add (positive) or remove (negative) points from a customer.",
    tags=['points'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated, IsAdminRole])
def points_adjust(request):
    """Admin manual points adjustment."""
    serializer = PointsAdjustmentSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data

    try:
        try:
            customer = Customer.objects.get(pk=data['customer_id'])
        except Customer.DoesNotExist:
            raise NotFoundError('Customer not found')

        entry = adjust_points(
            customer=customer,
            points=data['points'],
            reason=data['reason'],
            created_by=request.user,
        )
    except DomainError as e:
        return error_response(e)

    return Response(PointsTransactionSerializer(entry).data, status=status.HTTP_201_CREATED)
