from rest_framework import status, serializers
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema

from apps.common.exceptions import DomainError
from apps.common.responses import error_response

from .models import UserRole
from .permissions import IsCustomer
from .serializers import (
    UserSerializer,
    CustomerSerializer,
    ShopMinimalSerializer,
    RiderMinimalSerializer,
    ApplyReferralSerializer,
    ReferralSerializer,
)
from .services import (
    apply_referral_code,
    get_customer_for_user,
    get_shop_for_user,
    get_rider_for_user,
)


class ErrorResponseSerializer(serializers.Serializer):
    error = serializers.CharField()
    code = serializers.CharField()


@extend_schema(
    responses={200: UserSerializer},
    description="Get the current user together with their role profile.",
    tags=['accounts'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def get_current_user(request):
    """Return the current user and role profile."""
    user = request.user
    data = {'user': UserSerializer(user).data, 'profile': None}

    try:
        if user.role == UserRole.CUSTOMER:
            data['profile'] = CustomerSerializer(get_customer_for_user(user)).data
        elif user.role == UserRole.SHOP:
            data['profile'] = ShopMinimalSerializer(get_shop_for_user(user)).data
        elif user.role == UserRole.RIDER:
            data['profile'] = RiderMinimalSerializer(get_rider_for_user(user)).data
    except DomainError:
        # Profile not provisioned yet; the user record alone is still valid
        pass

    return Response(data)


@extend_schema(
    request=ApplyReferralSerializer,
    responses={201: ReferralSerializer, 400: ErrorResponseSerializer},
    description="Apply another customer's referral code (once, before the first completed order).",
    tags=['accounts'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated, IsCustomer])
def apply_referral(request):
    """Apply a referral code to the current customer."""
    serializer = ApplyReferralSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        customer = get_customer_for_user(request.user)
        referral = apply_referral_code(
            customer=customer,
            referral_code=serializer.validated_data['referral_code'],
        )
    except DomainError as e:
        return error_response(e)

    return Response(ReferralSerializer(referral).data, status=status.HTTP_201_CREATED)
