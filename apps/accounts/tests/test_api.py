import pytest
from django.urls import reverse
from rest_framework import status

from apps.accounts.models import Referral


# =============================================================================
# Current User Tests
# =============================================================================

@pytest.mark.django_db
class TestCurrentUser:
    """Tests for GET /api/accounts/me/"""

    def test_customer_profile(self, client_for, customer_user, customer):
        response = client_for(customer_user).get(reverse('accounts:current-user'))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['user']['email'] == 'mona@example.com'
        assert response.data['user']['role'] == 'customer'
        assert response.data['profile']['full_name'] == 'Mona Adel'
        assert response.data['profile']['total_points'] == 0
        assert response.data['profile']['referral_code'] == customer.referral_code

    def test_shop_profile(self, client_for, shop_user, shop):
        response = client_for(shop_user).get(reverse('accounts:current-user'))

        assert response.data['profile']['name'] == 'Abu Ali Bakery'

    def test_user_without_profile(self, client_for, rider_user):
        response = client_for(rider_user).get(reverse('accounts:current-user'))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['profile'] is None

    def test_unauthenticated(self, api_client):
        response = api_client.get(reverse('accounts:current-user'))

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


# =============================================================================
# Referral Tests
# =============================================================================

@pytest.mark.django_db
class TestApplyReferral:
    """Tests for POST /api/accounts/referral/"""

    def test_apply(self, client_for, customer_user, customer, other_customer):
        response = client_for(customer_user).post(
            reverse('accounts:apply-referral'),
            {'referral_code': other_customer.referral_code},
            format='json',
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['status'] == 'pending'
        assert Referral.objects.filter(referred=customer, referrer=other_customer).exists()

    def test_own_code(self, client_for, customer_user, customer):
        response = client_for(customer_user).post(
            reverse('accounts:apply-referral'),
            {'referral_code': customer.referral_code},
            format='json',
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['code'] == 'SELF_REFERRAL'

    def test_duplicate(self, client_for, customer_user, customer, other_customer):
        client = client_for(customer_user)
        url = reverse('accounts:apply-referral')
        client.post(url, {'referral_code': other_customer.referral_code}, format='json')

        response = client.post(url, {'referral_code': other_customer.referral_code}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['code'] == 'DUPLICATE_REFERRAL'

    def test_shop_forbidden(self, client_for, shop_user, other_customer):
        response = client_for(shop_user).post(
            reverse('accounts:apply-referral'),
            {'referral_code': other_customer.referral_code},
            format='json',
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN
