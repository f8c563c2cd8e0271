import pytest
from django.core.management import call_command
from django.core.management.base import CommandError
from django.urls import reverse
from io import StringIO
from rest_framework import status

from apps.settlements.models import WeeklyPeriod, PeriodStatus, ShopSettlement
from apps.settlements.services import close_period, settlement_aggregation


@pytest.mark.django_db
class TestClosePeriodEndpoint:
    """Tests for POST /api/admin/periods/close/"""

    def test_admin_closes_period(self, client_for, admin_user, period, make_order):
        make_order(subtotal='300', points_used=10)

        response = client_for(admin_user).post(reverse('settlements:period-close'))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['period']['status'] == 'closed'
        assert response.data['next_period']['status'] == 'active'
        assert response.data['admin_summary']['admin_net_revenue'] == '20.00'
        assert response.data['shop_settlements'][0]['net_amount'] == '280.00'
        assert response.data['failures'] == []

    def test_non_admin_forbidden(self, client_for, shop_user, period):
        response = client_for(shop_user).post(reverse('settlements:period-close'))

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert WeeklyPeriod.objects.get(pk=period.pk).status == PeriodStatus.ACTIVE

    def test_unauthenticated(self, api_client):
        response = api_client.post(reverse('settlements:period-close'))

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


@pytest.mark.django_db
class TestRegeneratePeriodEndpoint:
    """Tests for POST /api/admin/periods/{id}/regenerate/"""

    def test_creates_missing_settlements(self, client_for, admin_user, period, make_order):
        make_order(subtotal='300')
        settlement_aggregation._lock_and_close(period.pk, None)

        response = client_for(admin_user).post(
            reverse('settlements:period-regenerate', args=[period.pk])
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data['next_period'] is None
        assert response.data['shop_settlements'][0]['net_amount'] == '270.00'
        assert ShopSettlement.objects.filter(period=period).count() == 1

    def test_active_period_conflict(self, client_for, admin_user, period):
        response = client_for(admin_user).post(
            reverse('settlements:period-regenerate', args=[period.pk])
        )

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.data['code'] == 'PERIOD_NOT_CLOSED'


@pytest.mark.django_db
class TestPeriodEndpoints:

    def test_list_periods(self, client_for, admin_user, period):
        close_period()

        response = client_for(admin_user).get(reverse('settlements:period-list'))

        assert response.status_code == status.HTTP_200_OK
        assert len(response.data) == 2

    def test_period_detail_includes_settlements(self, client_for, admin_user, period, make_order):
        make_order(subtotal='300')
        close_period()

        response = client_for(admin_user).get(reverse('settlements:period-detail', args=[period.pk]))

        assert response.status_code == status.HTTP_200_OK
        assert len(response.data['shop_settlements']) == 1


@pytest.mark.django_db
class TestMarkSettledEndpoint:

    def test_mark_shop_settlement(self, client_for, admin_user, period, make_order):
        make_order(subtotal='300')
        settlement = close_period().shop_settlements[0]
        client = client_for(admin_user)
        url = reverse('settlements:shop-settlement-mark-settled', args=[settlement.pk])

        response = client.post(url, {'notes': 'Paid in cash'}, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['status'] == 'settled'

        response = client.post(url, {}, format='json')

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.data['code'] == 'SETTLEMENT_ALREADY_SETTLED'

    def test_filter_by_period(self, client_for, admin_user, period, make_order):
        make_order(subtotal='300')
        close_period()

        response = client_for(admin_user).get(
            reverse('settlements:shop-settlement-list'), {'period': str(period.pk)}
        )

        assert response.status_code == status.HTTP_200_OK
        assert len(response.data) == 1


@pytest.mark.django_db
class TestClosePeriodCommand:

    def test_command_closes_active_period(self, period, make_order):
        make_order(subtotal='300')
        out = StringIO()

        call_command('close_period', stdout=out)

        assert 'Period closed.' in out.getvalue()
        assert ShopSettlement.objects.filter(period=period).count() == 1
        assert WeeklyPeriod.objects.get(pk=period.pk).status == PeriodStatus.CLOSED

    def test_command_rejects_closed_period(self, period):
        close_period()

        with pytest.raises(CommandError):
            call_command('close_period', '--period', str(period.pk), stdout=StringIO())

    def test_retry_creates_missing_settlements(self, period, make_order):
        make_order(subtotal='300')
        settlement_aggregation._lock_and_close(period.pk, None)
        out = StringIO()

        call_command('close_period', '--period', str(period.pk), '--retry', stdout=out)

        assert 'Regenerated' in out.getvalue()
        assert ShopSettlement.objects.filter(period=period).count() == 1

    def test_retry_needs_period(self, db):
        with pytest.raises(CommandError):
            call_command('close_period', '--retry', stdout=StringIO())
