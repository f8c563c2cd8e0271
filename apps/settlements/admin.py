from django.contrib import admin, messages

from apps.common.exceptions import DomainError

from .models import WeeklyPeriod, ShopSettlement, RiderSettlement, AdSpend
from .services import regenerate_settlements


class ShopSettlementInline(admin.TabularInline):
    model = ShopSettlement
    extra = 0
    fields = ['shop', 'completed_orders', 'gross_sales', 'total_commission',
              'points_discounts_credited', 'ads_cost', 'net_amount', 'status']
    readonly_fields = fields
    can_delete = False


class RiderSettlementInline(admin.TabularInline):
    model = RiderSettlement
    extra = 0
    fields = ['rider', 'total_deliveries', 'total_earnings', 'total_cash_handled', 'status']
    readonly_fields = fields
    can_delete = False


@admin.register(WeeklyPeriod)
class WeeklyPeriodAdmin(admin.ModelAdmin):
    list_display = ['__str__', 'start_date', 'end_date', 'status', 'closed_at', 'settled_at']
    list_filter = ['status', 'year']
    readonly_fields = ['closed_at', 'closed_by', 'settled_at', 'admin_summary', 'created_at']
    inlines = [ShopSettlementInline, RiderSettlementInline]

    actions = ['regenerate_missing_settlements']

    @admin.action(description='Create missing settlements for closed periods')
    def regenerate_missing_settlements(self, request, queryset):
        for period in queryset:
            try:
                result = regenerate_settlements(period_id=period.pk)
            except DomainError as e:
                self.message_user(request, f'{period}: {e}', level=messages.ERROR)
                continue

            created = len(result.shop_settlements) + len(result.rider_settlements)
            msg = f'{period}: created {created} settlement(s).'
            if result.failures:
                msg += f' {len(result.failures)} still failing.'
                self.message_user(request, msg, level=messages.WARNING)
            else:
                self.message_user(request, msg)


@admin.register(ShopSettlement)
class ShopSettlementAdmin(admin.ModelAdmin):
    list_display = ['shop', 'period', 'gross_sales', 'total_commission',
                    'points_discounts_credited', 'ads_cost', 'net_amount', 'status']
    list_filter = ['status', 'period']
    search_fields = ['shop__name']


@admin.register(RiderSettlement)
class RiderSettlementAdmin(admin.ModelAdmin):
    list_display = ['rider', 'period', 'total_deliveries', 'total_earnings',
                    'total_cash_handled', 'status']
    list_filter = ['status', 'period']
    search_fields = ['rider__full_name']


@admin.register(AdSpend)
class AdSpendAdmin(admin.ModelAdmin):
    list_display = ['shop', 'period', 'amount', 'description', 'created_at']
    list_filter = ['period']
    search_fields = ['shop__name', 'description']
