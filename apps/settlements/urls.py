from django.urls import path, include
from rest_framework.routers import DefaultRouter
from .views import WeeklyPeriodViewSet, ShopSettlementViewSet, RiderSettlementViewSet

app_name = 'settlements'

router = DefaultRouter()
router.register(r'periods', WeeklyPeriodViewSet, basename='period')
router.register(r'settlements/shops', ShopSettlementViewSet, basename='shop-settlement')
router.register(r'settlements/riders', RiderSettlementViewSet, basename='rider-settlement')

urlpatterns = [
    path('', include(router.urls)),
]
