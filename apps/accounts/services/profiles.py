"""Lookups from an authenticated user to their role profile."""

from apps.accounts.models import User, Customer, Shop, Rider

from .exceptions import ProfileNotFoundError


def get_customer_for_user(user: User) -> Customer:
    try:
        return user.customer
    except Customer.DoesNotExist:
        raise ProfileNotFoundError('No customer profile for this account')


def get_shop_for_user(user: User) -> Shop:
    try:
        return user.shop
    except Shop.DoesNotExist:
        raise ProfileNotFoundError('No shop profile for this account')


def get_rider_for_user(user: User) -> Rider:
    try:
        return user.rider
    except Rider.DoesNotExist:
        raise ProfileNotFoundError('No rider profile for this account')
