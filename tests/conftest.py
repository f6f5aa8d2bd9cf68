"""Shared catalog fixtures."""

import pytest
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient

from apps.leasing.models import (
    EXTERIOR,
    INTERIOR,
    Brand,
    Color,
    MasterColor,
    MasterOption,
    Option,
    Trim,
    TrimColor,
    TrimOption,
    Vehicle,
)


@pytest.fixture
def brand(db):
    return Brand.objects.create(name_kr='현대', name_en='Hyundai')


@pytest.fixture
def other_brand(db):
    return Brand.objects.create(name_kr='기아', name_en='Kia')


@pytest.fixture
def make_vehicle(brand):
    def _make(name='쏘나타', **kwargs):
        kwargs.setdefault('brand', brand)
        kwargs.setdefault('base_price', 30000000)
        return Vehicle.objects.create(name=name, **kwargs)
    return _make


@pytest.fixture
def make_color():
    def _make(vehicle, name, color_type=EXTERIOR, price=0, master=None, **kwargs):
        return Color.objects.create(
            vehicle=vehicle, name=name, color_type=color_type, price=price,
            master=master, **kwargs
        )
    return _make


@pytest.fixture
def make_option():
    def _make(vehicle, name, price=0, master=None, **kwargs):
        return Option.objects.create(
            vehicle=vehicle, name=name, price=price, master=master, **kwargs
        )
    return _make


@pytest.fixture
def vehicle(make_vehicle):
    """Vehicle priced for 60 months at 0% deposit only."""
    return make_vehicle(rent_prices={'rentPrice60_0': 450000})


@pytest.fixture
def configured(vehicle, make_color, make_option):
    """
    A vehicle with one trim (+1,000,000), a paid exterior color (+300,000),
    a free interior color and two options totalling 500,000, all eligible.
    """
    base_trim = Trim.objects.create(vehicle=vehicle, name='스마트', price=0, sort_order=0)
    trim = Trim.objects.create(vehicle=vehicle, name='프리미엄', price=1000000, sort_order=1)
    exterior = make_color(vehicle, '세레니티 화이트 펄', EXTERIOR, price=300000)
    interior = make_color(vehicle, '블랙', INTERIOR, price=0)
    sunroof = make_option(vehicle, '선루프', price=300000)
    camera = make_option(vehicle, '빌트인 캠', price=200000)
    for color in (exterior, interior):
        TrimColor.objects.create(trim=trim, color=color)
    for option in (sunroof, camera):
        TrimOption.objects.create(trim=trim, option=option)
    return {
        'vehicle': vehicle,
        'base_trim': base_trim,
        'trim': trim,
        'exterior': exterior,
        'interior': interior,
        'options': [sunroof, camera],
    }


@pytest.fixture
def master_color(brand):
    def _make(name, color_type=EXTERIOR, target_brand=None):
        return MasterColor.objects.create(
            brand=target_brand or brand, name=name, color_type=color_type
        )
    return _make


@pytest.fixture
def master_option(brand):
    def _make(name, target_brand=None, **kwargs):
        return MasterOption.objects.create(brand=target_brand or brand, name=name, **kwargs)
    return _make


@pytest.fixture
def staff_user(db):
    return get_user_model().objects.create_user(
        username='operator', password='secret', is_staff=True
    )


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def staff_client(api_client, staff_user):
    api_client.force_authenticate(user=staff_user)
    return api_client
