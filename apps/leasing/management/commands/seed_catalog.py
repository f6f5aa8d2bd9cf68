"""
Create a small sample catalog.
Run with: python manage.py seed_catalog
"""
from django.core.management.base import BaseCommand
from django.db import transaction

from apps.leasing.models import EXTERIOR, INTERIOR, Brand, Trim, Vehicle
from apps.leasing.services.integrity import CatalogIntegrity
from apps.leasing.services.masters import MasterCatalog

BRANDS = [
    {'name_kr': '현대', 'name_en': 'Hyundai', 'is_domestic': True, 'sort_order': 1},
    {'name_kr': '제네시스', 'name_en': 'Genesis', 'is_domestic': True, 'sort_order': 2},
]

VEHICLES = [
    {
        'brand': 'Hyundai',
        'name': '쏘나타',
        'category': 'SEDAN',
        'fuel_types': ['가솔린', '하이브리드'],
        'base_price': 28000000,
        'is_popular': True,
        'rent_prices': {
            'rentPrice36_0': 520000, 'rentPrice48_0': 470000,
            'rentPrice60_0': 430000, 'rentPrice60_30': 350000,
        },
        'trims': [('프리미엄', 0), ('익스클루시브', 2500000)],
        'colors': [
            (EXTERIOR, '어비스 블랙 펄', '#1c1c1e', 0),
            (EXTERIOR, '세레니티 화이트 펄', '#f4f4f2', 80000),
            (INTERIOR, '블랙 모노톤', '#111111', 0),
        ],
        'options': [('선루프', 'exterior', 500000), ('빌트인 캠', 'convenience', 450000)],
    },
    {
        'brand': 'Genesis',
        'name': 'GV80',
        'category': 'SUV',
        'fuel_types': ['가솔린', '디젤'],
        'base_price': 69300000,
        'is_new': True,
        'rent_prices': {
            'rentPrice48_0': 1250000, 'rentPrice60_0': 1120000,
            'rentPrice60_25': 930000, 'rentPrice60_50': 740000,
        },
        'trims': [('2.5T', 0), ('3.5T', 6000000)],
        'colors': [
            (EXTERIOR, '우유니 화이트', '#f5f5f5', 0),
            (EXTERIOR, '비크 블랙', '#0b0b0b', 0),
            (INTERIOR, '옵시디언 블랙', '#1a1a1a', 0),
        ],
        'options': [('파노라마 선루프', 'exterior', 1300000), ('HUD', 'convenience', 1000000)],
    },
]


class Command(BaseCommand):
    help = 'Create sample brands, vehicles, trims, colors and options'

    @transaction.atomic
    def handle(self, *args, **options):
        brands = {}
        for data in BRANDS:
            brand, _ = Brand.objects.get_or_create(name_en=data['name_en'], defaults=data)
            brands[brand.name_en] = brand
        self.stdout.write(f'Brands: {len(brands)}')

        for data in VEHICLES:
            vehicle, created = Vehicle.objects.get_or_create(
                brand=brands[data['brand']],
                name=data['name'],
                defaults={
                    'category': data['category'],
                    'fuel_types': data['fuel_types'],
                    'base_price': data['base_price'],
                    'rent_prices': data['rent_prices'],
                    'is_popular': data.get('is_popular', False),
                    'is_new': data.get('is_new', False),
                },
            )
            if not created:
                self.stdout.write(f'Skipping existing vehicle {vehicle}')
                continue

            colors = [
                MasterCatalog.add_color(vehicle, color_type, name, hex_code, price)[0]
                for color_type, name, hex_code, price in data['colors']
            ]
            options = [
                MasterCatalog.add_option(vehicle, name, price, category=category)[0]
                for name, category, price in data['options']
            ]
            for index, (name, price) in enumerate(data['trims']):
                trim = Trim.objects.create(vehicle=vehicle, name=name, price=price, sort_order=index)
                CatalogIntegrity.set_trim_colors(trim, [color.pk for color in colors])
                # Higher trims include the first option
                CatalogIntegrity.set_trim_options(trim, [
                    {'option_id': option.pk, 'is_included': index > 0 and position == 0}
                    for position, option in enumerate(options)
                ])
            self.stdout.write(f'Created {vehicle}')

        self.stdout.write(self.style.SUCCESS('Sample catalog ready'))
