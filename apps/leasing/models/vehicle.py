from django.db import models
from simple_history.models import HistoricalRecords

from apps.leasing.services.price_matrix import PriceMatrixResolver


class Vehicle(models.Model):
    """
    A leasable vehicle model (e.g. "Sonata", "GV80").

    Monthly payments live in ``rent_prices``, a sparse JSON object keyed by
    ``rentPrice{period}_{depositRatio}``. Cells without a positive price are
    dropped on save and read as "consult required".
    """
    CATEGORY_CHOICES = [
        ('SEDAN', '세단'),
        ('SUV', 'SUV'),
        ('TRUCK', '트럭'),
        ('VAN', '밴'),
        ('EV', '전기차'),
        ('COMPACT', '경차'),
        ('HATCHBACK', '해치백'),
        ('COUPE', '쿠페'),
        ('CONVERTIBLE', '컨버터블'),
    ]

    brand = models.ForeignKey(
        'leasing.Brand',
        on_delete=models.CASCADE,
        related_name='vehicles',
        verbose_name='브랜드'
    )
    name = models.CharField(
        max_length=200,
        verbose_name='차량명'
    )
    description = models.TextField(
        blank=True,
        verbose_name='설명'
    )
    category = models.CharField(
        max_length=20,
        choices=CATEGORY_CHOICES,
        default='SEDAN',
        verbose_name='차종'
    )
    fuel_types = models.JSONField(
        default=list,
        blank=True,
        verbose_name='연료',
        help_text='예: ["가솔린", "하이브리드"]'
    )
    drive_types = models.JSONField(
        default=list,
        blank=True,
        verbose_name='구동 방식',
        help_text='예: ["2WD", "AWD"]'
    )
    seating_capacity_min = models.PositiveSmallIntegerField(
        null=True,
        blank=True,
        verbose_name='최소 승차 인원'
    )
    seating_capacity_max = models.PositiveSmallIntegerField(
        null=True,
        blank=True,
        verbose_name='최대 승차 인원'
    )
    base_price = models.PositiveBigIntegerField(
        default=0,
        verbose_name='기본 차량가'
    )
    rent_prices = models.JSONField(
        default=dict,
        blank=True,
        verbose_name='월 렌트료 표',
        help_text='{"rentPrice60_0": 450000, ...}'
    )
    is_popular = models.BooleanField(
        default=False,
        verbose_name='인기 차량'
    )
    is_new = models.BooleanField(
        default=False,
        verbose_name='신차'
    )
    is_active = models.BooleanField(
        default=True,
        verbose_name='활성'
    )
    sort_order = models.PositiveIntegerField(
        default=0,
        verbose_name='정렬 순서'
    )
    created_at = models.DateTimeField(
        auto_now_add=True,
        verbose_name='생성일'
    )
    updated_at = models.DateTimeField(
        auto_now=True,
        verbose_name='수정일'
    )

    history = HistoricalRecords()

    class Meta:
        ordering = ['sort_order', 'name']
        verbose_name = '차량'
        verbose_name_plural = '차량'

    def __str__(self):
        return f'{self.brand} {self.name}'

    def save(self, *args, **kwargs):
        self.rent_prices = PriceMatrixResolver.normalize(self.rent_prices)
        super().save(*args, **kwargs)

    def get_rent_price(self, period, deposit_ratio):
        return PriceMatrixResolver.resolve(self.rent_prices, period, deposit_ratio)

    @property
    def starting_payment(self):
        return PriceMatrixResolver.starting_payment(self.rent_prices)

    @property
    def cheapest_trim_price(self):
        prices = [trim.price for trim in self.trims.all()]
        return min(prices) if prices else 0
