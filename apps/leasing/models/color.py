from django.db import models
from django.db.models import Count

EXTERIOR = 'EXTERIOR'
INTERIOR = 'INTERIOR'

COLOR_TYPE_CHOICES = [
    (EXTERIOR, '외장'),
    (INTERIOR, '내장'),
]


class MasterColorQuerySet(models.QuerySet):

    def with_vehicle_count(self):
        """Annotate the number of distinct vehicles referencing each master."""
        return self.annotate(vehicle_count=Count('colors__vehicle', distinct=True))


class MasterColor(models.Model):
    """
    Brand-scoped color template shared by many vehicles.
    Vehicle-scoped Color rows point here; the reference count is never stored.
    """
    brand = models.ForeignKey(
        'leasing.Brand',
        on_delete=models.CASCADE,
        related_name='master_colors',
        verbose_name='브랜드'
    )
    color_type = models.CharField(
        max_length=10,
        choices=COLOR_TYPE_CHOICES,
        verbose_name='구분'
    )
    name = models.CharField(
        max_length=100,
        verbose_name='색상명'
    )
    hex_code = models.CharField(
        max_length=7,
        blank=True,
        verbose_name='색상 코드'
    )
    sort_order = models.PositiveIntegerField(
        default=0,
        verbose_name='정렬 순서'
    )
    is_active = models.BooleanField(
        default=True,
        verbose_name='활성'
    )

    objects = MasterColorQuerySet.as_manager()

    class Meta:
        ordering = ['sort_order', 'name']
        unique_together = ['brand', 'color_type', 'name']
        verbose_name = '마스터 색상'
        verbose_name_plural = '마스터 색상'

    def __str__(self):
        return f'{self.name} ({self.get_color_type_display()})'

    def get_vehicle_count(self):
        return self.colors.values('vehicle').distinct().count()


class Color(models.Model):
    """Exterior or interior color offered on one vehicle."""
    vehicle = models.ForeignKey(
        'leasing.Vehicle',
        on_delete=models.CASCADE,
        related_name='colors',
        verbose_name='차량'
    )
    master = models.ForeignKey(
        MasterColor,
        on_delete=models.RESTRICT,
        null=True,
        blank=True,
        related_name='colors',
        verbose_name='마스터 색상'
    )
    color_type = models.CharField(
        max_length=10,
        choices=COLOR_TYPE_CHOICES,
        verbose_name='구분'
    )
    name = models.CharField(
        max_length=100,
        verbose_name='색상명'
    )
    hex_code = models.CharField(
        max_length=7,
        blank=True,
        verbose_name='색상 코드'
    )
    price = models.PositiveIntegerField(
        default=0,
        verbose_name='추가 금액'
    )
    sort_order = models.PositiveIntegerField(
        default=0,
        verbose_name='정렬 순서'
    )
    is_available = models.BooleanField(
        default=True,
        verbose_name='선택 가능'
    )

    class Meta:
        ordering = ['sort_order', 'name']
        verbose_name = '색상'
        verbose_name_plural = '색상'

    def __str__(self):
        return f'{self.name} ({self.get_color_type_display()})'
