from django.db import models
from django.db.models import Count


class MasterOptionQuerySet(models.QuerySet):

    def with_vehicle_count(self):
        return self.annotate(vehicle_count=Count('options__vehicle', distinct=True))


class MasterOption(models.Model):
    """Brand-scoped option template (e.g. "Sunroof", "HUD")."""
    brand = models.ForeignKey(
        'leasing.Brand',
        on_delete=models.CASCADE,
        related_name='master_options',
        verbose_name='브랜드'
    )
    name = models.CharField(
        max_length=100,
        verbose_name='옵션명'
    )
    description = models.TextField(
        blank=True,
        verbose_name='설명'
    )
    category = models.CharField(
        max_length=50,
        blank=True,
        verbose_name='분류'
    )
    sort_order = models.PositiveIntegerField(
        default=0,
        verbose_name='정렬 순서'
    )
    is_active = models.BooleanField(
        default=True,
        verbose_name='활성'
    )

    objects = MasterOptionQuerySet.as_manager()

    class Meta:
        ordering = ['sort_order', 'name']
        unique_together = ['brand', 'name']
        verbose_name = '마스터 옵션'
        verbose_name_plural = '마스터 옵션'

    def __str__(self):
        return self.name

    def get_vehicle_count(self):
        return self.options.values('vehicle').distinct().count()


class Option(models.Model):
    vehicle = models.ForeignKey(
        'leasing.Vehicle',
        on_delete=models.CASCADE,
        related_name='options',
        verbose_name='차량'
    )
    master = models.ForeignKey(
        MasterOption,
        on_delete=models.RESTRICT,
        null=True,
        blank=True,
        related_name='options',
        verbose_name='마스터 옵션'
    )
    name = models.CharField(
        max_length=100,
        verbose_name='옵션명'
    )
    description = models.TextField(
        blank=True,
        verbose_name='설명'
    )
    category = models.CharField(
        max_length=50,
        blank=True,
        verbose_name='분류'
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
        verbose_name = '옵션'
        verbose_name_plural = '옵션'

    def __str__(self):
        return self.name
