from django.core.exceptions import ValidationError
from django.db import models

from apps.leasing.exceptions import IneligibleSelection


class Trim(models.Model):
    """
    Trim level of a vehicle (e.g. "Premium", "Calligraphy").
    Only the colors and options linked through TrimColor / TrimOption can be
    selected together with this trim.
    """
    vehicle = models.ForeignKey(
        'leasing.Vehicle',
        on_delete=models.CASCADE,
        related_name='trims',
        verbose_name='차량'
    )
    name = models.CharField(
        max_length=100,
        verbose_name='트림명'
    )
    description = models.TextField(
        blank=True,
        verbose_name='설명'
    )
    price = models.PositiveIntegerField(
        default=0,
        verbose_name='추가 금액'
    )
    sort_order = models.PositiveIntegerField(
        default=0,
        verbose_name='정렬 순서'
    )
    colors = models.ManyToManyField(
        'leasing.Color',
        through='TrimColor',
        blank=True,
        related_name='trims',
        verbose_name='선택 가능 색상'
    )
    options = models.ManyToManyField(
        'leasing.Option',
        through='TrimOption',
        blank=True,
        related_name='trims',
        verbose_name='선택 가능 옵션'
    )

    class Meta:
        ordering = ['sort_order', 'price', 'name']
        verbose_name = '트림'
        verbose_name_plural = '트림'

    def __str__(self):
        return f'{self.vehicle.name} {self.name}'


class _SameVehicleMixin:
    """Join records may only link a trim to items of the trim's own vehicle."""
    item_field = None

    def _item_vehicle_mismatch(self):
        item = getattr(self, self.item_field)
        return item.vehicle_id != self.trim.vehicle_id

    def clean(self):
        super().clean()
        if self.trim_id and getattr(self, f'{self.item_field}_id') and self._item_vehicle_mismatch():
            raise ValidationError('트림과 같은 차량의 항목만 연결할 수 있습니다.')

    def save(self, *args, **kwargs):
        if self._item_vehicle_mismatch():
            raise IneligibleSelection(
                f'{self.item_field} {getattr(self, f"{self.item_field}_id")} '
                f'does not belong to the vehicle of trim {self.trim_id}',
                trim_id=self.trim_id,
            )
        super().save(*args, **kwargs)


class TrimColor(_SameVehicleMixin, models.Model):
    item_field = 'color'

    trim = models.ForeignKey(
        Trim,
        on_delete=models.CASCADE,
        related_name='trim_colors',
        verbose_name='트림'
    )
    color = models.ForeignKey(
        'leasing.Color',
        on_delete=models.RESTRICT,
        related_name='trim_colors',
        verbose_name='색상'
    )

    class Meta:
        unique_together = ['trim', 'color']
        verbose_name = '트림 색상'
        verbose_name_plural = '트림 색상'

    def __str__(self):
        return f'{self.trim} - {self.color}'


class TrimOption(_SameVehicleMixin, models.Model):
    """
    Option eligibility for a trim.
    ``price_override`` of None means the option's own price applies.
    """
    item_field = 'option'

    trim = models.ForeignKey(
        Trim,
        on_delete=models.CASCADE,
        related_name='trim_options',
        verbose_name='트림'
    )
    option = models.ForeignKey(
        'leasing.Option',
        on_delete=models.RESTRICT,
        related_name='trim_options',
        verbose_name='옵션'
    )
    is_included = models.BooleanField(
        default=False,
        verbose_name='기본 포함'
    )
    price_override = models.PositiveIntegerField(
        null=True,
        blank=True,
        verbose_name='트림별 가격',
        help_text='비워두면 옵션 기본 가격을 사용합니다'
    )

    class Meta:
        unique_together = ['trim', 'option']
        verbose_name = '트림 옵션'
        verbose_name_plural = '트림 옵션'

    def __str__(self):
        return f'{self.trim} - {self.option}'

    @property
    def effective_price(self):
        if self.is_included:
            return 0
        if self.price_override is not None:
            return self.price_override
        return self.option.price
