from django.db import models
from django.utils.text import slugify


class Brand(models.Model):
    """
    Vehicle manufacturer.
    Owns the shared master catalog of colors and options for its vehicles.
    """
    name_kr = models.CharField(
        max_length=100,
        verbose_name='브랜드명(한글)'
    )
    name_en = models.CharField(
        max_length=100,
        blank=True,
        verbose_name='브랜드명(영문)'
    )
    slug = models.SlugField(
        max_length=120,
        unique=True,
        allow_unicode=True,
        verbose_name='Slug'
    )
    is_domestic = models.BooleanField(
        default=True,
        verbose_name='국산 브랜드'
    )
    is_active = models.BooleanField(
        default=True,
        verbose_name='활성'
    )
    sort_order = models.PositiveIntegerField(
        default=999,
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

    class Meta:
        ordering = ['sort_order', 'name_kr']
        verbose_name = '브랜드'
        verbose_name_plural = '브랜드'

    def __str__(self):
        return self.name_kr

    def save(self, *args, **kwargs):
        if not self.slug:
            self.slug = self._unique_slug()
        super().save(*args, **kwargs)

    def _unique_slug(self):
        base = slugify(self.name_en or self.name_kr, allow_unicode=True) or 'brand'
        slug = base
        counter = 1
        while Brand.objects.filter(slug=slug).exclude(pk=self.pk).exists():
            slug = f'{base}-{counter}'
            counter += 1
        return slug
