from django.contrib import admin, messages
from django.utils.html import format_html
from import_export import fields, resources
from import_export.admin import ImportExportModelAdmin
from import_export.widgets import ForeignKeyWidget, IntegerWidget
from adminsortable2.admin import SortableAdminBase, SortableAdminMixin, SortableInlineAdminMixin
from simple_history.admin import SimpleHistoryAdmin

from .exceptions import CatalogError
from .models import (
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
from .services.masters import MasterCatalog
from .services.merge import CatalogMerger
from .services.price_matrix import PriceMatrixResolver


# =============================================================================
# Import/Export Resources
# =============================================================================

class RentPriceField(fields.Field):
    """One price matrix cell exposed as its own rentPrice{P}_{D} column."""

    def __init__(self, cell):
        super().__init__(attribute='rent_prices', column_name=cell, widget=IntegerWidget())
        self.cell = cell

    def get_value(self, instance):
        return (instance.rent_prices or {}).get(self.cell)

    def save(self, instance, row, is_m2m=False, **kwargs):
        matrix = dict(instance.rent_prices or {})
        matrix[self.cell] = self.clean(row, **kwargs)
        instance.rent_prices = matrix


class VehicleResource(resources.ModelResource):
    """
    Resource for importing/exporting vehicles with their price matrix.

    Every rentPrice{P}_{D} cell in use becomes a column; extra cell columns
    found in an imported file are picked up as well. Empty cells are removed.
    """

    brand = fields.Field(
        column_name='brand',
        attribute='brand',
        widget=ForeignKeyWidget(Brand, 'slug')
    )

    class Meta:
        model = Vehicle
        import_id_fields = ['id']
        fields = (
            'id', 'brand', 'name', 'category', 'base_price',
            'is_popular', 'is_new', 'is_active', 'sort_order'
        )
        export_order = fields

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        cells = set()
        for matrix in Vehicle.objects.values_list('rent_prices', flat=True):
            cells.update(PriceMatrixResolver.normalize(matrix))
        self._add_cells(cells)

    def _add_cells(self, names):
        cells = [PriceMatrixResolver.parse_cell_name(name) for name in names]
        for period, ratio in sorted(cell for cell in cells if cell):
            name = PriceMatrixResolver.cell_name(period, ratio)
            if name not in self.fields:
                self.fields[name] = RentPriceField(name)

    def before_import(self, dataset, **kwargs):
        self._add_cells(dataset.headers or [])
        super().before_import(dataset, **kwargs)


# =============================================================================
# Inlines
# =============================================================================

class TrimInline(SortableInlineAdminMixin, admin.TabularInline):
    model = Trim
    extra = 0
    fields = ['name', 'price', 'sort_order']
    show_change_link = True


class ColorInline(SortableInlineAdminMixin, admin.TabularInline):
    model = Color
    extra = 0
    fields = ['color_type', 'name', 'hex_code', 'price', 'is_available', 'master', 'sort_order']
    autocomplete_fields = ['master']


class OptionInline(SortableInlineAdminMixin, admin.TabularInline):
    model = Option
    extra = 0
    fields = ['name', 'category', 'price', 'is_available', 'master', 'sort_order']
    autocomplete_fields = ['master']


class TrimColorInline(admin.TabularInline):
    model = TrimColor
    extra = 0

    def formfield_for_foreignkey(self, db_field, request, **kwargs):
        trim = getattr(request, '_trim_obj', None)
        if db_field.name == 'color' and trim is not None:
            kwargs['queryset'] = Color.objects.filter(vehicle=trim.vehicle)
        return super().formfield_for_foreignkey(db_field, request, **kwargs)


class TrimOptionInline(admin.TabularInline):
    model = TrimOption
    extra = 0
    fields = ['option', 'is_included', 'price_override']

    def formfield_for_foreignkey(self, db_field, request, **kwargs):
        trim = getattr(request, '_trim_obj', None)
        if db_field.name == 'option' and trim is not None:
            kwargs['queryset'] = Option.objects.filter(vehicle=trim.vehicle)
        return super().formfield_for_foreignkey(db_field, request, **kwargs)


# =============================================================================
# Model Admins
# =============================================================================

@admin.register(Brand)
class BrandAdmin(SortableAdminMixin, admin.ModelAdmin):
    list_display = ['name_kr', 'name_en', 'slug', 'is_domestic', 'is_active', 'vehicle_count', 'sort_order']
    list_filter = ['is_domestic', 'is_active']
    search_fields = ['name_kr', 'name_en', 'slug']
    readonly_fields = ['created_at', 'updated_at']

    def vehicle_count(self, obj):
        return obj.vehicles.count()
    vehicle_count.short_description = '차량 수'


class MasterMergeMixin:
    """Admin action folding the selected masters into the most used one."""
    merge_kind = None
    actions = ['merge_selected']
    fixed_fields = ['brand']

    def get_readonly_fields(self, request, obj=None):
        readonly = list(super().get_readonly_fields(request, obj))
        if obj is not None:
            readonly += self.fixed_fields
        return readonly

    @admin.action(description='선택한 항목을 하나로 병합')
    def merge_selected(self, request, queryset):
        masters = list(queryset.with_vehicle_count())
        if len(masters) < 2:
            self.message_user(request, '병합하려면 두 개 이상 선택하세요.', messages.WARNING)
            return
        if len({master.brand_id for master in masters}) > 1:
            self.message_user(request, '같은 브랜드의 항목만 병합할 수 있습니다.', messages.ERROR)
            return

        target = max(masters, key=lambda master: (master.vehicle_count, -master.pk))
        sources = [master.pk for master in masters if master.pk != target.pk]
        try:
            result = CatalogMerger.merge(target.brand, self.merge_kind, target.pk, sources)
        except CatalogError as exc:
            self.message_user(request, f'병합 실패: {exc.message}', messages.ERROR)
            return

        self.message_user(
            request,
            f"병합 완료: '{target.name}'(으)로 {result.deleted_count}개 항목 병합, "
            f"{result.rewritten_count}개 차량 연결 이동 (사용 차량 {result.target_vehicle_count}대)",
        )


@admin.register(MasterColor)
class MasterColorAdmin(MasterMergeMixin, SortableAdminMixin, admin.ModelAdmin):
    merge_kind = 'color'
    fixed_fields = ['brand', 'color_type']
    list_display = ['name', 'brand', 'color_type', 'color_swatch', 'vehicle_count', 'is_active', 'sort_order']
    list_filter = ['brand', 'color_type', 'is_active']
    search_fields = ['name', 'brand__name_kr']

    def get_queryset(self, request):
        return super().get_queryset(request).with_vehicle_count()

    def vehicle_count(self, obj):
        return obj.vehicle_count
    vehicle_count.short_description = '사용 차량'
    vehicle_count.admin_order_field = 'vehicle_count'

    def color_swatch(self, obj):
        if obj.hex_code:
            return format_html(
                '<div style="width: 20px; height: 20px; background-color: {}; '
                'border: 1px solid #ccc; border-radius: 3px;"></div>',
                obj.hex_code
            )
        return '-'
    color_swatch.short_description = '색상'


@admin.register(MasterOption)
class MasterOptionAdmin(MasterMergeMixin, SortableAdminMixin, admin.ModelAdmin):
    merge_kind = 'option'
    list_display = ['name', 'brand', 'category', 'vehicle_count', 'is_active', 'sort_order']
    list_filter = ['brand', 'category', 'is_active']
    search_fields = ['name', 'brand__name_kr']

    def get_queryset(self, request):
        return super().get_queryset(request).with_vehicle_count()

    def vehicle_count(self, obj):
        return obj.vehicle_count
    vehicle_count.short_description = '사용 차량'
    vehicle_count.admin_order_field = 'vehicle_count'


@admin.register(Vehicle)
class VehicleAdmin(SortableAdminBase, ImportExportModelAdmin, SimpleHistoryAdmin):
    resource_class = VehicleResource
    list_display = [
        'name', 'brand', 'category', 'base_price', 'starting_payment',
        'is_popular', 'is_new', 'is_active'
    ]
    list_filter = ['brand', 'category', 'is_popular', 'is_new', 'is_active']
    list_editable = ['is_popular', 'is_new', 'is_active']
    search_fields = ['name', 'brand__name_kr', 'brand__name_en']
    autocomplete_fields = ['brand']
    readonly_fields = ['starting_payment', 'created_at', 'updated_at']
    inlines = [TrimInline, ColorInline, OptionInline]
    list_per_page = 50

    fieldsets = (
        (None, {
            'fields': ('brand', 'name', 'category', 'description', 'is_active')
        }),
        ('사양', {
            'fields': ('fuel_types', 'drive_types', 'seating_capacity_min', 'seating_capacity_max')
        }),
        ('가격', {
            'fields': ('base_price', 'rent_prices', 'starting_payment')
        }),
        ('노출', {
            'fields': ('is_popular', 'is_new', 'sort_order')
        }),
        ('정보', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )

    def starting_payment(self, obj):
        amount = obj.starting_payment
        return f'{amount:,}원' if amount else '상담 필요'
    starting_payment.short_description = '월 렌트료(부터)'

    def save_model(self, request, obj, form, change):
        super().save_model(request, obj, form, change)
        if change and 'brand' in form.changed_data:
            MasterCatalog.relink_vehicle(obj)


@admin.register(Trim)
class TrimAdmin(admin.ModelAdmin):
    list_display = ['name', 'vehicle', 'price', 'color_count', 'option_count', 'sort_order']
    list_filter = ['vehicle__brand']
    search_fields = ['name', 'vehicle__name']
    autocomplete_fields = ['vehicle']
    inlines = [TrimColorInline, TrimOptionInline]

    def get_readonly_fields(self, request, obj=None):
        return ['vehicle'] if obj is not None else []

    def get_form(self, request, obj=None, **kwargs):
        request._trim_obj = obj
        return super().get_form(request, obj, **kwargs)

    def color_count(self, obj):
        return obj.trim_colors.count()
    color_count.short_description = '색상'

    def option_count(self, obj):
        return obj.trim_options.count()
    option_count.short_description = '옵션'
