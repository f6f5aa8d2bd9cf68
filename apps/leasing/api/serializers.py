from django.db import transaction
from rest_framework import serializers

from apps.leasing.conf import get_setting
from apps.leasing.models import (
    Brand,
    Color,
    MasterColor,
    MasterOption,
    Option,
    Trim,
    TrimOption,
    Vehicle,
)
from apps.leasing.services.masters import MasterCatalog
from apps.leasing.services.merge import KINDS
from apps.leasing.services.price_matrix import PriceMatrixResolver


# =============================================================================
# Brand / Master catalog Serializers
# =============================================================================

class FixedAfterCreateMixin:
    """
    Rejects changes to ``fixed_fields`` on update: a row stays with the
    vehicle, brand or color type it was created under.
    """
    fixed_fields = ()

    def validate(self, attrs):
        attrs = super().validate(attrs)
        if self.instance is None:
            return attrs
        errors = {
            name: '생성 후에는 변경할 수 없습니다.'
            for name in self.fixed_fields
            if name in attrs and attrs[name] != getattr(self.instance, name)
        }
        if errors:
            raise serializers.ValidationError(errors)
        return attrs


class BrandSerializer(serializers.ModelSerializer):
    vehicle_count = serializers.SerializerMethodField()

    class Meta:
        model = Brand
        fields = [
            'id', 'name_kr', 'name_en', 'slug', 'is_domestic', 'is_active',
            'sort_order', 'vehicle_count'
        ]
        read_only_fields = ['slug']

    def get_vehicle_count(self, obj):
        return obj.vehicles.filter(is_active=True).count()


class MasterColorSerializer(FixedAfterCreateMixin, serializers.ModelSerializer):
    fixed_fields = ('brand', 'color_type')
    vehicle_count = serializers.IntegerField(read_only=True)

    class Meta:
        model = MasterColor
        fields = [
            'id', 'brand', 'color_type', 'name', 'hex_code', 'sort_order',
            'is_active', 'vehicle_count'
        ]


class MasterOptionSerializer(FixedAfterCreateMixin, serializers.ModelSerializer):
    fixed_fields = ('brand',)
    vehicle_count = serializers.IntegerField(read_only=True)

    class Meta:
        model = MasterOption
        fields = [
            'id', 'brand', 'name', 'description', 'category', 'sort_order',
            'is_active', 'vehicle_count'
        ]


# =============================================================================
# Vehicle-scoped item Serializers
# =============================================================================

class ColorSerializer(FixedAfterCreateMixin, serializers.ModelSerializer):
    fixed_fields = ('vehicle', 'color_type')
    master_name = serializers.SerializerMethodField()

    class Meta:
        model = Color
        fields = [
            'id', 'vehicle', 'master', 'master_name', 'color_type', 'name',
            'hex_code', 'price', 'sort_order', 'is_available'
        ]
        read_only_fields = ['master']

    def create(self, validated_data):
        color, _ = MasterCatalog.add_color(
            validated_data['vehicle'],
            validated_data['color_type'],
            validated_data['name'],
            hex_code=validated_data.get('hex_code', ''),
            price=validated_data.get('price', 0),
            is_available=validated_data.get('is_available', True),
        )
        return color

    @transaction.atomic
    def update(self, instance, validated_data):
        name = validated_data.pop('name', None)
        if name is not None and name != instance.name:
            instance = MasterCatalog.rename_color(instance, name)
        return super().update(instance, validated_data)

    def get_master_name(self, obj):
        return obj.master.name if obj.master_id else None


class OptionSerializer(FixedAfterCreateMixin, serializers.ModelSerializer):
    fixed_fields = ('vehicle',)
    master_name = serializers.SerializerMethodField()

    class Meta:
        model = Option
        fields = [
            'id', 'vehicle', 'master', 'master_name', 'name', 'description',
            'category', 'price', 'sort_order', 'is_available'
        ]
        read_only_fields = ['master']

    def create(self, validated_data):
        option, _ = MasterCatalog.add_option(
            validated_data['vehicle'],
            validated_data['name'],
            price=validated_data.get('price', 0),
            description=validated_data.get('description', ''),
            category=validated_data.get('category', ''),
            is_available=validated_data.get('is_available', True),
        )
        return option

    @transaction.atomic
    def update(self, instance, validated_data):
        name = validated_data.pop('name', None)
        if name is not None and name != instance.name:
            instance = MasterCatalog.rename_option(instance, name)
        return super().update(instance, validated_data)

    def get_master_name(self, obj):
        return obj.master.name if obj.master_id else None


class TrimOptionSerializer(serializers.ModelSerializer):
    option_name = serializers.CharField(source='option.name', read_only=True)
    option_price = serializers.IntegerField(source='option.price', read_only=True)
    effective_price = serializers.IntegerField(read_only=True)

    class Meta:
        model = TrimOption
        fields = [
            'option', 'option_name', 'option_price', 'is_included',
            'price_override', 'effective_price'
        ]


class TrimSerializer(FixedAfterCreateMixin, serializers.ModelSerializer):
    fixed_fields = ('vehicle',)
    color_ids = serializers.SerializerMethodField()
    options = TrimOptionSerializer(source='trim_options', many=True, read_only=True)

    class Meta:
        model = Trim
        fields = [
            'id', 'vehicle', 'name', 'description', 'price', 'sort_order',
            'color_ids', 'options'
        ]

    def get_color_ids(self, obj):
        return [trim_color.color_id for trim_color in obj.trim_colors.all()]


# =============================================================================
# Vehicle Serializers
# =============================================================================

class RentPriceFieldsMixin:
    """
    Exposes the price matrix as flat ``rentPrice{P}_{D}`` fields.

    On write, cells given as null, 0 or negative are removed from the
    matrix; cells not mentioned are kept.
    """
    def to_representation(self, instance):
        data = super().to_representation(instance)
        data.update(PriceMatrixResolver.normalize(instance.rent_prices))
        return data

    def to_internal_value(self, data):
        cells = {}
        errors = {}
        for key, value in data.items():
            if PriceMatrixResolver.parse_cell_name(key) is None:
                continue
            if value == '':
                value = None
            try:
                cells[key] = serializers.IntegerField(allow_null=True).run_validation(value)
            except serializers.ValidationError as exc:
                errors[key] = exc.detail

        validated = super().to_internal_value(data)
        if errors:
            raise serializers.ValidationError(errors)
        if cells:
            matrix = dict(self.instance.rent_prices) if self.instance is not None else {}
            matrix.update(cells)
            validated['rent_prices'] = PriceMatrixResolver.normalize(matrix)
        return validated


class VehicleListSerializer(serializers.ModelSerializer):
    brand_name = serializers.CharField(source='brand.name_kr', read_only=True)
    starting_payment = serializers.IntegerField(read_only=True)

    class Meta:
        model = Vehicle
        fields = [
            'id', 'brand', 'brand_name', 'name', 'category', 'fuel_types',
            'base_price', 'starting_payment', 'is_popular', 'is_new', 'sort_order'
        ]


class VehicleDetailSerializer(RentPriceFieldsMixin, serializers.ModelSerializer):
    brand = BrandSerializer(read_only=True)
    trims = TrimSerializer(many=True, read_only=True)
    colors = serializers.SerializerMethodField()
    options = serializers.SerializerMethodField()
    starting_payment = serializers.IntegerField(read_only=True)
    available_periods = serializers.SerializerMethodField()

    class Meta:
        model = Vehicle
        fields = [
            'id', 'brand', 'name', 'description', 'category', 'fuel_types',
            'drive_types', 'seating_capacity_min', 'seating_capacity_max',
            'base_price', 'starting_payment', 'available_periods',
            'is_popular', 'is_new', 'trims', 'colors', 'options'
        ]

    def get_colors(self, obj):
        colors = [color for color in obj.colors.all() if color.is_available]
        return ColorSerializer(colors, many=True).data

    def get_options(self, obj):
        options = [option for option in obj.options.all() if option.is_available]
        return OptionSerializer(options, many=True).data

    def get_available_periods(self, obj):
        return PriceMatrixResolver.available_periods(obj.rent_prices)


class VehicleAdminSerializer(RentPriceFieldsMixin, serializers.ModelSerializer):
    history_count = serializers.SerializerMethodField()

    class Meta:
        model = Vehicle
        fields = [
            'id', 'brand', 'name', 'description', 'category', 'fuel_types',
            'drive_types', 'seating_capacity_min', 'seating_capacity_max',
            'base_price', 'is_popular', 'is_new', 'is_active', 'sort_order',
            'created_at', 'updated_at', 'history_count'
        ]
        read_only_fields = ['created_at', 'updated_at']

    def get_history_count(self, obj):
        return obj.history.count()

    def validate(self, attrs):
        low = attrs.get('seating_capacity_min', getattr(self.instance, 'seating_capacity_min', None))
        high = attrs.get('seating_capacity_max', getattr(self.instance, 'seating_capacity_max', None))
        if low is not None and high is not None and low > high:
            raise serializers.ValidationError(
                {'seating_capacity_max': '최대 승차 인원은 최소 승차 인원보다 작을 수 없습니다.'}
            )
        return attrs

    @transaction.atomic
    def update(self, instance, validated_data):
        previous_brand_id = instance.brand_id
        vehicle = super().update(instance, validated_data)
        if vehicle.brand_id != previous_brand_id:
            MasterCatalog.relink_vehicle(vehicle)
        return vehicle


# =============================================================================
# Request Serializers
# =============================================================================

class QuoteRequestSerializer(serializers.Serializer):
    trim_id = serializers.IntegerField(required=False, allow_null=True)
    exterior_color_id = serializers.IntegerField(required=False, allow_null=True)
    interior_color_id = serializers.IntegerField(required=False, allow_null=True)
    option_ids = serializers.ListField(
        child=serializers.IntegerField(), required=False, default=list
    )
    period = serializers.IntegerField(required=False)
    deposit_ratio = serializers.IntegerField(min_value=0, max_value=100, default=0)

    def validate_period(self, value):
        periods = get_setting('RENT_PERIODS')
        if value not in periods:
            raise serializers.ValidationError(
                f'Period must be one of {", ".join(str(period) for period in periods)}.'
            )
        return value


class MergeRequestSerializer(serializers.Serializer):
    type = serializers.ChoiceField(choices=sorted(KINDS))
    target_id = serializers.IntegerField()
    source_ids = serializers.ListField(
        child=serializers.IntegerField(), allow_empty=False
    )

    def validate(self, attrs):
        if attrs['target_id'] in attrs['source_ids']:
            raise serializers.ValidationError(
                {'source_ids': 'The merge target cannot also be a source.'}
            )
        return attrs


class ImportRequestSerializer(serializers.Serializer):
    source_vehicle_ids = serializers.ListField(
        child=serializers.IntegerField(), allow_empty=False
    )
    import_colors = serializers.BooleanField(default=True)
    import_options = serializers.BooleanField(default=True)
    import_trims = serializers.BooleanField(default=False)


class TrimColorsSerializer(serializers.Serializer):
    color_ids = serializers.ListField(child=serializers.IntegerField(), allow_empty=True)


class TrimOptionSettingSerializer(serializers.Serializer):
    option_id = serializers.IntegerField()
    is_included = serializers.BooleanField(default=False)
    price_override = serializers.IntegerField(
        min_value=0, required=False, allow_null=True, default=None
    )


class TrimOptionsSerializer(serializers.Serializer):
    options = TrimOptionSettingSerializer(many=True, allow_empty=True)

