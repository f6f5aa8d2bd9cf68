from django.db import connections
from django_filters import rest_framework as filters

from apps.leasing.models import Vehicle


class VehicleFilter(filters.FilterSet):
    """Listing filters for the vehicle catalog."""

    brand = filters.CharFilter(field_name='brand__slug')
    brand_id = filters.NumberFilter(field_name='brand__id')

    min_price = filters.NumberFilter(field_name='base_price', lookup_expr='gte')
    max_price = filters.NumberFilter(field_name='base_price', lookup_expr='lte')

    popular = filters.BooleanFilter(field_name='is_popular')
    new = filters.BooleanFilter(field_name='is_new')

    fuel_type = filters.CharFilter(method='filter_fuel_type')

    class Meta:
        model = Vehicle
        fields = ['brand', 'brand_id', 'category', 'popular', 'new']

    def filter_fuel_type(self, queryset, name, value):
        if connections[queryset.db].features.supports_json_field_contains:
            return queryset.filter(fuel_types__contains=[value])
        # SQLite has no JSON containment; scans only pk and fuel_types
        matching = [
            pk for pk, fuel_types in queryset.values_list('pk', 'fuel_types')
            if value in (fuel_types or [])
        ]
        return queryset.filter(pk__in=matching)
