from django.db.models import Prefetch
from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import filters, status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import ValidationError
from rest_framework.permissions import IsAdminUser
from rest_framework.response import Response

from apps.leasing.conf import get_setting
from apps.leasing.exceptions import NotFound
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
from apps.leasing.services.configuration import ConfigurationAggregator
from apps.leasing.services.importer import ImportReconciler
from apps.leasing.services.integrity import CatalogIntegrity
from apps.leasing.services.merge import CatalogMerger
from apps.leasing.services.price_matrix import PriceMatrixResolver
from apps.leasing.services.similarity import SimilarityDetector
from .filters import VehicleFilter
from .serializers import (
    BrandSerializer,
    ColorSerializer,
    ImportRequestSerializer,
    MasterColorSerializer,
    MasterOptionSerializer,
    MergeRequestSerializer,
    OptionSerializer,
    QuoteRequestSerializer,
    TrimColorsSerializer,
    TrimOptionsSerializer,
    TrimSerializer,
    VehicleAdminSerializer,
    VehicleDetailSerializer,
    VehicleListSerializer,
)


def _int_param(request, name, default=None):
    value = request.query_params.get(name)
    if value in (None, ''):
        return default
    try:
        return int(value)
    except ValueError:
        raise ValidationError({name: 'A valid integer is required.'})


def _trim_queryset():
    return Trim.objects.prefetch_related(
        'trim_colors',
        Prefetch('trim_options', queryset=TrimOption.objects.select_related('option')),
    )


# =============================================================================
# Public catalog
# =============================================================================

class BrandViewSet(viewsets.ReadOnlyModelViewSet):
    """
    API endpoint for active brands.
    """
    queryset = Brand.objects.filter(is_active=True)
    serializer_class = BrandSerializer
    lookup_field = 'slug'
    lookup_value_regex = '[^/]+'


class VehicleViewSet(viewsets.ReadOnlyModelViewSet):
    """
    API endpoint for the vehicle catalog and quotes.

    list: Vehicles with their starting monthly payment
    retrieve: Vehicle with trims, eligible colors/options and rentPrice fields
    quote: Price a trim/color/option selection
    """
    queryset = Vehicle.objects.filter(is_active=True, brand__is_active=True).select_related('brand')
    filterset_class = VehicleFilter
    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    search_fields = ['name', 'brand__name_kr', 'brand__name_en']
    ordering_fields = ['base_price', 'sort_order', 'created_at']
    ordering = ['sort_order', 'name']

    def get_serializer_class(self):
        if self.action == 'list':
            return VehicleListSerializer
        return VehicleDetailSerializer

    def get_queryset(self):
        queryset = super().get_queryset()
        if self.action == 'retrieve':
            queryset = queryset.prefetch_related(
                Prefetch('trims', queryset=_trim_queryset()),
                'colors',
                'options',
            )
        return queryset

    @action(detail=True, methods=['post'])
    def quote(self, request, pk=None):
        """Price breakdown for a selection; monthly_payment is null when a consult is required."""
        vehicle = self.get_object()
        serializer = QuoteRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        breakdown = ConfigurationAggregator.price_selection(vehicle.pk, serializer.validated_data)
        return Response(breakdown.as_dict())

    @action(detail=True, methods=['get'], url_path='price-options')
    def price_options(self, request, pk=None):
        """Usable periods, and the deposit ratios priced for the requested period."""
        vehicle = self.get_object()
        period = _int_param(request, 'period', get_setting('DEFAULT_RENT_PERIOD'))
        return Response({
            'periods': PriceMatrixResolver.available_periods(vehicle.rent_prices),
            'period': period,
            'deposit_ratios': PriceMatrixResolver.available_deposit_ratios(
                vehicle.rent_prices, period
            ),
            'starting_payment': vehicle.starting_payment,
        })

    @action(detail=True, methods=['get'], url_path='default-selection')
    def default_selection(self, request, pk=None):
        vehicle = self.get_object()
        trim_id = _int_param(request, 'trim_id')
        trim = None
        if trim_id is not None:
            try:
                trim = Trim.objects.get(pk=trim_id)
            except Trim.DoesNotExist:
                raise NotFound(f'trim {trim_id} not found', trim_id=trim_id)
        return Response(ConfigurationAggregator.default_selection(vehicle, trim))


# =============================================================================
# Back office (staff only)
# =============================================================================

class AdminBrandViewSet(viewsets.ModelViewSet):
    """
    Brand maintenance, duplicate detection and master merging.
    """
    queryset = Brand.objects.all()
    serializer_class = BrandSerializer
    permission_classes = [IsAdminUser]

    @action(detail=True, methods=['get'])
    def similar(self, request, pk=None):
        """Likely-duplicate master pairs, for operator review."""
        brand = self.get_object()
        pairs = SimilarityDetector.for_brand(brand)
        names = {
            'colors': dict(MasterColor.objects.filter(brand=brand).values_list('id', 'name')),
            'options': dict(MasterOption.objects.filter(brand=brand).values_list('id', 'name')),
        }
        return Response({
            kind: [
                {'ids': [first, second], 'names': [names[kind][first], names[kind][second]]}
                for first, second in kind_pairs
            ]
            for kind, kind_pairs in pairs.items()
        })

    @action(detail=True, methods=['post'])
    def merge(self, request, pk=None):
        brand = self.get_object()
        serializer = MergeRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        result = CatalogMerger.merge(brand, data['type'], data['target_id'], data['source_ids'])
        return Response(result.as_dict())


class AdminMasterColorViewSet(viewsets.ModelViewSet):
    queryset = MasterColor.objects.with_vehicle_count().select_related('brand')
    serializer_class = MasterColorSerializer
    permission_classes = [IsAdminUser]
    filter_backends = [DjangoFilterBackend, filters.SearchFilter]
    filterset_fields = ['brand', 'color_type']
    search_fields = ['name']

    def destroy(self, request, *args, **kwargs):
        CatalogIntegrity.delete_master('color', self.get_object().pk)
        return Response(status=status.HTTP_204_NO_CONTENT)


class AdminMasterOptionViewSet(viewsets.ModelViewSet):
    queryset = MasterOption.objects.with_vehicle_count().select_related('brand')
    serializer_class = MasterOptionSerializer
    permission_classes = [IsAdminUser]
    filter_backends = [DjangoFilterBackend, filters.SearchFilter]
    filterset_fields = ['brand', 'category']
    search_fields = ['name']

    def destroy(self, request, *args, **kwargs):
        CatalogIntegrity.delete_master('option', self.get_object().pk)
        return Response(status=status.HTTP_204_NO_CONTENT)


class AdminVehicleViewSet(viewsets.ModelViewSet):
    """
    Vehicle maintenance. The price matrix is read and written as flat
    rentPrice{P}_{D} fields.
    """
    queryset = Vehicle.objects.select_related('brand')
    serializer_class = VehicleAdminSerializer
    permission_classes = [IsAdminUser]
    filterset_class = VehicleFilter
    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    search_fields = ['name']
    ordering = ['sort_order', 'name']

    @action(detail=True, methods=['post'], url_path='import')
    def import_items(self, request, pk=None):
        """Copy colors/options/trims from other vehicles, skipping names already present."""
        vehicle = self.get_object()
        serializer = ImportRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        result = ImportReconciler.import_from(
            vehicle.pk,
            data['source_vehicle_ids'],
            import_colors=data['import_colors'],
            import_options=data['import_options'],
            import_trims=data['import_trims'],
        )
        return Response(result.as_dict())


class AdminTrimViewSet(viewsets.ModelViewSet):
    queryset = _trim_queryset()
    serializer_class = TrimSerializer
    permission_classes = [IsAdminUser]
    filter_backends = [DjangoFilterBackend]
    filterset_fields = ['vehicle']

    @action(detail=True, methods=['put'], url_path='colors')
    def eligible_colors(self, request, pk=None):
        """Replace the colors this trim allows."""
        trim = self.get_object()
        serializer = TrimColorsSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        CatalogIntegrity.set_trim_colors(trim, serializer.validated_data['color_ids'])
        return Response(TrimSerializer(_trim_queryset().get(pk=trim.pk)).data)

    @action(detail=True, methods=['put'], url_path='options')
    def eligible_options(self, request, pk=None):
        """Replace the options this trim allows, with per-trim price and inclusion."""
        trim = self.get_object()
        serializer = TrimOptionsSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        CatalogIntegrity.set_trim_options(trim, serializer.validated_data['options'])
        return Response(TrimSerializer(_trim_queryset().get(pk=trim.pk)).data)


class AdminColorViewSet(viewsets.ModelViewSet):
    queryset = Color.objects.select_related('master')
    serializer_class = ColorSerializer
    permission_classes = [IsAdminUser]
    filter_backends = [DjangoFilterBackend]
    filterset_fields = ['vehicle', 'color_type', 'master']

    def destroy(self, request, *args, **kwargs):
        CatalogIntegrity.delete_item('color', self.get_object().pk)
        return Response(status=status.HTTP_204_NO_CONTENT)


class AdminOptionViewSet(viewsets.ModelViewSet):
    queryset = Option.objects.select_related('master')
    serializer_class = OptionSerializer
    permission_classes = [IsAdminUser]
    filter_backends = [DjangoFilterBackend]
    filterset_fields = ['vehicle', 'master']

    def destroy(self, request, *args, **kwargs):
        CatalogIntegrity.delete_item('option', self.get_object().pk)
        return Response(status=status.HTTP_204_NO_CONTENT)
