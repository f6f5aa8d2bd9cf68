from django.urls import include, path
from rest_framework.routers import DefaultRouter, SimpleRouter

from .views import (
    AdminBrandViewSet,
    AdminColorViewSet,
    AdminMasterColorViewSet,
    AdminMasterOptionViewSet,
    AdminOptionViewSet,
    AdminTrimViewSet,
    AdminVehicleViewSet,
    BrandViewSet,
    VehicleViewSet,
)

router = DefaultRouter()
router.register(r'brands', BrandViewSet, basename='brand')
router.register(r'vehicles', VehicleViewSet, basename='vehicle')

admin_router = SimpleRouter()
admin_router.register(r'brands', AdminBrandViewSet, basename='admin-brand')
admin_router.register(r'master-colors', AdminMasterColorViewSet, basename='admin-master-color')
admin_router.register(r'master-options', AdminMasterOptionViewSet, basename='admin-master-option')
admin_router.register(r'vehicles', AdminVehicleViewSet, basename='admin-vehicle')
admin_router.register(r'trims', AdminTrimViewSet, basename='admin-trim')
admin_router.register(r'colors', AdminColorViewSet, basename='admin-color')
admin_router.register(r'options', AdminOptionViewSet, basename='admin-option')

urlpatterns = [
    path('admin/', include(admin_router.urls)),
    path('', include(router.urls)),
]
