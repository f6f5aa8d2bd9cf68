from django.apps import AppConfig


class LeasingConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.leasing'
    label = 'leasing'
    verbose_name = '차량 카탈로그'
