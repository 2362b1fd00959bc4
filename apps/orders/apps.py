from django.apps import AppConfig


class OrdersConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.orders'
    label = 'orders'

    def ready(self):
        # Connect notification receivers
        from . import notifications  # noqa: F401
