from django.apps import AppConfig


class PersistenceConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'infrastructure.persistence'
    label = 'persistence'
    verbose_name = 'WIR tracking'

    def ready(self):
        from . import signals  # noqa: F401
        from application.services import rate_sync

        rate_sync.connect()
