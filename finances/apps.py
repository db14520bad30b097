from django.apps import AppConfig


class FinancesConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "finances"
    verbose_name = "Finances"

    def ready(self):
        """
        Import signals to register them when the app is ready.

        This enables automatic ledger entries for batch purchases, egg sales,
        feed purchases and vaccination costs.
        """
        import finances.signals  # noqa: F401
