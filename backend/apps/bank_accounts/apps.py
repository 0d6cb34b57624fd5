from django.apps import AppConfig


class BankAccountsConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.bank_accounts'
    label = 'bank_accounts'

    def ready(self):
        from . import signals  # noqa: F401
