from django.core.management.base import BaseCommand
from django.utils import timezone

from apps.invoices.models import Invoice, Bill
from apps.invoices.services import mark_overdue


class Command(BaseCommand):
    help = 'Flag pending invoices and bills past their due date as OVERDUE'

    def handle(self, *args, **options):
        today = timezone.localdate()
        for model in (Invoice, Bill):
            updated = mark_overdue(model.objects.all(), today)
            self.stdout.write(self.style.SUCCESS(f'{updated} {model._meta.verbose_name_plural} marked overdue'))
