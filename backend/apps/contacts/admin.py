from django.contrib import admin
from .models import Creditor, Debtor


@admin.register(Creditor)
class CreditorAdmin(admin.ModelAdmin):
    list_display = ['name', 'business', 'email', 'phone', 'outstanding_amount']
    list_filter = ['business']
    search_fields = ['name', 'email']
    readonly_fields = ['outstanding_amount', 'created_at', 'updated_at']


@admin.register(Debtor)
class DebtorAdmin(admin.ModelAdmin):
    list_display = ['name', 'business', 'email', 'phone', 'outstanding_amount']
    list_filter = ['business']
    search_fields = ['name', 'email']
    readonly_fields = ['outstanding_amount', 'created_at', 'updated_at']
