from django.contrib import admin
from .models import Payment, Receipt


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    list_display = ['payment_number', 'creditor', 'business', 'amount', 'payment_date', 'payment_method']
    list_filter = ['payment_method', 'business']
    search_fields = ['payment_number', 'reference', 'creditor__name']
    readonly_fields = ['payment_number', 'created_at', 'updated_at']


@admin.register(Receipt)
class ReceiptAdmin(admin.ModelAdmin):
    list_display = ['receipt_number', 'debtor', 'business', 'amount', 'payment_date', 'payment_method']
    list_filter = ['payment_method', 'business']
    search_fields = ['receipt_number', 'reference', 'debtor__name']
    readonly_fields = ['receipt_number', 'created_at', 'updated_at']
