from django.contrib import admin
from .models import Invoice, InvoiceItem, Bill, BillItem


class InvoiceItemInline(admin.TabularInline):
    model = InvoiceItem
    extra = 0
    readonly_fields = ['total_price']


class BillItemInline(admin.TabularInline):
    model = BillItem
    extra = 0
    readonly_fields = ['total_price']


@admin.register(Invoice)
class InvoiceAdmin(admin.ModelAdmin):
    list_display = ['invoice_number', 'debtor', 'business', 'issue_date', 'due_date', 'status', 'total_amount']
    list_filter = ['status', 'business']
    search_fields = ['invoice_number', 'debtor__name']
    readonly_fields = ['invoice_number', 'total_amount', 'created_at', 'updated_at']
    inlines = [InvoiceItemInline]


@admin.register(Bill)
class BillAdmin(admin.ModelAdmin):
    list_display = ['bill_number', 'creditor', 'business', 'issue_date', 'due_date', 'status', 'total_amount']
    list_filter = ['status', 'business']
    search_fields = ['bill_number', 'creditor__name']
    readonly_fields = ['bill_number', 'total_amount', 'created_at', 'updated_at']
    inlines = [BillItemInline]
