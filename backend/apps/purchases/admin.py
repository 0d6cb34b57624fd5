from django.contrib import admin
from .models import Purchase


@admin.register(Purchase)
class PurchaseAdmin(admin.ModelAdmin):
    list_display = ['purchase_number', 'item_name', 'creditor', 'business', 'total_price', 'purchase_date']
    list_filter = ['business']
    search_fields = ['purchase_number', 'item_name', 'creditor__name']
    readonly_fields = ['purchase_number', 'total_price', 'created_at', 'updated_at']
