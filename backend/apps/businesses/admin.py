from django.contrib import admin
from .models import Business


@admin.register(Business)
class BusinessAdmin(admin.ModelAdmin):
    list_display = ['name', 'owner', 'email', 'phone', 'created_at']
    search_fields = ['name', 'email', 'tax_id', 'owner__username']
    readonly_fields = ['created_at', 'updated_at']
