# purchases/admin.py

from django.contrib import admin

from purchases.models import Purchase, Supplier


@admin.register(Supplier)
class SupplierAdmin(admin.ModelAdmin):
    list_display = ("name", "phone", "is_active", "created_at")
    list_filter = ("is_active",)
    search_fields = ("name", "phone")


@admin.register(Purchase)
class PurchaseAdmin(admin.ModelAdmin):
    list_display = (
        "po_number",
        "supplier",
        "paddy_type",
        "net_weight_kg",
        "price_per_kg",
        "total_amount",
        "status",
        "received_at",
    )
    list_filter = ("status", "paddy_type", "quality_grade")
    search_fields = ("po_number", "supplier__name")
    readonly_fields = ("po_number", "net_weight_kg", "total_amount", "created_at", "updated_at")
