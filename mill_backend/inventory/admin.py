# inventory/admin.py

from django.contrib import admin

from inventory.models import FinishedGoodsLot, RawMaterialLot, StockMovement, StorageBin


@admin.register(StorageBin)
class StorageBinAdmin(admin.ModelAdmin):
    list_display = ("code", "name", "capacity_kg", "is_active")
    search_fields = ("code", "name")


@admin.register(RawMaterialLot)
class RawMaterialLotAdmin(admin.ModelAdmin):
    list_display = ("sku", "name", "quantity_kg", "cost_per_unit", "status", "received_at")
    list_filter = ("category", "status", "paddy_type")
    search_fields = ("sku", "name")
    readonly_fields = ("quantity_kg", "created_at", "updated_at")


@admin.register(FinishedGoodsLot)
class FinishedGoodsLotAdmin(admin.ModelAdmin):
    list_display = ("sku", "paddy_type", "rice_grade", "weight_kg", "price_per_kg", "status", "expiry_date")
    list_filter = ("status", "paddy_type", "rice_grade")
    search_fields = ("sku",)
    readonly_fields = ("weight_kg", "created_at", "updated_at")


@admin.register(StockMovement)
class StockMovementAdmin(admin.ModelAdmin):
    list_display = ("created_at", "product_sku", "movement_type", "quantity_kg", "reference_kind", "reference_id")
    list_filter = ("movement_type", "reference_kind")
    search_fields = ("product_sku", "reference_id")

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
