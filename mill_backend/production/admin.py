# production/admin.py

from django.contrib import admin

from production.models import ByProduct, Machine, ProductionBatch


@admin.register(ProductionBatch)
class ProductionBatchAdmin(admin.ModelAdmin):
    list_display = (
        "batch_number",
        "paddy_type",
        "input_quantity_kg",
        "rice_kg",
        "yield_percentage",
        "status",
        "started_at",
    )
    list_filter = ("status", "paddy_type")
    search_fields = ("batch_number",)
    readonly_fields = ("batch_number", "yield_percentage", "created_at", "updated_at")


@admin.register(Machine)
class MachineAdmin(admin.ModelAdmin):
    list_display = ("name", "serial_number", "machine_type", "purchase_cost", "status")
    list_filter = ("machine_type", "status")
    search_fields = ("name", "serial_number")


@admin.register(ByProduct)
class ByProductAdmin(admin.ModelAdmin):
    list_display = (
        "product_type",
        "quantity_kg",
        "sold_quantity_kg",
        "sold_revenue",
        "status",
        "production_date",
    )
    list_filter = ("product_type", "status")
