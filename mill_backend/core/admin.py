# core/admin.py

from django.contrib import admin

from core.models import DocumentSequence, MillSettings


@admin.register(MillSettings)
class MillSettingsAdmin(admin.ModelAdmin):
    list_display = (
        "milling_recovery_rate",
        "owner_salary_pct",
        "gst_rate",
        "production_tolerance_pct",
        "currency",
        "updated_at",
    )

    def has_add_permission(self, request):
        return not MillSettings.objects.exists()

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(DocumentSequence)
class DocumentSequenceAdmin(admin.ModelAdmin):
    list_display = ("document_type", "year", "last_value", "updated_at")
    list_filter = ("document_type", "year")
    readonly_fields = ("document_type", "year", "last_value", "updated_at")
