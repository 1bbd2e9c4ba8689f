# sales/admin.py

from django.contrib import admin

from sales.models import Invoice, InvoiceItem, InvoicePayment, SalesOrder, SalesOrderItem


class SalesOrderItemInline(admin.TabularInline):
    model = SalesOrderItem
    extra = 0
    readonly_fields = ("sku", "product_name", "quantity_kg", "unit_price", "total_price")


@admin.register(SalesOrder)
class SalesOrderAdmin(admin.ModelAdmin):
    list_display = ("order_number", "customer_name", "total_amount", "status", "created_at")
    list_filter = ("status", "payment_terms", "delivery_method")
    search_fields = ("order_number", "customer_name")
    readonly_fields = ("order_number", "total_amount", "created_at", "updated_at")
    inlines = [SalesOrderItemInline]


class InvoiceItemInline(admin.TabularInline):
    model = InvoiceItem
    extra = 0
    readonly_fields = ("sku", "product_name", "quantity_kg", "unit_price", "total_price")


class InvoicePaymentInline(admin.TabularInline):
    model = InvoicePayment
    extra = 0
    can_delete = False
    readonly_fields = ("amount", "method", "paid_on", "processor", "reference", "notes", "created_at")


@admin.register(Invoice)
class InvoiceAdmin(admin.ModelAdmin):
    list_display = (
        "invoice_number",
        "customer_name",
        "total_amount",
        "paid_amount",
        "payment_status",
        "status",
        "due_date",
    )
    list_filter = ("payment_status", "status")
    search_fields = ("invoice_number", "customer_name", "order__order_number")
    readonly_fields = (
        "invoice_number",
        "order",
        "subtotal",
        "discount_amount",
        "tax_amount",
        "total_amount",
        "paid_amount",
        "created_at",
        "updated_at",
    )
    inlines = [InvoiceItemInline, InvoicePaymentInline]
