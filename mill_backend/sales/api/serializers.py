# sales/api/serializers.py

from decimal import Decimal

from rest_framework import serializers

from core.api.serializers import AliasedInputMixin
from sales.models import Invoice, InvoiceItem, InvoicePayment, SalesOrder, SalesOrderItem


class OrderItemInputSerializer(AliasedInputMixin, serializers.Serializer):
    aliases = {"qtyKg": "quantity_kg", "qty_kg": "quantity_kg", "unitPrice": "unit_price"}

    sku = serializers.CharField(max_length=64)
    quantity_kg = serializers.DecimalField(
        max_digits=14, decimal_places=2, min_value=Decimal("0.01")
    )
    unit_price = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=Decimal("0")
    )


class OrderCreateSerializer(AliasedInputMixin, serializers.Serializer):
    aliases = {
        "customerName": "customer_name",
        "customerPhone": "customer_phone",
        "customerAddress": "customer_address",
        "shippingAddress": "shipping_address",
        "paymentTerms": "payment_terms",
        "deliveryMethod": "delivery_method",
        "deliveryDate": "delivery_date",
        "driverId": "driver_id",
    }

    customer_name = serializers.CharField(max_length=200)
    customer_phone = serializers.CharField(max_length=50, required=False, allow_blank=True)
    customer_address = serializers.CharField(required=False, allow_blank=True)
    shipping_address = serializers.CharField(required=False, allow_blank=True)
    payment_terms = serializers.ChoiceField(
        choices=SalesOrder.PaymentTerms.choices, required=False
    )
    delivery_method = serializers.ChoiceField(
        choices=SalesOrder.DeliveryMethod.choices, required=False
    )
    delivery_date = serializers.DateField(required=False, allow_null=True)
    driver_id = serializers.UUIDField(required=False, allow_null=True)
    notes = serializers.CharField(required=False, allow_blank=True)
    items = OrderItemInputSerializer(many=True, allow_empty=False)


class OrderTransitionSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=SalesOrder.Status.choices)


class SalesOrderItemSerializer(serializers.ModelSerializer):
    class Meta:
        model = SalesOrderItem
        fields = ["id", "sku", "product_name", "quantity_kg", "unit_price", "total_price"]


class SalesOrderSerializer(serializers.ModelSerializer):
    items = SalesOrderItemSerializer(many=True, read_only=True)
    invoice_id = serializers.SerializerMethodField()

    class Meta:
        model = SalesOrder
        fields = [
            "id",
            "order_number",
            "customer_name",
            "customer_phone",
            "customer_address",
            "shipping_address",
            "items",
            "total_amount",
            "status",
            "payment_terms",
            "delivery_method",
            "delivery_date",
            "driver",
            "invoice_id",
            "notes",
            "confirmed_at",
            "shipped_at",
            "delivered_at",
            "cancelled_at",
            "created_at",
        ]
        read_only_fields = fields

    def get_invoice_id(self, obj):
        return str(obj.invoice.pk) if obj.has_invoice else None


class InvoiceCreateSerializer(AliasedInputMixin, serializers.Serializer):
    aliases = {
        "orderId": "order_id",
        "discountPercent": "discount_percent",
        "taxPercent": "tax_percent",
    }

    order_id = serializers.UUIDField()
    discount_percent = serializers.DecimalField(
        max_digits=5,
        decimal_places=2,
        min_value=Decimal("0"),
        max_value=Decimal("100"),
        required=False,
    )
    tax_percent = serializers.DecimalField(
        max_digits=5,
        decimal_places=2,
        min_value=Decimal("0"),
        max_value=Decimal("100"),
        required=False,
    )
    notes = serializers.CharField(required=False, allow_blank=True)


class InvoiceUpdateSerializer(AliasedInputMixin, serializers.Serializer):
    aliases = {
        "discountPercent": "discount_percent",
        "taxPercent": "tax_percent",
        "dueDate": "due_date",
    }

    discount_percent = serializers.DecimalField(
        max_digits=5, decimal_places=2, min_value=Decimal("0"), max_value=Decimal("100"), required=False
    )
    tax_percent = serializers.DecimalField(
        max_digits=5, decimal_places=2, min_value=Decimal("0"), max_value=Decimal("100"), required=False
    )
    due_date = serializers.DateField(required=False)
    notes = serializers.CharField(required=False, allow_blank=True)


class InvoiceCancelSerializer(serializers.Serializer):
    reason = serializers.CharField(required=False, allow_blank=True, max_length=255)


class PaymentCreateSerializer(AliasedInputMixin, serializers.Serializer):
    aliases = {"paidOn": "paid_on", "paymentMethod": "method"}

    amount = serializers.DecimalField(max_digits=14, decimal_places=2, min_value=Decimal("0.01"))
    method = serializers.ChoiceField(choices=InvoicePayment.Method.choices)
    paid_on = serializers.DateField(required=False)
    processor = serializers.CharField(max_length=100, required=False, allow_blank=True)
    reference = serializers.CharField(max_length=100, required=False, allow_blank=True)
    notes = serializers.CharField(max_length=255, required=False, allow_blank=True)


class InvoiceItemSerializer(serializers.ModelSerializer):
    class Meta:
        model = InvoiceItem
        fields = ["id", "sku", "product_name", "quantity_kg", "unit_price", "total_price"]


class InvoicePaymentSerializer(serializers.ModelSerializer):
    class Meta:
        model = InvoicePayment
        fields = ["id", "amount", "method", "paid_on", "processor", "reference", "notes", "created_at"]


class InvoiceSerializer(serializers.ModelSerializer):
    items = InvoiceItemSerializer(many=True, read_only=True)
    payments = InvoicePaymentSerializer(many=True, read_only=True)
    order_number = serializers.CharField(source="order.order_number", read_only=True)
    balance_due = serializers.DecimalField(max_digits=14, decimal_places=2, read_only=True)

    class Meta:
        model = Invoice
        fields = [
            "id",
            "invoice_number",
            "order",
            "order_number",
            "customer_name",
            "invoice_date",
            "due_date",
            "items",
            "subtotal",
            "discount_percent",
            "discount_amount",
            "tax_percent",
            "tax_amount",
            "total_amount",
            "paid_amount",
            "balance_due",
            "payment_status",
            "status",
            "payments",
            "notes",
            "cancelled_at",
            "cancel_reason",
            "created_at",
        ]
        read_only_fields = fields
