# sales/api/views.py

from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.generics import GenericAPIView
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from accounting.models import Employee
from core.api.errors import error_response
from core.services.mill_config import load_mill_config
from sales.api.serializers import (
    InvoiceCancelSerializer,
    InvoiceCreateSerializer,
    InvoiceSerializer,
    InvoiceUpdateSerializer,
    OrderCreateSerializer,
    OrderTransitionSerializer,
    PaymentCreateSerializer,
    SalesOrderSerializer,
)
from sales.models import Invoice, SalesOrder
from sales.services.exceptions import NOT_FOUND_ERRORS, SalesError
from sales.services.invoice_service import generate_invoice
from sales.services.order_service import create_order, transition_order
from sales.services.payment_service import (
    cancel_invoice,
    record_payment,
    refresh_overdue_invoices,
    update_invoice_terms,
)


def _sales_error(exc):
    if isinstance(exc, NOT_FOUND_ERRORS):
        return error_response(exc, http_status=status.HTTP_404_NOT_FOUND)
    return error_response(exc)


def _invoice_queryset():
    return Invoice.objects.select_related("order").prefetch_related("items", "payments")


class SalesOrderListCreateView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = OrderCreateSerializer

    @extend_schema(tags=["sales"], responses=SalesOrderSerializer(many=True))
    def get(self, request):
        qs = SalesOrder.objects.prefetch_related("items").select_related("invoice")
        status_filter = (request.query_params.get("status") or "").strip()
        if status_filter:
            qs = qs.filter(status=status_filter)
        page = self.paginate_queryset(qs)
        if page is not None:
            return self.get_paginated_response(SalesOrderSerializer(page, many=True).data)
        return Response(SalesOrderSerializer(qs, many=True).data, status=status.HTTP_200_OK)

    @extend_schema(tags=["sales"], request=OrderCreateSerializer, responses={201: SalesOrderSerializer})
    def post(self, request):
        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)
        data = s.validated_data

        driver = None
        if data.get("driver_id"):
            driver = Employee.objects.filter(
                pk=data["driver_id"], role=Employee.Role.DRIVER, is_active=True
            ).first()
            if driver is None:
                return Response({"detail": "Driver not found"}, status=status.HTTP_404_NOT_FOUND)

        try:
            order = create_order(
                customer_name=data["customer_name"],
                items=data["items"],
                customer_phone=data.get("customer_phone", ""),
                customer_address=data.get("customer_address", ""),
                shipping_address=data.get("shipping_address", ""),
                payment_terms=data.get("payment_terms", SalesOrder.PaymentTerms.CASH),
                delivery_method=data.get("delivery_method", SalesOrder.DeliveryMethod.PICKUP),
                delivery_date=data.get("delivery_date"),
                driver=driver,
                notes=data.get("notes", ""),
                user=request.user,
                config=load_mill_config(),
            )
        except SalesError as exc:
            return _sales_error(exc)

        return Response(SalesOrderSerializer(order).data, status=status.HTTP_201_CREATED)


class SalesOrderStatusView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = OrderTransitionSerializer

    @extend_schema(tags=["sales"], request=OrderTransitionSerializer, responses={200: SalesOrderSerializer})
    def post(self, request, order_id):
        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)

        try:
            order = transition_order(
                order_id=order_id,
                target_status=s.validated_data["status"],
                user=request.user,
            )
        except SalesError as exc:
            return _sales_error(exc)

        return Response(SalesOrderSerializer(order).data, status=status.HTTP_200_OK)


class InvoiceListCreateView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = InvoiceCreateSerializer

    @extend_schema(tags=["sales"], responses=InvoiceSerializer(many=True))
    def get(self, request):
        qs = _invoice_queryset()
        payment_status = (request.query_params.get("payment_status") or "").strip()
        if payment_status:
            qs = qs.filter(payment_status=payment_status)
        page = self.paginate_queryset(qs)
        if page is not None:
            return self.get_paginated_response(InvoiceSerializer(page, many=True).data)
        return Response(InvoiceSerializer(qs, many=True).data, status=status.HTTP_200_OK)

    @extend_schema(tags=["sales"], request=InvoiceCreateSerializer)
    def post(self, request):
        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)
        data = s.validated_data

        try:
            result = generate_invoice(
                order_id=data["order_id"],
                discount_percent=data.get("discount_percent"),
                tax_percent=data.get("tax_percent"),
                notes=data.get("notes", ""),
                user=request.user,
                config=load_mill_config(),
            )
        except SalesError as exc:
            return _sales_error(exc)

        invoice = _invoice_queryset().get(pk=result.invoice.pk)
        return Response(
            {
                "invoice": InvoiceSerializer(invoice).data,
                "stock_updates": result.stock_updates,
            },
            status=status.HTTP_201_CREATED,
        )


class InvoiceDetailView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = InvoiceUpdateSerializer

    @extend_schema(tags=["sales"], responses=InvoiceSerializer)
    def get(self, request, invoice_id):
        invoice = _invoice_queryset().filter(pk=invoice_id).first()
        if invoice is None:
            return Response({"detail": "Invoice not found"}, status=status.HTTP_404_NOT_FOUND)
        return Response(InvoiceSerializer(invoice).data, status=status.HTTP_200_OK)

    @extend_schema(tags=["sales"], request=InvoiceUpdateSerializer, responses={200: InvoiceSerializer})
    def patch(self, request, invoice_id):
        s = self.get_serializer(data=request.data, partial=True)
        s.is_valid(raise_exception=True)
        data = s.validated_data

        try:
            invoice = update_invoice_terms(
                invoice_id=invoice_id,
                discount_percent=data.get("discount_percent"),
                tax_percent=data.get("tax_percent"),
                due_date=data.get("due_date"),
                notes=data.get("notes"),
            )
        except SalesError as exc:
            return _sales_error(exc)

        return Response(InvoiceSerializer(invoice).data, status=status.HTTP_200_OK)


class InvoicePaymentView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = PaymentCreateSerializer

    @extend_schema(tags=["sales"], request=PaymentCreateSerializer, responses={201: InvoiceSerializer})
    def post(self, request, invoice_id):
        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)
        data = s.validated_data

        try:
            invoice = record_payment(
                invoice_id=invoice_id,
                amount=data["amount"],
                method=data["method"],
                paid_on=data.get("paid_on"),
                processor=data.get("processor", ""),
                reference=data.get("reference", ""),
                notes=data.get("notes", ""),
                user=request.user,
            )
        except SalesError as exc:
            return _sales_error(exc)

        return Response(InvoiceSerializer(invoice).data, status=status.HTTP_201_CREATED)


class InvoiceCancelView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = InvoiceCancelSerializer

    @extend_schema(tags=["sales"], request=InvoiceCancelSerializer, responses={200: InvoiceSerializer})
    def post(self, request, invoice_id):
        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)

        try:
            invoice = cancel_invoice(
                invoice_id=invoice_id,
                reason=s.validated_data.get("reason", ""),
                user=request.user,
            )
        except SalesError as exc:
            return _sales_error(exc)

        return Response(InvoiceSerializer(invoice).data, status=status.HTTP_200_OK)


class OverdueInvoicesRefreshView(GenericAPIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(tags=["sales"], request=None)
    def post(self, request):
        updated = refresh_overdue_invoices()
        return Response({"updated": updated}, status=status.HTTP_200_OK)
