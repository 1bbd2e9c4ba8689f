# sales/api/urls.py

from django.urls import path

from sales.api.views import (
    InvoiceCancelView,
    InvoiceDetailView,
    InvoiceListCreateView,
    InvoicePaymentView,
    OverdueInvoicesRefreshView,
    SalesOrderListCreateView,
    SalesOrderStatusView,
)

urlpatterns = [
    path("orders/", SalesOrderListCreateView.as_view(), name="sales-orders"),
    path(
        "orders/<uuid:order_id>/status/",
        SalesOrderStatusView.as_view(),
        name="sales-order-status",
    ),
    path("invoices/", InvoiceListCreateView.as_view(), name="sales-invoices"),
    path(
        "invoices/refresh-overdue/",
        OverdueInvoicesRefreshView.as_view(),
        name="sales-invoices-refresh-overdue",
    ),
    path("invoices/<uuid:invoice_id>/", InvoiceDetailView.as_view(), name="sales-invoice-detail"),
    path(
        "invoices/<uuid:invoice_id>/payments/",
        InvoicePaymentView.as_view(),
        name="sales-invoice-payments",
    ),
    path(
        "invoices/<uuid:invoice_id>/cancel/",
        InvoiceCancelView.as_view(),
        name="sales-invoice-cancel",
    ),
]
