# purchases/api/urls.py

from django.urls import path

from purchases.api.views import PurchaseListCreateView, SupplierListCreateView

urlpatterns = [
    path("suppliers/", SupplierListCreateView.as_view(), name="purchase-suppliers"),
    path("", PurchaseListCreateView.as_view(), name="purchases"),
]
