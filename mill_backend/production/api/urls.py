# production/api/urls.py

from django.urls import path

from production.api.views import (
    BatchCancelView,
    BatchCompleteView,
    BatchStartView,
    ByProductListCreateView,
    ByProductSaleView,
    MachineListCreateView,
    ProductionBatchListView,
)

urlpatterns = [
    path("batches/", ProductionBatchListView.as_view(), name="production-batches"),
    path("batches/start/", BatchStartView.as_view(), name="production-batch-start"),
    path(
        "batches/<uuid:batch_id>/complete/",
        BatchCompleteView.as_view(),
        name="production-batch-complete",
    ),
    path(
        "batches/<uuid:batch_id>/cancel/",
        BatchCancelView.as_view(),
        name="production-batch-cancel",
    ),
    path("machines/", MachineListCreateView.as_view(), name="production-machines"),
    path("by-products/", ByProductListCreateView.as_view(), name="production-by-products"),
    path(
        "by-products/<uuid:by_product_id>/sell/",
        ByProductSaleView.as_view(),
        name="production-by-product-sell",
    ),
]
