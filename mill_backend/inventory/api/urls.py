# inventory/api/urls.py

from django.urls import path

from inventory.api.views import (
    FinishedGoodsLotListView,
    MovementsByReferenceView,
    RawMaterialLotListView,
    StockAdjustmentView,
    StockBalanceView,
    StockHistoryView,
    StockTransferView,
    StorageBinListCreateView,
)

urlpatterns = [
    path("bins/", StorageBinListCreateView.as_view(), name="inventory-bins"),
    path("raw-materials/", RawMaterialLotListView.as_view(), name="inventory-raw-materials"),
    path("finished-goods/", FinishedGoodsLotListView.as_view(), name="inventory-finished-goods"),
    path("ledger/<str:sku>/balance/", StockBalanceView.as_view(), name="inventory-balance"),
    path("ledger/<str:sku>/history/", StockHistoryView.as_view(), name="inventory-history"),
    path(
        "ledger/by-reference/<str:reference_kind>/<str:reference_id>/",
        MovementsByReferenceView.as_view(),
        name="inventory-movements-by-reference",
    ),
    path("adjustments/", StockAdjustmentView.as_view(), name="inventory-adjust"),
    path("transfers/", StockTransferView.as_view(), name="inventory-transfer"),
]
