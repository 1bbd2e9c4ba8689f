from .finished_goods_lot import FinishedGoodsLot
from .raw_material_lot import RawMaterialLot
from .stock_movement import StockMovement
from .storage_bin import StorageBin

__all__ = [
    "FinishedGoodsLot",
    "RawMaterialLot",
    "StockMovement",
    "StorageBin",
]
