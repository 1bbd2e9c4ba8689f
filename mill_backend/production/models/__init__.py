from .by_product import ByProduct
from .machine import Machine
from .production_batch import ProductionBatch

__all__ = ["ByProduct", "Machine", "ProductionBatch"]
