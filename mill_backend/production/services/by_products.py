# production/services/by_products.py

"""
BY-PRODUCT SALES

record_by_product_sale() books a sale of husk / bran / broken rice against
a ByProduct row: sold quantity and revenue accumulate, the balance can
never go negative.
"""

from __future__ import annotations

import logging

from django.db import transaction

from core.decimals import kg, money
from production.models import ByProduct
from production.services.exceptions import ByProductSaleError

logger = logging.getLogger(__name__)


@transaction.atomic
def record_by_product_sale(*, by_product_id, quantity_kg, price_per_kg=None) -> ByProduct:
    item = ByProduct.objects.select_for_update().filter(pk=by_product_id).first()
    if item is None:
        raise ByProductSaleError("By-product not found")

    qty = kg(quantity_kg)
    if qty <= 0:
        raise ByProductSaleError("quantity_kg must be greater than zero")

    if qty > item.stock_balance_kg:
        raise ByProductSaleError(
            f"Only {item.stock_balance_kg} kg of {item.product_type} left to sell"
        )

    price = money(price_per_kg if price_per_kg is not None else item.selling_price_per_kg)
    item.sold_quantity_kg = kg(item.sold_quantity_kg + qty)
    item.sold_revenue = money(item.sold_revenue + money(qty * price))
    item.save()

    logger.info(
        "By-product sale recorded",
        extra={"by_product_id": str(item.pk), "quantity_kg": str(qty), "price_per_kg": str(price)},
    )
    return item
