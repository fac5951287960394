"""Order pricing.

Pure functions over product rows (or anything with `price`, `sale_price` and
`is_sale` attributes). Amounts are `Decimal` rounded to cents.
"""
from decimal import Decimal, ROUND_HALF_UP

CENT = Decimal("0.01")
DEFAULT_SHIPPING_FEE = Decimal("10.00")


def effective_unit_price(product, apply_sale_price: bool = True) -> Decimal:
    """Price a buyer is charged for one unit.

    The sale price wins when the product is on sale and has one. With
    `apply_sale_price=False` the regular price is always charged, which is how
    the storefront priced orders before sale prices were honoured.
    """
    if apply_sale_price and product.is_sale and product.sale_price is not None:
        return Decimal(product.sale_price).quantize(CENT)
    return Decimal(product.price).quantize(CENT)


def line_total(unit_price: Decimal, quantity: int) -> Decimal:
    return (Decimal(unit_price) * quantity).quantize(CENT, rounding=ROUND_HALF_UP)


def order_total(line_totals, shipping_fee: Decimal = DEFAULT_SHIPPING_FEE) -> Decimal:
    return (Decimal(shipping_fee) + sum(line_totals, Decimal("0"))).quantize(CENT, rounding=ROUND_HALF_UP)


def to_minor_units(amount) -> int:
    """Convert a currency amount to integer cents."""
    return int((Decimal(amount) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
