"""HTML bodies for transactional emails.

Every function takes schema objects (never ORM rows) so rendering can happen
after the request's session is closed.
"""
from html import escape

BRAND = "Magnostadt"


def _money(amount) -> str:
    return f"${float(amount):,.2f}"


def _layout(heading: str, body: str) -> str:
    return (
        "<!DOCTYPE html>"
        "<html><body style=\"font-family:Helvetica,Arial,sans-serif;background:#f6f6f6;padding:24px\">"
        "<div style=\"max-width:560px;margin:0 auto;background:#ffffff;padding:32px;border-radius:8px\">"
        f"<h1 style=\"color:#111827\">{escape(heading)}</h1>"
        f"{body}"
        f"<p style=\"color:#6b7280;font-size:12px\">{BRAND}</p>"
        "</div></body></html>"
    )


def _items_table(order) -> str:
    rows = []
    for item in order.items:
        name = item.product.name if item.product else item.product_id
        rows.append(
            "<tr>"
            f"<td>{escape(name)}</td>"
            f"<td style=\"text-align:center\">{item.quantity}</td>"
            f"<td style=\"text-align:right\">{_money(item.price * item.quantity)}</td>"
            "</tr>"
        )
    rows.append(
        "<tr><td colspan=\"2\"><strong>Total</strong></td>"
        f"<td style=\"text-align:right\"><strong>{_money(order.total)}</strong></td></tr>"
    )
    return "<table style=\"width:100%;border-collapse:collapse\">" + "".join(rows) + "</table>"


def _order_ref(order) -> str:
    return f"<p>Order ID: <strong>{escape(order.id)}</strong></p>"


def order_confirmation(order, frontend_url: str) -> str:
    body = (
        f"<p>Hi {escape(order.customer_name)}, thanks for your order.</p>"
        + _order_ref(order)
        + _items_table(order)
        + f"<p>Shipping to {escape(order.address)}, {escape(order.city)} {escape(order.zip_code)}</p>"
        + f"<p><a href=\"{escape(frontend_url)}/order-confirmation/{escape(order.id)}\">View your order</a></p>"
    )
    return _layout("Order Confirmed!", body)


def shipping_update(order, frontend_url: str) -> str:
    body = (
        f"<p>Good news {escape(order.customer_name)}, your order is on its way.</p>"
        + _order_ref(order)
        + _items_table(order)
    )
    return _layout("Your Order has Shipped!", body)


def delivered(order, frontend_url: str) -> str:
    body = (
        f"<p>Your order has been delivered. Enjoy, {escape(order.customer_name)}!</p>"
        + _order_ref(order)
    )
    return _layout("Order Delivered!", body)


def cancelled(order, frontend_url: str) -> str:
    body = (
        f"<p>Hi {escape(order.customer_name)}, your order has been cancelled.</p>"
        + _order_ref(order)
        + "<p>If you were charged, a refund will follow.</p>"
    )
    return _layout("Order Cancelled", body)


def back_in_stock(product, frontend_url: str) -> str:
    body = (
        f"<p><strong>{escape(product.name)}</strong> is back in stock.</p>"
        f"<p><a href=\"{escape(frontend_url)}/product/{escape(product.id)}\">Get it before it sells out again</a></p>"
    )
    return _layout("Back in Stock!", body)
