from core.imports import current_app, SQLAlchemyError
from core.errors import ValidationError, NotFoundError, ConflictError, PaymentFailed
from core.logger import get_logger
from repositories.catalog import products
from repositories.orders import orders
from services.payments import PaymentError

logger = get_logger(__name__)


def parse_quantity(value):
    if isinstance(value, bool):
        raise ValidationError("Quantity must be a positive integer.")
    try:
        quantity = int(value)
    except (TypeError, ValueError, OverflowError):
        raise ValidationError("Quantity must be a positive integer.")
    if isinstance(value, float) and not value.is_integer():
        raise ValidationError("Quantity must be a positive integer.")
    if quantity < 1:
        raise ValidationError("Quantity must be a positive integer.")
    return quantity


def parse_product_id(value):
    if isinstance(value, bool):
        raise ValidationError("Product ID must be an integer.")
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        raise ValidationError("Product ID must be an integer.")


def _payment_failed(order):
    return PaymentFailed("Payment failed.", errors=[{"kind": PaymentFailed.kind, "orderId": order.id}])


def charge_order(order, payment_method, gateway):
    """
    Charges a pending order. Every gateway failure, including a missing
    confirmation, surfaces as PaymentFailed carrying the order id.
    """
    try:
        payment = gateway.charge(
            amount=order.total_amount,
            payment_method=payment_method,
            idempotency_key=f"order-{order.payment_key}",
            metadata={"order_id": order.id, "user_id": order.user_id},
        )
    except PaymentError as e:
        logger.warning(f"Payment failed for order {order.id}: {e}")
        raise _payment_failed(order) from e
    except Exception as e:
        logger.exception(f"Unexpected payment gateway error for order {order.id}")
        raise _payment_failed(order) from e

    if not payment or not getattr(payment, "id", None):
        logger.warning(f"Payment gateway returned no confirmation for order {order.id}")
        raise _payment_failed(order)
    return payment


def buy_product(user, data, gateway=None):
    """
    Places a single-product order for user and charges it.

    The order is committed as pending before the charge. A failed charge
    leaves it pending with no line or history rows. After a successful
    charge the payment reference is committed first, then the order moves
    to processing together with those rows in one transaction.
    """
    product_id = data.get("productId")
    quantity = data.get("quantity")
    payment_method = data.get("payment_method")

    if not product_id or not quantity or not payment_method:
        raise ValidationError("Please provide product ID, quantity, and payment method.")

    quantity = parse_quantity(quantity)
    product = products.get(parse_product_id(product_id))
    if not product:
        raise NotFoundError("Product not found.")

    total_amount = product.price * quantity
    order = orders.create_pending(user.id, total_amount)
    logger.info(f"Order {order.id} pending for user {user.id}: {quantity} x product {product.id} = {total_amount}")

    payment = charge_order(order, payment_method, gateway or current_app.extensions["payment_gateway"])

    try:
        orders.set_reference(order, payment.id)
        details, purchase = orders.record_purchase(order, product, quantity)
    except SQLAlchemyError:
        logger.exception(f"Order {order.id} charged as {payment.id} but could not be recorded")
        raise

    logger.info(f"Order {order.id} processing, payment {payment.id}")
    return order, details, purchase, payment


def cancel_order(user, order_id):
    order = orders.get(order_id)
    if not order or order.user_id != user.id:
        raise NotFoundError(f"Could not find any order with id {order_id}")
    if order.status != "pending":
        raise ConflictError(f"Only pending orders can be cancelled (order is {order.status}).")
    if order.reference:
        raise ConflictError("Order has been charged and is awaiting reconciliation.")
    orders.set_status(order, "cancelled")
    logger.info(f"Order {order.id} cancelled by user {user.id}")
    return order
