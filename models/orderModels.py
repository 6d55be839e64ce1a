from core.extensions import db
from core.imports import func, uuid

ORDER_STATUSES = ("pending", "processing", "completed", "cancelled")


class Order(db.Model):
    __tablename__ = "orders"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    order_date = db.Column(db.DateTime, server_default=func.now())
    status = db.Column(db.Enum(*ORDER_STATUSES, name="order_status"), nullable=False, default="pending")
    total_amount = db.Column(db.Float, nullable=False)
    reference = db.Column(db.String(100), unique=True, nullable=True)  # payment intent id
    payment_key = db.Column(db.String(32), unique=True, nullable=False, default=lambda: uuid.uuid4().hex)

    order_details = db.relationship("OrderDetails", backref="order", cascade="all, delete-orphan")


class OrderDetails(db.Model):
    __tablename__ = "order_details"

    id = db.Column(db.Integer, primary_key=True)
    order_id = db.Column(db.Integer, db.ForeignKey("orders.id"), nullable=False)
    product_id = db.Column(db.Integer, db.ForeignKey("products.id"), nullable=False)
    quantity = db.Column(db.Integer, nullable=False)
    unit_price = db.Column(db.Float, nullable=False)
    sub_total = db.Column(db.Float, nullable=False)

    product = db.relationship("Products")
