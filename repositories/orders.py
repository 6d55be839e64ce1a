from core.extensions import db
from models.orderModels import Order, OrderDetails
from models.userModel import PurchasedHistory


class OrderRepository:

    def get(self, order_id):
        return db.session.get(Order, order_id)

    def for_user(self, user_id):
        return Order.query.filter_by(user_id=user_id).order_by(Order.id.desc()).all()

    def create_pending(self, user_id, total_amount):
        order = Order(user_id=user_id, total_amount=total_amount, status="pending")
        db.session.add(order)
        db.session.commit()
        return order

    def set_reference(self, order, reference):
        order.reference = reference
        db.session.commit()
        return order

    def record_purchase(self, order, product, quantity):
        """
        Marks a paid order as processing and writes its line and purchase
        history rows in a single transaction. The payment reference must
        already be stored on the order.
        """
        try:
            order.status = "processing"

            details = OrderDetails(
                order_id=order.id,
                product_id=product.id,
                quantity=quantity,
                unit_price=product.price,
                sub_total=order.total_amount,
            )
            purchase = PurchasedHistory(
                user_id=order.user_id,
                order_id=order.id,
                product_id=product.id,
                quantity=quantity,
                total_amount=order.total_amount,
            )
            db.session.add_all([details, purchase])
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise
        return details, purchase

    def set_status(self, order, status):
        order.status = status
        db.session.commit()
        return order

    def purchase_history(self, user_id):
        return PurchasedHistory.query.filter_by(user_id=user_id).order_by(PurchasedHistory.id.desc()).all()


orders = OrderRepository()
