def _timestamp(value):
    return value.isoformat() if value else None


def serialize_user(user):
    return {
        "id": user.id,
        "name": user.name,
        "email": user.email,
        "createdAt": _timestamp(user.created_at),
        "updatedAt": _timestamp(user.updated_at),
    }


def serialize_seller(seller):
    return {
        "id": seller.id,
        "name": seller.name,
        "email": seller.email,
        "phone": seller.phone,
        "address": seller.address,
        "city": seller.city,
        "state": seller.state,
        "zip": seller.zip,
        "country": seller.country,
        "createdAt": _timestamp(seller.created_at),
        "updatedAt": _timestamp(seller.updated_at),
    }


def serialize_category(category):
    return {"id": category.id, "name": category.name}


def serialize_product(product):
    return {
        "id": product.id,
        "name": product.name,
        "description": product.description,
        "price": product.price,
        "quantity": product.quantity,
        "image": product.image,
        "categoryId": product.category_id,
        "category": product.category.name if product.category else None,
        "sellerId": product.seller_id,
        "createdAt": _timestamp(product.created_at),
        "updatedAt": _timestamp(product.updated_at),
    }


def serialize_review(review):
    return {
        "id": review.id,
        "productId": review.product_id,
        "userId": review.user_id,
        "rating": review.rating,
        "comment": review.comment,
        "createdAt": _timestamp(review.created_at),
    }


def serialize_order(order):
    return {
        "id": order.id,
        "userId": order.user_id,
        "orderDate": _timestamp(order.order_date),
        "status": order.status,
        "totalAmount": order.total_amount,
        "reference": order.reference,
    }


def serialize_order_details(details):
    return {
        "id": details.id,
        "orderId": details.order_id,
        "productId": details.product_id,
        "quantity": details.quantity,
        "unitPrice": details.unit_price,
        "subTotal": details.sub_total,
    }


def serialize_purchase(purchase):
    return {
        "id": purchase.id,
        "userId": purchase.user_id,
        "orderId": purchase.order_id,
        "productId": purchase.product_id,
        "quantity": purchase.quantity,
        "totalAmount": purchase.total_amount,
        "createdAt": _timestamp(purchase.created_at),
    }
