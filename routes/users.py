from core.imports import Blueprint, request, current_user
from core.auth import user_required, set_auth_cookies, clear_auth_cookies
from core.responses import api_response
from models.serializers import (
    serialize_user, serialize_order, serialize_order_details, serialize_purchase,
)
from repositories.orders import orders
from services.accounts import user_accounts
from services.checkout import buy_product, cancel_order

users_bp = Blueprint("users", __name__, url_prefix="/api/v1/users")


def _json():
    return request.get_json(silent=True) or {}


@users_bp.route("/signup", methods=["POST"])
def signup_user():
    """
    Register a new user
    ---
    tags:
      - Users
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          required: [name, email, password]
          properties:
            name:
              type: string
              example: "Jane Doe"
            email:
              type: string
              example: "jane@example.com"
            password:
              type: string
              example: "s3cret-pass"
    responses:
      201:
        description: User created successfully
      400:
        description: Missing required fields
      409:
        description: User with the given email already exists
    """
    user = user_accounts.signup(_json())
    return api_response(serialize_user(user), "User created successfully", 201)


@users_bp.route("/login", methods=["POST"])
def login_user():
    """
    Log in a user and set the auth cookies
    ---
    tags:
      - Users
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          properties:
            email:
              type: string
              example: "jane@example.com"
            password:
              type: string
              example: "s3cret-pass"
    responses:
      200:
        description: Logged in, accessToken and refreshToken cookies set
      401:
        description: Invalid email or password
      404:
        description: User does not exist
    """
    data = _json()
    user, access_token, refresh_token = user_accounts.login(data.get("email"), data.get("password"))
    response = api_response(
        {"user": serialize_user(user), "accessToken": access_token, "refreshToken": refresh_token},
        "User logged in successfully",
    )
    return set_auth_cookies(response, access_token, refresh_token)


@users_bp.route("/logout", methods=["POST"])
@user_required
def logout_user():
    user_accounts.logout(current_user)
    return clear_auth_cookies(api_response({}, "User logged out successfully"))


@users_bp.route("/current-user", methods=["GET"])
@user_required
def get_current_user():
    return api_response(serialize_user(current_user), "User retrieved successfully")


@users_bp.route("/refresh-token", methods=["POST"])
def refresh_access_token():
    incoming = request.cookies.get("refreshToken") or _json().get("refreshToken")
    access_token, refresh_token = user_accounts.refresh(incoming)
    response = api_response(
        {"accessToken": access_token, "refreshToken": refresh_token},
        "Access token refreshed successfully.",
    )
    return set_auth_cookies(response, access_token, refresh_token)


@users_bp.route("/change-password", methods=["POST"])
@user_required
def change_user_password():
    data = _json()
    user_accounts.change_password(current_user, data.get("oldPassword"), data.get("newPassword"))
    return api_response({}, "Password changed successfully.")


@users_bp.route("/update-account", methods=["POST"])
@user_required
def update_account_details():
    user = user_accounts.update_account(current_user, _json(), require_all=True)
    return api_response(serialize_user(user), "User updated successfully.")


@users_bp.route("/purchase-history", methods=["GET"])
@user_required
def get_user_purchase_history():
    history = [serialize_purchase(item) for item in orders.purchase_history(current_user.id)]
    data = serialize_user(current_user)
    data["purchaseHistories"] = history
    return api_response(data, "User purchase history retrieved successfully.")


@users_bp.route("/buy-product", methods=["POST"])
@user_required
def buy():
    """
    Purchase a single product
    ---
    tags:
      - Users
    security:
      - Bearer: []
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          required: [productId, quantity, payment_method]
          properties:
            productId:
              type: integer
              example: 3
            quantity:
              type: integer
              example: 2
            payment_method:
              type: string
              example: "pm_card_visa"
    responses:
      200:
        description: Order placed and charged, status processing
      400:
        description: Missing or invalid fields
      404:
        description: Product not found
      500:
        description: Payment failed, order left pending
    """
    order, details, purchase, payment = buy_product(current_user, _json())
    return api_response({
        "order": serialize_order(order),
        "orderDetails": serialize_order_details(details),
        "purchaseHistory": serialize_purchase(purchase),
        "payment": payment.to_dict(),
    }, "Product purchased successfully.")


@users_bp.route("/orders", methods=["GET"])
@user_required
def get_user_orders():
    data = []
    for order in orders.for_user(current_user.id):
        entry = serialize_order(order)
        entry["orderDetails"] = [serialize_order_details(item) for item in order.order_details]
        data.append(entry)
    return api_response(data, "Orders retrieved successfully.")


@users_bp.route("/orders/<int:order_id>/cancel", methods=["POST"])
@user_required
def cancel_user_order(order_id):
    order = cancel_order(current_user, order_id)
    return api_response(serialize_order(order), "Order cancelled successfully.")
