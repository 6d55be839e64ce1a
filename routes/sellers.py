from core.imports import Blueprint, request, current_user
from core.auth import seller_required, set_auth_cookies, clear_auth_cookies
from core.responses import api_response
from models.serializers import serialize_seller, serialize_product
from repositories.catalog import products
from services.accounts import seller_accounts

sellers_bp = Blueprint("sellers", __name__, url_prefix="/api/v1/sellers")


def _json():
    return request.get_json(silent=True) or {}


@sellers_bp.route("/signup", methods=["POST"])
def signup_seller():
    """
    Register a new seller
    ---
    tags:
      - Sellers
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          required: [name, email, password, phone, address, city, state, zip, country]
          properties:
            name:
              type: string
              example: "Demo Store"
            email:
              type: string
              example: "store@example.com"
            password:
              type: string
            phone:
              type: string
              example: "+91 98765 43210"
            address:
              type: string
            city:
              type: string
            state:
              type: string
            zip:
              type: string
            country:
              type: string
    responses:
      201:
        description: Seller created successfully
      400:
        description: Missing required fields
      409:
        description: Seller with the given email already exists
    """
    seller = seller_accounts.signup(_json())
    return api_response(serialize_seller(seller), "Seller created successfully", 201)


@sellers_bp.route("/login", methods=["POST"])
def login_seller():
    data = _json()
    seller, access_token, refresh_token = seller_accounts.login(data.get("email"), data.get("password"))
    response = api_response(
        {"seller": serialize_seller(seller), "accessToken": access_token, "refreshToken": refresh_token},
        "Seller logged in successfully",
    )
    return set_auth_cookies(response, access_token, refresh_token)


@sellers_bp.route("/logout", methods=["POST"])
@seller_required
def logout_seller():
    seller_accounts.logout(current_user)
    return clear_auth_cookies(api_response({}, "Seller logged out successfully"))


@sellers_bp.route("/current-seller", methods=["GET"])
@seller_required
def get_current_seller():
    return api_response(serialize_seller(current_user), "Seller retrieved successfully")


@sellers_bp.route("/refresh-token", methods=["POST"])
def refresh_access_token():
    incoming = request.cookies.get("refreshToken") or _json().get("refreshToken")
    access_token, refresh_token = seller_accounts.refresh(incoming)
    response = api_response(
        {"accessToken": access_token, "refreshToken": refresh_token},
        "Access token refreshed successfully.",
    )
    return set_auth_cookies(response, access_token, refresh_token)


@sellers_bp.route("/change-password", methods=["POST"])
@seller_required
def change_seller_password():
    data = _json()
    seller_accounts.change_password(current_user, data.get("oldPassword"), data.get("newPassword"))
    return api_response({}, "Password changed successfully.")


@sellers_bp.route("/update-account", methods=["PATCH"])
@seller_required
def update_account_details():
    seller = seller_accounts.update_account(current_user, _json())
    return api_response(serialize_seller(seller), "Seller updated successfully.")


@sellers_bp.route("/products", methods=["GET"])
@seller_required
def get_seller_all_products():
    listing = [serialize_product(product) for product in products.for_seller(current_user.id)]
    return api_response(listing, "Seller products fetched successfully.")
