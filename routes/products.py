import math

from core.imports import Blueprint, request, current_app, current_user
from core.auth import seller_required, user_required
from core.errors import ValidationError, NotFoundError, ConflictError, ForbiddenError
from core.logger import get_logger
from core.responses import api_response
from models.serializers import serialize_product, serialize_category, serialize_review
from repositories.catalog import SORTABLE_COLUMNS, categories, products, reviews
from services.images import store_upload

logger = get_logger(__name__)

products_bp = Blueprint("products", __name__, url_prefix="/api/v1/products")

PRODUCT_FIELDS = ("name", "description", "price", "quantity")


def _positive_int(value, name):
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"'{name}' must be a positive integer.")
    if number < 1:
        raise ValidationError(f"'{name}' must be a positive integer.")
    return number


def _product_fields(form, required):
    if any(not str(form.get(field) or "").strip() for field in required):
        raise ValidationError("Please provide all required fields.")

    try:
        price = float(form["price"])
        quantity = int(form["quantity"])
    except (TypeError, ValueError):
        raise ValidationError("Price must be a number and quantity an integer.")
    if not math.isfinite(price):
        raise ValidationError("Price must be a finite number.")
    if price < 0 or quantity < 0:
        raise ValidationError("Price and quantity cannot be negative.")

    return {
        "name": form["name"].strip(),
        "description": form["description"].strip(),
        "price": price,
        "quantity": quantity,
    }


def _upload_image():
    return store_upload(
        request.files.get("productImage"),
        current_app.config["UPLOAD_FOLDER"],
        current_app.extensions["image_host"],
    )


def _get_product(product_id):
    product = products.get(product_id)
    if not product:
        raise NotFoundError(f"Could not find any product with id {product_id}")
    return product


def _owned_product(product_id):
    product = _get_product(product_id)
    if product.seller_id != current_user.id:
        raise ForbiddenError("Unauthorized: You do not own this product.")
    return product


@products_bp.route("/all-products", methods=["GET"])
def get_all_products():
    """
    List products with search, sort and pagination
    ---
    tags:
      - Products
    parameters:
      - name: page
        in: query
        type: integer
        default: 1
      - name: limit
        in: query
        type: integer
        default: 10
      - name: query
        in: query
        type: string
        description: Case-insensitive substring of the product name
      - name: categoryId
        in: query
        type: integer
      - name: sortBy
        in: query
        type: string
        enum: [id, name, price, quantity, createdAt]
      - name: sortType
        in: query
        type: string
        enum: [asc, desc]
    responses:
      200:
        description: Products fetched successfully
      400:
        description: Invalid pagination or sort parameters
      404:
        description: No products match
    """
    args = request.args
    page = _positive_int(args.get("page", 1), "page")
    limit = _positive_int(args.get("limit", 10), "limit")

    sort_by = args.get("sortBy") or None
    if sort_by and sort_by not in SORTABLE_COLUMNS:
        raise ValidationError(f"Cannot sort by '{sort_by}'. Use one of: {', '.join(SORTABLE_COLUMNS)}.")

    category_id = args.get("categoryId")
    if category_id is not None:
        category_id = _positive_int(category_id, "categoryId")

    listing = products.search(
        page=page,
        limit=limit,
        query=args.get("query"),
        category_id=category_id,
        sort_by=sort_by,
        descending=args.get("sortType") == "desc",
    )
    if not listing:
        raise NotFoundError("Could not find any products")

    return api_response([serialize_product(p) for p in listing], "Products fetched successfully.")


@products_bp.route("/categories", methods=["GET"])
def get_categories():
    return api_response([serialize_category(c) for c in categories.all()], "Categories fetched successfully.")


@products_bp.route("/categories", methods=["POST"])
@seller_required
def add_category():
    name = str((request.get_json(silent=True) or {}).get("name") or "").strip()
    if not name:
        raise ValidationError("Please provide a category name.")
    if categories.find_by_name(name):
        raise ConflictError("Category with name already exists.")
    category = categories.create(name)
    return api_response(serialize_category(category), "Category created successfully.", 201)


@products_bp.route("/<int:product_id>", methods=["GET"])
def get_product_by_id(product_id):
    return api_response(serialize_product(_get_product(product_id)), "Product fetched successfully.")


@products_bp.route("/add-product", methods=["POST"])
@seller_required
def add_product():
    """
    Add a product for the logged-in seller
    ---
    tags:
      - Products
    security:
      - Bearer: []
    consumes:
      - multipart/form-data
    parameters:
      - name: name
        in: formData
        type: string
        required: true
      - name: description
        in: formData
        type: string
        required: true
      - name: price
        in: formData
        type: number
        required: true
      - name: quantity
        in: formData
        type: integer
        required: true
      - name: categoryName
        in: formData
        type: string
        required: true
      - name: productImage
        in: formData
        type: file
        required: true
    responses:
      201:
        description: Product added successfully
      400:
        description: Missing fields, image or unknown category
      409:
        description: Product with name already exists
    """
    form = request.form
    fields = _product_fields(form, PRODUCT_FIELDS + ("categoryName",))

    if products.find_by_name(fields["name"]):
        raise ConflictError("Product with name already exists.")

    category = categories.find_by_name(form["categoryName"])
    if not category:
        raise ValidationError("Please provide correct category name.")

    image_url = _upload_image()
    product = products.create(image=image_url, category_id=category.id, seller_id=current_user.id, **fields)
    logger.info(f"Seller {current_user.id} added product {product.id}")
    return api_response(serialize_product(product), "Product added successfully.", 201)


@products_bp.route("/<int:product_id>", methods=["PUT"])
@seller_required
def update_product(product_id):
    form = request.form
    fields = _product_fields(form, PRODUCT_FIELDS)
    product = _owned_product(product_id)

    if products.find_by_name(fields["name"], exclude_id=product.id):
        raise ConflictError("Product with name already exists.")

    if str(form.get("categoryName") or "").strip():
        category = categories.find_by_name(form["categoryName"])
        if not category:
            raise ValidationError("Please provide correct category name.")
        fields["category_id"] = category.id

    fields["image"] = _upload_image()
    product = products.update(product, **fields)
    return api_response(serialize_product(product), "Product updated successfully.")


@products_bp.route("/<int:product_id>", methods=["DELETE"])
@seller_required
def delete_product(product_id):
    product = _owned_product(product_id)
    if products.has_orders(product):
        raise ConflictError("Product has existing orders and cannot be deleted.")
    products.delete(product)
    logger.info(f"Seller {current_user.id} deleted product {product_id}")
    return api_response({}, "Product deleted successfully.")


@products_bp.route("/<int:product_id>/reviews", methods=["GET"])
def get_product_reviews(product_id):
    product = _get_product(product_id)
    return api_response({
        "productId": product.id,
        "averageRating": reviews.average_rating(product.id),
        "reviews": [serialize_review(r) for r in reviews.for_product(product.id)],
    }, "Reviews fetched successfully.")


@products_bp.route("/<int:product_id>/reviews", methods=["POST"])
@user_required
def review_product(product_id):
    data = request.get_json(silent=True) or {}
    product = _get_product(product_id)

    rating = data.get("rating")
    comment = str(data.get("comment") or "").strip()
    if isinstance(rating, bool) or not isinstance(rating, (int, str)) or str(rating).strip() not in ("1", "2", "3", "4", "5"):
        raise ValidationError("Rating must be an integer between 1 and 5.")
    if not comment:
        raise ValidationError("Please provide a comment.")

    review = reviews.create(product.id, current_user.id, int(rating), comment)
    return api_response(serialize_review(review), "Review added successfully.", 201)
