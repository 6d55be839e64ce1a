from core.extensions import db
from core.imports import func
from models.productModels import Category, Products, Review
from models.orderModels import OrderDetails

SORTABLE_COLUMNS = {
    "id": Products.id,
    "name": Products.name,
    "price": Products.price,
    "quantity": Products.quantity,
    "createdAt": Products.created_at,
}


class CategoryRepository:

    def all(self):
        return Category.query.order_by(Category.name.asc()).all()

    def find_by_name(self, name):
        return Category.query.filter(func.lower(Category.name) == name.strip().lower()).first()

    def create(self, name):
        category = Category(name=name.strip())
        db.session.add(category)
        db.session.commit()
        return category


class ProductRepository:

    def get(self, product_id):
        return db.session.get(Products, product_id)

    def find_by_name(self, name, exclude_id=None):
        query = Products.query.filter(Products.name == name.strip())
        if exclude_id is not None:
            query = query.filter(Products.id != exclude_id)
        return query.first()

    def search(self, page, limit, query=None, category_id=None, sort_by=None, descending=False):
        """Returns one page of products; sort_by must be a key of SORTABLE_COLUMNS."""
        statement = Products.query
        if query:
            statement = statement.filter(Products.name.ilike(f"%{query}%"))
        if category_id is not None:
            statement = statement.filter(Products.category_id == category_id)
        if sort_by:
            column = SORTABLE_COLUMNS[sort_by]
            statement = statement.order_by(column.desc() if descending else column.asc())
        else:
            statement = statement.order_by(Products.id.asc())
        return statement.offset((page - 1) * limit).limit(limit).all()

    def for_seller(self, seller_id):
        return Products.query.filter_by(seller_id=seller_id).order_by(Products.id.desc()).all()

    def create(self, **fields):
        product = Products(**fields)
        db.session.add(product)
        db.session.commit()
        return product

    def update(self, product, **fields):
        for key, value in fields.items():
            setattr(product, key, value)
        db.session.commit()
        return product

    def has_orders(self, product):
        return OrderDetails.query.filter_by(product_id=product.id).first() is not None

    def delete(self, product):
        db.session.delete(product)
        db.session.commit()


class ReviewRepository:

    def for_product(self, product_id):
        return Review.query.filter_by(product_id=product_id).order_by(Review.id.desc()).all()

    def average_rating(self, product_id):
        average = db.session.query(func.avg(Review.rating)).filter(Review.product_id == product_id).scalar()
        return round(float(average), 2) if average is not None else None

    def create(self, product_id, user_id, rating, comment):
        review = Review(product_id=product_id, user_id=user_id, rating=rating, comment=comment)
        db.session.add(review)
        db.session.commit()
        return review


categories = CategoryRepository()
products = ProductRepository()
reviews = ReviewRepository()
