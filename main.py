from core.imports import Flask
from core.config import Settings
from core.extensions import db, jwt, swagger, cors, bcrypt, migrate
from core.errors import register_error_handlers
from core.logger import get_logger
from core.responses import api_response
from repositories.catalog import categories
from routes.users import users_bp
from routes.sellers import sellers_bp
from routes.products import products_bp
from services.images import CloudinaryImageHost
from services.payments import StripeGateway

logger = get_logger(__name__)

DEFAULT_CATEGORIES = ["Electronics", "Fashion", "Books", "Home", "Sports"]


def seed_categories():
    created = []
    for name in DEFAULT_CATEGORIES:
        if not categories.find_by_name(name):
            categories.create(name)
            created.append(name)
    if created:
        logger.info(f"Categories created: {', '.join(created)}")
    else:
        logger.info("Categories already exist.")
    return created


def create_app(settings=None, payment_gateway=None, image_host=None):
    settings = settings or Settings.from_env()

    app = Flask(__name__)
    app.config.from_mapping(settings.flask_config())
    app.debug = settings.debug

    app.extensions["settings"] = settings
    app.extensions["payment_gateway"] = payment_gateway or StripeGateway(
        settings.stripe_secret_key,
        currency=settings.payment_currency,
        timeout=settings.payment_timeout,
    )
    app.extensions["image_host"] = image_host or CloudinaryImageHost(
        settings.cloudinary_cloud_name,
        settings.cloudinary_api_key,
        settings.cloudinary_api_secret,
    )

    db.init_app(app)
    jwt.init_app(app)
    swagger.init_app(app)
    cors.init_app(app, origins=[settings.cors_origin], supports_credentials=True)
    bcrypt.init_app(app)
    migrate.init_app(app, db)

    app.register_blueprint(users_bp)
    app.register_blueprint(sellers_bp)
    app.register_blueprint(products_bp)

    register_error_handlers(app)

    @app.route("/ping")
    def ping():
        return api_response({"status": "ok"}, "Ping received")

    @app.cli.command("seed-categories")
    def seed_categories_command():
        """Create the default product categories."""
        seed_categories()

    return app


if __name__ == "__main__":
    app = create_app()
    with app.app_context():
        db.create_all()
        seed_categories()

    app.run(port=4000)
