from flask import Flask, jsonify

from .config import get_config
from .extensions import db, cors


def create_app(config_name=None):
    app = Flask(__name__)

    cfg = get_config(config_name)
    app.config.from_object(cfg)
    cfg.init_app(app)

    # app.logger is the "shopcart" logger, parent of every module logger in the package
    app.logger.setLevel(app.config["LOG_LEVEL"])
    app.json.sort_keys = False

    # Init extensions
    db.init_app(app)
    cors.init_app(app, resources={r"/api/*": {"origins": app.config["CORS_ORIGINS"]}})

    # Register blueprints
    from .product import bp as product_bp; app.register_blueprint(product_bp)
    from .cart import bp as cart_bp; app.register_blueprint(cart_bp)
    from .checkout import bp as checkout_bp; app.register_blueprint(checkout_bp)

    from .errors import register_error_handlers
    register_error_handlers(app)

    from .cli import register_cli
    register_cli(app)

    @app.get("/")
    def health():
        return jsonify(ok=True, msg="API running")

    with app.app_context():
        from .catalog import ProductCatalog, seed_catalog
        from .services import CartStore, CartService, CheckoutService

        db.create_all()
        seed_catalog()
        catalog = ProductCatalog.load()

    store = CartStore()
    app.extensions["shopcart"] = {
        "catalog": catalog,
        "store": store,
        "cart": CartService(store, catalog),
        "checkout": CheckoutService(store, tax_rate=app.config["TAX_RATE"]),
    }
    app.logger.info("catalog loaded with %d products", len(catalog))

    return app
