# exmobile/routes/__init__.py
from .content import create_content_blueprint
from .products import create_products_blueprint
from .bookings import create_bookings_blueprint
from .users import create_users_blueprint


def register_blueprints(app, store):
    """Builds every blueprint around the shared store and registers it on the app."""
    for factory in (create_content_blueprint, create_products_blueprint,
                    create_bookings_blueprint, create_users_blueprint):
        app.register_blueprint(factory(store))
