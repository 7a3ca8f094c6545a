# exmobile/routes/products.py
import datetime

from flask import Blueprint, jsonify, request, current_app

from ..decorators import token_required, seller_required, has_role
from ..utils import (serialize, parse_object_id, utc_now,
                     created_envelope, updated_envelope, deleted_envelope)


def with_used_years(product, current_year=None):
    """Adds usedYears = current year - purchasedYear when purchasedYear is a number."""
    if current_year is None:
        current_year = datetime.date.today().year
    try:
        product['usedYears'] = current_year - int(product['purchasedYear'])
    except (KeyError, TypeError, ValueError):
        pass
    return product


def create_products_blueprint(store):
    products_bp = Blueprint('products', __name__)

    def missing_or_forbidden(db_id, product_id, identity):
        """After a conditional write matched nothing, tells apart an absent product from someone else's."""
        if store.products.find_one({'_id': db_id}, {'_id': 1}) is None:
            current_app.logger.info(f"Product with ID: {product_id} not found.")
            return jsonify({"message": "Product not found"}), 404
        current_app.logger.warning(f"User {identity} does not own product {product_id}.")
        return jsonify({"message": "forbidden access"}), 403

    # --- Product Routes ---
    @products_bp.route('/products', methods=['GET'])
    @token_required
    def get_products(identity):
        category_id = request.args.get('category')
        reported = request.args.get('reported')
        seller_email = request.args.get('email')

        if category_id is not None:
            query = {"categoryId": category_id, "status": "available"}
        elif reported is not None:
            if reported.lower() == 'true':
                query = {"reported": True}
            else:
                query = {"reported": {"$ne": True}}
        elif seller_email is not None:
            if seller_email != identity:
                current_app.logger.warning(f"User {identity} tried to list products of {seller_email}.")
                return jsonify({"message": "forbidden access"}), 403
            query = {"sellerEmail": seller_email}
        else:
            query = {}

        try:
            current_year = datetime.date.today().year
            products = [with_used_years(serialize(p), current_year) for p in store.products.find(query)]
            current_app.logger.info(f"Fetched {len(products)} products for {identity} with filter {query}.")
            return jsonify(products), 200
        except Exception as e:
            current_app.logger.error(f"Error fetching products: {e}", exc_info=True)
            return jsonify({"message": "Error fetching products from database", "error": str(e)}), 500

    @products_bp.route('/products/advertised', methods=['GET'])
    def get_advertised_products():
        try:
            cursor = store.products.find({"advertised": True, "status": "available"})
            products = [serialize(p) for p in cursor]
            return jsonify(products), 200
        except Exception as e:
            current_app.logger.error(f"Error fetching advertised products: {e}", exc_info=True)
            return jsonify({"message": "Error fetching advertised products", "error": str(e)}), 500

    @products_bp.route('/products', methods=['POST'])
    @token_required
    @seller_required(store)
    def add_product(identity):
        try:
            seller = store.find_user(identity) or {}
        except Exception as e:
            current_app.logger.error(f"Error looking up seller {identity}: {e}", exc_info=True)
            return jsonify({"message": "An internal server error occurred", "error": str(e)}), 500
        if not seller.get('verified'):
            current_app.logger.warning(f"Unverified seller {identity} tried to add a product.")
            return jsonify({"message": "Seller account is not verified"}), 403

        data = request.get_json(silent=True)
        if not data or not isinstance(data, dict):
            return jsonify({"message": "Request body must be JSON"}), 400

        new_product = {key: value for key, value in data.items() if key != '_id'}
        if 'purchasedYear' in new_product:
            try:
                new_product['purchasedYear'] = int(new_product['purchasedYear'])
            except (ValueError, TypeError):
                return jsonify({"message": "purchasedYear must be a valid year"}), 400

        try:
            new_product.update({
                "sellerEmail": identity,
                "status": "available",
                "advertised": False,
                "reported": False,
                "posted": utc_now(),
            })
            result = store.products.insert_one(new_product)
            current_app.logger.info(f"Seller {identity} added product {result.inserted_id}.")
            return jsonify(created_envelope(result.inserted_id)), 201
        except Exception as e:
            current_app.logger.error(f"Error adding product by seller {identity}: {e}", exc_info=True)
            return jsonify({"message": "An internal server error occurred", "error": str(e)}), 500

    @products_bp.route('/products/<string:product_id>', methods=['PUT'])
    @token_required
    def update_product(identity, product_id):
        db_id = parse_object_id(product_id)
        if db_id is None:
            current_app.logger.warning(f"Product update with invalid ID format: {product_id}")
            return jsonify({"message": "Invalid product ID format"}), 400

        data = request.get_json(silent=True)
        if not data or not isinstance(data, dict):
            return jsonify({"message": "Request body must be JSON"}), 400

        info = data.get('info')
        try:
            if info == 'advertise':
                product = data.get('product')
                if not isinstance(product, dict):
                    current_app.logger.warning(f"User {identity} advertise request for {product_id} has no product object.")
                    return jsonify({"message": "forbidden access"}), 403
                if str(product.get('_id')) != product_id or product.get('sellerEmail') != identity:
                    current_app.logger.warning(f"User {identity} advertise request for {product_id} does not match.")
                    return jsonify({"message": "forbidden access"}), 403
                # Ownership is re-checked in the write filter itself
                result = store.products.update_one(
                    {"_id": db_id, "sellerEmail": identity},
                    {"$set": {"advertised": True}}
                )
                if result.matched_count == 0:
                    return missing_or_forbidden(db_id, product_id, identity)
                current_app.logger.info(f"Seller {identity} advertised product {product_id}.")
                return jsonify(updated_envelope(result)), 200

            if info == 'reported':
                result = store.products.update_one({"_id": db_id}, {"$set": {"reported": True}})
                if result.matched_count == 0:
                    return jsonify({"message": "Product not found"}), 404
                current_app.logger.info(f"User {identity} reported product {product_id}.")
                return jsonify(updated_envelope(result)), 200

            return jsonify({"message": "info must be 'advertise' or 'reported'"}), 400
        except Exception as e:
            current_app.logger.error(f"Error updating product {product_id} by {identity}: {e}", exc_info=True)
            return jsonify({"message": "An internal server error occurred", "error": str(e)}), 500

    @products_bp.route('/products/<string:product_id>', methods=['DELETE'])
    @token_required
    def delete_product(identity, product_id):
        db_id = parse_object_id(product_id)
        if db_id is None:
            current_app.logger.warning(f"Product delete with invalid ID format: {product_id}")
            return jsonify({"message": "Invalid product ID format"}), 400

        try:
            if has_role(store, identity, 'admin'):
                query = {"_id": db_id}
            else:
                query = {"_id": db_id, "sellerEmail": identity}

            result = store.products.delete_one(query)
            if result.deleted_count == 0:
                return missing_or_forbidden(db_id, product_id, identity)
            current_app.logger.info(f"User {identity} deleted product {product_id}.")
            return jsonify(deleted_envelope(result)), 200
        except Exception as e:
            current_app.logger.error(f"Error deleting product {product_id} by {identity}: {e}", exc_info=True)
            return jsonify({"message": "An internal server error occurred while deleting the product", "error": str(e)}), 500

    return products_bp
