# exmobile/routes/content.py
from flask import Blueprint, jsonify, current_app

from ..utils import serialize


def create_content_blueprint(store):
    content_bp = Blueprint('content', __name__)

    def list_collection(collection, label):
        try:
            docs = [serialize(doc) for doc in collection.find({})]
            current_app.logger.info(f"Successfully fetched {len(docs)} {label}.")
            return jsonify(docs), 200
        except Exception as e:
            current_app.logger.error(f"Error fetching {label}: {e}", exc_info=True)
            return jsonify({"message": f"Error fetching {label} from database", "error": str(e)}), 500

    # --- Liveness ---
    @content_bp.route('/', methods=['GET'])
    def hello():
        return "Ex Mobile Server is running"

    # --- Categories ---
    @content_bp.route('/categories', methods=['GET'])
    def get_categories():
        return list_collection(store.categories, "categories")

    # --- Blog & FAQ ---
    @content_bp.route('/blog', methods=['GET'])
    def get_blog():
        return list_collection(store.blogs, "blog posts")

    @content_bp.route('/faq', methods=['GET'])
    def get_faq():
        return list_collection(store.faqs, "FAQ entries")

    # --- Stats ---
    @content_bp.route('/stats', methods=['GET'])
    def get_stats():
        try:
            return jsonify(store.counts()), 200
        except Exception as e:
            current_app.logger.error(f"Error counting collections: {e}", exc_info=True)
            return jsonify({"message": "Error fetching stats", "error": str(e)}), 500

    return content_bp
