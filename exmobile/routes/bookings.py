# exmobile/routes/bookings.py
from flask import Blueprint, jsonify, request, current_app

from ..decorators import token_required
from ..utils import serialize, utc_now, created_envelope


def create_bookings_blueprint(store):
    bookings_bp = Blueprint('bookings', __name__)

    @bookings_bp.route('/bookings', methods=['GET'])
    @token_required
    def get_bookings(identity):
        email = request.args.get('email')
        if email != identity:
            current_app.logger.warning(f"User {identity} tried to read bookings of {email}.")
            return jsonify({"message": "forbidden access"}), 403
        try:
            bookings = [serialize(b) for b in store.bookings.find({"buyerEmail": email})]
            return jsonify(bookings), 200
        except Exception as e:
            current_app.logger.error(f"Error fetching bookings for {identity}: {e}", exc_info=True)
            return jsonify({"message": "Error fetching bookings", "error": str(e)}), 500

    @bookings_bp.route('/bookings', methods=['POST'])
    @token_required
    def add_booking(identity):
        data = request.get_json(silent=True)
        if not data or not isinstance(data, dict):
            return jsonify({"message": "Request body must be JSON"}), 400
        if not data.get('productId'):
            return jsonify({"message": "Missing or null required field: productId"}), 400

        booking = {key: value for key, value in data.items() if key != '_id'}
        booking["buyerEmail"] = identity
        booking["bookedAt"] = utc_now()
        try:
            result = store.bookings.insert_one(booking)
            current_app.logger.info(f"User {identity} booked product {booking['productId']}.")
            return jsonify(created_envelope(result.inserted_id)), 201
        except Exception as e:
            current_app.logger.error(f"Error creating booking for {identity}: {e}", exc_info=True)
            return jsonify({"message": "An internal server error occurred", "error": str(e)}), 500

    return bookings_bp
