# exmobile/routes/users.py
from flask import Blueprint, jsonify, request, current_app
from pymongo.errors import DuplicateKeyError

from ..decorators import token_required, admin_required
from ..tokens import issue_token
from ..utils import (serialize, parse_object_id, utc_now,
                     created_envelope, updated_envelope, deleted_envelope)

USER_TYPES = ('seller', 'buyer')


def create_users_blueprint(store):
    users_bp = Blueprint('users', __name__)

    # --- Token issue ---
    @users_bp.route('/jwt', methods=['GET'])
    def issue_jwt():
        email = request.args.get('email')
        try:
            user = store.find_user(email)
        except Exception as e:
            current_app.logger.error(f"Error looking up user {email} for token issue: {e}", exc_info=True)
            return jsonify({"message": "An internal server error occurred", "error": str(e)}), 500

        if not user:
            current_app.logger.warning(f"Token requested for unknown user: {email}")
            return jsonify({"accessToken": ""}), 403

        token = issue_token(email, current_app.config['ACCESS_TOKEN_SECRET'],
                            current_app.config.get('JWT_EXPIRATION_DAYS', 9))
        current_app.logger.info(f"Issued access token for {email}.")
        return jsonify({"accessToken": token}), 200

    # --- Role checks ---
    @users_bp.route('/users/admin/<string:email>', methods=['GET'])
    def check_admin(email):
        user = store.find_user(email)
        return jsonify({"isAdmin": bool(user) and user.get('role') == 'admin'}), 200

    @users_bp.route('/users/seller/<string:email>', methods=['GET'])
    def check_seller(email):
        user = store.find_user(email)
        return jsonify({
            "isSeller": bool(user) and user.get('role') == 'seller',
            "isVerified": bool(user) and bool(user.get('verified', False)),
            "user": serialize(user) if user else None
        }), 200

    # --- Admin user management ---
    @users_bp.route('/users', methods=['GET'])
    @token_required
    @admin_required(store)
    def get_users(identity):
        user_type = request.args.get('type')
        query = {"role": user_type} if user_type in USER_TYPES else {}
        try:
            users = [serialize(u) for u in store.users.find(query)]
            current_app.logger.info(f"Admin {identity} listed {len(users)} users (type={user_type}).")
            return jsonify(users), 200
        except Exception as e:
            current_app.logger.error(f"Error listing users: {e}", exc_info=True)
            return jsonify({"message": "Error fetching users", "error": str(e)}), 500

    @users_bp.route('/users', methods=['POST'])
    def save_user():
        data = request.get_json(silent=True)
        if not data or not isinstance(data, dict):
            return jsonify({"message": "Request body must be JSON"}), 400
        email = data.get('email')
        if not email or not isinstance(email, str):
            return jsonify({"message": "Missing or null required field: email"}), 400

        # role and verified are only raised through the admin routes
        on_insert = {key: value for key, value in data.items()
                     if key not in ('_id', 'email', 'role', 'verified')}
        if data.get('role') in USER_TYPES:
            on_insert["role"] = data['role']
        elif 'role' in data:
            current_app.logger.warning(f"Ignored role {data.get('role')!r} on sign-up of {email}.")
        on_insert["createdAt"] = utc_now()
        try:
            # Insert-if-absent in one write; the unique email index covers concurrent upserts
            result = store.users.update_one({"email": email}, {"$setOnInsert": on_insert}, upsert=True)
        except DuplicateKeyError:
            current_app.logger.info(f"User {email} was created concurrently; nothing to do.")
            return jsonify(created_envelope(None)), 200
        except Exception as e:
            current_app.logger.error(f"Error saving user {email}: {e}", exc_info=True)
            return jsonify({"message": "An internal server error occurred", "error": str(e)}), 500

        if result.upserted_id is None:
            current_app.logger.info(f"User {email} already exists.")
            return jsonify(created_envelope(None)), 200
        current_app.logger.info(f"Created user {email} ({result.upserted_id}).")
        return jsonify(created_envelope(result.upserted_id)), 201

    def set_user_field(identity, user_id, field, value):
        db_id = parse_object_id(user_id)
        if db_id is None:
            current_app.logger.warning(f"Admin {identity} used invalid user ID format: {user_id}")
            return jsonify({"message": "Invalid user ID format"}), 400
        try:
            result = store.users.update_one({"_id": db_id}, {"$set": {field: value}})
        except Exception as e:
            current_app.logger.error(f"Error setting {field} on user {user_id}: {e}", exc_info=True)
            return jsonify({"message": "An internal server error occurred", "error": str(e)}), 500
        if result.matched_count == 0:
            current_app.logger.warning(f"Admin {identity} tried to update missing user {user_id}.")
            return jsonify({"message": "User not found"}), 404
        current_app.logger.info(f"Admin {identity} set {field}={value!r} on user {user_id}.")
        return jsonify(updated_envelope(result)), 200

    @users_bp.route('/users/admin/<string:user_id>', methods=['PUT'])
    @token_required
    @admin_required(store)
    def make_admin(identity, user_id):
        return set_user_field(identity, user_id, 'role', 'admin')

    @users_bp.route('/users/seller/<string:user_id>', methods=['PUT'])
    @token_required
    @admin_required(store)
    def verify_seller(identity, user_id):
        return set_user_field(identity, user_id, 'verified', True)

    @users_bp.route('/users/<string:user_id>', methods=['DELETE'])
    @token_required
    @admin_required(store)
    def delete_user(identity, user_id):
        db_id = parse_object_id(user_id)
        if db_id is None:
            return jsonify({"message": "Invalid user ID format"}), 400
        try:
            result = store.users.delete_one({"_id": db_id})
        except Exception as e:
            current_app.logger.error(f"Error deleting user {user_id}: {e}", exc_info=True)
            return jsonify({"message": "An internal server error occurred", "error": str(e)}), 500
        if result.deleted_count == 0:
            return jsonify({"message": "User not found"}), 404
        current_app.logger.info(f"Admin {identity} deleted user {user_id}.")
        return jsonify(deleted_envelope(result)), 200

    return users_bp
