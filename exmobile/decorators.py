# exmobile/decorators.py
from functools import wraps
from flask import request, jsonify, current_app

from .tokens import verify_token, InvalidToken


def token_required(f):
    """
    Verifies the 'Authorization: Bearer <token>' header and passes the
    token's email to the wrapped view as its first argument.
    """
    @wraps(f)
    def decorated(*args, **kwargs):
        auth_header = request.headers.get('Authorization')
        if not auth_header:
            current_app.logger.warning(f"Missing Authorization header on {request.method} {request.path}")
            return jsonify({'message': 'unauthorized access'}), 401

        parts = auth_header.split(" ")
        if len(parts) != 2 or parts[0] != 'Bearer' or not parts[1]:
            current_app.logger.warning(f"Malformed Authorization header on {request.method} {request.path}")
            return jsonify({'message': 'forbidden access'}), 403

        try:
            claims = verify_token(parts[1], current_app.config['ACCESS_TOKEN_SECRET'])
        except InvalidToken as e:
            current_app.logger.warning(f"Rejected token on {request.method} {request.path}: {e}")
            return jsonify({'message': 'forbidden access'}), 403

        identity = claims.get('email')
        if not identity:
            current_app.logger.warning("Token verified but carries no email claim.")
            return jsonify({'message': 'forbidden access'}), 403

        return f(identity, *args, **kwargs)
    return decorated


def has_role(store, email, role):
    user = store.find_user(email)
    return user is not None and user.get('role') == role


def role_required(store, role):
    """
    Rejects the request with 403 unless the stored user behind `identity`
    has `role`. Must sit below @token_required, which supplies `identity`.
    """
    def decorator(f):
        @wraps(f)
        def decorated(identity, *args, **kwargs):
            if not has_role(store, identity, role):
                current_app.logger.warning(f"User {identity} denied {request.method} {request.path}: {role} role required.")
                return jsonify({'message': 'forbidden access'}), 403
            return f(identity, *args, **kwargs)
        return decorated
    return decorator


def admin_required(store):
    return role_required(store, 'admin')


def seller_required(store):
    return role_required(store, 'seller')
