# surfspot/core/security.py
from functools import wraps
from typing import Any, Dict, Optional

from flask import jsonify, current_app
from flask_jwt_extended import JWTManager, verify_jwt_in_request, current_user

ADMIN_ROLE = "admin"

def is_admin(user: Optional[Dict[str, Any]]) -> bool:
    return bool(user) and user.get('role') == ADMIN_ROLE

def is_owner_or_admin(owner_id: Optional[str], user: Optional[Dict[str, Any]]) -> bool:
    """행위자가 리소스 작성자 본인이거나 admin 역할이면 True."""
    if not user:
        return False
    if owner_id is not None and str(owner_id) == str(user.get('user_id')):
        return True
    return is_admin(user)

def admin_required(message: str = "Admin access required"):
    """
    유효한 Access Token과 admin 역할을 모두 요구하는 데코레이터.
    - 토큰이 없거나 유효하지 않으면 JWT 콜백에 의해 401
    - 토큰은 유효하지만 admin이 아니면 403
    """
    def wrapper(fn):
        @wraps(fn)
        def decorator(*args, **kwargs):
            verify_jwt_in_request()
            if not is_admin(current_user):
                return jsonify({"error": message}), 403
            return fn(*args, **kwargs)
        return decorator
    return wrapper

def register_jwt_callbacks(jwt: JWTManager):
    """
    Flask-JWT-Extended 콜백을 등록합니다.
    - 역할(role)은 토큰에 담지 않고 매 요청마다 DB에서 다시 읽습니다.
    - 모든 인증 실패 응답은 {"error": ...} 형식의 401로 통일합니다.
    """

    @jwt.user_lookup_loader
    def user_lookup_callback(_jwt_header, jwt_data):
        identity = jwt_data["sub"]
        return current_app.services['users'].get_user(identity)

    @jwt.token_in_blocklist_loader
    def check_if_token_revoked(_jwt_header, jwt_payload):
        return current_app.services['auth'].is_token_revoked(jwt_payload)

    @jwt.unauthorized_loader
    def missing_token_callback(reason):
        return jsonify({"error": "Not authenticated"}), 401

    @jwt.invalid_token_loader
    def invalid_token_callback(reason):
        return jsonify({"error": "Invalid token"}), 401

    @jwt.expired_token_loader
    def expired_token_callback(_jwt_header, jwt_payload):
        return jsonify({"error": "Token has expired"}), 401

    @jwt.revoked_token_loader
    def revoked_token_callback(_jwt_header, jwt_payload):
        return jsonify({"error": "Token has been revoked"}), 401

    @jwt.user_lookup_error_loader
    def user_lookup_error_callback(_jwt_header, jwt_data):
        return jsonify({"error": "Not authenticated"}), 401
