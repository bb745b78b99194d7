# surfspot/api/users/routes.py
import logging
from flask import Blueprint, jsonify
from flask_jwt_extended import jwt_required, current_user

from surfspot.api.users.schemas import UserResponseSchema

users_bp = Blueprint('users_bp', __name__)

@users_bp.route('', methods=['GET'])
@jwt_required()
def get_current_user():
    """현재 로그인된 사용자의 정보를 조회합니다."""
    try:
        return jsonify(UserResponseSchema().dump(current_user)), 200
    except Exception as e:
        logging.error(f"현재 사용자 조회 중 오류 발생: {e}", exc_info=True)
        return jsonify({"error": "Failed to fetch user"}), 500
