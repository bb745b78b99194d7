# surfspot/api/auth/routes.py

import logging
import jwt
from flask import Blueprint, request, jsonify, current_app
from flask_jwt_extended import (
    create_access_token,
    create_refresh_token,
    jwt_required,
    get_jwt_identity
)
from marshmallow import ValidationError

from surfspot.api.auth.schemas import SocialLoginSchema, LogoutRequestSchema
from surfspot.api.responses import validation_error_response
from surfspot.api.users.schemas import UserResponseSchema
from surfspot.services.google_auth_service import GoogleAuthService

auth_bp = Blueprint('auth_bp', __name__)

@auth_bp.route('/social', methods=['POST'])
def social_login():
    """소셜 로그인 및 최초 로그인 시 회원가입을 처리합니다."""
    auth_service = current_app.services['auth']
    try:
        validated_data = SocialLoginSchema().load(request.get_json(silent=True) or {})
    except ValidationError as err:
        return validation_error_response(err)

    try:
        client_secrets_path = current_app.config['GOOGLE_CLIENT_SECRETS_PATH']
        if not client_secrets_path:
            raise ValueError("GOOGLE_CLIENT_SECRETS_PATH is not configured.")

        google_user_info = GoogleAuthService.exchange_code_for_user_info(
            auth_code=validated_data['auth_code'],
            client_secrets_path=client_secrets_path,
            redirect_uri=current_app.config['GOOGLE_OAUTH_REDIRECT_URI']
        )
        if not google_user_info:
            return jsonify({"error": "Invalid authorization code"}), 401

        user, is_new_user = auth_service.get_or_create_user_by_google(google_user_info)

        identity = user.user_id
        return jsonify({
            "access_token": create_access_token(identity=identity),
            "refresh_token": create_refresh_token(identity=identity),
            "is_new_user": is_new_user,
            "user": UserResponseSchema().dump(user.to_dict())
        }), 200
    except Exception as e:
        logging.error(f"소셜 로그인 중 예외 발생: {e}", exc_info=True)
        return jsonify({"error": "Failed to sign in"}), 500


@auth_bp.route('/token/refresh', methods=['POST'])
@jwt_required(refresh=True)
def refresh_token():
    """유효한 Refresh Token으로 새로운 Access Token을 발급합니다."""
    current_user_id = get_jwt_identity()
    new_access_token = create_access_token(identity=current_user_id)
    return jsonify(access_token=new_access_token), 200


@auth_bp.route('/logout', methods=['POST'])
def logout():
    """로그아웃. 전달받은 Access/Refresh 토큰을 무효화 목록에 추가합니다."""
    auth_service = current_app.services['auth']
    try:
        data = LogoutRequestSchema().load(request.get_json(silent=True) or {})

        secret_key = current_app.config['JWT_SECRET_KEY']
        algorithm = current_app.config.get('JWT_ALGORITHM', 'HS256')

        # 만료된 토큰도 무효화할 수 있도록 만료 검증은 끕니다.
        decoded_access = jwt.decode(data['access_token'], secret_key, algorithms=[algorithm], options={"verify_exp": False})
        decoded_refresh = jwt.decode(data['refresh_token'], secret_key, algorithms=[algorithm], options={"verify_exp": False})

        auth_service.logout_user(
            decoded_access['jti'], decoded_access['exp'],
            decoded_refresh['jti'], decoded_refresh['exp']
        )
        return jsonify({"message": "Logged out successfully"}), 200

    except ValidationError as err:
        return validation_error_response(err)
    except (jwt.PyJWTError, KeyError) as e:
        logging.error(f"JWT 해독 오류 발생: {e}", exc_info=True)
        return jsonify({"error": "Invalid token"}), 401
    except Exception as e:
        logging.error(f"로그아웃 처리 중 오류 발생: {e}", exc_info=True)
        return jsonify({"error": "Failed to log out"}), 500
