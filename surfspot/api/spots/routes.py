# surfspot/api/spots/routes.py
import logging
from flask import Blueprint, request, jsonify, current_app
from flask_jwt_extended import jwt_required, get_jwt_identity
from marshmallow import ValidationError

from surfspot.api.responses import validation_error_response
from surfspot.api.spots.schemas import (
    SpotCreateSchema,
    SpotUpdateSchema,
    SpotResponseSchema,
    SpotDetailResponseSchema
)
from surfspot.core.security import admin_required

spots_bp = Blueprint('spots_bp', __name__)

@spots_bp.route('', methods=['GET'])
def get_spots():
    """모든 서핑 스팟을 조회합니다. (인증 불필요)"""
    spot_service = current_app.services['spots']
    try:
        spots = spot_service.list_spots()
        return jsonify(SpotResponseSchema(many=True).dump(spots)), 200
    except Exception as e:
        logging.error(f"스팟 목록 조회 중 오류 발생: {e}", exc_info=True)
        return jsonify({"error": "Failed to fetch surf spots"}), 500

@spots_bp.route('', methods=['POST'])
@jwt_required()
def create_spot():
    """
    새로운 서핑 스팟을 등록합니다.
    - location{lat,lng} 또는 최상위 lat,lng로 좌표를 받을 수 있으며, 좌표가 있으면 예보가 함께 저장됩니다.
    """
    spot_service = current_app.services['spots']
    user_id = get_jwt_identity()
    try:
        data = SpotCreateSchema().load(request.get_json(silent=True) or {})
        new_spot = spot_service.create_spot(user_id, data)
        return jsonify(SpotResponseSchema().dump(new_spot)), 201
    except ValidationError as err:
        return validation_error_response(err)
    except Exception as e:
        logging.error(f"스팟 생성 중 오류 발생 (user_id: {user_id}): {e}", exc_info=True)
        return jsonify({"error": "Failed to create surf spot"}), 500

@spots_bp.route('/<string:spot_id>', methods=['GET'])
def get_spot(spot_id: str):
    """스팟 상세 정보(댓글, 평균 평점 포함)를 조회합니다. (인증 불필요)"""
    spot_service = current_app.services['spots']
    try:
        spot = spot_service.get_spot_detail(spot_id)
        if not spot:
            return jsonify({"error": "Surf spot not found"}), 404
        return jsonify(SpotDetailResponseSchema().dump(spot)), 200
    except Exception as e:
        logging.error(f"스팟 조회 중 오류 발생 (spot_id: {spot_id}): {e}", exc_info=True)
        return jsonify({"error": f"Failed to fetch surf spot: {e}"}), 500

@spots_bp.route('/<string:spot_id>', methods=['PUT'])
@admin_required("Not authorized to update spots")
def update_spot(spot_id: str):
    """
    [admin 전용] 스팟을 부분 수정합니다.
    - ?skipForecastUpdate=true 이면 예보를 다시 조회하지 않고 기존 예보를 유지합니다.
    """
    spot_service = current_app.services['spots']
    skip_forecast_update = request.args.get('skipForecastUpdate') == 'true'
    try:
        data = SpotUpdateSchema().load(request.get_json(silent=True) or {}, partial=True)
        updated_spot = spot_service.update_spot(spot_id, data, skip_forecast_update)
        return jsonify(SpotResponseSchema().dump(updated_spot)), 200
    except ValidationError as err:
        return validation_error_response(err)
    except ValueError as e:
        return jsonify({"error": str(e)}), 404
    except Exception as e:
        logging.error(f"스팟 수정 중 오류 발생 (spot_id: {spot_id}): {e}", exc_info=True)
        return jsonify({"error": "Failed to update surf spot"}), 500

@spots_bp.route('/<string:spot_id>', methods=['DELETE'])
@admin_required("Not authorized to delete spots")
def delete_spot(spot_id: str):
    """[admin 전용] 스팟과 그 스팟의 모든 댓글을 삭제합니다."""
    spot_service = current_app.services['spots']
    try:
        spot_service.delete_spot(spot_id)
        return jsonify({"message": "Surf spot deleted successfully"}), 200
    except ValueError as e:
        return jsonify({"error": str(e)}), 404
    except Exception as e:
        logging.error(f"스팟 삭제 중 오류 발생 (spot_id: {spot_id}): {e}", exc_info=True)
        return jsonify({"error": "Failed to delete surf spot"}), 500
