# surfspot/api/comments/routes.py
import logging
from flask import Blueprint, request, jsonify, current_app
from flask_jwt_extended import jwt_required, get_jwt_identity, current_user
from marshmallow import ValidationError

from surfspot.api.comments.schemas import CommentCreateSchema, CommentResponseSchema
from surfspot.api.responses import validation_error_response


comments_bp = Blueprint('comments_bp', __name__)

@comments_bp.route('', methods=['GET'])
def get_comments():
    """모든 댓글을 작성자 정보와 함께 조회합니다."""
    comment_service = current_app.services['comments']
    try:
        comments = comment_service.list_comments()
        return jsonify(CommentResponseSchema(many=True).dump(comments)), 200
    except Exception as e:
        logging.error(f"댓글 목록 조회 중 오류 발생: {e}", exc_info=True)
        return jsonify({"error": "Failed to fetch comments"}), 500

@comments_bp.route('', methods=['POST'])
@jwt_required()
def create_comment():
    """
    새로운 댓글 또는 답글을 작성합니다.
    - 최상위 댓글: {spotId, text, rating}
    - 답글: {parentId, text} (rating은 무시됨)
    """
    comment_service = current_app.services['comments']
    user_id = get_jwt_identity()
    try:
        data = CommentCreateSchema().load(request.get_json(silent=True) or {})
        new_comment = comment_service.create_comment(user_id, data)
        return jsonify(CommentResponseSchema().dump(new_comment)), 201
    except ValidationError as err:
        return validation_error_response(err)
    except ValueError as e: # 부모 댓글 또는 스팟이 없는 경우
        return jsonify({"error": str(e)}), 404
    except Exception as e:
        logging.error(f"댓글 생성 중 오류 발생 (user_id: {user_id}): {e}", exc_info=True)
        return jsonify({"error": "Failed to create comment"}), 500

@comments_bp.route('/<string:comment_id>', methods=['GET'])
@jwt_required()
def get_comment(comment_id: str):
    comment_service = current_app.services['comments']
    try:
        comment = comment_service.get_comment(comment_id)
        if not comment:
            return jsonify({"error": "Comment not found"}), 404
        return jsonify(CommentResponseSchema().dump(comment)), 200
    except Exception as e:
        logging.error(f"댓글 조회 중 오류 발생 (comment_id: {comment_id}): {e}", exc_info=True)
        return jsonify({"error": "Failed to fetch comment"}), 500

@comments_bp.route('/<string:comment_id>', methods=['PUT'])
@jwt_required()
def update_comment(comment_id: str):
    """
    댓글 텍스트를 수정합니다. (작성자 본인 또는 admin만 가능)
    - 없는 댓글은 404, 권한이 없으면 본문과 무관하게 403, 텍스트가 비어 있으면 400
    """
    comment_service = current_app.services['comments']
    try:
        data = request.get_json(silent=True) or {}
        updated_comment = comment_service.update_comment(comment_id, current_user, data)
        return jsonify(CommentResponseSchema().dump(updated_comment)), 200
    except ValidationError as err:
        return validation_error_response(err)
    except PermissionError as e:
        return jsonify({"error": str(e)}), 403
    except ValueError as e:
        return jsonify({"error": str(e)}), 404
    except Exception as e:
        logging.error(f"댓글 수정 중 오류 발생 (comment_id: {comment_id}): {e}", exc_info=True)
        return jsonify({"error": "Failed to update comment"}), 500

@comments_bp.route('/<string:comment_id>', methods=['DELETE'])
@jwt_required()
def delete_comment(comment_id: str):
    """
    댓글을 삭제합니다. (작성자 본인 또는 admin만 가능)
    - 최상위 댓글을 삭제하면 그 답글들도 함께 삭제됩니다.
    """
    comment_service = current_app.services['comments']
    try:
        comment_service.delete_comment(comment_id, current_user)
        return jsonify({"message": "Comment deleted successfully"}), 200
    except PermissionError as e:
        return jsonify({"error": str(e)}), 403
    except ValueError as e:
        return jsonify({"error": str(e)}), 404
    except Exception as e:
        logging.error(f"댓글 삭제 중 오류 발생 (comment_id: {comment_id}): {e}", exc_info=True)
        return jsonify({"error": "Failed to delete comment"}), 500
