# surfspot/api/comments/schemas.py
from marshmallow import Schema, fields, validate, EXCLUDE
from surfspot.api.users.schemas import UserSummarySchema # 작성자 정보는 사용자 요약 스키마를 재사용

class CommentCreateSchema(Schema):
    """
    POST /api/comments
    최상위 댓글은 spotId와 rating, 답글은 parentId를 전달합니다.
    평점 필수 여부 등 도메인 규칙은 rules.prepare_comment_write에서 검사합니다.
    """
    class Meta:
        unknown = EXCLUDE

    spot_id = fields.Str(data_key="spotId", allow_none=True)
    parent_id = fields.Str(data_key="parentId", allow_none=True)
    text = fields.Str(
        required=True,
        validate=validate.Length(min=1, error="Text is required"),
        error_messages={"required": "Text is required"}
    )
    rating = fields.Float(allow_none=True)

class CommentUpdateSchema(Schema):
    """PUT /api/comments/{comment_id} 요청 본문. 텍스트만 수정할 수 있습니다."""
    class Meta:
        unknown = EXCLUDE

    text = fields.Str(
        required=True,
        validate=validate.Length(min=1, error="Text is required"),
        error_messages={"required": "Text is required"}
    )

class CommentResponseSchema(Schema):
    """
    댓글 정보 응답을 위한 최종 JSON 형식을 정의합니다.
    답글에는 rating 키가 포함되지 않습니다.
    """
    comment_id = fields.Str(data_key="_id", dump_only=True)
    spot_id = fields.Str(data_key="spot")
    user = fields.Nested(UserSummarySchema, allow_none=True)
    text = fields.Str()
    rating = fields.Float()
    parent_id = fields.Str(data_key="parentId", allow_none=True)
    edited = fields.Bool()
    created_at = fields.DateTime(data_key="createdAt")
    updated_at = fields.DateTime(data_key="updatedAt")
