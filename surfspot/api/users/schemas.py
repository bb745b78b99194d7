# surfspot/api/users/schemas.py
from marshmallow import Schema, fields

class UserSummarySchema(Schema):
    """스팟/댓글 응답에 포함될 작성자 요약 정보 스키마."""
    user_id = fields.Str(data_key="_id", dump_only=True)
    username = fields.Str(allow_none=True)
    email = fields.Email()
    image = fields.Str(allow_none=True)

class UserResponseSchema(Schema):
    """
    GET /api/user
    현재 로그인된 사용자 본인의 전체 정보를 응답할 때 사용하는 스키마.
    """
    user_id = fields.Str(data_key="_id", dump_only=True)
    email = fields.Email()
    username = fields.Str(allow_none=True)
    image = fields.Str(allow_none=True)
    provider = fields.Str(allow_none=True)
    role = fields.Str()
    created_at = fields.DateTime(data_key="createdAt")
    updated_at = fields.DateTime(data_key="updatedAt")
