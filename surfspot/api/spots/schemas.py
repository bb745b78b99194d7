# surfspot/api/spots/schemas.py
from marshmallow import Schema, fields, validate, pre_load, EXCLUDE

from surfspot.api.comments.schemas import CommentResponseSchema
from surfspot.api.users.schemas import UserSummarySchema
from surfspot.models.spot import Difficulty, WaveType, Tide, CrowdFactor

# --- 재사용을 위한 중첩 스키마 ---
class LocationSchema(Schema):
    """스팟 좌표. 값이 없으면 null 입니다."""
    class Meta:
        unknown = EXCLUDE

    lat = fields.Float(allow_none=True, load_default=None)
    lng = fields.Float(allow_none=True, load_default=None)

class ForecastSchema(Schema):
    """스팟에 내장된 예보 스냅샷 응답 스키마."""
    captured_at = fields.DateTime(data_key="capturedAt")
    payload = fields.Dict()
    last_fetched = fields.DateTime(data_key="lastFetched")

# --- API 요청 스키마 ---

class SpotFieldsSchema(Schema):
    """스팟 생성/수정 요청에 공통으로 쓰이는 필드. 예보(forecast)는 클라이언트가 쓸 수 없습니다."""
    class Meta:
        unknown = EXCLUDE

    name = fields.Str(
        required=True,
        validate=validate.Length(min=1, error="Name is required"),
        error_messages={"required": "Name is required"}
    )
    description = fields.Str()
    image_url = fields.Str(data_key="imageUrl")
    region = fields.Str()
    country = fields.Str()
    difficulty = fields.Str(validate=validate.OneOf([e.value for e in Difficulty]))
    wave_type = fields.Str(data_key="waveType", validate=validate.OneOf([e.value for e in WaveType]))
    swell_direction = fields.Str(data_key="swellDirection")
    wind_direction = fields.Str(data_key="windDirection")
    tide = fields.Str(validate=validate.OneOf([e.value for e in Tide]))
    crowd_factor = fields.Str(data_key="crowdFactor", validate=validate.OneOf([e.value for e in CrowdFactor]))
    season = fields.List(fields.Str())
    location = fields.Nested(LocationSchema, allow_none=True)
    # location 대신 최상위 lat/lng로 좌표를 보낼 수도 있습니다.
    lat = fields.Float(allow_none=True, load_only=True)
    lng = fields.Float(allow_none=True, load_only=True)

class SpotCreateSchema(SpotFieldsSchema):
    """POST /api/spots 요청 본문. 비어 있는 선택 필드는 기본값을 쓰도록 제거합니다."""

    @pre_load
    def drop_empty_values(self, data, **kwargs):
        if not isinstance(data, dict):
            return data
        return {key: value for key, value in data.items() if value is not None and value != ""}

class SpotUpdateSchema(SpotFieldsSchema):
    """PUT /api/spots/{spot_id} 부분 수정 요청 본문. partial=True로 로드합니다."""

# --- API 응답 스키마 ---

class SpotResponseSchema(Schema):
    """스팟 정보 응답을 위한 최종 JSON 형식을 정의합니다."""
    spot_id = fields.Str(data_key="_id", dump_only=True)
    name = fields.Str()
    description = fields.Str()
    image_url = fields.Str(data_key="imageUrl")
    region = fields.Str()
    country = fields.Str()
    difficulty = fields.Str()
    wave_type = fields.Str(data_key="waveType")
    swell_direction = fields.Str(data_key="swellDirection")
    wind_direction = fields.Str(data_key="windDirection")
    tide = fields.Str()
    crowd_factor = fields.Str(data_key="crowdFactor")
    season = fields.List(fields.Str())
    location = fields.Nested(LocationSchema)
    user = fields.Nested(UserSummarySchema, allow_none=True)
    comments = fields.List(fields.Str())
    forecast = fields.Nested(ForecastSchema, allow_none=True)
    created_at = fields.DateTime(data_key="createdAt")
    updated_at = fields.DateTime(data_key="updatedAt")

class SpotDetailResponseSchema(SpotResponseSchema):
    """
    GET /api/spots/{spot_id}
    댓글 목록 전체와 평균 평점(rating)이 포함됩니다. 평점 댓글이 없으면 rating 키는 생략됩니다.
    """
    comments = fields.List(fields.Nested(CommentResponseSchema))
    rating = fields.Float()
