# surfspot/api/comments/rules.py
"""
댓글 쓰기 경로(생성/수정)마다 저장 직전에 명시적으로 호출되는 도메인 규칙.

- 최상위 댓글(parent 없음)은 반드시 1~5 범위의 숫자 평점을 가진다.
- 답글(parent 있음)은 평점을 절대 가지지 않으며, 스팟은 부모 댓글에서 물려받는다.
- 수정/삭제는 작성자 본인 또는 admin만 가능하다.
"""

import math
from typing import Any, Dict, Optional

from marshmallow import ValidationError

from surfspot.core.security import is_owner_or_admin
from surfspot.models.comment import Comment
from surfspot.utils.datetime_utils import DateTimeUtils

MIN_RATING = 1
MAX_RATING = 5

def _coerce_rating(value: Any) -> float:
    """평점을 숫자로 변환하고 범위를 검사합니다."""
    if isinstance(value, bool):
        raise ValidationError("Rating must be a number", field_name="rating")
    try:
        rating = float(value)
    except (TypeError, ValueError):
        raise ValidationError("Rating must be a number", field_name="rating")
    if math.isnan(rating) or not MIN_RATING <= rating <= MAX_RATING:
        raise ValidationError(f"Rating must be between {MIN_RATING} and {MAX_RATING}", field_name="rating")
    return rating

def prepare_comment_write(data: Dict[str, Any], parent: Optional[Comment] = None) -> Dict[str, Any]:
    """
    댓글 생성 요청을 검증하고 저장할 필드를 결정합니다.

    :param data: 검증된 요청 데이터 (text, spot_id?, rating?, parent_id?)
    :param parent: 답글인 경우 이미 조회된 부모 댓글
    :return: Comment 생성에 사용할 필드 딕셔너리 (spot_id, text, rating, parent_id)
    :raises ValidationError: 텍스트 누락, 최상위 댓글의 spot_id/평점 누락 또는 범위 오류
    """
    text = data.get('text')
    if not text:
        raise ValidationError("Text is required", field_name="text")

    if parent is not None:
        # 답글: 스팟은 부모에서 물려받고, 전달된 평점은 무시합니다.
        return {
            "spot_id": parent.spot_id,
            "text": text,
            "rating": None,
            "parent_id": parent.comment_id,
        }

    spot_id = data.get('spot_id')
    rating = data.get('rating')
    if not spot_id or rating is None:
        raise ValidationError("spotId and rating are required for top-level comments")

    return {
        "spot_id": spot_id,
        "text": text,
        "rating": _coerce_rating(rating),
        "parent_id": None,
    }

def validate_comment(comment: Comment) -> Comment:
    """저장 직전의 댓글 엔티티가 평점 불변식을 만족하는지 확인합니다."""
    if not comment.text:
        raise ValidationError("Text is required", field_name="text")
    if comment.is_reply:
        comment.rating = None
    elif comment.rating is None:
        raise ValidationError("Rating is required for top-level comments", field_name="rating")
    else:
        comment.rating = _coerce_rating(comment.rating)
    return comment

def prepare_comment_edit(comment: Comment, text: str) -> Comment:
    """텍스트만 수정 가능하며, 수정된 댓글에는 edited 표시가 붙습니다."""
    comment.text = text
    comment.edited = True
    comment.updated_at = DateTimeUtils.now()
    return validate_comment(comment)

def can_modify_comment(comment: Comment, user: Optional[Dict[str, Any]]) -> bool:
    return is_owner_or_admin(comment.user_id, user)
