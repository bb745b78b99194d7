# surfspot/models/comment.py
from dataclasses import dataclass, field, asdict
from datetime import datetime
from typing import Optional, Dict, Any

from surfspot.utils.datetime_utils import DateTimeUtils

@dataclass
class Comment:
    """
    Firestore 'comments' 컬렉션의 문서 구조를 정의하는 데이터클래스.
    parent_id가 없으면 최상위 댓글(평점 필수), 있으면 답글(평점 없음)입니다.
    """
    comment_id: str
    spot_id: str
    user_id: str
    text: str
    rating: Optional[float] = None
    parent_id: Optional[str] = None
    edited: bool = False
    created_at: datetime = field(default_factory=DateTimeUtils.now)
    updated_at: datetime = field(default_factory=DateTimeUtils.now)

    @property
    def is_reply(self) -> bool:
        return bool(self.parent_id)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Comment":
        processed_data = DateTimeUtils.from_firestore(dict(data))
        known = {k: v for k, v in processed_data.items() if k in cls.__dataclass_fields__}
        return cls(**known)

    def to_dict(self) -> Dict[str, Any]:
        """Firestore 저장용 딕셔너리. 평점이 없는 댓글은 rating 키 자체를 저장하지 않습니다."""
        comment_dict = asdict(self)
        if comment_dict.get('rating') is None:
            comment_dict.pop('rating', None)
        return comment_dict
