# surfspot/models/user.py
from dataclasses import dataclass, field, asdict
from datetime import datetime
from enum import Enum
from typing import Optional, Dict, Any
import logging

from surfspot.utils.datetime_utils import DateTimeUtils

class UserRole(Enum):
    USER = "user"
    ADMIN = "admin"

@dataclass
class User:
    """
    Firestore 'users' 컬렉션의 문서 구조를 정의하는 데이터클래스.
    최초 로그인 시 생성되며, email은 사용자마다 고유합니다.
    """
    user_id: str
    email: str
    username: Optional[str] = None
    image: Optional[str] = None
    provider: Optional[str] = None
    role: UserRole = UserRole.USER
    created_at: datetime = field(default_factory=DateTimeUtils.now)
    updated_at: datetime = field(default_factory=DateTimeUtils.now)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "User":
        """Firestore 문서 딕셔너리로부터 User 인스턴스를 생성합니다."""
        processed_data = DateTimeUtils.from_firestore(dict(data))
        role_str = processed_data.get('role')
        try:
            processed_data['role'] = UserRole(role_str) if role_str else UserRole.USER
        except ValueError:
            logging.warning(f"Invalid UserRole value '{role_str}' for user {processed_data.get('user_id')}. Defaulting to user.")
            processed_data['role'] = UserRole.USER
        known = {k: v for k, v in processed_data.items() if k in cls.__dataclass_fields__}
        return cls(**known)

    def to_dict(self) -> Dict[str, Any]:
        """Firestore 저장용 딕셔너리로 변환합니다."""
        user_dict = asdict(self)
        user_dict['role'] = self.role.value
        return user_dict
