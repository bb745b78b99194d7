# surfspot/api/users/services.py
import logging
from typing import Optional, Dict, Any, Iterable, List

from surfspot.models.user import User

class UserService:
    """
    사용자 조회 및 다른 도메인 응답에 작성자 정보를 채워 넣는(populate) 로직을 담당합니다.
    """
    def __init__(self, db):
        """
        :param db: create_app에서 획득하여 주입되는 Firestore 클라이언트
        """
        self.db = db
        self.users_ref = self.db.collection('users')

    def get_user(self, user_id: str) -> Optional[Dict[str, Any]]:
        """사용자 ID로 문서를 찾아 딕셔너리로 반환합니다. 없으면 None."""
        try:
            doc = self.users_ref.document(user_id).get()
            if not doc.exists:
                return None
            return User.from_dict(doc.to_dict()).to_dict()
        except Exception as e:
            logging.error(f"ID로 사용자 조회 실패 (user_id: {user_id}): {e}", exc_info=True)
            raise

    def get_user_by_email(self, email: str) -> Optional[User]:
        """email로 사용자를 찾습니다. email은 사용자마다 고유합니다."""
        query = self.users_ref.where('email', '==', email).limit(1).stream()
        user_doc = next(iter(query), None)
        if not user_doc:
            return None
        return User.from_dict(user_doc.to_dict())

    def get_user_summaries(self, user_ids: Iterable[str]) -> Dict[str, Optional[Dict[str, Any]]]:
        """여러 사용자의 공개 요약 정보를 한 번에 조회합니다. (중복 ID는 한 번만 조회)"""
        summaries: Dict[str, Optional[Dict[str, Any]]] = {}
        for user_id in set(uid for uid in user_ids if uid):
            user = self.get_user(user_id)
            summaries[user_id] = {
                "user_id": user['user_id'],
                "username": user.get('username'),
                "email": user.get('email'),
                "image": user.get('image'),
            } if user else None
        return summaries

    def populate(self, records: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """각 레코드의 user_id를 사용자 요약 정보로 채워 'user' 키에 담습니다."""
        summaries = self.get_user_summaries(record.get('user_id') for record in records)
        for record in records:
            record['user'] = summaries.get(record.get('user_id'))
        return records
