# surfspot/api/auth/services.py
import uuid
import logging
from datetime import datetime, timezone
from typing import Tuple

from surfspot.api.users.services import UserService
from surfspot.models.user import User, UserRole
from surfspot.utils.datetime_utils import DateTimeUtils

class AuthService:
    """로그인 시 사용자 생성과 토큰 무효화(Blocklist)를 담당합니다."""
    def __init__(self, db, user_service: UserService):
        self.db = db
        self.users_ref = self.db.collection('users')
        self.revoked_tokens_ref = self.db.collection('revoked_tokens')
        self.user_service = user_service

    def get_or_create_user_by_google(self, google_user_info: dict) -> Tuple[User, bool]:
        """
        Google 사용자 정보로 기존 사용자를 찾거나, 최초 로그인이면 새로 생성합니다.
        사용자는 email로 식별되며, 역할은 기본값 'user'로 생성됩니다.
        """
        email = google_user_info.get('email')
        if not email:
            raise ValueError("Google user info must contain 'email'.")

        existing = self.user_service.get_user_by_email(email)
        if existing:
            return existing, False

        user_id = str(uuid.uuid4())
        new_user = User(
            user_id=user_id,
            email=email,
            username=google_user_info.get('name'),
            image=google_user_info.get('picture'),
            provider='google',
            role=UserRole.USER,
        )
        self.users_ref.document(user_id).set(DateTimeUtils.for_firestore(new_user.to_dict()))
        logging.info(f"신규 사용자 생성 (user_id: {user_id})")
        return new_user, True

    # --- Blocklist 관련 로직 ---
    def add_token_to_blocklist(self, jti: str, expires: datetime):
        """전달받은 토큰의 jti를 만료 시간과 함께 Firestore에 저장합니다."""
        try:
            token_data = {
                'revoked_at': DateTimeUtils.now(),
                'expires_at': expires
            }
            self.revoked_tokens_ref.document(jti).set(DateTimeUtils.for_firestore(token_data))
        except Exception as e:
            logging.error(f"Blocklist 토큰 추가 실패 (jti: {jti}): {e}", exc_info=True)
            raise

    def is_token_revoked(self, jwt_payload: dict) -> bool:
        """jti를 이용해 해당 토큰이 무효화 목록에 있는지 확인합니다."""
        jti = jwt_payload['jti']
        doc = self.revoked_tokens_ref.document(jti).get()
        return doc.exists

    def logout_user(self, access_jti: str, access_exp: int, refresh_jti: str, refresh_exp: int):
        """Access 토큰과 Refresh 토큰을 모두 Blocklist에 추가합니다."""
        access_expires = datetime.fromtimestamp(access_exp, tz=timezone.utc)
        refresh_expires = datetime.fromtimestamp(refresh_exp, tz=timezone.utc)
        self.add_token_to_blocklist(access_jti, access_expires)
        self.add_token_to_blocklist(refresh_jti, refresh_expires)
        logging.info(f"사용자 로그아웃 처리 완료. JTI: {access_jti[:8]}..., {refresh_jti[:8]}...")
