# surfspot/services/google_auth_service.py

import logging
import requests
from google_auth_oauthlib.flow import Flow

class GoogleAuthService:
    """실제 Google OAuth 2.0 통신을 담당하는 서비스 클래스입니다."""
    _user_info_url = "https://www.googleapis.com/oauth2/v3/userinfo"
    _scopes = [
        "https://www.googleapis.com/auth/userinfo.profile",
        "https://www.googleapis.com/auth/userinfo.email",
        "openid"
    ]

    @staticmethod
    def exchange_code_for_user_info(auth_code: str, client_secrets_path: str, redirect_uri: str) -> dict:
        """
        인증 코드를 Access Token으로 교환하고, 이를 사용해 사용자 정보를 가져옵니다.
        반환값에는 email, name, picture 키가 포함됩니다.
        """
        try:
            # 1. OAuth 2.0 Flow 객체 생성
            flow = Flow.from_client_secrets_file(client_secrets_path, scopes=GoogleAuthService._scopes)
            flow.redirect_uri = redirect_uri

            # 2. 인증 코드를 토큰으로 교환
            flow.fetch_token(code=auth_code)
            credentials = flow.credentials

            # 3. Access Token으로 사용자 정보 요청
            response = requests.get(
                GoogleAuthService._user_info_url,
                headers={"Authorization": f"Bearer {credentials.token}"}
            )
            response.raise_for_status()
            return response.json()

        except Exception as e:
            logging.error(f"Google OAuth failed: {e}", exc_info=True)
            raise e
