# surfspot/core/config.py

import os

class Config:
    """모든 환경 설정의 기반이 되는 공통 설정 클래스입니다."""
    # JWT 토큰 서명 키. 토큰 위변조 방지에 사용됩니다.
    JWT_SECRET_KEY = os.getenv('JWT_SECRET_KEY')
    # Google OAuth 인증에 필요한 클라이언트 시크릿 파일 경로와 리다이렉트 URI
    GOOGLE_CLIENT_SECRETS_PATH = os.getenv('GOOGLE_CLIENT_SECRETS_PATH')
    GOOGLE_OAUTH_REDIRECT_URI = os.getenv('GOOGLE_OAUTH_REDIRECT_URI', 'https://surfapp2.vercel.app')

    # 해양 예보 제공자(Stormglass) 설정. API 키가 없으면 예보 조회는 건너뜁니다.
    STORMGLASS_API_KEY = os.getenv('STORMGLASS_API_KEY')
    STORMGLASS_API_URL = os.getenv('STORMGLASS_API_URL', 'https://api.stormglass.io/v2/weather/point')
    STORMGLASS_SOURCE = 'noaa'
    FORECAST_DAYS = 3

    # CORS 허용 대상은 프론트엔드 한 곳으로 고정됩니다.
    FRONTEND_ORIGIN = os.getenv('FRONTEND_ORIGIN', 'https://surfapp2.vercel.app')

class DevelopmentConfig(Config):
    """개발 환경 설정."""
    DEBUG = True
    FIREBASE_CREDENTIALS_PATH = os.getenv('DEV_FIREBASE_CREDENTIALS_PATH')

class TestingConfig(Config):
    """테스트 환경 설정. 테스트에서는 Firestore 대역(double)을 주입하므로 인증 파일이 없어도 됩니다."""
    TESTING = True
    DEBUG = False
    FIREBASE_CREDENTIALS_PATH = os.getenv('TEST_FIREBASE_CREDENTIALS_PATH')
    JWT_SECRET_KEY = os.getenv('TEST_JWT_SECRET_KEY', 'surfspot-testing-secret-key-0123456789')
    STORMGLASS_API_KEY = 'test-stormglass-key'
    STORMGLASS_API_URL = 'https://api.stormglass.io/v2/weather/point'

class ProductionConfig(Config):
    """운영 환경 설정."""
    DEBUG = False
    FIREBASE_CREDENTIALS_PATH = os.getenv('FIREBASE_CREDENTIALS_PATH')

# FLASK_ENV 값에 따라 create_app에서 적절한 설정 클래스를 선택합니다.
config_by_name = dict(
    development=DevelopmentConfig,
    testing=TestingConfig,
    production=ProductionConfig
)
