# surfspot/__init__.py

# =====================================================================================
# 1. 환경 변수 로드 (가장 먼저 실행)
# =====================================================================================
from dotenv import load_dotenv
load_dotenv()

# =====================================================================================
# 2. 모듈 임포트 (Module Imports)
# =====================================================================================
import os
import json
import logging
from flask import Flask, request
from marshmallow import ValidationError
from werkzeug.exceptions import HTTPException
from flask_jwt_extended import JWTManager
import firebase_admin
from firebase_admin import credentials, firestore

# - 설정 및 보안
from surfspot.core.config import config_by_name
from surfspot.core.security import register_jwt_callbacks

# - API 블루프린트
from surfspot.api.auth.routes import auth_bp
from surfspot.api.users.routes import users_bp
from surfspot.api.spots.routes import spots_bp
from surfspot.api.comments.routes import comments_bp
from surfspot.api.responses import error_response, validation_error_response

# - 서비스 모듈
from surfspot.services.forecast_service import ForecastService
from surfspot.api.auth.services import AuthService
from surfspot.api.users.services import UserService
from surfspot.api.comments.services import CommentService
from surfspot.api.spots.services import SpotService

CORS_ALLOWED_METHODS = "GET, POST, PUT, DELETE, OPTIONS"
CORS_ALLOWED_HEADERS = "Content-Type, Authorization"

def create_app(config_name=None, db=None):
    """
    Flask 애플리케이션 팩토리 함수.

    :param config_name: 'development' | 'testing' | 'production'. 없으면 FLASK_ENV 값을 사용합니다.
    :param db: 미리 준비된 Firestore 클라이언트. 없으면 firebase_admin으로 새로 초기화합니다.
    """
    # =====================================================================================
    # 3. Flask 앱 생성 및 기본 설정
    # =====================================================================================
    config_name = config_name or os.getenv('FLASK_ENV', 'development')

    app = Flask(__name__)
    app.config.from_object(config_by_name[config_name])
    app.json.ensure_ascii = False

    # =====================================================================================
    # 4. 확장 기능 및 외부 서비스 초기화
    # =====================================================================================
    jwt = JWTManager(app)
    register_jwt_callbacks(jwt)

    if db is None:
        if not firebase_admin._apps:
            cred_path = app.config['FIREBASE_CREDENTIALS_PATH']
            if not cred_path or not os.path.exists(cred_path):
                raise FileNotFoundError(f"Firebase 인증 파일을 찾을 수 없습니다: {cred_path}")
            cred = credentials.Certificate(cred_path)
            firebase_admin.initialize_app(cred)
        db = firestore.client()
    # 프로세스 전체에서 하나의 Firestore 핸들을 공유합니다.
    app.db = db

    # =====================================================================================
    # 5. 서비스 인스턴스 생성 및 'app.services'에 저장 (의존성 주입)
    # =====================================================================================
    app.services = {}

    # 5-1. 다른 서비스의 기반이 되는 공용 서비스
    app.services['users'] = UserService(db)

    forecast_instance = ForecastService()
    forecast_instance.init_app(app)
    app.services['forecast'] = forecast_instance

    # 5-2. 다른 서비스를 주입받아야 하는 도메인 서비스
    app.services['auth'] = AuthService(db, user_service=app.services['users'])
    app.services['comments'] = CommentService(db, user_service=app.services['users'])
    app.services['spots'] = SpotService(
        db,
        forecast_service=app.services['forecast'],
        user_service=app.services['users'],
        comment_service=app.services['comments']
    )

    # =====================================================================================
    # 6. 블루프린트 등록
    # =====================================================================================
    app.register_blueprint(auth_bp, url_prefix='/api/auth')
    app.register_blueprint(users_bp, url_prefix='/api/user')
    app.register_blueprint(spots_bp, url_prefix='/api/spots')
    app.register_blueprint(comments_bp, url_prefix='/api/comments')

    # =====================================================================================
    # 7. CORS (프론트엔드 한 곳만 허용, 자격 증명 포함)
    # =====================================================================================
    @app.after_request
    def apply_cors_headers(response):
        response.headers['Access-Control-Allow-Origin'] = app.config['FRONTEND_ORIGIN']
        response.headers['Access-Control-Allow-Credentials'] = 'true'
        response.headers['Access-Control-Allow-Methods'] = CORS_ALLOWED_METHODS
        response.headers['Access-Control-Allow-Headers'] = CORS_ALLOWED_HEADERS
        response.headers['Vary'] = 'Origin'
        return response

    # =====================================================================================
    # 8. 전역 에러 핸들러 설정
    # =====================================================================================
    @app.errorhandler(ValidationError)
    def handle_marshmallow_validation(err):
        return validation_error_response(err)

    @app.errorhandler(HTTPException)
    def handle_http_exception(err):
        # 404/405 등 라우팅 단계의 오류도 {"error": ...} 형식으로 맞춥니다. (Allow 헤더 등은 유지)
        response = err.get_response()
        response.data = json.dumps({"error": err.name.capitalize()})
        response.content_type = "application/json"
        if err.code == 405:
            logging.info(f"허용되지 않은 메서드 요청: {request.method} {request.path}")
        return response

    @app.errorhandler(Exception)
    def handle_generic_exception(err):
        # 다른 핸들러에서 처리되지 않은 모든 예외를 여기서 처리
        logging.error(f"An unhandled exception occurred: {err}", exc_info=True)
        return error_response(f"Internal server error: {err}", 500)

    # =====================================================================================
    # 9. 로깅 및 앱 반환
    # =====================================================================================
    if not app.debug:
        logging.basicConfig(level=logging.INFO, format='%(asctime)s %(levelname)s: %(message)s [in %(pathname)s:%(lineno)d]')

    logging.info(f"Flask app created for '{config_name}' environment.")

    return app

def close_database(app):
    """프로세스 종료 시 공유 Firestore 핸들을 닫습니다."""
    db = getattr(app, 'db', None)
    if db is None:
        return
    try:
        db.close()
        logging.info("Firestore client closed.")
    except Exception as e:
        logging.error(f"Firestore client close failed: {e}", exc_info=True)
