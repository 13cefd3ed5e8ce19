# app/__init__.py

# =====================================================================================
# 1. 환경 변수 로드 (가장 먼저 실행)
# =====================================================================================
from dotenv import load_dotenv
load_dotenv()

# =====================================================================================
# 2. 모듈 임포트 (Module Imports)
# =====================================================================================
import os
import atexit
import logging
from typing import Optional, Dict, Any
from flask import Flask, jsonify
from marshmallow import ValidationError
from werkzeug.exceptions import HTTPException
from flask_jwt_extended import JWTManager
import firebase_admin
from firebase_admin import credentials

# - 설정 / 공통
from app.core.config import config_by_name
from app.core.errors import JournalError
from app.core.session import teardown_session

# - API 블루프린트
from app.api.auth.routes import auth_bp
from app.api.uploads.routes import uploads_bp
from app.api.users.routes import users_bp
from app.api.journals.routes import journals_bp
from app.api.social.routes import social_bp
from app.api.calendar.routes import calendar_bp
from app.api.ai.routes import ai_bp

# - 서비스 모듈
from app.services.storage_service import StorageService
from app.services.openai_service import OpenAIService
from app.api.auth.services import AuthService
from app.api.users.services import ProfileService
from app.api.journals.services import JournalService
from app.api.feed.composer import FeedComposer
from app.api.social.services import SocialService
from app.api.calendar.services import CalendarService


def _init_firebase(app: Flask) -> None:
    if firebase_admin._apps:
        return
    cred_path = app.config['FIREBASE_CREDENTIALS_PATH']
    if not cred_path or not os.path.exists(cred_path):
        raise FileNotFoundError(f"Firebase 인증 파일을 찾을 수 없습니다: {cred_path}")
    cred = credentials.Certificate(cred_path)
    firebase_admin.initialize_app(cred, {
        'storageBucket': app.config['FIREBASE_STORAGE_BUCKET']
    })


def build_services(app: Flask) -> Dict[str, Any]:
    """
    서비스 인스턴스를 생성합니다. 다른 서비스의 기반이 되는 공용 서비스를 먼저 만듭니다.
    """
    services: Dict[str, Any] = {}

    try:
        storage_instance = StorageService()
        storage_instance.init_app(app)
        services['storage'] = storage_instance
        logging.info("Storage service initialized successfully")
    except Exception as e:
        logging.error(f"Failed to initialize storage service: {e}")
        raise

    openai_instance = OpenAIService()
    openai_instance.init_app(app)
    services['openai'] = openai_instance

    services['profiles'] = ProfileService()
    services['auth'] = AuthService(profile_service=services['profiles'])
    services['journals'] = JournalService(
        storage_service=services['storage'],
        base_url=app.config['APP_BASE_URL']
    )
    services['feed'] = FeedComposer()
    services['social'] = SocialService()
    services['calendar'] = CalendarService()
    return services


def create_app(config_name: Optional[str] = None, services: Optional[Dict[str, Any]] = None):
    """
    Flask 애플리케이션 팩토리 함수.

    :param config_name: 'development' | 'testing' | 'production' (기본값: FLASK_ENV)
    :param services: 미리 만든 서비스 딕셔너리. 주어지면 Firebase 초기화와 서비스 생성을 건너뜁니다. (테스트용)
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

    if services is None:
        _init_firebase(app)
        services = build_services(app)

    # =====================================================================================
    # 5. 서비스 인스턴스를 'app.services'에 저장 (의존성 주입)
    # =====================================================================================
    app.services = services

    @jwt.token_in_blocklist_loader
    def check_if_token_revoked(jwt_header, jwt_payload):
        return app.services['auth'].is_token_revoked(jwt_payload)

    # 실시간 리스너: 'journals' 스냅샷이 도착할 때마다 피드가 최신 상태를 사용합니다.
    if app.config.get('LIVE_QUERIES_ENABLED'):
        journal_service = app.services['journals']
        journal_service.start_live(on_snapshot=app.services['feed'].invalidate)
        atexit.register(journal_service.stop_live)

    app.teardown_request(teardown_session)

    # =====================================================================================
    # 6. 블루프린트 등록
    # =====================================================================================
    app.register_blueprint(auth_bp, url_prefix='/api/auth')
    app.register_blueprint(uploads_bp, url_prefix='/api/uploads')
    app.register_blueprint(users_bp, url_prefix='/api/users')
    app.register_blueprint(journals_bp, url_prefix='/api/journals')
    app.register_blueprint(social_bp, url_prefix='/api')
    app.register_blueprint(calendar_bp, url_prefix='/api/calendar')
    app.register_blueprint(ai_bp, url_prefix='/api/ai')

    # =====================================================================================
    # 7. 전역 에러 핸들러 설정
    # =====================================================================================
    @app.errorhandler(JournalError)
    def handle_journal_error(err):
        if err.status_code >= 500:
            logging.error(f"{err.error_code}: {err.message}")
        return jsonify(err.to_dict()), err.status_code

    @app.errorhandler(ValidationError)
    def handle_marshmallow_validation(err):
        response = {"error_code": "VALIDATION_ERROR", "details": err.messages}
        return jsonify(response), 400

    @app.errorhandler(HTTPException)
    def handle_http_exception(err):
        response = {"error_code": err.name.upper().replace(' ', '_'), "message": err.description}
        return jsonify(response), err.code

    @app.errorhandler(Exception)
    def handle_generic_exception(err):
        # 다른 핸들러에서 처리되지 않은 모든 예외를 여기서 처리
        logging.error(f"An unhandled exception occurred: {err}", exc_info=True)
        response = {"error_code": "INTERNAL_SERVER_ERROR", "message": "서버 내부에서 예상치 못한 오류가 발생했습니다."}
        return jsonify(response), 500

    # =====================================================================================
    # 8. 로깅 및 앱 반환
    # =====================================================================================
    if not app.debug:
        logging.basicConfig(level=logging.INFO, format='%(asctime)s %(levelname)s: %(message)s [in %(pathname)s:%(lineno)d]')

    logging.info(f"Flask app created for '{config_name}' environment.")

    return app
