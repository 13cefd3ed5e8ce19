# app/core/config.py

import os # 'os' 모듈: 환경 변수를 읽기 위해 사용합니다.
from datetime import timedelta

class Config:
    """모든 환경 설정의 기반이 되는 공통 설정 클래스입니다."""
    # JWT 토큰을 서명하는 데 사용되어 토큰의 위변조를 방지합니다.
    JWT_SECRET_KEY = os.getenv('JWT_SECRET_KEY')
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(hours=1)
    JWT_REFRESH_TOKEN_EXPIRES = timedelta(days=14)

    FIREBASE_STORAGE_BUCKET = os.getenv('FIREBASE_STORAGE_BUCKET')

    # 관측 일지 AI 다듬기 / 관측지 정보에 사용하는 OpenAI 설정
    OPENAI_API_KEY = os.getenv('OPENAI_API_KEY')
    OPENAI_MODEL = os.getenv('OPENAI_MODEL', 'gpt-4o-mini')
    OPENAI_SEARCH_MODEL = os.getenv('OPENAI_SEARCH_MODEL', 'gpt-4o-search-preview')

    # 공유 링크(?entry=<id>)의 기준 URL
    APP_BASE_URL = os.getenv('APP_BASE_URL', 'http://localhost:5173/')

    # True이면 앱 시작 시 'journals' 컬렉션 실시간 리스너를 등록합니다.
    LIVE_QUERIES_ENABLED = True

    # 이미지 업로드 최대 크기 (10MB)
    MAX_CONTENT_LENGTH = 10 * 1024 * 1024

class DevelopmentConfig(Config):
    """개발 환경을 위한 설정 클래스입니다."""
    DEBUG = True
    FIREBASE_CREDENTIALS_PATH = os.getenv('DEV_FIREBASE_CREDENTIALS_PATH')

class TestingConfig(Config):
    """테스트 환경을 위한 설정 클래스입니다."""
    TESTING = True
    DEBUG = False
    JWT_SECRET_KEY = os.getenv('JWT_SECRET_KEY', 'testing-secret-key-for-starlight-journal')
    FIREBASE_CREDENTIALS_PATH = os.getenv('TEST_FIREBASE_CREDENTIALS_PATH')
    # 테스트에서는 Firestore 리스너 대신 서비스가 직접 조회합니다.
    LIVE_QUERIES_ENABLED = False
    APP_BASE_URL = 'https://starlight.example.com/'

class ProductionConfig(Config):
    """운영 환경을 위한 설정 클래스입니다."""
    DEBUG = False
    FIREBASE_CREDENTIALS_PATH = os.getenv('FIREBASE_CREDENTIALS_PATH')

# config_by_name: FLASK_ENV 값에 따라 create_app에서 적절한 설정을 선택하는 데 사용됩니다.
config_by_name = dict(
    development=DevelopmentConfig,
    testing=TestingConfig,
    production=ProductionConfig
)
