# 서버 설정
import os
from dotenv import load_dotenv

load_dotenv()

BASE_DIR = os.path.dirname(os.path.abspath(__file__))


# 환경변수가 없을 때만 쓰는 개발용 키
DEFAULT_SECRET_KEY = 'jihwa-card-dev-key'


class Config:
    SECRET_KEY = os.getenv('SECRET_KEY', DEFAULT_SECRET_KEY)

    SQLALCHEMY_DATABASE_URI = os.getenv(
        'DATABASE_URL',
        'sqlite:///' + os.path.join(BASE_DIR, 'jihwacard.db')
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # 명함 보관 기간 (일)
    CARD_RETENTION_DAYS = int(os.getenv('CARD_RETENTION_DAYS', 7))
    # 정리 작업(cron) 인증용 토큰, 비어 있으면 정리 API는 항상 거부
    CRON_SECRET = os.getenv('CRON_SECRET', '')
    # QR 코드에 들어갈 공유 주소, 비어 있으면 요청 호스트 사용
    PUBLIC_BASE_URL = os.getenv('PUBLIC_BASE_URL', '')

    MAX_NAME_LENGTH = int(os.getenv('MAX_NAME_LENGTH', 4))
    MAX_PHONE_DIGITS = int(os.getenv('MAX_PHONE_DIGITS', 11))

    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
