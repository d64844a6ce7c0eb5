import pytest

from jihwacard.app import create_app
from jihwacard.config import Config
from jihwacard.models import db


class ConfigForTests(Config):
    TESTING = True
    SECRET_KEY = 'test-secret-key'
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    CRON_SECRET = 'cron-test-secret'
    PUBLIC_BASE_URL = 'https://card.example.com'
    CARD_RETENTION_DAYS = 7
    MAX_NAME_LENGTH = 4
    MAX_PHONE_DIGITS = 11


@pytest.fixture
def app():
    app = create_app(ConfigForTests)
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()
