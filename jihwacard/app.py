from datetime import datetime

import click
from flask import Flask, jsonify
from flask_cors import CORS

from jihwacard.config import DEFAULT_SECRET_KEY, Config
from jihwacard.models import db
from jihwacard.api.finger_letters import finger_letters_bp
from jihwacard.api.jamo_decompose import jamo_decompose_bp
from jihwacard.api.jamo_compose import jamo_compose_bp
from jihwacard.api.cards import cards_bp, cleanup_expired_cards
from jihwacard.api.kiosk import kiosk_bp
from jihwacard.create_tables import create_tables

SERVER_NAME = 'Jihwa Card API Server'
VERSION = '1.0.0'


def create_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)
    app.json.ensure_ascii = False
    app.logger.setLevel(app.config.get('LOG_LEVEL', 'INFO'))

    if app.config.get('SECRET_KEY') == DEFAULT_SECRET_KEY and not (app.testing or app.debug):
        app.logger.warning('SECRET_KEY가 설정되지 않아 개발용 키를 사용합니다. 키오스크 세션 쿠키가 위조될 수 있습니다.')

    # 확장 초기화
    db.init_app(app)
    CORS(app)  # 키오스크/공유 페이지 프론트엔드와 통신

    # 블루프린트 등록
    app.register_blueprint(finger_letters_bp)
    app.register_blueprint(jamo_decompose_bp)
    app.register_blueprint(jamo_compose_bp)
    app.register_blueprint(cards_bp)
    app.register_blueprint(kiosk_bp)

    register_routes(app)
    register_commands(app)

    return app


def register_routes(app):
    @app.route('/')
    def index():
        """서버 상태 확인"""
        return jsonify({
            'server': SERVER_NAME,
            'status': 'running',
            'version': VERSION,
            'endpoints': {
                'letters': '/api/letters',
                'decompose': '/api/jamo/decompose',
                'compose': '/api/jamo/compose',
                'kiosk': '/api/kiosk/state',
                'card': '/api/card/<id>',
                'health': '/api/health'
            }
        })

    @app.route('/api/health')
    def health_check():
        return jsonify({
            'status': 'healthy',
            'server': SERVER_NAME,
            'version': VERSION,
            'timestamp': datetime.utcnow().isoformat()
        }), 200


def register_commands(app):
    @app.cli.command('init-db')
    def init_db_command():
        """명함 테이블 생성"""
        create_tables(app)

    @app.cli.command('cleanup-cards')
    def cleanup_cards_command():
        """보관 기간이 지난 명함 삭제"""
        deleted_count = cleanup_expired_cards()
        click.echo(f'정리 완료: {deleted_count}개 삭제됨')


if __name__ == '__main__':
    # 키오스크 기기에서 접근 가능하도록 0.0.0.0으로 바인딩
    create_app().run(host='0.0.0.0', port=5002)
