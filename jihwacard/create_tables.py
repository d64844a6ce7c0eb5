"""명함 저장소 데이터베이스 테이블 생성"""
from jihwacard.models import db


def create_tables(app):
    with app.app_context():
        print("\n" + "=" * 60)
        print("지화 명함 데이터베이스 초기화")
        print("=" * 60)

        print("\n📋 생성될 테이블:")
        print("   - cards (공유된 명함 문서)")

        print("\n🔨 테이블 생성 중...")
        db.create_all()

        print("\n✅ 테이블 생성 완료!")
        print(f"   - DB: {app.config['SQLALCHEMY_DATABASE_URI']}")
        print(f"   - 보관 기간: {app.config.get('CARD_RETENTION_DAYS', 7)}일")
        print("=" * 60 + "\n")


if __name__ == '__main__':
    from jihwacard.app import create_app

    create_tables(create_app())
