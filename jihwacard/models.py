# 명함 저장소 모델
from flask_sqlalchemy import SQLAlchemy
from datetime import datetime
import json

db = SQLAlchemy()


class Card(db.Model):
    """공유된 명함 문서 (id -> JSON 문서)"""
    __tablename__ = 'cards'

    id = db.Column(db.String(64), primary_key=True)
    document = db.Column(db.Text, nullable=False)  # JSON string
    uploaded_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f'<Card {self.id}>'

    def get_document(self):
        return json.loads(self.document) if self.document else {}

    def set_document(self, document):
        self.document = json.dumps(document, ensure_ascii=False)

    def to_dict(self):
        return {
            'id': self.id,
            'document': self.get_document(),
            'uploaded_at': self.uploaded_at.isoformat() if self.uploaded_at else None
        }
