# 명함 저장/조회/공유 API
import base64
import hmac
import io
import re
import time
from datetime import datetime, timedelta

import qrcode
from flask import Blueprint, current_app, jsonify, request, send_file

from jihwacard.api.finger_letters import find_letter, letter_from_payload, letter_to_dict
from jihwacard.api.jamo_compose import char_of, combine_jamos, group_jamos_by_character, is_letter_payload
from jihwacard.models import db, Card

cards_bp = Blueprint('cards', __name__)

# 명함 디자인 (스타일은 클라이언트가 그림)
CARD_DESIGNS = [
    {'id': 'minimal', 'name': '미니멀'},
    {'id': 'glassmorphism', 'name': '글래스'},
    {'id': 'luxury', 'name': '럭셔리'},
    {'id': 'neon', 'name': '네온'},
    {'id': 'gradient', 'name': '그라디언트'},
    {'id': 'paper', 'name': '페이퍼'},
    {'id': 'corporate', 'name': '기업형'},
    {'id': 'tech', 'name': '테크'},
    {'id': 'nature', 'name': '내츄럴'},
]
_DESIGNS_BY_ID = {design['id']: design for design in CARD_DESIGNS}

LAYOUT_DIRECTIONS = ('horizontal', 'vertical')
DEFAULT_SIGN_SIZE = 12
MIN_SIGN_SIZE = 6
MAX_SIGN_SIZE = 24

CARD_ID_PATTERN = re.compile(r'^[A-Za-z0-9_-]{1,64}$')
PHONE_PATTERN = re.compile(r'^[0-9-]*$')

_BASE36 = '0123456789abcdefghijklmnopqrstuvwxyz'


class CardValidationError(ValueError):
    """명함 데이터가 올바르지 않을 때"""


def to_base36(number):
    if number < 0:
        raise ValueError('음수는 변환할 수 없습니다.')
    if number == 0:
        return '0'
    digits = []
    while number:
        number, remainder = divmod(number, 36)
        digits.append(_BASE36[remainder])
    return ''.join(reversed(digits))


def generate_card_id(timestamp_ms=None):
    """밀리초 타임스탬프를 36진수로 바꾼 짧은 ID"""
    if timestamp_ms is None:
        timestamp_ms = int(time.time() * 1000)
    return to_base36(timestamp_ms)


def format_phone(phone):
    """'01012345678' -> '010-1234-5678', 입력 중이면 남은 자리를 '_'로 채운다"""
    digits = (phone or '').replace('-', '')
    if not digits:
        return '010-____-____'
    if len(digits) > 11:
        return f'{digits[:3]}-{digits[3:7]}-{digits[7:]}'

    filled = iter(digits)
    return ''.join(next(filled, '_') if slot == '_' else slot for slot in '___-____-____')


def normalize_letters(items):
    """클라이언트가 보낸 타일 목록을 FingerLetter 리스트로 변환"""
    if not isinstance(items, list) or not items:
        raise CardValidationError('letters는 비어 있지 않은 배열이어야 합니다.')

    letters = []
    for item in items:
        letter = letter_from_payload(item)
        if letter is None:
            raise CardValidationError(f'지화 타일이 없는 글자입니다: {item!r}')
        letters.append(letter)
    return letters


def normalize_phone(phone_number, max_digits):
    if phone_number is None:
        return ''
    if not isinstance(phone_number, str) or not PHONE_PATTERN.match(phone_number):
        raise CardValidationError('연락처는 숫자와 - 만 입력할 수 있습니다.')
    if len(phone_number.replace('-', '')) > max_digits:
        raise CardValidationError(f'연락처는 {max_digits}자리 이하로 입력해주세요.')
    return phone_number


def normalize_design(design):
    if design is None:
        return dict(CARD_DESIGNS[0])
    design_id = design.get('id') if isinstance(design, dict) else design
    if not isinstance(design_id, str) or design_id not in _DESIGNS_BY_ID:
        raise CardValidationError(f'알 수 없는 디자인입니다: {design_id!r}')
    return dict(_DESIGNS_BY_ID[design_id])


def build_card_document(letters, user_name=None, phone_number=None, design=None,
                        layout_direction='horizontal', sign_size=DEFAULT_SIGN_SIZE,
                        timestamp=None, max_phone_digits=11):
    """
    명함 문서 생성

    Args:
        letters: 지화 타일 목록 (문자열 또는 {'char', 'imagePath'})
        user_name: 표시 이름, 없으면 타일을 조합해서 만든다

    Returns:
        dict: {letters, userName, phoneNumber, design, layoutDirection, signSize, timestamp}
    """
    finger_letters = normalize_letters(letters)

    if layout_direction not in LAYOUT_DIRECTIONS:
        raise CardValidationError('layoutDirection은 horizontal 또는 vertical이어야 합니다.')

    if isinstance(sign_size, bool) or not isinstance(sign_size, int) \
            or not MIN_SIGN_SIZE <= sign_size <= MAX_SIGN_SIZE:
        raise CardValidationError(f'signSize는 {MIN_SIGN_SIZE}~{MAX_SIGN_SIZE} 사이의 정수여야 합니다.')

    if user_name is None:
        user_name = combine_jamos(finger_letters)
    elif not isinstance(user_name, str):
        raise CardValidationError('userName은 문자열이어야 합니다.')

    return {
        'letters': [letter_to_dict(letter) for letter in finger_letters],
        'userName': user_name,
        'phoneNumber': normalize_phone(phone_number, max_phone_digits),
        'design': normalize_design(design),
        'layoutDirection': layout_direction,
        'signSize': sign_size,
        'timestamp': timestamp if timestamp is not None else int(time.time() * 1000)
    }


# ==== 저장소 ====

def save_card(card_id, document):
    """명함 문서 저장 (같은 ID면 덮어쓰기). 성공 여부를 반환"""
    try:
        card = Card.query.filter_by(id=card_id).first()
        if card is None:
            card = Card(id=card_id)
            db.session.add(card)
        card.set_document(document)
        card.uploaded_at = datetime.utcnow()
        db.session.commit()
        current_app.logger.info('명함 저장: %s', card_id)
        return True
    except Exception:
        db.session.rollback()
        current_app.logger.exception('명함 저장 실패: %s', card_id)
        return False


def load_card(card_id):
    """명함 문서 조회, 없으면 None"""
    card = Card.query.filter_by(id=card_id).first()
    if card is None:
        return None
    current_app.logger.info('명함 조회: %s', card_id)
    return card.get_document()


def create_card(document):
    """새 ID를 발급해서 저장. 실패하면 None"""
    timestamp = document.get('timestamp') or int(time.time() * 1000)
    card_id = generate_card_id(timestamp)
    # 같은 밀리초에 만들어진 명함과 겹치지 않게
    while Card.query.filter_by(id=card_id).first() is not None:
        timestamp += 1
        card_id = generate_card_id(timestamp)
    if not save_card(card_id, document):
        return None
    return card_id


def cleanup_expired_cards(now=None):
    """보관 기간이 지난 명함 삭제, 삭제한 개수를 반환"""
    if now is None:
        now = datetime.utcnow()
    retention_days = current_app.config.get('CARD_RETENTION_DAYS', 7)
    cutoff = now - timedelta(days=retention_days)

    expired = Card.query.filter(Card.uploaded_at < cutoff).all()
    for card in expired:
        current_app.logger.info('삭제된 명함: %s (저장일: %s)', card.id, card.uploaded_at.isoformat())
        db.session.delete(card)
    db.session.commit()

    current_app.logger.info('정리 완료: %d개 삭제됨 (기준: %s)', len(expired), cutoff.isoformat())
    return len(expired)


# ==== 공유 ====

def share_url(card_id):
    base_url = current_app.config.get('PUBLIC_BASE_URL') or request.host_url
    return f"{base_url.rstrip('/')}/card/shared?id={card_id}"


def generate_qr_png(data):
    """QR 코드 PNG 바이트 생성"""
    qr = qrcode.QRCode(
        version=1,
        error_correction=qrcode.constants.ERROR_CORRECT_L,
        box_size=10,
        border=2
    )
    qr.add_data(data)
    qr.make(fit=True)

    qr_image = qr.make_image(fill_color="black", back_color="white")
    img_buffer = io.BytesIO()
    qr_image.save(img_buffer, format='PNG')
    return img_buffer.getvalue()


def card_layout(document):
    """명함 문서의 타일을 글자 단위로 묶어 레이아웃 정보 생성"""
    letters = document.get('letters')
    if not isinstance(letters, list):
        letters = []
    letters = [item for item in letters if is_letter_payload(item)]
    groups = []
    for group in group_jamos_by_character(letters):
        tiles = []
        for item in group:
            char = char_of(item)
            image_path = item.get('imagePath') if isinstance(item, dict) else None
            if image_path is None:
                letter = find_letter(char)
                image_path = letter.image_path if letter else None
            tiles.append({'char': char, 'imagePath': image_path})
        groups.append(tiles)

    sign_size = document.get('signSize', DEFAULT_SIGN_SIZE)
    if isinstance(sign_size, bool) or not isinstance(sign_size, int):
        sign_size = DEFAULT_SIGN_SIZE
    return {
        'userName': document.get('userName', ''),
        'layoutDirection': document.get('layoutDirection', 'horizontal'),
        'signSize': sign_size,
        'tileSize': sign_size * 4,
        'groups': groups,
        'phoneNumber': format_phone(str(document.get('phoneNumber') or ''))
    }


def _invalid_card_id(card_id):
    return not CARD_ID_PATTERN.match(card_id)


# ==== API 엔드포인트 ====

@cards_bp.route('/api/designs', methods=['GET'])
def list_designs():
    """선택 가능한 명함 디자인"""
    return jsonify({'success': True, 'designs': CARD_DESIGNS}), 200


@cards_bp.route('/api/card', methods=['POST'])
def create_card_api():
    """
    타일 목록으로 명함을 만들고 짧은 ID로 저장

    Request:
        {
            "letters": ["ㅎ", "ㅏ", "ㄴ", "ㄱ", "ㅡ", "ㄹ"],
            "phoneNumber": "01012345678",
            "design": "minimal",
            "layoutDirection": "horizontal",
            "signSize": 12
        }

    Response:
        {"success": true, "id": "lx3k2a1b", "url": ".../card/shared?id=lx3k2a1b", "card": {...}}
    """
    try:
        data = request.get_json(silent=True)

        if not data or 'letters' not in data:
            return jsonify({'error': 'letters 필드가 필요합니다.'}), 400

        try:
            document = build_card_document(
                data['letters'],
                user_name=data.get('userName'),
                phone_number=data.get('phoneNumber'),
                design=data.get('design'),
                layout_direction=data.get('layoutDirection', 'horizontal'),
                sign_size=data.get('signSize', DEFAULT_SIGN_SIZE),
                max_phone_digits=current_app.config.get('MAX_PHONE_DIGITS', 11)
            )
        except CardValidationError as e:
            return jsonify({'error': str(e)}), 400

        card_id = create_card(document)
        if card_id is None:
            return jsonify({'error': '카드 저장에 실패했습니다.'}), 500

        return jsonify({
            'success': True,
            'id': card_id,
            'url': share_url(card_id),
            'card': document
        }), 201

    except Exception as e:
        db.session.rollback()
        current_app.logger.exception('명함 생성 실패')
        return jsonify({'error': str(e)}), 500


@cards_bp.route('/api/card/<card_id>', methods=['POST'])
def save_card_api(card_id):
    """명함 문서를 주어진 ID로 그대로 저장"""
    if _invalid_card_id(card_id):
        return jsonify({'error': '유효하지 않은 카드 ID입니다.'}), 400

    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({'error': '명함 데이터는 JSON 객체여야 합니다.'}), 400

    if not save_card(card_id, data):
        return jsonify({'error': '카드 저장에 실패했습니다.'}), 500

    return jsonify({'success': True, 'id': card_id, 'url': share_url(card_id)}), 200


@cards_bp.route('/api/card/<card_id>', methods=['GET'])
def load_card_api(card_id):
    """명함 문서 조회"""
    if _invalid_card_id(card_id):
        return jsonify({'error': '카드를 찾을 수 없습니다.'}), 404

    document = load_card(card_id)
    if document is None:
        return jsonify({'error': '카드를 찾을 수 없습니다.'}), 404
    return jsonify(document), 200


@cards_bp.route('/api/card/<card_id>/layout', methods=['GET'])
def card_layout_api(card_id):
    """명함 렌더링용 글자 묶음"""
    document = None if _invalid_card_id(card_id) else load_card(card_id)
    if document is None:
        return jsonify({'error': '카드를 찾을 수 없습니다.'}), 404

    return jsonify({'success': True, 'id': card_id, 'layout': card_layout(document)}), 200


@cards_bp.route('/api/card/<card_id>/qr', methods=['GET'])
def card_qr_api(card_id):
    """
    공유 링크 QR 코드

    Query:
        format=png (기본) 또는 base64 (data URL을 JSON으로)
    """
    if _invalid_card_id(card_id) or load_card(card_id) is None:
        return jsonify({'error': '카드를 찾을 수 없습니다.'}), 404

    url = share_url(card_id)
    png = generate_qr_png(url)

    if request.args.get('format', 'png') == 'base64':
        encoded = base64.b64encode(png).decode()
        return jsonify({
            'success': True,
            'url': url,
            'qr_code': f'data:image/png;base64,{encoded}'
        }), 200

    return send_file(
        io.BytesIO(png),
        mimetype='image/png',
        download_name=f'qr_{card_id}.png'
    )


@cards_bp.route('/api/cleanup', methods=['POST'])
def cleanup_cards_api():
    """보관 기간이 지난 명함 정리 (cron에서 호출)"""
    secret = current_app.config.get('CRON_SECRET')
    auth_header = request.headers.get('Authorization', '')
    if not secret or not hmac.compare_digest(auth_header.encode(), f'Bearer {secret}'.encode()):
        return jsonify({'error': 'Unauthorized'}), 401

    try:
        deleted_count = cleanup_expired_cards()
        return jsonify({
            'message': f'정리 완료: {deleted_count}개 파일 삭제됨',
            'deletedCount': deleted_count
        }), 200
    except Exception:
        db.session.rollback()
        current_app.logger.exception('정리 실패')
        return jsonify({'error': '정리 실패'}), 500
