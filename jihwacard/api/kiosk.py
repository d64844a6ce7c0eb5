# 키오스크 지화 입력 세션 API
from flask import Blueprint, current_app, jsonify, request, session

from jihwacard.api.cards import (
    DEFAULT_SIGN_SIZE,
    CardValidationError,
    build_card_document,
    create_card,
    share_url,
)
from jihwacard.api.finger_letters import find_letter, letter_from_payload, letter_to_dict
from jihwacard.api.jamo_compose import combine_jamos, group_jamos_by_character
from jihwacard.api.jamo_decompose import decompose_string, name_to_finger_letters
from jihwacard.models import db

kiosk_bp = Blueprint('kiosk', __name__)

# 세션 키
LETTERS_KEY = 'kiosk_letters'
TARGET_KEY = 'kiosk_target'
NAME_KEY = 'kiosk_name'


class JamoSequence:
    """사용자가 누른 지화 타일 순서 (뒤에 추가, 뒤에서 지우기, 전체 지우기만 가능)"""

    def __init__(self, letters=None):
        self._letters = list(letters or [])

    def __len__(self):
        return len(self._letters)

    def __iter__(self):
        return iter(self._letters)

    @property
    def letters(self):
        return list(self._letters)

    def append(self, letter):
        self._letters.append(letter)

    def pop(self):
        """마지막 타일을 지우고 돌려준다. 비어 있으면 None"""
        if not self._letters:
            return None
        return self._letters.pop()

    def clear(self):
        self._letters = []

    def chars(self):
        return [letter.char for letter in self._letters]

    def compose(self):
        return combine_jamos(self._letters)

    def groups(self):
        return group_jamos_by_character(self._letters)

    def to_session(self):
        return self.chars()

    @classmethod
    def from_session(cls, chars):
        letters = [find_letter(char) for char in chars or []]
        return cls(letter for letter in letters if letter is not None)


def _load_sequence():
    return JamoSequence.from_session(session.get(LETTERS_KEY))


def _store_sequence(sequence):
    session[LETTERS_KEY] = sequence.to_session()


def _next_expected(sequence, target):
    if target is None or len(sequence) >= len(target):
        return None
    return target[len(sequence)]


def _is_complete(sequence, target):
    if target is None:
        return len(sequence) > 0
    return len(sequence) == len(target)


def kiosk_state(sequence, target, name):
    """화면에 필요한 현재 입력 상태"""
    next_char = _next_expected(sequence, target)
    next_letter = find_letter(next_char) if next_char else None

    return {
        'mode': 'free' if target is None else 'guided',
        'name': name,
        'letters': [letter_to_dict(letter) for letter in sequence],
        'composed': sequence.compose(),
        'groups': [[letter_to_dict(letter) for letter in group] for group in sequence.groups()],
        'target': target,
        'next_expected': next_char,
        'next_expected_type': next_letter.type if next_letter else None,
        'progress': {
            'current': len(sequence),
            'total': len(target) if target is not None else None
        },
        'is_complete': _is_complete(sequence, target)
    }


def _state_response(sequence, status=200, **extra):
    payload = {'success': True}
    payload.update(extra)
    payload['state'] = kiosk_state(sequence, session.get(TARGET_KEY), session.get(NAME_KEY))
    return jsonify(payload), status


# ==== API 엔드포인트 ====

@kiosk_bp.route('/api/kiosk/state', methods=['GET'])
def get_state():
    """현재 입력 상태 조회"""
    return _state_response(_load_sequence())


@kiosk_bp.route('/api/kiosk/name', methods=['POST'])
def set_name():
    """
    이름 입력 -> 눌러야 할 지화 순서 설정

    Request:
        {"name": "한글"}

    Response:
        {"success": true, "state": {"target": ["ㅎ", "ㅏ", "ㄴ", "ㄱ", "ㅡ", "ㄹ"], "next_expected": "ㅎ", ...}}
    """
    data = request.get_json(silent=True)

    if not data or not isinstance(data.get('name'), str):
        return jsonify({'error': '이름을 입력해주세요.'}), 400

    name = data['name'].strip()
    max_length = current_app.config.get('MAX_NAME_LENGTH', 4)

    if not name:
        return jsonify({'error': '이름을 입력해주세요.'}), 400

    if len(name) > max_length:
        return jsonify({'error': f'이름은 최대 {max_length}글자까지 입력 가능합니다.'}), 400

    unsupported = [jamo for jamo in decompose_string(name) if find_letter(jamo) is None]
    if unsupported:
        return jsonify({
            'error': '지화로 표현할 수 없는 글자가 포함되어 있습니다.',
            'unsupported': unsupported
        }), 400

    target = [letter.char for letter in name_to_finger_letters(name)]
    session[NAME_KEY] = name
    session[TARGET_KEY] = target
    sequence = JamoSequence()
    _store_sequence(sequence)

    current_app.logger.info('지화 입력 시작: %s -> %s', name, ''.join(target))
    return _state_response(sequence)


@kiosk_bp.route('/api/kiosk/tap', methods=['POST'])
def tap_letter():
    """
    지화 타일 누르기

    이름이 설정되어 있으면 다음 차례의 타일만 받는다.
    """
    data = request.get_json(silent=True)

    if not data or 'char' not in data:
        return jsonify({'error': 'char 필드가 필요합니다.'}), 400

    letter = letter_from_payload(data['char'])
    if letter is None:
        return jsonify({'error': '지화 타일이 없는 글자입니다.'}), 400

    sequence = _load_sequence()
    target = session.get(TARGET_KEY)

    if target is not None:
        expected = _next_expected(sequence, target)
        if expected is None:
            return jsonify({'error': '이미 모든 지화를 선택했습니다.'}), 409
        if letter.char != expected:
            return jsonify({
                'error': '순서에 맞지 않는 지화입니다.',
                'expected': expected,
                'received': letter.char
            }), 409

    sequence.append(letter)
    _store_sequence(sequence)
    return _state_response(sequence, added=letter_to_dict(letter))


@kiosk_bp.route('/api/kiosk/backspace', methods=['POST'])
def backspace():
    """마지막 타일 지우기"""
    sequence = _load_sequence()
    removed = sequence.pop()
    _store_sequence(sequence)
    return _state_response(sequence, removed=letter_to_dict(removed) if removed else None)


@kiosk_bp.route('/api/kiosk/clear', methods=['POST'])
def clear_letters():
    """누른 타일 전체 지우기 (이름은 유지)"""
    sequence = _load_sequence()
    sequence.clear()
    _store_sequence(sequence)
    return _state_response(sequence)


@kiosk_bp.route('/api/kiosk/reset', methods=['POST'])
def reset_session():
    """이름과 타일을 모두 지우고 처음 상태로"""
    for key in (LETTERS_KEY, TARGET_KEY, NAME_KEY):
        session.pop(key, None)
    return _state_response(JamoSequence())


@kiosk_bp.route('/api/kiosk/complete', methods=['POST'])
def complete_card():
    """
    입력한 지화로 명함을 만들어 저장

    Request:
        {
            "phoneNumber": "01012345678",
            "design": "minimal",
            "layoutDirection": "horizontal",
            "signSize": 12
        }
    """
    data = request.get_json(silent=True) or {}
    sequence = _load_sequence()
    target = session.get(TARGET_KEY)

    if not len(sequence):
        return jsonify({'error': '선택한 지화가 없습니다.'}), 400

    if not _is_complete(sequence, target):
        return jsonify({
            'error': '아직 모든 지화를 선택하지 않았습니다.',
            'progress': {'current': len(sequence), 'total': len(target)}
        }), 400

    try:
        document = build_card_document(
            sequence.letters,
            phone_number=data.get('phoneNumber'),
            design=data.get('design'),
            layout_direction=data.get('layoutDirection', 'horizontal'),
            sign_size=data.get('signSize', DEFAULT_SIGN_SIZE),
            max_phone_digits=current_app.config.get('MAX_PHONE_DIGITS', 11)
        )
    except CardValidationError as e:
        return jsonify({'error': str(e)}), 400

    try:
        card_id = create_card(document)
    except Exception as e:
        db.session.rollback()
        current_app.logger.exception('키오스크 명함 저장 실패')
        return jsonify({'error': str(e)}), 500

    if card_id is None:
        return jsonify({'error': '명함 저장에 실패했습니다.'}), 500

    return jsonify({
        'success': True,
        'id': card_id,
        'url': share_url(card_id),
        'card': document
    }), 201
