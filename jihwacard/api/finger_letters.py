# -*- coding: utf-8 -*-
"""
지화(手指文字) 글자 카탈로그
- 자음 19개, 모음 21개의 지화 이미지 정보
- 유니코드 한글 음절 조합에 쓰이는 초성/중성/종성 테이블
"""

from collections import namedtuple

from flask import Blueprint, jsonify, request

finger_letters_bp = Blueprint('finger_letters', __name__)

# ==== 유니코드 한글 자모 테이블 ====
# 한글 음절 = 0xAC00 + (초성 × 21 + 중성) × 28 + 종성

SBASE = 0xAC00  # '가'
SLAST = 0xD7A3  # '힣'
N_JUNGSEONG = 21
N_JONGSEONG = 28  # 종성 없음 포함

CHOSEONG_LIST = [
    'ㄱ', 'ㄲ', 'ㄴ', 'ㄷ', 'ㄸ', 'ㄹ', 'ㅁ', 'ㅂ', 'ㅃ', 'ㅅ',
    'ㅆ', 'ㅇ', 'ㅈ', 'ㅉ', 'ㅊ', 'ㅋ', 'ㅌ', 'ㅍ', 'ㅎ'
]

JUNGSEONG_LIST = [
    'ㅏ', 'ㅐ', 'ㅑ', 'ㅒ', 'ㅓ', 'ㅔ', 'ㅕ', 'ㅖ', 'ㅗ', 'ㅘ',
    'ㅙ', 'ㅚ', 'ㅛ', 'ㅜ', 'ㅝ', 'ㅞ', 'ㅟ', 'ㅠ', 'ㅡ', 'ㅢ', 'ㅣ'
]

# 0번은 '종성 없음'
JONGSEONG_LIST = [
    '', 'ㄱ', 'ㄲ', 'ㄳ', 'ㄴ', 'ㄵ', 'ㄶ', 'ㄷ', 'ㄹ', 'ㄺ',
    'ㄻ', 'ㄼ', 'ㄽ', 'ㄾ', 'ㄿ', 'ㅀ', 'ㅁ', 'ㅂ', 'ㅄ', 'ㅅ',
    'ㅆ', 'ㅇ', 'ㅈ', 'ㅊ', 'ㅋ', 'ㅌ', 'ㅍ', 'ㅎ'
]

# 겹받침은 지화 타일로 존재하지 않음 (완성형 분해에서만 등장)
COMPOUND_JONGSEONG = ['ㄳ', 'ㄵ', 'ㄶ', 'ㄺ', 'ㄻ', 'ㄼ', 'ㄽ', 'ㄾ', 'ㄿ', 'ㅀ', 'ㅄ']


# ==== 지화 카탈로그 ====

FingerLetter = namedtuple('FingerLetter', ['char', 'type', 'image_path', 'display_order'])

# 키보드 배열 순서 (조합 순서와 무관)
_CONSONANT_ORDER = [
    'ㄱ', 'ㄴ', 'ㄷ', 'ㄹ', 'ㅁ', 'ㅂ', 'ㅅ', 'ㅇ', 'ㅈ', 'ㅊ',
    'ㅋ', 'ㅌ', 'ㅍ', 'ㅎ', 'ㄲ', 'ㄸ', 'ㅃ', 'ㅆ', 'ㅉ'
]
_VOWEL_ORDER = [
    'ㅏ', 'ㅑ', 'ㅓ', 'ㅕ', 'ㅗ', 'ㅛ', 'ㅜ', 'ㅠ', 'ㅡ', 'ㅣ',
    'ㅐ', 'ㅒ', 'ㅔ', 'ㅖ', 'ㅘ', 'ㅙ', 'ㅚ', 'ㅝ', 'ㅞ', 'ㅟ', 'ㅢ'
]

CONSONANTS = tuple(
    FingerLetter(char, 'consonant', f'/consonants/{char}.png', order)
    for order, char in enumerate(_CONSONANT_ORDER, start=1)
)

VOWELS = tuple(
    FingerLetter(char, 'vowel', f'/vowels/{char}.png', order)
    for order, char in enumerate(_VOWEL_ORDER, start=1)
)

ALL_FINGER_LETTERS = CONSONANTS + VOWELS

_LETTERS_BY_CHAR = {letter.char: letter for letter in ALL_FINGER_LETTERS}


def find_letter(char):
    """지화 타일이 있는 글자면 FingerLetter, 아니면 None"""
    return _LETTERS_BY_CHAR.get(char)


def letter_to_dict(letter):
    """명함 문서에 저장되는 형식 {'char', 'imagePath'}"""
    return {'char': letter.char, 'imagePath': letter.image_path}


def letter_from_payload(item):
    """
    클라이언트가 보낸 글자 하나를 카탈로그의 FingerLetter로 변환

    Args:
        item: 'ㄱ' 같은 문자열, {'char': 'ㄱ', 'imagePath': ...} 또는 FingerLetter

    Returns:
        FingerLetter 또는 None (타일이 없는 글자)
    """
    if isinstance(item, FingerLetter):
        item = item.char
    elif isinstance(item, dict):
        item = item.get('char')
    if not isinstance(item, str):
        return None
    return find_letter(item)


def get_finger_letter_paths(jamos):
    """자모 리스트를 지화 이미지 경로 리스트로 변환 (타일이 없으면 None)"""
    paths = []
    for jamo in jamos:
        letter = find_letter(jamo)
        paths.append(letter.image_path if letter else None)
    return paths


# ==== API 엔드포인트 ====

def _letter_json(letter):
    return {
        'char': letter.char,
        'type': letter.type,
        'imagePath': letter.image_path,
        'displayOrder': letter.display_order
    }


@finger_letters_bp.route('/api/letters', methods=['GET'])
def list_letters():
    """지화 자음/모음 전체 목록"""
    return jsonify({
        'success': True,
        'consonants': [_letter_json(letter) for letter in CONSONANTS],
        'vowels': [_letter_json(letter) for letter in VOWELS],
        'consonant_count': len(CONSONANTS),
        'vowel_count': len(VOWELS)
    }), 200


@finger_letters_bp.route('/api/letters/<char>', methods=['GET'])
def get_letter(char):
    """글자 하나의 지화 정보"""
    letter = find_letter(char)
    if letter is None:
        return jsonify({'error': '지화 타일이 없는 글자입니다.', 'char': char}), 404
    return jsonify({'success': True, 'letter': _letter_json(letter)}), 200


@finger_letters_bp.route('/api/letters/paths', methods=['POST'])
def letter_paths():
    """
    자모 리스트를 지화 이미지 경로로 변환

    Request:
        {"jamo_list": ["ㅎ", "ㅏ", "ㄴ", "A"]}

    Response:
        {"paths": ["/consonants/ㅎ.png", "/vowels/ㅏ.png", "/consonants/ㄴ.png", null]}
    """
    data = request.get_json(silent=True)

    if not data or 'jamo_list' not in data:
        return jsonify({'error': 'jamo_list 필드가 필요합니다.'}), 400

    jamo_list = data['jamo_list']
    if not isinstance(jamo_list, list) or not all(isinstance(j, str) for j in jamo_list):
        return jsonify({'error': 'jamo_list는 문자열 배열이어야 합니다.'}), 400

    return jsonify({
        'success': True,
        'jamo_list': jamo_list,
        'paths': get_finger_letter_paths(jamo_list)
    }), 200
