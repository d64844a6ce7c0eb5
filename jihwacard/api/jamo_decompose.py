# -*- coding: utf-8 -*-
"""
한글 자모 분해 API
- 한글 음절을 초성/중성/종성으로 분해
- 지화로 눌러야 할 자모 순서 제공
"""

from flask import Blueprint, jsonify, request

from jihwacard.api.finger_letters import (
    CHOSEONG_LIST,
    COMPOUND_JONGSEONG,
    JONGSEONG_LIST,
    JUNGSEONG_LIST,
    N_JONGSEONG,
    N_JUNGSEONG,
    SBASE,
    SLAST,
    find_letter,
)

jamo_decompose_bp = Blueprint('jamo_decompose', __name__)


def is_hangul(char):
    """완성형 한글 음절인지 확인"""
    return SBASE <= ord(char) <= SLAST


def is_jamo(char):
    """자음/모음인지 확인"""
    if not char:
        return False
    return char in CHOSEONG_LIST or char in JUNGSEONG_LIST or char in JONGSEONG_LIST


def decompose_hangul(char):
    """
    한글 음절을 초성/중성/종성으로 분해

    Args:
        char: 한글 음절 (예: '안')

    Returns:
        dict: {'chosung': 'ㅇ', 'jungsung': 'ㅏ', 'jongsung': 'ㄴ'}
        한글 음절이 아니면 None
    """
    if not is_hangul(char):
        return None

    code = ord(char) - SBASE

    jongsung_index = code % N_JONGSEONG
    jungsung_index = (code // N_JONGSEONG) % N_JUNGSEONG
    chosung_index = code // N_JONGSEONG // N_JUNGSEONG

    return {
        'chosung': CHOSEONG_LIST[chosung_index],
        'jungsung': JUNGSEONG_LIST[jungsung_index],
        'jongsung': JONGSEONG_LIST[jongsung_index]
    }


def decompose_to_jamo_list(char):
    """
    글자 하나를 자모 리스트로 분해

    한글 음절이 아니면 그대로 한 칸짜리 리스트로 돌려준다.

    Args:
        char: 글자 (예: '안', 'A')

    Returns:
        list: ['ㅇ', 'ㅏ', 'ㄴ'] 또는 ['A']
    """
    decomposed = decompose_hangul(char)
    if decomposed is None:
        return [char]

    jamo_list = [decomposed['chosung'], decomposed['jungsung']]
    if decomposed['jongsung']:  # 종성이 있는 경우만
        jamo_list.append(decomposed['jongsung'])
    return jamo_list


def decompose_string(text):
    """
    문자열 전체를 자모로 분해

    Args:
        text: 문자열 (예: '한글')

    Returns:
        list: ['ㅎ', 'ㅏ', 'ㄴ', 'ㄱ', 'ㅡ', 'ㄹ']
    """
    result = []
    for char in text:
        result.extend(decompose_to_jamo_list(char))
    return result


def name_to_finger_letters(name):
    """이름을 분해해서 지화 타일이 있는 글자만 FingerLetter로 반환"""
    letters = []
    for jamo in decompose_string(name):
        letter = find_letter(jamo)
        if letter is not None:
            letters.append(letter)
    return letters


def char_detail(char):
    """글자 하나의 분해 정보 (음절이면 초성/중성/종성까지)"""
    if is_hangul(char):
        return {
            'char': char,
            'jamo': decompose_to_jamo_list(char),
            'decomposed': decompose_hangul(char),
            'is_hangul': True
        }
    kind = 'is_jamo' if is_jamo(char) else 'is_other'
    return {'char': char, 'jamo': [char], kind: True}


def decomposition_payload(text):
    jamo_list = decompose_string(text)
    return {
        'success': True,
        'original': text,
        'jamo_list': jamo_list,
        'jamo_count': len(jamo_list),
        'char_count': len(text),
        'fingerspellable': all(find_letter(jamo) is not None for jamo in jamo_list)
    }


# ==== API 엔드포인트 ====

@jamo_decompose_bp.route('/api/jamo/decompose', methods=['POST'])
def decompose_text():
    """
    문자열을 자모로 분해

    Request:
        {
            "text": "한글"
        }

    Response:
        {
            "original": "한글",
            "jamo_list": ["ㅎ", "ㅏ", "ㄴ", "ㄱ", "ㅡ", "ㄹ"],
            "jamo_count": 6,
            "char_details": [
                {
                    "char": "한",
                    "jamo": ["ㅎ", "ㅏ", "ㄴ"],
                    "decomposed": {"chosung": "ㅎ", "jungsung": "ㅏ", "jongsung": "ㄴ"},
                    "is_hangul": true
                },
                ...
            ],
            "fingerspellable": true
        }
    """
    try:
        data = request.get_json(silent=True)

        if not data or 'text' not in data:
            return jsonify({'error': 'text 필드가 필요합니다.'}), 400

        text = data['text']

        if not isinstance(text, str):
            return jsonify({'error': 'text는 문자열이어야 합니다.'}), 400

        payload = decomposition_payload(text)
        payload['char_details'] = [char_detail(char) for char in text]
        return jsonify(payload), 200

    except Exception as e:
        return jsonify({'error': str(e)}), 500


@jamo_decompose_bp.route('/api/jamo/decompose/<text>', methods=['GET'])
def decompose_text_get(text):
    """
    GET 방식 자모 분해

    Example:
        GET /api/jamo/decompose/한글
    """
    return jsonify(decomposition_payload(text)), 200


@jamo_decompose_bp.route('/api/jamo/validate', methods=['POST'])
def validate_jamo():
    """
    자모가 올바른지 검증

    Request:
        {"jamo": "ㄳ"}

    Response:
        {
            "jamo": "ㄳ",
            "is_valid": true,
            "type": "jongsung",
            "is_complex": true,
            "has_finger_letter": false
        }
    """
    data = request.get_json(silent=True)

    if not data or 'jamo' not in data:
        return jsonify({'error': 'jamo 필드가 필요합니다.'}), 400

    jamo = data['jamo']

    if not isinstance(jamo, str) or len(jamo) != 1:
        return jsonify({'error': '단일 자모만 검증 가능합니다.'}), 400

    jamo_type = None
    if jamo in CHOSEONG_LIST:
        jamo_type = 'chosung'
    elif jamo in JUNGSEONG_LIST:
        jamo_type = 'jungsung'
    elif jamo in JONGSEONG_LIST:
        jamo_type = 'jongsung'

    return jsonify({
        'success': True,
        'jamo': jamo,
        'is_valid': jamo_type is not None,
        'type': jamo_type,
        'is_complex': jamo in COMPOUND_JONGSEONG,
        'has_finger_letter': find_letter(jamo) is not None
    }), 200


@jamo_decompose_bp.route('/api/jamo/info', methods=['GET'])
def get_jamo_info():
    """자모 테이블 정보"""
    jongsung_list = [j for j in JONGSEONG_LIST if j]  # 종성 없음 제외

    return jsonify({
        'success': True,
        'chosung_list': CHOSEONG_LIST,
        'chosung_count': len(CHOSEONG_LIST),
        'jungsung_list': JUNGSEONG_LIST,
        'jungsung_count': len(JUNGSEONG_LIST),
        'jongsung_list': jongsung_list,
        'jongsung_count': len(jongsung_list),
        'complex_jongsung': COMPOUND_JONGSEONG
    }), 200
