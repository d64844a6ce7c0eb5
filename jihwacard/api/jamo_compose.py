# -*- coding: utf-8 -*-
"""
한글 자모 조합 (Jamo Composition)
- 지화 타일 순서를 한글 문자열로 조합
- 예: ['ㄱ', 'ㅏ', 'ㄴ', 'ㅣ'] -> "가니"
- 명함 레이아웃용으로 타일을 글자 단위로 묶기
"""

from flask import Blueprint, jsonify, request

from jihwacard.api.finger_letters import (
    CHOSEONG_LIST,
    JONGSEONG_LIST,
    JUNGSEONG_LIST,
    N_JONGSEONG,
    N_JUNGSEONG,
    SBASE,
)

jamo_compose_bp = Blueprint('jamo_compose', __name__)


def char_of(letter):
    """문자열, FingerLetter, {'char': ...} 어느 쪽이든 글자를 꺼낸다"""
    if isinstance(letter, str):
        return letter
    if isinstance(letter, dict):
        return letter.get('char', '')
    return letter.char


def is_letter_payload(item):
    """JSON으로 받은 항목이 글자 하나짜리 문자열 또는 {'char': 글자} 인지"""
    if not isinstance(item, (str, dict)):
        return False
    char = char_of(item)
    return isinstance(char, str) and len(char) == 1


def _jongseong_index(char):
    if char in JONGSEONG_LIST:
        return JONGSEONG_LIST.index(char)
    return 0


def match_syllable(chars, i):
    """
    chars[i]에서 시작하는 음절 하나를 찾는다.

    초성 뒤에 중성이 오면 음절이 시작된다. 세 번째 자모가 종성이 될 수 있어도
    네 번째가 모음이면 다음 음절의 초성으로 남겨둔다.

    Returns:
        (consumed, 초성 index, 중성 index, 종성 index) 또는 None
    """
    n = len(chars)
    if chars[i] not in CHOSEONG_LIST or i + 1 >= n or chars[i + 1] not in JUNGSEONG_LIST:
        return None

    lead_idx = CHOSEONG_LIST.index(chars[i])
    vowel_idx = JUNGSEONG_LIST.index(chars[i + 1])
    final_idx = 0
    consumed = 2

    if i + 2 < n:
        candidate = _jongseong_index(chars[i + 2])
        if candidate > 0:
            next_is_vowel = i + 3 < n and chars[i + 3] in JUNGSEONG_LIST
            if not next_is_vowel:
                final_idx = candidate
                consumed = 3

    return consumed, lead_idx, vowel_idx, final_idx


def compose_syllable(lead_idx, vowel_idx, final_idx=0):
    return chr(SBASE + (lead_idx * N_JUNGSEONG + vowel_idx) * N_JONGSEONG + final_idx)


def combine_jamos(letters):
    """
    지화 타일 시퀀스를 완성된 한글 문자열로 조합

    Args:
        letters: 타일 리스트 (예: ['ㄱ', 'ㅏ', 'ㄴ', 'ㅣ'])

    Returns:
        str: 조합된 문자열 (예: "가니")
    """
    chars = [char_of(letter) for letter in letters]
    result = []
    i = 0

    while i < len(chars):
        match = match_syllable(chars, i)
        if match is None:
            # 짝이 없는 자음, 단독 모음, 기타 문자는 그대로
            result.append(chars[i])
            i += 1
            continue

        consumed, lead_idx, vowel_idx, final_idx = match
        result.append(compose_syllable(lead_idx, vowel_idx, final_idx))
        i += consumed

    return ''.join(result)


def group_jamos_by_character(letters):
    """
    타일 시퀀스를 글자 단위 묶음으로 나눈다.

    combine_jamos와 같은 규칙으로 자르며, 원래 타일 객체를 그대로 담는다.
    묶음을 순서대로 이어 붙이면 입력과 같다.

    Returns:
        list: [[ㄱ, ㅏ, ㄴ], [ㅣ]] 형태의 묶음 리스트
    """
    letters = list(letters)
    chars = [char_of(letter) for letter in letters]
    groups = []
    i = 0

    while i < len(chars):
        match = match_syllable(chars, i)
        consumed = 1 if match is None else match[0]
        groups.append(letters[i:i + consumed])
        i += consumed

    return groups


# ==== API 엔드포인트 ====

@jamo_compose_bp.route('/api/jamo/compose', methods=['POST'])
def compose_jamo():
    """
    자모 리스트를 한글로 조합

    Request:
        {
            "jamo_list": ["ㅎ", "ㅏ", "ㄴ", "ㄱ", "ㅡ", "ㄹ"]
        }

    Response:
        {
            "success": true,
            "jamo_list": ["ㅎ", "ㅏ", "ㄴ", "ㄱ", "ㅡ", "ㄹ"],
            "composed_text": "한글",
            "groups": [["ㅎ", "ㅏ", "ㄴ"], ["ㄱ", "ㅡ", "ㄹ"]],
            "jamo_count": 6,
            "char_count": 2
        }
    """
    try:
        data = request.get_json(silent=True)

        if not data or 'jamo_list' not in data:
            return jsonify({'error': 'jamo_list 필드가 필요합니다.'}), 400

        jamo_list = data['jamo_list']

        if not isinstance(jamo_list, list):
            return jsonify({'error': 'jamo_list는 배열이어야 합니다.'}), 400

        if not all(is_letter_payload(item) for item in jamo_list):
            return jsonify({'error': 'jamo_list 항목은 한 글자 문자열 또는 {"char": ...} 객체여야 합니다.'}), 400

        composed_text = combine_jamos(jamo_list)
        groups = group_jamos_by_character(jamo_list)

        return jsonify({
            'success': True,
            'jamo_list': jamo_list,
            'composed_text': composed_text,
            'groups': groups,
            'jamo_count': len(jamo_list),
            'char_count': len(composed_text)
        }), 200

    except Exception as e:
        return jsonify({'error': str(e)}), 500
