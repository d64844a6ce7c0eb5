# -*- coding: utf-8 -*-
"""
자모 분해/조합 API 테스트
"""
from urllib.parse import quote


def test_decompose_post(client):
    response = client.post('/api/jamo/decompose', json={'text': '한글'})

    assert response.status_code == 200
    data = response.get_json()
    assert data['jamo_list'] == ['ㅎ', 'ㅏ', 'ㄴ', 'ㄱ', 'ㅡ', 'ㄹ']
    assert data['jamo_count'] == 6
    assert data['char_count'] == 2
    assert data['fingerspellable'] is True
    assert data['char_details'][0]['decomposed'] == {'chosung': 'ㅎ', 'jungsung': 'ㅏ', 'jongsung': 'ㄴ'}


def test_decompose_post_mixed_text(client):
    data = client.post('/api/jamo/decompose', json={'text': '닭A'}).get_json()

    assert data['jamo_list'] == ['ㄷ', 'ㅏ', 'ㄺ', 'A']
    assert data['fingerspellable'] is False
    assert data['char_details'][1] == {'char': 'A', 'jamo': ['A'], 'is_other': True}


def test_decompose_post_empty_text(client):
    data = client.post('/api/jamo/decompose', json={'text': ''}).get_json()
    assert data['jamo_list'] == []


def test_decompose_post_validation(client):
    assert client.post('/api/jamo/decompose', json={}).status_code == 400
    assert client.post('/api/jamo/decompose', json={'text': 3}).status_code == 400
    assert client.post('/api/jamo/decompose', data='not json').status_code == 400


def test_decompose_get(client):
    response = client.get('/api/jamo/decompose/' + quote('아'))

    assert response.status_code == 200
    assert response.get_json()['jamo_list'] == ['ㅇ', 'ㅏ']


def test_validate(client):
    cases = {
        'ㄱ': ('chosung', True, False, True),
        'ㅘ': ('jungsung', True, False, True),
        'ㄳ': ('jongsung', True, True, False),
        'A': (None, False, False, False),
    }
    for jamo, (jamo_type, is_valid, is_complex, has_tile) in cases.items():
        data = client.post('/api/jamo/validate', json={'jamo': jamo}).get_json()
        assert data['type'] == jamo_type
        assert data['is_valid'] is is_valid
        assert data['is_complex'] is is_complex
        assert data['has_finger_letter'] is has_tile

    assert client.post('/api/jamo/validate', json={'jamo': 'ㄱㄴ'}).status_code == 400


def test_info(client):
    data = client.get('/api/jamo/info').get_json()

    assert data['chosung_count'] == 19
    assert data['jungsung_count'] == 21
    assert data['jongsung_count'] == 27
    assert '' not in data['jongsung_list']


def test_compose(client):
    response = client.post('/api/jamo/compose', json={'jamo_list': ['ㄱ', 'ㅏ', 'ㄴ', 'ㅣ']})

    assert response.status_code == 200
    data = response.get_json()
    assert data['composed_text'] == '가니'
    assert data['groups'] == [['ㄱ', 'ㅏ'], ['ㄴ', 'ㅣ']]
    assert data['char_count'] == 2


def test_compose_letter_objects(client):
    letters = [{'char': 'ㄱ', 'imagePath': '/consonants/ㄱ.png'}, {'char': 'ㅏ', 'imagePath': '/vowels/ㅏ.png'}]
    data = client.post('/api/jamo/compose', json={'jamo_list': letters}).get_json()

    assert data['composed_text'] == '가'
    assert data['groups'] == [letters]


def test_compose_validation(client):
    assert client.post('/api/jamo/compose', json={}).status_code == 400
    assert client.post('/api/jamo/compose', json={'jamo_list': 'ㄱㅏ'}).status_code == 400
    assert client.post('/api/jamo/compose', json={'jamo_list': [1, 2]}).status_code == 400
    assert client.post('/api/jamo/compose', json={'jamo_list': [{'char': 1}]}).status_code == 400


def test_compose_empty_list(client):
    data = client.post('/api/jamo/compose', json={'jamo_list': []}).get_json()
    assert data['composed_text'] == ''
    assert data['groups'] == []


def test_compose_rejects_non_single_characters(client):
    assert client.post('/api/jamo/compose', json={'jamo_list': ['AB']}).status_code == 400
    assert client.post('/api/jamo/compose', json={'jamo_list': [{}]}).status_code == 400
    assert client.post('/api/jamo/compose', json={'jamo_list': ['ㄱ', '']}).status_code == 400
