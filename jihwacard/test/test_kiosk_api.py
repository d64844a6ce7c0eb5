# -*- coding: utf-8 -*-
"""
키오스크 지화 입력 흐름 테스트
"""
from jihwacard.api.finger_letters import find_letter
from jihwacard.api.kiosk import JamoSequence

HANGUL_TARGET = ['ㅎ', 'ㅏ', 'ㄴ', 'ㄱ', 'ㅡ', 'ㄹ']


def _tap(client, char):
    return client.post('/api/kiosk/tap', json={'char': char})


# ==== JamoSequence ====

def test_sequence_append_pop_clear():
    sequence = JamoSequence()
    assert sequence.pop() is None

    for char in ['ㄱ', 'ㅏ', 'ㅇ', 'ㅏ']:
        sequence.append(find_letter(char))
    assert len(sequence) == 4
    assert sequence.compose() == '가아'
    assert [[letter.char for letter in group] for group in sequence.groups()] == [['ㄱ', 'ㅏ'], ['ㅇ', 'ㅏ']]

    assert sequence.pop().char == 'ㅏ'
    assert sequence.compose() == '강'
    assert [[letter.char for letter in group] for group in sequence.groups()] == [['ㄱ', 'ㅏ', 'ㅇ']]

    sequence.clear()
    assert len(sequence) == 0
    assert sequence.compose() == ''


def test_sequence_session_round_trip():
    sequence = JamoSequence([find_letter('ㅇ'), find_letter('ㅏ')])
    assert sequence.to_session() == ['ㅇ', 'ㅏ']

    restored = JamoSequence.from_session(['ㅇ', 'ㅏ', 'ㄳ'])
    assert restored.chars() == ['ㅇ', 'ㅏ']
    assert JamoSequence.from_session(None).chars() == []


# ==== 자유 입력 ====

def test_initial_state(client):
    state = client.get('/api/kiosk/state').get_json()['state']

    assert state['mode'] == 'free'
    assert state['letters'] == []
    assert state['composed'] == ''
    assert state['next_expected'] is None
    assert state['is_complete'] is False


def test_free_mode_taps(client):
    for char in ['ㄱ', 'ㅏ', 'ㅇ', 'ㅏ']:
        response = _tap(client, char)
        assert response.status_code == 200

    data = response.get_json()
    assert data['added'] == {'char': 'ㅏ', 'imagePath': '/vowels/ㅏ.png'}
    assert data['state']['composed'] == '가아'
    assert len(data['state']['groups']) == 2
    assert data['state']['is_complete'] is True


def test_tap_accepts_letter_object(client):
    response = _tap(client, {'char': 'ㅂ', 'imagePath': '/consonants/ㅂ.png'})
    assert response.status_code == 200
    assert response.get_json()['state']['letters'] == [{'char': 'ㅂ', 'imagePath': '/consonants/ㅂ.png'}]


def test_tap_unknown_char(client):
    assert _tap(client, 'A').status_code == 400
    assert _tap(client, 'ㄳ').status_code == 400
    assert client.post('/api/kiosk/tap', json={}).status_code == 400


def test_backspace_and_clear(client):
    for char in ['ㅎ', 'ㅏ', 'ㄴ']:
        _tap(client, char)

    data = client.post('/api/kiosk/backspace').get_json()
    assert data['removed']['char'] == 'ㄴ'
    assert data['state']['composed'] == '하'

    data = client.post('/api/kiosk/clear').get_json()
    assert data['state']['letters'] == []

    data = client.post('/api/kiosk/backspace').get_json()
    assert data['removed'] is None


# ==== 이름 안내 입력 ====

def test_guided_flow(client):
    response = client.post('/api/kiosk/name', json={'name': '한글'})
    assert response.status_code == 200
    state = response.get_json()['state']
    assert state['mode'] == 'guided'
    assert state['target'] == HANGUL_TARGET
    assert state['next_expected'] == 'ㅎ'
    assert state['next_expected_type'] == 'consonant'
    assert state['progress'] == {'current': 0, 'total': 6}

    response = _tap(client, 'ㅏ')
    assert response.status_code == 409
    assert response.get_json()['expected'] == 'ㅎ'
    assert response.get_json()['received'] == 'ㅏ'

    for char in HANGUL_TARGET:
        response = _tap(client, char)
        assert response.status_code == 200

    state = response.get_json()['state']
    assert state['composed'] == '한글'
    assert len(state['groups']) == 2
    assert state['is_complete'] is True
    assert state['next_expected'] is None

    response = _tap(client, 'ㅎ')
    assert response.status_code == 409


def test_clear_keeps_target(client):
    client.post('/api/kiosk/name', json={'name': '아'})
    _tap(client, 'ㅇ')

    state = client.post('/api/kiosk/clear').get_json()['state']
    assert state['target'] == ['ㅇ', 'ㅏ']
    assert state['next_expected'] == 'ㅇ'


def test_name_validation(client):
    assert client.post('/api/kiosk/name', json={'name': ''}).status_code == 400
    assert client.post('/api/kiosk/name', json={'name': '   '}).status_code == 400
    assert client.post('/api/kiosk/name', json={'name': '가나다라마'}).status_code == 400
    assert client.post('/api/kiosk/name', json={}).status_code == 400

    response = client.post('/api/kiosk/name', json={'name': '닭'})
    assert response.status_code == 400
    assert response.get_json()['unsupported'] == ['ㄺ']

    response = client.post('/api/kiosk/name', json={'name': 'AB'})
    assert response.status_code == 400
    assert response.get_json()['unsupported'] == ['A', 'B']


def test_reset(client):
    client.post('/api/kiosk/name', json={'name': '한글'})
    _tap(client, 'ㅎ')

    state = client.post('/api/kiosk/reset').get_json()['state']
    assert state['mode'] == 'free'
    assert state['name'] is None
    assert state['letters'] == []


# ==== 명함 만들기 ====

def test_complete_without_letters(client):
    assert client.post('/api/kiosk/complete', json={}).status_code == 400


def test_complete_incomplete_guided(client):
    client.post('/api/kiosk/name', json={'name': '한글'})
    _tap(client, 'ㅎ')

    response = client.post('/api/kiosk/complete', json={})
    assert response.status_code == 400
    assert response.get_json()['progress'] == {'current': 1, 'total': 6}


def test_complete_creates_card(client):
    client.post('/api/kiosk/name', json={'name': '한글'})
    for char in HANGUL_TARGET:
        _tap(client, char)

    response = client.post('/api/kiosk/complete', json={
        'phoneNumber': '01012345678',
        'design': 'luxury',
        'signSize': 16
    })
    assert response.status_code == 201
    data = response.get_json()
    assert data['url'] == f"https://card.example.com/card/shared?id={data['id']}"

    card = client.get(f"/api/card/{data['id']}").get_json()
    assert card['userName'] == '한글'
    assert card['design']['id'] == 'luxury'
    assert card['signSize'] == 16
    assert [letter['char'] for letter in card['letters']] == HANGUL_TARGET


def test_complete_rejects_bad_options(client):
    _tap(client, 'ㄱ')
    _tap(client, 'ㅏ')

    response = client.post('/api/kiosk/complete', json={'layoutDirection': 'diagonal'})
    assert response.status_code == 400


def test_complete_free_mode_single_syllable(client):
    _tap(client, 'ㄱ')

    response = client.post('/api/kiosk/complete', json={})
    assert response.status_code == 201
    card = response.get_json()['card']
    assert card['userName'] == 'ㄱ'
    assert card['letters'] == [{'char': 'ㄱ', 'imagePath': '/consonants/ㄱ.png'}]


def test_complete_rejects_unknown_design_shape(client):
    _tap(client, 'ㄱ')
    _tap(client, 'ㅏ')

    response = client.post('/api/kiosk/complete', json={'design': ['minimal']})
    assert response.status_code == 400
