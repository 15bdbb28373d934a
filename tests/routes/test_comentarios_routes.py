"""Tests for the course comment endpoints."""
from __future__ import annotations

from datetime import datetime, timezone

import pytest


def _at(day):
    return datetime(2025, 4, day, tzinfo=timezone.utc)


@pytest.fixture
def thread(fake_db):
    fake_db.seed('CourseComments', 'top', {'id': 'top', 'courseId': 'c1', 'userId': 'luis', 'content': 'Hola',
                                           'likes': 0, 'likedBy': [], 'createdAt': _at(1)})
    fake_db.seed('CourseComments', 'reply', {'id': 'reply', 'courseId': 'c1', 'userId': 'eva', 'content': 'Hola!',
                                             'parentId': 'top', 'createdAt': _at(2)})
    fake_db.seed('CourseComments', 'other', {'id': 'other', 'courseId': 'c2', 'userId': 'eva', 'content': 'Otro',
                                             'createdAt': _at(3)})


def test_create_comment_broadcasts_to_course_room(client, login_as, fake_db, emitted):
    login_as('luis', 'cliente', name='Luis')

    resp = client.post('/comentarios/', json={'courseId': 'c1', 'content': '  Excelente curso  '})

    assert resp.status_code == 201
    comment = resp.get_json()
    assert comment['content'] == 'Excelente curso'
    assert comment['userName'] == 'Luis'
    assert comment['userRole'] == 'cliente'
    assert 'userAvatar' not in comment
    assert comment['id'] in fake_db.docs('CourseComments')
    assert emitted[0][0] == 'comment_created'
    assert emitted[0][2] == 'course_c1'


def test_create_comment_requires_content(client, login_as, fake_db):
    login_as('luis', 'cliente')

    resp = client.post('/comentarios/', json={'courseId': 'c1', 'content': ''})

    assert resp.status_code == 400
    assert resp.get_json()['errors']['content'] == ['Comment content is required']
    assert fake_db.docs('CourseComments') == {}


def test_reply_must_stay_in_parent_course(client, login_as, thread):
    login_as('luis', 'cliente')

    resp = client.post('/comentarios/', json={'courseId': 'c1', 'content': 'Respuesta', 'parentId': 'other'})

    assert resp.status_code == 400
    assert 'parentId' in resp.get_json()['errors']


def test_threads_attach_replies(client, login_as, thread):
    login_as('luis', 'cliente')

    resp = client.get('/comentarios/curso/c1')

    threads = resp.get_json()
    assert [t['id'] for t in threads] == ['top']
    assert threads[0]['replyCount'] == 1
    assert threads[0]['replies'][0]['id'] == 'reply'


def test_like_toggles(client, login_as, thread, fake_db):
    login_as('eva', 'cliente')

    client.post('/comentarios/top/like')
    assert fake_db.docs('CourseComments')['top']['likes'] == 1
    assert fake_db.docs('CourseComments')['top']['likedBy'] == ['eva']

    client.post('/comentarios/top/like')
    assert fake_db.docs('CourseComments')['top']['likes'] == 0


def test_only_moderators_pin(client, login_as, thread, fake_db):
    login_as('luis', 'cliente')
    assert client.post('/comentarios/top/fijar').status_code == 403

    login_as('ana', 'instructor')
    resp = client.post('/comentarios/top/fijar')
    assert resp.status_code == 200
    assert fake_db.docs('CourseComments')['top']['isPinned'] is True

    client.post('/comentarios/top/fijar', json={'value': True})
    assert fake_db.docs('CourseComments')['top']['isPinned'] is True


def test_edit_is_limited_to_author_and_admins(client, login_as, thread, fake_db):
    login_as('ana', 'instructor')
    assert client.put('/comentarios/top', json={'content': 'Cambio'}).status_code == 403

    login_as('luis', 'cliente')
    resp = client.put('/comentarios/top', json={'content': 'Cambio'})

    assert resp.status_code == 200
    stored = fake_db.docs('CourseComments')['top']
    assert stored['content'] == 'Cambio'
    assert stored['isEdited'] is True
    assert 'editedAt' in stored


def test_delete_removes_replies(client, login_as, thread, fake_db, emitted):
    login_as('ana', 'instructor')

    resp = client.delete('/comentarios/top')

    assert resp.get_json() == {'deleted': ['top', 'reply']}
    assert set(fake_db.docs('CourseComments')) == {'other'}
    assert emitted[-1] == ('comment_deleted', {'courseId': 'c1', 'ids': ['top', 'reply']}, 'course_c1')


def test_other_clients_cannot_delete(client, login_as, thread):
    login_as('eva', 'cliente')

    assert client.delete('/comentarios/top').status_code == 403


def test_bulk_moderate_and_delete(client, login_as, thread, fake_db):
    login_as('admin', 'admin')

    resp = client.post('/comentarios/moderar', json={'ids': ['top', 'other']})
    assert resp.status_code == 200
    assert fake_db.docs('CourseComments')['other']['isModerated'] is True
    assert [c['id'] for c in client.get('/comentarios/moderados').get_json()] == ['other', 'top']

    assert client.post('/comentarios/eliminar', json={'ids': 'top'}).status_code == 400

    resp = client.post('/comentarios/eliminar', json={'ids': ['top']})
    assert resp.get_json() == {'deleted': ['top', 'reply']}


def test_stats(client, login_as, thread):
    login_as('luis', 'cliente')

    stats = client.get('/comentarios/curso/c1/stats').get_json()

    assert stats['totalComments'] == 1
    assert stats['totalReplies'] == 1


def test_missing_comment_is_not_found(client, login_as):
    login_as('luis', 'cliente')

    assert client.get('/comentarios/nada').status_code == 404
