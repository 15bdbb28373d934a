"""Tests for course comment rules."""
from __future__ import annotations

from datetime import datetime, timezone

import pytest

from cipm.errors import ValidationError
from cipm.services import comments


def _at(day):
    return datetime(2025, 4, day, tzinfo=timezone.utc)


@pytest.mark.parametrize(
    'data, user_id, user_name, message',
    [
        ({'content': 'Hola'}, 'u1', 'Luis', 'Course ID is required'),
        ({'courseId': 'c1', 'content': '   '}, 'u1', 'Luis', 'Comment content is required'),
        ({'courseId': 'c1', 'content': 'Hola'}, '', 'Luis', 'User ID is required'),
        ({'courseId': 'c1', 'content': 'Hola'}, 'u1', '', 'User name is required'),
    ],
)
def test_build_comment_rejects_incomplete_payloads(data, user_id, user_name, message):
    with pytest.raises(ValidationError, match=message):
        comments.build_comment(data, user_id, user_name)


def test_build_comment_defaults():
    comment = comments.build_comment({'courseId': 'c1', 'content': '  Muy buen curso  '}, 'u1', 'Luis')

    assert comment['content'] == 'Muy buen curso'
    assert comment['userRole'] == 'cliente'
    assert comment['commentType'] == 'general'
    assert comment['parentId'] is None
    assert comment['likes'] == 0
    assert comment['likedBy'] == []
    assert not (comment['isPinned'] or comment['isModerated'] or comment['isEdited'])
    assert 'userAvatar' not in comment


def test_build_comment_keeps_avatar_when_known():
    comment = comments.build_comment(
        {'courseId': 'c1', 'content': 'Hola', 'commentType': 'video', 'contentId': 'v1'},
        'u1', 'Luis', 'instructor', 'https://example.com/a.png',
    )

    assert comment['userAvatar'] == 'https://example.com/a.png'
    assert comment['commentType'] == 'video'
    assert comment['contentId'] == 'v1'


def test_edit_payload_marks_comment_edited():
    now = _at(10)

    assert comments.edit_payload(' nuevo ', now) == {'content': 'nuevo', 'isEdited': True, 'editedAt': now}
    with pytest.raises(ValidationError):
        comments.edit_payload('', now)


def test_toggle_like_adds_and_removes_user():
    comment = {'likes': 1, 'likedBy': ['u2']}

    liked = comments.toggle_like(comment, 'u1')
    unliked = comments.toggle_like(dict(comment, **liked), 'u1')

    assert liked == {'likedBy': ['u2', 'u1'], 'likes': 2}
    assert unliked == {'likedBy': ['u2'], 'likes': 1}
    assert comment['likedBy'] == ['u2']


def test_toggle_like_never_goes_negative():
    assert comments.toggle_like({'likes': 0, 'likedBy': ['u1']}, 'u1') == {'likedBy': [], 'likes': 0}


def test_build_threads_orders_pinned_then_newest_with_replies_oldest_first():
    data = [
        {'id': 'old', 'createdAt': _at(1)},
        {'id': 'new', 'createdAt': _at(5)},
        {'id': 'pinned', 'createdAt': _at(2), 'isPinned': True},
        {'id': 'r2', 'parentId': 'old', 'createdAt': _at(4)},
        {'id': 'r1', 'parentId': 'old', 'createdAt': _at(3)},
    ]

    threads = comments.build_threads(data)

    assert [t['id'] for t in threads] == ['pinned', 'new', 'old']
    assert [r['id'] for r in threads[2]['replies']] == ['r1', 'r2']
    assert threads[2]['replyCount'] == 2
    assert threads[0]['replyCount'] == 0


def test_stats():
    data = [
        {'id': 'a', 'likes': 3, 'isPinned': True},
        {'id': 'b', 'likes': 1, 'isModerated': True},
        {'id': 'c', 'parentId': 'a', 'likes': 2},
    ]

    assert comments.stats(data) == {
        'totalComments': 2,
        'totalReplies': 1,
        'totalInteractions': 3,
        'totalLikes': 6,
        'pinnedComments': 1,
        'moderatedComments': 1,
        'averageLikesPerComment': 2,
    }
    assert comments.stats([])['averageLikesPerComment'] == 0


def test_permissions():
    admin = {'id': 'a', 'role': 'admin'}
    instructor = {'id': 'i', 'role': 'instructor'}
    author = {'id': 'u1', 'role': 'cliente'}
    other = {'id': 'u2', 'role': 'cliente'}
    comment = {'userId': 'u1'}

    assert comments.can_moderate(admin) and comments.can_moderate(instructor)
    assert not comments.can_pin(author)
    assert comments.can_edit(author, comment) and comments.can_edit(admin, comment)
    assert not comments.can_edit(instructor, comment)
    assert comments.can_delete(instructor, comment)
    assert not comments.can_delete(other, comment)
    assert not comments.can_edit(None, comment)
