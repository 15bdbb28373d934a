"""Course comment rules: payloads, likes, threading, stats and permissions.

Storage lives in :mod:`cipm.firestore_dao`; everything here works on plain
comment dicts so routes and socket handlers share the same rules.
"""
from datetime import datetime

from cipm.constants import MODERATOR_ROLES, ROLE_ADMIN, ROLE_CLIENTE, ROLE_DEVELOP
from cipm.errors import ValidationError


def _ts(comment):
    value = comment.get('createdAt')
    if isinstance(value, datetime):
        return value.timestamp()
    if isinstance(value, dict):
        return value.get('seconds') or 0
    return 0


def build_comment(data, user_id, user_name, user_role=None, user_avatar=None):
    """Validate a new comment and return the document to store."""
    if not data.get('courseId'):
        raise ValidationError('Course ID is required')
    content = (data.get('content') or '').strip()
    if not content:
        raise ValidationError('Comment content is required')
    if not user_id:
        raise ValidationError('User ID is required')
    if not user_name:
        raise ValidationError('User name is required')

    comment = {
        'courseId': data['courseId'],
        'userId': user_id,
        'userName': user_name,
        'userRole': user_role or ROLE_CLIENTE,
        'content': content,
        'parentId': data.get('parentId') or None,
        'commentType': data.get('commentType') or 'general',
        'contentId': data.get('contentId') or None,
        'contentTitle': data.get('contentTitle') or None,
        'likes': 0,
        'likedBy': [],
        'isPinned': False,
        'isModerated': False,
        'isEdited': False,
    }
    # Firestore rejects undefined values, so the avatar is only set when known
    if user_avatar:
        comment['userAvatar'] = user_avatar
    return comment


def edit_payload(content, now):
    content = (content or '').strip()
    if not content:
        raise ValidationError('Comment content is required')
    return {'content': content, 'isEdited': True, 'editedAt': now}


def toggle_like(comment, user_id):
    """Fields to write after ``user_id`` likes or un-likes ``comment``."""
    liked_by = list(comment.get('likedBy') or [])
    likes = comment.get('likes') or 0
    if user_id in liked_by:
        liked_by.remove(user_id)
        likes = max(0, likes - 1)
    else:
        liked_by.append(user_id)
        likes += 1
    return {'likedBy': liked_by, 'likes': likes}


def sort_for_display(comments):
    """Pinned first, then newest first."""
    return sorted(comments, key=lambda c: (not c.get('isPinned'), -_ts(c)))


def build_threads(comments):
    """Top-level comments with their ``replies`` (oldest first) attached."""
    replies = {}
    top_level = []
    for c in comments:
        parent = c.get('parentId')
        if parent:
            replies.setdefault(parent, []).append(c)
        else:
            top_level.append(c)

    threads = []
    for c in sort_for_display(top_level):
        children = sorted(replies.get(c['id'], []), key=_ts)
        threads.append(dict(c, replies=children, replyCount=len(children)))
    return threads


def stats(comments):
    top_level = [c for c in comments if not c.get('parentId')]
    total_likes = sum(c.get('likes') or 0 for c in comments)
    return {
        'totalComments': len(top_level),
        'totalReplies': len(comments) - len(top_level),
        'totalInteractions': len(comments),
        'totalLikes': total_likes,
        'pinnedComments': len([c for c in comments if c.get('isPinned')]),
        'moderatedComments': len([c for c in comments if c.get('isModerated')]),
        'averageLikesPerComment': total_likes / len(comments) if comments else 0,
    }


# Permissions ---------------------------------------------------------------

def can_moderate(user):
    return user is not None and user.get('role') in MODERATOR_ROLES


can_pin = can_moderate


def can_edit(user, comment):
    if user is None:
        return False
    if user.get('role') in (ROLE_ADMIN, ROLE_DEVELOP):
        return True
    return comment.get('userId') == user.get('id')


def can_delete(user, comment):
    if user is None:
        return False
    return can_moderate(user) or comment.get('userId') == user.get('id')
