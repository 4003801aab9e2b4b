"""Typed helpers that notify recipients about specific domain events.

Each helper fixes the template and the variable mapping for its event so call
sites never assemble variable maps by hand.
"""

from __future__ import annotations

from .dispatcher import NotificationDispatcher


def notify_event_rsvp(
    dispatcher: NotificationDispatcher,
    *,
    host_id: str,
    attendee_id: str,
    attendee_name: str,
    event_id: str,
    event_title: str,
) -> int | None:
    """Tell an event host that someone RSVP'd."""

    return dispatcher.create_notification(
        "event_rsvp",
        host_id,
        actor_id=attendee_id,
        content_id=event_id,
        variables={"actor": attendee_name, "title": event_title},
        metadata={"eventId": event_id, "type": "rsvp"},
    )


def notify_skill_session_request(
    dispatcher: NotificationDispatcher,
    *,
    provider_id: str,
    requester_id: str,
    requester_name: str,
    skill_id: str,
    skill_title: str,
) -> int | None:
    """Tell a skill provider that a neighbor is interested in their skill."""

    return dispatcher.create_notification(
        "skill_session_request",
        provider_id,
        actor_id=requester_id,
        content_id=skill_id,
        variables={"actor": requester_name, "title": skill_title},
        metadata={"skillId": skill_id, "type": "session_request"},
    )


def notify_skill_session_cancelled(
    dispatcher: NotificationDispatcher,
    *,
    recipient_id: str,
    actor_id: str,
    actor_name: str,
    session_id: str,
    skill_title: str,
) -> int | None:
    """Tell the other participant that a skill session was cancelled."""

    return dispatcher.create_notification(
        "skill_session_cancelled",
        recipient_id,
        actor_id=actor_id,
        content_id=session_id,
        variables={"actor": actor_name, "title": skill_title},
        metadata={"sessionId": session_id, "type": "cancellation"},
    )


def notify_neighbor_joined(
    dispatcher: NotificationDispatcher,
    *,
    existing_neighbor_id: str,
    new_neighbor_id: str,
    new_neighbor_name: str,
) -> int | None:
    """Welcome a new neighbor on behalf of an existing one."""

    return dispatcher.create_notification(
        "neighbor_joined",
        existing_neighbor_id,
        actor_id=new_neighbor_id,
        content_id=new_neighbor_id,
        variables={"actor": new_neighbor_name},
        metadata={"neighborId": new_neighbor_id, "type": "welcome"},
    )


def notify_safety_comment(
    dispatcher: NotificationDispatcher,
    *,
    reporter_id: str,
    commenter_id: str,
    commenter_name: str,
    safety_update_id: str,
    safety_title: str,
) -> int | None:
    """Tell the author of a safety report that someone commented on it."""

    return dispatcher.create_notification(
        "safety_comment",
        reporter_id,
        actor_id=commenter_id,
        content_id=safety_update_id,
        variables={"actor": commenter_name, "title": safety_title},
        metadata={"safetyUpdateId": safety_update_id, "type": "comment"},
    )


def notify_goods_response(
    dispatcher: NotificationDispatcher,
    *,
    requester_id: str,
    responder_id: str,
    responder_name: str,
    goods_id: str,
    goods_title: str,
) -> int | None:
    """Tell a neighbor that someone can help with their goods request."""

    return dispatcher.create_notification(
        "goods_response",
        requester_id,
        actor_id=responder_id,
        content_id=goods_id,
        variables={"actor": responder_name, "title": goods_title},
        metadata={"goodsId": goods_id, "type": "response"},
    )


def notify_care_response(
    dispatcher: NotificationDispatcher,
    *,
    requester_id: str,
    responder_id: str,
    responder_name: str,
    care_id: str,
    care_title: str,
) -> int | None:
    """Tell a neighbor that someone can help with their care request."""

    return dispatcher.create_notification(
        "care_response",
        requester_id,
        actor_id=responder_id,
        content_id=care_id,
        variables={"actor": responder_name, "title": care_title},
        metadata={"careId": care_id, "type": "response"},
    )


def notify_group_invitation(
    dispatcher: NotificationDispatcher,
    *,
    invitee_id: str,
    inviter_id: str,
    inviter_name: str,
    group_id: str,
    group_name: str,
) -> int | None:
    return dispatcher.create_notification(
        "group_invitation",
        invitee_id,
        actor_id=inviter_id,
        content_id=group_id,
        variables={"actor": inviter_name, "groupName": group_name},
        metadata={"groupId": group_id, "type": "invitation"},
    )


def notify_group_event_created(
    dispatcher: NotificationDispatcher,
    *,
    group_id: str,
    group_name: str,
    creator_id: str,
    creator_name: str,
    event_id: str,
    event_title: str,
) -> list[int]:
    """Tell every other group member about a new group event."""

    return dispatcher.notify_group_members(
        group_id,
        actor_id=creator_id,
        template_id="group_event_created",
        content_id=event_id,
        variables={"actor": creator_name, "groupName": group_name, "title": event_title},
        metadata={"eventId": event_id, "creatorId": creator_id},
    )


def notify_group_update_posted(
    dispatcher: NotificationDispatcher,
    *,
    group_id: str,
    group_name: str,
    author_id: str,
    author_name: str,
    update_id: str,
) -> list[int]:
    """Tell every other group member about a new group update."""

    return dispatcher.notify_group_members(
        group_id,
        actor_id=author_id,
        template_id="group_update_posted",
        content_id=update_id,
        variables={"actor": author_name, "groupName": group_name},
        metadata={"updateId": update_id},
    )


__all__ = [
    "notify_event_rsvp",
    "notify_skill_session_request",
    "notify_skill_session_cancelled",
    "notify_neighbor_joined",
    "notify_safety_comment",
    "notify_goods_response",
    "notify_care_response",
    "notify_group_invitation",
    "notify_group_event_created",
    "notify_group_update_posted",
]
