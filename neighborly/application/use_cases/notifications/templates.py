"""Catalog of notification templates and the variable substitution engine.

Templates use natural, conversational phrasing and only cover notifications
that are personally relevant to the recipient. ``{{name}}`` placeholders are
filled from the variables supplied at dispatch time; anything missing renders
as ``Unknown``.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from types import MappingProxyType

from neighborly.domain.entities import NotificationTemplate, ProcessedTemplate

logger = logging.getLogger(__name__)

UNKNOWN_VALUE = "Unknown"
_PLACEHOLDER_PATTERN = re.compile(r"\{\{\s*(\w+)\s*\}\}")


def _template(
    template_id: str,
    template: str,
    *,
    content_type: str,
    notification_type: str,
    action_type: str,
    action_label: str,
    relevance_score: int,
    description: str,
) -> tuple[str, NotificationTemplate]:
    return template_id, NotificationTemplate(
        id=template_id,
        template=template,
        content_type=content_type,
        notification_type=notification_type,
        action_type=action_type,
        action_label=action_label,
        relevance_score=relevance_score,
        description=description,
    )


NOTIFICATION_TEMPLATES: Mapping[str, NotificationTemplate] = MappingProxyType(
    dict(
        [
            # Events
            _template(
                "event_rsvp",
                "{{actor}} RSVP'd to {{title}}",
                content_type="events",
                notification_type="event",
                action_type="rsvp",
                action_label="View Event",
                relevance_score=3,
                description="When someone RSVPs to your event",
            ),
            _template(
                "event_created",
                "{{actor}} created a new event: {{title}}",
                content_type="events",
                notification_type="event",
                action_type="view",
                action_label="View Event",
                relevance_score=2,
                description="When someone creates a new event in your neighborhood",
            ),
            # Skills
            _template(
                "skill_session_request",
                "{{actor}} is interested in your {{title}} skill",
                content_type="skills",
                notification_type="skills",
                action_type="respond",
                action_label="View Interest",
                relevance_score=3,
                description="When someone is interested in a skill you offer",
            ),
            _template(
                "skill_session_cancelled",
                "{{actor}} cancelled the {{title}} session",
                content_type="skills",
                notification_type="skills",
                action_type="view",
                action_label="View Skill",
                relevance_score=3,
                description="When a skill session you are part of is cancelled",
            ),
            _template(
                "skill_offered",
                "{{actor}} is offering {{title}}",
                content_type="skills",
                notification_type="skills",
                action_type="view",
                action_label="View Skill",
                relevance_score=1,
                description="When someone offers a new skill in your neighborhood",
            ),
            _template(
                "skill_requested",
                "{{actor}} is looking to learn {{title}}",
                content_type="skills",
                notification_type="skills",
                action_type="respond",
                action_label="Help Out",
                relevance_score=2,
                description="When someone requests to learn a skill you might offer",
            ),
            # Goods
            _template(
                "goods_response",
                "{{actor}} can help with your {{title}} request",
                content_type="goods",
                notification_type="goods",
                action_type="respond",
                action_label="View Response",
                relevance_score=3,
                description="When someone responds to your goods request",
            ),
            _template(
                "goods_offered",
                "{{actor}} is sharing {{title}}",
                content_type="goods",
                notification_type="goods",
                action_type="view",
                action_label="View Item",
                relevance_score=1,
                description="When someone offers goods in your neighborhood",
            ),
            _template(
                "goods_requested",
                "{{actor}} is looking for {{title}}",
                content_type="goods",
                notification_type="goods",
                action_type="respond",
                action_label="Help Out",
                relevance_score=2,
                description="When someone requests goods you might have",
            ),
            # Safety
            _template(
                "safety_comment",
                "{{actor}} commented on your {{title}}",
                content_type="safety",
                notification_type="safety",
                action_type="view",
                action_label="View Comment",
                relevance_score=2,
                description="When someone comments on your safety report",
            ),
            _template(
                "safety_update",
                "{{actor}} shared a safety update: {{title}}",
                content_type="safety",
                notification_type="safety",
                action_type="view",
                action_label="View Update",
                relevance_score=2,
                description="When someone posts a safety update in your neighborhood",
            ),
            _template(
                "safety_emergency",
                "{{actor}} reported an emergency: {{title}}",
                content_type="safety",
                notification_type="safety",
                action_type="view",
                action_label="View Emergency",
                relevance_score=3,
                description="When someone reports an emergency in your neighborhood",
            ),
            _template(
                "safety_suspicious",
                "{{actor}} reported suspicious activity: {{title}}",
                content_type="safety",
                notification_type="safety",
                action_type="view",
                action_label="View Report",
                relevance_score=3,
                description="When someone reports suspicious activity in your neighborhood",
            ),
            # Neighbors
            _template(
                "neighbor_joined",
                "{{actor}} joined your neighborhood",
                content_type="neighbors",
                notification_type="neighbor_welcome",
                action_type="view",
                action_label="View Profile",
                relevance_score=1,
                description="When someone new joins the neighborhood",
            ),
            # Care
            _template(
                "care_offered",
                "{{actor}} is offering {{title}}",
                content_type="care",
                notification_type="care",
                action_type="view",
                action_label="View Offer",
                relevance_score=1,
                description="When someone offers care or support in your neighborhood",
            ),
            _template(
                "care_requested",
                "{{actor}} is looking for {{title}}",
                content_type="care",
                notification_type="care",
                action_type="respond",
                action_label="Help Out",
                relevance_score=2,
                description="When someone requests care or support you might provide",
            ),
            _template(
                "care_response",
                "{{actor}} can help with your {{title}} request",
                content_type="care",
                notification_type="care",
                action_type="respond",
                action_label="View Response",
                relevance_score=3,
                description="When someone responds to your care request",
            ),
            # Groups
            _template(
                "group_member_joined",
                "{{actor}} joined {{groupName}}",
                content_type="groups",
                notification_type="groups",
                action_type="view",
                action_label="View Group",
                relevance_score=2,
                description="When someone joins a group you manage",
            ),
            _template(
                "group_update_posted",
                "{{actor}} posted an update in {{groupName}}",
                content_type="group_updates",
                notification_type="groups",
                action_type="view",
                action_label="View Update",
                relevance_score=3,
                description="When someone posts an update in your group",
            ),
            _template(
                "group_update_comment",
                "{{actor}} commented on your update in {{groupName}}",
                content_type="group_update_comments",
                notification_type="groups",
                action_type="view",
                action_label="View Comment",
                relevance_score=3,
                description="When someone comments on your group update",
            ),
            _template(
                "group_event_created",
                "{{actor}} created an event for {{groupName}}: {{title}}",
                content_type="events",
                notification_type="groups",
                action_type="view",
                action_label="View Event",
                relevance_score=3,
                description="When someone creates an event for your group",
            ),
            _template(
                "group_invitation",
                "{{actor}} invited you to join {{groupName}}",
                content_type="groups",
                notification_type="groups",
                action_type="respond",
                action_label="View Invitation",
                relevance_score=3,
                description="When someone invites you to a group",
            ),
        ]
    )
)


def get_template(template_id: str) -> NotificationTemplate | None:
    """Return the template registered under ``template_id``."""

    return NOTIFICATION_TEMPLATES.get(template_id)


def list_template_ids() -> list[str]:
    """Return every registered template id."""

    return list(NOTIFICATION_TEMPLATES)


def template_placeholders(template_id: str) -> list[str]:
    """Return the variable names referenced by a template, in order of first use."""

    template = get_template(template_id)
    if template is None:
        return []
    names: list[str] = []
    for match in _PLACEHOLDER_PATTERN.finditer(template.template):
        name = match.group(1)
        if name not in names:
            names.append(name)
    return names


def render_template(text: str, variables: Mapping[str, object]) -> str:
    """Replace every ``{{name}}`` occurrence in ``text`` with its variable."""

    def _substitute(match: re.Match[str]) -> str:
        value = variables.get(match.group(1))
        if value is None:
            return UNKNOWN_VALUE
        rendered = str(value)
        return rendered if rendered.strip() else UNKNOWN_VALUE

    return _PLACEHOLDER_PATTERN.sub(_substitute, text)


def process_template(
    template_id: str, variables: Mapping[str, object] | None = None
) -> ProcessedTemplate | None:
    """Resolve ``template_id`` into a title plus its routing metadata.

    Returns ``None`` (and logs a warning) when the template does not exist.
    """

    template = get_template(template_id)
    if template is None:
        logger.warning("Notification template not found: %s", template_id)
        return None

    title = render_template(template.template, variables or {})
    return ProcessedTemplate(title=title, template=template)


__all__ = [
    "NOTIFICATION_TEMPLATES",
    "UNKNOWN_VALUE",
    "get_template",
    "list_template_ids",
    "process_template",
    "render_template",
    "template_placeholders",
]
