"""Permission model - ordinal access levels gating manual visibility."""

from manualbot.app.models.common import PermissionLevel

# Role labels as stored in the user and manual sheets
PERMISSION_LABELS: dict[str, PermissionLevel] = {
    "一般": PermissionLevel.general,
    "総務": PermissionLevel.general_affairs,
    "役職": PermissionLevel.executive,
}

LOWEST_LEVEL = min(PermissionLevel)


def level_of(role_label: str | None) -> PermissionLevel:
    """Map a role label to its level.

    Accepts the Japanese sheet labels and the enum names
    (e.g. "general_affairs"). Unknown or empty labels fall back to the
    lowest level; this never raises.
    """
    if not role_label:
        return LOWEST_LEVEL

    label = role_label.strip()
    if label in PERMISSION_LABELS:
        return PERMISSION_LABELS[label]

    try:
        return PermissionLevel[label.lower()]
    except KeyError:
        return LOWEST_LEVEL


def label_of(level: PermissionLevel) -> str:
    """Inverse of level_of for display."""
    for label, value in PERMISSION_LABELS.items():
        if value == level:
            return label
    return "一般"


def is_visible(user_level: PermissionLevel, required_level: PermissionLevel) -> bool:
    """A user may view a document iff their level is at least the required one."""
    return user_level >= required_level
