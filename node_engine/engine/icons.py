"""Icon names available to renderers.

Icon names arrive as untrusted strings in node metadata ("Plus",
"folder-plus", "icon:check-circle:#22d3ee"). They are looked up in an
explicit table; anything not in it resolves to the fallback icon.
"""
from __future__ import annotations

import re
from enum import Enum
from typing import Dict, Optional, Tuple


class IconName(str, Enum):
    APP_WINDOW = "AppWindow"
    ARROW_LEFT = "ArrowLeft"
    ARCHIVE = "Archive"
    CALENDAR = "Calendar"
    CHECK = "Check"
    CHECK_CIRCLE = "CheckCircle"
    CHEVRON_RIGHT = "ChevronRight"
    CIRCLE = "Circle"
    CLIPBOARD_LIST = "ClipboardList"
    EDIT = "Edit"
    FILE_TEXT = "FileText"
    FOLDER = "Folder"
    FOLDER_PLUS = "FolderPlus"
    HOME = "Home"
    IMAGE = "Image"
    INBOX = "Inbox"
    LAYOUT_GRID = "LayoutGrid"
    LIST = "List"
    LIST_TODO = "ListTodo"
    MOVE = "Move"
    PLAY_CIRCLE = "PlayCircle"
    PLUS = "Plus"
    SETTINGS = "Settings"
    STAR = "Star"
    TRASH = "Trash2"
    USER = "User"


# Accepts the enum value, the kebab-case form and a lowercase alias
_ICON_MAP: Dict[str, IconName] = {}
for _icon in IconName:
    _ICON_MAP[_icon.value] = _icon
    _ICON_MAP[_icon.value.lower()] = _icon
    _ICON_MAP[re.sub(r"(?<!^)(?=[A-Z0-9])", "-", _icon.value).lower()] = _icon
_ICON_MAP["trash"] = IconName.TRASH


def resolve_icon(name: Optional[str], fallback: IconName = IconName.LAYOUT_GRID) -> IconName:
    if not isinstance(name, str) or not name:
        return fallback
    return _ICON_MAP.get(name.strip(), _ICON_MAP.get(name.strip().lower(), fallback))


def parse_icon_spec(spec: Optional[str], fallback: IconName = IconName.APP_WINDOW) -> Tuple[IconName, Optional[str]]:
    """Split an ``icon:<name>[:<color>]`` string into an icon and optional color."""
    if not isinstance(spec, str) or not spec:
        return fallback, None
    raw = spec[len("icon:"):] if spec.startswith("icon:") else spec
    name, _, color = raw.partition(":")
    return resolve_icon(name, fallback), color or None
