"""Internal constants shared across the library."""

from __future__ import annotations

from typing import Any

DEFAULT_PORT = 3001
SERVICE_NAME = "Everyday Tasks Hub API"

VOICE_ID_PREFIX = "amzn1."
VOICE_HANDLE_PREFIX = "alexa-user-"

HISTORY_CAPACITY = 100
HISTORY_SNAPSHOT_SIZE = 10
DEFAULT_HISTORY_LIMIT = 50

# Logs and debug payloads keep only this many leading characters of a voice id.
VOICE_ID_VISIBLE_CHARS = 30

UNKNOWN_INTENT = "UNKNOWN"
GENERAL_CATEGORY = "general"

# ------------------------------------------------------------------
# Static task catalog. Copied into every fresh hub state.
# ------------------------------------------------------------------

DEFAULT_TASKS: tuple[dict[str, Any], ...] = (
    {
        "id": "t1",
        "title": "Morning Routine",
        "icon": "☀️",
        "description": "Start your day right",
        "category": "routine",
        "voiceCommand": "start my morning routine",
    },
    {
        "id": "t2",
        "title": "Grocery List",
        "icon": "🛒",
        "description": "Manage shopping items",
        "category": "list",
        "voiceCommand": "open my grocery list",
    },
    {
        "id": "t3",
        "title": "Medication Reminder",
        "icon": "💊",
        "description": "Never miss a dose",
        "category": "health",
        "voiceCommand": "set medication reminder",
    },
    {
        "id": "t4",
        "title": "Control Lights",
        "icon": "💡",
        "description": "Smart home controls",
        "category": "home",
        "voiceCommand": "turn off the lights",
    },
    {
        "id": "t5",
        "title": "Privacy Dashboard",
        "icon": "🛡️",
        "description": "Manage your data",
        "category": "privacy",
        "voiceCommand": "show privacy settings",
    },
    {
        "id": "t6",
        "title": "Evening Routine",
        "icon": "🌙",
        "description": "Wind down for the night",
        "category": "routine",
        "voiceCommand": "start evening routine",
    },
)

# ------------------------------------------------------------------
# Intent tables used to derive history entry fields
# ------------------------------------------------------------------

INTENT_UTTERANCES: dict[str, str] = {
    "OPEN_HUB": '"Alexa, open everyday tasks hub"',
    "LAUNCH": '"Alexa, open everyday tasks hub"',
    "MORNING_ROUTINE": '"Start my morning routine"',
    "MORNING_ROUTINE_STARTED": '"Start my morning routine"',
    "EVENING_ROUTINE": '"Start my evening routine"',
    "EVENING_ROUTINE_STARTED": '"Start my evening routine"',
    "ADD_ITEM": '"Add [item] to grocery list"',
    "ADD_GROCERY_ITEM_REQUESTED": '"Add [item] to grocery list"',
    "ADD_GROCERY_ITEM_CONFIRMED": '"Yes" (confirmed adding item)',
    "CONFIRM_ITEM": '"Yes" (confirmed)',
    "VIEW_GROCERY_LIST": '"Show my grocery list"',
    "CLEAR_GROCERY_LIST": '"Clear grocery list"',
    "SHOW_PRIVACY": '"Show privacy settings"',
    "TOGGLE_MICROPHONE": '"Turn microphone off/on"',
    "TOGGLE_HISTORY": '"Toggle voice history"',
    "DELETE_HISTORY": '"Delete my voice history"',
    "LIGHTS_ON": '"Turn on the lights"',
    "LIGHTS_OFF": '"Turn off the lights"',
    "SET_PROFILE": '"Call me [name]"',
    "HELP": '"Help"',
    "STOP": '"Stop"',
    "CANCEL": '"Cancel"',
}

INTENT_CATEGORIES: dict[str, str] = {
    "OPEN_HUB": "general",
    "LAUNCH": "general",
    "MORNING_ROUTINE": "routine",
    "MORNING_ROUTINE_STARTED": "routine",
    "EVENING_ROUTINE": "routine",
    "EVENING_ROUTINE_STARTED": "routine",
    "ADD_ITEM": "grocery",
    "ADD_GROCERY_ITEM_REQUESTED": "grocery",
    "ADD_GROCERY_ITEM_CONFIRMED": "grocery",
    "CONFIRM_ITEM": "grocery",
    "VIEW_GROCERY_LIST": "grocery",
    "CLEAR_GROCERY_LIST": "grocery",
    "SHOW_PRIVACY": "privacy",
    "TOGGLE_MICROPHONE": "privacy",
    "TOGGLE_HISTORY": "privacy",
    "DELETE_HISTORY": "privacy",
    "LIGHTS_ON": "home",
    "LIGHTS_OFF": "home",
    "SET_PROFILE": "profile",
    "HELP": "general",
    "STOP": "general",
    "CANCEL": "general",
}

# ------------------------------------------------------------------
# Avatar vocabulary. Order matters: first matching row wins.
# ------------------------------------------------------------------

DEFAULT_AVATAR = "👤"
PARENT_AVATAR = "👩"

AVATAR_KEYWORDS: tuple[tuple[tuple[str, ...], str], ...] = (
    (("mom", "mother", "mama"), PARENT_AVATAR),
    (("dad", "father", "papa"), "👨"),
    (("kid", "child", "son"), "👦"),
    (("daughter", "girl"), "👧"),
    (("grandma", "grandmother"), "👵"),
    (("grandpa", "grandfather"), "👴"),
    (("student",), "🧑‍🎓"),
)


def utterance_for_intent(intent: str | None) -> str:
    """Describe what the user most likely said for *intent*.

    Unknown intents are echoed back in quotes; a missing intent yields a
    generic label.
    """
    if intent and intent in INTENT_UTTERANCES:
        return INTENT_UTTERANCES[intent]
    return f'"{intent or "Voice command"}"'


def category_for_intent(intent: str | None) -> str:
    """Map *intent* to a history category, ``general`` when unmapped."""
    if not intent:
        return GENERAL_CATEGORY
    return INTENT_CATEGORIES.get(intent, GENERAL_CATEGORY)


def avatar_for_name(name: str) -> str:
    """Pick an avatar emoji for a display *name* (case-insensitive substring match)."""
    lowered = name.lower()
    for keywords, avatar in AVATAR_KEYWORDS:
        if any(keyword in lowered for keyword in keywords):
            return avatar
    return DEFAULT_AVATAR
