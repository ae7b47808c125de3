from __future__ import annotations

import logging
from typing import Any, Dict

from django.db import transaction

from .models import SiteSetting, SoundEffect

logger = logging.getLogger(__name__)

SMASH_EFFECTS = ("fade", "image")

DEFAULT_SETTINGS: Dict[str, str] = {
    "egg_count": "6",
    "egg_image": "/images/egg.png",
    "egg_smashed_image": "/images/egg-smashed.png",
    "egg_smash_effect": "fade",
}

# Request field -> SiteSetting key
_FIELD_KEYS = {
    "eggCount": "egg_count",
    "eggImage": "egg_image",
    "eggSmashedImage": "egg_smashed_image",
    "eggSmashEffect": "egg_smash_effect",
}

DEFAULT_SOUNDS: Dict[str, Dict[str, str]] = {
    "hit": {"type": "hit", "name": "默认敲击音效", "url": "/audio/hit.mp3"},
    "win": {"type": "win", "name": "默认中奖音效", "url": "/audio/win.mp3"},
}


class ConfigError(Exception):
    """Raised when a configuration update carries an invalid value."""


def _egg_count(raw: str) -> int:
    try:
        value = int(raw)
    except (TypeError, ValueError):
        return int(DEFAULT_SETTINGS["egg_count"])
    return value if value > 0 else int(DEFAULT_SETTINGS["egg_count"])


def load_egg_config() -> Dict[str, Any]:
    """Return the egg configuration, filling missing keys with defaults."""

    stored = dict(
        SiteSetting.objects.filter(key__in=DEFAULT_SETTINGS).values_list("key", "value")
    )
    values = {**DEFAULT_SETTINGS, **stored}
    return {
        "eggCount": _egg_count(values["egg_count"]),
        "eggImage": values["egg_image"] or DEFAULT_SETTINGS["egg_image"],
        "eggSmashedImage": values["egg_smashed_image"] or DEFAULT_SETTINGS["egg_smashed_image"],
        "eggSmashEffect": values["egg_smash_effect"] or DEFAULT_SETTINGS["egg_smash_effect"],
    }


def _clean(field: str, value: Any) -> str:
    if field == "eggCount":
        if isinstance(value, bool) or (isinstance(value, float) and not value.is_integer()):
            raise ConfigError("eggCount must be a positive integer.")
        try:
            count = int(value)
        except (TypeError, ValueError):
            raise ConfigError("eggCount must be a positive integer.") from None
        if count < 1:
            raise ConfigError("eggCount must be a positive integer.")
        return str(count)
    if not isinstance(value, str) or not value.strip():
        raise ConfigError(f"{field} must be a non-empty string.")
    value = value.strip()
    if field == "eggSmashEffect" and value not in SMASH_EFFECTS:
        raise ConfigError(f"eggSmashEffect must be one of {', '.join(SMASH_EFFECTS)}.")
    return value


def update_egg_config(changes: Dict[str, Any]) -> Dict[str, Any]:
    """Apply the recognised fields of ``changes`` and return the new config.

    All fields are validated before anything is written.
    """

    cleaned = {
        _FIELD_KEYS[field]: _clean(field, value)
        for field, value in changes.items()
        if field in _FIELD_KEYS
    }
    with transaction.atomic():
        for key, value in cleaned.items():
            SiteSetting.objects.update_or_create(key=key, defaults={"value": value})
    if cleaned:
        logger.info("Egg configuration updated: %s", ", ".join(sorted(cleaned)))
    return load_egg_config()


def activate_sound(sound_id: int) -> SoundEffect:
    """Make ``sound_id`` the only active sound of its type."""

    with transaction.atomic():
        sound = SoundEffect.objects.select_for_update().get(id=sound_id)
        SoundEffect.objects.filter(type=sound.type, is_active=True).exclude(
            id=sound.id
        ).update(is_active=False)
        if not sound.is_active:
            sound.is_active = True
            sound.save(update_fields=["is_active"])
    logger.info("Sound %s activated for %s.", sound.id, sound.type)
    return sound


def active_sounds() -> Dict[str, Dict[str, str]]:
    """Return the active sound per type, falling back to the built-in clips."""

    result: Dict[str, Dict[str, str]] = {}
    for sound in SoundEffect.objects.filter(is_active=True).order_by("-created_at", "-id"):
        result.setdefault(sound.type, sound.to_payload())
    for sound_type, default in DEFAULT_SOUNDS.items():
        result.setdefault(sound_type, dict(default))
    return result
