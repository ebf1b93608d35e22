"""Animation catalog understood by the avatar renderer."""

from __future__ import annotations

from streamhost.errors import ValidationError

IDLE = ("idle", "idle-2", "idle_basic", "idle_dwarf", "offensive_idle")
HEAD = (
    "acknowledging",
    "hard_head_nod",
    "head_nod_yes",
    "lengthy_head_nod",
    "sarcastic_head_nod",
    "shaking_head_no",
    "thoughtful_head_shake",
    "annoyed_head_shake",
)
GESTURES = (
    "angry_gesture",
    "being_cocky",
    "dismissing_gesture",
    "happy_hand_gesture",
    "look_away_gesture",
    "relieved_sigh",
    "standing_clap",
)
DANCING = ("dancing_twerk", "hip_hop_dancing", "rumba_dancing", "silly_dancing", "capoeira")
# Not loaded on every scene, so never offered or accepted.
SITTING = ("sitting", "sitting_disbelief", "sitting_legs_swinging", "sitting_yell")
SPECIAL = (
    "appearing",
    "floating",
    "joyful_jump",
    "laughing",
    "super_excited",
    "walk_with_rifle",
    "weight_shift",
)

ALL_ANIMATIONS: tuple[str, ...] = IDLE + HEAD + GESTURES + DANCING + SPECIAL
# Offered for standalone and thank-you animations.
EXPRESSIVE_ANIMATIONS: tuple[str, ...] = DANCING + SPECIAL


def normalize_animation(value: str | None) -> str:
    return (value or "").strip().strip("\"'`.").strip().lower()


def validate_animation(value: str | None) -> str:
    """Return the normalized name, or raise ValidationError if uncataloged."""
    name = normalize_animation(value)
    if name not in ALL_ANIMATIONS:
        raise ValidationError(f"Unknown animation: {name!r}")
    return name


def catalog_or_none(value: str | None) -> str | None:
    name = normalize_animation(value)
    return name if name in ALL_ANIMATIONS else None
