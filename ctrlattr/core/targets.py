"""Target types addressable from an attribute string."""

from __future__ import annotations

from enum import IntEnum


class TargetType(IntEnum):
    X_SCREEN = 0
    GPU = 1
    FRAMELOCK = 2
    VCSC = 3
    GVI = 4
    COOLER = 5
    THERMAL_SENSOR = 6
    SVP = 7
    DISPLAY = 8


_TARGET_KEYWORDS: dict[str, TargetType] = {
    "screen": TargetType.X_SCREEN,
    "xscreen": TargetType.X_SCREEN,
    "x-screen": TargetType.X_SCREEN,
    "gpu": TargetType.GPU,
    "framelock": TargetType.FRAMELOCK,
    "vcs": TargetType.VCSC,
    "vcsc": TargetType.VCSC,
    "gvi": TargetType.GVI,
    "fan": TargetType.COOLER,
    "cooler": TargetType.COOLER,
    "thermalsensor": TargetType.THERMAL_SENSOR,
    "thermal-sensor": TargetType.THERMAL_SENSOR,
    "svp": TargetType.SVP,
    "dpy": TargetType.DISPLAY,
    "display": TargetType.DISPLAY,
}


def target_type_by_name(name: str) -> TargetType | None:
    return _TARGET_KEYWORDS.get(name.strip().lower())


def target_keywords() -> tuple[str, ...]:
    return tuple(_TARGET_KEYWORDS)


def standardize_screen_name(display_name: str | None, screen: int) -> str | None:
    """Return ``host:display.screen`` for ``display_name`` with ``screen`` substituted.

    Any screen already present in ``display_name`` is replaced. Returns
    ``None`` when the name has no ``:`` (it is not an X display name).
    A negative ``screen`` strips the screen suffix.
    """
    if not display_name:
        return None
    colon = display_name.rfind(":")
    if colon < 0:
        return None

    dot = display_name.find(".", colon)
    base = display_name if dot < 0 else display_name[:dot]
    if screen < 0:
        return base
    return f"{base}.{screen}"
