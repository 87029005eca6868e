# common/colors.py
from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Hashable, Iterable, List, Mapping, Optional
import colorsys

from clubstats.common.constants import (
    BG_LIGHTNESS, BG_SATURATION, BORDER_LIGHTNESS, BORDER_SATURATION,
    FALLBACK_COLOR, FOREGROUND, GOLDEN_ANGLE,
)


@dataclass(frozen=True)
class KeyColor:
    """Badge colors for one date or club key (CSS hsl strings plus hex equivalents)."""
    hue: float
    bg: str
    border: str
    fg: str
    bg_hex: str
    border_hex: str


# -------------------- Simple color math --------------------
def _hsl_to_hex(h: float, s: float, l: float) -> str:
    """h in degrees, s/l in percent."""
    r, g, b = colorsys.hls_to_rgb((h % 360) / 360.0, l / 100.0, s / 100.0)
    return "#{:02X}{:02X}{:02X}".format(round(r * 255), round(g * 255), round(b * 255))


def _css_hsl(h: float, s: float, l: float) -> str:
    return f"hsl({h:.3f} {s}% {l}%)"


def hue_for(index: int) -> float:
    """Golden-angle stepping: successive hues land far apart on the wheel."""
    return (index * GOLDEN_ANGLE) % 360


def unique_keys(keys: Iterable[Hashable], date_keys: bool = True) -> List[str]:
    """
    First-seen unique keys as strings. Date keys are truncated to 'YYYY-MM-DD'
    so ISO timestamps of the same day collapse onto one key.
    """
    seen = set()
    uniq: List[str] = []
    for k in keys:
        if k is None:
            continue
        key = str(k)[:10] if date_keys else str(k)
        if key not in seen:
            seen.add(key)
            uniq.append(key)
    return uniq


# -------------------- Public API --------------------
def colors_for(keys: Iterable[Hashable], date_keys: bool = True) -> Dict[str, KeyColor]:
    """
    Assign a color triple to each distinct key, in first-seen order.

    The result depends only on the ordered key list: appending keys never
    changes the colors of the keys already present. Callers must pass keys in
    a stable order (not re-sorted per render), or colors will appear to jump.
    """
    out: Dict[str, KeyColor] = {}
    for i, key in enumerate(unique_keys(keys, date_keys=date_keys)):
        h = hue_for(i)
        out[key] = KeyColor(
            hue=h,
            bg=_css_hsl(h, BG_SATURATION, BG_LIGHTNESS),
            border=_css_hsl(h, BORDER_SATURATION, BORDER_LIGHTNESS),
            fg=FOREGROUND,
            bg_hex=_hsl_to_hex(h, BG_SATURATION, BG_LIGHTNESS),
            border_hex=_hsl_to_hex(h, BORDER_SATURATION, BORDER_LIGHTNESS),
        )
    return out


def color_of(assignment: Mapping[str, KeyColor], key: Optional[Hashable], date_keys: bool = True) -> Dict[str, str]:
    """{'bg','border','fg'} for a key; the neutral gray badge when it is unknown."""
    if key is None:
        return dict(FALLBACK_COLOR)
    k = str(key)[:10] if date_keys else str(key)
    c = assignment.get(k)
    if c is None:
        return dict(FALLBACK_COLOR)
    return {"bg": c.bg, "border": c.border, "fg": c.fg}
