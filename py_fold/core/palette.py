"""
Palette generation.

Colours come from a 13-colour CGA set (brown and greys removed). A palette
starts with a value-committed ground, picks one contrast relationship and
derives the mark and an optional accent from it. Gradient pieces keep one
role as pure CGA and shift the others through web-safe colour space.
"""

import math
from dataclasses import dataclass, replace
from enum import Enum
from typing import Dict, List, NamedTuple, Optional, Sequence

import structlog

from ..utils.random import (
    DERIVE_ACCENT_OFFSET,
    DERIVE_BACKGROUND_OFFSET,
    DERIVE_TEXT_OFFSET,
    GRADIENT_ANCHOR_OFFSET,
    GRADIENT_MODE_OFFSET,
    MULTI_COLOR_ENABLED_OFFSET,
    MULTI_COLOR_PALETTE_OFFSET,
    PALETTE_OFFSET,
    make_stream,
)
from . import fdlibm

logger = structlog.get_logger()


class CGAColor(NamedTuple):
    """A palette entry with its perceptual tags."""

    hex: str
    name: str
    luminance: int  # 0-100
    temperature: str  # warm, cool or neutral
    r: int
    g: int
    b: int


CGA_PALETTE = [
    # Darks
    CGAColor("#000000", "black", 0, "neutral", 0, 0, 0),
    CGAColor("#0000AA", "blue", 10, "cool", 0, 0, 170),
    CGAColor("#AA0000", "red", 20, "warm", 170, 0, 0),
    CGAColor("#AA00AA", "magenta", 25, "warm", 170, 0, 170),
    # Lights
    CGAColor("#FFFFFF", "white", 100, "neutral", 255, 255, 255),
    CGAColor("#FFFF55", "yellow", 93, "warm", 255, 255, 85),
    CGAColor("#55FFFF", "lightCyan", 85, "cool", 85, 255, 255),
    CGAColor("#55FF55", "lightGreen", 77, "cool", 85, 255, 85),
    # Mids, marks only
    CGAColor("#00AA00", "green", 30, "cool", 0, 170, 0),
    CGAColor("#00AAAA", "cyan", 40, "cool", 0, 170, 170),
    CGAColor("#5555FF", "lightBlue", 45, "cool", 85, 85, 255),
    CGAColor("#FF5555", "lightRed", 45, "warm", 255, 85, 85),
    CGAColor("#FF55FF", "lightMagenta", 60, "warm", 255, 85, 255),
]

COLORS_BY_NAME: Dict[str, CGAColor] = {c.name: c for c in CGA_PALETTE}
BLACK = COLORS_BY_NAME["black"]
WHITE = COLORS_BY_NAME["white"]

GROUND_POOL = [c for c in CGA_PALETTE if c.luminance < 30 or c.luminance > 70]
MARK_POOL = CGA_PALETTE
ACCENT_POOL = [c for c in CGA_PALETTE if c.temperature != "neutral"]
CHROMATIC_POOL = ACCENT_POOL

PALETTE_BY_TEMPERATURE: Dict[str, List[CGAColor]] = {
    temp: [c for c in CGA_PALETTE if c.temperature == temp]
    for temp in ("warm", "cool", "neutral")
}

GROUND_WEIGHTS = {
    "black": 0.2,
    "white": 0.15,
    "blue": 0.15,
    "red": 0.15,
    "magenta": 0.1,
    "yellow": 0.1,
    "lightCyan": 0.08,
    "lightGreen": 0.07,
}

COMPLEMENT_PAIRS = {
    "red": ["cyan", "lightCyan"],
    "magenta": ["green", "lightGreen"],
    "blue": ["yellow"],
    "lightRed": ["cyan", "lightCyan"],
    "lightMagenta": ["green", "lightGreen"],
    "lightBlue": ["yellow"],
    "cyan": ["red", "lightRed"],
    "lightCyan": ["red", "lightRed"],
    "green": ["magenta", "lightMagenta"],
    "lightGreen": ["magenta", "lightMagenta"],
    "yellow": ["blue", "lightBlue"],
    "black": ["white", "yellow", "lightCyan"],
    "white": ["black", "blue", "magenta"],
}

HOT_ACCENTS = ["yellow", "lightCyan", "lightMagenta", "lightGreen"]

MIN_MARK_CONTRAST = 25
FALLBACK_ACCENT = "#FFFF55"

WEB_SAFE_VALUES = [0x00, 0x33, 0x66, 0x99, 0xCC, 0xFF]
WEB_SAFE_STEP = 0x33
GRADIENT_LEVEL_STEPS = [0.25, 0.5, 0.75, 1.0]

GRADIENT_MAX_PROBABILITY = 0.35
GRADIENT_FLOOR_PROBABILITY = 0.08
GRADIENT_DECAY = 0.03


class ContrastType(str, Enum):
    VALUE = "value"
    TEMPERATURE = "temperature"
    COMPLEMENT = "complement"
    CLASH = "clash"


class AnchorType(str, Enum):
    """Role that stays pure CGA in a gradient palette."""

    BACKGROUND = "background"
    TEXT = "text"
    ACCENT = "accent"


class ColorRole(str, Enum):
    BACKGROUND = "background"
    TEXT = "text"
    ACCENT = "accent"


ROLE_OFFSETS = {
    ColorRole.BACKGROUND: DERIVE_BACKGROUND_OFFSET,
    ColorRole.TEXT: DERIVE_TEXT_OFFSET,
    ColorRole.ACCENT: DERIVE_ACCENT_OFFSET,
}


@dataclass(frozen=True)
class Palette:
    """Resolved colours of a composition."""

    bg: str
    text: str
    accent: str
    strategy: str
    color_count: int
    anchor_type: Optional[AnchorType] = None
    cga_bg: Optional[str] = None
    cga_text: Optional[str] = None
    cga_accent: Optional[str] = None
    level_colors: Optional[List[str]] = None

    @property
    def is_gradient(self) -> bool:
        return self.anchor_type is not None


def js_round(value: float) -> int:
    """Round half up, as browsers do."""
    return math.floor(value + 0.5)


def pick_random(rng, items: Sequence):
    return items[math.floor(rng() * len(items))]


def pick_weighted(rng, pool: Sequence[CGAColor], weights: Dict[str, float]) -> CGAColor:
    """Cumulative pick; the last colour absorbs rounding slack."""
    roll = rng()
    cumulative = 0
    for color in pool:
        cumulative += weights.get(color.name, 0)
        if roll < cumulative:
            return color
    return pool[-1]


def find_cga_color(hex_color: str) -> CGAColor:
    """Palette entry for a hex string, black when it is not a CGA colour."""
    upper = hex_color.upper()
    for color in CGA_PALETTE:
        if color.hex == upper:
            return color
    return CGA_PALETTE[0]


def has_good_contrast(c1: CGAColor, c2: CGAColor, min_ratio: float = 4.5) -> bool:
    l1 = c1.luminance / 100
    l2 = c2.luminance / 100
    lighter = max(l1, l2) + 0.05
    darker = min(l1, l2) + 0.05
    return lighter / darker >= min_ratio


def _value_candidates(ground: CGAColor) -> List[CGAColor]:
    if ground.luminance < 50:
        return [c for c in MARK_POOL if c.luminance > 60]
    return [c for c in MARK_POOL if c.luminance < 40]


def derive_mark(ground: CGAColor, contrast_type: ContrastType, rng) -> CGAColor:
    """
    Mark colour answering the ground under one contrast relationship.

    Candidates are ordered by luminance distance from the ground, strongest
    first, before the random pick.
    """
    if contrast_type == ContrastType.VALUE:
        candidates = _value_candidates(ground)
    elif contrast_type == ContrastType.TEMPERATURE:
        if ground.temperature == "neutral":
            candidates = [
                c for c in MARK_POOL
                if c.temperature != "neutral"
                and abs(c.luminance - ground.luminance) > MIN_MARK_CONTRAST
            ]
        else:
            target = "cool" if ground.temperature == "warm" else "warm"
            candidates = [
                c for c in MARK_POOL
                if c.temperature == target
                and abs(c.luminance - ground.luminance) > MIN_MARK_CONTRAST
            ]
    elif contrast_type == ContrastType.COMPLEMENT:
        complements = COMPLEMENT_PAIRS.get(ground.name, [])
        candidates = [c for c in MARK_POOL if c.name in complements]
        if not candidates:
            candidates = _value_candidates(ground)
    elif contrast_type == ContrastType.CLASH:
        candidates = [
            c for c in MARK_POOL
            if c.name != ground.name and 20 < abs(c.luminance - ground.luminance) < 50
        ]
    else:
        raise ValueError(f"Unknown contrast type: {contrast_type}")

    candidates.sort(key=lambda c: abs(c.luminance - ground.luminance), reverse=True)

    if candidates:
        return pick_random(rng, candidates)

    return WHITE if ground.luminance < 50 else BLACK


def derive_accent(ground: CGAColor, mark: CGAColor, rng) -> CGAColor:
    """Optional third colour; 40% of palettes reuse the mark."""
    if rng() < 0.4:
        return mark

    candidates = [
        c for c in ACCENT_POOL
        if c.name != ground.name
        and c.name != mark.name
        and abs(c.luminance - ground.luminance) > 20
    ]
    if not candidates:
        return mark

    hot = [c for c in candidates if c.name in HOT_ACCENTS]
    if hot and rng() < 0.6:
        return pick_random(rng, hot)
    return pick_random(rng, candidates)


def generate_monochrome(rng) -> Palette:
    """One chromatic key colour on a black or white ground."""
    key = pick_random(rng, CHROMATIC_POOL)

    if key.luminance > 50:
        ground = BLACK
    elif key.luminance < 30:
        ground = BLACK if rng() < 0.75 else WHITE
    else:
        ground = BLACK if rng() < 0.6 else WHITE

    return Palette(
        bg=ground.hex,
        text=key.hex,
        accent=key.hex,
        strategy=f"monochrome/{key.name}",
        color_count=2,
    )


def generate_palette(seed: int) -> Palette:
    """
    Draw the CGA palette for a seed.

    Returns:
        Palette whose strategy is the contrast type or ``monochrome/<key>``
    """
    rng = make_stream(seed, PALETTE_OFFSET)

    if rng() < 0.12:
        return generate_monochrome(rng)

    ground = pick_weighted(rng, GROUND_POOL, GROUND_WEIGHTS)

    roll = rng()
    if roll < 0.4:
        contrast_type = ContrastType.VALUE
    elif roll < 0.68:
        contrast_type = ContrastType.TEMPERATURE
    elif roll < 0.9:
        contrast_type = ContrastType.COMPLEMENT
    else:
        contrast_type = ContrastType.CLASH

    mark = derive_mark(ground, contrast_type, rng)
    accent = derive_accent(ground, mark, rng)
    color_count = 2 if accent.hex == mark.hex else 3

    if abs(ground.luminance - mark.luminance) < MIN_MARK_CONTRAST:
        # Strategy and colour count stay as drawn
        dark_ground = ground.luminance < 50
        return Palette(
            bg=BLACK.hex if dark_ground else WHITE.hex,
            text=WHITE.hex if dark_ground else BLACK.hex,
            accent=FALLBACK_ACCENT,
            strategy=contrast_type.value,
            color_count=color_count,
        )

    return Palette(
        bg=ground.hex,
        text=mark.hex,
        accent=accent.hex,
        strategy=contrast_type.value,
        color_count=color_count,
    )


# ---------------------------------------------------------------- multi-colour


def generate_multi_color_enabled(seed: int) -> bool:
    return make_stream(seed, MULTI_COLOR_ENABLED_OFFSET)() < 0.25


def interpolate_by_luminance(start: CGAColor, end: CGAColor, steps: int) -> List[CGAColor]:
    """Closest-luminance walk from start to end within start's temperature."""
    candidates = [
        c for c in CGA_PALETTE
        if c.temperature == start.temperature or c.temperature == "neutral"
    ]
    path = []
    for i in range(steps):
        t = i / (steps - 1)
        target = start.luminance + (end.luminance - start.luminance) * t
        closest = candidates[0]
        closest_dist = abs(closest.luminance - target)
        for c in candidates:
            dist = abs(c.luminance - target)
            if dist < closest_dist:
                closest_dist = dist
                closest = c
        path.append(closest)
    return path


def generate_multi_color_palette(seed: int, bg_color: str, text_color: str) -> List[str]:
    """
    Four CGA level colours, lightest mark first.

    Half of the seeds walk luminance from background to text; the rest
    combine same- and opposite-temperature colours that stand out against
    the background.
    """
    rng = make_stream(seed, MULTI_COLOR_PALETTE_OFFSET)

    bg = find_cga_color(bg_color)
    text = find_cga_color(text_color)
    light_bg = bg.luminance > 50

    def by_luminance(colors):
        return sorted(colors, key=lambda c: c.luminance, reverse=light_bg)

    if rng() < 0.5:
        path = interpolate_by_luminance(bg, text, 6)
        return [
            path[0].hex,
            path[math.floor(len(path) * 0.33)].hex,
            path[math.floor(len(path) * 0.66)].hex,
            path[-1].hex,
        ]

    text_temp = text.temperature
    opposite_temp = "cool" if text_temp == "warm" else "warm"

    same = by_luminance(
        c for c in PALETTE_BY_TEMPERATURE[text_temp] if has_good_contrast(bg, c, 2.0)
    )
    opposite = by_luminance(
        c for c in PALETTE_BY_TEMPERATURE[opposite_temp] if has_good_contrast(bg, c, 2.0)
    )

    colors = []
    used = set()

    if same:
        colors.append(same[0].hex)
        used.add(same[0].hex)
    else:
        colors.append(text.hex)
        used.add(text.hex)

    mid1 = [c for c in same if c.hex not in used]
    if mid1:
        pick = mid1[math.floor(len(mid1) * 0.4)]
        colors.append(pick.hex)
        used.add(pick.hex)
    else:
        colors.append(text.hex)

    mid2 = [c for c in opposite if c.hex not in used]
    if mid2:
        pick = mid2[math.floor(len(mid2) * 0.5)]
        colors.append(pick.hex)
        used.add(pick.hex)
    else:
        colors.append(text.hex)

    remaining = by_luminance(c for c in same + opposite if c.hex not in used)
    colors.append(remaining[-1].hex if remaining else text.hex)

    return colors


# -------------------------------------------------------------- gradient mode


def gradient_probability(crease_count: int) -> float:
    """Chance of gradient mode, decaying from 35% towards 8% with density."""
    return GRADIENT_FLOOR_PROBABILITY + (
        GRADIENT_MAX_PROBABILITY - GRADIENT_FLOOR_PROBABILITY
    ) * fdlibm.exp(-GRADIENT_DECAY * crease_count)


def generate_gradient_mode(seed: int, crease_count: int = 0) -> bool:
    rng = make_stream(seed, GRADIENT_MODE_OFFSET)
    return rng() < gradient_probability(crease_count)


def generate_anchor_type(seed: int) -> AnchorType:
    roll = make_stream(seed, GRADIENT_ANCHOR_OFFSET)()
    if roll < 0.5:
        return AnchorType.BACKGROUND
    if roll < 0.85:
        return AnchorType.TEXT
    return AnchorType.ACCENT


def snap_to_web_safe(value: float) -> int:
    """Nearest web-safe channel value; ties go to the darker one."""
    closest = WEB_SAFE_VALUES[0]
    min_dist = abs(value - closest)
    for candidate in WEB_SAFE_VALUES:
        dist = abs(value - candidate)
        if dist < min_dist:
            min_dist = dist
            closest = candidate
    return closest


def rgb_to_web_safe_hex(r: float, g: float, b: float) -> str:
    return "#{:02X}{:02X}{:02X}".format(
        snap_to_web_safe(r), snap_to_web_safe(g), snap_to_web_safe(b)
    )


def hex_to_rgb(hex_color: str):
    h = hex_color.replace("#", "")
    return int(h[0:2], 16), int(h[2:4], 16), int(h[4:6], 16)


def luminance_from_hex(hex_color: str) -> float:
    """Relative luminance in [0, 1]."""
    r, g, b = hex_to_rgb(hex_color)
    return (0.299 * r + 0.587 * g + 0.114 * b) / 255


def shift_toward_web_safe(hex_color: str, direction: int, steps: int) -> str:
    """
    Shift every channel by ``steps`` web-safe increments.

    Args:
        hex_color: Source colour
        direction: 1 towards white, -1 towards black
        steps: Number of 0x33 increments

    Returns:
        Web-safe hex colour
    """
    r, g, b = hex_to_rgb(hex_color)
    shift = direction * steps * WEB_SAFE_STEP
    return rgb_to_web_safe_hex(
        max(0, min(255, r + shift)),
        max(0, min(255, g + shift)),
        max(0, min(255, b + shift)),
    )


def derive_web_safe_color(seed: int, cga_color: str, anchor_color: str, role) -> str:
    """
    Derive a softened colour for one role from its CGA colour.

    Background and text derivations that end up too close in luminance to
    the anchor retry once in the opposite direction with one more step and
    keep whichever contrasts more.
    """
    role = ColorRole(role)
    rng = make_stream(seed, ROLE_OFFSETS[role])

    color_lum = luminance_from_hex(cga_color)
    anchor_lum = luminance_from_hex(anchor_color)

    if role == ColorRole.BACKGROUND:
        if color_lum < 0.3:
            direction = 1 if rng() < 0.75 else -1
        elif color_lum > 0.7:
            direction = -1 if rng() < 0.75 else 1
        else:
            direction = 1 if rng() < 0.5 else -1
    elif role == ColorRole.TEXT:
        if anchor_lum < 0.4:
            direction = (-1 if rng() < 0.6 else 1) if color_lum > 0.5 else 1
        else:
            direction = (1 if rng() < 0.6 else -1) if color_lum < 0.5 else -1
    else:
        direction = 1 if rng() < 0.5 else -1

    step_roll = rng()
    if step_roll < 0.5:
        steps = 1
    elif step_roll < 0.85:
        steps = 2
    else:
        steps = 3

    derived = shift_toward_web_safe(cga_color, direction, steps)
    contrast = abs(luminance_from_hex(derived) - anchor_lum)

    if role != ColorRole.ACCENT and contrast < 0.2:
        opposite = shift_toward_web_safe(cga_color, -direction, steps + 1)
        if abs(luminance_from_hex(opposite) - anchor_lum) > contrast:
            return opposite

    return derived


def build_gradient_palette(seed: int, cga_palette: Palette, anchor_type) -> Palette:
    """Keep the anchor role pure CGA and derive the other two."""
    anchor_type = AnchorType(anchor_type)
    bg, text, accent = cga_palette.bg, cga_palette.text, cga_palette.accent

    if anchor_type == AnchorType.BACKGROUND:
        text = derive_web_safe_color(seed, cga_palette.text, cga_palette.bg, ColorRole.TEXT)
        accent = derive_web_safe_color(
            seed + 1, cga_palette.accent, cga_palette.bg, ColorRole.ACCENT
        )
    elif anchor_type == AnchorType.TEXT:
        bg = derive_web_safe_color(seed, cga_palette.bg, cga_palette.text, ColorRole.BACKGROUND)
        accent = derive_web_safe_color(
            seed + 1, cga_palette.accent, cga_palette.text, ColorRole.ACCENT
        )
    else:
        bg = derive_web_safe_color(
            seed, cga_palette.bg, cga_palette.accent, ColorRole.BACKGROUND
        )
        # Text contrasts against the derived background
        text = derive_web_safe_color(seed + 1, cga_palette.text, bg, ColorRole.TEXT)

    return replace(
        cga_palette,
        bg=bg,
        text=text,
        accent=accent,
        anchor_type=anchor_type,
        cga_bg=cga_palette.bg,
        cga_text=cga_palette.text,
        cga_accent=cga_palette.accent,
    )


def generate_web_safe_gradient_palette(bg_color: str, text_color: str) -> List[str]:
    """Four web-safe level colours at 25/50/75/100% from background to text."""
    bg = hex_to_rgb(bg_color)
    text = hex_to_rgb(text_color)
    colors = []
    for t in GRADIENT_LEVEL_STEPS:
        channels = [js_round(b + (m - b) * t) for b, m in zip(bg, text)]
        colors.append(rgb_to_web_safe_hex(*channels))
    return colors


def resolve_palette(seed: int, crease_count: int) -> Palette:
    """
    Final palette of a composition.

    Gradient mode wins over multi-colour; each attaches its own level
    colours, plain palettes have none.

    Returns:
        Palette
    """
    cga = generate_palette(seed)

    if generate_gradient_mode(seed, crease_count):
        anchor_type = generate_anchor_type(seed)
        palette = build_gradient_palette(seed, cga, anchor_type)
        palette = replace(
            palette,
            level_colors=generate_web_safe_gradient_palette(palette.bg, palette.text),
        )
    elif generate_multi_color_enabled(seed):
        palette = replace(
            cga, level_colors=generate_multi_color_palette(seed, cga.bg, cga.text)
        )
    else:
        palette = cga

    logger.debug(
        "Palette resolved",
        seed=seed,
        strategy=palette.strategy,
        gradient=palette.is_gradient,
        multi_color=palette.level_colors is not None and not palette.is_gradient,
    )
    return palette
