"""Colour primitives: canonical hex colours, HSL, Lab, deltaE and WCAG contrast.

Every colour that passes through the engine is round-tripped through a
canonical lowercase `#rrggbb` string. Equality is defined on that string.
HSL and Lab are derived on demand and never stored.

Lab uses the D65 white point and the sRGB matrices; deltaE is CIEDE2000.
Contrast follows the WCAG 2 relative luminance formula.
"""

from __future__ import annotations

import colorsys
import math
import re
from dataclasses import dataclass

WCAG_AA = 4.5
WCAG_AAA = 7.0

# D65 reference white
_XN, _YN, _ZN = 0.950470, 1.0, 1.088830
_T0 = 4 / 29
_T1 = 6 / 29
_T2 = 3 * _T1 * _T1
_T3 = _T1 * _T1 * _T1

_HEX_RE = re.compile(r'^#?([0-9a-fA-F]{3}|[0-9a-fA-F]{6})$')


def hex_to_rgb(value: str) -> tuple[int, int, int]:
    """Parse '#rrggbb' / '#rgb' (hash optional, any case). Raises ValueError."""
    m = _HEX_RE.match(value.strip()) if isinstance(value, str) else None
    if not m:
        raise ValueError(f'Invalid hex colour: {value!r}')
    digits = m.group(1)
    if len(digits) == 3:
        digits = ''.join(c * 2 for c in digits)
    return (int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16))


def rgb_to_hex(r: int, g: int, b: int) -> str:
    return f'#{r:02x}{g:02x}{b:02x}'


@dataclass(frozen=True)
class Color:
    """An sRGB colour identified by its canonical hex string."""

    hex: str

    @classmethod
    def from_rgb(cls, r: int, g: int, b: int) -> Color:
        return cls(rgb_to_hex(_clip(r), _clip(g), _clip(b)))

    @classmethod
    def parse(cls, value: str | Color) -> Color:
        if isinstance(value, Color):
            return value
        return cls(rgb_to_hex(*hex_to_rgb(value)))

    @property
    def rgb(self) -> tuple[int, int, int]:
        return hex_to_rgb(self.hex)

    def hsl(self) -> tuple[float, float, float]:
        """Hue in degrees [0, 360), saturation and lightness in [0, 1]. Greys have hue 0."""
        r, g, b = self.rgb
        h, lightness, s = colorsys.rgb_to_hls(r / 255, g / 255, b / 255)
        return (h * 360.0, s, lightness)

    @property
    def hue(self) -> float:
        return self.hsl()[0]

    def lab(self) -> tuple[float, float, float]:
        return rgb_to_lab(self.rgb)

    def luminance(self) -> float:
        return relative_luminance(self.rgb)

    def __str__(self) -> str:
        return self.hex


def _clip(v: float) -> int:
    return max(0, min(255, int(v)))


def _rgb_linear(c: int) -> float:
    c = c / 255
    return c / 12.92 if c <= 0.04045 else ((c + 0.055) / 1.055) ** 2.4


def _xyz_lab(t: float) -> float:
    return t ** (1 / 3) if t > _T3 else t / _T2 + _T0


def _lab_xyz(t: float) -> float:
    return t * t * t if t > _T1 else _T2 * (t - _T0)


def _xyz_rgb(c: float) -> float:
    return 255 * (12.92 * c if c <= 0.00304 else 1.055 * c ** (1 / 2.4) - 0.055)


def rgb_to_lab(rgb: tuple[int, int, int]) -> tuple[float, float, float]:
    r, g, b = (_rgb_linear(c) for c in rgb)
    x = _xyz_lab((0.4124564 * r + 0.3575761 * g + 0.1804375 * b) / _XN)
    y = _xyz_lab((0.2126729 * r + 0.7151522 * g + 0.0721750 * b) / _YN)
    z = _xyz_lab((0.0193339 * r + 0.1191920 * g + 0.9503041 * b) / _ZN)
    lightness = 116 * y - 16
    return (max(lightness, 0.0), 500 * (x - y), 200 * (y - z))


def lab_to_rgb(lab: tuple[float, float, float]) -> tuple[int, int, int]:
    """Lab back to sRGB, clipped to the 0-255 gamut and rounded."""
    lightness, a, b = lab
    fy = (lightness + 16) / 116
    fx = fy + a / 500
    fz = fy - b / 200
    x = _XN * _lab_xyz(fx)
    y = _YN * _lab_xyz(fy)
    z = _ZN * _lab_xyz(fz)
    r = _xyz_rgb(3.2404542 * x - 1.5371385 * y - 0.4985314 * z)
    g = _xyz_rgb(-0.9692660 * x + 1.8760108 * y + 0.0415560 * z)
    b_ = _xyz_rgb(0.0556434 * x - 0.2040259 * y + 1.0572252 * z)
    return tuple(max(0, min(255, math.floor(c + 0.5))) for c in (r, g, b_))  # type: ignore[return-value]


def delta_e(lab1: tuple[float, float, float], lab2: tuple[float, float, float]) -> float:
    """CIEDE2000 colour difference."""
    l1, a1, b1 = lab1
    l2, a2, b2 = lab2
    avg_l = (l1 + l2) / 2
    c1 = math.hypot(a1, b1)
    c2 = math.hypot(a2, b2)
    avg_c = (c1 + c2) / 2
    g = 0.5 * (1 - math.sqrt(avg_c**7 / (avg_c**7 + 25**7)))
    a1p = a1 * (1 + g)
    a2p = a2 * (1 + g)
    c1p = math.hypot(a1p, b1)
    c2p = math.hypot(a2p, b2)
    avg_cp = (c1p + c2p) / 2
    h1p = math.degrees(math.atan2(b1, a1p)) % 360
    h2p = math.degrees(math.atan2(b2, a2p)) % 360

    if abs(h1p - h2p) > 180:
        avg_hp = (h1p + h2p + 360) / 2
    else:
        avg_hp = (h1p + h2p) / 2

    t = (
        1
        - 0.17 * math.cos(math.radians(avg_hp - 30))
        + 0.24 * math.cos(math.radians(2 * avg_hp))
        + 0.32 * math.cos(math.radians(3 * avg_hp + 6))
        - 0.20 * math.cos(math.radians(4 * avg_hp - 63))
    )

    dhp = h2p - h1p
    if abs(dhp) > 180:
        dhp += -360 if h2p > h1p else 360
    dlp = l2 - l1
    dcp = c2p - c1p
    dhp_big = 2 * math.sqrt(c1p * c2p) * math.sin(math.radians(dhp / 2))

    sl = 1 + (0.015 * (avg_l - 50) ** 2) / math.sqrt(20 + (avg_l - 50) ** 2)
    sc = 1 + 0.045 * avg_cp
    sh = 1 + 0.015 * avg_cp * t
    d_theta = 30 * math.exp(-(((avg_hp - 275) / 25) ** 2))
    rc = 2 * math.sqrt(avg_cp**7 / (avg_cp**7 + 25**7))
    rt = -rc * math.sin(math.radians(2 * d_theta))

    result = math.sqrt(
        (dlp / sl) ** 2 + (dcp / sc) ** 2 + (dhp_big / sh) ** 2 + rt * (dcp / sc) * (dhp_big / sh)
    )
    return max(0.0, min(100.0, result))


def hue_distance(h1: float, h2: float) -> float:
    """Shorter angular distance between two hues, in [0, 180]."""
    diff = abs(h1 - h2) % 360
    return min(diff, 360 - diff)


def relative_luminance(rgb: tuple[int, int, int]) -> float:
    def channel(c: int) -> float:
        c = c / 255
        return c / 12.92 if c <= 0.03928 else ((c + 0.055) / 1.055) ** 2.4

    r, g, b = (channel(c) for c in rgb)
    return 0.2126 * r + 0.7152 * g + 0.0722 * b


def contrast_ratio(a: str | Color, b: str | Color) -> float:
    """WCAG contrast ratio in [1, 21]. Unparsable colours give 1.0."""
    try:
        la = Color.parse(a).luminance()
        lb = Color.parse(b).luminance()
    except ValueError:
        return 1.0
    hi, lo = max(la, lb), min(la, lb)
    return (hi + 0.05) / (lo + 0.05)


def wcag_level(ratio: float) -> str:
    if ratio >= WCAG_AAA:
        return 'AAA'
    if ratio >= WCAG_AA:
        return 'AA'
    return 'fail'
