"""Fonts, colors and text styles used by the layout primitives."""

from __future__ import annotations

from dataclasses import dataclass, replace

from reportlab.pdfbase.pdfmetrics import getAscentDescent

from .page import Color

FONT_REGULAR = "Helvetica"
FONT_BOLD = "Helvetica-Bold"
FONT_ITALIC = "Helvetica-Oblique"

BLACK: Color = (0, 0, 0)
WHITE: Color = (255, 255, 255)

# Repair order packet
BRAND_TEAL: Color = (30, 112, 131)
BRAND_SLATE: Color = (45, 55, 72)
MUTED_GRAY: Color = (120, 120, 120)
RULE_GRAY: Color = (200, 200, 200)

# Summary report
NAVY: Color = (30, 41, 59)
DARK_GRAY: Color = (51, 65, 85)
MEDIUM_GRAY: Color = (100, 116, 139)
LIGHT_GRAY: Color = (148, 163, 184)
OFF_WHITE: Color = (248, 250, 252)
LIGHT_BG: Color = (241, 245, 249)
TEXT_PRIMARY: Color = (15, 23, 42)
TEXT_SECONDARY: Color = (71, 85, 105)
TEXT_MUTED: Color = (100, 116, 139)
HEADER_TEXT: Color = (200, 210, 220)
HEADER_TEXT_DIM: Color = (170, 180, 195)
DISCLAIMER_GRAY: Color = (180, 180, 180)

ACCENT_RED: Color = (220, 38, 38)
ACCENT_ORANGE: Color = (234, 88, 12)
ACCENT_GREEN: Color = (22, 163, 74)
ACCENT_BLUE: Color = (37, 99, 235)
ACCENT_PURPLE: Color = (124, 58, 237)
ACCENT_YELLOW: Color = (202, 138, 4)

BG_RED: Color = (254, 242, 242)
BG_ORANGE: Color = (255, 247, 237)
BG_GREEN: Color = (240, 253, 244)
BG_BLUE: Color = (239, 246, 255)
BG_PURPLE: Color = (245, 243, 255)
BG_YELLOW: Color = (254, 252, 232)

ACCENT_BACKGROUNDS = {
    ACCENT_RED: BG_RED,
    ACCENT_ORANGE: BG_ORANGE,
    ACCENT_GREEN: BG_GREEN,
    ACCENT_BLUE: BG_BLUE,
    ACCENT_PURPLE: BG_PURPLE,
    ACCENT_YELLOW: BG_YELLOW,
}


def background_for(accent: Color) -> Color:
    return ACCENT_BACKGROUNDS.get(accent, OFF_WHITE)


@dataclass(frozen=True)
class TextStyle:
    """Font, size, color and line spacing for a run of text."""

    font: str = FONT_REGULAR
    size: float = 10.0
    color: Color = BLACK
    leading: float = 1.45

    @property
    def line_height(self) -> float:
        return self.size * self.leading

    @property
    def baseline_offset(self) -> float:
        """Distance from the top of a line box to its baseline."""

        ascent, descent = getAscentDescent(self.font, self.size)
        # Centre the glyph box vertically inside the line box.
        return (self.line_height - (ascent - descent)) / 2 + ascent

    def derive(self, **changes) -> "TextStyle":
        return replace(self, **changes)


@dataclass(frozen=True)
class HeaderStyle:
    """Visual variant of section headers."""

    variant: str = "bar"
    text: TextStyle = TextStyle(font=FONT_BOLD, size=11, color=WHITE)
    height: float = 20.0
    gap_after: float = 8.0
    underline_width: float = 128.0


BODY_TEXT = TextStyle()
LABEL_TEXT = TextStyle(font=FONT_BOLD)

BAR_HEADER = HeaderStyle()
UNDERLINE_HEADER = HeaderStyle(
    variant="underline",
    text=TextStyle(font=FONT_BOLD, size=11, color=NAVY, leading=1.3),
    height=22.0,
    gap_after=8.0,
)

SUMMARY_BODY = TextStyle(size=9.5, color=TEXT_PRIMARY, leading=1.5)
CARD_LABEL = TextStyle(size=7.5, color=TEXT_MUTED, leading=1.3)
CARD_VALUE = TextStyle(font=FONT_BOLD, size=9, color=TEXT_PRIMARY, leading=1.3)
TABLE_HEADER_TEXT = TextStyle(font=FONT_BOLD, size=8, color=WHITE)
TABLE_CELL_TEXT = TextStyle(size=8.5, color=TEXT_PRIMARY)
BADGE_TEXT = TextStyle(font=FONT_BOLD, size=7, color=TEXT_MUTED)
