"""
Custom-property sheet for a base size.

The sheet is driven by a declarative token table. Each section is a title
plus (name, token) pairs, where a token is one of:

    float        multiplier of the base size, rendered as round(base * m) px
    str          literal CSS text, copied as is
    Ref          reference to another property of the sheet: var(--size-x)
    tuple        space-separated composite of the above (e.g. padding "0 8px")

ROUNDING RULE:
    round(base * m) rounds halves up (7.5 -> 8), and a zero result is the
    bare literal "0".
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, List, Tuple, Union

from sizekit.constants import DEFAULT_ROOT_FONT_SIZE
from sizekit.conversion import css_var, css_var_name, format_number


@dataclass(frozen=True)
class Ref:
    """Points at another token of the same sheet."""
    name: str


Token = Union[float, str, Ref, tuple]
Section = Tuple[str, List[Tuple[str, Token]]]


def _scale(names: str, multipliers: List[float]) -> List[Tuple[str, Token]]:
    return list(zip(names.split(), multipliers))


def _refs(names: str, targets: str) -> List[Tuple[str, Token]]:
    return [(name, Ref(target)) for name, target in zip(names.split(), targets.split())]


SIZE_TOKEN_TABLE: List[Section] = [
    ("Base Size Tokens", [("0", "0px")] + _scale(
        "1 2 3 4 5 6 7 8 9 10 11 12 13 14 15 16 17 18 19 20 24 32 40 48 56 64",
        [0.125, 0.25, 0.375, 0.5, 0.75, 1, 1.25, 1.5, 1.75, 2, 2.25, 2.5, 3,
         3.5, 4, 4.5, 5, 6, 7, 8, 12, 16, 20, 24, 28, 32])),
    ("Font Sizes", _scale(
        "font-2xs font-xs font-sm font-base font-md font-lg font-xl font-2xl font-3xl font-4xl",
        [0.625, 0.6875, 0.75, 0.875, 1, 1.125, 1.25, 1.5, 1.875, 2.25]) + _refs(
        "font-tiny font-small font-medium font-large font-huge font-giant",
        "font-2xs font-sm font-base font-md font-lg font-xl")),
    ("Heading Sizes", _scale(
        "font-h1 font-h2 font-h3 font-h4 font-h5 font-h6",
        [1.75, 1.5, 1.25, 1.125, 1, 0.875])),
    ("Display Sizes", _scale(
        "font-display1 font-display2 font-display3 font-caption font-overline font-code",
        [3, 2.625, 2.25, 0.6875, 0.625, 0.8125])),
    ("Spacing", [("spacing-none", "0")] + _scale(
        "spacing-3xs spacing-2xs spacing-xs spacing-sm spacing-md spacing-lg "
        "spacing-xl spacing-2xl spacing-3xl spacing-4xl",
        [0.0625, 0.125, 0.25, 0.375, 0.5, 0.75, 1, 1.5, 2, 3]) + _refs(
        "spacing-tiny spacing-small spacing-medium spacing-large spacing-huge "
        "spacing-giant spacing-massive spacing-colossal",
        "spacing-2xs spacing-xs spacing-md spacing-lg spacing-xl spacing-2xl "
        "spacing-3xl spacing-4xl")),
    ("Component Heights", _refs(
        "comp-size-xxxs comp-size-xxs comp-size-xs comp-size-s comp-size-m comp-size-l "
        "comp-size-xl comp-size-xxl comp-size-xxxl comp-size-xxxxl comp-size-xxxxxl",
        "6 7 8 9 10 11 12 13 14 15 16")),
    ("Popup Padding", _refs(
        "pop-padding-s pop-padding-m pop-padding-l pop-padding-xl pop-padding-xxl",
        "2 3 4 5 6")),
    ("Component Padding", _refs(
        "comp-padding-lr-xxs comp-padding-lr-xs comp-padding-lr-s comp-padding-lr-m "
        "comp-padding-lr-l comp-padding-lr-xl comp-padding-lr-xxl "
        "comp-padding-tb-xxs comp-padding-tb-xs comp-padding-tb-s comp-padding-tb-m "
        "comp-padding-tb-l comp-padding-tb-xl comp-padding-tb-xxl",
        "1 2 4 5 6 8 10 1 2 3 4 5 6 8")),
    ("Component Margins", _refs(
        "comp-margin-xxs comp-margin-xs comp-margin-s comp-margin-m comp-margin-l "
        "comp-margin-xl comp-margin-xxl comp-margin-xxxl comp-margin-xxxxl",
        "1 2 4 5 6 7 8 10 12")),
    ("Border Radius", [("radius-none", "0")] + _scale(
        "radius-xs radius-sm radius-md radius-lg radius-xl radius-2xl radius-3xl",
        [0.125, 0.25, 0.375, 0.5, 0.75, 1, 1.5]) + [
        ("radius-full", "9999px"),
        ("radius-circle", "50%"),
    ] + _refs(
        "radius-small radius-medium radius-large radius-huge",
        "radius-sm radius-md radius-lg radius-xl")),
    ("Border Widths", [
        ("border-width-thin", "1px"),
        ("border-width-medium", "2px"),
        ("border-width-thick", "3px"),
    ]),
    ("Line Heights", [
        ("line-none", "1.0"),
        ("line-tight", "1.25"),
        ("line-snug", "1.375"),
        ("line-normal", "1.5"),
        ("line-relaxed", "1.625"),
        ("line-loose", "2.0"),
    ]),
    ("Letter Spacing", [
        ("letter-tighter", "-0.05em"),
        ("letter-tight", "-0.025em"),
        ("letter-normal", "0"),
        ("letter-wide", "0.025em"),
        ("letter-wider", "0.05em"),
        ("letter-widest", "0.1em"),
    ]),
    ("Button Sizes", _scale(
        "btn-height-tiny btn-height-small btn-height-medium btn-height-large btn-height-huge",
        [1.5, 1.75, 2, 2.25, 2.5]) + [
        ("btn-padding-tiny", ("0", 0.5)),
        ("btn-padding-small", ("0", 0.625)),
        ("btn-padding-medium", ("0", 0.875)),
        ("btn-padding-large", ("0", 1)),
        ("btn-padding-huge", ("0", 1.25)),
    ]),
    ("Input Sizes", _scale(
        "input-height-small input-height-medium input-height-large",
        [1.75, 2, 2.25]) + [
        ("input-padding-small", (0.25, 0.5)),
        ("input-padding-medium", (0.375, 0.625)),
        ("input-padding-large", (0.5, 0.75)),
    ]),
    ("Icon Sizes", _scale(
        "icon-tiny icon-small icon-medium icon-large icon-huge icon-giant",
        [0.75, 0.875, 1, 1.25, 1.5, 2])),
    ("Avatar Sizes", _scale(
        "avatar-tiny avatar-small avatar-medium avatar-large avatar-huge avatar-giant",
        [1.25, 1.5, 2, 2.5, 3, 4])),
    ("Card & Table", _scale(
        "card-padding-small card-padding-medium card-padding-large "
        "table-row-height-small table-row-height-medium table-row-height-large",
        [0.5, 0.75, 1, 2.25, 2.75, 3.25])),
    ("Form & Tag", [
        ("form-label-margin", ("0", "0", 0.125, "0")),
        ("form-group-margin", ("0", "0", 1, "0")),
        ("tag-height", 1.5),
        ("tag-padding", ("0", 0.25)),
    ]),
    ("Overlay Widths", _scale(
        "modal-width-small modal-width-medium modal-width-large "
        "drawer-width-small drawer-width-medium drawer-width-large",
        [25, 37.5, 50, 20, 30, 40])),
    ("Container Widths", [
        ("container-sm", "640px"),
        ("container-md", "768px"),
        ("container-lg", "1024px"),
        ("container-xl", "1280px"),
        ("container-xxl", "1536px"),
    ]),
]


def scaled_px(base_size: float, multiplier: float) -> str:
    """round(base * multiplier) as px text; zero is "0"."""
    value = math.floor(base_size * multiplier + 0.5)
    return "0" if value == 0 else f"{value}px"


class _TokenRenderer:
    """Renders tokens for one base size, memoizing multiplier lookups."""

    def __init__(self, base_size: float, prefix: str) -> None:
        self.base_size = base_size
        self.prefix = prefix
        self._scaled: Dict[float, str] = {}

    def name(self, token_name: str) -> str:
        return css_var_name(token_name, self.prefix)

    def render(self, token: Token) -> str:
        if isinstance(token, Ref):
            return css_var(self.name(token.name))
        if isinstance(token, str):
            return token
        if isinstance(token, tuple):
            return " ".join(self.render(part) for part in token)
        if token not in self._scaled:
            self._scaled[token] = scaled_px(self.base_size, token)
        return self._scaled[token]


def size_tokens(base_size: float, prefix: str = "size") -> Dict[str, str]:
    """
    Every custom property of the sheet, in sheet order.

    Returns:
        {"--size-base": "16px", "--size-1": "2px", ...}
    """
    renderer = _TokenRenderer(base_size, prefix)
    scale = base_size / DEFAULT_ROOT_FONT_SIZE
    tokens = {
        renderer.name("base"): f"{format_number(base_size)}px",
        renderer.name("base-rem"): f"{format_number(scale)}rem",
        renderer.name("scale"): format_number(scale),
    }
    for _title, entries in SIZE_TOKEN_TABLE:
        for token_name, token in entries:
            tokens[renderer.name(token_name)] = renderer.render(token)
    return tokens


def render_size_sheet(base_size: float, prefix: str = "size", selector: str = ":root") -> str:
    """Render the full custom-property sheet for base_size as CSS text."""
    renderer = _TokenRenderer(base_size, prefix)
    scale = base_size / DEFAULT_ROOT_FONT_SIZE

    lines = [f"{selector} {{", "  /* Base Configuration */"]
    lines.append(f"  {renderer.name('base')}: {format_number(base_size)}px;")
    lines.append(f"  {renderer.name('base-rem')}: {format_number(scale)}rem;")
    lines.append(f"  {renderer.name('scale')}: {format_number(scale)};")

    for title, entries in SIZE_TOKEN_TABLE:
        lines.append("")
        lines.append(f"  /* {title} */")
        for token_name, token in entries:
            lines.append(f"  {renderer.name(token_name)}: {renderer.render(token)};")

    lines.append("}")
    return "\n".join(lines) + "\n"
