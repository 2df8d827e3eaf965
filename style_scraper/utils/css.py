"""
CSS text helpers: declaration lookup, color/font normalization and
token deduplication.
"""
import json
import re
from typing import Any, Dict, Iterable, List, Optional

# Keywords that are never a usable color token
NON_COLOR_KEYWORDS = {
    "transparent",
    "inherit",
    "initial",
    "unset",
    "revert",
    "currentcolor",
    "none",
    "auto",
}

COLOR_PATTERN = re.compile(
    r"#(?:[0-9a-fA-F]{8}|[0-9a-fA-F]{6}|[0-9a-fA-F]{3,4})\b"
    r"|(?:rgba?|hsla?)\([^)]*\)",
    re.IGNORECASE,
)

# CSS Color Module level 4 named colors
CSS_NAMED_COLORS = frozenset("""
aliceblue antiquewhite aqua aquamarine azure beige bisque black blanchedalmond
blue blueviolet brown burlywood cadetblue chartreuse chocolate coral
cornflowerblue cornsilk crimson cyan darkblue darkcyan darkgoldenrod darkgray
darkgreen darkgrey darkkhaki darkmagenta darkolivegreen darkorange darkorchid
darkred darksalmon darkseagreen darkslateblue darkslategray darkslategrey
darkturquoise darkviolet deeppink deepskyblue dimgray dimgrey dodgerblue
firebrick floralwhite forestgreen fuchsia gainsboro ghostwhite gold goldenrod
gray green greenyellow grey honeydew hotpink indianred indigo ivory khaki
lavender lavenderblush lawngreen lemonchiffon lightblue lightcoral lightcyan
lightgoldenrodyellow lightgray lightgreen lightgrey lightpink lightsalmon
lightseagreen lightskyblue lightslategray lightslategrey lightsteelblue
lightyellow lime limegreen linen magenta maroon mediumaquamarine mediumblue
mediumorchid mediumpurple mediumseagreen mediumslateblue mediumspringgreen
mediumturquoise mediumvioletred midnightblue mintcream mistyrose moccasin
navajowhite navy oldlace olive olivedrab orange orangered orchid palegoldenrod
palegreen paleturquoise palevioletred papayawhip peachpuff peru pink plum
powderblue purple rebeccapurple red rosybrown royalblue saddlebrown salmon
sandybrown seagreen seashell sienna silver skyblue slateblue slategray
slategrey snow springgreen steelblue tan teal thistle tomato turquoise violet
wheat white whitesmoke yellow yellowgreen
""".split())

_FUNC_ARGS = re.compile(r"^(rgba?|hsla?)\((.*)\)$", re.IGNORECASE | re.DOTALL)


def extract_css_value(declarations: str, prop: str) -> str:
    """
    Return the value of ``prop`` in a declaration block, or "".

    Case-insensitive, tolerant of missing trailing semicolons and
    whitespace. The property must start a declaration, so ``color``
    does not match inside ``background-color``.
    """
    if not declarations or not prop:
        return ""
    pattern = re.compile(
        r"(?:^|[;{\s])" + re.escape(prop) + r"\s*:\s*([^;}]*)",
        re.IGNORECASE,
    )
    match = pattern.search(declarations)
    if not match:
        return ""
    value = match.group(1).strip()
    if value.lower().endswith("!important"):
        value = value[: -len("!important")].strip()
    return value


def _alpha_is_zero(value: str) -> bool:
    """Detect a fully transparent rgba/hsla or #RGBA / #RRGGBBAA color."""
    value = value.strip().lower()
    if value.startswith("#"):
        digits = value[1:]
        if len(digits) == 4:
            return digits[3] == "0"
        if len(digits) == 8:
            return digits[6:] == "00"
        return False

    match = _FUNC_ARGS.match(value)
    if not match:
        return False
    args = match.group(2).replace("/", ",")
    parts = [p.strip() for p in re.split(r"[,\s]+", args) if p.strip()]
    if len(parts) < 4:
        return False
    alpha = parts[3]
    try:
        if alpha.endswith("%"):
            return float(alpha[:-1]) == 0
        return float(alpha) == 0
    except ValueError:
        return False


def is_usable_color(value: Optional[str]) -> bool:
    """True if value is a concrete, visible color (not transparent/inherit)."""
    if not value:
        return False
    value = value.strip()
    lowered = value.lower()
    if lowered in NON_COLOR_KEYWORDS or lowered.startswith("var("):
        return False
    if _alpha_is_zero(lowered):
        return False
    if COLOR_PATTERN.fullmatch(value):
        return True
    return lowered in CSS_NAMED_COLORS


def color_from_background(value: Optional[str]) -> str:
    """
    Pull the color out of a ``background`` shorthand.

    ``url(x.png) #fff no-repeat`` -> ``#fff``. Bare words count only
    when they are CSS named colors, so ``center`` or ``repeat`` never do.
    """
    if not value:
        return ""
    rest = re.sub(r"url\([^)]*\)", "", value.strip())
    match = COLOR_PATTERN.search(rest)
    if match:
        return match.group(0)
    for word in rest.split():
        if word.lower() in CSS_NAMED_COLORS:
            return word
    return ""


def first_font(value: Optional[str]) -> str:
    """First family of a font-family list, quotes stripped."""
    if not value:
        return ""
    first = value.split(",")[0].strip().strip("'\"").strip()
    if not first or first.lower() in NON_COLOR_KEYWORDS or first.lower().startswith("var("):
        return ""
    return first


def style_key(record: Any) -> str:
    """
    Stable key for a style record so identical records collapse.

    Accepts pydantic models or plain dicts.
    """
    if hasattr(record, "model_dump"):
        record = record.model_dump()
    return json.dumps(record, sort_keys=True)


def dedupe_records(records: Iterable[Any]) -> List[Any]:
    """Drop records equal to an earlier one, keeping first-seen order."""
    seen = set()
    unique = []
    for record in records:
        key = style_key(record)
        if key in seen:
            continue
        seen.add(key)
        unique.append(record)
    return unique


class OrderedTokenSet:
    """Insertion-ordered set of string tokens."""

    def __init__(self):
        self._items: Dict[str, None] = {}

    def add(self, value: Optional[str]) -> bool:
        if not value or value in self._items:
            return False
        self._items[value] = None
        return True

    def __contains__(self, value: str) -> bool:
        return value in self._items

    def __len__(self) -> int:
        return len(self._items)

    def to_list(self) -> List[str]:
        return list(self._items)
