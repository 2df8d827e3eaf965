"""
Style Extraction Layer for the Style Token Scraper.

Turns one fetched document into a StyleTokenSet. The engine only
talks to a StyleSource, so the same code runs over a browser
computed-style snapshot or over plain markup.
"""
import re
from typing import Callable, Dict, List, Optional, TypeVar

from bs4 import BeautifulSoup, Tag

from style_scraper.adapters.style_sources import StyleSource, build_style_source
from style_scraper.layers.logo import LogoDisambiguator, is_logo_like
from style_scraper.models.tokens import (
    DEFAULT_BUTTON_BACKGROUND,
    DEFAULT_BUTTON_COLOR,
    DEFAULT_BUTTON_PADDING,
    DEFAULT_BUTTON_RADIUS,
    DEFAULT_CONTAINER_PADDING,
    DEFAULT_GRID_GAP,
    DEFAULT_HEADING_COLOR,
    DEFAULT_HEADING_FONT,
    DEFAULT_HEADING_SIZE,
    DEFAULT_HEADING_WEIGHT,
    DEFAULT_MAX_WIDTH,
    ButtonStyle,
    HeadingStyle,
    ImageToken,
    LayoutTokens,
    MetaInfo,
    SectionInfo,
    StyleTokenSet,
)
from style_scraper.utils.css import (
    OrderedTokenSet,
    dedupe_records,
    first_font,
    is_usable_color,
)
from style_scraper.utils.logger import LayerLogger
from style_scraper.utils.urls import resolve_url

T = TypeVar("T")

HEADING_TAGS = ["h1", "h2", "h3", "h4", "h5", "h6"]
SKIP_TAGS = {"script", "style", "noscript", "template", "head", "meta", "link", "title", "br"}

MAX_SECTIONS = 20
MAX_SECTION_IMAGES = 10
MAX_HEADINGS = 50
SPACING_PROPERTIES = ["margin", "padding", "gap"]

_DECOY_IMAGE = re.compile(
    r"captcha|challenge-platform|/cdn-cgi/|spacer\.gif|pixel\.gif|/1x1\.|facebook\.com/tr",
    re.IGNORECASE,
)
_EMPTY_VALUES = {"", "none", "normal", "auto", "initial", "inherit", "unset"}
_ZERO_VALUES = {"0", "0px", "0%", "0rem", "0em"}


def _class_text(element: Tag) -> str:
    classes = element.get("class") or []
    if isinstance(classes, str):
        return classes.lower()
    return " ".join(classes).lower()


def _has_value(value: str) -> bool:
    return value.strip().lower() not in _EMPTY_VALUES


def _has_size(value: str) -> bool:
    return _has_value(value) and value.strip().lower() not in _ZERO_VALUES


def _is_spacing(value: str) -> bool:
    """A margin/padding/gap value with at least one non-zero length."""
    lowered = value.lower()
    if "var(" in lowered:
        return False
    return any(_has_size(part) for part in lowered.split())


def _parse_int(value: Optional[str]) -> Optional[int]:
    """Safely parse an integer attribute like width="120" or "120px"."""
    if not value:
        return None
    match = re.match(r"\s*(\d+)", str(value))
    return int(match.group(1)) if match else None


class StyleExtractionEngine:
    """
    Derives design tokens from a parsed document.

    Each output field is computed independently. A failure while
    computing one field is logged and replaced by that field's
    default; it never aborts the others.
    """

    def __init__(
        self,
        permissive_buttons: bool = False,
        logo_disambiguator: Optional[LogoDisambiguator] = None,
    ):
        self.permissive_buttons = permissive_buttons
        self.logo_disambiguator = logo_disambiguator or LogoDisambiguator()
        self.logger = LayerLogger("style_extraction")

    def extract(
        self,
        html: str,
        base_url: str,
        computed_styles: Optional[Dict[str, Dict[str, str]]] = None,
        brand: Optional[str] = None,
    ) -> StyleTokenSet:
        """
        Parse markup and extract the full token set.

        Args:
            html: Raw document markup
            base_url: URL the document was fetched from
            computed_styles: Browser snapshot keyed by data-style-idx, if any
            brand: Optional brand hint for logo selection
        """
        soup = BeautifulSoup(html or "", "lxml")
        source = build_style_source(soup, computed_styles)
        return self.extract_from_soup(soup, base_url, source, brand)

    def extract_from_soup(
        self,
        soup: BeautifulSoup,
        base_url: str,
        source: StyleSource,
        brand: Optional[str] = None,
    ) -> StyleTokenSet:
        """Extract tokens from an already parsed document."""
        self.logger.log_action("extract_tokens", "started", url=base_url, style_source=source.name)

        elements = self._styled_elements(soup)
        images = soup.find_all("img")

        tokens = StyleTokenSet(
            colors=self._safe("colors", lambda: self._collect_colors(elements, source), []),
            fonts=self._safe("fonts", lambda: self._collect_fonts(elements, source), []),
            spacing=self._safe("spacing", lambda: self._collect_spacing(elements, source), []),
            images=self._safe("images", lambda: self._collect_images(images, base_url), []),
            logo=self._safe("logo", lambda: self._choose_logo(images, base_url, brand), ""),
            headings=self._safe("headings", lambda: self._collect_heading_texts(soup), []),
            button_styles=self._safe(
                "button_styles", lambda: self._collect_buttons(elements, source), []
            ),
            heading_styles=self._safe(
                "heading_styles", lambda: self._collect_heading_styles(soup, source), []
            ),
            header_background_color=self._safe(
                "header_background_color",
                lambda: self._region_background(elements, source, "header", "banner"),
                "",
            ),
            footer_background_color=self._safe(
                "footer_background_color",
                lambda: self._region_background(elements, source, "footer", "contentinfo"),
                "",
            ),
            footer_logo=self._safe(
                "footer_logo", lambda: self._footer_logo(elements, base_url), ""
            ),
            section_background_colors=self._safe(
                "section_background_colors",
                lambda: self._section_backgrounds(elements, source),
                [],
            ),
            sections=self._safe(
                "sections", lambda: self._collect_sections(elements, source, base_url), []
            ),
            gradients=self._safe(
                "gradients",
                lambda: self._collect_values(
                    elements, source, "background-image", lambda v: "gradient(" in v.lower()
                ),
                [],
            ),
            shadows=self._safe(
                "shadows",
                lambda: self._collect_values(elements, source, "box-shadow", _has_value),
                [],
            ),
            border_radii=self._safe(
                "border_radii",
                lambda: self._collect_values(elements, source, "border-radius", _has_size),
                [],
            ),
            layout=self._safe("layout", lambda: self._layout(elements, source), LayoutTokens()),
            meta=self._safe("meta", lambda: self._meta(soup), MetaInfo()),
        )

        self.logger.log_extraction(url=base_url, counts=tokens.counts(), style_source=source.name)
        return tokens

    def _safe(self, field: str, compute: Callable[[], T], default: T) -> T:
        """Compute one field, substituting its default on failure."""
        try:
            return compute()
        except Exception as e:
            self.logger.log_fallback(
                from_source=field,
                to_source="default",
                reason=f"{type(e).__name__}: {e}",
            )
            return default

    # =========================================================================
    # ELEMENT CLASSIFICATION
    # =========================================================================

    def _styled_elements(self, soup: BeautifulSoup) -> List[Tag]:
        """Body and every rendered descendant, in document order."""
        root = soup.body or soup
        elements = [root] if isinstance(root, Tag) and root.name == "body" else []
        elements.extend(el for el in root.find_all(True) if el.name not in SKIP_TAGS)
        return elements

    def is_button_like(self, element: Tag) -> bool:
        if element.name == "button":
            return True
        class_text = _class_text(element)
        if "button" in class_text or "btn" in class_text:
            return True
        if self.permissive_buttons and element.name == "a":
            href = (element.get("href") or "").strip()
            return bool(href) and not href.startswith("#")
        return False

    @staticmethod
    def is_section_like(element: Tag) -> bool:
        if element.name == "section":
            return True
        class_text = _class_text(element)
        return any(hint in class_text for hint in ("section", "container", "wrapper"))

    @staticmethod
    def _is_region(element: Tag, name: str, role: str) -> bool:
        """header/footer detection by tag, ARIA role, or class."""
        if element.name == name:
            return True
        if (element.get("role") or "").lower() == role:
            return True
        return name in _class_text(element)

    # =========================================================================
    # BROAD SCAN: COLORS, FONTS, DECORATION
    # =========================================================================

    def _collect_colors(self, elements: List[Tag], source: StyleSource) -> List[str]:
        colors = OrderedTokenSet()
        for element in elements:
            for prop in ("color", "background-color"):
                value = source.get(element, prop)
                if is_usable_color(value):
                    colors.add(value.strip())
        return colors.to_list()

    def _collect_fonts(self, elements: List[Tag], source: StyleSource) -> List[str]:
        fonts = OrderedTokenSet()
        for element in elements:
            fonts.add(first_font(source.get(element, "font-family")))
        return fonts.to_list()

    def _collect_spacing(self, elements: List[Tag], source: StyleSource) -> List[str]:
        spacing = OrderedTokenSet()
        for element in elements:
            for prop in SPACING_PROPERTIES:
                value = source.get(element, prop).strip()
                if _is_spacing(value):
                    spacing.add(value)
        return spacing.to_list()

    def _collect_values(
        self,
        elements: List[Tag],
        source: StyleSource,
        prop: str,
        accept: Callable[[str], bool],
    ) -> List[str]:
        values = OrderedTokenSet()
        for element in elements:
            value = source.get(element, prop).strip()
            if value and accept(value):
                values.add(value)
        return values.to_list()

    # =========================================================================
    # IMAGES AND LOGOS
    # =========================================================================

    @staticmethod
    def _image_src(img: Tag) -> str:
        return (img.get("src") or img.get("data-src") or "").strip()

    def _collect_images(self, images: List[Tag], base_url: str) -> List[ImageToken]:
        """Absolute image URLs in document order, no data URIs or decoys."""
        tokens = []
        seen = set()
        for position, img in enumerate(images):
            url = resolve_url(base_url, self._image_src(img))
            if not url or url in seen or _DECOY_IMAGE.search(url):
                continue
            seen.add(url)
            tokens.append(ImageToken(
                src=url,
                alt=(img.get("alt") or "").strip(),
                width=_parse_int(img.get("width")),
                height=_parse_int(img.get("height")),
                position=position,
            ))
        return tokens

    def _choose_logo(self, images: List[Tag], base_url: str, brand: Optional[str]) -> str:
        candidates = [
            self._image_src(img)
            for img in images
            if is_logo_like(img) and self._image_src(img)
        ]
        return self.logo_disambiguator.choose(candidates, base_url, brand)

    def _footer_logo(self, elements: List[Tag], base_url: str) -> str:
        """Logo-like image inside the footer, else the footer's first image."""
        for element in elements:
            if not self._is_region(element, "footer", "contentinfo"):
                continue
            footer_images = element.find_all("img")
            ordered = [img for img in footer_images if is_logo_like(img)] + footer_images
            for img in ordered:
                url = resolve_url(base_url, self._image_src(img))
                if url:
                    return url
        return ""

    # =========================================================================
    # CLASSIFIED ELEMENTS: BUTTONS, HEADINGS
    # =========================================================================

    @staticmethod
    def _color_or(value: str, default: str) -> str:
        return value.strip() if is_usable_color(value) else default

    @staticmethod
    def _value_or(value: str, default: str) -> str:
        return value.strip() if _has_value(value) else default

    def _collect_buttons(self, elements: List[Tag], source: StyleSource) -> List[ButtonStyle]:
        records = [
            ButtonStyle(
                background_color=self._color_or(
                    source.get(el, "background-color"), DEFAULT_BUTTON_BACKGROUND
                ),
                color=self._color_or(source.get(el, "color"), DEFAULT_BUTTON_COLOR),
                padding=self._value_or(source.get(el, "padding"), DEFAULT_BUTTON_PADDING),
                border_radius=self._value_or(
                    source.get(el, "border-radius"), DEFAULT_BUTTON_RADIUS
                ),
            )
            for el in elements
            if self.is_button_like(el)
        ]
        return dedupe_records(records)

    def _collect_heading_styles(self, soup: BeautifulSoup, source: StyleSource) -> List[HeadingStyle]:
        records = [
            HeadingStyle(
                font_size=self._value_or(source.get(el, "font-size"), DEFAULT_HEADING_SIZE),
                font_weight=self._value_or(source.get(el, "font-weight"), DEFAULT_HEADING_WEIGHT),
                color=self._color_or(source.get(el, "color"), DEFAULT_HEADING_COLOR),
                font_family=first_font(source.get(el, "font-family")) or DEFAULT_HEADING_FONT,
            )
            for el in soup.find_all(HEADING_TAGS)
        ]
        return dedupe_records(records)

    def _collect_heading_texts(self, soup: BeautifulSoup) -> List[str]:
        texts = OrderedTokenSet()
        for heading in soup.find_all(HEADING_TAGS):
            texts.add(heading.get_text(" ", strip=True))
            if len(texts) >= MAX_HEADINGS:
                break
        return texts.to_list()

    # =========================================================================
    # REGIONS AND SECTIONS
    # =========================================================================

    def _region_background(
        self, elements: List[Tag], source: StyleSource, name: str, role: str
    ) -> str:
        for element in elements:
            if not self._is_region(element, name, role):
                continue
            value = source.get(element, "background-color")
            if is_usable_color(value):
                return value.strip()
        return ""

    def _section_backgrounds(self, elements: List[Tag], source: StyleSource) -> List[str]:
        colors = OrderedTokenSet()
        for element in elements:
            if self.is_section_like(element):
                value = source.get(element, "background-color")
                if is_usable_color(value):
                    colors.add(value.strip())
        return colors.to_list()

    def _collect_sections(
        self, elements: List[Tag], source: StyleSource, base_url: str
    ) -> List[SectionInfo]:
        sections = []
        for element in elements:
            if not self.is_section_like(element):
                continue
            heading = element.find(HEADING_TAGS)
            background = source.get(element, "background-color")
            image_urls = OrderedTokenSet()
            for img in element.find_all("img"):
                # Image metadata keeps embedded data URIs
                image_urls.add(resolve_url(base_url, self._image_src(img), allow_data=True))
                if len(image_urls) >= MAX_SECTION_IMAGES:
                    break
            sections.append(SectionInfo(
                id=element.get("id") or "",
                class_name=_class_text(element),
                first_heading=heading.get_text(" ", strip=True) if heading else "",
                background_color=background.strip() if is_usable_color(background) else "",
                images=image_urls.to_list(),
            ))
            if len(sections) >= MAX_SECTIONS:
                break
        return sections

    # =========================================================================
    # LAYOUT AND META
    # =========================================================================

    def _layout(self, elements: List[Tag], source: StyleSource) -> LayoutTokens:
        max_width = ""
        padding = ""
        for element in elements:
            if not (self.is_section_like(element) or element.name == "main"):
                continue
            value = source.get(element, "max-width")
            if _has_size(value) and value.strip() != "100%":
                max_width = value.strip()
                candidate = source.get(element, "padding")
                padding = candidate.strip() if _has_size(candidate) else ""
                break

        gap = ""
        for element in elements:
            value = source.get(element, "gap")
            if _has_size(value):
                gap = value.strip()
                break

        return LayoutTokens(
            max_width=max_width or DEFAULT_MAX_WIDTH,
            container_padding=padding or DEFAULT_CONTAINER_PADDING,
            grid_gap=gap or DEFAULT_GRID_GAP,
        )

    def _meta(self, soup: BeautifulSoup) -> MetaInfo:
        def meta_content(name: str) -> str:
            tag = soup.find("meta", attrs={"name": re.compile(rf"^{name}$", re.I)})
            if tag and tag.get("content"):
                return tag["content"].strip()
            return ""

        title = soup.find("title")
        return MetaInfo(
            title=title.get_text(strip=True) if title else "",
            description=meta_content("description"),
            viewport=meta_content("viewport"),
            theme_color=meta_content("theme-color"),
        )
