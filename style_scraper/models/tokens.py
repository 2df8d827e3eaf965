"""
Style Token Model for the Style Token Scraper.
This model is the output contract handed to page generation: every
field is always present, collections default to empty.
"""
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


# Per-field defaults used when a style cannot be read from the page
DEFAULT_BUTTON_BACKGROUND = "#4F46E5"
DEFAULT_BUTTON_COLOR = "#FFFFFF"
DEFAULT_BUTTON_PADDING = "0.75rem 1.5rem"
DEFAULT_BUTTON_RADIUS = "0.375rem"

DEFAULT_HEADING_SIZE = "1rem"
DEFAULT_HEADING_WEIGHT = "600"
DEFAULT_HEADING_COLOR = "#111827"
DEFAULT_HEADING_FONT = "system-ui"

DEFAULT_MAX_WIDTH = "1200px"
DEFAULT_CONTAINER_PADDING = "1rem"
DEFAULT_GRID_GAP = "1rem"


class TokenModel(BaseModel):
    """Base for all token records: immutable, camelCase on the wire."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    def to_dict(self) -> dict:
        """Flat JSON-compatible dict with camelCase keys."""
        return self.model_dump(by_alias=True)


class ImageToken(TokenModel):
    """Image found on the page, with optional size metadata."""
    src: str
    alt: str = ""
    width: Optional[int] = None
    height: Optional[int] = None
    position: int = 0


class ButtonStyle(TokenModel):
    """Style record for one visually distinct button."""
    background_color: str = DEFAULT_BUTTON_BACKGROUND
    color: str = DEFAULT_BUTTON_COLOR
    padding: str = DEFAULT_BUTTON_PADDING
    border_radius: str = DEFAULT_BUTTON_RADIUS


class HeadingStyle(TokenModel):
    """Style record for one visually distinct heading."""
    font_size: str = DEFAULT_HEADING_SIZE
    font_weight: str = DEFAULT_HEADING_WEIGHT
    color: str = DEFAULT_HEADING_COLOR
    font_family: str = DEFAULT_HEADING_FONT


class LayoutTokens(TokenModel):
    """Page layout metrics."""
    max_width: str = DEFAULT_MAX_WIDTH
    container_padding: str = DEFAULT_CONTAINER_PADDING
    grid_gap: str = DEFAULT_GRID_GAP


class MetaInfo(TokenModel):
    """Document metadata, copied verbatim."""
    title: str = ""
    description: str = ""
    viewport: str = ""
    theme_color: str = ""


class SectionInfo(TokenModel):
    """Summary of one section-like container."""
    id: str = ""
    class_name: str = ""
    first_heading: str = ""
    background_color: str = ""
    images: List[str] = Field(default_factory=list)


class StyleTokenSet(TokenModel):
    """
    Normalized design tokens for one page snapshot.

    Collections keep first-seen order: the first color or font is
    treated downstream as the most prominent one.
    """
    colors: List[str] = Field(default_factory=list)
    fonts: List[str] = Field(default_factory=list)
    spacing: List[str] = Field(default_factory=list)
    images: List[ImageToken] = Field(default_factory=list)
    logo: str = ""
    headings: List[str] = Field(default_factory=list)
    button_styles: List[ButtonStyle] = Field(default_factory=list)
    heading_styles: List[HeadingStyle] = Field(default_factory=list)
    header_background_color: str = ""
    footer_background_color: str = ""
    footer_logo: str = ""
    section_background_colors: List[str] = Field(default_factory=list)
    sections: List[SectionInfo] = Field(default_factory=list)
    gradients: List[str] = Field(default_factory=list)
    shadows: List[str] = Field(default_factory=list)
    border_radii: List[str] = Field(default_factory=list)
    layout: LayoutTokens = Field(default_factory=LayoutTokens)
    meta: MetaInfo = Field(default_factory=MetaInfo)

    def counts(self) -> dict:
        """Collection sizes, for logging."""
        return {
            "colors": len(self.colors),
            "fonts": len(self.fonts),
            "spacing": len(self.spacing),
            "images": len(self.images),
            "logo": bool(self.logo),
            "button_styles": len(self.button_styles),
            "heading_styles": len(self.heading_styles),
            "sections": len(self.sections),
        }


FALLBACK_IMAGES = [
    "https://images.unsplash.com/photo-1606857521015-7f9fcf423740?w=1200&q=80",
    "https://images.unsplash.com/photo-1618005182384-a83a8bd57fbe?w=1200&q=80",
    "https://images.unsplash.com/photo-1551434678-e076c223a692?w=1200&q=80",
]


def fallback_tokens() -> StyleTokenSet:
    """Neutral token set used when the page could not be fetched at all."""
    return StyleTokenSet(
        colors=["#1a1a1a", "#ffffff", "#3b82f6"],
        fonts=["system-ui", "-apple-system", "sans-serif"],
        spacing=["0.5rem", "1rem", "1.5rem", "2rem"],
        images=[ImageToken(src=src, position=i) for i, src in enumerate(FALLBACK_IMAGES)],
        button_styles=[ButtonStyle()],
        heading_styles=[
            HeadingStyle(
                font_size="2.25rem",
                font_weight="700",
                color="#1F2937",
                font_family="system-ui",
            )
        ],
        shadows=["0 1px 3px rgba(0,0,0,0.1)"],
        border_radii=["0.25rem", "0.5rem", "0.75rem"],
        layout=LayoutTokens(
            max_width="1200px",
            container_padding="2rem",
            grid_gap="2rem",
        ),
    )
