# File: tests/test_extraction.py
from bs4 import BeautifulSoup

from style_scraper.adapters.style_sources import DeclarationStyleSource, StyleSource
from style_scraper.layers.extraction import StyleExtractionEngine
from style_scraper.models.tokens import (
    DEFAULT_BUTTON_PADDING,
    DEFAULT_BUTTON_RADIUS,
    DEFAULT_GRID_GAP,
    DEFAULT_HEADING_COLOR,
    DEFAULT_MAX_WIDTH,
    ButtonStyle,
    StyleTokenSet,
)

PAGE = "https://example.com/"

LANDING = """
<html>
<head>
  <title>Acme Outdoor</title>
  <meta name="description" content="Gear for the outdoors">
  <meta name="viewport" content="width=device-width, initial-scale=1">
  <meta name="theme-color" content="#0b3d2e">
  <style>
    .container { max-width: 1140px; padding: 0 24px; }
    .features { display: grid; gap: 32px; }
    .card { box-shadow: 0 2px 4px rgba(0,0,0,.2); border-radius: 12px; }
    .hero { background-image: linear-gradient(90deg, #0b3d2e, #1f7a5c); }
  </style>
</head>
<body style="font-family: 'Source Sans Pro', Arial, sans-serif; color: #222222">
  <header style="background-color: #0b3d2e">
    <img src="https://cdn.partner.net/partner-logo.png" alt="Partner">
    <img src="/static/acme-logo.svg" class="site-logo" alt="Acme">
  </header>
  <section class="hero" style="background-color: #f5f5f0">
    <h1 style="font-size: 3rem; font-weight: 700; color: #0b3d2e; font-family: Georgia, serif">Go further</h1>
    <img src="data:image/gif;base64,R0lGODlhAQABAAAAACw=" alt="pixel">
    <img src="/img/hero.jpg" width="1200" height="600" alt="Trail">
    <a class="btn" href="/shop" style="background-color: #1f7a5c; color: #ffffff; padding: 12px 24px; border-radius: 999px">Shop</a>
    <a href="/about">About</a>
  </section>
  <div class="container features" style="background-color: transparent; color: inherit">
    <div class="card"><h2>Tents</h2></div>
    <div class="card"><h2>Packs</h2></div>
    <img src="https://www.google.com/recaptcha/api2/captcha.png">
  </div>
  <footer style="background: #111111">
    <img src="/static/footer-logo.png" alt="Acme footer logo">
  </footer>
</body>
</html>
"""


def extract(html=LANDING, **kwargs) -> StyleTokenSet:
    brand = kwargs.pop("brand", None)
    return StyleExtractionEngine(**kwargs).extract(html, PAGE, brand=brand)


def test_repeated_identical_buttons_collapse_to_one():
    html = "<html><body>" + '<button style="background-color:#111;color:#fff">Buy</button>' * 3 + "</body></html>"
    tokens = extract(html)

    assert len(tokens.button_styles) == 1
    assert tokens.button_styles[0].to_dict() == {
        "backgroundColor": "#111",
        "color": "#fff",
        "padding": DEFAULT_BUTTON_PADDING,
        "borderRadius": DEFAULT_BUTTON_RADIUS,
    }


def test_relative_logo_image_resolves_and_is_selected():
    tokens = extract('<html><body><img src="/img/logo.png"></body></html>')

    assert [image.src for image in tokens.images] == ["https://example.com/img/logo.png"]
    assert tokens.logo == "https://example.com/img/logo.png"


def test_colors_keep_order_and_exclude_transparent_and_inherit():
    tokens = extract()

    assert tokens.colors[:3] == ["#222222", "#0b3d2e", "#f5f5f0"]
    assert "transparent" not in tokens.colors
    assert "inherit" not in tokens.colors
    assert len(tokens.colors) == len(set(tokens.colors))
    assert "#111111" in tokens.colors


def test_fonts_use_first_family_without_quotes():
    tokens = extract()
    assert tokens.fonts == ["Source Sans Pro", "Georgia"]


def test_images_are_absolute_and_skip_data_uris_and_decoys():
    tokens = extract()
    srcs = [image.src for image in tokens.images]

    assert "https://example.com/img/hero.jpg" in srcs
    assert not any(src.startswith("data:") for src in srcs)
    assert not any("captcha" in src for src in srcs)
    assert all(src.startswith("https://") for src in srcs)

    hero = next(image for image in tokens.images if image.src.endswith("hero.jpg"))
    assert (hero.width, hero.height, hero.alt) == (1200, 600, "Trail")


def test_logo_prefers_same_host():
    tokens = extract()
    assert tokens.logo == "https://example.com/static/acme-logo.svg"


def test_header_footer_and_sections():
    tokens = extract()

    assert tokens.header_background_color == "#0b3d2e"
    assert tokens.footer_background_color == "#111111"
    assert tokens.footer_logo == "https://example.com/static/footer-logo.png"
    assert tokens.section_background_colors == ["#f5f5f0"]

    hero = tokens.sections[0]
    assert hero.class_name == "hero"
    assert hero.first_heading == "Go further"
    assert hero.background_color == "#f5f5f0"
    # Section image metadata keeps embedded images
    assert hero.images[0].startswith("data:image/gif")
    assert hero.images[1] == "https://example.com/img/hero.jpg"


def test_buttons_and_headings():
    tokens = extract()

    assert tokens.button_styles == [
        ButtonStyle(
            background_color="#1f7a5c",
            color="#ffffff",
            padding="12px 24px",
            border_radius="999px",
        )
    ]
    first, second = tokens.heading_styles
    assert first.to_dict() == {
        "fontSize": "3rem",
        "fontWeight": "700",
        "color": "#0b3d2e",
        "fontFamily": "Georgia",
    }
    assert second.color == DEFAULT_HEADING_COLOR
    assert tokens.headings == ["Go further", "Tents", "Packs"]


def test_permissive_mode_counts_links_as_buttons():
    strict = extract()
    permissive = extract(permissive_buttons=True)

    assert len(strict.button_styles) == 1
    assert len(permissive.button_styles) == 2


def test_fragment_links_are_never_buttons():
    tokens = extract('<html><body><a href="#top">Top</a></body></html>', permissive_buttons=True)
    assert tokens.button_styles == []


def test_layout_decorations_and_meta():
    tokens = extract()

    assert tokens.layout.max_width == "1140px"
    assert tokens.layout.container_padding == "0 24px"
    assert tokens.layout.grid_gap == "32px"
    assert tokens.spacing == ["12px 24px", "0 24px", "32px"]
    assert tokens.shadows == ["0 2px 4px rgba(0,0,0,.2)"]
    assert tokens.border_radii == ["999px", "12px"]
    assert tokens.gradients == ["linear-gradient(90deg, #0b3d2e, #1f7a5c)"]
    assert tokens.meta.to_dict() == {
        "title": "Acme Outdoor",
        "description": "Gear for the outdoors",
        "viewport": "width=device-width, initial-scale=1",
        "themeColor": "#0b3d2e",
    }


def test_empty_document_is_fully_populated():
    tokens = extract("")
    data = tokens.to_dict()

    assert data["colors"] == []
    assert data["spacing"] == []
    assert data["logo"] == ""
    assert data["headerBackgroundColor"] == ""
    assert data["layout"] == {
        "maxWidth": DEFAULT_MAX_WIDTH,
        "containerPadding": "1rem",
        "gridGap": DEFAULT_GRID_GAP,
    }
    assert data["meta"]["title"] == ""
    assert set(data) >= {
        "colors", "fonts", "spacing", "images", "logo", "buttonStyles", "headingStyles",
        "headerBackgroundColor", "footerBackgroundColor", "footerLogo",
        "sectionBackgroundColors", "layout", "meta",
    }


def test_extraction_is_deterministic():
    first = extract()
    second = extract()

    assert first.to_dict()["buttonStyles"] == second.to_dict()["buttonStyles"]
    assert first.to_dict()["headingStyles"] == second.to_dict()["headingStyles"]
    assert first == second


def test_computed_styles_are_preferred_over_inline():
    html = (
        '<html><body data-style-idx="0">'
        '<button data-style-idx="1" style="background-color:#111">Buy</button>'
        "</body></html>"
    )
    computed = {
        "0": {"color": "rgb(0, 0, 0)", "background-color": "rgba(0, 0, 0, 0)"},
        "1": {
            "color": "rgb(255, 255, 255)",
            "background-color": "rgb(255, 0, 0)",
            "padding": "8px 16px",
            "border-radius": "4px",
            "font-family": '"Inter", sans-serif',
        },
    }
    tokens = StyleExtractionEngine().extract(html, PAGE, computed_styles=computed)

    assert tokens.colors == ["rgb(0, 0, 0)", "rgb(255, 255, 255)", "rgb(255, 0, 0)"]
    assert tokens.fonts == ["Inter"]
    assert tokens.button_styles[0].background_color == "rgb(255, 0, 0)"
    assert tokens.button_styles[0].padding == "8px 16px"


class BrokenFontSource(StyleSource):
    name = "broken"

    def __init__(self, soup):
        self.inner = DeclarationStyleSource(soup)

    def get(self, element, prop):
        if prop == "font-family":
            raise RuntimeError("font lookup failed")
        return self.inner.get(element, prop)


def test_field_failure_does_not_abort_other_fields():
    soup = BeautifulSoup(LANDING, "lxml")
    tokens = StyleExtractionEngine().extract_from_soup(soup, PAGE, BrokenFontSource(soup))

    assert tokens.fonts == []
    assert tokens.heading_styles == []
    assert tokens.colors[0] == "#222222"
    assert tokens.logo == "https://example.com/static/acme-logo.svg"
    assert len(tokens.button_styles) == 1


def test_spacing_skips_zero_and_auto_values():
    html = (
        '<html><body><div style="margin: 0 auto; padding: 0">a</div>'
        '<div style="margin: 24px 0; padding: 0px; gap: var(--gap)">b</div>'
        '<div style="padding: 1rem">c</div><div style="margin: 24px 0">d</div></body></html>'
    )
    assert extract(html).spacing == ["24px 0", "1rem"]


def test_section_background_survives_data_uri_in_sheet():
    html = (
        "<html><head><style>"
        '.hero{background:url("data:image/svg+xml;utf8,%3Csvg%3E%3C/svg%3E") #0b3d2e}'
        '</style></head><body><section class="hero"><h2>Hi</h2></section></body></html>'
    )
    tokens = extract(html)

    assert tokens.section_background_colors == ["#0b3d2e"]
    assert tokens.sections[0].background_color == "#0b3d2e"
