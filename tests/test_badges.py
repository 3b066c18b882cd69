"""Unit tests for badge SVG generation."""

import re
import xml.etree.ElementTree as ET

import pytest

from paybadge.badges import (
    ENHANCED_RIGHT_COLOR,
    generate_badge_svg,
    generate_enhanced_badge,
    generate_icon,
    render_badge_svg,
)
from paybadge.layout import compute_layout
from paybadge.models import BadgeIcon, BadgeParameters, BadgeStyle
from paybadge.validator import TextTooLongError, validate_badge_params

SVG_NS = "{http://www.w3.org/2000/svg}"
UNSAFE_CHARS = set("<>&\"'")


def user_strings(svg: str) -> list[str]:
    """Collect every string in the SVG that carries user-controlled text."""
    root = ET.fromstring(svg)
    values = [root.get("aria-label", "")]
    values += [el.text or "" for el in root.iter(f"{SVG_NS}text")]
    values += [el.text or "" for el in root.iter(f"{SVG_NS}title")]
    return values


class TestGenerateBadgeSvg:
    """Test standard badge generation."""

    def test_default_badge(self):
        svg = generate_badge_svg()

        assert svg.startswith("<svg")
        assert svg.endswith("</svg>")
        assert 'xmlns="http://www.w3.org/2000/svg"' in svg
        assert "paybadge" in svg
        assert "crypto" in svg
        assert 'role="img"' in svg
        assert 'aria-label="paybadge: crypto"' in svg

    def test_badge_is_well_formed_xml(self):
        svg = generate_badge_svg({"leftText": "donate", "rightText": "bitcoin"})

        root = ET.fromstring(svg)
        assert root.tag == f"{SVG_NS}svg"

    def test_end_to_end_scenario(self):
        """Custom text and colors appear, width matches the layout."""
        raw = {
            "leftText": "donate",
            "rightText": "bitcoin",
            "leftColor": "#333",
            "rightColor": "#f7931a",
        }

        svg = generate_badge_svg(raw)
        layout = compute_layout(validate_badge_params(raw))

        assert "donate" in svg
        assert "bitcoin" in svg
        assert 'fill="#333"' in svg
        assert 'fill="#f7931a"' in svg
        root = ET.fromstring(svg)
        assert float(root.get("width")) == pytest.approx(layout.left_width + layout.right_width)
        assert root.get("width") == "113.2"
        assert root.get("height") == "20"

    def test_output_is_deterministic(self):
        raw = {"leftText": "donate", "rightText": "bitcoin", "icon": "crypto"}

        assert generate_badge_svg(raw) == generate_badge_svg(raw)

    def test_input_mapping_not_modified(self):
        raw = {"text": "Donate"}
        generate_badge_svg(raw)

        assert raw == {"text": "Donate"}

    def test_embossed_text_layers(self):
        """Each label is drawn as a shadow at the baseline and in white 1px above."""
        svg = generate_badge_svg({"leftText": "donate", "rightText": "bitcoin"})

        assert svg.count(">donate</text>") == 2
        assert svg.count(">bitcoin</text>") == 2
        assert svg.count('y="14" fill="#010101" fill-opacity=".3"') == 2
        assert svg.count('y="13">') == 2

    def test_gradient_and_clip_path(self):
        svg = generate_badge_svg()

        assert '<linearGradient id="gradient"' in svg
        assert '<clipPath id="round">' in svg
        assert 'rx="3"' in svg
        assert 'clip-path="url(#round)"' in svg

    def test_standard_badge_has_no_icon(self):
        assert "<circle" not in generate_badge_svg()

    def test_icon_parameter_draws_icon(self):
        svg = generate_badge_svg({"icon": "bitcoin"})

        assert "<circle" in svg
        assert "translate(" in svg

    def test_unknown_icon_draws_nothing(self):
        svg = generate_badge_svg({"icon": "dogecoin"})

        assert "<circle" not in svg
        assert svg == generate_badge_svg()

    def test_text_alias_sets_right_text(self):
        svg = generate_badge_svg({"text": "Donate"})

        assert 'aria-label="paybadge: Donate"' in svg

    def test_text_alias_wins_over_right_text(self):
        svg = generate_badge_svg({"text": "A", "rightText": "B"})

        assert 'aria-label="paybadge: A"' in svg

    def test_text_alias_length_checked(self):
        with pytest.raises(TextTooLongError):
            generate_badge_svg({"text": "x" * 51})

    def test_text_too_long_raises(self):
        with pytest.raises(TextTooLongError):
            generate_badge_svg({"leftText": "a" * 100})

    def test_numbers_have_no_float_noise(self):
        svg = generate_badge_svg({"leftText": "paybadge"})

        assert 'width="119.8"' in svg
        assert not re.search(r"\d\.\d{6,}", svg)


class TestSanitizationSafety:
    """The emitted SVG never carries unsafe user input."""

    @pytest.mark.parametrize(
        "payload",
        [
            "<script>alert(1)</script>",
            "javascript:alert(1)",
            "<img src=x onerror=alert(1)>",
            "x onerror=y",
            "\"><svg onload=confirm(1)>",
            "Tom & Jerry's <b>",
            "%3Cscript%3Eprompt(1)%3C%2Fscript%3E",
            "javascript:javas&cript:",
            "javascript:javascrscriptipt:",
            "scrscriptipt",
            "on&error=x",
        ],
    )
    def test_payload_neutralized(self, payload):
        svg = generate_badge_svg({"leftText": payload, "rightText": payload})

        assert "<script" not in svg
        assert "javascript:" not in svg
        assert "onerror" not in svg
        assert "onload" not in svg
        for value in user_strings(svg):
            assert "script" not in value.lower()
        for value in user_strings(svg):
            assert not UNSAFE_CHARS & set(value)

    def test_render_escapes_hand_built_parameters(self):
        """Parameters that skipped validation are still escaped."""
        params = BadgeParameters(
            left_text="<b>",
            right_text='a"b',
            left_color="#555",
            right_color="#4c1",
        )

        svg = render_badge_svg(params, compute_layout(params))

        assert "<b>" not in svg
        assert "&lt;b&gt;" in svg
        ET.fromstring(svg)


class TestEnhancedBadge:
    """Test enhanced badge generation."""

    def test_enhanced_defaults(self):
        svg = generate_enhanced_badge()

        assert f'fill="{ENHANCED_RIGHT_COLOR}"' in svg
        assert "<circle" in svg
        assert 'aria-label="paybadge: crypto"' in svg

    def test_enhanced_defaults_seed_parameters(self):
        """Enhancement is parameter pre-seeding over the standard pipeline."""
        expected = generate_badge_svg({
            "style": "enhanced",
            "icon": "crypto",
            "rightColor": "#f7931a",
        })

        assert generate_enhanced_badge({}) == expected

    def test_enhanced_width_includes_icon(self):
        standard = ET.fromstring(generate_badge_svg())
        enhanced = ET.fromstring(generate_enhanced_badge())

        assert float(enhanced.get("width")) > float(standard.get("width"))
        assert enhanced.get("width") == "132.4"

    def test_enhanced_keeps_custom_right_color(self):
        svg = generate_enhanced_badge({"rightColor": "#007bff"})

        assert 'fill="#007bff"' in svg

    def test_enhanced_keeps_custom_icon(self):
        svg = generate_enhanced_badge({"icon": "bitcoin", "rightText": "BTC"})

        assert "<circle" in svg
        assert ">BTC</text>" in svg

    def test_enhanced_style_forced(self):
        raw = {"style": "standard"}
        svg = generate_enhanced_badge(raw)

        assert "<circle" in svg
        assert raw == {"style": "standard"}

    def test_enhanced_text_too_long_raises(self):
        with pytest.raises(TextTooLongError):
            generate_enhanced_badge({"rightText": "b" * 51})


class TestGenerateIcon:
    """Test icon fragment generation."""

    def test_no_icon(self):
        params = BadgeParameters("a", "b", "#555", "#4c1")

        assert generate_icon(BadgeIcon.NONE, compute_layout(params)) == ""

    def test_icon_variants_share_glyph(self):
        params = BadgeParameters("a", "b", "#555", "#4c1", BadgeStyle.ENHANCED, BadgeIcon.CRYPTO)
        layout = compute_layout(params)

        assert generate_icon(BadgeIcon.CRYPTO, layout) == generate_icon(BadgeIcon.BITCOIN, layout)

    def test_icon_positioned_in_right_segment(self):
        params = BadgeParameters("a", "b", "#555", "#4c1", icon=BadgeIcon.CRYPTO)
        layout = compute_layout(params)

        icon = generate_icon(BadgeIcon.CRYPTO, layout)

        match = re.search(r'translate\(([\d.]+), (\d+)\)', icon)
        assert match is not None
        assert float(match.group(1)) >= layout.left_width
