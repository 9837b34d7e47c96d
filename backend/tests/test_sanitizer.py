import pytest

from soc_analyst.services.analysis.sanitizer import (
    DEFAULT_MAX_LENGTH,
    FALLBACK_RESPONSE,
    sanitize,
)


class TestFallback:
    @pytest.mark.parametrize("raw", [None, ""])
    def test_empty_input_returns_apology(self, raw):
        assert sanitize(raw) == FALLBACK_RESPONSE

    def test_output_emptied_by_removal_falls_back(self):
        assert sanitize("onclick=steal()") == FALLBACK_RESPONSE

    def test_fallback_respects_small_limit(self):
        out = sanitize(None, max_length=10)
        assert out == FALLBACK_RESPONSE[:10]
        assert out


class TestLength:
    def test_truncates_to_default_limit(self):
        out = sanitize("a" * (DEFAULT_MAX_LENGTH + 500))
        assert len(out) == DEFAULT_MAX_LENGTH

    def test_truncates_before_matching(self):
        # the closing tag falls past the limit, so there is no full block to replace
        raw = "x" * 20 + "<script>alert(1)</script>"
        out = sanitize(raw, max_length=30)
        assert "[removed script]" not in out
        assert len(out) == 30

    def test_replacement_growth_is_clipped(self):
        raw = "javascript:" * 10
        out = sanitize(raw, max_length=len(raw))
        assert len(out) <= len(raw)


class TestBlockedPatterns:
    def test_script_block_removed(self):
        out = sanitize("Findings: <script>alert(1)</script> done")
        assert "[removed script]" in out
        assert "<script" not in out
        assert out == "Findings: [removed script] done"

    def test_script_with_attributes_and_case(self):
        out = sanitize('a <SCRIPT type="text/javascript">x()</Script> b')
        assert out == "a [removed script] b"

    def test_iframe_block_removed(self):
        out = sanitize('see <iframe src="https://evil.example"></iframe> here')
        assert out == "see [removed iframe] here"

    def test_javascript_uri_blocked(self):
        out = sanitize("[click](JavaScript :alert(1))")
        assert out == "[click](javascript-blocked:alert(1))"

    def test_html_data_uri_blocked(self):
        out = sanitize("load data:text/html;base64,PHNjcmlwdD4= now")
        assert out == "load data-blocked:;base64,PHNjcmlwdD4= now"

    def test_plain_data_uri_untouched(self):
        raw = "image data:image/png;base64,iVBOR"
        assert sanitize(raw) == raw

    def test_quoted_event_handler_removed(self):
        out = sanitize('<div onclick="evil()">hi</div>')
        assert "onclick" not in out
        assert out == "<div>hi</div>"

    def test_unquoted_event_handler_removed(self):
        out = sanitize("<img src=x onerror=alert(1)>")
        assert out == "<img src=x>"

    def test_markdown_passes_through(self):
        raw = (
            "## Key findings\n"
            "- **Critical** malware on `web-server-01` (T1059)\n"
            "- Block 203.0.113.7 at the firewall"
        )
        assert sanitize(raw) == raw


class TestDeterminism:
    def test_same_input_same_output(self):
        raw = 'x <script>1</script> <a href="javascript:go()" onmouseover="y()">z</a>'
        assert sanitize(raw) == sanitize(raw)

    @pytest.mark.parametrize(
        "raw",
        [
            "Plain analyst answer with no markup.",
            "Findings: <script>alert(1)</script> done",
            '<div onclick="evil()">hi</div>',
        ],
    )
    def test_idempotent(self, raw):
        once = sanitize(raw)
        assert sanitize(once) == once
