"""Code enhancer — accessibility, responsive and preview-safety fixes for generated code. Zero LLM calls."""

import re

from core.state import EnhancedCode, EnhancementOptions

_HISTORY_CALL_RE = re.compile(r"(?:\bwindow\s*\.\s*)?\bhistory\s*\.\s*(pushState|replaceState)\s*\(")
_HASH_ASSIGN_RE = re.compile(
    r"(?:\bwindow\s*\.\s*)?\blocation\s*\.\s*hash\s*=(?!=)[^;\n]*;?"
)
_INPUT_RE = re.compile(r"<input\b([^>]*)>", re.IGNORECASE)
_ATTR_RE = r"""(?<![\w-]){name}\s*=\s*["']([^"']*)["']"""
_SKIP_INPUT_TYPES = {"hidden", "submit", "button", "reset", "image"}
_COLOR_RE = re.compile(r"#(?:[0-9a-fA-F]{3}){1,2}\b|rgba?\([^)]*\)")
_WIDTH_MEDIA_RE = re.compile(r"@media[^{]*\b(?:min|max)-width", re.IGNORECASE)

AUTO_LABEL_PREFIX = "autolabel-"

FOCUS_STYLES = """/* Keyboard navigation focus styles */
a:focus,
button:focus,
input:focus,
textarea:focus,
select:focus {
  outline: 2px solid #4A90E2;
  outline-offset: 2px;
}

/* Remove focus outline for mouse users */
a:focus:not(:focus-visible),
button:focus:not(:focus-visible),
input:focus:not(:focus-visible),
textarea:focus:not(:focus-visible),
select:focus:not(:focus-visible) {
  outline: none;
}

a:focus-visible,
button:focus-visible,
input:focus-visible,
textarea:focus-visible,
select:focus-visible {
  outline: 3px solid #4A90E2;
  outline-offset: 2px;
  box-shadow: 0 0 0 4px rgba(74, 144, 226, 0.2);
}"""

MEDIA_QUERIES = """/* Responsive breakpoints - mobile first */
@media (min-width: 576px) {
  .container { max-width: 540px; }
}

@media (min-width: 768px) {
  .container { max-width: 720px; }
  .responsive-grid {
    display: grid;
    grid-template-columns: repeat(2, 1fr);
    gap: 1rem;
  }
}

@media (min-width: 992px) {
  .container { max-width: 960px; }
  .responsive-grid { grid-template-columns: repeat(3, 1fr); }
}

@media (min-width: 1200px) {
  .container { max-width: 1140px; }
}

@media (max-width: 767px) {
  body { font-size: 14px; }
  h1 { font-size: 1.75rem; }
  h2 { font-size: 1.5rem; }
  .responsive-flex { flex-direction: column; }
  button,
  .btn {
    width: 100%;
    margin-bottom: 0.5rem;
  }
}"""

REDUCED_MOTION = """/* Respect the user's motion preferences */
@media (prefers-reduced-motion: reduce) {
  *,
  *::before,
  *::after {
    animation-duration: 0.01ms !important;
    animation-iteration-count: 1 !important;
    transition-duration: 0.01ms !important;
    scroll-behavior: auto !important;
  }
}"""

ENHANCEMENT_BANNER = "/* Auto-generated accessibility and responsive enhancements */"


def _attr(attrs, name):
    m = re.search(_ATTR_RE.format(name=name), attrs, re.IGNORECASE)
    return m.group(1) if m else None


def _call_end(text, open_paren):
    """Index just past the parenthesis matching text[open_paren], quote-aware."""
    depth = 0
    quote = None
    i = open_paren
    while i < len(text):
        ch = text[i]
        if quote:
            if ch == "\\":
                i += 2
                continue
            if ch == quote:
                quote = None
        elif ch in "\"'`":
            quote = ch
        elif ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
            if depth == 0:
                return i + 1
        i += 1
    return len(text)


class CodeEnhancer:
    """Applies deterministic, idempotent fixes to generated HTML/CSS/JS.

    Holds only its options; the list of applied enhancements is built per
    call, so one instance can serve concurrent requests.
    """

    name = "code_enhancer"

    def __init__(self, options=None):
        self.options = options or EnhancementOptions()

    def enhance_code(self, html="", css="", js=""):
        applied = []
        html = self.strip_navigation_calls(html, applied)
        js = self.strip_navigation_calls(js, applied)
        html = self.enhance_html(html, applied)
        css = self.enhance_css(css, applied)
        return EnhancedCode(html=html, css=css, js=js, enhancements=applied)

    # -- preview safety -----------------------------------------------------

    def strip_navigation_calls(self, code, applied):
        """Neutralise history.pushState/replaceState calls and location.hash writes."""
        if not code:
            return code

        removed = 0
        out = []
        pos = 0
        for m in _HISTORY_CALL_RE.finditer(code):
            if m.start() < pos:
                continue
            end = _call_end(code, m.end() - 1)
            out.append(code[pos:m.start()])
            out.append(f"void 0 /* history.{m.group(1)} removed for preview */")
            pos = end
            removed += 1
        out.append(code[pos:])
        code = "".join(out)

        code, hash_count = _HASH_ASSIGN_RE.subn("/* location.hash assignment removed for preview */", code)
        removed += hash_count

        if removed:
            applied.append(f"Removed {removed} history/location.hash call(s) that break the preview iframe")
        return code

    # -- HTML ---------------------------------------------------------------

    def enhance_html(self, html, applied):
        if not html:
            return html
        if self.options.add_form_labels:
            html = self._add_form_labels(html, applied)
        if self.options.add_aria:
            html = self._add_basic_aria(html, applied)
        return html

    def _add_form_labels(self, html, applied):
        labelled = set(re.findall(r"""<label\b[^>]*\bfor\s*=\s*["']([^"']+)["']""", html, re.IGNORECASE))
        counter = len(re.findall(r'\bid="' + AUTO_LABEL_PREFIX, html))
        added = 0

        def replace(match):
            nonlocal counter, added
            attrs = match.group(1)
            input_type = (_attr(attrs, "type") or "text").lower()
            if input_type in _SKIP_INPUT_TYPES:
                return match.group(0)
            if re.search(r"\baria-label(ledby)?\s*=", attrs, re.IGNORECASE):
                return match.group(0)
            input_id = _attr(attrs, "id")
            if input_id and input_id in labelled:
                return match.group(0)

            if not input_id:
                input_id = f"{AUTO_LABEL_PREFIX}{counter}"
                counter += 1
                attrs = f' id="{input_id}"' + attrs
            text = _attr(attrs, "placeholder") or _attr(attrs, "name") or input_type.capitalize()
            added += 1
            return f'<label for="{input_id}">{text}</label>\n    <input{attrs}>'

        html = _INPUT_RE.sub(replace, html)
        if added:
            applied.append(f"Added {added} form label(s)")
        return html

    def _add_basic_aria(self, html, applied):
        if "<main" not in html and 'role="main"' not in html and '<div class="container"' in html:
            html = html.replace('<div class="container"', '<div class="container" role="main"', 1)
            applied.append('Added role="main" to container')

        if "<nav" not in html and 'role="navigation"' not in html:
            html, count = re.subn(
                r'<div([^>]*class="[^"]*nav[^"]*"[^>]*)>', r'<div\1 role="navigation">', html, count=1
            )
            if count:
                applied.append('Added role="navigation"')
        return html

    # -- CSS ----------------------------------------------------------------

    def enhance_css(self, css, applied):
        if not css:
            return css

        additions = []
        if self.options.add_css_variables and "--" not in css:
            variables = self._extract_css_variables(css)
            if variables:
                additions.append(variables)
                applied.append("Added CSS custom properties (variables)")
        if self.options.add_focus_styles and ":focus" not in css:
            additions.append(FOCUS_STYLES)
            applied.append("Added :focus styles for keyboard navigation")
        if self.options.add_media_queries and not _WIDTH_MEDIA_RE.search(css):
            additions.append(MEDIA_QUERIES)
            applied.append("Added responsive media queries")
        if self.options.add_reduced_motion and "prefers-reduced-motion" not in css:
            additions.append(REDUCED_MOTION)
            applied.append("Added prefers-reduced-motion support")

        if not additions:
            return css
        return css.rstrip() + "\n\n" + ENHANCEMENT_BANNER + "\n" + "\n\n".join(additions) + "\n"

    def _extract_css_variables(self, css):
        """:root block for colour literals used more than once in declarations."""
        counts = {}
        for value in re.findall(r":([^;{}]+)", css):
            for color in _COLOR_RE.findall(value):
                key = color.lower()
                counts[key] = counts.get(key, 0) + 1

        repeated = [c for c, n in counts.items() if n > 1]
        if not repeated:
            return None
        lines = [f"  --color-{i}: {c};" for i, c in enumerate(repeated)]
        return ":root {\n" + "\n".join(lines) + "\n}"


def enhance_generated_code(html="", css="", js="", options=None):
    """Convenience wrapper: a fresh CodeEnhancer per call."""
    return CodeEnhancer(options).enhance_code(html, css, js)
