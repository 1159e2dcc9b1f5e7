"""Tests for agents.code_enhancer."""

from agents.code_enhancer import ENHANCEMENT_BANNER, CodeEnhancer, enhance_generated_code
from core.state import EnhancementOptions


# --- Preview safety ---

def test_push_state_call_removed():
    js = 'nav.onclick = () => { history.pushState({}, "", "/about"); render(); };'
    result = enhance_generated_code(js=js)
    assert "pushState(" not in result.js
    assert "void 0 /* history.pushState removed for preview */;" in result.js
    assert "render();" in result.js
    assert result.enhancements == ["Removed 1 history/location.hash call(s) that break the preview iframe"]


def test_nested_call_arguments_removed_whole():
    js = 'x(); window.history.replaceState(null, ")", f(1)); y();'
    result = enhance_generated_code(js=js)
    assert result.js == "x(); void 0 /* history.replaceState removed for preview */; y();"


def test_hash_assignment_removed_but_comparison_kept():
    js = 'location.hash = "#top";\nif (location.hash === "#x") go();'
    result = enhance_generated_code(js=js)
    assert '"#top"' not in result.js
    assert 'if (location.hash === "#x") go();' in result.js


def test_navigation_calls_in_inline_script():
    html = '<script>history.pushState(null, "", "#a")</script>'
    result = enhance_generated_code(html=html)
    assert "pushState(" not in result.html


# --- HTML ---

def test_form_label_added_with_generated_id():
    html = '<form><input type="email" name="email" placeholder="Your email"></form>'
    result = enhance_generated_code(html=html)
    assert '<label for="autolabel-0">Your email</label>' in result.html
    assert '<input id="autolabel-0" type="email" name="email" placeholder="Your email">' in result.html
    assert "Added 1 form label(s)" in result.enhancements


def test_existing_id_reused_for_label():
    html = '<input id="q" name="query">'
    result = enhance_generated_code(html=html)
    assert '<label for="q">query</label>' in result.html


def test_inputs_that_need_no_label_are_skipped():
    html = (
        '<input type="hidden" name="csrf">'
        '<input type="submit" value="Send">'
        '<input aria-label="Search" name="q">'
        '<label for="n">Name</label><input id="n" name="name">'
    )
    result = enhance_generated_code(html=html)
    assert result.html == html
    assert result.enhancements == []


def test_data_id_attribute_is_not_an_id():
    html = '<input data-id="x" name="city">'
    result = enhance_generated_code(html=html)
    assert 'for="autolabel-0"' in result.html


def test_aria_roles_added():
    html = '<div class="navbar"><a href="#">Home</a></div><div class="container"><p>Hi</p></div>'
    result = enhance_generated_code(html=html)
    assert '<div class="container" role="main">' in result.html
    assert '<div class="navbar" role="navigation">' in result.html


def test_aria_roles_not_added_to_semantic_markup():
    html = '<nav><a href="#">Home</a></nav><main><div class="container"></div></main>'
    result = enhance_generated_code(html=html)
    assert 'role="' not in result.html


# --- CSS ---

def test_css_additions_appended_after_banner():
    css = "body { color: #333; }"
    result = enhance_generated_code(css=css)
    assert result.css.startswith(css + "\n\n" + ENHANCEMENT_BANNER)
    assert "outline: 2px solid #4A90E2;" in result.css
    assert "@media (min-width: 768px)" in result.css
    assert "prefers-reduced-motion" in result.css
    assert result.enhancements == [
        "Added :focus styles for keyboard navigation",
        "Added responsive media queries",
        "Added prefers-reduced-motion support",
    ]


def test_css_already_covered_left_alone():
    css = (
        "a:focus { outline: 1px solid red; }\n"
        "@media (max-width: 600px) { body { font-size: 12px; } }\n"
        "@media (prefers-reduced-motion: reduce) { * { animation: none; } }\n"
    )
    result = enhance_generated_code(css=css)
    assert result.css == css
    assert result.enhancements == []


def test_print_media_query_does_not_count_as_responsive():
    css = "@media print { nav { display: none; } }"
    result = enhance_generated_code(css=css)
    assert "Added responsive media queries" in result.enhancements


def test_css_variables_off_by_default():
    css = "a { color: #ff0000; } b { color: #FF0000; }"
    result = enhance_generated_code(css=css)
    assert ":root" not in result.css


def test_css_variables_extracted_for_repeated_colors():
    css = "a { color: #ff0000; } b { color: #FF0000; background: #fff; }"
    result = enhance_generated_code(css=css, options=EnhancementOptions(add_css_variables=True))
    assert ":root {\n  --color-0: #ff0000;\n}" in result.css
    assert "--color-1" not in result.css
    assert "Added CSS custom properties (variables)" in result.enhancements


def test_options_disable_enhancements():
    options = EnhancementOptions(add_focus_styles=False, add_media_queries=False,
                                 add_reduced_motion=False, add_form_labels=False)
    result = enhance_generated_code(html='<input name="a">', css="p { margin: 0; }", options=options)
    assert result.css == "p { margin: 0; }"
    assert "<label" not in result.html


# --- Behaviour across calls ---

def test_enhancement_is_idempotent():
    first = enhance_generated_code(
        html='<div class="container"><input name="email"></div>',
        css="body { margin: 0; }",
    )
    second = enhance_generated_code(html=first.html, css=first.css, js=first.js)
    assert second.html == first.html
    assert second.css == first.css
    assert second.enhancements == []


def test_applied_list_is_per_call():
    enhancer = CodeEnhancer()
    first = enhancer.enhance_code(css="body { margin: 0; }")
    second = enhancer.enhance_code(html="<p>nothing to do</p>")
    assert len(first.enhancements) == 3
    assert second.enhancements == []


def test_empty_input():
    result = enhance_generated_code()
    assert (result.html, result.css, result.js, result.enhancements) == ("", "", "", [])
