"""Keyword tables driving iteration detection and feature summaries.

Entries match case-insensitively at the start of a word and may run on into
it ("margin" matches "margins", "add a" matches "add another"). Only
NEW_PROJECT_PHRASES and COLOR_WORDS must match as whole words.
"""

# Unambiguous "start over" phrasing. Plain verbs like "make" or politeness
# like "please" must never appear here.
NEW_PROJECT_PHRASES = (
    "start from scratch", "start over", "start fresh", "fresh start",
    "new project", "new app", "new website", "new site",
    "build me a", "build me an", "make me a", "make me an",
    "create a", "create an", "write a", "write an",
    "generate a", "generate an",
)

ITERATION_KEYWORDS = (
    "modif", "updat", "chang", "fix", "remov", "delet", "edit", "refactor",
    "adjust", "tweak", "improv", "replac", "renam", "restyl",
    "redesign", "rebuild", "rewrit", "overhaul",
    "add to", "add a", "add an", "add some", "add the", "also add",
    "move the", "swap", "instead of",
)

COMPONENT_REFERENCES = (
    "the header", "the footer", "the navigation", "the nav", "nav bar",
    "navbar", "the sidebar", "the form", "the button", "the modal",
    "the hero", "the menu", "the layout", "the logo", "the title",
    "this page", "this app", "this project", "this site", "this website",
    "the page", "the app", "the website", "the site", "the homepage",
    "existing", "current",
)

LARGE_SCOPE_INDICATORS = (
    "redesign", "rebuild", "rewrit", "from scratch", "overhaul",
    "entire", "whole",
)

# Named colours count as styling tweaks alongside "color". Whole words only:
# "red" must not match "reduce" or "redirect".
COLOR_WORDS = (
    "red", "blue", "green", "yellow", "orange", "purple", "pink", "black",
    "white", "gray", "grey", "teal", "navy", "gold", "silver",
)

SMALL_SCOPE_INDICATORS = (
    "button", "color", "colour", "css", "font", "spacing", "margin",
    "padding", "fix", "bug", "typo", "align", "size",
)

# (keywords, summary line) pairs scanned over previous prompts.
HISTORY_FEATURES = (
    (("authentication", "auth", "login", "log in", "sign in", "signup", "sign up"),
     "- User authentication system"),
    (("dashboard",), "- Dashboard interface"),
    (("database", "db"), "- Database integration"),
    (("api",), "- API endpoints"),
    (("contact", "form"), "- Contact form"),
    (("blog",), "- Blog functionality"),
    (("portfolio",), "- Portfolio showcase"),
)
