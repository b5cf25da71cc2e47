# --- lofpdf_lib/constants.py ---
"""
lofpdf_lib/constants.py: Shared constants and the built-in theme defaults.
"""

DOT_LEADER_TEXT_DEFAULT = ". "
PLACEHOLDER_MARKER = "?"
DEFAULT_MISSING_TITLE = "missing title"

# Points per pixel when an image carries no DPI information (96 dpi).
POINTS_PER_PIXEL = 0.75

# Tolerance used when comparing vertical offsets, in points.
EPSILON = 0.001

# --- THEME DEFAULTS ---
# Every value is a string, as stored in the INI theme file.
THEME_DEFAULTS = {
    "page": {
        "size": "A4",
        "margin_top": "54",
        "margin_bottom": "54",
        "margin_left": "54",
        "margin_right": "54",
        "numbering_start": "body",
    },
    "base": {
        "font_family": "Helvetica",
        "font_size": "10.5",
        "font_color": "#333333",
        "line_height": "1.4",
        "text_align": "left",
    },
    "heading": {
        "font_family": "Helvetica-Bold",
        "font_color": "#000000",
        "text_align": "left",
        "h1_font_size": "24",
        "h2_font_size": "18",
        "h3_font_size": "14",
        "h4_font_size": "12",
        "h5_font_size": "10.5",
        "h6_font_size": "10",
        "margin_bottom": "9",
        "margin_top": "6",
        "min_level": "1",
    },
    "block": {
        "margin_bottom": "12",
    },
    "caption": {
        "font_family": "Helvetica-Oblique",
        "font_size": "9.5",
        "figure_signifier": "Figure",
        "table_signifier": "Table",
        "example_signifier": "Example",
    },
    "code": {
        "font_family": "Courier",
        "font_size": "9",
    },
    "toc": {
        "title": "Table of Contents",
        "levels": "2",
        "indent": "15",
        "margin_top": "0",
        "break_after": "true",
        "heading_level": "2",
        "dot_leader_content": DOT_LEADER_TEXT_DEFAULT,
        "dot_leader_levels": "all",
        "dot_leader_font_size": "",
        "dot_leader_font_color": "#999999",
        "dot_leader_font_family": "",
        "page_number_width": "3",
        "missing_title": DEFAULT_MISSING_TITLE,
        "show_number": "false",
    },
    "lof": {
        "title": "List of Figures",
        "heading_level": "3",
    },
    "lot": {
        "title": "List of Tables",
        "heading_level": "3",
    },
    "loe": {
        "title": "List of Examples",
        "heading_level": "3",
    },
    "layout": {
        "drift_policy": "error",
        "missing_title_policy": "default",
    },
    "footer": {
        "page_numbers": "true",
        "font_size": "9",
    },
}
