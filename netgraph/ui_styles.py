from typing import Any, Dict

DEFAULT_THEME = "Graphite"

THEMES = {
    "Graphite": {
        "bg": "#f4f5f7",
        "surface": "#ffffff",
        "ink": "#20242b",
        "muted": "#657080",
        "accent": "#d9480f",
        "border": "#dde1e6",
        "critical": "#d9480f",
        "critical_soft": "#ffe3d5",
        "noncritical": "#1c7ed6",
        "event_node": "#e7f0fa",
        "event_node_crit": "#ffd0b8",
        "graph_edge": "#9aa5b1",
        "float_bar": "#ced4da",
    },
    "Paper": {
        "bg": "#fbf8f1",
        "surface": "#fffdf8",
        "ink": "#2b2620",
        "muted": "#7a6f60",
        "accent": "#b02a37",
        "border": "#e8e0d0",
        "critical": "#b02a37",
        "critical_soft": "#f6d6d9",
        "noncritical": "#2f6f5e",
        "event_node": "#e4efe9",
        "event_node_crit": "#f3c5ca",
        "graph_edge": "#b8ad9b",
        "float_bar": "#ddd5c6",
    },
}


def get_active_theme(theme_name: str) -> Dict[str, Any]:
    return THEMES.get(theme_name, THEMES[DEFAULT_THEME])


APP_CSS = """
<style>
.stApp {
    background: __NG_BG__;
}
[data-testid="stAppViewContainer"],
[data-testid="stAppViewContainer"] p,
[data-testid="stAppViewContainer"] label {
    color: __NG_INK__;
}
[data-testid="stAppViewContainer"] .stCaption,
[data-testid="stMetricLabel"] {
    color: __NG_MUTED__;
}
[data-testid="stSidebar"] {
    background: __NG_SURFACE__;
    border-right: 1px solid __NG_BORDER__;
}
.ng-path {
    display: inline-block;
    padding: 8px 14px;
    border-radius: 10px;
    border: 1px solid __NG_BORDER__;
    background: __NG_SURFACE__;
    color: __NG_ACCENT__;
    font-weight: 600;
    font-family: monospace;
}
</style>
"""


def get_theme_css(theme: Dict[str, Any]) -> str:
    """
    Returns the CSS for the application with tokens replaced by theme values.
    """
    css = APP_CSS
    replacements = {
        "__NG_BG__": theme["bg"],
        "__NG_SURFACE__": theme["surface"],
        "__NG_INK__": theme["ink"],
        "__NG_MUTED__": theme["muted"],
        "__NG_ACCENT__": theme["accent"],
        "__NG_BORDER__": theme["border"],
    }
    for token, value in replacements.items():
        css = css.replace(token, value)
    return css
