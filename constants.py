# constants.py
"""
Application-level constants.

These values are static and do not change between runs. They cover the
HUD widget's look (colours, layout), the frame pacing defaults and the
static file content-type table used by the web server. Anything that is
part of the tunable particle field lives in config.json instead.
"""

# --- Site ---
SITE_TITLE = "TX-2: Web Entity Component System"
SITE_DESCRIPTION = (
    "TX-2 is a fullstack Entity Component System framework for building "
    "reactive web applications with SSR, state sync, and type-safe RPC."
)
DEFAULT_PORT = 3000
DEFAULT_HOST = "0.0.0.0"

# Content types for files served from public/ and dist/.
MIME_TYPES = {
    ".html": "text/html",
    ".js": "application/javascript",
    ".css": "text/css",
    ".json": "application/json",
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".gif": "image/gif",
    ".svg": "image/svg+xml",
    ".ico": "image/x-icon",
}
FALLBACK_MIME_TYPE = "application/octet-stream"

# --- Frame pacing ---
FPS = 60
FPS_REPORT_INTERVAL_MS = 1000
FPS_PLACEHOLDER = "—"

# --- Particle canvas ---
CANVAS_HEIGHT = 200
DEFAULT_CANVAS_WIDTH = 200
BACKGROUND_COLOR = (7, 9, 9)       # #070909
NEON_GREEN = (57, 255, 20)         # #39ff14
POINT_RADIUS = 2.2
LINK_WIDTH = 1

# --- HUD window layout ---
HUD_WINDOW_WIDTH = 720
HUD_PADDING = 16
HUD_GAP = 12
HUD_BUTTON_HEIGHT = 36
HUD_PANEL_COLOR = (14, 18, 18)
HUD_BORDER_COLOR = (36, 52, 44)
HUD_TEXT_COLOR = (220, 230, 224)
HUD_MUTED_COLOR = (120, 140, 130)
BUTTON_COLOR = (30, 40, 36)
BUTTON_HOVER_COLOR = (48, 64, 56)
