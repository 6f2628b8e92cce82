# server.py
"""
HTTP request handling for the TX-2 website.

URL paths map either to a static file (public/, dist/, public/client/) or
to a server-rendered page; anything else gets the styled 404 page. The HUD
widget is served from here too: its counter is shared by every request
thread and each open stream drives its own particle field until the
client disconnects.
"""
import logging
import os
import threading
from typing import Any, Callable, Dict, Optional

from flask import Flask, Response, jsonify, redirect, render_template, request, send_from_directory
from werkzeug.exceptions import NotFound

from constants import (
    DEFAULT_CANVAS_WIDTH, FALLBACK_MIME_TYPE, FPS_PLACEHOLDER, MIME_TYPES, SITE_DESCRIPTION
)
from frame_driver import create_driver
from hud import HudCounter
from markup import render_html
from pages import ALLOWED_PATHS, PAGE_TITLES, build_page, not_found
from simulation import DEFAULT_JITTER_CAP, DEFAULT_JITTER_SCALE, jitter_magnitude

# --- Data Contracts ---
#
# create_app(config=None, root_dir=None) -> Flask:
#   - Inputs:
#     - config: The full application config (may be empty).
#     - root_dir: Directory holding public/, dist/ and templates/;
#       defaults to the directory of this file.
#   - Outputs: A configured Flask app. app.extensions["hud"] holds the
#     shared HudState.
#   - Invariants: Static files are only ever served from inside their
#     base directory; a missing file renders the 404 page.

dir_path = os.path.dirname(os.path.realpath(__file__))
STREAM_BOUNDARY = "frame"


def content_type_for(filename: str) -> str:
    """Content type from the extension table, octet-stream otherwise."""
    ext = os.path.splitext(filename)[1].lower()
    return MIME_TYPES.get(ext, FALLBACK_MIME_TYPE)


class HudState:
    """
    The HUD counter shared by all requests, the live stream count and the
    latest frame rate reported by an open stream.
    """

    def __init__(self, config: Dict[str, Any]):
        self.config = config
        self.counter = HudCounter()
        self._streams = 0
        self._fps: Optional[int] = None
        self._lock = threading.Lock()

    @property
    def streams(self) -> int:
        return self._streams

    @property
    def fps(self) -> Optional[int]:
        return self._fps

    @property
    def fps_label(self) -> str:
        return FPS_PLACEHOLDER if self._fps is None else f"{self._fps} fps"

    def record_fps(self, fps: Optional[int]) -> None:
        if fps is not None:
            self._fps = fps

    def open_stream(self) -> None:
        with self._lock:
            self._streams += 1

    def close_stream(self) -> None:
        with self._lock:
            self._streams = max(0, self._streams - 1)
            if self._streams == 0:
                self._fps = None

    def new_driver(self, width: float, clock: Optional[Callable[[], float]] = None):
        return create_driver(self.config, self.counter, width, clock=clock)


def _canvas_width(value: Optional[str]) -> int:
    try:
        width = int(value) if value else DEFAULT_CANVAS_WIDTH
    except ValueError:
        width = DEFAULT_CANVAS_WIDTH
    return min(max(width, 50), 1200)


def stream_frames(driver, hud: HudState):
    """
    multipart/x-mixed-replace body: one PNG part per frame.

    Werkzeug closes this generator when the client goes away, which closes
    the driver and cancels its loop.
    """
    hud.open_stream()
    logging.info(f"HUD stream opened ({hud.streams} active).")
    frames = driver.frames()
    try:
        for canvas in frames:
            hud.record_fps(driver.fps_counter.fps)
            yield (b'--' + STREAM_BOUNDARY.encode() + b'\r\n'
                   b'Content-Type: image/png\r\n\r\n' + canvas.to_png_bytes() + b'\r\n')
    finally:
        frames.close()
        hud.close_stream()
        logging.info(f"HUD stream closed ({hud.streams} active).")


def create_app(config: Optional[Dict[str, Any]] = None, root_dir: Optional[str] = None) -> Flask:
    """Builds the website's Flask application."""
    config = config or {}
    root_dir = root_dir or dir_path
    public_dir = os.path.join(root_dir, "public")
    dist_dir = os.path.join(root_dir, "dist")

    app = Flask(__name__, template_folder=os.path.join(root_dir, "templates"),
                static_folder=None)
    hud = HudState(config)
    app.extensions["hud"] = hud

    def serve_file(base_dir: str, filename: str) -> Response:
        logging.debug(f"Serving file: {filename} -> {os.path.join(base_dir, filename)}")
        content_type = content_type_for(filename)
        response = send_from_directory(base_dir, filename, mimetype=content_type)
        # Werkzeug appends a charset to text types; send the table value as is.
        response.headers["Content-Type"] = content_type
        return response

    def render_document(path: str, tree, status: int = 200):
        html = render_template(
            "document.html",
            title=PAGE_TITLES.get(path, "TX-2 // 404"),
            description=SITE_DESCRIPTION,
            body=render_html(tree),
        )
        return html, status, {"Content-Type": "text/html; charset=utf-8"}

    @app.errorhandler(404)
    def page_not_found(error):
        logging.info(f"404 for {request.path}")
        return render_document(request.path, not_found(), 404)

    @app.route('/public/<path:filename>')
    def public_file(filename):
        return serve_file(public_dir, filename)

    @app.route('/dist/<path:filename>')
    def dist_file(filename):
        return serve_file(dist_dir, filename)

    @app.route('/client/<path:filename>')
    def client_file(filename):
        return serve_file(os.path.join(public_dir, "client"), filename)

    def page(path: str):
        tree = build_page(path, hud.counter.value, hud.fps_label)
        if tree is None:
            raise NotFound()
        return render_document(path, tree)

    for path in sorted(ALLOWED_PATHS):
        endpoint = "page_" + (path.strip("/") or "home")
        app.add_url_rule(path, endpoint, lambda path=path: page(path))

    @app.route('/hud/stream')
    def hud_stream():
        """Particle field stream. Put this in the src attribute of an img tag."""
        driver = hud.new_driver(_canvas_width(request.args.get("width")))
        return Response(stream_frames(driver, hud),
                        mimetype=f'multipart/x-mixed-replace; boundary={STREAM_BOUNDARY}')

    @app.route('/hud/frame.png')
    def hud_frame():
        driver = hud.new_driver(_canvas_width(request.args.get("width")))
        driver.run(max_frames=1)
        driver.close()
        return Response(driver.canvas.to_png_bytes(), mimetype="image/png")

    @app.route('/api/hud/counter', methods=['GET', 'POST'])
    def hud_counter_api():
        if request.method == 'GET':
            return jsonify({"count": hud.counter.value})

        payload = request.get_json(force=True, silent=True)
        if not isinstance(payload, dict):
            return jsonify({"error": "expected a JSON object"}), 400
        delta = payload.get("delta", 0)
        if isinstance(delta, bool) or not isinstance(delta, int):
            return jsonify({"error": "delta must be an integer"}), 400
        return jsonify({"success": True, "count": hud.counter.update(delta)})

    @app.route('/hud/tick', methods=['POST'])
    def hud_tick():
        try:
            delta = int(request.form.get("delta", "0"))
        except ValueError:
            return jsonify({"error": "delta must be an integer"}), 400
        hud.counter.update(delta)
        return redirect("/#hud-widget", code=303)

    @app.route('/api/hud/status')
    def hud_status():
        count = hud.counter.value
        params = config.get('particle_field', {})
        jitter = jitter_magnitude(
            count,
            params.get("jitter_scale", DEFAULT_JITTER_SCALE),
            params.get("jitter_cap", DEFAULT_JITTER_CAP),
        )
        return jsonify({"count": count, "jitter": jitter, "streams": hud.streams, "fps": hud.fps})

    logging.info(f"Website app created (static root {root_dir}).")
    return app
