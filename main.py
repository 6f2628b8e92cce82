# main.py
"""
Main entry point for the TX-2 website and HUD widget.

This script orchestrates the application lifecycle:
1. Loads configuration from `config.json`.
2. Initializes the logging system.
3. Runs the selected command:
   - `serve`: the website (Flask).
   - `widget`: the HUD widget in a desktop pygame window.
   - `export`: renders every page to static HTML.
4. Handles clean shutdown.
"""
import argparse
import logging
import os
import shutil
from typing import Any, Dict, List, Optional

from utils import setup_logging, load_config, resolve_server_address

dir_path = os.path.dirname(os.path.realpath(__file__))


def serve(config: Dict[str, Any], host: Optional[str] = None, port: Optional[int] = None) -> None:
    from server import create_app

    default_host, default_port = resolve_server_address(config)
    host = host or default_host
    port = port or default_port

    app = create_app(config)
    logging.info(f"TX-2 website running at http://localhost:{port}")
    app.run(host=host, port=port, threaded=True)


def run_widget(config: Dict[str, Any]) -> None:
    from hud import HudCounter
    from frame_driver import create_driver
    from visualization import HudWindow

    vis_params = config.get('visualization', {})
    run_params = config.get('run_control', {})

    counter = HudCounter()
    window = HudWindow(
        counter,
        fps=run_params.get('fps', 60),
        width=vis_params.get('window_width', 720),
    )
    driver = create_driver(config, counter, window.canvas_width)
    driver.bind_resize(window.add_resize_listener)

    try:
        driver.run(
            max_frames=run_params.get('max_frames'),
            scheduler=lambda: window.present_frame(driver),
        )
    finally:
        driver.close()
        window.close()
    logging.info(f"HUD widget closed at count {counter.value}.")


def export_site(config: Dict[str, Any], out_dir: str) -> List[str]:
    """
    Writes every page as static HTML under `out_dir` and copies public/.

    Returns:
        List[str]: The files written.
    """
    from pages import ALLOWED_PATHS
    from server import create_app

    app = create_app(config)
    client = app.test_client()
    written = []

    for path in sorted(ALLOWED_PATHS):
        response = client.get(path)
        if response.status_code != 200:
            raise RuntimeError(f"Rendering {path} failed with status {response.status_code}")
        target_dir = os.path.join(out_dir, path.strip("/"))
        os.makedirs(target_dir, exist_ok=True)
        target = os.path.join(target_dir, "index.html")
        with open(target, 'wb') as f:
            f.write(response.data)
        written.append(target)
        logging.info(f"Exported {path} -> {target}")

    public_src = os.path.join(dir_path, "public")
    if os.path.isdir(public_src):
        shutil.copytree(public_src, os.path.join(out_dir, "public"), dirs_exist_ok=True)
        logging.info(f"Copied static assets to {os.path.join(out_dir, 'public')}")
    return written


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="TX-2 website and HUD widget.")
    parser.add_argument('--config', default=os.path.join(dir_path, 'config.json'),
                        help="Path to config.json")
    sub = parser.add_subparsers(dest='command')

    serve_parser = sub.add_parser('serve', help="Run the website")
    serve_parser.add_argument('--host', default=None)
    serve_parser.add_argument('--port', type=int, default=None)

    sub.add_parser('widget', help="Open the HUD widget window")

    export_parser = sub.add_parser('export', help="Render pages to static HTML")
    export_parser.add_argument('--out', default=os.path.join('dist', 'site'))
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    The main function to run the selected command.
    """
    args = build_parser().parse_args(argv)

    # Logging is not set up yet, so we use a print for this one error.
    try:
        config = load_config(args.config)
    except Exception as e:
        print(f"FATAL: Could not load {args.config}. Error: {e}")
        return 1

    setup_logging(config)
    command = args.command or 'serve'
    logging.info(f"--- TX-2 {command} starting ---")

    if command == 'serve':
        serve(config, args.host if args.command else None, args.port if args.command else None)
    elif command == 'widget':
        run_widget(config)
    elif command == 'export':
        export_site(config, args.out)

    logging.info(f"--- TX-2 {command} shutting down ---")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
