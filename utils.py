# utils.py
"""
Shared plumbing for the website and the HUD widget: logging, config.json
and the server address.
"""
import logging
import logging.handlers
import json
import os
from typing import Dict, Any, Optional, Tuple

from constants import DEFAULT_HOST, DEFAULT_PORT

DEFAULT_LOG_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'
DEFAULT_LOG_FILE = 'logs/site.log'

# --- Data Contracts ---
#
# setup_logging(config: Dict[str, Any]) -> None:
#   - Inputs: the "logging" section ("level", "format", "log_file",
#     optional "max_bytes", "backup_count", "access_level").
#   - Side Effects: Replaces the root logger's handlers with one console
#     handler and one rotating file handler. Creates the log directory.
#     The werkzeug request log follows "access_level" (default WARNING)
#     so the frame stream does not flood the console.
#
# load_config(path: str) -> Dict[str, Any]:
#   - Raises: FileNotFoundError, json.JSONDecodeError (logged first),
#     ValueError when the document is not a JSON object.
#
# resolve_server_address(config, environ=None) -> (str, int):
#   - Invariants: The PORT environment variable wins over config.json.

def setup_logging(config: Dict[str, Any]) -> None:
    """Routes the root logger to the console and a rotating log file."""
    log_config = config.get('logging', {})
    log_level = log_config.get('level', 'INFO').upper()
    log_file_path = log_config.get('log_file', DEFAULT_LOG_FILE)

    log_dir = os.path.dirname(log_file_path)
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)

    formatter = logging.Formatter(log_config.get('format', DEFAULT_LOG_FORMAT))
    handlers = [
        logging.StreamHandler(),
        logging.handlers.RotatingFileHandler(
            log_file_path,
            maxBytes=log_config.get('max_bytes', 1024 * 1024),
            backupCount=log_config.get('backup_count', 5),
        ),
    ]

    root = logging.getLogger()
    root.setLevel(log_level)
    for old in list(root.handlers):
        root.removeHandler(old)
        old.close()
    for handler in handlers:
        handler.setFormatter(formatter)
        root.addHandler(handler)

    access_level = log_config.get('access_level', 'WARNING').upper()
    logging.getLogger('werkzeug').setLevel(access_level)

    logging.info("Logging system initialized.")
    logging.debug(f"Log level {log_level}, file {log_file_path}, access log {access_level}.")

def load_config(path: str) -> Dict[str, Any]:
    """Reads config.json; every section is optional."""
    logging.info(f"Loading configuration from {path}...")
    try:
        with open(path, 'r', encoding='utf-8') as f:
            config = json.load(f)
    except FileNotFoundError:
        logging.error(f"Configuration file not found at {path}.")
        raise
    except json.JSONDecodeError as exc:
        logging.error(f"Error decoding JSON from {path}: line {exc.lineno}, column {exc.colno}.")
        raise

    if not isinstance(config, dict):
        msg = f"Configuration error: {path} must hold a JSON object, got {type(config).__name__}."
        logging.critical(msg)
        raise ValueError(msg)
    logging.info(f"Configuration loaded with sections: {', '.join(sorted(config)) or 'none'}.")
    return config

def resolve_server_address(
    config: Dict[str, Any], environ: Optional[Dict[str, str]] = None
) -> Tuple[str, int]:
    """Returns (host, port) for the web server, honouring the PORT variable."""
    environ = os.environ if environ is None else environ
    server_config = config.get('server', {})
    host = server_config.get('host', DEFAULT_HOST)
    port = server_config.get('port', DEFAULT_PORT)

    env_port = environ.get('PORT')
    if env_port:
        try:
            port = int(env_port)
        except ValueError:
            msg = f"Configuration error: PORT must be an integer, got {env_port!r}."
            logging.critical(msg)
            raise ValueError(msg)
    return host, int(port)
