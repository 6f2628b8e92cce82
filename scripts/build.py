#!/usr/bin/env python3
"""
Builds the site: byte-compiles the server modules and exports the static
pages, both at once. Exits with status 1 if either step fails.
"""
import logging
import os
import subprocess
import sys
from typing import List, Sequence, Tuple

ROOT_DIR = os.path.dirname(os.path.dirname(os.path.realpath(__file__)))
CONFIG_PATH = os.path.join(ROOT_DIR, "config.json")

# Run from anywhere: the project modules live at the repository root.
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

from utils import load_config, setup_logging  # noqa: E402

MODULES = [
    "constants.py", "utils.py", "particle.py", "simulation.py", "hud.py",
    "visualization.py", "frame_driver.py", "markup.py", "pages.py",
    "server.py", "main.py",
]


def build_steps(python: str = sys.executable, out_dir: str = os.path.join("dist", "site")) -> List[Tuple[str, List[str]]]:
    return [
        ("compile", [python, "-m", "compileall", "-q", *MODULES]),
        ("export", [python, "main.py", "export", "--out", out_dir]),
    ]


def run_steps(steps: Sequence[Tuple[str, List[str]]], cwd: str = ROOT_DIR) -> None:
    """
    Starts every step, then waits for all of them.

    Raises:
        RuntimeError: Naming every step that exited non-zero.
    """
    processes = []
    for name, command in steps:
        logging.info(f"Starting {name}: {' '.join(command)}")
        processes.append((name, subprocess.Popen(command, cwd=cwd)))

    failures = []
    for name, process in processes:
        code = process.wait()
        if code != 0:
            failures.append(f"{name} failed with code {code}")
    if failures:
        raise RuntimeError("; ".join(failures))


def main(config_path: str = CONFIG_PATH) -> int:
    try:
        config = load_config(config_path)
    except Exception as e:
        print(f"FATAL: Could not load {config_path}. Error: {e}")
        return 1
    setup_logging(config)

    try:
        run_steps(build_steps())
    except (RuntimeError, OSError) as e:
        logging.error(f"Build failed: {e}")
        return 1
    logging.info("Build complete!")
    return 0


if __name__ == "__main__":
    sys.exit(main())
