"""Shared fixtures: headless pygame, seeded fields, a recording canvas, the web app."""

import os
import shutil

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

import numpy as np
import pytest

from particle import ParticleField
from simulation import Simulation

ROOT_DIR = os.path.dirname(os.path.dirname(os.path.realpath(__file__)))


class RecordingCanvas:
    """Canvas stand-in that records every drawing call."""

    def __init__(self, width=200, height=200):
        self.width = width
        self.height = height
        self.calls = []

    def resize(self, width, height=None):
        self.width = width
        self.height = self.height if height is None else height
        self.calls.append(("resize", width, self.height))

    def clear(self):
        self.calls.append(("clear",))

    def fill_rect(self, color, rect=None):
        self.calls.append(("fill_rect", color, rect))

    def line(self, start, end, color, alpha, width=1):
        self.calls.append(("line", start, end, color, alpha, width))

    def circle(self, center, radius, color):
        self.calls.append(("circle", center, radius, color))

    def present(self):
        self.calls.append(("present",))

    def kinds(self):
        return [call[0] for call in self.calls]

    def of(self, kind):
        return [call for call in self.calls if call[0] == kind]


@pytest.fixture()
def field_params():
    return {"seed": 1234, "particle_count": 48, "initial_speed": 0.6}


@pytest.fixture()
def field(field_params):
    return ParticleField(field_params, 300.0, 200.0)


@pytest.fixture()
def simulation(field):
    return Simulation(field, {"damping": 0.98})


@pytest.fixture()
def canvas():
    return RecordingCanvas(300, 200)


@pytest.fixture()
def site_root(tmp_path):
    """A throwaway static root with the real templates and public assets."""
    shutil.copytree(os.path.join(ROOT_DIR, "templates"), tmp_path / "templates")
    shutil.copytree(os.path.join(ROOT_DIR, "public"), tmp_path / "public")
    (tmp_path / "public" / "client").mkdir(exist_ok=True)
    (tmp_path / "public" / "client" / "boot.js").write_text("console.log('boot');\n")
    (tmp_path / "dist" / "client").mkdir(parents=True)
    (tmp_path / "dist" / "client" / "index.js").write_text("export {};\n")
    (tmp_path / "dist" / "data.bin").write_bytes(b"\x00\x01")
    return tmp_path


@pytest.fixture()
def app_config():
    return {
        "particle_field": {"seed": 7, "particle_count": 12, "height": 200},
        "run_control": {"fps": 1000},
    }


@pytest.fixture()
def app(site_root, app_config):
    from server import create_app

    application = create_app(app_config, root_dir=str(site_root))
    application.config.update(TESTING=True)
    return application


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def rng():
    return np.random.default_rng(99)
