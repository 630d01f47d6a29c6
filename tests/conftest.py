import io
import subprocess
import tempfile
import zipfile
from pathlib import Path

import pytest

from gnome_theming.config import AssetSpec, Config
from gnome_theming.errors import (
    CommandError,
    DownloadError,
    EnableError,
    IndexRefreshError,
    SettingsError,
)
from gnome_theming.host import Host

WALLPAPER_URL = "https://example.test/wallpaper.png"


def make_zip(files=None) -> bytes:
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w") as zf:
        for name, content in (files or {"metadata.json": "{}", "extension.js": ""}).items():
            zf.writestr(name, content)
    return buf.getvalue()


class FakeRunner:
    def __init__(self):
        self.calls = []
        self.fail = set()

    def run(self, cmd, privileged=False, check=True):
        self.calls.append((list(cmd), privileged))
        if cmd[0] in self.fail:
            raise CommandError(cmd, 1, "denied")
        if cmd[0] == "install":
            Path(cmd[-1]).parent.mkdir(parents=True, exist_ok=True)
            Path(cmd[-1]).write_bytes(Path(cmd[-2]).read_bytes())
        return subprocess.CompletedProcess(cmd, 0, "", "")


class FakePackages:
    def __init__(self, installed=()):
        self.installed = set(installed)
        self.fail_refresh = False
        self.fail_install = set()
        self.fail_cleanup = False
        self.fail_query = set()
        self.calls = []

    def refresh_index(self):
        self.calls.append(("refresh",))
        if self.fail_refresh:
            raise IndexRefreshError(["apt-get", "update"], 100, "network down")

    def is_installed(self, name):
        if name in self.fail_query:
            raise CommandError(["dpkg-query", "-W", name], None, "not found")
        return name in self.installed

    def install(self, name):
        self.calls.append(("install", name))
        if name in self.fail_install:
            raise CommandError(["apt-get", "install", "-y", name], 100, "no candidate")
        self.installed.add(name)

    def autoremove(self):
        self.calls.append(("autoremove",))
        if self.fail_cleanup:
            raise CommandError(["apt-get", "autoremove", "-y"], 1, "locked")

    def clean_cache(self):
        self.calls.append(("clean",))
        if self.fail_cleanup:
            raise CommandError(["apt-get", "clean"], 1, "locked")

    @property
    def installs(self):
        return [c[1] for c in self.calls if c[0] == "install"]


class FakeDownloader:
    def __init__(self, payloads=None):
        self.payloads = dict(payloads or {})
        self.failing = set()
        self.calls = []

    def fetch(self, url, dest):
        self.calls.append(url)
        if url in self.failing or url not in self.payloads:
            raise DownloadError(f"Download of {url} failed: 404")
        Path(dest).write_bytes(self.payloads[url])
        return Path(dest)


class FakeRegistry:
    def __init__(self):
        self.enabled = []
        self.failures = {}

    def enable(self, uuid):
        if uuid in self.failures:
            raise EnableError(uuid, self.failures[uuid], "boom")
        self.enabled.append(uuid)


class FakeSettings:
    def __init__(self):
        self.store = {}
        self.writes = []
        self.failing = set()

    def set(self, schema, key, value):
        self.writes.append((schema, key, value))
        if key in self.failing:
            raise SettingsError(f"{schema} {key}: rejected")
        self.store[(schema, key)] = value


@pytest.fixture
def config(tmp_path):
    backgrounds = tmp_path / "backgrounds"
    backgrounds.mkdir()
    return Config(
        LOG_FILE=tmp_path / "setup.log",
        EXTENSIONS_DIR=tmp_path / "extensions",
        WALLPAPER=AssetSpec(backgrounds / "wallpaper.png", WALLPAPER_URL),
    )


@pytest.fixture
def host(config):
    payloads = {WALLPAPER_URL: b"\x89PNG fake"}
    for spec in config.EXTENSIONS.values():
        payloads[spec.download_url] = make_zip()
    return Host(
        runner=FakeRunner(),
        packages=FakePackages(),
        downloader=FakeDownloader(payloads),
        extensions=FakeRegistry(),
        settings=FakeSettings(),
    )


@pytest.fixture
def archive_factory():
    return make_zip


@pytest.fixture(autouse=True)
def scratch_dir(tmp_path, monkeypatch):
    """Point tempfile at a per-test directory so staged files can be inspected."""
    scratch = tmp_path / "scratch"
    scratch.mkdir()
    monkeypatch.setattr(tempfile, "tempdir", str(scratch))
    return scratch
