from __future__ import annotations
import json
import os
from pathlib import Path


def downloads_dir() -> str:
    """Return the user's Downloads directory, falling back to home."""
    xdg = os.environ.get("XDG_DOWNLOAD_DIR")
    if xdg and Path(xdg).is_dir():
        return xdg
    dl = Path.home() / "Downloads"
    if dl.is_dir():
        return str(dl)
    return str(Path.home())

_DEFAULTS = {
    "midi_port": None,
    "device_name_fragment": "EWI-USB",
    "sysex_dir": None,
    "listen_seconds": 5.0,
}

class AppConfig:
    def __init__(self, path: Path | None = None) -> None:
        self._path = path or Path.home() / ".config" / "ewiconf" / "config.json"
        self.midi_port: str | None = _DEFAULTS["midi_port"]
        self.device_name_fragment: str = _DEFAULTS["device_name_fragment"]
        self.sysex_dir: str | None = _DEFAULTS["sysex_dir"]
        self.listen_seconds: float = _DEFAULTS["listen_seconds"]
        self._load()

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> None:
        if not self._path.exists():
            return
        try:
            data = json.loads(self._path.read_text())
            for key in _DEFAULTS:
                if key in data:
                    setattr(self, key, data[key])
        except (json.JSONDecodeError, OSError):
            pass

    def default_sysex_path(self, filename: str = "ewi-usb.syx") -> Path:
        """Where a .syx file goes when no explicit path is given."""
        return Path(self.sysex_dir or downloads_dir()) / filename

    def save(self) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        data = {key: getattr(self, key) for key in _DEFAULTS}
        self._path.write_text(json.dumps(data, indent=2))
