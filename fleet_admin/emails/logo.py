import base64
from pathlib import Path

import structlog

log = structlog.get_logger(__name__)

LOGO_FILES = ("logo_white.png", "logo_black.png")

_UNSET = object()


class LogoResolver:
    """Resolves the email header logo once per process.

    A configured URL wins. Otherwise the first readable file in ``logo_dir`` is
    embedded as a base64 data URI. A miss is cached too, so the filesystem is
    only probed on the first call.
    """

    def __init__(self, url: str = "", logo_dir: str | Path = "./public"):
        self.url = (url or "").strip()
        self.logo_dir = Path(logo_dir)
        self._cached = _UNSET

    def resolve(self) -> str | None:
        if self.url:
            return self.url
        if self._cached is not _UNSET:
            return self._cached
        self._cached = self._load()
        return self._cached

    def _load(self) -> str | None:
        for name in LOGO_FILES:
            path = self.logo_dir / name
            try:
                data = path.read_bytes()
            except OSError as exc:
                log.warning("email.logo_load_failed", path=str(path), error=str(exc))
                continue
            return "data:image/png;base64," + base64.b64encode(data).decode("ascii")
        return None
