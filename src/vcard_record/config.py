from __future__ import annotations

import logging
import os
import tomllib
from dataclasses import dataclass
from pathlib import Path

from .serializer import DEFAULT_PRODID, DEFAULT_VERSION

logger = logging.getLogger(__name__)


@dataclass
class Settings:
    version: str = DEFAULT_VERSION
    prodid: str = DEFAULT_PRODID
    default_region: str = ""        # empty: leave phone numbers as given


DEFAULT_CONF = f"""# vcard-record local config (TOML)
version = "{DEFAULT_VERSION}"
prodid = "{DEFAULT_PRODID}"
default_region = ""
"""


def conf_path(base: Path | None = None) -> Path:
    return Path(base or os.getcwd()) / "local" / "vcard.conf"


def load_settings(conf: Path) -> Settings:
    """Read `conf`; a missing or malformed file yields the defaults."""
    settings = Settings()
    if not conf.exists():
        return settings
    try:
        data = tomllib.loads(conf.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        logger.warning("%s is malformed (%s); using defaults", conf, exc)
        return settings
    settings.version = str(data.get("version", settings.version))
    settings.prodid = str(data.get("prodid", settings.prodid))
    settings.default_region = str(data.get("default_region", settings.default_region))
    return settings


def ensure_workspace(base: Path | None = None) -> tuple[Path, Settings]:
    """Create local/vcard.conf with defaults if needed and return it with its settings."""
    conf = conf_path(base)
    conf.parent.mkdir(parents=True, exist_ok=True)
    if not conf.exists():
        conf.write_text(DEFAULT_CONF, encoding="utf-8")
    return conf, load_settings(conf)
