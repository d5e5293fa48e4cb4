"""Configuration loading from environment variables and mediacat.toml."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field
from pathlib import Path

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

_CONFIG_FILENAME = "mediacat.toml"
_TRUTHY = {"1", "true", "yes", "on"}


@dataclass
class ServerConfig:
    """Line-protocol TCP server."""

    host: str = "127.0.0.1"
    port: int = 3331
    # Responses are one line on the wire; embedded newlines become this.
    newline_replacement: str = ";"


@dataclass
class HttpConfig:
    """Optional HTTP front end."""

    enabled: bool = False
    host: str = "127.0.0.1"
    port: int = 8331


@dataclass
class PlayerConfig:
    """External programs used to play entities."""

    image_viewer: str = "imagej"
    media_player: str = "mpv"
    wait: bool = False


@dataclass
class CatalogConfig:
    """Where the catalog comes from and goes to."""

    data_file: Path | None = None
    seed_demo: bool = False
    save_on_exit: bool = False


@dataclass
class MediacatConfig:
    """Top-level mediacat configuration."""

    server: ServerConfig = field(default_factory=ServerConfig)
    http: HttpConfig = field(default_factory=HttpConfig)
    player: PlayerConfig = field(default_factory=PlayerConfig)
    catalog: CatalogConfig = field(default_factory=CatalogConfig)
    pid_file: Path = Path.home() / ".mediacat" / "mediacat.pid"
    log_level: str = "INFO"


def _as_bool(value: object) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in _TRUTHY


def load_config(config_path: Path | None = None) -> MediacatConfig:
    """Load configuration from environment variables and optional mediacat.toml.

    Priority: environment variables > mediacat.toml > defaults.
    """
    file_data: dict = {}
    if config_path and config_path.exists():
        file_data = tomllib.loads(config_path.read_text())
    else:
        # Search current dir and ~/.mediacat/
        for candidate in [
            Path.cwd() / _CONFIG_FILENAME,
            Path.home() / ".mediacat" / _CONFIG_FILENAME,
        ]:
            if candidate.exists():
                file_data = tomllib.loads(candidate.read_text())
                break

    server_data = file_data.get("server", {})
    http_data = file_data.get("http", {})
    player_data = file_data.get("player", {})
    catalog_data = file_data.get("catalog", {})

    data_file = os.getenv("MEDIACAT_DATA_FILE", catalog_data.get("data_file"))

    config = MediacatConfig(
        server=ServerConfig(
            host=os.getenv("MEDIACAT_HOST", server_data.get("host", "127.0.0.1")),
            port=int(os.getenv("MEDIACAT_PORT", server_data.get("port", 3331))),
            newline_replacement=server_data.get("newline_replacement", ";"),
        ),
        http=HttpConfig(
            enabled=_as_bool(os.getenv("MEDIACAT_HTTP_ENABLED", http_data.get("enabled", False))),
            host=http_data.get("host", "127.0.0.1"),
            port=int(os.getenv("MEDIACAT_HTTP_PORT", http_data.get("port", 8331))),
        ),
        player=PlayerConfig(
            image_viewer=os.getenv("MEDIACAT_IMAGE_VIEWER", player_data.get("image_viewer", "imagej")),
            media_player=os.getenv("MEDIACAT_MEDIA_PLAYER", player_data.get("media_player", "mpv")),
            wait=_as_bool(player_data.get("wait", False)),
        ),
        catalog=CatalogConfig(
            data_file=Path(data_file).expanduser() if data_file else None,
            seed_demo=_as_bool(catalog_data.get("seed_demo", False)),
            save_on_exit=_as_bool(catalog_data.get("save_on_exit", False)),
        ),
        log_level=os.getenv("MEDIACAT_LOG_LEVEL", file_data.get("log_level", "INFO")),
    )
    if "pid_file" in file_data:
        config.pid_file = Path(file_data["pid_file"]).expanduser()
    return config
