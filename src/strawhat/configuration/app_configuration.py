from __future__ import annotations
from pathlib import Path
import fcntl
from typing import Any, Dict, Tuple
import yaml

from strawhat.util.logger import get_logger

logger = get_logger("app_configuration")


CONFIG_PATH = Path("./config/app_config.yml").resolve()
PACKAGE_DIR = Path(__file__).resolve().parents[1]

DEFAULT_API_BASE_URL = "https://discord.com/api/v10"
DEFAULT_EMBED_COLOR = 0xE3B341


class AppConfig:
    """File-lock based accessor around the YAML application configuration.

    The class caches the contents of ``./config/app_config.yml`` and exposes
    typed properties for every setting the bot reads. Missing sections and
    malformed values fall back to defaults so a partial config still boots.
    """

    def __init__(self, config_path: Path) -> None:
        self.config_path = config_path
        self._data: Dict[str, Any] = {}
        self.reload()

    # --------------------------
    # Private helpers
    # --------------------------
    def load_from_disk(self) -> Dict[str, Any]:
        try:
            with self.config_path.open("r", encoding="utf-8") as f:
                fcntl.flock(f.fileno(), fcntl.LOCK_SH)
                data = yaml.safe_load(f)
                fcntl.flock(f.fileno(), fcntl.LOCK_UN)
                return data if isinstance(data, dict) else {}
        except FileNotFoundError:
            logger.error("[APP CONFIGURATION] Config file %s not found.", self.config_path)
        except Exception as exc:
            logger.error("[APP CONFIGURATION] Failed to load config %s: %s", self.config_path, exc)
        return {}

    def _section(self, name: str) -> Dict[str, Any]:
        section = self._data.get(name, {})
        return section if isinstance(section, dict) else {}

    def _folder(self, key: str, default: Path) -> Path:
        value = self._section("extensions").get(key)
        return Path(value).resolve() if value else default

    # --------------------------
    # Public API
    # --------------------------
    def reload(self) -> Dict[str, Any]:
        """Reload configuration from disk and return the loaded mapping."""
        self._data = self.load_from_disk()
        return self._data

    @property
    def data(self) -> Dict[str, Any]:
        """Return the cached configuration mapping (do not mutate)."""
        return self._data

    def get(self, key: str, default: Any = None) -> Any:
        """Safe lookup for top-level configuration keys."""
        return self._data.get(key, default)

    # --------------------------
    # Client identity
    # --------------------------
    @property
    def client_name(self) -> str:
        return str(self._section("client").get("name") or "Strawhat")

    @property
    def client_version(self) -> str:
        return str(self._section("client").get("version") or "0.0.0")

    @property
    def application_id(self) -> int:
        return int(self._section("client").get("application_id") or 0)

    @property
    def home_guild_id(self) -> int | None:
        """Guild that receives guild-scoped command registrations, if any."""
        value = self._section("client").get("home_guild_id")
        return int(value) if value else None

    @property
    def presence(self) -> str:
        return str(self._section("client").get("presence") or "")

    @property
    def embed_color(self) -> int:
        """Main embed color; accepts ``"#rrggbb"`` strings or integers."""
        value = self._section("embeds").get("main_color", DEFAULT_EMBED_COLOR)
        if isinstance(value, str):
            try:
                return int(value.lstrip("#"), 16)
            except ValueError:
                logger.warning("[APP CONFIGURATION] Invalid embed color %r, using default", value)
                return DEFAULT_EMBED_COLOR
        return int(value)

    # --------------------------
    # Extensions
    # --------------------------
    @property
    def commands_folder(self) -> Path:
        return self._folder("commands_folder", PACKAGE_DIR / "extensions" / "commands")

    @property
    def events_folder(self) -> Path:
        return self._folder("events_folder", PACKAGE_DIR / "extensions" / "events")

    # --------------------------
    # Datasets
    # --------------------------
    @property
    def data_directory(self) -> Path:
        return Path(self._section("data").get("directory") or "./data").resolve()

    @property
    def refresh_time(self) -> Tuple[int, int]:
        """Daily dataset refresh time as ``(hour, minute)`` local time.

        Defaults to midnight. Malformed values are logged and ignored.
        """
        value = str(self._section("data").get("refresh_time") or "00:00")
        try:
            hour, minute = (int(part) for part in value.split(":", 1))
            if not (0 <= hour < 24 and 0 <= minute < 60):
                raise ValueError(value)
            return hour, minute
        except ValueError:
            logger.warning("[APP CONFIGURATION] Invalid refresh_time %r, using 00:00", value)
            return 0, 0

    @property
    def refresh_on_startup(self) -> bool:
        return bool(self._section("data").get("refresh_on_startup", True))

    # --------------------------
    # Discord API
    # --------------------------
    @property
    def api_base_url(self) -> str:
        return str(self._section("discord_api").get("base_url") or DEFAULT_API_BASE_URL).rstrip("/")

    def message(self, key: str, default: str = "") -> str:
        """Return a user-facing message from the ``messages`` section."""
        return str(self._section("messages").get(key) or default)


# Shared application-wide configuration instance
app_config = AppConfig(CONFIG_PATH)
