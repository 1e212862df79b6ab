from __future__ import annotations

from dataclasses import dataclass
import logging
import os
from pathlib import Path
import sys


DEFAULT_BASE_URL = "http://localhost:3000/v1"


class ConfigurationError(ValueError):
    pass


@dataclass(frozen=True)
class AppSettings:
    base_url: str
    timeout_seconds: int
    credential_store: str
    credential_store_path: str
    log_level: str

    @staticmethod
    def from_env() -> "AppSettings":
        _load_dotenv_if_present()

        base_url = os.getenv("SHOP_API_BASE_URL", "").strip() or DEFAULT_BASE_URL
        base_url = base_url.rstrip("/")

        raw_timeout = os.getenv("SHOP_API_TIMEOUT_SECONDS", "30").strip()
        try:
            timeout_seconds = int(raw_timeout)
        except ValueError:
            raise ConfigurationError(
                f"SHOP_API_TIMEOUT_SECONDS must be an integer, got {raw_timeout!r}"
            ) from None

        credential_store = os.getenv("SHOP_API_CREDENTIAL_STORE", "file").strip().lower()

        default_store_path = os.path.join(
            os.getenv("LOCALAPPDATA", os.getcwd()),
            "ShopApiTester",
            "credentials.json",
        )
        credential_store_path = (
            os.getenv("SHOP_API_CREDENTIAL_STORE_PATH", "").strip() or default_store_path
        )
        log_level = os.getenv("SHOP_API_LOG_LEVEL", "INFO").strip().upper()

        settings = AppSettings(
            base_url=base_url,
            timeout_seconds=timeout_seconds,
            credential_store=credential_store,
            credential_store_path=credential_store_path,
            log_level=log_level,
        )
        settings.validate()
        return settings

    def validate(self) -> None:
        invalid = []
        if not self.base_url.startswith(("http://", "https://")):
            invalid.append("SHOP_API_BASE_URL")
        if self.timeout_seconds <= 0:
            invalid.append("SHOP_API_TIMEOUT_SECONDS")
        if self.credential_store not in ("file", "memory"):
            invalid.append("SHOP_API_CREDENTIAL_STORE")
        if self.credential_store == "file" and not self.credential_store_path:
            invalid.append("SHOP_API_CREDENTIAL_STORE_PATH")
        if not isinstance(logging.getLevelName(self.log_level), int):
            invalid.append("SHOP_API_LOG_LEVEL")

        if invalid:
            raise ConfigurationError("Invalid settings: " + ", ".join(invalid))


def _load_dotenv_if_present(file_name: str = ".env") -> None:
    for candidate in _candidate_env_files(file_name):
        _load_env_file(candidate)


def _candidate_env_files(file_name: str) -> list[Path]:
    candidates: list[Path] = []

    explicit = os.getenv("SHOP_API_ENV_FILE", "").strip()
    if explicit:
        candidates.append(Path(explicit).expanduser())

    candidates.append(Path.cwd() / file_name)

    if getattr(sys, "frozen", False):
        exe_dir = Path(sys.executable).resolve().parent
        candidates.append(exe_dir / file_name)
    else:
        project_root = Path(__file__).resolve().parent.parent
        candidates.append(project_root / file_name)

    unique_candidates: list[Path] = []
    seen: set[str] = set()
    for path in candidates:
        normalized = str(path.resolve()) if path.exists() else str(path)
        if normalized in seen:
            continue
        seen.add(normalized)
        unique_candidates.append(path)
    return unique_candidates


def _load_env_file(path: Path) -> None:
    if not path.exists():
        return

    try:
        with path.open("r", encoding="utf-8") as env_file:
            for raw_line in env_file:
                line = raw_line.strip()
                if not line or line.startswith("#") or "=" not in line:
                    continue

                key, value = line.split("=", 1)
                key = key.strip()
                value = value.strip().strip('"').strip("'")

                if key and key not in os.environ:
                    os.environ[key] = value
    except OSError:
        return
