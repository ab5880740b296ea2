"""2025-10 - module config en lien avec env."""

# config.py
from __future__ import annotations

from dataclasses import dataclass, field
import os
from pathlib import Path
from typing import TYPE_CHECKING

from dotenv import load_dotenv

if TYPE_CHECKING:
    from lecturesnap.models.llm_config import LLMConfig

# Chargement du .env (les variables déjà présentes dans l'environnement priment)
load_dotenv(os.getenv("LECTURESNAP_ENV_FILE", ".env"))


class ConfigError(Exception):
    """
    Erreur de configuration (.env / variables d'environnement).
    """


# --- Fonctions utilitaires ---


def get_str(key: str, default: str = "") -> str:
    return os.getenv(key, default)


def get_int(key: str, default: int = 0) -> int:
    """
    Retourne la variable env convertie en entier.

    Lève ConfigError si conversion impossible.
    """
    raw = os.getenv(key, str(default))
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigError(f"[CONFIG ERROR] La variable {key} doit être un entier (valeur: {raw!r}).") from exc


def get_float(key: str, default: float = 0.0) -> float:
    """
    Retourne la variable env convertie en float.

    Lève ConfigError si conversion impossible.
    """
    raw = os.getenv(key, str(default))
    try:
        return float(raw)
    except ValueError as exc:
        raise ConfigError(f"[CONFIG ERROR] La variable {key} doit être un float (valeur: {raw!r}).") from exc


def get_path_list(key: str) -> list[Path]:
    """
    Liste de chemins séparés par os.pathsep (':' sous Linux/macOS).
    """
    raw = os.getenv(key, "")
    return [Path(p).expanduser() for p in raw.split(os.pathsep) if p.strip()]


# --- Variables d'environnement accessibles globalement ---

# LOGS
LOG_FILE_PATH: str = get_str("LOG_FILE_PATH", str(Path.home() / ".lecturesnap" / "logs"))
LOG_ROTATION_DAYS: int = get_int("LOG_ROTATION_DAYS", 30)
LOG_LEVEL: str = get_str("LOG_LEVEL", "INFO").upper()

# EXTRACTION
EXTRACT_MAX_PAGES: int = get_int("EXTRACT_MAX_PAGES", 2)
OCR_LANG: str = get_str("OCR_LANG", "eng")
PROMPT_MAX_CHARS: int = get_int("PROMPT_MAX_CHARS", 6000)

# WATCHER
WATCHDOG_POLL_INTERVAL: float = get_float("WATCHDOG_POLL_INTERVAL", 1.0)
WATCHDOG_DEBOUNCE_WINDOW: float = get_float("WATCHDOG_DEBOUNCE_WINDOW", 0.5)


@dataclass(slots=True, kw_only=True)
class Settings:
    """
    Dossiers déclarés par l'utilisateur.

    Attributes:
        main_folders: Dossiers de collection (un sous-dossier par cours).
        source_roots: Dossiers depuis lesquels on a le droit de déplacer.
    """

    main_folders: list[Path] = field(default_factory=list)
    source_roots: list[Path] = field(default_factory=list)


def load_settings(
    main_folders: list[str] | None = None,
    source_roots: list[str] | None = None,
) -> Settings:
    """
    Combine les arguments explicites et l'env (LECTURESNAP_MAIN_FOLDERS / LECTURESNAP_SOURCE_ROOTS).

    Les arguments explicites priment.
    """
    mains = [Path(p).expanduser() for p in main_folders] if main_folders else get_path_list("LECTURESNAP_MAIN_FOLDERS")
    roots = [Path(p).expanduser() for p in source_roots] if source_roots else get_path_list("LECTURESNAP_SOURCE_ROOTS")
    return Settings(main_folders=mains, source_roots=roots)


def load_llm_config(backend: str | None = None, model_name: str | None = None) -> LLMConfig:
    """
    Construit un LLMConfig depuis l'env, à la frontière (CLI) uniquement.

    Lève ConfigError si le backend est inconnu ou incomplet.
    """
    from lecturesnap.models.llm_config import (
        DEFAULT_LOCAL_MODEL,
        DEFAULT_REMOTE_MODEL,
        OPENAI_CHAT_URL,
        Backend,
        LLMConfig,
    )

    raw_backend = (backend or get_str("LECTURESNAP_BACKEND", Backend.REMOTE.value)).strip().lower()
    try:
        kind = Backend(raw_backend)
    except ValueError as exc:
        raise ConfigError(f"[CONFIG ERROR] Backend inconnu : {raw_backend!r} (remote|local).") from exc

    timeout = get_float("LLM_TIMEOUT", 120.0)
    if kind is Backend.REMOTE:
        config = LLMConfig(
            backend=kind,
            model_name=model_name or get_str("OPENAI_MODEL", DEFAULT_REMOTE_MODEL),
            credential=get_str("OPENAI_API_KEY"),
            endpoint=get_str("OPENAI_API_URL", OPENAI_CHAT_URL),
            timeout=timeout,
        )
    else:
        config = LLMConfig(
            backend=kind,
            model_name=model_name or get_str("OLLAMA_MODEL", DEFAULT_LOCAL_MODEL),
            server_url=get_str("OLLAMA_SERVER"),
            timeout=timeout,
        )
    return config.validate()
