"""
# models/llm_config.py
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from lecturesnap.utils.config import ConfigError

OPENAI_CHAT_URL = "https://api.openai.com/v1/chat/completions"
DEFAULT_REMOTE_MODEL = "gpt-4o-mini"
DEFAULT_LOCAL_MODEL = "deepseek-r1:14b"


class Backend(StrEnum):
    """
    Mode de service du LLM.
    """

    REMOTE = "remote"
    LOCAL = "local"


class ResponseSchema(StrEnum):
    """
    Format de réponse attendu du modèle.
    """

    LINES = "lines"
    JSON = "json"


@dataclass(frozen=True, slots=True, kw_only=True)
class LLMConfig:
    """
    Configuration explicite d'un appel LLM (pas de globale cachée).

    Attributes:
        backend: remote (API type OpenAI) ou local (serveur type Ollama).
        model_name: Nom du modèle envoyé dans la requête.
        credential: Clé API, obligatoire en remote.
        server_url: URL de base du serveur local, obligatoire en local.
        endpoint: Endpoint chat-completions du backend remote.
        timeout: Timeout HTTP en secondes.
        temperature: Température d'échantillonnage.
        max_tokens: Limite de tokens (remote uniquement).
    """

    backend: Backend = Backend.REMOTE
    model_name: str = DEFAULT_REMOTE_MODEL
    credential: str = ""
    server_url: str = ""
    endpoint: str = OPENAI_CHAT_URL
    timeout: float = 120.0
    temperature: float = 0.7
    max_tokens: int = 256

    @property
    def schema(self) -> ResponseSchema:
        return ResponseSchema.JSON if self.backend is Backend.REMOTE else ResponseSchema.LINES

    @property
    def url(self) -> str:
        if self.backend is Backend.LOCAL:
            return f"{self.server_url.rstrip('/')}/v1/chat/completions"
        return self.endpoint

    def validate(self) -> LLMConfig:
        """
        Vérifie la présence des valeurs requises par le backend.

        Lève ConfigError sinon.
        """
        if self.backend is Backend.REMOTE and not self.credential.strip():
            raise ConfigError("[CONFIG ERROR] Clé API absente pour le backend remote.")
        if self.backend is Backend.LOCAL and not self.server_url.strip():
            raise ConfigError("[CONFIG ERROR] URL du serveur absente pour le backend local.")
        return self
