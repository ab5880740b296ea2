"""
# llm/llm_call.py

Transport HTTP vers le LLM (backend remote type OpenAI, ou serveur local type Ollama).
"""

from __future__ import annotations

from typing import Any

import requests

from lecturesnap.models.exceptions import LLMError
from lecturesnap.models.llm_config import Backend, LLMConfig
from lecturesnap.utils.logger import LoggerProtocol, ensure_logger, with_child_logger


def build_request(prompt: str, config: LLMConfig) -> tuple[str, dict[str, str], dict[str, Any]]:
    """
    Construit (url, headers, payload) selon le backend.

    Lève LLMError si la clé (remote) ou le serveur (local) manque.
    """
    headers = {"Content-Type": "application/json"}
    payload: dict[str, Any] = {
        "model": config.model_name,
        "messages": [{"role": "user", "content": prompt}],
        "temperature": config.temperature,
    }
    if config.backend is Backend.REMOTE:
        if not config.credential.strip():
            raise LLMError("API key not set", ctx={"backend": str(config.backend)})
        headers["Authorization"] = f"Bearer {config.credential}"
        payload["max_tokens"] = config.max_tokens
    elif not config.server_url.strip():
        raise LLMError("Local server not set", ctx={"backend": str(config.backend)})
    return config.url, headers, payload


def _extract_content(resp: requests.Response) -> str:
    try:
        data = resp.json()
        content = data["choices"][0]["message"]["content"]
    except (ValueError, KeyError, IndexError, TypeError) as exc:
        raise LLMError("Unexpected response format", ctx={"body": resp.text[:500]}) from exc
    if not isinstance(content, str):
        raise LLMError("Unexpected response format", ctx={"body": resp.text[:500]})
    return content.strip()


@with_child_logger
def call_llm(prompt: str, config: LLMConfig, *, logger: LoggerProtocol | None = None) -> str:
    """
    Appel bloquant texte → texte. Pas de retry automatique.

    - remote : retourne choices[0].message.content.
    - local : retourne le corps brut, l'enveloppe est défaite par le parser.

    Lève LLMError sur toute erreur réseau / HTTP / format.
    """
    logger = ensure_logger(logger, __name__)
    url, headers, payload = build_request(prompt, config)
    logger.debug("[LLM] POST %s model=%s backend=%s", url, config.model_name, config.backend)

    try:
        resp = requests.post(url, json=payload, headers=headers, timeout=config.timeout)
        logger.debug("[LLM] Réponse brute (%s) : %s", resp.status_code, resp.text[:1000])
        resp.raise_for_status()
    except requests.exceptions.Timeout as exc:
        raise LLMError("Request timed out", ctx={"url": url, "timeout": config.timeout}) from exc
    except requests.exceptions.ConnectionError as exc:
        raise LLMError("Connection failed", ctx={"url": url}) from exc
    except requests.exceptions.HTTPError as exc:
        status = exc.response.status_code if exc.response is not None else None
        raise LLMError(f"HTTP {status}", ctx={"url": url, "status": status}) from exc
    except requests.exceptions.RequestException as exc:
        # URL mal formée, schéma manquant, ...
        raise LLMError("Invalid endpoint", ctx={"url": url, "root_exc": type(exc).__name__}) from exc

    if config.backend is Backend.REMOTE:
        return _extract_content(resp)

    text = resp.text.strip()
    if not text:
        logger.warning("[WARNING] 🚨 Réponse LLM vide")
        raise LLMError("Empty response", ctx={"url": url, "status": resp.status_code})
    return text
