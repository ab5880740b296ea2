"""
utils/safe_runner.py

Décorateur des points d'entrée CLI : traduit le retour et les erreurs en code de sortie.
"""

from __future__ import annotations

from collections.abc import Callable
from functools import wraps
import sys
import traceback
from typing import Any

from lecturesnap.models.exceptions import LectureSnapError
from lecturesnap.utils.config import ConfigError

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_CONFIG = 2
EXIT_INTERRUPTED = 130


def exit_code_for(exc: BaseException) -> int:
    if isinstance(exc, KeyboardInterrupt):
        return EXIT_INTERRUPTED
    if isinstance(exc, ConfigError):
        return EXIT_CONFIG
    return EXIT_ERROR


def safe_main(func: Callable[..., Any]) -> Callable[..., Any]:
    """
    Entrée CLI : le int retourné devient le code de sortie (0 sinon).

    - ConfigError → 2, message seul.
    - LectureSnapError → 1, code + contexte, sans traceback.
    - CTRL+C → 130.
    - Toute autre exception → 1 avec traceback complet.
    """

    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            code = func(*args, **kwargs)
        except KeyboardInterrupt as exc:
            print("Interrompu.", file=sys.stderr)
            sys.exit(exit_code_for(exc))
        except ConfigError as exc:
            print(f"❌ Configuration: {exc}", file=sys.stderr)
            sys.exit(exit_code_for(exc))
        except LectureSnapError as exc:
            print(f"❌ {exc} | ctx={exc.ctx!r}", file=sys.stderr)
            sys.exit(exit_code_for(exc))
        except Exception as exc:  # pylint: disable=broad-except
            print(f"❌ Erreur inattendue: {exc}", file=sys.stderr)
            traceback.print_exc(file=sys.stderr)
            sys.exit(exit_code_for(exc))
        sys.exit(code if isinstance(code, int) else EXIT_OK)

    return wrapper
