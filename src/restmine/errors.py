"""
Hierarquia de erros do restmine.
"""

from typing import Optional


class RestmineError(Exception):
    """Erro base do restmine."""


class ValidationError(RestmineError):
    """Entrada do usuário inválida (atividade desconhecida, sem issue, sem tempo)."""


class ConfigurationError(RestmineError):
    """Configuração ausente ou inconsistente (tipo de issue/atividade desconhecido)."""


class TransportError(RestmineError):
    """Falha de rede ou status HTTP fora da faixa 2xx."""

    def __init__(
        self,
        message: str,
        status: Optional[int] = None,
        reason: Optional[str] = None,
        response_text: Optional[str] = None,
    ):
        super().__init__(message)
        self.status = status
        self.reason = reason
        self.response_text = response_text
