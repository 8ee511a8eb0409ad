"""
Respostas JSON padronizadas das rotas de gravação.
"""

from typing import Any

from flask import jsonify

from .api import Persistido


def resposta_gravacao(persistido: Persistido, status: int = 200, **extra: Any):
    """Inclui 'offline' para o front-end avisar que a gravação ficou só no espelho local."""
    corpo = {'offline': persistido.offline, **extra}
    return jsonify(corpo), status
