"""
Módulo de Avaliações (Blueprint)

Registro individual, grade de notas em lote e consulta com filtros.
Toda gravação aciona a regra automática do Reforço Escolar.
"""

from flask import Blueprint

avaliacoes_bp = Blueprint('avaliacoes_bp', __name__, url_prefix='/avaliacoes')

from . import routes
