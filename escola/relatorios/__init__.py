"""
Módulo de Relatórios (Blueprint)

Ficha do aluno, boletim, linha do tempo, mapa de habilidades, ata do
conselho de classe, painel e calendário acadêmico.
"""

from flask import Blueprint

relatorios_bp = Blueprint('relatorios_bp', __name__, url_prefix='/relatorios')

from . import routes
