"""
Módulo de Cadastros (Blueprint)

Turmas, alunos, habilidades BNCC, disciplinas e usuários da equipe.
"""

from flask import Blueprint

cadastros_bp = Blueprint('cadastros_bp', __name__, url_prefix='/cadastros')

from . import routes
