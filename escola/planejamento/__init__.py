"""
Módulo do Planejador de Aulas (Blueprint)

Planos de aula vinculados a turma, disciplina e habilidades BNCC, com
sugestão das seções pelo Gemini.
"""

from flask import Blueprint

planejamento_bp = Blueprint('planejamento_bp', __name__, url_prefix='/planejamento')

from . import routes
