"""
Módulo de Reforço Escolar (Blueprint)

Alunos em risco, turmas de reforço, matrícula e conclusão do ciclo,
diário de classe e relatório de permanência.
"""

from flask import Blueprint

reforco_bp = Blueprint('reforco_bp', __name__, url_prefix='/reforco')

from . import routes
