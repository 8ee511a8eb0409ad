"""
Módulo de Autenticação (Blueprint)

Define o Blueprint do Flask para as rotas de login da equipe escolar
(e-mail e senha) e do Portal dos Pais (matrícula e data de nascimento).
"""

from flask import Blueprint

# Cria uma instância do Blueprint para 'auth'
auth_bp = Blueprint('auth_bp', __name__)

# Importa as rotas no final para evitar dependência circular
from . import routes
