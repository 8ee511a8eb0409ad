"""
Módulo do Mural (Blueprint)

Avisos da escola e Biblioteca Digital de materiais (arquivos no
Google Cloud Storage).
"""

from flask import Blueprint

mural_bp = Blueprint('mural_bp', __name__, url_prefix='/mural')

from . import routes
