"""
Módulo de Configuração (Blindado)

Define a classe de configuração principal. Implementa o padrão 'Fail Fast':
se uma variável crítica estiver faltando, a aplicação nem inicia.
Integrações opcionais (Firestore, Storage, Gemini) apenas emitem AVISO:
sem elas o sistema funciona no modo offline (espelho local).
"""

import os
from dotenv import load_dotenv

# Carrega variáveis do arquivo .env
load_dotenv()


def _flag(nome: str, padrao: str = 'False') -> bool:
    return os.environ.get(nome, padrao).lower() in ('true', '1', 'sim')


class Config:
    """
    Classe de configuração base da aplicação.
    """

    # === SEGURANÇA CRÍTICA (Fail Fast) ===
    SECRET_KEY = os.environ.get('SECRET_KEY')
    if not SECRET_KEY:
        raise ValueError("ERRO CRÍTICO: 'SECRET_KEY' não encontrada no .env. A aplicação não pode iniciar insegura.")

    # === BANCO REMOTO (Firestore) ===
    GOOGLE_CLOUD_PROJECT = os.environ.get('GOOGLE_CLOUD_PROJECT')
    FIRESTORE_ENABLED = _flag('FIRESTORE_ENABLED', 'True') and bool(GOOGLE_CLOUD_PROJECT)

    if not FIRESTORE_ENABLED:
        print("AVISO: Firestore desativado ou 'GOOGLE_CLOUD_PROJECT' ausente. Dados serão gravados apenas no espelho local.")

    # === ESPELHO LOCAL (Modo Offline) ===
    LOCAL_DB_PATH = os.environ.get('LOCAL_DB_PATH', os.path.join('instance', 'espelho_local.json'))

    # === STORAGE (Biblioteca Digital e Anexos) ===
    GCS_BUCKET_NAME = os.environ.get('GCS_BUCKET_NAME')
    if not GCS_BUCKET_NAME:
        print("AVISO: 'GCS_BUCKET_NAME' não configurado. Uploads falharão.")

    # === IA (Planejador de Aulas) ===
    GOOGLE_API_KEY = os.environ.get('GOOGLE_API_KEY')
    GEMINI_MODEL = os.environ.get('GEMINI_MODEL', 'gemini-2.5-flash')
    if not GOOGLE_API_KEY:
        print("AVISO: 'GOOGLE_API_KEY' ausente. A geração de planos com IA não funcionará.")

    # === ESCOLA ===
    NOME_ESCOLA = os.environ.get('NOME_ESCOLA', 'Escola Olavo Bilac')

    # === CACHE DO ESTADO ===
    # Idade máxima (segundos) das coleções em memória antes de servir uma leitura
    ESTADO_VALIDADE_SEGUNDOS = float(os.environ.get('ESTADO_VALIDADE_SEGUNDOS', '5'))

    # === FLASK ===
    DEBUG = _flag('FLASK_DEBUG')

    # === RATE LIMIT ===
    RATELIMIT_ENABLED = _flag('RATELIMIT_ENABLED', 'True')
    RATELIMIT_STORAGE_URI = os.environ.get('RATELIMIT_STORAGE_URI', 'memory://')
