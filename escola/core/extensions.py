"""
Módulo Central de Extensões.
Evita importações circulares centralizando as instâncias das extensões.
"""
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address

# Limiter (Rate Limiting) - protege os logins contra força bruta.
# Em produção, idealmente usar Redis (RATELIMIT_STORAGE_URI).
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=["2000 per day", "500 per hour"]
)
