"""
Cliente Tabular da Aplicação (get/post/put/delete/login).

Fala com o banco remoto e, em qualquer falha de conexão, cai para o
espelho local com o mesmo formato. Diferente do cliente antigo, toda
resposta diz de onde veio: Persistido(origem=REMOTO|LOCAL). Erros que não
são de conexão (registro recusado, inexistente) sobem para quem chamou.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional

from google.api_core import exceptions as google_exceptions
from google.auth import exceptions as auth_exceptions
from werkzeug.security import check_password_hash

from .constants import TABELA_USUARIOS
from .espelho_local import EspelhoLocal
from .logger import get_logger
from .modelos import Usuario

logger = get_logger(__name__)

ERROS_DE_CONEXAO = (
    ConnectionError,
    TimeoutError,
    google_exceptions.ServiceUnavailable,
    google_exceptions.DeadlineExceeded,
    google_exceptions.RetryError,
    auth_exceptions.DefaultCredentialsError,
    auth_exceptions.TransportError,
)


class Origem(str, Enum):
    REMOTO = 'remoto'
    LOCAL = 'local'


@dataclass(frozen=True)
class Persistido:
    origem: Origem
    dados: Any = None

    @property
    def offline(self) -> bool:
        return self.origem is Origem.LOCAL


def senha_confere(armazenada: Optional[str], informada: str) -> bool:
    if not armazenada or not informada:
        return False
    if '$' not in armazenada:
        # Texto puro herdado da base antiga (sem hash)
        return armazenada == informada
    try:
        return check_password_hash(armazenada, informada)
    except ValueError:
        # Método de hash desconhecido
        return False


class ClienteApi:

    def __init__(self, remoto: Any = None, local: Optional[EspelhoLocal] = None):
        self.remoto = remoto
        self.local = local if local is not None else EspelhoLocal()

    def _executar(self, operacao: str, tabela: str, *args) -> Persistido:
        if self.remoto is not None:
            try:
                return Persistido(Origem.REMOTO, getattr(self.remoto, operacao)(tabela, *args))
            except ERROS_DE_CONEXAO as e:
                logger.warning(f"API indisponível ({operacao} em {tabela}): {e}. Usando dados locais.")
        return Persistido(Origem.LOCAL, getattr(self.local, operacao)(tabela, *args))

    def get(self, tabela: str) -> Persistido:
        """Persistido.dados = lista de registros (snake_case)."""
        return self._executar('listar', tabela)

    def find(self, tabela: str, doc_id: str) -> Persistido:
        """Persistido.dados = registro atual no banco, ou None se não existir."""
        return self._executar('obter', tabela, doc_id)

    def post(self, tabela: str, registro: Dict[str, Any]) -> Persistido:
        """Persistido.dados = id do registro criado."""
        return self._executar('inserir', tabela, registro)

    def put(self, tabela: str, doc_id: str, parcial: Dict[str, Any]) -> Persistido:
        return self._executar('atualizar', tabela, doc_id, parcial)

    def delete(self, tabela: str, doc_id: str) -> Persistido:
        return self._executar('excluir', tabela, doc_id)

    def login(self, email: str, senha: str) -> Persistido:
        """
        Persistido.dados = Usuario com a senha conferida, ou None.
        Usuários inativos são devolvidos; quem decide bloquear é o serviço.
        """
        email = (email or '').strip().lower()
        resultado = self._executar('buscar_por_campo', TABELA_USUARIOS, 'email', email)
        registros: List[Dict[str, Any]] = resultado.dados or []

        for registro in registros:
            if senha_confere(registro.get('password'), senha):
                return Persistido(resultado.origem, Usuario.de_registro(registro))
        return Persistido(resultado.origem, None)

    def check_connection(self) -> bool:
        if self.remoto is None:
            return False
        try:
            return bool(self.remoto.verificar_conexao())
        except ERROS_DE_CONEXAO as e:
            logger.warning(f"Modo Offline ativado (API inacessível): {e}")
            return False
