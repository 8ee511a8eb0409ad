"""
Módulo de Conexão com o Banco de Dados (Core)

Backend remoto do cliente tabular: cada tabela é uma coleção do Google
Firestore e cada registro um documento cujo ID é o 'id' do registro.
O cliente é criado sob demanda; as credenciais vêm de
'GOOGLE_APPLICATION_CREDENTIALS' (definida no .env).
"""

from typing import Any, Dict, List, Optional

from google.api_core import exceptions as google_exceptions
from google.cloud import firestore

from .erros import ErroPersistencia
from .logger import get_logger
from .modelos import novo_id

logger = get_logger(__name__)


class BancoFirestore:
    """
    Implementa as operações tabulares (listar, inserir, atualizar, excluir)
    sobre o Firestore. Erros de conexão sobem sem tratamento para que o
    ClienteApi decida pelo espelho local.
    """

    def __init__(self, projeto: Optional[str] = None, cliente: Optional[firestore.Client] = None):
        self._projeto = projeto
        self._cliente = cliente

    @property
    def db(self) -> firestore.Client:
        if self._cliente is None:
            self._cliente = firestore.Client(project=self._projeto)
            logger.info(f"Conexão com o Firestore estabelecida (projeto: {self._projeto}).")
        return self._cliente

    def listar(self, tabela: str) -> List[Dict[str, Any]]:
        registros = []
        for doc in self.db.collection(tabela).stream():
            dados = doc.to_dict() or {}
            dados['id'] = doc.id
            registros.append(dados)
        return registros

    def obter(self, tabela: str, doc_id: str) -> Optional[Dict[str, Any]]:
        doc = self.db.collection(tabela).document(doc_id).get()
        if not doc.exists:
            return None
        dados = doc.to_dict() or {}
        dados['id'] = doc.id
        return dados

    def buscar_por_campo(self, tabela: str, campo: str, valor: Any) -> List[Dict[str, Any]]:
        consulta = self.db.collection(tabela).where(filter=firestore.FieldFilter(campo, '==', valor))
        registros = []
        for doc in consulta.stream():
            dados = doc.to_dict() or {}
            dados['id'] = doc.id
            registros.append(dados)
        return registros

    def inserir(self, tabela: str, registro: Dict[str, Any]) -> str:
        registro = dict(registro)
        doc_id = str(registro.get('id') or novo_id())
        registro['id'] = doc_id
        try:
            # create() falha se o documento já existir (semântica de INSERT)
            self.db.collection(tabela).document(doc_id).create(registro)
        except google_exceptions.Conflict as e:
            raise ErroPersistencia(f"Registro '{doc_id}' já existe em {tabela}.", tabela) from e
        except google_exceptions.InvalidArgument as e:
            raise ErroPersistencia(f"Registro inválido para {tabela}: {e}", tabela) from e
        return doc_id

    def atualizar(self, tabela: str, doc_id: str, parcial: Dict[str, Any]) -> None:
        campos = {chave: valor for chave, valor in parcial.items() if chave != 'id'}
        try:
            self.db.collection(tabela).document(doc_id).update(campos)
        except google_exceptions.NotFound as e:
            raise ErroPersistencia(f"Registro '{doc_id}' não encontrado em {tabela}.", tabela) from e
        except google_exceptions.InvalidArgument as e:
            raise ErroPersistencia(f"Atualização inválida para {tabela}: {e}", tabela) from e

    def excluir(self, tabela: str, doc_id: str) -> None:
        self.db.collection(tabela).document(doc_id).delete()

    def verificar_conexao(self) -> bool:
        # Qualquer leitura serve; limit(1) mantém o custo mínimo
        list(self.db.collection('users').limit(1).stream())
        return True
