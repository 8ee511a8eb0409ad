import os

os.environ.setdefault('SECRET_KEY', 'chave-de-teste')
os.environ.setdefault('FIRESTORE_ENABLED', 'False')

from datetime import datetime, timezone

import pytest
from werkzeug.security import generate_password_hash

from config import Config
from escola import create_app
from escola.core.erros import ErroPersistencia
from escola.core.modelos import novo_id

AGORA = datetime(2024, 5, 10, 12, 0, tzinfo=timezone.utc)


class ConfigTeste(Config):
    TESTING = True
    FIRESTORE_ENABLED = False
    LOCAL_DB_PATH = None
    GCS_BUCKET_NAME = None
    RATELIMIT_ENABLED = False


class BancoFalso:
    """
    Banco remoto em memória com a mesma interface do BancoFirestore.
    falhar() programa uma exceção para (operação, tabela), opcionalmente
    só quando 'quando(alvo)' for verdadeiro.
    """

    def __init__(self):
        self.tabelas = {}
        self.falhas = []

    def semear(self, tabela, *registros):
        self.tabelas.setdefault(tabela, []).extend(dict(r) for r in registros)

    def falhar(self, operacao, tabela, erro, quando=None):
        self.falhas.append((operacao, tabela, erro, quando))

    def _verificar(self, operacao, tabela, alvo=None):
        for op, tab, erro, quando in self.falhas:
            if op == operacao and tab == tabela and (quando is None or quando(alvo)):
                raise erro

    def listar(self, tabela):
        self._verificar('listar', tabela)
        return [dict(r) for r in self.tabelas.get(tabela, [])]

    def obter(self, tabela, doc_id):
        self._verificar('obter', tabela, doc_id)
        return next((dict(r) for r in self.tabelas.get(tabela, []) if r['id'] == doc_id), None)

    def buscar_por_campo(self, tabela, campo, valor):
        self._verificar('buscar_por_campo', tabela, valor)
        return [dict(r) for r in self.tabelas.get(tabela, []) if r.get(campo) == valor]

    def inserir(self, tabela, registro):
        self._verificar('inserir', tabela, registro)
        registro = dict(registro)
        registro['id'] = registro.get('id') or novo_id()
        registros = self.tabelas.setdefault(tabela, [])
        if any(r['id'] == registro['id'] for r in registros):
            raise ErroPersistencia(f"Documento '{registro['id']}' já existe em {tabela}.", tabela)
        registros.append(registro)
        return registro['id']

    def atualizar(self, tabela, doc_id, parcial):
        self._verificar('atualizar', tabela, doc_id)
        for registro in self.tabelas.get(tabela, []):
            if registro['id'] == doc_id:
                registro.update(parcial)
                return None
        raise ErroPersistencia(f"Documento '{doc_id}' não existe em {tabela}.", tabela)

    def excluir(self, tabela, doc_id):
        self._verificar('excluir', tabela, doc_id)
        self.tabelas[tabela] = [r for r in self.tabelas.get(tabela, []) if r['id'] != doc_id]

    def verificar_conexao(self):
        return True


def usuario_registro(id='u-admin', role='admin', senha='segredo123', **extra):
    registro = {
        'id': id,
        'name': extra.pop('name', f"Usuário {id}"),
        'email': extra.pop('email', f"{id}@escola.com"),
        'role': role,
        'status': 'active',
        'password': generate_password_hash(senha),
    }
    registro.update(extra)
    return registro


@pytest.fixture
def banco():
    return BancoFalso()


@pytest.fixture
def app(banco):
    app = create_app(ConfigTeste, remoto=banco)
    app.extensions['escola'].relogio = lambda: AGORA
    yield app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def coordenador(app):
    return app.extensions['escola']


@pytest.fixture
def logar(client):
    """Abre a sessão direto no cookie, sem passar pelo /login."""

    def _logar(role='admin', id='u-logado'):
        with client.session_transaction() as sess:
            sess['user_profile'] = {'id': id, 'name': 'Teste', 'email': f"{id}@escola.com", 'role': role, 'status': 'active'}
        return client

    return _logar
