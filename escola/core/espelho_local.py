"""
Espelho Local (Modo Offline).

Mesmo formato do banco remoto, persistido num arquivo JSON
({tabela: [registros]}). Usado quando o Firestore está inacessível ou
desativado. Sem caminho de arquivo, os dados ficam só em memória.
"""

import json
import os
import secrets
import threading
import time
from typing import Any, Dict, List, Optional

from .erros import ErroPersistencia
from .logger import get_logger

logger = get_logger(__name__)


class EspelhoLocal:

    def __init__(self, caminho: Optional[str] = None):
        self.caminho = caminho
        self._lock = threading.Lock()
        self._tabelas: Dict[str, List[Dict[str, Any]]] = self._carregar()

    def _carregar(self) -> Dict[str, List[Dict[str, Any]]]:
        if not self.caminho or not os.path.exists(self.caminho):
            return {}
        try:
            with open(self.caminho, encoding='utf-8') as arquivo:
                dados = json.load(arquivo)
        except (OSError, ValueError) as e:
            logger.error(f"Espelho local ilegível ({self.caminho}): {e}. Iniciando vazio.")
            return {}
        if not isinstance(dados, dict):
            return {}
        return {tabela: list(registros) for tabela, registros in dados.items() if isinstance(registros, list)}

    def _salvar(self) -> None:
        if not self.caminho:
            return
        pasta = os.path.dirname(self.caminho)
        if pasta:
            os.makedirs(pasta, exist_ok=True)
        temporario = f"{self.caminho}.tmp"
        with open(temporario, 'w', encoding='utf-8') as arquivo:
            json.dump(self._tabelas, arquivo, ensure_ascii=False, indent=2, default=str)
        os.replace(temporario, self.caminho)

    @staticmethod
    def _gerar_id() -> str:
        return f"local-{int(time.time() * 1000)}-{secrets.token_hex(5)}"

    def listar(self, tabela: str) -> List[Dict[str, Any]]:
        with self._lock:
            return [dict(registro) for registro in self._tabelas.get(tabela, [])]

    def obter(self, tabela: str, doc_id: str) -> Optional[Dict[str, Any]]:
        return next((registro for registro in self.listar(tabela) if registro.get('id') == doc_id), None)

    def buscar_por_campo(self, tabela: str, campo: str, valor: Any) -> List[Dict[str, Any]]:
        return [registro for registro in self.listar(tabela) if registro.get(campo) == valor]

    def inserir(self, tabela: str, registro: Dict[str, Any]) -> str:
        registro = dict(registro)
        if not registro.get('id'):
            registro['id'] = self._gerar_id()
        with self._lock:
            registros = self._tabelas.setdefault(tabela, [])
            if any(existente.get('id') == registro['id'] for existente in registros):
                raise ErroPersistencia(f"Registro '{registro['id']}' já existe em {tabela}.", tabela)
            registros.append(registro)
            self._salvar()
        return registro['id']

    def atualizar(self, tabela: str, doc_id: str, parcial: Dict[str, Any]) -> None:
        with self._lock:
            for registro in self._tabelas.get(tabela, []):
                if registro.get('id') == doc_id:
                    registro.update({chave: valor for chave, valor in parcial.items() if chave != 'id'})
                    self._salvar()
                    return
        raise ErroPersistencia(f"Registro '{doc_id}' não encontrado localmente em {tabela}.", tabela)

    def excluir(self, tabela: str, doc_id: str) -> None:
        with self._lock:
            registros = self._tabelas.get(tabela, [])
            self._tabelas[tabela] = [registro for registro in registros if registro.get('id') != doc_id]
            self._salvar()

    def verificar_conexao(self) -> bool:
        return False
