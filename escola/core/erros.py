"""
Exceções de domínio.

Conectividade não aparece aqui: o cliente da API trata como modo offline.
"""


class ErroValidacao(ValueError):
    """Entrada inválida ou operação proibida; nada foi gravado."""


class ErroPersistencia(Exception):
    """O banco recusou a gravação (não é falha de conexão)."""

    def __init__(self, mensagem: str, tabela: str = None):
        super().__init__(mensagem)
        self.tabela = tabela


class ErroReforco(Exception):
    """
    A avaliação foi salva, mas a atualização do status de reforço do aluno
    falhou. Os dois registros podem ficar divergentes.
    """

    def __init__(self, mensagem: str, avaliacao_id: str, aluno_id: str):
        super().__init__(mensagem)
        self.avaliacao_id = avaliacao_id
        self.aluno_id = aluno_id


class FalhaEmLote(Exception):
    """
    Ao menos uma gravação de um lote falhou.

    'relatorio' traz o resultado de cada item (gravado ou não), e a
    recarga posterior mostra o estado real do banco.
    """

    def __init__(self, mensagem: str, relatorio):
        super().__init__(mensagem)
        self.relatorio = relatorio
