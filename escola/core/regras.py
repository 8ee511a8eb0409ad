"""
Motor de Regras do Reforço Escolar.

Decide, a cada avaliação gravada, se o aluno entra ou sai do reforço, e
monta as alterações das ações manuais (matricular / concluir).

As funções são puras: recebem o momento atual e devolvem um PatchAluno
(ou None). Quem grava o patch é o Coordenador.

Ciclo de reforço:
- aberto quando há data de entrada e não há saída, ou quando a saída é
  anterior a uma entrada mais recente;
- uma nova entrada sempre limpa a saída antiga (novo ciclo).
"""

from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

from .datas import para_iso, parse_data, timestamp_ou_zero
from .erros import ErroValidacao
from .modelos import STATUS_RISCO, STATUS_SUCESSO, Aluno, Avaliacao, Turma


class Transicao(str, Enum):
    ENTRADA = 'entrada'
    SAIDA = 'saida'
    MATRICULA = 'matricula'
    CONCLUSAO = 'conclusao'


MENSAGENS = {
    Transicao.ENTRADA: "⚠️ Atenção: Com base neste resultado, o aluno entrou automaticamente na lista de Reforço Escolar em {data}.",
    Transicao.SAIDA: "🎉 Parabéns! O desempenho do aluno registrou a SAÍDA automática do Reforço Escolar em {data}.",
    Transicao.MATRICULA: "Aluno matriculado na turma de reforço em {data}.",
    Transicao.CONCLUSAO: "Ciclo de reforço concluído em {data}. O aluno está liberado para uma nova avaliação.",
}


@dataclass(frozen=True)
class PatchAluno:
    aluno_id: str
    transicao: Transicao
    campos: Dict[str, Any]

    @property
    def mensagem(self) -> str:
        chave = 'remediation_exit_date' if self.transicao in (Transicao.SAIDA, Transicao.CONCLUSAO) else 'remediation_entry_date'
        momento = parse_data(self.campos.get(chave))
        data = momento.strftime('%d/%m/%Y') if momento else ''
        return MENSAGENS[self.transicao].format(data=data)

    def aplicar(self, aluno: Aluno) -> Aluno:
        return replace(aluno, **self.campos)


def em_reforco(aluno: Aluno) -> bool:
    entrada = aluno.remediation_entry_date
    if not entrada:
        return False
    saida = aluno.remediation_exit_date
    if not saida:
        return True
    return timestamp_ou_zero(saida) < timestamp_ou_zero(entrada)


def _campos_entrada(agora: datetime) -> Dict[str, Any]:
    return {
        'remediation_entry_date': para_iso(agora),
        'remediation_exit_date': None,
    }


def avaliar(avaliacao: Avaliacao, aluno: Aluno, agora: datetime) -> Optional[PatchAluno]:
    """
    Transição automática após gravar 'avaliacao'.

    - Atingiu/Superou com ciclo aberto: registra a saída.
    - Não Atingiu/Em Desenvolvimento sem ciclo aberto: abre um novo ciclo.
    - Qualquer outro caso (inclusive o aluno já no estado certo): None.
    """
    aberto = em_reforco(aluno)

    if avaliacao.status in STATUS_SUCESSO and aberto:
        return PatchAluno(aluno.id, Transicao.SAIDA, {'remediation_exit_date': para_iso(agora)})

    if avaliacao.status in STATUS_RISCO and not aberto:
        return PatchAluno(aluno.id, Transicao.ENTRADA, _campos_entrada(agora))

    return None


def concluir(aluno: Aluno, agora: datetime) -> PatchAluno:
    """Conclusão manual do ciclo (mesma transição da saída automática)."""
    if not em_reforco(aluno):
        raise ErroValidacao(f"O aluno {aluno.name} não possui ciclo de reforço em aberto.")
    return PatchAluno(aluno.id, Transicao.CONCLUSAO, {'remediation_exit_date': para_iso(agora)})


def matricular(aluno: Aluno, turma_reforco: Turma, agora: datetime) -> PatchAluno:
    """
    Move o aluno para a turma de reforço e abre o ciclo no mesmo patch:
    turma e datas são gravadas juntas ou não são gravadas.
    """
    if not turma_reforco.is_remediation:
        raise ErroValidacao(f"A turma '{turma_reforco.name}' não é uma turma de reforço.")
    if not turma_reforco.ativa:
        raise ErroValidacao(f"A turma '{turma_reforco.name}' está inativa.")

    campos = {'class_id': turma_reforco.id, **_campos_entrada(agora)}
    return PatchAluno(aluno.id, Transicao.MATRICULA, campos)
