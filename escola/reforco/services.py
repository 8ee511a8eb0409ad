"""
Camada de Serviço (Service Layer) do Reforço Escolar.

Visões somente-leitura montadas a partir do EstadoEscolar:
- alunos em risco agrupados por turma;
- turmas de reforço com contagem de alunos e professores;
- relatório de permanência;
- diários de classe de uma turma.
"""

import math
from datetime import datetime
from typing import Any, Dict, List, Optional

from escola.core.datas import parse_data, parte_data
from escola.core.estado import EstadoEscolar
from escola.core.modelos import STATUS_RISCO
from escola.core import regras
from escola.core.frequencia import percentual_frequencia

SEGUNDOS_POR_DIA = 24 * 60 * 60


def agrupar_alunos_em_risco(estado: EstadoEscolar) -> List[Dict[str, Any]]:
    """
    Avaliações 'Não Atingiu' / 'Em Desenvolvimento', agrupadas pela turma
    ATUAL do aluno.

    - Aluno com data de saída registrada não aparece (já superou a dificuldade).
    - Um mesmo par (aluno, habilidade) aparece uma única vez: vale a
      primeira avaliação encontrada.
    - Os grupos seguem a ordem em que as turmas foram vistas.
    """
    grupos: Dict[str, Dict[str, Any]] = {}
    vistos = set()

    for avaliacao in estado.avaliacoes:
        if avaliacao.status not in STATUS_RISCO:
            continue

        aluno = estado.aluno(avaliacao.student_id)
        if aluno is None or aluno.remediation_exit_date:
            continue

        turma = estado.turma(aluno.class_id) if aluno.class_id else None
        habilidade = estado.habilidade(avaliacao.skill_id) if avaliacao.skill_id else None
        if turma is None or habilidade is None:
            continue

        chave = (aluno.id, habilidade.id)
        if chave in vistos:
            continue
        vistos.add(chave)

        grupo = grupos.setdefault(turma.id, {
            'turma_id': turma.id,
            'turma': turma.name,
            'itens': [],
        })
        grupo['itens'].append({
            'aluno_id': aluno.id,
            'aluno': aluno.name,
            'habilidade_id': habilidade.id,
            'habilidade': habilidade.code,
            'descricao': habilidade.description,
            'status': avaliacao.status.value,
            'rotulo': avaliacao.status.rotulo,
            'data': avaliacao.date,
            'em_reforco': regras.em_reforco(aluno),
        })

    return list(grupos.values())


def resumir_turmas_reforco(estado: EstadoEscolar) -> List[Dict[str, Any]]:
    resumo = []
    for turma in estado.turmas:
        if not turma.is_remediation:
            continue
        professores = [u.name for u in (estado.usuario(pid) for pid in turma.teacher_ids) if u]
        resumo.append({
            'id': turma.id,
            'nome': turma.name,
            'status': turma.status,
            'professores': professores,
            'total_alunos': sum(1 for aluno in estado.alunos if aluno.class_id == turma.id),
        })
    return resumo


def _duracao_em_dias(entrada: Optional[str], saida: Optional[str], agora: datetime) -> Optional[int]:
    inicio = parse_data(entrada)
    if inicio is None:
        return None
    fim = parse_data(saida) or agora
    return math.ceil(abs((fim - inicio).total_seconds()) / SEGUNDOS_POR_DIA)


def relatorio_permanencia(
    estado: EstadoEscolar,
    agora: datetime,
    turma_id: Optional[str] = None,
    inicio: Optional[str] = None,
    fim: Optional[str] = None,
) -> List[Dict[str, Any]]:
    """
    Alunos de turmas de reforço ou com data de entrada registrada.

    O período filtra pela data de entrada, comparando só a parte
    'AAAA-MM-DD'. Ciclo aberto mostra 'Em curso' e conta os dias até agora.
    """
    turmas_reforco = {t.id for t in estado.turmas if t.is_remediation}
    linhas = []

    for aluno in estado.alunos:
        if aluno.class_id not in turmas_reforco and not aluno.remediation_entry_date:
            continue
        if turma_id and aluno.class_id != turma_id:
            continue

        data_entrada = parte_data(aluno.remediation_entry_date)
        if inicio and (not data_entrada or data_entrada < inicio):
            continue
        if fim and (not data_entrada or data_entrada > fim):
            continue

        aberto = regras.em_reforco(aluno)
        saida = None if aberto else aluno.remediation_exit_date
        turma = estado.turma(aluno.class_id) if aluno.class_id else None

        linhas.append({
            'aluno_id': aluno.id,
            'aluno': aluno.name,
            'turma': turma.name if turma else '-',
            'entrada': aluno.remediation_entry_date,
            'saida': saida if saida else 'Em curso',
            'dias': _duracao_em_dias(aluno.remediation_entry_date, saida, agora),
            'em_reforco': aberto,
        })

    return linhas


def listar_diarios(estado: EstadoEscolar, turma_id: str) -> List[Dict[str, Any]]:
    """Diários da turma, do mais recente para o mais antigo."""
    diarios = sorted(
        (d for d in estado.diarios if d.class_id == turma_id),
        key=lambda d: d.date,
        reverse=True,
    )
    return [
        {
            **diario.para_registro(),
            'presentes': sum(1 for presente in diario.attendance.values() if presente),
        }
        for diario in diarios
    ]


def frequencia_da_turma(estado: EstadoEscolar, turma_id: str) -> Dict[str, Optional[int]]:
    """Percentual de frequência de cada aluno da turma (None sem diários)."""
    return {
        aluno.id: percentual_frequencia(aluno.id, turma_id, estado.diarios)
        for aluno in estado.alunos
        if aluno.class_id == turma_id
    }
