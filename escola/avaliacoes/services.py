"""
Camada de Serviço (Service Layer) das Avaliações.

Consulta com filtros e montagem da grade de notas da turma.
"""

from typing import Any, Dict, List, Optional

from escola.core.datas import timestamp_ou_zero
from escola.core.estado import EstadoEscolar
from escola.core.frequencia import percentual_frequencia, preencher_participacao, sugerir_participacao
from escola.core.modelos import Avaliacao, StatusAvaliacao, novo_id


def filtrar_avaliacoes(
    estado: EstadoEscolar,
    turma_id: Optional[str] = None,
    trimestre: Optional[str] = None,
    busca: Optional[str] = None,
) -> List[Dict[str, Any]]:
    """
    Filtra por turma ATUAL do aluno, trimestre e texto livre (nome do aluno
    ou código da habilidade). Mais recentes primeiro.
    """
    termo = (busca or '').strip().lower()
    resultado = []

    for avaliacao in estado.avaliacoes:
        aluno = estado.aluno(avaliacao.student_id)
        habilidade = estado.habilidade(avaliacao.skill_id) if avaliacao.skill_id else None

        if turma_id and (aluno is None or aluno.class_id != turma_id):
            continue
        if trimestre and avaliacao.term != trimestre:
            continue
        if termo:
            nome = aluno.name.lower() if aluno else ''
            codigo = habilidade.code.lower() if habilidade else ''
            if termo not in nome and termo not in codigo:
                continue

        resultado.append({
            **avaliacao.para_registro(),
            'aluno': aluno.name if aluno else None,
            'habilidade': habilidade.code if habilidade else None,
        })

    resultado.sort(key=lambda item: timestamp_ou_zero(item['date']), reverse=True)
    return resultado


def montar_grade(estado: EstadoEscolar, turma_id: str, habilidade_id: str, trimestre: str) -> List[Dict[str, Any]]:
    """
    Uma linha por aluno ativo da turma, preenchida com a última avaliação
    de (aluno, habilidade, trimestre). Sem nota de participação, sugere a
    partir da frequência nos diários.
    """
    alunos = sorted(
        (a for a in estado.alunos if a.class_id == turma_id and a.ativo),
        key=lambda a: a.name.lower(),
    )

    linhas = []
    for aluno in alunos:
        existentes = [
            a for a in estado.avaliacoes
            if a.student_id == aluno.id and a.skill_id == habilidade_id and a.term == trimestre
        ]
        ultima = max(existentes, key=lambda a: timestamp_ou_zero(a.date), default=None)
        frequencia = percentual_frequencia(aluno.id, turma_id, estado.diarios)

        linhas.append({
            'id': ultima.id if ultima else None,
            'student_id': aluno.id,
            'aluno': aluno.name,
            'status': ultima.status.value if ultima and ultima.status else None,
            'participation_score': preencher_participacao(
                ultima.participation_score if ultima else None,
                sugerir_participacao(frequencia),
            ),
            'behavior_score': ultima.behavior_score if ultima else None,
            'exam_score': ultima.exam_score if ultima else None,
            'notes': ultima.notes if ultima else None,
            'frequencia': frequencia,
        })
    return linhas


def linhas_para_avaliacoes(
    linhas: List[Dict[str, Any]],
    habilidade_id: str,
    trimestre: str,
    data: str,
    disciplina_id: Optional[str] = None,
) -> List[Avaliacao]:
    """Linhas sem resultado informado são ignoradas (aluno não avaliado)."""
    avaliacoes = []
    for linha in linhas:
        status = linha.get('status')
        if not status:
            continue
        avaliacoes.append(Avaliacao(
            id=linha.get('id') or novo_id(),
            student_id=linha['student_id'],
            status=StatusAvaliacao(status),
            date=data,
            skill_id=habilidade_id,
            subject_id=disciplina_id,
            term=trimestre,
            notes=linha.get('notes') or None,
            participation_score=linha.get('participation_score'),
            behavior_score=linha.get('behavior_score'),
            exam_score=linha.get('exam_score'),
        ))
    return avaliacoes
