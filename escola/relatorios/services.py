"""
Camada de Serviço (Service Layer) dos Relatórios.

Funções puras sobre o EstadoEscolar: nada aqui grava no banco.
- Ficha do aluno (habilidades por disciplina, destaque, frequência)
- Boletim (disciplina x trimestre)
- Linha do tempo
- Mapa de habilidades da turma e Ata do Conselho de Classe
- Painel (dashboard) e Calendário
"""

from collections import Counter
from typing import Any, Dict, Iterable, List, Optional

from escola.core.calculos import percentual
from escola.core.constants import (
    LIMITE_FREQUENCIA_CRITICA,
    LIMITE_SUCESSO_CRITICO,
    LIMITE_SUCESSO_OBSERVACAO,
    MIN_SUPEROU_DESTAQUE,
    TOTAL_AVISOS_RECENTES,
    TRIMESTRES,
)
from escola.core.datas import parte_data, timestamp_ou_zero
from escola.core.estado import EstadoEscolar
from escola.core.frequencia import percentual_frequencia
from escola.core.modelos import STATUS_RISCO, STATUS_SUCESSO, Aluno, Avaliacao, Habilidade, StatusAvaliacao
from escola.core import regras

SIGLAS_STATUS = {
    StatusAvaliacao.SUPEROU: 'S',
    StatusAvaliacao.ATINGIU: 'A',
    StatusAvaliacao.EM_DESENVOLVIMENTO: 'ED',
    StatusAvaliacao.NAO_ATINGIU: 'NA',
}
NAO_AVALIADO = '-'


def _mais_recente(avaliacoes: Iterable[Avaliacao]) -> Optional[Avaliacao]:
    # max() devolve o primeiro em caso de empate, como o sort estável + [0]
    return max(avaliacoes, key=lambda a: timestamp_ou_zero(a.date), default=None)


def _disciplinas(habilidades: Iterable[Habilidade]) -> List[str]:
    return sorted({h.subject for h in habilidades})


# === BOLETIM ===

def celula_boletim(
    avaliacoes: Iterable[Avaliacao],
    habilidades: Iterable[Habilidade],
    disciplina: str,
    trimestre: str,
) -> Optional[Dict[str, Any]]:
    """
    Célula do boletim para (disciplina, trimestre).

    Retorna None quando não há avaliação. Situação:
    'success' se todas foram Atingiu/Superou, 'danger' se nenhuma,
    'warning' nos demais casos.
    """
    ids_disciplina = {h.id for h in habilidades if h.subject == disciplina}
    do_trimestre = [a for a in avaliacoes if a.skill_id in ids_disciplina and a.term == trimestre]
    if not do_trimestre:
        return None

    total = len(do_trimestre)
    sucesso = sum(1 for a in do_trimestre if a.status in STATUS_SUCESSO)

    if sucesso == total:
        situacao = 'success'
    elif sucesso == 0:
        situacao = 'danger'
    else:
        situacao = 'warning'

    return {
        'total': total,
        'success': sucesso,
        'cell_status': situacao,
        'percentual': percentual(sucesso, total),
    }


def montar_boletim(aluno_id: str, avaliacoes: Iterable[Avaliacao], habilidades: Iterable[Habilidade]) -> Dict[str, Dict[str, Any]]:
    do_aluno = [a for a in avaliacoes if a.student_id == aluno_id]
    habilidades = list(habilidades)
    return {
        disciplina: {
            trimestre: celula_boletim(do_aluno, habilidades, disciplina, trimestre)
            for trimestre in TRIMESTRES
        }
        for disciplina in _disciplinas(habilidades)
    }


# === LINHA DO TEMPO ===

def linha_do_tempo(aluno: Aluno, avaliacoes: Iterable[Avaliacao], habilidades: Iterable[Habilidade]) -> List[Dict[str, Any]]:
    """
    Histórico completo do aluno (avaliações + entrada/saída do reforço),
    do mais recente para o mais antigo. Datas ilegíveis vão para o fim.
    """
    por_id = {h.id: h for h in habilidades}
    eventos = []

    for avaliacao in avaliacoes:
        if avaliacao.student_id != aluno.id:
            continue
        habilidade = por_id.get(avaliacao.skill_id)
        eventos.append({
            'tipo': 'assessment',
            'data': avaliacao.date,
            'avaliacao': avaliacao.para_registro(),
            'habilidade': habilidade.para_registro() if habilidade else None,
        })

    if aluno.remediation_entry_date:
        eventos.append({'tipo': 'remediation_entry', 'data': aluno.remediation_entry_date})
    if aluno.remediation_exit_date:
        eventos.append({'tipo': 'remediation_exit', 'data': aluno.remediation_exit_date})

    eventos.sort(key=lambda evento: timestamp_ou_zero(evento['data']), reverse=True)
    return eventos


# === FICHA DO ALUNO ===

def habilidades_por_disciplina(aluno: Aluno, estado: EstadoEscolar) -> Dict[str, List[Dict[str, Any]]]:
    """Última avaliação de cada habilidade, agrupada pela disciplina."""
    turma = estado.turma(aluno.class_id) if aluno.class_id else None
    foco = set(turma.focus_skills) if turma else set()
    do_aluno = [a for a in estado.avaliacoes if a.student_id == aluno.id]

    agrupado: Dict[str, List[Dict[str, Any]]] = {}
    for habilidade in estado.habilidades:
        ultima = _mais_recente(a for a in do_aluno if a.skill_id == habilidade.id)
        agrupado.setdefault(habilidade.subject, []).append({
            'habilidade': habilidade.para_registro(),
            'avaliacao': ultima.para_registro() if ultima else None,
            'foco': habilidade.id in foco,
        })
    return dict(sorted(agrupado.items()))


def ficha_do_aluno(aluno: Aluno, estado: EstadoEscolar) -> Dict[str, Any]:
    do_aluno = [a for a in estado.avaliacoes if a.student_id == aluno.id]
    superou = sum(1 for a in do_aluno if a.status is StatusAvaliacao.SUPEROU)
    turma = estado.turma(aluno.class_id) if aluno.class_id else None

    return {
        'aluno': aluno.para_registro(),
        'turma': turma.name if turma else None,
        'em_reforco': regras.em_reforco(aluno),
        'destaque': superou >= MIN_SUPEROU_DESTAQUE,
        'frequencia': percentual_frequencia(aluno.id, aluno.class_id, estado.diarios) if aluno.class_id else None,
        'disciplinas': habilidades_por_disciplina(aluno, estado),
    }


# === MAPA DE HABILIDADES E CONSELHO DE CLASSE ===

def _alunos_ativos_da_turma(estado: EstadoEscolar, turma_id: str) -> List[Aluno]:
    return sorted(
        (a for a in estado.alunos if a.class_id == turma_id and a.ativo),
        key=lambda a: a.name.lower(),
    )


def mapa_de_habilidades(estado: EstadoEscolar, turma_id: str, disciplina: str, trimestre: str) -> Dict[str, Any]:
    """
    Matriz aluno x habilidade da disciplina. Cada célula traz a sigla da
    última avaliação do trimestre (S, A, ED, NA) ou '-'.
    """
    habilidades = [h for h in estado.habilidades if h.subject == disciplina]
    do_trimestre = [a for a in estado.avaliacoes if a.term == trimestre]

    linhas = []
    for aluno in _alunos_ativos_da_turma(estado, turma_id):
        celulas = {}
        for habilidade in habilidades:
            ultima = _mais_recente(
                a for a in do_trimestre if a.student_id == aluno.id and a.skill_id == habilidade.id
            )
            celulas[habilidade.id] = SIGLAS_STATUS.get(ultima.status, NAO_AVALIADO) if ultima else NAO_AVALIADO
        linhas.append({'aluno_id': aluno.id, 'aluno': aluno.name, 'celulas': celulas})

    return {
        'habilidades': [{'id': h.id, 'code': h.code, 'description': h.description} for h in habilidades],
        'alunos': linhas,
    }


def situacao_conselho(frequencia: Optional[int], taxa_sucesso: Optional[int], nao_atingiu: int) -> str:
    if frequencia is not None and frequencia < LIMITE_FREQUENCIA_CRITICA:
        return 'Crítico'
    if taxa_sucesso is None:
        return 'Sem Avaliações'
    if taxa_sucesso < LIMITE_SUCESSO_CRITICO:
        return 'Crítico'
    if taxa_sucesso < LIMITE_SUCESSO_OBSERVACAO or nao_atingiu > 0:
        return 'Em Observação'
    return 'Satisfatório'


def ata_conselho(estado: EstadoEscolar, turma_id: str) -> List[Dict[str, Any]]:
    """Uma linha por aluno ativo: aproveitamento geral, pontos de atenção e situação sugerida."""
    linhas = []
    for aluno in _alunos_ativos_da_turma(estado, turma_id):
        do_aluno = [a for a in estado.avaliacoes if a.student_id == aluno.id]
        total = len(do_aluno)
        sucesso = sum(1 for a in do_aluno if a.status in STATUS_SUCESSO)
        nao_atingiu = sum(1 for a in do_aluno if a.status is StatusAvaliacao.NAO_ATINGIU)

        taxa = percentual(sucesso, total) if total else None
        frequencia = percentual_frequencia(aluno.id, turma_id, estado.diarios)

        linhas.append({
            'aluno_id': aluno.id,
            'aluno': aluno.name,
            'frequencia': frequencia,
            'aproveitamento': taxa,
            'pontos_de_atencao': nao_atingiu,
            'situacao': situacao_conselho(frequencia, taxa, nao_atingiu),
        })
    return linhas


# === PAINEL E CALENDÁRIO ===

def resumo_painel(estado: EstadoEscolar, trimestre: Optional[str] = None) -> Dict[str, Any]:
    # 'all' (ou vazio) = todos os trimestres
    avaliacoes = [a for a in estado.avaliacoes if trimestre in (None, '', 'all') or a.term == trimestre]
    por_status = Counter(a.status for a in avaliacoes if a.status is not None)

    por_habilidade = {h.id: h.subject for h in estado.habilidades}
    desempenho: Dict[str, Dict[str, int]] = {}
    for avaliacao in avaliacoes:
        disciplina = por_habilidade.get(avaliacao.skill_id)
        if disciplina is None:
            continue
        item = desempenho.setdefault(disciplina, {'total': 0, 'sucesso': 0})
        item['total'] += 1
        if avaliacao.status in STATUS_SUCESSO:
            item['sucesso'] += 1

    recentes = sorted(estado.avisos, key=lambda aviso: timestamp_ou_zero(aviso.date), reverse=True)

    return {
        'total_alunos': len(estado.alunos),
        'total_habilidades': len(estado.habilidades),
        'casos_reforco': sum(1 for a in avaliacoes if a.status in STATUS_RISCO),
        'casos_sucesso': sum(1 for a in avaliacoes if a.status in STATUS_SUCESSO),
        'distribuicao': {status.rotulo: por_status.get(status, 0) for status in StatusAvaliacao},
        'desempenho_por_disciplina': [
            {'disciplina': nome, 'taxa': percentual(item['sucesso'], item['total'])}
            for nome, item in sorted(desempenho.items())
        ],
        'avisos_recentes': [aviso.para_registro() for aviso in recentes[:TOTAL_AVISOS_RECENTES]],
    }


def calendario(estado: EstadoEscolar) -> Dict[str, Dict[str, List[Dict[str, Any]]]]:
    """Avisos e avaliações agrupados pela data 'AAAA-MM-DD'."""
    eventos: Dict[str, Dict[str, List[Dict[str, Any]]]] = {}

    def dia(valor: str) -> Dict[str, List[Dict[str, Any]]]:
        return eventos.setdefault(parte_data(valor), {'avisos': [], 'avaliacoes': []})

    for aviso in estado.avisos:
        if aviso.date:
            dia(aviso.date)['avisos'].append(aviso.para_registro())
    for avaliacao in estado.avaliacoes:
        if avaliacao.date:
            dia(avaliacao.date)['avaliacoes'].append(avaliacao.para_registro())

    return dict(sorted(eventos.items()))
