"""
Agregador de Frequência.

Percentual de presença de um aluno numa turma, a partir dos diários de
classe. A nota de participação sugerida (percentual / 10) só preenche um
campo vazio; um valor já digitado ou gravado nunca é sobrescrito.
"""

from typing import Iterable, Optional

from .calculos import arredondar
from .modelos import DiarioDeClasse


def percentual_frequencia(aluno_id: str, turma_id: str, diarios: Iterable[DiarioDeClasse]) -> Optional[int]:
    """
    Retorna 0-100, ou None quando a turma não tem nenhum diário
    (zero indicaria ausência total, o que seria falso).
    """
    da_turma = [diario for diario in diarios if diario.class_id == turma_id]
    if not da_turma:
        return None

    presencas = sum(1 for diario in da_turma if diario.presente(aluno_id))
    return arredondar(100 * presencas / len(da_turma))


def sugerir_participacao(percentual: Optional[int]) -> Optional[float]:
    if percentual is None:
        return None
    return arredondar(percentual / 10, 1)


def preencher_participacao(atual: Optional[float], sugestao: Optional[float]) -> Optional[float]:
    return atual if atual is not None else sugestao
