"""
Utilitários de data.

No banco as datas trafegam como texto ISO ('2024-03-01' para avaliações e
diários, '2024-03-01T13:45:00.000Z' para entrada/saída do reforço).
Datas ilegíveis nunca derrubam um relatório: viram None (ou epoch 0 na
ordenação).
"""

from datetime import date, datetime, timezone
from typing import Any, Optional


def agora_utc() -> datetime:
    return datetime.now(timezone.utc)


def para_iso(momento: datetime) -> str:
    """Formata como o navegador faz (toISOString): milissegundos e sufixo Z."""
    if momento.tzinfo is None:
        momento = momento.replace(tzinfo=timezone.utc)
    momento = momento.astimezone(timezone.utc)
    return momento.isoformat(timespec='milliseconds').replace('+00:00', 'Z')


def hoje_iso(momento: Optional[datetime] = None) -> str:
    return (momento or agora_utc()).date().isoformat()


def parse_data(valor: Any) -> Optional[datetime]:
    """
    Converte texto ISO, date ou datetime em datetime com fuso UTC.
    Retorna None para vazio ou formato inválido.
    """
    if valor is None or valor == '':
        return None

    if isinstance(valor, datetime):
        momento = valor
    elif isinstance(valor, date):
        momento = datetime(valor.year, valor.month, valor.day)
    elif isinstance(valor, str):
        texto = valor.strip()
        if texto.endswith('Z'):
            texto = texto[:-1] + '+00:00'
        try:
            momento = datetime.fromisoformat(texto)
        except ValueError:
            return None
    else:
        return None

    if momento.tzinfo is None:
        momento = momento.replace(tzinfo=timezone.utc)
    return momento


def timestamp_ou_zero(valor: Any) -> float:
    momento = parse_data(valor)
    return momento.timestamp() if momento else 0.0


def parte_data(valor: Any) -> Optional[str]:
    """'2024-03-01T10:00:00Z' -> '2024-03-01'."""
    if not valor:
        return None
    if isinstance(valor, (date, datetime)):
        return valor.isoformat()[:10]
    return str(valor).split('T')[0]
