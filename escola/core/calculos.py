"""
Arredondamentos usados nos relatórios.

Percentuais arredondam meio para cima (67,5 -> 68), como no boletim
impresso, e não para o par mais próximo como o round() nativo.
"""

from decimal import ROUND_HALF_UP, Decimal


def arredondar(valor: float, casas: int = 0) -> float:
    quantum = Decimal(1).scaleb(-casas)
    resultado = Decimal(str(valor)).quantize(quantum, rounding=ROUND_HALF_UP)
    return int(resultado) if casas == 0 else float(resultado)


def percentual(parte: int, total: int) -> int:
    if not total:
        return 0
    return arredondar(100 * parte / total)
