"""
Relatórios e indicadores da coordenação.
"""

from .dtos import FiltroEstatisticas, EstatisticasDTO, RelatorioResumoDTO
from .use_cases import (
    EstatisticasService,
    RelatorioResumoService,
    ExportarRelatorioService,
    COLUNAS_EXPORTACAO,
)

__all__ = [
    "FiltroEstatisticas",
    "EstatisticasDTO",
    "RelatorioResumoDTO",
    "EstatisticasService",
    "RelatorioResumoService",
    "ExportarRelatorioService",
    "COLUNAS_EXPORTACAO",
]
