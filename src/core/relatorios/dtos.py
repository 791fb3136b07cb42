"""
DTOs de Relatórios e Indicadores.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional


def _valor_filtro(valor: Optional[str]) -> Optional[str]:
    """"all" e vazio significam sem filtro."""
    if not valor or valor == "all":
        return None
    return valor


@dataclass(frozen=True)
class FiltroEstatisticas:
    """
    Filtros do painel de indicadores.

    Attributes:
        periodo_dias: Janela sobre a data de abertura (None/0 = todo o período)
        setor_id: Setor de origem
        tipo_manutencao: Valor do tipo de manutenção
        prioridade: Valor da prioridade
        status: Valor do status
    """

    periodo_dias: Optional[int] = 30
    setor_id: Optional[str] = None
    tipo_manutencao: Optional[str] = None
    prioridade: Optional[str] = None
    status: Optional[str] = None

    def normalizado(self) -> "FiltroEstatisticas":
        return FiltroEstatisticas(
            periodo_dias=self.periodo_dias or None,
            setor_id=_valor_filtro(self.setor_id),
            tipo_manutencao=_valor_filtro(self.tipo_manutencao),
            prioridade=_valor_filtro(self.prioridade),
            status=_valor_filtro(self.status),
        )


@dataclass
class EstatisticasDTO:
    """
    Indicadores do painel analítico.

    Os agrupamentos são listas de dicts ordenadas pela contagem
    (ex: [{"prioridade": "urgente", "label": "Urgente", "total": 3}]).
    """

    total: int = 0
    aberta: int = 0
    em_andamento: int = 0
    concluida: int = 0
    cancelada: int = 0
    tempo_medio_horas: float = 0.0
    concluidas_ultimos_7_dias: int = 0
    sla_critico: int = 0
    taxa_conclusao_7_dias: float = 0.0
    por_prioridade: List[Dict] = field(default_factory=list)
    por_setor: List[Dict] = field(default_factory=list)
    por_tipo: List[Dict] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "total": self.total,
            "aberta": self.aberta,
            "em_andamento": self.em_andamento,
            "concluida": self.concluida,
            "cancelada": self.cancelada,
            "tempo_medio_horas": self.tempo_medio_horas,
            "concluidas_ultimos_7_dias": self.concluidas_ultimos_7_dias,
            "sla_critico": self.sla_critico,
            "taxa_conclusao_7_dias": self.taxa_conclusao_7_dias,
            "por_prioridade": self.por_prioridade,
            "por_setor": self.por_setor,
            "por_tipo": self.por_tipo,
        }


@dataclass
class RelatorioResumoDTO:
    total_abertas: int
    total_em_andamento: int
    total_concluidas: int
    total_emergenciais: int
    tempo_medio_resolucao_horas: int
    desempenho: str

    def to_dict(self) -> dict:
        return {
            "total_abertas": self.total_abertas,
            "total_em_andamento": self.total_em_andamento,
            "total_concluidas": self.total_concluidas,
            "total_emergenciais": self.total_emergenciais,
            "tempo_medio_resolucao_horas": self.tempo_medio_resolucao_horas,
            "desempenho": self.desempenho,
        }
