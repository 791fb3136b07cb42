"""
Use Cases de Relatórios (coordenação).

- EstatisticasService: indicadores do painel analítico com filtros
- RelatorioResumoService: resumo da página de relatórios
- ExportarRelatorioService: linhas para exportação em CSV
"""

from collections import Counter
from datetime import timedelta
from typing import Dict, List, Optional

from src.core.acesso import Ator, Permissao
from src.core.ordens_servico.entities import (
    ServiceOrderEntity,
    OSStatus,
    OSPriority,
    MaintenanceType,
)
from src.core.ordens_servico.ports import OrdemServicoRepository
from src.core.shared.tempo import agora

from .dtos import FiltroEstatisticas, EstatisticasDTO, RelatorioResumoDTO


SEM_SETOR = "Sem setor"
LIMITE_EXCELENTE_HORAS = 24

COLUNAS_EXPORTACAO = [
    "numero",
    "aberta_em",
    "status",
    "prioridade",
    "categoria",
    "tipo_manutencao",
    "setor",
    "setor_responsavel",
    "equipamento",
    "solicitante",
    "concluida_em",
    "tempo_resolucao_horas",
]


def tempo_medio_resolucao(ordens: List[ServiceOrderEntity]) -> float:
    """Média, em horas, do tempo de resolução das O.S. concluídas."""
    tempos = [
        o.tempo_resolucao_horas for o in ordens
        if o.tempo_resolucao_horas is not None
    ]
    if not tempos:
        return 0.0
    return sum(tempos) / len(tempos)


def _label(enum_cls, valor: str) -> str:
    try:
        return enum_cls.from_string(valor).label
    except ValueError:
        return valor


def _agrupar(valores, chave: str, enum_cls=None) -> List[Dict]:
    grupos = []
    for valor, total in Counter(valores).most_common():
        item = {chave: valor, "total": total}
        if enum_cls is not None:
            item["label"] = _label(enum_cls, valor)
        grupos.append(item)
    return grupos


class EstatisticasService:
    """
    Use Case: Indicadores do painel analítico.

    O período filtra pela data de abertura. "Concluídas nos últimos
    7 dias" e "SLA crítico" são medidos no momento da consulta.
    """

    def __init__(self, os_repo: OrdemServicoRepository):
        self.os_repo = os_repo

    def execute(
        self,
        ator: Ator,
        filtro: Optional[FiltroEstatisticas] = None,
    ) -> EstatisticasDTO:
        """
        Raises:
            PermissionDeniedError: Se não é coordenação
        """
        ator.exigir(Permissao.ANALYTICS_VER)

        filtro = (filtro or FiltroEstatisticas()).normalizado()
        momento = agora()
        desde = momento - timedelta(days=filtro.periodo_dias) if filtro.periodo_dias else None

        ordens = self.os_repo.list_filtradas(
            desde=desde,
            setor_id=filtro.setor_id,
            tipo_manutencao=filtro.tipo_manutencao,
            prioridade=filtro.prioridade,
            status=filtro.status,
        )

        total = len(ordens)
        por_status = Counter(o.status for o in ordens)
        sete_dias = momento - timedelta(days=7)
        concluidas_7_dias = len([
            o for o in ordens if o.concluido_em and o.concluido_em >= sete_dias
        ])

        return EstatisticasDTO(
            total=total,
            aberta=por_status[OSStatus.ABERTA],
            em_andamento=por_status[OSStatus.EM_ANDAMENTO],
            concluida=por_status[OSStatus.CONCLUIDA],
            cancelada=por_status[OSStatus.CANCELADA],
            tempo_medio_horas=round(tempo_medio_resolucao(ordens), 1),
            concluidas_ultimos_7_dias=concluidas_7_dias,
            sla_critico=len([o for o in ordens if o.em_sla_critico(momento)]),
            taxa_conclusao_7_dias=round(concluidas_7_dias / total * 100, 1) if total else 0.0,
            por_prioridade=_agrupar(
                (o.prioridade.value for o in ordens), "prioridade", OSPriority
            ),
            por_setor=_agrupar((o.setor_nome or SEM_SETOR for o in ordens), "setor"),
            por_tipo=_agrupar(
                (o.tipo_manutencao.value for o in ordens), "tipo", MaintenanceType
            ),
        )


class RelatorioResumoService:
    """
    Use Case: Resumo geral da página de relatórios (todas as O.S.).

    Desempenho é "Excelente desempenho" quando o tempo médio de
    resolução fica abaixo de 24 horas.
    """

    def __init__(self, os_repo: OrdemServicoRepository):
        self.os_repo = os_repo

    def execute(self, ator: Ator) -> RelatorioResumoDTO:
        ator.exigir(Permissao.RELATORIOS_VER)

        ordens = self.os_repo.list_filtradas()
        por_status = Counter(o.status for o in ordens)
        media = round(tempo_medio_resolucao(ordens))

        return RelatorioResumoDTO(
            total_abertas=por_status[OSStatus.ABERTA],
            total_em_andamento=por_status[OSStatus.EM_ANDAMENTO],
            total_concluidas=por_status[OSStatus.CONCLUIDA],
            total_emergenciais=len([
                o for o in ordens if o.prioridade == OSPriority.EMERGENCIAL
            ]),
            tempo_medio_resolucao_horas=media,
            desempenho=(
                "Excelente desempenho" if media < LIMITE_EXCELENTE_HORAS
                else "Pode melhorar"
            ),
        )


class ExportarRelatorioService:
    """
    Use Case: Linhas do relatório para exportação.

    Cada linha é um dict com as chaves de COLUNAS_EXPORTACAO; o adapter
    decide o formato (CSV).
    """

    def __init__(self, os_repo: OrdemServicoRepository):
        self.os_repo = os_repo

    def execute(
        self,
        ator: Ator,
        filtro: Optional[FiltroEstatisticas] = None,
    ) -> List[Dict]:
        ator.exigir(Permissao.RELATORIOS_VER)

        filtro = (filtro or FiltroEstatisticas(periodo_dias=None)).normalizado()
        desde = agora() - timedelta(days=filtro.periodo_dias) if filtro.periodo_dias else None

        ordens = self.os_repo.list_filtradas(
            desde=desde,
            setor_id=filtro.setor_id,
            tipo_manutencao=filtro.tipo_manutencao,
            prioridade=filtro.prioridade,
            status=filtro.status,
        )
        return [self._linha(o) for o in ordens]

    @staticmethod
    def _linha(ordem: ServiceOrderEntity) -> Dict:
        tempo = ordem.tempo_resolucao_horas
        return {
            "numero": ordem.numero,
            "aberta_em": ordem.criado_em.isoformat(),
            "status": ordem.status.label,
            "prioridade": ordem.prioridade.label,
            "categoria": ordem.categoria.label,
            "tipo_manutencao": ordem.tipo_manutencao.label,
            "setor": ordem.setor_nome or SEM_SETOR,
            "setor_responsavel": ordem.setor_responsavel_nome or "",
            "equipamento": ordem.equipamento,
            "solicitante": ordem.solicitante_nome or ordem.solicitante_id,
            "concluida_em": ordem.concluido_em.isoformat() if ordem.concluido_em else "",
            "tempo_resolucao_horas": round(tempo, 2) if tempo is not None else "",
        }
