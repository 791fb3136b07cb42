"""
Testes de Relatórios e Indicadores.
"""

from datetime import timedelta

import pytest

from src.core.ordens_servico.entities import MaintenanceType, OSPriority, OSStatus
from src.core.relatorios.dtos import FiltroEstatisticas
from src.core.relatorios.use_cases import (
    COLUNAS_EXPORTACAO,
    EstatisticasService,
    ExportarRelatorioService,
    RelatorioResumoService,
)
from src.core.shared.exceptions import PermissionDeniedError
from src.core.shared.tempo import agora


def concluir(ordem, aberta_ha_horas, resolvida_em_horas):
    """Abre a O.S. no passado e conclui depois de `resolvida_em_horas`."""
    ordem.criado_em = agora() - timedelta(hours=aberta_ha_horas)
    ordem.alterar_status(
        OSStatus.CONCLUIDA, ordem.criado_em + timedelta(hours=resolvida_em_horas)
    )


@pytest.fixture
def cenario(nova_ordem):
    """
    Quatro O.S.:
    - concluída em 10h, aberta há 2 dias (UTI)
    - concluída em 30h, aberta há 40 dias (UTI, preventiva)
    - em andamento, emergencial, aberta há 10h (SLA crítico, Farmácia)
    - aberta agora, sem nome de setor
    """
    recente = nova_ordem(prioridade=OSPriority.URGENTE)
    recente.setor_nome = "UTI"
    concluir(recente, aberta_ha_horas=48, resolvida_em_horas=10)

    antiga = nova_ordem(tipo_manutencao=MaintenanceType.PREVENTIVA)
    antiga.setor_nome = "UTI"
    concluir(antiga, aberta_ha_horas=24 * 40, resolvida_em_horas=30)

    critica = nova_ordem(prioridade=OSPriority.EMERGENCIAL, setor_id="setor-farmacia")
    critica.setor_nome = "Farmácia"
    critica.criado_em = agora() - timedelta(hours=10)
    critica.alterar_status(OSStatus.EM_ANDAMENTO)

    nova = nova_ordem()
    return {"recente": recente, "antiga": antiga, "critica": critica, "nova": nova}


class TestEstatisticasService:
    def test_apenas_coordenacao(self, os_repo, tecnico):
        with pytest.raises(PermissionDeniedError):
            EstatisticasService(os_repo).execute(tecnico)

    def test_periodo_padrao_30_dias(self, os_repo, cenario, coordenacao):
        """Deve considerar apenas O.S. abertas nos últimos 30 dias."""
        stats = EstatisticasService(os_repo).execute(coordenacao)

        assert stats.total == 3
        assert stats.aberta == 1
        assert stats.em_andamento == 1
        assert stats.concluida == 1
        assert stats.cancelada == 0
        assert stats.tempo_medio_horas == 10.0
        assert stats.concluidas_ultimos_7_dias == 1
        assert stats.sla_critico == 1
        assert stats.taxa_conclusao_7_dias == pytest.approx(33.3)

    def test_todo_o_periodo(self, os_repo, cenario, coordenacao):
        """Deve aceitar período 0 como todo o histórico."""
        stats = EstatisticasService(os_repo).execute(
            coordenacao, FiltroEstatisticas(periodo_dias=0)
        )

        assert stats.total == 4
        assert stats.concluida == 2
        assert stats.tempo_medio_horas == 20.0
        assert stats.concluidas_ultimos_7_dias == 1

    def test_agrupamentos(self, os_repo, cenario, coordenacao):
        stats = EstatisticasService(os_repo).execute(
            coordenacao, FiltroEstatisticas(periodo_dias=None)
        )

        assert stats.por_setor[0] == {"setor": "UTI", "total": 2}
        assert {"setor": "Sem setor", "total": 1} in stats.por_setor
        assert {"prioridade": "nao_urgente", "label": "Não urgente", "total": 2} in stats.por_prioridade
        assert {"tipo": "preventiva", "label": "Preventiva", "total": 1} in stats.por_tipo

    def test_filtros_all_sao_ignorados(self, os_repo, cenario, coordenacao):
        stats = EstatisticasService(os_repo).execute(
            coordenacao,
            FiltroEstatisticas(periodo_dias=0, setor_id="all", prioridade="all", status=""),
        )

        assert stats.total == 4

    def test_filtros(self, os_repo, cenario, coordenacao):
        service = EstatisticasService(os_repo)

        por_setor = service.execute(
            coordenacao, FiltroEstatisticas(periodo_dias=0, setor_id="setor-farmacia")
        )
        por_status = service.execute(
            coordenacao, FiltroEstatisticas(periodo_dias=0, status="concluida")
        )
        por_tipo = service.execute(
            coordenacao, FiltroEstatisticas(periodo_dias=0, tipo_manutencao="preventiva")
        )

        assert por_setor.total == 1
        assert por_status.total == 2
        assert por_tipo.total == 1

    def test_sem_ordens(self, os_repo, coordenacao):
        stats = EstatisticasService(os_repo).execute(coordenacao)

        assert stats.total == 0
        assert stats.taxa_conclusao_7_dias == 0.0
        assert stats.tempo_medio_horas == 0.0
        assert stats.to_dict()["por_setor"] == []


class TestRelatorioResumoService:
    def test_resumo_excelente(self, os_repo, cenario, coordenacao):
        """Deve considerar excelente tempo médio abaixo de 24 horas."""
        resumo = RelatorioResumoService(os_repo).execute(coordenacao)

        assert resumo.total_abertas == 1
        assert resumo.total_em_andamento == 1
        assert resumo.total_concluidas == 2
        assert resumo.total_emergenciais == 1
        assert resumo.tempo_medio_resolucao_horas == 20
        assert resumo.desempenho == "Excelente desempenho"

    def test_resumo_pode_melhorar(self, os_repo, nova_ordem, coordenacao):
        concluir(nova_ordem(), aberta_ha_horas=100, resolvida_em_horas=48)

        resumo = RelatorioResumoService(os_repo).execute(coordenacao)

        assert resumo.desempenho == "Pode melhorar"

    def test_tecnico_nao_acessa(self, os_repo, tecnico):
        with pytest.raises(PermissionDeniedError):
            RelatorioResumoService(os_repo).execute(tecnico)


class TestExportarRelatorioService:
    def test_linhas_com_todas_as_colunas(self, os_repo, cenario, coordenacao):
        linhas = ExportarRelatorioService(os_repo).execute(coordenacao)

        assert len(linhas) == 4
        for linha in linhas:
            assert list(linha.keys()) == COLUNAS_EXPORTACAO

        recente = next(l for l in linhas if l["numero"] == cenario["recente"].numero)
        assert recente["status"] == "Concluída"
        assert recente["prioridade"] == "Urgente"
        assert recente["setor"] == "UTI"
        assert recente["tempo_resolucao_horas"] == 10.0

        nova = next(l for l in linhas if l["numero"] == cenario["nova"].numero)
        assert nova["concluida_em"] == ""
        assert nova["setor"] == "Sem setor"
        assert nova["solicitante"] == "10"

    def test_exportar_com_periodo(self, os_repo, cenario, coordenacao):
        linhas = ExportarRelatorioService(os_repo).execute(
            coordenacao, FiltroEstatisticas(periodo_dias=7)
        )

        assert len(linhas) == 3

    def test_solicitante_nao_exporta(self, os_repo, solicitante):
        with pytest.raises(PermissionDeniedError):
            ExportarRelatorioService(os_repo).execute(solicitante)
