"""
Testes dos publishers de eventos, do dispatcher Celery e das tarefas
agendadas.
"""

from unittest.mock import Mock, patch

import pytest

from src.adapters.django_app.events.handlers import (
    dispatch_domain_event,
    gerar_resumo_diario,
    handle_evento_os,
    limpar_eventos_antigos,
    verificar_sla_critico,
)
from src.adapters.django_app.events.publishers import (
    CeleryEventPublisher,
    CompositeEventPublisher,
    InMemoryEventPublisher,
    LoggingEventPublisher,
    get_event_publisher,
)
from src.adapters.django_app.ordens_servico.models import DomainEventModel, NotificationModel
from src.config.container import get_container
from src.core.ordens_servico.dtos import CriarOSInputDTO
from src.core.ordens_servico.events import EVENTOS_OS, OSCriadaEvent

HANDLERS = "src.adapters.django_app.events.handlers"


class TestPublishers:
    def test_modo_sync_registra_notificacao_para_eventos_de_os(self):
        publisher = get_event_publisher("sync")

        assert isinstance(publisher, LoggingEventPublisher)
        assert set(publisher._handlers) == set(EVENTOS_OS)

    def test_modo_celery(self):
        assert isinstance(get_event_publisher("celery"), CeleryEventPublisher)

    def test_handler_com_erro_nao_interrompe_os_demais(self):
        """Deve seguir para o próximo handler quando um deles falha."""
        publisher = LoggingEventPublisher()
        quebrado = Mock(side_effect=RuntimeError("erro"))
        ok = Mock()
        publisher.register_handler("OSCriadaEvent", quebrado)
        publisher.register_handler("OSCriadaEvent", ok)
        evento = OSCriadaEvent(aggregate_id="os-1")

        publisher.publish(evento)

        quebrado.assert_called_once_with(evento)
        ok.assert_called_once_with(evento)

    def test_celery_envia_evento_serializado(self):
        evento = OSCriadaEvent(aggregate_id="os-1", numero=3)

        with patch(f"{HANDLERS}.dispatch_domain_event") as dispatch:
            CeleryEventPublisher().publish(evento)

        dispatch.delay.assert_called_once_with("OSCriadaEvent", evento.to_dict())

    def test_celery_com_broker_fora_do_ar(self):
        """Deve logar a falha do broker sem propagar a exceção."""
        with patch(f"{HANDLERS}.dispatch_domain_event") as dispatch:
            dispatch.delay.side_effect = ConnectionError("broker indisponível")

            CeleryEventPublisher(also_log=False).publish(OSCriadaEvent(aggregate_id="os-1"))

        dispatch.delay.assert_called_once()

    def test_composite(self):
        quebrado = Mock()
        quebrado.publish.side_effect = RuntimeError("erro")
        memoria = InMemoryEventPublisher()
        composite = CompositeEventPublisher([quebrado])
        composite.add_publisher(memoria)

        composite.publish_batch([OSCriadaEvent(aggregate_id="os-1"), OSCriadaEvent(aggregate_id="os-2")])

        assert [e.aggregate_id for e in memoria.published_events] == ["os-1", "os-2"]

    def test_in_memory_clear(self):
        memoria = InMemoryEventPublisher()
        memoria.publish(OSCriadaEvent(aggregate_id="os-1"))

        memoria.clear()

        assert memoria.published_events == []


class TestTarefasCelery:
    def test_dispatcher_roteia_eventos_de_os(self):
        dados = OSCriadaEvent(aggregate_id="os-1").to_dict()

        with patch(f"{HANDLERS}.handle_evento_os") as handler:
            dispatch_domain_event("OSCriadaEvent", dados)

        handler.delay.assert_called_once_with(dados)

    def test_dispatcher_ignora_evento_desconhecido(self):
        with patch(f"{HANDLERS}.handle_evento_os") as handler:
            dispatch_domain_event("OutroEvento", {})

        handler.delay.assert_not_called()

    def test_handler_gera_notificacoes(self):
        dados = OSCriadaEvent(aggregate_id="os-1").to_dict()

        with patch(f"{HANDLERS}.notificar_evento", return_value=2) as notificar:
            assert handle_evento_os(dados) == 2

        notificar.assert_called_once_with(dados)


@pytest.mark.django_db
class TestFluxoDeEventos:
    def test_abertura_notifica_coordenacao_e_tecnicos(
        self, setor, setor_responsavel, usuario_solicitante, usuario_tecnico, usuario_coordenacao
    ):
        """Deve gravar o evento e notificar na própria requisição (modo sync)."""
        output = get_container().criar_os_service().execute(CriarOSInputDTO(
            categoria="eletrica",
            setor_id=setor.id,
            equipamento="Monitor leito 3",
            descricao="Monitor não liga",
            solicitante_id=str(usuario_solicitante.pk),
            setor_responsavel_id=setor_responsavel.id,
        ))

        destinatarios = set(
            NotificationModel.objects.filter(service_order_id=output.id)
            .values_list("user_id", flat=True)
        )
        assert destinatarios == {usuario_tecnico.pk, usuario_coordenacao.pk}
        assert DomainEventModel.objects.filter(
            aggregate_id=output.id, event_type="OSCriadaEvent"
        ).count() == 1

    def test_verificar_sla_critico_alerta_uma_vez(
        self, criar_ordem, usuario_solicitante, usuario_coordenacao
    ):
        ordem = criar_ordem(usuario_solicitante, criada_ha_horas=100)

        assert verificar_sla_critico() == 1
        assert verificar_sla_critico() == 0
        assert NotificationModel.objects.filter(
            user_id=usuario_coordenacao.pk, service_order_id=ordem.id
        ).count() == 1

    def test_resumo_diario(self, criar_ordem, usuario_solicitante):
        criar_ordem(usuario_solicitante)

        resumo = gerar_resumo_diario()

        assert resumo["total_abertas"] == 1
        assert resumo["total_concluidas"] == 0

    def test_limpar_eventos_antigos(self):
        get_container().event_store().append(OSCriadaEvent(aggregate_id="os-1"), sequence=1)

        assert limpar_eventos_antigos(days=90) == 0
        assert DomainEventModel.objects.count() == 1
