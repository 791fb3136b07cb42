"""
Event Handlers - Processadores de Eventos de Domínio.

Handlers transformam eventos de O.S. em notificações. No modo sync
`notificar_evento` é chamado pelo LoggingEventPublisher na própria
requisição; no modo celery os eventos passam por `dispatch_domain_event`
e são processados em workers.

Tarefas agendadas (Celery Beat):
- verificar_sla_critico: alerta O.S. que passaram do SLA
- gerar_resumo_diario: loga o resumo geral das O.S.
- limpar_eventos_antigos: remove eventos antigos do Event Store

Padrão:
    @shared_task(bind=True, ...)
    def handle_<evento>(self, event_data: dict) -> None:
        ...
"""

import logging
from typing import Any, Dict, Union

from celery import shared_task

from src.core.acesso import Ator, UserRole
from src.core.ordens_servico.events import EVENTOS_OS
from src.core.shared.events import DomainEvent

logger = logging.getLogger(__name__)

ATOR_SISTEMA = Ator(usuario_id="sistema", papel=UserRole.COORDENACAO)


def notificar_evento(evento: Union[DomainEvent, Dict[str, Any]]) -> int:
    """
    Gera as notificações de um evento de O.S.

    Returns:
        Quantidade de notificações criadas
    """
    from src.config.container import get_container

    event_data = evento.to_dict() if isinstance(evento, DomainEvent) else evento
    service = get_container().notificar_evento_os_service()
    criadas = service.execute(event_data)

    logger.info(
        f"[HANDLER] {event_data.get('event_type')} | "
        f"aggregate={event_data.get('aggregate_id')} | notificacoes={criadas}"
    )
    return criadas


# =============================================================================
# Event Handlers - Ordens de Serviço
# =============================================================================

@shared_task(
    bind=True,
    max_retries=3,
    default_retry_delay=60,
    acks_late=True,
)
def handle_evento_os(self, event_data: Dict[str, Any]) -> int:
    """
    Handler Celery para eventos de O.S.

    Args:
        event_data: Evento serializado (DomainEvent.to_dict)
    """
    try:
        return notificar_evento(event_data)
    except Exception as e:
        logger.error(f"Erro no handler de {event_data.get('event_type')}: {e}", exc_info=True)
        raise self.retry(exc=e)


# =============================================================================
# Event Dispatcher (Router)
# =============================================================================

@shared_task(bind=True, max_retries=5, default_retry_delay=30)
def dispatch_domain_event(self, event_type: str, event_data: Dict[str, Any]) -> None:
    """
    Dispatcher central para Domain Events.

    Roteia eventos para os handlers apropriados.

    Args:
        event_type: Tipo do evento (ex: 'OSCriadaEvent')
        event_data: Dados do evento serializado
    """
    if event_type in EVENTOS_OS:
        logger.info(f"[DISPATCHER] Roteando {event_type} para handler")
        handle_evento_os.delay(event_data)
    else:
        logger.warning(f"[DISPATCHER] Handler não encontrado para {event_type}")


# =============================================================================
# Scheduled Tasks (Beat)
# =============================================================================

@shared_task(bind=True)
def verificar_sla_critico(self) -> int:
    """
    Emite alerta para O.S. que passaram do SLA.

    Cada O.S. é alertada uma única vez; o evento gerado notifica
    coordenação e técnico atribuído.

    Returns:
        Número de O.S. alertadas nesta execução
    """
    logger.info("[SCHEDULED] Verificando O.S. em SLA crítico...")

    from src.config.container import get_container

    alertadas = get_container().alertar_sla_critico_service().execute()

    logger.info(f"[SCHEDULED] {len(alertadas)} O.S. em SLA crítico alertadas")
    return len(alertadas)


@shared_task(bind=True)
def gerar_resumo_diario(self) -> Dict[str, Any]:
    """
    Gera o resumo diário das O.S. (mesmos números da página de relatórios).

    Returns:
        Resumo serializado
    """
    logger.info("[SCHEDULED] Gerando resumo diário...")

    from src.config.container import get_container

    resumo = get_container().relatorio_resumo_service().execute(ATOR_SISTEMA)
    report = resumo.to_dict()

    logger.info(f"[SCHEDULED] Resumo gerado: {report}")
    return report


@shared_task(bind=True)
def limpar_eventos_antigos(self, days: int = 90) -> int:
    """
    Limpa eventos antigos do Event Store.

    Args:
        days: Número de dias para manter eventos

    Returns:
        Número de eventos removidos
    """
    logger.info(f"[SCHEDULED] Limpando eventos com mais de {days} dias...")

    from src.config.container import get_container

    return get_container().event_store().purge_older_than(days)
