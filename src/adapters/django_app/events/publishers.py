"""
Event Publishers - Publicadores de Eventos de Domínio.

Responsável por entregar eventos aos handlers depois do commit.
Implementações:
- LoggingEventPublisher: Loga e executa handlers locais (modo sync)
- CeleryEventPublisher: Publica via Celery (modo celery)
- InMemoryEventPublisher: Para testes
- CompositeEventPublisher: Delega para vários publishers

Padrão Observer/Pub-Sub para desacoplamento.
"""

from typing import List, Callable, Dict, Optional
import logging
import json

from src.core.shared.events import DomainEvent
from src.core.shared.interfaces import EventPublisher

logger = logging.getLogger(__name__)


class _HandlersLocais:
    """Registro de handlers síncronos por tipo de evento."""

    def __init__(self):
        self._handlers: Dict[str, List[Callable]] = {}

    def register_handler(
        self,
        event_type: str,
        handler: Callable[[DomainEvent], None]
    ) -> None:
        """Registra handler para tipo de evento."""
        self._handlers.setdefault(event_type, []).append(handler)

    def _dispatch_to_handlers(self, event: DomainEvent) -> None:
        for handler in self._handlers.get(event.event_type, []):
            try:
                handler(event)
            except Exception as e:
                logger.error(f"Erro em handler para {event.event_type}: {e}", exc_info=True)


class LoggingEventPublisher(_HandlersLocais, EventPublisher):
    """
    Publisher que loga eventos e executa os handlers registrados.

    Usado no modo sync (desenvolvimento e instalações sem broker):
    as notificações são geradas na própria requisição.
    """

    def __init__(self, log_level: int = logging.INFO):
        super().__init__()
        self._log_level = log_level

    def publish(self, event: DomainEvent) -> None:
        logger.log(
            self._log_level,
            f"[EVENT] {event.event_type} | "
            f"aggregate={event.aggregate_id} | "
            f"data={json.dumps(event._get_event_data(), default=str)}"
        )
        self._dispatch_to_handlers(event)


class CeleryEventPublisher(EventPublisher):
    """
    Publisher que envia eventos para Celery.

    Usado em produção para processamento assíncrono.
    """

    def __init__(self, also_log: bool = True):
        self._also_log = also_log

    def publish(self, event: DomainEvent) -> None:
        if self._also_log:
            logger.info(
                f"[EVENT->CELERY] {event.event_type} | "
                f"aggregate={event.aggregate_id}"
            )

        try:
            from src.adapters.django_app.events.handlers import dispatch_domain_event
            dispatch_domain_event.delay(event.event_type, event.to_dict())
        except Exception as e:
            # Falha no broker não quebra o fluxo principal
            logger.error(f"Falha ao publicar evento no Celery: {e}", exc_info=True)


class InMemoryEventPublisher(_HandlersLocais, EventPublisher):
    """
    Publisher em memória para testes.

    Armazena eventos publicados para verificação em testes.
    """

    def __init__(self):
        super().__init__()
        self._published_events: List[DomainEvent] = []

    def publish(self, event: DomainEvent) -> None:
        self._published_events.append(event)
        self._dispatch_to_handlers(event)

    @property
    def published_events(self) -> List[DomainEvent]:
        return self._published_events.copy()

    def clear(self) -> None:
        self._published_events.clear()

    def get_events_by_type(self, event_type: str) -> List[DomainEvent]:
        return [e for e in self._published_events if e.event_type == event_type]


class CompositeEventPublisher(EventPublisher):
    """Publisher que delega para múltiplos publishers."""

    def __init__(self, publishers: Optional[List[EventPublisher]] = None):
        self._publishers = publishers or []

    def add_publisher(self, publisher: EventPublisher) -> None:
        self._publishers.append(publisher)

    def publish(self, event: DomainEvent) -> None:
        for publisher in self._publishers:
            try:
                publisher.publish(event)
            except Exception as e:
                logger.error(
                    f"Erro ao publicar em {publisher.__class__.__name__}: {e}"
                )


def get_event_publisher(mode: str = "sync") -> EventPublisher:
    """
    Factory para obter o publisher do modo configurado.

    Args:
        mode: "celery" para processamento assíncrono; qualquer outro
            valor usa o modo sync, com o handler de notificações
            registrado para todos os eventos de O.S.
    """
    if mode == "celery":
        return CeleryEventPublisher()

    from src.core.ordens_servico.events import EVENTOS_OS
    from src.adapters.django_app.events.handlers import notificar_evento

    publisher = LoggingEventPublisher()
    for event_type in EVENTOS_OS:
        publisher.register_handler(event_type, notificar_evento)
    return publisher
