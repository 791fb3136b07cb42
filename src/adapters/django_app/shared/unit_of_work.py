"""
Unit of Work - Implementação Django.

Gerencia transações atômicas entre múltiplos repositórios,
garantindo consistência de dados.

Responsabilidades:
- Iniciar/finalizar transações (django.db.transaction.atomic)
- Commit/Rollback coordenado
- Persistir eventos no Event Store dentro da transação
- Publicar eventos após commit bem-sucedido
"""

from typing import Dict, List, Optional
import logging

from django.db import transaction

from src.core.shared.interfaces import UnitOfWork, EventPublisher
from src.core.shared.events import DomainEvent

logger = logging.getLogger(__name__)


class DjangoUnitOfWork(UnitOfWork):
    """
    Implementação Django do Unit of Work.

    Abre um bloco `transaction.atomic()` no início do contexto; blocos
    aninhados (request já em transação, testes) viram savepoints.
    Eventos são publicados apenas após commit bem-sucedido.

    Example:
        with DjangoUnitOfWork(event_publisher, event_store) as uow:
            repo.save(ordem)
            uow.publish_event(OSCriadaEvent(...))
        # Commit automático + eventos publicados

    Example com rollback:
        with DjangoUnitOfWork() as uow:
            repo.save(ordem)
            raise ValidationError("...")
        # Rollback automático, eventos descartados
    """

    def __init__(
        self,
        event_publisher: Optional[EventPublisher] = None,
        event_store=None,
    ):
        """
        Args:
            event_publisher: Publicador de eventos (sync ou Celery)
            event_store: Store para persistência de eventos
        """
        super().__init__()
        self._event_publisher = event_publisher
        self._event_store = event_store
        self._atomic = None
        self._committed = False
        self._rolled_back = False
        self._sequence_counters: Dict[str, int] = {}

    def _begin_transaction(self) -> None:
        self._committed = False
        self._rolled_back = False
        self._atomic = transaction.atomic()
        self._atomic.__enter__()
        logger.debug("Transaction started")

    def commit(self) -> None:
        """
        Persiste todas as mudanças e publica eventos.

        Ordem de execução:
        1. Persistir eventos no Event Store (mesma transação)
        2. Fechar o bloco atômico (commit)
        3. Publicar eventos para handlers
        """
        if self._committed or self._rolled_back:
            logger.warning("Transaction already finalized")
            return

        try:
            if self._event_store and self._events:
                self._persist_events()
        except Exception as e:
            logger.error(f"Commit failed: {e}")
            self.rollback()
            raise

        if self._atomic is not None:
            atomic, self._atomic = self._atomic, None
            atomic.__exit__(None, None, None)
            logger.debug("Transaction committed")

        self._committed = True

        if self._events:
            self._publish_events()

    def rollback(self) -> None:
        """
        Desfaz todas as mudanças e descarta eventos.

        Chamado automaticamente se exceção ocorrer dentro do contexto.
        """
        if self._committed or self._rolled_back:
            return

        try:
            if self._atomic is not None:
                atomic, self._atomic = self._atomic, None
                transaction.set_rollback(True)
                atomic.__exit__(None, None, None)
                logger.debug("Transaction rolled back")
        finally:
            self._rolled_back = True
            self.clear_events()

    def _persist_events(self) -> None:
        for event in self._events:
            self._event_store.append(
                event=event,
                sequence=self._get_next_sequence(event.aggregate_id),
            )

    def _publish_events(self) -> None:
        """
        Publica eventos para handlers.

        Falha de publicação é logada e não desfaz a operação: os
        eventos continuam no Event Store.
        """
        for event in self._events:
            logger.info(
                f"Publishing event: {event.event_type} "
                f"for aggregate {event.aggregate_id}"
            )

            if self._event_publisher:
                try:
                    self._event_publisher.publish(event)
                except Exception as e:
                    logger.error(f"Failed to publish event {event.event_type}: {e}")

        self.clear_events()

    def _get_next_sequence(self, aggregate_id: str) -> int:
        """Próximo número de sequência do agregado no Event Store."""
        if aggregate_id not in self._sequence_counters:
            self._sequence_counters[aggregate_id] = self._event_store.last_sequence(aggregate_id)

        self._sequence_counters[aggregate_id] += 1
        return self._sequence_counters[aggregate_id]

    @property
    def is_committed(self) -> bool:
        return self._committed

    @property
    def is_rolled_back(self) -> bool:
        return self._rolled_back


class InMemoryUnitOfWork(UnitOfWork):
    """
    Unit of Work em memória para testes.

    Não persiste nada - apenas simula comportamento
    para testes unitários sem banco de dados.

    Example:
        uow = InMemoryUnitOfWork()
        with uow:
            uow.publish_event(event)

        assert uow.committed
        assert len(uow.published_events) == 1
    """

    def __init__(self, event_publisher: Optional[EventPublisher] = None):
        super().__init__()
        self._event_publisher = event_publisher
        self._committed = False
        self._rolled_back = False
        self._published_events: List[DomainEvent] = []

    def _begin_transaction(self) -> None:
        pass

    def commit(self) -> None:
        self._committed = True
        eventos = list(self._events)
        self._published_events.extend(eventos)
        self.clear_events()
        if self._event_publisher:
            self._event_publisher.publish_batch(eventos)

    def rollback(self) -> None:
        self._rolled_back = True
        self.clear_events()

    @property
    def committed(self) -> bool:
        return self._committed

    @property
    def rolled_back(self) -> bool:
        return self._rolled_back

    @property
    def published_events(self) -> List[DomainEvent]:
        """Eventos que foram 'publicados' (após commit)."""
        return self._published_events

    def reset(self) -> None:
        """Reset para próximo teste."""
        self._committed = False
        self._rolled_back = False
        self._published_events.clear()
        self.clear_events()
