"""
Interfaces (Ports) compartilhadas entre Core e Adapters.

Core define as interfaces; Adapters (Django, Celery, memória) implementam.
"""

from abc import ABC, abstractmethod
from typing import List

from .events import DomainEvent


class UnitOfWork(ABC):
    """
    Unit of Work - coordena uma transação e os eventos gerados nela.

    Pattern: Context Manager
        with uow:
            repo.save(ordem)
            uow.publish_event(OSCriadaEvent(...))
        # commit automático ao sair sem erro, rollback se exceção

    Eventos só são entregues ao publisher depois do commit; em rollback
    são descartados.
    """

    def __init__(self):
        self._events: List[DomainEvent] = []

    def __enter__(self) -> "UnitOfWork":
        self._begin_transaction()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        if exc_type is not None:
            self.rollback()
        else:
            self.commit()
        return False

    @abstractmethod
    def _begin_transaction(self) -> None:
        raise NotImplementedError

    @abstractmethod
    def commit(self) -> None:
        """Persiste mudanças e publica eventos enfileirados."""
        raise NotImplementedError

    @abstractmethod
    def rollback(self) -> None:
        """Desfaz mudanças e descarta eventos."""
        raise NotImplementedError

    def publish_event(self, event: DomainEvent) -> None:
        """Enfileira evento para publicação após commit."""
        self._events.append(event)

    def collect_events(self) -> List[DomainEvent]:
        """Eventos pendentes (cópia)."""
        return list(self._events)

    def clear_events(self) -> None:
        self._events.clear()


class EventPublisher(ABC):
    """
    Interface para publicação de eventos.

    Implementações em src/adapters/django_app/events/publishers.py.
    """

    @abstractmethod
    def publish(self, event: DomainEvent) -> None:
        raise NotImplementedError

    def publish_batch(self, events: List[DomainEvent]) -> None:
        for event in events:
            self.publish(event)
