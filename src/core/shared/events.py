"""
Domain Events - base para comunicação assíncrona entre partes do sistema.

Eventos são enfileirados no Unit of Work e publicados somente após o
commit. Handlers (síncronos ou Celery) reagem a eles, por exemplo
criando notificações para solicitantes e técnicos.
"""

from abc import ABC
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, ClassVar
import uuid

from .tempo import agora


@dataclass
class DomainEvent(ABC):
    """
    Classe base para Domain Events.

    Eventos são nomeados no passado (OSCriada, não CriarOS) e carregam
    os dados necessários para que handlers não precisem reconsultar o banco.

    Attributes:
        event_id: Identificador único do evento
        aggregate_id: ID do agregado que gerou o evento
        occurred_at: Momento em que o evento ocorreu
        version: Versão do schema do evento

    Example:
        @dataclass
        class OSCriadaEvent(DomainEvent):
            aggregate_type: ClassVar[str] = "OrdemServico"
            numero: int = 0
    """

    event_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    aggregate_id: str = ""
    occurred_at: datetime = field(default_factory=agora)
    version: int = 1

    aggregate_type: ClassVar[str] = ""

    def __post_init__(self):
        if not self.aggregate_id:
            raise ValueError("aggregate_id é obrigatório")

    @property
    def event_type(self) -> str:
        """Nome da classe do evento."""
        return self.__class__.__name__

    def to_dict(self) -> Dict[str, Any]:
        """
        Serializa evento para dicionário.

        Formato usado tanto no Event Store quanto no payload das
        tarefas Celery (apenas tipos JSON).
        """
        return {
            "event_id": self.event_id,
            "event_type": self.event_type,
            "aggregate_id": self.aggregate_id,
            "aggregate_type": self.aggregate_type,
            "occurred_at": self.occurred_at.isoformat(),
            "version": self.version,
            "data": self._get_event_data(),
        }

    def _get_event_data(self) -> Dict[str, Any]:
        """Campos específicos da subclasse."""
        base_fields = {"event_id", "aggregate_id", "occurred_at", "version"}
        return {
            key: value
            for key, value in self.__dict__.items()
            if key not in base_fields and not key.startswith("_")
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DomainEvent":
        """Reconstrói evento a partir do formato de `to_dict()`."""
        return cls(
            event_id=data.get("event_id", str(uuid.uuid4())),
            aggregate_id=data["aggregate_id"],
            occurred_at=datetime.fromisoformat(data["occurred_at"]),
            version=data.get("version", 1),
            **data.get("data", {}),
        )

    def __repr__(self) -> str:
        return (
            f"{self.event_type}("
            f"event_id={self.event_id[:8]}..., "
            f"aggregate_id={self.aggregate_id}, "
            f"occurred_at={self.occurred_at.isoformat()}"
            f")"
        )
