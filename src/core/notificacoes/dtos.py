"""
DTOs de Notificações.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from .entities import NotificacaoEntity


@dataclass(frozen=True)
class CriarNotificacaoInputDTO:
    usuario_id: str
    titulo: str
    mensagem: str
    ordem_id: Optional[str] = None


@dataclass
class NotificacaoOutputDTO:
    id: str
    titulo: str
    mensagem: str
    lida: bool
    ordem_id: Optional[str]
    criado_em: datetime

    @classmethod
    def from_entity(cls, entity: NotificacaoEntity) -> "NotificacaoOutputDTO":
        return cls(
            id=entity.id,
            titulo=entity.titulo,
            mensagem=entity.mensagem,
            lida=entity.lida,
            ordem_id=entity.ordem_id,
            criado_em=entity.criado_em,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "titulo": self.titulo,
            "mensagem": self.mensagem,
            "lida": self.lida,
            "ordem_id": self.ordem_id,
            "criado_em": self.criado_em.isoformat(),
        }
