"""
Entidade de Notificação (tabela notifications).
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import ClassVar, Optional
import uuid

from src.core.shared.exceptions import ValidationError
from src.core.shared.tempo import agora


@dataclass
class NotificacaoEntity:
    """
    Notificação destinada a um usuário.

    Attributes:
        usuario_id: Destinatário
        titulo: Título curto (max 200 caracteres)
        mensagem: Texto da notificação
        lida: Se o usuário já leu
        ordem_id: O.S. relacionada (opcional, vira link na tela)
    """

    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    usuario_id: str = ""
    titulo: str = ""
    mensagem: str = ""
    lida: bool = False
    ordem_id: Optional[str] = None
    criado_em: datetime = field(default_factory=agora)

    TITULO_MAX_LENGTH: ClassVar[int] = 200

    @classmethod
    def criar(
        cls,
        usuario_id: str,
        titulo: str,
        mensagem: str,
        ordem_id: Optional[str] = None,
    ) -> "NotificacaoEntity":
        """
        Raises:
            ValidationError: Se destinatário, título ou mensagem ausentes
        """
        if not usuario_id:
            raise ValidationError("Destinatário é obrigatório", field="usuario_id")
        if not titulo or not titulo.strip():
            raise ValidationError("Título é obrigatório", field="titulo")
        if len(titulo.strip()) > cls.TITULO_MAX_LENGTH:
            raise ValidationError(
                f"Título deve ter no máximo {cls.TITULO_MAX_LENGTH} caracteres",
                field="titulo"
            )
        if not mensagem or not mensagem.strip():
            raise ValidationError("Mensagem é obrigatória", field="mensagem")

        return cls(
            usuario_id=str(usuario_id),
            titulo=titulo.strip(),
            mensagem=mensagem.strip(),
            ordem_id=ordem_id,
        )

    def marcar_como_lida(self) -> bool:
        """Retorna False se já estava lida."""
        if self.lida:
            return False
        self.lida = True
        return True
