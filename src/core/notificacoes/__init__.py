"""
Notificações por usuário geradas a partir de eventos de O.S.
"""

from .entities import NotificacaoEntity
from .dtos import CriarNotificacaoInputDTO, NotificacaoOutputDTO
from .ports import NotificacaoRepository
from .use_cases import (
    ListarNotificacoesService,
    ContarNaoLidasService,
    MarcarComoLidaService,
    MarcarTodasComoLidasService,
    CriarNotificacaoService,
    NotificarEventoOSService,
)

__all__ = [
    "NotificacaoEntity",
    "CriarNotificacaoInputDTO",
    "NotificacaoOutputDTO",
    "NotificacaoRepository",
    "ListarNotificacoesService",
    "ContarNaoLidasService",
    "MarcarComoLidaService",
    "MarcarTodasComoLidasService",
    "CriarNotificacaoService",
    "NotificarEventoOSService",
]
