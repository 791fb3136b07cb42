"""
Ports (Interfaces) de Notificações.
"""

from typing import Dict, List, Optional, Protocol, runtime_checkable

from .entities import NotificacaoEntity


@runtime_checkable
class NotificacaoRepository(Protocol):
    def save(self, notificacao: NotificacaoEntity) -> None:
        ...

    def get_by_id(self, notificacao_id: str) -> Optional[NotificacaoEntity]:
        ...

    def list_by_usuario(
        self,
        usuario_id: str,
        limite: Optional[int] = None,
    ) -> List[NotificacaoEntity]:
        """Notificações do usuário, mais recentes primeiro."""
        ...

    def count_nao_lidas(self, usuario_id: str) -> int:
        ...

    def marcar_todas_como_lidas(self, usuario_id: str) -> int:
        """Marca as não lidas do usuário; retorna quantas foram alteradas."""
        ...


class InMemoryNotificacaoRepository:
    """Implementação em memória do NotificacaoRepository (testes)."""

    def __init__(self):
        self._notificacoes: Dict[str, NotificacaoEntity] = {}

    def save(self, notificacao: NotificacaoEntity) -> None:
        self._notificacoes[notificacao.id] = notificacao

    def get_by_id(self, notificacao_id: str) -> Optional[NotificacaoEntity]:
        return self._notificacoes.get(notificacao_id)

    def list_by_usuario(
        self,
        usuario_id: str,
        limite: Optional[int] = None,
    ) -> List[NotificacaoEntity]:
        itens = sorted(
            (n for n in self._notificacoes.values() if n.usuario_id == usuario_id),
            key=lambda n: n.criado_em,
            reverse=True,
        )
        return itens[:limite] if limite else itens

    def count_nao_lidas(self, usuario_id: str) -> int:
        return len([
            n for n in self._notificacoes.values()
            if n.usuario_id == usuario_id and not n.lida
        ])

    def marcar_todas_como_lidas(self, usuario_id: str) -> int:
        alteradas = 0
        for n in self._notificacoes.values():
            if n.usuario_id == usuario_id and n.marcar_como_lida():
                alteradas += 1
        return alteradas

    def all(self) -> List[NotificacaoEntity]:
        return list(self._notificacoes.values())

    def clear(self) -> None:
        self._notificacoes.clear()
