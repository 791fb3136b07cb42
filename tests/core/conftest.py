"""
Fixtures dos testes do Core.

Os testes do Core usam repositórios em memória e um Unit of Work
fake; nenhum acesso a banco.
"""

from typing import List

import pytest

from src.core.cadastros.ports import (
    InMemoryPerfilRepository,
    InMemorySetorRepository,
    InMemorySetorResponsavelRepository,
)
from src.core.notificacoes.ports import InMemoryNotificacaoRepository
from src.core.ordens_servico.entities import OSCategory, ServiceOrderEntity
from src.core.ordens_servico.ports import (
    InMemoryComentarioRepository,
    InMemoryOrdemServicoRepository,
)
from src.core.shared.events import DomainEvent
from src.core.shared.interfaces import UnitOfWork


class FakeUnitOfWork(UnitOfWork):
    """
    Fake Unit of Work para testes.

    Permite verificar commit/rollback e os eventos publicados.
    """

    def __init__(self):
        super().__init__()
        self.committed = False
        self.rolled_back = False
        self.published_events: List[DomainEvent] = []

    def _begin_transaction(self) -> None:
        pass

    def commit(self) -> None:
        self.committed = True
        self.published_events.extend(self._events)
        self.clear_events()

    def rollback(self) -> None:
        self.rolled_back = True
        self.clear_events()

    def eventos_do_tipo(self, event_type: str) -> List[DomainEvent]:
        return [e for e in self.published_events if e.event_type == event_type]


@pytest.fixture
def uow():
    return FakeUnitOfWork()


@pytest.fixture
def os_repo():
    return InMemoryOrdemServicoRepository()


@pytest.fixture
def comentario_repo():
    return InMemoryComentarioRepository()


@pytest.fixture
def setor_repo():
    return InMemorySetorRepository()


@pytest.fixture
def setor_responsavel_repo():
    return InMemorySetorResponsavelRepository()


@pytest.fixture
def perfil_repo():
    return InMemoryPerfilRepository()


@pytest.fixture
def notificacao_repo():
    return InMemoryNotificacaoRepository()


@pytest.fixture
def nova_ordem(os_repo):
    """Factory que abre e persiste uma O.S. no repositório em memória."""

    def criar(solicitante_id="10", **kwargs):
        dados = {
            "categoria": OSCategory.ELETRICA,
            "setor_id": "setor-uti",
            "equipamento": "Tomada leito 3",
            "descricao": "Tomada sem energia",
            "solicitante_id": solicitante_id,
        }
        dados.update(kwargs)
        ordem = ServiceOrderEntity.criar(**dados)
        os_repo.save(ordem)
        return ordem

    return criar
