"""
Ports (Interfaces) do Domínio de Ordens de Serviço.

Contratos de persistência que os Adapters implementam:
- OrdemServicoRepository: O.S. (service_orders)
- ComentarioRepository: histórico de comentários (os_updates)

As consultas de listagem recebem o `Ator` e aplicam as regras de
visibilidade por papel; nenhuma view filtra O.S. por conta própria.

Example:
    class DjangoOrdemServicoRepository:
        def save(self, ordem: ServiceOrderEntity) -> None:
            model = OrdemServicoMapper.to_model(ordem)
            model.save()
"""

from datetime import datetime
from typing import Dict, List, Optional, Protocol, runtime_checkable

from src.core.acesso import Ator

from .entities import ServiceOrderEntity, OSUpdateEntity, OSStatus


@runtime_checkable
class OrdemServicoRepository(Protocol):
    """
    Interface para persistência de O.S.

    Implementações:
    - DjangoOrdemServicoRepository (ORM)
    - InMemoryOrdemServicoRepository (testes)
    """

    def save(self, ordem: ServiceOrderEntity) -> None:
        """
        Persiste O.S. (create ou update).

        Na criação, atribui `ordem.numero` (maior número + 1).
        """
        ...

    def get_by_id(self, ordem_id: str) -> Optional[ServiceOrderEntity]:
        ...

    def list_visiveis(
        self,
        ator: Ator,
        status: Optional[OSStatus] = None,
        busca: Optional[str] = None,
        limite: Optional[int] = None,
    ) -> List[ServiceOrderEntity]:
        """
        Lista O.S. visíveis para o ator, mais recentes primeiro.

        Args:
            ator: Usuário que consulta (define o escopo)
            status: Filtro de status (opcional)
            busca: Substring do número, equipamento ou nome do setor
                (sem diferenciar maiúsculas)
            limite: Máximo de itens
        """
        ...

    def list_filtradas(
        self,
        desde: Optional[datetime] = None,
        setor_id: Optional[str] = None,
        tipo_manutencao: Optional[str] = None,
        prioridade: Optional[str] = None,
        status: Optional[str] = None,
    ) -> List[ServiceOrderEntity]:
        """Lista O.S. para relatórios (sem escopo de ator)."""
        ...

    def list_nao_finalizadas(self) -> List[ServiceOrderEntity]:
        ...

    def count_by_setor(self, setor_id: str) -> int:
        ...

    def count_by_setor_responsavel(self, setor_responsavel_id: str) -> int:
        ...


@runtime_checkable
class ComentarioRepository(Protocol):
    """Interface para o histórico de comentários."""

    def save(self, comentario: OSUpdateEntity) -> None:
        ...

    def list_by_ordem(self, ordem_id: str) -> List[OSUpdateEntity]:
        """Comentários da O.S. em ordem cronológica."""
        ...


def corresponde_busca(ordem: ServiceOrderEntity, busca: Optional[str]) -> bool:
    """Critério de busca textual usado pela implementação em memória."""
    if not busca:
        return True
    termo = busca.strip().lower()
    if not termo:
        return True
    return (
        termo in str(ordem.numero or "")
        or termo in ordem.equipamento.lower()
        or termo in (ordem.setor_nome or "").lower()
    )


class InMemoryOrdemServicoRepository:
    """
    Implementação em memória do OrdemServicoRepository.

    Útil para testes unitários e prototipagem. Não usar em produção!
    """

    def __init__(self):
        self._ordens: Dict[str, ServiceOrderEntity] = {}

    def save(self, ordem: ServiceOrderEntity) -> None:
        if ordem.numero is None:
            ordem.numero = max(
                (o.numero or 0 for o in self._ordens.values()), default=0
            ) + 1
        self._ordens[ordem.id] = ordem

    def get_by_id(self, ordem_id: str) -> Optional[ServiceOrderEntity]:
        return self._ordens.get(ordem_id)

    def list_all(self) -> List[ServiceOrderEntity]:
        return sorted(self._ordens.values(), key=lambda o: o.criado_em, reverse=True)

    def list_visiveis(
        self,
        ator: Ator,
        status: Optional[OSStatus] = None,
        busca: Optional[str] = None,
        limite: Optional[int] = None,
    ) -> List[ServiceOrderEntity]:
        ordens = [
            o for o in self.list_all()
            if ator.pode_ver(o)
            and (status is None or o.status == status)
            and corresponde_busca(o, busca)
        ]
        return ordens[:limite] if limite else ordens

    def list_filtradas(
        self,
        desde: Optional[datetime] = None,
        setor_id: Optional[str] = None,
        tipo_manutencao: Optional[str] = None,
        prioridade: Optional[str] = None,
        status: Optional[str] = None,
    ) -> List[ServiceOrderEntity]:
        return [
            o for o in self.list_all()
            if (desde is None or o.criado_em >= desde)
            and (not setor_id or o.setor_id == setor_id)
            and (not tipo_manutencao or o.tipo_manutencao.value == tipo_manutencao)
            and (not prioridade or o.prioridade.value == prioridade)
            and (not status or o.status.value == status)
        ]

    def list_nao_finalizadas(self) -> List[ServiceOrderEntity]:
        return [o for o in self.list_all() if not o.status.finalizado]

    def count_by_setor(self, setor_id: str) -> int:
        return len([o for o in self._ordens.values() if o.setor_id == setor_id])

    def count_by_setor_responsavel(self, setor_responsavel_id: str) -> int:
        return len([
            o for o in self._ordens.values()
            if o.setor_responsavel_id == setor_responsavel_id
        ])

    def clear(self) -> None:
        self._ordens.clear()


class InMemoryComentarioRepository:
    """Implementação em memória do ComentarioRepository."""

    def __init__(self):
        self._comentarios: Dict[str, OSUpdateEntity] = {}

    def save(self, comentario: OSUpdateEntity) -> None:
        self._comentarios[comentario.id] = comentario

    def list_by_ordem(self, ordem_id: str) -> List[OSUpdateEntity]:
        return sorted(
            (c for c in self._comentarios.values() if c.ordem_id == ordem_id),
            key=lambda c: c.criado_em,
        )

    def clear(self) -> None:
        self._comentarios.clear()
