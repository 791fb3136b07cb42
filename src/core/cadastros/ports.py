"""
Ports (Interfaces) de Cadastro.

- SetorRepository: setores de origem
- SetorResponsavelRepository: setores responsáveis
- PerfilRepository: perfis de usuário
"""

from typing import Dict, List, Optional, Protocol, runtime_checkable

from src.core.acesso import UserRole

from .entities import SetorEntity, SetorResponsavelEntity, PerfilEntity


@runtime_checkable
class SetorRepository(Protocol):
    def save(self, setor: SetorEntity) -> None:
        ...

    def get_by_id(self, setor_id: str) -> Optional[SetorEntity]:
        ...

    def get_by_nome(self, nome: str) -> Optional[SetorEntity]:
        """Busca por nome sem diferenciar maiúsculas."""
        ...

    def delete(self, setor_id: str) -> None:
        ...

    def list_all(self, apenas_ativos: bool = False) -> List[SetorEntity]:
        """Lista ordenada por nome."""
        ...


@runtime_checkable
class SetorResponsavelRepository(Protocol):
    def save(self, setor: SetorResponsavelEntity) -> None:
        ...

    def get_by_id(self, setor_id: str) -> Optional[SetorResponsavelEntity]:
        ...

    def get_by_nome(self, nome: str) -> Optional[SetorResponsavelEntity]:
        ...

    def delete(self, setor_id: str) -> None:
        ...

    def list_all(self, apenas_ativos: bool = False) -> List[SetorResponsavelEntity]:
        ...


@runtime_checkable
class PerfilRepository(Protocol):
    def save(self, perfil: PerfilEntity) -> None:
        ...

    def get_by_usuario_id(self, usuario_id: str) -> Optional[PerfilEntity]:
        ...

    def list_all(self) -> List[PerfilEntity]:
        """Lista ordenada por nome completo."""
        ...

    def list_by_papel(
        self,
        papel: UserRole,
        setor_responsavel_id: Optional[str] = None,
    ) -> List[PerfilEntity]:
        ...


class _InMemoryPorNome:
    """Base das implementações em memória de setores."""

    def __init__(self):
        self._itens: Dict[str, object] = {}

    def save(self, item) -> None:
        self._itens[item.id] = item

    def get_by_id(self, item_id: str):
        return self._itens.get(item_id)

    def get_by_nome(self, nome: str):
        alvo = (nome or "").strip().lower()
        for item in self._itens.values():
            if item.nome.lower() == alvo:
                return item
        return None

    def delete(self, item_id: str) -> None:
        self._itens.pop(item_id, None)

    def list_all(self, apenas_ativos: bool = False) -> list:
        itens = [i for i in self._itens.values() if i.ativo or not apenas_ativos]
        return sorted(itens, key=lambda i: i.nome.lower())

    def clear(self) -> None:
        self._itens.clear()


class InMemorySetorRepository(_InMemoryPorNome):
    """Implementação em memória do SetorRepository (testes)."""


class InMemorySetorResponsavelRepository(_InMemoryPorNome):
    """Implementação em memória do SetorResponsavelRepository (testes)."""


class InMemoryPerfilRepository:
    """Implementação em memória do PerfilRepository (testes)."""

    def __init__(self):
        self._perfis: Dict[str, PerfilEntity] = {}

    def save(self, perfil: PerfilEntity) -> None:
        self._perfis[perfil.usuario_id] = perfil

    def get_by_usuario_id(self, usuario_id: str) -> Optional[PerfilEntity]:
        return self._perfis.get(str(usuario_id))

    def list_all(self) -> List[PerfilEntity]:
        return sorted(self._perfis.values(), key=lambda p: p.nome_completo.lower())

    def list_by_papel(
        self,
        papel: UserRole,
        setor_responsavel_id: Optional[str] = None,
    ) -> List[PerfilEntity]:
        return [
            p for p in self.list_all()
            if p.papel == papel
            and (not setor_responsavel_id or p.setor_responsavel_id == setor_responsavel_id)
        ]

    def clear(self) -> None:
        self._perfis.clear()
