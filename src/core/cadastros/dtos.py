"""
DTOs de Cadastro (setores, setores responsáveis e perfis).
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from .entities import SetorEntity, SetorResponsavelEntity, PerfilEntity


# =============================================================================
# INPUT DTOs
# =============================================================================

@dataclass(frozen=True)
class SalvarSetorInputDTO:
    """
    Criação (setor_id vazio) ou edição de setor.
    """

    nome: str
    ativo: bool = True
    setor_id: Optional[str] = None


@dataclass(frozen=True)
class SalvarSetorResponsavelInputDTO:
    nome: str
    descricao: Optional[str] = None
    ativo: bool = True
    setor_responsavel_id: Optional[str] = None


@dataclass(frozen=True)
class CriarPerfilInputDTO:
    usuario_id: str
    nome_completo: str
    email: str


@dataclass(frozen=True)
class AtualizarPerfilInputDTO:
    nome_completo: str
    email: str
    telefone: Optional[str] = None


@dataclass(frozen=True)
class AlterarPapelInputDTO:
    """
    Attributes:
        usuario_id: Usuário alvo
        papel: Valor do novo papel (ex: "tecnico")
        setor_responsavel_id: Setor do técnico (opcional)
    """

    usuario_id: str
    papel: str
    setor_responsavel_id: Optional[str] = None


# =============================================================================
# OUTPUT DTOs
# =============================================================================

@dataclass
class SetorOutputDTO:
    id: str
    nome: str
    ativo: bool
    criado_em: datetime

    @classmethod
    def from_entity(cls, entity: SetorEntity) -> "SetorOutputDTO":
        return cls(
            id=entity.id,
            nome=entity.nome,
            ativo=entity.ativo,
            criado_em=entity.criado_em,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "nome": self.nome,
            "ativo": self.ativo,
            "criado_em": self.criado_em.isoformat(),
        }


@dataclass
class SetorResponsavelOutputDTO:
    id: str
    nome: str
    descricao: Optional[str]
    ativo: bool
    criado_em: datetime

    @classmethod
    def from_entity(cls, entity: SetorResponsavelEntity) -> "SetorResponsavelOutputDTO":
        return cls(
            id=entity.id,
            nome=entity.nome,
            descricao=entity.descricao,
            ativo=entity.ativo,
            criado_em=entity.criado_em,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "nome": self.nome,
            "descricao": self.descricao,
            "ativo": self.ativo,
            "criado_em": self.criado_em.isoformat(),
        }


@dataclass
class PerfilOutputDTO:
    usuario_id: str
    nome_completo: str
    email: str
    telefone: Optional[str]
    avatar_url: Optional[str]
    papel: str
    papel_label: str
    setor_responsavel_id: Optional[str]
    iniciais: str

    @classmethod
    def from_entity(cls, entity: PerfilEntity) -> "PerfilOutputDTO":
        return cls(
            usuario_id=entity.usuario_id,
            nome_completo=entity.nome_completo,
            email=entity.email,
            telefone=entity.telefone,
            avatar_url=entity.avatar_url,
            papel=entity.papel.value,
            papel_label=entity.papel.label,
            setor_responsavel_id=entity.setor_responsavel_id,
            iniciais=entity.iniciais,
        )

    def to_dict(self) -> dict:
        return {
            "usuario_id": self.usuario_id,
            "nome_completo": self.nome_completo,
            "email": self.email,
            "telefone": self.telefone,
            "avatar_url": self.avatar_url,
            "papel": self.papel,
            "papel_label": self.papel_label,
            "setor_responsavel_id": self.setor_responsavel_id,
        }
