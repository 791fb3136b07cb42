"""
Data Transfer Objects (DTOs) do Domínio de Ordens de Serviço.

Tipos de DTOs:
- Input DTOs: dados de entrada validados (de Forms/APIs)
- Output DTOs: dados formatados para Views/APIs
- Query DTOs: filtros de listagem
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from .entities import ServiceOrderEntity, OSUpdateEntity


# =============================================================================
# INPUT DTOs (Entrada)
# =============================================================================

@dataclass(frozen=True)
class CriarOSInputDTO:
    """
    DTO de entrada para abrir uma O.S.

    Attributes:
        categoria: Valor da categoria (ex: "eletrica")
        setor_id: Setor de origem
        equipamento: Equipamento/local
        descricao: Descrição do problema
        solicitante_id: Usuário que abre a O.S.
        urgente: Chave "urgente" do formulário
        prioridade: Prioridade explícita (opcional, ex: "emergencial")
        tipo_manutencao: Valor do tipo (default: "corretiva")
        setor_responsavel_id: Setor responsável (opcional)
        foto_url: URL da foto já armazenada (opcional)
    """

    categoria: str
    setor_id: str
    equipamento: str
    descricao: str
    solicitante_id: str
    urgente: bool = False
    prioridade: Optional[str] = None
    tipo_manutencao: str = "corretiva"
    setor_responsavel_id: Optional[str] = None
    foto_url: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "categoria": self.categoria,
            "setor_id": self.setor_id,
            "equipamento": self.equipamento,
            "descricao": self.descricao,
            "solicitante_id": self.solicitante_id,
            "urgente": self.urgente,
            "prioridade": self.prioridade,
            "tipo_manutencao": self.tipo_manutencao,
            "setor_responsavel_id": self.setor_responsavel_id,
            "foto_url": self.foto_url,
        }


@dataclass(frozen=True)
class AlterarStatusInputDTO:
    ordem_id: str
    novo_status: str


@dataclass(frozen=True)
class ReatribuirOSInputDTO:
    """
    Ao menos um destino (setor responsável ou técnico) deve ser informado.
    """

    ordem_id: str
    setor_responsavel_id: Optional[str] = None
    tecnico_id: Optional[str] = None


@dataclass(frozen=True)
class AlterarPrioridadeInputDTO:
    ordem_id: str
    nova_prioridade: str


@dataclass(frozen=True)
class AdicionarComentarioInputDTO:
    ordem_id: str
    comentario: str


# =============================================================================
# QUERY DTOs
# =============================================================================

@dataclass(frozen=True)
class ListarOSQueryDTO:
    """
    Filtros da listagem de O.S.

    Attributes:
        status: Valor do status ou None/"all" para todos
        busca: Texto livre (número, equipamento ou nome do setor)
        limite: Quantidade máxima de itens (None = sem limite)
    """

    status: Optional[str] = None
    busca: Optional[str] = None
    limite: Optional[int] = None


# =============================================================================
# OUTPUT DTOs (Saída)
# =============================================================================

@dataclass
class OSOutputDTO:
    """
    DTO de saída com todos os dados de uma O.S.

    Status, prioridade, categoria e tipo vêm como valor (para forms e
    API) e label (para exibição).
    """

    id: str
    numero: Optional[int]
    categoria: str
    categoria_label: str
    setor_id: str
    setor_nome: Optional[str]
    setor_responsavel_id: Optional[str]
    setor_responsavel_nome: Optional[str]
    equipamento: str
    descricao: str
    prioridade: str
    prioridade_label: str
    status: str
    status_label: str
    tipo_manutencao: str
    tipo_manutencao_label: str
    solicitante_id: str
    solicitante_nome: Optional[str]
    tecnico_id: Optional[str]
    tecnico_nome: Optional[str]
    foto_url: Optional[str]
    sla_horas: Optional[int]
    criado_em: datetime
    atualizado_em: datetime
    concluido_em: Optional[datetime]
    em_sla_critico: bool
    tempo_resolucao_horas: Optional[float]

    @classmethod
    def from_entity(cls, entity: ServiceOrderEntity) -> "OSOutputDTO":
        return cls(
            id=entity.id,
            numero=entity.numero,
            categoria=entity.categoria.value,
            categoria_label=entity.categoria.label,
            setor_id=entity.setor_id,
            setor_nome=entity.setor_nome,
            setor_responsavel_id=entity.setor_responsavel_id,
            setor_responsavel_nome=entity.setor_responsavel_nome,
            equipamento=entity.equipamento,
            descricao=entity.descricao,
            prioridade=entity.prioridade.value,
            prioridade_label=entity.prioridade.label,
            status=entity.status.value,
            status_label=entity.status.label,
            tipo_manutencao=entity.tipo_manutencao.value,
            tipo_manutencao_label=entity.tipo_manutencao.label,
            solicitante_id=entity.solicitante_id,
            solicitante_nome=entity.solicitante_nome,
            tecnico_id=entity.tecnico_id,
            tecnico_nome=entity.tecnico_nome,
            foto_url=entity.foto_url,
            sla_horas=entity.sla_horas,
            criado_em=entity.criado_em,
            atualizado_em=entity.atualizado_em,
            concluido_em=entity.concluido_em,
            em_sla_critico=entity.em_sla_critico(),
            tempo_resolucao_horas=entity.tempo_resolucao_horas,
        )

    @property
    def finalizada(self) -> bool:
        return self.status in ("concluida", "cancelada")

    def to_dict(self) -> dict:
        """Converte para dicionário (serialização JSON)."""
        return {
            "id": self.id,
            "numero": self.numero,
            "categoria": self.categoria,
            "categoria_label": self.categoria_label,
            "setor_id": self.setor_id,
            "setor_nome": self.setor_nome,
            "setor_responsavel_id": self.setor_responsavel_id,
            "setor_responsavel_nome": self.setor_responsavel_nome,
            "equipamento": self.equipamento,
            "descricao": self.descricao,
            "prioridade": self.prioridade,
            "prioridade_label": self.prioridade_label,
            "status": self.status,
            "status_label": self.status_label,
            "tipo_manutencao": self.tipo_manutencao,
            "tipo_manutencao_label": self.tipo_manutencao_label,
            "solicitante_id": self.solicitante_id,
            "solicitante_nome": self.solicitante_nome,
            "tecnico_id": self.tecnico_id,
            "tecnico_nome": self.tecnico_nome,
            "foto_url": self.foto_url,
            "sla_horas": self.sla_horas,
            "criado_em": self.criado_em.isoformat(),
            "atualizado_em": self.atualizado_em.isoformat(),
            "concluido_em": self.concluido_em.isoformat() if self.concluido_em else None,
            "em_sla_critico": self.em_sla_critico,
            "tempo_resolucao_horas": (
                round(self.tempo_resolucao_horas, 2)
                if self.tempo_resolucao_horas is not None else None
            ),
        }


@dataclass
class OSListItemDTO:
    """
    DTO enxuto para listagens (dashboard e lista de O.S.).
    """

    id: str
    numero: Optional[int]
    equipamento: str
    setor_nome: Optional[str]
    categoria_label: str
    prioridade: str
    prioridade_label: str
    status: str
    status_label: str
    criado_em: datetime
    em_sla_critico: bool

    @classmethod
    def from_entity(cls, entity: ServiceOrderEntity) -> "OSListItemDTO":
        return cls(
            id=entity.id,
            numero=entity.numero,
            equipamento=entity.equipamento,
            setor_nome=entity.setor_nome,
            categoria_label=entity.categoria.label,
            prioridade=entity.prioridade.value,
            prioridade_label=entity.prioridade.label,
            status=entity.status.value,
            status_label=entity.status.label,
            criado_em=entity.criado_em,
            em_sla_critico=entity.em_sla_critico(),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "numero": self.numero,
            "equipamento": self.equipamento,
            "setor_nome": self.setor_nome,
            "categoria_label": self.categoria_label,
            "prioridade": self.prioridade,
            "prioridade_label": self.prioridade_label,
            "status": self.status,
            "status_label": self.status_label,
            "criado_em": self.criado_em.isoformat(),
            "em_sla_critico": self.em_sla_critico,
        }


@dataclass
class ComentarioOutputDTO:
    id: str
    ordem_id: str
    autor_id: str
    autor_nome: Optional[str]
    comentario: str
    criado_em: datetime

    @classmethod
    def from_entity(cls, entity: OSUpdateEntity) -> "ComentarioOutputDTO":
        return cls(
            id=entity.id,
            ordem_id=entity.ordem_id,
            autor_id=entity.autor_id,
            autor_nome=entity.autor_nome,
            comentario=entity.comentario,
            criado_em=entity.criado_em,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "ordem_id": self.ordem_id,
            "autor_id": self.autor_id,
            "autor_nome": self.autor_nome,
            "comentario": self.comentario,
            "criado_em": self.criado_em.isoformat(),
        }
