"""
Mappers para conversão entre Entities (Core) e Models (Django).

Responsabilidades:
- Model → Entity (para uso no Core)
- Entity → dict de campos (para update_or_create nos repositórios)
- DomainEvent → DomainEventModel (para o Event Store)

Mappers são stateless e não contêm lógica de negócio. Os campos
*_nome das entidades vêm das relações carregadas com select_related.
"""

from typing import Any, Dict, List, Optional

from src.core.acesso import UserRole
from src.core.cadastros.entities import (
    SetorEntity,
    SetorResponsavelEntity,
    PerfilEntity,
)
from src.core.notificacoes.entities import NotificacaoEntity
from src.core.ordens_servico.entities import (
    ServiceOrderEntity,
    OSUpdateEntity,
    OSStatus,
    OSPriority,
    OSCategory,
    MaintenanceType,
)
from src.core.shared.events import DomainEvent

from .models import (
    SectorModel,
    ServiceDepartmentModel,
    ProfileModel,
    ServiceOrderModel,
    OSUpdateModel,
    NotificationModel,
    DomainEventModel,
)


def _str_or_none(valor) -> Optional[str]:
    return str(valor) if valor is not None else None


class OrdemServicoMapper:
    """
    Mapper entre ServiceOrderEntity e ServiceOrderModel.

    - to_entity(): Model → Entity
    - to_entity_list(): List[Model] → List[Entity]
    - to_fields(): Entity → campos do model (sem os_number)
    """

    @staticmethod
    def to_entity(model: ServiceOrderModel) -> ServiceOrderEntity:
        """
        Converte ServiceOrderModel para ServiceOrderEntity.

        Note:
            Bypassa as validações de ServiceOrderEntity.criar(),
            pois os dados já foram validados na abertura.
        """
        return ServiceOrderEntity(
            id=model.id,
            numero=model.os_number,
            categoria=OSCategory(model.category),
            setor_id=model.sector_id,
            setor_responsavel_id=model.service_department_id,
            equipamento=model.equipment,
            descricao=model.description,
            prioridade=OSPriority(model.priority),
            status=OSStatus(model.status),
            tipo_manutencao=MaintenanceType(model.maintenance_type),
            solicitante_id=str(model.requester_id),
            tecnico_id=_str_or_none(model.assigned_to_id),
            foto_url=model.photo_url,
            sla_horas=model.sla_target_hours,
            criado_em=model.created_at,
            atualizado_em=model.updated_at,
            concluido_em=model.completed_at,
            setor_nome=model.sector.name,
            setor_responsavel_nome=(
                model.service_department.name if model.service_department_id else None
            ),
            solicitante_nome=model.requester.full_name,
            tecnico_nome=model.assigned_to.full_name if model.assigned_to_id else None,
        )

    @staticmethod
    def to_entity_list(models) -> List[ServiceOrderEntity]:
        return [OrdemServicoMapper.to_entity(model) for model in models]

    @staticmethod
    def to_fields(entity: ServiceOrderEntity) -> Dict[str, Any]:
        return {
            'category': entity.categoria.value,
            'sector_id': entity.setor_id,
            'service_department_id': entity.setor_responsavel_id,
            'equipment': entity.equipamento,
            'description': entity.descricao,
            'priority': entity.prioridade.value,
            'status': entity.status.value,
            'maintenance_type': entity.tipo_manutencao.value,
            'requester_id': entity.solicitante_id,
            'assigned_to_id': entity.tecnico_id,
            'photo_url': entity.foto_url,
            'sla_target_hours': entity.sla_horas,
            'created_at': entity.criado_em,
            'updated_at': entity.atualizado_em,
            'completed_at': entity.concluido_em,
        }


class ComentarioMapper:

    @staticmethod
    def to_entity(model: OSUpdateModel) -> OSUpdateEntity:
        return OSUpdateEntity(
            id=model.id,
            ordem_id=model.service_order_id,
            autor_id=str(model.user_id),
            comentario=model.comment,
            criado_em=model.created_at,
            autor_nome=model.user.full_name,
        )

    @staticmethod
    def to_model(entity: OSUpdateEntity) -> OSUpdateModel:
        return OSUpdateModel(
            id=entity.id,
            service_order_id=entity.ordem_id,
            user_id=entity.autor_id,
            comment=entity.comentario,
            created_at=entity.criado_em,
        )


class SetorMapper:

    @staticmethod
    def to_entity(model: SectorModel) -> SetorEntity:
        return SetorEntity(
            id=model.id,
            nome=model.name,
            ativo=model.is_active,
            criado_por_id=model.created_by,
            criado_em=model.created_at,
        )

    @staticmethod
    def to_fields(entity: SetorEntity) -> Dict[str, Any]:
        return {
            'name': entity.nome,
            'is_active': entity.ativo,
            'created_by': entity.criado_por_id,
            'created_at': entity.criado_em,
        }


class SetorResponsavelMapper:

    @staticmethod
    def to_entity(model: ServiceDepartmentModel) -> SetorResponsavelEntity:
        return SetorResponsavelEntity(
            id=model.id,
            nome=model.name,
            descricao=model.description,
            ativo=model.is_active,
            criado_por_id=model.created_by,
            criado_em=model.created_at,
        )

    @staticmethod
    def to_fields(entity: SetorResponsavelEntity) -> Dict[str, Any]:
        return {
            'name': entity.nome,
            'description': entity.descricao,
            'is_active': entity.ativo,
            'created_by': entity.criado_por_id,
            'created_at': entity.criado_em,
        }


class PerfilMapper:

    @staticmethod
    def to_entity(model: ProfileModel) -> PerfilEntity:
        return PerfilEntity(
            usuario_id=str(model.user_id),
            nome_completo=model.full_name,
            email=model.email,
            telefone=model.phone,
            avatar_url=model.avatar_url,
            papel=UserRole(model.role),
            setor_responsavel_id=model.service_department_id,
            criado_em=model.created_at,
            atualizado_em=model.updated_at,
        )

    @staticmethod
    def to_fields(entity: PerfilEntity) -> Dict[str, Any]:
        return {
            'full_name': entity.nome_completo,
            'email': entity.email,
            'phone': entity.telefone,
            'avatar_url': entity.avatar_url,
            'role': entity.papel.value,
            'service_department_id': entity.setor_responsavel_id,
            'created_at': entity.criado_em,
            'updated_at': entity.atualizado_em,
        }


class NotificacaoMapper:

    @staticmethod
    def to_entity(model: NotificationModel) -> NotificacaoEntity:
        return NotificacaoEntity(
            id=model.id,
            usuario_id=str(model.user_id),
            titulo=model.title,
            mensagem=model.message,
            lida=model.is_read,
            ordem_id=model.service_order_id,
            criado_em=model.created_at,
        )

    @staticmethod
    def to_fields(entity: NotificacaoEntity) -> Dict[str, Any]:
        return {
            'user_id': entity.usuario_id,
            'title': entity.titulo,
            'message': entity.mensagem,
            'is_read': entity.lida,
            'service_order_id': entity.ordem_id,
            'created_at': entity.criado_em,
        }


class DomainEventMapper:
    """Mapper de DomainEvent para DomainEventModel (Event Store)."""

    @staticmethod
    def to_model(
        event: DomainEvent,
        sequence: int = 0,
        correlation_id: Optional[str] = None,
        user_id: Optional[str] = None,
    ) -> DomainEventModel:
        return DomainEventModel(
            event_id=event.event_id,
            event_type=event.event_type,
            aggregate_type=event.aggregate_type,
            aggregate_id=event.aggregate_id,
            event_data=event._get_event_data(),
            version=event.version,
            sequence=sequence,
            occurred_at=event.occurred_at,
            correlation_id=correlation_id,
            user_id=user_id,
        )

    @staticmethod
    def to_dict(model: DomainEventModel) -> Dict[str, Any]:
        """Formato de DomainEvent.to_dict, a partir do registro salvo."""
        return {
            'event_id': model.event_id,
            'event_type': model.event_type,
            'aggregate_id': model.aggregate_id,
            'aggregate_type': model.aggregate_type,
            'occurred_at': model.occurred_at.isoformat(),
            'version': model.version,
            'data': model.event_data,
        }
