"""
Repositórios Django para persistência de O.S., cadastros e notificações.

Implementam as interfaces (Ports) definidas no Core.
São DRIVEN ADAPTERS - acionados pelo Core em resposta a operações.

Responsabilidades:
- Mapear entities para models e vice-versa
- Executar queries no banco via ORM
- Aplicar o escopo de visibilidade por papel nas consultas
- Otimizar queries (select_related) para os nomes exibidos
"""

from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional
import logging

from django.contrib.auth import get_user_model
from django.db import transaction
from django.db.models import Max, Q
from django.utils import timezone

from src.core.acesso import Ator, UserRole
from src.core.cadastros.entities import PerfilEntity
from src.core.notificacoes.entities import NotificacaoEntity
from src.core.ordens_servico.entities import ServiceOrderEntity, OSUpdateEntity, OSStatus
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
from .mappers import (
    OrdemServicoMapper,
    ComentarioMapper,
    SetorMapper,
    SetorResponsavelMapper,
    PerfilMapper,
    NotificacaoMapper,
    DomainEventMapper,
)

logger = logging.getLogger(__name__)

EVENTOS_PRESERVADOS = ("OSSLACriticoEvent",)


def escopo_visibilidade(ator: Ator) -> Q:
    """
    Filtro ORM equivalente a `Ator.pode_ver`.

    - coordenação: todas as O.S.
    - solicitante: as que abriu
    - técnico: as que abriu, as atribuídas a ele e as do seu setor responsável
    """
    if ator.e_coordenacao:
        return Q()

    filtro = Q(requester_id=ator.usuario_id)
    if ator.e_tecnico:
        filtro |= Q(assigned_to_id=ator.usuario_id)
        if ator.setor_responsavel_id:
            filtro |= Q(service_department_id=ator.setor_responsavel_id)
    return filtro


def filtro_busca(busca: Optional[str]) -> Q:
    """Número, equipamento ou nome do setor, sem diferenciar maiúsculas."""
    termo = (busca or "").strip()
    if not termo:
        return Q()

    filtro = Q(equipment__icontains=termo) | Q(sector__name__icontains=termo)
    if termo.isdigit():
        filtro |= Q(os_number__icontains=termo)
    return filtro


class DjangoOrdemServicoRepository:
    """
    Implementação Django do OrdemServicoRepository.

    Example:
        repo = DjangoOrdemServicoRepository()
        repo.save(ordem)              # atribui ordem.numero na criação
        repo.list_visiveis(ator, status=OSStatus.ABERTA, busca="uti")
    """

    def __init__(self):
        self._mapper = OrdemServicoMapper()

    def _queryset(self):
        return ServiceOrderModel.objects.select_related(
            'sector', 'service_department', 'requester', 'assigned_to'
        )

    def save(self, ordem: ServiceOrderEntity) -> None:
        """
        Persiste O.S. (create ou update).

        Na criação o número é o maior existente + 1, calculado dentro
        da transação; a constraint unique de os_number barra duplicatas.
        """
        logger.debug(f"Saving service order: {ordem.id}")

        fields = self._mapper.to_fields(ordem)

        with transaction.atomic():
            if ordem.numero is None:
                ultimo = ServiceOrderModel.objects.aggregate(maior=Max('os_number'))['maior']
                ordem.numero = (ultimo or 0) + 1
                ServiceOrderModel.objects.create(id=ordem.id, os_number=ordem.numero, **fields)
                logger.info(f"Service order created: #{ordem.numero} ({ordem.id})")
                return

            ServiceOrderModel.objects.update_or_create(
                id=ordem.id,
                defaults={**fields, 'os_number': ordem.numero}
            )

        logger.info(f"Service order saved: #{ordem.numero}")

    def get_by_id(self, ordem_id: str) -> Optional[ServiceOrderEntity]:
        try:
            return self._mapper.to_entity(self._queryset().get(id=ordem_id))
        except ServiceOrderModel.DoesNotExist:
            logger.debug(f"Service order not found: {ordem_id}")
            return None

    def list_visiveis(
        self,
        ator: Ator,
        status: Optional[OSStatus] = None,
        busca: Optional[str] = None,
        limite: Optional[int] = None,
    ) -> List[ServiceOrderEntity]:
        queryset = (
            self._queryset()
            .filter(escopo_visibilidade(ator))
            .filter(filtro_busca(busca))
            .order_by('-created_at')
        )

        if status is not None:
            queryset = queryset.filter(status=status.value)

        if limite:
            queryset = queryset[:limite]

        return self._mapper.to_entity_list(queryset)

    def list_filtradas(
        self,
        desde: Optional[datetime] = None,
        setor_id: Optional[str] = None,
        tipo_manutencao: Optional[str] = None,
        prioridade: Optional[str] = None,
        status: Optional[str] = None,
    ) -> List[ServiceOrderEntity]:
        queryset = self._queryset().order_by('-created_at')

        if desde is not None:
            queryset = queryset.filter(created_at__gte=desde)
        if setor_id:
            queryset = queryset.filter(sector_id=setor_id)
        if tipo_manutencao:
            queryset = queryset.filter(maintenance_type=tipo_manutencao)
        if prioridade:
            queryset = queryset.filter(priority=prioridade)
        if status:
            queryset = queryset.filter(status=status)

        return self._mapper.to_entity_list(queryset)

    def list_nao_finalizadas(self) -> List[ServiceOrderEntity]:
        queryset = (
            self._queryset()
            .exclude(status__in=[OSStatus.CONCLUIDA.value, OSStatus.CANCELADA.value])
            .order_by('created_at')
        )
        return self._mapper.to_entity_list(queryset)

    def count_by_setor(self, setor_id: str) -> int:
        return ServiceOrderModel.objects.filter(sector_id=setor_id).count()

    def count_by_setor_responsavel(self, setor_responsavel_id: str) -> int:
        return ServiceOrderModel.objects.filter(
            service_department_id=setor_responsavel_id
        ).count()


class DjangoComentarioRepository:
    """Implementação Django do ComentarioRepository (os_updates)."""

    def save(self, comentario: OSUpdateEntity) -> None:
        ComentarioMapper.to_model(comentario).save()
        logger.debug(f"Comment saved on service order {comentario.ordem_id}")

    def list_by_ordem(self, ordem_id: str) -> List[OSUpdateEntity]:
        queryset = (
            OSUpdateModel.objects
            .select_related('user')
            .filter(service_order_id=ordem_id)
            .order_by('created_at')
        )
        return [ComentarioMapper.to_entity(model) for model in queryset]


class _DjangoRepositorioPorNome:
    """Base dos repositórios de setores (CRUD simples por id e nome)."""

    model = None
    mapper = None

    def save(self, item) -> None:
        self.model.objects.update_or_create(
            id=item.id,
            defaults=self.mapper.to_fields(item)
        )
        logger.info(f"{self.model.__name__} saved: {item.nome}")

    def get_by_id(self, item_id: str):
        try:
            return self.mapper.to_entity(self.model.objects.get(id=item_id))
        except self.model.DoesNotExist:
            return None

    def get_by_nome(self, nome: str):
        model = self.model.objects.filter(name__iexact=(nome or "").strip()).first()
        return self.mapper.to_entity(model) if model else None

    def delete(self, item_id: str) -> None:
        deleted_count, _ = self.model.objects.filter(id=item_id).delete()
        if deleted_count:
            logger.info(f"{self.model.__name__} deleted: {item_id}")

    def list_all(self, apenas_ativos: bool = False) -> list:
        queryset = self.model.objects.order_by('name')
        if apenas_ativos:
            queryset = queryset.filter(is_active=True)
        return [self.mapper.to_entity(model) for model in queryset]


class DjangoSetorRepository(_DjangoRepositorioPorNome):
    model = SectorModel
    mapper = SetorMapper


class DjangoSetorResponsavelRepository(_DjangoRepositorioPorNome):
    model = ServiceDepartmentModel
    mapper = SetorResponsavelMapper


class DjangoPerfilRepository:
    """Implementação Django do PerfilRepository (profiles)."""

    def save(self, perfil: PerfilEntity) -> None:
        ProfileModel.objects.update_or_create(
            user_id=perfil.usuario_id,
            defaults=PerfilMapper.to_fields(perfil)
        )
        # Reset de senha envia para o email do auth.User
        get_user_model().objects.filter(pk=perfil.usuario_id).exclude(
            email=perfil.email
        ).update(email=perfil.email)
        logger.info(f"Profile saved: {perfil.usuario_id}")

    def get_by_usuario_id(self, usuario_id: str) -> Optional[PerfilEntity]:
        try:
            return PerfilMapper.to_entity(ProfileModel.objects.get(user_id=usuario_id))
        except (ProfileModel.DoesNotExist, ValueError):
            return None

    def list_all(self) -> List[PerfilEntity]:
        return [
            PerfilMapper.to_entity(model)
            for model in ProfileModel.objects.order_by('full_name')
        ]

    def list_by_papel(
        self,
        papel: UserRole,
        setor_responsavel_id: Optional[str] = None,
    ) -> List[PerfilEntity]:
        queryset = ProfileModel.objects.filter(role=papel.value).order_by('full_name')
        if setor_responsavel_id:
            queryset = queryset.filter(service_department_id=setor_responsavel_id)
        return [PerfilMapper.to_entity(model) for model in queryset]


class DjangoNotificacaoRepository:
    """Implementação Django do NotificacaoRepository (notifications)."""

    def save(self, notificacao: NotificacaoEntity) -> None:
        NotificationModel.objects.update_or_create(
            id=notificacao.id,
            defaults=NotificacaoMapper.to_fields(notificacao)
        )
        logger.debug(f"Notification saved for user {notificacao.usuario_id}")

    def get_by_id(self, notificacao_id: str) -> Optional[NotificacaoEntity]:
        try:
            return NotificacaoMapper.to_entity(
                NotificationModel.objects.get(id=notificacao_id)
            )
        except NotificationModel.DoesNotExist:
            return None

    def list_by_usuario(
        self,
        usuario_id: str,
        limite: Optional[int] = None,
    ) -> List[NotificacaoEntity]:
        queryset = NotificationModel.objects.filter(user_id=usuario_id).order_by('-created_at')
        if limite:
            queryset = queryset[:limite]
        return [NotificacaoMapper.to_entity(model) for model in queryset]

    def count_nao_lidas(self, usuario_id: str) -> int:
        return NotificationModel.objects.filter(user_id=usuario_id, is_read=False).count()

    def marcar_todas_como_lidas(self, usuario_id: str) -> int:
        alteradas = NotificationModel.objects.filter(
            user_id=usuario_id, is_read=False
        ).update(is_read=True)
        logger.info(f"{alteradas} notifications marked as read for user {usuario_id}")
        return alteradas


class DjangoEventStore:
    """
    Event Store usando Django ORM (domain_events).

    Persiste Domain Events para auditoria e reprocessamento.
    """

    def append(
        self,
        event: DomainEvent,
        sequence: int = 0,
        correlation_id: Optional[str] = None,
        user_id: Optional[str] = None,
    ) -> None:
        model = DomainEventMapper.to_model(
            event=event,
            sequence=sequence,
            correlation_id=correlation_id,
            user_id=user_id,
        )
        model.save()

        logger.debug(f"Event stored: {event.event_type} for {event.aggregate_id}")

    def has_event(self, aggregate_id: str, event_type: str) -> bool:
        return DomainEventModel.objects.filter(
            aggregate_id=aggregate_id, event_type=event_type
        ).exists()

    def ja_alertada_sla(self, aggregate_id: str) -> bool:
        return self.has_event(aggregate_id, "OSSLACriticoEvent")

    def last_sequence(self, aggregate_id: str) -> int:
        ultima = (
            DomainEventModel.objects
            .filter(aggregate_id=aggregate_id)
            .aggregate(maior=Max('sequence'))['maior']
        )
        return ultima or 0

    def get_events_for_aggregate(
        self,
        aggregate_id: str,
        since_sequence: int = 0,
    ) -> List[Dict[str, Any]]:
        """Eventos do agregado no formato de DomainEvent.to_dict."""
        events = (
            DomainEventModel.objects
            .filter(aggregate_id=aggregate_id, sequence__gte=since_sequence)
            .order_by('sequence', 'recorded_at')
        )
        return [DomainEventMapper.to_dict(e) for e in events]

    def purge_older_than(self, days: int) -> int:
        """
        Remove eventos gravados há mais de `days` dias.

        Alertas de SLA são mantidos, pois `ja_alertada_sla` depende deles.
        """
        limite = timezone.now() - timedelta(days=days)
        deleted_count, _ = (
            DomainEventModel.objects
            .filter(recorded_at__lt=limite)
            .exclude(event_type__in=EVENTOS_PRESERVADOS)
            .delete()
        )
        logger.info(f"Purged {deleted_count} domain events older than {days} days")
        return deleted_count
