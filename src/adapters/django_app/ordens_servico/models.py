"""
Django Models para o domínio de Ordens de Serviço.

Estes models são ADAPTERS - implementam a persistência para as
entidades de domínio definidas em src/core/ordens_servico,
src/core/cadastros e src/core/notificacoes.

IMPORTANTE:
- Models NÃO contêm lógica de negócio
- Lógica de negócio fica nas Entities do Core
- Models são mapeados para/de Entities via Mappers

Tabelas:
- profiles, sectors, service_departments
- service_orders, os_updates
- notifications
- domain_events (Event Store)
"""

from django.conf import settings
from django.db import models
from django.utils import timezone


class RoleChoices(models.TextChoices):
    """Choices de papel (espelha UserRole do Core)."""
    SOLICITANTE = 'solicitante', 'Solicitante'
    TECNICO = 'tecnico', 'Técnico'
    COORDENACAO = 'coordenacao', 'Coordenação'


class StatusChoices(models.TextChoices):
    """Choices de status (espelha OSStatus do Core)."""
    ABERTA = 'aberta', 'Aberta'
    EM_ANDAMENTO = 'em_andamento', 'Em andamento'
    CONCLUIDA = 'concluida', 'Concluída'
    CANCELADA = 'cancelada', 'Cancelada'


class PriorityChoices(models.TextChoices):
    """Choices de prioridade (espelha OSPriority do Core)."""
    EMERGENCIAL = 'emergencial', 'Emergencial'
    URGENTE = 'urgente', 'Urgente'
    NAO_URGENTE = 'nao_urgente', 'Não urgente'


class CategoryChoices(models.TextChoices):
    """Choices de categoria (espelha OSCategory do Core)."""
    ELETRICA = 'eletrica', 'Elétrica'
    HIDRAULICA = 'hidraulica', 'Hidráulica'
    EQUIPAMENTO_MEDICO = 'equipamento_medico', 'Equipamento Médico'
    OUTROS = 'outros', 'Outros'


class MaintenanceTypeChoices(models.TextChoices):
    """Choices de tipo de manutenção (espelha MaintenanceType do Core)."""
    CORRETIVA = 'corretiva', 'Corretiva'
    PREVENTIVA = 'preventiva', 'Preventiva'
    INSTALACAO = 'instalacao', 'Instalação'


class SectorModel(models.Model):
    """Setor de origem das solicitações (ex: UTI, Recepção)."""

    id = models.CharField(
        max_length=36,
        primary_key=True,
        editable=False,
        help_text="UUID do setor"
    )

    name = models.CharField(
        max_length=100,
        unique=True,
        help_text="Nome do setor"
    )

    is_active = models.BooleanField(
        default=True,
        db_index=True,
        help_text="Setores inativos não aparecem na abertura de O.S."
    )

    created_by = models.CharField(
        max_length=100,
        null=True,
        blank=True,
        help_text="ID do usuário que cadastrou"
    )

    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = 'sectors'
        verbose_name = 'Setor'
        verbose_name_plural = 'Setores'
        ordering = ['name']

    def __str__(self):
        return self.name


class ServiceDepartmentModel(models.Model):
    """Setor responsável pelo atendimento (ex: Manutenção Elétrica)."""

    id = models.CharField(
        max_length=36,
        primary_key=True,
        editable=False,
        help_text="UUID do setor responsável"
    )

    name = models.CharField(
        max_length=100,
        unique=True,
        help_text="Nome do setor responsável"
    )

    description = models.TextField(
        null=True,
        blank=True,
        help_text="Descrição das atribuições"
    )

    is_active = models.BooleanField(default=True, db_index=True)

    created_by = models.CharField(max_length=100, null=True, blank=True)

    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = 'service_departments'
        verbose_name = 'Setor Responsável'
        verbose_name_plural = 'Setores Responsáveis'
        ordering = ['name']

    def __str__(self):
        return self.name


class ProfileModel(models.Model):
    """
    Perfil do usuário (1:1 com auth.User).

    A PK é o próprio usuário, então `profile.pk == user.pk`.
    """

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        primary_key=True,
        related_name='profile'
    )

    full_name = models.CharField(max_length=150)

    email = models.EmailField(max_length=254)

    phone = models.CharField(
        max_length=20,
        null=True,
        blank=True,
        help_text="Formato (99) 99999-9999"
    )

    avatar_url = models.CharField(max_length=500, null=True, blank=True)

    role = models.CharField(
        max_length=20,
        choices=RoleChoices.choices,
        default=RoleChoices.SOLICITANTE,
        db_index=True,
        help_text="Papel de acesso"
    )

    service_department = models.ForeignKey(
        ServiceDepartmentModel,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='technicians',
        help_text="Setor responsável do técnico"
    )

    created_at = models.DateTimeField(default=timezone.now)

    updated_at = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = 'profiles'
        verbose_name = 'Perfil'
        verbose_name_plural = 'Perfis'
        ordering = ['full_name']

    def __str__(self):
        return self.full_name


class ServiceOrderModel(models.Model):
    """
    Model Django para persistência de O.S.

    NÃO contém lógica de negócio - apenas estrutura de dados.

    Fields:
        id: UUID gerado pela Entity
        os_number: Número sequencial exibido (único)
        sector: Setor de origem
        service_department: Setor responsável pelo atendimento
        requester: Perfil de quem abriu
        assigned_to: Técnico atribuído
        sla_target_hours: Horas alvo de resolução
        completed_at: Preenchido enquanto status = concluida
    """

    id = models.CharField(
        max_length=36,
        primary_key=True,
        editable=False,
        help_text="UUID da O.S."
    )

    os_number = models.PositiveIntegerField(
        unique=True,
        help_text="Número sequencial da O.S."
    )

    category = models.CharField(
        max_length=30,
        choices=CategoryChoices.choices,
        db_index=True
    )

    sector = models.ForeignKey(
        SectorModel,
        on_delete=models.PROTECT,
        related_name='service_orders'
    )

    service_department = models.ForeignKey(
        ServiceDepartmentModel,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='service_orders'
    )

    equipment = models.CharField(
        max_length=200,
        help_text="Equipamento ou local com problema"
    )

    description = models.TextField()

    priority = models.CharField(
        max_length=20,
        choices=PriorityChoices.choices,
        default=PriorityChoices.NAO_URGENTE,
        db_index=True
    )

    status = models.CharField(
        max_length=20,
        choices=StatusChoices.choices,
        default=StatusChoices.ABERTA,
        db_index=True
    )

    maintenance_type = models.CharField(
        max_length=20,
        choices=MaintenanceTypeChoices.choices,
        default=MaintenanceTypeChoices.CORRETIVA,
        db_index=True
    )

    requester = models.ForeignKey(
        ProfileModel,
        on_delete=models.PROTECT,
        related_name='requested_orders'
    )

    assigned_to = models.ForeignKey(
        ProfileModel,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='assigned_orders'
    )

    photo_url = models.CharField(max_length=500, null=True, blank=True)

    sla_target_hours = models.PositiveIntegerField(null=True, blank=True)

    # Timestamps
    created_at = models.DateTimeField(default=timezone.now, db_index=True)

    updated_at = models.DateTimeField(default=timezone.now)

    completed_at = models.DateTimeField(null=True, blank=True, db_index=True)

    class Meta:
        db_table = 'service_orders'
        verbose_name = 'Ordem de Serviço'
        verbose_name_plural = 'Ordens de Serviço'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['status', 'created_at'], name='so_status_created_idx'),
            models.Index(fields=['requester', 'created_at'], name='so_requester_created_idx'),
            models.Index(fields=['assigned_to', 'status'], name='so_assigned_status_idx'),
            models.Index(fields=['service_department', 'status'], name='so_department_status_idx'),
        ]

    def __str__(self):
        return f"O.S. #{self.os_number} - {self.equipment}"

    def __repr__(self):
        return f"<ServiceOrderModel os_number={self.os_number} status={self.status}>"


class OSUpdateModel(models.Model):
    """Comentário no histórico de uma O.S."""

    id = models.CharField(max_length=36, primary_key=True, editable=False)

    service_order = models.ForeignKey(
        ServiceOrderModel,
        on_delete=models.CASCADE,
        related_name='updates'
    )

    user = models.ForeignKey(
        ProfileModel,
        on_delete=models.CASCADE,
        related_name='os_updates'
    )

    comment = models.TextField()

    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = 'os_updates'
        verbose_name = 'Atualização de O.S.'
        verbose_name_plural = 'Atualizações de O.S.'
        ordering = ['created_at']
        indexes = [
            models.Index(fields=['service_order', 'created_at'], name='osu_order_created_idx'),
        ]

    def __str__(self):
        return f"{self.user_id} @ {self.created_at}"


class NotificationModel(models.Model):
    """Notificação destinada a um usuário."""

    id = models.CharField(max_length=36, primary_key=True, editable=False)

    user = models.ForeignKey(
        ProfileModel,
        on_delete=models.CASCADE,
        related_name='notifications'
    )

    title = models.CharField(max_length=200)

    message = models.TextField()

    is_read = models.BooleanField(default=False)

    service_order = models.ForeignKey(
        ServiceOrderModel,
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name='notifications'
    )

    created_at = models.DateTimeField(default=timezone.now, db_index=True)

    class Meta:
        db_table = 'notifications'
        verbose_name = 'Notificação'
        verbose_name_plural = 'Notificações'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['user', 'is_read'], name='notif_user_read_idx'),
        ]

    def __str__(self):
        return self.title


class DomainEventModel(models.Model):
    """
    Event Store genérico para Domain Events.

    Persiste os eventos de domínio para auditoria e para o
    reprocessamento de notificações.
    """

    event_id = models.CharField(
        max_length=36,
        primary_key=True,
        help_text="UUID único do evento"
    )

    event_type = models.CharField(
        max_length=100,
        db_index=True,
        help_text="Tipo do evento (ex: OSCriadaEvent)"
    )

    aggregate_type = models.CharField(
        max_length=100,
        db_index=True,
        help_text="Tipo do agregado (ex: OrdemServico)"
    )

    aggregate_id = models.CharField(
        max_length=36,
        db_index=True,
        help_text="ID do agregado que gerou o evento"
    )

    event_data = models.JSONField(
        default=dict,
        help_text="Dados serializados do evento"
    )

    version = models.IntegerField(default=1)

    sequence = models.BigIntegerField(
        default=0,
        help_text="Sequência do evento no agregado"
    )

    occurred_at = models.DateTimeField(help_text="Quando o evento ocorreu")

    recorded_at = models.DateTimeField(
        auto_now_add=True,
        help_text="Quando o evento foi persistido"
    )

    correlation_id = models.CharField(
        max_length=36,
        null=True,
        blank=True,
        db_index=True
    )

    user_id = models.CharField(
        max_length=100,
        null=True,
        blank=True,
        db_index=True,
        help_text="Usuário que iniciou a ação"
    )

    class Meta:
        db_table = 'domain_events'
        verbose_name = 'Evento de Domínio'
        verbose_name_plural = 'Eventos de Domínio'
        ordering = ['recorded_at']
        indexes = [
            models.Index(fields=['aggregate_id', 'sequence'], name='event_aggregate_seq_idx'),
            models.Index(fields=['event_type', 'recorded_at'], name='event_type_recorded_idx'),
        ]

    def __str__(self):
        return f"{self.event_type} - {self.aggregate_id[:8]} @ {self.occurred_at}"
