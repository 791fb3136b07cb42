"""
Django Admin do sistema de Ordens de Serviço.

O.S. são abertas pela aplicação (numeração sequencial no repositório),
então o admin não permite criá-las; serve para consulta e correções.
"""

import uuid

from django.contrib import admin
from django.utils import timezone
from django.utils.html import format_html

from .models import (
    SectorModel,
    ServiceDepartmentModel,
    ProfileModel,
    ServiceOrderModel,
    OSUpdateModel,
    NotificationModel,
    DomainEventModel,
)

STATUS_CORES = {
    'aberta': '#e53935',
    'em_andamento': '#ffc107',
    'concluida': '#28a745',
    'cancelada': '#6c757d',
}

PRIORIDADE_CORES = {
    'emergencial': '#e53935',
    'urgente': '#ffc107',
    'nao_urgente': '#00a08a',
}


def _badge(cor: str, texto: str):
    return format_html(
        '<span style="background-color: {}; color: white; padding: 3px 8px; '
        'border-radius: 3px; font-size: 11px;">{}</span>',
        cor,
        texto
    )


class _UUIDAdmin(admin.ModelAdmin):
    """Gera o UUID da PK ao criar pelo admin."""

    def save_model(self, request, obj, form, change):
        if not obj.id:
            obj.id = str(uuid.uuid4())
            obj.created_by = str(request.user.pk)
        super().save_model(request, obj, form, change)


@admin.register(SectorModel)
class SectorAdmin(_UUIDAdmin):
    list_display = ['name', 'is_active', 'created_at']
    list_filter = ['is_active']
    search_fields = ['name']


@admin.register(ServiceDepartmentModel)
class ServiceDepartmentAdmin(_UUIDAdmin):
    list_display = ['name', 'description', 'is_active', 'created_at']
    list_filter = ['is_active']
    search_fields = ['name', 'description']


@admin.register(ProfileModel)
class ProfileAdmin(admin.ModelAdmin):
    """Admin para perfis (papel e setor responsável)."""

    list_display = ['full_name', 'email', 'role', 'service_department', 'created_at']
    list_filter = ['role', 'service_department']
    search_fields = ['full_name', 'email', 'user__username']
    raw_id_fields = ['user']


@admin.register(ServiceOrderModel)
class ServiceOrderAdmin(admin.ModelAdmin):
    """Admin para O.S."""

    list_display = [
        'os_number',
        'equipment',
        'sector',
        'status_badge',
        'prioridade_badge',
        'category',
        'requester',
        'assigned_to',
        'created_at',
        'sla_status',
    ]

    list_filter = [
        'status',
        'priority',
        'category',
        'maintenance_type',
        'sector',
        'service_department',
    ]

    search_fields = [
        'os_number',
        'equipment',
        'description',
        'sector__name',
        'requester__full_name',
    ]

    readonly_fields = [
        'id',
        'os_number',
        'created_at',
        'updated_at',
        'completed_at',
    ]

    fieldsets = [
        ('Identificação', {
            'fields': ['id', 'os_number', 'category', 'maintenance_type', 'equipment', 'description'],
        }),
        ('Status', {
            'fields': ['status', 'priority', 'sla_target_hours'],
        }),
        ('Responsáveis', {
            'fields': ['sector', 'service_department', 'requester', 'assigned_to'],
        }),
        ('Anexo', {
            'fields': ['photo_url'],
        }),
        ('Timestamps', {
            'fields': ['created_at', 'updated_at', 'completed_at'],
            'classes': ['collapse'],
        }),
    ]

    raw_id_fields = ['requester', 'assigned_to']
    ordering = ['-created_at']
    date_hierarchy = 'created_at'

    def has_add_permission(self, request):
        return False

    @admin.display(description='Status')
    def status_badge(self, obj):
        return _badge(STATUS_CORES.get(obj.status, '#6c757d'), obj.get_status_display())

    @admin.display(description='Prioridade')
    def prioridade_badge(self, obj):
        return _badge(PRIORIDADE_CORES.get(obj.priority, '#6c757d'), obj.get_priority_display())

    @admin.display(description='SLA')
    def sla_status(self, obj):
        """Concluída, no prazo ou crítica (tempo decorrido além do SLA)."""
        if obj.status in ('concluida', 'cancelada'):
            return format_html('<span style="color: {};">{}</span>', '#28a745', '✓ Finalizada')

        horas = (timezone.now() - obj.created_at).total_seconds() / 3600
        if horas > (obj.sla_target_hours or 24):
            return format_html(
                '<span style="color: {}; font-weight: bold;">{}</span>', '#dc3545', '⚠ Crítico'
            )
        return format_html('<span style="color: {};">{}</span>', '#28a745', '✓ No prazo')


@admin.register(OSUpdateModel)
class OSUpdateAdmin(admin.ModelAdmin):
    list_display = ['service_order', 'user', 'comentario_curto', 'created_at']
    search_fields = ['service_order__os_number', 'comment', 'user__full_name']
    readonly_fields = ['id', 'service_order', 'user', 'created_at']

    @admin.display(description='Comentário')
    def comentario_curto(self, obj):
        return obj.comment[:60]


@admin.register(NotificationModel)
class NotificationAdmin(admin.ModelAdmin):
    list_display = ['title', 'user', 'is_read', 'service_order', 'created_at']
    list_filter = ['is_read', 'created_at']
    search_fields = ['title', 'message', 'user__full_name']


@admin.register(DomainEventModel)
class DomainEventAdmin(admin.ModelAdmin):
    """Admin para eventos de domínio (somente leitura)."""

    list_display = [
        'event_id_curto',
        'event_type',
        'aggregate_type',
        'aggregate_id_curto',
        'sequence',
        'occurred_at',
    ]

    list_filter = [
        'event_type',
        'aggregate_type',
        'occurred_at',
    ]

    search_fields = [
        'event_id',
        'aggregate_id',
        'event_type',
        'user_id',
        'correlation_id',
    ]

    readonly_fields = [
        'event_id',
        'event_type',
        'aggregate_type',
        'aggregate_id',
        'event_data',
        'version',
        'sequence',
        'occurred_at',
        'recorded_at',
        'correlation_id',
        'user_id',
    ]

    @admin.display(description='Event ID')
    def event_id_curto(self, obj):
        return obj.event_id[:8] + '...'

    @admin.display(description='Aggregate')
    def aggregate_id_curto(self, obj):
        return obj.aggregate_id[:8] + '...'
