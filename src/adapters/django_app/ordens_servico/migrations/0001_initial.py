"""
Migration inicial do sistema de Ordens de Serviço.

Cria as tabelas:
- sectors, service_departments: cadastros
- profiles: perfil 1:1 com auth.User
- service_orders, os_updates: O.S. e histórico de comentários
- notifications: notificações por usuário
- domain_events: Event Store
"""

from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion
import django.utils.timezone


ROLE_CHOICES = [
    ('solicitante', 'Solicitante'),
    ('tecnico', 'Técnico'),
    ('coordenacao', 'Coordenação'),
]

STATUS_CHOICES = [
    ('aberta', 'Aberta'),
    ('em_andamento', 'Em andamento'),
    ('concluida', 'Concluída'),
    ('cancelada', 'Cancelada'),
]

PRIORITY_CHOICES = [
    ('emergencial', 'Emergencial'),
    ('urgente', 'Urgente'),
    ('nao_urgente', 'Não urgente'),
]

CATEGORY_CHOICES = [
    ('eletrica', 'Elétrica'),
    ('hidraulica', 'Hidráulica'),
    ('equipamento_medico', 'Equipamento Médico'),
    ('outros', 'Outros'),
]

MAINTENANCE_TYPE_CHOICES = [
    ('corretiva', 'Corretiva'),
    ('preventiva', 'Preventiva'),
    ('instalacao', 'Instalação'),
]


class Migration(migrations.Migration):
    """Migration inicial."""

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        # =================================================================
        # Cadastros
        # =================================================================
        migrations.CreateModel(
            name='SectorModel',
            fields=[
                ('id', models.CharField(
                    max_length=36,
                    primary_key=True,
                    serialize=False,
                    editable=False,
                    help_text='UUID do setor'
                )),
                ('name', models.CharField(
                    max_length=100,
                    unique=True,
                    help_text='Nome do setor'
                )),
                ('is_active', models.BooleanField(
                    default=True,
                    db_index=True,
                    help_text='Setores inativos não aparecem na abertura de O.S.'
                )),
                ('created_by', models.CharField(
                    max_length=100,
                    null=True,
                    blank=True,
                    help_text='ID do usuário que cadastrou'
                )),
                ('created_at', models.DateTimeField(default=django.utils.timezone.now)),
            ],
            options={
                'db_table': 'sectors',
                'verbose_name': 'Setor',
                'verbose_name_plural': 'Setores',
                'ordering': ['name'],
            },
        ),
        migrations.CreateModel(
            name='ServiceDepartmentModel',
            fields=[
                ('id', models.CharField(
                    max_length=36,
                    primary_key=True,
                    serialize=False,
                    editable=False,
                    help_text='UUID do setor responsável'
                )),
                ('name', models.CharField(
                    max_length=100,
                    unique=True,
                    help_text='Nome do setor responsável'
                )),
                ('description', models.TextField(
                    null=True,
                    blank=True,
                    help_text='Descrição das atribuições'
                )),
                ('is_active', models.BooleanField(default=True, db_index=True)),
                ('created_by', models.CharField(max_length=100, null=True, blank=True)),
                ('created_at', models.DateTimeField(default=django.utils.timezone.now)),
            ],
            options={
                'db_table': 'service_departments',
                'verbose_name': 'Setor Responsável',
                'verbose_name_plural': 'Setores Responsáveis',
                'ordering': ['name'],
            },
        ),

        # =================================================================
        # Tabela: profiles
        # =================================================================
        migrations.CreateModel(
            name='ProfileModel',
            fields=[
                ('user', models.OneToOneField(
                    on_delete=django.db.models.deletion.CASCADE,
                    primary_key=True,
                    serialize=False,
                    related_name='profile',
                    to=settings.AUTH_USER_MODEL
                )),
                ('full_name', models.CharField(max_length=150)),
                ('email', models.EmailField(max_length=254)),
                ('phone', models.CharField(
                    max_length=20,
                    null=True,
                    blank=True,
                    help_text='Formato (99) 99999-9999'
                )),
                ('avatar_url', models.CharField(max_length=500, null=True, blank=True)),
                ('role', models.CharField(
                    max_length=20,
                    choices=ROLE_CHOICES,
                    default='solicitante',
                    db_index=True,
                    help_text='Papel de acesso'
                )),
                ('service_department', models.ForeignKey(
                    on_delete=django.db.models.deletion.SET_NULL,
                    null=True,
                    blank=True,
                    related_name='technicians',
                    to='ordens_servico.servicedepartmentmodel',
                    help_text='Setor responsável do técnico'
                )),
                ('created_at', models.DateTimeField(default=django.utils.timezone.now)),
                ('updated_at', models.DateTimeField(default=django.utils.timezone.now)),
            ],
            options={
                'db_table': 'profiles',
                'verbose_name': 'Perfil',
                'verbose_name_plural': 'Perfis',
                'ordering': ['full_name'],
            },
        ),

        # =================================================================
        # Tabela: service_orders
        # =================================================================
        migrations.CreateModel(
            name='ServiceOrderModel',
            fields=[
                ('id', models.CharField(
                    max_length=36,
                    primary_key=True,
                    serialize=False,
                    editable=False,
                    help_text='UUID da O.S.'
                )),
                ('os_number', models.PositiveIntegerField(
                    unique=True,
                    help_text='Número sequencial da O.S.'
                )),
                ('category', models.CharField(
                    max_length=30,
                    choices=CATEGORY_CHOICES,
                    db_index=True
                )),
                ('equipment', models.CharField(
                    max_length=200,
                    help_text='Equipamento ou local com problema'
                )),
                ('description', models.TextField()),
                ('priority', models.CharField(
                    max_length=20,
                    choices=PRIORITY_CHOICES,
                    default='nao_urgente',
                    db_index=True
                )),
                ('status', models.CharField(
                    max_length=20,
                    choices=STATUS_CHOICES,
                    default='aberta',
                    db_index=True
                )),
                ('maintenance_type', models.CharField(
                    max_length=20,
                    choices=MAINTENANCE_TYPE_CHOICES,
                    default='corretiva',
                    db_index=True
                )),
                ('photo_url', models.CharField(max_length=500, null=True, blank=True)),
                ('sla_target_hours', models.PositiveIntegerField(null=True, blank=True)),
                ('created_at', models.DateTimeField(
                    default=django.utils.timezone.now,
                    db_index=True
                )),
                ('updated_at', models.DateTimeField(default=django.utils.timezone.now)),
                ('completed_at', models.DateTimeField(null=True, blank=True, db_index=True)),
                ('sector', models.ForeignKey(
                    on_delete=django.db.models.deletion.PROTECT,
                    related_name='service_orders',
                    to='ordens_servico.sectormodel'
                )),
                ('service_department', models.ForeignKey(
                    on_delete=django.db.models.deletion.PROTECT,
                    null=True,
                    blank=True,
                    related_name='service_orders',
                    to='ordens_servico.servicedepartmentmodel'
                )),
                ('requester', models.ForeignKey(
                    on_delete=django.db.models.deletion.PROTECT,
                    related_name='requested_orders',
                    to='ordens_servico.profilemodel'
                )),
                ('assigned_to', models.ForeignKey(
                    on_delete=django.db.models.deletion.SET_NULL,
                    null=True,
                    blank=True,
                    related_name='assigned_orders',
                    to='ordens_servico.profilemodel'
                )),
            ],
            options={
                'db_table': 'service_orders',
                'verbose_name': 'Ordem de Serviço',
                'verbose_name_plural': 'Ordens de Serviço',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['status', 'created_at'], name='so_status_created_idx'),
                    models.Index(fields=['requester', 'created_at'], name='so_requester_created_idx'),
                    models.Index(fields=['assigned_to', 'status'], name='so_assigned_status_idx'),
                    models.Index(fields=['service_department', 'status'], name='so_department_status_idx'),
                ],
            },
        ),

        # =================================================================
        # Tabela: os_updates
        # =================================================================
        migrations.CreateModel(
            name='OSUpdateModel',
            fields=[
                ('id', models.CharField(
                    max_length=36,
                    primary_key=True,
                    serialize=False,
                    editable=False
                )),
                ('comment', models.TextField()),
                ('created_at', models.DateTimeField(default=django.utils.timezone.now)),
                ('service_order', models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name='updates',
                    to='ordens_servico.serviceordermodel'
                )),
                ('user', models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name='os_updates',
                    to='ordens_servico.profilemodel'
                )),
            ],
            options={
                'db_table': 'os_updates',
                'verbose_name': 'Atualização de O.S.',
                'verbose_name_plural': 'Atualizações de O.S.',
                'ordering': ['created_at'],
                'indexes': [
                    models.Index(fields=['service_order', 'created_at'], name='osu_order_created_idx'),
                ],
            },
        ),

        # =================================================================
        # Tabela: notifications
        # =================================================================
        migrations.CreateModel(
            name='NotificationModel',
            fields=[
                ('id', models.CharField(
                    max_length=36,
                    primary_key=True,
                    serialize=False,
                    editable=False
                )),
                ('title', models.CharField(max_length=200)),
                ('message', models.TextField()),
                ('is_read', models.BooleanField(default=False)),
                ('created_at', models.DateTimeField(
                    default=django.utils.timezone.now,
                    db_index=True
                )),
                ('user', models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name='notifications',
                    to='ordens_servico.profilemodel'
                )),
                ('service_order', models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    null=True,
                    blank=True,
                    related_name='notifications',
                    to='ordens_servico.serviceordermodel'
                )),
            ],
            options={
                'db_table': 'notifications',
                'verbose_name': 'Notificação',
                'verbose_name_plural': 'Notificações',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['user', 'is_read'], name='notif_user_read_idx'),
                ],
            },
        ),

        # =================================================================
        # Tabela: domain_events (Event Store)
        # =================================================================
        migrations.CreateModel(
            name='DomainEventModel',
            fields=[
                ('event_id', models.CharField(
                    max_length=36,
                    primary_key=True,
                    serialize=False,
                    help_text='UUID único do evento'
                )),
                ('event_type', models.CharField(
                    max_length=100,
                    db_index=True,
                    help_text='Tipo do evento (ex: OSCriadaEvent)'
                )),
                ('aggregate_type', models.CharField(
                    max_length=100,
                    db_index=True,
                    help_text='Tipo do agregado (ex: OrdemServico)'
                )),
                ('aggregate_id', models.CharField(
                    max_length=36,
                    db_index=True,
                    help_text='ID do agregado que gerou o evento'
                )),
                ('event_data', models.JSONField(
                    default=dict,
                    help_text='Dados serializados do evento'
                )),
                ('version', models.IntegerField(default=1)),
                ('sequence', models.BigIntegerField(
                    default=0,
                    help_text='Sequência do evento no agregado'
                )),
                ('occurred_at', models.DateTimeField(help_text='Quando o evento ocorreu')),
                ('recorded_at', models.DateTimeField(
                    auto_now_add=True,
                    help_text='Quando o evento foi persistido'
                )),
                ('correlation_id', models.CharField(
                    max_length=36,
                    null=True,
                    blank=True,
                    db_index=True
                )),
                ('user_id', models.CharField(
                    max_length=100,
                    null=True,
                    blank=True,
                    db_index=True,
                    help_text='Usuário que iniciou a ação'
                )),
            ],
            options={
                'db_table': 'domain_events',
                'verbose_name': 'Evento de Domínio',
                'verbose_name_plural': 'Eventos de Domínio',
                'ordering': ['recorded_at'],
                'indexes': [
                    models.Index(fields=['aggregate_id', 'sequence'], name='event_aggregate_seq_idx'),
                    models.Index(fields=['event_type', 'recorded_at'], name='event_type_recorded_idx'),
                ],
            },
        ),
    ]
