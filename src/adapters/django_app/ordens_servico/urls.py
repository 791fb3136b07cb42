"""
URL patterns do sistema de Ordens de Serviço.

Endpoints HTML:
- GET /                              - Painel
- GET/POST /os/nova/                 - Abrir O.S.
- GET /os/                           - Listar O.S. (status, busca)
- GET /os/<id>/                      - Detalhe
- POST /os/<id>/status|reatribuir|prioridade|comentarios/
- GET /notificacoes/                 - Notificações
- GET/POST /perfil/, POST /perfil/avatar/
- GET /relatorios/, /relatorios/exportar/, /analitico/
- /administracao/usuarios|setores|setores-responsaveis/

Endpoints API JSON: ver api_views.
"""

from django.urls import path

from . import api_views
from . import views

app_name = 'ordens_servico'

urlpatterns = [
    # =========================================================================
    # Views HTML (Templates)
    # =========================================================================

    path('', views.DashboardView.as_view(), name='dashboard'),

    # O.S.
    path('os/', views.OSListView.as_view(), name='list'),
    path('os/nova/', views.OSCreateView.as_view(), name='create'),
    path('os/<str:pk>/', views.OSDetailView.as_view(), name='detail'),
    path('os/<str:pk>/status/', views.OSStatusView.as_view(), name='status'),
    path('os/<str:pk>/reatribuir/', views.OSReatribuirView.as_view(), name='reatribuir'),
    path('os/<str:pk>/prioridade/', views.OSPrioridadeView.as_view(), name='prioridade'),
    path('os/<str:pk>/comentarios/', views.OSComentarioView.as_view(), name='comentar'),

    # Notificações
    path('notificacoes/', views.NotificacoesView.as_view(), name='notificacoes'),
    path(
        'notificacoes/marcar-todas/',
        views.MarcarTodasLidasView.as_view(),
        name='notificacoes_marcar_todas'
    ),
    path(
        'notificacoes/<str:pk>/lida/',
        views.MarcarNotificacaoLidaView.as_view(),
        name='notificacao_lida'
    ),

    # Perfil
    path('perfil/', views.PerfilView.as_view(), name='perfil'),
    path('perfil/avatar/', views.AvatarView.as_view(), name='avatar'),

    # Relatórios (coordenação)
    path('relatorios/', views.RelatoriosView.as_view(), name='relatorios'),
    path('relatorios/exportar/', views.ExportarCSVView.as_view(), name='relatorios_exportar'),
    path('analitico/', views.AnaliticoView.as_view(), name='analitico'),

    # Administração (coordenação)
    path('administracao/usuarios/', views.UsuariosAdminView.as_view(), name='admin_usuarios'),
    path(
        'administracao/usuarios/<str:pk>/papel/',
        views.AlterarPapelView.as_view(),
        name='admin_alterar_papel'
    ),
    path('administracao/setores/', views.SetoresAdminView.as_view(), name='admin_setores'),
    path(
        'administracao/setores/<str:pk>/<str:acao>/',
        views.SetorAcaoView.as_view(),
        name='admin_setor_acao'
    ),
    path(
        'administracao/setores-responsaveis/',
        views.SetoresResponsaveisAdminView.as_view(),
        name='admin_setores_responsaveis'
    ),
    path(
        'administracao/setores-responsaveis/<str:pk>/<str:acao>/',
        views.SetorResponsavelAcaoView.as_view(),
        name='admin_setor_responsavel_acao'
    ),

    # =========================================================================
    # API JSON
    # =========================================================================

    path('api/os/', api_views.OSAPIListView.as_view(), name='api_list'),
    path('api/os/<str:pk>/', api_views.OSAPIDetailView.as_view(), name='api_detail'),
    path('api/os/<str:pk>/status/', api_views.OSAPIStatusView.as_view(), name='api_status'),
    path(
        'api/os/<str:pk>/reatribuir/',
        api_views.OSAPIReatribuirView.as_view(),
        name='api_reatribuir'
    ),
    path(
        'api/os/<str:pk>/prioridade/',
        api_views.OSAPIPrioridadeView.as_view(),
        name='api_prioridade'
    ),
    path(
        'api/os/<str:pk>/comentarios/',
        api_views.OSAPIComentariosView.as_view(),
        name='api_comentarios'
    ),
    path('api/notificacoes/', api_views.NotificacoesAPIView.as_view(), name='api_notificacoes'),
    path(
        'api/notificacoes/marcar-todas/',
        api_views.NotificacoesMarcarTodasAPIView.as_view(),
        name='api_notificacoes_marcar_todas'
    ),
    path(
        'api/notificacoes/<str:pk>/lida/',
        api_views.NotificacaoLidaAPIView.as_view(),
        name='api_notificacao_lida'
    ),
    path('api/estatisticas/', api_views.EstatisticasAPIView.as_view(), name='api_estatisticas'),
]
