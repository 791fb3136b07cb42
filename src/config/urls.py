"""
URL Configuration do sistema de Ordens de Serviço.

Estrutura:
- /admin/ - Django Admin
- /contas/ - Login, logout e troca/recuperação de senha (django.contrib.auth)
- /contas/cadastro/ - Cadastro de usuário
- / - Painel, O.S., notificações, perfil, relatórios e administração
- /api/ - API JSON
- /health/ - Health check
"""

from django.conf import settings
from django.conf.urls.static import static
from django.contrib import admin
from django.http import JsonResponse
from django.urls import include, path

from src.adapters.django_app.ordens_servico.views import CadastroUsuarioView


def health(request):
    return JsonResponse({'status': 'ok'})


urlpatterns = [
    # Django Admin
    path('admin/', admin.site.urls),

    # Autenticação
    path('contas/cadastro/', CadastroUsuarioView.as_view(), name='signup'),
    path('contas/', include('django.contrib.auth.urls')),

    # Health check
    path('health/', health, name='health'),

    # Ordens de Serviço
    path('', include('src.adapters.django_app.ordens_servico.urls')),
]

# Arquivos enviados (fotos e avatares) em desenvolvimento
if settings.DEBUG:
    urlpatterns += static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT)
