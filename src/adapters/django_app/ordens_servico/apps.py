"""
Configuração do Django App de Ordens de Serviço.
"""

from django.apps import AppConfig


class OrdensServicoConfig(AppConfig):
    """Configuração do app Ordens de Serviço."""

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'src.adapters.django_app.ordens_servico'
    label = 'ordens_servico'
    verbose_name = 'Ordens de Serviço'

    def ready(self):
        """Registra os signal handlers do app."""
        from . import signals  # noqa: F401
