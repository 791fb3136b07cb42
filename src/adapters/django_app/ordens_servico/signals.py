"""
Signal handlers do app.

Garante que todo usuário tenha um perfil, inclusive os criados fora
do cadastro (createsuperuser, admin). Superusuários entram como
coordenação.
"""

import logging

from django.conf import settings
from django.db.models.signals import post_save
from django.dispatch import receiver

from .models import ProfileModel, RoleChoices

logger = logging.getLogger(__name__)


@receiver(post_save, sender=settings.AUTH_USER_MODEL)
def criar_perfil_padrao(sender, instance, created, raw=False, **kwargs):
    if not created or raw:
        return

    _, criado = ProfileModel.objects.get_or_create(
        user=instance,
        defaults={
            'full_name': instance.get_full_name() or instance.get_username(),
            'email': instance.email or '',
            'role': (
                RoleChoices.COORDENACAO if instance.is_superuser
                else RoleChoices.SOLICITANTE
            ),
        },
    )
    if criado:
        logger.info(f"Perfil padrão criado para usuário {instance.pk}")
