"""
Contexto do usuário autenticado.

- ator_do_request: monta o Ator (papel + setor responsável) do request
- navegacao: context processor com papel, permissões, notificações
  não lidas e link de ajuda da coordenação para o menu do template base
"""

import logging
from typing import Any, Dict, Optional

from django.conf import settings
from django.http import HttpRequest

from src.config.container import get_container
from src.core.acesso import Ator, UserRole, permissoes_do_papel

logger = logging.getLogger(__name__)


def ator_do_request(request: HttpRequest) -> Optional[Ator]:
    """
    Ator do usuário logado (None se anônimo).

    Usuário sem perfil é tratado como solicitante. O resultado fica
    guardado no request.
    """
    if not request.user.is_authenticated:
        return None

    if getattr(request, '_ator', None) is None:
        usuario_id = str(request.user.pk)
        perfil = get_container().perfil_repository().get_by_usuario_id(usuario_id)
        if perfil is None:
            logger.warning(f"Usuário {usuario_id} sem perfil; usando papel solicitante")
            request._ator = Ator(usuario_id=usuario_id)
        else:
            request._ator = Ator(
                usuario_id=usuario_id,
                papel=perfil.papel,
                setor_responsavel_id=perfil.setor_responsavel_id,
            )

    return request._ator


def navegacao(request: HttpRequest) -> Dict[str, Any]:
    ator = ator_do_request(request)
    if ator is None:
        return {}

    container = get_container()
    e_coordenacao = ator.papel == UserRole.COORDENACAO
    return {
        'ator': ator,
        'papel_label': ator.papel.label,
        'permissoes': permissoes_do_papel(ator.papel),
        'e_coordenacao': e_coordenacao,
        'ajuda_coordenacao_url': settings.COORD_TUTORIAL_URL if e_coordenacao else '',
        'notificacoes_nao_lidas': container.contar_nao_lidas_service().execute(ator),
    }
