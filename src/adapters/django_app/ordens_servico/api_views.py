"""
API Views JSON do sistema de Ordens de Serviço.

Endpoints:
- GET  /api/os/                       - Listar O.S. visíveis (status, busca, page)
- POST /api/os/                       - Abrir O.S.
- GET  /api/os/<id>/                  - Detalhe
- POST /api/os/<id>/status/           - Alterar status
- POST /api/os/<id>/reatribuir/       - Reatribuir setor/técnico
- POST /api/os/<id>/prioridade/       - Alterar prioridade
- GET  /api/os/<id>/comentarios/      - Histórico
- POST /api/os/<id>/comentarios/      - Comentar
- GET  /api/notificacoes/             - Notificações do usuário
- POST /api/notificacoes/<id>/lida/   - Marcar como lida
- POST /api/notificacoes/marcar-todas/
- GET  /api/estatisticas/             - Indicadores (coordenação)

Formato:
- Entrada: JSON
- Saída: JSON com estrutura {success, data/error, meta}

Autenticação:
- Sessão do Django (CSRF obrigatório em requisições de escrita)
"""

import json
import logging
from typing import Any, Dict

from django.http import HttpRequest, JsonResponse
from django.views import View

from src.config.container import get_container
from src.core.ordens_servico.dtos import (
    AdicionarComentarioInputDTO,
    AlterarPrioridadeInputDTO,
    AlterarStatusInputDTO,
    CriarOSInputDTO,
    ListarOSQueryDTO,
    ReatribuirOSInputDTO,
)
from src.core.relatorios.dtos import FiltroEstatisticas
from src.core.shared.exceptions import (
    BusinessRuleViolationError,
    DomainException,
    EntityNotFoundError,
    PermissionDeniedError,
    ValidationError,
)

from .contexto import ator_do_request

logger = logging.getLogger(__name__)


# =============================================================================
# Helpers
# =============================================================================

def json_response(success: bool, data: Any = None, error: str = None,
                  status: int = 200, meta: Dict = None) -> JsonResponse:
    """
    Cria resposta JSON padronizada.

    Args:
        success: Se operação foi bem sucedida
        data: Dados da resposta
        error: Mensagem de erro (se aplicável)
        status: HTTP status code
        meta: Metadados adicionais
    """
    response = {'success': success}

    if data is not None:
        response['data'] = data

    if error is not None:
        response['error'] = error

    if meta is not None:
        response['meta'] = meta

    return JsonResponse(response, status=status)


def parse_json_body(request: HttpRequest) -> Dict:
    """
    Raises:
        ValueError: Se JSON inválido ou não for um objeto
    """
    if not request.body:
        return {}

    try:
        data = json.loads(request.body)
    except json.JSONDecodeError as e:
        raise ValueError(f"JSON inválido: {e}")

    if not isinstance(data, dict):
        raise ValueError("Corpo da requisição deve ser um objeto JSON")
    return data


def _inteiro(valor, padrao: int) -> int:
    try:
        return max(int(valor), 1)
    except (TypeError, ValueError):
        return padrao


# =============================================================================
# Base API View
# =============================================================================

class BaseAPIView(View):
    """
    View base para APIs JSON.

    Fornece:
    - Autenticação por sessão (401 quando anônimo)
    - Ator do usuário em `self.ator`
    - Parsing de JSON
    - Tratamento de erros padronizado
    """

    def dispatch(self, request, *args, **kwargs):
        if not request.user.is_authenticated:
            return json_response(success=False, error="Autenticação necessária", status=401)

        self.ator = ator_do_request(request)

        try:
            return super().dispatch(request, *args, **kwargs)
        except Exception as e:
            return self.handle_exception(e)

    def get_service(self, service_name: str):
        return getattr(get_container(), service_name)()

    def parse_body(self, request: HttpRequest) -> Dict:
        return parse_json_body(request)

    def handle_exception(self, e: Exception) -> JsonResponse:
        """
        Mapeia exceções para status HTTP:
        ValidationError/ValueError 400, PermissionDeniedError 403,
        EntityNotFoundError 404, BusinessRuleViolationError 422, demais 500.
        """
        if isinstance(e, ValidationError):
            return json_response(
                success=False,
                error=str(e),
                status=400,
                meta={'field': e.field}
            )

        if isinstance(e, PermissionDeniedError):
            return json_response(success=False, error=str(e), status=403)

        if isinstance(e, EntityNotFoundError):
            return json_response(success=False, error=str(e), status=404)

        if isinstance(e, BusinessRuleViolationError):
            return json_response(
                success=False,
                error=str(e),
                status=422,
                meta={'rule': e.rule}
            )

        if isinstance(e, (DomainException, ValueError)):
            return json_response(success=False, error=str(e), status=400)

        logger.exception(f"Erro inesperado na API: {e}")
        return json_response(success=False, error="Erro interno do servidor", status=500)


# =============================================================================
# Ordens de Serviço
# =============================================================================

class OSAPIListView(BaseAPIView):
    """
    GET /api/os/ - Lista O.S. visíveis
    POST /api/os/ - Abre O.S.
    """

    def get(self, request: HttpRequest) -> JsonResponse:
        """
        Query params:
        - status: valor do status ou "all"
        - busca: número, equipamento ou setor
        - page / per_page: paginação (default 1 / 20)
        """
        ordens = self.get_service('listar_os_service').execute(
            self.ator,
            ListarOSQueryDTO(
                status=request.GET.get('status') or None,
                busca=request.GET.get('busca') or None,
            ),
        )

        page = _inteiro(request.GET.get('page'), 1)
        per_page = _inteiro(request.GET.get('per_page'), 20)
        total = len(ordens)
        inicio = (page - 1) * per_page

        return json_response(
            success=True,
            data=[o.to_dict() for o in ordens[inicio:inicio + per_page]],
            meta={
                'total': total,
                'page': page,
                'per_page': per_page,
                'total_pages': (total + per_page - 1) // per_page,
            }
        )

    def post(self, request: HttpRequest) -> JsonResponse:
        """
        Body JSON:
        {
            "categoria": "eletrica|hidraulica|equipamento_medico|outros",
            "setor_id": "string",
            "equipamento": "string",
            "descricao": "string",
            "urgente": bool (opcional),
            "prioridade": "emergencial|urgente|nao_urgente" (opcional),
            "tipo_manutencao": "corretiva|preventiva|instalacao" (opcional),
            "setor_responsavel_id": "string" (opcional)
        }
        """
        data = self.parse_body(request)

        output = self.get_service('criar_os_service').execute(CriarOSInputDTO(
            categoria=data.get('categoria', ''),
            setor_id=data.get('setor_id', ''),
            equipamento=data.get('equipamento', ''),
            descricao=data.get('descricao', ''),
            solicitante_id=self.ator.usuario_id,
            urgente=bool(data.get('urgente', False)),
            prioridade=data.get('prioridade') or None,
            tipo_manutencao=data.get('tipo_manutencao') or 'corretiva',
            setor_responsavel_id=data.get('setor_responsavel_id') or None,
        ))

        logger.info(f"API: O.S. #{output.numero} aberta por {self.ator.usuario_id}")
        return json_response(success=True, data=output.to_dict(), status=201)


class OSAPIDetailView(BaseAPIView):
    """GET /api/os/<id>/"""

    def get(self, request: HttpRequest, pk: str) -> JsonResponse:
        ordem = self.get_service('obter_os_service').execute(pk, self.ator)
        return json_response(success=True, data=ordem.to_dict())


class OSAPIStatusView(BaseAPIView):
    """POST /api/os/<id>/status/ - Body: {"status": "em_andamento"}"""

    def post(self, request: HttpRequest, pk: str) -> JsonResponse:
        data = self.parse_body(request)
        output = self.get_service('alterar_status_os_service').execute(
            AlterarStatusInputDTO(ordem_id=pk, novo_status=data.get('status', '')),
            self.ator,
        )
        return json_response(success=True, data=output.to_dict())


class OSAPIReatribuirView(BaseAPIView):
    """POST /api/os/<id>/reatribuir/ - Body: {"setor_responsavel_id", "tecnico_id"}"""

    def post(self, request: HttpRequest, pk: str) -> JsonResponse:
        data = self.parse_body(request)
        output = self.get_service('reatribuir_os_service').execute(
            ReatribuirOSInputDTO(
                ordem_id=pk,
                setor_responsavel_id=data.get('setor_responsavel_id') or None,
                tecnico_id=data.get('tecnico_id') or None,
            ),
            self.ator,
        )
        return json_response(success=True, data=output.to_dict())


class OSAPIPrioridadeView(BaseAPIView):
    """POST /api/os/<id>/prioridade/ - Body: {"prioridade": "emergencial"}"""

    def post(self, request: HttpRequest, pk: str) -> JsonResponse:
        data = self.parse_body(request)
        output = self.get_service('alterar_prioridade_os_service').execute(
            AlterarPrioridadeInputDTO(ordem_id=pk, nova_prioridade=data.get('prioridade', '')),
            self.ator,
        )
        return json_response(success=True, data=output.to_dict())


class OSAPIComentariosView(BaseAPIView):
    """
    GET /api/os/<id>/comentarios/
    POST /api/os/<id>/comentarios/ - Body: {"comentario": "..."}
    """

    def get(self, request: HttpRequest, pk: str) -> JsonResponse:
        comentarios = self.get_service('listar_comentarios_service').execute(pk, self.ator)
        return json_response(
            success=True,
            data=[c.to_dict() for c in comentarios],
            meta={'total': len(comentarios)}
        )

    def post(self, request: HttpRequest, pk: str) -> JsonResponse:
        data = self.parse_body(request)
        comentario = self.get_service('adicionar_comentario_service').execute(
            AdicionarComentarioInputDTO(ordem_id=pk, comentario=data.get('comentario', '')),
            self.ator,
        )
        return json_response(success=True, data=comentario.to_dict(), status=201)


# =============================================================================
# Notificações
# =============================================================================

class NotificacoesAPIView(BaseAPIView):
    """GET /api/notificacoes/?limite=20"""

    def get(self, request: HttpRequest) -> JsonResponse:
        limite = request.GET.get('limite')
        notificacoes = self.get_service('listar_notificacoes_service').execute(
            self.ator, limite=_inteiro(limite, 20) if limite else None
        )
        return json_response(
            success=True,
            data=[n.to_dict() for n in notificacoes],
            meta={
                'nao_lidas': self.get_service('contar_nao_lidas_service').execute(self.ator),
            }
        )


class NotificacaoLidaAPIView(BaseAPIView):
    """POST /api/notificacoes/<id>/lida/"""

    def post(self, request: HttpRequest, pk: str) -> JsonResponse:
        notificacao = self.get_service('marcar_como_lida_service').execute(pk, self.ator)
        return json_response(success=True, data=notificacao.to_dict())


class NotificacoesMarcarTodasAPIView(BaseAPIView):
    """POST /api/notificacoes/marcar-todas/"""

    def post(self, request: HttpRequest) -> JsonResponse:
        total = self.get_service('marcar_todas_como_lidas_service').execute(self.ator)
        return json_response(success=True, data={'marcadas': total})


# =============================================================================
# Indicadores
# =============================================================================

class EstatisticasAPIView(BaseAPIView):
    """
    GET /api/estatisticas/

    Query params: periodo_dias (0 = todo o período), setor_id,
    tipo_manutencao, prioridade, status ("all" = sem filtro).
    """

    def get(self, request: HttpRequest) -> JsonResponse:
        periodo = request.GET.get('periodo_dias', '30')
        if not periodo.isdigit():
            raise ValidationError("periodo_dias deve ser um número", field='periodo_dias')

        filtro = FiltroEstatisticas(
            periodo_dias=int(periodo),
            setor_id=request.GET.get('setor_id'),
            tipo_manutencao=request.GET.get('tipo_manutencao'),
            prioridade=request.GET.get('prioridade'),
            status=request.GET.get('status'),
        )
        estatisticas = self.get_service('estatisticas_service').execute(self.ator, filtro)
        return json_response(
            success=True,
            data=estatisticas.to_dict(),
            meta={'periodo_dias': filtro.periodo_dias}
        )
