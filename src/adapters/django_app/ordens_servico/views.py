"""
Views Django para o sistema de Ordens de Serviço.

DRIVING ADAPTERS - direcionam requisições HTTP para o Core.

Responsabilidades:
- Receber requisições HTTP (login obrigatório)
- Validar entrada (Forms)
- Invocar Use Cases via Container DI com o Ator do usuário
- Formatar resposta (HTML, CSV)
- Traduzir exceções de domínio em flash messages

Princípios:
- Views são THIN (lógica mínima)
- Permissões e visibilidade são decididas nos Use Cases; o bloqueio
  por papel aqui só evita telas que o usuário não pode usar
- Views não acessam Models diretamente
"""

import csv
import logging
from datetime import date
from typing import Optional

from django.contrib import messages
from django.contrib.auth import login
from django.contrib.auth.views import redirect_to_login
from django.core.paginator import Paginator
from django.db import transaction
from django.http import HttpRequest, HttpResponse
from django.shortcuts import redirect, render
from django.views import View

from src.config.container import get_container
from src.core.acesso import Permissao, UserRole
from src.core.cadastros.dtos import (
    AlterarPapelInputDTO,
    AtualizarPerfilInputDTO,
    CriarPerfilInputDTO,
    SalvarSetorInputDTO,
    SalvarSetorResponsavelInputDTO,
)
from src.core.ordens_servico.dtos import (
    AdicionarComentarioInputDTO,
    AlterarPrioridadeInputDTO,
    AlterarStatusInputDTO,
    CriarOSInputDTO,
    ListarOSQueryDTO,
    ReatribuirOSInputDTO,
)
from src.core.relatorios.dtos import FiltroEstatisticas
from src.core.relatorios.use_cases import COLUNAS_EXPORTACAO
from src.core.shared.exceptions import (
    DomainException,
    EntityNotFoundError,
    PermissionDeniedError,
    ValidationError,
)

from .contexto import ator_do_request
from .forms import (
    AlterarPapelForm,
    AnaliticoFiltroForm,
    AvatarForm,
    CadastroForm,
    ComentarioForm,
    OSCreateForm,
    OSFiltroForm,
    OSPrioridadeForm,
    OSReatribuirForm,
    OSStatusForm,
    PerfilForm,
    SetorForm,
    SetorResponsavelForm,
)
from .imagens import normalizar_avatar, remover_imagem, salvar_imagem

logger = logging.getLogger(__name__)

PAINEL_POR_PAPEL = {
    UserRole.SOLICITANTE: (
        'Minhas Solicitações',
        'Acompanhe as O.S. que você abriu',
    ),
    UserRole.TECNICO: (
        'Painel do Técnico',
        'O.S. atribuídas a você e ao seu setor',
    ),
    UserRole.COORDENACAO: (
        'Painel da Coordenação',
        'Visão geral de todas as O.S.',
    ),
}


# =============================================================================
# Helpers
# =============================================================================

def _primeiro_erro(form) -> str:
    for erros in form.errors.values():
        if erros:
            return erros[0]
    return 'Dados inválidos.'


# =============================================================================
# Mixins
# =============================================================================

class ContainerMixin:
    """
    Mixin que fornece acesso ao DI Container.
    """

    def get_container(self):
        return get_container()

    def get_service(self, service_name: str):
        """Obtém service do container pelo nome do provider."""
        return getattr(self.get_container(), service_name)()


class FlashMessageMixin:
    """
    Mixin para adicionar flash messages de forma consistente.
    """

    def success_message(self, request: HttpRequest, message: str) -> None:
        messages.success(request, message)

    def error_message(self, request: HttpRequest, message: str) -> None:
        messages.error(request, message)

    def flash_erro(self, request: HttpRequest, e: Exception, acao: str) -> None:
        """Traduz exceção em mensagem para o usuário."""
        if isinstance(e, EntityNotFoundError):
            self.error_message(request, "Registro não encontrado.")
        elif isinstance(e, PermissionDeniedError):
            self.error_message(request, "Você não tem permissão para esta ação.")
        elif isinstance(e, DomainException):
            self.error_message(request, str(e))
        else:
            logger.exception(f"Erro inesperado ao {acao}: {e}")
            self.error_message(request, f"Erro ao {acao}. Tente novamente.")


class AtorMixin:
    """
    Exige login e disponibiliza `self.ator`.

    Com `permissao_requerida` definida, usuários sem a permissão são
    redirecionados ao painel com uma mensagem de erro.
    """

    permissao_requerida: Optional[str] = None

    def dispatch(self, request, *args, **kwargs):
        if not request.user.is_authenticated:
            return redirect_to_login(request.get_full_path())

        self.ator = ator_do_request(request)

        if self.permissao_requerida and not self.ator.pode(self.permissao_requerida):
            logger.warning(
                f"Acesso negado a {request.path} para usuário {self.ator.usuario_id} "
                f"({self.ator.papel.value})"
            )
            messages.error(request, "Você não tem permissão para acessar esta página.")
            return redirect('ordens_servico:dashboard')

        return super().dispatch(request, *args, **kwargs)


class BaseOSView(AtorMixin, ContainerMixin, FlashMessageMixin, View):
    """View base das telas autenticadas."""


# =============================================================================
# Painel e O.S.
# =============================================================================

class DashboardView(BaseOSView):
    """
    Painel inicial com as 10 O.S. mais recentes visíveis ao usuário.

    GET /
    """

    template_name = 'ordens_servico/dashboard.html'

    def get(self, request: HttpRequest) -> HttpResponse:
        try:
            ordens = self.get_service('listar_os_service').execute(
                self.ator, ListarOSQueryDTO(limite=10)
            )
        except Exception as e:
            logger.error(f"Erro ao carregar painel: {e}")
            ordens = []
            self.error_message(request, "Erro ao carregar ordens de serviço.")

        titulo, descricao = PAINEL_POR_PAPEL[self.ator.papel]
        return render(request, self.template_name, {
            'ordens': ordens,
            'titulo': titulo,
            'descricao': descricao,
        })


class OSCreateView(BaseOSView):
    """
    Abertura de O.S.

    GET /os/nova/ - Formulário
    POST /os/nova/ - Processa abertura (com foto opcional)
    """

    template_name = 'ordens_servico/os_form.html'
    permissao_requerida = Permissao.OS_CRIAR

    def get_form(self, data=None, files=None) -> OSCreateForm:
        return OSCreateForm(
            data,
            files,
            setores=self.get_service('listar_setores_service').execute(apenas_ativos=True),
            setores_responsaveis=self.get_service(
                'listar_setores_responsaveis_service'
            ).execute(apenas_ativos=True),
        )

    def get(self, request: HttpRequest) -> HttpResponse:
        return render(request, self.template_name, {'form': self.get_form()})

    def post(self, request: HttpRequest) -> HttpResponse:
        form = self.get_form(request.POST, request.FILES)

        if not form.is_valid():
            return render(request, self.template_name, {'form': form})

        dados = form.cleaned_data
        foto_url = None

        try:
            if dados.get('foto'):
                foto_url = salvar_imagem(dados['foto'], 'os_fotos')

            output = self.get_service('criar_os_service').execute(CriarOSInputDTO(
                categoria=dados['categoria'],
                setor_id=dados['setor_id'],
                equipamento=dados['equipamento'],
                descricao=dados['descricao'],
                solicitante_id=self.ator.usuario_id,
                urgente=dados.get('urgente', False),
                tipo_manutencao=dados.get('tipo_manutencao') or 'corretiva',
                setor_responsavel_id=dados.get('setor_responsavel_id') or None,
                foto_url=foto_url,
            ))

            logger.info(f"O.S. #{output.numero} aberta por {self.ator.usuario_id}")
            self.success_message(request, f"O.S. #{output.numero} criada com sucesso!")
            return redirect('ordens_servico:detail', pk=output.id)

        except ValidationError as e:
            remover_imagem(foto_url)
            campo = e.field if e.field in form.fields else None
            form.add_error(campo, str(e))

        except Exception as e:
            remover_imagem(foto_url)
            self.flash_erro(request, e, "criar a O.S.")

        return render(request, self.template_name, {'form': form})


class OSListView(BaseOSView):
    """
    Lista O.S. visíveis com filtro de status e busca.

    GET /os/?status=aberta&busca=uti&page=2
    """

    template_name = 'ordens_servico/os_list.html'
    paginate_by = 20

    def get(self, request: HttpRequest) -> HttpResponse:
        filtro_form = OSFiltroForm(request.GET or None)
        status = request.GET.get('status') or None
        busca = request.GET.get('busca') or None

        try:
            ordens = self.get_service('listar_os_service').execute(
                self.ator, ListarOSQueryDTO(status=status, busca=busca)
            )
        except ValidationError as e:
            self.error_message(request, str(e))
            ordens = []
        except Exception as e:
            logger.error(f"Erro ao listar O.S.: {e}")
            self.error_message(request, "Erro ao carregar ordens de serviço.")
            ordens = []

        paginator = Paginator(ordens, self.paginate_by)
        page_obj = paginator.get_page(request.GET.get('page', 1))

        return render(request, self.template_name, {
            'page_obj': page_obj,
            'ordens': page_obj.object_list,
            'filtro_form': filtro_form,
            'total': paginator.count,
        })


class OSDetailView(BaseOSView):
    """
    Detalhe da O.S. com histórico e formulários de ação.

    GET /os/<id>/
    """

    template_name = 'ordens_servico/os_detail.html'

    def get(self, request: HttpRequest, pk: str) -> HttpResponse:
        try:
            ordem = self.get_service('obter_os_service').execute(pk, self.ator)
            comentarios = self.get_service('listar_comentarios_service').execute(pk, self.ator)
        except EntityNotFoundError:
            return render(request, 'ordens_servico/not_found.html', status=404)
        except Exception as e:
            logger.error(f"Erro ao obter O.S. {pk}: {e}")
            self.error_message(request, "Erro ao carregar a O.S.")
            return redirect('ordens_servico:list')

        context = {
            'ordem': ordem,
            'comentarios': comentarios,
            'comentario_form': ComentarioForm(),
        }

        if self.ator.pode(Permissao.OS_ALTERAR_STATUS):
            context['status_form'] = OSStatusForm(initial={'status': ordem.status})

        if self.ator.pode(Permissao.OS_REATRIBUIR):
            context['reatribuir_form'] = OSReatribuirForm(
                setores_responsaveis=self.get_service(
                    'listar_setores_responsaveis_service'
                ).execute(apenas_ativos=True),
                tecnicos=self.get_service('listar_tecnicos_service').execute(self.ator),
                initial={
                    'setor_responsavel_id': ordem.setor_responsavel_id,
                    'tecnico_id': ordem.tecnico_id,
                },
            )

        if self.ator.pode(Permissao.OS_ALTERAR_PRIORIDADE):
            context['prioridade_form'] = OSPrioridadeForm(
                initial={'prioridade': ordem.prioridade}
            )

        return render(request, self.template_name, context)


class OSAcaoView(BaseOSView):
    """
    Base das ações POST sobre uma O.S.

    Subclasses definem o form, o service e como montar o DTO.
    Sempre redireciona de volta ao detalhe.
    """

    form_class = None
    service_name = ''
    acao = ''
    mensagem_sucesso = ''

    def get_form(self, request: HttpRequest):
        return self.form_class(request.POST)

    def montar_dto(self, pk: str, dados: dict):
        raise NotImplementedError

    def post(self, request: HttpRequest, pk: str) -> HttpResponse:
        try:
            form = self.get_form(request)
            if not form.is_valid():
                self.error_message(request, _primeiro_erro(form))
            else:
                self.get_service(self.service_name).execute(
                    self.montar_dto(pk, form.cleaned_data), self.ator
                )
                logger.info(f"O.S. {pk}: {self.acao} por {self.ator.usuario_id}")
                self.success_message(request, self.mensagem_sucesso)
        except Exception as e:
            self.flash_erro(request, e, self.acao)

        return redirect('ordens_servico:detail', pk=pk)


class OSStatusView(OSAcaoView):
    """POST /os/<id>/status/"""

    form_class = OSStatusForm
    service_name = 'alterar_status_os_service'
    acao = 'alterar status'
    mensagem_sucesso = 'Status atualizado!'

    def montar_dto(self, pk, dados):
        return AlterarStatusInputDTO(ordem_id=pk, novo_status=dados['status'])


class OSReatribuirView(OSAcaoView):
    """POST /os/<id>/reatribuir/"""

    service_name = 'reatribuir_os_service'
    acao = 'reatribuir'
    mensagem_sucesso = 'O.S. reatribuída!'

    def get_form(self, request):
        return OSReatribuirForm(
            request.POST,
            setores_responsaveis=self.get_service(
                'listar_setores_responsaveis_service'
            ).execute(apenas_ativos=True),
            tecnicos=self.get_service('listar_tecnicos_service').execute(self.ator),
        )

    def montar_dto(self, pk, dados):
        return ReatribuirOSInputDTO(
            ordem_id=pk,
            setor_responsavel_id=dados.get('setor_responsavel_id') or None,
            tecnico_id=dados.get('tecnico_id') or None,
        )


class OSPrioridadeView(OSAcaoView):
    """POST /os/<id>/prioridade/"""

    form_class = OSPrioridadeForm
    service_name = 'alterar_prioridade_os_service'
    acao = 'alterar prioridade'
    mensagem_sucesso = 'Prioridade alterada!'

    def montar_dto(self, pk, dados):
        return AlterarPrioridadeInputDTO(ordem_id=pk, nova_prioridade=dados['prioridade'])


class OSComentarioView(OSAcaoView):
    """POST /os/<id>/comentarios/"""

    form_class = ComentarioForm
    service_name = 'adicionar_comentario_service'
    acao = 'comentar'
    mensagem_sucesso = 'Comentário adicionado!'

    def montar_dto(self, pk, dados):
        return AdicionarComentarioInputDTO(ordem_id=pk, comentario=dados['comentario'])


# =============================================================================
# Notificações
# =============================================================================

class NotificacoesView(BaseOSView):
    """GET /notificacoes/"""

    template_name = 'ordens_servico/notificacoes.html'

    def get(self, request: HttpRequest) -> HttpResponse:
        notificacoes = self.get_service('listar_notificacoes_service').execute(self.ator)
        return render(request, self.template_name, {'notificacoes': notificacoes})


class MarcarNotificacaoLidaView(BaseOSView):
    """
    POST /notificacoes/<id>/lida/

    Com `abrir=1` no POST, segue para a O.S. da notificação.
    """

    def post(self, request: HttpRequest, pk: str) -> HttpResponse:
        try:
            notificacao = self.get_service('marcar_como_lida_service').execute(pk, self.ator)
        except Exception as e:
            self.flash_erro(request, e, "marcar notificação")
            return redirect('ordens_servico:notificacoes')

        if request.POST.get('abrir') and notificacao.ordem_id:
            return redirect('ordens_servico:detail', pk=notificacao.ordem_id)
        return redirect('ordens_servico:notificacoes')


class MarcarTodasLidasView(BaseOSView):
    """POST /notificacoes/marcar-todas/"""

    def post(self, request: HttpRequest) -> HttpResponse:
        total = self.get_service('marcar_todas_como_lidas_service').execute(self.ator)
        self.success_message(request, f"{total} notificação(ões) marcada(s) como lida(s).")
        return redirect('ordens_servico:notificacoes')


# =============================================================================
# Perfil
# =============================================================================

class PerfilView(BaseOSView):
    """
    Perfil do usuário logado.

    GET /perfil/ - Dados e avatar
    POST /perfil/ - Atualiza nome, email e telefone
    """

    template_name = 'ordens_servico/perfil.html'

    def _render(self, request, form, avatar_form=None):
        perfil = self.get_service('obter_perfil_service').execute(self.ator.usuario_id)
        return render(request, self.template_name, {
            'perfil': perfil,
            'form': form,
            'avatar_form': avatar_form or AvatarForm(),
        })

    def get(self, request: HttpRequest) -> HttpResponse:
        try:
            perfil = self.get_service('obter_perfil_service').execute(self.ator.usuario_id)
        except EntityNotFoundError:
            self.error_message(request, "Perfil não encontrado.")
            return redirect('ordens_servico:dashboard')

        form = PerfilForm(initial={
            'nome_completo': perfil.nome_completo,
            'email': perfil.email,
            'telefone': perfil.telefone,
        })
        return self._render(request, form)

    def post(self, request: HttpRequest) -> HttpResponse:
        form = PerfilForm(request.POST)
        if not form.is_valid():
            return self._render(request, form)

        try:
            self.get_service('atualizar_perfil_service').execute(
                AtualizarPerfilInputDTO(
                    nome_completo=form.cleaned_data['nome_completo'],
                    email=form.cleaned_data['email'],
                    telefone=form.cleaned_data.get('telefone') or None,
                ),
                self.ator,
            )
            self.success_message(request, "Perfil atualizado!")
            return redirect('ordens_servico:perfil')
        except ValidationError as e:
            form.add_error(e.field if e.field in form.fields else None, str(e))
        except Exception as e:
            self.flash_erro(request, e, "atualizar perfil")

        return self._render(request, form)


class AvatarView(BaseOSView):
    """
    POST /perfil/avatar/ - Envia ou remove a foto de perfil.

    O avatar é gravado como JPEG 400x400 (recorte central). O arquivo
    anterior é apagado do storage depois da troca.
    """

    def post(self, request: HttpRequest) -> HttpResponse:
        form = AvatarForm(request.POST, request.FILES)
        if not form.is_valid():
            self.error_message(request, _primeiro_erro(form))
            return redirect('ordens_servico:perfil')

        nova_url = None
        try:
            if form.cleaned_data.get('avatar'):
                nova_url = salvar_imagem(
                    normalizar_avatar(form.cleaned_data['avatar']), 'avatars'
                )

            anterior = self.get_service('atualizar_avatar_service').execute(nova_url, self.ator)
            remover_imagem(anterior)

            self.success_message(
                request, "Foto atualizada!" if nova_url else "Foto removida!"
            )
        except Exception as e:
            remover_imagem(nova_url)
            self.flash_erro(request, e, "atualizar foto")

        return redirect('ordens_servico:perfil')


# =============================================================================
# Relatórios e Indicadores (coordenação)
# =============================================================================

class RelatoriosView(BaseOSView):
    """GET /relatorios/"""

    template_name = 'ordens_servico/relatorios.html'
    permissao_requerida = Permissao.RELATORIOS_VER

    def get(self, request: HttpRequest) -> HttpResponse:
        resumo = self.get_service('relatorio_resumo_service').execute(self.ator)
        return render(request, self.template_name, {'resumo': resumo})


class ExportarCSVView(BaseOSView):
    """
    GET /relatorios/exportar/ - Relatório em CSV.

    Aceita os mesmos filtros do painel de indicadores.
    """

    permissao_requerida = Permissao.RELATORIOS_VER

    def get(self, request: HttpRequest) -> HttpResponse:
        periodo = request.GET.get('periodo_dias', '')
        filtro = FiltroEstatisticas(
            periodo_dias=int(periodo) if periodo.isdigit() else None,
            setor_id=request.GET.get('setor_id'),
            tipo_manutencao=request.GET.get('tipo_manutencao'),
            prioridade=request.GET.get('prioridade'),
            status=request.GET.get('status'),
        )
        linhas = self.get_service('exportar_relatorio_service').execute(self.ator, filtro)

        response = HttpResponse(content_type='text/csv; charset=utf-8')
        response['Content-Disposition'] = (
            f'attachment; filename="relatorio_os_{date.today().isoformat()}.csv"'
        )
        writer = csv.DictWriter(response, fieldnames=COLUNAS_EXPORTACAO)
        writer.writeheader()
        writer.writerows(linhas)

        logger.info(f"Relatório exportado por {self.ator.usuario_id}: {len(linhas)} linhas")
        return response


class AnaliticoView(BaseOSView):
    """GET /analitico/?periodo_dias=30&setor_id=...&status=..."""

    template_name = 'ordens_servico/analitico.html'
    permissao_requerida = Permissao.ANALYTICS_VER

    def get(self, request: HttpRequest) -> HttpResponse:
        form = AnaliticoFiltroForm(
            request.GET or None,
            setores=self.get_service('listar_setores_service').execute(),
        )

        filtro = FiltroEstatisticas()
        if form.is_bound and form.is_valid():
            filtro = FiltroEstatisticas(**form.cleaned_data)

        estatisticas = self.get_service('estatisticas_service').execute(self.ator, filtro)
        return render(request, self.template_name, {
            'form': form,
            'estatisticas': estatisticas,
            'filtro': filtro,
        })


# =============================================================================
# Administração (coordenação)
# =============================================================================

class UsuariosAdminView(BaseOSView):
    """GET /administracao/usuarios/"""

    template_name = 'ordens_servico/admin_usuarios.html'
    permissao_requerida = Permissao.ADMIN_GERENCIAR

    def get(self, request: HttpRequest) -> HttpResponse:
        setores_responsaveis = self.get_service('listar_setores_responsaveis_service').execute()
        usuarios = [
            (
                usuario,
                AlterarPapelForm(
                    setores_responsaveis=setores_responsaveis,
                    initial={
                        'papel': usuario.papel,
                        'setor_responsavel_id': usuario.setor_responsavel_id,
                    },
                    prefix=f'u{usuario.usuario_id}',
                ),
            )
            for usuario in self.get_service('listar_usuarios_service').execute(self.ator)
        ]
        return render(request, self.template_name, {'usuarios': usuarios})


class AlterarPapelView(BaseOSView):
    """POST /administracao/usuarios/<id>/papel/"""

    permissao_requerida = Permissao.ADMIN_GERENCIAR

    def post(self, request: HttpRequest, pk: str) -> HttpResponse:
        form = AlterarPapelForm(
            request.POST,
            setores_responsaveis=self.get_service('listar_setores_responsaveis_service').execute(),
            prefix=f'u{pk}',
        )
        if not form.is_valid():
            self.error_message(request, _primeiro_erro(form))
            return redirect('ordens_servico:admin_usuarios')

        try:
            perfil = self.get_service('alterar_papel_usuario_service').execute(
                AlterarPapelInputDTO(
                    usuario_id=pk,
                    papel=form.cleaned_data['papel'],
                    setor_responsavel_id=form.cleaned_data.get('setor_responsavel_id') or None,
                ),
                self.ator,
            )
            logger.info(f"Papel de {pk} alterado para {perfil.papel} por {self.ator.usuario_id}")
            self.success_message(
                request, f"{perfil.nome_completo} agora é {perfil.papel_label}."
            )
        except Exception as e:
            self.flash_erro(request, e, "alterar papel")

        return redirect('ordens_servico:admin_usuarios')


class CadastroAdminView(BaseOSView):
    """
    Listagem e criação de um cadastro (setores ou setores responsáveis).

    GET lista com formulário; POST cria.
    """

    template_name = 'ordens_servico/admin_cadastro.html'
    permissao_requerida = Permissao.ADMIN_GERENCIAR

    form_class = SetorForm
    titulo = ''
    url_name = ''
    acao_url_name = ''
    servicos = {}

    def montar_dto(self, dados: dict, pk: Optional[str] = None):
        raise NotImplementedError

    def _render(self, request, form):
        itens = self.get_service(self.servicos['listar']).execute()
        return render(request, self.template_name, {
            'titulo': self.titulo,
            'url_name': self.url_name,
            'acao_url_name': self.acao_url_name,
            'itens': itens,
            'form': form,
            'com_descricao': 'descricao' in self.form_class.base_fields,
        })

    def get(self, request: HttpRequest) -> HttpResponse:
        return self._render(request, self.form_class(initial={'ativo': True}))

    def post(self, request: HttpRequest) -> HttpResponse:
        form = self.form_class(request.POST)
        if not form.is_valid():
            return self._render(request, form)

        try:
            item = self.get_service(self.servicos['criar']).execute(
                self.montar_dto(form.cleaned_data), self.ator
            )
            self.success_message(request, f"'{item.nome}' cadastrado!")
            return redirect(self.url_name)
        except ValidationError as e:
            form.add_error(e.field if e.field in form.fields else None, str(e))
        except Exception as e:
            self.flash_erro(request, e, "cadastrar")

        return self._render(request, form)


class CadastroAcaoView(CadastroAdminView):
    """
    POST /administracao/<cadastro>/<id>/<acao>/

    Ações: editar, alternar (ativo/inativo) e excluir.
    """

    def get(self, request, *args, **kwargs):
        return redirect(self.url_name)

    def post(self, request: HttpRequest, pk: str, acao: str) -> HttpResponse:
        try:
            if acao == 'editar':
                form = self.form_class(request.POST)
                if not form.is_valid():
                    self.error_message(request, _primeiro_erro(form))
                    return redirect(self.url_name)
                self.get_service(self.servicos['atualizar']).execute(
                    self.montar_dto(form.cleaned_data, pk), self.ator
                )
                self.success_message(request, "Cadastro atualizado!")
            elif acao == 'alternar':
                item = self.get_service(self.servicos['alternar']).execute(pk, self.ator)
                self.success_message(
                    request, f"'{item.nome}' {'ativado' if item.ativo else 'desativado'}."
                )
            elif acao == 'excluir':
                self.get_service(self.servicos['excluir']).execute(pk, self.ator)
                self.success_message(request, "Cadastro excluído!")
            else:
                self.error_message(request, "Ação inválida.")
        except Exception as e:
            self.flash_erro(request, e, acao)

        return redirect(self.url_name)


class _SetoresMixin:
    form_class = SetorForm
    titulo = 'Setores'
    url_name = 'ordens_servico:admin_setores'
    acao_url_name = 'ordens_servico:admin_setor_acao'
    servicos = {
        'listar': 'listar_setores_service',
        'criar': 'criar_setor_service',
        'atualizar': 'atualizar_setor_service',
        'alternar': 'alternar_status_setor_service',
        'excluir': 'excluir_setor_service',
    }

    def montar_dto(self, dados, pk=None):
        return SalvarSetorInputDTO(nome=dados['nome'], ativo=dados.get('ativo', True), setor_id=pk)


class _SetoresResponsaveisMixin:
    form_class = SetorResponsavelForm
    titulo = 'Setores Responsáveis'
    url_name = 'ordens_servico:admin_setores_responsaveis'
    acao_url_name = 'ordens_servico:admin_setor_responsavel_acao'
    servicos = {
        'listar': 'listar_setores_responsaveis_service',
        'criar': 'criar_setor_responsavel_service',
        'atualizar': 'atualizar_setor_responsavel_service',
        'alternar': 'alternar_status_setor_responsavel_service',
        'excluir': 'excluir_setor_responsavel_service',
    }

    def montar_dto(self, dados, pk=None):
        return SalvarSetorResponsavelInputDTO(
            nome=dados['nome'],
            descricao=dados.get('descricao') or None,
            ativo=dados.get('ativo', True),
            setor_responsavel_id=pk,
        )


class SetoresAdminView(_SetoresMixin, CadastroAdminView):
    pass


class SetorAcaoView(_SetoresMixin, CadastroAcaoView):
    pass


class SetoresResponsaveisAdminView(_SetoresResponsaveisMixin, CadastroAdminView):
    pass


class SetorResponsavelAcaoView(_SetoresResponsaveisMixin, CadastroAcaoView):
    pass


# =============================================================================
# Cadastro de usuário
# =============================================================================

class CadastroUsuarioView(ContainerMixin, View):
    """
    Cadastro público: cria o usuário e o perfil de solicitante.

    GET/POST /cadastro/
    """

    template_name = 'registration/signup.html'

    def get(self, request: HttpRequest) -> HttpResponse:
        if request.user.is_authenticated:
            return redirect('ordens_servico:dashboard')
        return render(request, self.template_name, {'form': CadastroForm()})

    def post(self, request: HttpRequest) -> HttpResponse:
        form = CadastroForm(request.POST)
        if not form.is_valid():
            return render(request, self.template_name, {'form': form})

        try:
            with transaction.atomic():
                user = form.save()
                self.get_service('criar_perfil_service').execute(CriarPerfilInputDTO(
                    usuario_id=str(user.pk),
                    nome_completo=form.cleaned_data['nome_completo'],
                    email=form.cleaned_data['email'],
                ))
        except ValidationError as e:
            form.add_error(e.field if e.field in form.fields else None, str(e))
            return render(request, self.template_name, {'form': form})

        login(request, user, backend='django.contrib.auth.backends.ModelBackend')
        logger.info(f"Novo usuário cadastrado: {user.pk}")
        messages.success(request, "Cadastro realizado! Bem-vindo(a).")
        return redirect('ordens_servico:dashboard')
