"""
Dependency Injection Container.

Configura e gerencia todas as dependências da aplicação.
Usa dependency-injector para lazy-loading e injeção.

Padrões:
- Singleton: Uma instância para toda app (repositories, publisher)
- Factory: Nova instância por chamada (services, UoW)
- Configuration: valores vindos do settings do Django

Os adapters Django são importados sob demanda (`_lazy`) para que o
container possa ser importado antes do registro dos apps.
"""

from typing import Optional

from dependency_injector import containers, providers


def _lazy(caminho: str):
    """
    Construtor que importa a classe só na primeira chamada.

    Example:
        providers.Singleton(_lazy('pacote.modulo.Classe'))
    """
    modulo, nome = caminho.rsplit('.', 1)

    def construir(*args, **kwargs):
        return getattr(__import__(modulo, fromlist=[nome]), nome)(*args, **kwargs)

    construir.__name__ = nome
    return construir


_REPOS = 'src.adapters.django_app.ordens_servico.repositories'
_OS = 'src.core.ordens_servico.use_cases'
_CADASTROS = 'src.core.cadastros.use_cases'
_NOTIFICACOES = 'src.core.notificacoes.use_cases'
_RELATORIOS = 'src.core.relatorios.use_cases'


class Container(containers.DeclarativeContainer):
    """
    Container principal de Dependency Injection.

    Organização:
    - Configuration: settings (modo do publisher, SLA por prioridade)
    - Infrastructure: Event Publisher, Event Store
    - Repositories: Persistência
    - Unit of Work: Transações
    - Services: Use Cases

    Example:
        container = get_container()
        service = container.criar_os_service()
        result = service.execute(input_dto)
    """

    # =========================================================================
    # Configuration
    # =========================================================================

    config = providers.Configuration()

    # =========================================================================
    # Infrastructure
    # =========================================================================

    event_publisher = providers.Singleton(
        _lazy('src.adapters.django_app.events.publishers.get_event_publisher'),
        mode=config.event_publisher_mode,
    )

    event_store = providers.Singleton(_lazy(f'{_REPOS}.DjangoEventStore'))

    # =========================================================================
    # Repositories (Singleton - uma instância por app)
    # =========================================================================

    os_repository = providers.Singleton(_lazy(f'{_REPOS}.DjangoOrdemServicoRepository'))
    comentario_repository = providers.Singleton(_lazy(f'{_REPOS}.DjangoComentarioRepository'))
    setor_repository = providers.Singleton(_lazy(f'{_REPOS}.DjangoSetorRepository'))
    setor_responsavel_repository = providers.Singleton(
        _lazy(f'{_REPOS}.DjangoSetorResponsavelRepository')
    )
    perfil_repository = providers.Singleton(_lazy(f'{_REPOS}.DjangoPerfilRepository'))
    notificacao_repository = providers.Singleton(_lazy(f'{_REPOS}.DjangoNotificacaoRepository'))

    # =========================================================================
    # Unit of Work (Factory - nova instância por operação)
    # =========================================================================

    unit_of_work = providers.Factory(
        _lazy('src.adapters.django_app.shared.unit_of_work.DjangoUnitOfWork'),
        event_publisher=event_publisher,
        event_store=event_store,
    )

    # =========================================================================
    # Services - Ordens de Serviço
    # =========================================================================

    criar_os_service = providers.Factory(
        _lazy(f'{_OS}.CriarOSService'),
        os_repo=os_repository,
        uow=unit_of_work,
        sla_por_prioridade=config.sla_por_prioridade,
        setor_repo=setor_repository,
        setor_responsavel_repo=setor_responsavel_repository,
    )

    obter_os_service = providers.Factory(_lazy(f'{_OS}.ObterOSService'), os_repo=os_repository)

    listar_os_service = providers.Factory(_lazy(f'{_OS}.ListarOSService'), os_repo=os_repository)

    alterar_status_os_service = providers.Factory(
        _lazy(f'{_OS}.AlterarStatusOSService'),
        os_repo=os_repository,
        uow=unit_of_work,
    )

    reatribuir_os_service = providers.Factory(
        _lazy(f'{_OS}.ReatribuirOSService'),
        os_repo=os_repository,
        uow=unit_of_work,
        perfil_repo=perfil_repository,
        setor_responsavel_repo=setor_responsavel_repository,
    )

    alterar_prioridade_os_service = providers.Factory(
        _lazy(f'{_OS}.AlterarPrioridadeOSService'),
        os_repo=os_repository,
        uow=unit_of_work,
        sla_por_prioridade=config.sla_por_prioridade,
    )

    adicionar_comentario_service = providers.Factory(
        _lazy(f'{_OS}.AdicionarComentarioService'),
        os_repo=os_repository,
        comentario_repo=comentario_repository,
        uow=unit_of_work,
    )

    listar_comentarios_service = providers.Factory(
        _lazy(f'{_OS}.ListarComentariosService'),
        os_repo=os_repository,
        comentario_repo=comentario_repository,
    )

    alertar_sla_critico_service = providers.Factory(
        _lazy(f'{_OS}.AlertarSLACriticoService'),
        os_repo=os_repository,
        uow=unit_of_work,
        ja_alertada=event_store.provided.ja_alertada_sla,
    )

    # =========================================================================
    # Services - Cadastros
    # =========================================================================

    criar_setor_service = providers.Factory(
        _lazy(f'{_CADASTROS}.CriarSetorService'), setor_repo=setor_repository, uow=unit_of_work
    )
    atualizar_setor_service = providers.Factory(
        _lazy(f'{_CADASTROS}.AtualizarSetorService'), setor_repo=setor_repository, uow=unit_of_work
    )
    alternar_status_setor_service = providers.Factory(
        _lazy(f'{_CADASTROS}.AlternarStatusSetorService'),
        setor_repo=setor_repository,
        uow=unit_of_work,
    )
    excluir_setor_service = providers.Factory(
        _lazy(f'{_CADASTROS}.ExcluirSetorService'),
        setor_repo=setor_repository,
        os_repo=os_repository,
        uow=unit_of_work,
    )
    listar_setores_service = providers.Factory(
        _lazy(f'{_CADASTROS}.ListarSetoresService'), setor_repo=setor_repository
    )

    criar_setor_responsavel_service = providers.Factory(
        _lazy(f'{_CADASTROS}.CriarSetorResponsavelService'),
        setor_responsavel_repo=setor_responsavel_repository,
        uow=unit_of_work,
    )
    atualizar_setor_responsavel_service = providers.Factory(
        _lazy(f'{_CADASTROS}.AtualizarSetorResponsavelService'),
        setor_responsavel_repo=setor_responsavel_repository,
        uow=unit_of_work,
    )
    alternar_status_setor_responsavel_service = providers.Factory(
        _lazy(f'{_CADASTROS}.AlternarStatusSetorResponsavelService'),
        setor_responsavel_repo=setor_responsavel_repository,
        uow=unit_of_work,
    )
    excluir_setor_responsavel_service = providers.Factory(
        _lazy(f'{_CADASTROS}.ExcluirSetorResponsavelService'),
        setor_responsavel_repo=setor_responsavel_repository,
        os_repo=os_repository,
        uow=unit_of_work,
    )
    listar_setores_responsaveis_service = providers.Factory(
        _lazy(f'{_CADASTROS}.ListarSetoresResponsaveisService'),
        setor_responsavel_repo=setor_responsavel_repository,
    )

    criar_perfil_service = providers.Factory(
        _lazy(f'{_CADASTROS}.CriarPerfilService'), perfil_repo=perfil_repository, uow=unit_of_work
    )
    obter_perfil_service = providers.Factory(
        _lazy(f'{_CADASTROS}.ObterPerfilService'), perfil_repo=perfil_repository
    )
    atualizar_perfil_service = providers.Factory(
        _lazy(f'{_CADASTROS}.AtualizarPerfilService'),
        perfil_repo=perfil_repository,
        uow=unit_of_work,
    )
    atualizar_avatar_service = providers.Factory(
        _lazy(f'{_CADASTROS}.AtualizarAvatarService'),
        perfil_repo=perfil_repository,
        uow=unit_of_work,
    )
    listar_usuarios_service = providers.Factory(
        _lazy(f'{_CADASTROS}.ListarUsuariosService'), perfil_repo=perfil_repository
    )
    listar_tecnicos_service = providers.Factory(
        _lazy(f'{_CADASTROS}.ListarTecnicosService'), perfil_repo=perfil_repository
    )
    alterar_papel_usuario_service = providers.Factory(
        _lazy(f'{_CADASTROS}.AlterarPapelUsuarioService'),
        perfil_repo=perfil_repository,
        uow=unit_of_work,
    )

    # =========================================================================
    # Services - Notificações
    # =========================================================================

    listar_notificacoes_service = providers.Factory(
        _lazy(f'{_NOTIFICACOES}.ListarNotificacoesService'),
        notificacao_repo=notificacao_repository,
    )
    contar_nao_lidas_service = providers.Factory(
        _lazy(f'{_NOTIFICACOES}.ContarNaoLidasService'),
        notificacao_repo=notificacao_repository,
    )
    marcar_como_lida_service = providers.Factory(
        _lazy(f'{_NOTIFICACOES}.MarcarComoLidaService'),
        notificacao_repo=notificacao_repository,
        uow=unit_of_work,
    )
    marcar_todas_como_lidas_service = providers.Factory(
        _lazy(f'{_NOTIFICACOES}.MarcarTodasComoLidasService'),
        notificacao_repo=notificacao_repository,
        uow=unit_of_work,
    )
    notificar_evento_os_service = providers.Factory(
        _lazy(f'{_NOTIFICACOES}.NotificarEventoOSService'),
        notificacao_repo=notificacao_repository,
        perfil_repo=perfil_repository,
        uow=unit_of_work,
    )

    # =========================================================================
    # Services - Relatórios
    # =========================================================================

    estatisticas_service = providers.Factory(
        _lazy(f'{_RELATORIOS}.EstatisticasService'), os_repo=os_repository
    )
    relatorio_resumo_service = providers.Factory(
        _lazy(f'{_RELATORIOS}.RelatorioResumoService'), os_repo=os_repository
    )
    exportar_relatorio_service = providers.Factory(
        _lazy(f'{_RELATORIOS}.ExportarRelatorioService'), os_repo=os_repository
    )


# =============================================================================
# Container Global (Singleton)
# =============================================================================

_container: Optional[Container] = None


def get_container() -> Container:
    """
    Retorna instância global do container.

    Cria se não existir, configurada a partir do settings do Django.
    """
    global _container

    if _container is None:
        from django.conf import settings

        _container = Container()
        _container.config.from_dict({
            'event_publisher_mode': settings.EVENT_PUBLISHER_MODE,
            'sla_por_prioridade': dict(settings.SLA_HORAS),
        })

    return _container


def reset_container() -> None:
    """Reset do container (para testes)."""
    global _container
    _container = None


# =============================================================================
# Testing Container
# =============================================================================

def testing_container() -> Container:
    """
    Container para testes sem banco.

    Sobrescreve repositórios, Unit of Work e publisher com as
    implementações em memória; os services continuam os mesmos.

    Example:
        container = testing_container()
        service = container.criar_os_service()
        container.os_repository().list_all()
    """
    from src.adapters.django_app.events.publishers import InMemoryEventPublisher
    from src.adapters.django_app.shared.unit_of_work import InMemoryUnitOfWork
    from src.core.cadastros.ports import (
        InMemorySetorRepository,
        InMemorySetorResponsavelRepository,
        InMemoryPerfilRepository,
    )
    from src.core.notificacoes.ports import InMemoryNotificacaoRepository
    from src.core.ordens_servico.ports import (
        InMemoryOrdemServicoRepository,
        InMemoryComentarioRepository,
    )
    from src.core.ordens_servico.use_cases import AlertarSLACriticoService

    container = Container()

    container.event_publisher.override(providers.Singleton(InMemoryEventPublisher))
    container.os_repository.override(providers.Singleton(InMemoryOrdemServicoRepository))
    container.comentario_repository.override(providers.Singleton(InMemoryComentarioRepository))
    container.setor_repository.override(providers.Singleton(InMemorySetorRepository))
    container.setor_responsavel_repository.override(
        providers.Singleton(InMemorySetorResponsavelRepository)
    )
    container.perfil_repository.override(providers.Singleton(InMemoryPerfilRepository))
    container.notificacao_repository.override(providers.Singleton(InMemoryNotificacaoRepository))
    container.unit_of_work.override(
        providers.Factory(InMemoryUnitOfWork, event_publisher=container.event_publisher)
    )
    container.alertar_sla_critico_service.override(
        providers.Factory(
            AlertarSLACriticoService,
            os_repo=container.os_repository,
            uow=container.unit_of_work,
        )
    )

    return container
