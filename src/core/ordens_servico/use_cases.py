"""
Use Cases (Application Services) do Domínio de Ordens de Serviço.

Use Cases implementados:
- CriarOSService: Abre nova O.S.
- ObterOSService: Detalhe de uma O.S. visível ao usuário
- ListarOSService: Listagem com escopo por papel, filtro e busca
- AlterarStatusOSService: Define o status (técnico/coordenação)
- ReatribuirOSService: Move para outro setor responsável/técnico
- AlterarPrioridadeOSService: Altera prioridade (coordenação)
- AdicionarComentarioService: Registra comentário no histórico
- ListarComentariosService: Histórico de comentários
- ListarOSSLACriticoService: O.S. abertas além do SLA
- AlertarSLACriticoService: Emite alerta de SLA crítico (uma vez por O.S.)

Responsabilidades dos Use Cases:
- Verificar permissão e visibilidade do ator
- Coordenar entidades e repositórios
- Gerenciar transações (via UoW)
- Disparar eventos de domínio
- Retornar DTOs de saída
"""

from typing import Callable, Dict, List, Optional

from src.core.acesso import Ator, Permissao, UserRole
from src.core.cadastros.ports import (
    PerfilRepository,
    SetorRepository,
    SetorResponsavelRepository,
)
from src.core.shared.interfaces import UnitOfWork
from src.core.shared.exceptions import EntityNotFoundError, ValidationError
from src.core.shared.tempo import agora

from .ports import OrdemServicoRepository, ComentarioRepository
from .entities import (
    ServiceOrderEntity,
    OSUpdateEntity,
    OSStatus,
    OSPriority,
    MaintenanceType,
)
from .dtos import (
    CriarOSInputDTO,
    AlterarStatusInputDTO,
    ReatribuirOSInputDTO,
    AlterarPrioridadeInputDTO,
    AdicionarComentarioInputDTO,
    ListarOSQueryDTO,
    OSOutputDTO,
    OSListItemDTO,
    ComentarioOutputDTO,
)
from .events import (
    OSCriadaEvent,
    OSStatusAlteradoEvent,
    OSConcluidaEvent,
    OSReatribuidaEvent,
    OSPrioridadeAlteradaEvent,
    OSComentarioAdicionadoEvent,
    OSSLACriticoEvent,
)


def _converter(enum_cls, valor, campo: str):
    """Converte string em enum, traduzindo erro para ValidationError."""
    try:
        return enum_cls.from_string(valor)
    except ValueError as e:
        raise ValidationError(str(e), field=campo)


def _obter_visivel(
    os_repo: OrdemServicoRepository,
    ordem_id: str,
    ator: Ator,
) -> ServiceOrderEntity:
    """
    Busca O.S. respeitando a visibilidade do ator.

    O.S. fora do escopo do ator é tratada como inexistente.
    """
    ordem = os_repo.get_by_id(ordem_id)

    if not ordem or not ator.pode_ver(ordem):
        raise EntityNotFoundError(
            f"O.S. {ordem_id} não encontrada",
            entity_type="OrdemServico",
            entity_id=ordem_id
        )

    return ordem


def _exigir_cadastro_ativo(repo, item_id: Optional[str], campo: str, rotulo: str) -> None:
    """Setor informado precisa existir e estar ativo."""
    if repo is None or not item_id:
        return

    item = repo.get_by_id(item_id)
    if not item or not item.ativo:
        raise ValidationError(f"{rotulo} inexistente ou inativo", field=campo)


def _exigir_tecnico(perfil_repo, tecnico_id: Optional[str]) -> None:
    if perfil_repo is None or not tecnico_id:
        return

    perfil = perfil_repo.get_by_usuario_id(tecnico_id)
    if not perfil or perfil.papel != UserRole.TECNICO:
        raise ValidationError("Usuário informado não é técnico", field="tecnico_id")


class CriarOSService:
    """
    Use Case: Abrir uma nova O.S.

    Fluxo:
    1. Converter valores de enum
    2. Criar entidade (validações na entidade)
    3. Persistir (número atribuído pelo repositório)
    4. Disparar OSCriadaEvent

    Attributes:
        os_repo: Repositório de O.S.
        uow: Unit of Work
        sla_por_prioridade: SLA configurado por valor de prioridade
            (ex: {"urgente": 24}); ausente = SLA padrão do enum
        setor_repo, setor_responsavel_repo: quando informados, o setor e o
            setor responsável precisam existir e estar ativos

    Example:
        service = CriarOSService(os_repo, uow)
        output = service.execute(CriarOSInputDTO(
            categoria="eletrica",
            setor_id=setor.id,
            equipamento="Tomada leito 3",
            descricao="Sem energia",
            solicitante_id="42",
            urgente=True,
        ))
        print(output.numero)
    """

    def __init__(
        self,
        os_repo: OrdemServicoRepository,
        uow: UnitOfWork,
        sla_por_prioridade: Optional[Dict[str, int]] = None,
        setor_repo: Optional[SetorRepository] = None,
        setor_responsavel_repo: Optional[SetorResponsavelRepository] = None,
    ):
        self.os_repo = os_repo
        self.uow = uow
        self.sla_por_prioridade = sla_por_prioridade or {}
        self.setor_repo = setor_repo
        self.setor_responsavel_repo = setor_responsavel_repo

    def execute(self, input_dto: CriarOSInputDTO) -> OSOutputDTO:
        """
        Raises:
            ValidationError: Se dados inválidos ou setor inexistente/inativo
        """
        with self.uow:
            _exigir_cadastro_ativo(self.setor_repo, input_dto.setor_id, "setor_id", "Setor")
            _exigir_cadastro_ativo(
                self.setor_responsavel_repo,
                input_dto.setor_responsavel_id,
                "setor_responsavel_id",
                "Setor responsável",
            )

            prioridade = None
            if input_dto.prioridade:
                prioridade = _converter(OSPriority, input_dto.prioridade, "prioridade")
            tipo = _converter(
                MaintenanceType,
                input_dto.tipo_manutencao or "corretiva",
                "tipo_manutencao"
            )

            ordem = ServiceOrderEntity.criar(
                categoria=input_dto.categoria,
                setor_id=input_dto.setor_id,
                equipamento=input_dto.equipamento,
                descricao=input_dto.descricao,
                solicitante_id=input_dto.solicitante_id,
                urgente=input_dto.urgente,
                prioridade=prioridade,
                tipo_manutencao=tipo,
                setor_responsavel_id=input_dto.setor_responsavel_id,
                foto_url=input_dto.foto_url,
            )
            ordem.sla_horas = self.sla_por_prioridade.get(
                ordem.prioridade.value, ordem.sla_horas
            )

            self.os_repo.save(ordem)

            self.uow.publish_event(
                OSCriadaEvent(
                    aggregate_id=ordem.id,
                    numero=ordem.numero,
                    solicitante_id=ordem.solicitante_id,
                    setor_responsavel_id=ordem.setor_responsavel_id,
                    prioridade=ordem.prioridade.value,
                    equipamento=ordem.equipamento,
                )
            )

        return OSOutputDTO.from_entity(ordem)


class ObterOSService:
    """
    Use Case: Obter detalhes de uma O.S.
    """

    def __init__(self, os_repo: OrdemServicoRepository):
        self.os_repo = os_repo

    def execute(self, ordem_id: str, ator: Ator) -> OSOutputDTO:
        """
        Raises:
            EntityNotFoundError: Se não existe ou não é visível ao ator
        """
        return OSOutputDTO.from_entity(_obter_visivel(self.os_repo, ordem_id, ator))


class ListarOSService:
    """
    Use Case: Listar O.S. visíveis ao ator.

    Não usa UoW pois é operação de leitura.
    """

    def __init__(self, os_repo: OrdemServicoRepository):
        self.os_repo = os_repo

    def execute(
        self,
        ator: Ator,
        query: Optional[ListarOSQueryDTO] = None,
    ) -> List[OSListItemDTO]:
        query = query or ListarOSQueryDTO()

        status = None
        if query.status and query.status != "all":
            status = _converter(OSStatus, query.status, "status")

        ordens = self.os_repo.list_visiveis(
            ator,
            status=status,
            busca=(query.busca or "").strip() or None,
            limite=query.limite,
        )
        return [OSListItemDTO.from_entity(o) for o in ordens]


class AlterarStatusOSService:
    """
    Use Case: Alterar status de uma O.S.

    Qualquer status pode ser definido a partir de qualquer outro.
    Definir o mesmo status não gera eventos.
    """

    def __init__(self, os_repo: OrdemServicoRepository, uow: UnitOfWork):
        self.os_repo = os_repo
        self.uow = uow

    def execute(self, input_dto: AlterarStatusInputDTO, ator: Ator) -> OSOutputDTO:
        """
        Raises:
            PermissionDeniedError: Se o papel não pode alterar status
            EntityNotFoundError: Se O.S. não existe ou não é visível
            ValidationError: Se status inválido
        """
        ator.exigir(Permissao.OS_ALTERAR_STATUS)

        with self.uow:
            ordem = _obter_visivel(self.os_repo, input_dto.ordem_id, ator)
            novo_status = _converter(OSStatus, input_dto.novo_status, "status")
            status_anterior = ordem.status

            if ordem.alterar_status(novo_status):
                self.os_repo.save(ordem)

                self.uow.publish_event(
                    OSStatusAlteradoEvent(
                        aggregate_id=ordem.id,
                        numero=ordem.numero,
                        solicitante_id=ordem.solicitante_id,
                        status_anterior=status_anterior.value,
                        status_novo=novo_status.value,
                        alterado_por_id=ator.usuario_id,
                    )
                )

                if novo_status == OSStatus.CONCLUIDA:
                    tempo = ordem.tempo_resolucao_horas
                    self.uow.publish_event(
                        OSConcluidaEvent(
                            aggregate_id=ordem.id,
                            numero=ordem.numero,
                            solicitante_id=ordem.solicitante_id,
                            concluido_por_id=ator.usuario_id,
                            tempo_resolucao_horas=round(tempo, 2),
                            dentro_sla=tempo <= (ordem.sla_horas or ordem.SLA_PADRAO_HORAS),
                        )
                    )

        return OSOutputDTO.from_entity(ordem)


class ReatribuirOSService:
    """
    Use Case: Reatribuir O.S. a outro setor responsável e/ou técnico.

    O técnico precisa ter perfil com papel TECNICO; o setor responsável
    precisa existir e estar ativo.
    """

    def __init__(
        self,
        os_repo: OrdemServicoRepository,
        uow: UnitOfWork,
        perfil_repo: Optional[PerfilRepository] = None,
        setor_responsavel_repo: Optional[SetorResponsavelRepository] = None,
    ):
        self.os_repo = os_repo
        self.uow = uow
        self.perfil_repo = perfil_repo
        self.setor_responsavel_repo = setor_responsavel_repo

    def execute(self, input_dto: ReatribuirOSInputDTO, ator: Ator) -> OSOutputDTO:
        """
        Raises:
            PermissionDeniedError: Se o papel não pode reatribuir
            EntityNotFoundError: Se O.S. não existe ou não é visível
            ValidationError: Se nenhum destino informado ou destino inválido
        """
        ator.exigir(Permissao.OS_REATRIBUIR)

        with self.uow:
            ordem = _obter_visivel(self.os_repo, input_dto.ordem_id, ator)
            _exigir_cadastro_ativo(
                self.setor_responsavel_repo,
                input_dto.setor_responsavel_id,
                "setor_responsavel_id",
                "Setor responsável",
            )
            _exigir_tecnico(self.perfil_repo, input_dto.tecnico_id)
            tecnico_anterior = ordem.tecnico_id

            ordem.reatribuir(
                setor_responsavel_id=input_dto.setor_responsavel_id,
                tecnico_id=input_dto.tecnico_id,
            )

            self.os_repo.save(ordem)

            self.uow.publish_event(
                OSReatribuidaEvent(
                    aggregate_id=ordem.id,
                    numero=ordem.numero,
                    setor_responsavel_id=ordem.setor_responsavel_id,
                    tecnico_id=input_dto.tecnico_id or None,
                    tecnico_anterior_id=tecnico_anterior,
                    reatribuido_por_id=ator.usuario_id,
                )
            )

        return OSOutputDTO.from_entity(ordem)


class AlterarPrioridadeOSService:
    """
    Use Case: Alterar prioridade (e SLA) de uma O.S.
    """

    def __init__(
        self,
        os_repo: OrdemServicoRepository,
        uow: UnitOfWork,
        sla_por_prioridade: Optional[Dict[str, int]] = None,
    ):
        self.os_repo = os_repo
        self.uow = uow
        self.sla_por_prioridade = sla_por_prioridade or {}

    def execute(self, input_dto: AlterarPrioridadeInputDTO, ator: Ator) -> OSOutputDTO:
        ator.exigir(Permissao.OS_ALTERAR_PRIORIDADE)

        with self.uow:
            ordem = _obter_visivel(self.os_repo, input_dto.ordem_id, ator)
            nova = _converter(OSPriority, input_dto.nova_prioridade, "prioridade")
            anterior = ordem.prioridade

            if ordem.alterar_prioridade(nova, self.sla_por_prioridade.get(nova.value)):
                self.os_repo.save(ordem)

                self.uow.publish_event(
                    OSPrioridadeAlteradaEvent(
                        aggregate_id=ordem.id,
                        numero=ordem.numero,
                        prioridade_anterior=anterior.value,
                        prioridade_nova=nova.value,
                        alterado_por_id=ator.usuario_id,
                    )
                )

        return OSOutputDTO.from_entity(ordem)


class AdicionarComentarioService:
    """
    Use Case: Registrar comentário no histórico da O.S.

    Qualquer usuário que enxerga a O.S. pode comentar.
    """

    def __init__(
        self,
        os_repo: OrdemServicoRepository,
        comentario_repo: ComentarioRepository,
        uow: UnitOfWork,
    ):
        self.os_repo = os_repo
        self.comentario_repo = comentario_repo
        self.uow = uow

    def execute(
        self,
        input_dto: AdicionarComentarioInputDTO,
        ator: Ator,
    ) -> ComentarioOutputDTO:
        ator.exigir(Permissao.OS_COMENTAR)

        with self.uow:
            ordem = _obter_visivel(self.os_repo, input_dto.ordem_id, ator)

            comentario = OSUpdateEntity.criar(
                ordem_id=ordem.id,
                autor_id=ator.usuario_id,
                comentario=input_dto.comentario,
            )

            self.comentario_repo.save(comentario)

            self.uow.publish_event(
                OSComentarioAdicionadoEvent(
                    aggregate_id=ordem.id,
                    numero=ordem.numero,
                    autor_id=ator.usuario_id,
                    solicitante_id=ordem.solicitante_id,
                    tecnico_id=ordem.tecnico_id,
                    conteudo_preview=comentario.comentario[:100],
                )
            )

        return ComentarioOutputDTO.from_entity(comentario)


class ListarComentariosService:
    def __init__(
        self,
        os_repo: OrdemServicoRepository,
        comentario_repo: ComentarioRepository,
    ):
        self.os_repo = os_repo
        self.comentario_repo = comentario_repo

    def execute(self, ordem_id: str, ator: Ator) -> List[ComentarioOutputDTO]:
        ordem = _obter_visivel(self.os_repo, ordem_id, ator)
        return [
            ComentarioOutputDTO.from_entity(c)
            for c in self.comentario_repo.list_by_ordem(ordem.id)
        ]


class ListarOSSLACriticoService:
    """
    Use Case: O.S. não finalizadas que passaram do SLA alvo.

    Usado pela verificação periódica; não aplica escopo de ator.
    """

    def __init__(self, os_repo: OrdemServicoRepository):
        self.os_repo = os_repo

    def execute(self) -> List[ServiceOrderEntity]:
        momento = agora()
        return [
            o for o in self.os_repo.list_nao_finalizadas()
            if o.em_sla_critico(momento)
        ]


class AlertarSLACriticoService:
    """
    Use Case: Emitir OSSLACriticoEvent para cada O.S. em SLA crítico.

    Cada O.S. é alertada uma única vez; `ja_alertada(ordem_id)` consulta
    o registro de eventos para saber se o alerta já foi emitido.

    Example:
        service = AlertarSLACriticoService(os_repo, uow, event_store.ja_alertada)
        alertadas = service.execute()
    """

    def __init__(
        self,
        os_repo: OrdemServicoRepository,
        uow: UnitOfWork,
        ja_alertada: Optional[Callable[[str], bool]] = None,
    ):
        self.os_repo = os_repo
        self.uow = uow
        self.ja_alertada = ja_alertada or (lambda ordem_id: False)

    def execute(self) -> List[ServiceOrderEntity]:
        momento = agora()
        alertadas = []

        with self.uow:
            for ordem in self.os_repo.list_nao_finalizadas():
                if not ordem.em_sla_critico(momento) or self.ja_alertada(ordem.id):
                    continue

                self.uow.publish_event(
                    OSSLACriticoEvent(
                        aggregate_id=ordem.id,
                        numero=ordem.numero,
                        sla_horas=ordem.sla_horas or ServiceOrderEntity.SLA_PADRAO_HORAS,
                        horas_decorridas=ordem.horas_decorridas(momento),
                        tecnico_id=ordem.tecnico_id,
                    )
                )
                alertadas.append(ordem)

        return alertadas
