"""
Use Cases de Notificações.

- ListarNotificacoesService: notificações do usuário (mais recentes primeiro)
- ContarNaoLidasService: contador exibido no dashboard
- MarcarComoLidaService: marca uma notificação (somente o dono)
- MarcarTodasComoLidasService: marca todas as não lidas do usuário
- CriarNotificacaoService: cria notificação avulsa
- NotificarEventoOSService: regras de quem é notificado por evento de O.S.
"""

from typing import Any, Dict, List, Optional

from src.core.acesso import Ator, UserRole
from src.core.cadastros.ports import PerfilRepository
from src.core.ordens_servico.entities import OSStatus
from src.core.shared.interfaces import UnitOfWork
from src.core.shared.exceptions import EntityNotFoundError

from .entities import NotificacaoEntity
from .ports import NotificacaoRepository
from .dtos import CriarNotificacaoInputDTO, NotificacaoOutputDTO


class ListarNotificacoesService:
    def __init__(self, notificacao_repo: NotificacaoRepository):
        self.notificacao_repo = notificacao_repo

    def execute(self, ator: Ator, limite: Optional[int] = None) -> List[NotificacaoOutputDTO]:
        return [
            NotificacaoOutputDTO.from_entity(n)
            for n in self.notificacao_repo.list_by_usuario(ator.usuario_id, limite=limite)
        ]


class ContarNaoLidasService:
    def __init__(self, notificacao_repo: NotificacaoRepository):
        self.notificacao_repo = notificacao_repo

    def execute(self, ator: Ator) -> int:
        return self.notificacao_repo.count_nao_lidas(ator.usuario_id)


class MarcarComoLidaService:
    """
    Use Case: Marcar uma notificação como lida.

    Notificação de outro usuário é tratada como inexistente.
    """

    def __init__(self, notificacao_repo: NotificacaoRepository, uow: UnitOfWork):
        self.notificacao_repo = notificacao_repo
        self.uow = uow

    def execute(self, notificacao_id: str, ator: Ator) -> NotificacaoOutputDTO:
        with self.uow:
            notificacao = self.notificacao_repo.get_by_id(notificacao_id)

            if not notificacao or notificacao.usuario_id != ator.usuario_id:
                raise EntityNotFoundError(
                    f"Notificação {notificacao_id} não encontrada",
                    entity_type="Notificacao",
                    entity_id=notificacao_id
                )

            if notificacao.marcar_como_lida():
                self.notificacao_repo.save(notificacao)

        return NotificacaoOutputDTO.from_entity(notificacao)


class MarcarTodasComoLidasService:
    def __init__(self, notificacao_repo: NotificacaoRepository, uow: UnitOfWork):
        self.notificacao_repo = notificacao_repo
        self.uow = uow

    def execute(self, ator: Ator) -> int:
        """Retorna quantas notificações foram marcadas."""
        with self.uow:
            return self.notificacao_repo.marcar_todas_como_lidas(ator.usuario_id)


class CriarNotificacaoService:
    def __init__(self, notificacao_repo: NotificacaoRepository, uow: UnitOfWork):
        self.notificacao_repo = notificacao_repo
        self.uow = uow

    def execute(self, input_dto: CriarNotificacaoInputDTO) -> NotificacaoOutputDTO:
        with self.uow:
            notificacao = NotificacaoEntity.criar(
                usuario_id=input_dto.usuario_id,
                titulo=input_dto.titulo,
                mensagem=input_dto.mensagem,
                ordem_id=input_dto.ordem_id,
            )
            self.notificacao_repo.save(notificacao)

        return NotificacaoOutputDTO.from_entity(notificacao)


class NotificarEventoOSService:
    """
    Use Case: Gerar notificações a partir de um evento de O.S.

    Regras:
    - OSCriadaEvent: coordenação e técnicos do setor responsável
    - OSStatusAlteradoEvent: solicitante (conclusão tem evento próprio)
    - OSConcluidaEvent: solicitante
    - OSReatribuidaEvent: novo técnico
    - OSComentarioAdicionadoEvent: solicitante e técnico
    - OSSLACriticoEvent: coordenação e técnico atribuído

    Quem executou a ação nunca é notificado.

    Example:
        service.execute(OSCriadaEvent(aggregate_id=ordem.id, ...).to_dict())
    """

    def __init__(
        self,
        notificacao_repo: NotificacaoRepository,
        perfil_repo: PerfilRepository,
        uow: UnitOfWork,
    ):
        self.notificacao_repo = notificacao_repo
        self.perfil_repo = perfil_repo
        self.uow = uow

    def execute(self, evento: Dict[str, Any]) -> int:
        """
        Args:
            evento: Evento serializado (formato de DomainEvent.to_dict)

        Returns:
            Quantidade de notificações criadas
        """
        regra = getattr(self, f"_regra_{evento.get('event_type', '')}", None)
        if regra is None:
            return 0

        ordem_id = evento["aggregate_id"]
        dados = evento.get("data", {})
        destinatarios, autor_id, titulo, mensagem = regra(dados)

        vistos = set()
        with self.uow:
            for usuario_id in destinatarios:
                if not usuario_id or usuario_id == autor_id or usuario_id in vistos:
                    continue
                vistos.add(usuario_id)
                self.notificacao_repo.save(
                    NotificacaoEntity.criar(
                        usuario_id=usuario_id,
                        titulo=titulo,
                        mensagem=mensagem,
                        ordem_id=ordem_id,
                    )
                )

        return len(vistos)

    def _ids_por_papel(self, papel: UserRole, setor_responsavel_id=None) -> List[str]:
        return [
            p.usuario_id
            for p in self.perfil_repo.list_by_papel(papel, setor_responsavel_id)
        ]

    @staticmethod
    def _os(dados) -> str:
        return f"O.S. #{dados['numero']}" if dados.get("numero") else "O.S."

    def _regra_OSCriadaEvent(self, dados):
        destinatarios = self._ids_por_papel(UserRole.COORDENACAO)
        if dados.get("setor_responsavel_id"):
            destinatarios += self._ids_por_papel(
                UserRole.TECNICO, dados["setor_responsavel_id"]
            )
        return (
            destinatarios,
            dados.get("solicitante_id"),
            f"Nova {self._os(dados)}",
            f"Nova O.S. aberta: {dados.get('equipamento', '')}".strip(),
        )

    def _regra_OSStatusAlteradoEvent(self, dados):
        if dados.get("status_novo") == OSStatus.CONCLUIDA.value:
            return [], None, "", ""
        try:
            label = OSStatus.from_string(dados.get("status_novo")).label
        except ValueError:
            label = dados.get("status_novo")
        return (
            [dados.get("solicitante_id")],
            dados.get("alterado_por_id"),
            f"{self._os(dados)} atualizada",
            f"O status da sua O.S. foi alterado para {label}.",
        )

    def _regra_OSConcluidaEvent(self, dados):
        return (
            [dados.get("solicitante_id")],
            dados.get("concluido_por_id"),
            f"{self._os(dados)} concluída",
            "Sua solicitação de manutenção foi concluída.",
        )

    def _regra_OSReatribuidaEvent(self, dados):
        return (
            [dados.get("tecnico_id")],
            dados.get("reatribuido_por_id"),
            f"{self._os(dados)} atribuída a você",
            "Uma O.S. foi atribuída a você.",
        )

    def _regra_OSComentarioAdicionadoEvent(self, dados):
        return (
            [dados.get("solicitante_id"), dados.get("tecnico_id")],
            dados.get("autor_id"),
            f"Novo comentário na {self._os(dados)}",
            dados.get("conteudo_preview") or "Novo comentário.",
        )

    def _regra_OSSLACriticoEvent(self, dados):
        return (
            self._ids_por_papel(UserRole.COORDENACAO) + [dados.get("tecnico_id")],
            None,
            f"{self._os(dados)} em SLA crítico",
            f"Tempo decorrido ultrapassou o SLA de {dados.get('sla_horas')} horas.",
        )
