"""
Domain Events do Domínio de Ordens de Serviço.

Eventos:
- OSCriadaEvent: Nova O.S. aberta
- OSStatusAlteradoEvent: Status alterado
- OSConcluidaEvent: O.S. concluída
- OSReatribuidaEvent: Setor responsável e/ou técnico alterado
- OSPrioridadeAlteradaEvent: Prioridade alterada
- OSComentarioAdicionadoEvent: Comentário no histórico
- OSSLACriticoEvent: O.S. passou do SLA sem ser finalizada

Uso:
    with uow:
        ordem = ServiceOrderEntity.criar(...)
        repo.save(ordem)
        uow.publish_event(OSCriadaEvent(aggregate_id=ordem.id, ...))

Os handlers em src/adapters/django_app/events/handlers.py transformam
estes eventos em notificações.
"""

from dataclasses import dataclass
from typing import Any, ClassVar, Dict, Optional

from src.core.shared.events import DomainEvent


@dataclass
class OSCriadaEvent(DomainEvent):
    """
    Evento: O.S. foi aberta.

    Handlers típicos:
    - Notificar coordenação
    - Notificar técnicos do setor responsável

    Attributes:
        numero: Número da O.S.
        solicitante_id: Quem abriu
        setor_responsavel_id: Setor responsável (se definido)
        prioridade: Valor da prioridade
        equipamento: Equipamento informado
    """

    aggregate_type: ClassVar[str] = "OrdemServico"

    numero: Optional[int] = None
    solicitante_id: str = ""
    setor_responsavel_id: Optional[str] = None
    prioridade: str = ""
    equipamento: str = ""


@dataclass
class OSStatusAlteradoEvent(DomainEvent):
    """
    Evento: Status da O.S. foi alterado.

    Handlers típicos:
    - Notificar o solicitante
    """

    aggregate_type: ClassVar[str] = "OrdemServico"

    numero: Optional[int] = None
    solicitante_id: str = ""
    status_anterior: str = ""
    status_novo: str = ""
    alterado_por_id: str = ""


@dataclass
class OSConcluidaEvent(DomainEvent):
    """
    Evento: O.S. foi concluída.

    Attributes:
        tempo_resolucao_horas: Horas entre abertura e conclusão
        dentro_sla: Se foi concluída dentro do SLA
    """

    aggregate_type: ClassVar[str] = "OrdemServico"

    numero: Optional[int] = None
    solicitante_id: str = ""
    concluido_por_id: str = ""
    tempo_resolucao_horas: Optional[float] = None
    dentro_sla: bool = True


@dataclass
class OSReatribuidaEvent(DomainEvent):
    """
    Evento: O.S. foi movida para outro setor responsável e/ou técnico.

    Handlers típicos:
    - Notificar o novo técnico
    """

    aggregate_type: ClassVar[str] = "OrdemServico"

    numero: Optional[int] = None
    setor_responsavel_id: Optional[str] = None
    tecnico_id: Optional[str] = None
    tecnico_anterior_id: Optional[str] = None
    reatribuido_por_id: str = ""


@dataclass
class OSPrioridadeAlteradaEvent(DomainEvent):
    """Evento: Prioridade da O.S. foi alterada (SLA recalculado)."""

    aggregate_type: ClassVar[str] = "OrdemServico"

    numero: Optional[int] = None
    prioridade_anterior: str = ""
    prioridade_nova: str = ""
    alterado_por_id: str = ""


@dataclass
class OSComentarioAdicionadoEvent(DomainEvent):
    """
    Evento: Comentário adicionado ao histórico.

    Attributes:
        autor_id: Autor do comentário (não é notificado)
        solicitante_id: Solicitante da O.S.
        tecnico_id: Técnico atribuído (se houver)
        conteudo_preview: Primeiros 100 caracteres do comentário
    """

    aggregate_type: ClassVar[str] = "OrdemServico"

    numero: Optional[int] = None
    autor_id: str = ""
    solicitante_id: str = ""
    tecnico_id: Optional[str] = None
    conteudo_preview: str = ""


@dataclass
class OSSLACriticoEvent(DomainEvent):
    """
    Evento: O.S. não finalizada ultrapassou o SLA alvo.

    Disparado pela verificação periódica (Celery beat).
    """

    aggregate_type: ClassVar[str] = "OrdemServico"

    numero: Optional[int] = None
    sla_horas: int = 0
    horas_decorridas: float = 0.0
    tecnico_id: Optional[str] = None

    def _get_event_data(self) -> Dict[str, Any]:
        data = super()._get_event_data()
        data["horas_decorridas"] = round(self.horas_decorridas, 2)
        return data


EVENTOS_OS = {
    cls.__name__: cls
    for cls in (
        OSCriadaEvent,
        OSStatusAlteradoEvent,
        OSConcluidaEvent,
        OSReatribuidaEvent,
        OSPrioridadeAlteradaEvent,
        OSComentarioAdicionadoEvent,
        OSSLACriticoEvent,
    )
}
