"""
Domínio de Ordens de Serviço (O.S.) de manutenção.

Este módulo contém a lógica de negócio das O.S.:
- Entidades (ServiceOrderEntity, OSUpdateEntity e enums)
- Use Cases (abrir, listar, alterar status, reatribuir, comentar)
- Domain Events (OSCriada, OSStatusAlterado, OSConcluida, ...)
- DTOs e Ports

Características do Domínio:
- SLA em horas derivado da prioridade
- Status sem guardas de transição
- Visibilidade por papel aplicada nas consultas
"""

from .entities import (
    ServiceOrderEntity,
    OSUpdateEntity,
    OSStatus,
    OSPriority,
    OSCategory,
    MaintenanceType,
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
from .ports import OrdemServicoRepository, ComentarioRepository
from .use_cases import (
    CriarOSService,
    ObterOSService,
    ListarOSService,
    AlterarStatusOSService,
    ReatribuirOSService,
    AlterarPrioridadeOSService,
    AdicionarComentarioService,
    ListarComentariosService,
    ListarOSSLACriticoService,
    AlertarSLACriticoService,
)

__all__ = [
    # Entities
    "ServiceOrderEntity",
    "OSUpdateEntity",
    "OSStatus",
    "OSPriority",
    "OSCategory",
    "MaintenanceType",
    # Events
    "OSCriadaEvent",
    "OSStatusAlteradoEvent",
    "OSConcluidaEvent",
    "OSReatribuidaEvent",
    "OSPrioridadeAlteradaEvent",
    "OSComentarioAdicionadoEvent",
    "OSSLACriticoEvent",
    # DTOs
    "CriarOSInputDTO",
    "AlterarStatusInputDTO",
    "ReatribuirOSInputDTO",
    "AlterarPrioridadeInputDTO",
    "AdicionarComentarioInputDTO",
    "ListarOSQueryDTO",
    "OSOutputDTO",
    "OSListItemDTO",
    "ComentarioOutputDTO",
    # Ports
    "OrdemServicoRepository",
    "ComentarioRepository",
    # Use Cases
    "CriarOSService",
    "ObterOSService",
    "ListarOSService",
    "AlterarStatusOSService",
    "ReatribuirOSService",
    "AlterarPrioridadeOSService",
    "AdicionarComentarioService",
    "ListarComentariosService",
    "ListarOSSLACriticoService",
    "AlertarSLACriticoService",
]
