"""
Cadastros: setores de origem, setores responsáveis e perfis de usuário.
"""

from .entities import SetorEntity, SetorResponsavelEntity, PerfilEntity
from .dtos import (
    SalvarSetorInputDTO,
    SalvarSetorResponsavelInputDTO,
    CriarPerfilInputDTO,
    AtualizarPerfilInputDTO,
    AlterarPapelInputDTO,
    SetorOutputDTO,
    SetorResponsavelOutputDTO,
    PerfilOutputDTO,
)
from .ports import SetorRepository, SetorResponsavelRepository, PerfilRepository
from .use_cases import (
    CriarSetorService,
    AtualizarSetorService,
    AlternarStatusSetorService,
    ExcluirSetorService,
    ListarSetoresService,
    CriarSetorResponsavelService,
    AtualizarSetorResponsavelService,
    AlternarStatusSetorResponsavelService,
    ExcluirSetorResponsavelService,
    ListarSetoresResponsaveisService,
    CriarPerfilService,
    ObterPerfilService,
    AtualizarPerfilService,
    AtualizarAvatarService,
    ListarUsuariosService,
    ListarTecnicosService,
    AlterarPapelUsuarioService,
)

__all__ = [
    "SetorEntity",
    "SetorResponsavelEntity",
    "PerfilEntity",
    "SalvarSetorInputDTO",
    "SalvarSetorResponsavelInputDTO",
    "CriarPerfilInputDTO",
    "AtualizarPerfilInputDTO",
    "AlterarPapelInputDTO",
    "SetorOutputDTO",
    "SetorResponsavelOutputDTO",
    "PerfilOutputDTO",
    "SetorRepository",
    "SetorResponsavelRepository",
    "PerfilRepository",
    "CriarSetorService",
    "AtualizarSetorService",
    "AlternarStatusSetorService",
    "ExcluirSetorService",
    "ListarSetoresService",
    "CriarSetorResponsavelService",
    "AtualizarSetorResponsavelService",
    "AlternarStatusSetorResponsavelService",
    "ExcluirSetorResponsavelService",
    "ListarSetoresResponsaveisService",
    "CriarPerfilService",
    "ObterPerfilService",
    "AtualizarPerfilService",
    "AtualizarAvatarService",
    "ListarUsuariosService",
    "ListarTecnicosService",
    "AlterarPapelUsuarioService",
]
