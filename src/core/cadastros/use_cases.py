"""
Use Cases de Cadastro.

Setores e setores responsáveis (coordenação):
- CriarSetorService / AtualizarSetorService / AlternarStatusSetorService
- ExcluirSetorService / ListarSetoresService
- Equivalentes *SetorResponsavel*

Usuários e perfis:
- CriarPerfilService: perfil inicial no cadastro (papel solicitante)
- ObterPerfilService / AtualizarPerfilService / AtualizarAvatarService
- ListarUsuariosService / ListarTecnicosService
- AlterarPapelUsuarioService (coordenação)
"""

from typing import List, Optional

from src.core.acesso import Ator, Permissao, UserRole
from src.core.shared.interfaces import UnitOfWork
from src.core.shared.exceptions import (
    BusinessRuleViolationError,
    EntityNotFoundError,
    ValidationError,
)
from src.core.ordens_servico.ports import OrdemServicoRepository

from .entities import SetorEntity, SetorResponsavelEntity, PerfilEntity
from .ports import SetorRepository, SetorResponsavelRepository, PerfilRepository
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


def _obter(repo, item_id: str, entity_type: str, rotulo: str):
    item = repo.get_by_id(item_id) if item_id else None
    if not item:
        raise EntityNotFoundError(
            f"{rotulo} {item_id} não encontrado",
            entity_type=entity_type,
            entity_id=item_id
        )
    return item


def _garantir_nome_unico(repo, nome: str, atual_id: Optional[str] = None) -> None:
    existente = repo.get_by_nome(nome)
    if existente and existente.id != atual_id:
        raise ValidationError(f"Já existe um cadastro com o nome '{nome.strip()}'", field="nome")


# =============================================================================
# Setores
# =============================================================================

class CriarSetorService:
    """
    Use Case: Cadastrar setor de origem.

    Example:
        service = CriarSetorService(setor_repo, uow)
        setor = service.execute(SalvarSetorInputDTO(nome="UTI"), ator)
    """

    def __init__(self, setor_repo: SetorRepository, uow: UnitOfWork):
        self.setor_repo = setor_repo
        self.uow = uow

    def execute(self, input_dto: SalvarSetorInputDTO, ator: Ator) -> SetorOutputDTO:
        """
        Raises:
            PermissionDeniedError: Se não é coordenação
            ValidationError: Se nome inválido ou duplicado
        """
        ator.exigir(Permissao.ADMIN_GERENCIAR)

        with self.uow:
            setor = SetorEntity.criar(
                nome=input_dto.nome,
                criado_por_id=ator.usuario_id,
                ativo=input_dto.ativo,
            )
            _garantir_nome_unico(self.setor_repo, setor.nome)
            self.setor_repo.save(setor)

        return SetorOutputDTO.from_entity(setor)


class AtualizarSetorService:
    def __init__(self, setor_repo: SetorRepository, uow: UnitOfWork):
        self.setor_repo = setor_repo
        self.uow = uow

    def execute(self, input_dto: SalvarSetorInputDTO, ator: Ator) -> SetorOutputDTO:
        ator.exigir(Permissao.ADMIN_GERENCIAR)

        with self.uow:
            setor = _obter(self.setor_repo, input_dto.setor_id, "Setor", "Setor")
            setor.renomear(input_dto.nome)
            _garantir_nome_unico(self.setor_repo, setor.nome, setor.id)
            setor.ativo = input_dto.ativo
            self.setor_repo.save(setor)

        return SetorOutputDTO.from_entity(setor)


class AlternarStatusSetorService:
    def __init__(self, setor_repo: SetorRepository, uow: UnitOfWork):
        self.setor_repo = setor_repo
        self.uow = uow

    def execute(self, setor_id: str, ator: Ator) -> SetorOutputDTO:
        ator.exigir(Permissao.ADMIN_GERENCIAR)

        with self.uow:
            setor = _obter(self.setor_repo, setor_id, "Setor", "Setor")
            setor.alternar_status()
            self.setor_repo.save(setor)

        return SetorOutputDTO.from_entity(setor)


class ExcluirSetorService:
    """
    Use Case: Excluir setor.

    Setor referenciado por O.S. não pode ser excluído (desative-o).
    """

    def __init__(
        self,
        setor_repo: SetorRepository,
        os_repo: OrdemServicoRepository,
        uow: UnitOfWork,
    ):
        self.setor_repo = setor_repo
        self.os_repo = os_repo
        self.uow = uow

    def execute(self, setor_id: str, ator: Ator) -> None:
        """
        Raises:
            BusinessRuleViolationError: Se há O.S. vinculadas
        """
        ator.exigir(Permissao.ADMIN_GERENCIAR)

        with self.uow:
            setor = _obter(self.setor_repo, setor_id, "Setor", "Setor")

            if self.os_repo.count_by_setor(setor.id) > 0:
                raise BusinessRuleViolationError(
                    f"Setor '{setor.nome}' possui O.S. vinculadas; desative-o em vez de excluir",
                    rule="setor_em_uso"
                )

            self.setor_repo.delete(setor.id)


class ListarSetoresService:
    def __init__(self, setor_repo: SetorRepository):
        self.setor_repo = setor_repo

    def execute(self, apenas_ativos: bool = False) -> List[SetorOutputDTO]:
        return [
            SetorOutputDTO.from_entity(s)
            for s in self.setor_repo.list_all(apenas_ativos=apenas_ativos)
        ]


# =============================================================================
# Setores Responsáveis
# =============================================================================

class CriarSetorResponsavelService:
    def __init__(self, setor_responsavel_repo: SetorResponsavelRepository, uow: UnitOfWork):
        self.setor_responsavel_repo = setor_responsavel_repo
        self.uow = uow

    def execute(
        self,
        input_dto: SalvarSetorResponsavelInputDTO,
        ator: Ator,
    ) -> SetorResponsavelOutputDTO:
        ator.exigir(Permissao.ADMIN_GERENCIAR)

        with self.uow:
            setor = SetorResponsavelEntity.criar(
                nome=input_dto.nome,
                descricao=input_dto.descricao,
                criado_por_id=ator.usuario_id,
                ativo=input_dto.ativo,
            )
            _garantir_nome_unico(self.setor_responsavel_repo, setor.nome)
            self.setor_responsavel_repo.save(setor)

        return SetorResponsavelOutputDTO.from_entity(setor)


class AtualizarSetorResponsavelService:
    def __init__(self, setor_responsavel_repo: SetorResponsavelRepository, uow: UnitOfWork):
        self.setor_responsavel_repo = setor_responsavel_repo
        self.uow = uow

    def execute(
        self,
        input_dto: SalvarSetorResponsavelInputDTO,
        ator: Ator,
    ) -> SetorResponsavelOutputDTO:
        ator.exigir(Permissao.ADMIN_GERENCIAR)

        with self.uow:
            setor = _obter(
                self.setor_responsavel_repo,
                input_dto.setor_responsavel_id,
                "SetorResponsavel",
                "Setor responsável",
            )
            setor.atualizar(input_dto.nome, input_dto.descricao)
            _garantir_nome_unico(self.setor_responsavel_repo, setor.nome, setor.id)
            setor.ativo = input_dto.ativo
            self.setor_responsavel_repo.save(setor)

        return SetorResponsavelOutputDTO.from_entity(setor)


class AlternarStatusSetorResponsavelService:
    def __init__(self, setor_responsavel_repo: SetorResponsavelRepository, uow: UnitOfWork):
        self.setor_responsavel_repo = setor_responsavel_repo
        self.uow = uow

    def execute(self, setor_responsavel_id: str, ator: Ator) -> SetorResponsavelOutputDTO:
        ator.exigir(Permissao.ADMIN_GERENCIAR)

        with self.uow:
            setor = _obter(
                self.setor_responsavel_repo,
                setor_responsavel_id,
                "SetorResponsavel",
                "Setor responsável",
            )
            setor.alternar_status()
            self.setor_responsavel_repo.save(setor)

        return SetorResponsavelOutputDTO.from_entity(setor)


class ExcluirSetorResponsavelService:
    def __init__(
        self,
        setor_responsavel_repo: SetorResponsavelRepository,
        os_repo: OrdemServicoRepository,
        uow: UnitOfWork,
    ):
        self.setor_responsavel_repo = setor_responsavel_repo
        self.os_repo = os_repo
        self.uow = uow

    def execute(self, setor_responsavel_id: str, ator: Ator) -> None:
        ator.exigir(Permissao.ADMIN_GERENCIAR)

        with self.uow:
            setor = _obter(
                self.setor_responsavel_repo,
                setor_responsavel_id,
                "SetorResponsavel",
                "Setor responsável",
            )

            if self.os_repo.count_by_setor_responsavel(setor.id) > 0:
                raise BusinessRuleViolationError(
                    f"Setor responsável '{setor.nome}' possui O.S. vinculadas",
                    rule="setor_responsavel_em_uso"
                )

            self.setor_responsavel_repo.delete(setor.id)


class ListarSetoresResponsaveisService:
    def __init__(self, setor_responsavel_repo: SetorResponsavelRepository):
        self.setor_responsavel_repo = setor_responsavel_repo

    def execute(self, apenas_ativos: bool = False) -> List[SetorResponsavelOutputDTO]:
        return [
            SetorResponsavelOutputDTO.from_entity(s)
            for s in self.setor_responsavel_repo.list_all(apenas_ativos=apenas_ativos)
        ]


# =============================================================================
# Perfis e Usuários
# =============================================================================

def _obter_perfil(perfil_repo: PerfilRepository, usuario_id: str) -> PerfilEntity:
    perfil = perfil_repo.get_by_usuario_id(usuario_id)
    if not perfil:
        raise EntityNotFoundError(
            f"Perfil do usuário {usuario_id} não encontrado",
            entity_type="Perfil",
            entity_id=usuario_id
        )
    return perfil


class CriarPerfilService:
    """
    Use Case: Criar perfil no cadastro de um novo usuário.

    Todo usuário novo entra como solicitante; a coordenação promove
    depois em Administração.
    """

    def __init__(self, perfil_repo: PerfilRepository, uow: UnitOfWork):
        self.perfil_repo = perfil_repo
        self.uow = uow

    def execute(self, input_dto: CriarPerfilInputDTO) -> PerfilOutputDTO:
        with self.uow:
            perfil = PerfilEntity.criar(
                usuario_id=input_dto.usuario_id,
                nome_completo=input_dto.nome_completo,
                email=input_dto.email,
            )
            self.perfil_repo.save(perfil)

        return PerfilOutputDTO.from_entity(perfil)


class ObterPerfilService:
    def __init__(self, perfil_repo: PerfilRepository):
        self.perfil_repo = perfil_repo

    def execute(self, usuario_id: str) -> PerfilOutputDTO:
        return PerfilOutputDTO.from_entity(_obter_perfil(self.perfil_repo, usuario_id))


class AtualizarPerfilService:
    """
    Use Case: Usuário edita o próprio perfil (nome, email, telefone).
    """

    def __init__(self, perfil_repo: PerfilRepository, uow: UnitOfWork):
        self.perfil_repo = perfil_repo
        self.uow = uow

    def execute(self, input_dto: AtualizarPerfilInputDTO, ator: Ator) -> PerfilOutputDTO:
        with self.uow:
            perfil = _obter_perfil(self.perfil_repo, ator.usuario_id)
            perfil.atualizar_dados(
                nome_completo=input_dto.nome_completo,
                email=input_dto.email,
                telefone=input_dto.telefone,
            )
            self.perfil_repo.save(perfil)

        return PerfilOutputDTO.from_entity(perfil)


class AtualizarAvatarService:
    """
    Use Case: Definir ou remover o avatar do próprio perfil.

    O arquivo já foi gravado no storage pelo adapter; aqui só a URL
    é registrada. Retorna a URL anterior para que o adapter apague o
    arquivo antigo.
    """

    def __init__(self, perfil_repo: PerfilRepository, uow: UnitOfWork):
        self.perfil_repo = perfil_repo
        self.uow = uow

    def execute(self, avatar_url: Optional[str], ator: Ator) -> Optional[str]:
        with self.uow:
            perfil = _obter_perfil(self.perfil_repo, ator.usuario_id)
            anterior = perfil.definir_avatar(avatar_url)
            self.perfil_repo.save(perfil)

        return anterior


class ListarUsuariosService:
    def __init__(self, perfil_repo: PerfilRepository):
        self.perfil_repo = perfil_repo

    def execute(self, ator: Ator) -> List[PerfilOutputDTO]:
        ator.exigir(Permissao.ADMIN_GERENCIAR)
        return [PerfilOutputDTO.from_entity(p) for p in self.perfil_repo.list_all()]


class ListarTecnicosService:
    """Técnicos disponíveis para reatribuição."""

    def __init__(self, perfil_repo: PerfilRepository):
        self.perfil_repo = perfil_repo

    def execute(
        self,
        ator: Ator,
        setor_responsavel_id: Optional[str] = None,
    ) -> List[PerfilOutputDTO]:
        ator.exigir(Permissao.OS_REATRIBUIR)
        return [
            PerfilOutputDTO.from_entity(p)
            for p in self.perfil_repo.list_by_papel(
                UserRole.TECNICO, setor_responsavel_id=setor_responsavel_id
            )
        ]


class AlterarPapelUsuarioService:
    """
    Use Case: Coordenação altera o papel de um usuário.

    A coordenação não pode rebaixar a si mesma.
    """

    def __init__(self, perfil_repo: PerfilRepository, uow: UnitOfWork):
        self.perfil_repo = perfil_repo
        self.uow = uow

    def execute(self, input_dto: AlterarPapelInputDTO, ator: Ator) -> PerfilOutputDTO:
        """
        Raises:
            PermissionDeniedError: Se não é coordenação
            ValidationError: Se papel inválido
            BusinessRuleViolationError: Se coordenação rebaixando a si mesma
        """
        ator.exigir(Permissao.ADMIN_GERENCIAR)

        try:
            papel = UserRole.from_string(input_dto.papel)
        except ValueError as e:
            raise ValidationError(str(e), field="papel")

        if str(input_dto.usuario_id) == ator.usuario_id and papel != UserRole.COORDENACAO:
            raise BusinessRuleViolationError(
                "Você não pode remover seu próprio acesso de coordenação",
                rule="auto_rebaixamento"
            )

        with self.uow:
            perfil = _obter_perfil(self.perfil_repo, input_dto.usuario_id)
            perfil.alterar_papel(papel, input_dto.setor_responsavel_id)
            self.perfil_repo.save(perfil)

        return PerfilOutputDTO.from_entity(perfil)
