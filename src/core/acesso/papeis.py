"""
Papéis de usuário e mapa de permissões.

Três papéis convivem no sistema:
- SOLICITANTE: abre O.S. e acompanha as próprias solicitações
- TECNICO: atende O.S. do seu setor responsável
- COORDENACAO: visão total, relatórios e administração

As permissões são estáticas (papel → conjunto de chaves). Views usam
`tem_permissao` para esconder botões; use cases usam `exigir_permissao`
para recusar a operação de fato.
"""

from dataclasses import dataclass
from enum import Enum
from typing import FrozenSet, Optional

from src.core.shared.exceptions import PermissionDeniedError


class UserRole(Enum):
    """Papéis de usuário (valores gravados em profiles.role)."""

    SOLICITANTE = "solicitante"
    TECNICO = "tecnico"
    COORDENACAO = "coordenacao"

    @property
    def label(self) -> str:
        labels = {
            UserRole.SOLICITANTE: "Solicitante",
            UserRole.TECNICO: "Técnico de Manutenção",
            UserRole.COORDENACAO: "Coordenação",
        }
        return labels[self]

    @classmethod
    def from_string(cls, value: str) -> "UserRole":
        """
        Converte string (nome ou valor) para enum.

        Raises:
            ValueError: Se papel inválido
        """
        if isinstance(value, cls):
            return value

        try:
            return cls[value.upper()]
        except (KeyError, AttributeError):
            pass

        for role in cls:
            if role.value == str(value).lower():
                return role

        raise ValueError(f"Papel inválido: {value}")


class Permissao:
    """Chaves de permissão."""

    OS_CRIAR = "os.criar"
    OS_COMENTAR = "os.comentar"
    OS_ALTERAR_STATUS = "os.alterar_status"
    OS_REATRIBUIR = "os.reatribuir"
    OS_ALTERAR_PRIORIDADE = "os.alterar_prioridade"
    RELATORIOS_VER = "relatorios.ver"
    ANALYTICS_VER = "analytics.ver"
    ADMIN_GERENCIAR = "admin.gerenciar"


_TODOS = frozenset({Permissao.OS_CRIAR, Permissao.OS_COMENTAR})

_ATENDIMENTO = _TODOS | {Permissao.OS_ALTERAR_STATUS, Permissao.OS_REATRIBUIR}

PERMISSOES_POR_PAPEL = {
    UserRole.SOLICITANTE: _TODOS,
    UserRole.TECNICO: frozenset(_ATENDIMENTO),
    UserRole.COORDENACAO: frozenset(
        _ATENDIMENTO
        | {
            Permissao.OS_ALTERAR_PRIORIDADE,
            Permissao.RELATORIOS_VER,
            Permissao.ANALYTICS_VER,
            Permissao.ADMIN_GERENCIAR,
        }
    ),
}


def permissoes_do_papel(papel) -> FrozenSet[str]:
    """Conjunto de permissões de um papel (aceita enum ou string)."""
    return PERMISSOES_POR_PAPEL[UserRole.from_string(papel)]


def tem_permissao(papel, permissao: str) -> bool:
    """
    Verifica se o papel possui a permissão.

    Papel desconhecido ou vazio nunca tem permissão.
    """
    if not papel:
        return False
    try:
        return permissao in permissoes_do_papel(papel)
    except ValueError:
        return False


def exigir_permissao(papel, permissao: str) -> None:
    """
    Raises:
        PermissionDeniedError: Se o papel não possui a permissão
    """
    if not tem_permissao(papel, permissao):
        raise PermissionDeniedError(
            "Acesso negado",
            permissao=permissao,
            papel=getattr(papel, "value", papel),
        )


@dataclass(frozen=True)
class Ator:
    """
    Usuário autenticado executando uma operação.

    Carrega apenas o necessário para decidir permissões e visibilidade
    de O.S. (o equivalente das políticas de linha do banco).

    Attributes:
        usuario_id: ID do usuário (auth.User.pk como string)
        papel: Papel atual do usuário
        setor_responsavel_id: Setor responsável do técnico (se houver)
    """

    usuario_id: str
    papel: UserRole = UserRole.SOLICITANTE
    setor_responsavel_id: Optional[str] = None

    @property
    def e_coordenacao(self) -> bool:
        return self.papel == UserRole.COORDENACAO

    @property
    def e_tecnico(self) -> bool:
        return self.papel == UserRole.TECNICO

    def pode(self, permissao: str) -> bool:
        return tem_permissao(self.papel, permissao)

    def exigir(self, permissao: str) -> None:
        exigir_permissao(self.papel, permissao)

    def pode_ver(self, ordem) -> bool:
        """
        Regras de visibilidade de uma O.S.:
        - coordenação vê todas
        - qualquer usuário vê as O.S. que abriu
        - técnico vê as atribuídas a ele ou ao seu setor responsável
        """
        if self.e_coordenacao:
            return True
        if ordem.solicitante_id == self.usuario_id:
            return True
        if self.e_tecnico:
            if ordem.tecnico_id and ordem.tecnico_id == self.usuario_id:
                return True
            if (
                self.setor_responsavel_id
                and ordem.setor_responsavel_id == self.setor_responsavel_id
            ):
                return True
        return False
