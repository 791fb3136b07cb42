"""
Entidades de Cadastro.

Entidades:
- SetorEntity: Setor de origem das solicitações (tabela sectors)
- SetorResponsavelEntity: Setor que atende as O.S. (tabela service_departments)
- PerfilEntity: Perfil do usuário (tabela profiles)
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import ClassVar, Optional
import re
import uuid

from src.core.acesso import UserRole
from src.core.shared.exceptions import ValidationError
from src.core.shared.tempo import agora


TELEFONE_REGEX = re.compile(r"^\(\d{2}\) \d{4,5}-\d{4}$")
EMAIL_REGEX = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def _validar_nome(nome: str, minimo: int, maximo: int, campo: str = "nome") -> str:
    if not nome or not nome.strip():
        raise ValidationError("Nome é obrigatório", field=campo)
    nome_limpo = nome.strip()
    if len(nome_limpo) < minimo:
        raise ValidationError(
            f"Nome deve ter pelo menos {minimo} caracteres",
            field=campo
        )
    if len(nome_limpo) > maximo:
        raise ValidationError(
            f"Nome deve ter no máximo {maximo} caracteres",
            field=campo
        )
    return nome_limpo


@dataclass
class SetorEntity:
    """
    Setor de origem (ex: UTI, Recepção).

    Invariantes:
    - Nome entre 2 e 100 caracteres
    - Nome único sem diferenciar maiúsculas (garantido pelo use case)
    - Setor inativo não aparece no formulário de nova O.S.
    """

    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    nome: str = ""
    ativo: bool = True
    criado_por_id: Optional[str] = None
    criado_em: datetime = field(default_factory=agora)

    NOME_MIN_LENGTH: ClassVar[int] = 2
    NOME_MAX_LENGTH: ClassVar[int] = 100

    @classmethod
    def criar(
        cls,
        nome: str,
        criado_por_id: Optional[str] = None,
        ativo: bool = True,
    ) -> "SetorEntity":
        return cls(
            nome=_validar_nome(nome, cls.NOME_MIN_LENGTH, cls.NOME_MAX_LENGTH),
            ativo=ativo,
            criado_por_id=criado_por_id,
        )

    def renomear(self, nome: str) -> None:
        self.nome = _validar_nome(nome, self.NOME_MIN_LENGTH, self.NOME_MAX_LENGTH)

    def alternar_status(self) -> bool:
        """Ativa/desativa o setor; retorna o novo estado."""
        self.ativo = not self.ativo
        return self.ativo


@dataclass
class SetorResponsavelEntity:
    """
    Setor responsável pelo atendimento (ex: Manutenção Elétrica).

    Invariantes:
    - Nome entre 2 e 100 caracteres
    - Descrição opcional com no máximo 500 caracteres
    """

    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    nome: str = ""
    descricao: Optional[str] = None
    ativo: bool = True
    criado_por_id: Optional[str] = None
    criado_em: datetime = field(default_factory=agora)

    NOME_MIN_LENGTH: ClassVar[int] = 2
    NOME_MAX_LENGTH: ClassVar[int] = 100
    DESCRICAO_MAX_LENGTH: ClassVar[int] = 500

    @classmethod
    def criar(
        cls,
        nome: str,
        descricao: Optional[str] = None,
        criado_por_id: Optional[str] = None,
        ativo: bool = True,
    ) -> "SetorResponsavelEntity":
        return cls(
            nome=_validar_nome(nome, cls.NOME_MIN_LENGTH, cls.NOME_MAX_LENGTH),
            descricao=cls._validar_descricao(descricao),
            ativo=ativo,
            criado_por_id=criado_por_id,
        )

    @classmethod
    def _validar_descricao(cls, descricao: Optional[str]) -> Optional[str]:
        if not descricao or not descricao.strip():
            return None
        if len(descricao.strip()) > cls.DESCRICAO_MAX_LENGTH:
            raise ValidationError(
                f"Descrição deve ter no máximo {cls.DESCRICAO_MAX_LENGTH} caracteres",
                field="descricao"
            )
        return descricao.strip()

    def atualizar(self, nome: str, descricao: Optional[str]) -> None:
        self.nome = _validar_nome(nome, self.NOME_MIN_LENGTH, self.NOME_MAX_LENGTH)
        self.descricao = self._validar_descricao(descricao)

    def alternar_status(self) -> bool:
        self.ativo = not self.ativo
        return self.ativo


@dataclass
class PerfilEntity:
    """
    Perfil de usuário.

    Invariantes:
    - Nome completo com pelo menos 3 caracteres
    - Email válido
    - Telefone opcional no formato (00) 0000-0000 ou (00) 00000-0000

    Attributes:
        usuario_id: ID do usuário de autenticação
        papel: Papel de acesso (default: SOLICITANTE)
        setor_responsavel_id: Setor responsável do técnico
    """

    usuario_id: str = ""
    nome_completo: str = ""
    email: str = ""
    telefone: Optional[str] = None
    avatar_url: Optional[str] = None
    papel: UserRole = UserRole.SOLICITANTE
    setor_responsavel_id: Optional[str] = None
    criado_em: datetime = field(default_factory=agora)
    atualizado_em: datetime = field(default_factory=agora)

    NOME_MIN_LENGTH: ClassVar[int] = 3
    NOME_MAX_LENGTH: ClassVar[int] = 150

    @classmethod
    def criar(
        cls,
        usuario_id: str,
        nome_completo: str,
        email: str,
        papel: UserRole = UserRole.SOLICITANTE,
    ) -> "PerfilEntity":
        if not usuario_id:
            raise ValidationError("Usuário é obrigatório", field="usuario_id")
        return cls(
            usuario_id=str(usuario_id),
            nome_completo=_validar_nome(
                nome_completo, cls.NOME_MIN_LENGTH, cls.NOME_MAX_LENGTH, "nome_completo"
            ),
            email=cls._validar_email(email),
            papel=papel,
        )

    @staticmethod
    def _validar_email(email: str) -> str:
        if not email or not EMAIL_REGEX.match(email.strip()):
            raise ValidationError("Email inválido", field="email")
        return email.strip().lower()

    @staticmethod
    def _validar_telefone(telefone: Optional[str]) -> Optional[str]:
        if not telefone or not telefone.strip():
            return None
        if not TELEFONE_REGEX.match(telefone.strip()):
            raise ValidationError(
                "Telefone deve estar no formato (00) 00000-0000",
                field="telefone"
            )
        return telefone.strip()

    def atualizar_dados(
        self,
        nome_completo: str,
        email: str,
        telefone: Optional[str] = None,
    ) -> None:
        self.nome_completo = _validar_nome(
            nome_completo, self.NOME_MIN_LENGTH, self.NOME_MAX_LENGTH, "nome_completo"
        )
        self.email = self._validar_email(email)
        self.telefone = self._validar_telefone(telefone)
        self._atualizar_timestamp()

    def alterar_papel(
        self,
        papel: UserRole,
        setor_responsavel_id: Optional[str] = None,
    ) -> None:
        """
        Altera o papel. Só técnicos mantêm setor responsável.
        """
        self.papel = papel
        if papel == UserRole.TECNICO:
            self.setor_responsavel_id = setor_responsavel_id or self.setor_responsavel_id
        else:
            self.setor_responsavel_id = None
        self._atualizar_timestamp()

    def definir_avatar(self, url: Optional[str]) -> Optional[str]:
        """Troca o avatar; retorna a URL anterior (para remoção no storage)."""
        anterior = self.avatar_url
        self.avatar_url = url or None
        self._atualizar_timestamp()
        return anterior

    def _atualizar_timestamp(self) -> None:
        self.atualizado_em = agora()

    @property
    def iniciais(self) -> str:
        partes = self.nome_completo.split()
        return "".join(p[0] for p in partes[:2]).upper()
