"""
Entidades do Domínio de Ordens de Serviço.

Entidades:
- ServiceOrderEntity: Agregado principal (tabela service_orders)
- OSUpdateEntity: Comentário/atualização de uma O.S. (tabela os_updates)
- OSStatus, OSPriority, OSCategory, MaintenanceType: Enums do domínio

Regras de Negócio Encapsuladas:
- Validação dos campos obrigatórios na abertura
- SLA (horas) derivado da prioridade
- Status é um enum plano: qualquer valor pode ser atribuído
- Data de conclusão acompanha o status CONCLUIDA
- Verificação de SLA crítico baseada no tempo decorrido
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import ClassVar, Optional
import uuid

from src.core.shared.exceptions import ValidationError
from src.core.shared.tempo import agora


_NOMES_TIPO = {
    "OSStatus": "Status",
    "OSPriority": "Prioridade",
    "OSCategory": "Categoria",
    "MaintenanceType": "Tipo de manutenção",
}


class _EnumComLabel(Enum):
    """Base para enums persistidos pelo valor e exibidos pelo label."""

    @classmethod
    def from_string(cls, value):
        """
        Converte string para enum, aceitando o nome (EM_ANDAMENTO),
        o valor ("em_andamento") ou o label ("Em andamento").

        Raises:
            ValueError: Se valor inválido
        """
        if isinstance(value, cls):
            return value

        texto = str(value or "").strip()

        try:
            return cls[texto.upper().replace(" ", "_")]
        except KeyError:
            pass

        for item in cls:
            if item.value == texto.lower() or item.label.lower() == texto.lower():
                return item

        raise ValueError(f"{_NOMES_TIPO.get(cls.__name__, cls.__name__)} inválido(a): {value}")

    @classmethod
    def choices(cls):
        """Pares (valor, label) para forms e models."""
        return [(item.value, item.label) for item in cls]


class OSStatus(_EnumComLabel):
    """
    Estados de uma O.S.

    Não há fluxo obrigatório entre estados: técnicos e coordenação
    podem definir qualquer status a partir de qualquer outro.
    """

    ABERTA = "aberta"
    EM_ANDAMENTO = "em_andamento"
    CONCLUIDA = "concluida"
    CANCELADA = "cancelada"

    @property
    def label(self) -> str:
        labels = {
            OSStatus.ABERTA: "Aberta",
            OSStatus.EM_ANDAMENTO: "Em andamento",
            OSStatus.CONCLUIDA: "Concluída",
            OSStatus.CANCELADA: "Cancelada",
        }
        return labels[self]

    @property
    def finalizado(self) -> bool:
        return self in (OSStatus.CONCLUIDA, OSStatus.CANCELADA)


class OSPriority(_EnumComLabel):
    """
    Prioridades com SLA associado.

    SLA por Prioridade:
        EMERGENCIAL: 4 horas
        URGENTE: 24 horas
        NAO_URGENTE: 72 horas

    O valor legado "normal" (usado pelo formulário antigo de abertura)
    equivale a NAO_URGENTE.
    """

    EMERGENCIAL = "emergencial"
    URGENTE = "urgente"
    NAO_URGENTE = "nao_urgente"

    @property
    def label(self) -> str:
        labels = {
            OSPriority.EMERGENCIAL: "Emergencial",
            OSPriority.URGENTE: "Urgente",
            OSPriority.NAO_URGENTE: "Não urgente",
        }
        return labels[self]

    @property
    def sla_horas(self) -> int:
        """Retorna horas de SLA para esta prioridade."""
        sla_map = {
            OSPriority.EMERGENCIAL: 4,
            OSPriority.URGENTE: 24,
            OSPriority.NAO_URGENTE: 72,
        }
        return sla_map[self]

    @classmethod
    def from_string(cls, value):
        if str(value or "").strip().lower() == "normal":
            return cls.NAO_URGENTE
        return super().from_string(value)


class OSCategory(_EnumComLabel):
    """Categorias de manutenção."""

    ELETRICA = "eletrica"
    HIDRAULICA = "hidraulica"
    EQUIPAMENTO_MEDICO = "equipamento_medico"
    OUTROS = "outros"

    @property
    def label(self) -> str:
        labels = {
            OSCategory.ELETRICA: "Elétrica",
            OSCategory.HIDRAULICA: "Hidráulica",
            OSCategory.EQUIPAMENTO_MEDICO: "Equipamento Médico",
            OSCategory.OUTROS: "Outros",
        }
        return labels[self]


class MaintenanceType(_EnumComLabel):
    """Tipos de manutenção."""

    CORRETIVA = "corretiva"
    PREVENTIVA = "preventiva"
    INSTALACAO = "instalacao"

    @property
    def label(self) -> str:
        labels = {
            MaintenanceType.CORRETIVA: "Corretiva",
            MaintenanceType.PREVENTIVA: "Preventiva",
            MaintenanceType.INSTALACAO: "Instalação",
        }
        return labels[self]


@dataclass
class ServiceOrderEntity:
    """
    Entidade de Domínio: Ordem de Serviço.

    Invariantes:
    - Categoria, setor, equipamento, descrição e solicitante são obrigatórios
    - Equipamento com no máximo 200 caracteres, descrição com no máximo 5000
    - sla_horas acompanha a prioridade
    - concluido_em só é preenchido enquanto o status é CONCLUIDA

    Attributes:
        id: Identificador único (UUID)
        numero: Número sequencial exibido ao usuário (atribuído na persistência)
        categoria: Categoria de manutenção
        setor_id: Setor de origem da solicitação
        setor_responsavel_id: Setor responsável pelo atendimento
        equipamento: Equipamento/local com problema
        descricao: Descrição do problema
        prioridade: Prioridade (define o SLA)
        status: Estado atual
        tipo_manutencao: Corretiva, preventiva ou instalação
        solicitante_id: Usuário que abriu a O.S.
        tecnico_id: Técnico atribuído
        foto_url: Foto anexada na abertura
        sla_horas: Horas alvo para resolução
        concluido_em: Momento da conclusão

    Os campos *_nome são somente leitura, preenchidos pelo repositório
    para exibição e busca.

    Example:
        ordem = ServiceOrderEntity.criar(
            categoria=OSCategory.ELETRICA,
            setor_id="setor-uti",
            equipamento="Tomada leito 3",
            descricao="Tomada sem energia",
            solicitante_id="42",
            urgente=True,
        )
        ordem.alterar_status(OSStatus.CONCLUIDA)
    """

    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    numero: Optional[int] = None

    categoria: OSCategory = OSCategory.OUTROS
    setor_id: str = ""
    setor_responsavel_id: Optional[str] = None
    equipamento: str = ""
    descricao: str = ""

    prioridade: OSPriority = OSPriority.NAO_URGENTE
    status: OSStatus = OSStatus.ABERTA
    tipo_manutencao: MaintenanceType = MaintenanceType.CORRETIVA

    solicitante_id: str = ""
    tecnico_id: Optional[str] = None

    foto_url: Optional[str] = None
    sla_horas: Optional[int] = None

    criado_em: datetime = field(default_factory=agora)
    atualizado_em: datetime = field(default_factory=agora)
    concluido_em: Optional[datetime] = None

    setor_nome: Optional[str] = field(default=None, compare=False)
    setor_responsavel_nome: Optional[str] = field(default=None, compare=False)
    solicitante_nome: Optional[str] = field(default=None, compare=False)
    tecnico_nome: Optional[str] = field(default=None, compare=False)

    EQUIPAMENTO_MAX_LENGTH: ClassVar[int] = 200
    DESCRICAO_MAX_LENGTH: ClassVar[int] = 5000
    SLA_PADRAO_HORAS: ClassVar[int] = 24

    @classmethod
    def criar(
        cls,
        categoria,
        setor_id: str,
        equipamento: str,
        descricao: str,
        solicitante_id: str,
        urgente: bool = False,
        prioridade: Optional[OSPriority] = None,
        tipo_manutencao: MaintenanceType = MaintenanceType.CORRETIVA,
        setor_responsavel_id: Optional[str] = None,
        foto_url: Optional[str] = None,
        sla_horas: Optional[int] = None,
    ) -> "ServiceOrderEntity":
        """
        Factory method para abrir uma O.S. com validações.

        Args:
            categoria: OSCategory ou string equivalente
            setor_id: Setor de origem
            equipamento: Equipamento/local (max 200 caracteres)
            descricao: Descrição do problema (max 5000 caracteres)
            solicitante_id: Usuário que abre a O.S.
            urgente: Chave "urgente" do formulário (URGENTE ou NAO_URGENTE)
            prioridade: Prioridade explícita; tem precedência sobre `urgente`
            tipo_manutencao: Tipo de manutenção (default: CORRETIVA)
            setor_responsavel_id: Setor que vai atender (opcional)
            foto_url: Foto já enviada ao storage (opcional)
            sla_horas: Sobrescreve o SLA da prioridade (configuração)

        Raises:
            ValidationError: Se dados de entrada inválidos
        """
        categoria = cls._validar_categoria(categoria)
        cls._validar_obrigatorio(setor_id, "setor_id", "Setor é obrigatório")
        cls._validar_obrigatorio(
            solicitante_id, "solicitante_id", "Solicitante é obrigatório"
        )
        cls._validar_texto(
            equipamento, "equipamento", "Equipamento", cls.EQUIPAMENTO_MAX_LENGTH
        )
        cls._validar_texto(
            descricao, "descricao", "Descrição", cls.DESCRICAO_MAX_LENGTH
        )

        if prioridade is None:
            prioridade = OSPriority.URGENTE if urgente else OSPriority.NAO_URGENTE

        ordem = cls(
            categoria=categoria,
            setor_id=str(setor_id),
            setor_responsavel_id=str(setor_responsavel_id) if setor_responsavel_id else None,
            equipamento=equipamento.strip(),
            descricao=descricao.strip(),
            prioridade=prioridade,
            status=OSStatus.ABERTA,
            tipo_manutencao=tipo_manutencao or MaintenanceType.CORRETIVA,
            solicitante_id=str(solicitante_id),
            foto_url=foto_url or None,
            sla_horas=sla_horas or prioridade.sla_horas,
        )
        ordem.atualizado_em = ordem.criado_em
        return ordem

    @staticmethod
    def _validar_categoria(categoria) -> OSCategory:
        if not categoria:
            raise ValidationError("Categoria é obrigatória", field="categoria")
        try:
            return OSCategory.from_string(categoria)
        except ValueError as e:
            raise ValidationError(str(e), field="categoria")

    @staticmethod
    def _validar_obrigatorio(valor, campo: str, mensagem: str) -> None:
        if not valor or not str(valor).strip():
            raise ValidationError(mensagem, field=campo)

    @staticmethod
    def _validar_texto(valor: str, campo: str, nome: str, maximo: int) -> None:
        if not valor or not valor.strip():
            raise ValidationError(f"{nome} é obrigatório(a)", field=campo)
        if len(valor.strip()) > maximo:
            raise ValidationError(
                f"{nome} deve ter no máximo {maximo} caracteres",
                field=campo
            )

    def alterar_status(self, novo_status: OSStatus, momento: Optional[datetime] = None) -> bool:
        """
        Define o status da O.S.

        Não há validação de transição. Ao concluir, registra a data
        de conclusão; ao sair de CONCLUIDA, a data é limpa.

        Returns:
            False se o status já era o informado (nada alterado)
        """
        if novo_status == self.status:
            return False

        momento = momento or agora()
        self.status = novo_status
        self.concluido_em = momento if novo_status == OSStatus.CONCLUIDA else None
        self._atualizar_timestamp(momento)
        return True

    def reatribuir(
        self,
        setor_responsavel_id: Optional[str] = None,
        tecnico_id: Optional[str] = None,
    ) -> None:
        """
        Move a O.S. para outro setor responsável e/ou técnico.

        Raises:
            ValidationError: Se nenhum destino informado
        """
        if not setor_responsavel_id and not tecnico_id:
            raise ValidationError(
                "Informe o setor responsável ou o técnico",
                field="setor_responsavel_id"
            )

        if setor_responsavel_id:
            self.setor_responsavel_id = str(setor_responsavel_id)
            self.setor_responsavel_nome = None
        if tecnico_id:
            self.tecnico_id = str(tecnico_id)
            self.tecnico_nome = None
        self._atualizar_timestamp()

    def alterar_prioridade(
        self,
        nova_prioridade: OSPriority,
        sla_horas: Optional[int] = None,
    ) -> bool:
        """Altera prioridade e recalcula SLA."""
        if nova_prioridade == self.prioridade:
            return False

        self.prioridade = nova_prioridade
        self.sla_horas = sla_horas or nova_prioridade.sla_horas
        self._atualizar_timestamp()
        return True

    def anexar_foto(self, url: str) -> None:
        if not url or not url.strip():
            raise ValidationError("URL da foto é obrigatória", field="foto_url")
        self.foto_url = url.strip()
        self._atualizar_timestamp()

    def remover_foto(self) -> None:
        self.foto_url = None
        self._atualizar_timestamp()

    def _atualizar_timestamp(self, momento: Optional[datetime] = None) -> None:
        self.atualizado_em = momento or agora()

    def horas_decorridas(self, momento: Optional[datetime] = None) -> float:
        """Horas desde a abertura até `momento` (default: agora)."""
        momento = momento or agora()
        return (momento - self.criado_em).total_seconds() / 3600

    def em_sla_critico(self, momento: Optional[datetime] = None) -> bool:
        """
        O.S. não finalizada cujo tempo decorrido passou do SLA alvo.

        Sem SLA definido, usa 24 horas.
        """
        if self.status.finalizado:
            return False
        limite = self.sla_horas or self.SLA_PADRAO_HORAS
        return self.horas_decorridas(momento) > limite

    @property
    def tempo_resolucao_horas(self) -> Optional[float]:
        """Horas entre abertura e conclusão; None se não concluída."""
        if not self.concluido_em:
            return None
        return (self.concluido_em - self.criado_em).total_seconds() / 3600

    @property
    def esta_atribuida(self) -> bool:
        return self.tecnico_id is not None

    def __repr__(self) -> str:
        return (
            f"ServiceOrderEntity("
            f"numero={self.numero}, "
            f"equipamento='{self.equipamento[:20]}', "
            f"status={self.status.value}, "
            f"prioridade={self.prioridade.value}"
            f")"
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ServiceOrderEntity):
            return False
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)


@dataclass
class OSUpdateEntity:
    """
    Comentário registrado no histórico de uma O.S.

    Attributes:
        ordem_id: O.S. comentada
        autor_id: Usuário autor do comentário
        comentario: Texto (obrigatório, max 2000 caracteres)
        autor_nome: Nome do autor (somente leitura, para exibição)
    """

    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    ordem_id: str = ""
    autor_id: str = ""
    comentario: str = ""
    criado_em: datetime = field(default_factory=agora)
    autor_nome: Optional[str] = field(default=None, compare=False)

    COMENTARIO_MAX_LENGTH: ClassVar[int] = 2000

    @classmethod
    def criar(cls, ordem_id: str, autor_id: str, comentario: str) -> "OSUpdateEntity":
        """
        Raises:
            ValidationError: Se comentário vazio ou longo demais
        """
        if not comentario or not comentario.strip():
            raise ValidationError("Comentário não pode ser vazio", field="comentario")
        if len(comentario.strip()) > cls.COMENTARIO_MAX_LENGTH:
            raise ValidationError(
                f"Comentário deve ter no máximo {cls.COMENTARIO_MAX_LENGTH} caracteres",
                field="comentario"
            )
        if not autor_id:
            raise ValidationError("Autor é obrigatório", field="autor_id")

        return cls(
            ordem_id=str(ordem_id),
            autor_id=str(autor_id),
            comentario=comentario.strip(),
        )
