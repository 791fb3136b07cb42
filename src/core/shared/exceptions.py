"""
Exceções de Domínio do Sistema de Ordens de Serviço.

Exceções tipadas permitem que as camadas externas (views HTML, API JSON,
tarefas Celery) traduzam erros de negócio em respostas adequadas sem
conhecer detalhes do Core.

Hierarquia:
    DomainException (base)
    ├── ValidationError (validação de entrada)
    ├── EntityNotFoundError (entidade não existe ou não é visível)
    ├── BusinessRuleViolationError (regra de negócio violada)
    ├── PermissionDeniedError (papel do usuário não permite a ação)
    └── ConcurrencyError (conflito de versão)
"""


class DomainException(Exception):
    """
    Exceção base para todos os erros de domínio.

    Example:
        try:
            service.execute(input_dto)
        except DomainException as e:
            messages.error(request, e.message)
    """

    def __init__(self, message: str, code: str = None):
        self.message = message
        self.code = code or self.__class__.__name__
        super().__init__(self.message)

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"

    def to_dict(self) -> dict:
        """Serializa exceção para dicionário (útil para APIs)."""
        return {
            "error": self.code,
            "message": self.message,
        }


class ValidationError(DomainException):
    """
    Erro de validação de dados de entrada.

    Example:
        if not equipamento.strip():
            raise ValidationError("Equipamento é obrigatório", field="equipamento")
    """

    def __init__(self, message: str, field: str = None):
        self.field = field
        code = f"VALIDATION_ERROR_{field.upper()}" if field else "VALIDATION_ERROR"
        super().__init__(message, code)

    def to_dict(self) -> dict:
        result = super().to_dict()
        if self.field:
            result["field"] = self.field
        return result


class EntityNotFoundError(DomainException):
    """
    Entidade não encontrada.

    Também usada quando a entidade existe mas não é visível para o
    usuário (ex.: solicitante acessando O.S. de outra pessoa), para não
    revelar sua existência.
    """

    def __init__(self, message: str, entity_type: str = None, entity_id: str = None):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(message, "ENTITY_NOT_FOUND")

    def to_dict(self) -> dict:
        result = super().to_dict()
        if self.entity_type:
            result["entity_type"] = self.entity_type
        if self.entity_id:
            result["entity_id"] = self.entity_id
        return result


class BusinessRuleViolationError(DomainException):
    """
    Violação de regra de negócio.

    Example:
        if repo.setor_em_uso(setor_id):
            raise BusinessRuleViolationError(
                "Setor possui O.S. vinculadas",
                rule="setor_em_uso"
            )
    """

    def __init__(self, message: str, rule: str = None):
        self.rule = rule
        super().__init__(message, "BUSINESS_RULE_VIOLATION")

    def to_dict(self) -> dict:
        result = super().to_dict()
        if self.rule:
            result["rule"] = self.rule
        return result


class PermissionDeniedError(DomainException):
    """
    Papel do usuário não permite a operação.

    Attributes:
        permissao: Chave da permissão exigida (ex: "os.alterar_status")
        papel: Papel do usuário que tentou a operação
    """

    def __init__(self, message: str, permissao: str = None, papel: str = None):
        self.permissao = permissao
        self.papel = papel
        super().__init__(message, "PERMISSION_DENIED")

    def to_dict(self) -> dict:
        result = super().to_dict()
        if self.permissao:
            result["permissao"] = self.permissao
        return result


class ConcurrencyError(DomainException):
    """Erro de concorrência/conflito de versão."""

    def __init__(self, message: str):
        super().__init__(message, "CONCURRENCY_ERROR")
