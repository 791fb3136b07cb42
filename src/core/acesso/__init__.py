"""
Controle de acesso por papel.

Papéis (solicitante, técnico, coordenação), mapa estático de permissões
e regras de visibilidade de O.S.
"""

from .papeis import (
    UserRole,
    Permissao,
    Ator,
    tem_permissao,
    exigir_permissao,
    permissoes_do_papel,
)

__all__ = [
    "UserRole",
    "Permissao",
    "Ator",
    "tem_permissao",
    "exigir_permissao",
    "permissoes_do_papel",
]
