"""
Configurações globais do Pytest para o sistema de Ordens de Serviço.

Este arquivo é carregado automaticamente pelo pytest e
fornece fixtures e configurações compartilhadas.
"""

from pathlib import Path

import pytest

from src.core.acesso import Ator, UserRole


@pytest.fixture(scope="session")
def project_root():
    """Retorna o caminho raiz do projeto."""
    return Path(__file__).parent.parent


@pytest.fixture
def solicitante():
    return Ator(usuario_id="10", papel=UserRole.SOLICITANTE)


@pytest.fixture
def outro_solicitante():
    return Ator(usuario_id="11", papel=UserRole.SOLICITANTE)


@pytest.fixture
def tecnico():
    return Ator(usuario_id="20", papel=UserRole.TECNICO, setor_responsavel_id="dep-eletrica")


@pytest.fixture
def coordenacao():
    return Ator(usuario_id="30", papel=UserRole.COORDENACAO)


def pytest_collection_modifyitems(config, items):
    """Testes marcados como integration só rodam com --run-integration."""
    if config.getoption("--run-integration"):
        return

    skip_integration = pytest.mark.skip(reason="use --run-integration para executar")
    for item in items:
        if "integration" in item.keywords:
            item.add_marker(skip_integration)


def pytest_addoption(parser):
    """Adiciona opções de linha de comando."""
    parser.addoption(
        "--run-integration",
        action="store_true",
        default=False,
        help="run integration tests",
    )
