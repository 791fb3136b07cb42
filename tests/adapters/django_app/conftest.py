"""
Fixtures dos testes do adapter Django.

Banco SQLite em memória (settings_test) com as FKs reais: toda O.S.
precisa de setor e solicitante cadastrados. O perfil de cada usuário
é criado pelo signal de post_save.
"""

import uuid
from datetime import timedelta

import pytest

from src.adapters.django_app.ordens_servico.models import (
    ProfileModel,
    RoleChoices,
    SectorModel,
    ServiceDepartmentModel,
)
from src.adapters.django_app.ordens_servico.repositories import DjangoOrdemServicoRepository
from src.config.container import reset_container
from src.core.acesso import Ator, UserRole
from src.core.ordens_servico.entities import ServiceOrderEntity
from src.core.shared.tempo import agora

SENHA = "senha-de-teste-123"


@pytest.fixture(autouse=True)
def reset_di_container():
    """Reset container entre testes."""
    reset_container()
    yield
    reset_container()


@pytest.fixture
def setor(db):
    return SectorModel.objects.create(id=str(uuid.uuid4()), name="UTI")


@pytest.fixture
def setor_responsavel(db):
    return ServiceDepartmentModel.objects.create(id=str(uuid.uuid4()), name="Elétrica")


@pytest.fixture
def criar_usuario(db, django_user_model):
    """
    Factory de usuários com perfil.

    `papel` sobrescreve o papel padrão definido pelo signal.
    """

    def criar(username, papel=None, setor_responsavel=None, superuser=False):
        dados = {"username": username, "email": f"{username}@hospital.org", "password": SENHA}
        if superuser:
            user = django_user_model.objects.create_superuser(**dados)
        else:
            user = django_user_model.objects.create_user(**dados)

        campos = {"full_name": username.title()}
        if papel:
            campos["role"] = papel
        if setor_responsavel:
            campos["service_department"] = setor_responsavel
        ProfileModel.objects.filter(user=user).update(**campos)
        return user

    return criar


@pytest.fixture
def usuario_solicitante(criar_usuario):
    return criar_usuario("ana")


@pytest.fixture
def outro_usuario(criar_usuario):
    return criar_usuario("diego")


@pytest.fixture
def usuario_tecnico(criar_usuario, setor_responsavel):
    return criar_usuario("bruno", RoleChoices.TECNICO, setor_responsavel)


@pytest.fixture
def usuario_coordenacao(criar_usuario):
    return criar_usuario("carla", RoleChoices.COORDENACAO)


@pytest.fixture
def ator_de():
    """Monta o Ator a partir do perfil gravado do usuário."""

    def montar(user):
        perfil = ProfileModel.objects.get(user=user)
        return Ator(
            usuario_id=str(user.pk),
            papel=UserRole.from_string(perfil.role),
            setor_responsavel_id=perfil.service_department_id,
        )

    return montar


@pytest.fixture
def criar_ordem(setor):
    """Grava uma O.S. pelo repositório Django."""
    repo = DjangoOrdemServicoRepository()

    def criar(solicitante, criada_ha_horas=0, **kwargs):
        dados = {
            "categoria": "eletrica",
            "setor_id": setor.id,
            "equipamento": "Monitor leito 3",
            "descricao": "Monitor não liga",
            "solicitante_id": str(solicitante.pk),
        }
        dados.update(kwargs)
        ordem = ServiceOrderEntity.criar(**dados)
        if criada_ha_horas:
            ordem.criado_em = agora() - timedelta(hours=criada_ha_horas)
            ordem.atualizado_em = ordem.criado_em
        repo.save(ordem)
        return ordem

    return criar
