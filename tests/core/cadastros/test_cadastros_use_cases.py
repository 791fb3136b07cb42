"""
Testes de Cadastros: setores, setores responsáveis e perfis.
"""

import pytest

from src.core.acesso import Ator, UserRole
from src.core.cadastros.dtos import (
    AlterarPapelInputDTO,
    AtualizarPerfilInputDTO,
    CriarPerfilInputDTO,
    SalvarSetorInputDTO,
    SalvarSetorResponsavelInputDTO,
)
from src.core.cadastros.entities import PerfilEntity, SetorEntity, SetorResponsavelEntity
from src.core.cadastros.use_cases import (
    AlterarPapelUsuarioService,
    AlternarStatusSetorResponsavelService,
    AlternarStatusSetorService,
    AtualizarAvatarService,
    AtualizarPerfilService,
    AtualizarSetorResponsavelService,
    AtualizarSetorService,
    CriarPerfilService,
    CriarSetorResponsavelService,
    CriarSetorService,
    ExcluirSetorResponsavelService,
    ExcluirSetorService,
    ListarSetoresResponsaveisService,
    ListarSetoresService,
    ListarTecnicosService,
    ListarUsuariosService,
    ObterPerfilService,
)
from src.core.shared.exceptions import (
    BusinessRuleViolationError,
    EntityNotFoundError,
    PermissionDeniedError,
    ValidationError,
)


@pytest.fixture
def perfis(perfil_repo):
    """Solicitante, técnico e coordenação cadastrados."""
    perfil_repo.save(PerfilEntity.criar("10", "Ana Souza", "ana@hospital.org"))
    tecnico = PerfilEntity.criar("20", "Bruno Lima", "bruno@hospital.org", UserRole.TECNICO)
    tecnico.setor_responsavel_id = "dep-eletrica"
    perfil_repo.save(tecnico)
    perfil_repo.save(
        PerfilEntity.criar("30", "Carla Dias", "carla@hospital.org", UserRole.COORDENACAO)
    )
    return perfil_repo


class TestEntidadesCadastro:
    def test_nome_do_setor(self):
        with pytest.raises(ValidationError):
            SetorEntity.criar("A")
        with pytest.raises(ValidationError):
            SetorEntity.criar("x" * 101)

        assert SetorEntity.criar("  UTI ").nome == "UTI"

    def test_descricao_do_setor_responsavel(self):
        with pytest.raises(ValidationError) as exc:
            SetorResponsavelEntity.criar("Elétrica", descricao="x" * 501)

        assert exc.value.field == "descricao"
        assert SetorResponsavelEntity.criar("Elétrica", descricao="   ").descricao is None

    def test_perfil_normaliza_email(self):
        perfil = PerfilEntity.criar("1", "Maria Clara", "  Maria@Hospital.ORG ")

        assert perfil.email == "maria@hospital.org"
        assert perfil.iniciais == "MC"
        assert perfil.papel == UserRole.SOLICITANTE

    @pytest.mark.parametrize("telefone", ["(11) 98765-4321", "(11) 3456-7890"])
    def test_telefone_valido(self, telefone):
        perfil = PerfilEntity.criar("1", "Maria Clara", "maria@hospital.org")

        perfil.atualizar_dados("Maria Clara", "maria@hospital.org", telefone)

        assert perfil.telefone == telefone

    @pytest.mark.parametrize("telefone", ["11987654321", "(11)98765-4321", "(1) 98765-4321"])
    def test_telefone_invalido(self, telefone):
        """Deve exigir o formato (00) 00000-0000."""
        perfil = PerfilEntity.criar("1", "Maria Clara", "maria@hospital.org")

        with pytest.raises(ValidationError) as exc:
            perfil.atualizar_dados("Maria Clara", "maria@hospital.org", telefone)

        assert exc.value.field == "telefone"

    def test_apenas_tecnico_mantem_setor_responsavel(self):
        perfil = PerfilEntity.criar("1", "Maria Clara", "maria@hospital.org")

        perfil.alterar_papel(UserRole.TECNICO, "dep-eletrica")
        assert perfil.setor_responsavel_id == "dep-eletrica"

        perfil.alterar_papel(UserRole.COORDENACAO, "dep-eletrica")
        assert perfil.setor_responsavel_id is None


class TestSetores:
    def test_criar_setor(self, setor_repo, uow, coordenacao):
        output = CriarSetorService(setor_repo, uow).execute(
            SalvarSetorInputDTO(nome="UTI"), coordenacao
        )

        assert output.nome == "UTI"
        assert output.ativo is True
        assert setor_repo.get_by_id(output.id).criado_por_id == "30"

    def test_nome_duplicado(self, setor_repo, uow, coordenacao):
        """Deve rejeitar nome repetido sem diferenciar maiúsculas."""
        service = CriarSetorService(setor_repo, uow)
        service.execute(SalvarSetorInputDTO(nome="Recepção"), coordenacao)

        with pytest.raises(ValidationError) as exc:
            service.execute(SalvarSetorInputDTO(nome="recepção"), coordenacao)

        assert exc.value.field == "nome"

    def test_apenas_coordenacao(self, setor_repo, uow, tecnico):
        with pytest.raises(PermissionDeniedError):
            CriarSetorService(setor_repo, uow).execute(SalvarSetorInputDTO(nome="UTI"), tecnico)

    def test_atualizar_setor(self, setor_repo, uow, coordenacao):
        criado = CriarSetorService(setor_repo, uow).execute(
            SalvarSetorInputDTO(nome="UTI"), coordenacao
        )

        output = AtualizarSetorService(setor_repo, uow).execute(
            SalvarSetorInputDTO(nome="UTI Adulto", ativo=False, setor_id=criado.id),
            coordenacao,
        )

        assert output.nome == "UTI Adulto"
        assert output.ativo is False

    def test_atualizar_mantendo_o_proprio_nome(self, setor_repo, uow, coordenacao):
        criado = CriarSetorService(setor_repo, uow).execute(
            SalvarSetorInputDTO(nome="UTI"), coordenacao
        )

        output = AtualizarSetorService(setor_repo, uow).execute(
            SalvarSetorInputDTO(nome="uti", setor_id=criado.id), coordenacao
        )

        assert output.nome == "uti"

    def test_atualizar_inexistente(self, setor_repo, uow, coordenacao):
        with pytest.raises(EntityNotFoundError):
            AtualizarSetorService(setor_repo, uow).execute(
                SalvarSetorInputDTO(nome="UTI", setor_id="nao-existe"), coordenacao
            )

    def test_alternar_e_listar_ativos(self, setor_repo, uow, coordenacao):
        """Deve esconder setores inativos da listagem de ativos."""
        criar = CriarSetorService(setor_repo, uow)
        uti = criar.execute(SalvarSetorInputDTO(nome="UTI"), coordenacao)
        criar.execute(SalvarSetorInputDTO(nome="Farmácia"), coordenacao)

        assert AlternarStatusSetorService(setor_repo, uow).execute(uti.id, coordenacao).ativo is False

        listar = ListarSetoresService(setor_repo)
        assert [s.nome for s in listar.execute(apenas_ativos=True)] == ["Farmácia"]
        assert [s.nome for s in listar.execute()] == ["Farmácia", "UTI"]

    def test_excluir_setor_em_uso(self, setor_repo, os_repo, uow, coordenacao, nova_ordem):
        """Deve impedir exclusão de setor referenciado por O.S."""
        setor = CriarSetorService(setor_repo, uow).execute(
            SalvarSetorInputDTO(nome="UTI"), coordenacao
        )
        nova_ordem(setor_id=setor.id)

        with pytest.raises(BusinessRuleViolationError) as exc:
            ExcluirSetorService(setor_repo, os_repo, uow).execute(setor.id, coordenacao)

        assert exc.value.rule == "setor_em_uso"
        assert setor_repo.get_by_id(setor.id) is not None

    def test_excluir_setor_livre(self, setor_repo, os_repo, uow, coordenacao):
        setor = CriarSetorService(setor_repo, uow).execute(
            SalvarSetorInputDTO(nome="UTI"), coordenacao
        )

        ExcluirSetorService(setor_repo, os_repo, uow).execute(setor.id, coordenacao)

        assert setor_repo.get_by_id(setor.id) is None


class TestSetoresResponsaveis:
    def test_ciclo_completo(self, setor_responsavel_repo, os_repo, uow, coordenacao):
        criado = CriarSetorResponsavelService(setor_responsavel_repo, uow).execute(
            SalvarSetorResponsavelInputDTO(nome="Elétrica", descricao="Tomadas e iluminação"),
            coordenacao,
        )
        assert criado.descricao == "Tomadas e iluminação"

        atualizado = AtualizarSetorResponsavelService(setor_responsavel_repo, uow).execute(
            SalvarSetorResponsavelInputDTO(
                nome="Manutenção Elétrica", descricao=None, setor_responsavel_id=criado.id
            ),
            coordenacao,
        )
        assert atualizado.nome == "Manutenção Elétrica"
        assert atualizado.descricao is None

        alternado = AlternarStatusSetorResponsavelService(setor_responsavel_repo, uow).execute(
            criado.id, coordenacao
        )
        assert alternado.ativo is False
        assert ListarSetoresResponsaveisService(setor_responsavel_repo).execute(
            apenas_ativos=True
        ) == []

        ExcluirSetorResponsavelService(setor_responsavel_repo, os_repo, uow).execute(
            criado.id, coordenacao
        )
        assert setor_responsavel_repo.get_by_id(criado.id) is None

    def test_excluir_em_uso(self, setor_responsavel_repo, os_repo, uow, coordenacao, nova_ordem):
        criado = CriarSetorResponsavelService(setor_responsavel_repo, uow).execute(
            SalvarSetorResponsavelInputDTO(nome="Elétrica"), coordenacao
        )
        nova_ordem(setor_responsavel_id=criado.id)

        with pytest.raises(BusinessRuleViolationError) as exc:
            ExcluirSetorResponsavelService(setor_responsavel_repo, os_repo, uow).execute(
                criado.id, coordenacao
            )

        assert exc.value.rule == "setor_responsavel_em_uso"


class TestPerfis:
    def test_criar_perfil_como_solicitante(self, perfil_repo, uow):
        """Deve cadastrar todo usuário novo como solicitante."""
        output = CriarPerfilService(perfil_repo, uow).execute(
            CriarPerfilInputDTO(usuario_id="40", nome_completo="Davi Rocha", email="davi@h.org")
        )

        assert output.papel == "solicitante"
        assert output.papel_label == "Solicitante"
        assert output.iniciais == "DR"

    def test_obter_perfil_inexistente(self, perfil_repo):
        with pytest.raises(EntityNotFoundError):
            ObterPerfilService(perfil_repo).execute("999")

    def test_atualizar_proprio_perfil(self, perfis, uow, solicitante):
        output = AtualizarPerfilService(perfis, uow).execute(
            AtualizarPerfilInputDTO(
                nome_completo="Ana Souza Lima",
                email="ANA.LIMA@hospital.org",
                telefone="(11) 91234-5678",
            ),
            solicitante,
        )

        assert output.nome_completo == "Ana Souza Lima"
        assert output.email == "ana.lima@hospital.org"
        assert output.telefone == "(11) 91234-5678"

    def test_avatar_retorna_url_anterior(self, perfis, uow, solicitante):
        service = AtualizarAvatarService(perfis, uow)

        assert service.execute("/media/avatars/a.png", solicitante) is None
        assert service.execute("/media/avatars/b.png", solicitante) == "/media/avatars/a.png"
        assert perfis.get_by_usuario_id("10").avatar_url == "/media/avatars/b.png"

    def test_listar_usuarios_apenas_coordenacao(self, perfis, solicitante, coordenacao):
        with pytest.raises(PermissionDeniedError):
            ListarUsuariosService(perfis).execute(solicitante)

        nomes = [p.nome_completo for p in ListarUsuariosService(perfis).execute(coordenacao)]
        assert nomes == ["Ana Souza", "Bruno Lima", "Carla Dias"]

    def test_listar_tecnicos(self, perfis, tecnico, solicitante):
        assert [p.usuario_id for p in ListarTecnicosService(perfis).execute(tecnico)] == ["20"]
        assert ListarTecnicosService(perfis).execute(tecnico, "dep-hidraulica") == []

        with pytest.raises(PermissionDeniedError):
            ListarTecnicosService(perfis).execute(solicitante)

    def test_promover_a_tecnico(self, perfis, uow, coordenacao):
        output = AlterarPapelUsuarioService(perfis, uow).execute(
            AlterarPapelInputDTO(usuario_id="10", papel="tecnico", setor_responsavel_id="dep-eletrica"),
            coordenacao,
        )

        assert output.papel == "tecnico"
        assert output.setor_responsavel_id == "dep-eletrica"

    def test_papel_invalido(self, perfis, uow, coordenacao):
        with pytest.raises(ValidationError) as exc:
            AlterarPapelUsuarioService(perfis, uow).execute(
                AlterarPapelInputDTO(usuario_id="10", papel="administrador"), coordenacao
            )

        assert exc.value.field == "papel"

    def test_coordenacao_nao_rebaixa_a_si_mesma(self, perfis, uow, coordenacao):
        """Deve impedir que a coordenação remova o próprio acesso."""
        with pytest.raises(BusinessRuleViolationError) as exc:
            AlterarPapelUsuarioService(perfis, uow).execute(
                AlterarPapelInputDTO(usuario_id="30", papel="solicitante"), coordenacao
            )

        assert exc.value.rule == "auto_rebaixamento"
        assert perfis.get_by_usuario_id("30").papel == UserRole.COORDENACAO

    def test_alterar_papel_exige_coordenacao(self, perfis, uow, tecnico):
        with pytest.raises(PermissionDeniedError):
            AlterarPapelUsuarioService(perfis, uow).execute(
                AlterarPapelInputDTO(usuario_id="10", papel="coordenacao"), tecnico
            )

    def test_usuario_sem_perfil(self, perfis, uow, coordenacao):
        with pytest.raises(EntityNotFoundError):
            AlterarPapelUsuarioService(perfis, uow).execute(
                AlterarPapelInputDTO(usuario_id="999", papel="tecnico"), coordenacao
            )


def test_ator_padrao_e_solicitante():
    assert Ator(usuario_id="1").papel == UserRole.SOLICITANTE
