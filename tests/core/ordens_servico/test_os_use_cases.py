"""
Testes dos Use Cases de Ordens de Serviço.

Usam repositórios em memória e o FakeUnitOfWork (tests/core/conftest.py).
"""

from datetime import timedelta

import pytest

from src.core.acesso import UserRole
from src.core.cadastros.entities import PerfilEntity, SetorEntity, SetorResponsavelEntity
from src.core.ordens_servico.dtos import (
    AdicionarComentarioInputDTO,
    AlterarPrioridadeInputDTO,
    AlterarStatusInputDTO,
    CriarOSInputDTO,
    ListarOSQueryDTO,
    ReatribuirOSInputDTO,
)
from src.core.ordens_servico.entities import OSPriority, OSStatus
from src.core.ordens_servico.use_cases import (
    AdicionarComentarioService,
    AlertarSLACriticoService,
    AlterarPrioridadeOSService,
    AlterarStatusOSService,
    CriarOSService,
    ListarComentariosService,
    ListarOSService,
    ListarOSSLACriticoService,
    ObterOSService,
    ReatribuirOSService,
)
from src.core.shared.exceptions import (
    EntityNotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from src.core.shared.tempo import agora


def criar_dto(**kwargs) -> CriarOSInputDTO:
    dados = {
        "categoria": "hidraulica",
        "setor_id": "setor-uti",
        "equipamento": "Pia do posto 2",
        "descricao": "Vazamento constante",
        "solicitante_id": "10",
    }
    dados.update(kwargs)
    return CriarOSInputDTO(**dados)


def atrasar(ordem, horas):
    ordem.criado_em = agora() - timedelta(hours=horas)


class TestCriarOSService:
    def test_abre_os_e_publica_evento(self, os_repo, uow):
        """Deve persistir, numerar e publicar OSCriadaEvent após commit."""
        output = CriarOSService(os_repo, uow).execute(criar_dto(urgente=True))

        assert output.numero == 1
        assert output.status == "aberta"
        assert output.prioridade == "urgente"
        assert output.sla_horas == 24
        assert uow.committed

        eventos = uow.eventos_do_tipo("OSCriadaEvent")
        assert len(eventos) == 1
        assert eventos[0].aggregate_id == output.id
        assert eventos[0].numero == 1
        assert eventos[0].solicitante_id == "10"

    def test_numeracao_sequencial(self, os_repo, uow):
        """Deve numerar as O.S. em sequência."""
        service = CriarOSService(os_repo, uow)

        numeros = [service.execute(criar_dto()).numero for _ in range(3)]

        assert numeros == [1, 2, 3]

    def test_sla_configurado_por_prioridade(self, os_repo, uow):
        """Deve usar o SLA configurado para a prioridade."""
        service = CriarOSService(os_repo, uow, sla_por_prioridade={"nao_urgente": 48})

        assert service.execute(criar_dto()).sla_horas == 48
        assert service.execute(criar_dto(prioridade="emergencial")).sla_horas == 4

    def test_prioridade_normal(self, os_repo, uow):
        output = CriarOSService(os_repo, uow).execute(criar_dto(prioridade="normal"))

        assert output.prioridade == "nao_urgente"

    def test_prioridade_invalida(self, os_repo, uow):
        with pytest.raises(ValidationError) as exc:
            CriarOSService(os_repo, uow).execute(criar_dto(prioridade="altissima"))

        assert exc.value.field == "prioridade"

    def test_dados_invalidos_fazem_rollback(self, os_repo, uow):
        """Deve desfazer e não publicar eventos quando a validação falha."""
        with pytest.raises(ValidationError):
            CriarOSService(os_repo, uow).execute(criar_dto(equipamento=""))

        assert uow.rolled_back
        assert uow.published_events == []
        assert os_repo.list_all() == []

    def test_setor_precisa_existir_e_estar_ativo(self, os_repo, uow, setor_repo):
        setor_repo.save(SetorEntity(id="setor-uti", nome="UTI"))
        setor_repo.save(SetorEntity(id="setor-antigo", nome="Ala velha", ativo=False))
        service = CriarOSService(os_repo, uow, setor_repo=setor_repo)

        for setor_id in ("nao-existe", "setor-antigo"):
            with pytest.raises(ValidationError) as exc:
                service.execute(criar_dto(setor_id=setor_id))
            assert exc.value.field == "setor_id"

        assert service.execute(criar_dto()).setor_id == "setor-uti"
        assert len(os_repo.list_all()) == 1

    def test_setor_responsavel_inexistente(self, os_repo, uow, setor_responsavel_repo):
        service = CriarOSService(os_repo, uow, setor_responsavel_repo=setor_responsavel_repo)

        with pytest.raises(ValidationError) as exc:
            service.execute(criar_dto(setor_responsavel_id="dep-fantasma"))

        assert exc.value.field == "setor_responsavel_id"
        assert uow.published_events == []


class TestObterEListarOS:
    def test_solicitante_ve_a_propria(self, os_repo, nova_ordem, solicitante):
        ordem = nova_ordem()

        output = ObterOSService(os_repo).execute(ordem.id, solicitante)

        assert output.id == ordem.id

    def test_os_de_outro_solicitante_nao_existe(self, os_repo, nova_ordem, outro_solicitante):
        """Deve tratar O.S. fora do escopo como inexistente."""
        ordem = nova_ordem()

        with pytest.raises(EntityNotFoundError):
            ObterOSService(os_repo).execute(ordem.id, outro_solicitante)

    def test_os_inexistente(self, os_repo, coordenacao):
        with pytest.raises(EntityNotFoundError):
            ObterOSService(os_repo).execute("nao-existe", coordenacao)

    def test_escopo_por_papel(self, os_repo, nova_ordem, solicitante, tecnico, coordenacao):
        """Deve listar conforme o papel do ator."""
        propria = nova_ordem()
        do_setor = nova_ordem(solicitante_id="11", setor_responsavel_id="dep-eletrica")
        atribuida = nova_ordem(solicitante_id="12")
        atribuida.reatribuir(tecnico_id="20")
        outra = nova_ordem(solicitante_id="13", setor_responsavel_id="dep-hidraulica")

        service = ListarOSService(os_repo)

        assert {o.id for o in service.execute(solicitante)} == {propria.id}
        assert {o.id for o in service.execute(tecnico)} == {do_setor.id, atribuida.id}
        assert {o.id for o in service.execute(coordenacao)} == {
            propria.id, do_setor.id, atribuida.id, outra.id,
        }

    def test_filtro_status(self, os_repo, nova_ordem, coordenacao):
        nova_ordem()
        concluida = nova_ordem()
        concluida.alterar_status(OSStatus.CONCLUIDA)

        service = ListarOSService(os_repo)

        resultado = service.execute(coordenacao, ListarOSQueryDTO(status="concluida"))
        assert [o.id for o in resultado] == [concluida.id]
        assert len(service.execute(coordenacao, ListarOSQueryDTO(status="all"))) == 2

    def test_busca_por_numero_equipamento_ou_setor(self, os_repo, nova_ordem, coordenacao):
        """Deve buscar por número, equipamento ou nome do setor, sem diferenciar caixa."""
        primeira = nova_ordem(equipamento="Autoclave")
        segunda = nova_ordem(equipamento="Tomada")
        segunda.setor_nome = "Centro Cirúrgico"

        service = ListarOSService(os_repo)

        assert [o.id for o in service.execute(coordenacao, ListarOSQueryDTO(busca="autoCLAVE"))] == [primeira.id]
        assert [o.id for o in service.execute(coordenacao, ListarOSQueryDTO(busca="cirúrgico"))] == [segunda.id]
        assert [o.id for o in service.execute(coordenacao, ListarOSQueryDTO(busca="2"))] == [segunda.id]

    def test_mais_recentes_primeiro_com_limite(self, os_repo, nova_ordem, coordenacao):
        antiga = nova_ordem()
        atrasar(antiga, 5)
        recente = nova_ordem()

        resultado = ListarOSService(os_repo).execute(coordenacao, ListarOSQueryDTO(limite=1))

        assert [o.id for o in resultado] == [recente.id]

    def test_status_invalido(self, os_repo, coordenacao):
        with pytest.raises(ValidationError):
            ListarOSService(os_repo).execute(coordenacao, ListarOSQueryDTO(status="pendente"))


class TestAlterarStatusOSService:
    def test_solicitante_nao_pode(self, os_repo, uow, nova_ordem, solicitante):
        """Deve negar alteração de status ao solicitante."""
        ordem = nova_ordem()

        with pytest.raises(PermissionDeniedError):
            AlterarStatusOSService(os_repo, uow).execute(
                AlterarStatusInputDTO(ordem.id, "em_andamento"), solicitante
            )

    def test_tecnico_altera_status(self, os_repo, uow, nova_ordem, tecnico):
        ordem = nova_ordem(setor_responsavel_id="dep-eletrica")

        output = AlterarStatusOSService(os_repo, uow).execute(
            AlterarStatusInputDTO(ordem.id, "em_andamento"), tecnico
        )

        assert output.status == "em_andamento"
        evento = uow.eventos_do_tipo("OSStatusAlteradoEvent")[0]
        assert evento.status_anterior == "aberta"
        assert evento.status_novo == "em_andamento"
        assert evento.alterado_por_id == "20"
        assert uow.eventos_do_tipo("OSConcluidaEvent") == []

    def test_tecnico_fora_do_setor(self, os_repo, uow, nova_ordem, tecnico):
        """Deve tratar O.S. de outro setor responsável como inexistente."""
        ordem = nova_ordem(setor_responsavel_id="dep-hidraulica")

        with pytest.raises(EntityNotFoundError):
            AlterarStatusOSService(os_repo, uow).execute(
                AlterarStatusInputDTO(ordem.id, "concluida"), tecnico
            )

    def test_concluir_publica_evento_de_conclusao(self, os_repo, uow, nova_ordem, coordenacao):
        """Deve publicar OSStatusAlterado e OSConcluida ao concluir."""
        ordem = nova_ordem()

        output = AlterarStatusOSService(os_repo, uow).execute(
            AlterarStatusInputDTO(ordem.id, "concluida"), coordenacao
        )

        assert output.concluido_em is not None
        assert [e.event_type for e in uow.published_events] == [
            "OSStatusAlteradoEvent", "OSConcluidaEvent",
        ]
        concluida = uow.eventos_do_tipo("OSConcluidaEvent")[0]
        assert concluida.dentro_sla is True
        assert concluida.concluido_por_id == "30"

    def test_concluir_fora_do_sla(self, os_repo, uow, nova_ordem, coordenacao):
        ordem = nova_ordem(prioridade=OSPriority.EMERGENCIAL)
        atrasar(ordem, 10)

        AlterarStatusOSService(os_repo, uow).execute(
            AlterarStatusInputDTO(ordem.id, "concluida"), coordenacao
        )

        assert uow.eventos_do_tipo("OSConcluidaEvent")[0].dentro_sla is False

    def test_mesmo_status_sem_evento(self, os_repo, uow, nova_ordem, coordenacao):
        ordem = nova_ordem()

        AlterarStatusOSService(os_repo, uow).execute(
            AlterarStatusInputDTO(ordem.id, "aberta"), coordenacao
        )

        assert uow.published_events == []

    def test_reabrir_concluida(self, os_repo, uow, nova_ordem, coordenacao):
        """Deve permitir reabrir e limpar a data de conclusão."""
        ordem = nova_ordem()
        service = AlterarStatusOSService(os_repo, uow)
        service.execute(AlterarStatusInputDTO(ordem.id, "concluida"), coordenacao)

        output = service.execute(AlterarStatusInputDTO(ordem.id, "aberta"), coordenacao)

        assert output.status == "aberta"
        assert output.concluido_em is None


class TestReatribuirOSService:
    def test_reatribuir_para_tecnico(self, os_repo, uow, nova_ordem, coordenacao):
        ordem = nova_ordem()

        output = ReatribuirOSService(os_repo, uow).execute(
            ReatribuirOSInputDTO(ordem.id, setor_responsavel_id="dep-eletrica", tecnico_id="20"),
            coordenacao,
        )

        assert output.tecnico_id == "20"
        evento = uow.eventos_do_tipo("OSReatribuidaEvent")[0]
        assert evento.tecnico_id == "20"
        assert evento.tecnico_anterior_id is None
        assert evento.reatribuido_por_id == "30"

    def test_sem_destino(self, os_repo, uow, nova_ordem, coordenacao):
        ordem = nova_ordem()

        with pytest.raises(ValidationError):
            ReatribuirOSService(os_repo, uow).execute(ReatribuirOSInputDTO(ordem.id), coordenacao)

        assert uow.published_events == []

    def test_solicitante_nao_pode(self, os_repo, uow, nova_ordem, solicitante):
        ordem = nova_ordem()

        with pytest.raises(PermissionDeniedError):
            ReatribuirOSService(os_repo, uow).execute(
                ReatribuirOSInputDTO(ordem.id, tecnico_id="20"), solicitante
            )

    def test_destino_precisa_ser_tecnico(
        self, os_repo, uow, perfil_repo, setor_responsavel_repo, nova_ordem, coordenacao
    ):
        """Não deve atribuir a O.S. a solicitante nem a usuário inexistente."""
        perfil_repo.save(PerfilEntity.criar("10", "Ana Souza", "ana@hospital.org"))
        perfil_repo.save(
            PerfilEntity.criar("20", "Bruno Lima", "bruno@hospital.org", UserRole.TECNICO)
        )
        ordem = nova_ordem()
        service = ReatribuirOSService(
            os_repo, uow, perfil_repo=perfil_repo, setor_responsavel_repo=setor_responsavel_repo
        )

        for tecnico_id in ("10", "99"):
            with pytest.raises(ValidationError) as exc:
                service.execute(ReatribuirOSInputDTO(ordem.id, tecnico_id=tecnico_id), coordenacao)
            assert exc.value.field == "tecnico_id"

        assert os_repo.get_by_id(ordem.id).tecnico_id is None
        assert service.execute(
            ReatribuirOSInputDTO(ordem.id, tecnico_id="20"), coordenacao
        ).tecnico_id == "20"

    def test_setor_responsavel_inativo(
        self, os_repo, uow, setor_responsavel_repo, nova_ordem, coordenacao
    ):
        setor_responsavel_repo.save(
            SetorResponsavelEntity(id="dep-civil", nome="Civil", ativo=False)
        )
        ordem = nova_ordem()

        with pytest.raises(ValidationError) as exc:
            ReatribuirOSService(
                os_repo, uow, setor_responsavel_repo=setor_responsavel_repo
            ).execute(ReatribuirOSInputDTO(ordem.id, setor_responsavel_id="dep-civil"), coordenacao)

        assert exc.value.field == "setor_responsavel_id"


class TestAlterarPrioridadeOSService:
    def test_coordenacao_altera_prioridade(self, os_repo, uow, nova_ordem, coordenacao):
        """Deve recalcular o SLA e publicar o evento."""
        ordem = nova_ordem()

        output = AlterarPrioridadeOSService(os_repo, uow).execute(
            AlterarPrioridadeInputDTO(ordem.id, "emergencial"), coordenacao
        )

        assert output.prioridade == "emergencial"
        assert output.sla_horas == 4
        evento = uow.eventos_do_tipo("OSPrioridadeAlteradaEvent")[0]
        assert evento.prioridade_anterior == "nao_urgente"
        assert evento.prioridade_nova == "emergencial"

    def test_sla_configurado(self, os_repo, uow, nova_ordem, coordenacao):
        ordem = nova_ordem()

        output = AlterarPrioridadeOSService(
            os_repo, uow, sla_por_prioridade={"urgente": 12}
        ).execute(AlterarPrioridadeInputDTO(ordem.id, "urgente"), coordenacao)

        assert output.sla_horas == 12

    def test_tecnico_nao_pode(self, os_repo, uow, nova_ordem, tecnico):
        """Deve negar alteração de prioridade ao técnico."""
        ordem = nova_ordem(setor_responsavel_id="dep-eletrica")

        with pytest.raises(PermissionDeniedError):
            AlterarPrioridadeOSService(os_repo, uow).execute(
                AlterarPrioridadeInputDTO(ordem.id, "urgente"), tecnico
            )


class TestComentarios:
    def test_solicitante_comenta_a_propria(
        self, os_repo, comentario_repo, uow, nova_ordem, solicitante
    ):
        ordem = nova_ordem()
        ordem.reatribuir(tecnico_id="20")

        output = AdicionarComentarioService(os_repo, comentario_repo, uow).execute(
            AdicionarComentarioInputDTO(ordem.id, "Ainda sem energia"), solicitante
        )

        assert output.comentario == "Ainda sem energia"
        assert output.autor_id == "10"
        evento = uow.eventos_do_tipo("OSComentarioAdicionadoEvent")[0]
        assert evento.autor_id == "10"
        assert evento.tecnico_id == "20"
        assert evento.conteudo_preview == "Ainda sem energia"

    def test_preview_limitado(self, os_repo, comentario_repo, uow, nova_ordem, coordenacao):
        ordem = nova_ordem()

        AdicionarComentarioService(os_repo, comentario_repo, uow).execute(
            AdicionarComentarioInputDTO(ordem.id, "x" * 300), coordenacao
        )

        assert len(uow.published_events[0].conteudo_preview) == 100

    def test_nao_comenta_os_invisivel(
        self, os_repo, comentario_repo, uow, nova_ordem, outro_solicitante
    ):
        ordem = nova_ordem()

        with pytest.raises(EntityNotFoundError):
            AdicionarComentarioService(os_repo, comentario_repo, uow).execute(
                AdicionarComentarioInputDTO(ordem.id, "Oi"), outro_solicitante
            )

    def test_comentario_vazio(self, os_repo, comentario_repo, uow, nova_ordem, solicitante):
        ordem = nova_ordem()

        with pytest.raises(ValidationError):
            AdicionarComentarioService(os_repo, comentario_repo, uow).execute(
                AdicionarComentarioInputDTO(ordem.id, "  "), solicitante
            )

    def test_listar_em_ordem_cronologica(
        self, os_repo, comentario_repo, uow, nova_ordem, solicitante
    ):
        ordem = nova_ordem()
        service = AdicionarComentarioService(os_repo, comentario_repo, uow)
        primeiro = service.execute(AdicionarComentarioInputDTO(ordem.id, "Primeiro"), solicitante)
        comentario_repo._comentarios[primeiro.id].criado_em = agora() - timedelta(minutes=5)
        service.execute(AdicionarComentarioInputDTO(ordem.id, "Segundo"), solicitante)

        comentarios = ListarComentariosService(os_repo, comentario_repo).execute(
            ordem.id, solicitante
        )

        assert [c.comentario for c in comentarios] == ["Primeiro", "Segundo"]


class TestSLACritico:
    def test_lista_apenas_criticas_nao_finalizadas(self, os_repo, nova_ordem):
        """Deve listar O.S. abertas além do SLA."""
        critica = nova_ordem(prioridade=OSPriority.EMERGENCIAL)
        atrasar(critica, 5)
        no_prazo = nova_ordem(prioridade=OSPriority.URGENTE)
        atrasar(no_prazo, 5)
        finalizada = nova_ordem(prioridade=OSPriority.EMERGENCIAL)
        atrasar(finalizada, 50)
        finalizada.alterar_status(OSStatus.CANCELADA)

        resultado = ListarOSSLACriticoService(os_repo).execute()

        assert [o.id for o in resultado] == [critica.id]

    def test_alerta_uma_vez_por_ordem(self, os_repo, uow, nova_ordem):
        """Deve pular O.S. já alertadas."""
        primeira = nova_ordem(prioridade=OSPriority.EMERGENCIAL)
        atrasar(primeira, 6)
        segunda = nova_ordem(prioridade=OSPriority.EMERGENCIAL)
        atrasar(segunda, 8)

        service = AlertarSLACriticoService(
            os_repo, uow, ja_alertada=lambda ordem_id: ordem_id == primeira.id
        )
        alertadas = service.execute()

        assert [o.id for o in alertadas] == [segunda.id]
        evento = uow.eventos_do_tipo("OSSLACriticoEvent")[0]
        assert evento.aggregate_id == segunda.id
        assert evento.sla_horas == 4
        assert evento.horas_decorridas == pytest.approx(8, abs=0.1)

    def test_sem_criticas(self, os_repo, uow, nova_ordem):
        nova_ordem()

        assert AlertarSLACriticoService(os_repo, uow).execute() == []
        assert uow.committed
        assert uow.published_events == []
