"""
Testes da API JSON: envelope {success, data, error, meta} e
mapeamento de erros para status HTTP.
"""

import json

import pytest
from django.test import Client

from src.adapters.django_app.ordens_servico.models import OSUpdateModel, ServiceOrderModel

pytestmark = pytest.mark.django_db


def logado(user) -> Client:
    client = Client()
    client.force_login(user)
    return client


def post_json(client, url, dados):
    return client.post(url, data=json.dumps(dados), content_type="application/json")


class TestOSAPI:
    def test_anonimo_recebe_401(self):
        response = Client().get("/api/os/")

        assert response.status_code == 401
        assert response.json() == {"success": False, "error": "Autenticação necessária"}

    def test_abrir_os(self, setor, usuario_solicitante):
        response = post_json(logado(usuario_solicitante), "/api/os/", {
            "categoria": "equipamento_medico",
            "setor_id": setor.id,
            "equipamento": "Ventilador pulmonar",
            "descricao": "Alarme disparando sem motivo",
            "prioridade": "emergencial",
        })

        body = response.json()
        assert response.status_code == 201
        assert body["success"] is True
        assert body["data"]["numero"] == 1
        assert body["data"]["prioridade"] == "emergencial"
        assert body["data"]["solicitante_id"] == str(usuario_solicitante.pk)
        assert ServiceOrderModel.objects.get().sla_target_hours == 4

    def test_abrir_os_invalida(self, setor, usuario_solicitante):
        """Deve responder 400 indicando o campo inválido."""
        response = post_json(logado(usuario_solicitante), "/api/os/", {
            "categoria": "eletrica",
            "setor_id": setor.id,
            "equipamento": "Tomada",
            "descricao": "",
        })

        assert response.status_code == 400
        assert response.json()["meta"] == {"field": "descricao"}
        assert not ServiceOrderModel.objects.exists()

    @pytest.mark.parametrize("caso", ["inexistente", "inativo"])
    def test_abrir_os_com_setor_invalido(self, setor, usuario_solicitante, caso):
        """Setor inexistente ou inativo responde 400, não erro interno."""
        setor.is_active = False
        setor.save()
        setor_id = "nao-existe" if caso == "inexistente" else setor.id

        response = post_json(logado(usuario_solicitante), "/api/os/", {
            "categoria": "eletrica",
            "setor_id": setor_id,
            "equipamento": "Tomada",
            "descricao": "Sem energia",
        })

        assert response.status_code == 400
        assert response.json()["meta"] == {"field": "setor_id"}
        assert not ServiceOrderModel.objects.exists()

    def test_abrir_os_com_setor_responsavel_inexistente(self, setor, usuario_solicitante):
        response = post_json(logado(usuario_solicitante), "/api/os/", {
            "categoria": "eletrica",
            "setor_id": setor.id,
            "setor_responsavel_id": "nao-existe",
            "equipamento": "Tomada",
            "descricao": "Sem energia",
        })

        assert response.status_code == 400
        assert response.json()["meta"] == {"field": "setor_responsavel_id"}

    def test_json_invalido(self, usuario_solicitante):
        response = logado(usuario_solicitante).post(
            "/api/os/", data="{nao e json", content_type="application/json"
        )

        assert response.status_code == 400
        assert response.json()["success"] is False

    def test_listar_com_paginacao(self, criar_ordem, usuario_solicitante, outro_usuario):
        for _ in range(3):
            criar_ordem(usuario_solicitante)
        criar_ordem(outro_usuario)

        response = logado(usuario_solicitante).get("/api/os/", {"per_page": 2, "page": 2})

        body = response.json()
        assert body["meta"] == {"total": 3, "page": 2, "per_page": 2, "total_pages": 2}
        assert len(body["data"]) == 1

    def test_detalhe_fora_do_escopo(self, criar_ordem, usuario_solicitante, outro_usuario):
        ordem = criar_ordem(usuario_solicitante)

        assert logado(usuario_solicitante).get(f"/api/os/{ordem.id}/").status_code == 200
        assert logado(outro_usuario).get(f"/api/os/{ordem.id}/").status_code == 404

    def test_solicitante_nao_altera_status(self, criar_ordem, usuario_solicitante):
        ordem = criar_ordem(usuario_solicitante)

        response = post_json(
            logado(usuario_solicitante), f"/api/os/{ordem.id}/status/", {"status": "concluida"}
        )

        assert response.status_code == 403

    def test_coordenacao_conclui_e_altera_prioridade(
        self, criar_ordem, usuario_solicitante, usuario_coordenacao
    ):
        ordem = criar_ordem(usuario_solicitante)
        client = logado(usuario_coordenacao)

        status = post_json(client, f"/api/os/{ordem.id}/status/", {"status": "concluida"})
        prioridade = post_json(
            client, f"/api/os/{ordem.id}/prioridade/", {"prioridade": "urgente"}
        )

        assert status.json()["data"]["status"] == "concluida"
        assert status.json()["data"]["concluido_em"] is not None
        assert prioridade.json()["data"]["prioridade"] == "urgente"
        assert ServiceOrderModel.objects.get(id=ordem.id).sla_target_hours == 24

    def test_status_invalido(self, criar_ordem, usuario_solicitante, usuario_coordenacao):
        ordem = criar_ordem(usuario_solicitante)

        response = post_json(
            logado(usuario_coordenacao), f"/api/os/{ordem.id}/status/", {"status": "pausada"}
        )

        assert response.status_code == 400

    def test_reatribuir(self, criar_ordem, usuario_solicitante, usuario_tecnico, usuario_coordenacao):
        ordem = criar_ordem(usuario_solicitante)

        response = post_json(
            logado(usuario_coordenacao),
            f"/api/os/{ordem.id}/reatribuir/",
            {"tecnico_id": str(usuario_tecnico.pk)},
        )

        assert response.status_code == 200
        assert response.json()["data"]["tecnico_id"] == str(usuario_tecnico.pk)

    @pytest.mark.parametrize("destino", ["solicitante", "inexistente"])
    def test_reatribuir_para_quem_nao_e_tecnico(
        self, criar_ordem, usuario_solicitante, usuario_coordenacao, destino
    ):
        ordem = criar_ordem(usuario_solicitante)
        tecnico_id = str(usuario_solicitante.pk) if destino == "solicitante" else "99999"

        response = post_json(
            logado(usuario_coordenacao),
            f"/api/os/{ordem.id}/reatribuir/",
            {"tecnico_id": tecnico_id},
        )

        assert response.status_code == 400
        assert response.json()["meta"] == {"field": "tecnico_id"}
        assert ServiceOrderModel.objects.get(id=ordem.id).assigned_to_id is None

    def test_comentarios(self, criar_ordem, usuario_solicitante):
        ordem = criar_ordem(usuario_solicitante)
        client = logado(usuario_solicitante)

        criado = post_json(client, f"/api/os/{ordem.id}/comentarios/", {"comentario": "Urgente!"})
        lista = client.get(f"/api/os/{ordem.id}/comentarios/")

        assert criado.status_code == 201
        assert lista.json()["meta"] == {"total": 1}
        assert OSUpdateModel.objects.get().comment == "Urgente!"


class TestNotificacoesEEstatisticasAPI:
    def test_notificacoes(self, setor, usuario_solicitante, usuario_coordenacao):
        post_json(logado(usuario_solicitante), "/api/os/", {
            "categoria": "outros",
            "setor_id": setor.id,
            "equipamento": "Porta da sala 2",
            "descricao": "Fechadura emperrada",
        })
        client = logado(usuario_coordenacao)

        lista = client.get("/api/notificacoes/").json()
        notificacao_id = lista["data"][0]["id"]
        lida = post_json(client, f"/api/notificacoes/{notificacao_id}/lida/", {})
        todas = post_json(client, "/api/notificacoes/marcar-todas/", {})

        assert lista["meta"] == {"nao_lidas": 1}
        assert lida.json()["data"]["lida"] is True
        assert todas.json()["data"] == {"marcadas": 0}

    def test_estatisticas(self, criar_ordem, usuario_solicitante, usuario_coordenacao):
        criar_ordem(usuario_solicitante)

        response = logado(usuario_coordenacao).get("/api/estatisticas/", {"periodo_dias": "7"})

        body = response.json()
        assert body["data"]["total"] == 1
        assert body["data"]["aberta"] == 1
        assert body["meta"] == {"periodo_dias": 7}

    def test_estatisticas_periodo_invalido(self, usuario_coordenacao):
        response = logado(usuario_coordenacao).get("/api/estatisticas/", {"periodo_dias": "abc"})

        assert response.status_code == 400
        assert response.json()["meta"] == {"field": "periodo_dias"}

    def test_estatisticas_apenas_coordenacao(self, usuario_tecnico):
        assert logado(usuario_tecnico).get("/api/estatisticas/").status_code == 403
