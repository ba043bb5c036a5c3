# easyphone/core/testes.py

import threading
import unittest
from dataclasses import replace
from datetime import datetime
from decimal import Decimal
from unittest.mock import Mock

# Importamos as classes que queremos testar
from easyphone.core.carrinho import CarrinhoStore
from easyphone.core.precos import resolver_preco
from easyphone.core.resumos import (
    ProjecaoPedidos, resumir_pedidos, formatar_time_stamp, total_geral, PRODUTO_REMOVIDO, VARIANTE_REMOVIDA,
)
from easyphone.core.use_cases import (
    GerenciarCarrinhoUseCase,
    CalcularFreteUseCase,
    FinalizarPedidoUseCase,
    AtualizarStatusPedidoUseCase,
    ListarResumosPedidosUseCase,
    GerenciarCuponsUseCase,
    ConfiguracoesLojaUseCase,
)
from easyphone.core.entities import (
    Produto, Variante, Pedido, ItemPedido, DadosPessoais, Entrega, TipoEntrega, StatusPedido,
    Cupom, LojaInfo,
)
from easyphone.core.exceptions import (
    DadosInvalidosError,
    EntradaAusenteError,
    ItemNaoEncontradoError,
    ProdutoNaoEncontradoError,
    PedidoNaoEncontradoError,
    CarrinhoVazioError,
    StatusInvalidoError,
    TransicaoEmAndamentoError,
    FalhaPersistenciaError,
    CupomInvalidoError,
    FreteIndisponivelError,
    FreteRespostaInvalidaError,
    EstoqueInsuficienteError,
)

# ====================================================================
# CONFIGURAÇÃO DE FIXTURES (Dados Mock)
# ====================================================================

def criar_produto(estoque=5, preco="100.00", promocional=None, produto_id="p1", variante_id="v1"):
    return Produto(
        id=produto_id,
        titulo="iPhone 13",
        marca="Apple",
        categoria="Smartphones",
        descricao="128GB",
        imagens=["https://exemplo.com/iphone.jpg"],
        variantes=[
            Variante(
                id=variante_id,
                nome="Preto",
                estoque=estoque,
                preco=Decimal(preco),
                promocional=Decimal(promocional) if promocional is not None else None,
            )
        ],
    )


def criar_pedido(pedido_id="1", status=StatusPedido.PENDENTE, time_stamp="20240115093000", entrega=None, itens=None):
    return Pedido(
        id=pedido_id,
        dados_pessoais=DadosPessoais(nome="Maria", telefone="86999999999"),
        tipo_entrega=TipoEntrega.ENTREGA if entrega else TipoEntrega.RETIRADA,
        forma_pagamento="pix",
        itens=itens if itens is not None else [ItemPedido(produto_id="p1", variante_id="v1", quantidade=2)],
        valor=Decimal("200.00"),
        time_stamp=time_stamp,
        status=status,
        entrega=entrega,
    )


# ====================================================================
# TESTES DO PREÇO EFETIVO
# ====================================================================

class ResolverPrecoTestCase(unittest.TestCase):

    def test_usa_promocional_quando_positivo(self):
        variante = Variante(id="v1", nome="Preto", estoque=1, preco=Decimal("100"), promocional=Decimal("80"))
        self.assertEqual(resolver_preco(variante), Decimal("80"))

    def test_ignora_promocional_zero_ou_ausente(self):
        zerado = Variante(id="v1", nome="Preto", estoque=1, preco=Decimal("100"), promocional=Decimal("0"))
        ausente = Variante(id="v2", nome="Azul", estoque=1, preco=Decimal("100"))
        self.assertEqual(resolver_preco(zerado), Decimal("100"))
        self.assertEqual(resolver_preco(ausente), Decimal("100"))

    def test_nao_compara_promocional_com_preco_de_lista(self):
        # Um promocional maior que o preço de lista ainda vale
        variante = Variante(id="v1", nome="Preto", estoque=1, preco=Decimal("100"), promocional=Decimal("120"))
        self.assertEqual(resolver_preco(variante), Decimal("120"))


# ====================================================================
# TESTES DO CARRINHO
# ====================================================================

class CarrinhoStoreTestCase(unittest.TestCase):

    def setUp(self):
        self.ao_alterar = Mock()
        self.carrinho = CarrinhoStore(ao_alterar=self.ao_alterar)
        self.produto = criar_produto(estoque=3, preco="100.00", promocional="90.00")
        self.variante = self.produto.variantes[0]

    def test_adicionar_item_novo(self):
        """
        Cenário: Adicionar uma variante a um carrinho vazio.
        """
        item = self.carrinho.adicionar(self.produto, self.variante)

        self.assertEqual(len(self.carrinho), 1)
        self.assertEqual(item.quantidade, 1)
        self.assertEqual(item.preco_unitario, Decimal("90.00"))
        self.assertEqual(item.variante.estoque, 3)
        self.ao_alterar.assert_called_once_with(self.carrinho)

    def test_adicionar_mesma_variante_incrementa_linha(self):
        self.carrinho.adicionar(self.produto, self.variante)
        self.carrinho.adicionar(self.produto, self.variante)

        self.assertEqual(len(self.carrinho), 1)
        self.assertEqual(self.carrinho.buscar("p1", "v1").quantidade, 2)

    def test_adicionar_nao_passa_do_estoque(self):
        """
        Cenário: Variante com estoque 3, três adições e uma quarta tentativa.
        """
        for _ in range(4):
            self.carrinho.adicionar(self.produto, self.variante)

        self.assertEqual(self.carrinho.buscar("p1", "v1").quantidade, 3)
        self.assertFalse(self.carrinho.pode_adicionar("p1", "v1", 3))

    def test_adicionar_variante_esgotada_nao_cria_linha(self):
        produto = criar_produto(estoque=0)

        resultado = self.carrinho.adicionar(produto, produto.variantes[0])

        self.assertIsNone(resultado)
        self.assertTrue(self.carrinho.esta_vazio())
        self.ao_alterar.assert_not_called()

    def test_adicionar_quantidade_invalida_falha(self):
        with self.assertRaises(DadosInvalidosError):
            self.carrinho.adicionar(self.produto, self.variante, 0)

    def test_linhas_distintas_por_variante(self):
        outro = criar_produto(estoque=2, variante_id="v2")
        self.carrinho.adicionar(self.produto, self.variante)
        self.carrinho.adicionar(outro, outro.variantes[0])

        self.assertEqual(len(self.carrinho), 2)
        self.assertEqual(self.carrinho.quantidade_total, 2)

    def test_remover_item(self):
        self.carrinho.adicionar(self.produto, self.variante)

        removido = self.carrinho.remover("p1", "v1")

        self.assertIsNotNone(removido)
        self.assertTrue(self.carrinho.esta_vazio())

    def test_remover_item_inexistente_sem_efeito(self):
        self.assertIsNone(self.carrinho.remover("p1", "nao-existe"))
        self.ao_alterar.assert_not_called()

    def test_definir_quantidade_limita_ao_estoque(self):
        self.carrinho.adicionar(self.produto, self.variante)

        item = self.carrinho.definir_quantidade("p1", "v1", 10)

        self.assertEqual(item.quantidade, 3)

    def test_definir_quantidade_zero_remove_linha(self):
        self.carrinho.adicionar(self.produto, self.variante)

        self.carrinho.definir_quantidade("p1", "v1", 0)

        self.assertIsNone(self.carrinho.buscar("p1", "v1"))

    def test_definir_quantidade_em_linha_inexistente_sem_efeito(self):
        self.assertIsNone(self.carrinho.definir_quantidade("p1", "v1", 2))
        self.assertTrue(self.carrinho.esta_vazio())

    def test_total_soma_quantidade_vezes_preco(self):
        """
        Cenário: 2 x 100 (sem promoção) + 1 x 50 (promocional) = 250.
        """
        carrinho = CarrinhoStore()
        produto_a = criar_produto(estoque=5, preco="100")
        produto_b = criar_produto(estoque=5, preco="80", promocional="50", produto_id="p2")
        carrinho.adicionar(produto_a, produto_a.variantes[0], 2)
        carrinho.adicionar(produto_b, produto_b.variantes[0], 1)

        self.assertEqual(carrinho.total(), Decimal("250"))

    def test_tres_adicoes_com_promocao_e_estoque_dois(self):
        """
        Cenário: preço 100, promocional 80, estoque 2. Três adições de 1 unidade.
        """
        carrinho = CarrinhoStore()
        produto = criar_produto(estoque=2, preco="100", promocional="80")
        variante = produto.variantes[0]

        historico = []
        for _ in range(3):
            carrinho.adicionar(produto, variante)
            historico.append((carrinho.buscar("p1", "v1").quantidade, carrinho.total()))

        self.assertEqual(historico, [(1, Decimal("80")), (2, Decimal("160")), (2, Decimal("160"))])

    def test_adicoes_repetidas_ficam_no_minimo_entre_estoque_e_soma(self):
        for estoque, n, k in [(10, 3, 2), (10, 3, 4), (5, 2, 3), (7, 7, 1)]:
            with self.subTest(estoque=estoque, n=n, k=k):
                carrinho = CarrinhoStore()
                produto = criar_produto(estoque=estoque)
                for _ in range(k):
                    carrinho.adicionar(produto, produto.variantes[0], n)

                self.assertEqual(carrinho.buscar("p1", "v1").quantidade, min(estoque, n * k))

    def test_total_independe_da_ordem_das_operacoes(self):
        """
        Cenário: Sequências diferentes que chegam às mesmas quantidades finais têm o mesmo total.
        """
        produto_a = criar_produto(estoque=5, preco="100")
        produto_b = criar_produto(estoque=5, preco="80", promocional="50", produto_id="p2")
        variante_a, variante_b = produto_a.variantes[0], produto_b.variantes[0]

        primeiro = CarrinhoStore()
        primeiro.adicionar(produto_a, variante_a, 2)
        primeiro.adicionar(produto_b, variante_b, 3)

        segundo = CarrinhoStore()
        segundo.adicionar(produto_b, variante_b, 1)
        segundo.adicionar(produto_a, variante_a, 5)
        segundo.remover("p2", "v1")
        segundo.adicionar(produto_b, variante_b, 4)
        segundo.definir_quantidade("p1", "v1", 2)
        segundo.definir_quantidade("p2", "v1", 3)

        self.assertEqual(primeiro.total(), Decimal("350"))
        self.assertEqual(segundo.total(), primeiro.total())

    def test_total_carrinho_vazio_e_zero(self):
        self.assertEqual(CarrinhoStore().total(), Decimal("0"))

    def test_limpar_esvazia_e_notifica(self):
        self.carrinho.adicionar(self.produto, self.variante)
        self.ao_alterar.reset_mock()

        self.carrinho.limpar()

        self.assertTrue(self.carrinho.esta_vazio())
        self.ao_alterar.assert_called_once_with(self.carrinho)


class GerenciarCarrinhoUseCaseTestCase(unittest.TestCase):

    def setUp(self):
        self.produto_repo_mock = Mock()
        self.use_case = GerenciarCarrinhoUseCase(produto_repo=self.produto_repo_mock)
        self.carrinho = CarrinhoStore()

    def test_adicionar_item_busca_produto_no_catalogo(self):
        self.produto_repo_mock.buscar_por_id.return_value = criar_produto(estoque=2)

        item = self.use_case.adicionar_item(self.carrinho, "p1", "v1", 1)

        self.assertEqual(item.quantidade, 1)
        self.produto_repo_mock.buscar_por_id.assert_called_once_with("p1")

    def test_adicionar_item_produto_inexistente_falha(self):
        self.produto_repo_mock.buscar_por_id.return_value = None

        with self.assertRaises(ProdutoNaoEncontradoError):
            self.use_case.adicionar_item(self.carrinho, "p-x", "v1")

        self.assertTrue(self.carrinho.esta_vazio())

    def test_adicionar_item_variante_inexistente_falha(self):
        self.produto_repo_mock.buscar_por_id.return_value = criar_produto()

        with self.assertRaises(ItemNaoEncontradoError):
            self.use_case.adicionar_item(self.carrinho, "p1", "v-x")


# ====================================================================
# TESTES DO CÁLCULO DE FRETE
# ====================================================================

class CalcularFreteUseCaseTestCase(unittest.TestCase):

    def setUp(self):
        self.gateway_mock = Mock()
        self.use_case = CalcularFreteUseCase(frete_gateway=self.gateway_mock)

    def test_normaliza_opcoes_e_descarta_servicos_com_erro(self):
        self.gateway_mock.cotar.return_value = [
            {"company": {"name": "Correios"}, "name": "PAC", "delivery_time": 7, "price": 25.5},
            {"company": {"name": "Correios"}, "name": "SEDEX", "error": "Serviço indisponível"},
            {"company": {"name": "Jadlog"}, "name": ".Package", "has_error": True},
            {"company": {"name": "Loggi"}, "name": "Express", "delivery_time": "3", "price": "19.90"},
        ]

        opcoes = self.use_case.executar("64000-000")

        self.gateway_mock.cotar.assert_called_once_with("64000000")
        self.assertEqual(len(opcoes), 2)
        self.assertEqual(opcoes[0].transportadora, "Correios")
        self.assertEqual(opcoes[0].servico, "PAC")
        self.assertEqual(opcoes[0].prazo_dias_uteis, 7)
        self.assertEqual(opcoes[0].preco, Decimal("25.5"))
        self.assertEqual(opcoes[1].preco, Decimal("19.90"))

    def test_cep_ausente_nao_chama_servico(self):
        for cep in (None, "", "   ", "-"):
            with self.assertRaises(EntradaAusenteError):
                self.use_case.executar(cep)

        self.gateway_mock.cotar.assert_not_called()

    def test_resposta_fora_de_lista_e_invalida(self):
        self.gateway_mock.cotar.return_value = {"message": "Token inválido"}

        with self.assertRaises(FreteRespostaInvalidaError):
            self.use_case.executar("64000000")

    def test_servico_sem_campos_obrigatorios_e_invalido(self):
        self.gateway_mock.cotar.return_value = [{"name": "PAC", "price": 10}]

        with self.assertRaises(FreteRespostaInvalidaError):
            self.use_case.executar("64000000")

    def test_indisponibilidade_do_servico_propaga(self):
        self.gateway_mock.cotar.side_effect = FreteIndisponivelError(status_code=500)

        with self.assertRaises(FreteIndisponivelError):
            self.use_case.executar("64000000")

        self.assertEqual(self.gateway_mock.cotar.call_count, 1)


# ====================================================================
# TESTE DO USE CASE FINALIZAR PEDIDO
# ====================================================================

class FinalizarPedidoUseCaseTestCase(unittest.TestCase):

    def setUp(self):
        self.pedido_repo_mock = Mock()
        self.pedido_repo_mock.criar.side_effect = lambda pedido: replace(pedido, id="42")
        self.use_case = FinalizarPedidoUseCase(
            pedido_repo=self.pedido_repo_mock,
            relogio=lambda: datetime(2024, 1, 15, 9, 30, 0),
        )
        self.carrinho = CarrinhoStore()
        produto = criar_produto(estoque=5, preco="100.00")
        self.carrinho.adicionar(produto, produto.variantes[0], 2)
        self.dados = DadosPessoais(nome="Maria", telefone="86999999999")

    def test_finalizar_pedido_com_retirada(self):
        """
        Cenário: Checkout com retirada na loja.
        """
        pedido = self.use_case.executar(self.carrinho, self.dados, TipoEntrega.RETIRADA, "pix")

        self.assertEqual(pedido.id, "42")
        self.assertEqual(pedido.valor, Decimal("200.00"))
        self.assertEqual(pedido.time_stamp, "20240115093000")
        self.assertEqual(pedido.status, StatusPedido.PENDENTE)
        self.assertIsNone(pedido.entrega)
        self.assertEqual(pedido.itens, [ItemPedido(produto_id="p1", variante_id="v1", quantidade=2)])
        self.assertTrue(self.carrinho.esta_vazio())

    def test_finalizar_pedido_com_entrega(self):
        entrega = Entrega(endereco="Rua A", numero="10", cidade="Teresina", frete=Decimal("25.00"))

        pedido = self.use_case.executar(self.carrinho, self.dados, "delivery", "cartao", entrega=entrega)

        self.assertEqual(pedido.tipo_entrega, TipoEntrega.ENTREGA)
        self.assertEqual(pedido.entrega.frete, Decimal("25.00"))
        # O valor do pedido não inclui o frete
        self.assertEqual(pedido.valor, Decimal("200.00"))

    def test_entrega_sem_endereco_falha(self):
        with self.assertRaises(DadosInvalidosError):
            self.use_case.executar(self.carrinho, self.dados, TipoEntrega.ENTREGA, "pix")

        self.pedido_repo_mock.criar.assert_not_called()
        self.assertFalse(self.carrinho.esta_vazio())

    def test_carrinho_vazio_falha(self):
        with self.assertRaises(CarrinhoVazioError):
            self.use_case.executar(CarrinhoStore(), self.dados, TipoEntrega.RETIRADA, "pix")

        self.pedido_repo_mock.criar.assert_not_called()

    def test_estoque_insuficiente_preserva_carrinho(self):
        self.pedido_repo_mock.criar.side_effect = EstoqueInsuficienteError("p1", "v1", 1, 2)

        with self.assertRaises(EstoqueInsuficienteError):
            self.use_case.executar(self.carrinho, self.dados, TipoEntrega.RETIRADA, "pix")

        self.assertEqual(self.carrinho.buscar("p1", "v1").quantidade, 2)


# ====================================================================
# TESTE DO USE CASE ATUALIZAR STATUS
# ====================================================================

class AtualizarStatusPedidoUseCaseTestCase(unittest.TestCase):

    def setUp(self):
        self.pedido_repo = Mock()
        self.pedido_pendente = criar_pedido(pedido_id="101")
        self.pedido_repo.buscar_por_id.return_value = self.pedido_pendente
        self.projecao = ProjecaoPedidos([self.pedido_pendente])

        self.uc_atualizar_status = AtualizarStatusPedidoUseCase(
            pedido_repo=self.pedido_repo,
            projecao=self.projecao,
        )

    # ----------------------------------------------------------------------
    # TESTES DE SUCESSO E FLUXO
    # ----------------------------------------------------------------------

    def test_atualiza_status_grava_e_projeta(self):
        pedido = self.uc_atualizar_status.executar("101", "Enviado")

        self.assertEqual(pedido.status, StatusPedido.ENVIADO)
        self.pedido_repo.atualizar_status.assert_called_once_with("101", StatusPedido.ENVIADO)
        self.assertEqual(self.projecao.obter("101").status, StatusPedido.ENVIADO)
        self.assertFalse(self.uc_atualizar_status.em_andamento("101"))

    def test_qualquer_status_pode_voltar(self):
        """Concluído -> Pendente é permitido."""
        self.pedido_repo.buscar_por_id.return_value = criar_pedido(pedido_id="101", status=StatusPedido.CONCLUIDO)

        pedido = self.uc_atualizar_status.executar("101", StatusPedido.PENDENTE)

        self.assertEqual(pedido.status, StatusPedido.PENDENTE)
        self.pedido_repo.atualizar_status.assert_called_once()

    def test_nao_grava_se_status_for_o_mesmo(self):
        pedido = self.uc_atualizar_status.executar("101", "Pendente")

        self.assertEqual(pedido.status, StatusPedido.PENDENTE)
        self.pedido_repo.atualizar_status.assert_not_called()

    # ----------------------------------------------------------------------
    # TESTES DE VALIDAÇÃO E ERRO
    # ----------------------------------------------------------------------

    def test_falha_se_status_for_invalido(self):
        with self.assertRaises(StatusInvalidoError):
            self.uc_atualizar_status.executar("101", "Extraviado")

        self.pedido_repo.buscar_por_id.assert_not_called()
        self.pedido_repo.atualizar_status.assert_not_called()

    def test_falha_se_pedido_nao_for_encontrado(self):
        self.pedido_repo.buscar_por_id.return_value = None

        with self.assertRaises(PedidoNaoEncontradoError):
            self.uc_atualizar_status.executar("999", "Pago")

        self.pedido_repo.atualizar_status.assert_not_called()
        self.assertFalse(self.uc_atualizar_status.em_andamento("999"))

    def test_falha_de_persistencia_nao_altera_projecao(self):
        self.pedido_repo.atualizar_status.side_effect = FalhaPersistenciaError()

        with self.assertRaises(FalhaPersistenciaError):
            self.uc_atualizar_status.executar("101", "Pago")

        self.assertEqual(self.projecao.obter("101").status, StatusPedido.PENDENTE)
        self.assertFalse(self.uc_atualizar_status.em_andamento("101"))

    def test_segunda_atualizacao_do_mesmo_pedido_e_rejeitada(self):
        """
        Cenário: enquanto a primeira gravação está bloqueada, uma segunda
        atualização do mesmo pedido é rejeitada e não chega ao repositório.
        """
        entrou = threading.Event()
        liberar = threading.Event()

        def gravacao_lenta(pedido_id, status):
            entrou.set()
            liberar.wait(timeout=5)

        self.pedido_repo.atualizar_status.side_effect = gravacao_lenta
        resultados = []
        primeira = threading.Thread(
            target=lambda: resultados.append(self.uc_atualizar_status.executar("101", "Pago"))
        )
        primeira.start()
        self.assertTrue(entrou.wait(timeout=5))

        try:
            self.assertTrue(self.uc_atualizar_status.em_andamento("101"))
            with self.assertRaises(TransicaoEmAndamentoError):
                self.uc_atualizar_status.executar("101", "Cancelado")
        finally:
            liberar.set()
            primeira.join(timeout=5)

        self.assertEqual(self.pedido_repo.atualizar_status.call_count, 1)
        self.assertEqual(resultados[0].status, StatusPedido.PAGO)
        self.assertEqual(self.projecao.obter("101").status, StatusPedido.PAGO)
        self.assertFalse(self.uc_atualizar_status.em_andamento("101"))

    def test_pedidos_diferentes_nao_se_bloqueiam(self):
        entrou = threading.Event()
        liberar = threading.Event()

        def gravacao(pedido_id, status):
            if pedido_id == "101":
                entrou.set()
                liberar.wait(timeout=5)

        self.pedido_repo.atualizar_status.side_effect = gravacao
        primeira = threading.Thread(target=self.uc_atualizar_status.executar, args=("101", "Pago"))
        primeira.start()
        self.assertTrue(entrou.wait(timeout=5))

        try:
            self.pedido_repo.buscar_por_id.return_value = criar_pedido(pedido_id="202")
            pedido = self.uc_atualizar_status.executar("202", "Enviado")
        finally:
            liberar.set()
            primeira.join(timeout=5)

        self.assertEqual(pedido.status, StatusPedido.ENVIADO)


# ====================================================================
# TESTES DOS RESUMOS DO PAINEL
# ====================================================================

class ResumosPedidosTestCase(unittest.TestCase):

    def setUp(self):
        self.produtos = [criar_produto()]

    def test_ordena_do_mais_recente_para_o_mais_antigo(self):
        pedidos = [
            criar_pedido(pedido_id="a", time_stamp="20240101120000"),
            criar_pedido(pedido_id="b", time_stamp="20240301120000"),
            criar_pedido(pedido_id="c", time_stamp="20240201120000"),
        ]

        resumos = resumir_pedidos(pedidos, self.produtos)

        self.assertEqual([r.id for r in resumos], ["b", "c", "a"])

    def test_total_inclui_frete_quando_ha_entrega(self):
        entrega = Entrega(endereco="Rua A", numero="10", cidade="Teresina", frete=Decimal("25.00"))

        resumo = resumir_pedidos([criar_pedido(entrega=entrega)], self.produtos)[0]

        self.assertEqual(resumo.total, Decimal("225.00"))
        self.assertEqual(resumo.entrega, "Rua A, 10")

    def test_retirada_sem_frete(self):
        resumo = resumir_pedidos([criar_pedido()], self.produtos)[0]

        self.assertEqual(resumo.total, Decimal("200.00"))
        self.assertEqual(resumo.entrega, "Retirada")

    def test_total_geral_com_e_sem_entrega(self):
        """
        Cenário: Valor 150 com frete 20 totaliza 170; sem bloco de entrega, 150.
        """
        entrega = Entrega(endereco="Rua A", numero="10", cidade="Teresina", frete=Decimal("20"))
        com_entrega = replace(criar_pedido(entrega=entrega), valor=Decimal("150"))
        sem_entrega = replace(criar_pedido(), valor=Decimal("150"))

        self.assertEqual(total_geral(com_entrega), Decimal("170"))
        self.assertEqual(total_geral(sem_entrega), Decimal("150"))

    def test_itens_com_nomes_e_sentinelas(self):
        itens = [
            ItemPedido(produto_id="p1", variante_id="v1", quantidade=2),
            ItemPedido(produto_id="p1", variante_id="v-apagada", quantidade=1),
            ItemPedido(produto_id="p-apagado", variante_id="v1", quantidade=3),
        ]

        resumo = resumir_pedidos([criar_pedido(itens=itens)], self.produtos)[0]

        self.assertEqual(resumo.itens, [
            "iPhone 13 Preto (x2)",
            f"iPhone 13 {VARIANTE_REMOVIDA} (x1)",
            f"{PRODUTO_REMOVIDO} {PRODUTO_REMOVIDO} (x3)",
        ])

    def test_formata_data(self):
        self.assertEqual(formatar_time_stamp("20240115093000"), "15/01/2024 09:30")
        self.assertEqual(formatar_time_stamp("ontem"), "ontem")


class ListarResumosPedidosUseCaseTestCase(unittest.TestCase):

    def test_recarrega_projecao_a_cada_consulta(self):
        pedido_repo = Mock()
        produto_repo = Mock()
        pedido_repo.listar_todos.return_value = [criar_pedido(pedido_id="1")]
        produto_repo.listar_todos.return_value = [criar_produto()]
        projecao = ProjecaoPedidos()
        use_case = ListarResumosPedidosUseCase(pedido_repo, produto_repo, projecao)

        resumos = use_case.executar()

        self.assertEqual(len(resumos), 1)
        self.assertEqual(resumos[0].cliente, "Maria")
        self.assertIsNotNone(projecao.obter("1"))


# ====================================================================
# TESTES DAS CONFIGURAÇÕES DA LOJA
# ====================================================================

class GerenciarCuponsUseCaseTestCase(unittest.TestCase):

    def setUp(self):
        self.cupom_repo = Mock()
        self.cupom_repo.buscar_por_codigo.return_value = None
        self.cupom_repo.salvar.side_effect = lambda cupom: Cupom(
            codigo=cupom.codigo, percentual=cupom.percentual, ativo=cupom.ativo, id="7"
        )
        self.use_case = GerenciarCuponsUseCase(cupom_repo=self.cupom_repo)

    def test_criar_cupom_normaliza_codigo(self):
        cupom = self.use_case.criar(" promo10 ", "10")

        self.assertEqual(cupom.codigo, "PROMO10")
        self.assertEqual(cupom.percentual, 10)
        self.assertTrue(cupom.ativo)
        self.cupom_repo.salvar.assert_called_once()

    def test_criar_cupom_invalido_falha(self):
        for codigo, percentual in (("", 10), ("PROMO", 0), ("PROMO", -5), ("PROMO", 101), ("PROMO", "abc")):
            with self.assertRaises(CupomInvalidoError):
                self.use_case.criar(codigo, percentual)

        self.cupom_repo.salvar.assert_not_called()

    def test_criar_cupom_duplicado_falha(self):
        self.cupom_repo.buscar_por_codigo.return_value = Cupom(codigo="PROMO10", percentual=10, id="1")

        with self.assertRaises(CupomInvalidoError):
            self.use_case.criar("promo10", 15)

    def test_remover_cupom_inexistente_falha(self):
        self.cupom_repo.remover.return_value = False

        with self.assertRaises(ItemNaoEncontradoError):
            self.use_case.remover("999")


class ConfiguracoesLojaUseCaseTestCase(unittest.TestCase):

    def setUp(self):
        self.loja_repo = Mock()
        self.loja_repo.obter.return_value = LojaInfo(titulo="Easy Phone", email="contato@easyphone.com")
        self.loja_repo.salvar.side_effect = lambda loja: loja
        self.use_case = ConfiguracoesLojaUseCase(loja_repo=self.loja_repo)

    def test_atualizar_parcial_preserva_demais_campos(self):
        loja = self.use_case.atualizar(instagram="@easyphone")

        self.assertEqual(loja.instagram, "@easyphone")
        self.assertEqual(loja.titulo, "Easy Phone")
        self.assertEqual(loja.email, "contato@easyphone.com")

    def test_atualizar_campo_desconhecido_falha(self):
        with self.assertRaises(DadosInvalidosError):
            self.use_case.atualizar(cnpj="123")

        self.loja_repo.salvar.assert_not_called()


if __name__ == "__main__":
    unittest.main()
