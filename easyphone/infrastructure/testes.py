from decimal import Decimal
from unittest import TestCase as SimpleTestCase
from unittest.mock import Mock, patch

import requests
from django.core.exceptions import ValidationError
from django.db import DatabaseError
from django.test import TestCase, override_settings

# Importamos as classes que queremos testar
from easyphone.catalog.models import Produto as ProdutoModel, Variante as VarianteModel
from easyphone.pedidos.models import Pedido as PedidoModel
from easyphone.loja.models import Cupom as CupomModel
from easyphone.infrastructure.gateways import SuperFreteGateway, PACOTE_PADRAO
from easyphone.infrastructure.repositories import (
    ProdutoRepositoryDjango,
    PedidoRepositoryDjango,
    CupomRepositoryDjango,
    LojaRepositoryDjango,
)
from easyphone.core.entities import (
    Produto as ProdutoEntity, Pedido, ItemPedido, DadosPessoais, Entrega, TipoEntrega, StatusPedido, Cupom, LojaInfo,
)
from easyphone.core.exceptions import (
    EstoqueInsuficienteError,
    FalhaPersistenciaError,
    PedidoNaoEncontradoError,
    CupomInvalidoError,
    FreteIndisponivelError,
    FreteRespostaInvalidaError,
)


def criar_produto_model(estoque=10, promocional=None):
    produto = ProdutoModel.objects.create(
        titulo='iPhone 13', marca='Apple', categoria='Smartphones', imagens=['https://exemplo.com/a.jpg']
    )
    variante = VarianteModel.objects.create(
        produto=produto, nome='Preto', estoque=estoque, preco=Decimal('3999.00'), promocional=promocional
    )
    return produto, variante


def montar_pedido(produto_id, variante_id, quantidade=1, entrega=None):
    return Pedido(
        dados_pessoais=DadosPessoais(nome='Maria', telefone='86999999999', email='maria@exemplo.com'),
        tipo_entrega=TipoEntrega.ENTREGA if entrega else TipoEntrega.RETIRADA,
        forma_pagamento='pix',
        itens=[ItemPedido(produto_id=str(produto_id), variante_id=str(variante_id), quantidade=quantidade)],
        valor=Decimal('3999.00') * quantidade,
        time_stamp='20240115093000',
        entrega=entrega,
    )


# ====================================================================
# REPOSITÓRIO DE PRODUTOS
# ====================================================================

class ProdutoRepositoryTestCase(TestCase):

    def setUp(self):
        self.repository = ProdutoRepositoryDjango()
        self.produto_model, self.variante_model = criar_produto_model(promocional=Decimal('3699.00'))

    def test_buscar_por_id_com_sucesso(self):
        """
        Cenário: Verificar se o repositório monta a entidade com as variantes.
        """
        produto = self.repository.buscar_por_id(str(self.produto_model.id))

        self.assertIsInstance(produto, ProdutoEntity)
        self.assertEqual(produto.titulo, 'iPhone 13')
        self.assertEqual(produto.imagens, ['https://exemplo.com/a.jpg'])
        self.assertEqual(len(produto.variantes), 1)
        self.assertEqual(produto.variantes[0].id, str(self.variante_model.id))
        self.assertEqual(produto.variantes[0].promocional, Decimal('3699.00'))
        self.assertTrue(produto.em_promocao)

    def test_buscar_por_id_nao_encontrado(self):
        self.assertIsNone(self.repository.buscar_por_id('999999'))
        self.assertIsNone(self.repository.buscar_por_id('id-nao-numerico'))

    def test_listar_todos(self):
        self.assertEqual(len(self.repository.listar_todos()), 1)


# ====================================================================
# REPOSITÓRIO DE PEDIDOS
# ====================================================================

class PedidoRepositoryTestCase(TestCase):

    def setUp(self):
        self.repository = PedidoRepositoryDjango()
        self.produto_model, self.variante_model = criar_produto_model(estoque=3)

    def test_criar_pedido_baixa_estoque(self):
        entrega = Entrega(endereco='Rua A', numero='10', cidade='Teresina', frete=Decimal('25.00'))

        pedido = self.repository.criar(
            montar_pedido(self.produto_model.id, self.variante_model.id, quantidade=2, entrega=entrega)
        )

        self.variante_model.refresh_from_db()
        self.assertEqual(self.variante_model.estoque, 1)
        self.assertIsNotNone(pedido.id)
        self.assertEqual(pedido.status, StatusPedido.PENDENTE)
        self.assertEqual(pedido.entrega.frete, Decimal('25.00'))
        self.assertEqual(pedido.itens[0].quantidade, 2)

    def test_criar_pedido_com_estoque_insuficiente_nao_grava(self):
        with self.assertRaises(EstoqueInsuficienteError):
            self.repository.criar(montar_pedido(self.produto_model.id, self.variante_model.id, quantidade=5))

        self.variante_model.refresh_from_db()
        self.assertEqual(self.variante_model.estoque, 3)
        self.assertEqual(PedidoModel.objects.count(), 0)

    def test_atualizar_status(self):
        pedido = self.repository.criar(montar_pedido(self.produto_model.id, self.variante_model.id))

        self.repository.atualizar_status(pedido.id, StatusPedido.CONCLUIDO)

        self.assertEqual(self.repository.buscar_por_id(pedido.id).status, StatusPedido.CONCLUIDO)

    def test_atualizar_status_pedido_inexistente(self):
        with self.assertRaises(PedidoNaoEncontradoError):
            self.repository.atualizar_status('999999', StatusPedido.PAGO)

    def test_falha_do_banco_vira_falha_de_persistencia(self):
        pedido = self.repository.criar(montar_pedido(self.produto_model.id, self.variante_model.id))

        with patch('django.db.models.query.QuerySet.update', side_effect=DatabaseError('conexão perdida')):
            with self.assertRaises(FalhaPersistenciaError):
                self.repository.atualizar_status(pedido.id, StatusPedido.PAGO)

        self.assertEqual(self.repository.buscar_por_id(pedido.id).status, StatusPedido.PENDENTE)

    def test_itens_continuam_apos_produto_removido(self):
        pedido = self.repository.criar(montar_pedido(self.produto_model.id, self.variante_model.id))

        self.produto_model.delete()

        self.assertEqual(len(self.repository.buscar_por_id(pedido.id).itens), 1)


# ====================================================================
# REPOSITÓRIOS DA LOJA
# ====================================================================

class CupomRepositoryTestCase(TestCase):

    def setUp(self):
        self.repository = CupomRepositoryDjango()

    def test_salvar_e_buscar_por_codigo(self):
        cupom = self.repository.salvar(Cupom(codigo='promo10', percentual=10))

        self.assertEqual(cupom.codigo, 'PROMO10')
        self.assertEqual(self.repository.buscar_por_codigo('promo10').id, cupom.id)

    def test_codigo_duplicado_falha(self):
        CupomModel.objects.create(codigo='PROMO10', percentual=10)

        with self.assertRaises(CupomInvalidoError):
            self.repository.salvar(Cupom(codigo='PROMO10', percentual=20))

    def test_remover(self):
        cupom = self.repository.salvar(Cupom(codigo='PROMO10', percentual=10))

        self.assertTrue(self.repository.remover(cupom.id))
        self.assertFalse(self.repository.remover(cupom.id))
        self.assertFalse(self.repository.remover('abc'))


class LojaRepositoryTestCase(TestCase):

    def test_obter_cria_registro_vazio(self):
        self.assertEqual(LojaRepositoryDjango().obter(), LojaInfo())

    def test_salvar(self):
        repository = LojaRepositoryDjango()

        repository.salvar(LojaInfo(titulo='Easy Phone', whatsapp='5586999999999'))

        self.assertEqual(repository.obter().titulo, 'Easy Phone')
        self.assertEqual(repository.obter().whatsapp, '5586999999999')


# ====================================================================
# GATEWAY DE FRETE
# ====================================================================

class SuperFreteGatewayTestCase(SimpleTestCase):

    def setUp(self):
        self.gateway = SuperFreteGateway(
            url='https://frete.exemplo.com/calculator', token='token-teste', cep_origem='64091250'
        )

    def _resposta(self, status=200, json_data=None, text=''):
        resposta = Mock()
        resposta.status_code = status
        resposta.ok = 200 <= status < 300
        resposta.text = text
        if json_data is None:
            resposta.json.side_effect = ValueError('sem JSON')
        else:
            resposta.json.return_value = json_data
        return resposta

    @patch('easyphone.infrastructure.gateways.requests.post')
    def test_cotar_envia_perfil_fixo(self, mock_post):
        mock_post.return_value = self._resposta(json_data=[{'name': 'PAC'}])

        dados = self.gateway.cotar('64000000')

        self.assertEqual(dados, [{'name': 'PAC'}])
        args, kwargs = mock_post.call_args
        self.assertEqual(args[0], 'https://frete.exemplo.com/calculator')
        self.assertEqual(kwargs['headers']['x-access-token'], 'token-teste')
        self.assertEqual(kwargs['json']['from'], {'postal_code': '64091250'})
        self.assertEqual(kwargs['json']['to'], {'postal_code': '64000000'})
        self.assertEqual(kwargs['json']['package'], PACOTE_PADRAO)
        self.assertFalse(kwargs['json']['options']['own_hand'])

    @patch('easyphone.infrastructure.gateways.requests.post')
    def test_erro_de_conexao(self, mock_post):
        mock_post.side_effect = requests.exceptions.Timeout('tempo esgotado')

        with self.assertRaises(FreteIndisponivelError):
            self.gateway.cotar('64000000')

        self.assertEqual(mock_post.call_count, 1)

    @patch('easyphone.infrastructure.gateways.requests.post')
    def test_status_de_erro_do_servico(self, mock_post):
        mock_post.return_value = self._resposta(status=401, json_data={'message': 'Unauthenticated.'})

        with self.assertRaises(FreteIndisponivelError) as ctx:
            self.gateway.cotar('64000000')

        self.assertEqual(ctx.exception.status_code, 401)
        self.assertEqual(ctx.exception.detalhe, {'message': 'Unauthenticated.'})

    @patch('easyphone.infrastructure.gateways.requests.post')
    def test_resposta_que_nao_e_json(self, mock_post):
        mock_post.return_value = self._resposta(text='<html>erro</html>')

        with self.assertRaises(FreteRespostaInvalidaError) as ctx:
            self.gateway.cotar('64000000')

        self.assertEqual(ctx.exception.bruto, '<html>erro</html>')

    def test_padroes_vem_do_settings(self):
        with override_settings(
            SUPERFRETE_URL='https://outra.exemplo.com/calculator',
            SUPERFRETE_TOKEN='token-settings',
            FRETE_CEP_ORIGEM='01001000',
            FRETE_SERVICOS='1,2',
            FRETE_TIMEOUT=3,
        ):
            gateway = SuperFreteGateway()

        self.assertEqual(gateway.url, 'https://outra.exemplo.com/calculator')
        self.assertEqual(gateway.token, 'token-settings')
        self.assertEqual(gateway.cep_origem, '01001000')
        self.assertEqual(gateway.servicos, '1,2')
        self.assertEqual(gateway.timeout, 3)


# ====================================================================
# VALIDAÇÃO DO MODELO DE VARIANTE
# ====================================================================

class VarianteModelTestCase(SimpleTestCase):

    def test_preco_deve_ser_positivo(self):
        for preco in (Decimal('0'), Decimal('-1')):
            with self.subTest(preco=preco):
                with self.assertRaises(ValidationError) as ctx:
                    VarianteModel(nome='Preto', estoque=1, preco=preco).clean()
                self.assertIn('preco', ctx.exception.message_dict)

    def test_promocional_deve_ser_menor_que_preco(self):
        """
        Cenário: Promocional igual ou acima do preço de venda é rejeitado.
        """
        for promocional in (Decimal('100.00'), Decimal('150.00'), Decimal('-5.00')):
            with self.subTest(promocional=promocional):
                variante = VarianteModel(nome='Preto', estoque=1, preco=Decimal('100.00'), promocional=promocional)
                with self.assertRaises(ValidationError) as ctx:
                    variante.clean()
                self.assertIn('promocional', ctx.exception.message_dict)

    def test_variante_valida(self):
        VarianteModel(nome='Preto', estoque=0, preco=Decimal('100.00'), promocional=Decimal('80.00')).clean()
        VarianteModel(nome='Azul', estoque=2, preco=Decimal('100.00')).clean()

    def test_preco_formatado(self):
        self.assertEqual(VarianteModel(preco=Decimal('3999.90')).preco_formatado, 'R$ 3.999,90')
        self.assertEqual(VarianteModel().preco_formatado, '-')
