from decimal import Decimal
from unittest.mock import Mock, patch

import requests
from django.contrib import admin, messages
from django.contrib.auth import get_user_model
from django.test import RequestFactory, TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from easyphone.catalog.models import Produto as ProdutoModel, Variante as VarianteModel
from easyphone.pedidos.models import Pedido as PedidoModel, ItemPedido as ItemPedidoModel
from easyphone.loja.models import Cupom as CupomModel
from easyphone.infrastructure.instances import atualizar_status_pedido
from easyphone.presentation.admin import PedidoAdmin


def criar_produto_model(titulo='Galaxy S23', estoque=3, preco='4299.00', promocional=None):
    produto = ProdutoModel.objects.create(titulo=titulo, marca='Samsung', categoria='Smartphones')
    variante = VarianteModel.objects.create(
        produto=produto,
        nome='128GB',
        estoque=estoque,
        preco=Decimal(preco),
        promocional=Decimal(promocional) if promocional else None,
    )
    return produto, variante


def criar_pedido_model(produto, variante, status_pedido='Pendente', time_stamp='20240115093000'):
    pedido = PedidoModel.objects.create(
        status=status_pedido,
        valor=Decimal('4299.00'),
        forma_pagamento='pix',
        time_stamp=time_stamp,
        nome_cliente='Maria',
        telefone_cliente='86999999999',
        tipo_entrega='pickup',
    )
    ItemPedidoModel.objects.create(
        pedido=pedido, produto_id=str(produto.id), variante_id=str(variante.id), quantidade=1
    )
    return pedido


# ====================================================================
# CATÁLOGO
# ====================================================================

class ProdutoAPITestCase(APITestCase):

    def test_listar_produtos_com_selos(self):
        """
        Cenário: O card do produto mostra esgotado/promoção e o preço efetivo da variante.
        """
        criar_produto_model(titulo='Galaxy S23', promocional='3999.00')
        criar_produto_model(titulo='Moto G', estoque=0)

        response = self.client.get(reverse('produto-list'))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        por_titulo = {p['titulo']: p for p in response.data}
        self.assertTrue(por_titulo['Galaxy S23']['em_promocao'])
        self.assertFalse(por_titulo['Galaxy S23']['esgotado'])
        self.assertEqual(por_titulo['Galaxy S23']['variantes'][0]['preco_efetivo'], '3999.00')
        self.assertTrue(por_titulo['Moto G']['esgotado'])

    def test_detalhar_produto_inexistente(self):
        response = self.client.get(reverse('produto-detail', args=['999999']))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)


# ====================================================================
# CARRINHO
# ====================================================================

class CarrinhoAPITestCase(APITestCase):

    def setUp(self):
        self.produto, self.variante = criar_produto_model(estoque=3)
        self.url = reverse('api_carrinho')
        self.linha = {'produto_id': str(self.produto.id), 'variante_id': str(self.variante.id)}

    def test_carrinho_comeca_vazio(self):
        response = self.client.get(self.url)

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['itens'], [])
        self.assertEqual(response.data['total'], '0.00')

    def test_adicionar_item_limitado_ao_estoque(self):
        """
        Cenário: Adicionar mais unidades que o estoque deixa a linha no teto do estoque.
        """
        primeira = self.client.post(self.url, {**self.linha, 'quantidade': 2}, format='json')
        self.assertTrue(primeira.data['itens'][0]['pode_adicionar'])

        response = self.client.post(self.url, {**self.linha, 'quantidade': 5}, format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(len(response.data['itens']), 1)
        self.assertEqual(response.data['itens'][0]['quantidade'], 3)
        self.assertEqual(response.data['total'], '12897.00')
        self.assertFalse(response.data['itens'][0]['pode_adicionar'])

    def test_carrinho_persiste_na_sessao(self):
        self.client.post(self.url, self.linha, format='json')

        response = self.client.get(self.url)

        self.assertEqual(response.data['quantidade_total'], 1)
        self.assertEqual(response.data['itens'][0]['variante']['nome'], '128GB')

    def test_adicionar_produto_inexistente(self):
        response = self.client.post(self.url, {'produto_id': '999999', 'variante_id': '1'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_adicionar_quantidade_invalida(self):
        response = self.client.post(self.url, {**self.linha, 'quantidade': 0}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_definir_quantidade_e_remover(self):
        self.client.post(self.url, self.linha, format='json')

        response = self.client.patch(self.url, {**self.linha, 'quantidade': 2}, format='json')
        self.assertEqual(response.data['itens'][0]['quantidade'], 2)

        response = self.client.patch(self.url, {**self.linha, 'quantidade': 0}, format='json')
        self.assertEqual(response.data['itens'], [])

    def test_remover_item(self):
        self.client.post(self.url, self.linha, format='json')

        response = self.client.delete(self.url, self.linha, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['itens'], [])


# ====================================================================
# FRETE
# ====================================================================

class FreteAPITestCase(APITestCase):

    def setUp(self):
        self.url = reverse('api_frete')

    def _resposta(self, status_code=200, json_data=None, text=''):
        resposta = Mock()
        resposta.status_code = status_code
        resposta.ok = 200 <= status_code < 300
        resposta.text = text
        resposta.json.return_value = json_data
        return resposta

    @patch('easyphone.infrastructure.gateways.requests.post')
    def test_metodo_diferente_de_post(self, mock_post):
        response = self.client.get(self.url)

        self.assertEqual(response.status_code, status.HTTP_405_METHOD_NOT_ALLOWED)
        mock_post.assert_not_called()

    @patch('easyphone.infrastructure.gateways.requests.post')
    def test_cep_destino_ausente(self, mock_post):
        response = self.client.post(self.url, {}, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('error', response.data)
        mock_post.assert_not_called()

    @patch('easyphone.infrastructure.gateways.requests.post')
    def test_cotacao_com_sucesso(self, mock_post):
        """
        Cenário: Serviços com erro são descartados e os demais são normalizados.
        """
        mock_post.return_value = self._resposta(json_data=[
            {'name': 'PAC', 'price': 25.9, 'delivery_time': 7, 'company': {'name': 'Correios'}},
            {'name': 'Mini Envios', 'has_error': True, 'error': 'CEP fora da área'},
        ])

        response = self.client.post(self.url, {'cepDestino': '64000-000'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 1)
        self.assertEqual(response.data[0]['transportadora'], 'Correios')
        self.assertEqual(response.data[0]['preco'], '25.90')
        self.assertEqual(mock_post.call_args.kwargs['json']['to'], {'postal_code': '64000000'})

    @patch('easyphone.infrastructure.gateways.requests.post')
    def test_falha_de_conexao_nao_expoe_detalhe(self, mock_post):
        mock_post.side_effect = requests.exceptions.ConnectionError('api.interna:443 recusou a conexão')

        response = self.client.post(self.url, {'cepDestino': '64000000'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        self.assertEqual(response.data, {'error': 'Erro ao calcular frete'})

    @patch('easyphone.infrastructure.gateways.requests.post')
    def test_erro_do_provedor_repassa_status(self, mock_post):
        mock_post.return_value = self._resposta(status_code=401, json_data={'message': 'Unauthenticated'})

        response = self.client.post(self.url, {'cepDestino': '64000000'}, format='json')

        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.data['error'], {'message': 'Unauthenticated'})

    @patch('easyphone.infrastructure.gateways.requests.post')
    def test_resposta_malformada(self, mock_post):
        mock_post.return_value = self._resposta(json_data={'inesperado': True})

        response = self.client.post(self.url, {'cepDestino': '64000000'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        self.assertEqual(response.data['raw'], {'inesperado': True})


# ====================================================================
# CHECKOUT
# ====================================================================

class CheckoutAPITestCase(APITestCase):

    def setUp(self):
        self.produto, self.variante = criar_produto_model(estoque=3)
        self.url = reverse('api_checkout')
        self.payload = {
            'dados_pessoais': {'nome': 'Maria', 'telefone': '86999999999', 'email': 'maria@exemplo.com'},
            'tipo_entrega': 'delivery',
            'forma_pagamento': 'pix',
            'entrega': {'endereco': 'Rua das Flores', 'numero': '10', 'cidade': 'Teresina', 'frete': '25.90'},
        }

    def _adicionar_ao_carrinho(self, quantidade=2):
        self.client.post(
            reverse('api_carrinho'),
            {'produto_id': str(self.produto.id), 'variante_id': str(self.variante.id), 'quantidade': quantidade},
            format='json',
        )

    def test_checkout_com_sucesso(self):
        """
        Cenário: O pedido é gravado, o estoque baixa e o carrinho é esvaziado.
        """
        self._adicionar_ao_carrinho(quantidade=2)

        response = self.client.post(self.url, self.payload, format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['status'], 'Pendente')

        pedido = PedidoModel.objects.get(pk=response.data['pedido_id'])
        self.assertEqual(pedido.valor, Decimal('8598.00'))
        self.assertEqual(pedido.frete, Decimal('25.90'))
        self.assertEqual(pedido.itens.count(), 1)

        self.variante.refresh_from_db()
        self.assertEqual(self.variante.estoque, 1)

        carrinho = self.client.get(reverse('api_carrinho'))
        self.assertEqual(carrinho.data['itens'], [])

    def test_checkout_carrinho_vazio(self):
        response = self.client.post(self.url, self.payload, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(PedidoModel.objects.exists())

    def test_checkout_entrega_sem_endereco(self):
        self._adicionar_ao_carrinho()
        payload = {**self.payload, 'entrega': None}

        response = self.client.post(self.url, payload, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_checkout_estoque_insuficiente_mantem_carrinho(self):
        self._adicionar_ao_carrinho(quantidade=3)
        VarianteModel.objects.filter(pk=self.variante.pk).update(estoque=1)

        response = self.client.post(self.url, self.payload, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(PedidoModel.objects.exists())
        carrinho = self.client.get(reverse('api_carrinho'))
        self.assertEqual(carrinho.data['quantidade_total'], 3)


# ====================================================================
# PAINEL
# ====================================================================

class PainelAPITestCase(APITestCase):

    def setUp(self):
        User = get_user_model()
        self.admin = User.objects.create_user(username='admin', password='senha-forte-123', is_staff=True)
        self.cliente = User.objects.create_user(username='cliente', password='senha-forte-123')
        self.produto, self.variante = criar_produto_model()
        self.pedido = criar_pedido_model(self.produto, self.variante)
        self.client.force_authenticate(user=self.admin)

    def _url_status(self, pedido_id):
        return reverse('dashboard_atualizar_status', args=[str(pedido_id)])

    def test_painel_exige_equipe(self):
        self.client.force_authenticate(user=self.cliente)

        response = self.client.get(reverse('dashboard_pedidos'))

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_listar_pedidos_mais_recentes_primeiro(self):
        criar_pedido_model(self.produto, self.variante, time_stamp='20240220100000')

        response = self.client.get(reverse('dashboard_pedidos'))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data[0]['data'], '20/02/2024 10:00')
        self.assertEqual(response.data[1]['entrega'], 'Retirada')
        self.assertEqual(response.data[1]['itens'], ['Galaxy S23 128GB (x1)'])

    def test_resumo_de_produto_removido(self):
        self.produto.delete()

        response = self.client.get(reverse('dashboard_pedidos'))

        self.assertEqual(response.data[0]['itens'], ['Produto removido Produto removido (x1)'])

    def test_atualizar_status(self):
        response = self.client.patch(self._url_status(self.pedido.id), {'status': 'Enviado'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], 'Enviado')
        self.pedido.refresh_from_db()
        self.assertEqual(self.pedido.status, 'Enviado')

    def test_atualizar_status_invalido(self):
        response = self.client.patch(self._url_status(self.pedido.id), {'status': 'Extraviado'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.pedido.refresh_from_db()
        self.assertEqual(self.pedido.status, 'Pendente')

    def test_atualizar_status_pedido_inexistente(self):
        response = self.client.patch(self._url_status('999999'), {'status': 'Pago'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_atualizar_status_em_andamento(self):
        """
        Cenário: Com uma atualização do mesmo pedido em andamento, a segunda é rejeitada.
        """
        pedido_id = str(self.pedido.id)
        atualizar_status_pedido._reservar(pedido_id)
        try:
            response = self.client.patch(self._url_status(pedido_id), {'status': 'Pago'}, format='json')
        finally:
            atualizar_status_pedido._liberar(pedido_id)

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.pedido.refresh_from_db()
        self.assertEqual(self.pedido.status, 'Pendente')

    def test_cupons(self):
        response = self.client.post(
            reverse('dashboard_cupons'), {'codigo': ' natal10 ', 'percentual': 10}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['codigo'], 'NATAL10')

        duplicado = self.client.post(reverse('dashboard_cupons'), {'codigo': 'NATAL10', 'percentual': 5}, format='json')
        self.assertEqual(duplicado.status_code, status.HTTP_400_BAD_REQUEST)

        invalido = self.client.post(reverse('dashboard_cupons'), {'codigo': 'X', 'percentual': 0}, format='json')
        self.assertEqual(invalido.status_code, status.HTTP_400_BAD_REQUEST)

        lista = self.client.get(reverse('dashboard_cupons'))
        self.assertEqual([c['codigo'] for c in lista.data], ['NATAL10'])

        cupom_id = CupomModel.objects.get(codigo='NATAL10').id
        response = self.client.delete(reverse('dashboard_cupom_detalhe', args=[str(cupom_id)]))
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)

        response = self.client.delete(reverse('dashboard_cupom_detalhe', args=[str(cupom_id)]))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_informacoes_da_loja(self):
        response = self.client.get(reverse('dashboard_loja'))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['titulo'], '')

        response = self.client.patch(
            reverse('dashboard_loja'), {'titulo': 'Easy Phone', 'whatsapp': '86999999999'}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['titulo'], 'Easy Phone')
        self.assertEqual(response.data['descricao'], '')


# ====================================================================
# ADMIN DE PEDIDOS
# ====================================================================

class PedidoAdminTestCase(TestCase):

    def setUp(self):
        produto, variante = criar_produto_model()
        self.pedido = criar_pedido_model(produto, variante)
        self.model_admin = PedidoAdmin(PedidoModel, admin.site)
        self.model_admin.message_user = Mock()
        self.request = RequestFactory().post('/')

    def _form(self, novo_status):
        return Mock(changed_data=['status'], cleaned_data={'status': novo_status})

    def _salvar_pelo_admin(self, novo_status):
        obj = PedidoModel.objects.get(pk=self.pedido.pk)
        obj.status = novo_status
        # Alteração fora do status não deve chegar ao banco
        obj.nome_cliente = 'Outro Nome'
        self.model_admin.save_model(self.request, obj, self._form(novo_status), change=True)

    def test_status_pelo_admin_grava_apenas_o_status(self):
        self._salvar_pelo_admin('Pago')

        self.pedido.refresh_from_db()
        self.assertEqual(self.pedido.status, 'Pago')
        self.assertEqual(self.pedido.nome_cliente, 'Maria')
        self.model_admin.message_user.assert_not_called()

    def test_status_pelo_admin_respeita_atualizacao_em_andamento(self):
        """
        Cenário: Com uma atualização da API em andamento, o Admin não altera o pedido.
        """
        pedido_id = str(self.pedido.pk)
        atualizar_status_pedido._reservar(pedido_id)
        try:
            self._salvar_pelo_admin('Cancelado')
        finally:
            atualizar_status_pedido._liberar(pedido_id)

        self.pedido.refresh_from_db()
        self.assertEqual(self.pedido.status, 'Pendente')
        self.model_admin.message_user.assert_called_once()
        self.assertEqual(self.model_admin.message_user.call_args.kwargs['level'], messages.ERROR)

    def test_sem_mudanca_de_status_nada_e_gravado(self):
        obj = PedidoModel.objects.get(pk=self.pedido.pk)
        obj.nome_cliente = 'Outro Nome'

        self.model_admin.save_model(self.request, obj, Mock(changed_data=[], cleaned_data={}), change=True)

        self.pedido.refresh_from_db()
        self.assertEqual(self.pedido.nome_cliente, 'Maria')

    def test_total_formatado_inclui_frete(self):
        self.pedido.frete = Decimal('20.00')
        self.assertEqual(self.pedido.total_formatado, 'R$ 4.319,00')
