import logging

from rest_framework import status, viewsets
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView
from drf_spectacular.utils import extend_schema

from easyphone.infrastructure.instances import produto_repo, pedido_repo, frete_gateway
from easyphone.core.use_cases import (
    ListarProdutosUseCase,
    GerenciarCarrinhoUseCase,
    CalcularFreteUseCase,
    FinalizarPedidoUseCase,
)
from easyphone.core.exceptions import (
    DadosInvalidosError,
    EntradaAusenteError,
    ItemNaoEncontradoError,
    EstoqueInsuficienteError,
    CarrinhoVazioError,
    FalhaPersistenciaError,
    FreteIndisponivelError,
    FreteRespostaInvalidaError,
)

from .cart_manager import CartManager
from .serializers import (
    ProdutoSerializer,
    CarrinhoSerializer,
    AdicionarItemCarrinhoSerializer,
    DefinirQuantidadeSerializer,
    ItemCarrinhoInputSerializer,
    OpcaoFreteSerializer,
    CheckoutSerializer,
)

logger = logging.getLogger(__name__)


# ====================================================================
# VIEWS: Orquestram a requisição, a execução dos casos de uso e a resposta.
# ====================================================================

class ProdutoViewSet(viewsets.ViewSet):
    """
    Catálogo (somente leitura). Cada variante vem com o preço efetivo.
    """
    permission_classes = [AllowAny]

    @extend_schema(responses=ProdutoSerializer(many=True))
    def list(self, request):
        produtos = ListarProdutosUseCase(produto_repo).listar()
        return Response(ProdutoSerializer(produtos, many=True).data)

    @extend_schema(responses=ProdutoSerializer)
    def retrieve(self, request, pk=None):
        try:
            produto = ListarProdutosUseCase(produto_repo).detalhar(pk)
        except ItemNaoEncontradoError as e:
            return Response({'message': str(e)}, status=status.HTTP_404_NOT_FOUND)
        return Response(ProdutoSerializer(produto).data)


class CarrinhoAPIView(APIView):
    """
    API View para gerenciar o carrinho da sessão.
    """
    permission_classes = [AllowAny]

    def _resposta(self, manager, http_status=status.HTTP_200_OK):
        return Response(CarrinhoSerializer(manager.get_carrinho()).data, status=http_status)

    @extend_schema(responses=CarrinhoSerializer)
    def get(self, request):
        """
        Retorna o carrinho da sessão.
        """
        return self._resposta(CartManager(request))

    @extend_schema(request=AdicionarItemCarrinhoSerializer, responses=CarrinhoSerializer)
    def post(self, request):
        """
        Adiciona um item ao carrinho (limitado ao estoque da variante).
        """
        serializer = AdicionarItemCarrinhoSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        manager = CartManager(request)
        try:
            GerenciarCarrinhoUseCase(produto_repo).adicionar_item(
                carrinho=manager.get_carrinho(),
                produto_id=serializer.validated_data['produto_id'],
                variante_id=serializer.validated_data['variante_id'],
                quantidade=serializer.validated_data['quantidade'],
            )
        except ItemNaoEncontradoError as e:
            return Response({'message': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except DadosInvalidosError as e:
            return Response({'message': str(e)}, status=status.HTTP_400_BAD_REQUEST)
        return self._resposta(manager, status.HTTP_201_CREATED)

    @extend_schema(request=DefinirQuantidadeSerializer, responses=CarrinhoSerializer)
    def patch(self, request):
        """
        Define a quantidade de uma linha. Zero ou menos remove a linha.
        """
        serializer = DefinirQuantidadeSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        manager = CartManager(request)
        GerenciarCarrinhoUseCase(produto_repo).definir_quantidade(
            carrinho=manager.get_carrinho(),
            produto_id=serializer.validated_data['produto_id'],
            variante_id=serializer.validated_data['variante_id'],
            quantidade=serializer.validated_data['quantidade'],
        )
        return self._resposta(manager)

    @extend_schema(request=ItemCarrinhoInputSerializer, responses=CarrinhoSerializer)
    def delete(self, request):
        """
        Remove um item do carrinho. Sem efeito se a linha não existir.
        """
        serializer = ItemCarrinhoInputSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        manager = CartManager(request)
        GerenciarCarrinhoUseCase(produto_repo).remover_item(
            carrinho=manager.get_carrinho(),
            produto_id=serializer.validated_data['produto_id'],
            variante_id=serializer.validated_data['variante_id'],
        )
        return self._resposta(manager)


class FreteAPIView(APIView):
    """
    Proxy da cotação de frete. Aceita apenas POST com {cepDestino}.
    """
    permission_classes = [AllowAny]

    @extend_schema(responses=OpcaoFreteSerializer(many=True))
    def post(self, request):
        try:
            opcoes = CalcularFreteUseCase(frete_gateway).executar(request.data.get('cepDestino'))
        except EntradaAusenteError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
        except FreteIndisponivelError as e:
            if e.status_code is None:
                # Falha de conexão: o detalhe fica só no log
                logger.warning("Cotação de frete indisponível: %s", e.detalhe)
                return Response({'error': str(e)}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
            return Response({'error': e.detalhe or str(e)}, status=e.status_code)
        except FreteRespostaInvalidaError as e:
            return Response({'error': str(e), 'raw': e.bruto}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

        return Response(OpcaoFreteSerializer(opcoes, many=True).data)


class CheckoutAPIView(APIView):
    """
    API View para transformar o carrinho da sessão em um pedido.
    """
    permission_classes = [AllowAny]

    @extend_schema(request=CheckoutSerializer)
    def post(self, request):
        serializer = CheckoutSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        manager = CartManager(request)
        try:
            pedido = FinalizarPedidoUseCase(pedido_repo).executar(
                carrinho=manager.get_carrinho(),
                dados_pessoais=serializer.to_dados_pessoais(),
                tipo_entrega=serializer.validated_data['tipo_entrega'],
                forma_pagamento=serializer.validated_data['forma_pagamento'],
                entrega=serializer.to_entrega(),
            )
        except (CarrinhoVazioError, EstoqueInsuficienteError, DadosInvalidosError) as e:
            return Response({'message': str(e)}, status=status.HTTP_400_BAD_REQUEST)
        except FalhaPersistenciaError as e:
            logger.error("Checkout não concluído: %s", e)
            return Response({'message': str(e)}, status=status.HTTP_503_SERVICE_UNAVAILABLE)

        return Response(
            {'message': 'Pedido criado com sucesso!', 'pedido_id': pedido.id, 'status': pedido.status.value},
            status=status.HTTP_201_CREATED,
        )
