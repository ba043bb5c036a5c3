"""
Views do painel da loja (somente equipe): pedidos, status, cupons e informações da loja.
"""
from rest_framework import status
from rest_framework.permissions import IsAdminUser
from rest_framework.response import Response
from rest_framework.views import APIView
from drf_spectacular.utils import extend_schema

from easyphone.infrastructure.instances import (
    produto_repo,
    pedido_repo,
    cupom_repo,
    loja_repo,
    projecao_pedidos,
    atualizar_status_pedido,
)
from easyphone.core.use_cases import (
    ListarResumosPedidosUseCase,
    GerenciarCuponsUseCase,
    ConfiguracoesLojaUseCase,
)
from easyphone.core.exceptions import (
    DadosInvalidosError,
    ItemNaoEncontradoError,
    StatusInvalidoError,
    TransicaoEmAndamentoError,
    FalhaPersistenciaError,
)

from .serializers import ResumoPedidoSerializer, AtualizarStatusSerializer, CupomSerializer, LojaInfoSerializer


class PedidosDashboardAPIView(APIView):
    """
    Lista os pedidos do painel, do mais recente para o mais antigo.
    """
    permission_classes = [IsAdminUser]

    @extend_schema(responses=ResumoPedidoSerializer(many=True))
    def get(self, request):
        resumos = ListarResumosPedidosUseCase(pedido_repo, produto_repo, projecao_pedidos).executar()
        return Response(ResumoPedidoSerializer(resumos, many=True).data)


class AtualizarStatusPedidoAPIView(APIView):
    """
    Atualiza o status de um pedido. Apenas uma atualização por pedido fica em andamento.
    """
    permission_classes = [IsAdminUser]

    @extend_schema(request=AtualizarStatusSerializer, responses=ResumoPedidoSerializer)
    def patch(self, request, pk):
        serializer = AtualizarStatusSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        try:
            pedido = atualizar_status_pedido.executar(pedido_id=pk, novo_status=serializer.validated_data['status'])
        except StatusInvalidoError as e:
            return Response({'message': str(e)}, status=status.HTTP_400_BAD_REQUEST)
        except ItemNaoEncontradoError as e:
            return Response({'message': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except TransicaoEmAndamentoError as e:
            return Response({'message': str(e)}, status=status.HTTP_409_CONFLICT)
        except FalhaPersistenciaError as e:
            return Response({'message': str(e)}, status=status.HTTP_503_SERVICE_UNAVAILABLE)

        resumo = ListarResumosPedidosUseCase(pedido_repo, produto_repo, projecao_pedidos).resumir(pedido)
        return Response(ResumoPedidoSerializer(resumo).data)


class CuponsAPIView(APIView):
    permission_classes = [IsAdminUser]

    @extend_schema(responses=CupomSerializer(many=True))
    def get(self, request):
        cupons = GerenciarCuponsUseCase(cupom_repo).listar()
        return Response(CupomSerializer(cupons, many=True).data)

    @extend_schema(request=CupomSerializer, responses=CupomSerializer)
    def post(self, request):
        try:
            cupom = GerenciarCuponsUseCase(cupom_repo).criar(
                codigo=request.data.get('codigo'), percentual=request.data.get('percentual')
            )
        except DadosInvalidosError as e:
            return Response({'message': str(e)}, status=status.HTTP_400_BAD_REQUEST)
        except FalhaPersistenciaError as e:
            return Response({'message': str(e)}, status=status.HTTP_503_SERVICE_UNAVAILABLE)
        return Response(CupomSerializer(cupom).data, status=status.HTTP_201_CREATED)


class CupomDetalheAPIView(APIView):
    permission_classes = [IsAdminUser]

    def delete(self, request, pk):
        try:
            GerenciarCuponsUseCase(cupom_repo).remover(pk)
        except ItemNaoEncontradoError as e:
            return Response({'message': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except FalhaPersistenciaError as e:
            return Response({'message': str(e)}, status=status.HTTP_503_SERVICE_UNAVAILABLE)
        return Response(status=status.HTTP_204_NO_CONTENT)


class LojaInfoAPIView(APIView):
    """
    Informações gerais da loja (título, descrição, contato e redes sociais).
    """
    permission_classes = [IsAdminUser]

    @extend_schema(responses=LojaInfoSerializer)
    def get(self, request):
        return Response(LojaInfoSerializer(ConfiguracoesLojaUseCase(loja_repo).obter()).data)

    @extend_schema(request=LojaInfoSerializer, responses=LojaInfoSerializer)
    def patch(self, request):
        serializer = LojaInfoSerializer(data=request.data, partial=True)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        try:
            loja = ConfiguracoesLojaUseCase(loja_repo).atualizar(**serializer.validated_data)
        except FalhaPersistenciaError as e:
            return Response({'message': str(e)}, status=status.HTTP_503_SERVICE_UNAVAILABLE)
        return Response(LojaInfoSerializer(loja).data)
