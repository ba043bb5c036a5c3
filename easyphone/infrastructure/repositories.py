"""
Camada de Infraestrutura: Implementação de Repositórios.

Esta camada traduz as operações abstratas definidas nas Portas da Core
em chamadas concretas ao Django ORM.
"""
import logging
from typing import List, Optional

from django.apps import apps
from django.db import DatabaseError, IntegrityError, transaction
from django.db.models import F, Prefetch

# Importações da Camada CORE (ENTIDADES e PORTAS)
from easyphone.core.entities import Produto, Pedido, Cupom, LojaInfo, StatusPedido
from easyphone.core.ports import (
    IProdutoRepository,
    IPedidoRepository,
    ICupomRepository,
    ILojaRepository,
)
from easyphone.core.exceptions import (
    EstoqueInsuficienteError,
    PedidoNaoEncontradoError,
    FalhaPersistenciaError,
    CupomInvalidoError,
)

from .mappers import ProdutoMapper, PedidoMapper, ItemPedidoMapper, CupomMapper, LojaInfoMapper

logger = logging.getLogger(__name__)


# Helper para Lazy Loading
def get_model(app_label, model_name):
    """Busca o modelo Django de forma segura (Lazy Loading)."""
    return apps.get_model(app_label, model_name)


# ====================================================================
# 1. CATÁLOGO
# ====================================================================

class ProdutoRepositoryDjango(IProdutoRepository):
    """Implementação do ProdutoRepository usando o Django ORM."""

    @property
    def ProdutoModel(self):
        return get_model('catalog', 'Produto')

    def _queryset(self):
        return self.ProdutoModel.objects.prefetch_related('variantes')

    def buscar_por_id(self, produto_id: str) -> Optional[Produto]:
        try:
            return ProdutoMapper.to_entity(self._queryset().get(pk=produto_id))
        except (self.ProdutoModel.DoesNotExist, ValueError):
            return None

    def listar_todos(self) -> List[Produto]:
        return [ProdutoMapper.to_entity(model) for model in self._queryset()]


# ====================================================================
# 2. PEDIDOS
# ====================================================================

class PedidoRepositoryDjango(IPedidoRepository):
    """Implementação do PedidoRepository usando o Django ORM."""

    # Propriedades para carregar modelos de forma LAZY
    @property
    def PedidoModel(self):
        return get_model('pedidos', 'Pedido')

    @property
    def ItemPedidoModel(self):
        return get_model('pedidos', 'ItemPedido')

    @property
    def VarianteModel(self):
        return get_model('catalog', 'Variante')

    def _queryset(self):
        return self.PedidoModel.objects.prefetch_related(
            Prefetch('itens', queryset=self.ItemPedidoModel.objects.order_by('id'))
        )

    def buscar_por_id(self, pedido_id: str) -> Optional[Pedido]:
        try:
            return PedidoMapper.to_entity(self._queryset().get(pk=pedido_id))
        except (self.PedidoModel.DoesNotExist, ValueError):
            return None

    def listar_todos(self) -> List[Pedido]:
        return [PedidoMapper.to_entity(model) for model in self._queryset().order_by('-time_stamp')]

    def criar(self, pedido: Pedido) -> Pedido:
        """
        Cria o pedido e baixa o estoque das variantes na mesma transação.
        As variantes ficam travadas (select_for_update) até o commit.
        """
        try:
            with transaction.atomic():
                variante_ids = [int(item.variante_id) for item in pedido.itens if str(item.variante_id).isdigit()]
                variantes = self.VarianteModel.objects.select_for_update().filter(pk__in=variante_ids).in_bulk()

                for item in pedido.itens:
                    variante = variantes.get(int(item.variante_id)) if str(item.variante_id).isdigit() else None
                    if variante is None or str(variante.produto_id) != str(item.produto_id) \
                            or variante.estoque < item.quantidade:
                        raise EstoqueInsuficienteError(
                            produto_id=item.produto_id,
                            variante_id=item.variante_id,
                            estoque_atual=variante.estoque if variante else 0,
                            quantidade_solicitada=item.quantidade,
                        )
                    # Atualiza o estoque usando F expression (atomic update)
                    self.VarianteModel.objects.filter(pk=variante.pk).update(
                        estoque=F('estoque') - item.quantidade
                    )

                model = PedidoMapper.to_model(pedido)
                model.save()
                self.ItemPedidoModel.objects.bulk_create([
                    ItemPedidoMapper.to_model(item, pedido_id=model.id) for item in pedido.itens
                ])
        except DatabaseError as e:
            logger.exception("Falha ao gravar o pedido.")
            raise FalhaPersistenciaError(f"Não foi possível gravar o pedido: {e}")

        return self.buscar_por_id(str(model.id))

    def atualizar_status(self, pedido_id: str, novo_status: StatusPedido) -> None:
        """
        Atualiza somente o status de um pedido.
        """
        try:
            atualizados = self.PedidoModel.objects.filter(pk=pedido_id).update(status=novo_status.value)
        except DatabaseError as e:
            logger.exception("Falha ao gravar o status do pedido %s.", pedido_id)
            raise FalhaPersistenciaError(f"Não foi possível atualizar o status do pedido {pedido_id}: {e}")
        if not atualizados:
            raise PedidoNaoEncontradoError(f"Pedido ID {pedido_id} não encontrado.")


# ====================================================================
# 3. CONFIGURAÇÕES DA LOJA
# ====================================================================

class CupomRepositoryDjango(ICupomRepository):

    @property
    def CupomModel(self):
        return get_model('loja', 'Cupom')

    def listar(self) -> List[Cupom]:
        return [CupomMapper.to_entity(model) for model in self.CupomModel.objects.all()]

    def buscar_por_codigo(self, codigo: str) -> Optional[Cupom]:
        model = self.CupomModel.objects.filter(codigo=(codigo or '').upper()).first()
        return CupomMapper.to_entity(model)

    def salvar(self, cupom: Cupom) -> Cupom:
        try:
            with transaction.atomic():
                model = self.CupomModel.objects.create(
                    codigo=cupom.codigo, percentual=cupom.percentual, ativo=cupom.ativo
                )
        except IntegrityError:
            raise CupomInvalidoError(f"Já existe um cupom com o código {cupom.codigo}.")
        except DatabaseError as e:
            raise FalhaPersistenciaError(f"Não foi possível gravar o cupom: {e}")
        return CupomMapper.to_entity(model)

    def remover(self, cupom_id: str) -> bool:
        try:
            removidos, _ = self.CupomModel.objects.filter(pk=cupom_id).delete()
        except ValueError:
            return False
        except DatabaseError as e:
            raise FalhaPersistenciaError(f"Não foi possível remover o cupom: {e}")
        return removidos > 0


class LojaRepositoryDjango(ILojaRepository):

    @property
    def LojaInfoModel(self):
        return get_model('loja', 'LojaInfo')

    def obter(self) -> LojaInfo:
        return LojaInfoMapper.to_entity(self.LojaInfoModel.carregar())

    def salvar(self, loja: LojaInfo) -> LojaInfo:
        try:
            model = LojaInfoMapper.to_model(loja, self.LojaInfoModel.carregar())
            model.save()
        except DatabaseError as e:
            raise FalhaPersistenciaError(f"Não foi possível gravar as informações da loja: {e}")
        return LojaInfoMapper.to_entity(model)
