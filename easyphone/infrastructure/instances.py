"""
Módulo de inicialização dos repositórios, gateways e casos de uso compartilhados.
Deve ser importado somente depois que o Django estiver configurado.
"""

from easyphone.core.resumos import ProjecaoPedidos
from easyphone.core.use_cases import AtualizarStatusPedidoUseCase

from .repositories import (
    ProdutoRepositoryDjango as ProdutoRepository,
    PedidoRepositoryDjango as PedidoRepository,
    CupomRepositoryDjango as CupomRepository,
    LojaRepositoryDjango as LojaRepository,
)
from .gateways import SuperFreteGateway

# Instâncias globais dos repositórios
produto_repo = ProdutoRepository()
pedido_repo = PedidoRepository()
cupom_repo = CupomRepository()
loja_repo = LojaRepository()
frete_gateway = SuperFreteGateway()

# Estado do painel: compartilhado entre as requisições do processo
projecao_pedidos = ProjecaoPedidos()
atualizar_status_pedido = AtualizarStatusPedidoUseCase(pedido_repo, projecao=projecao_pedidos)
