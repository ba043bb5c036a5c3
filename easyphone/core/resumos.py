# easyphone/core/resumos.py
"""
Resumos de pedidos para o painel administrativo.

Projeção pura sobre (pedidos, produtos): nomes de produto/variante, total com
frete, data legível e ordenação do mais recente para o mais antigo.
"""
import re
import threading
from dataclasses import replace
from decimal import Decimal
from typing import Dict, Iterable, List, Optional

from easyphone.core.entities import Pedido, Produto, ResumoPedido, StatusPedido, TipoEntrega

PRODUTO_REMOVIDO = "Produto removido"
VARIANTE_REMOVIDA = "Variante removida"

_TIME_STAMP_RE = re.compile(r"^(\d{4})(\d{2})(\d{2})(\d{2})(\d{2})(\d{2})$")


class CatalogoIndex:
    """Índice de produtos por ID. As buscas nunca levantam exceção para IDs inexistentes."""

    def __init__(self, produtos: Iterable[Produto]):
        self._produtos: Dict[str, Produto] = {str(produto.id): produto for produto in produtos}

    def nome_produto(self, produto_id: str) -> str:
        produto = self._produtos.get(str(produto_id))
        return produto.titulo if produto else PRODUTO_REMOVIDO

    def nome_variante(self, produto_id: str, variante_id: str) -> str:
        produto = self._produtos.get(str(produto_id))
        if not produto:
            return PRODUTO_REMOVIDO
        variante = produto.buscar_variante(variante_id)
        return variante.nome if variante else VARIANTE_REMOVIDA


def total_geral(pedido: Pedido) -> Decimal:
    """Valor da mercadoria mais o frete, quando houver bloco de entrega."""
    if pedido.entrega is not None:
        return pedido.valor + pedido.entrega.frete
    return pedido.valor


def formatar_time_stamp(time_stamp: str) -> str:
    """'20240115093000' -> '15/01/2024 09:30'. Valores fora do formato são devolvidos como vieram."""
    match = _TIME_STAMP_RE.match(time_stamp or "")
    if not match:
        return time_stamp
    ano, mes, dia, hora, minuto, _segundo = match.groups()
    return f"{dia}/{mes}/{ano} {hora}:{minuto}"


def descrever_entrega(pedido: Pedido) -> str:
    if pedido.tipo_entrega == TipoEntrega.RETIRADA:
        return "Retirada"
    if pedido.entrega is None:
        return "Entrega"
    return f"{pedido.entrega.endereco}, {pedido.entrega.numero}"


def ordenar_mais_recentes(pedidos: Iterable[Pedido]) -> List[Pedido]:
    # O timeStamp tem largura fixa, então a ordem lexical é a ordem cronológica.
    return sorted(pedidos, key=lambda pedido: pedido.time_stamp, reverse=True)


def resumir_pedido(pedido: Pedido, catalogo: CatalogoIndex) -> ResumoPedido:
    itens = [
        f"{catalogo.nome_produto(item.produto_id)} "
        f"{catalogo.nome_variante(item.produto_id, item.variante_id)} (x{item.quantidade})"
        for item in pedido.itens
    ]
    return ResumoPedido(
        id=str(pedido.id),
        cliente=pedido.dados_pessoais.nome or "Cliente",
        entrega=descrever_entrega(pedido),
        itens=itens,
        forma_pagamento=pedido.forma_pagamento,
        total=total_geral(pedido),
        data=formatar_time_stamp(pedido.time_stamp),
        status=pedido.status,
        time_stamp=pedido.time_stamp,
    )


def resumir_pedidos(pedidos: Iterable[Pedido], produtos: Iterable[Produto]) -> List[ResumoPedido]:
    catalogo = CatalogoIndex(produtos)
    return [resumir_pedido(pedido, catalogo) for pedido in ordenar_mais_recentes(pedidos)]


class ProjecaoPedidos:
    """
    Estado em memória dos pedidos exibidos no painel.

    Só recebe status que já foram gravados na persistência.
    """

    def __init__(self, pedidos: Iterable[Pedido] = ()):
        self._lock = threading.Lock()
        self._pedidos: Dict[str, Pedido] = {str(pedido.id): pedido for pedido in pedidos}

    def carregar(self, pedidos: Iterable[Pedido]):
        novos = {str(pedido.id): pedido for pedido in pedidos}
        with self._lock:
            self._pedidos = novos

    def obter(self, pedido_id: str) -> Optional[Pedido]:
        with self._lock:
            return self._pedidos.get(str(pedido_id))

    def aplicar_status(self, pedido_id: str, status: StatusPedido):
        with self._lock:
            pedido = self._pedidos.get(str(pedido_id))
            if pedido is not None:
                self._pedidos[str(pedido_id)] = replace(pedido, status=status)

    def pedidos(self) -> List[Pedido]:
        with self._lock:
            return ordenar_mais_recentes(self._pedidos.values())

    def resumos(self, produtos: Iterable[Produto]) -> List[ResumoPedido]:
        return resumir_pedidos(self.pedidos(), produtos)
