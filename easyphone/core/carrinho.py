# easyphone/core/carrinho.py
"""
Carrinho de compras em memória, com uma linha por (produto, variante).

O limite de estoque aplicado aqui é apenas uma proteção do lado do cliente:
a checagem definitiva acontece na criação do pedido, na camada de persistência.
"""
import logging
from decimal import Decimal
from typing import Callable, Dict, Iterable, Iterator, List, Optional, Tuple

from easyphone.core.entities import ItemCarrinho, Produto, Variante, VarianteSelecionada
from easyphone.core.exceptions import DadosInvalidosError
from easyphone.core.precos import resolver_preco

logger = logging.getLogger(__name__)

Chave = Tuple[str, str]


class CarrinhoStore:
    """
    Coleção de linhas do carrinho indexada por (produto_id, variante_id).

    `ao_alterar` é chamado após toda mutação efetiva (usado para espelhar o
    carrinho na sessão).
    """

    def __init__(
        self,
        itens: Optional[Iterable[ItemCarrinho]] = None,
        ao_alterar: Optional[Callable[["CarrinhoStore"], None]] = None,
    ):
        self._itens: Dict[Chave, ItemCarrinho] = {}
        for item in itens or []:
            self._itens[item.chave] = item
        self._ao_alterar = ao_alterar

    # --- Métodos de Manipulação ---

    def adicionar(self, produto: Produto, variante: Variante, quantidade: int = 1) -> Optional[ItemCarrinho]:
        """
        Adiciona uma variante ao carrinho ou incrementa a linha existente.
        A quantidade final nunca passa do estoque da variante.
        """
        if quantidade <= 0:
            raise DadosInvalidosError("A quantidade a adicionar deve ser positiva.")

        chave = (str(produto.id), str(variante.id))
        teto = max(variante.estoque, 0)
        item = self._itens.get(chave)

        if item:
            item.quantidade = min(item.quantidade + quantidade, teto)
            item.variante.estoque = variante.estoque
            if item.quantidade < 1:
                # A variante esgotou desde a última alteração
                del self._itens[chave]
                self._notificar()
                return None
            self._notificar()
            return item

        quantidade_inicial = min(quantidade, teto)
        if quantidade_inicial < 1:
            logger.debug("Variante %s do produto %s sem estoque, item não adicionado.", variante.id, produto.id)
            return None

        item = ItemCarrinho(
            produto_id=str(produto.id),
            titulo=produto.titulo,
            marca=produto.marca,
            categoria=produto.categoria,
            descricao=produto.descricao,
            imagens=list(produto.imagens),
            variante=VarianteSelecionada(id=str(variante.id), nome=variante.nome, estoque=variante.estoque),
            quantidade=quantidade_inicial,
            preco_unitario=resolver_preco(variante),
        )
        self._itens[chave] = item
        self._notificar()
        return item

    def remover(self, produto_id: str, variante_id: str) -> Optional[ItemCarrinho]:
        """Remove a linha, se existir. Sem efeito caso contrário."""
        item = self._itens.pop((str(produto_id), str(variante_id)), None)
        if item is not None:
            self._notificar()
        return item

    def definir_quantidade(self, produto_id: str, variante_id: str, quantidade: int) -> Optional[ItemCarrinho]:
        """
        Define a quantidade de uma linha existente, limitada a [1, estoque conhecido].
        Quantidade menor ou igual a zero remove a linha.
        """
        if quantidade <= 0:
            self.remover(produto_id, variante_id)
            return None

        chave = (str(produto_id), str(variante_id))
        item = self._itens.get(chave)
        if item is None:
            return None

        if item.variante.estoque < 1:
            self.remover(produto_id, variante_id)
            return None

        item.quantidade = max(1, min(quantidade, item.variante.estoque))
        self._notificar()
        return item

    def limpar(self):
        """Esvazia o carrinho (usado após o checkout)."""
        if self._itens:
            self._itens.clear()
            self._notificar()

    # --- Métodos de Consulta ---

    def buscar(self, produto_id: str, variante_id: str) -> Optional[ItemCarrinho]:
        return self._itens.get((str(produto_id), str(variante_id)))

    def pode_adicionar(self, produto_id: str, variante_id: str, estoque: int) -> bool:
        """Indica se ainda cabe mais uma unidade da variante no carrinho."""
        item = self.buscar(produto_id, variante_id)
        if item is None:
            return estoque > 0
        return item.quantidade < estoque

    def total(self) -> Decimal:
        """Soma de quantidade * preço unitário de todas as linhas."""
        return sum((item.subtotal for item in self._itens.values()), Decimal("0"))

    @property
    def itens(self) -> List[ItemCarrinho]:
        return list(self._itens.values())

    @property
    def quantidade_total(self) -> int:
        return sum(item.quantidade for item in self._itens.values())

    def esta_vazio(self) -> bool:
        return not self._itens

    def __len__(self) -> int:
        return len(self._itens)

    def __iter__(self) -> Iterator[ItemCarrinho]:
        return iter(self.itens)

    def _notificar(self):
        if self._ao_alterar is not None:
            self._ao_alterar(self)
