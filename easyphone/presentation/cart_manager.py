# easyphone/presentation/cart_manager.py
# Gerencia a persistência do Carrinho de Compras na sessão do Django.

from decimal import Decimal
from typing import Any, Dict, List

from django.conf import settings
from django.http import HttpRequest

from easyphone.core.carrinho import CarrinhoStore
from easyphone.core.entities import ItemCarrinho, VarianteSelecionada


class CartManager:
    """
    Liga um CarrinhoStore à sessão do Django: o carrinho é carregado da sessão
    ao criar o manager e salvo de volta a cada alteração.

    As linhas são guardadas completas (snapshot do produto, variante e preço
    no momento da adição), então o carrinho sobrevive a recarregamentos sem
    consultar o catálogo.
    """

    SESSION_KEY = getattr(settings, 'CARRINHO_SESSION_KEY', 'easy-phone-cart')

    def __init__(self, request: HttpRequest):
        """Inicializa o CartManager e carrega o carrinho da sessão."""
        self.request = request
        self.carrinho = CarrinhoStore(
            itens=self._load_itens_from_session(),
            ao_alterar=self._save_carrinho_to_session,
        )

    # --- Métodos de Persistência ---

    def _load_itens_from_session(self) -> List[ItemCarrinho]:
        raw_cart = self.request.session.get(self.SESSION_KEY) or []
        itens = []
        for raw in raw_cart:
            try:
                itens.append(self._item_from_dict(raw))
            except (KeyError, TypeError, ArithmeticError, ValueError):
                # Linha corrompida na sessão é descartada
                continue
        return itens

    def _save_carrinho_to_session(self, carrinho: CarrinhoStore):
        self.request.session[self.SESSION_KEY] = [self._item_to_dict(item) for item in carrinho.itens]
        self.request.session.modified = True

    @staticmethod
    def _item_to_dict(item: ItemCarrinho) -> Dict[str, Any]:
        return {
            'produto_id': item.produto_id,
            'titulo': item.titulo,
            'marca': item.marca,
            'categoria': item.categoria,
            'descricao': item.descricao,
            'imagens': list(item.imagens),
            'variante': {
                'id': item.variante.id,
                'nome': item.variante.nome,
                'estoque': item.variante.estoque,
            },
            'quantidade': item.quantidade,
            # Decimal não é serializável em JSON
            'preco_unitario': str(item.preco_unitario),
        }

    @staticmethod
    def _item_from_dict(raw: Dict[str, Any]) -> ItemCarrinho:
        return ItemCarrinho(
            produto_id=str(raw['produto_id']),
            titulo=raw['titulo'],
            marca=raw['marca'],
            categoria=raw['categoria'],
            descricao=raw.get('descricao', ''),
            imagens=list(raw.get('imagens', [])),
            variante=VarianteSelecionada(
                id=str(raw['variante']['id']),
                nome=raw['variante']['nome'],
                estoque=int(raw['variante']['estoque']),
            ),
            quantidade=int(raw['quantidade']),
            preco_unitario=Decimal(raw['preco_unitario']),
        )

    # --- Métodos de Consulta ---

    def get_carrinho(self) -> CarrinhoStore:
        return self.carrinho
