from decimal import Decimal

from easyphone.core.entities import Variante


def resolver_preco(variante: Variante) -> Decimal:
    """Retorna o preço unitário efetivo: o promocional, quando positivo, senão o preço de lista."""
    promocional = variante.promocional
    if promocional is not None and promocional > 0:
        return promocional
    return variante.preco
