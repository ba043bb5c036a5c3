from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import List, Optional, Tuple

from easyphone.core.exceptions import StatusInvalidoError

# ====================================================================
# ENTIDADES CORE
# Representam os objetos de negócio puros.
# ====================================================================

# Formato fixo (e ordenável lexicalmente) do timeStamp dos pedidos.
FORMATO_TIME_STAMP = "%Y%m%d%H%M%S"


class StatusPedido(str, Enum):
    """Status do ciclo de vida de um pedido. Qualquer status pode ir para qualquer outro."""
    PENDENTE = "Pendente"
    PAGO = "Pago"
    ENVIADO = "Enviado"
    CONCLUIDO = "Concluído"
    CANCELADO = "Cancelado"

    @classmethod
    def from_valor(cls, valor) -> "StatusPedido":
        """Converte o valor recebido (ex: 'Concluído' ou 'CONCLUIDO') no status correspondente."""
        if isinstance(valor, cls):
            return valor
        for status in cls:
            if valor in (status.value, status.name):
                return status
        raise StatusInvalidoError(f"O status '{valor}' não é um status de pedido válido.")


class TipoEntrega(str, Enum):
    RETIRADA = "pickup"
    ENTREGA = "delivery"


@dataclass
class Variante:
    """Configuração comprável de um produto (cor, capacidade...), com estoque e preço próprios."""
    id: str
    nome: str
    estoque: int
    preco: Decimal
    promocional: Optional[Decimal] = None


@dataclass
class Produto:
    """Entidade do Produto do catálogo."""
    id: str
    titulo: str
    marca: str
    categoria: str
    descricao: str = ""
    imagens: List[str] = field(default_factory=list)
    variantes: List[Variante] = field(default_factory=list)

    def buscar_variante(self, variante_id: str) -> Optional[Variante]:
        return next((v for v in self.variantes if str(v.id) == str(variante_id)), None)

    @property
    def esgotado(self) -> bool:
        """Um produto está esgotado quando nenhuma variante tem estoque."""
        return all(variante.estoque == 0 for variante in self.variantes)

    @property
    def em_promocao(self) -> bool:
        """O selo de promoção segue a primeira variante do produto."""
        return bool(self.variantes and self.variantes[0].promocional)


@dataclass
class VarianteSelecionada:
    """Snapshot da variante no momento em que foi adicionada ao carrinho."""
    id: str
    nome: str
    estoque: int


@dataclass
class ItemCarrinho:
    """Entidade que representa uma linha do carrinho (produto + variante)."""
    produto_id: str
    titulo: str
    marca: str
    categoria: str
    variante: VarianteSelecionada
    quantidade: int
    preco_unitario: Decimal
    descricao: str = ""
    imagens: List[str] = field(default_factory=list)

    @property
    def chave(self) -> Tuple[str, str]:
        return (str(self.produto_id), str(self.variante.id))

    @property
    def subtotal(self) -> Decimal:
        """Calcula o subtotal do item."""
        return self.preco_unitario * self.quantidade


@dataclass
class DadosPessoais:
    nome: str
    telefone: str
    email: Optional[str] = None


@dataclass
class Entrega:
    """Bloco de entrega do pedido. O frete é cobrado à parte do valor da mercadoria."""
    endereco: str
    numero: str
    cidade: str
    frete: Decimal = Decimal("0")


@dataclass
class ItemPedido:
    """Referência a uma linha do carrinho no momento da compra."""
    produto_id: str
    variante_id: str
    quantidade: int


@dataclass
class Pedido:
    """Entidade do Pedido de Venda. Apenas o status muda depois de criado."""
    dados_pessoais: DadosPessoais
    tipo_entrega: TipoEntrega
    forma_pagamento: str
    itens: List[ItemPedido]
    valor: Decimal
    time_stamp: str
    status: StatusPedido = StatusPedido.PENDENTE
    entrega: Optional[Entrega] = None
    id: Optional[str] = None


@dataclass
class Cupom:
    """Cupom de desconto cadastrado nas configurações da loja."""
    codigo: str
    percentual: int
    ativo: bool = True
    id: Optional[str] = None


@dataclass
class LojaInfo:
    """Configurações da loja exibidas no painel."""
    titulo: str = ""
    descricao: str = ""
    email: str = ""
    instagram: str = ""
    facebook: str = ""
    whatsapp: str = ""


@dataclass
class OpcaoFrete:
    """Opção de envio normalizada a partir da resposta do serviço de frete."""
    transportadora: str
    servico: str
    prazo_dias_uteis: int
    preco: Decimal


@dataclass
class ResumoPedido:
    """Linha do painel de pedidos, pronta para exibição."""
    id: str
    cliente: str
    entrega: str
    itens: List[str]
    forma_pagamento: str
    total: Decimal
    data: str
    status: StatusPedido
    time_stamp: str
