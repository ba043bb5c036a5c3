# easyphone/core/ports.py
"""
Definição das Portas (Interfaces/Protocolos) da Arquitetura Limpa.

Estes protocolos definem o contrato que a camada de Infraestrutura (Repositorios, Gateways)
DEVE seguir para se conectar à camada Core (Casos de Uso).
"""

from typing import Protocol, List, Optional, Any
from abc import abstractmethod

from easyphone.core.entities import Produto, Pedido, Cupom, LojaInfo, StatusPedido


# ====================================================================
# 1. REPOSITÓRIOS (Portas de Persistência)
# ====================================================================

class IProdutoRepository(Protocol):
    """Protocolo para a busca de Produtos do catálogo."""

    @abstractmethod
    def buscar_por_id(self, produto_id: str) -> Optional[Produto]: ...

    @abstractmethod
    def listar_todos(self) -> List[Produto]: ...


class IPedidoRepository(Protocol):
    """Protocolo para a persistência e gestão de Pedidos."""

    @abstractmethod
    def criar(self, pedido: Pedido) -> Pedido:
        """
        Grava o pedido e baixa o estoque das variantes em uma única transação.
        Levanta EstoqueInsuficienteError se alguma variante não tiver estoque.
        """
        ...

    @abstractmethod
    def buscar_por_id(self, pedido_id: str) -> Optional[Pedido]: ...

    @abstractmethod
    def listar_todos(self) -> List[Pedido]: ...

    @abstractmethod
    def atualizar_status(self, pedido_id: str, novo_status: StatusPedido) -> None:
        """Grava somente o campo status. Levanta FalhaPersistenciaError se a escrita falhar."""
        ...


class ICupomRepository(Protocol):
    """Protocolo para os cupons das configurações da loja."""

    @abstractmethod
    def listar(self) -> List[Cupom]: ...

    @abstractmethod
    def buscar_por_codigo(self, codigo: str) -> Optional[Cupom]: ...

    @abstractmethod
    def salvar(self, cupom: Cupom) -> Cupom: ...

    @abstractmethod
    def remover(self, cupom_id: str) -> bool: ...


class ILojaRepository(Protocol):
    """Protocolo para as configurações gerais da loja."""

    @abstractmethod
    def obter(self) -> LojaInfo: ...

    @abstractmethod
    def salvar(self, loja: LojaInfo) -> LojaInfo: ...


# ====================================================================
# 2. GATEWAYS (Portas de Serviços Externos)
# ====================================================================

class IFreteGateway(Protocol):
    """Protocolo para o serviço externo de cotação de frete."""

    @abstractmethod
    def cotar(self, cep_destino: str) -> Any:
        """
        Retorna a resposta já decodificada do serviço.
        Levanta FreteIndisponivelError ou FreteRespostaInvalidaError.
        """
        ...
