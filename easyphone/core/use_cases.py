# easyphone/core/use_cases.py
"""
Implementação dos Casos de Uso (Lógica de Negócio) da aplicação.
Esta camada depende apenas das Entidades e Portas (Interfaces) do Core,
garantindo o isolamento da lógica de negócio.
"""
import logging
import re
import threading
from dataclasses import replace, fields
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Callable, List, Optional, Set

# Entidades e Exceções
from easyphone.core.entities import (
    Produto, Pedido, ItemPedido, DadosPessoais, Entrega, TipoEntrega, StatusPedido,
    Cupom, LojaInfo, OpcaoFrete, ResumoPedido, FORMATO_TIME_STAMP,
)
from easyphone.core.exceptions import (
    DadosInvalidosError,
    EntradaAusenteError,
    ItemNaoEncontradoError,
    ProdutoNaoEncontradoError,
    PedidoNaoEncontradoError,
    CarrinhoVazioError,
    CupomInvalidoError,
    TransicaoEmAndamentoError,
    FreteRespostaInvalidaError,
)
from easyphone.core.carrinho import CarrinhoStore
from easyphone.core.resumos import ProjecaoPedidos, CatalogoIndex, resumir_pedido

# Portas (Interfaces) - Importadas do easyphone/core/ports.py
from easyphone.core.ports import (
    IProdutoRepository,
    IPedidoRepository,
    ICupomRepository,
    ILojaRepository,
    IFreteGateway,
)

logger = logging.getLogger(__name__)


# ====================================================================
# 1. CASOS DE USO DO CATÁLOGO
# ====================================================================

class ListarProdutosUseCase:
    """Caso de Uso responsável por listar e detalhar os produtos do catálogo."""
    def __init__(self, produto_repo: IProdutoRepository):
        self.produto_repo = produto_repo

    def listar(self) -> List[Produto]:
        return self.produto_repo.listar_todos()

    def detalhar(self, produto_id: str) -> Produto:
        """Busca e retorna um produto pelo seu ID."""
        produto = self.produto_repo.buscar_por_id(produto_id)
        if not produto:
            raise ProdutoNaoEncontradoError(f"Produto ID {produto_id} não encontrado.")
        return produto


# ====================================================================
# 2. CASOS DE USO DO CARRINHO
# ====================================================================

class GerenciarCarrinhoUseCase:
    """
    Caso de Uso que resolve produto/variante no catálogo antes de alterar o carrinho.
    O carrinho em si (CarrinhoStore) é do dono da sessão e chega por parâmetro.
    """
    def __init__(self, produto_repo: IProdutoRepository):
        self.produto_repo = produto_repo

    def _buscar_produto_e_variante(self, produto_id: str, variante_id: str):
        produto = self.produto_repo.buscar_por_id(produto_id)
        if not produto:
            raise ProdutoNaoEncontradoError(f"Produto ID {produto_id} não encontrado.")
        variante = produto.buscar_variante(variante_id)
        if not variante:
            raise ItemNaoEncontradoError(f"Variante ID {variante_id} não encontrada no produto {produto_id}.")
        return produto, variante

    def adicionar_item(self, carrinho: CarrinhoStore, produto_id: str, variante_id: str, quantidade: int = 1):
        """Adiciona ou incrementa a linha, respeitando o estoque atual da variante."""
        produto, variante = self._buscar_produto_e_variante(produto_id, variante_id)
        return carrinho.adicionar(produto, variante, quantidade)

    def definir_quantidade(self, carrinho: CarrinhoStore, produto_id: str, variante_id: str, quantidade: int):
        return carrinho.definir_quantidade(produto_id, variante_id, quantidade)

    def remover_item(self, carrinho: CarrinhoStore, produto_id: str, variante_id: str):
        return carrinho.remover(produto_id, variante_id)


# ====================================================================
# 3. FRETE
# ====================================================================

class CalcularFreteUseCase:
    """
    Cotação de frete a partir do CEP de destino.
    Não faz novas tentativas: qualquer falha volta direto para quem chamou.
    """
    def __init__(self, frete_gateway: IFreteGateway):
        self.frete_gateway = frete_gateway

    def executar(self, cep_destino: Optional[str]) -> List[OpcaoFrete]:
        cep = re.sub(r"\D", "", str(cep_destino or ""))
        if not cep:
            raise EntradaAusenteError("CEP de destino é obrigatório")

        dados = self.frete_gateway.cotar(cep)
        if not isinstance(dados, list):
            logger.warning("Resposta de frete fora do formato esperado para o CEP %s.", cep)
            raise FreteRespostaInvalidaError(bruto=dados)

        opcoes = []
        for servico in dados:
            if not isinstance(servico, dict):
                raise FreteRespostaInvalidaError(bruto=dados)
            # Serviços marcados com erro pelo provedor não são oferecidos
            if servico.get("error") or servico.get("has_error"):
                continue
            opcoes.append(self._normalizar(servico, dados))
        return opcoes

    @staticmethod
    def _normalizar(servico: dict, bruto) -> OpcaoFrete:
        try:
            return OpcaoFrete(
                transportadora=servico["company"]["name"],
                servico=servico["name"],
                prazo_dias_uteis=int(servico["delivery_time"]),
                preco=Decimal(str(servico["price"])),
            )
        except (KeyError, TypeError, ValueError, InvalidOperation):
            logger.warning("Serviço de frete com campos inválidos: %r", servico)
            raise FreteRespostaInvalidaError(bruto=bruto)


# ====================================================================
# 4. CASOS DE USO DE PEDIDO E CHECKOUT
# ====================================================================

class FinalizarPedidoUseCase:
    """
    Transforma o carrinho da sessão em um Pedido persistido.
    A checagem final de estoque acontece no repositório, na mesma transação da gravação.
    """
    def __init__(self, pedido_repo: IPedidoRepository, relogio: Callable[[], datetime] = datetime.now):
        self.pedido_repo = pedido_repo
        self.relogio = relogio

    def executar(
        self,
        carrinho: CarrinhoStore,
        dados_pessoais: DadosPessoais,
        tipo_entrega: TipoEntrega,
        forma_pagamento: str,
        entrega: Optional[Entrega] = None,
    ) -> Pedido:
        if carrinho.esta_vazio():
            raise CarrinhoVazioError("Não é possível finalizar o checkout com o carrinho vazio.")

        tipo_entrega = TipoEntrega(tipo_entrega)
        if tipo_entrega == TipoEntrega.ENTREGA and entrega is None:
            raise DadosInvalidosError("Informe o endereço de entrega.")
        if tipo_entrega == TipoEntrega.RETIRADA:
            entrega = None

        pedido = Pedido(
            dados_pessoais=dados_pessoais,
            tipo_entrega=tipo_entrega,
            forma_pagamento=forma_pagamento,
            itens=[
                ItemPedido(produto_id=item.produto_id, variante_id=item.variante.id, quantidade=item.quantidade)
                for item in carrinho.itens
            ],
            valor=carrinho.total(),
            time_stamp=self.relogio().strftime(FORMATO_TIME_STAMP),
            status=StatusPedido.PENDENTE,
            entrega=entrega,
        )

        pedido_criado = self.pedido_repo.criar(pedido)
        logger.info("Pedido %s criado (valor %s).", pedido_criado.id, pedido_criado.valor)
        carrinho.limpar()
        return pedido_criado


class AtualizarStatusPedidoUseCase:
    """
    Atualiza o status de um pedido a partir do painel.

    Qualquer status pode ir para qualquer outro. Só uma atualização por pedido
    fica em andamento: pedidos concorrentes para o mesmo ID são rejeitados até
    a primeira terminar. A projeção em memória só recebe o novo status depois
    que a persistência confirma a escrita.

    A instância guarda estado (pedidos em andamento) e deve ser compartilhada.
    """
    def __init__(self, pedido_repo: IPedidoRepository, projecao: Optional[ProjecaoPedidos] = None):
        self.pedido_repo = pedido_repo
        self.projecao = projecao
        self._em_andamento: Set[str] = set()
        self._lock = threading.Lock()

    def _reservar(self, pedido_id: str):
        with self._lock:
            if pedido_id in self._em_andamento:
                logger.warning("Atualização de status rejeitada: pedido %s já em andamento.", pedido_id)
                raise TransicaoEmAndamentoError(pedido_id)
            self._em_andamento.add(pedido_id)

    def _liberar(self, pedido_id: str):
        with self._lock:
            self._em_andamento.discard(pedido_id)

    def em_andamento(self, pedido_id: str) -> bool:
        with self._lock:
            return str(pedido_id) in self._em_andamento

    def executar(self, pedido_id: str, novo_status) -> Pedido:
        status = StatusPedido.from_valor(novo_status)
        pedido_id = str(pedido_id)

        self._reservar(pedido_id)
        try:
            pedido = self.pedido_repo.buscar_por_id(pedido_id)
            if not pedido:
                raise PedidoNaoEncontradoError(f"Pedido ID {pedido_id} não encontrado.")

            if pedido.status == status:
                return pedido

            # FalhaPersistenciaError sobe sem tocar na projeção
            self.pedido_repo.atualizar_status(pedido_id, status)
            logger.info("Pedido %s: status %s -> %s.", pedido_id, pedido.status.value, status.value)

            if self.projecao is not None:
                self.projecao.aplicar_status(pedido_id, status)
            return replace(pedido, status=status)
        finally:
            self._liberar(pedido_id)


class ListarResumosPedidosUseCase:
    """Carrega pedidos e produtos sob demanda e monta os resumos do painel."""
    def __init__(self, pedido_repo: IPedidoRepository, produto_repo: IProdutoRepository, projecao: ProjecaoPedidos):
        self.pedido_repo = pedido_repo
        self.produto_repo = produto_repo
        self.projecao = projecao

    def executar(self) -> List[ResumoPedido]:
        self.projecao.carregar(self.pedido_repo.listar_todos())
        return self.projecao.resumos(self.produto_repo.listar_todos())

    def resumir(self, pedido: Pedido) -> ResumoPedido:
        return resumir_pedido(pedido, CatalogoIndex(self.produto_repo.listar_todos()))


# ====================================================================
# 5. CASOS DE USO DAS CONFIGURAÇÕES DA LOJA
# ====================================================================

class GerenciarCuponsUseCase:
    """
    Cadastro de cupons. O desconto ainda não é aplicado no checkout.
    """
    def __init__(self, cupom_repo: ICupomRepository):
        self.cupom_repo = cupom_repo

    def listar(self) -> List[Cupom]:
        return self.cupom_repo.listar()

    def criar(self, codigo: str, percentual) -> Cupom:
        codigo = (codigo or "").strip().upper()
        try:
            percentual = int(percentual)
        except (TypeError, ValueError):
            raise CupomInvalidoError()

        if not codigo or percentual <= 0 or percentual > 100:
            raise CupomInvalidoError()
        if self.cupom_repo.buscar_por_codigo(codigo):
            raise CupomInvalidoError(f"Já existe um cupom com o código {codigo}.")

        return self.cupom_repo.salvar(Cupom(codigo=codigo, percentual=percentual, ativo=True))

    def remover(self, cupom_id: str):
        if not self.cupom_repo.remover(cupom_id):
            raise ItemNaoEncontradoError(f"Cupom ID {cupom_id} não encontrado.")


class ConfiguracoesLojaUseCase:
    """Leitura e edição das informações gerais da loja."""

    CAMPOS_EDITAVEIS = tuple(f.name for f in fields(LojaInfo))

    def __init__(self, loja_repo: ILojaRepository):
        self.loja_repo = loja_repo

    def obter(self) -> LojaInfo:
        return self.loja_repo.obter()

    def atualizar(self, **campos) -> LojaInfo:
        desconhecidos = set(campos) - set(self.CAMPOS_EDITAVEIS)
        if desconhecidos:
            raise DadosInvalidosError(f"Campos desconhecidos: {', '.join(sorted(desconhecidos))}.")
        loja = replace(self.loja_repo.obter(), **campos)
        return self.loja_repo.salvar(loja)
