class BaseErroCore(Exception):
    """Classe base para todas as exceções da Camada Core."""
    def __init__(self, message="Ocorreu um erro na camada core."):
        self.message = message
        super().__init__(self.message)

class DadosInvalidosError(BaseErroCore):
    """Erro levantado quando dados inválidos são fornecidos."""
    def __init__(self, message="Os dados fornecidos são inválidos."):
        super().__init__(message)

class EntradaAusenteError(DadosInvalidosError):
    """Erro levantado quando um dado obrigatório não foi informado (ex: CEP de destino)."""
    def __init__(self, message="Um dado obrigatório não foi informado."):
        super().__init__(message)

# ===============================================
# ERROS DE PERSISTÊNCIA E ENTIDADE
# ===============================================

class ItemNaoEncontradoError(BaseErroCore):
    """Erro levantado quando um item (genérico) não é encontrado."""
    def __init__(self, message="O item solicitado não foi encontrado."):
        super().__init__(message)

class ProdutoNaoEncontradoError(ItemNaoEncontradoError):
    """Erro levantado quando um produto específico não é encontrado."""
    def __init__(self, message="O produto solicitado não foi encontrado."):
        super().__init__(message)

class PedidoNaoEncontradoError(ItemNaoEncontradoError):
    """Erro específico para Pedidos não encontrados."""
    pass

class FalhaPersistenciaError(BaseErroCore):
    """Erro levantado quando a escrita na camada de persistência falha."""
    def __init__(self, message="Não foi possível gravar as alterações. Tente novamente."):
        super().__init__(message)

class EstoqueInsuficienteError(BaseErroCore):
    """Erro levantado quando a quantidade solicitada excede o estoque no momento do pedido."""
    def __init__(self, produto_id: str, variante_id: str, estoque_atual: int, quantidade_solicitada: int, message=None):
        self.produto_id = produto_id
        self.variante_id = variante_id
        self.estoque_atual = estoque_atual
        self.quantidade_solicitada = quantidade_solicitada
        if message is None:
            message = (f"Estoque insuficiente para o produto {produto_id} (variante {variante_id}). "
                       f"Disponível: {estoque_atual}, Solicitado: {quantidade_solicitada}.")
        super().__init__(message)

# ===============================================
# ERROS DE FLUXO DE COMPRA E PEDIDO
# ===============================================

class CarrinhoVazioError(BaseErroCore):
    """Erro levantado ao tentar fazer checkout com carrinho vazio."""
    def __init__(self, message="O carrinho de compras está vazio."):
        super().__init__(message)

class StatusInvalidoError(BaseErroCore):
    """Erro levantado ao tentar definir um status de pedido inválido."""
    def __init__(self, message="O status fornecido não é válido para um pedido."):
        super().__init__(message)

class TransicaoEmAndamentoError(BaseErroCore):
    """Erro levantado quando já existe uma atualização de status em andamento para o pedido."""
    def __init__(self, pedido_id: str, message=None):
        self.pedido_id = pedido_id
        if message is None:
            message = f"O status do pedido {pedido_id} já está sendo atualizado. Aguarde e tente novamente."
        super().__init__(message)

class CupomInvalidoError(DadosInvalidosError):
    """Erro levantado quando um cupom não respeita as regras de cadastro."""
    def __init__(self, message="Preencha um código e uma porcentagem válida!"):
        super().__init__(message)

# ===============================================
# ERROS DO SERVIÇO DE FRETE
# ===============================================

class FreteIndisponivelError(BaseErroCore):
    """Erro levantado quando o serviço de frete não responde ou responde com erro HTTP."""
    def __init__(self, message="Erro ao calcular frete", status_code=None, detalhe=None):
        self.status_code = status_code
        self.detalhe = detalhe
        super().__init__(message)

class FreteRespostaInvalidaError(BaseErroCore):
    """Erro levantado quando a resposta do serviço de frete não segue o formato esperado."""
    def __init__(self, bruto, message="Resposta do serviço de frete em formato inesperado."):
        self.bruto = bruto
        super().__init__(message)
