from rest_framework import serializers

from easyphone.core.entities import StatusPedido, TipoEntrega, DadosPessoais, Entrega, LojaInfo
from easyphone.core.precos import resolver_preco


# ====================================================================
# SERIALIZERS DO CATÁLOGO
# ====================================================================

class VarianteSerializer(serializers.Serializer):
    id = serializers.CharField()
    nome = serializers.CharField()
    estoque = serializers.IntegerField()
    preco = serializers.DecimalField(max_digits=10, decimal_places=2)
    promocional = serializers.DecimalField(max_digits=10, decimal_places=2, allow_null=True)
    preco_efetivo = serializers.SerializerMethodField()

    def get_preco_efetivo(self, variante):
        return f"{resolver_preco(variante):.2f}"


class ProdutoSerializer(serializers.Serializer):
    """Representa a entidade Produto, com o selo de esgotado/promoção do card."""
    id = serializers.CharField()
    titulo = serializers.CharField()
    marca = serializers.CharField()
    categoria = serializers.CharField()
    descricao = serializers.CharField()
    imagens = serializers.ListField(child=serializers.CharField())
    variantes = VarianteSerializer(many=True)
    esgotado = serializers.BooleanField()
    em_promocao = serializers.BooleanField()


# ====================================================================
# SERIALIZERS PARA O CARRINHO
# ====================================================================

class VarianteSelecionadaSerializer(serializers.Serializer):
    id = serializers.CharField()
    nome = serializers.CharField()
    estoque = serializers.IntegerField()


class ItemCarrinhoSerializer(serializers.Serializer):
    produto_id = serializers.CharField()
    titulo = serializers.CharField()
    marca = serializers.CharField()
    categoria = serializers.CharField()
    imagens = serializers.ListField(child=serializers.CharField())
    variante = VarianteSelecionadaSerializer()
    quantidade = serializers.IntegerField()
    preco_unitario = serializers.DecimalField(max_digits=10, decimal_places=2)
    subtotal = serializers.DecimalField(max_digits=12, decimal_places=2)
    # Falso quando a linha já chegou ao estoque da variante (botão de adicionar desabilitado)
    pode_adicionar = serializers.SerializerMethodField()

    def get_pode_adicionar(self, item):
        carrinho = self.root.instance
        return carrinho.pode_adicionar(item.produto_id, item.variante.id, item.variante.estoque)


class CarrinhoSerializer(serializers.Serializer):
    """
    Serializer principal para o carrinho de compras (CarrinhoStore da sessão).
    """
    itens = ItemCarrinhoSerializer(many=True)
    quantidade_total = serializers.IntegerField()
    total = serializers.SerializerMethodField()

    def get_total(self, carrinho):
        return f"{carrinho.total():.2f}"


class ItemCarrinhoInputSerializer(serializers.Serializer):
    """Identifica uma linha do carrinho (produto + variante)."""
    produto_id = serializers.CharField()
    variante_id = serializers.CharField()


class AdicionarItemCarrinhoSerializer(ItemCarrinhoInputSerializer):
    quantidade = serializers.IntegerField(min_value=1, default=1)


class DefinirQuantidadeSerializer(ItemCarrinhoInputSerializer):
    # Zero ou negativo remove a linha
    quantidade = serializers.IntegerField()


# ====================================================================
# SERIALIZERS DE FRETE
# ====================================================================

class OpcaoFreteSerializer(serializers.Serializer):
    transportadora = serializers.CharField()
    servico = serializers.CharField()
    prazo_dias_uteis = serializers.IntegerField()
    preco = serializers.DecimalField(max_digits=10, decimal_places=2)


# ====================================================================
# SERIALIZER PARA CHECKOUT
# ====================================================================

class DadosPessoaisSerializer(serializers.Serializer):
    nome = serializers.CharField(max_length=255)
    telefone = serializers.CharField(max_length=20)
    email = serializers.EmailField(required=False, allow_null=True, allow_blank=True)


class EntregaSerializer(serializers.Serializer):
    endereco = serializers.CharField(max_length=255)
    numero = serializers.CharField(max_length=20)
    cidade = serializers.CharField(max_length=100)
    frete = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0, default=0)


class CheckoutSerializer(serializers.Serializer):
    """
    Serializer para a validação dos dados de checkout.
    """
    dados_pessoais = DadosPessoaisSerializer()
    tipo_entrega = serializers.ChoiceField(choices=[t.value for t in TipoEntrega])
    forma_pagamento = serializers.CharField(max_length=30)
    entrega = EntregaSerializer(required=False, allow_null=True)

    def validate(self, attrs):
        if attrs['tipo_entrega'] == TipoEntrega.ENTREGA.value and not attrs.get('entrega'):
            raise serializers.ValidationError({'entrega': "Informe o endereço de entrega."})
        return attrs

    def to_dados_pessoais(self) -> DadosPessoais:
        dados = self.validated_data['dados_pessoais']
        return DadosPessoais(nome=dados['nome'], telefone=dados['telefone'], email=dados.get('email') or None)

    def to_entrega(self):
        entrega = self.validated_data.get('entrega')
        if not entrega:
            return None
        return Entrega(
            endereco=entrega['endereco'], numero=entrega['numero'], cidade=entrega['cidade'], frete=entrega['frete']
        )


# ====================================================================
# SERIALIZERS DO PAINEL
# ====================================================================

class ResumoPedidoSerializer(serializers.Serializer):
    id = serializers.CharField()
    cliente = serializers.CharField()
    entrega = serializers.CharField()
    itens = serializers.ListField(child=serializers.CharField())
    forma_pagamento = serializers.CharField()
    total = serializers.DecimalField(max_digits=12, decimal_places=2)
    data = serializers.CharField()
    status = serializers.SerializerMethodField()

    def get_status(self, resumo):
        return resumo.status.value


class AtualizarStatusSerializer(serializers.Serializer):
    # Validado pelo caso de uso (StatusPedido.from_valor)
    status = serializers.CharField(help_text=", ".join(s.value for s in StatusPedido))


class CupomSerializer(serializers.Serializer):
    id = serializers.CharField(read_only=True)
    codigo = serializers.CharField(max_length=50, allow_blank=True)
    percentual = serializers.IntegerField()
    ativo = serializers.BooleanField(read_only=True)


class LojaInfoSerializer(serializers.Serializer):
    titulo = serializers.CharField(max_length=255, allow_blank=True, required=False)
    descricao = serializers.CharField(allow_blank=True, required=False)
    email = serializers.EmailField(allow_blank=True, required=False)
    instagram = serializers.CharField(max_length=255, allow_blank=True, required=False)
    facebook = serializers.CharField(max_length=255, allow_blank=True, required=False)
    whatsapp = serializers.CharField(max_length=30, allow_blank=True, required=False)

    def to_representation(self, instance: LojaInfo):
        return {campo: getattr(instance, campo) for campo in self.fields}
