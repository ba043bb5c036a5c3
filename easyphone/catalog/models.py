from django.core.exceptions import ValidationError
from django.db import models

# ====================================================================
# 1. Produto
# ====================================================================

class Produto(models.Model):
    """Modelo para representar um produto (celular, acessório...) no catálogo."""

    titulo = models.CharField(max_length=255, verbose_name="Título")
    marca = models.CharField(max_length=100, verbose_name="Marca")
    categoria = models.CharField(max_length=100, verbose_name="Categoria")
    descricao = models.TextField(blank=True, verbose_name="Descrição Detalhada")

    # Lista de URLs, na ordem de exibição
    imagens = models.JSONField(default=list, blank=True, verbose_name="Imagens")

    # Datas
    data_criacao = models.DateTimeField(auto_now_add=True)
    data_atualizacao = models.DateTimeField(auto_now=True, null=True)

    class Meta:
        verbose_name = "Produto"
        verbose_name_plural = "Produtos"
        ordering = ['titulo']
        db_table = 'catalogo_produto'

    def __str__(self):
        return f"{self.marca} {self.titulo}"


# ====================================================================
# 2. Variante
# ====================================================================

class Variante(models.Model):
    """Configuração comprável de um produto, com estoque e preço próprios."""

    produto = models.ForeignKey(Produto, on_delete=models.CASCADE, related_name='variantes')

    nome = models.CharField(max_length=100, verbose_name="Nome da Variante")
    estoque = models.PositiveIntegerField(default=0, verbose_name="Estoque Atual")
    preco = models.DecimalField(max_digits=10, decimal_places=2, verbose_name="Preço de Venda")
    promocional = models.DecimalField(
        max_digits=10, decimal_places=2, null=True, blank=True,
        verbose_name="Preço Promocional",
        help_text="Quando preenchido (e maior que zero), substitui o preço de venda.",
    )
    # A primeira variante (menor ordem) define o selo de promoção do produto
    ordem = models.PositiveIntegerField(default=0)

    class Meta:
        verbose_name = "Variante"
        verbose_name_plural = "Variantes"
        ordering = ['ordem', 'id']
        db_table = 'catalogo_variante'

    def __str__(self):
        return f"{self.produto.titulo} - {self.nome}"

    def clean(self):
        if self.preco is not None and self.preco <= 0:
            raise ValidationError({'preco': "O preço de venda deve ser maior que zero."})
        if self.promocional is not None:
            if self.promocional < 0:
                raise ValidationError({'promocional': "O preço promocional não pode ser negativo."})
            if self.preco is not None and self.promocional >= self.preco:
                raise ValidationError({'promocional': "O preço promocional deve ser menor que o preço de venda."})

    @property
    def preco_formatado(self):
        """Retorna o preço de venda formatado em Real Brasileiro."""
        if self.preco is None:
            return "-"
        return f"R$ {self.preco:,.2f}".replace(",", "X").replace(".", ",").replace("X", ".")
