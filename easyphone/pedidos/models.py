from django.db import models


class Pedido(models.Model):
    """
    Modelo para pedidos de compra.
    Depois de criado, apenas o status é alterado (pelo painel).
    """
    STATUS_CHOICES = [
        ('Pendente', 'Pendente'),
        ('Pago', 'Pago'),
        ('Enviado', 'Enviado'),
        ('Concluído', 'Concluído'),
        ('Cancelado', 'Cancelado'),
    ]

    TIPO_ENTREGA_CHOICES = [
        ('pickup', 'Retirada na Loja'),
        ('delivery', 'Entrega'),
    ]

    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='Pendente', verbose_name="Status")

    # Valor da mercadoria (sem frete)
    valor = models.DecimalField(max_digits=10, decimal_places=2, default=0, verbose_name="Valor do Pedido")
    forma_pagamento = models.CharField(max_length=30, verbose_name="Forma de Pagamento")

    # Formato AAAAMMDDHHMMSS
    time_stamp = models.CharField(max_length=14, db_index=True, verbose_name="Data do Pedido")

    # Contato (Snapshot)
    nome_cliente = models.CharField(max_length=255, verbose_name="Cliente")
    telefone_cliente = models.CharField(max_length=20, verbose_name="Telefone")
    email_cliente = models.EmailField(blank=True, null=True, verbose_name="E-mail")

    # Entrega (Snapshot, vazio para retirada)
    tipo_entrega = models.CharField(max_length=10, choices=TIPO_ENTREGA_CHOICES, default='pickup', verbose_name="Tipo de Entrega")
    endereco_entrega = models.CharField(max_length=255, blank=True, verbose_name="Endereço")
    numero_entrega = models.CharField(max_length=20, blank=True, verbose_name="Número")
    cidade_entrega = models.CharField(max_length=100, blank=True, verbose_name="Cidade")
    frete = models.DecimalField(max_digits=10, decimal_places=2, default=0, verbose_name="Valor do Frete")

    class Meta:
        verbose_name = 'Pedido'
        verbose_name_plural = 'Pedidos'
        ordering = ['-time_stamp']
        db_table = 'pedido_compra'

    def __str__(self):
        return f"Pedido {self.id} - {self.nome_cliente} - {self.status}"

    @property
    def total_formatado(self):
        """Total do pedido + Frete, formatado."""
        total_com_frete = self.valor + self.frete
        return f"R$ {total_com_frete:,.2f}".replace(",", "X").replace(".", ",").replace("X", ".")


class ItemPedido(models.Model):
    """
    Modelo para os itens contidos em um pedido.
    As referências a produto/variante são apenas IDs: o item continua no
    histórico mesmo depois que o produto sai do catálogo.
    """
    pedido = models.ForeignKey(Pedido, on_delete=models.CASCADE, related_name='itens')

    produto_id = models.CharField(max_length=64, verbose_name="ID do Produto")
    variante_id = models.CharField(max_length=64, verbose_name="ID da Variante")
    quantidade = models.PositiveIntegerField(verbose_name="Quantidade")

    class Meta:
        verbose_name = 'Item do Pedido'
        verbose_name_plural = 'Itens do Pedido'
        db_table = 'pedido_item'

    def __str__(self):
        return f"{self.quantidade}x {self.produto_id}/{self.variante_id} (Pedido {self.pedido_id})"
