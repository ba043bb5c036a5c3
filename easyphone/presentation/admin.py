# Configuração da interface administrativa do Django para os modelos da Easy Phone.

from django.contrib import admin, messages

from easyphone.catalog.models import Produto, Variante
from easyphone.pedidos.models import Pedido, ItemPedido
from easyphone.loja.models import Cupom, LojaInfo
from easyphone.infrastructure.instances import atualizar_status_pedido
from easyphone.core.exceptions import BaseErroCore


# ====================================================================
# 1. ADMIN PARA PRODUTOS E VARIANTES
# ====================================================================

class VarianteInline(admin.TabularInline):
    """Permite editar as Variantes diretamente na página do Produto."""
    model = Variante
    extra = 1
    min_num = 1
    fields = ('nome', 'estoque', 'preco', 'promocional', 'preco_formatado', 'ordem')
    readonly_fields = ('preco_formatado',)


@admin.register(Produto)
class ProdutoAdmin(admin.ModelAdmin):
    list_display = ('titulo', 'marca', 'categoria', 'data_criacao')
    list_filter = ('marca', 'categoria')
    search_fields = ('titulo', 'marca', 'descricao', 'id')
    ordering = ('titulo',)
    inlines = [VarianteInline]
    fieldsets = (
        ('Informações Básicas', {
            'fields': ('titulo', 'marca', 'categoria', 'descricao')
        }),
        ('Mídia', {
            'fields': ('imagens',),
        }),
    )


# ====================================================================
# 2. ADMIN PARA PEDIDOS
# ====================================================================

class ItemPedidoInline(admin.TabularInline):
    """Exibe os itens comprados dentro do detalhe do Pedido."""
    model = ItemPedido
    readonly_fields = ('produto_id', 'variante_id', 'quantidade')
    extra = 0
    can_delete = False


@admin.register(Pedido)
class PedidoAdmin(admin.ModelAdmin):
    list_display = ('id', 'nome_cliente', 'time_stamp', 'total_formatado', 'status', 'forma_pagamento')
    list_filter = ('status', 'forma_pagamento', 'tipo_entrega')
    search_fields = ('id', 'nome_cliente', 'email_cliente', 'telefone_cliente', 'cidade_entrega')
    inlines = [ItemPedidoInline]

    # Apenas o status é editável pelo Admin
    readonly_fields = (
        'valor',
        'forma_pagamento',
        'time_stamp',
        'nome_cliente',
        'telefone_cliente',
        'email_cliente',
        'tipo_entrega',
        'endereco_entrega',
        'numero_entrega',
        'cidade_entrega',
        'frete',
    )

    def has_add_permission(self, request):
        """Impedir a criação de pedidos pela interface do Admin (apenas por checkout)."""
        return False

    def save_model(self, request, obj, form, change):
        """
        O status passa pelo mesmo caso de uso do painel: uma atualização por
        pedido em andamento e gravação só do status. O registro nunca é salvo inteiro.
        """
        if not change or 'status' not in form.changed_data:
            return
        try:
            atualizar_status_pedido.executar(obj.pk, form.cleaned_data['status'])
        except BaseErroCore as e:
            self.message_user(request, str(e), level=messages.ERROR)


# ====================================================================
# 3. ADMIN PARA A LOJA
# ====================================================================

@admin.register(Cupom)
class CupomAdmin(admin.ModelAdmin):
    list_display = ('codigo', 'percentual', 'ativo', 'data_criacao')
    list_filter = ('ativo',)
    search_fields = ('codigo',)


@admin.register(LojaInfo)
class LojaInfoAdmin(admin.ModelAdmin):
    list_display = ('titulo', 'email', 'whatsapp')

    def has_add_permission(self, request):
        # Registro único
        return not LojaInfo.objects.exists()
