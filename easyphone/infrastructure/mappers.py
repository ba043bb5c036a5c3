"""
Mapeadores (Mappers) para converter entre:
1. Modelos do Django ORM
2. Entidades de Domínio (easyphone.core.entities)
"""
from decimal import Decimal
from typing import Any, Optional, Type

from django.apps import apps
from django.db import models

# Importa as entidades do Core
from easyphone.core.entities import (
    Produto as ProdutoEntity,
    Variante as VarianteEntity,
    Pedido as PedidoEntity,
    ItemPedido as ItemPedidoEntity,
    DadosPessoais,
    Entrega,
    TipoEntrega,
    StatusPedido,
    Cupom as CupomEntity,
    LojaInfo as LojaInfoEntity,
)


# ====================================================================
# Uso de apps.get_model para evitar dependências circulares
# ====================================================================

def get_model(app_label: str, model_name: str):
    """Retorna um modelo do Django de forma segura (lazy loading)."""
    return apps.get_model(app_label, model_name)


# ====================================================================
# MAPPERS DO CATÁLOGO
# ====================================================================

class VarianteMapper:
    """Mapeador para Variante."""

    @staticmethod
    def to_entity(model: Any) -> Optional[VarianteEntity]:
        if not model: return None
        return VarianteEntity(
            id=str(model.id),
            nome=model.nome,
            estoque=model.estoque,
            preco=Decimal(model.preco),
            promocional=Decimal(model.promocional) if model.promocional is not None else None,
        )


class ProdutoMapper:
    """Mapeador para Produto (com as variantes pré-carregadas)."""

    @staticmethod
    def to_entity(model: Any) -> Optional[ProdutoEntity]:
        """Converte Produto Model para Produto Entity."""
        if not model: return None
        return ProdutoEntity(
            id=str(model.id),
            titulo=model.titulo,
            marca=model.marca,
            categoria=model.categoria,
            descricao=model.descricao,
            imagens=list(model.imagens or []),
            variantes=[VarianteMapper.to_entity(v) for v in model.variantes.all()],
        )


# ====================================================================
# MAPPERS DE PEDIDO
# ====================================================================

class ItemPedidoMapper:

    @staticmethod
    def to_entity(model: Any) -> ItemPedidoEntity:
        return ItemPedidoEntity(
            produto_id=model.produto_id,
            variante_id=model.variante_id,
            quantidade=model.quantidade,
        )

    @staticmethod
    def to_model(entity: ItemPedidoEntity, pedido_id: int) -> Any:
        ItemPedidoModel = get_model('pedidos', 'ItemPedido')
        return ItemPedidoModel(
            pedido_id=pedido_id,
            produto_id=str(entity.produto_id),
            variante_id=str(entity.variante_id),
            quantidade=entity.quantidade,
        )


class PedidoMapper:
    """Mapeador para Pedido (Venda)."""

    @classmethod
    def model_class(cls) -> Type[models.Model]:
        return get_model('pedidos', 'Pedido')

    @staticmethod
    def to_entity(model: Any) -> Optional[PedidoEntity]:
        """Converte Pedido Model para Pedido Entity."""
        if not model: return None

        tipo_entrega = TipoEntrega(model.tipo_entrega)
        entrega = None
        if tipo_entrega == TipoEntrega.ENTREGA:
            entrega = Entrega(
                endereco=model.endereco_entrega,
                numero=model.numero_entrega,
                cidade=model.cidade_entrega,
                frete=Decimal(model.frete),
            )

        return PedidoEntity(
            id=str(model.id),
            dados_pessoais=DadosPessoais(
                nome=model.nome_cliente,
                telefone=model.telefone_cliente,
                email=model.email_cliente,
            ),
            tipo_entrega=tipo_entrega,
            forma_pagamento=model.forma_pagamento,
            itens=[ItemPedidoMapper.to_entity(item) for item in model.itens.all()],
            valor=Decimal(model.valor),
            time_stamp=model.time_stamp,
            status=StatusPedido.from_valor(model.status),
            entrega=entrega,
        )

    @classmethod
    def to_model(cls, entity: PedidoEntity) -> Any:
        """Converte Pedido Entity para um novo Pedido Model (ainda não salvo)."""
        model = cls.model_class()()
        model.status = entity.status.value
        model.valor = entity.valor
        model.forma_pagamento = entity.forma_pagamento
        model.time_stamp = entity.time_stamp
        model.nome_cliente = entity.dados_pessoais.nome
        model.telefone_cliente = entity.dados_pessoais.telefone
        model.email_cliente = entity.dados_pessoais.email
        model.tipo_entrega = TipoEntrega(entity.tipo_entrega).value
        if entity.entrega is not None:
            model.endereco_entrega = entity.entrega.endereco
            model.numero_entrega = entity.entrega.numero
            model.cidade_entrega = entity.entrega.cidade
            model.frete = entity.entrega.frete
        return model


# ====================================================================
# MAPPERS DA LOJA
# ====================================================================

class CupomMapper:

    @staticmethod
    def to_entity(model: Any) -> Optional[CupomEntity]:
        if not model: return None
        return CupomEntity(id=str(model.id), codigo=model.codigo, percentual=model.percentual, ativo=model.ativo)


class LojaInfoMapper:

    CAMPOS = ('titulo', 'descricao', 'email', 'instagram', 'facebook', 'whatsapp')

    @classmethod
    def to_entity(cls, model: Any) -> LojaInfoEntity:
        return LojaInfoEntity(**{campo: getattr(model, campo) for campo in cls.CAMPOS})

    @classmethod
    def to_model(cls, entity: LojaInfoEntity, model: Any) -> Any:
        for campo in cls.CAMPOS:
            setattr(model, campo, getattr(entity, campo))
        return model
