from decimal import Decimal

from django.core.management.base import BaseCommand
from django.db import transaction

from easyphone.catalog.models import Produto, Variante
from easyphone.loja.models import LojaInfo


class Command(BaseCommand):
    help = 'Carrega dados iniciais para teste da loja'

    # (titulo, marca, categoria, descricao, [(variante, estoque, preco, promocional)])
    PRODUTOS = [
        ('iPhone 13', 'Apple', 'Smartphones', 'Tela de 6,1", 128GB', [
            ('Preto', 5, Decimal('3999.00'), Decimal('3699.00')),
            ('Azul', 2, Decimal('3999.00'), None),
        ]),
        ('Galaxy S23', 'Samsung', 'Smartphones', 'Tela de 6,1", 256GB', [
            ('Creme', 4, Decimal('4299.00'), None),
            ('Verde', 0, Decimal('4299.00'), None),
        ]),
        ('Redmi Note 12', 'Xiaomi', 'Smartphones', 'Tela de 6,67", 128GB', [
            ('Cinza', 10, Decimal('1299.00'), Decimal('1149.00')),
        ]),
        ('Capinha Silicone iPhone 13', 'Apple', 'Acessórios', 'Capinha de silicone com MagSafe', [
            ('Preta', 20, Decimal('149.90'), None),
            ('Rosa', 0, Decimal('149.90'), None),
        ]),
        ('Carregador USB-C 20W', 'Apple', 'Acessórios', 'Carregador rápido', [
            ('Branco', 0, Decimal('199.00'), None),
        ]),
    ]

    @transaction.atomic
    def handle(self, *args, **kwargs):
        self.stdout.write('Criando dados iniciais...')

        for titulo, marca, categoria, descricao, variantes in self.PRODUTOS:
            produto, created = Produto.objects.get_or_create(
                titulo=titulo,
                defaults={'marca': marca, 'categoria': categoria, 'descricao': descricao},
            )
            if not created:
                self.stdout.write(f'Produto "{titulo}" já existe, ignorado.')
                continue

            for ordem, (nome, estoque, preco, promocional) in enumerate(variantes):
                Variante.objects.create(
                    produto=produto, nome=nome, estoque=estoque,
                    preco=preco, promocional=promocional, ordem=ordem,
                )
            self.stdout.write(self.style.SUCCESS(f'Criado produto "{produto}" ({len(variantes)} variantes)'))

        loja = LojaInfo.carregar()
        if not loja.titulo:
            loja.titulo = 'Easy Phone'
            loja.descricao = 'Celulares e acessórios'
            loja.save()

        self.stdout.write(self.style.SUCCESS('Dados iniciais carregados!'))
