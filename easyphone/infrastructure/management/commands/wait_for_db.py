"""
Management command para aguardar o banco de dados estar disponível.
"""
import time
from django.db import connections
from django.db.utils import OperationalError
from django.core.management.base import BaseCommand


class Command(BaseCommand):
    """Django command para pausar a execução até o banco de dados estar disponível."""

    help = 'Aguarda o banco de dados aceitar conexões'

    def add_arguments(self, parser):
        parser.add_argument('--tentativas', type=int, default=30)

    def handle(self, *args, **options):
        self.stdout.write('Aguardando pelo banco de dados...')
        for _ in range(options['tentativas']):
            try:
                connections['default'].ensure_connection()
            except OperationalError:
                self.stdout.write('Banco de dados indisponível, aguardando 1 segundo...')
                time.sleep(1)
            else:
                self.stdout.write(self.style.SUCCESS('Banco de dados disponível!'))
                return

        raise OperationalError('Banco de dados continua indisponível.')
