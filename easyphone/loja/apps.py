from django.apps import AppConfig

class LojaConfig(AppConfig):
    # Caminho Python completo para o módulo
    name = 'easyphone.loja'
    label = 'loja'

    # Nome amigável exibido no admin
    verbose_name = 'Configurações da Loja'

    default_auto_field = 'django.db.models.BigAutoField'
