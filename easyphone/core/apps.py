# easyphone/core/apps.py

from django.apps import AppConfig

class CoreConfig(AppConfig):
    # O nome completo do path da aplicação
    name = 'easyphone.core'
    label = 'core'
    # Camada sem modelos de banco: entidades, carrinho e casos de uso
    verbose_name = 'Camada de Entidades e Lógica (Core)'
    default_auto_field = 'django.db.models.BigAutoField'
