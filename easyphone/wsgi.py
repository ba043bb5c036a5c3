"""
Configuração WSGI do projeto Easy Phone.
"""
import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'easyphone.settings')

application = get_wsgi_application()
