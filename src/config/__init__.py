"""
Configuração do projeto de Ordens de Serviço.

Módulos:
- settings / settings_test: Configurações Django
- urls: Rotas principais
- wsgi: WSGI application
- celery: Configuração Celery para tarefas assíncronas
- container: Dependency Injection Container
"""

from .celery import app as celery_app

__all__ = ('celery_app',)
