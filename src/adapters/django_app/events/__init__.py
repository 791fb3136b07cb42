"""
Publicação e processamento de eventos de domínio (sync e Celery).
"""
