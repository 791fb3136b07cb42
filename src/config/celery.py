"""
Configuração do Celery para processamento assíncrono.

O Celery é usado para:
- Processar Domain Events de O.S. (notificações) fora da requisição
- Tarefas agendadas (SLA crítico, resumo diário, limpeza de eventos)

Arquitetura:
- Broker: RabbitMQ (mensagens entre Django e Workers)
- Backend: Redis (resultados de tarefas)
- Workers: Processos que executam as tarefas

Uso:
    # Iniciar worker
    celery -A src.config.celery worker -l INFO -Q default,events,reports

    # Iniciar beat (tarefas agendadas)
    celery -A src.config.celery beat -l INFO
"""

import os

from celery import Celery
from celery.schedules import crontab
from kombu import Queue, Exchange

# Definir módulo de settings do Django
os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'src.config.settings')

app = Celery('ordens_servico')

# Broker, backend, serialização e retry vêm do settings (prefixo CELERY_)
app.config_from_object('django.conf:settings', namespace='CELERY')

app.conf.update(
    worker_send_task_events=True,
    task_send_sent_event=True,
    task_default_queue='default',
)

# Definir filas
app.conf.task_queues = (
    Queue('default', Exchange('default'), routing_key='default'),
    Queue('events', Exchange('events'), routing_key='events.#'),
    Queue('reports', Exchange('reports'), routing_key='reports.#'),
)

_HANDLERS = 'src.adapters.django_app.events.handlers'

# Roteamento de tarefas para filas
app.conf.task_routes = {
    f'{_HANDLERS}.dispatch_domain_event': {'queue': 'events'},
    f'{_HANDLERS}.handle_evento_os': {'queue': 'events'},
    f'{_HANDLERS}.gerar_resumo_diario': {'queue': 'reports'},
}

# Tarefas ficam em <pacote>.handlers
app.autodiscover_tasks(['src.adapters.django_app.events'], related_name='handlers')

# Tarefas agendadas (beat)
app.conf.beat_schedule = {
    # O.S. além do SLA, a cada 30 minutos
    'verificar-sla-critico': {
        'task': f'{_HANDLERS}.verificar_sla_critico',
        'schedule': crontab(minute='*/30'),
    },

    # Resumo diário às 8h
    'resumo-diario': {
        'task': f'{_HANDLERS}.gerar_resumo_diario',
        'schedule': crontab(hour=8, minute=0),
    },

    # Limpar eventos antigos semanalmente
    'limpar-eventos-antigos': {
        'task': f'{_HANDLERS}.limpar_eventos_antigos',
        'schedule': crontab(hour=3, minute=0, day_of_week='sunday'),
        'kwargs': {'days': 90},
    },
}
