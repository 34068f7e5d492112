"""
Celery configuration for the wirtrack project.
"""

import os

from celery import Celery
from celery.schedules import crontab

# Set the default Django settings module
os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings')

app = Celery('wirtrack')

# Using a string here means the worker doesn't have to serialize
# the configuration object to child processes.
app.config_from_object('django.conf:settings', namespace='CELERY')

# Load task modules from all registered Django apps.
app.autodiscover_tasks()

# Task modules that live outside the Django app packages.
app.conf.imports = (
    'application.tasks.boq_tasks',
)

# Configure task routes
app.conf.task_routes = {
    'application.tasks.boq_tasks.propagate_boq_unit_rate': {'queue': 'sync'},
    'application.tasks.boq_tasks.reconcile_breakdown_rates': {'queue': 'sync'},
    'application.tasks.boq_tasks.export_boq_to_excel': {'queue': 'reports'},
}

# Configure task schedules (periodic tasks)
app.conf.beat_schedule = {
    'reconcile-breakdown-rates': {
        'task': 'application.tasks.boq_tasks.reconcile_breakdown_rates',
        'schedule': crontab(hour=2, minute=0),  # Every day at 02:00
    },
}

