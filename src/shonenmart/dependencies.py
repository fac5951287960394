from fastapi import BackgroundTasks, Request

from .services.notifier import Notifier


def get_settings(request: Request):
    return request.app.state.settings


def get_payments(request: Request):
    return request.app.state.payments


def get_mailer(request: Request):
    return request.app.state.mailer


def get_notifier(background_tasks: BackgroundTasks) -> Notifier:
    """Emails scheduled here are sent after the response goes out."""
    return Notifier(background_tasks)
