# dealership/tasks/__init__.py
from dealership.extensions import make_celery


def init_celery(app):
    """Инициализация Celery с Flask приложением"""
    celery = make_celery(app)

    from dealership.tasks.cleanup import register_cleanup_tasks
    register_cleanup_tasks(celery)

    return celery
