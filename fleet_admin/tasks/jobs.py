from fleet_admin.tasks.celery_app import PROMOTE_TASK, celery
from fleet_admin.tasks import worker_jobs

@celery.task(name=PROMOTE_TASK)
def promote_delayed_notifications():
    return worker_jobs.promote_delayed_notifications()
