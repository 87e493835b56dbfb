from src.timekeeper.timekeeper.sweep.scheduler import JOB_ID, AbsenceSweepScheduler
from tests.fakes import EMPLOYEE_ID, WORK_DAY


def _scheduler(container, **kwargs):
    return AbsenceSweepScheduler(
        container.absence_sweep_service,
        timezone_name="Asia/Manila",
        **kwargs,
    )


def test_job_runs_nightly_in_the_business_timezone(container):
    scheduler = _scheduler(container)

    job = scheduler.scheduler.get_job(JOB_ID)
    fields = {f.name: str(f) for f in job.trigger.fields}

    assert fields["hour"] == "22"
    assert fields["minute"] == "0"
    assert str(job.trigger.timezone) == "Asia/Manila"


def test_status_before_start(container):
    status = _scheduler(container, hour=21, minute=30).status()

    assert status == {
        "running": False,
        "timezone": "Asia/Manila",
        "schedule": "21:30",
        "nextRun": None,
    }


def test_run_now_uses_the_sweep(container, make_slot):
    make_slot()

    summary = _scheduler(container).run_now()

    assert summary.date == WORK_DAY
    assert summary.absences_marked == 1
    assert container.attendance_repo.get_for_employee_and_date(EMPLOYEE_ID, WORK_DAY) is not None


def test_scheduled_job_swallows_sweep_errors(container, monkeypatch):
    scheduler = _scheduler(container)

    def boom(today=None):
        raise RuntimeError("database unavailable")

    monkeypatch.setattr(container.absence_sweep_service, "run", boom)

    scheduler._run_job()
