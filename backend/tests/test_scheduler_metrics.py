from __future__ import annotations
from backend.app.main import start_background_jobs, stop_background_jobs
from backend.app.services.scheduler_monitor import JOB_MONTHLY_CHARGES, SchedulerMonitor


def test_background_jobs_respect_enable_flags(monkeypatch):
    started = []

    SchedulerMonitor.reset()
    monkeypatch.setenv("ENABLE_MONTHLY_CHARGES", "0")
    monkeypatch.setattr(
        "backend.app.main.start_monthly_charge_scheduler",
        lambda: started.append(JOB_MONTHLY_CHARGES),
    )

    start_background_jobs()

    assert started == []
    snapshot = SchedulerMonitor.snapshot()
    assert snapshot[JOB_MONTHLY_CHARGES]["enabled"] is False
    assert snapshot[JOB_MONTHLY_CHARGES]["last_tick"] is None


def test_background_jobs_start_when_enabled(monkeypatch):
    started = []

    SchedulerMonitor.reset()
    monkeypatch.setenv("ENABLE_MONTHLY_CHARGES", "1")
    monkeypatch.setattr(
        "backend.app.main.start_monthly_charge_scheduler",
        lambda: started.append(JOB_MONTHLY_CHARGES),
    )

    start_background_jobs()

    assert started == [JOB_MONTHLY_CHARGES]
    assert SchedulerMonitor.snapshot()[JOB_MONTHLY_CHARGES]["enabled"] is True


def test_background_jobs_stop_all(monkeypatch):
    stopped: list[str] = []

    monkeypatch.setattr(
        "backend.app.main.stop_monthly_charge_scheduler",
        lambda: stopped.append(JOB_MONTHLY_CHARGES),
    )

    stop_background_jobs()

    assert stopped == [JOB_MONTHLY_CHARGES]


def test_scheduler_health_endpoint_reports_status(client):
    SchedulerMonitor.reset()
    SchedulerMonitor.set_job_enabled(JOB_MONTHLY_CHARGES, True)
    SchedulerMonitor.record_tick(JOB_MONTHLY_CHARGES, "Se generaron 1 cargos de Marzo 2024")
    SchedulerMonitor.record_error(JOB_MONTHLY_CHARGES, "failing task")

    response = client.get("/metrics/scheduler")

    assert response.status_code == 200
    payload = response.json()
    job_status = payload["jobs"][JOB_MONTHLY_CHARGES]
    assert job_status["enabled"] is True
    assert isinstance(job_status["last_tick"], str)
    assert job_status["last_result"] == "Se generaron 1 cargos de Marzo 2024"
    assert any("failing task" in entry for entry in job_status["recent_errors"])
