import entrevisto.main as main_mod
import entrevisto.routers.interviews as interviews_mod
from entrevisto.services.interview_service import StartResult


def test_interview_start_rate_limit_blocks_excess_requests(monkeypatch, client):
    monkeypatch.setattr(main_mod.settings, "rate_limit_interview_start_per_min", 2)
    monkeypatch.setattr(
        interviews_mod,
        "start_interview",
        lambda db, vapi, **kw: StartResult(session_id="sess-1", call_id="call-1", started=False),
    )

    payload = {"jobId": "job-1", "candidateNumber": "browser"}
    r1 = client.post("/interviews/start", json=payload)
    r2 = client.post("/interviews/start", json=payload)
    r3 = client.post("/interviews/start", json=payload)

    assert r1.status_code == 200
    assert r2.status_code == 200
    assert r3.status_code == 429
    assert r3.json() == {"message": "Too many requests. Please retry shortly."}
    assert int(r3.headers["Retry-After"]) >= 1


def test_unlimited_paths_are_not_counted(monkeypatch, anon_client):
    monkeypatch.setattr(main_mod.settings, "rate_limit_interview_start_per_min", 1)
    for _ in range(5):
        assert anon_client.get("/health/live").status_code == 200
