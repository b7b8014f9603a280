from types import SimpleNamespace

import pytest

import entrevisto.services.interview_service as svc
from entrevisto.services.vapi_client import VoiceProviderError


class _Store:
    """In-memory stand-in for the application and interview-session tables."""

    def __init__(self):
        self.applications = {}
        self.sessions = {}
        self.resumes = {}
        self.jobs = {"job-1": SimpleNamespace(id="job-1", title="Backend Engineer")}
        self.claim_always_lost = False
        self.fail_mark_started = False

    # applications
    def upsert_interview_invite(self, db, candidate_id, job_id, resume_id):
        key = (candidate_id, job_id)
        app = self.applications.get(key)
        if app is None:
            app = SimpleNamespace(id=f"app-{len(self.applications) + 1}", candidate_id=candidate_id, job_id=job_id)
            self.applications[key] = app
        app.status = "INTERVIEW_INVITED"
        app.resume_id = resume_id
        return app

    # sessions
    def insert_or_get(self, db, application_id, session_type="JOB_APPLICATION"):
        for s in self.sessions.values():
            if s.application_id == application_id:
                return s
        session = SimpleNamespace(
            id=f"sess-{len(self.sessions) + 1}",
            application_id=application_id,
            status="PENDING",
            vapi_call_id=None,
            call_claim_id=None,
        )
        self.sessions[session.id] = session
        return session

    def get_by_id(self, db, session_id):
        return self.sessions.get(session_id)

    def claim_call(self, db, session_id, claim_id):
        s = self.sessions[session_id]
        if self.claim_always_lost or s.status != "PENDING" or s.call_claim_id is not None:
            return False
        s.call_claim_id = claim_id
        return True

    def release_claim(self, db, session_id, claim_id):
        s = self.sessions[session_id]
        if s.call_claim_id == claim_id:
            s.call_claim_id = None
            return True
        return False

    def mark_call_started(self, db, session_id, claim_id, call_id):
        if self.fail_mark_started:
            raise RuntimeError("db write failed")
        s = self.sessions[session_id]
        if s.call_claim_id != claim_id or s.status != "PENDING":
            return False
        s.vapi_call_id = call_id
        s.status = "IN_PROGRESS"
        s.call_claim_id = None
        return True

    def get_owned(self, db, session_id, candidate_id):
        s = self.sessions.get(session_id)
        if not s:
            return None
        owner = next(a.candidate_id for a in self.applications.values() if a.id == s.application_id)
        return s if owner == candidate_id else None

    def abandon(self, db, session_id):
        s = self.sessions[session_id]
        if s.status not in ("PENDING", "IN_PROGRESS"):
            return False
        s.status = "PENDING"
        s.vapi_call_id = None
        s.call_claim_id = None
        return True


class _Vapi:
    def __init__(self, fail=False):
        self.fail = fail
        self.calls = []

    def create_call(self, customer_number, metadata, assistant_id=None):
        self.calls.append(metadata)
        if self.fail:
            raise VoiceProviderError("Vapi /call returned 400: bad number")
        return {"id": f"call-{len(self.calls)}"}


@pytest.fixture
def store(monkeypatch):
    s = _Store()
    s.resumes["cand-1"] = SimpleNamespace(id="res-1")
    monkeypatch.setattr(svc, "get_latest_by_user", lambda db, uid: s.resumes.get(uid))
    monkeypatch.setattr(svc, "job_repo", SimpleNamespace(get_by_id=lambda db, jid: s.jobs.get(jid)))
    monkeypatch.setattr(svc, "application_repo", SimpleNamespace(upsert_interview_invite=s.upsert_interview_invite))
    monkeypatch.setattr(
        svc,
        "interview_session_repo",
        SimpleNamespace(
            insert_or_get=s.insert_or_get,
            get_by_id=s.get_by_id,
            claim_call=s.claim_call,
            release_claim=s.release_claim,
            mark_call_started=s.mark_call_started,
            get_owned=s.get_owned,
            abandon=s.abandon,
        ),
    )
    return s


def _start(vapi, candidate_id="cand-1", job_id="job-1"):
    return svc.start_interview(object(), vapi, candidate_id=candidate_id, job_id=job_id, candidate_number="browser")


def test_start_creates_session_and_call(store):
    vapi = _Vapi()
    result = _start(vapi)
    assert result.started is True
    assert result.call_id == "call-1"
    session = store.sessions[result.session_id]
    assert session.status == "IN_PROGRESS"
    assert session.vapi_call_id == "call-1"
    assert session.call_claim_id is None
    assert vapi.calls == [{"interviewSessionId": result.session_id}]


def test_repeated_start_reuses_application_and_session_without_new_call(store):
    vapi = _Vapi()
    first = _start(vapi)
    second = _start(vapi)
    assert len(store.applications) == 1
    assert len(store.sessions) == 1
    assert second.session_id == first.session_id
    assert second.call_id == first.call_id
    assert second.started is False
    assert len(vapi.calls) == 1


def test_start_without_resume_writes_nothing(store):
    store.resumes.clear()
    with pytest.raises(svc.ResumeRequiredError) as ex:
        _start(_Vapi())
    assert ex.value.status_code == 400
    assert store.applications == {}
    assert store.sessions == {}


def test_start_unknown_job_is_not_found(store):
    with pytest.raises(svc.JobNotFoundError) as ex:
        _start(_Vapi(), job_id="missing")
    assert ex.value.status_code == 404
    assert store.sessions == {}


def test_start_losing_claim_returns_existing_session(store):
    store.claim_always_lost = True
    vapi = _Vapi()
    result = _start(vapi)
    assert result.started is False
    assert result.call_id is None
    assert result.session_id in store.sessions
    assert vapi.calls == []


def test_provider_failure_releases_claim_and_allows_retry(store):
    with pytest.raises(svc.ProviderCallError) as ex:
        _start(_Vapi(fail=True))
    assert ex.value.status_code == 500
    assert "bad number" in str(ex.value)
    session = next(iter(store.sessions.values()))
    assert session.status == "PENDING"
    assert session.call_claim_id is None

    retry = _start(_Vapi())
    assert retry.started is True
    assert retry.session_id == session.id


def test_failed_call_recording_is_logged_as_orphan(store, caplog):
    store.fail_mark_started = True
    with pytest.raises(RuntimeError):
        _start(_Vapi())
    assert "Orphaned provider call=call-1" in caplog.text


def test_abandon_allows_a_fresh_call(store):
    vapi = _Vapi()
    first = _start(vapi)
    svc.abandon_interview(object(), candidate_id="cand-1", session_id=first.session_id)
    session = store.sessions[first.session_id]
    assert session.status == "PENDING"
    assert session.vapi_call_id is None

    again = _start(vapi)
    assert again.session_id == first.session_id
    assert again.call_id == "call-2"
    assert again.started is True


def test_abandon_finished_session_conflicts(store):
    first = _start(_Vapi())
    store.sessions[first.session_id].status = "ANALYSIS_PENDING"
    with pytest.raises(svc.SessionFinishedError) as ex:
        svc.abandon_interview(object(), candidate_id="cand-1", session_id=first.session_id)
    assert ex.value.status_code == 409


def test_abandon_other_candidates_session_is_not_found(store):
    first = _start(_Vapi())
    with pytest.raises(svc.SessionNotFoundError):
        svc.abandon_interview(object(), candidate_id="someone-else", session_id=first.session_id)
    assert store.sessions[first.session_id].status == "IN_PROGRESS"


def _job_and_resume(parsed_data=None):
    job = SimpleNamespace(
        title="Backend Engineer",
        description="Build APIs.",
        required_skills=["Python", "SQL"],
        company=SimpleNamespace(name="Acme"),
    )
    resume = SimpleNamespace(id="res-1", raw_text="Jane Doe\nPython developer", parsed_data=parsed_data)
    return job, resume


def test_build_assistant_config_includes_job_and_resume():
    job, resume = _job_and_resume({"skills": ["Python", "Docker"], "experience": [{"title": "Dev", "company": "Initech"}]})
    config = svc.build_assistant_config(job, resume)
    prompt = config["model"]["messages"][0]["content"]
    assert "Backend Engineer" in prompt
    assert "Acme" in prompt
    assert "Python, SQL" in prompt
    assert "Python, Docker" in prompt
    assert "Dev at Initech" in prompt
    assert "Jane Doe" in prompt
    assert config["voice"]["provider"] == svc.settings.interview_voice_provider
    assert "Acme" in config["firstMessage"]


def test_build_interviewer_prompt_without_parsed_data():
    job, resume = _job_and_resume(None)
    prompt = svc.build_interviewer_prompt(job, resume)
    assert "No skills were parsed from the resume." in prompt


def test_create_interview_assistant_uses_latest_resume(monkeypatch):
    job, resume = _job_and_resume()
    monkeypatch.setattr(svc, "job_repo", SimpleNamespace(get_by_id=lambda db, jid: job))
    monkeypatch.setattr(svc, "get_latest_by_user", lambda db, uid: resume)
    created = []
    vapi = SimpleNamespace(create_assistant=lambda cfg: created.append(cfg) or {"id": "asst-9"})
    out = svc.create_interview_assistant(object(), vapi, candidate_id="cand-1", job_id="job-1")
    assert out == "asst-9"
    assert len(created) == 1


def test_create_interview_assistant_unknown_resume(monkeypatch):
    job, _ = _job_and_resume()
    monkeypatch.setattr(svc, "job_repo", SimpleNamespace(get_by_id=lambda db, jid: job))
    monkeypatch.setattr(svc, "get_resume_by_id", lambda db, rid, uid: None)
    with pytest.raises(svc.ResumeNotFoundError):
        svc.create_interview_assistant(object(), SimpleNamespace(), candidate_id="cand-1", job_id="job-1", resume_id="r-x")
