"""
Interview session lifecycle.

PENDING -> IN_PROGRESS when the provider call is created, IN_PROGRESS -> ANALYSIS_PENDING when
the provider reports the call ended (see webhook_service). A session that is IN_PROGRESS is
never given a second provider call; the candidate has to abandon it first.
"""
import logging
from dataclasses import dataclass

from sqlalchemy.orm import Session

from entrevisto.config import settings
from entrevisto.core.security import generate_id
from entrevisto.models.interview_session import ABANDONABLE_STATUSES, InterviewSession, InterviewStatus
from entrevisto.repos import application_repo, interview_session_repo, job_repo
from entrevisto.repos.resume_repo import get_by_id as get_resume_by_id, get_latest_by_user
from entrevisto.services.resume_ingest_service import load_parsed_resume
from entrevisto.services.vapi_client import VapiClient, VoiceProviderError

logger = logging.getLogger(__name__)


class InterviewError(Exception):
    status_code = 500


class ResumeRequiredError(InterviewError):
    status_code = 400


class JobNotFoundError(InterviewError):
    status_code = 404


class ResumeNotFoundError(InterviewError):
    status_code = 404


class SessionNotFoundError(InterviewError):
    status_code = 404


class SessionFinishedError(InterviewError):
    status_code = 409


class ProviderCallError(InterviewError):
    status_code = 500


@dataclass
class StartResult:
    session_id: str
    call_id: str | None
    started: bool  # False when an existing session was returned without a new provider call


def start_interview(
    db: Session,
    vapi: VapiClient,
    *,
    candidate_id: str,
    job_id: str,
    candidate_number: str,
) -> StartResult:
    """
    Find-or-create the session for (candidate, job) and start its provider call if it has none.

    Concurrent calls for the same pair converge on one application and one session; only the
    request that wins the call claim talks to the provider.
    """
    resume = get_latest_by_user(db, candidate_id)
    if not resume:
        raise ResumeRequiredError("Resume required to start interview, but not found for candidate.")
    if not job_repo.get_by_id(db, job_id):
        raise JobNotFoundError("Job not found")

    application = application_repo.upsert_interview_invite(db, candidate_id, job_id, resume.id)
    if not application:
        raise InterviewError("Application could not be stored")

    session = interview_session_repo.insert_or_get(db, application.id)
    if session.status != InterviewStatus.PENDING.value:
        logger.info(
            "Reusing interview session=%s status=%s call=%s for application=%s",
            session.id, session.status, session.vapi_call_id, application.id,
        )
        return StartResult(session_id=session.id, call_id=session.vapi_call_id, started=False)

    claim_id = generate_id()
    if not interview_session_repo.claim_call(db, session.id, claim_id):
        # Another request is creating (or just created) the call for this session.
        current = interview_session_repo.get_by_id(db, session.id) or session
        logger.info("Interview session=%s already being started; returning existing state", session.id)
        return StartResult(session_id=current.id, call_id=current.vapi_call_id, started=False)

    try:
        call = vapi.create_call(
            customer_number=candidate_number,
            metadata={"interviewSessionId": session.id},
        )
    except VoiceProviderError as e:
        interview_session_repo.release_claim(db, session.id, claim_id)
        raise ProviderCallError(str(e)) from e
    except Exception:
        interview_session_repo.release_claim(db, session.id, claim_id)
        raise

    call_id = call["id"]
    try:
        recorded = interview_session_repo.mark_call_started(db, session.id, claim_id, call_id)
    except Exception:
        logger.exception("Orphaned provider call=%s: failed to record it on session=%s", call_id, session.id)
        raise
    if not recorded:
        logger.error("Orphaned provider call=%s: session=%s left PENDING before the call was recorded", call_id, session.id)
    else:
        logger.info("Interview started: session=%s call=%s application=%s", session.id, call_id, application.id)
    return StartResult(session_id=session.id, call_id=call_id, started=True)


def abandon_interview(db: Session, *, candidate_id: str, session_id: str) -> InterviewSession:
    """Reset an unfinished session to PENDING so the next start issues a fresh call."""
    session = interview_session_repo.get_owned(db, session_id, candidate_id)
    if not session:
        raise SessionNotFoundError("Interview session not found")
    if session.status not in ABANDONABLE_STATUSES:
        raise SessionFinishedError(f"Interview session is already {session.status}")
    previous_call = session.vapi_call_id
    if not interview_session_repo.abandon(db, session_id):
        raise SessionFinishedError("Interview session finished while abandoning")
    logger.info("Interview session=%s abandoned (previous call=%s)", session_id, previous_call)
    return interview_session_repo.get_by_id(db, session_id)


# ---------------------------
# Dynamic interviewer assistant
# ---------------------------
def _join_or(values: list[str], fallback: str) -> str:
    return ", ".join(v for v in values if v) or fallback


def build_interviewer_prompt(job, resume) -> str:
    company_name = job.company.name if job.company else "the hiring company"
    parsed = load_parsed_resume(resume.parsed_data)
    skills = _join_or(parsed.skills if parsed else [], "No skills were parsed from the resume.")
    experience = "; ".join(
        f"{e.title or 'Role'} at {e.company or 'unknown company'}" for e in (parsed.experience if parsed else [])
    ) or "No experience entries were parsed."
    education = "; ".join(
        f"{e.degree or 'Degree'} from {e.institution or 'unknown institution'}" for e in (parsed.education if parsed else [])
    ) or "No education entries were parsed."

    return f"""You are an AI interviewer for "{company_name}", screening a candidate for the "{job.title}" position.

Interview guidelines:
1. Ask questions tied to the candidate's resume and to the job description.
2. When an answer is detailed, follow up on how the candidate reasoned through it.
3. If the conversation stalls, move to another relevant area of the resume or the role.
4. Cover experience, technical skills, behaviour and motivation for this role.
5. Stay polite, encouraging and professional.
6. Aim for 10-15 questions or 10-15 minutes. Then thank the candidate and say the interview is complete. Do not ask about availability for next steps.

Job details:
- Description: {job.description or "Not provided."}
- Required skills: {_join_or(list(job.required_skills or []), "Not specified.")}

Candidate resume:
- Raw text:
\"\"\"
{resume.raw_text}
\"\"\"
- Parsed skills: {skills}
- Parsed experience: {experience}
- Parsed education: {education}

Start by introducing yourself as the AI interviewer from {company_name}, explain the purpose of the interview, then ask your first question."""


def build_assistant_config(job, resume) -> dict:
    company_name = job.company.name if job.company else settings.interview_company_brand
    return {
        "name": f"{job.title} interviewer"[:40],
        "model": {
            "provider": settings.interview_llm_provider,
            "model": settings.interview_llm_model,
            "temperature": settings.interview_llm_temperature,
            "maxTokens": settings.interview_llm_max_tokens,
            "messages": [{"role": "system", "content": build_interviewer_prompt(job, resume)}],
        },
        "voice": {
            "provider": settings.interview_voice_provider,
            "voiceId": settings.interview_voice_id,
        },
        "transcriber": {
            "provider": settings.interview_transcriber_provider,
            "model": settings.interview_transcriber_model,
            "language": "en",
        },
        "firstMessage": f"Hello, I'm your AI interviewer for {company_name}. Let's begin!",
        "endCallMessage": f"Thank you for your time. Your interview with {settings.interview_company_brand} is now complete.",
    }


def create_interview_assistant(
    db: Session,
    vapi: VapiClient,
    *,
    candidate_id: str,
    job_id: str,
    resume_id: str | None = None,
) -> str:
    """Create a provider assistant primed with the job and the candidate's resume; returns its id."""
    job = job_repo.get_by_id(db, job_id)
    if not job:
        raise JobNotFoundError("Job not found")
    if resume_id:
        resume = get_resume_by_id(db, resume_id, candidate_id)
        if not resume:
            raise ResumeNotFoundError("Resume not found")
    else:
        resume = get_latest_by_user(db, candidate_id)
        if not resume:
            raise ResumeRequiredError("Resume required to prepare the interview.")

    try:
        assistant = vapi.create_assistant(build_assistant_config(job, resume))
    except VoiceProviderError as e:
        raise ProviderCallError(str(e)) from e
    logger.info("Interview assistant=%s created for candidate=%s job=%s", assistant["id"], candidate_id, job_id)
    return assistant["id"]
