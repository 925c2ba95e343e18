"""Read-only Google Classroom client feeding the dashboard's remote assignments."""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional

import httplib2
from google.auth.exceptions import RefreshError, TransportError
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from core.errors import UpstreamError
from core.log import get_logger
from core.settings import CLASSROOM
from core.statuses import IN_PROGRESS, PENDING, SUBMITTED
from services.sources import CourseAssignments, RemoteSnapshot


log = get_logger("classroom")

# Failures that become error markers on the snapshot instead of aborting the merge.
FETCH_ERRORS = (HttpError, RefreshError, TransportError, httplib2.HttpLib2Error, OSError)

SUBMISSION_STATUS = {
    "TURNED_IN": SUBMITTED,
    "RETURNED": SUBMITTED,
    "RECLAIMED_BY_STUDENT": IN_PROGRESS,
    "CREATED": PENDING,
    "NEW": PENDING,
}


def _build_service(credentials) -> Any:
    return build("classroom", "v1", credentials=credentials, cache_discovery=False)


def _http_status(exc: HttpError) -> Optional[int]:
    status = getattr(exc, "resp", None) and getattr(exc.resp, "status", None)
    try:
        return int(status) if status else None
    except (TypeError, ValueError):
        return None


def _describe(exc: Exception) -> str:
    if isinstance(exc, HttpError):
        status = _http_status(exc)
        return f"Classroom request failed ({status or 'no status'})"
    if isinstance(exc, RefreshError):
        return "Classroom sign-in expired; reconnect the account"
    if isinstance(exc, UpstreamError):
        return str(exc)
    if isinstance(exc, TimeoutError):
        return "Classroom request timed out"
    if isinstance(exc, (OSError, httplib2.HttpLib2Error, TransportError)):
        return f"Classroom unreachable: {exc}"
    return f"Classroom request failed: {exc}"


def submission_status(state: Optional[str]) -> str:
    return SUBMISSION_STATUS.get((state or "").upper(), PENDING)


def _paged(request_factory: Callable[[Optional[str]], Any], key: str) -> List[Dict]:
    items: List[Dict] = []
    page_token: Optional[str] = None
    while True:
        response = request_factory(page_token).execute()
        items.extend(response.get(key, []))
        page_token = response.get("nextPageToken")
        if not page_token:
            break
    return items


class ClassroomSource:
    """Fetch courses, course work and the caller's submission states.

    Upstream failures never raise out of :meth:`fetch`: the snapshot carries an
    error marker and whatever data was loaded.
    """

    def __init__(self, service_factory: Callable[[Any], Any] = _build_service) -> None:
        self._service_factory = service_factory

    def _service(self, ctx) -> Any:
        if ctx is None or ctx.credentials is None:
            raise UpstreamError("Classroom credentials are not available")
        return self._service_factory(ctx.credentials)

    def list_courses(self, ctx, service=None) -> List[Dict]:
        service = service or self._service(ctx)
        return _paged(
            lambda token: service.courses().list(
                courseStates=list(CLASSROOM.course_states),
                pageSize=CLASSROOM.page_size,
                pageToken=token,
            ),
            "courses",
        )

    def list_course_work(self, service, course_id: str) -> List[Dict]:
        return _paged(
            lambda token: service.courses().courseWork().list(
                courseId=course_id,
                pageSize=CLASSROOM.page_size,
                pageToken=token,
            ),
            "courseWork",
        )

    def list_submissions(self, service, course_id: str, work_id: str = "-") -> List[Dict]:
        return _paged(
            lambda token: service.courses().courseWork().studentSubmissions().list(
                courseId=course_id,
                courseWorkId=work_id,
                userId="me",
                pageSize=CLASSROOM.page_size,
                pageToken=token,
            ),
            "studentSubmissions",
        )

    def _course_assignments(self, service, course: Dict) -> CourseAssignments:
        course_id = course.get("id")
        group = CourseAssignments(course_id=course_id, course_name=course.get("name"))
        try:
            work_items = self.list_course_work(service, course_id)
        except FETCH_ERRORS as exc:
            log.warning("Course work for %s unavailable: %s", course_id, exc)
            group.error = _describe(exc)
            return group

        states: Dict[str, str] = {}
        try:
            for submission in self.list_submissions(service, course_id):
                states[submission.get("courseWorkId")] = submission.get("state")
        except FETCH_ERRORS as exc:
            log.warning("Submissions for %s unavailable: %s", course_id, exc)
            group.error = _describe(exc)

        for work in work_items:
            group.assignments.append(
                {
                    "id": work.get("id"),
                    "title": work.get("title") or "",
                    "dueDate": work.get("dueDate"),
                    "dueText": None,
                    "status": submission_status(states.get(work.get("id"))),
                }
            )
        return group

    def fetch(self, ctx) -> RemoteSnapshot:
        try:
            service = self._service(ctx)
            courses = self.list_courses(ctx, service=service)
        except (UpstreamError,) + FETCH_ERRORS as exc:
            log.warning("Classroom courses unavailable for %s: %s", getattr(ctx, "owner_email", None), exc)
            return RemoteSnapshot(error=_describe(exc))

        snapshot = RemoteSnapshot()
        for course in courses:
            snapshot.courses.append(self._course_assignments(service, course))
        log.info("Fetched %d courses from Classroom", len(snapshot.courses))
        return snapshot


__all__ = ["ClassroomSource", "submission_status"]
