"""Blocking client for the Wistia data API."""

from __future__ import annotations

import string
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

import httpx
from tenacity import (
    Retrying,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)
from tqdm import tqdm

from wistiaembed.utils.logger import logger, time_log

from ..exceptions import ApiError, ApiKeyError, InvalidVideoIdError
from .models import VideoRecord

API_BASE_URL = "https://api.wistia.com/v1/"
PAGE_SIZE = 100
SECTION_PREFIX = "section-"

ERROR_NO_API_KEY = 1
ERROR_MALFORMED_API_KEY = 2
ERROR_NO_PROJECTS = 1
ERROR_INVALID_VIDEO_ID = 2
ERROR_REMOTE_FILE = 3
ERROR_NO_VIDEO_LIST = 5


def _is_retryable(exc: BaseException) -> bool:
    if isinstance(exc, httpx.TransportError):
        return True
    if isinstance(exc, httpx.HTTPStatusError):
        status = exc.response.status_code
        return status == 429 or status >= 500
    return False


class WistiaClient:
    """Fetches projects and medias with retry and timeout handling.

    The project list is memoized for the lifetime of the instance.
    """

    def __init__(
        self,
        api_key: Optional[str],
        *,
        timeout: float = 10.0,
        retries: int = 3,
        retry_wait: float = 1.0,
        base_url: str = API_BASE_URL,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        if not api_key:
            raise ApiKeyError("No API key defined.", ERROR_NO_API_KEY)
        if not all(ch in string.hexdigits for ch in api_key):
            raise ApiKeyError(
                "Malformed API key. Keys must be hexadecimal.", ERROR_MALFORMED_API_KEY
            )

        self.retries = max(1, int(retries))
        self.retry_wait = retry_wait
        self._projects: Optional[Dict[str, str]] = None
        self._http = httpx.Client(
            base_url=base_url,
            auth=("api", api_key),
            timeout=timeout,
            transport=transport,
        )

    def __enter__(self) -> "WistiaClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def close(self) -> None:
        self._http.close()

    def _retrying(self) -> Retrying:
        return Retrying(
            stop=stop_after_attempt(self.retries),
            wait=wait_exponential(multiplier=self.retry_wait, min=0, max=10 * self.retry_wait),
            retry=retry_if_exception(_is_retryable),
            before_sleep=self._log_retry,
            reraise=True,
        )

    @staticmethod
    def _log_retry(retry_state: Any) -> None:
        exc = retry_state.outcome.exception() if retry_state.outcome else None
        logger.warning(
            "[WistiaApi] Request failed (attempt %d): %s; retrying",
            retry_state.attempt_number,
            exc,
        )

    def _get_json(self, path: str, params: Optional[Mapping[str, Any]] = None) -> Any:
        """GET ``path`` and decode the JSON body, raising :class:`ApiError` on failure."""

        url = self._http.base_url.join(path)
        try:
            for attempt in self._retrying():
                with attempt:
                    res = self._http.get(path, params=dict(params or {}))
                    res.raise_for_status()
                    return res.json()
        except (httpx.HTTPError, ValueError) as e:
            raise ApiError(f"Could not access the remote file: {url}", ERROR_REMOTE_FILE) from e
        raise ApiError(f"Could not access the remote file: {url}", ERROR_REMOTE_FILE)

    def _get_paged(self, path: str, params: Mapping[str, Any]) -> List[Dict[str, Any]]:
        items: List[Dict[str, Any]] = []
        page = 1
        while True:
            batch = self._get_json(path, {**params, "page": page, "per_page": PAGE_SIZE})
            if not isinstance(batch, list):
                break
            items.extend(entry for entry in batch if isinstance(entry, dict))
            if len(batch) < PAGE_SIZE:
                break
            page += 1
        return items

    def get_projects(self) -> Dict[str, str]:
        """Return ``{project_id: name}`` sorted by name."""

        if self._projects is not None:
            return self._projects

        try:
            data = self._get_paged("projects.json", {"sort_by": "name"})
        except ApiError as e:
            raise ApiError(
                "Could not load project list. Is your API key correct?", ERROR_NO_PROJECTS
            ) from e

        projects: Dict[str, str] = {}
        for project in data:
            project_id = project.get("id")
            if project_id is None:
                continue
            projects[str(project_id)] = str(project.get("name") or "")
        self._projects = projects
        logger.debug("[WistiaApi] Loaded %d projects", len(projects))
        return projects

    @time_log(logger)
    def get_video(self, video_id: Any) -> VideoRecord:
        """Fetch a single media record."""

        video_key = str(video_id if video_id is not None else "").strip()
        if not video_key or video_key == "0":
            raise InvalidVideoIdError(
                f"Invalid video ID. Check channel entry setting: '{video_key}'",
                ERROR_INVALID_VIDEO_ID,
            )
        data = self._get_json(f"medias/{video_key}.json")
        return VideoRecord.from_api(data)

    def get_videos(
        self, project_ids: Sequence[Any], *, progress: bool = False
    ) -> Dict[str, Dict[str, Any]]:
        """Return videos grouped by project name, then by section when a video has one.

        ``{project: {video_id: name}}`` or ``{project: {section: {video_id: name}}}``.
        """

        project_names = self.get_projects()
        videos: Dict[str, Dict[str, Any]] = {}

        for project_id in tqdm(
            [str(p) for p in project_ids], desc="Projects", unit="project", disable=not progress
        ):
            try:
                data = self._get_paged(
                    "medias.json", {"sort_by": "name", "project_id": project_id}
                )
            except ApiError as e:
                raise ApiError(
                    f"Could not load video list. Did you select any projects? {project_id}",
                    ERROR_NO_VIDEO_LIST,
                ) from e

            project_name = project_names.get(project_id, project_id)
            bucket = videos.setdefault(project_name, {})
            for video in data:
                video_id = video.get("id")
                if video_id is None:
                    continue
                name = str(video.get("name") or "")
                section = video.get("section")
                if section:
                    bucket.setdefault(str(section), {})[str(video_id)] = name
                else:
                    bucket[str(video_id)] = name

        return dict(sorted(videos.items()))

    def video_choices(
        self, project_ids: Sequence[Any], *, progress: bool = False
    ) -> List[Tuple[str, str, str]]:
        """Flatten :meth:`get_videos` into ``(project, value, label)`` picker entries.

        Section headers use a ``section-`` value so they can be told apart on save.
        """

        if not project_ids:
            return []

        choices: List[Tuple[str, str, str]] = []
        for project_name, entries in self.get_videos(project_ids, progress=progress).items():
            for key, entry in entries.items():
                if isinstance(entry, dict):
                    choices.append((project_name, f"{SECTION_PREFIX}{key}", f"[{key}]"))
                    for video_id, name in entry.items():
                        choices.append((project_name, video_id, f"    {name}"))
                else:
                    choices.append((project_name, key, entry))
        return choices


__all__ = ["API_BASE_URL", "SECTION_PREFIX", "WistiaClient"]
