"""
Score Submission
=================
Client for the score service and a background submitter, so the game
loop never waits on the network.

The submitter returns a Future; the run controller polls it between
ticks and applies the result on the game thread.
"""

import logging
import os
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

import requests

from .errors import SubmissionFailed

logger = logging.getLogger(__name__)


@dataclass
class RunSummary:
    """What a finished run reports to the score service."""
    score: int
    difficulty: str
    words_typed: List[str] = field(default_factory=list)

    def to_payload(self) -> dict:
        return {
            'score': self.score,
            'difficulty': self.difficulty,
            'wordsTyped': list(self.words_typed),
        }


# =============================================================================
# HTTP CLIENT
# =============================================================================

class ScoreClient:
    """Talks JSON to the score service with a bearer token."""

    def __init__(self, base_url: str, token: Optional[str] = None,
                 timeout: float = 5.0,
                 session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip('/')
        self.token = token
        self.timeout = timeout
        self.http = session or requests.Session()

    @property
    def authenticated(self) -> bool:
        return bool(self.token)

    def _headers(self) -> dict:
        headers = {'Content-Type': 'application/json'}
        if self.token:
            headers['Authorization'] = f'Bearer {self.token}'
        return headers

    def submit_score(self, summary: RunSummary) -> int:
        """POST a finished run. Returns the points the server awarded."""
        url = f'{self.base_url}/scores'
        try:
            response = self.http.post(url, json=summary.to_payload(),
                                      headers=self._headers(),
                                      timeout=self.timeout)
        except requests.RequestException as exc:
            raise SubmissionFailed(f'API_CALL_FAILED: {exc}') from exc

        data = self._decode(response)
        try:
            return int(data.get('pointsAwarded') or 0)
        except (TypeError, ValueError) as exc:
            raise SubmissionFailed(
                f'UNEXPECTED_PAYLOAD: pointsAwarded={data.get("pointsAwarded")!r}',
                response.status_code,
            ) from exc

    @staticmethod
    def _decode(response: requests.Response) -> dict:
        status = response.status_code
        content_type = response.headers.get('content-type', '')
        if 'application/json' not in content_type:
            raise SubmissionFailed(
                f'NON_JSON_RESPONSE: {status} - {response.text[:50]}', status
            )
        try:
            data = response.json()
        except ValueError as exc:
            raise SubmissionFailed(f'MALFORMED_JSON: {status}', status) from exc

        if not response.ok:
            error = data.get('error') if isinstance(data, dict) else None
            raise SubmissionFailed(error or f'HTTP_ERROR: {status}', status)
        if not isinstance(data, dict):
            raise SubmissionFailed(f'UNEXPECTED_PAYLOAD: {status}', status)
        return data


# =============================================================================
# BACKGROUND SUBMITTER
# =============================================================================

class ScoreSubmitter:
    """Runs submissions on one worker thread."""

    def __init__(self, client: ScoreClient,
                 executor: Optional[ThreadPoolExecutor] = None):
        self.client = client
        self.executor = executor or ThreadPoolExecutor(
            max_workers=1, thread_name_prefix='score-submit'
        )

    @property
    def authenticated(self) -> bool:
        return self.client.authenticated

    def submit(self, summary: RunSummary) -> Future:
        return self.executor.submit(self._submit, summary)

    def _submit(self, summary: RunSummary) -> int:
        points = self.client.submit_score(summary)
        logger.info("Run saved: score=%d difficulty=%s points=+%d",
                    summary.score, summary.difficulty, points)
        return points

    def shutdown(self) -> None:
        self.executor.shutdown(wait=False, cancel_futures=True)


def load_session_token(token_file: Optional[str] = None) -> Optional[str]:
    """Persisted session token: ``WORD_RUNNER_TOKEN``, else the token file."""
    token = os.getenv('WORD_RUNNER_TOKEN')
    if token:
        return token.strip()
    if not token_file:
        return None

    path = Path(token_file).expanduser()
    try:
        token = path.read_text(encoding='utf-8').strip()
    except OSError:
        logger.debug("No session token at %s, playing as guest", path)
        return None
    return token or None
