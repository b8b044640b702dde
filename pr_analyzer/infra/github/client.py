import asyncio
import base64
import json
import re
from pathlib import Path
from urllib.parse import quote

import httpx

from pr_analyzer.core.config import settings
from pr_analyzer.core.logging import get_logger

logger = get_logger(__name__)

REPOSITORY_PATTERN = re.compile(r"^([a-zA-Z0-9_.-]+)/([a-zA-Z0-9_.-]+)$")

PER_PAGE = 100
# GitHub은 PR 파일 목록을 최대 3000개까지만 반환
MAX_PAGES = 30

_client = httpx.AsyncClient(timeout=settings.github_timeout)
_request_semaphore = asyncio.Semaphore(settings.github_max_concurrent_requests)


def _get_headers(token: str | None = None) -> dict[str, str]:
    """GitHub API 요청 헤더 생성

    Args:
        token: GitHub 토큰

    Returns:
        HTTP 헤더 딕셔너리
    """
    headers = {
        "Accept": "application/vnd.github.v3+json",
        "X-GitHub-Api-Version": "2022-11-28",
    }
    if token:
        headers["Authorization"] = f"Bearer {token}"
    return headers


def _api_base() -> str:
    return settings.github_api_url.rstrip("/")


async def close_client():
    """httpx 클라이언트 종료"""
    await _client.aclose()


def parse_repository(repository: str) -> tuple[str, str]:
    """owner/repo 형식 문자열에서 owner와 repo 추출

    Args:
        repository: GITHUB_REPOSITORY 값

    Returns:
        owner, repo 튜플

    Raises:
        ValueError: 형식이 올바르지 않은 경우
    """
    match = REPOSITORY_PATTERN.match(repository.strip())
    if not match:
        raise ValueError(f"유효하지 않은 레포지토리: {repository!r}")
    return match.group(1), match.group(2)


def load_event(path: str) -> dict:
    """워크플로우 이벤트 페이로드 로드

    Args:
        path: GITHUB_EVENT_PATH

    Returns:
        이벤트 JSON 딕셔너리
    """
    with Path(path).open(encoding="utf-8") as f:
        return json.load(f)


async def _get_paginated(url: str, token: str | None) -> list[dict]:
    """페이지 단위 목록 API를 끝까지 조회"""
    items: list[dict] = []
    for page in range(1, MAX_PAGES + 1):
        params = {"per_page": PER_PAGE, "page": page}
        response = await _client.get(url, headers=_get_headers(token), params=params)
        response.raise_for_status()
        data = response.json()

        items.extend(data)
        if len(data) < PER_PAGE:
            break
    else:
        logger.warning("페이지 한도 도달 url=%s pages=%d", url, MAX_PAGES)

    return items


async def list_pull_files(
    repository: str,
    pull_number: int,
    token: str | None = None,
) -> list[dict]:
    """PR에서 변경된 파일 목록 조회

    Args:
        repository: owner/repo
        pull_number: PR 번호
        token: GitHub 토큰

    Returns:
        filename, status, patch 등을 포함한 파일 목록
    """
    owner, repo = parse_repository(repository)
    url = f"{_api_base()}/repos/{owner}/{repo}/pulls/{pull_number}/files"

    files = await _get_paginated(url, token)

    logger.info("PR 파일 조회 완료 repo=%s/%s pr=%d count=%d", owner, repo, pull_number, len(files))
    return files


async def list_issue_comments(
    repository: str,
    issue_number: int,
    token: str | None = None,
) -> list[dict]:
    """PR(이슈)에 달린 코멘트 목록 조회

    Args:
        repository: owner/repo
        issue_number: PR 번호
        token: GitHub 토큰

    Returns:
        코멘트 목록
    """
    owner, repo = parse_repository(repository)
    url = f"{_api_base()}/repos/{owner}/{repo}/issues/{issue_number}/comments"

    comments = await _get_paginated(url, token)

    logger.info(
        "코멘트 조회 완료 repo=%s/%s pr=%d count=%d", owner, repo, issue_number, len(comments)
    )
    return comments


async def get_file_content(
    repository: str,
    path: str,
    ref: str | None = None,
    token: str | None = None,
) -> str | None:
    """특정 파일 내용 조회

    Args:
        repository: owner/repo
        path: 파일 경로
        ref: 커밋 SHA 또는 브랜치, 없으면 기본 브랜치
        token: GitHub 토큰

    Returns:
        파일 내용 문자열, 없거나 디렉토리/바이너리면 None

    Raises:
        httpx.HTTPStatusError: 404 이외의 GitHub API 오류
    """
    owner, repo = parse_repository(repository)
    url = f"{_api_base()}/repos/{owner}/{repo}/contents/{quote(path)}"
    params = {"ref": ref} if ref else None

    async with _request_semaphore:
        response = await _client.get(url, headers=_get_headers(token), params=params)

    if response.status_code == 404:
        logger.info("파일 없음 repo=%s/%s path=%s", owner, repo, path)
        return None
    response.raise_for_status()
    data = response.json()

    if not isinstance(data, dict) or data.get("type") != "file":
        logger.info("파일이 아님 repo=%s/%s path=%s", owner, repo, path)
        return None

    if data.get("encoding") != "base64":
        return None

    try:
        content = base64.b64decode(data["content"]).decode("utf-8")
    except UnicodeDecodeError:
        logger.info("바이너리 파일 스킵 repo=%s/%s path=%s", owner, repo, path)
        return None

    logger.info("파일 조회 완료 repo=%s/%s path=%s", owner, repo, path)
    return content


async def create_issue_comment(
    repository: str,
    issue_number: int,
    body: str,
    token: str | None = None,
) -> dict:
    """PR에 코멘트 작성

    Args:
        repository: owner/repo
        issue_number: PR 번호
        body: 코멘트 본문 (Markdown)
        token: GitHub 토큰

    Returns:
        생성된 코멘트
    """
    owner, repo = parse_repository(repository)
    url = f"{_api_base()}/repos/{owner}/{repo}/issues/{issue_number}/comments"

    response = await _client.post(url, headers=_get_headers(token), json={"body": body})
    response.raise_for_status()

    logger.info("코멘트 작성 완료 repo=%s/%s pr=%d", owner, repo, issue_number)
    return response.json()
