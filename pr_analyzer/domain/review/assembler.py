from collections.abc import Sequence

from pr_analyzer.core.logging import get_logger
from pr_analyzer.domain.review.prompts import (
    CONTENT_SECTION,
    DIFF_SECTION,
    FORMAT_DIRECTIVE,
    TRUNCATION_MARKER,
)
from pr_analyzer.domain.review.schemas import AssembledPrompt

logger = get_logger(__name__)


def truncate_prompt(prompt: str, max_length: int) -> str:
    """최대 길이를 넘으면 앞부분을 남기고 잘라낸 뒤 표시를 붙임

    잘린 결과의 길이는 정확히 max_length이며 TRUNCATION_MARKER로 끝남
    """
    if max_length < len(TRUNCATION_MARKER):
        raise ValueError(f"max_length는 {len(TRUNCATION_MARKER)} 이상이어야 합니다")

    if len(prompt) <= max_length:
        return prompt

    logger.warning("프롬프트 잘림 length=%d max_length=%d", len(prompt), max_length)
    return prompt[: max_length - len(TRUNCATION_MARKER)] + TRUNCATION_MARKER


def assemble_prompt(
    code_blocks: Sequence[str],
    diff_blocks: Sequence[str],
    instruction: str,
    max_length: int | None = None,
) -> AssembledPrompt:
    """전체 내용, diff, 지시문을 하나의 프롬프트로 조합

    Args:
        code_blocks: 새로 분석할 파일의 전체 내용 블록
        diff_blocks: 분석 대상 파일의 diff 블록
        instruction: 사용자 지시문
        max_length: 최대 길이, 없으면 자르지 않음

    Returns:
        프롬프트와 잘리지 않고 포함된 전체 내용 블록 수
    """
    sections = []
    block_ends = []
    if code_blocks:
        # 전체 내용 섹션이 맨 앞이므로 템플릿 기준 오프셋이 곧 프롬프트 오프셋
        offset = CONTENT_SECTION.index("{code_blocks}")
        for block in code_blocks:
            offset += len(block)
            block_ends.append(offset)
        sections.append(CONTENT_SECTION.format(code_blocks="".join(code_blocks)))
    sections.append(DIFF_SECTION.format(diff_blocks="".join(diff_blocks)))
    if instruction.strip():
        sections.append(f"{instruction.strip()}\n")
    sections.append(FORMAT_DIRECTIVE)

    prompt = "".join(sections)
    if max_length is None or len(prompt) <= max_length:
        return AssembledPrompt(text=prompt, code_blocks_included=len(code_blocks))

    text = truncate_prompt(prompt, max_length)
    kept = max_length - len(TRUNCATION_MARKER)
    included = sum(1 for end in block_ends if end <= kept)
    return AssembledPrompt(text=text, code_blocks_included=included)
