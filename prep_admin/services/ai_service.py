"""Suggestion client for skill tags, titles, difficulty and LaTeX cleanup.

Every call degrades to a neutral default (no tags, "Untitled Question",
difficulty 5, content unchanged) when no API key is configured or the
endpoint fails, so callers never see an exception from here.
"""
import json
import logging
import re

import requests

from prep_admin.config import (
    AI_MAX_SUGGESTED_TAGS,
    AI_REQUEST_TIMEOUT_SECONDS,
    AI_TAG_CANDIDATE_LIMIT,
    OPENAI_API_KEY,
    OPENAI_ENDPOINT,
    OPENAI_MODEL,
    OPENAI_TEMPERATURE,
)

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "Untitled Question"
DEFAULT_DIFFICULTY = 5

_WORD_RE = re.compile(r"[a-z0-9]+")
_FENCE_RE = re.compile(r"```(?:json)?\s*(.*?)```", re.S | re.I)


def _words(text: str) -> set[str]:
    return set(_WORD_RE.findall((text or "").lower()))


def prefilter_tags(
    text: str, vocabulary: list[str], limit: int = AI_TAG_CANDIDATE_LIMIT
) -> list[str]:
    """Keep the `limit` tags sharing the most words with `text`; ties keep vocabulary order."""
    text_words = _words(text)
    scored = [
        (len(_words(tag.replace("-", " ")) & text_words), index, tag)
        for index, tag in enumerate(vocabulary)
    ]
    scored.sort(key=lambda entry: (-entry[0], entry[1]))
    return [tag for _, _, tag in scored[:limit]]


def extract_json(raw: str) -> object | None:
    """Parse model output as JSON, then a fenced block, then the first object or array."""
    if not raw:
        return None
    candidates = [raw.strip()]
    candidates.extend(match.strip() for match in _FENCE_RE.findall(raw))
    for pattern in (r"\{.*\}", r"\[.*\]"):
        match = re.search(pattern, raw, re.S)
        if match:
            candidates.append(match.group(0))
    for candidate in candidates:
        try:
            return json.loads(candidate)
        except ValueError:
            continue
    return None


class SuggestionClient:
    """Chat-completions client over a `requests.Session`."""

    def __init__(
        self,
        api_key: str = OPENAI_API_KEY,
        model: str = OPENAI_MODEL,
        endpoint: str = OPENAI_ENDPOINT,
        temperature: float = OPENAI_TEMPERATURE,
        timeout: float = AI_REQUEST_TIMEOUT_SECONDS,
        session: requests.Session | None = None,
    ) -> None:
        self.api_key = api_key
        self.model = model
        self.endpoint = endpoint
        self.temperature = temperature
        self.timeout = timeout
        self.session = session or requests.Session()
        if api_key:
            self.session.headers.update({"Authorization": f"Bearer {api_key}"})

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)

    def _complete(self, system: str, user: str) -> str:
        if not self.enabled:
            return ""
        try:
            response = self.session.post(
                self.endpoint,
                json={
                    "model": self.model,
                    "messages": [
                        {"role": "system", "content": system},
                        {"role": "user", "content": user},
                    ],
                    "temperature": self.temperature,
                },
                timeout=self.timeout,
            )
            response.raise_for_status()
            data = response.json()
            content = data["choices"][0]["message"]["content"]
        except (requests.RequestException, ValueError, KeyError, IndexError, TypeError) as exc:
            logger.warning(f"Language model request failed: {exc}")
            return ""
        return content.strip() if isinstance(content, str) else ""

    def generate_skill_tags(
        self, text: str, vocabulary: list[str], limit: int = AI_MAX_SUGGESTED_TAGS
    ) -> list[str]:
        """Up to `limit` tags, chosen only from `vocabulary`."""
        if not self.enabled or not vocabulary or not (text or "").strip():
            return []
        candidates = prefilter_tags(text, vocabulary)
        system = (
            "You classify exam questions. Choose the skill tags that best match the "
            f"question, at most {limit}, only from the provided list. "
            'Respond with JSON: {"tags": ["tag", ...]}.'
        )
        user = f"Question: {text}\nAvailable tags: {json.dumps(candidates)}"
        parsed = extract_json(self._complete(system, user))
        if isinstance(parsed, dict):
            parsed = parsed.get("tags")
        if not isinstance(parsed, list):
            if parsed is not None:
                logger.warning("Unexpected skill tag response shape")
            return []

        allowed = set(vocabulary)
        tags: list[str] = []
        for tag in parsed:
            if isinstance(tag, str) and tag in allowed and tag not in tags:
                tags.append(tag)
        dropped = [t for t in parsed if not isinstance(t, str) or t not in allowed]
        if dropped:
            logger.info(f"Discarded {len(dropped)} suggested tags outside the vocabulary")
        return tags[:limit]

    def generate_title(self, text: str) -> str:
        system = "Generate a concise, descriptive title (max 8 words). Return just the title."
        result = self._complete(system, f"Question: {text}")
        title = result.strip().strip('"').strip()
        return title or DEFAULT_TITLE

    def generate_difficulty(self, text: str) -> int:
        system = (
            "Estimate difficulty on a scale of 1-10 based on question complexity. "
            "Return just a number."
        )
        result = self._complete(system, f"Question: {text}")
        match = re.search(r"-?\d+", result)
        if not match:
            return DEFAULT_DIFFICULTY
        return min(10, max(1, int(match.group(0))))

    def refine_latex(self, content: str, content_type: str = "question") -> str:
        system = (
            "You are a helpful assistant that formats and slightly improves LaTeX math "
            "content without changing the meaning. Return only the refined content."
        )
        user = f"Content type: {content_type}. Refine the LaTeX and clean formatting.\n\n{content}"
        return self._complete(system, user) or content

    def generate_all(self, text: str, vocabulary: list[str]) -> dict[str, object]:
        return {
            "skillTags": self.generate_skill_tags(text, vocabulary),
            "title": self.generate_title(text),
            "difficulty": self.generate_difficulty(text),
        }
