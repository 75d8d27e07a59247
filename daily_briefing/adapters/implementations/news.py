import json
from typing import Any, Callable, List, Optional

import anthropic
from pydantic import ValidationError

from daily_briefing.adapters.interfaces import ExternalAPIAdaptorInterface
from daily_briefing.core.exceptions import ResponseParseError, UpstreamError
from daily_briefing.core.logging import get_logger
from daily_briefing.domain.models import NewsCategory, NewsSearchResult, NewsStory
from daily_briefing.utils import JSONArrayNotFoundError, parse_json_array

logger = get_logger(__name__)

FALLBACK_PLACEHOLDER = "placeholder"
FALLBACK_ERROR = "error"

STORY_COUNT = 5

WEB_SEARCH_TOOL = {"type": "web_search_20250305", "name": "web_search"}

GLOBAL_NEWS_PROMPT = (
    "Find 5 top global news stories from TODAY. Return ONLY valid JSON with "
    "title, summary, url, source, imageUrl for each."
)

LEGAL_NEWS_PROMPT = """Find 5 recent interesting news stories. Follow this priority order:

PRIORITY 1 (Preferred): Legal Technology & AI in Legal
- Legal tech companies and startups (Clio, LexisNexis, Westlaw, etc.)
- AI tools specifically for lawyers and law firms
- Court reporting and deposition technology (like Steno, Veritext)
- E-discovery and document review AI
- Practice management and case management software
- Legal research AI tools
- Contract analysis and review technology

PRIORITY 2 (If not enough Priority 1): Broader Legal Industry
- Law firm news and mergers
- Major legal cases and verdicts
- Changes in legal regulations
- Legal industry trends
- Attorney and law firm technology adoption

PRIORITY 3 (If still not enough): General AI & Technology
- AI developments and breakthroughs
- Enterprise AI adoption
- Tech company news
- Software and SaaS developments

Search broadly and return the 5 most relevant and recent stories you can find from the past week. Prioritize Priority 1, but include Priority 2 and 3 if needed to get 5 good stories.

Return ONLY valid JSON with title, summary, url, source, imageUrl for each story."""

OUTPUT_INSTRUCTIONS = """CRITICAL: Return ONLY valid JSON, no preamble or explanation. Format:
[
  {
    "title": "Headline here",
    "summary": "1-2 sentence summary",
    "url": "https://source.com/article",
    "source": "Source Name",
    "imageUrl": "https://image-url.com/image.jpg or null"
  }
]

Requirements:
- Use only FREE news sources (TechCrunch, The Verge, Reuters, Legal Dive, ABA Journal, etc.)
- Each story must have a working URL
- Summaries should be 1-2 sentences max
- Use null for imageUrl if no real image available
- Return exactly 5 stories

Return ONLY the JSON array, nothing else."""


def build_prompt(category: NewsCategory) -> str:
    search_prompt = GLOBAL_NEWS_PROMPT if category is NewsCategory.GLOBAL else LEGAL_NEWS_PROMPT
    return f"{search_prompt}\n\n{OUTPUT_INSTRUCTIONS}"


def placeholder_stories() -> List[NewsStory]:
    """The fixed stories returned when the model produced no JSON array."""
    return [
        NewsStory(
            title="News Unavailable",
            summary="Unable to fetch news at this time. Please try refreshing in a few moments.",
            url="#",
            source="System",
            imageUrl=None,
        )
        for _ in range(STORY_COUNT)
    ]


def _default_client_factory(timeout: float) -> Callable[[str], Any]:
    def factory(api_key: str) -> anthropic.AsyncAnthropic:
        return anthropic.AsyncAnthropic(api_key=api_key, timeout=timeout, max_retries=0)
    return factory


def _provider_error_message(exc: anthropic.APIStatusError) -> str:
    body = exc.body
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict) and error.get("message"):
            return error["message"]
    return "News API failed"


class NewsSearchAdaptor(ExternalAPIAdaptorInterface[str, NewsSearchResult]):
    """
    Five curated news stories found by a web-search-enabled Claude model.

    The model is asked for a bare JSON array; the adaptor recovers the array
    from whatever text comes back. When no array is present the outcome
    depends on ``fallback_policy``: ``placeholder`` returns the fixed
    "News Unavailable" stories, ``error`` raises ``ResponseParseError``.
    """

    provider_name = "anthropic"

    def __init__(
        self,
        model: str = "claude-sonnet-4-20250514",
        max_tokens: int = 4000,
        timeout: float = 120.0,
        fallback_policy: str = FALLBACK_PLACEHOLDER,
        client_factory: Optional[Callable[[str], Any]] = None
    ):
        if fallback_policy not in (FALLBACK_PLACEHOLDER, FALLBACK_ERROR):
            raise ValueError(f"Unsupported fallback policy: {fallback_policy}")

        self.model = model
        self.max_tokens = max_tokens
        self.fallback_policy = fallback_policy
        self.client_factory = client_factory or _default_client_factory(timeout)

    async def fetch(self, api_key: Optional[str] = None, category: NewsCategory = NewsCategory.GLOBAL, **kwargs) -> str:
        """
        Ask the model for stories and return its concatenated text output.

        Raises:
            UpstreamError: If the Messages API call fails.
        """
        client = self.client_factory(api_key)
        logger.debug(f"Requesting {category.value} news from {self.model}")

        try:
            async with client:
                response = await client.messages.create(
                    model=self.model,
                    max_tokens=self.max_tokens,
                    messages=[{"role": "user", "content": build_prompt(category)}],
                    tools=[WEB_SEARCH_TOOL],
                )
        except anthropic.APIStatusError as e:
            message = _provider_error_message(e)
            logger.error(
                f"News search failed: {message}",
                extra={"provider": self.provider_name, "status_code": e.status_code}
            )
            raise UpstreamError(
                message,
                provider=self.provider_name,
                status_code=e.status_code,
                original_exception=e
            ) from e
        except anthropic.APIConnectionError as e:
            logger.error(f"News search connection error: {str(e)}")
            raise UpstreamError(
                "News API failed",
                provider=self.provider_name,
                original_exception=e
            ) from e

        blocks = getattr(response, "content", None) or []
        return "\n".join(
            block.text for block in blocks if getattr(block, "type", None) == "text"
        )

    def normalize(self, data: str) -> NewsSearchResult:
        """
        Turn the model's text into stories.

        Extra stories beyond five are dropped.

        Raises:
            ResponseParseError: If the recovered array is not valid JSON, is
                not a list of stories, holds fewer than five, or if no array
                is present under the ``error`` policy.
        """
        try:
            raw_stories = parse_json_array(data)
        except JSONArrayNotFoundError as e:
            if self.fallback_policy == FALLBACK_PLACEHOLDER:
                logger.warning("No JSON array in news search output, returning placeholder stories")
                return NewsSearchResult(stories=placeholder_stories(), placeholder=True)
            logger.error("No JSON array in news search output")
            raise ResponseParseError(
                "News search returned no JSON array",
                provider=self.provider_name,
                original_exception=e
            ) from e
        except json.JSONDecodeError as e:
            logger.error(f"Invalid JSON in news search output: {str(e)}")
            raise ResponseParseError(
                f"News search returned invalid JSON: {e.msg}",
                provider=self.provider_name,
                original_exception=e
            ) from e

        try:
            stories = [NewsStory.model_validate(item) for item in raw_stories]
        except ValidationError as e:
            logger.error(f"Malformed stories in news search output: {str(e)}")
            raise ResponseParseError(
                "News search returned malformed stories",
                provider=self.provider_name,
                original_exception=e
            ) from e

        if len(stories) < STORY_COUNT:
            logger.error(f"News search returned {len(stories)} stories, expected {STORY_COUNT}")
            raise ResponseParseError(
                f"News search returned {len(stories)} of {STORY_COUNT} stories",
                provider=self.provider_name
            )

        return NewsSearchResult(stories=stories[:STORY_COUNT])
