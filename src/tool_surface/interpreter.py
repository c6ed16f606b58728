"""Natural-language instruction interpreters.

An interpreter is any callable ``(instruction, flat_content) -> proposals``
where each proposal names a path, the value the interpreter believes is
there, and the replacement. The tool surface applies proposals with
compare-and-set, so interpreters never need to be trusted with writes.

AnthropicInterpreter calls the Anthropic Messages API over HTTP. It loads
its API key from the environment (``.env`` files are honoured through
python-dotenv):

    ANTHROPIC_API_KEY   API key (required)
    MICROTEXT_MODEL     Model name (optional)
"""

import json
import logging
import os
import re
from typing import Callable, Dict, List, Optional

import requests
from dotenv import load_dotenv

from .errors import InterpreterError
from .models import ProposedChange
from .retry_logic import retry_on_rate_limit

logger = logging.getLogger(__name__)

Interpreter = Callable[[str, Dict[str, str]], List[ProposedChange]]

API_URL = "https://api.anthropic.com/v1/messages"
API_VERSION = "2023-06-01"
DEFAULT_MODEL = "claude-sonnet-4-20250514"
DEFAULT_MAX_TOKENS = 1024
DEFAULT_TIMEOUT = 60

_JSON_ARRAY_RE = re.compile(r"\[[\s\S]*\]")

PROMPT_TEMPLATE = """You are a content editor. Given the current microtext values and an instruction, determine what changes to make.

Current microtext:
{microtext}

Instruction: "{instruction}"

Respond with a JSON array of changes. Each change should have:
- path: the microtext key to change
- expectedOldValue: current value (must match exactly)
- newValue: the new value
- rationale: brief explanation

Only include changes that are needed. If the instruction is unclear or no changes are needed, return an empty array.

Respond ONLY with a valid JSON array, no other text. Example:
[{{"path": "hero.headline", "expectedOldValue": "Old text", "newValue": "New text", "rationale": "Made it shorter"}}]"""


def build_prompt(instruction: str, flat_content: Dict[str, str]) -> str:
    microtext = "\n".join(f'- {path}: "{value}"' for path, value in flat_content.items())
    return PROMPT_TEMPLATE.format(microtext=microtext or "(none)", instruction=instruction)


def parse_proposals(text: str) -> List[ProposedChange]:
    """Extract proposals from a model reply, tolerating surrounding prose or code fences.

    Raises:
        InterpreterError: If the reply holds no parseable JSON array
    """
    match = _JSON_ARRAY_RE.search(text)
    if not match:
        raise InterpreterError("response did not contain a JSON array")

    try:
        raw = json.loads(match.group(0))
    except json.JSONDecodeError as e:
        raise InterpreterError(f"response was not valid JSON: {e}")

    if not isinstance(raw, list):
        raise InterpreterError("response JSON was not an array")
    return [ProposedChange.from_dict(item) for item in raw]


class AnthropicInterpreter:
    """Interprets instructions with the Anthropic Messages API.

    Example:
        >>> interpreter = AnthropicInterpreter.from_env()
        >>> interpreter("Make the headline more urgent", {"hero.headline": "Hello"})
        [ProposedChange(path='hero.headline', ...)]
    """

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_MODEL,
        timeout: int = DEFAULT_TIMEOUT,
        max_tokens: int = DEFAULT_MAX_TOKENS,
        session: Optional[requests.Session] = None,
    ):
        self.api_key = api_key
        self.model = model
        self.timeout = timeout
        self.max_tokens = max_tokens
        self.session = session or requests.Session()

    @classmethod
    def from_env(cls, model: Optional[str] = None, timeout: int = DEFAULT_TIMEOUT) -> "AnthropicInterpreter":
        """Create an interpreter from environment variables.

        Raises:
            InterpreterError: If ANTHROPIC_API_KEY is not set
        """
        load_dotenv()
        api_key = os.getenv("ANTHROPIC_API_KEY")
        if not api_key:
            raise InterpreterError("ANTHROPIC_API_KEY not configured")
        return cls(
            api_key=api_key,
            model=model or os.getenv("MICROTEXT_MODEL") or DEFAULT_MODEL,
            timeout=timeout,
        )

    def __call__(self, instruction: str, flat_content: Dict[str, str]) -> List[ProposedChange]:
        prompt = build_prompt(instruction, flat_content)
        logger.debug(f"Interpreting instruction over {len(flat_content)} field(s)")
        text = retry_on_rate_limit(self._complete, prompt)
        proposals = parse_proposals(text)
        logger.info(f"Interpreter proposed {len(proposals)} change(s)")
        return proposals

    def _complete(self, prompt: str) -> str:
        try:
            response = self.session.post(
                API_URL,
                headers={
                    "Content-Type": "application/json",
                    "x-api-key": self.api_key,
                    "anthropic-version": API_VERSION,
                },
                json={
                    "model": self.model,
                    "max_tokens": self.max_tokens,
                    "messages": [{"role": "user", "content": prompt}],
                },
                timeout=self.timeout,
            )
        except requests.Timeout:
            raise InterpreterError(f"request timed out after {self.timeout}s")
        except requests.RequestException as e:
            raise InterpreterError(f"request failed: {e}")

        if response.status_code != 200:
            raise InterpreterError(
                f"API returned {response.status_code}: {response.text[:500]}",
                status_code=response.status_code,
            )

        try:
            data = response.json()
            return data["content"][0]["text"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise InterpreterError(f"unexpected API response shape: {e}")
