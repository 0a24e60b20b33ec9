"""Loading and formatting of the YAML prompt files shipped with the package."""

import re
from functools import lru_cache
from pathlib import Path

import yaml
from pydantic import BaseModel

PROMPTS_DIR = Path(__file__).resolve().parent.parent / "prompts"


class PromptData(BaseModel):
    """Validated prompt template loaded from YAML.

    Fields:
        version: Prompt version, logged with every call.
        system_prompt: Passed to the model as the system instruction.
        user_prompt_template: User prompt with a ``{context}`` placeholder
            and optional named extras.
    """

    version: str = "unknown"
    system_prompt: str
    user_prompt_template: str


def load_prompt(path: str | Path) -> PromptData:
    """Load a prompt template from a YAML file.

    Raises:
        FileNotFoundError: If the prompt file does not exist.
        ValidationError: If required keys are missing or invalid.
    """
    prompt_path = Path(path)
    if not prompt_path.exists():
        raise FileNotFoundError(f"Prompt file not found: {prompt_path}")

    with prompt_path.open(encoding="utf-8") as f:
        data = yaml.safe_load(f)

    return PromptData.model_validate(data)


@lru_cache
def load_packaged_prompt(group: str, name: str) -> PromptData:
    """Load ``prompts/<group>/<name>.yaml`` from the installed package."""
    return load_prompt(PROMPTS_DIR / group / f"{name}.yaml")


_PLACEHOLDER_RE = re.compile(r"\{(\w+)\}")


def format_user_prompt(template: str, context: str, **kwargs: str) -> str:
    """Substitute ``{context}`` and named extras in a single pass.

    Substituted values are never re-scanned, so user text containing
    braces (code snippets, JSON) is inserted verbatim. Unknown
    placeholders are left as they are.
    """
    replacements: dict[str, str] = {"context": context, **kwargs}

    def _replace(match: re.Match[str]) -> str:
        key = match.group(1)
        return replacements.get(key, match.group(0))

    return _PLACEHOLDER_RE.sub(_replace, template)
