"""Prompt construction for the rubric validator model.

The system prompt carries the fixed rubric-validation rules and the JSON
output contract. The user prompt embeds the original prompt and the
criterion verbatim; neither is escaped or rewritten.
"""

from ..config import prompts_config


def get_system_prompt() -> str:
    return prompts_config.system_prompt


def build_user_prompt(prompt: str, criterion: str) -> str:
    # str.replace rather than str.format: the criterion may contain braces.
    return prompts_config.user_prompt_template.replace("{prompt}", prompt).replace(
        "{criterion}", criterion
    )
