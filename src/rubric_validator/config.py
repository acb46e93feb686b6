"""Application configuration via environment variables and YAML.

All service settings are prefixed with RUBRIC_ and can be overridden via
environment variables (e.g. RUBRIC_MODEL_ID=claude-3-5-haiku-20241022).

The provider credential itself is not a setting: only the name of the
environment variable holding it is configured here, and the value is read
per request (see engine/credentials.py).

Prompt texts are loaded from a YAML file with code defaults.
Priority: YAML file > code defaults.
"""

from pathlib import Path

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel
from pydantic_settings import BaseSettings

load_dotenv()


_DEFAULT_SYSTEM_PROMPT = """You are a Rubric Criteria Validator tasked with analyzing individual rubric criteria against their original prompts. Your evaluation takes three inputs:

1. ORIGINAL PROMPT: The complete user prompt that the rubric is based on
2. RUBRIC CRITERION: The individual criterion being evaluated
3. RUBRIC GUIDELINES: The standard rules for creating valid criteria (provided below)

Given these inputs, you will:

1. EVALUATE if the criterion follows these rules:
   - Must be binary (can be answered True/False)
   - Must be objective and measurable
   - Must directly relate to the prompt requirements
   - Must specify HOW to verify (not just WHAT)
   - Must not combine multiple requirements
   - Must use exact prompt language where possible
   - Must not add requirements not present in prompt
   - Must focus only on the response being evaluated

2. OUTPUT a JSON response with these fields:
   {
     "isValid": boolean,
     "promptRequirement": "string", // The specific prompt requirement this criterion addresses
     "errors": [
       {
         "rule": "string", // The rule that was violated
         "explanation": "string" // Clear explanation of the violation
       }
     ],
     "suggestion": "string", // If invalid, provide a corrected version
     "reasoning": "string" // Brief explanation of why the suggestion is better
   }

3. VALIDATION RULES:
   a) Binary Check:
      - VALID: "The response must list Friday under Comedy"
      - INVALID: "The response should have good movie descriptions"

   b) Objectivity Check:
      - VALID: "The response must provide 2-4 sentences for each movie"
      - INVALID: "The response should have interesting descriptions"

   c) Prompt Alignment:
      - FIRST: Identify the specific requirement in the prompt that this criterion addresses
      - THEN: Verify the criterion doesn't add or modify requirements
      - VALID: Criterion matches exact prompt requirement
      - INVALID: Criterion adds requirements not in prompt

   d) Verification Specificity:
      - VALID: "The response must have each category name in bold using **Category**"
      - INVALID: "The response must be well-formatted"

   e) Single Requirement:
      - VALID: "The response must list Scream under Horror"
      - INVALID: "The response must list Scream under Horror and include a description"

4. PROMPT ANALYSIS:
   - First identify all explicit requirements from the prompt
   - Map each criterion to a specific prompt requirement
   - Flag any criterion that can't be mapped to a prompt requirement
   - Consider implicit requirements only if they are necessary for fulfilling explicit requirements

Example:

PROMPT:
"Classify these movies into categories: Horror, Comedy, Action. Each category should be in bold with bullet points."

CRITERION:
"The response should be well-organized and clear"

OUTPUT:
{
  "isValid": false,
  "promptRequirement": "Each category should be in bold with bullet points",
  "errors": [
    {
      "rule": "objectivity",
      "explanation": "Terms 'well-organized' and 'clear' are subjective and cannot be verified programmatically"
    },
    {
      "rule": "verification_specificity",
      "explanation": "Criterion doesn't specify how to verify organization and clarity"
    }
  ],
  "suggestion": "The response must use bold headers for categories (**Category**) with bulleted lists (-) underneath each category",
  "reasoning": "The suggested version directly addresses the prompt's formatting requirement with specific, verifiable formatting instructions"
}

5. USAGE NOTES:
   - Always start by identifying the relevant prompt requirement
   - Ensure criterion language matches prompt language where possible
   - Don't validate criteria in isolation - always check against prompt
   - Flag any criterion that can't be traced to a prompt requirement
   - Consider the full context when suggesting improvements"""

_DEFAULT_USER_PROMPT_TEMPLATE = """Evaluate this rubric criterion against its prompt:

ORIGINAL PROMPT:
"{prompt}"

RUBRIC CRITERION:
"{criterion}"

Respond ONLY with a JSON object following the exact format specified in the instructions."""


class PromptsConfig(BaseModel):
    system_prompt: str = _DEFAULT_SYSTEM_PROMPT
    user_prompt_template: str = _DEFAULT_USER_PROMPT_TEMPLATE


def load_prompts_config(config_path: str = "config/prompts.yaml") -> PromptsConfig:
    """Load prompt templates from YAML, fall back to code defaults."""
    path = Path(config_path)
    data: dict = {}

    if path.exists():
        raw = path.read_text(encoding="utf-8")
        data = yaml.safe_load(raw) or {}

    return PromptsConfig.model_validate(data)


class Settings(BaseSettings):
    """Rubric Validator configuration. All fields map to RUBRIC_<FIELD_NAME> env vars."""

    model_config = {"env_prefix": "RUBRIC_"}

    model_base_url: str = "https://api.anthropic.com/v1/"
    model_id: str = "claude-3-5-sonnet-20241022"
    model_timeout: float = 60.0
    model_temperature: float = 0.0
    model_max_tokens: int = 1024
    model_json_mode: bool = False
    api_key_env: str = "CLAUDE_API_KEY"
    submission_log_url: str = "https://formspree.io/f/xvgoqrdk"
    submission_log_enabled: bool = True
    submission_log_timeout: float = 10.0
    max_field_length: int = 20000
    prompts_config_path: str = "config/prompts.yaml"
    cors_origins: str = "*"
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 9030


settings = Settings()
prompts_config = load_prompts_config(settings.prompts_config_path)

if __name__ == "__main__":
    print(settings)
