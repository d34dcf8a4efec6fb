from typing import Final


CONFIG_FILENAME: Final[str] = ".rules.json"

RULES_DIRNAME: Final[str] = "rules"
RULE_SUFFIX: Final[str] = ".rule.md"
SKILL_FILENAME: Final[str] = "SKILL.md"

DEFAULT_REGISTRY_URL: Final[str] = "https://github.com/ngxtm/skill-rule"
DEFAULT_BRANCH: Final[str] = "main"
DEFAULT_RULE_VERSION: Final[str] = "1.0.0"
UNKNOWN_CATEGORY: Final[str] = "unknown"

HTTP_INDEX_FILENAME: Final[str] = "index.json"
HTTP_TIMEOUT_SECONDS: Final[int] = 20
USER_AGENT: Final[str] = "skill-rule"

GITHUB_TOKEN_ENV: Final[str] = "GITHUB_TOKEN"

REFERENCE_SUFFIXES: Final[tuple[str, ...]] = (".md", ".dart", ".ts")
