from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class AgentId(str, Enum):
    CURSOR = "cursor"
    CLAUDE = "claude"
    COPILOT = "copilot"
    ANTIGRAVITY = "antigravity"
    OPENCODE = "opencode"
    GEMINI = "gemini"


@dataclass(frozen=True)
class AgentMetadata:
    agent_id: AgentId
    label: str
    rules_path: str
    detection_files: tuple[str, ...]

    def rules_dir(self, project_root: Path) -> Path:
        return project_root / self.rules_path


AGENT_CATALOG: dict[AgentId, AgentMetadata] = {
    AgentId.CURSOR: AgentMetadata(
        agent_id=AgentId.CURSOR,
        label="Cursor",
        rules_path=".cursor/rules",
        detection_files=(".cursor", ".cursorrules"),
    ),
    AgentId.CLAUDE: AgentMetadata(
        agent_id=AgentId.CLAUDE,
        label="Claude Code",
        rules_path=".claude/rules",
        detection_files=(".claude", "CLAUDE.md"),
    ),
    AgentId.COPILOT: AgentMetadata(
        agent_id=AgentId.COPILOT,
        label="GitHub Copilot",
        rules_path=".github/rules",
        detection_files=(".github",),
    ),
    AgentId.ANTIGRAVITY: AgentMetadata(
        agent_id=AgentId.ANTIGRAVITY,
        label="Antigravity",
        rules_path=".agent/rules",
        detection_files=(".agent",),
    ),
    AgentId.OPENCODE: AgentMetadata(
        agent_id=AgentId.OPENCODE,
        label="OpenCode",
        rules_path=".opencode/rules",
        detection_files=(".opencode",),
    ),
    AgentId.GEMINI: AgentMetadata(
        agent_id=AgentId.GEMINI,
        label="Gemini",
        rules_path=".gemini/rules",
        detection_files=(".gemini",),
    ),
}

DEFAULT_INIT_AGENTS: tuple[AgentId, ...] = (AgentId.CURSOR, AgentId.CLAUDE)


def agent_metadata(agent: AgentId | str) -> AgentMetadata:
    agent_id = agent if isinstance(agent, AgentId) else AgentId(agent)
    return AGENT_CATALOG[agent_id]


def all_agents() -> list[AgentMetadata]:
    return list(AGENT_CATALOG.values())


def is_valid_agent(value: str) -> bool:
    return value in {agent.value for agent in AgentId}


def detect_agents(project_root: Path) -> list[AgentId]:
    """Agents whose marker files or directories exist in ``project_root``."""
    detected: list[AgentId] = []
    for agent_id, metadata in AGENT_CATALOG.items():
        if any((project_root / name).exists() for name in metadata.detection_files):
            detected.append(agent_id)
    return detected
