"""Agent persona registry.

Exporters resolve agent ids to display names through a ``PersonaRegistry``.
The registry is read-only from the export pipeline's point of view; it is
seeded with the built-in debate personas. Researcher agents are not
personas; their ids render as-is.
"""

from __future__ import annotations

from pydantic import BaseModel


class AgentPersona(BaseModel):
    """A debate participant."""

    id: str
    name: str
    name_he: str
    role: str = ""
    color: str = ""


class PersonaRegistry:
    """Lookup of agent personas by id."""

    def __init__(self, personas: list[AgentPersona] | None = None) -> None:
        self._personas: dict[str, AgentPersona] = {}
        for persona in personas or []:
            self.register(persona)

    def register(self, persona: AgentPersona) -> None:
        """Register a persona, replacing any persona with the same id."""
        self._personas[persona.id] = persona

    def get(self, agent_id: str) -> AgentPersona | None:
        """Get a persona by id, or None if unknown."""
        return self._personas.get(agent_id)

    def list_personas(self) -> list[AgentPersona]:
        return list(self._personas.values())

    def __contains__(self, agent_id: object) -> bool:
        return agent_id in self._personas


BUILTIN_PERSONAS = [
    AgentPersona(id="ronit", name="Ronit", name_he="רונית", role="The Busy Parent", color="ronit"),
    AgentPersona(id="yossi", name="Yossi", name_he="יוסי", role="The Burned Veteran", color="yossi"),
    AgentPersona(id="noa", name="Noa", name_he="נועה", role="The Data Skeptic", color="noa"),
    AgentPersona(id="avi", name="Avi", name_he="אבי", role="The Practical Businessman", color="avi"),
    AgentPersona(id="michal", name="Michal", name_he="מיכל", role="The Burned Activist", color="michal"),
]


def default_registry() -> PersonaRegistry:
    """Create a registry holding the built-in debate personas."""
    return PersonaRegistry(BUILTIN_PERSONAS)
