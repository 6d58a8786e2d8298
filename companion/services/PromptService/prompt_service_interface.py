from abc import ABC, abstractmethod

from companion.entities.agent import AgentConfig


class PromptServiceInterface(ABC):
    @abstractmethod
    def create_system_instruction(self, config: AgentConfig) -> str:
        """Render the persona/policy system instruction for the given agent."""
