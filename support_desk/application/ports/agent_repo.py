"""Port interface for the backend agent roster."""

from abc import ABC, abstractmethod

from support_desk.domain.entities.agent import Agent


class AgentRepository(ABC):
    @abstractmethod
    async def get_active_agents(self) -> list[Agent]:
        """Active users holding the agent role, in roster order."""
        ...

    @abstractmethod
    async def get_admins(self) -> list[Agent]:
        """Active users holding the admin role."""
        ...
