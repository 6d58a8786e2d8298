from companion.bootstrap.components import Components
from companion.dependencies.components import get_components
from companion.dependencies.services import get_agent_service
from companion.services.AgentService.agent_service_interface import (
    AgentServiceInterface,
)


def bootstrap_agent(
    env: str = "development",
    config_path: str = "configuration",
) -> tuple[AgentServiceInterface, Components]:
    components = get_components(env=env, config_path=config_path)
    agent: AgentServiceInterface = get_agent_service(components)
    return agent, components
