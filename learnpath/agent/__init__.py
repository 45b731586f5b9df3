"""LangGraph Agent modules."""

from learnpath.agent.graph import (
    create_generation_graph,
    generate_next_roadmap,
    generate_roadmap,
    generate_study_plan,
    get_graph,
)

__all__ = [
    "create_generation_graph",
    "generate_next_roadmap",
    "generate_roadmap",
    "generate_study_plan",
    "get_graph",
]
