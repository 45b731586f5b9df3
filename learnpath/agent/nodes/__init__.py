"""Agent nodes."""

from learnpath.agent.nodes.fallback import template_fallback_node
from learnpath.agent.nodes.planner import next_roadmap_planner_node, roadmap_planner_node
from learnpath.agent.nodes.study_planner import study_planner_node

__all__ = [
    "roadmap_planner_node",
    "next_roadmap_planner_node",
    "study_planner_node",
    "template_fallback_node",
]
