"""Built-in role profiles matching the default workflow sequence."""

from __future__ import annotations

from typing import List

from .models import Role

DEFAULT_ROLES: List[Role] = [
    Role(
        name="Issue Analyst",
        description="Analyzes issue reports, clarifies requirements and identifies stakeholders",
        discovery_keywords=("issue", "requirement", "analysis", "bug", "feature", "ticket"),
        capabilities=("requirements analysis", "scoping", "triage"),
        priority=8,
    ),
    Role(
        name="Code Archaeologist",
        description="Explores existing code to uncover patterns, history and hidden dependencies",
        discovery_keywords=("legacy", "history", "existing", "explore", "refactor", "pattern"),
        capabilities=("code reading", "dependency tracing", "pattern discovery"),
        priority=6,
    ),
    Role(
        name="Solution Architect",
        description="Designs the solution architecture, interfaces and data flow",
        discovery_keywords=("architecture", "design", "interface", "schema", "api", "system"),
        capabilities=("system design", "api design", "data modeling"),
        priority=7,
    ),
    Role(
        name="Build Engineer",
        description="Sets up the environment, build configuration and continuous integration",
        discovery_keywords=("build", "ci", "pipeline", "docker", "deploy", "environment"),
        capabilities=("build configuration", "ci setup", "packaging"),
        priority=5,
    ),
    Role(
        name="Implementation Specialist",
        description="Writes production code that implements the designed features",
        discovery_keywords=("implement", "code", "feature", "function", "component", "endpoint"),
        capabilities=("coding", "component implementation", "integration"),
        priority=8,
    ),
    Role(
        name="Test Engineer",
        description="Writes and runs unit and integration tests to verify behaviour",
        discovery_keywords=("test", "unit", "integration", "coverage", "pytest", "regression"),
        capabilities=("test design", "test automation", "coverage analysis"),
        priority=6,
    ),
    Role(
        name="Quality Assurance Specialist",
        description="Reviews code quality, security and consistency before release",
        discovery_keywords=("review", "quality", "lint", "security", "audit", "qa"),
        capabilities=("code review", "quality check", "security review"),
        priority=5,
    ),
    Role(
        name="Documentation Specialist",
        description="Writes documentation, guides and release notes for the change",
        discovery_keywords=("docs", "documentation", "readme", "guide", "changelog", "notes"),
        capabilities=("technical writing", "documentation", "release notes"),
        priority=4,
    ),
]

FALLBACK_ROLE = Role(
    name="General Assistant",
    description="General-purpose AI assistant for various tasks",
    discovery_keywords=("general", "assistant", "help"),
    capabilities=("code review", "documentation", "problem solving"),
    guidelines="Provide general assistance and guidance",
    tags=("fallback", "general"),
    priority=1,
)
