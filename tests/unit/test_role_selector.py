"""Role scoring and selection tests."""

import pytest

from baton.roles import FALLBACK_ROLE, Role, RoleCatalog, RoleSelector, Task, text_similarity


def _frontend() -> Role:
    return Role(
        name="Frontend",
        description="Builds user interfaces",
        discovery_keywords=["react", "ui"],
        capabilities=["component"],
        priority=5,
    )


def _backend() -> Role:
    return Role(
        name="Backend",
        description="Builds server side APIs",
        discovery_keywords=["api", "database"],
        capabilities=["endpoint"],
        priority=5,
    )


def test_frontend_selected_for_react_component():
    selector = RoleSelector(RoleCatalog([_backend(), _frontend()]))
    task = Task(keywords=["react", "component"], description="build a react component")

    role = selector.select_optimal_role(task)

    assert role.name == "Frontend"
    assert selector.score(role, task) > 0.4


def test_score_components_are_weighted():
    selector = RoleSelector(RoleCatalog([_frontend()]))
    task = Task(keywords=["react", "component"], description="build a react component")

    # keyword ratio 0.5 ("react"), capability ratio 0.5 ("component"),
    # no description overlap, fresh usage, priority 5/10
    expected = 0.5 * 0.40 + 0.0 * 0.25 + 0.5 * 0.20 + 1.0 * 0.10 + 0.5 * 0.05
    assert selector.score(_frontend(), task) == pytest.approx(expected)


def test_selection_is_deterministic_without_history():
    task = Task(keywords=["react"], description="react ui")
    results = set()
    for _ in range(5):
        selector = RoleSelector(RoleCatalog([_backend(), _frontend()]))
        results.add(selector.select_optimal_role(task).name)
    assert results == {"Frontend"}


def test_repeated_selection_never_increases_score():
    selector = RoleSelector(RoleCatalog([_frontend()]))
    task = Task(keywords=["react"], description="react")

    before = selector.score(_frontend(), task)
    selector.select_optimal_role(task)
    after_one = selector.score(_frontend(), task)
    selector.select_optimal_role(task)
    after_two = selector.score(_frontend(), task)

    assert before >= after_one >= after_two
    assert after_one == pytest.approx(before - 0.1 * 0.10)
    assert selector.usage_statistics() == {"Frontend": 2}


def test_usage_penalty_rotates_between_equal_roles():
    first = Role(name="First", discovery_keywords=["docs"], priority=5)
    second = Role(name="Second", discovery_keywords=["docs"], priority=5)
    selector = RoleSelector(RoleCatalog([first, second]))
    task = Task(keywords=["docs"], description="write docs")

    # Tie goes to catalog order, then the usage penalty favours the other one
    assert selector.select_optimal_role(task).name == "First"
    assert selector.select_optimal_role(task).name == "Second"


def test_recommendations_do_not_touch_usage_history():
    selector = RoleSelector(RoleCatalog([_backend(), _frontend()]))
    task = Task(keywords=["react", "api"], description="react dashboard over an api")

    recommendations = selector.get_role_recommendations(task)

    assert [r.role.name for r in recommendations][:2] in (
        ["Backend", "Frontend"],
        ["Frontend", "Backend"],
    )
    assert all(r.confidence > 0 for r in recommendations)
    assert recommendations[0].confidence >= recommendations[-1].confidence
    assert selector.usage_statistics() == {}


def test_recommendations_capped_at_three():
    roles = [Role(name=f"Docs {i}", discovery_keywords=["docs"]) for i in range(5)]
    selector = RoleSelector(RoleCatalog(roles))
    assert len(selector.get_role_recommendations(Task(keywords=["docs"], description="docs"))) == 3


def test_recommendation_reasons():
    selector = RoleSelector(RoleCatalog([_frontend()]))
    rec = selector.get_role_recommendations(
        Task(keywords=["react"], description="react app")
    )[0]
    assert rec.reason == "Matches keywords: react"


def test_fallback_to_general_role_in_catalog():
    helper = Role(name="Helper Bot", description="helps")
    selector = RoleSelector(RoleCatalog([_frontend(), helper]))

    role = selector.select_optimal_role(Task(keywords=["kubernetes"], description="scale pods"))

    assert role.name == "Helper Bot"
    assert selector.usage_statistics() == {}


def test_synthesized_fallback_when_catalog_has_none():
    selector = RoleSelector(RoleCatalog([_frontend()]))
    role = selector.select_optimal_role(Task(keywords=["kubernetes"], description="scale pods"))
    assert role == FALLBACK_ROLE
    assert role.name == "General Assistant"


def test_description_similarity_makes_candidate():
    role = Role(name="Writer", description="write release notes for users")
    selector = RoleSelector(RoleCatalog([role]))
    task = Task(keywords=[], description="write release notes")

    assert text_similarity(task.description, role.description) > 0.3
    assert selector.select_optimal_role(task).name == "Writer"


def test_text_similarity_ignores_short_words():
    assert text_similarity("a an of", "a an of") == 0.0
    assert text_similarity("Build API", "build api") == 1.0


def test_derived_task_keywords():
    task = Task.from_description("Fix the React component for the login API")
    assert task.keywords == ["fix", "react", "component", "login", "api"]


def test_reset_usage_history():
    selector = RoleSelector(RoleCatalog([_frontend()]))
    selector.select_optimal_role(Task(keywords=["react"], description="react"))
    selector.reset_usage_history()
    assert selector.usage_statistics() == {}
