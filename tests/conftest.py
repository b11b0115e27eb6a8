"""Pytest configuration and fixtures for Ferry tests."""

from __future__ import annotations

import pytest

from ferry import DeferredRenderer, JinjaEngine, RendererConfig

from .engines import RecordingEngine

TEMPLATES = {
    "greet.html": "Hello {{name}}",
    "item.html": "{{name}}: {{value}}",
    "users/profile.html": (
        "<h1>{{ username }}</h1>"
        "<p>{{ bio }}</p>"
        "<ul>{% for n in numbers %}<li>{{ n }}</li>{% endfor %}</ul>"
    ),
    "errors/404.html": "<h1>Not Found</h1><p>{{ path }}</p>",
    "notes.txt": "Note: {{ text }}",
    "broken.html": "{% if %}",
    "divide.html": "{{ 1 // zero }}",
}


@pytest.fixture
def engine() -> JinjaEngine:
    """JinjaEngine over the shared in-memory templates."""
    return JinjaEngine.from_mapping(TEMPLATES)


@pytest.fixture
def renderer(engine: JinjaEngine) -> DeferredRenderer:
    """DeferredRenderer with the default (HTML) content-type policy."""
    return DeferredRenderer(engine)


@pytest.fixture
def guessing_renderer(engine: JinjaEngine) -> DeferredRenderer:
    """DeferredRenderer that derives the content type from the template name."""
    return DeferredRenderer(engine, RendererConfig(guess_content_type=True))


@pytest.fixture
def recording_engine() -> RecordingEngine:
    return RecordingEngine()
