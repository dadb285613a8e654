# tests/conftest.py
"""Shared test fixtures.

Fixtures build the host-side doubles from xolyd.testing so each test
controls the exact execution context, trace sink and organization service
it runs against.

Hypothesis Configuration:
- "ci" profile: 100 examples (default)
- "nightly" profile: 1000 examples
- "debug" profile: 10 examples with verbose output

Set profile via environment variable:
    HYPOTHESIS_PROFILE=nightly pytest tests/property/
"""

import os
from uuid import UUID

import pytest
from hypothesis import Verbosity, settings

from xolyd.contracts import Entity
from xolyd.testing import (
    FakePluginExecutionContext,
    InMemoryOrganizationService,
    MockClock,
    RecordingTracer,
    StaticServiceFactory,
    StaticServiceProvider,
)

settings.register_profile("ci", max_examples=100)
settings.register_profile("nightly", max_examples=1000)
settings.register_profile("debug", max_examples=10, verbosity=Verbosity.verbose)
settings.load_profile(os.environ.get("HYPOTHESIS_PROFILE", "ci"))

CONTACT_ID = UUID("5f0d9a4c-8b1e-4c1a-9d8e-1f2a3b4c5d6e")
ACCOUNT_ID = UUID("0a1b2c3d-4e5f-4a6b-8c7d-9e0f1a2b3c4d")


@pytest.fixture
def tracer() -> RecordingTracer:
    return RecordingTracer()


@pytest.fixture
def clock() -> MockClock:
    return MockClock()


@pytest.fixture
def service() -> InMemoryOrganizationService:
    return InMemoryOrganizationService()


@pytest.fixture
def contact() -> Entity:
    return Entity("contact", CONTACT_ID, {"firstname": "Ann", "lastname": "Lee"})


@pytest.fixture
def execution_context(contact: Entity) -> FakePluginExecutionContext:
    return FakePluginExecutionContext(
        message_name="Update",
        primary_entity_name="contact",
        primary_entity_id=CONTACT_ID,
        input_parameters={"Target": contact},
    )


@pytest.fixture
def service_factory(service: InMemoryOrganizationService) -> StaticServiceFactory:
    return StaticServiceFactory(service)


@pytest.fixture
def service_provider(
    tracer: RecordingTracer,
    execution_context: FakePluginExecutionContext,
    service_factory: StaticServiceFactory,
) -> StaticServiceProvider:
    return StaticServiceProvider(tracer, execution_context, service_factory)
