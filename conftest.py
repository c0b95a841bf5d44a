"""Shared pytest fixtures."""

import pytest


@pytest.fixture
def user(django_user_model):
    return django_user_model.objects.create_user(
        email="member@example.com",
        password="MemberPass123",
        first_name="Budi",
        last_name="Santoso",
        phone="+6281200000001",
    )


@pytest.fixture
def other_user(django_user_model):
    return django_user_model.objects.create_user(
        email="other@example.com",
        password="OtherPass123",
    )
