"""Tests for the provider registry."""

import pytest

from sentimeter.core.config import Settings
from sentimeter.core.errors import UnknownProviderError
from sentimeter.services.chatterbox_client import ChatterboxClient
from sentimeter.services.registry import (
    EXECUTORS,
    credentials_for,
    create_executor,
    requires_secret,
    supported_providers,
)


class TestRegistry:

    def test_all_providers_registered(self):
        assert sorted(EXECUTORS) == sorted([
            "Alchemy", "Bitext", "Chatterbox", "MechanicalTurk",
            "Repustate", "Semantria", "Skyttle", "Viralheat",
        ])

    def test_create_executor(self):
        assert isinstance(create_executor("Chatterbox"), ChatterboxClient)

    def test_unknown_provider(self):
        with pytest.raises(UnknownProviderError) as excinfo:
            create_executor("Watson")
        assert "Watson" in str(excinfo.value)

    def test_unknown_provider_is_key_error(self):
        with pytest.raises(KeyError):
            create_executor("Watson")

    def test_supported_providers(self):
        assert supported_providers("Russian") == ["Skyttle"]
        assert set(supported_providers("Portuguese")) == {"Alchemy", "Bitext", "Chatterbox", "Semantria"}
        assert "MechanicalTurk" not in supported_providers("English")
        assert supported_providers("Klingon") == []

    def test_credentials(self):
        config = Settings(bitext_login="user", bitext_password="pass", alchemy_api_key="ak")
        assert credentials_for("Bitext", config) == ("user", "pass")
        assert credentials_for("Alchemy", config) == ("ak", "")
        assert requires_secret("Semantria")
        assert not requires_secret("Viralheat")
