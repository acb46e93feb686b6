from src.rubric_validator.engine.credentials import EnvCredentialProvider, StaticCredentialProvider


class TestEnvCredentialProvider:
    def test_defaults_to_configured_variable(self):
        assert EnvCredentialProvider().env_var == "CLAUDE_API_KEY"

    def test_reads_environment_each_call(self, monkeypatch):
        provider = EnvCredentialProvider("RUBRIC_TEST_KEY")
        monkeypatch.delenv("RUBRIC_TEST_KEY", raising=False)
        assert provider.get_api_key() is None

        monkeypatch.setenv("RUBRIC_TEST_KEY", "sk-1")
        assert provider.get_api_key() == "sk-1"

        monkeypatch.setenv("RUBRIC_TEST_KEY", "sk-2")
        assert provider.get_api_key() == "sk-2"

    def test_blank_value_is_missing(self, monkeypatch):
        monkeypatch.setenv("RUBRIC_TEST_KEY", "   ")
        assert EnvCredentialProvider("RUBRIC_TEST_KEY").get_api_key() is None


class TestStaticCredentialProvider:
    def test_returns_fixed_value(self):
        assert StaticCredentialProvider("k").get_api_key() == "k"
        assert StaticCredentialProvider(None).get_api_key() is None
