"""Tests for environment based configuration."""

from pathlib import Path

from pydrivemirror.config import DEFAULT_DRIVE_API_BASE, Config


class TestConfig:
    def test_defaults(self, clean_env):
        config = Config()
        assert config.drive_api_base == DEFAULT_DRIVE_API_BASE
        assert config.parent_folder == ""
        assert config.out_path is None
        assert config.diff_list is None

    def test_values_from_environment(self, clean_env):
        clean_env.setenv("DRIVE_API_BASE", "https://graph.example/drives/1/")
        clean_env.setenv("PARENT_FOLDER", "/Shared/Docs/")
        clean_env.setenv("OUT_PATH", "/srv/out")
        clean_env.setenv("DIFF_LIST", "/tmp/diff.txt")
        clean_env.setenv("TENANT_ID", "t")
        clean_env.setenv("CLIENT_ID", "c")
        clean_env.setenv("CLIENT_SECRET", "s")

        config = Config()

        assert config.drive_api_base == "https://graph.example/drives/1"
        assert config.parent_folder == "Shared/Docs"
        assert config.out_path == Path("/srv/out")
        assert config.diff_list == Path("/tmp/diff.txt")
        assert (config.tenant_id, config.client_id, config.client_secret) == (
            "t",
            "c",
            "s",
        )

    def test_empty_values_are_unset(self, clean_env):
        clean_env.setenv("OUT_PATH", "")
        assert Config().out_path is None

    def test_load_env_file(self, clean_env, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text("OUT_PATH=/from/file\nTENANT_ID=file-tenant\n")
        clean_env.setenv("TENANT_ID", "env-tenant")
        config = Config()

        loaded = config.load_env_file(str(env_file))

        assert loaded == str(env_file)
        assert config.out_path == Path("/from/file")
        # existing environment wins
        assert config.tenant_id == "env-tenant"

    def test_no_env_file(self, clean_env, tmp_path):
        clean_env.chdir(tmp_path)
        clean_env.setattr("pydrivemirror.config.find_dotenv", lambda usecwd: "")
        assert Config().load_env_file() is None
