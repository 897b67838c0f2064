from pathlib import Path

from resource_versions.__main__ import parse_args
from resource_versions.config import Settings
from resource_versions.main import bootstrap, cors_origins_for, main
from resource_versions.models.configuration import Profile

ANSWERS = ["eu-central-1", "https://s3.test.local", "packages", "AKIDEXAMPLE", "s3cr3t"]


def test_parse_args():
    args = parse_args(["--profile", "prod", "--config-dir", "/etc/resource-versions"])

    assert args.profile == "prod"
    assert args.config_dir == Path("/etc/resource-versions")


def test_settings_select_profile(tmp_path):
    settings = Settings(ENVIRONMENT="Production", CONFIG_DIR=tmp_path)

    assert settings.profile is Profile.PRODUCTION
    assert settings.is_production()


def test_bootstrap_builds_config_and_store(tmp_path, prompter):
    settings = Settings(ENVIRONMENT="development", CONFIG_DIR=tmp_path)

    config, store = bootstrap(settings, prompter=prompter(ANSWERS))

    assert config.bucket_info.name == "packages"
    assert store.bucket_name == "packages"
    assert (tmp_path / "Development.toml").exists()


def test_main_exits_with_error_on_broken_config(tmp_path, restore_root_logger):
    (tmp_path / "config").mkdir()
    (tmp_path / "config" / "Development.toml").write_text("not toml [")
    settings = Settings(ENVIRONMENT="development", CONFIG_DIR=tmp_path / "config", LOG_DIR=tmp_path / "logs")

    assert main(settings) == 1


def test_main_rejects_unknown_profile(tmp_path, restore_root_logger):
    assert main(Settings(ENVIRONMENT="staging", LOG_DIR=tmp_path / "logs")) == 1


def test_cors_origins_for(configuration):
    empty = configuration.model_copy(update={"cors_origins": []})

    assert cors_origins_for(configuration, Profile.PRODUCTION) == ["https://example.com"]
    assert cors_origins_for(empty, Profile.DEVELOPMENT) == ["*"]
    assert cors_origins_for(empty, Profile.PRODUCTION) is None
