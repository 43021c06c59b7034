import pytest

from bucketfs import (
    BLOCK_SIZE_DEFAULT,
    ConfigurationError,
    StorageConfiguration,
    get_default_configuration,
    set_default_configuration,
)


def test_defaults():
    config = StorageConfiguration()
    assert config.working_directory == "/"
    assert config.block_size == BLOCK_SIZE_DEFAULT == 2 * 1024 * 1024
    assert config.user_project == ""
    assert not config.requester_pays_only
    assert config.retryable_http_codes == (500, 502, 503)


def test_with_overrides_returns_new_instance():
    config = StorageConfiguration(user_project="p")
    derived = config.with_overrides(user_project="")
    assert config.user_project == "p"
    assert derived.user_project == ""
    assert derived != config
    assert derived.with_overrides(user_project="p") == config


def test_with_overrides_rejects_unknown_keys():
    with pytest.raises(ConfigurationError):
        StorageConfiguration().with_overrides(colour="blue")


def test_hashable_even_with_list_codes():
    a = StorageConfiguration(retryable_http_codes=[500, 503])
    b = StorageConfiguration(retryable_http_codes=(500, 503))
    assert a == b
    assert hash(a) == hash(b)


@pytest.mark.parametrize(
    "kwargs",
    [
        {"working_directory": "relative/dir"},
        {"block_size": 0},
        {"max_channel_reopens": -1},
    ],
)
def test_invalid_values(kwargs):
    with pytest.raises(ConfigurationError):
        StorageConfiguration(**kwargs)


def test_from_mapping_accepts_both_spellings():
    config = StorageConfiguration.from_mapping(
        {
            "userProject": "p",
            "useUserProjectOnlyForRequesterPaysBuckets": True,
            "block_size": 1024,
        }
    )
    assert config.user_project == "p"
    assert config.requester_pays_only
    assert config.block_size == 1024


def test_from_mapping_overrides_base():
    base = StorageConfiguration(user_project="p", block_size=1024)
    config = StorageConfiguration.from_mapping({"userProject": ""}, base)
    assert config.user_project == ""
    assert config.block_size == 1024


def test_from_mapping_rejects_unknown_keys():
    with pytest.raises(ConfigurationError):
        StorageConfiguration.from_mapping({"bogus": 1})


def test_from_env():
    config = StorageConfiguration.from_env(
        {
            "BUCKETFS_USER_PROJECT": "billing",
            "BUCKETFS_REQUESTER_PAYS_ONLY": "true",
            "BUCKETFS_BLOCK_SIZE": "4096",
            "BUCKETFS_WORKING_DIRECTORY": "/data",
        }
    )
    assert config == StorageConfiguration(
        user_project="billing",
        use_user_project_only_for_requester_pays=True,
        block_size=4096,
        working_directory="/data",
    )
    assert StorageConfiguration.from_env({}) == StorageConfiguration()


def test_from_env_rejects_bad_numbers():
    with pytest.raises(ConfigurationError):
        StorageConfiguration.from_env({"BUCKETFS_BLOCK_SIZE": "big"})


def test_user_specified_default():
    assert get_default_configuration() == StorageConfiguration()
    config = StorageConfiguration(user_project="p")
    set_default_configuration(config)
    assert get_default_configuration() is config
    set_default_configuration(None)
    assert get_default_configuration() == StorageConfiguration()
