import pytest

from bucketfs import BucketFileSystem, BucketNameError, StorageConfiguration


@pytest.fixture
def fs(make_adapter):
    return BucketFileSystem(make_adapter(), "example", StorageConfiguration())


def test_join_segments(fs):
    path = fs.path("dir", "sub", "file.txt")
    assert str(path) == "dir/sub/file.txt"
    assert path.parts == ("dir", "sub", "file.txt")
    assert path.name == "file.txt"
    assert not path.is_absolute()


def test_empty_segments_skipped(fs):
    assert str(fs.path("dir", "", "file.txt")) == "dir/file.txt"
    assert str(fs.path("dir/", "file.txt")) == "dir/file.txt"


def test_repeated_separators_collapsed(fs):
    assert str(fs.path("/dir//file.txt")) == "/dir/file.txt"


def test_repeated_separators_kept_when_permitted(make_adapter):
    config = StorageConfiguration(permit_empty_path_components=True)
    fs = BucketFileSystem(make_adapter(), "example", config)
    assert str(fs.path("/dir//file.txt")) == "/dir//file.txt"


def test_object_name_and_uri(fs):
    path = fs.path("/dir/file.txt")
    assert path.object_name == "dir/file.txt"
    assert path.uri == "gs://example/dir/file.txt"


def test_object_name_keeps_slash_when_configured(make_adapter):
    config = StorageConfiguration(strip_prefix_slash=False)
    fs = BucketFileSystem(make_adapter(), "example", config)
    assert fs.path("/dir/file.txt").object_name == "/dir/file.txt"


def test_relative_paths_use_working_directory(make_adapter):
    config = StorageConfiguration(working_directory="/home")
    fs = BucketFileSystem(make_adapter(), "example", config)
    path = fs.path("file.txt")
    assert str(path.to_absolute()) == "/home/file.txt"
    assert path.object_name == "home/file.txt"


def test_joinpath_and_operator(fs):
    base = fs.path("dir")
    assert base / "file.txt" == fs.path("dir", "file.txt")
    assert base.joinpath("a", "b") == fs.path("dir/a/b")


def test_paths_compare_by_filesystem(make_adapter, fs):
    other = BucketFileSystem(make_adapter(), "other", StorageConfiguration())
    assert fs.path("a") == fs.path("a")
    assert fs.path("a") != other.path("a")


def test_scheme_rejected_in_any_segment(fs):
    with pytest.raises(BucketNameError):
        fs.path("dir", "gs://other/file")
