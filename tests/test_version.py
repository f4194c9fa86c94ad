"""
Tests for the version module of the UserIntent SDK.
"""
import re
import importlib
import pathlib
from importlib import metadata as importlib_metadata
from unittest.mock import patch, mock_open

import tomli

from userintent_sdk import __version__


def _raise(exc):
    def _inner(*args, **kwargs):
        raise exc
    return _inner


def test_version_format():
    """Test that the version string follows semantic versioning"""
    assert re.match(r'^\d+\.\d+\.\d+$', __version__), "Version should follow semantic versioning"


@patch('importlib.metadata.version')
@patch('pathlib.Path.open', new_callable=mock_open, read_data=b'[project]\nversion = "1.2.3"\n')
def test_version_from_file(mock_open_file, mock_metadata_version):
    """When metadata lookup fails, pyproject.toml is read"""
    mock_metadata_version.side_effect = importlib_metadata.PackageNotFoundError
    import userintent_sdk.version as vmod
    importlib.reload(vmod)
    assert vmod.__version__ == "1.2.3"


@patch('importlib.metadata.version')
def test_version_from_metadata(mock_metadata_version):
    """When metadata lookup succeeds, version comes from metadata"""
    mock_metadata_version.return_value = "2.3.4"
    import userintent_sdk.version as vmod
    importlib.reload(vmod)
    assert vmod.__version__ == "2.3.4"
    mock_metadata_version.assert_called_with("userintent-sdk")


def test_version_file_not_found(monkeypatch):
    """If pyproject.toml is missing, fallback to default"""
    monkeypatch.setattr(importlib_metadata, 'version', _raise(importlib_metadata.PackageNotFoundError()))
    monkeypatch.setattr('pathlib.Path.open', _raise(FileNotFoundError()))
    import userintent_sdk.version as vmod
    importlib.reload(vmod)
    assert vmod.__version__ == vmod.UNKNOWN_VERSION


def test_version_key_error(monkeypatch):
    """If TOML exists but missing version key, fallback to default"""
    monkeypatch.setattr(importlib_metadata, 'version', _raise(importlib_metadata.PackageNotFoundError()))
    monkeypatch.setattr('pathlib.Path.open', mock_open(read_data=b'[project]\nname = "userintent-sdk"\n'))
    import userintent_sdk.version as vmod
    importlib.reload(vmod)
    assert vmod.__version__ == vmod.UNKNOWN_VERSION


def test_version_toml_decode_error(monkeypatch):
    """If TOML parse fails, fallback to default"""
    monkeypatch.setattr(importlib_metadata, 'version', _raise(importlib_metadata.PackageNotFoundError()))
    monkeypatch.setattr('pathlib.Path.open', mock_open(read_data=b'invalid toml content'))
    import userintent_sdk.version as vmod
    importlib.reload(vmod)
    assert vmod.__version__ == vmod.UNKNOWN_VERSION


def test_version_from_checkout_pyproject(monkeypatch):
    """A source checkout reports the version declared in pyproject.toml"""
    monkeypatch.setattr(importlib_metadata, 'version', _raise(importlib_metadata.PackageNotFoundError()))
    import userintent_sdk.version as vmod
    importlib.reload(vmod)
    path = pathlib.Path(vmod.__file__).parent.parent / "pyproject.toml"
    with path.open("rb") as f:
        declared = tomli.load(f)["project"]["version"]
    assert vmod.__version__ == declared
    assert vmod.__version__ != vmod.UNKNOWN_VERSION
