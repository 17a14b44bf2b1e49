"""Tests for CLI commands module."""

import argparse
from unittest.mock import patch

import pytest

from frameforge import __version__
from frameforge.backends.builtin import register_builtin_backends
from frameforge.backends.registry import BackendRegistry
from frameforge.cli import commands
from frameforge.errors import BackendConfigurationError


@pytest.fixture
def builtin_registry():
    registry = BackendRegistry()
    register_builtin_backends(registry, include_entry_points=False)
    return registry


class TestLoadConfig:
    """Test configuration loading."""

    def test_load_config_nested(self, tmp_path):
        """Test loading nested backend options."""
        config_path = tmp_path / "backends.yaml"
        config_path.write_text("""
dataframe:
  backend:
    library: sparse
    warn-fallback: false

array:
  backend:
    allow_fallback: no
""")

        options = commands.load_config(str(config_path))
        assert options == {
            'dataframe.backend.library': 'sparse',
            'dataframe.backend.warn-fallback': False,
            'array.backend.allow-fallback': False,
        }

    def test_load_config_dotted_keys(self, tmp_path):
        config_path = tmp_path / "flat.yaml"
        config_path.write_text("dataframe.backend.library: pandas\n")
        assert commands.load_config(str(config_path)) == {'dataframe.backend.library': 'pandas'}

    def test_load_config_empty_file(self, tmp_path):
        config_path = tmp_path / "empty.yaml"
        config_path.write_text("")
        assert commands.load_config(str(config_path)) == {}

    def test_load_config_missing_file(self):
        with pytest.raises(FileNotFoundError):
            commands.load_config("/nonexistent/config.yaml")

    def test_load_config_unknown_option(self, tmp_path):
        config_path = tmp_path / "bad.yaml"
        config_path.write_text("dataframe:\n  backend:\n    engine: fast\n")

        with pytest.raises(BackendConfigurationError):
            commands.load_config(str(config_path))

    def test_load_config_not_a_mapping(self, tmp_path):
        config_path = tmp_path / "list.yaml"
        config_path.write_text("- pandas\n- sparse\n")

        with pytest.raises(ValueError, match="mapping"):
            commands.load_config(str(config_path))


class TestValidateConfig:
    """Test config validation command."""

    def test_valid(self, tmp_path, builtin_registry, capsys):
        config_path = tmp_path / "ok.yaml"
        config_path.write_text("dataframe:\n  backend:\n    library: sparse\n")

        args = argparse.Namespace(config=str(config_path), quiet=False)
        assert commands.validate_config(args, registry=builtin_registry) == 0

        out = capsys.readouterr().out
        assert "Configuration is valid" in out
        assert "sparse -> pandas" in out

    def test_unregistered_backend(self, tmp_path, builtin_registry, capsys):
        config_path = tmp_path / "gpu.yaml"
        config_path.write_text("dataframe:\n  backend:\n    library: cudf\n")

        args = argparse.Namespace(config=str(config_path), quiet=True)
        assert commands.validate_config(args, registry=builtin_registry) == 1
        assert "Unknown backend 'cudf'" in capsys.readouterr().err

    def test_invalid_value(self, tmp_path, builtin_registry, capsys):
        config_path = tmp_path / "bad.yaml"
        config_path.write_text("array:\n  backend:\n    warn-fallback: sometimes\n")

        args = argparse.Namespace(config=str(config_path), quiet=True)
        assert commands.validate_config(args, registry=builtin_registry) == 1
        assert "Invalid configuration" in capsys.readouterr().err

    def test_missing_file(self, tmp_path, capsys):
        args = argparse.Namespace(config=str(tmp_path / "missing.yaml"), quiet=True)
        assert commands.validate_config(args) == 1
        assert "not found" in capsys.readouterr().err

    @patch('frameforge.cli.commands.HAS_YAML', False)
    def test_no_yaml(self, capsys):
        args = argparse.Namespace(config='x.yaml', quiet=True)
        assert commands.validate_config(args) == 1
        assert 'PyYAML' in capsys.readouterr().err


class TestRouteOperation:
    """Test dry-run routing command."""

    def test_direct(self, builtin_registry, capsys):
        args = argparse.Namespace(kind='dataframe', operation='read_csv', backend=None, config=None)
        assert commands.route_operation(args, registry=builtin_registry) == 0
        assert "served by 'pandas'" in capsys.readouterr().out

    def test_fallback(self, builtin_registry, capsys):
        args = argparse.Namespace(kind='dataframe', operation='read_csv', backend='sparse', config=None)
        assert commands.route_operation(args, registry=builtin_registry) == 0
        assert "'sparse' falls back to 'pandas'" in capsys.readouterr().out

    def test_config_file_disables_fallback(self, tmp_path, builtin_registry, capsys):
        config_path = tmp_path / "strict.yaml"
        config_path.write_text(
            "array:\n  backend:\n    library: masked\n    allow-fallback: false\n"
        )
        args = argparse.Namespace(kind='array', operation='zeros', backend=None, config=str(config_path))

        assert commands.route_operation(args, registry=builtin_registry) == 1
        assert "fallback disabled" in capsys.readouterr().err

    def test_unregistered_fallback_not_consulted(self, capsys):
        """Test routing a native operation ignores a fallback that is not registered."""
        from frameforge.backends.dataframe.sparse import SparseBackend

        registry = BackendRegistry()
        registry.register('dataframe', 'sparse', SparseBackend())
        args = argparse.Namespace(kind='dataframe', operation='from_dict', backend='sparse', config=None)

        assert commands.route_operation(args, registry=registry) == 0
        assert "served by 'sparse'" in capsys.readouterr().out

    def test_unknown_kind(self, builtin_registry, capsys):
        args = argparse.Namespace(kind='frames', operation='read_csv', backend='pandas', config=None)
        assert commands.route_operation(args, registry=builtin_registry) == 1
        assert "Unknown collection kind 'frames'" in capsys.readouterr().err

    def test_unknown_operation(self, builtin_registry, capsys):
        args = argparse.Namespace(kind='array', operation='read_zarr', backend='masked', config=None)
        assert commands.route_operation(args, registry=builtin_registry) == 1
        assert "read_zarr" in capsys.readouterr().err


class TestShowInfo:
    """Test info command."""

    def test_backends(self, builtin_registry, capsys):
        args = argparse.Namespace(target='backends', kind=None)
        assert commands.show_info(args, registry=builtin_registry) == 0

        out = capsys.readouterr().out
        assert "Available Backends" in out
        assert "pandas" in out
        assert "default" in out
        assert "fallback: numpy" in out

    def test_backends_filtered(self, builtin_registry, capsys):
        args = argparse.Namespace(target='backends', kind='array')
        commands.show_info(args, registry=builtin_registry)

        out = capsys.readouterr().out
        assert "masked" in out
        assert "sparse" not in out

    def test_backends_empty(self, capsys):
        args = argparse.Namespace(target='backends', kind=None)
        commands.show_info(args, registry=BackendRegistry())
        assert "No backends registered" in capsys.readouterr().out

    def test_examples(self, capsys):
        args = argparse.Namespace(target='examples')
        assert commands.show_info(args) == 0
        assert "frameforge route" in capsys.readouterr().out

    def test_version(self, capsys):
        args = argparse.Namespace(target='version')
        assert commands.show_info(args) == 0
        assert f"v{__version__}" in capsys.readouterr().out
