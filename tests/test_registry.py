"""Tests for the package model and registry."""

from pathlib import Path

import pytest

from vimpack.config import PackConfig
from vimpack.errors import FormatError, PackIOError
from vimpack.package import Package, PackageRegistry
from vimpack.package.registry import PACKFILE_HEADER


class TestPackage:
    """Test derived package paths."""

    def test_start_path(self, config: PackConfig) -> None:
        """Test install path of an auto-loaded package."""
        package = Package("tpope/vim-fugitive", category="git")
        assert package.path(config) == config.base_dir / "pack" / "git" / "start" / "vim-fugitive"

    def test_opt_path(self, config: PackConfig) -> None:
        """Test install path of an optional package."""
        package = Package("junegunn/goyo.vim", category="writing", opt=True)
        assert package.path(config) == config.base_dir / "pack" / "writing" / "opt" / "goyo.vim"

    def test_name_without_owner(self, config: PackConfig) -> None:
        """A bare name must never resolve to the category directory itself."""
        package = Package("standalone")
        assert package.repo() == ("", "standalone")
        assert package.path(config).name == "standalone"

    def test_config_path(self, config: PackConfig) -> None:
        """Test config file naming."""
        assert Package("user/repo").config_path(config) == config.config_dir / "user-repo.vim"
        assert Package("rust-lang/rust.vim").config_path(config).name == "rust-lang-rust.vim"

    def test_describe(self) -> None:
        """Test the human readable form."""
        package = Package("junegunn/goyo.vim", category="writing", opt=True, load_command="Goyo")
        assert str(package) == "junegunn/goyo.vim => pack/writing/opt [Load on `Goyo`]"
        assert str(Package("a/b")) == "a/b => pack/default/start"

    def test_from_dict_missing_fields(self) -> None:
        """Test that incomplete records are rejected."""
        with pytest.raises(FormatError):
            Package.from_dict({"category": "c", "opt": False})
        with pytest.raises(FormatError):
            Package.from_dict({"name": "a/b", "category": "c"})
        with pytest.raises(FormatError):
            Package.from_dict({"name": "a/b", "opt": True})
        with pytest.raises(FormatError):
            Package.from_dict({"name": "a/b", "opt": "yes", "category": "c"})
        with pytest.raises(FormatError):
            Package.from_dict("a/b")

    @pytest.mark.parametrize("name", ["typo/", "user/.", "user/..", "user/a/b", "user/a\\b", "..", ""])
    def test_rejects_names_outside_own_directory(self, name: str) -> None:
        """Names must map to a dedicated install directory."""
        with pytest.raises(FormatError):
            Package(name)

    def test_rejects_bad_category(self) -> None:
        """Test that categories cannot escape the pack directory."""
        for category in ("", "..", "a/b"):
            with pytest.raises(FormatError):
                Package("user/repo", category=category)

    def test_load_command_must_be_user_command(self) -> None:
        """Vim user commands start with an uppercase letter."""
        assert Package("a/b", opt=True, load_command="Goyo2").load_command == "Goyo2"
        for command in ("goyo", "Go-yo", "1Go", "Go yo"):
            with pytest.raises(FormatError):
                Package("a/b", opt=True, load_command=command)


class TestPackageRegistry:
    """Test packfile loading and saving."""

    def test_load_absent_packfile(self, config: PackConfig) -> None:
        """An absent packfile is an empty registry, not an error."""
        registry = PackageRegistry.load(config)
        assert len(registry) == 0
        assert list(registry) == []

    def test_load_empty_packfile(self, config: PackConfig, write_packfile) -> None:
        """A packfile holding only the header is empty."""
        write_packfile(PACKFILE_HEADER)
        assert len(PackageRegistry.load(config)) == 0

    def test_load(self, config: PackConfig, write_packfile) -> None:
        """Test loading records."""
        write_packfile(
            "- name: a/x\n  category: c\n  opt: false\n"
            "- name: b/y\n  category: d\n  opt: true\n  on: Why\n"
            "- name: c/z\n  category: d\n  opt: false\n  local: true\n"
        )
        registry = PackageRegistry.load(config)

        assert registry.names() == ["a/x", "b/y", "c/z"]
        assert registry.get("b/y") == Package("b/y", category="d", opt=True, load_command="Why")
        assert registry.get("c/z").local is True
        assert "a/x" in registry
        assert "nope/nope" not in registry

    def test_load_missing_name(self, config: PackConfig, write_packfile) -> None:
        """A record without a name aborts the load."""
        write_packfile("- category: c\n  opt: false\n")
        with pytest.raises(FormatError):
            PackageRegistry.load(config)

    def test_load_not_a_list(self, config: PackConfig, write_packfile) -> None:
        """Test rejecting a mapping at the root."""
        write_packfile("name: a/x\n")
        with pytest.raises(FormatError):
            PackageRegistry.load(config)

    def test_load_invalid_yaml(self, config: PackConfig, write_packfile) -> None:
        """Test rejecting unparsable YAML."""
        write_packfile("- name: [unclosed\n")
        with pytest.raises(FormatError):
            PackageRegistry.load(config)

    def test_load_duplicate_names(self, config: PackConfig, write_packfile) -> None:
        """Two records with the same name are rejected."""
        write_packfile(
            "- name: a/x\n  category: c\n  opt: false\n"
            "- name: a/x\n  category: d\n  opt: true\n"
        )
        with pytest.raises(FormatError, match="more than once"):
            PackageRegistry.load(config)

    def test_save_sorted_with_header(self, config: PackConfig) -> None:
        """Test that saving sorts by name and writes the header."""
        registry = PackageRegistry(config, [
            Package("test/hello", category="default", opt=True),
            Package("rust-lang/rust.vim", category="rust"),
        ])
        registry.save()

        text = config.packfile.read_text(encoding="utf-8")
        assert text.startswith(PACKFILE_HEADER)
        assert text.index("rust-lang/rust.vim") < text.index("test/hello")
        assert "on:" not in text
        assert "local:" not in text

        reloaded = PackageRegistry.load(config)
        assert reloaded.names() == ["rust-lang/rust.vim", "test/hello"]
        assert reloaded.get("test/hello").opt is True

    def test_save_creates_directory(self, tmp_path: Path) -> None:
        """Test that the config directory is created when missing."""
        config = PackConfig(base_dir=tmp_path / "missing" / "vim")
        PackageRegistry(config, [Package("a/b")]).save()
        assert config.packfile.is_file()

    def test_save_is_deterministic(self, config: PackConfig) -> None:
        """Insertion order does not change the saved file."""
        packages = [Package("b/b"), Package("a/a", opt=True, load_command="A"), Package("c/c", local=True)]

        PackageRegistry(config, packages).save()
        first = config.packfile.read_bytes()
        PackageRegistry(config, reversed(packages)).save()

        assert config.packfile.read_bytes() == first

    def test_add_replaces(self, config: PackConfig) -> None:
        """Adding an existing name replaces the entry."""
        registry = PackageRegistry(config, [Package("a/x", category="old")])
        registry.add(Package("a/x", category="new"))
        registry.add(Package("b/y"))

        assert registry.names() == ["a/x", "b/y"]
        assert registry.get("a/x").category == "new"

    def test_remove_and_without(self, config: PackConfig) -> None:
        """Test removing packages by name."""
        registry = PackageRegistry(config, [Package("c/z"), Package("a/x"), Package("b/y")])

        assert [p.name for p in registry.without({"a/x"})] == ["c/z", "b/y"]
        assert registry.remove(["a/x", "missing/one"]) == ["a/x"]
        assert registry.names() == ["c/z", "b/y"]

    def test_load_rejects_unsafe_name(self, config: PackConfig, write_packfile) -> None:
        """A record whose name resolves to a shared directory aborts the load."""
        write_packfile("- name: typo/\n  category: c\n  opt: false\n")
        with pytest.raises(FormatError, match="Invalid package name"):
            PackageRegistry.load(config)

    def test_load_non_utf8_packfile(self, config: PackConfig) -> None:
        """Undecodable bytes are a format error."""
        config.packfile.parent.mkdir(parents=True)
        config.packfile.write_bytes(b"- name: a/\xff\n  category: c\n  opt: false\n")
        with pytest.raises(FormatError):
            PackageRegistry.load(config)

    def test_save_unwritable(self, config: PackConfig) -> None:
        """Write failures surface as PackIOError."""
        config.packfile.mkdir(parents=True)
        with pytest.raises(PackIOError):
            PackageRegistry(config, [Package("a/b")]).save()


class TestPackConfig:
    """Test path configuration."""

    def test_from_env(self, tmp_path: Path) -> None:
        """Test the base directory override."""
        config = PackConfig.from_env({"VIM_CONFIG_PATH": str(tmp_path)})

        assert config.base_dir == tmp_path
        assert config.packfile == tmp_path / ".pack" / "packfile"
        assert config.plugin_file == tmp_path / "plugin" / "_pack.vim"
        assert config.pack_dir == tmp_path / "pack"

    def test_default_base_dir(self) -> None:
        """Test the default ~/.vim location."""
        config = PackConfig.from_env({})
        assert config.base_dir == Path.home() / ".vim"
