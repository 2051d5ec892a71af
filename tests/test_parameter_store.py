"""Unit tests for the parameter store."""

import pytest

from common.const import parameter_names as p
from common.parameter_store import ParameterError, ParameterStore, default_parameter_file


class TestParameterStoreLoad:
    """Test suite for reading parameter files."""

    def test_load_plain_assignments(self, store):
        """Test that every user supplied field is read."""
        assert store[p.CLUSTER_NAME] == "jeretan"
        assert store[p.VPC_CIDR] == "10.0.0.0/16"
        assert store[p.ACCOUNT_ROLES_PREFIX] == "jeretan-hcp"
        store.validate()

    def test_load_shell_syntax(self, tmp_path):
        """Test export prefixes, quotes and inline comments."""
        path = tmp_path / "variable.txt"
        path.write_text(
            "export CLUSTER_NAME=\"jeretan\"\n"
            "REGION='ap-southeast-1'\n"
            "\n"
            "   # indented comment\n"
            "VPC_CIDR=10.0.0.0/16 # main range\n"
            "not an assignment\n"
        )
        store = ParameterStore(path).load()
        assert store[p.CLUSTER_NAME] == "jeretan"
        assert store[p.REGION] == "ap-southeast-1"
        assert store[p.VPC_CIDR] == "10.0.0.0/16"
        assert len(store.parameters) == 3

    def test_quoted_value_with_inline_comment(self, tmp_path):
        """Test a quoted value followed by a comment loads without its quotes."""
        path = tmp_path / "variable.txt"
        path.write_text("CLUSTER_NAME=\"jeretan\" # prod cluster\nREGION='ap-southeast-1'  # primary\n")
        store = ParameterStore(path).load()
        assert store[p.CLUSTER_NAME] == "jeretan"
        assert store[p.REGION] == "ap-southeast-1"

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            ParameterStore(tmp_path / "missing.txt").load()

    def test_empty_value_counts_as_missing(self, tmp_path):
        """Test that NAME= is treated as absent."""
        path = tmp_path / "variable.txt"
        path.write_text("CLUSTER_NAME=\n")
        store = ParameterStore(path).load()
        assert p.CLUSTER_NAME not in store
        assert store.get_input_param(p.CLUSTER_NAME, "fallback") == "fallback"

    def test_validate_lists_missing_fields(self, tmp_path):
        """Test validation reports every missing user supplied field."""
        path = tmp_path / "variable.txt"
        path.write_text("CLUSTER_NAME=jeretan\nREGION=ap-southeast-1\n")
        store = ParameterStore(path).load()

        with pytest.raises(ParameterError) as exc_info:
            store.validate()
        assert exc_info.value.missing == [
            p.VPC_CIDR,
            p.PUBLIC_CIDR_SUBNET,
            p.PRIVATE_CIDR_SUBNET,
            p.ACCOUNT_ROLES_PREFIX,
            p.OPERATOR_ROLES_PREFIX,
        ]

    def test_getitem_missing_raises(self, store):
        with pytest.raises(ParameterError):
            store[p.OIDC_ID]

    def test_default_path_from_environment(self, monkeypatch, tmp_path):
        monkeypatch.setenv("ROSA_HCP_PARAMETER_FILE", str(tmp_path / "params.env"))
        assert default_parameter_file() == tmp_path / "params.env"
        assert not ParameterStore().exists()


class TestParameterStoreSave:
    """Test suite for writing derived values back."""

    def test_save_appends_new_values(self, store, parameter_file):
        """Test derived values are appended and original lines kept."""
        store.update({p.PUBLIC_SUBNET_ID: "subnet-pub", p.PRIVATE_SUBNET_ID: "subnet-priv"})
        store.save()

        content = parameter_file.read_text()
        assert content.startswith("# cluster settings\nCLUSTER_NAME=jeretan\n")
        assert content.endswith("PUBLIC_SUBNET_ID=subnet-pub\nPRIVATE_SUBNET_ID=subnet-priv\n")

        reloaded = ParameterStore(parameter_file).load()
        assert reloaded[p.PUBLIC_SUBNET_ID] == "subnet-pub"
        assert reloaded[p.CLUSTER_NAME] == "jeretan"

    def test_save_updates_existing_line_in_place(self, store, parameter_file):
        """Test re-running an operation overwrites the previous value."""
        store.set(p.OIDC_ID, "first")
        store.save()
        store.set(p.OIDC_ID, "second")
        store.save()

        lines = parameter_file.read_text().splitlines()
        assert lines.count("OIDC_ID=second") == 1
        assert not any(line.startswith("OIDC_ID=first") for line in lines)

    def test_save_without_changes_leaves_file_untouched(self, store, parameter_file):
        before = parameter_file.read_text()
        store.save()
        assert parameter_file.read_text() == before

    def test_save_keeps_export_prefix(self, tmp_path):
        """Test an exported assignment stays exported when its value is rewritten."""
        path = tmp_path / "variable.txt"
        path.write_text("export CLUSTER_NAME=jeretan\nexport OIDC_ID=old\n")
        store = ParameterStore(path).load()

        store.set(p.OIDC_ID, "new")
        store.save()

        assert path.read_text() == "export CLUSTER_NAME=jeretan\nexport OIDC_ID=new\n"
