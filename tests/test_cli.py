"""Tests for the sqlmask command-line interface."""

import pytest
from click.testing import CliRunner
from sqlalchemy import create_engine

from sqlmask import __version__
from sqlmask.cli.sqlmask_cli import cli


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    for name in ("SQLMASK_DIALECT", "SQLMASK_DATABASE_URL", "SQLMASK_HANDLE_RENAME", "SQLMASK_SAMPLE_SIZE"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def database_url(tmp_path):
    url = f"sqlite:///{tmp_path / 'crm.db'}"
    engine = create_engine(url)
    with engine.begin() as connection:
        connection.exec_driver_sql("CREATE TABLE customers (id INTEGER PRIMARY KEY, email TEXT, note TEXT)")
        connection.exec_driver_sql(
            "INSERT INTO customers (id, email, note) VALUES "
            "(1, 'ann@example.com', 'hello'), (2, 'bob@example.org', 'world')"
        )
    engine.dispose()
    return url


class TestFormat:
    """format command."""

    def test_mssql_national_text(self, runner):
        result = runner.invoke(cli, ["format", "--dialect", "mssql", "--type", "NVARCHAR(20)", "O'Brien"])
        assert result.exit_code == 0
        assert result.output.strip() == "N'O''Brien'"

    def test_null(self, runner):
        result = runner.invoke(cli, ["format", "-d", "oracle", "--type", "DATE", "--null"])
        assert result.exit_code == 0
        assert result.output.strip() == "NULL"

    def test_unknown_dialect(self, runner):
        result = runner.invoke(cli, ["format", "--dialect", "cobol", "x"])
        assert result.exit_code != 0

    def test_dialect_from_config_file(self, runner, tmp_path):
        path = tmp_path / "sqlmask.yaml"
        path.write_text("dialect: mssql\n")
        result = runner.invoke(cli, ["--config", str(path), "format", "--type", "NVARCHAR(20)", "x"])
        assert result.exit_code == 0
        assert result.output.strip() == "N'x'"

    def test_dialect_from_environment(self, runner, monkeypatch):
        monkeypatch.setenv("SQLMASK_DIALECT", "oracle")
        result = runner.invoke(cli, ["format", "--type", "DATE", "2024-01-02"])
        assert result.exit_code == 0
        assert result.output.strip() == "TO_DATE('2024-01-02', 'yyyy-mm-dd')"

    def test_missing_dialect(self, runner):
        result = runner.invoke(cli, ["format", "x"])
        assert result.exit_code == 1
        assert "No dialect" in result.output


class TestObfuscate:
    """obfuscate command."""

    def test_generalize(self, runner):
        result = runner.invoke(cli, ["obfuscate", "--method", "GENERALIZE", "--range", "10", "37"])
        assert result.exit_code == 0
        assert result.output.strip() == "30-39"

    def test_mask(self, runner):
        result = runner.invoke(cli, ["obfuscate", "-m", "mask", "--start", "1", "--end", "4", "abcdef"])
        assert result.exit_code == 0
        assert result.output.strip() == "a***ef"

    def test_invalid_rule(self, runner):
        result = runner.invoke(cli, ["obfuscate", "-m", "GENERALIZE", "37"])
        assert result.exit_code == 1
        assert "Error applying obfuscation" in result.output


class TestAliases:
    """aliases command."""

    def test_alias_table(self, runner):
        result = runner.invoke(cli, ["aliases", "SELECT email AS e FROM customers"])
        assert result.exit_code == 0
        assert "e" in result.output
        assert "email" in result.output

    def test_no_aliases(self, runner):
        result = runner.invoke(cli, ["aliases", "SELECT email FROM customers"])
        assert result.exit_code == 0
        assert "No aliases found" in result.output


class TestConfigCommands:
    """config command group."""

    def test_create_and_validate(self, runner, tmp_path):
        path = tmp_path / "sqlmask.yaml"
        created = runner.invoke(cli, ["config", "create-default", "--output", str(path)])
        assert created.exit_code == 0
        assert "Default configuration created" in created.output

        validated = runner.invoke(cli, ["config", "validate", str(path)])
        assert validated.exit_code == 0
        assert "Configuration is valid" in validated.output
        assert "Rules: 4" in validated.output

    def test_validate_invalid_file(self, runner, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("obfuscation_rules:\n  age:\n    method: SCRAMBLE\n")
        result = runner.invoke(cli, ["config", "validate", str(path)])
        assert result.exit_code == 1
        assert "Configuration validation failed" in result.output


EMAIL_RULES = (
    "obfuscation_rules:\n"
    "  email:\n"
    "    method: REPLACE\n"
    "    regex: '@.*'\n"
    "    replacement: '@***'\n"
)


class TestDatabaseCommands:
    """scan and query commands."""

    def test_scan(self, runner, database_url):
        result = runner.invoke(cli, ["scan", "customers", "--url", database_url, "-r", r"@example\.com$"])
        assert result.exit_code == 0
        assert "ann@example.com" in result.output
        assert "bob@example.org" not in result.output

    def test_scan_without_matches(self, runner, database_url):
        result = runner.invoke(
            cli, ["scan", "customers", "-u", database_url, "-r", r"^\d{16}$", "--column", "note"]
        )
        assert result.exit_code == 0
        assert "No sensitive data found" in result.output

    def test_scan_url_from_environment(self, runner, database_url, monkeypatch):
        monkeypatch.setenv("SQLMASK_DATABASE_URL", database_url)
        result = runner.invoke(cli, ["scan", "customers", "-r", r"@example\.org$"])
        assert result.exit_code == 0
        assert "bob@example.org" in result.output

    def test_scan_without_url(self, runner):
        result = runner.invoke(cli, ["scan", "customers"])
        assert result.exit_code == 1
        assert "No database URL" in result.output

    def test_query_masks_renamed_column(self, runner, database_url, tmp_path):
        path = tmp_path / "rules.yaml"
        path.write_text(EMAIL_RULES)
        result = runner.invoke(
            cli, ["--config", str(path), "query", "SELECT email AS contact FROM customers", "--url", database_url]
        )
        assert result.exit_code == 0
        assert "ann@***" in result.output
        assert "ann@example.com" not in result.output

    def test_query_url_from_config_file(self, runner, database_url, tmp_path):
        path = tmp_path / "rules.yaml"
        path.write_text(f"database_url: '{database_url}'\n" + EMAIL_RULES)
        result = runner.invoke(cli, ["--config", str(path), "query", "SELECT email FROM customers"])
        assert result.exit_code == 0
        assert "bob@***" in result.output
        assert "bob@example.org" not in result.output

    def test_query_requires_rules(self, runner, database_url):
        result = runner.invoke(cli, ["query", "SELECT email FROM customers", "--url", database_url])
        assert result.exit_code == 1
        assert "No obfuscation_rules" in result.output


class TestInfoCommands:
    """dialects and version commands."""

    def test_dialects(self, runner):
        result = runner.invoke(cli, ["dialects"])
        assert result.exit_code == 0
        assert "postgresql" in result.output.split()
        assert "phoenix" in result.output.split()

    def test_version(self, runner):
        result = runner.invoke(cli, ["version"])
        assert result.output.strip() == f"sqlmask v{__version__}"
