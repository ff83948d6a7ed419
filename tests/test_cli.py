import json

from click.testing import CliRunner

from salesboard.cli import main as cli
from salesboard.database import count_transactions


def test_init_db_from_local_snapshot(tmp_path, snapshot_file):
    db_path = tmp_path / "cli.db"
    runner = CliRunner()
    res = runner.invoke(
        cli,
        [
            'init-db',
            '--config', str(tmp_path / 'missing.yaml'),
            '--db', str(db_path),
            '--source', str(snapshot_file),
        ],
    )
    assert res.exit_code == 0, res.output
    assert f"Stored 3 transaction(s) in {db_path}." in res.output
    assert count_transactions(str(db_path)) == 3


def test_init_db_failure_reports_error(tmp_path):
    db_path = tmp_path / "cli.db"
    runner = CliRunner()
    res = runner.invoke(
        cli,
        [
            'init-db',
            '--config', str(tmp_path / 'missing.yaml'),
            '--db', str(db_path),
            '--source', str(tmp_path / 'nope.json'),
        ],
    )
    assert res.exit_code != 0
    assert "Error initializing database" in res.output


def test_stats_prints_combined_report(tmp_path, db_path):
    runner = CliRunner()
    res = runner.invoke(
        cli,
        ['stats', '5', '--config', str(tmp_path / 'missing.yaml'), '--db', db_path],
    )
    assert res.exit_code == 0, res.output
    report = json.loads(res.output)
    assert report["statistics"] == {
        "totalSaleAmount": 1199,
        "totalSoldItems": 2,
        "totalNotSoldItems": 1,
    }
    assert len(report["barChart"]) == 10


def test_env_file_sets_database(tmp_path, snapshot_file, monkeypatch):
    # load_dotenv writes to os.environ; make monkeypatch unset both on teardown
    for name in ("SALESBOARD_DB_PATH", "SALESBOARD_SOURCE_URL"):
        monkeypatch.setenv(name, "placeholder")
        monkeypatch.delenv(name)
    db_path = tmp_path / "from-env.db"
    env_file = tmp_path / ".env"
    env_file.write_text(
        f"SALESBOARD_DB_PATH={db_path}\nSALESBOARD_SOURCE_URL={snapshot_file}\n"
    )
    runner = CliRunner()
    res = runner.invoke(
        cli,
        ['init-db', '--config', str(tmp_path / 'missing.yaml'), '--env-file', str(env_file)],
    )
    assert res.exit_code == 0, res.output
    assert count_transactions(str(db_path)) == 3


def test_unknown_loader_is_reported(tmp_path, snapshot_file):
    cfg_path = tmp_path / 'config.yaml'
    cfg_path.write_text("loader: xml\n")
    runner = CliRunner()
    res = runner.invoke(
        cli,
        ['init-db', '--config', str(cfg_path), '--db', str(tmp_path / 'cli.db'),
         '--source', str(snapshot_file)],
    )
    assert res.exit_code == 1
    assert "Unknown loader 'xml'" in res.output
    assert res.exception is None or isinstance(res.exception, SystemExit)


def test_invalid_config_is_reported(tmp_path):
    cfg_path = tmp_path / 'config.yaml'
    cfg_path.write_text("db_path: [unclosed\n")
    runner = CliRunner()
    res = runner.invoke(cli, ['stats', '5', '--config', str(cfg_path)])
    assert res.exit_code == 1
    assert "Invalid YAML" in res.output
