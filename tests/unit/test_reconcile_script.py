"""Tests for the one-pass reconcile script."""

import structlog
import yaml

from scripts.reconcile import main


class TestReconcileScript:
    """Test config handling and dry runs."""

    def teardown_method(self):
        structlog.reset_defaults()

    def _write_config(self, config_dir, delivery):
        config = {
            "storage": {
                "tracking_db_path": str(config_dir / "tracking.db"),
                "live_db_path": str(config_dir / "live.db"),
            },
            "delivery": delivery,
        }
        with open(config_dir / "notisync.yaml", "w") as f:
            yaml.safe_dump(config, f)

    def test_invalid_config_is_rejected(self, tmp_path, capsys):
        self._write_config(tmp_path, {"retry_attempts": -1})

        exit_code = main(["change", "--config-dir", str(tmp_path), "--dry-run"])

        assert exit_code == 2
        assert "retry_attempts" in capsys.readouterr().err
        assert not (tmp_path / "live.db").exists()

    def test_dry_run_with_valid_config(self, tmp_path):
        self._write_config(tmp_path, {"retry_attempts": 1})

        exit_code = main(["change", "--config-dir", str(tmp_path), "--dry-run"])

        assert exit_code == 0
        assert (tmp_path / "live.db").exists()
