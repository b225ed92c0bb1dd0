import json
from unittest.mock import patch

import pytest

import main
from a11y_audit.features.scan.schemas import ScanResult


@pytest.fixture
def scan_result():
    return ScanResult(score=100, passed_checks=8, violations=[], pages_scanned=["https://example.com"])


class TestMain:
    def test_prints_scan_result_as_json(self, scan_result, capsys):
        with patch("main.scan_website", return_value=scan_result) as scan:
            exit_code = main.main(["example.com"])

        assert exit_code == 0
        scan.assert_called_once_with("https://example.com", is_multi_page=False, max_pages=1)
        output = json.loads(capsys.readouterr().out)
        assert output["score"] == 100
        assert output["passedChecks"] == 8
        assert output["issueCount"] == 0

    def test_multi_page_options(self, scan_result):
        with patch("main.scan_website", return_value=scan_result) as scan:
            main.main(["https://example.com", "--multi-page", "--max-pages", "3"])

        scan.assert_called_once_with("https://example.com", is_multi_page=True, max_pages=3)

    def test_invalid_url(self, capsys):
        with patch("main.scan_website") as scan:
            exit_code = main.main(["ftp://example.com"])

        assert exit_code == 2
        scan.assert_not_called()
        assert "Invalid URL" in capsys.readouterr().err

    def test_private_url_refused(self, capsys):
        with patch("main.scan_website") as scan:
            exit_code = main.main(["http://127.0.0.1:8000"])

        assert exit_code == 2
        scan.assert_not_called()
        assert "private network" in capsys.readouterr().err

    def test_max_pages_must_be_positive(self):
        with pytest.raises(SystemExit):
            main.main(["https://example.com", "--multi-page", "--max-pages", "0"])
