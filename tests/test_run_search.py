import argparse
import json

from relax_search.core.config import Settings
from relax_search.jobs import run_search
from relax_search.models import LocationResult, ValidationError


class DummyAggregator:
    instances = []

    def __init__(self, settings):
        self.settings = settings
        self.closed = False
        DummyAggregator.instances.append(self)

    def search(self, term):
        if not term.strip():
            raise ValidationError("Search term must not be empty.")
        return [LocationResult("Пицца", f"{loc}, Ленина 1", 4.0) for loc in self.settings.locations]

    def close(self):
        self.closed = True


def patch_job(monkeypatch, locations=("Омск",)):
    DummyAggregator.instances = []
    monkeypatch.setattr(run_search, "get_settings", lambda: Settings(locations=locations))
    monkeypatch.setattr(run_search, "SearchAggregator", DummyAggregator)


def test_build_parser():
    parser = run_search.build_parser()
    args = parser.parse_args(["pizza", "--location", "Омск", "--location", "Томск"])
    assert isinstance(parser, argparse.ArgumentParser)
    assert args.what == "pizza"
    assert args.locations == ["Омск", "Томск"]


def test_run_search_job_uses_configured_locations(monkeypatch):
    patch_job(monkeypatch)

    payload = run_search.run_search_job("pizza")

    assert payload == [{"name": "Пицца", "address": "Омск, Ленина 1", "rating": 4.0}]
    assert DummyAggregator.instances[0].closed is True


def test_run_search_job_overrides_locations(monkeypatch):
    patch_job(monkeypatch)

    payload = run_search.run_search_job("pizza", ["Томск", "Кемерово"])

    assert [item["address"] for item in payload] == ["Томск, Ленина 1", "Кемерово, Ленина 1"]


def test_main_prints_json(monkeypatch, capsys):
    patch_job(monkeypatch)

    assert run_search.main(["pizza"]) == 0

    printed = json.loads(capsys.readouterr().out)
    assert printed[0]["name"] == "Пицца"


def test_main_rejects_blank_term(monkeypatch):
    patch_job(monkeypatch)
    assert run_search.main(["  "]) == 2
    assert DummyAggregator.instances[0].closed is True
