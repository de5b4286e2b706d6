from datetime import date, timedelta

from conftest import FakeSession, make_response
from habit_ledger.cli import main, render_month
from habit_ledger.client import HabitLedgerAPI


def make_api(*responses):
    return HabitLedgerAPI(base_url="http://ledger/api/v1", api_key="tok", session=FakeSession(*responses))


def test_render_month_marks_days_with_records():
    by_date = {
        "2024-02-03": [{"name": n} for n in ["Run", "Read", "Swim", "Yoga"]],
        "2024-02-04": [],
    }

    lines = render_month(2024, 2, by_date)

    assert lines[0] == "February 2024"
    assert any("  3*" in line for line in lines)
    assert not any("  4*" in line for line in lines)
    assert lines[-1] == "2024-02-03: Run, Read, Swim (+1 more)"


def test_trends_command_prints_stats(capsys):
    api = make_api(make_response(200, [{"date": "2024-01-05", "count": 2}, {"date": "2024-01-04", "count": 1}]))

    assert main(["trends"], api=api) == 0

    out = capsys.readouterr().out
    assert "2024-01-05  ## 2" in out
    assert "Streak: 2  Total: 3  Best day: 2  Active days: 2" in out


def test_add_command_failure_exits_nonzero(capsys):
    api = make_api(make_response(422, {"detail": "name must not be empty"}))

    assert main(["add", "2024-01-05", " "], api=api) == 1
    assert "name must not be empty" in capsys.readouterr().err


def test_missing_credentials(capsys):
    api = HabitLedgerAPI(base_url="http://ledger/api/v1", session=FakeSession())

    assert main(["--username", "", "trends"], api=api) == 1
    assert "--token" in capsys.readouterr().err


class RoutingSession(FakeSession):
    """Replies per URL so commands that fan out can be driven end to end."""

    def __init__(self, routes):
        super().__init__()
        self.routes = routes

    def request(self, **kwargs):
        self.calls.append(kwargs)
        key = (kwargs["method"], kwargs["url"].split("/api/v1", 1)[1])
        if key in self.routes:
            return self.routes[key]
        return make_response(200, [])


def routed_api(routes):
    return HabitLedgerAPI(base_url="http://ledger/api/v1", api_key="tok", session=RoutingSession(routes))


def test_month_command_renders_fetched_days(capsys):
    records = [{"id": str(i), "date": "2024-02-03", "name": n} for i, n in enumerate(["Run", "Read", "Swim", "Yoga"])]
    api = routed_api({("GET", "/habits/2024-02-03"): make_response(200, records)})

    assert main(["month", "--year", "2024", "--month", "2"], api=api) == 0

    out = capsys.readouterr().out
    assert len(api.session.calls) == 29
    assert out.startswith("February 2024\n")
    assert "  3*" in out
    assert out.rstrip().endswith("2024-02-03: Run, Read, Swim (+1 more)")


def test_month_command_rejects_bad_month(capsys):
    api = routed_api({})

    assert main(["month", "--year", "2024", "--month", "13"], api=api) == 1

    assert "[!] --month must be between 1 and 12" in capsys.readouterr().err
    assert api.session.calls == []


def test_year_command_applies_search_and_sort(capsys):
    today = date.today()
    yesterday = (today - timedelta(days=1)).isoformat()
    api = routed_api({
        ("GET", f"/habits/{yesterday}"): make_response(200, [{"date": yesterday, "name": "Run", "note": None}]),
        ("GET", f"/habits/{today.isoformat()}"): make_response(200, [
            {"date": today.isoformat(), "name": "run", "note": "5k"},
            {"date": today.isoformat(), "name": "Read", "note": None},
        ]),
    })

    assert main(["year", "--search", "ru", "--sort", "recent"], api=api) == 0
    assert capsys.readouterr().out == f"Run: 2x, last {today.isoformat()} - 5k\n"
    assert len(api.session.calls) == 365

    assert main(["year", "--sort", "name"], api=api) == 0
    assert capsys.readouterr().out.splitlines() == [
        f"Read: 1x, last {today.isoformat()}",
        f"Run: 2x, last {today.isoformat()} - 5k",
    ]


def test_suggestions_command_filters_names(capsys):
    api = make_api(make_response(200, [
        {"name": "Read", "note": None},
        {"name": "Run", "note": "5k"},
        {"name": "ru", "note": None},
    ]))

    assert main(["suggestions", "--filter", "ru"], api=api) == 0
    assert capsys.readouterr().out == "Run - 5k\n"


def test_delete_command(capsys):
    api = make_api(make_response(204), make_response(404, {"detail": "Habit abc not found"}))

    assert main(["delete", "abc"], api=api) == 0
    assert capsys.readouterr().out == "Deleted abc\n"

    assert main(["delete", "abc"], api=api) == 1
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "[!] Could not delete habit: Habit abc not found" in captured.err
