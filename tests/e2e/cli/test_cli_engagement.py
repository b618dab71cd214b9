"""A full engagement driven through the ``podium`` command line.

Everything runs against a migrated SQLite file, one CLI invocation per step,
so every step reloads its aggregate from the stored events.
"""

import re

import pytest

from podium.entrypoints.cli.app import MISSING_DB_URL_MSG
from podium.entrypoints.cli.main import podium

# pylint: disable=redefined-outer-name
# pylint: disable=magic-value-comparison

SLOT = ["--start", "2030-05-01T09:00:00+00:00", "--end", "2030-05-01T10:00:00+00:00"]


@pytest.fixture
def run(db_runner):
    """Invoke ``podium ARGS...`` and return the click result."""

    def _run(*args: str):
        return db_runner.invoke(podium, list(args))

    return _run


@pytest.fixture
def speaker(run):
    result = run("speakers", "register", "spk-1", "Ada Lovelace", "--actor", "ops")
    assert result.exit_code == 0, result.output
    return "spk-1"


def test_commands_need_a_database_url(runner, fs):  # pylint: disable=unused-argument
    result = runner.invoke(
        podium, ["speakers", "register", "spk-1", "Ada"], env={"PODIUM_DB_URL": ""}
    )
    assert result.exit_code == 1
    assert MISSING_DB_URL_MSG in result.output


def test_booking_conflicts_exit_with_conflict_code(run, speaker):
    first = run("bookings", "request", speaker, "evt-1", *SLOT, "--actor", "ops")
    assert first.exit_code == 0, first.output
    assert len(first.stdout.strip()) == 26

    overlapping = run(
        "bookings", "request", speaker, "evt-2",
        "--start", "2030-05-01T09:30:00+00:00",
        "--end", "2030-05-01T10:30:00+00:00",
        "--actor", "ops",
    )  # fmt: skip
    assert overlapping.exit_code == 6
    assert "[schedule_conflict]" in overlapping.output

    listed = run("bookings", "list", speaker)
    assert listed.exit_code == 0
    assert listed.stdout.count("evt-") == 1
    assert "tentative" in listed.stdout


def test_block_makes_window_unavailable(run, speaker):
    blocked = run(
        "speakers", "block", speaker, *SLOT, "--reason", "travel", "--actor", "ops"
    )
    assert blocked.exit_code == 0, blocked.output

    check = run("speakers", "availability", speaker, *SLOT)
    assert check.stdout.strip() == "unavailable"

    refused = run("bookings", "request", speaker, "evt-1", *SLOT, "--actor", "ops")
    assert refused.exit_code == 6
    assert "[availability_conflict]" in refused.output


def test_unknown_speaker_and_bad_instants(run):
    missing = run("bookings", "request", "nobody", "evt-1", *SLOT, "--actor", "ops")
    assert missing.exit_code == 4

    naive = run(
        "bookings", "request", "nobody", "evt-1",
        "--start", "2030-05-01T09:00:00",
        "--end", "2030-05-01T10:00:00",
        "--actor", "ops",
    )  # fmt: skip
    assert naive.exit_code == 2
    assert "no UTC offset" in naive.output


def test_contract_payment_withholding(run, speaker):
    drafted = run("contracts", "draft", speaker, "evt-1", "--amount", "1000.00", "--actor", "ops")
    assert drafted.exit_code == 0, drafted.output
    number = drafted.stdout.strip()
    assert re.fullmatch(r"CTR-\d{4}-0001", number)

    early_sign = run("contracts", "sign", number)
    assert early_sign.exit_code == 7
    assert "[invalid_state_transition]" in early_sign.output

    assert run("contracts", "send", number).exit_code == 0
    assert run("contracts", "sign", number, "--actor", speaker).exit_code == 0

    scheduled = run(
        "contracts", "schedule-payment", number, "--amount", "1000.00", "--actor", "finance"
    )
    assert scheduled.exit_code == 0, scheduled.output
    payment_id = scheduled.stdout.strip()

    assert run("contracts", "process-payment", payment_id, "--actor", "finance").exit_code == 0
    completed = run("contracts", "complete-payment", payment_id)
    assert completed.exit_code == 0, completed.output
    assert "isr 5%: 50.00, net 950.00" in completed.stdout

    shown = run("contracts", "show", number)
    assert "(signed)" in shown.stdout
    assert "Paid        : 1000.00" in shown.stdout
    assert "Outstanding : 0.00" in shown.stdout
    assert "Next        : cancel, schedule_payment" in shown.stdout

    listed = run("contracts", "list", "--speaker", speaker, "--open")
    assert listed.exit_code == 0, listed.output
    assert listed.stdout.startswith(f"{number}  signed")

    payments = run("contracts", "payments", speaker, "--status", "completed")
    assert payments.stdout.count(payment_id) == 1

    payment = run("contracts", "payment", payment_id)
    assert payment.stdout.splitlines()[-1] == "Next: -"


def test_contract_not_found(run):
    result = run("contracts", "show", "CTR-2030-9999")
    assert result.exit_code == 4
    assert "[not_found]" in result.output


def test_malformed_contract_number_is_a_usage_error(run):
    result = run("contracts", "send", "contract-7")
    assert result.exit_code == 2
    assert "not a contract number" in result.output


def test_early_bird_quote(run):
    assert (
        run("pricing", "open", "evt-1", "--starts-at", "2030-06-01T00:00:00+00:00").exit_code
        == 0
    )
    for days, percent in (("30", "10"), ("60", "20")):
        added = run("pricing", "add-tier", "evt-1", "--days", days, "--percent", percent)
        assert added.exit_code == 0, added.output

    quote = run(
        "pricing", "resolve", "evt-1",
        "--at", "2030-03-01T00:00:00+00:00",
        "--price", "100.00",
    )  # fmt: skip
    assert quote.exit_code == 0, quote.output
    assert "from 60d" in quote.stdout
    assert "Final    : 80.00" in quote.stdout

    late = run("pricing", "resolve", "evt-1", "--at", "2030-05-25T00:00:00+00:00")
    assert late.stdout.strip() == "no discount"


def test_db_status_reports_up_to_date(run):
    result = run("db", "status")
    assert result.exit_code == 0
    assert "Backend : sqlite" in result.output
    assert "up to date" in result.output


def test_event_lineup_and_booking_actions(run, speaker):
    other = run("speakers", "register", "spk-2", "Grace Hopper", "--actor", "ops")
    assert other.exit_code == 0, other.output
    for speaker_id, order in ((speaker, "2"), ("spk-2", "1")):
        booked = run(
            "bookings", "request", speaker_id, "evt-1", *SLOT, "--order", order, "--actor", "ops"
        )
        assert booked.exit_code == 0, booked.output

    lineup = run("bookings", "event", "evt-1")
    assert [line.split()[0] for line in lineup.stdout.splitlines()] == ["spk-2", speaker]

    shown = run("bookings", "show", speaker, "evt-1")
    assert shown.stdout.splitlines()[-1] == "Next: confirm, cancel"

    active = run("bookings", "list", speaker, "--active", "--exclude-event", "evt-1")
    assert active.exit_code == 0
    assert not active.stdout.strip()


def test_contract_list_needs_a_filter(run):
    result = run("contracts", "list")
    assert result.exit_code == 2
    assert "--speaker, --event or both" in result.output
